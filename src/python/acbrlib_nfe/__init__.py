# acbrlib_nfe/__init__.py
"""
Typed ctypes binding for ACBrLibNFe, the ACBr Project's native NF-e/NFC-e component.
"""
from typing import Optional

from .nfe import ACBrLibNFe
from .lowlevel import LowLevelWrapper
from .types import StatusCode, UFCode, UF, NFeModel, EmissionType, PathType, PrintFlag
from .dataclasses import InitOptions, NFeResponse
from .exceptions import (
    ACBrLibError,
    LibraryLoadError,
    SymbolNotFoundError,
    SignatureMismatchError,
    NFeOperationError,
    decode_error,
)
from .convenience import library_info, transmit

__version__ = "0.1.0"

def open(
    library_path: Optional[str] = None,
    config_file: str = "",
    key_crypt: str = "",
    *,
    options: Optional[InitOptions] = None,
    calling_convention: str = "cdecl",
) -> ACBrLibNFe:
    """
    Loads the native library and initializes it.
    This function is the primary entry point for the library.

    Args:
        library_path (str, optional): Path of the native library. Defaults to
            ``ACBRLIB_NFE_PATH`` or the platform's file name.
        config_file (str): INI configuration file; blank lets the native side
            create one.
        key_crypt (str): Key for the encrypted configuration fields.
        options (InitOptions, optional): Full options; overrides
            `config_file` and `key_crypt` when given.
        calling_convention (str): "cdecl" or "stdcall".

    Returns:
        An initialized ACBrLibNFe, typically used within a `with` statement
        so that it is finished on exit.

    Raises:
        LibraryLoadError: If the library cannot be loaded.
        NFeOperationError: If the native initialization fails.
    """
    if options is None:
        options = InitOptions(config_file=config_file, key_crypt=key_crypt)
    lib = ACBrLibNFe(library_path, options, calling_convention=calling_convention)
    try:
        result = lib.initialize()
    except BaseException:
        lib.close()
        raise
    if not result.ok:
        lib.close()
        result.raise_for_status("NFE_Inicializar")
    return lib


# Define what gets imported with 'from acbrlib_nfe import *'
__all__ = [
    'open',
    'ACBrLibNFe',
    'LowLevelWrapper',
    'InitOptions',
    'NFeResponse',
    'StatusCode',
    'UFCode',
    'UF',
    'NFeModel',
    'EmissionType',
    'PathType',
    'PrintFlag',
    'ACBrLibError',
    'LibraryLoadError',
    'SymbolNotFoundError',
    'SignatureMismatchError',
    'NFeOperationError',
    'decode_error',
    'library_info',
    'transmit',
    '__version__',
]
