# acbrlib_nfe/lowlevel.py
"""
A low-level wrapper around the native ACBrLibNFe shared library.

This module isolates the ctypes/Python boundary from the rest of the library.
"""

import ctypes
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Sequence

from .exceptions import LibraryLoadError, SignatureMismatchError, SymbolNotFoundError

logger = logging.getLogger(__name__)

CALLING_CONVENTIONS = ("cdecl", "stdcall")


class LowLevelWrapper:
    """
    A thin, direct wrapper over a loaded native library.

    It opens the library once, resolves exports by name with an explicit
    signature and translates ctypes failures into this library's exceptions.
    There is no unload primitive; the mapping lives until the handle is
    garbage-collected or the process exits.
    """
    def __init__(self, library_path: str, calling_convention: str = "cdecl"):
        if calling_convention not in CALLING_CONVENTIONS:
            raise ValueError(
                f"Unsupported calling convention: '{calling_convention}'. "
                f"Must be one of {', '.join(CALLING_CONVENTIONS)}."
            )
        self._path = str(library_path)
        self._calling_convention = calling_convention
        self._lib = self._load(self._path, calling_convention)
        self._closed = False
        logger.debug("loaded native library %s (%s)", self._path, calling_convention)

    @staticmethod
    def _load(path: str, calling_convention: str) -> Any:
        p = Path(path).expanduser()
        if p.is_file():
            target = str(p.resolve())
        elif len(p.parts) == 1:
            # A bare file name is left to the system loader's search path.
            target = path
        else:
            raise LibraryLoadError(f"Native library not found: {p}")

        if calling_convention == "stdcall":
            if sys.platform != "win32":
                raise LibraryLoadError("The stdcall build can only be loaded on Windows.")
            loader = ctypes.WinDLL
        else:
            loader = ctypes.CDLL

        try:
            return loader(target)
        except OSError as e:
            raise LibraryLoadError(f"Failed to load native library: {p}\n{e}") from e

    @property
    def path(self) -> str:
        return self._path

    @property
    def calling_convention(self) -> str:
        return self._calling_convention

    def resolve(
        self,
        name: str,
        restype: Any,
        argtypes: Sequence[Any],
    ) -> Callable[..., Any]:
        """
        Looks up an exported function and declares its signature.

        Every lookup returns a fresh function object, so resolving the same
        export repeatedly has no side effects.

        Raises:
            SymbolNotFoundError: If the library does not export `name`.
        """
        if self._closed:
            raise ValueError("Operation attempted on a closed native library.")
        try:
            func = self._lib[name]
        except AttributeError as e:
            raise SymbolNotFoundError(f"Export '{name}' not found in {self._path}") from e
        func.restype = restype
        func.argtypes = list(argtypes)
        return func

    def invoke(
        self,
        name: str,
        restype: Any,
        argtypes: Sequence[Any],
        *args: Any,
    ) -> Any:
        """
        Resolves `name` and calls it with `args` in the declared order.

        Returns:
            Whatever the native function returns, converted by `restype`.

        Raises:
            SymbolNotFoundError: If the export is missing.
            SignatureMismatchError: If ctypes rejects the arguments at call time.
        """
        func = self.resolve(name, restype, argtypes)
        try:
            result = func(*args)
        except ctypes.ArgumentError as e:
            raise SignatureMismatchError(f"Arguments rejected by '{name}': {e}") from e
        except TypeError as e:
            # Wrong argument count is reported by ctypes as a TypeError.
            raise SignatureMismatchError(f"Bad call to '{name}': {e}") from e
        logger.debug("%s returned %r", name, result)
        return result

    def close(self) -> None:
        if not self._closed:
            self._lib = None
            self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed
