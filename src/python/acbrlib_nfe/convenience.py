# acbrlib_nfe/convenience.py
"""
High-level convenience functions for common multi-step operations.
"""
import logging
from typing import Dict

from .nfe import ACBrLibNFe
from .dataclasses import NFeResponse

logger = logging.getLogger(__name__)

def library_info(lib: ACBrLibNFe) -> Dict[str, str]:
    """
    Returns the name and version reported by the native library.

    Raises:
        NFeOperationError: If either query fails.
    """
    name = lib.get_lib_name().raise_for_status("NFE_Nome")
    version = lib.get_lib_version().raise_for_status("NFE_Versao")
    return {"name": name.response, "version": version.response}


def transmit(
    lib: ACBrLibNFe,
    file_or_content: str,
    batch_number: int,
    *,
    ini: bool = False,
    synchronous: bool = True,
    print_after_send: bool = False,
    zipped: bool = False,
) -> NFeResponse:
    """
    Loads a single document and sends it to SEFAZ.

    Runs clear list, load, sign, validate and send in order. The first step
    that returns a non-zero status stops the sequence and its response is
    returned unchanged; nothing is raised for native failures.

    Args:
        lib: An initialized ACBrLibNFe.
        file_or_content: Path or content of the document.
        batch_number: Number of the batch sent to SEFAZ.
        ini: True when the document is in INI format instead of XML.
        synchronous: Use synchronous authorization.
        print_after_send: Print the DANFE once authorized.
        zipped: Send the batch compressed.

    Returns:
        The SEFAZ answer of the send step, or the failing step's response.
    """
    load = lib.load_ini if ini else lib.load_xml
    steps = (
        ("clear_list", lib.clear_list),
        ("load", lambda: load(file_or_content)),
        ("sign", lib.sign),
        ("validate", lib.validate),
    )
    for step, call in steps:
        result = call()
        if not result.ok:
            logger.info("transmit stopped at %s with status %d", step, result.code)
            return result
    return lib.send(batch_number, print_after_send, synchronous, zipped)
