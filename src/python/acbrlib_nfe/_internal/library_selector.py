# acbrlib_nfe/_internal/library_selector.py

"""
Internal logic for locating the native library when no path is given.
"""

import os
import platform
import struct
import sys
from typing import Optional

from ..exceptions import LibraryLoadError

ENV_LIBRARY_PATH = "ACBRLIB_NFE_PATH"

def pointer_bits() -> int:
    """Width of a pointer in the running interpreter (32 or 64)."""
    return struct.calcsize("P") * 8

def recommend_library_name(
    system: Optional[str] = None,
    bits: Optional[int] = None,
) -> str:
    """
    Recommends the native file name distributed for a platform.

    The library must match the interpreter's architecture, not the
    operating system's: a 32-bit Python on 64-bit Windows needs the
    32-bit DLL.

    Args:
        system: A `sys.platform` value. Defaults to the running platform.
        bits: 32 or 64. Defaults to the running interpreter.

    Returns:
        The expected file name, e.g. ``ACBrNFe64.dll``.

    Raises:
        LibraryLoadError: On platforms the component is not built for.
    """
    system = sys.platform if system is None else system
    bits = pointer_bits() if bits is None else bits

    match (system, bits):
        case ("win32" | "cygwin", 32):
            return "ACBrNFe32.dll"
        case ("win32" | "cygwin", _):
            return "ACBrNFe64.dll"
        case (s, 32) if s.startswith("linux"):
            return "libacbrnfe32.so"
        case (s, _) if s.startswith("linux"):
            return "libacbrnfe64.so"
        case _:
            raise LibraryLoadError(
                f"No native ACBrLibNFe build for platform {system} ({platform.machine()})"
            )

def resolve_library_path(library_path: Optional[str] = None) -> str:
    """
    Picks the library path: the explicit argument, then ``ACBRLIB_NFE_PATH``,
    then the recommended file name (found through the loader search path).
    """
    if library_path:
        return str(library_path)
    from_env = os.environ.get(ENV_LIBRARY_PATH, "").strip()
    if from_env:
        return from_env
    return recommend_library_name()
