# acbrlib_nfe/_internal/response_buffer.py

"""
Internal fixed-capacity output buffer shared by the native calls.

The native exports that produce text receive a pointer to this buffer and
a pointer to an integer holding its capacity. They write at most that many
bytes and store the length of their full answer back into the integer.
"""

import ctypes
import logging
from typing import Optional, Tuple
import numpy as np

logger = logging.getLogger(__name__)

# ctypes types of the trailing (buffer, length) argument pair.
BUFFER_ARGTYPES: Tuple[type, type] = (
    ctypes.POINTER(ctypes.c_char),
    ctypes.POINTER(ctypes.c_int),
)


class ResponseBuffer:
    """
    A pre-allocated, C-contiguous ``uint8`` array plus its length cell.

    Allocated once, reset before every call that uses it and overwritten
    in place. Not thread-safe: two concurrent calls on the same buffer race
    on both its bytes and its length.
    """
    def __init__(self, capacity: int, encoding: str = "utf-8"):
        if capacity <= 0:
            raise ValueError(f"Buffer capacity must be positive, got {capacity}.")
        self._capacity = capacity
        self._encoding = encoding
        self._data: Optional[np.ndarray] = np.zeros(capacity, dtype=np.uint8)
        self._length = ctypes.c_int(capacity)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def reported_length(self) -> int:
        """The length last written by the native side."""
        return self._length.value

    def _require(self) -> np.ndarray:
        if self._data is None:
            raise ValueError("Operation attempted on a released response buffer.")
        return self._data

    def reset(self) -> None:
        """Zeroes the bytes and sets the length cell back to capacity."""
        self._require().fill(0)
        self._length.value = self._capacity

    def as_arguments(self) -> Tuple["ctypes._Pointer", "ctypes._Pointer"]:
        """Returns the (buffer pointer, length pointer) pair for a native call."""
        data = self._require()
        return (
            data.ctypes.data_as(ctypes.POINTER(ctypes.c_char)),
            ctypes.pointer(self._length),
        )

    @property
    def truncated(self) -> bool:
        return self._length.value > self._capacity

    def decode(self) -> str:
        """
        Copies out the bytes the native side reported and decodes them.

        Output longer than the capacity is cut at the capacity. The text
        also stops at the first NUL byte, since some exports terminate their
        answer without updating the length cell.
        """
        data = self._require()
        reported = self._length.value
        if reported > self._capacity:
            logger.warning(
                "native response of %d bytes truncated to buffer capacity %d",
                reported, self._capacity,
            )
        size = min(max(reported, 0), self._capacity)
        raw = data[:size].tobytes()
        raw = raw.split(b"\x00", 1)[0]
        return raw.decode(self._encoding, errors="replace")

    def release(self) -> None:
        self._data = None

    @property
    def released(self) -> bool:
        return self._data is None
