# acbrlib_nfe/abc.py
"""
Lifecycle contract shared by objects that hold an ACBrLib shared library.

Such an object owns two native resources: the loaded library handle and the
response buffer the exports write their text into. Both are released by
`close`, which also finishes the library session if one was started.
"""

import abc


class NativeLibraryBase(abc.ABC):
    """
    Base for a façade bound to one loaded ACBrLib library.

    Subclasses decide what "closing" means for their session (for NFe:
    calling NFE_Finalizar, then dropping the buffer and the handle). This
    class only provides the guard every operation runs through and the
    `with` support, whose exit always closes, whether the block raised or not.
    """

    @abc.abstractmethod
    def close(self) -> None:
        """
        Finishes the library session and releases the handle and buffer.

        Must be idempotent; after it returns, `closed` is True even if
        finishing the session failed.
        """
        raise NotImplementedError

    @property
    @abc.abstractmethod
    def closed(self) -> bool:
        """True once the handle or the response buffer has been released."""
        raise NotImplementedError

    def _ensure_open(self) -> None:
        if self.closed:
            raise ValueError(f"Operation attempted on a closed {type(self).__name__}.")

    def __enter__(self) -> "NativeLibraryBase":
        if self.closed:
            raise ValueError("Cannot enter context with a closed native library.")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
