# acbrlib_nfe/dataclasses.py
"""
Dataclasses for structured data within the acbrlib_nfe library.
"""
import os
from dataclasses import dataclass
from typing import Iterator, Mapping, Optional, Union

from .exceptions import NFeOperationError

DEFAULT_BUFFER_SIZE = 1024 * 6
DEFAULT_ENCODING = "utf-8"

@dataclass(frozen=True, slots=True)
class InitOptions:
    """
    Options captured when the façade is built.

    Attributes:
        config_file: INI file used by ``initialize`` and as the default for
            ``read_config``/``save_config``/``import_config``. May be blank,
            in which case the native side creates a new INI file.
        key_crypt: Key used to encrypt confidential configuration fields.
            Blank selects the native default key.
        buffer_size: Capacity in bytes of the shared response buffer.
        encoding: Text encoding used for arguments and responses.
    """
    config_file: str = ""
    key_crypt: str = ""
    buffer_size: int = DEFAULT_BUFFER_SIZE
    encoding: str = DEFAULT_ENCODING

    def __post_init__(self) -> None:
        if self.buffer_size <= 0:
            raise ValueError(f"buffer_size must be positive, got {self.buffer_size}.")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "InitOptions":
        """
        Builds options from ``ACBRLIB_NFE_*`` environment variables.

        Unset or blank variables keep the dataclass defaults.
        """
        env = os.environ if environ is None else environ
        buffer_size = env.get("ACBRLIB_NFE_BUFFER_SIZE", "").strip()
        try:
            size = int(buffer_size) if buffer_size else DEFAULT_BUFFER_SIZE
        except ValueError as e:
            raise ValueError(f"ACBRLIB_NFE_BUFFER_SIZE must be an integer: {buffer_size!r}") from e
        return cls(
            config_file=env.get("ACBRLIB_NFE_CONFIG", "").strip(),
            key_crypt=env.get("ACBRLIB_NFE_KEY", ""),
            buffer_size=size,
            encoding=env.get("ACBRLIB_NFE_ENCODING", "").strip() or DEFAULT_ENCODING,
        )

@dataclass(frozen=True, slots=True)
class NFeResponse:
    """
    Result of one native call: the status code and its text payload.

    ``truncated`` is set when the native side reported more output than
    the response buffer could hold.
    """
    code: int
    response: str
    truncated: bool = False

    @property
    def ok(self) -> bool:
        return self.code == 0

    def raise_for_status(self, operation: str = "") -> "NFeResponse":
        """Raises NFeOperationError for a non-zero code, else returns self."""
        if self.code != 0:
            raise NFeOperationError(self.response, code=self.code, operation=operation)
        return self

    def __iter__(self) -> Iterator[Union[int, str]]:
        # Allows `code, response = lib.get_xml(position=0)`.
        yield self.code
        yield self.response
