# acbrlib_nfe/exceptions.py
"""Exception types and the status-code message table of the binding."""

from typing import Mapping

from .types import StatusCode

UNCATALOGUED_MESSAGE = "Mensagem não catalogada!"

# Messages reproduced verbatim; callers match on them.
ERROR_MESSAGES: Mapping[int, str] = {
    StatusCode.INITIALIZATION_FAILED: "[ERROR] Houve falhas na inicialização da biblioteca.",
    StatusCode.FINALIZATION_FAILED: "[ERROR] Houve falhas na finalização da biblioteca.",
    StatusCode.CONFIG_READ_FAILED: "[ERROR] Houve erro ao ler a configuração informada.",
    StatusCode.INVALID_VALUE: "[ERROR] Valor informado incorreto.",
    StatusCode.FILE_NOT_FOUND: "[ERROR] Não foi possível localizar o arquivo informado.",
    StatusCode.DIRECTORY_NOT_FOUND: "[ERROR] Não foi possível encontrar o diretório do arquivo.",
    StatusCode.HTTP_ERROR: "[ERROR] Erro na comunicação HTTP.",
    StatusCode.EXECUTION_FAILED: "[ERROR] Houve falhas na execução do método.",
    StatusCode.XML_VALIDATION_FAILED: "[ERROR] Falha na validação do xml.",
    StatusCode.KEY_VALIDATION_FAILED: "[ERROR] Falha na validação da chave passada.",
    StatusCode.INDEX_OUT_OF_RANGE: "[ERROR] Índice passado não se encontra no intervalo.",
    StatusCode.XML_GENERATION_FAILED: "[ERROR] Houve um erro ao gerar o xml.",
    StatusCode.INVALID_BATCH_SIZE: "[ERROR] Nenhuma NF-e foi adicionada ao lote ou adicionado mais de 50 NFe.",
}


def decode_error(code: int) -> str:
    """
    Returns the human-readable message for a native status code.

    Unknown codes map to a generic message; this function never raises.
    """
    try:
        return ERROR_MESSAGES.get(int(code), UNCATALOGUED_MESSAGE)
    except (TypeError, ValueError):
        return UNCATALOGUED_MESSAGE


class ACBrLibError(Exception):
    """Base exception for all errors raised by this library."""
    pass

class LibraryLoadError(ACBrLibError):
    """The native library could not be loaded from the given path."""
    pass

class SymbolNotFoundError(ACBrLibError):
    """The loaded library does not export the requested function."""
    pass

class SignatureMismatchError(ACBrLibError):
    """
    The arguments do not match the declared native signature.

    Raised at call time, not at resolve time: ctypes only checks the
    declared ``argtypes`` when the function is actually invoked.
    """
    pass

class NFeOperationError(ACBrLibError):
    """
    Error raised on request when a native call returned a non-zero status.

    The façade itself never raises this; it is produced by
    ``NFeResponse.raise_for_status()`` and by helpers that need a
    successful result to continue.

    Attributes:
        message (str): The decoded error message.
        code (int): The native status code (e.g., -13 for INDEX_OUT_OF_RANGE).
        code_message (str): The StatusCode name, or "UNCATALOGUED".
        operation (str): The export that produced the status, when known.
    """
    def __init__(self, message: str, *, code: int, operation: str = ""):
        super().__init__(message)
        self.message = message
        self.code = code
        try:
            self.code_message = StatusCode(code).name
        except ValueError:
            self.code_message = "UNCATALOGUED"
        self.operation = operation

    def __str__(self) -> str:
        where = f" in {self.operation}" if self.operation else ""
        return f"{self.message}{where} (code={self.code}, name='{self.code_message}')"

    @classmethod
    def from_code(cls, code: int, operation: str = "") -> "NFeOperationError":
        """Factory method building the error from a raw status code."""
        return cls(decode_error(code), code=code, operation=operation)
