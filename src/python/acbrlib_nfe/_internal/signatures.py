# acbrlib_nfe/_internal/signatures.py

"""
Internal catalog of the native exports called by the façade.

Each entry fixes the export name, the ordered primitive parameter types,
whether the call writes text into the shared response buffer and the
message reported on success when it does not. The order of `params` is
the native calling order and must never be changed.
"""

import ctypes
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Sequence, Tuple, TypeAlias

from ..exceptions import SignatureMismatchError
from .response_buffer import BUFFER_ARGTYPES

# Primitive names used in the table below.
Primitive: TypeAlias = str

_PRIMITIVE_TO_CTYPE: Dict[Primitive, Any] = {
    "string": ctypes.c_char_p,
    "int": ctypes.c_int,
    "bool": ctypes.c_bool,
}

RESTYPE = ctypes.c_int

# ctypes.c_int wraps silently; values outside this range are rejected.
INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1

@dataclass(frozen=True, slots=True)
class NativeSignature:
    export: str
    params: Tuple[Primitive, ...] = ()
    has_output: bool = False
    success_message: str = ""

    @property
    def argtypes(self) -> List[Any]:
        types = [_PRIMITIVE_TO_CTYPE[p] for p in self.params]
        if self.has_output:
            types.extend(BUFFER_ARGTYPES)
        return types


def _sig(export: str, *params: Primitive, message: str = "") -> NativeSignature:
    return NativeSignature(export, tuple(params), has_output=False, success_message=message)

def _out(export: str, *params: Primitive) -> NativeSignature:
    return NativeSignature(export, tuple(params), has_output=True)


SIGNATURES: Dict[str, NativeSignature] = {
    # --- Library ---
    "initialize": _sig("NFE_Inicializar", "string", "string",
                       message="Biblioteca foi inicializada corretamente."),
    "finish": _sig("NFE_Finalizar", message="Biblioteca foi finalizada corretamente."),
    "get_last_response": _out("NFE_UltimoRetorno"),
    "get_lib_name": _out("NFE_Nome"),
    "get_lib_version": _out("NFE_Versao"),

    # --- Configuration ---
    "read_config": _sig("NFE_ConfigLer", "string",
                        message="Configurações foram lidas corretamente."),
    "save_config": _sig("NFE_ConfigGravar", "string",
                        message="Configurações foram gravadas corretamente."),
    "get_config_item_value": _out("NFE_ConfigLerValor", "string", "string"),
    "save_config_item_value": _sig("NFE_ConfigGravarValor", "string", "string", "string",
                                   message="Configuração gravadas corretamente."),
    "import_config": _sig("NFE_ConfigImportar", "string",
                          message="Configuração importada corretamente."),
    "export_config": _out("NFE_ConfigExportar"),

    # --- Document and event lists ---
    "load_xml": _sig("NFE_CarregarXML", "string",
                     message="Arquivo/Conteúdo XML carregado corretamente."),
    "load_ini": _sig("NFE_CarregarINI", "string",
                     message="Arquivo/Conteúdo INI carregado corretamente."),
    "get_xml": _out("NFE_ObterXml", "int"),
    "save_xml": _sig("NFE_GravarXml", "int", "string", "string",
                     message="Arquivo XML gravado corretamente."),
    "get_ini": _out("NFE_ObterIni", "int"),
    "save_ini": _sig("NFE_GravarIni", "int", "string", "string",
                     message="Arquivo INI gravado corretamente."),
    "load_event_xml": _sig("NFE_CarregarEventoXML", "string",
                           message="Arquivo/Conteúdo XML do evento carregado corretamente."),
    "load_event_ini": _sig("NFE_CarregarEventoINI", "string",
                           message="Arquivo/Conteúdo INI do evento carregado corretamente."),
    "clear_list": _sig("NFE_LimparLista", message="Lista de NF-e foi limpa corretamente."),
    "clear_event_list": _sig("NFE_LimparListaEventos",
                             message="Lista de eventos foi limpa corretamente."),
    "sign": _sig("NFE_Assinar", message="NF-e assinada corretamente."),
    "validate": _sig("NFE_Validar", message="NF-e validada corretamente."),
    "validate_business_rules": _out("NFE_ValidarRegrasdeNegocios"),
    "verify_signature": _out("NFE_VerificarAssinatura"),
    "generate_key": _out("NFE_GerarChave",
                         "int", "int", "int", "int", "int", "int", "string", "string"),
    "get_certificates": _out("NFE_ObterCertificados"),
    "get_path": _out("NFE_GetPath", "int"),
    "get_event_path": _out("NFE_GetPathEvento", "int"),

    # --- SEFAZ web services ---
    "check_service_status": _out("NFE_StatusServico"),
    "consult": _out("NFE_Consultar", "string", "bool"),
    "consult_receipt": _out("NFE_ConsultarRecibo", "string"),
    "consult_registration": _out("NFE_ConsultaCadastro", "string", "string", "bool"),
    "make_unusable": _out("NFE_Inutilizar",
                          "string", "string", "int", "int", "int", "int", "int"),
    "send": _out("NFE_Enviar", "int", "bool", "bool", "bool"),
    "cancel": _out("NFE_Cancelar", "string", "string", "string", "int"),
    "send_event": _out("NFE_EnviarEvento", "int"),
    "dfe_distribution": _out("NFE_DistribuicaoDFe", "int", "string", "string", "string"),
    "dfe_distribution_last_nsu": _out("NFE_DistribuicaoDFePorUltNSU", "int", "string", "string"),
    "dfe_distribution_nsu": _out("NFE_DistribuicaoDFePorNSU", "int", "string", "string"),
    "dfe_distribution_key": _out("NFE_DistribuicaoDFePorChave", "int", "string", "string"),

    # --- E-mail ---
    "send_mail": _sig("NFE_EnviarEmail",
                      "string", "string", "bool", "string", "string", "string", "string",
                      message="E-mail enviado corretamente."),
    "send_event_mail": _sig("NFE_EnviarEmailEvento",
                            "string", "string", "string", "bool",
                            "string", "string", "string", "string",
                            message="E-mail do evento enviado corretamente."),

    # --- Printing ---
    "print": _sig("NFE_Imprimir",
                  "string", "int", "string", "string", "string", "string", "string",
                  message="Impresso corretamente."),
    "print_pdf": _sig("NFE_ImprimirPDF", message="PDF Impresso corretamente."),
    "save_pdf": _out("NFE_SalvarPDF"),
    "print_event": _sig("NFE_ImprimirEvento", "string", "string",
                        message="Evento impresso corretamente."),
    "print_event_pdf": _sig("NFE_ImprimirEventoPDF", "string", "string",
                            message="PDF do evento impresso corretamente."),
    "save_event_pdf": _sig("NFE_SalvarEventoPDF", "string", "string",
                           message="PDF do evento foi salvo corretamente."),
    "print_unusable": _sig("NFE_ImprimirInutilizacao", "string",
                           message="Inutilização foi impressa corretamente."),
    "print_unusable_pdf": _sig("NFE_ImprimirInutilizacaoPDF", "string",
                               message="PDF da inutilização foi impresso corretamente"),
    "save_unusable_pdf": _sig("NFE_SalvarInutilizacaoPDF", "string",
                              message="PDF da inutilização foi salvo corretamente."),
}


def _marshal_string(value: Any, encoding: str) -> bytes:
    if value is None:
        return b""
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        value = "True" if value else "False"
    if isinstance(value, bytes):
        return value
    if isinstance(value, (str, int)):
        return str(value).encode(encoding)
    raise SignatureMismatchError(f"Expected text, got {type(value).__name__}")

def _marshal_int(value: Any, encoding: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise SignatureMismatchError(f"Expected an integer, got {type(value).__name__}")
    if not INT_MIN <= value <= INT_MAX:
        raise SignatureMismatchError(f"Integer {value} does not fit a 32-bit int")
    return int(value)

def _marshal_bool(value: Any, encoding: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise SignatureMismatchError(f"Expected a boolean, got {value!r}")

_MARSHALLERS = {
    "string": _marshal_string,
    "int": _marshal_int,
    "bool": _marshal_bool,
}


def marshal_arguments(
    signature: NativeSignature,
    args: Sequence[Any],
    encoding: str,
) -> List[Any]:
    """
    Converts Python values into the ctypes-compatible values of `signature`.

    Args:
        signature: The catalog entry being called.
        args: Values in the native parameter order, without the buffer pair.
        encoding: Encoding applied to text arguments.

    Raises:
        SignatureMismatchError: On a wrong argument count or a value that
            cannot represent the declared primitive.
    """
    if len(args) != len(signature.params):
        raise SignatureMismatchError(
            f"{signature.export} takes {len(signature.params)} argument(s), got {len(args)}"
        )
    converted = []
    for position, (primitive, value) in enumerate(zip(signature.params, args), start=1):
        try:
            converted.append(_MARSHALLERS[primitive](value, encoding))
        except SignatureMismatchError as e:
            raise SignatureMismatchError(f"{signature.export}, argument {position}: {e}") from None
    return converted
