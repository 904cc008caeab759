# tests/test_core.py
"""
Tests for the ACBrLibNFe façade: call shapes, response normalization and lifecycle.
"""
import pytest

from acbrlib_nfe import (
    ACBrLibNFe,
    InitOptions,
    NFeOperationError,
    PrintFlag,
    SignatureMismatchError,
    StatusCode,
    SymbolNotFoundError,
    UF,
    UFCode,
    decode_error,
)

# --- Library ---

def test_initialize_passes_options_and_reports_success(nfe, fake_native):
    result = nfe.initialize()

    assert result.code == 0
    assert result.response == "Biblioteca foi inicializada corretamente."
    assert fake_native.args_of("NFE_Inicializar") == (b"c.ini", b"")
    assert nfe.initialized

def test_initialize_failure_returns_decoded_error(nfe, fake_native):
    fake_native.on("NFE_Inicializar", status=-1)

    result = nfe.initialize()

    assert result.code == -1
    assert result.response == "[ERROR] Houve falhas na inicialização da biblioteca."
    assert not nfe.initialized

def test_initialize_sends_key_crypt(make_nfe, fake_native):
    lib = make_nfe(InitOptions(config_file="acbr.ini", key_crypt="s3cr3t"))
    lib.initialize()
    assert fake_native.args_of("NFE_Inicializar") == (b"acbr.ini", b"s3cr3t")

def test_finish_reports_success(nfe):
    nfe.initialize()
    result = nfe.finish()
    assert result.response == "Biblioteca foi finalizada corretamente."
    assert not nfe.initialized

def test_text_output_comes_from_buffer(nfe, fake_native):
    fake_native.on("NFE_Versao", output="1.0.0.123")
    fake_native.on("NFE_Nome", output="ACBrLibNFe")

    assert nfe.get_lib_version().response == "1.0.0.123"
    assert nfe.get_lib_name().response == "ACBrLibNFe"

def test_result_unpacks_as_code_and_response(nfe, fake_native):
    fake_native.on("NFE_UltimoRetorno", output="[Retorno]\nCStat=107")
    code, response = nfe.get_last_response()
    assert code == 0
    assert response == "[Retorno]\nCStat=107"

# --- Response normalization ---

def test_get_xml_out_of_range(nfe, fake_native):
    fake_native.on("NFE_ObterXml", status=StatusCode.INDEX_OUT_OF_RANGE)

    result = nfe.get_xml(position=0)

    assert result.code == -13
    assert result.response == "[ERROR] Índice passado não se encontra no intervalo."

def test_get_xml_passes_position_then_buffer(nfe, fake_native):
    fake_native.on("NFE_ObterXml", output="<NFe/>")

    result = nfe.get_xml(position=2)

    assert result.response == "<NFe/>"
    position, buffer_ptr, length_ptr = fake_native.args_of("NFE_ObterXml")
    assert position == 2
    assert length_ptr.contents.value == len("<NFe/>")

def test_error_status_overrides_buffer_contents(nfe, fake_native, output_writer):
    def handler(receipt, buffer_ptr, length_ptr):
        output_writer(buffer_ptr, length_ptr, "partial answer")
        return -7
    fake_native.handlers["NFE_ConsultarRecibo"] = handler

    result = nfe.consult_receipt(receipt="323220034904631")

    assert result.code == -7
    assert result.response == decode_error(-7)

def test_error_status_overrides_fixed_message(nfe, fake_native):
    fake_native.on("NFE_Assinar", status=-10)
    assert nfe.sign().response == "[ERROR] Houve falhas na execução do método."

def test_uncatalogued_status(nfe, fake_native):
    fake_native.on("NFE_Validar", status=-99)
    result = nfe.validate()
    assert result.code == -99
    assert result.response == "Mensagem não catalogada!"

def test_fixed_message_ignores_previous_buffer(nfe, fake_native):
    fake_native.on("NFE_ObterCertificados", output="cert list")
    fake_native.on("NFE_Assinar")

    nfe.get_certificates()
    result = nfe.sign()

    assert result.response == "NF-e assinada corretamente."

def test_consult_receipt_returns_protocol_text(nfe, fake_native):
    answer = "[Retorno]\nnRec=323220034904631\nCStat=104"
    fake_native.on("NFE_ConsultarRecibo", output=answer)

    result = nfe.consult_receipt(receipt="323220034904631")

    assert result.ok
    assert result.response == answer
    assert fake_native.args_of("NFE_ConsultarRecibo")[0] == b"323220034904631"

def test_save_config_item_value(nfe, fake_native):
    fake_native.on("NFE_ConfigGravarValor")

    result = nfe.save_config_item_value(session_ini="Sistema", key="Nome", value="Teste")

    assert result.code == 0
    assert result.response == "Configuração gravadas corretamente."
    assert fake_native.args_of("NFE_ConfigGravarValor") == (b"Sistema", b"Nome", b"Teste")

# --- Buffer lifecycle ---

def test_buffer_length_reset_before_each_call(make_nfe, fake_native, output_writer):
    lib = make_nfe(InitOptions(buffer_size=64))
    seen = []

    def handler(buffer_ptr, length_ptr):
        seen.append(length_ptr.contents.value)
        output_writer(buffer_ptr, length_ptr, "ab")
        return 0
    fake_native.handlers["NFE_StatusServico"] = handler

    lib.check_service_status()
    lib.check_service_status()

    assert seen == [64, 64]

def test_response_truncated_to_capacity(make_nfe, fake_native):
    lib = make_nfe(InitOptions(buffer_size=8))
    fake_native.on("NFE_ObterCertificados", output="0123456789ABCDEF")

    result = lib.get_certificates()

    assert result.ok
    assert result.response == "01234567"
    assert result.truncated

def test_response_not_truncated_when_it_fits(nfe, fake_native):
    fake_native.on("NFE_ObterCertificados", output="short")
    assert not nfe.get_certificates().truncated

def test_save_pdf_receives_buffer_pair(nfe, fake_native):
    fake_native.on("NFE_SalvarPDF", output="JVBERi0x")
    assert nfe.save_pdf().response == "JVBERi0x"
    assert len(fake_native.args_of("NFE_SalvarPDF")) == 2

# --- Configuration defaults ---

@pytest.mark.parametrize("method, export", [
    ("read_config", "NFE_ConfigLer"),
    ("save_config", "NFE_ConfigGravar"),
    ("import_config", "NFE_ConfigImportar"),
])
def test_config_path_defaults_to_options(nfe, fake_native, method, export):
    fake_native.on(export)

    getattr(nfe, method)()
    getattr(nfe, method)("")
    getattr(nfe, method)("other.ini")

    assert fake_native.args_of(export, 0) == (b"c.ini",)
    assert fake_native.args_of(export, 1) == (b"c.ini",)
    assert fake_native.args_of(export, 2) == (b"other.ini",)

def test_config_messages(nfe, fake_native):
    for export in ("NFE_ConfigLer", "NFE_ConfigGravar", "NFE_ConfigImportar"):
        fake_native.on(export)
    assert nfe.read_config().response == "Configurações foram lidas corretamente."
    assert nfe.save_config().response == "Configurações foram gravadas corretamente."
    assert nfe.import_config().response == "Configuração importada corretamente."

# --- Argument order ---

def test_send_argument_order(nfe, fake_native):
    fake_native.on("NFE_Enviar", output="CStat=100")

    nfe.send(batch_number=1, print_after_send=False, synchronous=True, zipped=False)

    args = fake_native.args_of("NFE_Enviar")
    assert args[:4] == (1, False, True, False)
    assert len(args) == 6

def test_generate_key_argument_order(nfe, fake_native):
    fake_native.on("NFE_GerarChave", output="35230112345678000199550010000000011000000010")

    nfe.generate_key(
        uf_code=UFCode.SP, numeric_code=1, model=55, serie=1, number=1,
        emission_type=1, emission_date="25/01/2023", document="12345678000199",
    )

    assert fake_native.args_of("NFE_GerarChave")[:8] == (
        35, 1, 55, 1, 1, 1, b"25/01/2023", b"12345678000199",
    )

def test_consult_registration_sends_uf_initials(nfe, fake_native):
    fake_native.on("NFE_ConsultaCadastro", output="ok")
    nfe.consult_registration(uf=UF.SP, document="12345678000199", is_ie=False)
    assert fake_native.args_of("NFE_ConsultaCadastro")[:3] == (b"SP", b"12345678000199", False)

def test_print_flags_travel_as_text(nfe, fake_native):
    fake_native.on("NFE_Imprimir")

    result = nfe.print(printer_name="PDF", copies=2, show_preview=True,
                       consumer_copy=PrintFlag.YES)

    assert result.response == "Impresso corretamente."
    assert fake_native.args_of("NFE_Imprimir") == (
        b"PDF", 2, b"", b"True", b"", b"True", b"False",
    )

def test_send_mail_argument_order(nfe, fake_native):
    fake_native.on("NFE_EnviarEmail")
    result = nfe.send_mail(to="a@b.com", xml_path="nfe.xml", send_pdf=True,
                           subject="NF-e", cc="c@d.com", attachments="", message="Olá")
    assert result.response == "E-mail enviado corretamente."
    assert fake_native.args_of("NFE_EnviarEmail") == (
        b"a@b.com", b"nfe.xml", True, b"NF-e", b"c@d.com", b"", "Olá".encode(),
    )

def test_cancel_argument_order(nfe, fake_native):
    fake_native.on("NFE_Cancelar", output="CStat=135")
    nfe.cancel(nfe_key="3523", justification="Erro de digitação", document="123", batch_number=7)
    assert fake_native.args_of("NFE_Cancelar")[:4] == (
        b"3523", "Erro de digitação".encode(), b"123", 7,
    )

@pytest.mark.parametrize("flag", [1, 0, "1", "yes"])
def test_print_rejects_flags_that_are_not_booleans(nfe, fake_native, flag):
    fake_native.on("NFE_Imprimir")
    with pytest.raises(SignatureMismatchError, match="show_preview"):
        nfe.print(show_preview=flag)
    assert "NFE_Imprimir" not in fake_native.exports_called()

def test_print_accepts_flag_text(nfe, fake_native):
    fake_native.on("NFE_Imprimir")
    nfe.print(show_preview="True", consumer_copy=False, simplified=PrintFlag.YES)
    assert fake_native.args_of("NFE_Imprimir")[3:] == (b"True", b"", b"False", b"True")

# --- Boundary errors ---

def test_wrong_argument_type_raises(nfe, fake_native):
    fake_native.on("NFE_ObterXml", output="<NFe/>")
    with pytest.raises(SignatureMismatchError, match="argument 1"):
        nfe.get_xml(position="0")
    assert "NFE_ObterXml" not in fake_native.exports_called()

def test_missing_export_raises(nfe):
    with pytest.raises(SymbolNotFoundError, match="NFE_StatusServico"):
        nfe.check_service_status()

def test_raise_for_status(nfe, fake_native):
    fake_native.on("NFE_Validar", status=-11)
    with pytest.raises(NFeOperationError) as exc_info:
        nfe.validate().raise_for_status("NFE_Validar")
    assert exc_info.value.code == -11
    assert exc_info.value.code_message == "XML_VALIDATION_FAILED"

# --- Lifecycle ---

def test_close_finishes_initialized_library(make_nfe, fake_native):
    lib = make_nfe()
    lib.initialize()
    lib.close()

    assert lib.closed
    assert fake_native.exports_called() == ["NFE_Inicializar", "NFE_Finalizar"]

def test_close_without_initialize_does_not_finish(make_nfe, fake_native):
    lib = make_nfe()
    lib.close()
    lib.close()
    assert lib.closed
    assert fake_native.exports_called() == []

def test_close_releases_handle_when_finish_raises(make_nfe, fake_native):
    lib = make_nfe()
    assert lib.initialize().ok
    del fake_native.handlers["NFE_Finalizar"]

    with pytest.raises(SymbolNotFoundError, match="NFE_Finalizar"):
        lib.close()

    assert lib.closed
    assert not lib.initialized
    lib.close()

def test_operation_on_closed_library_fails(make_nfe):
    lib = make_nfe()
    lib.close()
    with pytest.raises(ValueError, match="closed ACBrLibNFe"):
        lib.sign()

def test_context_manager(fake_native, wrapper_factory):
    with ACBrLibNFe(options=InitOptions("c.ini"), wrapper=wrapper_factory(fake_native)) as lib:
        assert lib.initialize().ok
        assert not lib.closed
    assert lib.closed
    assert fake_native.exports_called()[-1] == "NFE_Finalizar"
