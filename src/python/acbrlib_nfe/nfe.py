# acbrlib_nfe/nfe.py
"""The ACBrLibNFe façade: one method per native export."""

import logging
from typing import Any, Optional, Union

from .abc import NativeLibraryBase
from .lowlevel import LowLevelWrapper
from .dataclasses import InitOptions, NFeResponse
from .exceptions import SignatureMismatchError, decode_error
from .types import EmissionType, NFeModel, PathType, PrintFlag, UF, UFCode
from ._internal.library_selector import resolve_library_path
from ._internal.response_buffer import ResponseBuffer
from ._internal.signatures import RESTYPE, SIGNATURES, NativeSignature, marshal_arguments

logger = logging.getLogger(__name__)

Flag = Union[PrintFlag, bool, str]


def _print_flag(name: str, value: Flag) -> PrintFlag:
    """Normalizes a print flag; only booleans, PrintFlag or "True"/"False" are accepted."""
    if isinstance(value, PrintFlag):
        return value
    if isinstance(value, bool):
        return PrintFlag.YES if value else PrintFlag.NO
    if isinstance(value, str):
        try:
            return PrintFlag(value)
        except ValueError:
            pass
    raise SignatureMismatchError(
        f"NFE_Imprimir, {name}: expected a boolean or 'True'/'False', got {value!r}"
    )


class ACBrLibNFe(NativeLibraryBase):
    """
    Binding to ACBrLibNFe, the native component of the ACBr Project that
    issues NF-e and NFC-e documents and all their related events.

    Every method is a direct, blocking call into the native library and
    returns an `NFeResponse`. Native failures are never raised: they come
    back as a non-zero ``code`` with the decoded message in ``response``.
    Only boundary errors raise (library not loadable, missing export,
    arguments that do not fit the native signature).

    An instance owns one response buffer and provides no locking; calls on
    the same instance from several threads must be serialized by the caller.

    Usage:
        with ACBrLibNFe("/opt/acbr/libacbrnfe64.so", InitOptions("acbrlib.ini")) as nfe:
            nfe.initialize()
            print(nfe.check_service_status().response)
    """
    def __init__(
        self,
        library_path: Optional[str] = None,
        options: Optional[InitOptions] = None,
        *,
        calling_convention: str = "cdecl",
        wrapper: Optional[LowLevelWrapper] = None,
    ):
        """
        Args:
            library_path: Path of the native library. Falls back to
                ``ACBRLIB_NFE_PATH`` and then to the platform file name.
            options: Configuration file, key and buffer settings.
            calling_convention: "cdecl" or "stdcall" (Windows builds only).
            wrapper: An already opened LowLevelWrapper; `library_path` and
                `calling_convention` are ignored when given.
        """
        self._options = options if options is not None else InitOptions()
        if wrapper is None:
            wrapper = LowLevelWrapper(resolve_library_path(library_path), calling_convention)
        self._wrapper = wrapper
        self._buffer = ResponseBuffer(self._options.buffer_size, self._options.encoding)
        self._initialized = False

    @property
    def options(self) -> InitOptions:
        return self._options

    @property
    def initialized(self) -> bool:
        """True between a successful `initialize` and `finish` on this instance."""
        return self._initialized

    # --- Call machinery ---

    def _call(self, operation: str, *args: Any) -> NFeResponse:
        self._ensure_open()
        signature = SIGNATURES[operation]
        call_args = marshal_arguments(signature, args, self._options.encoding)
        if signature.has_output:
            self._buffer.reset()
            call_args.extend(self._buffer.as_arguments())
        status = self._wrapper.invoke(signature.export, RESTYPE, signature.argtypes, *call_args)
        if status != 0:
            logger.debug("%s failed with status %d", signature.export, status)
        return self._response(signature, status)

    def _response(self, signature: NativeSignature, status: int) -> NFeResponse:
        # A non-zero status wins over any buffer contents or fixed message.
        if status != 0:
            return NFeResponse(status, decode_error(status))
        if signature.has_output:
            truncated = self._buffer.truncated
            return NFeResponse(0, self._buffer.decode(), truncated)
        return NFeResponse(0, signature.success_message)

    def _config_path(self, config_file: Optional[str]) -> str:
        return config_file or self._options.config_file

    # --- Library ---

    def initialize(self) -> NFeResponse:
        """Initializes the component with the configuration file and key of `options`."""
        result = self._call("initialize", self._options.config_file, self._options.key_crypt)
        if result.ok:
            self._initialized = True
        return result

    def finish(self) -> NFeResponse:
        """Removes the component and its classes from memory."""
        result = self._call("finish")
        if result.ok:
            self._initialized = False
        return result

    def get_last_response(self) -> NFeResponse:
        """Returns the last answer processed by the library."""
        return self._call("get_last_response")

    def get_lib_name(self) -> NFeResponse:
        return self._call("get_lib_name")

    def get_lib_version(self) -> NFeResponse:
        return self._call("get_lib_version")

    # --- Configuration ---

    def read_config(self, config_file: Optional[str] = None) -> NFeResponse:
        """
        Reads the library configuration from an INI file.

        Args:
            config_file: INI file to read. None or blank uses
                `options.config_file`.
        """
        return self._call("read_config", self._config_path(config_file))

    def save_config(self, config_file: Optional[str] = None) -> NFeResponse:
        """Writes the library configuration; blank `config_file` uses the default."""
        return self._call("save_config", self._config_path(config_file))

    def get_config_item_value(self, session_ini: str, key: str) -> NFeResponse:
        """Reads one configuration item from session `session_ini`."""
        return self._call("get_config_item_value", session_ini, key)

    def save_config_item_value(self, session_ini: str, key: str, value: str) -> NFeResponse:
        """
        Writes one configuration item.

        Args:
            session_ini: Configuration session name.
            key: Key name inside the session.
            value: Text compatible with the configuration being set.
        """
        return self._call("save_config_item_value", session_ini, key, value)

    def import_config(self, config_file: Optional[str] = None) -> NFeResponse:
        """Imports configuration from an INI file; blank uses the default."""
        return self._call("import_config", self._config_path(config_file))

    def export_config(self) -> NFeResponse:
        """Returns the current configuration as INI text."""
        return self._call("export_config")

    # --- Documents ---

    def load_xml(self, file_or_content: str) -> NFeResponse:
        """Adds an NF-e to the list from an XML file path or XML content."""
        return self._call("load_xml", file_or_content)

    def load_ini(self, file_or_content: str) -> NFeResponse:
        """Adds an NF-e to the list from an INI file path or INI content."""
        return self._call("load_ini", file_or_content)

    def get_xml(self, position: int) -> NFeResponse:
        """Returns the XML of the NF-e at `position` (the list starts at 0)."""
        return self._call("get_xml", position)

    def save_xml(self, position: int, file_name: str, file_path: str) -> NFeResponse:
        """
        Writes the XML of the NF-e at `position` to disk.

        Args:
            position: Index in the loaded list, starting at 0.
            file_name: Name of the XML file to create.
            file_path: Folder where the file is written.
        """
        return self._call("save_xml", position, file_name, file_path)

    def get_ini(self, position: int) -> NFeResponse:
        """Returns the NF-e at `position` in INI format."""
        return self._call("get_ini", position)

    def save_ini(self, position: int, file_name: str, file_path: str) -> NFeResponse:
        return self._call("save_ini", position, file_name, file_path)

    def load_event_xml(self, file_or_content: str) -> NFeResponse:
        """Adds an event to the event list from an XML file path or content."""
        return self._call("load_event_xml", file_or_content)

    def load_event_ini(self, file_or_content: str) -> NFeResponse:
        """Adds an event to the event list from an INI file path or content."""
        return self._call("load_event_ini", file_or_content)

    def clear_list(self) -> NFeResponse:
        return self._call("clear_list")

    def clear_event_list(self) -> NFeResponse:
        return self._call("clear_event_list")

    def sign(self) -> NFeResponse:
        """Signs the loaded documents."""
        return self._call("sign")

    def validate(self) -> NFeResponse:
        """Validates the signed documents against the schemas."""
        return self._call("validate")

    def validate_business_rules(self) -> NFeResponse:
        """Checks the business rules of the loaded XML; returns the findings."""
        return self._call("validate_business_rules")

    def verify_signature(self) -> NFeResponse:
        return self._call("verify_signature")

    def generate_key(
        self,
        uf_code: Union[UFCode, int],
        numeric_code: int,
        model: Union[NFeModel, int],
        serie: int,
        number: int,
        emission_type: Union[EmissionType, int],
        emission_date: str,
        document: str,
    ) -> NFeResponse:
        """
        Generates an NF-e access key.

        Args:
            uf_code: IBGE code of the issuer's state.
            numeric_code: Random numeric code (`cNF`).
            model: 55 for NF-e, 65 for NFC-e.
            serie: Document series.
            number: Document number.
            emission_type: Emission type (`tpEmis`).
            emission_date: Emission date, e.g. "25/01/2023".
            document: Issuer CNPJ/CPF.
        """
        return self._call(
            "generate_key", uf_code, numeric_code, model, serie, number,
            emission_type, emission_date, document,
        )

    def get_certificates(self) -> NFeResponse:
        """Lists the certificates installed on the machine."""
        return self._call("get_certificates")

    def get_path(self, path_type: Union[PathType, int]) -> NFeResponse:
        """Returns the folder where documents of `path_type` are stored."""
        return self._call("get_path", path_type)

    def get_event_path(self, event_code: int) -> NFeResponse:
        return self._call("get_event_path", event_code)

    # --- SEFAZ web services ---

    def check_service_status(self) -> NFeResponse:
        """Queries the SEFAZ service status."""
        return self._call("check_service_status")

    def consult(self, key_or_content: str, extract_events: bool = False) -> NFeResponse:
        """
        Consults an NF-e at SEFAZ.

        Args:
            key_or_content: Access key, XML file path or XML content.
            extract_events: Whether to extract the events of the document.
        """
        return self._call("consult", key_or_content, extract_events)

    def consult_receipt(self, receipt: str) -> NFeResponse:
        """Consults the processing of a batch by its receipt number."""
        return self._call("consult_receipt", receipt)

    def consult_registration(
        self,
        uf: Union[UF, str],
        document: str,
        is_ie: bool = False,
    ) -> NFeResponse:
        """
        Consults the taxpayer registry.

        Args:
            uf: State initials, e.g. UF.SP.
            document: CNPJ/CPF, or the state registration when `is_ie`.
            is_ie: True when `document` is a state registration (IE).
        """
        return self._call("consult_registration", uf, document, is_ie)

    def make_unusable(
        self,
        document: str,
        justification: str,
        year: int,
        model: Union[NFeModel, int],
        serie: int,
        initial_number: int,
        final_number: int,
    ) -> NFeResponse:
        """Voids an unused range of document numbers (inutilização)."""
        return self._call(
            "make_unusable", document, justification, year, model, serie,
            initial_number, final_number,
        )

    def send(
        self,
        batch_number: int,
        print_after_send: bool = False,
        synchronous: bool = False,
        zipped: bool = False,
    ) -> NFeResponse:
        """
        Sends the loaded documents to SEFAZ as one batch.

        Args:
            batch_number: Number of the batch.
            print_after_send: Print the DANFE once authorized.
            synchronous: Use synchronous authorization (single document).
            zipped: Send the batch compressed.
        """
        return self._call("send", batch_number, print_after_send, synchronous, zipped)

    def cancel(
        self,
        nfe_key: str,
        justification: str,
        document: str,
        batch_number: int,
    ) -> NFeResponse:
        """Sends the cancellation event for the NF-e with key `nfe_key`."""
        return self._call("cancel", nfe_key, justification, document, batch_number)

    def send_event(self, batch_number: int) -> NFeResponse:
        """Sends the loaded events to SEFAZ."""
        return self._call("send_event", batch_number)

    def dfe_distribution(
        self,
        uf_code: Union[UFCode, int],
        document: str,
        nsu: str,
        file_or_content: str,
    ) -> NFeResponse:
        return self._call("dfe_distribution", uf_code, document, nsu, file_or_content)

    def dfe_distribution_last_nsu(
        self,
        uf_code: Union[UFCode, int],
        document: str,
        nsu: str,
    ) -> NFeResponse:
        """Queries DF-e distribution from the last NSU received."""
        return self._call("dfe_distribution_last_nsu", uf_code, document, nsu)

    def dfe_distribution_nsu(
        self,
        uf_code: Union[UFCode, int],
        document: str,
        nsu: str,
    ) -> NFeResponse:
        """Queries DF-e distribution for one specific NSU."""
        return self._call("dfe_distribution_nsu", uf_code, document, nsu)

    def dfe_distribution_key(
        self,
        uf_code: Union[UFCode, int],
        document: str,
        key: str,
    ) -> NFeResponse:
        """Queries DF-e distribution by access key."""
        return self._call("dfe_distribution_key", uf_code, document, key)

    # --- E-mail ---

    def send_mail(
        self,
        to: str,
        xml_path: str,
        send_pdf: bool = True,
        subject: str = "",
        cc: str = "",
        attachments: str = "",
        message: str = "",
    ) -> NFeResponse:
        """
        E-mails an NF-e.

        Args:
            to: Recipient address.
            xml_path: XML file path or XML content of the NF-e.
            send_pdf: Attach the DANFE PDF.
            subject: Mail subject.
            cc: Carbon-copy addresses, separated by ";".
            attachments: Extra attachment paths, separated by ";".
            message: Mail body.
        """
        return self._call("send_mail", to, xml_path, send_pdf, subject, cc, attachments, message)

    def send_event_mail(
        self,
        to: str,
        event_path: str,
        xml_path: str,
        send_pdf: bool = True,
        subject: str = "",
        cc: str = "",
        attachments: str = "",
        message: str = "",
    ) -> NFeResponse:
        """E-mails an event together with the NF-e it refers to."""
        return self._call(
            "send_event_mail", to, event_path, xml_path, send_pdf,
            subject, cc, attachments, message,
        )

    # --- Printing ---

    def print(
        self,
        printer_name: str = "",
        copies: int = 1,
        protocol: str = "",
        show_preview: Flag = PrintFlag.NO,
        watermark_path: str = "",
        consumer_copy: Flag = PrintFlag.NO,
        simplified: Flag = PrintFlag.NO,
    ) -> NFeResponse:
        """
        Prints the DANFE of the loaded documents.

        The three flags travel as the text "True"/"False"; plain booleans
        are converted. Anything else, including the integers 0 and 1,
        raises SignatureMismatchError before the native call.
        """
        return self._call(
            "print", printer_name, copies, protocol,
            _print_flag("show_preview", show_preview),
            watermark_path,
            _print_flag("consumer_copy", consumer_copy),
            _print_flag("simplified", simplified),
        )

    def print_pdf(self) -> NFeResponse:
        return self._call("print_pdf")

    def save_pdf(self) -> NFeResponse:
        """Renders the DANFE PDF and returns what the library reports."""
        return self._call("save_pdf")

    def print_event(self, file_or_content: str, event_file_or_content: str) -> NFeResponse:
        return self._call("print_event", file_or_content, event_file_or_content)

    def print_event_pdf(self, file_or_content: str, event_file_or_content: str) -> NFeResponse:
        return self._call("print_event_pdf", file_or_content, event_file_or_content)

    def save_event_pdf(self, file_or_content: str, event_file_or_content: str) -> NFeResponse:
        return self._call("save_event_pdf", file_or_content, event_file_or_content)

    def print_unusable(self, xml_file: str) -> NFeResponse:
        return self._call("print_unusable", xml_file)

    def print_unusable_pdf(self, xml_file: str) -> NFeResponse:
        return self._call("print_unusable_pdf", xml_file)

    def save_unusable_pdf(self, xml_file: str) -> NFeResponse:
        return self._call("save_unusable_pdf", xml_file)

    # --- Lifecycle ---

    def close(self) -> None:
        """
        Finishes the library if this instance initialized it, then frees
        the response buffer and drops the native handle. Idempotent.

        The buffer and handle are released even when `finish` raises; the
        exception then propagates.
        """
        if self.closed:
            return
        try:
            if self._initialized:
                result = self.finish()
                if not result.ok:
                    logger.warning("finish on close returned %d: %s", result.code, result.response)
        finally:
            self._initialized = False
            self._buffer.release()
            self._wrapper.close()

    @property
    def closed(self) -> bool:
        return self._wrapper.closed or self._buffer.released
