"""
Invoice Extractor Module.

This module provides the InvoiceExtractor class that turns an uploaded
utility-bill PDF into a PartialInvoiceRecord.

Pipeline:
    PDF bytes → text (PDFTextExtractor) → customer number → known-account
    lookup → address / utility type → invoice number, dates, amount

Only the text extraction step can fail. Once text is available every
field extractor returns a value or its default, so a record is always
produced.
"""

import time
from pathlib import Path
from typing import Optional, Union

from bill_extractor.utils.logger import get_logger
from bill_extractor.utils.exceptions import ExtractionError
from bill_extractor.input_handler.handler import InputHandler
from bill_extractor.input_handler.pdf_processor import PDFTextExtractor
from .account_mapping import AccountMapping, AccountTable, get_account_table
from .field_extractors import FieldExtractor
from .invoice_record import PartialInvoiceRecord

logger = get_logger(__name__)


class InvoiceExtractor:
    """
    Assembles a PartialInvoiceRecord from a bill PDF.

    The text extractor is created once by the caller and injected here,
    so there is no global PDF engine state. Instances keep no per-call
    state and may be used from several threads at once.

    Attributes:
        text_extractor: Adapter producing raw text from PDF bytes
        account_table: Known accounts; a match overrides address and type
        fields: FieldExtractor with the compiled heuristics

    Example:
        >>> extractor = InvoiceExtractor(PDFTextExtractor())
        >>> record = extractor.extract(pdf_bytes, "913531.pdf")
        >>> print(record.address, record.utility_type.value)
    """

    def __init__(
        self,
        text_extractor: PDFTextExtractor,
        field_extractor: Optional[FieldExtractor] = None,
        account_table: Optional[AccountTable] = None,
        input_handler: Optional[InputHandler] = None
    ) -> None:
        """
        Initialize the extractor.

        Args:
            text_extractor: Anything with extract_text(data, file_name).
            field_extractor: Field heuristics. Built from config if None.
            account_table: Known accounts. Uses the configured table if None.
            input_handler: Loader used by extract_file(). Built lazily.
        """
        self.text_extractor = text_extractor
        self.account_table = account_table if account_table is not None else get_account_table()
        self.fields = field_extractor or FieldExtractor(account_table=self.account_table)
        self._input_handler = input_handler

        logger.debug(f"InvoiceExtractor initialized ({len(self.account_table)} known accounts)")

    @property
    def input_handler(self) -> InputHandler:
        """Get or create the input handler."""
        if self._input_handler is None:
            self._input_handler = InputHandler()
        return self._input_handler

    def extract(self, data: bytes, file_name: str) -> PartialInvoiceRecord:
        """
        Parse an uploaded bill.

        Args:
            data: Raw PDF bytes.
            file_name: Original filename; kept on the record and used as a
                customer number source.

        Returns:
            PartialInvoiceRecord with is_paid False.

        Raises:
            ExtractionError: If the PDF text cannot be read.
        """
        start_time = time.time()

        try:
            text = self.text_extractor.extract_text(data, file_name)
        except ExtractionError:
            raise
        except Exception as e:
            raise ExtractionError(file_name, str(e)) from e

        record = self.extract_from_text(text, file_name)

        logger.info(
            f"Extracted {file_name}: "
            f"{6 - len(record.missing_fields)}/6 required fields, "
            f"time: {time.time() - start_time:.2f}s"
        )
        if not record.is_complete:
            logger.debug(f"{file_name} is missing: {', '.join(record.missing_fields)}")
        return record

    def extract_file(self, filepath: Union[str, Path]) -> PartialInvoiceRecord:
        """
        Load a bill from disk and parse it.

        Raises:
            InputError: If the file is missing, unsupported or empty.
            ExtractionError: If the PDF text cannot be read.
        """
        upload = self.input_handler.load(filepath)
        return self.extract(upload.data, upload.file_name)

    def extract_from_text(self, text: str, file_name: str) -> PartialInvoiceRecord:
        """
        Build a record from already extracted text.

        Args:
            text: Raw bill text.
            file_name: Original filename.

        Returns:
            PartialInvoiceRecord.
        """
        customer_number = self.fields.extract_customer_number(file_name, text)
        mapping = self.resolve_account(customer_number, text)

        if mapping is not None:
            logger.debug(f"Known account {mapping.account_id}: using mapped address and type")
            address = mapping.canonical_address
            utility_type = mapping.utility_type
        else:
            address = self.fields.extract_address(text, customer_number)
            utility_type = self.fields.detect_utility_type(text)

        record = PartialInvoiceRecord(
            file_name=file_name,
            customer_number=customer_number,
            invoice_number=self.fields.extract_invoice_number(text),
            address=address,
            invoice_date=self.fields.extract_invoice_date(text),
            due_date=self.fields.extract_due_date(text),
            amount=self.fields.extract_amount(text),
            utility_type=utility_type,
            is_paid=False,
        )

        if record.missing_fields:
            logger.debug(f"Missing fields for {file_name}: {', '.join(record.missing_fields)}")

        return record

    def resolve_account(self, customer_number: str, text: str) -> Optional[AccountMapping]:
        """
        Find the known account for a bill.

        The customer number is looked up first; if it is not a known
        account, the text is searched for any known account id.
        """
        mapping = self.account_table.lookup(customer_number)
        if mapping is None:
            mapping = self.account_table.find_in_text(text)
        return mapping
