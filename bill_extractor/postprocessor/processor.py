"""
Main Post-Processor Module.

This module provides the PostProcessor class that prepares a parsed bill
for storage after the user has reviewed it.

Operations:
    - Normalize user-corrected dates to YYYY-MM-DD
    - Fill empty dates with defaults (today, today + N days)
    - Collapse whitespace in identifiers and the address
    - Validate the result
"""

import dataclasses
from datetime import date, timedelta
from typing import Optional

from config import get_config
from bill_extractor.utils.logger import get_logger
from bill_extractor.utils.helpers import collapse_whitespace
from bill_extractor.extraction.invoice_record import PartialInvoiceRecord
from .normalizers import DateNormalizer
from .validators import FieldValidator, ValidationResult

logger = get_logger(__name__)


class PostProcessor:
    """
    Post-processor for parsed bill records.

    Records are never modified in place; process() returns a copy.

    Attributes:
        date_normalizer: DateNormalizer instance
        field_validator: FieldValidator instance
        apply_defaults: Fill empty dates when True
        due_in_days: Offset of the default due date from today

    Example:
        >>> processor = PostProcessor()
        >>> cleaned = processor.process(record)
        >>> result = processor.validate(cleaned)
        >>> print(result.is_valid)
    """

    def __init__(self, apply_defaults: Optional[bool] = None) -> None:
        """
        Initialize the post-processor.

        Args:
            apply_defaults: Override ``postprocessing.defaults.enabled``.
        """
        self.date_normalizer = DateNormalizer()
        self.field_validator = FieldValidator()

        if apply_defaults is None:
            apply_defaults = get_config("postprocessing.defaults.enabled", True)
        self.apply_defaults = bool(apply_defaults)
        self.due_in_days = int(get_config("postprocessing.defaults.due_in_days", 14))

        logger.debug(
            f"PostProcessor initialized (defaults: {self.apply_defaults}, "
            f"due in {self.due_in_days} days)"
        )

    def process(
        self,
        record: PartialInvoiceRecord,
        today: Optional[date] = None
    ) -> PartialInvoiceRecord:
        """
        Clean a record before storing it.

        Args:
            record: Parsed (and possibly user-corrected) record.
            today: Reference date for defaults. Defaults to date.today().

        Returns:
            New PartialInvoiceRecord.
        """
        today = today or date.today()

        invoice_date = self._normalize_date(record.invoice_date, 'invoice_date')
        due_date = self._normalize_date(record.due_date, 'due_date')

        if self.apply_defaults:
            if not invoice_date:
                invoice_date = today.isoformat()
                logger.debug(f"{record.file_name}: invoice_date defaulted to {invoice_date}")
            if not due_date:
                due_date = (today + timedelta(days=self.due_in_days)).isoformat()
                logger.debug(f"{record.file_name}: due_date defaulted to {due_date}")

        return dataclasses.replace(
            record,
            customer_number=collapse_whitespace(record.customer_number),
            invoice_number=collapse_whitespace(record.invoice_number),
            address=collapse_whitespace(record.address),
            invoice_date=invoice_date,
            due_date=due_date,
        )

    def validate(self, record: PartialInvoiceRecord) -> ValidationResult:
        """
        Validate a record without changing it.

        Returns:
            ValidationResult with missing fields as errors and suspicious
            values as warnings.
        """
        result = self.field_validator.validate_record(record)

        if result.errors:
            logger.debug(f"{record.file_name}: {len(result.errors)} validation errors")
        for warning in result.warnings:
            logger.warning(f"{record.file_name}: {warning}")

        return result

    def _normalize_date(self, value: str, field: str) -> str:
        """Normalize a non-ISO date, keeping the input when it cannot be parsed."""
        value = (value or '').strip()
        if not value or self.date_normalizer.is_iso(value):
            return value

        normalized = self.date_normalizer.normalize(value)
        if normalized is None:
            logger.warning(f"Could not normalize {field}: {value!r}")
            return value

        return normalized
