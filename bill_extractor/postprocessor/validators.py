"""
Data Validators Module.

This module provides validation for extracted bill records:
    - Date fields
    - Amount field
    - Required fields

Validation reports problems; it never raises and never changes a record.
"""

from datetime import datetime
from typing import Any, Dict, List, Tuple

from config import get_config
from bill_extractor.utils.logger import get_logger
from bill_extractor.extraction.invoice_record import PartialInvoiceRecord, REQUIRED_FIELDS

logger = get_logger(__name__)


class ValidationResult:
    """
    Contains the result of validation checks.

    Attributes:
        is_valid: Overall validation result
        errors: List of error messages
        warnings: List of warning messages
        missing_fields: Required fields without a value
    """

    def __init__(self) -> None:
        self.is_valid = True
        self.errors: List[str] = []
        self.warnings: List[str] = []
        self.missing_fields: List[str] = []

    def add_error(self, message: str) -> None:
        """Add an error and mark as invalid."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning (doesn't affect validity)."""
        self.warnings.append(message)

    def add_missing(self, field: str) -> None:
        self.missing_fields.append(field)
        self.add_error(f"Required field missing: {field}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'is_valid': self.is_valid,
            'errors': self.errors,
            'warnings': self.warnings,
            'missing_fields': self.missing_fields
        }


class DateValidator:
    """
    Validates ISO date fields.

    Example:
        >>> validator = DateValidator()
        >>> validator.validate("2024-03-30")
        (True, "Valid date")
        >>> validator.validate("30/03/2024")[0]
        False
    """

    MIN_YEAR = 2000
    MAX_YEAR = 2100

    def __init__(self) -> None:
        self.date_format = get_config(
            "postprocessing.date.output_format",
            "%Y-%m-%d"
        )

    def validate(self, date_str: str) -> Tuple[bool, str]:
        """
        Validate a date string with detailed feedback.

        Args:
            date_str: Date string to validate.

        Returns:
            Tuple of (is_valid, message).
        """
        if not date_str:
            return False, "Date is empty"

        try:
            parsed = datetime.strptime(date_str, self.date_format)
        except ValueError as e:
            return False, f"Invalid date format: {str(e)}"

        if parsed.year < self.MIN_YEAR:
            return False, f"Year {parsed.year} is too old"
        if parsed.year > self.MAX_YEAR:
            return False, f"Year {parsed.year} is too far in future"

        return True, "Valid date"

    def is_due_after_invoice(
        self,
        invoice_date: str,
        due_date: str
    ) -> Tuple[bool, str]:
        """
        Check if due date is on or after the invoice date.

        Args:
            invoice_date: Invoice date string.
            due_date: Payment due date string.

        Returns:
            Tuple of (is_valid, message).
        """
        try:
            inv_parsed = datetime.strptime(invoice_date, self.date_format)
            due_parsed = datetime.strptime(due_date, self.date_format)
        except ValueError:
            return True, "Could not validate date relationship"

        if due_parsed < inv_parsed:
            return False, "Due date is before invoice date"

        return True, "Valid date relationship"


class AmountValidator:
    """
    Validates the amount field.

    Example:
        >>> AmountValidator().validate(-5.0)
        (False, "Amount cannot be negative")
    """

    MIN_AMOUNT = 0.0
    MAX_AMOUNT = 1_000_000

    def validate(self, amount: Any) -> Tuple[bool, str]:
        """
        Validate an amount with detailed feedback.

        Args:
            amount: Amount as float or numeric string.

        Returns:
            Tuple of (is_valid, message).
        """
        try:
            value = float(amount)
        except (TypeError, ValueError):
            return False, f"Could not parse amount: {amount}"

        if value < self.MIN_AMOUNT:
            return False, "Amount cannot be negative"

        if value > self.MAX_AMOUNT:
            return False, f"Amount {value} exceeds maximum"

        return True, "Valid amount"


class FieldValidator:
    """
    Record-level validation.

    Checks required fields, date formats, the due/invoice date order and
    the amount.

    Example:
        >>> validator = FieldValidator()
        >>> result = validator.validate_record(record)
        >>> print(result.missing_fields)
    """

    def __init__(self) -> None:
        self.required_fields = get_config(
            "postprocessing.validation.required_fields",
            list(REQUIRED_FIELDS)
        )
        self.date_validator = DateValidator()
        self.amount_validator = AmountValidator()

        logger.debug(f"FieldValidator initialized (required: {self.required_fields})")

    def check_required_fields(
        self,
        fields: Dict[str, Any]
    ) -> Tuple[bool, List[str]]:
        """
        Check if all required fields are present.

        Args:
            fields: Dictionary of field names to values.

        Returns:
            Tuple of (all_present, list of missing fields).
        """
        missing = []

        for required in self.required_fields:
            value = fields.get(required)
            if not value or str(value).strip() == "":
                missing.append(required)

        return len(missing) == 0, missing

    def validate_record(self, record: PartialInvoiceRecord) -> ValidationResult:
        """
        Validate a record.

        Args:
            record: Record to validate.

        Returns:
            ValidationResult; missing required fields are errors, format
            problems are warnings.
        """
        result = ValidationResult()
        fields = record.to_dict()

        _, missing = self.check_required_fields(fields)
        for field in missing:
            result.add_missing(field)

        for field in ('invoice_date', 'due_date'):
            if fields[field]:
                is_valid, message = self.date_validator.validate(fields[field])
                if not is_valid:
                    result.add_warning(f"{field}: {message}")

        if record.invoice_date and record.due_date:
            is_valid, message = self.date_validator.is_due_after_invoice(
                record.invoice_date,
                record.due_date
            )
            if not is_valid:
                result.add_warning(message)

        is_valid, message = self.amount_validator.validate(record.amount)
        if not is_valid:
            result.add_warning(f"amount: {message}")

        return result
