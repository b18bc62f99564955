"""
Invoice Record Data Classes.

This module defines the structure handed to the persistence layer after a
bill has been parsed. Column names follow the invoices table schema.
"""

import json
from dataclasses import dataclass, fields as dataclass_fields
from enum import Enum
from typing import Any, Dict, List, Optional


class UtilityType(str, Enum):
    """Kind of utility a bill is for."""

    WATER = "water"
    ELECTRICITY = "electricity"

    @classmethod
    def parse(cls, value: Any) -> 'UtilityType':
        """
        Convert a stored value to a UtilityType.

        Unknown or empty values fall back to WATER, the documented default.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.WATER


REQUIRED_FIELDS = (
    'customer_number',
    'invoice_number',
    'address',
    'invoice_date',
    'due_date',
    'amount',
)


@dataclass
class PartialInvoiceRecord:
    """
    Best-effort result of parsing one utility bill.

    Every field except file_name may be empty. Dates are YYYY-MM-DD or
    empty. The record carries no timestamps or generated ids, so parsing
    the same bytes twice gives equal records.

    Attributes:
        file_name: Original filename of the uploaded PDF
        customer_number: Customer/account number
        invoice_number: Invoice number as printed
        address: Service address
        invoice_date: Date the bill was issued
        due_date: Payment due date
        amount: Amount due
        utility_type: Water or electricity
        is_paid: Always False for a freshly parsed bill

    Example:
        >>> record = PartialInvoiceRecord(file_name="913531.pdf", amount=42.5)
        >>> record.missing_fields
        ['customer_number', 'invoice_number', 'address', 'invoice_date', 'due_date']
    """
    file_name: str
    customer_number: str = ""
    invoice_number: str = ""
    address: str = ""
    invoice_date: str = ""
    due_date: str = ""
    amount: float = 0.0
    utility_type: UtilityType = UtilityType.WATER
    is_paid: bool = False

    @property
    def missing_fields(self) -> List[str]:
        """
        Required fields that are still empty (or zero for the amount).

        The presentation layer marks these for correction before saving.
        """
        missing = []
        for name in REQUIRED_FIELDS:
            value = getattr(self, name)
            if not value or (isinstance(value, str) and not value.strip()):
                missing.append(name)
        return missing

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to a plain dictionary using the persistence column names.

        Returns:
            Dictionary with JSON-serializable values.
        """
        return {
            'customer_number': self.customer_number,
            'invoice_number': self.invoice_number,
            'address': self.address,
            'invoice_date': self.invoice_date,
            'due_date': self.due_date,
            'amount': self.amount,
            'is_paid': self.is_paid,
            'utility_type': self.utility_type.value,
            'file_name': self.file_name,
        }

    def to_db_row(self) -> Dict[str, Any]:
        """Row for the invoices table (server-assigned columns excluded)."""
        row = self.to_dict()
        row['amount'] = float(self.amount or 0.0)
        row['is_paid'] = bool(self.is_paid)
        return row

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PartialInvoiceRecord':
        """
        Create a record from a dictionary or a database row.

        Unknown keys (id, timestamps, payment_date) are ignored.

        Args:
            data: Dictionary with record data.

        Returns:
            PartialInvoiceRecord instance.
        """
        known = {f.name for f in dataclass_fields(cls)}
        values = {k: v for k, v in data.items() if k in known and v is not None}

        values['file_name'] = str(values.get('file_name', ''))
        values['amount'] = float(values.get('amount') or 0.0)
        values['is_paid'] = bool(values.get('is_paid', False))
        values['utility_type'] = UtilityType.parse(values.get('utility_type'))

        return cls(**values)

    def __repr__(self) -> str:
        return (
            f"PartialInvoiceRecord("
            f"customer={self.customer_number!r}, "
            f"invoice={self.invoice_number!r}, "
            f"amount={self.amount}, "
            f"type={self.utility_type.value})"
        )
