"""
Extraction Module for the Bill Extractor.

Heuristic field extraction from utility-bill text:
    - Customer number, invoice number and address
    - Invoice and due dates (normalized to YYYY-MM-DD)
    - Amount due
    - Utility type (water or electricity)
    - Known-account override for address and utility type
"""

from .account_mapping import AccountMapping, AccountTable, get_account_table
from .extractor import InvoiceExtractor
from .field_extractors import FieldExtractor
from .invoice_record import PartialInvoiceRecord, UtilityType

__all__ = [
    'AccountMapping',
    'AccountTable',
    'get_account_table',
    'InvoiceExtractor',
    'FieldExtractor',
    'PartialInvoiceRecord',
    'UtilityType',
]
