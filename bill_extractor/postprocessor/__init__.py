"""
Post-Processor Module for the Bill Extractor.

Provides normalization and validation of parsed bill records:
    - Date normalization to YYYY-MM-DD
    - Amount normalization with decimal-comma support
    - Required field and value validation
"""

from .normalizers import DateNormalizer, AmountNormalizer
from .validators import AmountValidator, DateValidator, FieldValidator, ValidationResult
from .processor import PostProcessor

__all__ = [
    'DateNormalizer',
    'AmountNormalizer',
    'AmountValidator',
    'DateValidator',
    'FieldValidator',
    'ValidationResult',
    'PostProcessor',
]
