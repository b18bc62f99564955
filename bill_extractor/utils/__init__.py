"""
Utility Module for the Bill Extractor.

Common utilities used across all other modules:
    - Logging configuration
    - Exceptions
    - File and string helpers
"""

from .logger import setup_logger, get_logger
from .helpers import collapse_whitespace, ensure_directory, get_file_extension, strip_pdf_suffix

__all__ = [
    'setup_logger',
    'get_logger',
    'collapse_whitespace',
    'ensure_directory',
    'get_file_extension',
    'strip_pdf_suffix',
]
