"""
Input Handler Module for the Bill Extractor.

This module provides functionality for:
    - Validating and loading bill files
    - Extracting plain text from PDF payloads

Supported formats:
    - PDF (digital, text-based)
"""

from .handler import InputHandler, UploadedFile
from .pdf_processor import PDFTextExtractor

__all__ = ['InputHandler', 'UploadedFile', 'PDFTextExtractor']
