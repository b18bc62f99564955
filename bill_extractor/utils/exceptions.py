"""
Custom Exceptions Module.

This module defines the exceptions raised by the bill extractor. Field
extractors never raise; only failures to read the input at all, to load
configuration, or to store records surface as exceptions.

Exception Hierarchy:
    InvoiceExtractionError (base)
    ├── InputError
    │   ├── UnsupportedFileTypeError
    │   ├── InputFileNotFoundError
    │   └── ExtractionError
    ├── ConfigurationError
    └── OutputError
        └── DatabaseError
"""

from typing import Optional


class InvoiceExtractionError(Exception):
    """
    Base exception for all bill extractor errors.

    Attributes:
        message: Human-readable error message.
        details: Dictionary with additional error context.
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# INPUT ERRORS
# =============================================================================

class InputError(InvoiceExtractionError):
    """Base exception for input handling errors."""
    pass


class UnsupportedFileTypeError(InputError):
    """
    Raised when a file with an unsupported extension is provided.

    Example:
        >>> raise UnsupportedFileTypeError(".doc", [".pdf"])
    """

    def __init__(self, file_type: str, supported_types: list):
        message = f"Unsupported file type: '{file_type}'"
        details = {"file_type": file_type, "supported_types": supported_types}
        super().__init__(message, details)


class InputFileNotFoundError(InputError):
    """Raised when an input file cannot be found."""

    def __init__(self, filepath: str):
        message = f"File not found: {filepath}"
        details = {"filepath": filepath}
        super().__init__(message, details)


class ExtractionError(InputError):
    """
    Raised when no text can be read from a PDF.

    Covers empty payloads, corrupt or encrypted documents and files that
    are not PDFs at all. No partial invoice record is produced.
    """

    def __init__(self, file_name: str, reason: Optional[str] = None):
        message = f"Could not extract text from: {file_name}"
        details = {"file_name": file_name, "reason": reason}
        super().__init__(message, details)


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================

class ConfigurationError(InvoiceExtractionError):
    """Raised when a configuration file or value is invalid."""

    def __init__(self, setting: str, reason: Optional[str] = None):
        message = f"Invalid configuration: {setting}"
        details = {"setting": setting, "reason": reason}
        super().__init__(message, details)


# =============================================================================
# OUTPUT ERRORS
# =============================================================================

class OutputError(InvoiceExtractionError):
    """Base exception for output handling errors."""
    pass


class DatabaseError(OutputError):
    """Raised when database operations fail."""

    def __init__(self, operation: str, reason: Optional[str] = None):
        message = f"Database operation failed: {operation}"
        details = {"operation": operation, "reason": reason}
        super().__init__(message, details)


__all__ = [
    'InvoiceExtractionError',
    'InputError',
    'UnsupportedFileTypeError',
    'InputFileNotFoundError',
    'ExtractionError',
    'ConfigurationError',
    'OutputError',
    'DatabaseError',
]
