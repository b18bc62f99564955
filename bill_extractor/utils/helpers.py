"""
Helper Utilities Module.

Small, generic helpers shared across the bill extractor.

Functions:
    - ensure_directory: Create directory if it doesn't exist
    - get_file_extension: Extract file extension safely
    - strip_pdf_suffix: Drop a trailing ".pdf" from a filename
    - collapse_whitespace: Normalize runs of whitespace
"""

import re
from pathlib import Path
from typing import Union


_PDF_SUFFIX = re.compile(r'\.pdf$', re.IGNORECASE)


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists, creating it and its parents if necessary.

    Args:
        path: Directory path to ensure exists.

    Returns:
        Path object pointing to the directory.

    Example:
        >>> ensure_directory("outputs/reports")
        PosixPath('outputs/reports')
    """
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def get_file_extension(filepath: Union[str, Path]) -> str:
    """
    Extract the lowercase file extension (including the dot).

    Example:
        >>> get_file_extension("bill.PDF")
        ".pdf"
        >>> get_file_extension("noextension")
        ""
    """
    return Path(filepath).suffix.lower()


def strip_pdf_suffix(file_name: str) -> str:
    """
    Remove a case-insensitive ".pdf" suffix from a filename.

    Example:
        >>> strip_pdf_suffix("913531.PDF")
        "913531"
    """
    return _PDF_SUFFIX.sub('', file_name or '')


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace into single spaces and strip the ends."""
    return ' '.join((text or '').split())
