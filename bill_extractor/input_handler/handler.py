"""
Main Input Handler Module.

This module provides the InputHandler class that validates bill files on
disk and loads them into memory for extraction.

Usage:
    from bill_extractor.input_handler import InputHandler

    handler = InputHandler()
    upload = handler.load("bills/913531.pdf")

    # Collect every PDF in a directory
    paths = handler.list_files("./bills/")

Classes:
    UploadedFile: In-memory bill file (name + bytes)
    InputHandler: Validation and loading of bill files
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from config import get_config
from bill_extractor.utils.logger import get_logger
from bill_extractor.utils.helpers import get_file_extension
from bill_extractor.utils.exceptions import (
    InputError,
    UnsupportedFileTypeError,
    InputFileNotFoundError,
    ExtractionError
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class UploadedFile:
    """
    A bill file held in memory.

    Attributes:
        file_name: Original filename, kept on the extracted record
        data: Raw file bytes
        filepath: Path the file was read from, if any
    """
    file_name: str
    data: bytes
    filepath: Optional[str] = None

    def __repr__(self) -> str:
        return f"UploadedFile(file_name='{self.file_name}', size={len(self.data)})"


class InputHandler:
    """
    Input handler for bill files.

    Validates paths and reads PDFs into UploadedFile objects. Errors are
    raised rather than swallowed so that callers can report them per file.

    Attributes:
        supported_extensions: Set of supported file extensions

    Example:
        >>> handler = InputHandler()
        >>> for path in handler.list_files("./bills/"):
        ...     upload = handler.load(path)
    """

    PDF_EXTENSIONS = {'.pdf'}

    def __init__(self) -> None:
        """Initialize the InputHandler from configuration."""
        self.supported_extensions = {
            ext.lower()
            for ext in get_config("input.supported_extensions", list(self.PDF_EXTENSIONS))
        }
        logger.debug(f"InputHandler initialized with extensions: {self.supported_extensions}")

    def validate_file(self, filepath: Union[str, Path]) -> Path:
        """
        Validate that a file exists, is supported and is not empty.

        Args:
            filepath: Path to the file to validate.

        Returns:
            Path object pointing to the validated file.

        Raises:
            InputFileNotFoundError: If file doesn't exist.
            InputError: If the path is not a regular file.
            UnsupportedFileTypeError: If file type is not supported.
            ExtractionError: If the file is empty.
        """
        path = Path(filepath)

        if not path.exists():
            raise InputFileNotFoundError(str(filepath))

        if not path.is_file():
            raise InputError(f"Path is not a file: {filepath}")

        extension = get_file_extension(path)
        if extension not in self.supported_extensions:
            raise UnsupportedFileTypeError(extension, sorted(self.supported_extensions))

        if path.stat().st_size == 0:
            raise ExtractionError(path.name, "File is empty")

        return path

    def load(self, filepath: Union[str, Path]) -> UploadedFile:
        """
        Validate and read a bill file.

        Args:
            filepath: Path to the bill.

        Returns:
            UploadedFile with the file's name and bytes.
        """
        path = self.validate_file(filepath)
        logger.info(f"Loading file: {path.name}")
        return UploadedFile(file_name=path.name, data=path.read_bytes(), filepath=str(path))

    def list_files(
        self,
        directory: Union[str, Path],
        recursive: bool = False
    ) -> List[Path]:
        """
        Collect all supported files in a directory.

        Args:
            directory: Directory containing bill files.
            recursive: Whether to search subdirectories.

        Returns:
            Sorted list of matching file paths.
        """
        directory = Path(directory)

        if not directory.exists():
            raise InputFileNotFoundError(str(directory))

        if not directory.is_dir():
            raise InputError(f"Path is not a directory: {directory}")

        pattern = "**/*" if recursive else "*"
        files = [
            path for path in directory.glob(pattern)
            if path.is_file() and get_file_extension(path) in self.supported_extensions
        ]
        files = sorted(set(files))

        logger.info(f"Found {len(files)} files to process in {directory}")
        return files
