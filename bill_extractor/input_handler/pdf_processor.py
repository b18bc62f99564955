"""
PDF Text Extraction Module.

This module turns a PDF payload into the plain text the field extractors
work on:
    - Page-by-page text extraction, document order preserved
    - Pages joined with newlines into a single text blob
    - Any failure to read the document reported as ExtractionError

Uses pdfplumber by default, with PyMuPDF as an alternative backend.
"""

import io
from typing import List, Optional

from config import get_config
from bill_extractor.utils.logger import get_logger
from bill_extractor.utils.exceptions import ConfigurationError, ExtractionError

logger = get_logger(__name__)


class PDFTextExtractor:
    """
    Extracts the text content of a PDF held in memory.

    The extractor is built once at startup and handed to the
    InvoiceExtractor; it holds no per-document state, so one instance
    can serve any number of uploads.

    Attributes:
        backend: Name of the preferred backend ('pdfplumber' or 'pymupdf')
        max_pages: Maximum number of pages to read (0 reads all pages)

    Example:
        >>> extractor = PDFTextExtractor()
        >>> text = extractor.extract_text(pdf_bytes, "913531.pdf")
        >>> print(text.splitlines()[0])
    """

    BACKENDS = ('pdfplumber', 'pymupdf')

    def __init__(
        self,
        backend: Optional[str] = None,
        max_pages: Optional[int] = None
    ) -> None:
        """
        Initialize the text extractor with configuration.

        Args:
            backend: Preferred backend. If None, uses config.
            max_pages: Page limit. If None, uses config.

        Raises:
            ConfigurationError: If the backend name is not recognized.
        """
        self.backend = (backend or get_config("input.pdf.backend", "pdfplumber")).lower()
        if self.backend not in self.BACKENDS:
            raise ConfigurationError(
                "input.pdf.backend",
                f"expected one of {self.BACKENDS}, got '{self.backend}'"
            )

        if max_pages is None:
            max_pages = get_config("input.pdf.max_pages", 0)
        self.max_pages = int(max_pages or 0)

        self._check_dependencies()

        logger.debug(
            f"PDFTextExtractor initialized (backend={self.backend}, "
            f"max_pages={self.max_pages or 'all'})"
        )

    def _check_dependencies(self) -> None:
        """Look up which PDF libraries are installed."""
        try:
            import pdfplumber
            self._pdfplumber = pdfplumber
        except ImportError:
            logger.debug("pdfplumber not available.")
            self._pdfplumber = None

        try:
            import fitz  # PyMuPDF
            self._pymupdf = fitz
        except ImportError:
            logger.debug("PyMuPDF not available.")
            self._pymupdf = None

    def extract_text(self, data: bytes, file_name: str = "<upload>") -> str:
        """
        Extract the concatenated text of every page.

        Args:
            data: Raw PDF bytes.
            file_name: Name used in log and error messages.

        Returns:
            Page texts in document order, joined with newlines.

        Raises:
            ExtractionError: If the document cannot be read.
        """
        if not data:
            raise ExtractionError(file_name, "File is empty")

        pages = self._read_pages(data, file_name)
        text = "\n".join(pages)

        logger.debug(
            f"Extracted {len(text)} characters from {len(pages)} page(s) of {file_name}"
        )
        return text

    def _read_pages(self, data: bytes, file_name: str) -> List[str]:
        use_pymupdf = self.backend == 'pymupdf' and self._pymupdf is not None
        if self._pdfplumber is None and self._pymupdf is not None:
            use_pymupdf = True

        if use_pymupdf:
            return self._extract_with_pymupdf(data, file_name)
        if self._pdfplumber is not None:
            return self._extract_with_pdfplumber(data, file_name)

        raise ExtractionError(
            file_name,
            "No PDF library available. Install pdfplumber or PyMuPDF."
        )

    def _limit(self, pages: list) -> list:
        if self.max_pages and len(pages) > self.max_pages:
            logger.warning(
                f"PDF has {len(pages)} pages, limiting to {self.max_pages}"
            )
            return pages[:self.max_pages]
        return pages

    def _extract_with_pdfplumber(self, data: bytes, file_name: str) -> List[str]:
        """
        Read page texts with pdfplumber.

        Args:
            data: Raw PDF bytes.
            file_name: Name used in error messages.

        Returns:
            List of page texts.
        """
        logger.debug("Using pdfplumber for text extraction")

        try:
            with self._pdfplumber.open(io.BytesIO(data)) as pdf:
                return [page.extract_text() or '' for page in self._limit(list(pdf.pages))]
        except Exception as e:
            logger.error(f"pdfplumber could not read {file_name}: {e}")
            raise ExtractionError(file_name, str(e))

    def _extract_with_pymupdf(self, data: bytes, file_name: str) -> List[str]:
        """
        Read page texts with PyMuPDF.

        Args:
            data: Raw PDF bytes.
            file_name: Name used in error messages.

        Returns:
            List of page texts.
        """
        logger.debug("Using PyMuPDF for text extraction")

        try:
            doc = self._pymupdf.open(stream=data, filetype="pdf")
        except Exception as e:
            logger.error(f"PyMuPDF could not open {file_name}: {e}")
            raise ExtractionError(file_name, str(e))

        try:
            if getattr(doc, 'needs_pass', False):
                raise ExtractionError(file_name, "Document is encrypted")

            page_numbers = self._limit(list(range(len(doc))))
            return [doc.load_page(n).get_text("text") or '' for n in page_numbers]
        except ExtractionError:
            raise
        except Exception as e:
            logger.error(f"PyMuPDF could not read {file_name}: {e}")
            raise ExtractionError(file_name, str(e))
        finally:
            doc.close()
