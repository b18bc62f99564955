"""
Data Normalizers Module.

This module provides normalization helpers for:
    - Date parts and date strings (to YYYY-MM-DD)
    - Month names (English, matched on their first three letters)
    - Amount strings with decimal commas or thousand separators
"""

import re
from datetime import date, datetime
from typing import Optional, Sequence

from dateutil import parser as date_parser

from config import get_config
from bill_extractor.utils.logger import get_logger

logger = get_logger(__name__)


class DateNormalizer:
    """
    Normalizes dates to ISO format (YYYY-MM-DD).

    Two entry points are provided: from_parts() for the three captured
    groups of a bill date pattern, and normalize() for free-form strings
    such as dates typed in by a user.

    Example:
        >>> normalizer = DateNormalizer()
        >>> normalizer.from_parts(("30", "03", "2024"))
        "2024-03-30"
        >>> normalizer.from_parts(("March", "5", "2024"))
        "2024-03-05"
        >>> normalizer.normalize("15 april 2024")
        "2024-04-15"
    """

    MONTH_NAMES = [
        "january", "february", "march", "april", "may", "june", "july",
        "august", "september", "october", "november", "december"
    ]

    def __init__(self) -> None:
        self.output_format = get_config(
            "postprocessing.date.output_format",
            "%Y-%m-%d"
        )
        self.input_formats = get_config(
            "postprocessing.date.input_formats",
            [
                "%Y-%m-%d",
                "%d/%m/%Y",
                "%d-%m-%Y",
                "%d.%m.%Y",
                "%B %d, %Y",
                "%b %d, %Y",
                "%d %B %Y",
                "%d %b %Y",
            ]
        )

    def month_from_name(self, name: str) -> Optional[int]:
        """
        Resolve a month name by its first three letters.

        Args:
            name: Month word as found in the text ("Mar", "march", "MAART").

        Returns:
            Month number 1-12, or None if the word is not a month.
        """
        if not name or len(name) < 3 or not name[:3].isalpha():
            return None

        prefix = name[:3].lower()
        for index, month in enumerate(self.MONTH_NAMES):
            if month.startswith(prefix):
                return index + 1
        return None

    def to_iso(self, year: int, month: int, day: int) -> Optional[str]:
        """
        Build an ISO date, or None if it is not a real calendar date.
        """
        try:
            return date(year, month, day).isoformat()
        except (ValueError, TypeError):
            return None

    def from_parts(self, parts: Sequence[str]) -> Optional[str]:
        """
        Normalize the three groups captured by a bill date pattern.

        The layout is read from the groups themselves:
            - four-digit first group: (YYYY, MM, DD)
            - alphabetic first group: (Month, DD, YYYY)
            - otherwise: (DD, MM, YYYY)

        Args:
            parts: Three captured strings.

        Returns:
            Date as YYYY-MM-DD, or None if the parts do not form a date.
        """
        if len(parts) != 3 or not all(parts):
            return None

        first, second, third = (p.strip() for p in parts)

        try:
            if first.isdigit() and len(first) == 4:
                return self.to_iso(int(first), int(second), int(third))

            if not first.isdigit():
                month = self.month_from_name(first)
                if month is None:
                    return None
                return self.to_iso(int(third), month, int(second))

            return self.to_iso(int(third), int(second), int(first))
        except ValueError:
            return None

    def normalize(self, date_str: str) -> Optional[str]:
        """
        Normalize a free-form date string to the configured output format.

        Explicit formats are tried first, then dateutil with day-first
        parsing, since the bills are European.

        Args:
            date_str: Input date string.

        Returns:
            Normalized date string, or None if parsing fails.
        """
        if not date_str:
            return None

        date_str = ' '.join(date_str.split())
        date_str = re.sub(r'(\d+)(st|nd|rd|th)\b', r'\1', date_str, flags=re.IGNORECASE)

        parsed = None
        for fmt in self.input_formats:
            try:
                parsed = datetime.strptime(date_str, fmt)
                break
            except ValueError:
                continue

        if parsed is None:
            try:
                parsed = date_parser.parse(date_str, dayfirst=True, fuzzy=False)
            except (ValueError, OverflowError):
                logger.debug(f"Could not parse date: {date_str}")
                return None

        return parsed.strftime(self.output_format)

    def is_iso(self, date_str: str) -> bool:
        """Check whether a string already is a valid YYYY-MM-DD date."""
        try:
            datetime.strptime(date_str or '', "%Y-%m-%d")
            return True
        except ValueError:
            return False


class AmountNormalizer:
    """
    Normalizes amount strings to floats.

    Handles currency symbols, thousand separators and decimal commas.

    Example:
        >>> normalizer = AmountNormalizer()
        >>> normalizer.to_float("123,45")
        123.45
        >>> normalizer.to_float("€ 1.234,56")
        1234.56
        >>> normalizer.to_float("$1,234.56")
        1234.56
    """

    CURRENCY_SYMBOLS = ['$', '€', '£', 'ƒ', 'NAf', 'ANG', 'USD', 'EUR']

    def normalize(self, amount_str: str) -> Optional[str]:
        """
        Normalize an amount string to a dot-decimal string.

        Args:
            amount_str: Input amount string (e.g., "1.234,56").

        Returns:
            Normalized amount string (e.g., "1234.56") or None.
        """
        if not amount_str:
            return None

        for symbol in self.CURRENCY_SYMBOLS:
            amount_str = amount_str.replace(symbol, '')

        amount_str = re.sub(r'[^\d,.\-]', '', amount_str)
        if not amount_str:
            return None

        amount_str = self._handle_decimal_comma(amount_str)
        amount_str = amount_str.replace(',', '')

        try:
            float(amount_str)
        except ValueError:
            logger.debug(f"Could not parse amount: {amount_str}")
            return None
        return amount_str

    def _handle_decimal_comma(self, amount_str: str) -> str:
        """
        Convert a decimal comma into a decimal dot.

        A single comma that comes after the last dot and is followed by at
        most two digits is the decimal separator; dots before it are
        thousand separators.
        """
        if amount_str.count(',') == 0 and amount_str.count('.') > 1:
            return amount_str.replace('.', '')
        if amount_str.count(',') != 1:
            return amount_str

        comma_pos = amount_str.rfind(',')
        dot_pos = amount_str.rfind('.')
        after_comma = amount_str[comma_pos + 1:]

        if comma_pos > dot_pos and after_comma.isdigit() and len(after_comma) <= 2:
            amount_str = amount_str.replace('.', '').replace(',', '.')

        return amount_str

    def to_float(self, amount_str: str) -> Optional[float]:
        """
        Convert an amount string to float.

        Returns:
            Float value or None.
        """
        normalized = self.normalize(amount_str)
        if normalized is None:
            return None
        return float(normalized)
