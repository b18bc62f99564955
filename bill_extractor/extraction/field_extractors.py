"""
Bill Field Extractors Module.

Heuristic, text-only extraction of the header fields of a utility bill.
Each field is an ordered list of matchers over the raw text; the first
matcher that finds something wins, otherwise the field's default is
returned. None of the extractors raise on malformed input.

Label vocabularies cover the Dutch and English bills in use. Extra labels
are added through ``extraction.labels.<field>`` in settings.yaml.
"""

import re
from functools import partial
from typing import Callable, Dict, List, Optional, Pattern, Sequence

from config import get_config
from bill_extractor.utils.logger import get_logger
from bill_extractor.utils.helpers import collapse_whitespace, strip_pdf_suffix
from bill_extractor.postprocessor.normalizers import AmountNormalizer, DateNormalizer
from .account_mapping import AccountTable, get_account_table
from .invoice_record import UtilityType

logger = get_logger(__name__)

Matcher = Callable[[str], Optional[str]]

# Three date layouts, tried in this order.
DATE_FORMS = (
    r'(\d{1,2})[/-](\d{1,2})[/-](\d{4})',            # DD/MM/YYYY
    r'(\d{4})[/-](\d{1,2})[/-](\d{1,2})',            # YYYY-MM-DD
    r'([A-Za-z]+)\s+(\d{1,2})(?:st|nd|rd|th)?[,\s]+(\d{4})',  # Month DD, YYYY
)

NUMBER = r'\d+(?:[.,]\d+)*'
CURRENCY = r'[€£$]'

# Invoice numbers must contain a digit so that words like "Date" never match.
INVOICE_TOKEN = r'((?=[A-Z/-]*\d)[A-Z0-9][A-Z0-9/-]*)'
CUSTOMER_TOKEN = r'([A-Z0-9][A-Z0-9-]*)'

DEFAULT_LABELS: Dict[str, List[str]] = {
    'customer_number': [
        'klantnummer',
        'customer number',
        'account number',
        'account #',
        'client number',
        'reference number',
    ],
    'invoice_number': [
        'Factuurnummer',
        'Factuur nummer',
        'FACTUUR NR',
        'Invoice number',
        'Invoice no',
        'Invoice #',
        'Bill number',
        'Invoice reference',
        'FACTUUR',
        'INV',
        'INVOICE',
    ],
    'address': [
        'LEVERINGSADRES',
        'FACTUUR ADRES',
        'ADRESSE',
        'ADRES',
        'delivery address',
        'billing address',
        'service address',
        'property address',
    ],
    'invoice_date': [
        'FACTUUR DATUM',
        'Invoice Date',
        'Datum',
    ],
    'due_date': [
        'Verval Datum',
        'Due Date',
        'Betaal voor',
        'Payment is due',
        'Payment due',
        'Pay before',
        'Pay by',
    ],
    'amount': [
        'TE BETALEN',
        'Totaal',
        'Total Amount',
        'Total Due',
        'Total invoice',
        'TOTAL',
        'Amount due',
        'Pay this amount',
        'To pay',
    ],
}

DEFAULT_UTILITY_KEYWORDS: Dict[str, List[str]] = {
    'water': [
        'water', 'm3', 'cubic meter', 'tap water', 'drinking water',
        'water utility', 'water bill', 'water supply',
    ],
    'electricity': [
        'electricity', 'kwh', 'kilowatt', 'power', 'electric', 'energy',
        'electric bill', 'power supply',
    ],
}

STREET_SUFFIXES = (
    'street', 'st', 'avenue', 'ave', 'road', 'rd', 'lane', 'ln', 'drive',
    'dr', 'boulevard', 'blvd', 'way', 'place', 'pl',
)

# Longer lines are running text, not a street address.
MAX_ADDRESS_LINE = 200

PAYMENT_KEYWORDS = re.compile(r'total|amount|due|pay|betalen|payment', re.IGNORECASE)
BARE_DATE = re.compile(r'\d{1,4}[/-]\d{1,2}[/-]\d{1,4}')


def label_regex(label: str) -> str:
    """Regex for a label; words may be separated by any whitespace."""
    return r'\s+'.join(re.escape(word) for word in label.split())


def first_match(matchers: Sequence[Matcher], text: str) -> Optional[str]:
    """Run matchers in order and return the first non-empty result."""
    for matcher in matchers:
        value = matcher(text)
        if value:
            return value
    return None


def clean_token(token: str) -> str:
    """Strip whitespace and stray punctuation from a captured token."""
    return token.strip().strip(':.,;/-').strip()


class FieldExtractor:
    """
    Extracts individual bill fields from raw PDF text.

    All patterns are compiled once at construction; the instance keeps no
    per-call state and can be shared between threads.

    Attributes:
        labels: Label vocabulary per field
        utility_keywords: Keyword sets used for the utility vote
        layout_markers: Headings an invoice number is printed in front of
        account_table: Known accounts used by the address extractor

    Example:
        >>> extractor = FieldExtractor()
        >>> extractor.extract_invoice_date("FACTUUR DATUM: 30/03/2024")
        '2024-03-30'
        >>> extractor.extract_amount("TE BETALEN: 123,45")
        123.45
    """

    def __init__(
        self,
        labels: Optional[Dict[str, List[str]]] = None,
        utility_keywords: Optional[Dict[str, List[str]]] = None,
        layout_markers: Optional[List[str]] = None,
        account_table: Optional[AccountTable] = None
    ) -> None:
        """
        Initialize the extractor.

        Args:
            labels: Per-field label lists. Missing fields use config, then
                the built-in vocabulary.
            utility_keywords: 'water' and 'electricity' keyword lists.
            layout_markers: Headings for the layout-based invoice number.
            account_table: Known accounts. Defaults to the configured table.
        """
        configured = get_config("extraction.labels", {}) or {}
        self.labels = {
            field: list((labels or {}).get(field) or configured.get(field) or default)
            for field, default in DEFAULT_LABELS.items()
        }

        keywords = utility_keywords or get_config("extraction.utility_keywords", {}) or {}
        self.utility_keywords = {
            kind: [k.lower() for k in (keywords.get(kind) or default)]
            for kind, default in DEFAULT_UTILITY_KEYWORDS.items()
        }

        if layout_markers is None:
            layout_markers = get_config(
                "extraction.invoice_number.layout_markers",
                ["Factuur/Invoice"]
            ) or []
        self.layout_markers = list(layout_markers)

        self.account_table = account_table if account_table is not None else get_account_table()

        self.date_normalizer = DateNormalizer()
        self.amount_normalizer = AmountNormalizer()

        self._compile_patterns()

        logger.debug(
            "FieldExtractor initialized "
            f"({sum(len(v) for v in self.labels.values())} labels)"
        )

    def _compile_patterns(self) -> None:
        """Build the ordered matcher lists for every field."""
        flags = re.IGNORECASE

        # Customer number
        self._customer_steps: List[Matcher] = [
            partial(self._search, re.compile(
                rf'\b{label_regex(label)}(?![A-Za-z])[\s:#.]*{CUSTOMER_TOKEN}', flags))
            for label in self.labels['customer_number']
        ]
        self._customer_steps += [
            partial(self._search, re.compile(pattern, flags))
            for pattern in (
                r'\b([A-Z]{2,3}[0-9]{4,})\b',
                r'\b([A-Z][0-9]{5,})\b',
                r'\b([0-9]{5,}[A-Z])\b',
            )
        ]

        # Invoice number
        self._invoice_steps: List[Matcher] = [
            partial(self._search, re.compile(
                rf'\b{INVOICE_TOKEN}[ \t]+{label_regex(marker)}', flags))
            for marker in self.layout_markers
        ]
        self._invoice_steps += [
            partial(self._search, re.compile(
                rf'\b{label_regex(label)}(?![A-Za-z])[\s:#.]*{INVOICE_TOKEN}', flags))
            for label in self.labels['invoice_number']
        ]
        self._invoice_steps += [
            partial(self._search, re.compile(r'\b(INV-[A-Z0-9-]+)\b', flags)),
            partial(self._search, re.compile(r'\b([A-Z]{2,}-[0-9]{4,})\b', flags)),
            partial(self._search, re.compile(r'\b(F(?=[A-Z]*\d)[A-Z0-9]{5,})\b')),
        ]

        # Address
        self._address_steps: List[Matcher] = [
            partial(self._search, re.compile(
                rf'\b{label_regex(label)}[:\s]+(\S+\s+\S+)', flags))
            for label in self.labels['address']
        ]
        self._address_steps.append(self._scan_address_lines)
        self._address_steps.append(
            partial(self._search, re.compile(r'(\d+[ \t]+[A-Za-z][A-Za-z .]*,[ \t]*[A-Za-z][A-Za-z ]*)'))
        )
        # Lines are whitespace-collapsed before matching, so words are
        # separated by exactly one space.
        suffixes = '|'.join(STREET_SUFFIXES)
        self._address_line_patterns: List[Pattern] = [
            re.compile(rf'\d+ (?:[A-Za-z]+ )+(?:{suffixes})\b', flags),
            re.compile(r'\b[A-Za-z]+(?: [A-Za-z]+)* \d+\b.*\b(?-i:[A-Z]{2})\b.*\b\d{5}\b', flags),
            re.compile(r'\b\d{1,5} [A-Za-z]+(?: [A-Za-z]+)*\b.*\b(?-i:[A-Z]{2})\b', flags),
        ]

        # Dates. A "Datum" that belongs to "Verval Datum" is not an invoice date.
        invoice_labels = '|'.join(label_regex(l) for l in self.labels['invoice_date'])
        due_labels = '|'.join(label_regex(l) for l in self.labels['due_date'])
        self._invoice_date_steps: List[Matcher] = [
            partial(self._search_date, re.compile(
                rf'(?<!verval\s)\b(?:{invoice_labels})[:\s]+{form}', flags))
            for form in DATE_FORMS
        ]
        self._invoice_date_steps += [
            partial(self._search_date, re.compile(rf'\b{form}\b', flags))
            for form in DATE_FORMS
        ]
        self._due_date_steps: List[Matcher] = [
            partial(self._search_date, re.compile(
                rf'\b(?:{due_labels})[:\s]+{form}', flags))
            for form in DATE_FORMS
        ]

        # Amount
        amount_labels = '|'.join(label_regex(l) for l in self.labels['amount'])
        self._amount_patterns: List[Pattern] = [
            re.compile(rf'\b(?:{amount_labels})[:\s]+{CURRENCY}?\s*({NUMBER})', flags),
            re.compile(rf'{CURRENCY}?\s*({NUMBER})[:\s]+total\b', flags),
            re.compile(rf'\bAmount[:\s]+{CURRENCY}?\s*({NUMBER})', flags),
            re.compile(rf'{CURRENCY}\s*({NUMBER})', flags),
        ]

    # ------------------------------------------------------------------
    # Matchers
    # ------------------------------------------------------------------

    @staticmethod
    def _search(pattern: Pattern, text: str) -> Optional[str]:
        match = pattern.search(text)
        if match:
            value = clean_token(match.group(1))
            return value or None
        return None

    def _search_date(self, pattern: Pattern, text: str) -> Optional[str]:
        for match in pattern.finditer(text):
            normalized = self.date_normalizer.from_parts(match.groups())
            if normalized:
                return normalized
        return None

    def _scan_address_lines(self, text: str) -> Optional[str]:
        for line in text.split('\n'):
            line = collapse_whitespace(line)
            if not line or len(line) > MAX_ADDRESS_LINE:
                continue
            for pattern in self._address_line_patterns:
                if pattern.search(line):
                    return line
        return None

    # ------------------------------------------------------------------
    # Field extractors
    # ------------------------------------------------------------------

    def extract_customer_number(self, file_name: str, text: str) -> str:
        """
        Extract the customer number.

        A filename made only of letters, digits and hyphens is taken as
        the customer number. Otherwise labeled numbers, then ID-shaped
        tokens in the text are used, then the filename itself.

        Args:
            file_name: Original filename of the PDF.
            text: Raw bill text.

        Returns:
            Customer number; "Unknown" if nothing at all is available.
        """
        file_name = file_name if isinstance(file_name, str) else ''
        text = text if isinstance(text, str) else ''

        stem = strip_pdf_suffix(file_name)
        if re.fullmatch(r'[A-Za-z0-9-]+', stem):
            return stem

        found = first_match(self._customer_steps, text)
        if found:
            return found

        return stem.strip() or "Unknown"

    def extract_invoice_number(self, text: str) -> str:
        """
        Extract the invoice number.

        Returns:
            The invoice number, or "" if none is found.
        """
        text = text if isinstance(text, str) else ''
        return first_match(self._invoice_steps, text) or ""

    def extract_address(self, text: str, customer_number: Optional[str] = None) -> str:
        """
        Extract the service address.

        A customer number known to the account table returns its canonical
        address without looking at the text. Otherwise labeled addresses,
        street-like lines and finally a loose "number street, town" shape
        are tried.

        Args:
            text: Raw bill text.
            customer_number: Customer number found for this bill.

        Returns:
            The address, or "" if none is found.
        """
        mapping = self.account_table.lookup(customer_number)
        if mapping is not None:
            return mapping.canonical_address

        text = text if isinstance(text, str) else ''
        found = first_match(self._address_steps, text)
        return collapse_whitespace(found) if found else ""

    def extract_invoice_date(self, text: str) -> str:
        """
        Extract the invoice date as YYYY-MM-DD.

        Labeled dates are preferred; otherwise the first date anywhere in
        the text is used.

        Returns:
            ISO date, or "" if no date is found.
        """
        text = text if isinstance(text, str) else ''
        return first_match(self._invoice_date_steps, text) or ""

    def extract_due_date(self, text: str) -> str:
        """
        Extract the due date as YYYY-MM-DD.

        Only labeled dates count; there is no fallback to arbitrary dates.

        Returns:
            ISO date, or "" if no labeled due date is found.
        """
        text = text if isinstance(text, str) else ''
        return first_match(self._due_date_steps, text) or ""

    def extract_amount(self, text: str) -> float:
        """
        Extract the amount due.

        Labeled totals are tried first. Failing that, the largest number on
        any line mentioning a payment keyword is used.

        Returns:
            Amount as float, 0.0 if none is found.
        """
        text = text if isinstance(text, str) else ''

        for pattern in self._amount_patterns:
            match = pattern.search(text)
            if match:
                value = self.amount_normalizer.to_float(match.group(1))
                if value is not None:
                    return value

        largest = 0.0
        for line in text.split('\n'):
            if not PAYMENT_KEYWORDS.search(line):
                continue
            for number in re.findall(NUMBER, BARE_DATE.sub(' ', line)):
                value = self.amount_normalizer.to_float(number)
                if value is not None and value > largest:
                    largest = value

        return largest

    def detect_utility_type(self, text: str) -> UtilityType:
        """
        Decide between water and electricity by keyword vote.

        Occurrences of every keyword are counted case-insensitively.
        Electricity wins only with strictly more hits; ties and bills
        without any keyword are water.
        """
        lower = text.lower() if isinstance(text, str) else ''

        water = sum(lower.count(k) for k in self.utility_keywords['water'])
        electricity = sum(lower.count(k) for k in self.utility_keywords['electricity'])

        logger.debug(f"Utility vote: water={water}, electricity={electricity}")

        if electricity > water:
            return UtilityType.ELECTRICITY
        return UtilityType.WATER
