"""
Known Account Lookup Module.

Maps customer/account numbers of known utility accounts to their canonical
service address and utility type. A match is authoritative and overrides
whatever the bill text suggests.

The table is read from the YAML file named by ``paths.account_mapping``
once per process and is never modified afterwards.
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

import yaml

from config import get_config
from bill_extractor.utils.logger import get_logger
from bill_extractor.utils.exceptions import ConfigurationError
from .invoice_record import UtilityType

logger = get_logger(__name__)


@dataclass(frozen=True)
class AccountMapping:
    """One known account."""
    account_id: str
    canonical_address: str
    utility_type: UtilityType


class AccountTable:
    """
    Read-only lookup of known accounts by exact account id.

    Safe to share between concurrent extractions.

    Example:
        >>> table = get_account_table()
        >>> table.lookup("913531").canonical_address
        'KAYA WATERVILLAS 84-A'
    """

    def __init__(self, mappings: Iterable[AccountMapping] = ()) -> None:
        self._by_id = MappingProxyType({m.account_id: m for m in mappings})

    def lookup(self, account_id: Optional[str]) -> Optional[AccountMapping]:
        """Return the mapping for an exact account id, or None."""
        if not account_id:
            return None
        return self._by_id.get(account_id)

    def find_in_text(self, text: str) -> Optional[AccountMapping]:
        """
        Return the mapping of the first known account id printed in the text.

        Ids must appear as whole tokens.
        """
        if not text or not self._by_id:
            return None

        best = None
        for account_id, mapping in self._by_id.items():
            match = re.search(rf'(?<![A-Za-z0-9]){re.escape(account_id)}(?![A-Za-z0-9])', text)
            if match and (best is None or match.start() < best[0]):
                best = (match.start(), mapping)
        return best[1] if best else None

    def __contains__(self, account_id: object) -> bool:
        return account_id in self._by_id

    def __iter__(self) -> Iterator[AccountMapping]:
        return iter(self._by_id.values())

    def __len__(self) -> int:
        return len(self._by_id)

    @classmethod
    def from_records(cls, records: List[Dict[str, Any]]) -> 'AccountTable':
        """
        Build a table from plain dictionaries.

        Args:
            records: Items with account_id, address and utility_type keys.

        Raises:
            ConfigurationError: If a record is incomplete or has an
                unknown utility type.
        """
        mappings = []
        for index, record in enumerate(records or []):
            try:
                account_id = str(record['account_id']).strip()
                address = str(record['address']).strip()
                utility_type = UtilityType(str(record['utility_type']).strip().lower())
            except (KeyError, TypeError, ValueError) as e:
                raise ConfigurationError(f"accounts[{index}]", str(e))

            mappings.append(AccountMapping(account_id, address, utility_type))

        return cls(mappings)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> 'AccountTable':
        """
        Load a table from a YAML file with a top-level ``accounts`` list.

        Raises:
            ConfigurationError: If the file is missing or malformed.
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError("paths.account_mapping", f"File not found: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError("paths.account_mapping", str(e))

        table = cls.from_records(data.get('accounts', []))
        logger.debug(f"Loaded {len(table)} known accounts from {path}")
        return table


@lru_cache(maxsize=None)
def get_account_table() -> AccountTable:
    """
    Get the process-wide account table.

    Returns an empty table when no mapping file is configured.
    """
    path = get_config("paths.account_mapping")
    if not path:
        logger.warning("No account mapping configured; address override disabled")
        return AccountTable()
    return AccountTable.from_yaml(path)
