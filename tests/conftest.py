import logging
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from bill_extractor.extraction.account_mapping import AccountMapping, AccountTable  # noqa: E402
from bill_extractor.extraction.invoice_record import UtilityType  # noqa: E402
from bill_extractor.utils.logger import ROOT_LOGGER_NAME  # noqa: E402


@pytest.fixture
def account_table():
    return AccountTable([
        AccountMapping("913531", "KAYA WATERVILLAS 84-A", UtilityType.WATER),
        AccountMapping("031650", "KAYA WATERVILLAS 84-A", UtilityType.ELECTRICITY),
        AccountMapping("903340", "KAYA KUARTS 23", UtilityType.WATER),
    ])


@pytest.fixture
def empty_table():
    return AccountTable()


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
