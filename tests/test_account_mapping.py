import pytest

from bill_extractor.extraction.account_mapping import (
    AccountTable,
    get_account_table,
)
from bill_extractor.extraction.invoice_record import UtilityType
from bill_extractor.utils.exceptions import ConfigurationError


def test_lookup_is_exact(account_table):
    assert account_table.lookup("913531").canonical_address == "KAYA WATERVILLAS 84-A"
    assert account_table.lookup("91353") is None
    assert account_table.lookup("") is None
    assert account_table.lookup(None) is None
    assert "031650" in account_table
    assert len(account_table) == 3


def test_find_in_text_returns_earliest_whole_token(account_table):
    text = "Meter 9135310 ... Klant 903340 ... Ref 031650"
    mapping = account_table.find_in_text(text)
    assert mapping.account_id == "903340"
    assert account_table.find_in_text("no ids") is None
    assert AccountTable().find_in_text("903340") is None


def test_from_records_and_errors():
    table = AccountTable.from_records([
        {"account_id": 22379, "address": " KAYA KUARTS 23 ", "utility_type": "Electricity"},
    ])
    mapping = table.lookup("22379")
    assert mapping.canonical_address == "KAYA KUARTS 23"
    assert mapping.utility_type is UtilityType.ELECTRICITY

    with pytest.raises(ConfigurationError):
        AccountTable.from_records([{"account_id": "1", "address": "X", "utility_type": "gas"}])
    with pytest.raises(ConfigurationError):
        AccountTable.from_records([{"account_id": "1"}])


def test_from_yaml(tmp_path):
    path = tmp_path / "accounts.yaml"
    path.write_text(
        'accounts:\n  - account_id: "000123"\n    address: Main 1\n    utility_type: water\n',
        encoding="utf-8",
    )
    table = AccountTable.from_yaml(path)
    assert table.lookup("000123").utility_type is UtilityType.WATER

    with pytest.raises(ConfigurationError):
        AccountTable.from_yaml(tmp_path / "missing.yaml")


def test_configured_table_is_loaded_once():
    table = get_account_table()
    assert table is get_account_table()
    assert len(table) == 6
    assert table.lookup("031650").utility_type is UtilityType.ELECTRICITY
    assert table.lookup("903340").canonical_address == "KAYA KUARTS 23"
    assert [m.account_id for m in table][:2] == ["031650", "913531"]
