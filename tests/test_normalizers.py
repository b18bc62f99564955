import pytest

from bill_extractor.postprocessor.normalizers import AmountNormalizer, DateNormalizer


@pytest.fixture
def dates():
    return DateNormalizer()


def test_from_parts_reads_layout_from_groups(dates):
    assert dates.from_parts(("30", "03", "2024")) == "2024-03-30"
    assert dates.from_parts(("2024", "3", "5")) == "2024-03-05"
    assert dates.from_parts(("Mar", "5", "2024")) == "2024-03-05"
    assert dates.from_parts(("september", "12", "2023")) == "2023-09-12"


def test_from_parts_rejects_non_dates(dates):
    assert dates.from_parts(("31", "02", "2024")) is None
    assert dates.from_parts(("Usage", "12", "2024")) is None
    assert dates.from_parts(("1", "2")) is None
    assert dates.from_parts(("", "2", "2024")) is None


def test_month_from_name(dates):
    assert dates.month_from_name("JAN") == 1
    assert dates.month_from_name("December") == 12
    assert dates.month_from_name("Ma") is None
    assert dates.month_from_name("Xyz") is None


def test_normalize_free_form_dates(dates):
    assert dates.normalize("15 april 2024") == "2024-04-15"
    assert dates.normalize("05/04/2024") == "2024-04-05"
    assert dates.normalize("March 1st, 2024") == "2024-03-01"
    assert dates.normalize("not a date") is None
    assert dates.normalize("") is None


def test_is_iso(dates):
    assert dates.is_iso("2024-03-30")
    assert not dates.is_iso("30/03/2024")
    assert not dates.is_iso("")


def test_amounts():
    amounts = AmountNormalizer()
    assert amounts.to_float("123,45") == pytest.approx(123.45)
    assert amounts.to_float("1.234,56") == pytest.approx(1234.56)
    assert amounts.to_float("$1,234.56") == pytest.approx(1234.56)
    assert amounts.to_float("1.234.567") == pytest.approx(1234567.0)
    assert amounts.to_float("€ 99") == pytest.approx(99.0)
    assert amounts.to_float("abc") is None
    assert amounts.to_float("") is None
