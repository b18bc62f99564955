from datetime import date

import pytest

from bill_extractor.extraction.invoice_record import PartialInvoiceRecord
from bill_extractor.postprocessor.processor import PostProcessor
from bill_extractor.postprocessor.validators import AmountValidator, DateValidator

TODAY = date(2024, 5, 1)


def make_record(**overrides):
    values = dict(
        file_name="913531.pdf",
        customer_number="913531",
        invoice_number="INV-1",
        address="KAYA WATERVILLAS 84-A",
        invoice_date="2024-03-30",
        due_date="2024-04-15",
        amount=150.0,
    )
    values.update(overrides)
    return PartialInvoiceRecord(**values)


def test_process_fills_default_dates():
    record = make_record(invoice_date="", due_date="")
    processed = PostProcessor(apply_defaults=True).process(record, today=TODAY)

    assert processed.invoice_date == "2024-05-01"
    assert processed.due_date == "2024-05-15"
    assert record.invoice_date == ""


def test_process_without_defaults_keeps_empty_dates():
    record = make_record(invoice_date="", due_date="")
    processed = PostProcessor(apply_defaults=False).process(record, today=TODAY)

    assert processed.invoice_date == ""
    assert processed.due_date == ""


def test_process_normalizes_corrected_values():
    record = make_record(
        invoice_date="15 april 2024",
        due_date="someday",
        customer_number=" 9135 31 ",
        address="KAYA   WATERVILLAS\n84-A",
    )
    processed = PostProcessor(apply_defaults=True).process(record, today=TODAY)

    assert processed.invoice_date == "2024-04-15"
    assert processed.due_date == "someday"
    assert processed.customer_number == "9135 31"
    assert processed.address == "KAYA WATERVILLAS 84-A"


def test_validate_reports_problems_without_raising():
    processor = PostProcessor(apply_defaults=False)

    result = processor.validate(make_record())
    assert result.is_valid
    assert result.warnings == []

    result = processor.validate(make_record(invoice_number="", amount=0.0))
    assert not result.is_valid
    assert result.missing_fields == ["invoice_number", "amount"]

    result = processor.validate(make_record(due_date="2024-03-01", amount=-3.0))
    assert result.is_valid
    assert "Due date is before invoice date" in result.warnings
    assert any(w.startswith("amount:") for w in result.warnings)

    result = processor.validate(make_record(due_date="someday"))
    assert any(w.startswith("due_date:") for w in result.warnings)
    assert result.to_dict()["is_valid"]


@pytest.mark.parametrize("value, expected", [
    ("2024-03-30", True),
    ("30/03/2024", False),
    ("1999-01-01", False),
    ("", False),
])
def test_date_validator(value, expected):
    assert DateValidator().validate(value)[0] is expected


def test_amount_validator():
    validator = AmountValidator()
    assert validator.validate(10.5)[0]
    assert not validator.validate(-1)[0]
    assert not validator.validate("abc")[0]
