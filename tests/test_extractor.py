import json
from types import SimpleNamespace

import pytest

from bill_extractor.extraction.extractor import InvoiceExtractor
from bill_extractor.extraction.invoice_record import PartialInvoiceRecord, UtilityType
from bill_extractor.utils.exceptions import ExtractionError, InputFileNotFoundError

BILL_TEXT = (
    "Aqualectra\n"
    "Factuurnummer: INV-2024-001\n"
    "FACTUUR DATUM: 30/03/2024\n"
    "Verval Datum: 15/04/2024\n"
    "ADRES: Kaya Grandi 12\n"
    "Verbruik 320 kWh, vorige 290 kWh\n"
    "TE BETALEN: 123,45\n"
)


def fake_text_extractor(text):
    return SimpleNamespace(extract_text=lambda data, file_name: text)


def test_extract_assembles_record(empty_table):
    extractor = InvoiceExtractor(fake_text_extractor(BILL_TEXT), account_table=empty_table)
    record = extractor.extract(b"%PDF", "123456.pdf")

    assert record == PartialInvoiceRecord(
        file_name="123456.pdf",
        customer_number="123456",
        invoice_number="INV-2024-001",
        address="Kaya Grandi",
        invoice_date="2024-03-30",
        due_date="2024-04-15",
        amount=123.45,
        utility_type=UtilityType.ELECTRICITY,
        is_paid=False,
    )


def test_known_account_overrides_address_and_type(account_table):
    extractor = InvoiceExtractor(fake_text_extractor(BILL_TEXT), account_table=account_table)
    record = extractor.extract(b"%PDF", "913531.pdf")

    assert record.address == "KAYA WATERVILLAS 84-A"
    assert record.utility_type is UtilityType.WATER


def test_account_id_in_text_is_used_when_customer_number_unknown(account_table):
    text = "Meter 903340\nTotal 55.00\nkWh kWh"
    extractor = InvoiceExtractor(fake_text_extractor(text), account_table=account_table)
    record = extractor.extract(b"%PDF", "scan 01.pdf")

    assert record.customer_number == "scan 01"
    assert record.address == "KAYA KUARTS 23"
    assert record.utility_type is UtilityType.WATER


def test_extract_is_repeatable(account_table):
    extractor = InvoiceExtractor(fake_text_extractor(BILL_TEXT), account_table=account_table)
    assert extractor.extract(b"%PDF", "031650.pdf") == extractor.extract(b"%PDF", "031650.pdf")


def test_empty_text_gives_defaults(empty_table):
    extractor = InvoiceExtractor(fake_text_extractor(""), account_table=empty_table)
    record = extractor.extract(b"%PDF", "scan.pdf")

    assert record.customer_number == "scan"
    assert record.invoice_number == ""
    assert record.amount == 0.0
    assert record.utility_type is UtilityType.WATER
    assert record.missing_fields == [
        "invoice_number", "address", "invoice_date", "due_date", "amount",
    ]


def test_extraction_errors_propagate(empty_table):
    def broken(data, file_name):
        raise ExtractionError(file_name, "Document is encrypted")

    extractor = InvoiceExtractor(SimpleNamespace(extract_text=broken), account_table=empty_table)
    with pytest.raises(ExtractionError) as excinfo:
        extractor.extract(b"%PDF", "locked.pdf")
    assert excinfo.value.details["reason"] == "Document is encrypted"


def test_unexpected_errors_are_wrapped(empty_table):
    def broken(data, file_name):
        raise RuntimeError("boom")

    extractor = InvoiceExtractor(SimpleNamespace(extract_text=broken), account_table=empty_table)
    with pytest.raises(ExtractionError) as excinfo:
        extractor.extract(b"%PDF", "bad.pdf")
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert excinfo.value.details["file_name"] == "bad.pdf"


def test_extract_file_reads_from_disk(tmp_path, empty_table):
    seen = {}

    def capture(data, file_name):
        seen["data"] = data
        seen["file_name"] = file_name
        return "TE BETALEN: 10,00"

    path = tmp_path / "700001.pdf"
    path.write_bytes(b"%PDF-1.4 fake")
    extractor = InvoiceExtractor(SimpleNamespace(extract_text=capture), account_table=empty_table)

    record = extractor.extract_file(path)
    assert seen == {"data": b"%PDF-1.4 fake", "file_name": "700001.pdf"}
    assert record.amount == pytest.approx(10.0)

    with pytest.raises(InputFileNotFoundError):
        extractor.extract_file(tmp_path / "missing.pdf")


def test_record_completeness_and_json(account_table):
    extractor = InvoiceExtractor(fake_text_extractor(BILL_TEXT), account_table=account_table)
    record = extractor.extract(b"%PDF", "913531.pdf")

    assert record.is_complete
    assert json.loads(record.to_json()) == record.to_dict()
    assert "\n  " not in record.to_json(indent=None)

    partial = PartialInvoiceRecord(file_name="scan.pdf", address="Kaya Flamboyan 7")
    assert not partial.is_complete
    assert json.loads(partial.to_json())["address"] == "Kaya Flamboyan 7"
