import json

import pytest

import main
from bill_extractor.utils.exceptions import ExtractionError

BILL_TEXT = (
    "Factuurnummer: INV-9\n"
    "FACTUUR DATUM: 30/03/2024\n"
    "Verval Datum: 15/04/2024\n"
    "TE BETALEN: 12,50\n"
)


class FakePDFTextExtractor:
    def extract_text(self, data, file_name="<upload>"):
        if data == b"BROKEN":
            raise ExtractionError(file_name, "bad xref table")
        return BILL_TEXT


@pytest.fixture
def bills(tmp_path, monkeypatch):
    monkeypatch.setattr("bill_extractor.input_handler.PDFTextExtractor", FakePDFTextExtractor)
    folder = tmp_path / "bills"
    folder.mkdir()
    (folder / "913531.pdf").write_bytes(b"%PDF-1.4")
    (folder / "broken.pdf").write_bytes(b"BROKEN")
    (folder / "notes.txt").write_text("ignored")
    return folder


def test_run_extraction_skips_unreadable_files(bills, tmp_path):
    output = tmp_path / "out" / "results.json"
    results = main.run_extraction(
        str(bills),
        output_path=str(output),
        save=True,
        db_path=str(tmp_path / "invoices.db"),
    )

    assert len(results) == 1
    entry = results[0]
    assert entry["customer_number"] == "913531"
    assert entry["address"] == "KAYA WATERVILLAS 84-A"
    assert entry["utility_type"] == "water"
    assert entry["amount"] == pytest.approx(12.5)
    assert entry["missing_fields"] == []
    assert len(entry["id"]) == 32
    assert json.loads(output.read_text(encoding="utf-8")) == results


def test_main_exit_codes(bills, tmp_path, capsys):
    assert main.main(["--input", str(bills / "913531.pdf"), "--quiet"]) == 0
    printed = json.loads(capsys.readouterr().out)
    assert printed[0]["invoice_number"] == "INV-9"

    assert main.main(["--input", str(tmp_path / "missing.pdf"), "--quiet"]) == 1
    assert main.main(["--input", str(bills / "notes.txt"), "--quiet"]) == 1


def test_unreadable_file_is_logged_once(bills, capsys):
    assert main.main(["--input", str(bills)]) == 0
    err = capsys.readouterr().err
    errors = [line for line in err.splitlines() if "ERROR" in line]
    assert len(errors) == 1
    assert "broken.pdf" in errors[0]


def test_unexpected_error_traceback_follows_debug_flag(bills, monkeypatch, capsys):
    def explode(**kwargs):
        raise RuntimeError("disk on fire")

    monkeypatch.setattr(main, "run_extraction", explode)
    monkeypatch.setattr(main.sys, "argv", ["main.py"])

    assert main.main(["--input", str(bills), "--debug"]) == 1
    err = capsys.readouterr().err
    assert "Unexpected error: disk on fire" in err
    assert "Traceback" in err

    assert main.main(["--input", str(bills), "--quiet"]) == 1
    assert "Traceback" not in capsys.readouterr().err
