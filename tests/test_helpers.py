from bill_extractor.utils.exceptions import ExtractionError, InputError
from bill_extractor.utils.helpers import collapse_whitespace, get_file_extension, strip_pdf_suffix


def test_string_helpers():
    assert strip_pdf_suffix("913531.PDF") == "913531"
    assert strip_pdf_suffix("a.pdf.bak") == "a.pdf.bak"
    assert strip_pdf_suffix(None) == ""
    assert collapse_whitespace("  KAYA \n KUARTS\t23 ") == "KAYA KUARTS 23"
    assert get_file_extension("bill.PDF") == ".pdf"


def test_extraction_error_is_an_input_error():
    error = ExtractionError("bill.pdf", "File is empty")
    assert isinstance(error, InputError)
    assert error.details == {"file_name": "bill.pdf", "reason": "File is empty"}
    assert "bill.pdf" in str(error)
