import pytest

from services.errors import ExtractionError
from services.pdf_extractor import extract_text
from tests.helpers import make_pdf


def test_extracts_text_and_page_count():
    result = extract_text(make_pdf("Attention is all you need", "Second page"))

    assert result.page_count == 2
    assert "Attention is all you need" in result.text
    assert "Second page" in result.text


def test_blank_pdf_yields_empty_text():
    result = extract_text(make_pdf(""))

    assert result.page_count == 1
    assert result.text.strip() == ""


@pytest.mark.parametrize("payload", [b"", b"not a pdf at all", b"%PDF-1.4 truncated garbage"])
def test_invalid_payload_raises_extraction_error(payload):
    with pytest.raises(ExtractionError):
        extract_text(payload)
