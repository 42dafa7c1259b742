# File: services/pdf_extractor.py
import logging
from dataclasses import dataclass
from typing import Optional

import fitz

from services.errors import ExtractionError

logger = logging.getLogger(__name__)


@dataclass
class ExtractedText:
    text: str
    page_count: Optional[int] = None


def extract_text(pdf_bytes: bytes) -> ExtractedText:
    """
    Extracts plain text from an in-memory PDF.

    The document handle is closed on both the success and failure paths.
    Output whitespace is left as PyMuPDF produces it.

    Raises:
        ExtractionError: If the payload cannot be opened or read as a PDF.
    """
    if not pdf_bytes:
        raise ExtractionError("Empty PDF payload")

    try:
        with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
            page_count = doc.page_count
            text = "\n".join(page.get_text("text") for page in doc)
    except Exception as e:
        logger.warning(f"PDF extraction error: {e}")
        raise ExtractionError(f"Failed to parse PDF: {e}") from e

    # MuPDF repairs some broken streams into an empty document instead of failing
    if not page_count:
        raise ExtractionError("Failed to parse PDF: document has no pages")

    return ExtractedText(text=text or "", page_count=page_count)
