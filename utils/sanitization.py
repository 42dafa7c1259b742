# utils/sanitization.py
from typing import Optional
import re

SHEET_TITLE_FORBIDDEN = r"[\[\]\*/\\\?:\.]"
SHEET_TITLE_MAX_LENGTH = 30


def collapse_whitespace(value: Optional[str], limit: Optional[int] = None) -> str:
    """Runs of whitespace become one space; optionally truncate afterwards."""
    text = re.sub(r"\s+", " ", value or "").strip()
    if limit is not None:
        text = text[:limit]
    return text


def sanitize_file_name(name: Optional[str]) -> str:
    text = re.sub(r"[^a-z0-9\-_.]", "-", name or "", flags=re.IGNORECASE)
    text = re.sub(r"-+", "-", text)
    text = text.strip("-").lower()
    return text or "paper"


def sanitize_sheet_title(name: Optional[str]) -> str:
    """Drops characters spreadsheet tabs reject and caps the length."""
    cleaned = re.sub(SHEET_TITLE_FORBIDDEN, "", name or "")[:SHEET_TITLE_MAX_LENGTH]
    return cleaned or "Sheet"
