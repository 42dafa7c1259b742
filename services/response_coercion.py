# File: services/response_coercion.py
"""
Recovers a structured summary from a model reply that is nominally JSON.

Replies arrive wrapped in markdown fences, prefixed with a bare ``json``
label, written with typographic quotes, or padded with prose around the
braces. Each helper below is a total function over strings; the candidates
they produce are tried in a fixed order and the first strict parse wins.
"""
import json
import logging
import re
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

PARSING_NOTE = "Model returned non-JSON text; included raw response instead."

_LEADING_FENCE_RE = re.compile(r"^```[a-zA-Z0-9]*\s*", re.IGNORECASE)
_TRAILING_FENCE_RE = re.compile(r"```$")
_JSON_PREFIX_RE = re.compile(r"^json\s*", re.IGNORECASE)

_SINGLE_QUOTES = "\u2018\u2019\u201a\u201b\u2032\u2035"
_DOUBLE_QUOTES = "\u201c\u201d\u201e\u201f\u2033\u2036"
_QUOTE_TABLE = str.maketrans(
    _SINGLE_QUOTES + _DOUBLE_QUOTES,
    "'" * len(_SINGLE_QUOTES) + '"' * len(_DOUBLE_QUOTES),
)


def strip_code_fences(text: str) -> str:
    text = _LEADING_FENCE_RE.sub("", text.strip())
    text = _TRAILING_FENCE_RE.sub("", text)
    return text.strip()


def normalize_quotes(text: str) -> str:
    if not text:
        return text
    return text.translate(_QUOTE_TABLE)


def strip_json_prefix(text: str) -> str:
    return _JSON_PREFIX_RE.sub("", text).strip()


def extract_json_block(text: str) -> Optional[str]:
    """Substring from the first '{' to the last '}', or None."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end <= start:
        return None
    return text[start:end + 1]


def build_candidates(raw: str) -> List[Optional[str]]:
    normalized = normalize_quotes(strip_code_fences(raw))
    without_prefix = strip_json_prefix(normalized)
    return [
        normalized,
        without_prefix,
        extract_json_block(normalized),
        extract_json_block(without_prefix),
    ]


def parse_candidate(candidate: Optional[str]) -> Optional[Dict[str, Any]]:
    """Strict JSON parse. Only a top-level object counts as a summary."""
    if not candidate:
        return None
    try:
        parsed = json.loads(candidate)
    except (json.JSONDecodeError, ValueError):
        return None
    return parsed if isinstance(parsed, dict) else None


def coerce_model_json(raw: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Returns the first candidate that parses, or None. Empty input yields None
    without attempting any candidate; the caller decides what that means.
    """
    if not raw or not raw.strip():
        return None
    for candidate in build_candidates(raw):
        parsed = parse_candidate(candidate)
        if parsed is not None:
            return parsed
    return None


def coerce_summary_response(raw: Optional[str]) -> Dict[str, Any]:
    """Never raises. Falls back to the unparsed-summary variant."""
    parsed = coerce_model_json(raw)
    if parsed is not None:
        return parsed

    logger.warning("Model reply could not be parsed as JSON; keeping raw text")
    return {
        "unparsed_summary": raw or "",
        "parsing_note": PARSING_NOTE,
    }


def ensure_summary_object(summary: Any, keep_raw_text: bool = False) -> Dict[str, Any]:
    """
    Display/export boundary. Missing summaries become an empty dict, not a
    failure. A string that is not a JSON object becomes {} or, with
    keep_raw_text, an unparsed-summary dict carrying the string.
    """
    if not summary:
        return {}
    if isinstance(summary, dict):
        return summary
    if isinstance(summary, str):
        parsed = parse_candidate(summary)
        if parsed is not None:
            return parsed
        return {"unparsed_summary": summary} if keep_raw_text else {}
    return {}
