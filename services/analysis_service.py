# File: services/analysis_service.py

import asyncio
import logging
import os
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from services.errors import ExtractionError, SummarizationError
from services.pdf_extractor import extract_text
from services.summarization_service import summarize_for_review
from utils.sanitization import sanitize_file_name

logger = logging.getLogger(__name__)

MAX_FILES = 5
MAX_FILE_SIZE = 20 * 1024 * 1024  # 20MB

STATUS_OK = "ok"
STATUS_FAILED = "failed"

NO_TEXT_MESSAGE = "No textual content detected in PDF."
FILE_TOO_LARGE_MESSAGE = "Each PDF must be 20MB or smaller."


@dataclass
class UploadedPaper:
    """One multipart part, held in memory for the duration of a request."""
    original_name: str
    mime_type: str
    content: bytes


def _failed_result(
    paper: UploadedPaper,
    error: str,
    pages: Optional[int] = None,
    characters: int = 0,
) -> Dict[str, Any]:
    return {
        "id": str(uuid.uuid4()),
        "originalName": paper.original_name,
        "status": STATUS_FAILED,
        "pages": pages,
        "characters": characters,
        "summary": None,
        "error": error,
    }


def _text_file_name(original_name: str) -> str:
    base, _ = os.path.splitext(original_name or "")
    return f"{sanitize_file_name(base)}.txt"


async def analyze_paper(paper: UploadedPaper) -> Dict[str, Any]:
    """
    Extract -> summarize for a single upload. Per-file failures are returned
    as data; only programming errors escape.
    """
    if len(paper.content) > MAX_FILE_SIZE:
        return _failed_result(paper, FILE_TOO_LARGE_MESSAGE)

    try:
        extracted = await asyncio.to_thread(extract_text, paper.content)
    except ExtractionError as e:
        logger.warning(f"Extraction failed for '{paper.original_name}': {e}")
        return _failed_result(paper, str(e) or "Failed to parse PDF")

    text = extracted.text.strip()
    if not text:
        return _failed_result(paper, NO_TEXT_MESSAGE, pages=extracted.page_count)

    try:
        summary = await asyncio.to_thread(summarize_for_review, text)
    except SummarizationError as e:
        logger.warning(f"Summarization failed for '{paper.original_name}': {e}")
        return _failed_result(paper, str(e), pages=extracted.page_count, characters=len(text))

    return {
        "id": str(uuid.uuid4()),
        "originalName": paper.original_name,
        "status": STATUS_OK,
        "pages": extracted.page_count,
        "characters": len(text),
        "summary": summary,
        "textFileName": _text_file_name(paper.original_name),
        "textContent": text,
    }


async def analyze_papers(papers: List[UploadedPaper]) -> List[Dict[str, Any]]:
    """
    Processes uploads strictly one after another, preserving input order.
    A failing file never stops the rest of the batch.
    """
    if len(papers) > MAX_FILES:
        raise ValueError(f"At most {MAX_FILES} files can be analyzed at once")

    logger.info(f"📄 Analyzing {len(papers)} uploaded paper(s)")
    results = []
    for paper in papers:
        result = await analyze_paper(paper)
        logger.info(f"Processed '{paper.original_name}' (Status: {result['status']})")
        results.append(result)
    return results
