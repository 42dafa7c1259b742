# api/routers/analyze.py
from datetime import datetime, timezone
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from typing import List, Optional
import logging

from api.dependencies.auth import get_current_user
from api.models.analysis_models import AnalyzeResponse
from services.analysis_service import (
    FILE_TOO_LARGE_MESSAGE,
    MAX_FILE_SIZE,
    MAX_FILES,
    UploadedPaper,
    analyze_papers,
)
from services.session_service import Identity

logger = logging.getLogger(__name__)
router = APIRouter()

CHUNK_SIZE = 64 * 1024


def _is_pdf(upload: UploadFile) -> bool:
    filename = (upload.filename or "").lower()
    return upload.content_type == "application/pdf" or filename.endswith(".pdf")


async def _read_limited(upload: UploadFile) -> bytes:
    """Reads in chunks, checking the size limit as each chunk arrives."""
    content = bytearray()
    while True:
        chunk = await upload.read(CHUNK_SIZE)
        if not chunk:
            break
        content.extend(chunk)
        if len(content) > MAX_FILE_SIZE:
            raise HTTPException(status_code=400, detail=FILE_TOO_LARGE_MESSAGE)
    return bytes(content)


@router.post("/api/analyze", response_model=AnalyzeResponse, response_model_exclude_none=True)
async def analyze(
    papers: Optional[List[UploadFile]] = File(None),
    current_user: Identity = Depends(get_current_user),
):
    """
    Extracts and summarizes up to five uploaded PDFs. Per-file failures are
    reported inside `results`; only request-level problems return an error.
    """
    if not papers:
        raise HTTPException(status_code=400, detail="Please upload at least one PDF file.")
    if len(papers) > MAX_FILES:
        raise HTTPException(status_code=400, detail=f"Upload at most {MAX_FILES} PDF files at a time.")
    if not all(_is_pdf(p) for p in papers):
        raise HTTPException(status_code=400, detail="Only PDF uploads are supported.")

    try:
        uploads = []
        for upload in papers:
            uploads.append(UploadedPaper(
                original_name=upload.filename or "paper.pdf",
                mime_type=upload.content_type or "application/octet-stream",
                content=await _read_limited(upload),
            ))

        logger.info(f"Analyze request from user_id={current_user['id']} with {len(uploads)} file(s)")
        results = await analyze_papers(uploads)

        return {
            "generatedAt": datetime.now(timezone.utc).isoformat(),
            "totalPapers": len(results),
            "results": results,
        }

    except HTTPException:
        raise
    except Exception:
        logger.error("[api/analyze] error", exc_info=True)
        raise HTTPException(status_code=500, detail="Unexpected server error. Check logs for details.")
