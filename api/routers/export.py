# api/routers/export.py
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
import logging
import time

from api.dependencies.auth import get_current_user
from api.models.analysis_models import ExportRequest
from services.reporting.export_service import XLSX_MEDIA_TYPE, ExportService
from services.reporting.report_formatter import generate_report_text
from services.session_service import Identity

router = APIRouter()
logger = logging.getLogger(__name__)

NO_RESULTS_MESSAGE = "No results provided for export."


@router.post("/api/export")
def export_workbook(payload: ExportRequest, current_user: Identity = Depends(get_current_user)) -> Response:
    if not payload.results:
        raise HTTPException(status_code=400, detail=NO_RESULTS_MESSAGE)

    try:
        content = ExportService.export_workbook(payload.results)
    except Exception:
        logger.error("[api/export] error", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to generate Excel file.")

    filename = f"paper-summaries-{int(time.time() * 1000)}.xlsx"
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/api/report")
def export_report(payload: ExportRequest, current_user: Identity = Depends(get_current_user)) -> Response:
    if not payload.results:
        raise HTTPException(status_code=400, detail=NO_RESULTS_MESSAGE)

    try:
        report = generate_report_text(payload.results)
    except Exception:
        logger.error("[api/report] error", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to generate report.")

    filename = f"paper-analysis-report-{datetime.now().date().isoformat()}.txt"
    return Response(
        content=report,
        media_type="text/plain; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
