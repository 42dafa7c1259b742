# services/reporting/export_service.py
from typing import Dict, Any, List, Set
from io import BytesIO
import logging

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Alignment, Font

from services.reporting.report_formatter import as_list, summary_headline
from services.response_coercion import ensure_summary_object
from utils.sanitization import SHEET_TITLE_MAX_LENGTH, sanitize_sheet_title

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

EMPTY_CELL = "—"
NOT_AVAILABLE = "N/A"


def format_list(values: Any) -> str:
    values = as_list(values)
    if not values:
        return EMPTY_CELL
    return "\n".join(f"{i}. {value}" for i, value in enumerate(values, 1))


def _scalar(value: Any, placeholder: str) -> Any:
    """openpyxl only accepts scalars; anything else is stringified."""
    if value is None or value == "":
        return placeholder
    if isinstance(value, (str, int, float)):
        return value
    return str(value)


def _cell_value(value: Any) -> Any:
    """Strips control characters worksheets reject."""
    if isinstance(value, str):
        return ILLEGAL_CHARACTERS_RE.sub("", value)
    return value


def _unique_title(title: str, used: Set[str]) -> str:
    candidate = title
    n = 2
    while candidate.lower() in used:
        suffix = f" ({n})"
        candidate = title[:SHEET_TITLE_MAX_LENGTH - len(suffix)] + suffix
        n += 1
    used.add(candidate.lower())
    return candidate


class ExportService:
    """
    Renders analysis results as an .xlsx workbook, one sheet per paper.
    """

    @staticmethod
    def export_workbook(results: List[Dict[str, Any]]) -> bytes:
        """
        Args:
            results: AnalysisResult dicts as returned by /api/analyze.

        Returns:
            bytes: The binary content of the workbook.
        """
        wb = Workbook()
        wb.remove(wb.active)
        wb.properties.creator = "Paper Studio"

        used_titles: Set[str] = set()
        for index, result in enumerate(results, 1):
            if not isinstance(result, dict):
                result = {}
            title = sanitize_sheet_title(result.get("originalName") or f"Paper {index}")
            ws = wb.create_sheet(title=_unique_title(title, used_titles))
            ExportService._fill_sheet(ws, result)

        if not wb.worksheets:
            wb.create_sheet(title="Sheet")

        buffer = BytesIO()
        wb.save(buffer)
        logger.info(f"Exported workbook with {len(wb.worksheets)} sheet(s)")
        return buffer.getvalue()

    @staticmethod
    def _fill_sheet(ws, result: Dict[str, Any]) -> None:
        ws.append(["Field", "Content"])
        for cell in ws[1]:
            cell.font = Font(bold=True)

        ws.column_dimensions["A"].width = 22
        ws.column_dimensions["B"].width = 120

        summary = ensure_summary_object(result.get("summary"))

        rows = [
            ["Original file", _scalar(result.get("originalName"), NOT_AVAILABLE)],
            ["Pages", _scalar(result.get("pages"), NOT_AVAILABLE)],
            ["Characters", _scalar(result.get("characters"), NOT_AVAILABLE)],
        ]
        if result.get("status") == "failed":
            rows.append(["Status", "failed"])
            rows.append(["Error", _scalar(result.get("error"), NOT_AVAILABLE)])
        rows.append(["", ""])

        headline = summary_headline(summary) if summary else EMPTY_CELL
        rows.extend([
            ["Concise summary", headline],
            ["Key points", format_list(summary.get("key_points"))],
            ["Novelty", _scalar(summary.get("novelty"), EMPTY_CELL)],
            ["Limitations", _scalar(summary.get("limitations"), EMPTY_CELL)],
            ["Next questions", format_list(summary.get("next_questions"))],
        ])

        for row in rows:
            ws.append([_cell_value(value) for value in row])
            # Model and client text is never a formula
            for cell in ws[ws.max_row]:
                if isinstance(cell.value, str) and cell.value.startswith("="):
                    cell.data_type = "s"

        for (content_cell,) in ws.iter_rows(min_row=2, min_col=2, max_col=2):
            content_cell.alignment = Alignment(wrap_text=True, vertical="top")
