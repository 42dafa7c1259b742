# services/reporting/report_formatter.py
from datetime import datetime
from typing import Any, Dict, List, Optional

from services.response_coercion import ensure_summary_object

WIDE_RULE = "=" * 80
PAPER_RULE = "=" * 60

NO_SUMMARY = "No summary available."


def as_list(value: Any) -> List[Any]:
    """Repeated fields are trusted only when they really are lists."""
    return value if isinstance(value, list) else []


def summary_headline(summary: Dict[str, Any]) -> str:
    """Picks the one-paragraph text to show for any summary variant."""
    for key in ("warning", "concise_summary", "unparsed_summary"):
        value = summary.get(key)
        if value:
            return str(value)
    return NO_SUMMARY


def _section(title: str, underline: int) -> str:
    return f"{title}:\n" + "-" * underline + "\n"


def _numbered(values: List[Any], empty_message: str) -> str:
    if not values:
        return f"  • {empty_message}\n"
    return "".join(f"  {i}. {value}\n" for i, value in enumerate(values, 1))


def _format_count(value: Any) -> str:
    if isinstance(value, bool) or value is None or value == "":
        return "Unknown"
    if isinstance(value, int):
        return f"{value:,}"
    return str(value)


def _render_paper(index: int, result: Dict[str, Any]) -> str:
    summary = ensure_summary_object(result.get("summary"), keep_raw_text=True)

    out = f"{index}. {result.get('originalName') or f'Paper {index}'}\n"
    out += PAPER_RULE + "\n"

    out += "File Information:\n"
    out += f"  • Pages: {_format_count(result.get('pages'))}\n"
    out += f"  • Characters: {_format_count(result.get('characters'))}\n\n"

    if result.get("status") == "failed":
        out += _section("STATUS", 10)
        out += f"FAILED: {result.get('error') or 'Failed to process this PDF.'}\n\n"
        return out

    out += _section("CONCISE SUMMARY", 20)
    out += f"{summary_headline(summary)}\n\n"

    out += _section("KEY POINTS", 15)
    out += _numbered(as_list(summary.get("key_points")), "No key points identified.")
    out += "\n"

    out += _section("NOVELTY", 12)
    out += f"{summary.get('novelty') or 'No novelty assessment provided.'}\n\n"

    out += _section("LIMITATIONS", 16)
    out += f"{summary.get('limitations') or 'No limitations identified.'}\n\n"

    out += _section("NEXT QUESTIONS FOR RESEARCH", 30)
    out += _numbered(as_list(summary.get("next_questions")), "No next questions suggested.")
    out += "\n"
    return out


def generate_report_text(results: Optional[List[Dict[str, Any]]], generated_at: Optional[datetime] = None) -> str:
    """
    Plain-text report over analysis results. Handles every result variant
    (failed, schema summary, warning, unparsed) without raising.
    """
    if not results:
        return "No analysis results available."

    generated_at = generated_at or datetime.now()

    report = WIDE_RULE + "\n"
    report += "                    PAPER ANALYSIS REPORT\n"
    report += WIDE_RULE + "\n\n"
    report += f"Generated on: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}\n"
    report += f"Total Papers Analyzed: {len(results)}\n\n"
    report += "-" * 80 + "\n\n"

    papers = []
    for index, result in enumerate(results, 1):
        if not isinstance(result, dict):
            result = {}
        papers.append(_render_paper(index, result))
    report += ("\n" + WIDE_RULE + "\n\n").join(papers)

    report += "\n" + WIDE_RULE + "\n"
    report += "                    END OF REPORT\n"
    report += WIDE_RULE + "\n"
    return report
