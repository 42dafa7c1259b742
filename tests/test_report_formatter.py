from datetime import datetime

from services.reporting.report_formatter import generate_report_text

SCHEMA_RESULT = {
    "id": "1",
    "originalName": "attention.pdf",
    "status": "ok",
    "pages": 15,
    "characters": 40213,
    "summary": {
        "concise_summary": "Transformers replace recurrence.",
        "key_points": ["Self-attention", "Parallel training"],
        "novelty": "No recurrence at all.",
        "limitations": "Quadratic cost.",
        "next_questions": ["Longer contexts?"],
    },
}

FAILED_RESULT = {
    "id": "2",
    "originalName": "broken.pdf",
    "status": "failed",
    "error": "Failed to parse PDF: document has no pages",
}

WARNING_RESULT = {
    "id": "3",
    "originalName": "nokey.pdf",
    "status": "ok",
    "pages": 2,
    "characters": 100,
    "summary": {"warning": "Model API key is not configured. No summary available."},
}

UNPARSED_RESULT = {
    "id": "4",
    "originalName": "prose.pdf",
    "status": "ok",
    "pages": None,
    "characters": 100,
    "summary": {"unparsed_summary": "The paper discusses...", "parsing_note": "note"},
}


def test_empty_results():
    assert generate_report_text([]) == "No analysis results available."
    assert generate_report_text(None) == "No analysis results available."


def test_schema_summary_sections_and_numbering():
    report = generate_report_text([SCHEMA_RESULT], generated_at=datetime(2025, 1, 2, 3, 4, 5))

    assert "PAPER ANALYSIS REPORT" in report
    assert "Generated on: 2025-01-02 03:04:05" in report
    assert "Total Papers Analyzed: 1" in report
    assert "1. attention.pdf" in report
    assert "  • Pages: 15" in report
    assert "  • Characters: 40,213" in report
    assert "CONCISE SUMMARY:\n" in report
    assert "Transformers replace recurrence." in report
    assert "  1. Self-attention\n  2. Parallel training\n" in report
    assert "NEXT QUESTIONS FOR RESEARCH:" in report
    assert "  1. Longer contexts?" in report
    assert report.rstrip().endswith("=" * 80)
    assert "END OF REPORT" in report


def test_every_result_variant_renders():
    report = generate_report_text([SCHEMA_RESULT, FAILED_RESULT, WARNING_RESULT, UNPARSED_RESULT])

    assert "Total Papers Analyzed: 4" in report
    assert "FAILED: Failed to parse PDF" in report
    assert "Model API key is not configured" in report
    assert "The paper discusses..." in report
    assert "  • Pages: Unknown" in report
    assert "No key points identified." in report
    assert "No novelty assessment provided." in report
    assert "No limitations identified." in report
    assert "No next questions suggested." in report


def test_wrongly_typed_fields_do_not_break_report():
    result = dict(SCHEMA_RESULT, summary={"key_points": "oops", "next_questions": 3, "novelty": ["n"]})
    report = generate_report_text([result, "not a dict", {"summary": "raw model text"}])

    assert "No key points identified." in report
    assert "raw model text" in report
