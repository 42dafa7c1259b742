from unittest.mock import patch

import pytest

from services.analysis_service import (
    MAX_FILE_SIZE,
    NO_TEXT_MESSAGE,
    UploadedPaper,
    analyze_papers,
)
from services.errors import SummarizationError
from tests.helpers import make_pdf

SUMMARY = {
    "concise_summary": "x",
    "key_points": ["a"],
    "novelty": "n",
    "limitations": "l",
    "next_questions": ["q"],
}


def _paper(name, content):
    return UploadedPaper(original_name=name, mime_type="application/pdf", content=content)


@pytest.mark.asyncio
@patch("services.analysis_service.summarize_for_review", return_value=SUMMARY)
async def test_batch_isolation_preserves_order(mock_summarize):
    papers = [
        _paper("first.pdf", make_pdf("First paper body")),
        _paper("second.pdf", b"definitely not a pdf"),
        _paper("third.pdf", make_pdf("Third paper body")),
    ]

    results = await analyze_papers(papers)

    assert [r["originalName"] for r in results] == ["first.pdf", "second.pdf", "third.pdf"]
    assert [r["status"] for r in results] == ["ok", "failed", "ok"]
    assert results[1]["error"]
    assert results[1]["summary"] is None
    assert results[0]["summary"] == SUMMARY
    assert mock_summarize.call_count == 2


@pytest.mark.asyncio
@patch("services.analysis_service.summarize_for_review", return_value=SUMMARY)
async def test_ok_result_shape(mock_summarize):
    [result] = await analyze_papers([_paper("My Paper (v2).pdf", make_pdf("Hello research"))])

    assert result["status"] == "ok"
    assert result["pages"] == 1
    assert result["characters"] == len(result["textContent"])
    assert "Hello research" in result["textContent"]
    assert result["textFileName"] == "my-paper-v2.txt"
    assert "error" not in result
    assert result["id"]


@pytest.mark.asyncio
@patch("services.analysis_service.summarize_for_review")
async def test_blank_pdf_fails_without_calling_model(mock_summarize):
    [result] = await analyze_papers([_paper("blank.pdf", make_pdf(""))])

    assert result["status"] == "failed"
    assert result["error"] == NO_TEXT_MESSAGE
    mock_summarize.assert_not_called()


@pytest.mark.asyncio
@patch("services.analysis_service.summarize_for_review")
async def test_summarization_failure_is_captured_per_file(mock_summarize):
    mock_summarize.side_effect = [SummarizationError("provider down"), SUMMARY]
    papers = [_paper("a.pdf", make_pdf("Alpha")), _paper("b.pdf", make_pdf("Beta"))]

    results = await analyze_papers(papers)

    assert results[0]["status"] == "failed"
    assert "provider down" in results[0]["error"]
    assert results[0]["characters"] > 0
    assert results[1]["status"] == "ok"


@pytest.mark.asyncio
@patch("services.analysis_service.summarize_for_review", return_value={"warning": "no key"})
async def test_warning_summary_counts_as_processed(mock_summarize):
    [result] = await analyze_papers([_paper("a.pdf", make_pdf("Alpha"))])

    assert result["status"] == "ok"
    assert result["summary"] == {"warning": "no key"}


@pytest.mark.asyncio
@patch("services.analysis_service.summarize_for_review")
async def test_oversized_file_is_rejected_per_item(mock_summarize):
    [result] = await analyze_papers([_paper("huge.pdf", b"0" * (MAX_FILE_SIZE + 1))])

    assert result["status"] == "failed"
    mock_summarize.assert_not_called()


@pytest.mark.asyncio
async def test_more_than_five_files_is_rejected():
    with pytest.raises(ValueError):
        await analyze_papers([_paper(f"{i}.pdf", b"") for i in range(6)])
