# File: services/summarization_service.py
import logging
from typing import Any, Dict

from services.errors import SummarizationError
from services.llm_service import LLMGenerationError, generate_response, is_llm_configured
from services.response_coercion import coerce_summary_response
from utils.sanitization import collapse_whitespace

logger = logging.getLogger(__name__)

MAX_PROMPT_CHARS = 20000

MISSING_KEY_WARNING = "Model API key is not configured. No summary available."

SUMMARY_SCHEMA = (
    '{"concise_summary": string, "key_points": [string], "novelty": string, '
    '"limitations": string, "next_questions": [string]}'
)

REVIEW_PROMPT = (
    "Do not respond to any other than the following schema. "
    "You are an expert scientific reviewer creating structured notes for a literature review "
    "& do not mention yourself in the output. "
    "Analyze the following research paper text and respond with STRICT JSON using this schema:\n"
    "{schema}\n"
    'Text: """{text}"""'
)


def condense_text(text: str) -> str:
    return collapse_whitespace(text, limit=MAX_PROMPT_CHARS)


def build_review_prompt(text: str) -> str:
    return REVIEW_PROMPT.format(schema=SUMMARY_SCHEMA, text=condense_text(text))


def summarize_for_review(text: str) -> Dict[str, Any]:
    """
    Produces a summary dict for one paper's extracted text: the parsed
    SummaryObject, an unparsed-summary fallback, or a warning when no
    provider is configured (no network call in that case).

    Raises:
        SummarizationError: If the provider call fails. Not retried.
    """
    if not is_llm_configured():
        logger.warning("LLM provider not configured; skipping summary")
        return {"warning": MISSING_KEY_WARNING}

    prompt = build_review_prompt(text)

    try:
        raw = generate_response(prompt)
    except LLMGenerationError as e:
        raise SummarizationError(f"Summarization failed: {e}") from e

    return coerce_summary_response(raw.strip())
