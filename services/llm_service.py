import logging
from typing import Optional

from services.llm_factory import LLMFactory

logger = logging.getLogger(__name__)


class LLMGenerationError(Exception):
    """Raised when the LLM fails to generate a response."""
    pass


def is_llm_configured() -> bool:
    return LLMFactory.is_configured()


def generate_response(
    prompt: str,
    model: Optional[str] = None,
    temperature: float = 0.2,
    system_prompt: str = "",
) -> str:
    """
    Generates a text response from the configured provider. Single attempt.
    Raises:
        LLMGenerationError: If the API call fails or returns no content.
    """
    try:
        client = LLMFactory.get_client()
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        response = client.chat.completions.create(
            model=model or LLMFactory.get_default_model(),
            messages=messages,
            temperature=temperature,
        )
        if not response.choices or not response.choices[0].message.content:
            logger.error("LLM returned empty response or no content")
            raise LLMGenerationError("LLM returned empty response")
        return response.choices[0].message.content

    except LLMGenerationError:
        raise
    except Exception as e:
        logger.error(f"LLM Generation Failed: {e}", exc_info=True)
        raise LLMGenerationError(f"Failed to generate LLM response: {e}") from e
