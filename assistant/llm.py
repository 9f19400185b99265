"""
Gemini text-generation wrapper used for intent classification and the final summary.

Anything with a generate(prompt) -> str method can stand in for GeminiSummarizer.
"""

import logging

import google.generativeai as genai

from config import DEFAULT_LLM_MODEL
from errors import ConfigurationError, SummarizerError

logger = logging.getLogger(__name__)


class GeminiSummarizer:
    """Thin client around google-generativeai's GenerativeModel."""

    def __init__(self, api_key: str, model: str = DEFAULT_LLM_MODEL, max_tokens: int = 1024, timeout: float = 60.0) -> None:
        if not api_key:
            raise ConfigurationError("GOOGLE_API_KEY is not set")
        genai.configure(api_key=api_key)
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout
        self._model = genai.GenerativeModel(model_name=model)

    def generate(self, prompt: str) -> str:
        logger.info("[llm] IN  prompt_len=%d model=%s", len(prompt), self.model)
        try:
            response = self._model.generate_content(
                prompt,
                generation_config={"max_output_tokens": self.max_tokens},
                request_options={"timeout": self.timeout},
            )
            text = (response.text or "").strip()
        except Exception as e:
            # the SDK raises a wide range of google.api_core and ValueError types
            logger.error("[llm] generation failed: %s", e)
            raise SummarizerError(f"Language model request failed: {e}") from e
        if not text:
            raise SummarizerError("Language model returned an empty response")
        logger.info("[llm] OUT response_len=%d", len(text))
        return text
