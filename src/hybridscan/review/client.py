"""Async client for an LLM-backed semantic code reviewer."""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from hybridscan.config import HybridScanConfig
from hybridscan.review.models import ReviewReport
from hybridscan.review.prompts import SYSTEM_PROMPT, build_review_prompt

logger = logging.getLogger(__name__)


class SemanticReviewer:
    """Calls an OpenAI-compatible chat-completions endpoint for a code review.

    ``review_code`` never raises for collaborator problems: a missing API
    key, transport or HTTP errors, and unusable responses all return None
    so the caller can fall back to pattern findings alone.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-4o",
        timeout: float = 30.0,
        temperature: float = 0.1,
        max_tokens: int = 2000,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._transport = transport

    @classmethod
    def from_config(cls, config: HybridScanConfig) -> SemanticReviewer:
        return cls(
            api_key=config.reviewer_api_key,
            base_url=config.reviewer_url,
            model=config.reviewer_model,
            timeout=config.reviewer_timeout,
        )

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    async def review_code(
        self,
        filename: str,
        code: str,
        language: str = "",
    ) -> ReviewReport | None:
        """Ask the reviewer about *code*. Returns None when unavailable."""
        if not self.available:
            logger.info("No reviewer API key configured, skipping semantic review")
            return None

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_review_prompt(filename, code, language)},
            ],
            "response_format": {"type": "json_object"},
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post("/chat/completions", json=payload, headers=headers)
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPError as e:
            logger.warning("Semantic review request failed: %s", e)
            return None
        except ValueError as e:
            logger.warning("Semantic review returned a non-JSON body: %s", e)
            return None

        content = _message_content(body)
        if not content:
            logger.warning("Semantic review returned no content")
            return None

        try:
            return ReviewReport.model_validate_json(_strip_code_fence(content))
        except ValidationError as e:
            logger.warning("Semantic review response failed validation: %s", e)
            return None


def _message_content(body: object) -> str:
    try:
        content = body["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return ""
    return content if isinstance(content, str) else ""


def _strip_code_fence(content: str) -> str:
    """Some models wrap JSON in a ```json fence despite the response format."""
    text = content.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()

