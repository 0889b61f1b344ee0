"""
Thin adapter layer over LLM provider SDKs.

Each provider exposes the same interface so callers never import
provider-specific code.  OpenRouter speaks the OpenAI chat-completions
protocol, so it is served by ``OpenAIProvider`` with a custom base URL.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

from config.settings import Settings, config

logger = logging.getLogger(__name__)


class BaseLLMProvider(ABC):
    """Common interface that every concrete provider implements."""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        *,
        temperature: float = 0.3,
        model: str | None = None,
        max_tokens: int = 1024,
    ) -> str:
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# OpenAI-compatible (OpenAI, OpenRouter, …)
# ═══════════════════════════════════════════════════════════════════════════════


class OpenAIProvider(BaseLLMProvider):
    def __init__(
        self,
        api_key: str,
        default_model: str = "gpt-4o-mini",
        *,
        base_url: Optional[str] = None,
        default_headers: Optional[Dict[str, str]] = None,
    ):
        from openai import AsyncOpenAI

        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            default_headers=default_headers,
        )
        self.default_model = default_model

    async def generate(
        self,
        prompt: str,
        *,
        temperature: float = 0.3,
        model: str | None = None,
        max_tokens: int = 1024,
    ) -> str:
        model = model or self.default_model

        response = await self.client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            temperature=temperature,
            max_tokens=max_tokens,
        )

        if not response.choices:
            raise ValueError(f"Model {model} returned no choices")
        return response.choices[0].message.content or ""


# ═══════════════════════════════════════════════════════════════════════════════
# Factory
# ═══════════════════════════════════════════════════════════════════════════════


def get_summary_provider(settings: Settings | None = None) -> Optional[BaseLLMProvider]:
    """
    Build the provider used for note summaries, or ``None`` when no API
    key is configured.
    """
    settings = settings or config
    key = settings.openrouter_api_key
    if not key:
        logger.warning("OPENROUTER_API_KEY not set; note summaries are disabled")
        return None

    return OpenAIProvider(
        api_key=key,
        default_model=settings.summary_model,
        base_url=settings.summary_base_url,
        default_headers={
            "HTTP-Referer": settings.frontend_url,
            "X-Title": settings.email_from_name,
        },
    )
