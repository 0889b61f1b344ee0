"""
AI summaries of note content.
"""

from __future__ import annotations

import logging
from typing import Optional

from config.settings import config
from core.errors import DependencyError
from utils.llm_providers import BaseLLMProvider

logger = logging.getLogger(__name__)

SUMMARY_PROMPT = "Summarize the following content concisely in about 60 words:\n\n{content}"


class SummaryService:
    def __init__(self, provider: Optional[BaseLLMProvider]) -> None:
        self.provider = provider

    async def summarize(self, content: str) -> str:
        if self.provider is None:
            raise DependencyError(
                "Failed to generate summary",
                details="AI summaries are not configured",
            )

        try:
            summary = await self.provider.generate(
                SUMMARY_PROMPT.format(content=content),
                temperature=config.summary_temperature,
                max_tokens=config.summary_max_tokens,
            )
        except Exception as exc:
            logger.error("Error generating summary: %s", exc)
            raise DependencyError("Failed to generate summary", details=str(exc)) from exc

        return summary.strip()
