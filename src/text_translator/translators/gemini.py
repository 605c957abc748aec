# SPDX-License-Identifier: Apache-2.0
"""Google Gemini translation backend (REST generateContent)."""

from __future__ import annotations

import logging
from typing import Any

from text_translator.core.models import TranslationMode
from text_translator.translators.base import TranslationError
from text_translator.translators.errors import ErrorKind
from text_translator.translators.llm import LLMTranslator

logger = logging.getLogger(__name__)


class GeminiTranslator(LLMTranslator):
    """Google Gemini backend.

    The API key travels as the ``key`` query parameter. When the settings
    carry ``extra["thinking_budget"]`` it is sent as a thinking config; if the
    model rejects it, the request is repeated once without it.

    Attributes:
        name: Backend identifier ("gemini").
    """

    name = "gemini"
    display_name = "Google Gemini"
    REQUIRED_SETTINGS = ("api_key",)

    DEFAULT_MODEL = "gemini-2.5-flash"
    API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"

    @property
    def api_url(self) -> str:
        if self._settings.api_url:
            return self._settings.api_url
        return f"{self.API_BASE_URL}/{self.model}:generateContent"

    def _build_body(self, prompt: str, thinking_budget: int | None) -> dict[str, Any]:
        body: dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
        if thinking_budget is not None:
            body["generationConfig"] = {
                "thinkingConfig": {"thinkingBudget": thinking_budget}
            }
        return body

    async def _translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        mode: TranslationMode,
    ) -> str:
        prompt = self._build_prompt(text, source_lang, target_lang, mode)
        thinking_budget = self._settings.extra.get("thinking_budget")
        context = f"{self.name}-translation"

        try:
            result = await self._generate(prompt, thinking_budget, context)
        except TranslationError as e:
            if thinking_budget is None or "thinkingbudget" not in str(e).lower():
                raise
            logger.debug("thinkingBudget not supported by %s, retrying without it", self.model)
            result = await self._generate(prompt, None, f"{context}-fallback")

        self._store_session_context(self.model)
        return result

    async def _generate(
        self,
        prompt: str,
        thinking_budget: int | None,
        context: str,
    ) -> str:
        return await self._execute_api_call(
            "POST",
            self.api_url,
            context=context,
            extract_response=_extract_text,
            params={"key": self._settings.api_key or ""},
            json=self._build_body(prompt, thinking_budget),
        )

    def _kind_for_http_error(self, status: int, message: str) -> ErrorKind:
        lowered = message.lower()
        if "api key not valid" in lowered:
            return ErrorKind.API_KEY_INVALID
        if status == 429 and ("quota" in lowered or "resource_exhausted" in lowered):
            return ErrorKind.QUOTA_EXCEEDED
        return super()._kind_for_http_error(status, message)


def _extract_text(data: Any) -> str | None:
    try:
        text = data["candidates"][0]["content"]["parts"][0]["text"]
    except (IndexError, KeyError, TypeError):
        return None
    return text if isinstance(text, str) else None
