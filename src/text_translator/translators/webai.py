# SPDX-License-Identifier: Apache-2.0
"""Backend for a local WebAI server."""

from __future__ import annotations

import logging
from typing import Any

from text_translator.core.models import TranslationMode
from text_translator.translators.llm import LLMTranslator

logger = logging.getLogger(__name__)


class WebAITranslator(LLMTranslator):
    """WebAI backend.

    The server keeps a conversation per client. ``reset_session`` is sent
    whenever this adapter holds no SessionContext, i.e. on the first call and
    after an explicit reset.

    Attributes:
        name: Backend identifier ("webai").
    """

    name = "webai"
    display_name = "WebAI"

    DEFAULT_API_URL = "http://localhost:6969/translate"
    DEFAULT_MODEL = "gemini-2.0-flash"

    @property
    def api_url(self) -> str:
        return self._settings.api_url or self.DEFAULT_API_URL

    def should_reset_session(self) -> bool:
        return self._session_context is None

    async def _translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        mode: TranslationMode,
    ) -> str:
        prompt = self._build_prompt(text, source_lang, target_lang, mode)
        body: dict[str, Any] = {
            "message": prompt,
            "model": self.model,
            "images": [],
            "reset_session": self.should_reset_session(),
        }
        logger.debug("webai: reset_session=%s model=%s", body["reset_session"], self.model)

        result = await self._execute_api_call(
            "POST",
            self.api_url,
            context=f"{self.name}-translation",
            extract_response=_extract_response,
            json=body,
        )
        self._store_session_context(self.model)
        return result


def _extract_response(data: Any) -> str | None:
    if isinstance(data, dict) and isinstance(data.get("response"), str):
        return data["response"]
    return None
