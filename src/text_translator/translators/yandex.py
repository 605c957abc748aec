# SPDX-License-Identifier: Apache-2.0
"""Yandex translation backend (mobile endpoint)."""

from __future__ import annotations

import logging
import uuid
from typing import Any

from text_translator.core.languages import resolve_code, to_provider_code
from text_translator.core.models import AUTO
from text_translator.translators.base import BatchTranslator, UnsupportedLanguagePairError

logger = logging.getLogger(__name__)

YANDEX_LANG_CODES = {
    "zh-CN": "zh",
    "zh-TW": "zh",
    "fil": "tl",
}

# Yandex body codes meaning the language direction is not available.
UNSUPPORTED_PAIR_CODES = frozenset({501, 502})


class YandexTranslator(BatchTranslator):
    """Yandex Translate backend.

    Uses the endpoint of the Yandex mobile app. No API key is required.
    Several texts are sent as repeated ``text`` form fields.

    Attributes:
        name: Backend identifier ("yandex").
    """

    name = "yandex"
    display_name = "Yandex Translate"

    DEFAULT_API_URL = "https://translate.yandex.net/api/v1/tr.json/translate"
    MAX_REQUEST_SIZE = 10000

    @property
    def api_url(self) -> str:
        return self._settings.api_url or self.DEFAULT_API_URL

    @staticmethod
    def build_lang_param(source: str, target: str) -> str:
        """``src-tgt``, or just ``tgt`` when the source is auto-detected."""
        return target if source == AUTO else f"{source}-{target}"

    async def _translate_chunk(
        self,
        texts: list[str],
        source_lang: str,
        target_lang: str,
    ) -> list[str]:
        context = f"{self.name}-translate-chunk"
        source = to_provider_code(source_lang, YANDEX_LANG_CODES)
        target = to_provider_code(target_lang, YANDEX_LANG_CODES)
        lang = self.build_lang_param(source, target)
        logger.debug("Yandex: lang=%s, %d text(s)", lang, len(texts))

        data: list[tuple[str, str]] = [("lang", lang)]
        data.extend(("text", t) for t in texts)

        def extract(body: Any) -> list[str] | None:
            if not isinstance(body, dict):
                return None
            code = body.get("code")
            if code in UNSUPPORTED_PAIR_CODES:
                raise UnsupportedLanguagePairError(
                    resolve_code(source_lang),
                    resolve_code(target_lang),
                    self.name,
                    message=str(body.get("message") or f"Yandex code {code}"),
                )
            if code != 200:
                return None
            translated = body.get("text")
            if not isinstance(translated, list) or len(translated) != len(texts):
                logger.error("Yandex returned %r for %d texts", translated, len(texts))
                return None
            return [str(t) for t in translated]

        return await self._execute_api_call(
            "POST",
            self.api_url,
            context=context,
            extract_response=extract,
            params={"id": f"{uuid.uuid4().hex}-0-0", "srv": "android"},
            data=data,
            language_pair=(source, target),
        )

