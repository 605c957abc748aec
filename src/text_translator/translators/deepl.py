# SPDX-License-Identifier: Apache-2.0
"""DeepL translation backend."""

from __future__ import annotations

import logging
from typing import Any

from text_translator.core.languages import to_provider_code
from text_translator.core.models import AUTO
from text_translator.translators.base import BatchTranslator
from text_translator.translators.errors import ErrorKind

logger = logging.getLogger(__name__)

# Canonical code -> DeepL code; anything else is uppercased.
DEEPL_LANG_CODES = {
    "en": "EN-US",
    "pt": "PT-BR",
    "zh-CN": "ZH-HANS",
    "zh-TW": "ZH-HANT",
    "no": "NB",
}

# DeepL only accepts the bare language as a source.
DEEPL_SOURCE_CODES = {
    "zh-CN": "ZH",
    "zh-TW": "ZH",
}

FORMALITY_VALUES = frozenset({"default", "more", "less", "prefer_more", "prefer_less"})


class DeepLTranslator(BatchTranslator):
    """DeepL translation backend.

    This backend uses DeepL API for high-quality translation.
    Requires an API key (free or pro).

    Supports batch translation with multiple text parameters in a single request.

    Attributes:
        name: Backend identifier ("deepl").
    """

    name = "deepl"
    display_name = "DeepL Translate"
    REQUIRED_SETTINGS = ("api_key",)

    FREE_API_URL = "https://api-free.deepl.com/v2/translate"
    PRO_API_URL = "https://api.deepl.com/v2/translate"

    @property
    def api_url(self) -> str:
        """Configured URL, else the free or pro endpoint matching the key."""
        if self._settings.api_url:
            return self._settings.api_url
        key = self._settings.api_key or ""
        return self.FREE_API_URL if key.endswith(":fx") else self.PRO_API_URL

    @staticmethod
    def to_deepl_code(lang: str, *, source: bool = False) -> str:
        """Convert a language identifier to DeepL's uppercase code.

        Returns an empty string for auto-detected sources.
        """
        mapping = DEEPL_SOURCE_CODES if source else DEEPL_LANG_CODES
        code = to_provider_code(lang, mapping, auto_value="")
        if source and code and "-" in code and code not in mapping.values():
            # Regional variants are target-only (EN-US, PT-BR)
            code = code.split("-")[0]
        return code.upper()

    async def _translate_chunk(
        self,
        texts: list[str],
        source_lang: str,
        target_lang: str,
    ) -> list[str]:
        target = self.to_deepl_code(target_lang)
        source = self.to_deepl_code(source_lang, source=True)

        # Build request parameters with multiple 'text' entries
        params: list[tuple[str, str]] = [("text", t) for t in texts]
        params.append(("target_lang", target))

        # DeepL doesn't support "auto" - omit source_lang for auto-detection
        if source:
            params.append(("source_lang", source))

        formality = self._settings.extra.get("formality")
        if formality and formality != "default":
            if formality in FORMALITY_VALUES:
                params.append(("formality", formality))
            else:
                logger.warning("Ignoring unknown DeepL formality %r", formality)

        def extract(data: Any) -> list[str] | None:
            try:
                translations = [str(t["text"]) for t in data["translations"]]
            except (KeyError, TypeError):
                return None
            # Validate response length matches input
            if len(translations) != len(texts):
                logger.error(
                    "DeepL returned %d translations for %d texts",
                    len(translations),
                    len(texts),
                )
                return None
            return translations

        return await self._execute_api_call(
            "POST",
            self.api_url,
            context=f"{self.name}-translate-chunk",
            extract_response=extract,
            data=params,
            headers={"Authorization": f"DeepL-Auth-Key {self._settings.api_key}"},
            language_pair=(source or AUTO, target),
        )

    def _kind_for_http_error(self, status: int, message: str) -> ErrorKind:
        if status == 403:
            return ErrorKind.API_KEY_INVALID
        if status == 456:
            return ErrorKind.QUOTA_EXCEEDED
        return super()._kind_for_http_error(status, message)
