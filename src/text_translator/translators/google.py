# SPDX-License-Identifier: Apache-2.0
"""Google Translate backend using deep-translator."""

from __future__ import annotations

import asyncio
import logging

from deep_translator import GoogleTranslator as DeepGoogleTranslator  # type: ignore[import-untyped]
from deep_translator.exceptions import (  # type: ignore[import-untyped]
    LanguageNotSupportedException,
    NotValidLength,
    RequestError,
    TooManyRequests,
    TranslationNotFound,
)

from text_translator.config import ProviderSettings
from text_translator.core.languages import to_provider_code
from text_translator.core.models import TranslationMode
from text_translator.translators.base import (
    BaseTranslator,
    TranslationError,
    UnsupportedLanguagePairError,
)
from text_translator.translators.errors import ErrorKind, classify_message

logger = logging.getLogger(__name__)

# Canonical code -> code understood by deep-translator's Google backend.
GOOGLE_LANG_CODES = {
    "he": "iw",
    "fil": "tl",
}


class GoogleTranslator(BaseTranslator):
    """Google Translate backend.

    This backend uses Google Translate via deep-translator library.
    No API key is required (uses free web API).

    Attributes:
        name: Backend identifier ("google").
    """

    name = "google"
    display_name = "Google Translate"

    def __init__(
        self,
        settings: ProviderSettings | None = None,
        *,
        max_concurrent: int = 5,
        timeout: float | None = None,
    ) -> None:
        """Initialize GoogleTranslator.

        Args:
            settings: Unused except for ``extra``; Google needs no key.
            max_concurrent: Maximum concurrent translation requests.
            timeout: Unused; deep-translator manages its own requests.
        """
        super().__init__(settings, timeout=timeout)
        self._semaphore = asyncio.Semaphore(max_concurrent)

    @property
    def max_text_length(self) -> int:
        """Maximum text length for Google Translate.

        Google Translate web API has a 5,000 character limit.
        """
        return 5000

    async def _translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        mode: TranslationMode,
    ) -> str:
        if len(text) > self.max_text_length:
            raise TranslationError(
                f"Text is too long for Google Translate: {len(text)} characters "
                f"(limit {self.max_text_length})",
                kind=ErrorKind.TEXT_TOO_LONG,
                context=f"{self.name}-translate",
            )
        source = to_provider_code(source_lang, GOOGLE_LANG_CODES)
        target = to_provider_code(target_lang, GOOGLE_LANG_CODES)
        async with self._semaphore:
            return await asyncio.to_thread(self._translate_sync, text, source, target)

    def _translate_sync(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
    ) -> str:
        """Synchronous translation implementation.

        Args:
            text: Text to translate.
            source_lang: Google source code.
            target_lang: Google target code.

        Returns:
            Translated text.

        Raises:
            UnsupportedLanguagePairError: Google rejected a language code.
            TranslationError: On any other translation failure.
        """
        context = f"{self.name}-translate"
        try:
            translator = DeepGoogleTranslator(source=source_lang, target=target_lang)
            result = translator.translate(text)
        except LanguageNotSupportedException as e:
            raise UnsupportedLanguagePairError(
                source_lang, target_lang, self.name, message=str(e)
            ) from e
        except TooManyRequests as e:
            raise TranslationError(
                f"Google Translate rate limit reached: {e}",
                kind=ErrorKind.RATE_LIMIT_REACHED,
                context=context,
            ) from e
        except RequestError as e:
            raise TranslationError(
                f"Google Translate request failed: {e}",
                kind=ErrorKind.NETWORK_ERROR,
                context=context,
            ) from e
        except TranslationNotFound as e:
            raise TranslationError(
                f"Google Translate returned no translation: {e}",
                kind=ErrorKind.TRANSLATION_NOT_FOUND,
                context=context,
            ) from e
        except NotValidLength as e:
            raise TranslationError(
                f"Text is too long for Google Translate: {e}",
                kind=ErrorKind.TEXT_TOO_LONG,
                context=context,
            ) from e
        except Exception as e:
            kind = classify_message(str(e))
            raise TranslationError(
                f"Google Translate failed: {e}",
                kind=kind if kind is not ErrorKind.UNKNOWN else ErrorKind.TRANSLATION_FAILED,
                context=context,
            ) from e
        return result if result is not None else text
