# SPDX-License-Identifier: Apache-2.0
"""OpenAI chat-completion translation backend.

``OpenAICompatibleTranslator`` also serves OpenRouter, DeepSeek and custom
OpenAI-compatible endpoints, which differ only in base URL and defaults.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from openai import (
    APIConnectionError,
    APIStatusError,
    AsyncOpenAI,
    AuthenticationError,
    NotFoundError,
    OpenAIError,
    RateLimitError,
)

from text_translator.core.models import TranslationMode
from text_translator.translators.base import (
    ConfigurationError,
    TranslationError,
    UnsupportedLanguagePairError,
)
from text_translator.translators.errors import ErrorKind, classify_message, classify_status
from text_translator.translators.llm import LLMTranslator

logger = logging.getLogger(__name__)

_CHAT_COMPLETIONS_SUFFIX = "/chat/completions"


class OpenAICompatibleTranslator(LLMTranslator):
    """Translation through an OpenAI-compatible chat completions API.

    Sends ``{model, messages: [{role: "user", content: prompt}]}`` and reads
    ``choices[0].message.content``.
    """

    REQUIRED_SETTINGS = ("api_key",)
    DEFAULT_API_URL: ClassVar[str | None] = None
    DEFAULT_HEADERS: ClassVar[dict[str, str]] = {}

    _client: AsyncOpenAI | None = None

    @property
    def base_url(self) -> str | None:
        """Configured URL (without a /chat/completions suffix) or the default."""
        url = self._settings.api_url or self.DEFAULT_API_URL
        if url and url.rstrip("/").endswith(_CHAT_COMPLETIONS_SUFFIX):
            url = url.rstrip("/")[: -len(_CHAT_COMPLETIONS_SUFFIX)]
        return url

    def _ensure_client(self) -> AsyncOpenAI:
        """Ensure OpenAI client exists.

        Returns:
            Active OpenAI async client.
        """
        if self._client is None:
            kwargs: dict[str, Any] = {
                "api_key": self._settings.api_key,
                "base_url": self.base_url,
            }
            if self._timeout is not None:
                kwargs["timeout"] = self._timeout
            if self.DEFAULT_HEADERS:
                kwargs["default_headers"] = dict(self.DEFAULT_HEADERS)
            self._client = AsyncOpenAI(**kwargs)
        return self._client

    async def _translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        mode: TranslationMode,
    ) -> str:
        client = self._ensure_client()
        prompt = self._build_prompt(text, source_lang, target_lang, mode)
        context = f"{self.name}-translation"
        logger.debug("%s: model=%s base_url=%s", context, self.model, self.base_url)

        try:
            response = await client.chat.completions.create(
                model=self.model or "",
                messages=[{"role": "user", "content": prompt}],
            )
        except OpenAIError as e:
            self._handle_openai_error(e, source_lang, target_lang, context)
            raise  # Should not reach here

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise TranslationError(
                f"{self.display_name} returned an empty response",
                kind=ErrorKind.INVALID_RESPONSE,
                context=context,
            )

        self._store_session_context(self.model)
        return content

    def _handle_openai_error(
        self,
        error: OpenAIError,
        source_lang: str,
        target_lang: str,
        context: str,
    ) -> None:
        """Handle OpenAI API errors.

        Args:
            error: The caught exception.
            source_lang: Requested source, reported for unsupported pairs.
            target_lang: Requested target.
            context: Adapter and phase for the raised error.

        Raises:
            ConfigurationError: On authentication or model access failure.
            TranslationError: On other API errors.
        """
        status = getattr(error, "status_code", None)
        message = str(error)

        if isinstance(error, AuthenticationError):
            raise ConfigurationError(
                f"Invalid {self.display_name} API key",
                kind=ErrorKind.API_KEY_INVALID,
                status_code=status,
                context=context,
            ) from error
        if isinstance(error, NotFoundError):
            # NotFoundError is raised when model is not found
            raise ConfigurationError(
                f"Model '{self.model}' is not available on {self.display_name}",
                kind=ErrorKind.MODEL_MISSING,
                status_code=status,
                context=context,
            ) from error
        if isinstance(error, RateLimitError):
            quota = classify_message(message) is ErrorKind.QUOTA_EXCEEDED
            raise TranslationError(
                message,
                kind=ErrorKind.QUOTA_EXCEEDED if quota else ErrorKind.RATE_LIMIT_REACHED,
                status_code=status,
                context=context,
            ) from error
        if isinstance(error, APIConnectionError):
            raise TranslationError(
                f"{self.display_name} request failed: {error}",
                kind=ErrorKind.NETWORK_ERROR,
                context=context,
            ) from error

        kind = classify_message(message)
        if kind is ErrorKind.LANGUAGE_PAIR_NOT_SUPPORTED:
            raise UnsupportedLanguagePairError(
                source_lang, target_lang, self.name, message=message, status_code=status
            ) from error
        if kind is ErrorKind.UNKNOWN and isinstance(error, APIStatusError):
            kind = classify_status(error.status_code) or ErrorKind.HTTP_ERROR

        # Check for model not found/access error via error code
        error_code = getattr(error, "code", None) or ""
        if error_code in ("model_not_found", "invalid_model") or kind is ErrorKind.MODEL_MISSING:
            raise ConfigurationError(
                f"Model '{self.model}' is not available on {self.display_name}",
                kind=ErrorKind.MODEL_MISSING,
                status_code=status,
                context=context,
            ) from error

        raise TranslationError(
            f"{self.display_name} API error: {error}",
            kind=kind,
            status_code=status,
            context=context,
        ) from error

    async def close(self) -> None:
        """Close the OpenAI client."""
        if self._client:
            await self._client.close()
            self._client = None
        await super().close()


class OpenAITranslator(OpenAICompatibleTranslator):
    """OpenAI GPT translation backend.

    Attributes:
        name: Backend identifier ("openai").
    """

    name = "openai"
    display_name = "OpenAI"
    DEFAULT_MODEL = "gpt-4o"
    DEFAULT_API_URL = "https://api.openai.com/v1"
