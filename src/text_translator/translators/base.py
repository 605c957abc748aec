# SPDX-License-Identifier: Apache-2.0
"""Base classes and protocols for translation backends."""

from __future__ import annotations

import asyncio
import json
import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any, ClassVar, Protocol, runtime_checkable

import aiohttp

from text_translator.config import ProviderSettings
from text_translator.core.languages import is_same_language
from text_translator.core.models import SessionContext, TranslationMode
from text_translator.core.segments import join_segments, split_segments
from text_translator.translators.errors import ErrorKind, classify_message, classify_status

logger = logging.getLogger(__name__)


class TranslatorError(Exception):
    """Base exception for translator module.

    Attributes:
        kind: Classified failure category.
        status_code: HTTP status of the failed call, if any.
        context: Adapter and phase that failed (e.g. "deepl-translate").
    """

    default_kind: ClassVar[ErrorKind] = ErrorKind.UNKNOWN

    def __init__(
        self,
        message: str,
        kind: ErrorKind | None = None,
        status_code: int | None = None,
        context: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind or self.default_kind
        self.status_code = status_code
        self.context = context

    @property
    def retryable(self) -> bool:
        """Whether the request may be retried unchanged."""
        return self.kind.is_retryable


class TranslationError(TranslatorError):
    """Error during translation (API call failure, rate limit, etc.).

    This error type is potentially retryable.
    """

    default_kind = ErrorKind.TRANSLATION_FAILED


class ConfigurationError(TranslatorError):
    """Configuration error (missing API key, invalid parameters, etc.).

    This error type is NOT retryable - fix the configuration first.
    """

    default_kind = ErrorKind.CONFIG_MISSING


class UnsupportedLanguagePairError(TranslationError):
    """The provider does not support the requested language pair."""

    default_kind = ErrorKind.LANGUAGE_PAIR_NOT_SUPPORTED

    def __init__(
        self,
        source: str,
        target: str,
        translator: str,
        message: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.source = source
        self.target = target
        self.translator = translator
        super().__init__(
            message or f"{translator} does not support {source} -> {target}",
            status_code=status_code,
            context=f"{translator}-translate",
        )


class UnsupportedProviderError(TranslatorError):
    """Unknown provider id."""

    default_kind = ErrorKind.UNSUPPORTED_PROVIDER

    def __init__(self, provider_id: str) -> None:
        self.provider_id = provider_id
        super().__init__(f"Unsupported provider: {provider_id!r}", context="registry")


# Required setting name -> kind raised when it is missing.
_MISSING_SETTING_KINDS = {
    "api_key": ErrorKind.API_KEY_MISSING,
    "api_url": ErrorKind.API_URL_MISSING,
    "model": ErrorKind.MODEL_MISSING,
}


@runtime_checkable
class TranslatorBackend(Protocol):
    """Protocol definition for translation backends.

    All translator implementations must conform to this protocol.
    """

    @property
    def name(self) -> str:
        """Backend name ("google", "deepl", "openai", ...)."""
        ...

    async def translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        mode: TranslationMode = TranslationMode.SELECTION,
    ) -> str | None:
        """Translate a single text.

        Args:
            text: Text to translate.
            source_lang: Source language code ("en", "fa", "auto").
            target_lang: Target language code ("en", "fa").
            mode: Request origin, selects the prompt for LLM backends.

        Returns:
            Translated text, or None when source and target are the same.

        Raises:
            TranslatorError: On configuration or translation failure.
        """
        ...

    def reset_session(self) -> None:
        """Forget any session state kept between calls."""
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...


class BaseTranslator(ABC):
    """Shared behaviour for all provider adapters.

    Subclasses implement ``_translate`` and declare the settings they need
    in ``REQUIRED_SETTINGS``. HTTP adapters go through ``_execute_api_call``
    so that every upstream failure leaves as a classified ``TranslatorError``.

    Attributes:
        name: Backend identifier.
        display_name: Human-readable provider name.
        supports_native_batch: Whether ``translate_batch`` sends segments as
            separate fields instead of one delimited string.
        accepts_json_batch: Whether the backend can translate a JSON array
            prompt in select-element mode.
        session_bearing: Whether calls read and write a SessionContext; such
            calls are serialized per adapter.
    """

    name: ClassVar[str] = ""
    display_name: ClassVar[str] = ""
    supports_native_batch: ClassVar[bool] = False
    accepts_json_batch: ClassVar[bool] = False
    session_bearing: ClassVar[bool] = False
    REQUIRED_SETTINGS: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        settings: ProviderSettings | None = None,
        *,
        timeout: float | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            settings: Provider credentials and endpoint overrides.
            timeout: Total HTTP timeout in seconds (None: unbounded).
        """
        self._settings = settings or ProviderSettings()
        self._timeout = timeout
        self._session: aiohttp.ClientSession | None = None
        self._session_context: SessionContext | None = None
        self._session_lock = asyncio.Lock()

    @property
    def session_context(self) -> SessionContext | None:
        return self._session_context

    async def translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        mode: TranslationMode = TranslationMode.SELECTION,
    ) -> str | None:
        """Translate a single text.

        Args:
            text: Text to translate.
            source_lang: Source language identifier ("en", "Farsi", "auto").
            target_lang: Target language identifier.
            mode: Request origin.

        Returns:
            Translated text; None when source and target resolve to the same
            language.

        Raises:
            ConfigurationError: Required settings are missing. No request is
                made in that case.
            TranslationError: On translation failure.
        """
        if is_same_language(source_lang, target_lang):
            logger.debug("%s: source equals target (%s), skipping", self.name, target_lang)
            return None

        # Early return for empty or whitespace-only text
        if not text or not text.strip():
            return text

        self._validate_config()
        if not self.session_bearing:
            return await self._translate(text, source_lang, target_lang, mode)
        async with self._session_lock:
            return await self._translate(text, source_lang, target_lang, mode)

    async def translate_batch(
        self,
        texts: list[str],
        source_lang: str,
        target_lang: str,
        mode: TranslationMode = TranslationMode.SELECTION,
    ) -> list[str] | None:
        """Translate several texts.

        The default joins the texts with the segment delimiter and sends one
        request. The result may have a different length than ``texts`` when
        the provider altered a delimiter; callers must check.

        Returns:
            Translated texts, or None when source and target are the same.
        """
        if not texts:
            return []
        translated = await self.translate(join_segments(texts), source_lang, target_lang, mode)
        if translated is None:
            return None
        return split_segments(translated)

    @abstractmethod
    async def _translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        mode: TranslationMode,
    ) -> str:
        """Provider-specific translation of a non-empty text."""

    def _validate_config(self) -> None:
        """Raise ConfigurationError if a required setting is empty."""
        for setting in self.REQUIRED_SETTINGS:
            if not getattr(self._settings, setting, None):
                kind = _MISSING_SETTING_KINDS.get(setting, ErrorKind.CONFIG_MISSING)
                raise ConfigurationError(
                    f"{self.display_name or self.name} {setting.replace('_', ' ')} is missing",
                    kind=kind,
                    context=f"{self.name}-config",
                )

    def reset_session(self) -> None:
        """Clear the stored session context. Idempotent."""
        self._session_context = None

    def _store_session_context(self, model: str | None) -> None:
        previous = self._session_context
        self._session_context = SessionContext(
            model=model,
            last_used=time.time(),
            turns=(previous.turns if previous else 0) + 1,
        )

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure aiohttp session exists.

        Returns:
            Active aiohttp session.
        """
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    def _kind_for_http_error(self, status: int, message: str) -> ErrorKind:
        """Classify a failed HTTP response. Adapters override for vendor codes."""
        kind = classify_message(message)
        if kind is ErrorKind.LANGUAGE_PAIR_NOT_SUPPORTED:
            return kind
        return classify_status(status) or ErrorKind.HTTP_ERROR

    async def _execute_api_call(
        self,
        method: str,
        url: str,
        *,
        context: str,
        extract_response: Callable[[Any], Any],
        params: Mapping[str, str] | None = None,
        data: Any = None,
        json: Any = None,
        headers: Mapping[str, str] | None = None,
        response_format: str = "json",
        language_pair: tuple[str, str] | None = None,
    ) -> Any:
        """Perform one HTTP call and extract the useful part of the reply.

        Args:
            method: HTTP method.
            url: Endpoint URL.
            context: Adapter and phase, attached to raised errors.
            extract_response: Picks the result out of the decoded body;
                returning None marks the response as invalid.
            params: Query parameters.
            data: Form body.
            json: JSON body.
            headers: Extra request headers.
            response_format: "json" or "text".
            language_pair: Source and target, reported when the pair is rejected.

        Returns:
            Whatever ``extract_response`` returned.

        Raises:
            UnsupportedLanguagePairError: The provider rejected the pair.
            TranslationError: Any other failure, with a classified kind.
        """
        session = await self._ensure_session()
        logger.debug("%s: %s %s", context, method, _mask_url(url))

        try:
            async with session.request(
                method, url, params=params, data=data, json=json, headers=headers
            ) as response:
                if response.status >= 400:
                    message = await _error_message(response)
                    kind = self._kind_for_http_error(response.status, message)
                    logger.debug(
                        "%s: HTTP %d (%s): %s", context, response.status, kind.value, message
                    )
                    if kind is ErrorKind.LANGUAGE_PAIR_NOT_SUPPORTED:
                        source, target = language_pair or ("auto", "?")
                        raise UnsupportedLanguagePairError(
                            source, target, self.name, message=message, status_code=response.status
                        )
                    error_cls = (
                        ConfigurationError if kind.is_configuration else TranslationError
                    )
                    raise error_cls(
                        message, kind=kind, status_code=response.status, context=context
                    )

                if response_format == "text":
                    body: Any = await response.text()
                else:
                    body = await response.json(content_type=None)
        except aiohttp.ClientError as e:
            raise TranslationError(
                f"{self.display_name or self.name} request failed: {e}",
                kind=ErrorKind.NETWORK_ERROR,
                context=context,
            ) from e
        except asyncio.TimeoutError as e:
            raise TranslationError(
                f"{self.display_name or self.name} request timed out",
                kind=ErrorKind.NETWORK_ERROR,
                context=context,
            ) from e
        except ValueError as e:
            raise TranslationError(
                f"{self.display_name or self.name} returned a malformed response: {e}",
                kind=ErrorKind.INVALID_RESPONSE,
                context=context,
            ) from e

        result = extract_response(body)
        if result is None:
            raise TranslationError(
                f"{self.display_name or self.name} returned an unexpected response",
                kind=ErrorKind.INVALID_RESPONSE,
                context=context,
            )
        return result

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session:
            await self._session.close()
            self._session = None


class BatchTranslator(BaseTranslator):
    """Base for providers that accept several texts in one request.

    Segments are sent as separate fields, so no delimiter is involved and
    the reply always has one translation per segment.
    """

    supports_native_batch = True
    MAX_TEXTS_PER_REQUEST: ClassVar[int] = 50
    MAX_REQUEST_SIZE: ClassVar[int] = 128 * 1024  # 128KB

    async def _translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        mode: TranslationMode,
    ) -> str:
        results = await self._translate_chunk([text], source_lang, target_lang)
        return results[0]

    async def translate_batch(
        self,
        texts: list[str],
        source_lang: str,
        target_lang: str,
        mode: TranslationMode = TranslationMode.SELECTION,
    ) -> list[str] | None:
        """Translate multiple texts, chunking requests to the API limits.

        Args:
            texts: List of texts to translate.
            source_lang: Source language identifier.
            target_lang: Target language identifier.
            mode: Request origin.

        Returns:
            List of translated texts (same order and length as input), or
            None when source and target are the same.

        Raises:
            ConfigurationError: Required settings are missing.
            TranslationError: On translation failure.
        """
        if is_same_language(source_lang, target_lang):
            return None
        if not texts:
            return []

        # Track empty/whitespace indices for restoration
        results: list[str] = [""] * len(texts)
        non_empty_indices: list[int] = []
        non_empty_texts: list[str] = []

        for i, text in enumerate(texts):
            if text and text.strip():
                non_empty_indices.append(i)
                non_empty_texts.append(text)
            else:
                results[i] = text  # Preserve original empty/whitespace

        if not non_empty_texts:
            return results

        self._validate_config()
        translated_texts: list[str] = []
        for chunk in self._chunk_texts(non_empty_texts):
            translated_texts.extend(
                await self._translate_chunk(chunk, source_lang, target_lang)
            )

        # Restore translations to original positions
        for i, translated in zip(non_empty_indices, translated_texts):
            results[i] = translated

        return results

    def _chunk_texts(self, texts: list[str]) -> list[list[str]]:
        """Split texts into chunks respecting API limits.

        Args:
            texts: List of texts to chunk.

        Returns:
            List of text chunks.
        """
        chunks: list[list[str]] = []
        current_chunk: list[str] = []
        current_size = 0

        for text in texts:
            text_size = len(text.encode("utf-8"))

            # Check if adding this text would exceed limits
            if (
                len(current_chunk) >= self.MAX_TEXTS_PER_REQUEST
                or current_size + text_size > self.MAX_REQUEST_SIZE
            ):
                if current_chunk:
                    chunks.append(current_chunk)
                current_chunk = [text]
                current_size = text_size
            else:
                current_chunk.append(text)
                current_size += text_size

        if current_chunk:
            chunks.append(current_chunk)

        return chunks

    @abstractmethod
    async def _translate_chunk(
        self,
        texts: list[str],
        source_lang: str,
        target_lang: str,
    ) -> list[str]:
        """Translate one request's worth of non-empty texts.

        Must return exactly one translation per input text.
        """


async def _error_message(response: aiohttp.ClientResponse) -> str:
    """Best-effort human-readable message from a failed response."""
    text = await response.text()
    try:
        payload = json.loads(text) if text else None
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        for key in ("detail", "message"):
            if payload.get(key):
                return str(payload[key])
        if isinstance(error, str) and error:
            return error
    if text and len(text) < 500:
        return text.strip()
    return response.reason or f"HTTP {response.status}"


def _mask_url(url: str) -> str:
    """Hide API keys passed as query parameters."""
    if "key=" not in url:
        return url
    head, _, tail = url.partition("key=")
    _, amp, rest = tail.partition("&")
    return f"{head}key=***{amp}{rest}"
