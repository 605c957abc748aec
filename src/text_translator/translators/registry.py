# SPDX-License-Identifier: Apache-2.0
"""Provider registry: one cached adapter per provider id."""

from __future__ import annotations

import logging

from text_translator.config import TranslatorSettings
from text_translator.core.models import ProviderId
from text_translator.translators.base import BaseTranslator, UnsupportedProviderError
from text_translator.translators.bing import BingTranslator
from text_translator.translators.custom import CustomTranslator
from text_translator.translators.deepl import DeepLTranslator
from text_translator.translators.deepseek import DeepSeekTranslator
from text_translator.translators.gemini import GeminiTranslator
from text_translator.translators.google import GoogleTranslator
from text_translator.translators.llm import LLMTranslator
from text_translator.translators.openai import OpenAITranslator
from text_translator.translators.openrouter import OpenRouterTranslator
from text_translator.translators.webai import WebAITranslator
from text_translator.translators.yandex import YandexTranslator

logger = logging.getLogger(__name__)

ADAPTER_CLASSES: dict[ProviderId, type[BaseTranslator]] = {
    ProviderId.GOOGLE: GoogleTranslator,
    ProviderId.BING: BingTranslator,
    ProviderId.YANDEX: YandexTranslator,
    ProviderId.DEEPL: DeepLTranslator,
    ProviderId.GEMINI: GeminiTranslator,
    ProviderId.OPENAI: OpenAITranslator,
    ProviderId.OPENROUTER: OpenRouterTranslator,
    ProviderId.DEEPSEEK: DeepSeekTranslator,
    ProviderId.WEBAI: WebAITranslator,
    ProviderId.CUSTOM: CustomTranslator,
}


def parse_provider_id(provider_id: str | ProviderId) -> ProviderId:
    """Case-insensitive provider lookup.

    Raises:
        UnsupportedProviderError: The id is not one of the supported providers.
    """
    parsed = ProviderId.parse(provider_id)
    if parsed is None:
        raise UnsupportedProviderError(str(provider_id))
    return parsed


class ProviderRegistry:
    """Creates adapters on first use and caches them for reuse.

    The registry owns the adapters and therefore their session state;
    callers only ever pass provider id strings.
    """

    def __init__(self, settings: TranslatorSettings | None = None) -> None:
        self._settings = settings or TranslatorSettings()
        self._adapters: dict[ProviderId, BaseTranslator] = {}

    @property
    def settings(self) -> TranslatorSettings:
        return self._settings

    def get_adapter(self, provider_id: str | ProviderId) -> BaseTranslator:
        """Return the cached adapter for a provider, creating it if needed.

        Args:
            provider_id: Provider id, case-insensitive.

        Returns:
            The single adapter instance for this provider.

        Raises:
            UnsupportedProviderError: Unknown provider id.
        """
        pid = parse_provider_id(provider_id)
        adapter = self._adapters.get(pid)
        if adapter is None:
            adapter = self._create(pid)
            self._adapters[pid] = adapter
            logger.debug("Created %s adapter", pid.value)
        return adapter

    def _create(self, pid: ProviderId) -> BaseTranslator:
        cls = ADAPTER_CLASSES[pid]
        provider_settings = self._settings.provider(pid.value)
        timeout = self._settings.request_timeout
        if issubclass(cls, LLMTranslator):
            return cls(provider_settings, prompts=self._settings.prompts, timeout=timeout)
        return cls(provider_settings, timeout=timeout)

    def reset_session(self, provider_id: str | ProviderId | None = None) -> None:
        """Clear session state for one provider, or for every cached adapter.

        Resetting a provider that has no adapter yet is a no-op.

        Raises:
            UnsupportedProviderError: Unknown provider id.
        """
        if provider_id is None:
            for adapter in self._adapters.values():
                adapter.reset_session()
            return

        pid = parse_provider_id(provider_id)
        adapter = self._adapters.get(pid)
        if adapter is not None:
            adapter.reset_session()

    @staticmethod
    def list_supported() -> list[str]:
        """Ids of every supported provider."""
        return [pid.value for pid in ProviderId]

    async def aclose(self) -> None:
        """Close every cached adapter's network resources."""
        for adapter in self._adapters.values():
            await adapter.close()
