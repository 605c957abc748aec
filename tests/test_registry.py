# SPDX-License-Identifier: Apache-2.0
"""Tests for the provider registry."""

from unittest.mock import AsyncMock, patch

import pytest

from text_translator.config import PromptTemplates, ProviderSettings, TranslatorSettings
from text_translator.core.models import ProviderId
from text_translator.translators import (
    DeepLTranslator,
    GeminiTranslator,
    GoogleTranslator,
    ProviderRegistry,
    UnsupportedProviderError,
)
from text_translator.translators.errors import ErrorKind
from text_translator.translators.registry import parse_provider_id


class TestParseProviderId:
    """Test provider id parsing."""

    def test_case_insensitive(self) -> None:
        assert parse_provider_id("DeepL") is ProviderId.DEEPL
        assert parse_provider_id(" google ") is ProviderId.GOOGLE
        assert parse_provider_id(ProviderId.BING) is ProviderId.BING

    def test_unknown_id(self) -> None:
        with pytest.raises(UnsupportedProviderError) as exc_info:
            parse_provider_id("babelfish")
        assert exc_info.value.kind is ErrorKind.UNSUPPORTED_PROVIDER
        assert exc_info.value.provider_id == "babelfish"


class TestProviderRegistry:
    """Test adapter creation and caching."""

    def test_list_supported(self) -> None:
        assert ProviderRegistry.list_supported() == [
            "google",
            "bing",
            "yandex",
            "deepl",
            "gemini",
            "openai",
            "openrouter",
            "deepseek",
            "webai",
            "custom",
        ]

    def test_same_instance_returned(self) -> None:
        """Repeated lookups reuse one adapter per provider."""
        registry = ProviderRegistry()
        first = registry.get_adapter("google")
        assert isinstance(first, GoogleTranslator)
        assert registry.get_adapter("GOOGLE") is first
        assert registry.get_adapter(ProviderId.GOOGLE) is first

    def test_distinct_providers_distinct_instances(self) -> None:
        registry = ProviderRegistry()
        assert registry.get_adapter("google") is not registry.get_adapter("bing")

    def test_unknown_provider(self) -> None:
        with pytest.raises(UnsupportedProviderError):
            ProviderRegistry().get_adapter("babelfish")

    def test_settings_are_passed_to_adapters(self) -> None:
        prompts = PromptTemplates(base="X $_{TEXT}")
        settings = TranslatorSettings(
            providers={
                "deepl": ProviderSettings(api_key="abc:fx"),
                "gemini": ProviderSettings(api_key="g", model="gemini-pro"),
            },
            prompts=prompts,
            request_timeout=12.0,
        )
        registry = ProviderRegistry(settings)

        deepl = registry.get_adapter("deepl")
        gemini = registry.get_adapter("gemini")
        assert isinstance(deepl, DeepLTranslator)
        assert deepl.api_url == DeepLTranslator.FREE_API_URL
        assert deepl._timeout == 12.0
        assert isinstance(gemini, GeminiTranslator)
        assert gemini.model == "gemini-pro"
        assert gemini._prompts is prompts

    def test_reset_one_provider(self) -> None:
        registry = ProviderRegistry()
        gemini = registry.get_adapter("gemini")
        webai = registry.get_adapter("webai")
        gemini._store_session_context("m")
        webai._store_session_context("m")

        registry.reset_session("gemini")

        assert gemini.session_context is None
        assert webai.session_context is not None

    def test_reset_all_providers(self) -> None:
        registry = ProviderRegistry()
        gemini = registry.get_adapter("gemini")
        webai = registry.get_adapter("webai")
        gemini._store_session_context("m")
        webai._store_session_context("m")

        registry.reset_session()

        assert gemini.session_context is None
        assert webai.session_context is None

    def test_reset_uncreated_provider_is_noop(self) -> None:
        registry = ProviderRegistry()
        registry.reset_session("openai")
        registry.reset_session("openai")

    def test_reset_unknown_provider(self) -> None:
        with pytest.raises(UnsupportedProviderError):
            ProviderRegistry().reset_session("babelfish")

    @pytest.mark.asyncio
    async def test_aclose_closes_adapters(self) -> None:
        registry = ProviderRegistry()
        adapter = registry.get_adapter("bing")
        with patch.object(adapter, "close", new=AsyncMock()) as mock_close:
            await registry.aclose()
        mock_close.assert_awaited_once()
