# SPDX-License-Identifier: Apache-2.0
"""Translation backend modules.

This module provides adapters for ten providers behind one contract:
``await adapter.translate(text, source_lang, target_lang, mode)``.

Google, Bing and Yandex need no API key. DeepL, Gemini and the
OpenAI-compatible providers need a key; WebAI talks to a local server.

Usage:
    # Through the registry (one cached adapter per provider)
    from text_translator.translators import ProviderRegistry
    registry = ProviderRegistry()
    translator = registry.get_adapter("google")
    result = await translator.translate("Hello", "en", "fa")

    # Directly
    from text_translator.config import ProviderSettings
    from text_translator.translators import DeepLTranslator
    translator = DeepLTranslator(ProviderSettings(api_key="your-api-key"))
"""

from text_translator.translators.base import (
    BaseTranslator,
    BatchTranslator,
    ConfigurationError,
    TranslationError,
    TranslatorBackend,
    TranslatorError,
    UnsupportedLanguagePairError,
    UnsupportedProviderError,
)
from text_translator.translators.bing import BingTranslator
from text_translator.translators.custom import CustomTranslator
from text_translator.translators.deepl import DeepLTranslator
from text_translator.translators.deepseek import DeepSeekTranslator
from text_translator.translators.errors import (
    ErrorKind,
    classify_error,
    classify_message,
    classify_status,
    is_retryable,
)
from text_translator.translators.gemini import GeminiTranslator
from text_translator.translators.google import GoogleTranslator
from text_translator.translators.openai import OpenAICompatibleTranslator, OpenAITranslator
from text_translator.translators.openrouter import OpenRouterTranslator
from text_translator.translators.registry import ADAPTER_CLASSES, ProviderRegistry
from text_translator.translators.webai import WebAITranslator
from text_translator.translators.yandex import YandexTranslator

__all__ = [
    # Protocol, base classes and exceptions
    "TranslatorBackend",
    "BaseTranslator",
    "BatchTranslator",
    "TranslatorError",
    "TranslationError",
    "ConfigurationError",
    "UnsupportedLanguagePairError",
    "UnsupportedProviderError",
    # Error classification
    "ErrorKind",
    "classify_error",
    "classify_message",
    "classify_status",
    "is_retryable",
    # Adapters
    "GoogleTranslator",
    "BingTranslator",
    "YandexTranslator",
    "DeepLTranslator",
    "GeminiTranslator",
    "OpenAICompatibleTranslator",
    "OpenAITranslator",
    "OpenRouterTranslator",
    "DeepSeekTranslator",
    "WebAITranslator",
    "CustomTranslator",
    # Registry
    "ADAPTER_CLASSES",
    "ProviderRegistry",
]
