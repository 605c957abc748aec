# SPDX-License-Identifier: Apache-2.0
"""Text Translator - one request pipeline over ten translation providers."""

from text_translator.config import PromptTemplates, ProviderSettings, TranslatorSettings
from text_translator.core.models import AUTO, ProviderId, TranslationMode, TranslationRequest
from text_translator.pipeline import PipelineConfig, TranslationPipeline, TranslationResult
from text_translator.translators import ErrorKind, ProviderRegistry, TranslatorError

__version__ = "0.1.0"

__all__ = [
    "AUTO",
    "ErrorKind",
    "PipelineConfig",
    "PromptTemplates",
    "ProviderId",
    "ProviderRegistry",
    "ProviderSettings",
    "TranslationMode",
    "TranslationPipeline",
    "TranslationRequest",
    "TranslationResult",
    "TranslatorError",
    "TranslatorSettings",
]
