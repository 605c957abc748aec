# SPDX-License-Identifier: Apache-2.0
"""Shared base for generative (LLM) translation backends."""

from __future__ import annotations

from typing import ClassVar

from text_translator.config import PromptTemplates, ProviderSettings
from text_translator.core.models import TranslationMode
from text_translator.translators.base import BaseTranslator
from text_translator.translators.prompts import build_prompt


class LLMTranslator(BaseTranslator):
    """Base for backends that translate through a single prompt.

    The whole batch goes out as one prompt; the reply's first message is the
    translation. A SessionContext is stored after each successful call.
    """

    accepts_json_batch = True
    session_bearing = True
    DEFAULT_MODEL: ClassVar[str | None] = None

    def __init__(
        self,
        settings: ProviderSettings | None = None,
        *,
        prompts: PromptTemplates | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            settings: Provider credentials, endpoint and model.
            prompts: Prompt templates (default: built-in templates).
            timeout: Total HTTP timeout in seconds (None: unbounded).
        """
        super().__init__(settings, timeout=timeout)
        self._prompts = prompts or PromptTemplates()

    @property
    def model(self) -> str | None:
        """Effective model: configured model, else the provider default."""
        return self._settings.model or self.DEFAULT_MODEL

    def _build_prompt(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        mode: TranslationMode,
    ) -> str:
        return build_prompt(text, source_lang, target_lang, mode, self._prompts)
