# SPDX-License-Identifier: Apache-2.0
"""Settings for translation providers.

Values are resolved with the precedence: explicit argument > environment
variable > built-in default. Provider defaults (endpoint URL, model) live on
the adapter classes; this module only carries what the user supplied.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar

from text_translator.core.models import AUTO, ProviderId

logger = logging.getLogger(__name__)

DEFAULT_PROMPT_TEMPLATE = (
    "Please translate the following text from $_{SOURCE} to $_{TARGET}:\n\n$_{TEXT}"
)

DEFAULT_FIELD_PROMPT = (
    "Translate the following text from $_{SOURCE} to $_{TARGET}. "
    "Return only the translated text without quotes, notes or explanations.\n\n"
    "$_{TEXT}"
)

DEFAULT_DICTIONARY_PROMPT = (
    "Act as a bilingual $_{SOURCE}-$_{TARGET} dictionary. For the word or phrase "
    "below, give its $_{TARGET} meanings, its part of speech and one short "
    "example sentence.\n\n$_{TEXT}"
)

DEFAULT_POPUP_PROMPT = (
    "Translate the following text from $_{SOURCE} to $_{TARGET}. Keep the "
    "original formatting and line breaks, and return only the translation.\n\n"
    "$_{TEXT}"
)

DEFAULT_SELECT_ELEMENT_PROMPT = (
    "Translate the following JSON array of texts from $_{SOURCE} to $_{TARGET}. "
    "Return a JSON array with exactly the same number of items in the same "
    "order, where each item is the translated string. Return only the JSON "
    "array.\n\n$_{TEXT}"
)


@dataclass
class ProviderSettings:
    """Credentials and endpoint for one provider.

    Attributes:
        api_key: API key, if the provider needs one.
        api_url: Endpoint URL override.
        model: Model id for LLM providers.
        extra: Provider-specific options (e.g. Gemini ``thinking_budget``).
    """

    api_key: str | None = None
    api_url: str | None = None
    model: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def merged(self, **overrides: Any) -> ProviderSettings:
        """Return a copy with non-None overrides applied."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **values)


@dataclass
class PromptTemplates:
    """Prompt templates for LLM providers.

    Each template may use the ``$_{SOURCE}``, ``$_{TARGET}`` and ``$_{TEXT}``
    placeholders.
    """

    base: str = DEFAULT_PROMPT_TEMPLATE
    field: str = DEFAULT_FIELD_PROMPT
    dictionary: str = DEFAULT_DICTIONARY_PROMPT
    popup: str = DEFAULT_POPUP_PROMPT
    select_element: str = DEFAULT_SELECT_ELEMENT_PROMPT


@dataclass
class TranslatorSettings:
    """Top-level settings shared by the registry and the pipeline.

    Attributes:
        providers: Per-provider settings keyed by provider id.
        prompts: LLM prompt templates.
        source_language: Default source language (``AUTO`` to detect).
        target_language: Default target language.
        request_timeout: Total HTTP timeout in seconds (None: unbounded).
    """

    providers: dict[str, ProviderSettings] = field(default_factory=dict)
    prompts: PromptTemplates = field(default_factory=PromptTemplates)
    source_language: str = AUTO
    target_language: str = "en"
    request_timeout: float | None = None

    # Environment variable prefix per provider: <PREFIX>_API_KEY etc.
    ENV_PREFIXES: ClassVar[dict[str, str]] = {p.value: p.value.upper() for p in ProviderId}

    def provider(self, provider_id: str) -> ProviderSettings:
        """Settings for one provider (empty settings if none configured)."""
        return self.providers.get(provider_id.lower(), ProviderSettings())

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> TranslatorSettings:
        """Build settings from environment variables.

        Reads ``<PROVIDER>_API_KEY``, ``<PROVIDER>_API_URL`` and
        ``<PROVIDER>_MODEL`` for every provider, ``GEMINI_THINKING_BUDGET``,
        ``TRANSLATOR_SOURCE_LANG``, ``TRANSLATOR_TARGET_LANG``,
        ``TRANSLATOR_TIMEOUT`` and ``TRANSLATOR_PROMPT_TEMPLATE``.

        Args:
            environ: Mapping to read from (default: ``os.environ``).
            **overrides: Explicit values for top-level fields; they win over
                the environment when not None.

        Returns:
            Populated settings.
        """
        env = os.environ if environ is None else environ

        providers: dict[str, ProviderSettings] = {}
        for provider_id, prefix in cls.ENV_PREFIXES.items():
            settings = ProviderSettings(
                api_key=env.get(f"{prefix}_API_KEY") or None,
                api_url=env.get(f"{prefix}_API_URL") or None,
                model=env.get(f"{prefix}_MODEL") or None,
            )
            providers[provider_id] = settings

        budget = env.get("GEMINI_THINKING_BUDGET")
        if budget:
            try:
                providers[ProviderId.GEMINI.value].extra["thinking_budget"] = int(budget)
            except ValueError:
                logger.warning("Ignoring non-integer GEMINI_THINKING_BUDGET: %r", budget)

        prompts = PromptTemplates()
        template = env.get("TRANSLATOR_PROMPT_TEMPLATE")
        if template:
            prompts.base = template

        timeout: float | None = None
        raw_timeout = env.get("TRANSLATOR_TIMEOUT")
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError:
                logger.warning("Ignoring non-numeric TRANSLATOR_TIMEOUT: %r", raw_timeout)

        values: dict[str, Any] = {
            "providers": providers,
            "prompts": prompts,
            "source_language": env.get("TRANSLATOR_SOURCE_LANG") or AUTO,
            "target_language": env.get("TRANSLATOR_TARGET_LANG") or "en",
            "request_timeout": timeout,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
