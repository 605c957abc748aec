# SPDX-License-Identifier: Apache-2.0
"""Data models for translation requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Sentinel source language meaning "detect from the text".
AUTO = "auto"


class TranslationMode(str, Enum):
    """Where a translation request originates.

    The mode selects the prompt template for LLM backends and tweaks
    source-language handling for some MT backends.
    """

    FIELD = "field"
    SELECTION = "selection"
    DICTIONARY = "dictionary"
    POPUP_TRANSLATE = "popup_translate"
    SUBTITLE = "subtitle"
    SELECT_ELEMENT = "select_element"


class ProviderId(str, Enum):
    """Closed set of supported translation providers."""

    GOOGLE = "google"
    BING = "bing"
    YANDEX = "yandex"
    DEEPL = "deepl"
    GEMINI = "gemini"
    OPENAI = "openai"
    OPENROUTER = "openrouter"
    DEEPSEEK = "deepseek"
    WEBAI = "webai"
    CUSTOM = "custom"

    @classmethod
    def parse(cls, value: str | ProviderId) -> ProviderId | None:
        """Case-insensitive lookup; returns None for unknown ids."""
        if isinstance(value, ProviderId):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


@dataclass(frozen=True)
class TranslationRequest:
    """A single translation call.

    Attributes:
        raw_input: Plain text, or a JSON array of ``{"text": ...}`` segments.
        source_language: Display name, prompt name, code, or ``AUTO``.
        target_language: Display name, prompt name, or code.
        mode: Request origin.
        provider_id: Registry id of the backend to use.
    """

    raw_input: str
    source_language: str = AUTO
    target_language: str = "en"
    mode: TranslationMode = TranslationMode.SELECTION
    provider_id: str = ProviderId.GOOGLE.value


@dataclass
class SessionContext:
    """State kept by an adapter between calls to a session-capable backend."""

    model: str | None = None
    last_used: float = 0.0
    turns: int = 0
    extra: dict[str, Any] = field(default_factory=dict)
