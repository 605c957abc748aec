# SPDX-License-Identifier: Apache-2.0
"""Prompt construction for LLM translation backends."""

from __future__ import annotations

from text_translator.config import PromptTemplates
from text_translator.core.languages import get_language_name
from text_translator.core.models import TranslationMode
from text_translator.core.segments import SEGMENT_DELIMITER
from text_translator.translators.base import ConfigurationError
from text_translator.translators.errors import ErrorKind

SOURCE_PLACEHOLDER = "$_{SOURCE}"
TARGET_PLACEHOLDER = "$_{TARGET}"
TEXT_PLACEHOLDER = "$_{TEXT}"

DELIMITER_INSTRUCTION = (
    "The text contains several segments separated by lines containing only "
    "'---'. Translate each segment and keep every separator exactly where it is."
)


def select_template(templates: PromptTemplates, mode: TranslationMode) -> str:
    """Pick the template for a translation mode."""
    if mode is TranslationMode.FIELD:
        return templates.field
    if mode is TranslationMode.DICTIONARY:
        return templates.dictionary
    if mode is TranslationMode.POPUP_TRANSLATE:
        return templates.popup
    if mode is TranslationMode.SELECT_ELEMENT:
        return templates.select_element
    return templates.base


def build_prompt(
    text: str,
    source_lang: str,
    target_lang: str,
    mode: TranslationMode,
    templates: PromptTemplates | None = None,
) -> str:
    """Substitute language names and text into the mode's template.

    Args:
        text: Text (or JSON array, in select-element mode) to translate.
        source_lang: Source language identifier; "auto" becomes
            "the source language".
        target_lang: Target language identifier.
        mode: Request origin.
        templates: Templates to use (default: built-in templates).

    Returns:
        The final prompt.

    Raises:
        ConfigurationError: The template has no ``$_{TEXT}`` placeholder.
    """
    templates = templates or PromptTemplates()
    template = select_template(templates, mode)
    if TEXT_PLACEHOLDER not in template:
        raise ConfigurationError(
            "Prompt is invalid: template has no $_{TEXT} placeholder",
            kind=ErrorKind.PROMPT_INVALID,
            context="prompt-build",
        )

    prompt = template.replace(SOURCE_PLACEHOLDER, get_language_name(source_lang))
    prompt = prompt.replace(TARGET_PLACEHOLDER, get_language_name(target_lang))
    if SEGMENT_DELIMITER in text and mode is not TranslationMode.SELECT_ELEMENT:
        prompt = prompt.replace(TEXT_PLACEHOLDER, f"{DELIMITER_INSTRUCTION}\n\n{TEXT_PLACEHOLDER}")
    # Text last so placeholders inside user text are left alone.
    return prompt.replace(TEXT_PLACEHOLDER, text)
