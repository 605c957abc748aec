# SPDX-License-Identifier: Apache-2.0
"""OpenRouter translation backend."""

from text_translator.translators.openai import OpenAICompatibleTranslator


class OpenRouterTranslator(OpenAICompatibleTranslator):
    """OpenRouter backend (OpenAI-compatible API over many vendors' models).

    Attributes:
        name: Backend identifier ("openrouter").
    """

    name = "openrouter"
    display_name = "OpenRouter"
    DEFAULT_MODEL = "openai/gpt-4o"
    DEFAULT_API_URL = "https://openrouter.ai/api/v1"
    # Optional attribution header recognised by OpenRouter
    DEFAULT_HEADERS = {"X-Title": "text-translator"}
