# SPDX-License-Identifier: Apache-2.0
"""Backend for any user-supplied OpenAI-compatible endpoint."""

from text_translator.translators.openai import OpenAICompatibleTranslator


class CustomTranslator(OpenAICompatibleTranslator):
    """Custom OpenAI-compatible backend.

    There are no defaults: key, URL and model must all be configured
    (``CUSTOM_API_KEY``, ``CUSTOM_API_URL``, ``CUSTOM_MODEL``).

    Attributes:
        name: Backend identifier ("custom").
    """

    name = "custom"
    display_name = "Custom API"
    REQUIRED_SETTINGS = ("api_key", "api_url", "model")
