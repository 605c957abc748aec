# SPDX-License-Identifier: Apache-2.0
"""DeepSeek translation backend."""

from text_translator.translators.openai import OpenAICompatibleTranslator


class DeepSeekTranslator(OpenAICompatibleTranslator):
    """DeepSeek backend (OpenAI-compatible API).

    Attributes:
        name: Backend identifier ("deepseek").
    """

    name = "deepseek"
    display_name = "DeepSeek"
    DEFAULT_MODEL = "deepseek-chat"
    DEFAULT_API_URL = "https://api.deepseek.com/v1"
