# SPDX-License-Identifier: Apache-2.0
"""Tests for provider settings."""

from text_translator.config import (
    DEFAULT_PROMPT_TEMPLATE,
    PromptTemplates,
    ProviderSettings,
    TranslatorSettings,
)
from text_translator.core.models import AUTO


class TestProviderSettings:
    """Tests for ProviderSettings."""

    def test_merged_ignores_none(self) -> None:
        settings = ProviderSettings(api_key="a", api_url="http://a")
        merged = settings.merged(api_key="b", api_url=None, model="m")
        assert merged == ProviderSettings(api_key="b", api_url="http://a", model="m")
        assert settings.api_key == "a"


class TestTranslatorSettings:
    """Tests for TranslatorSettings."""

    def test_defaults(self) -> None:
        settings = TranslatorSettings()
        assert settings.source_language == AUTO
        assert settings.target_language == "en"
        assert settings.request_timeout is None
        assert settings.prompts.base == DEFAULT_PROMPT_TEMPLATE

    def test_unknown_provider_gets_empty_settings(self) -> None:
        assert TranslatorSettings().provider("deepl") == ProviderSettings()

    def test_provider_lookup_is_case_insensitive(self) -> None:
        settings = TranslatorSettings(providers={"deepl": ProviderSettings(api_key="k")})
        assert settings.provider("DeepL").api_key == "k"

    def test_from_env(self) -> None:
        environ = {
            "DEEPL_API_KEY": "deepl-key",
            "CUSTOM_API_URL": "http://localhost:8000/v1",
            "CUSTOM_MODEL": "llama3",
            "OPENAI_API_KEY": "",
            "GEMINI_THINKING_BUDGET": "0",
            "TRANSLATOR_SOURCE_LANG": "English",
            "TRANSLATOR_TARGET_LANG": "Farsi",
            "TRANSLATOR_TIMEOUT": "30",
            "TRANSLATOR_PROMPT_TEMPLATE": "To $_{TARGET}: $_{TEXT}",
        }
        settings = TranslatorSettings.from_env(environ)

        assert settings.provider("deepl").api_key == "deepl-key"
        assert settings.provider("custom").api_url == "http://localhost:8000/v1"
        assert settings.provider("custom").model == "llama3"
        assert settings.provider("openai").api_key is None
        assert settings.provider("gemini").extra == {"thinking_budget": 0}
        assert settings.source_language == "English"
        assert settings.target_language == "Farsi"
        assert settings.request_timeout == 30.0
        assert settings.prompts.base == "To $_{TARGET}: $_{TEXT}"
        assert settings.prompts.field == PromptTemplates().field

    def test_from_env_empty(self) -> None:
        settings = TranslatorSettings.from_env({})
        assert settings.source_language == AUTO
        assert settings.target_language == "en"
        assert set(settings.providers) == set(TranslatorSettings.ENV_PREFIXES)

    def test_invalid_numbers_are_ignored(self) -> None:
        environ = {"GEMINI_THINKING_BUDGET": "lots", "TRANSLATOR_TIMEOUT": "soon"}
        settings = TranslatorSettings.from_env(environ)
        assert settings.provider("gemini").extra == {}
        assert settings.request_timeout is None

    def test_overrides_win(self) -> None:
        environ = {"TRANSLATOR_TARGET_LANG": "fr", "TRANSLATOR_TIMEOUT": "30"}
        settings = TranslatorSettings.from_env(
            environ, target_language="de", request_timeout=None
        )
        assert settings.target_language == "de"
        assert settings.request_timeout == 30.0
