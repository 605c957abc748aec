# SPDX-License-Identifier: Apache-2.0
"""Tests for the translation pipeline."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from text_translator.config import ProviderSettings, TranslatorSettings
from text_translator.core.models import TranslationMode, TranslationRequest
from text_translator.core.segments import SEGMENT_DELIMITER
from text_translator.pipeline import PipelineConfig, TranslationPipeline
from text_translator.translators import (
    ProviderRegistry,
    TranslationError,
    UnsupportedProviderError,
)
from text_translator.translators.errors import ErrorKind

BATCH_INPUT = '[{"text": "a", "id": 1}, {"text": "b", "id": 2}]'


class FakeDetector:
    """Detector returning a fixed language."""

    def __init__(self, code: str) -> None:
        self.code = code
        self.calls: list[str] = []

    def detect(self, text: str) -> list[tuple[str, float]]:
        self.calls.append(text)
        return [(self.code, 0.99)]


def _settings() -> TranslatorSettings:
    return TranslatorSettings(
        providers={
            "deepl": ProviderSettings(api_key="abc:fx"),
            "gemini": ProviderSettings(api_key="g"),
        }
    )


class TestPipelinePlainText:
    """Tests for single-string requests."""

    @pytest.mark.asyncio
    async def test_auto_detect_to_farsi(self) -> None:
        """Hello with auto source and a Farsi target goes en -> fa."""
        detector = FakeDetector("en")
        pipeline = TranslationPipeline(detector=detector)
        google = pipeline.registry.get_adapter("google")

        with patch.object(google, "_translate_sync", return_value="سلام") as mock_sync:
            result = await pipeline.translate(
                TranslationRequest("Hello", target_language="Farsi", provider_id="google")
            )

        assert result.text == "سلام"
        assert result.source_lang == "en"
        assert result.target_lang == "fa"
        assert result.provider == "google"
        assert not result.is_batch
        assert not result.skipped
        mock_sync.assert_called_once_with("Hello", "en", "fa")
        assert detector.calls == ["Hello"]

    @pytest.mark.asyncio
    async def test_auto_detect_with_default_detector(self) -> None:
        """The langdetect-backed default resolves a single English word to en."""
        pipeline = TranslationPipeline()
        google = pipeline.registry.get_adapter("google")

        with patch.object(google, "_translate_sync", return_value="سلام") as mock_sync:
            result = await pipeline.translate(
                TranslationRequest("Hello", target_language="Farsi", provider_id="google")
            )

        assert (result.source_lang, result.target_lang) == ("en", "fa")
        mock_sync.assert_called_once_with("Hello", "en", "fa")

    @pytest.mark.asyncio
    async def test_explicit_source_skips_detection(self) -> None:
        detector = MagicMock()
        pipeline = TranslationPipeline(detector=detector)
        google = pipeline.registry.get_adapter("google")

        with patch.object(google, "_translate_sync", return_value="Hallo"):
            result = await pipeline.translate(
                TranslationRequest("Hello", source_language="English", target_language="de")
            )

        assert result.text == "Hallo"
        detector.detect.assert_not_called()

    @pytest.mark.asyncio
    async def test_text_in_target_language_is_swapped(self) -> None:
        """Persian text with a Persian target is translated back to English."""
        pipeline = TranslationPipeline(detector=FakeDetector("fa"))
        google = pipeline.registry.get_adapter("google")

        with patch.object(google, "_translate_sync", return_value="Hello") as mock_sync:
            result = await pipeline.translate(TranslationRequest("سلام", target_language="fa"))

        assert result.text == "Hello"
        assert (result.source_lang, result.target_lang) == ("fa", "en")
        mock_sync.assert_called_once_with("سلام", "fa", "en")

    @pytest.mark.asyncio
    async def test_configured_counterpart(self) -> None:
        pipeline = TranslationPipeline(
            config=PipelineConfig(counterpart_language="German"),
            detector=FakeDetector("fa"),
        )
        google = pipeline.registry.get_adapter("google")

        with patch.object(google, "_translate_sync", return_value="Hallo"):
            result = await pipeline.translate(TranslationRequest("سلام", target_language="fa"))

        assert (result.source_lang, result.target_lang) == ("fa", "de")

    @pytest.mark.asyncio
    async def test_same_language_is_skipped(self) -> None:
        """English text to English makes no provider call."""
        pipeline = TranslationPipeline(detector=FakeDetector("en"))
        google = pipeline.registry.get_adapter("google")

        with patch.object(google, "translate", new=AsyncMock()) as mock_translate:
            result = await pipeline.translate(TranslationRequest("Hello", target_language="en"))

        assert result.skipped
        assert result.text == "Hello"
        assert result.provider == "google"
        mock_translate.assert_not_called()

    @pytest.mark.asyncio
    async def test_errors_propagate(self) -> None:
        """The pipeline does not retry or swallow adapter failures."""
        pipeline = TranslationPipeline(detector=FakeDetector("en"))
        google = pipeline.registry.get_adapter("google")
        error = TranslationError("slow down", kind=ErrorKind.RATE_LIMIT_REACHED)

        with patch.object(google, "translate", new=AsyncMock(side_effect=error)) as mock_translate:
            with pytest.raises(TranslationError) as exc_info:
                await pipeline.translate(TranslationRequest("Hello", target_language="fa"))

        assert exc_info.value is error
        assert mock_translate.await_count == 1

    @pytest.mark.asyncio
    async def test_unknown_provider(self) -> None:
        detector = MagicMock()
        pipeline = TranslationPipeline(detector=detector)
        with pytest.raises(UnsupportedProviderError):
            await pipeline.translate(TranslationRequest("Hello", provider_id="babelfish"))
        detector.detect.assert_not_called()


class TestPipelineBatch:
    """Tests for JSON segment batches."""

    @pytest.mark.asyncio
    async def test_delimited_batch(self) -> None:
        """Single-string providers receive one delimited payload."""
        detector = FakeDetector("en")
        pipeline = TranslationPipeline(detector=detector)
        google = pipeline.registry.get_adapter("google")

        with patch.object(
            google, "_translate_sync", return_value=f"x{SEGMENT_DELIMITER}y"
        ) as mock_sync:
            result = await pipeline.translate(
                TranslationRequest(BATCH_INPUT, target_language="fa")
            )

        expected = [{"text": "x", "id": 1}, {"text": "y", "id": 2}]
        assert result.is_batch
        assert result.segments == expected
        assert json.loads(result.text) == expected
        assert not result.segment_count_mismatch
        assert mock_sync.call_args.args[0] == f"a{SEGMENT_DELIMITER}b"
        assert detector.calls == ["a\nb"]

    @pytest.mark.asyncio
    async def test_segment_count_mismatch(self) -> None:
        """A provider that drops a delimiter yields the raw string."""
        pipeline = TranslationPipeline(detector=FakeDetector("en"))
        google = pipeline.registry.get_adapter("google")

        with patch.object(google, "_translate_sync", return_value="x y"):
            result = await pipeline.translate(
                TranslationRequest(BATCH_INPUT, target_language="fa")
            )

        assert result.is_batch
        assert result.segment_count_mismatch
        assert result.segments is None
        assert result.text == "x y"

    @pytest.mark.asyncio
    async def test_native_batch(self) -> None:
        pipeline = TranslationPipeline(ProviderRegistry(_settings()), detector=FakeDetector("en"))
        deepl = pipeline.registry.get_adapter("deepl")

        with patch.object(
            deepl, "translate_batch", new=AsyncMock(return_value=["x", "y"])
        ) as mock_batch:
            result = await pipeline.translate(
                TranslationRequest(BATCH_INPUT, target_language="de", provider_id="deepl")
            )

        assert result.segments == [{"text": "x", "id": 1}, {"text": "y", "id": 2}]
        mock_batch.assert_awaited_once_with(["a", "b"], "en", "de", TranslationMode.SELECTION)

    @pytest.mark.asyncio
    async def test_select_element_json_prompt(self) -> None:
        """LLM providers get the segments as a JSON array in select-element mode."""
        pipeline = TranslationPipeline(ProviderRegistry(_settings()), detector=FakeDetector("en"))
        gemini = pipeline.registry.get_adapter("gemini")
        reply = '```json\n["x", "y"]\n```'

        with patch.object(gemini, "translate", new=AsyncMock(return_value=reply)) as mock_translate:
            result = await pipeline.translate(
                TranslationRequest(
                    BATCH_INPUT,
                    target_language="fa",
                    mode=TranslationMode.SELECT_ELEMENT,
                    provider_id="gemini",
                )
            )

        assert result.segments == [{"text": "x", "id": 1}, {"text": "y", "id": 2}]
        sent = mock_translate.call_args.args[0]
        assert json.loads(sent) == [{"text": "a"}, {"text": "b"}]

    @pytest.mark.asyncio
    async def test_select_element_with_mt_provider(self) -> None:
        """MT providers keep using the delimiter in select-element mode."""
        pipeline = TranslationPipeline(detector=FakeDetector("en"))
        google = pipeline.registry.get_adapter("google")

        with patch.object(
            google, "_translate_sync", return_value=f"x{SEGMENT_DELIMITER}y"
        ) as mock_sync:
            result = await pipeline.translate(
                TranslationRequest(
                    BATCH_INPUT, target_language="fa", mode=TranslationMode.SELECT_ELEMENT
                )
            )

        assert result.segments == [{"text": "x", "id": 1}, {"text": "y", "id": 2}]
        assert mock_sync.call_args.args[0] == f"a{SEGMENT_DELIMITER}b"

    @pytest.mark.asyncio
    async def test_skipped_batch_keeps_segments(self) -> None:
        pipeline = TranslationPipeline(detector=FakeDetector("en"))
        result = await pipeline.translate(TranslationRequest(BATCH_INPUT, target_language="en"))

        assert result.skipped
        assert result.is_batch
        assert result.text == BATCH_INPUT
        assert result.segments == [{"text": "a", "id": 1}, {"text": "b", "id": 2}]


class TestPipelineLifecycle:
    """Tests for resource handling."""

    @pytest.mark.asyncio
    async def test_aclose(self) -> None:
        registry = ProviderRegistry()
        pipeline = TranslationPipeline(registry)
        with patch.object(registry, "aclose", new=AsyncMock()) as mock_aclose:
            await pipeline.aclose()
        mock_aclose.assert_awaited_once()

    def test_default_counterpart_from_settings(self) -> None:
        registry = ProviderRegistry(TranslatorSettings(source_language="de"))
        pipeline = TranslationPipeline(registry)
        assert pipeline._config.counterpart_language == "de"
