# SPDX-License-Identifier: Apache-2.0
"""Translation pipeline implementation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from text_translator.core.detection import (
    DETECTION_THRESHOLD,
    LanguageDetector,
    detect_source,
)
from text_translator.core.languages import apply_swap_heuristic, resolve_code
from text_translator.core.models import AUTO, TranslationMode, TranslationRequest
from text_translator.core.segments import (
    EncodedInput,
    ReconstructResult,
    encode,
    parse_json_segments,
    reconstruct_from_list,
    segments_to_json,
)
from text_translator.translators.base import BaseTranslator
from text_translator.translators.registry import ProviderRegistry

logger = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    """Translation pipeline configuration."""

    # Other side of the language toggle when text is already in the target
    # language; AUTO means English.
    counterpart_language: str = AUTO
    detection_threshold: float = DETECTION_THRESHOLD


@dataclass
class TranslationResult:
    """Translation pipeline result.

    Attributes:
        text: Translated plain text, the re-serialized JSON batch, the raw
            translated string on a segment count mismatch, or the original
            input when the request was skipped.
        source_lang: Source code actually used.
        target_lang: Target code actually used.
        provider: Provider id.
        is_batch: Whether the input was a segment batch.
        segments: Translated segments (batch input only).
        segment_count_mismatch: The provider changed the number of segments.
        skipped: No network call was made because source equals target.
    """

    text: str
    source_lang: str
    target_lang: str
    provider: str
    is_batch: bool = False
    segments: list[dict[str, Any]] | None = None
    segment_count_mismatch: bool = False
    skipped: bool = False


class TranslationPipeline:
    """Text translation pipeline.

    decode -> resolve languages -> obtain adapter -> translate -> reconstruct.
    The pipeline never retries; adapter errors propagate unchanged.
    """

    def __init__(
        self,
        registry: ProviderRegistry | None = None,
        config: PipelineConfig | None = None,
        detector: LanguageDetector | None = None,
    ) -> None:
        """Initialize TranslationPipeline.

        Args:
            registry: Provider registry (default: one built from default
                settings).
            config: Pipeline configuration (default: counterpart language
                taken from the registry settings).
            detector: Language detection capability (default: langdetect).
        """
        self._registry = registry or ProviderRegistry()
        self._config = config or PipelineConfig(
            counterpart_language=self._registry.settings.source_language
        )
        self._detector = detector

    @property
    def registry(self) -> ProviderRegistry:
        return self._registry

    async def translate(self, request: TranslationRequest) -> TranslationResult:
        """Translate one request.

        Args:
            request: The request to translate.

        Returns:
            The translation result.

        Raises:
            UnsupportedProviderError: Unknown provider id.
            ConfigurationError: The provider is missing required settings.
            TranslationError: The provider failed.
        """
        adapter = self._registry.get_adapter(request.provider_id)
        encoded = encode(request.raw_input)
        source, target = await self._stage_resolve(request, encoded)

        if source == target:
            logger.debug("Source and target are both %s; returning input unchanged", target)
            return self._skipped(request, encoded, adapter.name, source, target)

        logger.debug(
            "Translating %d segment(s) %s -> %s with %s",
            len(encoded.segments),
            source,
            target,
            adapter.name,
        )
        if not encoded.is_batch:
            translated = await adapter.translate(
                encoded.segments[0].text, source, target, request.mode
            )
            if translated is None:
                return self._skipped(request, encoded, adapter.name, source, target)
            return TranslationResult(
                text=translated,
                source_lang=source,
                target_lang=target,
                provider=adapter.name,
            )

        rebuilt = await self._stage_translate_batch(adapter, encoded, source, target, request.mode)
        if rebuilt is None:
            return self._skipped(request, encoded, adapter.name, source, target)
        return TranslationResult(
            text=rebuilt.to_json(),
            source_lang=source,
            target_lang=target,
            provider=adapter.name,
            is_batch=True,
            segments=rebuilt.to_dicts(),
            segment_count_mismatch=rebuilt.mismatch,
        )

    async def _stage_resolve(
        self,
        request: TranslationRequest,
        encoded: EncodedInput,
    ) -> tuple[str, str]:
        source = resolve_code(request.source_language)
        target = resolve_code(request.target_language)
        if source == AUTO:
            sample = "\n".join(encoded.texts)
            source = await detect_source(
                sample, self._detector, threshold=self._config.detection_threshold
            )
            logger.debug("Auto-detected source language: %s", source)
        return apply_swap_heuristic(source, target, self._config.counterpart_language)

    async def _stage_translate_batch(
        self,
        adapter: BaseTranslator,
        encoded: EncodedInput,
        source: str,
        target: str,
        mode: TranslationMode,
    ) -> ReconstructResult | None:
        if mode is TranslationMode.SELECT_ELEMENT and adapter.accepts_json_batch:
            response = await adapter.translate(
                segments_to_json(encoded.segments), source, target, mode
            )
            if response is None:
                return None
            return parse_json_segments(response, encoded.segments)

        translated = await adapter.translate_batch(encoded.texts, source, target, mode)
        if translated is None:
            return None
        return reconstruct_from_list(translated, encoded.segments)

    def _skipped(
        self,
        request: TranslationRequest,
        encoded: EncodedInput,
        provider: str,
        source: str,
        target: str,
    ) -> TranslationResult:
        segments = None
        if encoded.is_batch:
            segments = [seg.model_dump() for seg in encoded.segments]
        return TranslationResult(
            text=request.raw_input,
            source_lang=source,
            target_lang=target,
            provider=provider,
            is_batch=encoded.is_batch,
            segments=segments,
            skipped=True,
        )

    async def aclose(self) -> None:
        """Close the registry's adapters."""
        await self._registry.aclose()
