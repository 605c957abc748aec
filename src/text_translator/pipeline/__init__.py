# SPDX-License-Identifier: Apache-2.0
"""Translation pipeline package."""

from .translation_pipeline import PipelineConfig, TranslationPipeline, TranslationResult

__all__ = [
    "PipelineConfig",
    "TranslationPipeline",
    "TranslationResult",
]
