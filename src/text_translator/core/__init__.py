# SPDX-License-Identifier: Apache-2.0
"""Core request model, language resolution and segment codec."""

from .detection import LangdetectDetector, LanguageDetector, detect_source, is_persian_text
from .languages import (
    LANGUAGES,
    apply_swap_heuristic,
    get_language_name,
    is_same_language,
    resolve_code,
    swap_pair,
    to_provider_code,
)
from .models import AUTO, ProviderId, SessionContext, TranslationMode, TranslationRequest
from .segments import (
    SEGMENT_DELIMITER,
    Batch,
    EncodedInput,
    Plain,
    ReconstructResult,
    Segment,
    decode_input,
    encode,
    join_segments,
    parse_json_segments,
    reconstruct,
    split_segments,
)

__all__ = [
    "AUTO",
    "Batch",
    "EncodedInput",
    "LANGUAGES",
    "LangdetectDetector",
    "LanguageDetector",
    "Plain",
    "ProviderId",
    "ReconstructResult",
    "SEGMENT_DELIMITER",
    "Segment",
    "SessionContext",
    "TranslationMode",
    "TranslationRequest",
    "apply_swap_heuristic",
    "decode_input",
    "detect_source",
    "encode",
    "get_language_name",
    "is_persian_text",
    "is_same_language",
    "join_segments",
    "parse_json_segments",
    "reconstruct",
    "resolve_code",
    "split_segments",
    "swap_pair",
    "to_provider_code",
]
