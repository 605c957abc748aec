# SPDX-License-Identifier: Apache-2.0
"""Batch segmentation codec.

Input is either plain text or a JSON array of ``{"text": ...}`` objects.
Batches are joined with ``SEGMENT_DELIMITER`` for providers that take one
string, then split and zipped back onto the original objects.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, StrictStr, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

SEGMENT_DELIMITER = "\n\n---\n\n"

_CODE_FENCE = re.compile(r"^\s*```(?:json)?\s*(.*?)\s*```\s*$", re.DOTALL)


class Segment(BaseModel):
    """One element of a batch. Unknown fields pass through untouched."""

    model_config = ConfigDict(extra="allow")

    text: StrictStr


_SEGMENT_LIST = TypeAdapter(list[Segment])


@dataclass(frozen=True)
class Batch:
    """Input that parsed as a non-empty segment array."""

    segments: list[Segment]


@dataclass(frozen=True)
class Plain:
    """Input treated as a single string."""

    text: str


DecodedInput = Union[Batch, Plain]


@dataclass
class EncodedInput:
    """Segments to translate, plus whether they came from a batch."""

    segments: list[Segment]
    is_batch: bool

    @property
    def texts(self) -> list[str]:
        return [seg.text for seg in self.segments]


@dataclass
class ReconstructResult:
    """Outcome of splitting a translated payload back into segments.

    Attributes:
        segments: Original segments with translated ``text`` when counts
            matched, otherwise None.
        raw: Translated string as returned by the provider.
        mismatch: True when the split count differs from the original.
    """

    raw: str
    segments: list[Segment] | None = None
    mismatch: bool = False
    expected: int = 0
    actual: int = 0

    def to_json(self) -> str:
        """Serialize segments as a JSON array; the raw string on mismatch."""
        if self.segments is None:
            return self.raw
        return json.dumps(
            [seg.model_dump() for seg in self.segments], ensure_ascii=False
        )

    def to_dicts(self) -> list[dict[str, Any]] | None:
        if self.segments is None:
            return None
        return [seg.model_dump() for seg in self.segments]


def decode_input(raw: str) -> DecodedInput:
    """Classify raw input as a segment batch or plain text.

    Args:
        raw: Caller-supplied input.

    Returns:
        ``Batch`` if ``raw`` is a non-empty JSON array whose every element is
        an object with a string ``text`` field, otherwise ``Plain``.

    Examples:
        >>> decode_input('[{"text": "a"}]')
        Batch(segments=[Segment(text='a')])
        >>> decode_input("hello")
        Plain(text='hello')
    """
    stripped = raw.strip()
    if not stripped.startswith("["):
        return Plain(raw)
    try:
        segments = _SEGMENT_LIST.validate_json(stripped)
    except ValidationError:
        return Plain(raw)
    if not segments:
        return Plain(raw)
    return Batch(segments)


def encode(raw: str) -> EncodedInput:
    """Turn raw input into segments ready for translation."""
    decoded = decode_input(raw)
    if isinstance(decoded, Batch):
        return EncodedInput(segments=list(decoded.segments), is_batch=True)
    return EncodedInput(segments=[Segment(text=decoded.text)], is_batch=False)


def join_segments(segments: list[str]) -> str:
    return SEGMENT_DELIMITER.join(segments)


def split_segments(text: str) -> list[str]:
    return text.split(SEGMENT_DELIMITER)


def _replace_texts(original: list[Segment], texts: list[str]) -> list[Segment]:
    return [
        seg.model_copy(update={"text": text.strip()})
        for seg, text in zip(original, texts)
    ]


def reconstruct(translated_raw: str, original_segments: list[Segment]) -> ReconstructResult:
    """Split a translated payload and zip it back onto the original segments.

    Never raises: a count mismatch is reported through ``mismatch`` and the
    caller gets the raw translated string instead.
    """
    parts = split_segments(translated_raw)
    if len(parts) != len(original_segments):
        logger.warning(
            "Segment count mismatch: expected %d, got %d",
            len(original_segments),
            len(parts),
        )
        return ReconstructResult(
            raw=translated_raw,
            mismatch=True,
            expected=len(original_segments),
            actual=len(parts),
        )
    return ReconstructResult(
        raw=translated_raw,
        segments=_replace_texts(original_segments, parts),
        expected=len(original_segments),
        actual=len(parts),
    )


def reconstruct_from_list(
    translated: list[str], original_segments: list[Segment]
) -> ReconstructResult:
    """Zip per-segment translations from a natively batched provider."""
    raw = join_segments(translated)
    if len(translated) != len(original_segments):
        logger.warning(
            "Segment count mismatch: expected %d, got %d",
            len(original_segments),
            len(translated),
        )
        return ReconstructResult(
            raw=raw,
            mismatch=True,
            expected=len(original_segments),
            actual=len(translated),
        )
    return ReconstructResult(
        raw=raw,
        segments=_replace_texts(original_segments, translated),
        expected=len(original_segments),
        actual=len(translated),
    )


def strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code fence, if any."""
    match = _CODE_FENCE.match(text)
    return match.group(1) if match else text


def parse_json_segments(
    response: str, original_segments: list[Segment]
) -> ReconstructResult:
    """Read an LLM response to a JSON-array prompt.

    Accepts a bare array of strings or of ``{"text": ...}`` objects, optionally
    wrapped in a code fence. A well-formed array with the wrong item count is
    reported as a mismatch. Any other shape falls back to delimiter-based
    ``reconstruct``.
    """
    try:
        data = json.loads(strip_code_fence(response))
    except json.JSONDecodeError:
        return reconstruct(response, original_segments)

    if not isinstance(data, list):
        return reconstruct(response, original_segments)

    texts: list[str] = []
    for item in data:
        if isinstance(item, str):
            texts.append(item)
        elif isinstance(item, dict) and isinstance(item.get("text"), str):
            texts.append(item["text"])
        else:
            return reconstruct(response, original_segments)

    if len(texts) != len(original_segments):
        logger.warning(
            "JSON response has %d items for %d segments", len(texts), len(original_segments)
        )
        return ReconstructResult(
            raw=response,
            mismatch=True,
            expected=len(original_segments),
            actual=len(texts),
        )
    return ReconstructResult(
        raw=response,
        segments=_replace_texts(original_segments, texts),
        expected=len(original_segments),
        actual=len(texts),
    )


def segments_to_json(segments: list[Segment]) -> str:
    """Serialize segments for an LLM JSON-array prompt."""
    return json.dumps([{"text": seg.text} for seg in segments], ensure_ascii=False)


__all__ = [
    "SEGMENT_DELIMITER",
    "Batch",
    "DecodedInput",
    "EncodedInput",
    "Plain",
    "ReconstructResult",
    "Segment",
    "decode_input",
    "encode",
    "join_segments",
    "parse_json_segments",
    "reconstruct",
    "reconstruct_from_list",
    "segments_to_json",
    "split_segments",
    "strip_code_fence",
]
