# SPDX-License-Identifier: Apache-2.0
"""Source language detection for auto-detect requests."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Protocol, runtime_checkable

from langdetect import DetectorFactory, detect_langs  # type: ignore[import-untyped]
from langdetect.lang_detect_exception import LangDetectException  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"
DETECTION_THRESHOLD = 0.5
# Short inputs give langdetect few n-grams; demand a clearer winner.
SHORT_TEXT_LETTERS = 20
SHORT_TEXT_THRESHOLD = 0.9
MIN_CANDIDATE_MARGIN = 0.2

# Letters present in Persian but absent from Arabic.
_PERSIAN_ONLY = re.compile(r"[پچژگ]")
_ARABIC_SCRIPT = re.compile(r"[\u0600-\u06FF\u0750-\u077F\uFB50-\uFDFF\uFE70-\uFEFF]")
_LETTER = re.compile(r"[^\W\d_]")

# langdetect emits lowercase region subtags.
_LANGDETECT_CODES = {
    "zh-cn": "zh-CN",
    "zh-tw": "zh-TW",
}

# Make langdetect deterministic across runs.
DetectorFactory.seed = 0


@runtime_checkable
class LanguageDetector(Protocol):
    """Protocol for pluggable language detection capabilities."""

    def detect(self, text: str) -> list[tuple[str, float]]:
        """Return candidate (code, probability) pairs, best first."""
        ...


class LangdetectDetector:
    """Language detector backed by the langdetect library."""

    def detect(self, text: str) -> list[tuple[str, float]]:
        try:
            candidates = detect_langs(text)
        except LangDetectException as e:
            logger.debug("langdetect found no features: %s", e)
            return []
        return [(_LANGDETECT_CODES.get(c.lang, c.lang), c.prob) for c in candidates]


def is_persian_text(text: str, threshold: float = 0.3) -> bool:
    """Check whether a text is predominantly written in Persian script.

    Args:
        text: Text to inspect.
        threshold: Minimum share of Arabic-script letters among all letters.

    Returns:
        True if the Arabic-script share reaches the threshold and at least
        one Persian-only letter is present.
    """
    letters = _LETTER.findall(text)
    if not letters:
        return False
    script_count = sum(1 for ch in letters if _ARABIC_SCRIPT.match(ch))
    if script_count / len(letters) < threshold:
        return False
    return bool(_PERSIAN_ONLY.search(text))


def is_reliable(
    text: str,
    candidates: list[tuple[str, float]],
    threshold: float = DETECTION_THRESHOLD,
) -> bool:
    """Decide whether the best statistical candidate can be trusted.

    The top candidate must reach ``threshold`` and lead the runner-up by
    ``MIN_CANDIDATE_MARGIN``. Texts with fewer than ``SHORT_TEXT_LETTERS``
    letters must also reach ``SHORT_TEXT_THRESHOLD``.
    """
    if not candidates:
        return False
    prob = candidates[0][1]
    if len(_LETTER.findall(text)) < SHORT_TEXT_LETTERS:
        threshold = max(threshold, SHORT_TEXT_THRESHOLD)
    if prob < threshold:
        return False
    if len(candidates) > 1 and prob - candidates[1][1] < MIN_CANDIDATE_MARGIN:
        return False
    return True


def detect_by_script(text: str) -> str | None:
    """Regex fallback recognising Persian and Arabic script."""
    if is_persian_text(text):
        return "fa"
    if _ARABIC_SCRIPT.search(text):
        return "ar"
    return None


async def detect_source(
    text: str,
    detector: LanguageDetector | None = None,
    threshold: float = DETECTION_THRESHOLD,
) -> str:
    """Detect the language of ``text``.

    The detector runs in a worker thread. Unreliable results (see
    ``is_reliable``) are ignored, after which the script-based fallback is
    tried and finally ``DEFAULT_LANGUAGE`` is returned.

    Args:
        text: Text to inspect.
        detector: Detection capability (default: ``LangdetectDetector``).
        threshold: Minimum probability for the top candidate.

    Returns:
        Detected language code.
    """
    if not text or not text.strip():
        return DEFAULT_LANGUAGE

    detector = detector or LangdetectDetector()
    candidates = await asyncio.to_thread(detector.detect, text)
    if candidates:
        code, prob = candidates[0]
        if is_reliable(text, candidates, threshold):
            logger.debug("Detected language %s (p=%.2f)", code, prob)
            return code
        logger.debug("Candidate %s is unreliable (p=%.2f)", code, prob)

    fallback = detect_by_script(text)
    if fallback is not None:
        logger.debug("Script fallback detected %s", fallback)
        return fallback

    logger.warning("Language detection failed; defaulting to %s", DEFAULT_LANGUAGE)
    return DEFAULT_LANGUAGE
