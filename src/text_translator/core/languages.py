# SPDX-License-Identifier: Apache-2.0
"""Language table and code resolution.

Callers may name a language by its display name ("Farsi"), by the name used
in LLM prompts ("Persian"), or by its code ("fa"). ``resolve_code`` turns any
of those into one canonical code before a request is dispatched.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import NamedTuple

from text_translator.core.models import AUTO

AUTO_ALIASES = frozenset({"auto", "auto-detect", "autodetect", "auto detect", "detect"})

# Used when the swap heuristic needs a counterpart and none is configured.
DEFAULT_COUNTERPART = "en"


class Language(NamedTuple):
    """One row of the language table."""

    code: str
    name: str  # display name shown to users
    prompt_name: str  # English name substituted into LLM prompts


LANGUAGES: tuple[Language, ...] = (
    Language("af", "Afrikaans", "Afrikaans"),
    Language("sq", "Albanian", "Albanian"),
    Language("am", "Amharic", "Amharic"),
    Language("ar", "Arabic", "Arabic"),
    Language("hy", "Armenian", "Armenian"),
    Language("az", "Azerbaijani", "Azerbaijani"),
    Language("eu", "Basque", "Basque"),
    Language("be", "Belarusian", "Belarusian"),
    Language("bn", "Bengali", "Bengali"),
    Language("bs", "Bosnian", "Bosnian"),
    Language("bg", "Bulgarian", "Bulgarian"),
    Language("ca", "Catalan", "Catalan"),
    Language("ceb", "Cebuano", "Cebuano"),
    Language("zh-CN", "Chinese (Simplified)", "Simplified Chinese"),
    Language("zh-TW", "Chinese (Traditional)", "Traditional Chinese"),
    Language("hr", "Croatian", "Croatian"),
    Language("cs", "Czech", "Czech"),
    Language("da", "Danish", "Danish"),
    Language("nl", "Dutch", "Dutch"),
    Language("en", "English", "English"),
    Language("eo", "Esperanto", "Esperanto"),
    Language("et", "Estonian", "Estonian"),
    Language("fa", "Farsi", "Persian"),
    Language("fil", "Filipino", "Filipino"),
    Language("fi", "Finnish", "Finnish"),
    Language("fr", "French", "French"),
    Language("gl", "Galician", "Galician"),
    Language("ka", "Georgian", "Georgian"),
    Language("de", "German", "German"),
    Language("el", "Greek", "Greek"),
    Language("gu", "Gujarati", "Gujarati"),
    Language("he", "Hebrew", "Hebrew"),
    Language("hi", "Hindi", "Hindi"),
    Language("hu", "Hungarian", "Hungarian"),
    Language("is", "Icelandic", "Icelandic"),
    Language("id", "Indonesian", "Indonesian"),
    Language("ga", "Irish", "Irish"),
    Language("it", "Italian", "Italian"),
    Language("ja", "Japanese", "Japanese"),
    Language("kn", "Kannada", "Kannada"),
    Language("kk", "Kazakh", "Kazakh"),
    Language("km", "Khmer", "Khmer"),
    Language("ko", "Korean", "Korean"),
    Language("ku", "Kurdish", "Kurdish"),
    Language("lo", "Lao", "Lao"),
    Language("lv", "Latvian", "Latvian"),
    Language("lt", "Lithuanian", "Lithuanian"),
    Language("mk", "Macedonian", "Macedonian"),
    Language("ms", "Malay", "Malay"),
    Language("ml", "Malayalam", "Malayalam"),
    Language("mt", "Maltese", "Maltese"),
    Language("mr", "Marathi", "Marathi"),
    Language("mn", "Mongolian", "Mongolian"),
    Language("my", "Myanmar", "Burmese"),
    Language("ne", "Nepali", "Nepali"),
    Language("no", "Norwegian", "Norwegian"),
    Language("or", "Odia", "Odia"),
    Language("ps", "Pashto", "Pashto"),
    Language("pl", "Polish", "Polish"),
    Language("pt", "Portuguese", "Portuguese"),
    Language("pa", "Punjabi", "Punjabi"),
    Language("ro", "Romanian", "Romanian"),
    Language("ru", "Russian", "Russian"),
    Language("sr", "Serbian", "Serbian"),
    Language("si", "Sinhala", "Sinhala"),
    Language("sk", "Slovak", "Slovak"),
    Language("sl", "Slovenian", "Slovenian"),
    Language("es", "Spanish", "Spanish"),
    Language("sw", "Swahili", "Swahili"),
    Language("sv", "Swedish", "Swedish"),
    Language("tl", "Tagalog", "Tagalog"),
    Language("tg", "Tajik", "Tajik"),
    Language("ta", "Tamil", "Tamil"),
    Language("te", "Telugu", "Telugu"),
    Language("th", "Thai", "Thai"),
    Language("tr", "Turkish", "Turkish"),
    Language("uk", "Ukrainian", "Ukrainian"),
    Language("ur", "Urdu", "Urdu"),
    Language("uz", "Uzbek", "Uzbek"),
    Language("vi", "Vietnamese", "Vietnamese"),
    Language("cy", "Welsh", "Welsh"),
    Language("yi", "Yiddish", "Yiddish"),
)

# Extra spellings users commonly type.
_ALIASES: dict[str, str] = {
    "persian": "fa",
    "chinese": "zh-CN",
    "zh": "zh-CN",
    "zh-hans": "zh-CN",
    "zh-hant": "zh-TW",
    "iw": "he",
    "nb": "no",
    "burmese": "my",
}


def _build_lookup() -> dict[str, str]:
    lookup: dict[str, str] = {}
    for lang in LANGUAGES:
        for key in (lang.code, lang.name, lang.prompt_name):
            lookup.setdefault(key.lower(), lang.code)
    for alias, code in _ALIASES.items():
        lookup.setdefault(alias, code)
    return lookup


_LOOKUP = _build_lookup()
_BY_CODE = {lang.code: lang for lang in LANGUAGES}


def is_auto(identifier: str | None) -> bool:
    """Whether the identifier requests auto-detection."""
    if identifier is None:
        return True
    key = identifier.strip().lower()
    return not key or key in AUTO_ALIASES


def resolve_code(identifier: str | None) -> str:
    """Resolve a language identifier to its canonical code.

    Args:
        identifier: Display name, prompt name, code, or an auto alias.

    Returns:
        Canonical code ("fa", "zh-CN", ...), ``AUTO`` for auto aliases, or the
        lowercased input when the table has no match. Unsupported codes are
        left for the provider to reject.

    Examples:
        >>> resolve_code("Farsi")
        'fa'
        >>> resolve_code("Persian")
        'fa'
        >>> resolve_code("Klingon")
        'klingon'
    """
    if identifier is None or is_auto(identifier):
        return AUTO
    key = identifier.strip().lower()
    return _LOOKUP.get(key, key)


def get_language_name(identifier: str) -> str:
    """English prompt name for a language ("fa" -> "Persian")."""
    code = resolve_code(identifier)
    if code == AUTO:
        return "the source language"
    lang = _BY_CODE.get(code)
    return lang.prompt_name if lang else identifier


def is_same_language(source: str, target: str) -> bool:
    """Whether two identifiers resolve to the same concrete language."""
    src = resolve_code(source)
    tgt = resolve_code(target)
    return src != AUTO and src == tgt


def to_provider_code(
    identifier: str,
    mapping: Mapping[str, str],
    auto_value: str = AUTO,
) -> str:
    """Translate a language identifier into a provider-specific code.

    Args:
        identifier: Any identifier accepted by ``resolve_code``.
        mapping: Canonical code -> provider code overrides.
        auto_value: What the provider expects for auto-detection.

    Returns:
        The provider code; canonical code when the mapping has no entry.
    """
    code = resolve_code(identifier)
    if code == AUTO:
        return auto_value
    return mapping.get(code, code)


def swap_pair(source: str, target: str) -> tuple[str, str]:
    """Exchange source and target."""
    return target, source


def apply_swap_heuristic(
    source: str,
    target: str,
    counterpart: str | None = None,
) -> tuple[str, str]:
    """Toggle the language pair when the text is already in the target language.

    The user's languages behave as a single bidirectional toggle: text that
    is already written in the target language is translated back towards
    ``counterpart`` (the configured default source, or English when that is
    auto or unset).

    Args:
        source: Detected or declared source code.
        target: Target code.
        counterpart: Preferred language for the other side of the toggle.

    Returns:
        ``(source, target)`` unchanged when they differ, otherwise
        ``(target, counterpart)``. The caller short-circuits if the result
        still has equal codes.
    """
    src = resolve_code(source)
    tgt = resolve_code(target)
    if src != tgt:
        return src, tgt

    other = resolve_code(counterpart) if counterpart else AUTO
    if other == AUTO:
        other = DEFAULT_COUNTERPART
    # The usual direction is counterpart -> target; the text says otherwise.
    return swap_pair(other, tgt)
