# SPDX-License-Identifier: Apache-2.0
"""
Text Translator - CLI Tool

Translates a string, or a JSON array of {"text": ...} segments, with one of
the supported providers.

Usage:
    translate-text <text> [options]

Examples:
    translate-text "Hello"                          # Auto-detect -> English
    translate-text "Hello" -t Farsi                 # English -> Persian
    translate-text "Hello" -p deepl -t de
    translate-text '[{"text": "a"}, {"text": "b"}]' -t fr
    echo "Bonjour" | translate-text -
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import NoReturn

from dotenv import load_dotenv

from text_translator.config import TranslatorSettings
from text_translator.core.models import ProviderId, TranslationMode, TranslationRequest
from text_translator.pipeline.translation_pipeline import TranslationPipeline
from text_translator.translators.base import TranslatorError
from text_translator.translators.errors import classify_error
from text_translator.translators.registry import ProviderRegistry

logger = logging.getLogger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed argument Namespace.
    """
    parser = argparse.ArgumentParser(
        prog="translate-text",
        description="Text Translation Tool - Translates text with one of ten providers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s "Hello" -t Farsi                       # Google Translate (default)
  %(prog)s "Hello" -p deepl -t de                 # DeepL
  %(prog)s "Hello" -p gemini -m dictionary        # Gemini, dictionary prompt
  %(prog)s '[{"text": "a"}, {"text": "b"}]'       # Batch of segments
  %(prog)s --list-providers

Environment Variables (also read from .env):
  <PROVIDER>_API_KEY     API key, e.g. DEEPL_API_KEY, GEMINI_API_KEY
  <PROVIDER>_API_URL     Endpoint override, e.g. CUSTOM_API_URL
  <PROVIDER>_MODEL       Model id, e.g. OPENAI_MODEL
  TRANSLATOR_SOURCE_LANG Default source language (default: auto)
  TRANSLATOR_TARGET_LANG Default target language (default: en)
""",
    )

    # Input text
    parser.add_argument(
        "text",
        nargs="?",
        help='Text or JSON segment array to translate ("-" reads stdin)',
    )

    # Provider
    parser.add_argument(
        "-p",
        "--provider",
        default=ProviderId.GOOGLE.value,
        type=str.lower,
        choices=ProviderRegistry.list_supported(),
        help="Translation provider (default: google)",
    )

    # Language options
    parser.add_argument(
        "-s",
        "--source",
        help="Source language name or code (default: TRANSLATOR_SOURCE_LANG or auto)",
    )
    parser.add_argument(
        "-t",
        "--target",
        help="Target language name or code (default: TRANSLATOR_TARGET_LANG or en)",
    )

    parser.add_argument(
        "-m",
        "--mode",
        default=TranslationMode.SELECTION.value,
        choices=[mode.value for mode in TranslationMode],
        help="Translation mode, selects the LLM prompt (default: selection)",
    )

    # Provider settings overrides
    provider_group = parser.add_argument_group("Provider options")
    provider_group.add_argument(
        "--api-key",
        help="API key for the selected provider (or set <PROVIDER>_API_KEY)",
    )
    provider_group.add_argument(
        "--api-url",
        help="Endpoint URL for the selected provider (or set <PROVIDER>_API_URL)",
    )
    provider_group.add_argument(
        "--model",
        help="Model for LLM providers (or set <PROVIDER>_MODEL)",
    )
    provider_group.add_argument(
        "--timeout",
        type=float,
        help="HTTP timeout in seconds (default: none)",
    )

    parser.add_argument(
        "--list-providers",
        action="store_true",
        help="List supported providers and exit",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    return parser.parse_args()


def read_input(text: str | None) -> str | None:
    """Resolve the text argument, reading stdin for "-"."""
    if text == "-":
        return sys.stdin.read()
    return text


def build_settings(args: argparse.Namespace) -> TranslatorSettings:
    """Create settings from the environment, then apply CLI overrides.

    Args:
        args: Command line arguments.

    Returns:
        Settings with argument > environment > default precedence.
    """
    settings = TranslatorSettings.from_env(
        source_language=args.source,
        target_language=args.target,
        request_timeout=args.timeout,
    )
    provider_settings = settings.provider(args.provider)
    settings.providers[args.provider] = provider_settings.merged(
        api_key=args.api_key,
        api_url=args.api_url,
        model=args.model,
    )
    return settings


async def run(args: argparse.Namespace) -> int:
    """Execute one translation.

    Args:
        args: Command line arguments.

    Returns:
        Exit code (0: success, 1: failure).
    """
    if args.list_providers:
        for provider_id in ProviderRegistry.list_supported():
            print(provider_id)
        return 0

    text = read_input(args.text)
    if text is None or not text.strip():
        print("Error [TEXT_EMPTY]: Text is empty", file=sys.stderr)
        return 1

    settings = build_settings(args)
    pipeline = TranslationPipeline(ProviderRegistry(settings))
    request = TranslationRequest(
        raw_input=text,
        source_language=settings.source_language,
        target_language=settings.target_language,
        mode=TranslationMode(args.mode),
        provider_id=args.provider,
    )

    try:
        result = await pipeline.translate(request)
    except TranslatorError as e:
        print(f"Error [{e.kind.value}]: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error [{classify_error(e).value}]: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc()
        return 1
    finally:
        await pipeline.aclose()

    if result.segment_count_mismatch:
        logger.warning("Provider changed the number of segments; printing raw output")
    if result.is_batch and result.segments is not None:
        print(json.dumps(result.segments, ensure_ascii=False, indent=2))
    else:
        print(result.text)

    if args.verbose:
        print(
            f"[{result.provider}] {result.source_lang} -> {result.target_lang}"
            + (" (skipped)" if result.skipped else ""),
            file=sys.stderr,
        )
    return 0


def main() -> NoReturn:
    """Main entry point."""
    load_dotenv()
    args = parse_args()

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")

    exit_code = asyncio.run(run(args))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
