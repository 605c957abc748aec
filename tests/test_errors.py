# SPDX-License-Identifier: Apache-2.0
"""Tests for the error classifier."""

import pytest

from text_translator.translators.base import (
    ConfigurationError,
    TranslationError,
    TranslatorError,
    UnsupportedLanguagePairError,
    UnsupportedProviderError,
)
from text_translator.translators.errors import (
    ErrorKind,
    classify_error,
    classify_message,
    classify_status,
    is_retryable,
)


class HTTPFailure(Exception):
    """Exception carrying a status code, like many HTTP client errors."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class TestClassifyStatus:
    """Test the status code table."""

    @pytest.mark.parametrize(
        ("status", "kind"),
        [
            (400, ErrorKind.INVALID_REQUEST),
            (401, ErrorKind.API_KEY_INVALID),
            (402, ErrorKind.INSUFFICIENT_BALANCE),
            (403, ErrorKind.FORBIDDEN),
            (404, ErrorKind.MODEL_MISSING),
            (422, ErrorKind.INVALID_REQUEST),
            (429, ErrorKind.RATE_LIMIT_REACHED),
            (500, ErrorKind.SERVER_ERROR),
            (503, ErrorKind.SERVER_ERROR),
            (524, ErrorKind.SERVER_ERROR),
            (418, ErrorKind.HTTP_ERROR),
            (599, ErrorKind.HTTP_ERROR),
        ],
    )
    def test_status_table(self, status: int, kind: ErrorKind) -> None:
        assert classify_status(status) is kind

    @pytest.mark.parametrize("status", [200, 399, 600])
    def test_outside_error_range(self, status: int) -> None:
        assert classify_status(status) is None


class TestClassifyMessage:
    """Test substring classification of messages."""

    @pytest.mark.parametrize(
        ("message", "kind"),
        [
            ("Failed to fetch", ErrorKind.NETWORK_ERROR),
            ("Cannot connect to host api.example.com", ErrorKind.NETWORK_ERROR),
            ("Incorrect API key provided: sk-...", ErrorKind.API_KEY_INVALID),
            ("API key not valid. Please pass a valid API key.", ErrorKind.API_KEY_INVALID),
            ("The model is overloaded", ErrorKind.MODEL_OVERLOADED),
            ("User location is not supported for the API use.", ErrorKind.QUOTA_REGION),
            ("You exceeded your current quota", ErrorKind.QUOTA_EXCEEDED),
            ("Extension context invalidated.", ErrorKind.CONTEXT_INVALIDATED),
            ("Translation not available for this pair", ErrorKind.LANGUAGE_PAIR_NOT_SUPPORTED),
            ("Text is too long", ErrorKind.TEXT_TOO_LONG),
            ("HTTP 400 Bad Request", ErrorKind.INVALID_REQUEST),
        ],
    )
    def test_patterns(self, message: str, kind: ErrorKind) -> None:
        assert classify_message(message) is kind

    def test_quota_with_region_hint(self) -> None:
        """Quota messages mentioning a region are region restrictions."""
        assert classify_message("Quota exceeded for this region") is ErrorKind.QUOTA_REGION
        assert classify_message("Quota exceeded") is ErrorKind.QUOTA_EXCEEDED

    @pytest.mark.parametrize("message", ["???", "", "   "])
    def test_unknown(self, message: str) -> None:
        assert classify_message(message) is ErrorKind.UNKNOWN


class TestClassifyError:
    """Test classify_error priority rules."""

    def test_none(self) -> None:
        assert classify_error(None) is ErrorKind.UNKNOWN

    def test_explicit_kind_wins(self) -> None:
        assert classify_error(ErrorKind.FORBIDDEN) is ErrorKind.FORBIDDEN
        assert classify_error("API_KEY_INVALID") is ErrorKind.API_KEY_INVALID
        assert (
            classify_error({"type": "NETWORK_ERROR", "status_code": 500})
            is ErrorKind.NETWORK_ERROR
        )

    def test_tagged_exception(self) -> None:
        error = TranslationError("boom", kind=ErrorKind.QUOTA_EXCEEDED)
        assert classify_error(error) is ErrorKind.QUOTA_EXCEEDED

    def test_status_in_mapping(self) -> None:
        assert classify_error({"status_code": 429}) is ErrorKind.RATE_LIMIT_REACHED
        assert classify_error({"statusCode": 402}) is ErrorKind.INSUFFICIENT_BALANCE
        assert classify_error({"status": 503}) is ErrorKind.SERVER_ERROR

    def test_status_on_exception(self) -> None:
        assert classify_error(HTTPFailure("nope", 403)) is ErrorKind.FORBIDDEN

    def test_status_beats_message(self) -> None:
        error = {"status_code": 401, "message": "Failed to fetch"}
        assert classify_error(error) is ErrorKind.API_KEY_INVALID

    def test_non_error_status_falls_back_to_message(self) -> None:
        error = {"status_code": 200, "message": "Failed to fetch"}
        assert classify_error(error) is ErrorKind.NETWORK_ERROR

    def test_bool_is_not_a_status(self) -> None:
        error = {"status_code": True, "message": "Failed to fetch"}
        assert classify_error(error) is ErrorKind.NETWORK_ERROR

    def test_plain_exception_message(self) -> None:
        assert classify_error(Exception("Connection refused")) is ErrorKind.NETWORK_ERROR
        assert classify_error(Exception("???")) is ErrorKind.UNKNOWN

    @pytest.mark.parametrize(
        "error",
        [
            "Failed to fetch",
            {"status_code": 429},
            Exception("quota exceeded"),
            "???",
        ],
    )
    def test_idempotent(self, error: object) -> None:
        """Classifying a kind again returns the same kind."""
        kind = classify_error(error)
        assert classify_error(kind) is kind


class TestRetryable:
    """Test retry conventions."""

    def test_retryable_kinds(self) -> None:
        assert is_retryable({"status_code": 429})
        assert is_retryable({"status_code": 503})
        assert not is_retryable({"status_code": 401})
        assert not is_retryable("???")

    def test_error_retryable_property(self) -> None:
        assert TranslationError("x", kind=ErrorKind.RATE_LIMIT_REACHED).retryable
        assert not ConfigurationError("x", kind=ErrorKind.API_KEY_MISSING).retryable

    def test_configuration_kinds(self) -> None:
        assert ErrorKind.API_KEY_MISSING.is_configuration
        assert ErrorKind.API_KEY_INVALID.is_configuration
        assert ErrorKind.MODEL_MISSING.is_configuration
        assert not ErrorKind.RATE_LIMIT_REACHED.is_configuration
        assert not ErrorKind.NETWORK_ERROR.is_configuration


class TestExceptions:
    """Test exception hierarchy and default kinds."""

    def test_hierarchy(self) -> None:
        assert issubclass(TranslationError, TranslatorError)
        assert issubclass(ConfigurationError, TranslatorError)
        assert issubclass(UnsupportedLanguagePairError, TranslationError)
        assert issubclass(UnsupportedProviderError, TranslatorError)
        assert issubclass(TranslatorError, Exception)

    def test_default_kinds(self) -> None:
        assert TranslationError("x").kind is ErrorKind.TRANSLATION_FAILED
        assert ConfigurationError("x").kind is ErrorKind.CONFIG_MISSING
        assert UnsupportedProviderError("nope").kind is ErrorKind.UNSUPPORTED_PROVIDER

    def test_unsupported_pair(self) -> None:
        error = UnsupportedLanguagePairError("en", "xx", "deepl")
        assert error.kind is ErrorKind.LANGUAGE_PAIR_NOT_SUPPORTED
        assert (error.source, error.target, error.translator) == ("en", "xx", "deepl")
        assert "deepl" in str(error)
