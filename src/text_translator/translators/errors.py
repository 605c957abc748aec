# SPDX-License-Identifier: Apache-2.0
"""Failure taxonomy and error classifier for translation backends.

Upstream failures arrive in very different shapes: exceptions tagged by an
adapter, HTTP status codes, or free-text vendor messages. ``classify_error``
folds all of them into one member of the closed ``ErrorKind`` enumeration.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Closed set of failure categories."""

    CONFIG_MISSING = "CONFIG_MISSING"
    API_KEY_MISSING = "API_KEY_MISSING"
    API_URL_MISSING = "API_URL_MISSING"
    API_KEY_INVALID = "API_KEY_INVALID"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    FORBIDDEN = "FORBIDDEN"
    MODEL_MISSING = "MODEL_MISSING"
    MODEL_OVERLOADED = "MODEL_OVERLOADED"
    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    RATE_LIMIT_REACHED = "RATE_LIMIT_REACHED"
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    QUOTA_REGION = "QUOTA_REGION"
    SERVER_ERROR = "SERVER_ERROR"
    HTTP_ERROR = "HTTP_ERROR"
    LANGUAGE_PAIR_NOT_SUPPORTED = "LANGUAGE_PAIR_NOT_SUPPORTED"
    NETWORK_ERROR = "NETWORK_ERROR"
    CONTEXT_INVALIDATED = "CONTEXT_INVALIDATED"
    UNSUPPORTED_PROVIDER = "UNSUPPORTED_PROVIDER"
    TEXT_EMPTY = "TEXT_EMPTY"
    TEXT_TOO_LONG = "TEXT_TOO_LONG"
    PROMPT_INVALID = "PROMPT_INVALID"
    TRANSLATION_NOT_FOUND = "TRANSLATION_NOT_FOUND"
    TRANSLATION_FAILED = "TRANSLATION_FAILED"
    SEGMENT_COUNT_MISMATCH = "SEGMENT_COUNT_MISMATCH"
    UNKNOWN = "UNKNOWN"

    @property
    def is_retryable(self) -> bool:
        """Whether a caller may retry the request unchanged."""
        return self in RETRYABLE_KINDS

    @property
    def is_configuration(self) -> bool:
        """Whether the failure is fixed by changing settings, not by retrying."""
        return self in CONFIGURATION_KINDS


RETRYABLE_KINDS = frozenset({ErrorKind.RATE_LIMIT_REACHED, ErrorKind.SERVER_ERROR})

CONFIGURATION_KINDS = frozenset(
    {
        ErrorKind.CONFIG_MISSING,
        ErrorKind.API_KEY_MISSING,
        ErrorKind.API_URL_MISSING,
        ErrorKind.API_KEY_INVALID,
        ErrorKind.MODEL_MISSING,
        ErrorKind.PROMPT_INVALID,
    }
)

_STATUS_KINDS: dict[int, ErrorKind] = {
    400: ErrorKind.INVALID_REQUEST,
    401: ErrorKind.API_KEY_INVALID,
    402: ErrorKind.INSUFFICIENT_BALANCE,
    403: ErrorKind.FORBIDDEN,
    404: ErrorKind.MODEL_MISSING,
    422: ErrorKind.INVALID_REQUEST,
    429: ErrorKind.RATE_LIMIT_REACHED,
    500: ErrorKind.SERVER_ERROR,
    502: ErrorKind.SERVER_ERROR,
    503: ErrorKind.SERVER_ERROR,
    524: ErrorKind.SERVER_ERROR,
}

# Evaluated top to bottom; the first group with a matching substring wins.
_MESSAGE_PATTERNS: tuple[tuple[ErrorKind, tuple[str, ...]], ...] = (
    # Empty or invalid input
    (ErrorKind.TEXT_EMPTY, ("text is empty",)),
    (ErrorKind.PROMPT_INVALID, ("prompt is invalid",)),
    (ErrorKind.TEXT_TOO_LONG, ("text is too long", "too long")),
    (ErrorKind.TRANSLATION_NOT_FOUND, ("translation not found",)),
    (ErrorKind.TRANSLATION_FAILED, ("translation failed",)),
    (
        ErrorKind.LANGUAGE_PAIR_NOT_SUPPORTED,
        (
            "translation not available",
            "language pair not supported",
            "language not supported",
            "no support for the provided language",
            "not supported for target_lang",
            "translation direction is not supported",
            "target_lang' not supported",
            "source_lang' not supported",
        ),
    ),
    # Context invalidated
    (
        ErrorKind.CONTEXT_INVALIDATED,
        (
            "extension context invalidated",
            "context invalidated",
            "context invalid",
            "could not establish connection",
            "receiving end does not exist",
            "message port closed",
        ),
    ),
    # API key, URL and model issues
    (
        ErrorKind.API_KEY_INVALID,
        (
            "wrong api key",
            "api key not valid",
            "no auth credentials",
            "incorrect api key provided",
            "invalid api key",
            "api key expired",
            "renew the api key",
            "authentication fails",
        ),
    ),
    (ErrorKind.API_KEY_MISSING, ("api key is missing", "api key is required", "key missing")),
    (
        ErrorKind.API_URL_MISSING,
        ("api url is missing", "no endpoints found", "no endpoint"),
    ),
    (
        ErrorKind.MODEL_MISSING,
        (
            "not a valid model id",
            "invalid model",
            "model not found",
            "model is missing",
            "model not available",
            "is not found for api version",
            "does not exist or you do not have access",
        ),
    ),
    (ErrorKind.MODEL_OVERLOADED, ("the model is overloaded", "overloaded")),
    # Quota; the region variant must be checked first
    (ErrorKind.QUOTA_REGION, ("location is not supported",)),
    (
        ErrorKind.QUOTA_EXCEEDED,
        (
            "quota exceeded",
            "gemini quota",
            "resource has been exhausted",
            "check quota",
            "requires more credits",
            "fewer max_tokens",
            "insufficient balance",
            "exceeded your current quota",
            "check your plan and billing details",
        ),
    ),
    # Network
    (
        ErrorKind.NETWORK_ERROR,
        (
            "failed to fetch",
            "network failure",
            "connection failed",
            "networkerror",
            "cannot connect to host",
            "connection refused",
            "connection reset",
            "server disconnected",
            "name or service not known",
        ),
    ),
    # Generic HTTP
    (ErrorKind.INVALID_REQUEST, ("http 400", "400 error")),
    (
        ErrorKind.HTTP_ERROR,
        (
            "http error",
            "http status",
            "http response",
            "operation was aborted",
        ),
    ),
)


def classify_status(status: int) -> ErrorKind | None:
    """Map an HTTP status code to an error kind.

    Args:
        status: HTTP status code.

    Returns:
        The mapped kind, or None when the status is outside [400, 600).
    """
    if not 400 <= status < 600:
        return None
    return _STATUS_KINDS.get(status, ErrorKind.HTTP_ERROR)


def classify_message(message: str) -> ErrorKind:
    """Classify a free-text error message by substring matching."""
    msg = message.lower().strip()

    # Quota combined with a region hint is a region restriction, not a plain quota.
    if "quota exceeded" in msg and "region" in msg:
        logger.debug("Quota exceeded with region hint: %s", msg)
        return ErrorKind.QUOTA_REGION

    for kind, patterns in _MESSAGE_PATTERNS:
        if any(pattern in msg for pattern in patterns):
            return kind
    return ErrorKind.UNKNOWN


def classify_error(error: Any) -> ErrorKind:
    """Map an error object, mapping, or message to an ``ErrorKind``.

    Priority:
        1. An explicit kind tag is returned unchanged.
        2. A numeric HTTP status in [400, 600) maps through a fixed table.
        3. The message text is matched against ordered substring patterns.

    Args:
        error: An exception, a mapping such as ``{"status_code": 429}``,
            an ``ErrorKind``, or a message string.

    Returns:
        The classified kind; ``ErrorKind.UNKNOWN`` if nothing matches.
    """
    if error is None:
        return ErrorKind.UNKNOWN

    explicit = _explicit_kind(error)
    if explicit is not None:
        return explicit

    status = _status_of(error)
    if status is not None:
        kind = classify_status(status)
        if kind is not None:
            return kind

    return classify_message(_message_of(error))


def is_retryable(error: Any) -> bool:
    """Whether the classified failure is retry-eligible by convention."""
    return classify_error(error).is_retryable


def _coerce_kind(value: Any) -> ErrorKind | None:
    if isinstance(value, ErrorKind):
        return value
    if isinstance(value, str):
        try:
            return ErrorKind(value.strip())
        except ValueError:
            return None
    return None


def _explicit_kind(error: Any) -> ErrorKind | None:
    if isinstance(error, str):
        return _coerce_kind(error)
    if isinstance(error, Mapping):
        return _coerce_kind(error.get("kind")) or _coerce_kind(error.get("type"))
    return _coerce_kind(getattr(error, "kind", None))


def _status_of(error: Any) -> int | None:
    if isinstance(error, str):
        return None
    if isinstance(error, Mapping):
        candidates = [error.get("status_code"), error.get("statusCode"), error.get("status")]
    else:
        candidates = [getattr(error, "status_code", None), getattr(error, "status", None)]
    for value in candidates:
        # bool is an int subclass; never treat True/False as a status
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def _message_of(error: Any) -> str:
    if isinstance(error, str):
        return error
    if isinstance(error, Mapping):
        return str(error.get("message") or "")
    return str(error)
