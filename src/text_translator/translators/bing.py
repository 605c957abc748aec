# SPDX-License-Identifier: Apache-2.0
"""Bing web translator backend."""

from __future__ import annotations

import json
import logging
import re
import time
from dataclasses import dataclass
from typing import Any

from text_translator.core.languages import to_provider_code
from text_translator.core.models import TranslationMode
from text_translator.translators.base import BaseTranslator, TranslationError
from text_translator.translators.errors import ErrorKind

logger = logging.getLogger(__name__)

BING_LANG_CODES = {
    "zh-CN": "zh-Hans",
    "zh-TW": "zh-Hant",
    "no": "nb",
    "sr": "sr-Cyrl",
    "tl": "fil",
    "hmn": "mww",
}

_IG_PATTERN = re.compile(r'IG:"([^"]+)"')
_IID_PATTERN = re.compile(r'EventID:"([^"]+)"')
_PARAMS_PATTERN = re.compile(r"var params_AbusePreventionHelper\s?=\s?(\[.*?\]);")


@dataclass
class BingToken:
    """Anti-abuse parameters scraped from the translator page."""

    ig: str
    iid: str
    key: str
    token: str
    fetched_at: float
    expiry_ms: int
    count: int = 0

    def is_expired(self, now: float | None = None) -> bool:
        now = time.time() if now is None else now
        return (now - self.fetched_at) * 1000 > self.expiry_ms

    def next_iid(self) -> str:
        iid = f"{self.iid}.{self.count}" if self.iid else ""
        self.count += 1
        return iid


def parse_token_page(html: str, now: float | None = None) -> BingToken | None:
    """Extract the token parameters from the Bing translator page.

    Returns:
        The token, or None when the page layout is not recognised.
    """
    ig = _IG_PATTERN.search(html)
    iid = _IID_PATTERN.search(html)
    params = _PARAMS_PATTERN.search(html)
    if not ig or not iid or not params:
        return None
    try:
        key, token, interval = json.loads(params.group(1))[:3]
    except (ValueError, TypeError):
        return None
    return BingToken(
        ig=ig.group(1),
        iid=iid.group(1),
        key=str(key),
        token=str(token),
        fetched_at=time.time() if now is None else now,
        expiry_ms=int(interval),
    )


class BingTranslator(BaseTranslator):
    """Bing web translator backend.

    No API key is required. A short-lived token is scraped from the
    translator page and reused until it expires or the session is reset.

    Attributes:
        name: Backend identifier ("bing").
    """

    name = "bing"
    display_name = "Microsoft Bing"

    TRANSLATE_URL = "https://www.bing.com/ttranslatev3"
    TOKEN_URL = "https://www.bing.com/translator"
    USER_AGENT = (
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/126.0 Safari/537.36"
    )

    _token: BingToken | None = None

    async def _get_token(self) -> BingToken:
        if self._token is not None and not self._token.is_expired():
            return self._token

        logger.debug("Fetching new Bing access token")
        html = await self._execute_api_call(
            "GET",
            self.TOKEN_URL,
            context=f"{self.name}-token-fetch",
            extract_response=lambda body: body or None,
            headers={"User-Agent": self.USER_AGENT},
            response_format="text",
        )
        token = parse_token_page(html)
        if token is None:
            raise TranslationError(
                "Failed to extract token parameters from Bing translator page",
                kind=ErrorKind.INVALID_RESPONSE,
                context=f"{self.name}-token-fetch",
            )
        self._token = token
        return token

    async def _translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        mode: TranslationMode,
    ) -> str:
        token = await self._get_token()
        source = to_provider_code(source_lang, BING_LANG_CODES, auto_value="auto-detect")
        target = to_provider_code(target_lang, BING_LANG_CODES)

        return await self._execute_api_call(
            "POST",
            self.TRANSLATE_URL,
            context=f"{self.name}-translate",
            extract_response=_extract_translation,
            params={"IG": token.ig, "IID": token.next_iid(), "isVertical": "1"},
            data={
                "text": text,
                "fromLang": source,
                "to": target,
                "token": token.token,
                "key": token.key,
            },
            headers={"User-Agent": self.USER_AGENT},
            language_pair=(source, target),
        )

    def reset_session(self) -> None:
        """Clear the session context and the cached token."""
        super().reset_session()
        self._token = None


def _extract_translation(data: Any) -> str | None:
    if isinstance(data, dict):
        # Bing reports some failures with HTTP 200 and a statusCode field.
        status = data.get("statusCode")
        if status is not None:
            raise TranslationError(
                f"Bing API returned status {status}",
                kind=ErrorKind.INVALID_REQUEST if status == 400 else ErrorKind.HTTP_ERROR,
                status_code=status if isinstance(status, int) else None,
                context="bing-translate",
            )
        return None
    try:
        text = data[0]["translations"][0]["text"]
    except (IndexError, KeyError, TypeError):
        return None
    return text if isinstance(text, str) else None
