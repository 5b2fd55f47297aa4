"""HTTP transport for upstream APIs and listing pages."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from dealerstock._constants import ACCEPT_HTML, ACCEPT_JSON, ACCEPT_LANGUAGE
from dealerstock.config import StockConfig
from dealerstock.exceptions import UpstreamMalformedError, UpstreamUnavailableError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by adapters and the detail fetcher.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def get_text(self, url: str, *, params: Mapping[str, str] | None = None) -> str:
        ...

    async def get_json(self, url: str, *, params: Mapping[str, str] | None = None) -> Any:
        ...


class HttpTransport:
    """aiohttp-backed transport that maps failures onto the error taxonomy."""

    def __init__(self, config: StockConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _headers(self, accept: str) -> dict[str, str]:
        return {
            "accept": accept,
            "accept-language": ACCEPT_LANGUAGE,
            "user-agent": self._config.user_agent,
        }

    async def _get(self, url: str, params: Mapping[str, str] | None, accept: str) -> str:
        _logger.debug("GET %s params=%s", url, dict(params) if params else None)
        try:
            async with self._http.get(
                url,
                params=params,
                headers=self._headers(accept),
                timeout=self._timeout,
            ) as resp:
                text = await resp.text(errors="replace")
                if resp.status >= 400:
                    raise UpstreamUnavailableError(
                        f"HTTP {resp.status} from {url}",
                        status_code=resp.status,
                        url=url,
                    )
        except UpstreamUnavailableError:
            raise
        except asyncio.TimeoutError as exc:
            raise UpstreamUnavailableError(f"Request to {url} timed out", url=url) from exc
        except aiohttp.ClientError as exc:
            raise UpstreamUnavailableError(f"Request to {url} failed: {exc}", url=url) from exc
        return text

    async def get_text(self, url: str, *, params: Mapping[str, str] | None = None) -> str:
        """Fetch a listing page as text."""
        return await self._get(url, params, ACCEPT_HTML)

    async def get_json(self, url: str, *, params: Mapping[str, str] | None = None) -> Any:
        """Fetch and decode a JSON document."""
        text = await self._get(url, params, ACCEPT_JSON)
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise UpstreamMalformedError(f"Invalid JSON from {url}: {text[:200]}", url=url) from exc
