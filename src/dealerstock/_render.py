"""Headless rendering capability for script-driven listing pages."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from dealerstock._constants import USER_AGENT
from dealerstock.exceptions import ConfigError, RenderTimeoutError, UpstreamUnavailableError

_logger = logging.getLogger(__name__)

# Extra wall-clock allowance on top of navigation + settle for browser start-up.
_LAUNCH_ALLOWANCE_MS = 10_000


class Renderer(Protocol):
    """Render *url* in a browser and return the resulting markup.

    Implementations must release every browser resource before returning
    or raising, including on timeout and cancellation.
    """

    async def render(self, url: str, wait_for: str | None, timeout_ms: int) -> str:
        ...


class PlaywrightRenderer:
    """Chromium renderer backed by Playwright (``dealerstock[render]`` extra).

    A fresh browser is launched for every call and closed in ``finally``,
    so no browser process outlives the tier that asked for it.
    """

    def __init__(self, *, settle_ms: int = 5_000, user_agent: str = USER_AGENT) -> None:
        self._settle_ms = settle_ms
        self._user_agent = user_agent

    async def render(self, url: str, wait_for: str | None, timeout_ms: int) -> str:
        try:
            from playwright.async_api import Error as PlaywrightError
            from playwright.async_api import TimeoutError as PlaywrightTimeoutError
            from playwright.async_api import async_playwright
        except ImportError as exc:
            raise ConfigError("Rendering requires playwright; install dealerstock[render]") from exc

        budget_s = (timeout_ms + self._settle_ms + _LAUNCH_ALLOWANCE_MS) / 1000
        _logger.debug("Rendering %s (wait_for=%s, timeout=%d ms)", url, wait_for, timeout_ms)
        try:
            async with asyncio.timeout(budget_s):
                async with async_playwright() as pw:
                    browser = await pw.chromium.launch(headless=True)
                    try:
                        page = await browser.new_page(user_agent=self._user_agent, locale="de-AT")
                        await page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
                        if wait_for:
                            try:
                                await page.wait_for_selector(wait_for, timeout=self._settle_ms)
                            except PlaywrightTimeoutError:
                                _logger.debug("Selector %r not found on %s within %d ms", wait_for, url, self._settle_ms)
                        else:
                            await page.wait_for_timeout(self._settle_ms)
                        return await page.content()
                    finally:
                        await browser.close()
        except (TimeoutError, PlaywrightTimeoutError) as exc:
            raise RenderTimeoutError(f"Rendering {url} timed out", url=url, timeout_ms=timeout_ms) from exc
        except PlaywrightError as exc:
            raise UpstreamUnavailableError(f"Rendering {url} failed: {exc}", url=url) from exc
