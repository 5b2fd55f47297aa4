from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from dealerstock.exceptions import RenderTimeoutError, UpstreamUnavailableError
from dealerstock.models.vehicle import Category, Vehicle


@dataclass
class FakeTransport:
    """In-memory transport; unknown URLs answer HTTP 404."""

    pages: dict[str, str] = field(default_factory=dict)
    payloads: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, Exception] = field(default_factory=dict)
    calls: list[tuple[str, str, dict[str, str] | None]] = field(default_factory=list)

    def _lookup(self, kind: str, url: str, params: Mapping[str, str] | None, store: dict[str, Any]) -> Any:
        self.calls.append((kind, url, dict(params) if params else None))
        if url in self.errors:
            raise self.errors[url]
        if url not in store:
            raise UpstreamUnavailableError(f"HTTP 404 from {url}", status_code=404, url=url)
        return store[url]

    async def get_text(self, url: str, *, params: Mapping[str, str] | None = None) -> str:
        return self._lookup("text", url, params, self.pages)

    async def get_json(self, url: str, *, params: Mapping[str, str] | None = None) -> Any:
        return self._lookup("json", url, params, self.payloads)

    def urls(self, kind: str | None = None) -> list[str]:
        return [url for call_kind, url, _ in self.calls if kind is None or call_kind == kind]


@dataclass
class FakeRenderer:
    """Returns canned markup per URL; unknown URLs time out."""

    pages: dict[str, str] = field(default_factory=dict)
    calls: list[tuple[str, str | None, int]] = field(default_factory=list)

    async def render(self, url: str, wait_for: str | None, timeout_ms: int) -> str:
        self.calls.append((url, wait_for, timeout_ms))
        if url not in self.pages:
            raise RenderTimeoutError(f"Rendering {url} timed out", url=url, timeout_ms=timeout_ms)
        return self.pages[url]


@dataclass
class FakeClock:
    now: float = 1_000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_vehicle(
    vid: str,
    title: str,
    *,
    price: int | None = 19_990,
    source: str = "test",
    category: Category = Category.PKW,
) -> Vehicle:
    return Vehicle(
        id=vid,
        title=title,
        price=price,
        price_on_request=price is None,
        category=category,
        source=source,
    )


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def wall_clock() -> FakeClock:
    return FakeClock(now=1_700_000_000.0)
