"""Tiered extraction: named strategies tried in a fixed priority order.

A source declares which tiers it supports; :class:`TierChain` sorts them
by :class:`TierName` declaration order, runs them one at a time and stops
at the first tier that yields at least one record surviving
normalization. Markup tiers wrap pure ``(markup) -> list[RawListing]``
parsers so the parsers can be tested without any I/O.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from enum import StrEnum
from typing import Any

from dealerstock._render import Renderer
from dealerstock._transport import Transport
from dealerstock.classify import CategoryClassifier
from dealerstock.exceptions import ExtractionExhaustedError
from dealerstock.ingestion.coerce import clean_text
from dealerstock.ingestion.normalize import normalize_many
from dealerstock.models.raw import RawListing
from dealerstock.models.vehicle import Category, Vehicle

_logger = logging.getLogger(__name__)


class TierName(StrEnum):
    """Extraction strategies, highest priority first."""

    STRUCTURED_API = "structured_api"
    EMBEDDED_DATA = "embedded_data"
    RENDERED_DOM = "rendered_dom"
    STATIC_HTML = "static_html"
    HEURISTIC = "heuristic"


_PRIORITY: dict[TierName, int] = {name: index for index, name in enumerate(TierName)}

MarkupParser = Callable[[str], list[RawListing]]
PayloadMapper = Callable[[Any], list[RawListing]]


@dataclasses.dataclass
class TierContext:
    """Per-target inputs shared by every tier of one chain run.

    Fetched markup is memoised so the embedded, static and heuristic
    tiers share a single page request. A failed fetch is memoised too and
    re-raised to every later tier that asks for the same markup.
    """

    source_id: str
    category: Category
    transport: Transport
    page_url: str = ""
    api_url: str = ""
    api_params: Mapping[str, str] | None = None
    renderer: Renderer | None = None
    wait_for: str | None = None
    navigation_timeout_ms: int = 30_000
    classifier: CategoryClassifier | None = None
    """Applied to records that carry no category hint of their own."""

    _static: str | None = dataclasses.field(default=None, init=False, repr=False)
    _static_error: Exception | None = dataclasses.field(default=None, init=False, repr=False)
    _rendered: str | None = dataclasses.field(default=None, init=False, repr=False)

    async def static_markup(self) -> str:
        if self._static_error is not None:
            raise self._static_error
        if self._static is None:
            try:
                self._static = await self.transport.get_text(self.page_url)
            except Exception as exc:
                self._static_error = exc
                raise
        return self._static

    async def rendered_markup(self) -> str | None:
        """Render the page; ``None`` when no renderer is configured."""
        if self.renderer is None:
            return None
        if self._rendered is None:
            self._rendered = await self.renderer.render(
                self.page_url, self.wait_for, self.navigation_timeout_ms
            )
        return self._rendered

    async def best_markup(self) -> str:
        """Markup for last-resort parsing: the rendered page if one exists."""
        if self._rendered:
            return self._rendered
        return await self.static_markup()


TierRunner = Callable[[TierContext], Awaitable[list[RawListing]]]


@dataclasses.dataclass(frozen=True)
class Tier:
    name: TierName
    run: TierRunner


@dataclasses.dataclass(frozen=True)
class ChainOutcome:
    """Records from the first productive tier."""

    vehicles: list[Vehicle]
    tier: TierName
    attempted: tuple[TierName, ...]


def api_tier(mapper: PayloadMapper) -> Tier:
    """Structured JSON endpoint; skipped when the target has no API URL."""

    async def run(ctx: TierContext) -> list[RawListing]:
        if not ctx.api_url:
            return []
        payload = await ctx.transport.get_json(ctx.api_url, params=ctx.api_params)
        return mapper(payload)

    return Tier(TierName.STRUCTURED_API, run)


def embedded_tier(parser: MarkupParser) -> Tier:
    async def run(ctx: TierContext) -> list[RawListing]:
        if not ctx.page_url:
            return []
        return parser(await ctx.static_markup())

    return Tier(TierName.EMBEDDED_DATA, run)


def rendered_tier(parser: MarkupParser) -> Tier:
    async def run(ctx: TierContext) -> list[RawListing]:
        if not ctx.page_url:
            return []
        markup = await ctx.rendered_markup()
        if markup is None:
            _logger.debug("%s: no renderer configured, skipping rendered DOM", ctx.source_id)
            return []
        return parser(markup)

    return Tier(TierName.RENDERED_DOM, run)


def static_tier(parser: MarkupParser) -> Tier:
    async def run(ctx: TierContext) -> list[RawListing]:
        if not ctx.page_url:
            return []
        return parser(await ctx.static_markup())

    return Tier(TierName.STATIC_HTML, run)


def heuristic_tier(parser: MarkupParser) -> Tier:
    async def run(ctx: TierContext) -> list[RawListing]:
        if not ctx.page_url:
            return []
        return parser(await ctx.best_markup())

    return Tier(TierName.HEURISTIC, run)


def _classify(raws: list[RawListing], classifier: CategoryClassifier) -> list[RawListing]:
    classified: list[RawListing] = []
    for raw in raws:
        if raw.category is None:
            guess = classifier.classify(clean_text(raw.title) or "")
            if guess is not None:
                raw = dataclasses.replace(raw, category=guess.value)
        classified.append(raw)
    return classified


class TierChain:
    """Ordered list of tiers for one source."""

    def __init__(self, tiers: Iterable[Tier]) -> None:
        self._tiers = tuple(sorted(tiers, key=lambda tier: _PRIORITY[tier.name]))

    @property
    def tiers(self) -> tuple[Tier, ...]:
        return self._tiers

    @property
    def names(self) -> tuple[TierName, ...]:
        return tuple(tier.name for tier in self._tiers)

    async def run(self, ctx: TierContext) -> ChainOutcome:
        """Run tiers until one yields valid vehicles.

        Raises
        ------
        ExtractionExhaustedError
            Every tier raised or produced nothing that survived
            normalization.
        """
        attempted: list[TierName] = []
        for tier in self._tiers:
            attempted.append(tier.name)
            try:
                raws = await tier.run(ctx)
            except Exception:
                _logger.debug("%s: tier %s failed", ctx.source_id, tier.name, exc_info=True)
                continue
            if ctx.classifier is not None:
                raws = _classify(raws, ctx.classifier)
            vehicles = normalize_many(raws, ctx.source_id, ctx.category)
            if vehicles:
                _logger.debug(
                    "%s: tier %s produced %d vehicles (%d raw)",
                    ctx.source_id,
                    tier.name,
                    len(vehicles),
                    len(raws),
                )
                return ChainOutcome(vehicles=vehicles, tier=tier.name, attempted=tuple(attempted))
            _logger.debug("%s: tier %s produced no valid records (%d raw)", ctx.source_id, tier.name, len(raws))
        raise ExtractionExhaustedError(
            f"{ctx.source_id}: no tier produced vehicles (tried {', '.join(attempted) or 'none'})",
            source_id=ctx.source_id,
            attempted=tuple(attempted),
        )
