"""Source adapter contract.

An adapter owns everything specific to one listing origin: the targets
(endpoint/page pairs per category) it queries, the tier chain it runs
against each target and any post-processing such as gallery enrichment.
:meth:`SourceAdapter.fetch` never raises for recoverable conditions; a
broken target turns into ``partial=True`` on the result instead.
"""

from __future__ import annotations

import abc
import asyncio
import dataclasses
import logging
from collections.abc import Mapping

from dealerstock._render import Renderer
from dealerstock._transport import Transport
from dealerstock.classify import CategoryClassifier
from dealerstock.config import StockConfig
from dealerstock.extraction.tiers import ChainOutcome, TierChain, TierContext
from dealerstock.models.results import SourceAdapterResult
from dealerstock.models.vehicle import Category, Vehicle

_logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class SourceTarget:
    """One endpoint/page pair queried by an adapter."""

    category: Category
    """Category assigned to records that carry no hint of their own."""
    page_url: str = ""
    api_url: str = ""
    api_params: Mapping[str, str] | None = None
    classify: bool = False
    """Run the adapter's classifier over records without a category hint."""


class SourceAdapter(abc.ABC):
    """Base class for all listing origins."""

    source_id: str = ""
    wait_for: str | None = None
    """CSS selector the rendered-DOM tier waits for before reading the page."""

    def __init__(
        self,
        config: StockConfig,
        transport: Transport,
        renderer: Renderer | None = None,
        *,
        classifier: CategoryClassifier | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._renderer = renderer
        self._classifier = classifier

    @abc.abstractmethod
    def targets(self) -> list[SourceTarget]:
        """Targets to query; empty when the origin is not configured."""

    @abc.abstractmethod
    def build_chain(self, target: SourceTarget) -> TierChain:
        """Tier chain used for *target*."""

    async def enrich(self, vehicles: list[Vehicle]) -> list[Vehicle]:
        """Post-process extracted vehicles; must not drop records on failure."""
        return vehicles

    def _context(self, target: SourceTarget) -> TierContext:
        return TierContext(
            source_id=self.source_id,
            category=target.category,
            transport=self._transport,
            page_url=target.page_url,
            api_url=target.api_url,
            api_params=target.api_params,
            renderer=self._renderer,
            wait_for=self.wait_for,
            navigation_timeout_ms=self._config.navigation_timeout_ms,
            classifier=self._classifier if target.classify else None,
        )

    async def _run_target(self, target: SourceTarget) -> ChainOutcome:
        return await self.build_chain(target).run(self._context(target))

    async def fetch(self) -> SourceAdapterResult:
        """Run every target's chain concurrently and merge the outcomes."""
        targets = self.targets()
        if not targets:
            _logger.warning("%s: no endpoint or page URL configured", self.source_id)
            return SourceAdapterResult(
                source_id=self.source_id,
                partial=True,
                error=f"{self.source_id}: no endpoint or page URL configured",
            )

        outcomes = await asyncio.gather(
            *(self._run_target(target) for target in targets),
            return_exceptions=True,
        )

        vehicles: list[Vehicle] = []
        errors: list[str] = []
        tier: str | None = None
        for target, outcome in zip(targets, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                _logger.warning("%s: %s target failed: %s", self.source_id, target.category, outcome)
                errors.append(f"{target.category}: {outcome}")
                continue
            vehicles.extend(outcome.vehicles)
            if tier is None:
                tier = str(outcome.tier)

        if vehicles:
            vehicles = await self.enrich(vehicles)

        result = SourceAdapterResult(
            source_id=self.source_id,
            vehicles=vehicles,
            partial=bool(errors),
            error="; ".join(errors) or None,
            tier=tier,
        )
        _logger.info(
            "%s: %d vehicles (tier=%s, partial=%s)",
            self.source_id,
            len(vehicles),
            tier,
            result.partial,
        )
        return result
