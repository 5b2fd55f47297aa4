"""High-level async client for a dealer's aggregated inventory."""

from __future__ import annotations

import logging
import time
from typing import Any

import aiohttp

from dealerstock._cache import Clock, DetailCache, ListingCache
from dealerstock._render import PlaywrightRenderer, Renderer
from dealerstock._transport import HttpTransport, Transport
from dealerstock.aggregator import Aggregator
from dealerstock.classify import CategoryClassifier
from dealerstock.config import StockConfig
from dealerstock.details import DetailFetcher
from dealerstock.exceptions import DealerStockError
from dealerstock.models.detail import VehicleDetail
from dealerstock.models.results import VehiclesResponse
from dealerstock.models.vehicle import Vehicle
from dealerstock.sources import build_adapters

_logger = logging.getLogger(__name__)


class StockClient:
    """Async client for one dealer's merged vehicle inventory.

    Usage::

        async with StockClient(config) as client:
            response = await client.get_vehicles()
            detail = await client.get_vehicle_detail("1234567")

    Caches live as long as the client; keep one client around to serve
    repeated requests.
    """

    def __init__(
        self,
        config: StockConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
        renderer: Renderer | None = None,
        classifier: CategoryClassifier | None = None,
        clock: Clock = time.monotonic,
        wall_clock: Clock = time.time,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport_override = transport
        self._renderer = renderer
        self._classifier = classifier
        self._clock = clock
        self._wall_clock = wall_clock
        self._aggregator: Aggregator | None = None
        self._details: DetailFetcher | None = None

    @property
    def config(self) -> StockConfig:
        return self._config

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> StockClient:
        transport = self._transport_override
        if transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            transport = HttpTransport(self._config, self._http_session)

        renderer = self._renderer
        if renderer is None and self._config.render_enabled:
            renderer = PlaywrightRenderer(settle_ms=self._config.settle_timeout_ms, user_agent=self._config.user_agent)

        adapters = build_adapters(self._config, transport, renderer, classifier=self._classifier)
        _logger.debug("Active sources: %s", ", ".join(adapter.source_id for adapter in adapters))
        self._aggregator = Aggregator(
            adapters,
            ListingCache(self._config.cache_ttl, clock=self._clock, wall_clock=self._wall_clock),
            dedup_prefix_length=self._config.dedup_prefix_length,
            adapter_timeout=self._config.adapter_timeout,
        )
        self._details = DetailFetcher(
            transport,
            self._config,
            DetailCache(self._config.detail_cache_ttl, clock=self._clock),
        )
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._aggregator = None
        self._details = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_aggregator(self) -> Aggregator:
        if self._aggregator is None:
            raise DealerStockError("Client not initialized. Use 'async with StockClient(...) as client:'")
        return self._aggregator

    def _require_details(self) -> DetailFetcher:
        if self._details is None:
            raise DealerStockError("Client not initialized. Use 'async with StockClient(...) as client:'")
        return self._details

    # ------------------------------------------------------------------
    # Data retrieval
    # ------------------------------------------------------------------

    async def get_vehicles(self) -> VehiclesResponse:
        """Return the merged inventory of all configured sources.

        Never raises for upstream failures: when nothing could be fetched
        the response either carries the last cached list (``stale``) or
        ``success=False`` with a generic error message.
        """
        return await self._require_aggregator().get_vehicles()

    async def list_vehicles(self) -> list[Vehicle]:
        """Convenience wrapper returning just the vehicle records."""
        response = await self.get_vehicles()
        return response.vehicles

    async def get_vehicle_detail(self, vid: Any) -> VehicleDetail:
        """Return the full detail record for *vid*.

        Raises
        ------
        InvalidVehicleIdError
            *vid* is not one to ten digits; no request is made.
        VehicleNotFoundError
            The detail API does not know the vehicle.
        UpstreamUnavailableError
            The detail API could not be reached.
        UpstreamMalformedError
            The detail API answered with an unrecognised record.
        """
        return await self._require_details().get(vid)
