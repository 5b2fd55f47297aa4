"""Fan-out over all configured sources, merge, de-duplicate and cache."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from dealerstock._cache import CacheEntry, ListingCache
from dealerstock._constants import STALE_WARNING, TEMPORARILY_UNAVAILABLE
from dealerstock.models.results import SourceAdapterResult, VehiclesResponse
from dealerstock.models.vehicle import Vehicle
from dealerstock.sources.base import SourceAdapter

_logger = logging.getLogger(__name__)


def merge_results(results: Sequence[SourceAdapterResult], prefix_length: int) -> list[Vehicle]:
    """Concatenate results in priority order, dropping cross-source duplicates.

    Two records are duplicates when their lower-cased title prefixes of
    *prefix_length* characters are equal. The record from the earlier
    (higher-priority) result wins; records sharing a key within one
    source are all kept.
    """
    merged: list[Vehicle] = []
    owners: dict[str, str] = {}
    for result in results:
        for vehicle in result.vehicles:
            key = vehicle.dedup_key(prefix_length)
            owner = owners.setdefault(key, result.source_id)
            if owner != result.source_id:
                _logger.debug("Dropping %s listing %s: duplicate of %s listing", result.source_id, vehicle.id, owner)
                continue
            merged.append(vehicle)
    return merged


def _epoch_ms(entry: CacheEntry[list[Vehicle]]) -> int:
    return int(entry.fetched_at * 1000)


class Aggregator:
    """Serve the merged inventory from cache, refreshing it on demand.

    Concurrent callers that find the cache cold or expired share a single
    refresh. When the last caller waiting on that refresh is cancelled,
    the refresh (and every adapter run inside it) is cancelled too.
    """

    def __init__(
        self,
        adapters: Sequence[SourceAdapter],
        cache: ListingCache[list[Vehicle]],
        *,
        dedup_prefix_length: int = 30,
        adapter_timeout: float = 90.0,
    ) -> None:
        self._adapters = tuple(adapters)
        self._cache = cache
        self._dedup_prefix_length = dedup_prefix_length
        self._adapter_timeout = adapter_timeout
        self._refresh_task: asyncio.Task[VehiclesResponse] | None = None
        self._waiters = 0

    @property
    def cache(self) -> ListingCache[list[Vehicle]]:
        return self._cache

    @property
    def adapters(self) -> tuple[SourceAdapter, ...]:
        return self._adapters

    async def get_vehicles(self) -> VehiclesResponse:
        """Return the merged inventory; never raises except on cancellation."""
        try:
            entry = self._cache.entry
            if entry is not None and self._cache.is_fresh(entry):
                return VehiclesResponse(
                    vehicles=entry.data,
                    cached=True,
                    timestamp=_epoch_ms(entry),
                    count=len(entry.data),
                )
            return await self._join_refresh()
        except asyncio.CancelledError:
            raise
        except Exception:
            _logger.warning("Vehicle aggregation failed unexpectedly", exc_info=True)
            return self._fallback()

    # ------------------------------------------------------------------
    # Single-flight refresh
    # ------------------------------------------------------------------

    async def _join_refresh(self) -> VehiclesResponse:
        task = self._refresh_task
        if task is None or task.done():
            task = asyncio.create_task(self._refresh(), name="dealerstock-refresh")
            task.add_done_callback(self._forget_refresh)
            self._refresh_task = task
        self._waiters += 1
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if self._waiters == 1 and not task.done():
                _logger.debug("Last waiter cancelled; cancelling refresh")
                self._forget_refresh(task)
                task.cancel()
            raise
        finally:
            self._waiters -= 1

    def _forget_refresh(self, task: asyncio.Task[VehiclesResponse]) -> None:
        if self._refresh_task is task:
            self._refresh_task = None

    async def _refresh(self) -> VehiclesResponse:
        results = await asyncio.gather(*(self._run_adapter(adapter) for adapter in self._adapters))
        merged = merge_results(results, self._dedup_prefix_length)
        if not merged:
            return self._fallback()

        entry = self._cache.set(merged)
        _logger.info(
            "Refreshed inventory: %d vehicles (%s)",
            len(merged),
            ", ".join(f"{result.source_id}={len(result.vehicles)}" for result in results),
        )
        return VehiclesResponse(
            vehicles=merged,
            cached=False,
            timestamp=_epoch_ms(entry),
            count=len(merged),
        )

    async def _run_adapter(self, adapter: SourceAdapter) -> SourceAdapterResult:
        try:
            result = await asyncio.wait_for(adapter.fetch(), self._adapter_timeout)
        except asyncio.TimeoutError:
            _logger.warning("%s: no result within %.0f s", adapter.source_id, self._adapter_timeout)
            return SourceAdapterResult(source_id=adapter.source_id, partial=True, error="timed out")
        except Exception as exc:
            _logger.warning("%s: source failed: %s", adapter.source_id, exc)
            _logger.debug("%s: source failure details", adapter.source_id, exc_info=True)
            return SourceAdapterResult(source_id=adapter.source_id, partial=True, error=str(exc))
        if result.partial:
            _logger.warning("%s: partial result (%s)", adapter.source_id, result.error)
        return result

    def _fallback(self) -> VehiclesResponse:
        entry = self._cache.entry
        if entry is not None:
            _logger.warning("No source produced vehicles; serving %d cached vehicles", len(entry.data))
            return VehiclesResponse(
                vehicles=entry.data,
                cached=True,
                stale=True,
                timestamp=_epoch_ms(entry),
                count=len(entry.data),
                warning=STALE_WARNING,
            )
        _logger.warning("No source produced vehicles and no cached data is available")
        return VehiclesResponse(success=False, error=TEMPORARILY_UNAVAILABLE)
