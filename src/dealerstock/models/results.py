"""Result envelopes passed between adapters, aggregator and callers."""

from __future__ import annotations

from pydantic import Field

from dealerstock.models._base import StockBaseModel
from dealerstock.models.vehicle import Vehicle


class SourceAdapterResult(StockBaseModel):
    """Outcome of one source adapter run.

    ``partial`` is set whenever any part of the source failed; the
    vehicles that were extracted are still usable.
    """

    source_id: str
    vehicles: list[Vehicle] = Field(default_factory=list)
    partial: bool = False
    error: str | None = None
    tier: str | None = None
    """Name of the tier that produced the records (first target that succeeded)."""

    @property
    def succeeded(self) -> bool:
        return bool(self.vehicles)


class VehiclesResponse(StockBaseModel):
    """Aggregated inventory as returned to callers.

    ``timestamp`` is the wall-clock time (epoch milliseconds) at which
    the list was fetched from upstream, not the time of the call.
    """

    success: bool = True
    vehicles: list[Vehicle] = Field(default_factory=list)
    cached: bool = False
    stale: bool = False
    timestamp: int | None = None
    count: int = 0
    warning: str | None = None
    error: str | None = None
