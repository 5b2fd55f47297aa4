"""Origin-specific intermediate record produced by extraction tiers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class RawListing:
    """Loosely typed listing as pulled out of an API payload or markup.

    Values are kept as the origin delivered them (``"130.438 km"``,
    ``"36990.0"``, ``"150 PS"``); coercion and validation happen in
    :func:`dealerstock.ingestion.normalize.normalize`.
    """

    id: str | None = None
    title: Any = None
    price: Any = None
    price_on_request: bool = False
    year: Any = None
    mileage: Any = None
    fuel_type: Any = None
    power_kw: Any = None
    power_ps: Any = None
    transmission: Any = None
    image: Any = None
    images: list[str] = field(default_factory=list)
    url: Any = None
    category: str | None = None
    """Category hint from the origin; the adapter's default is used otherwise."""
    vehicle_type: Any = None
    operating_hours: Any = None
