"""Canonical vehicle listing model."""

from __future__ import annotations

from enum import StrEnum

from pydantic import Field, model_validator

from dealerstock.models._base import StockBaseModel


class Category(StrEnum):
    """Inventory category a listing is shown under."""

    PKW = "pkw"
    NUTZFAHRZEUGE = "nutzfahrzeuge"
    BAUMASCHINE = "baumaschine"


class Power(StockBaseModel):
    """Engine power in both units; the normalizer always fills both."""

    kw: int
    ps: int


class Vehicle(StockBaseModel):
    """A canonical, source-independent vehicle listing.

    A record is only constructible when it has a non-empty title and
    either a positive integer price or the explicit price-on-request
    marker; any other combination raises a validation error.
    """

    id: str
    """Listing id; stable within a refresh cycle when the origin supplies one."""
    title: str
    price: int | None = None
    """Asking price in whole euros; ``None`` only with ``price_on_request``."""
    price_on_request: bool = False
    year: int | None = None
    """First registration (or build) year."""
    mileage: int | None = None
    """Odometer reading in km."""
    fuel_type: str | None = None
    power: Power | None = None
    transmission: str | None = None
    image: str | None = None
    all_images: list[str] = Field(default_factory=list)
    """Gallery URLs in display order; starts with ``image`` when both are set."""
    category: Category
    url: str | None = None
    source: str = ""
    """Id of the source adapter that produced the record."""
    vehicle_type: str | None = None
    """Offer type as labelled by the origin (e.g. ``"Tageszulassung"``)."""
    operating_hours: int | None = None
    """Operating hours for machines."""

    @model_validator(mode="after")
    def _require_title_and_price(self) -> Vehicle:
        if not self.title.strip():
            raise ValueError("title must not be empty")
        if self.price_on_request:
            if self.price is not None:
                raise ValueError("price must be None when price_on_request is set")
        elif self.price is None or self.price <= 0:
            raise ValueError("price must be a positive integer unless price_on_request is set")
        return self

    def dedup_key(self, length: int) -> str:
        """Similarity key used to merge listings across sources."""
        return self.title.lower()[:length]
