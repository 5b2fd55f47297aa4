"""Normalization of raw listings into canonical vehicles.

The normalizer is a pure function of its inputs: it keeps no state and
never performs I/O, so the same raw record always yields the same
:class:`~dealerstock.models.Vehicle` (or the same rejection).
"""

from __future__ import annotations

import datetime as dt
import logging
import re
from typing import Any

from pydantic import ValidationError

from dealerstock._constants import MIN_TITLE_LENGTH, MIN_YEAR
from dealerstock.ingestion.coerce import (
    clean_text,
    derive_power,
    parse_grouped_int,
    parse_price,
    safe_int,
)
from dealerstock.models.raw import RawListing
from dealerstock.models.vehicle import Category, Power, Vehicle

_logger = logging.getLogger(__name__)

_YEAR_RE = re.compile(r"\b(19\d{2}|20\d{2})\b")
_SLUG_RE = re.compile(r"[^a-z0-9]+")
# Fragments of inline scripts or JSON that leak into titles from broken markup.
_CODE_MARKERS = ("function", "{", "}", "<", ">", '":"', "\\", "=>")

_FUEL_NAMES: tuple[tuple[str, str], ...] = (
    ("plug-in", "Plug-in-Hybrid"),
    ("hybrid", "Hybrid"),
    ("diesel", "Diesel"),
    ("benzin", "Benzin"),
    ("petrol", "Benzin"),
    ("gasoline", "Benzin"),
    ("elektr", "Elektro"),
    ("electric", "Elektro"),
    ("erdgas", "Erdgas (CNG)"),
    ("cng", "Erdgas (CNG)"),
    ("autogas", "Autogas (LPG)"),
    ("lpg", "Autogas (LPG)"),
    ("wasserstoff", "Wasserstoff"),
)

_TRANSMISSION_NAMES: tuple[tuple[str, str], ...] = (
    ("halbautomat", "Halbautomatik"),
    ("automat", "Automatik"),
    ("schalt", "Schaltgetriebe"),
    ("manuell", "Schaltgetriebe"),
    ("manual", "Schaltgetriebe"),
)


def canonical_fuel(value: Any) -> str | None:
    """Map an origin's fuel label onto a canonical German name."""
    text = clean_text(value)
    if text is None:
        return None
    lowered = text.lower()
    for needle, name in _FUEL_NAMES:
        if needle in lowered:
            return name
    return text


def canonical_transmission(value: Any) -> str | None:
    """Map an origin's gearbox label onto a canonical German name."""
    text = clean_text(value)
    if text is None:
        return None
    lowered = text.lower()
    for needle, name in _TRANSMISSION_NAMES:
        if needle in lowered:
            return name
    return text


def plausible_year(value: Any, *, max_year: int | None = None) -> int | None:
    """Return a registration year within 1970..next year, else ``None``."""
    if value is None:
        return None
    upper = max_year if max_year is not None else dt.date.today().year + 1
    year: int | None
    if isinstance(value, int) and not isinstance(value, bool):
        year = value
    else:
        match = _YEAR_RE.search(str(value))
        year = int(match.group(1)) if match else safe_int(value)
    if year is None or not MIN_YEAR <= year <= upper:
        return None
    return year


def is_plausible_title(title: str | None) -> bool:
    """Reject empty, too-short and script/JSON-contaminated titles."""
    if not title or len(title) < MIN_TITLE_LENGTH:
        return False
    lowered = title.lower()
    return not any(marker in lowered for marker in _CODE_MARKERS)


def normalize_url(value: Any) -> str | None:
    text = clean_text(value)
    if text is None:
        return None
    if text.startswith("//"):
        text = f"https:{text}"
    if not text.startswith(("http://", "https://")):
        return None
    return text


def fallback_id(source_id: str, title: str, price: int | None) -> str:
    """Build a deterministic id for origins that expose none."""
    slug = _SLUG_RE.sub("-", title.lower()).strip("-")[:50]
    return f"{source_id}-{slug}-{price if price is not None else 'poa'}"


def _images(raw: RawListing) -> list[str]:
    ordered: list[str] = []
    for candidate in [raw.image, *raw.images]:
        url = normalize_url(candidate)
        if url and url not in ordered:
            ordered.append(url)
    return ordered


def _category(raw: RawListing, default: Category | str) -> Category:
    if raw.category:
        try:
            return Category(raw.category)
        except ValueError:
            _logger.debug("Ignoring unknown category hint %r", raw.category)
    return Category(default)


def normalize(
    raw: RawListing,
    source_id: str,
    category: Category | str,
    *,
    max_year: int | None = None,
) -> Vehicle | None:
    """Map *raw* onto the canonical schema, or return ``None`` to drop it.

    Parameters
    ----------
    raw : RawListing
        Record as extracted by a tier.
    source_id : str
        Id of the producing adapter; recorded on the vehicle and used for
        fallback ids.
    category : Category or str
        Category used when the raw record carries no valid hint.
    max_year : int, optional
        Upper bound for plausible years; defaults to next calendar year.

    Returns
    -------
    Vehicle or None
        ``None`` when title or price cannot be resolved.
    """
    title = clean_text(raw.title)
    if not is_plausible_title(title):
        _logger.debug("Dropping %s record %r: implausible title", source_id, raw.id)
        return None
    assert title is not None  # noqa: S101

    price = parse_price(raw.price)
    if price is not None and price <= 0:
        price = None
    price_on_request = price is None and raw.price_on_request
    if price is None and not price_on_request:
        _logger.debug("Dropping %s record %r: no price", source_id, raw.id)
        return None

    power_pair = derive_power(parse_grouped_int(raw.power_kw), parse_grouped_int(raw.power_ps))
    images = _images(raw)
    vid = clean_text(raw.id) or fallback_id(source_id, title, price)

    try:
        return Vehicle(
            id=vid,
            title=title,
            price=price,
            price_on_request=price_on_request,
            year=plausible_year(raw.year, max_year=max_year),
            mileage=parse_grouped_int(raw.mileage),
            fuel_type=canonical_fuel(raw.fuel_type),
            power=Power(kw=power_pair[0], ps=power_pair[1]) if power_pair else None,
            transmission=canonical_transmission(raw.transmission),
            image=images[0] if images else None,
            all_images=images,
            category=_category(raw, category),
            url=normalize_url(raw.url),
            source=source_id,
            vehicle_type=clean_text(raw.vehicle_type),
            operating_hours=parse_grouped_int(raw.operating_hours),
        )
    except ValidationError as exc:
        _logger.debug("Dropping %s record %r: %s", source_id, raw.id, exc)
        return None


def normalize_many(
    raws: list[RawListing],
    source_id: str,
    category: Category | str,
) -> list[Vehicle]:
    """Normalize a batch, silently dropping rejected records."""
    vehicles: list[Vehicle] = []
    for raw in raws:
        vehicle = normalize(raw, source_id, category)
        if vehicle is not None:
            vehicles.append(vehicle)
    return vehicles
