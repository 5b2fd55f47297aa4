"""AutoScout24 dealer pages (cars and ``atype=X`` commercial vehicles)."""

from __future__ import annotations

import functools
import logging
import re
from typing import Any

from dealerstock._constants import (
    MAX_SCRAPED_PRICE,
    MIN_SCRAPED_PRICE,
    WINDOW_AFTER_ID,
    WINDOW_BEFORE_ID,
)
from dealerstock.extraction.heuristic import pair_prices_with_images
from dealerstock.extraction.markup import (
    absolute_url,
    detect_fuel,
    detect_transmission,
    find_mileage,
    find_power,
    first_group,
    item_list_elements,
    strip_comments,
    text_of,
    unique,
    window,
)
from dealerstock.extraction.tiers import TierChain, embedded_tier, heuristic_tier, rendered_tier, static_tier
from dealerstock.ingestion.coerce import parse_price, safe_str
from dealerstock.models.raw import RawListing
from dealerstock.models.vehicle import Category, Vehicle
from dealerstock.sources.base import SourceAdapter, SourceTarget

_logger = logging.getLogger(__name__)

BASE_URL = "https://www.autoscout24.at"
WAIT_FOR = 'article, [class*="vehicle"], [class*="listing"]'

_UUID_RE = re.compile(r"^[a-f0-9-]{36}$")
_ARTICLE_ID_RE = re.compile(r"""<article[^>]*id=["']([a-f0-9-]{36})["'][^>]*>""", re.IGNORECASE)
_ANGEBOTE_ID_RE = re.compile(r"""href=["']/angebote/[^"']*-([a-f0-9-]{36})["']""", re.IGNORECASE)
_VID_LINK_RE = re.compile(r"""href=["'][^"']*fahrzeugdetails[^"']*vid=([^"'\s&]+)""", re.IGNORECASE)
_DATA_ID_RE = re.compile(r"""data-vehicle-id=["']([^"']+)["']""", re.IGNORECASE)
_IMAGE_UUID_RE = re.compile(r"https://prod\.pictures\.autoscout24\.net/listing-images/([a-f0-9-]+)_", re.IGNORECASE)
_IMAGE_RE = re.compile(
    r"https://prod\.pictures\.autoscout24\.net/listing-images/([a-f0-9-]+)_[a-f0-9-]+\.(?:jpg|jpeg|webp)([^\"'\s]*)",
    re.IGNORECASE,
)
_HEURISTIC_IMAGE_RE = re.compile(
    r"(https://prod\.pictures\.autoscout24\.net/listing-images/[a-f0-9-]+_[a-f0-9-]+\.(?:jpg|jpeg|webp)[^\"'\s]*)",
    re.IGNORECASE,
)

_H2_RE = re.compile(r"<h2[^>]*>([^<]*(?:<!--[^>]*-->[^<]*)*)</h2>", re.IGNORECASE)
_VERSION_RE = re.compile(
    r"""<span[^>]*class=["'][^"']*version["'][^>]*>([^<]*(?:<!--[^>]*-->[^<]*)*)</span>""",
    re.IGNORECASE,
)
_TITLE_FALLBACK_RES = (
    re.compile(r"<h[23][^>]*>([^<]{10,100})</h[23]>", re.IGNORECASE),
    re.compile(r"""data-title=["']([^"']{10,100})["']""", re.IGNORECASE),
    re.compile(r"""aria-label=["']([^"']{10,100})["']""", re.IGNORECASE),
    re.compile(r"""title=["']([^"']{10,100})["']""", re.IGNORECASE),
)
_BRANDS = (
    "Volkswagen", "VW", "Porsche", "Fiat", "Volvo", "BMW", "Mercedes", "Audi", "Opel", "Ford",
    "Renault", "Peugeot", "Citroën", "Skoda", "Seat", "Toyota", "Honda", "Nissan", "Mazda",
    "Hyundai", "Kia",
)
_BRAND_TITLE_RE = re.compile(
    r"((?:" + "|".join(re.escape(brand) for brand in _BRANDS) + r")[^<>\n]{5,80}?)(?:\s*€|\s*\d{4}|\s*km|$)",
    re.IGNORECASE,
)
_BRAND_TITLE_TAIL_RE = re.compile(r"\s*(?:Zurück|Weiter|/|Sortieren|€|km).*$", re.IGNORECASE)
_PRICE_RES = (
    re.compile(r"""data-testid=["']regular-price["'][^>]*>€\s*(\d{1,3}(?:[.\s]\d{3})+|\d+)"""),
    re.compile(r'data-testid="[^"]*price[^"]*"[^>]*>€\s*([\d.]+)'),
    re.compile(r"€\s*(\d{1,3}(?:[.\s]\d{3})+|\d+)"),
)
_DETAIL_YEAR_RE = re.compile(r"""<span[^>]*class=["'][^"']*detail-item["'][^>]*>\d{1,2}/(\d{4})""", re.IGNORECASE)
_ANY_YEAR_RE = re.compile(r"\b(19\d{2}|20\d{2})\b")
_DETAIL_KM_RE = re.compile(
    r"""<span[^>]*class=["'][^"']*detail-item["'][^>]*>\s*(\d{1,3}(?:[.\s]\d{3})+|\d+)\s*km\b""",
    re.IGNORECASE,
)
# One character that does not start another article's open or close tag.
_IN_ARTICLE = r"(?:(?!</?article\b)[\s\S])"
_ANGEBOTE_URL_RE = re.compile(r"""href=["'](/angebote/[^"']*-[a-f0-9-]{36})["']""", re.IGNORECASE)
_OLD_URL_RE = re.compile(r"""href=["']([^"']*fahrzeugdetails[^"']*)["']""", re.IGNORECASE)


def listing_id(raw_id: str) -> str | None:
    """Public id for an AutoScout24 listing; ``None`` for non-UUID ids."""
    return f"autoscout-{raw_id}" if _UUID_RE.match(raw_id) else None


def _first_image(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return next((item for item in value if isinstance(item, str)), None)
    if isinstance(value, dict):
        return safe_str(value.get("url") or value.get("contentUrl"))
    return None


def parse_item_list(markup: str) -> list[RawListing]:
    """Vehicles from the schema.org ``ItemList`` block."""
    raws: list[RawListing] = []
    for element in item_list_elements(markup):
        item = element.get("item")
        if not isinstance(item, dict):
            continue
        identifier = safe_str(item.get("identifier") or item.get("sku") or item.get("@id"))
        if identifier is None:
            continue
        offers = item.get("offers") if isinstance(item.get("offers"), dict) else {}
        odometer = item.get("mileageFromOdometer")
        engine = item.get("engine")
        brand = item.get("brand")
        if isinstance(brand, dict):
            brand = brand.get("name")
        title = item.get("name") or item.get("headline")
        if not title and brand and item.get("model"):
            title = f"{brand} {item['model']}"
        raws.append(
            RawListing(
                id=listing_id(identifier) or f"autoscout-{identifier}",
                title=text_of(title) or None,
                price=offers.get("price") if offers else item.get("price"),
                year=item.get("productionDate") or item.get("vehicleModelDate"),
                mileage=odometer.get("value") if isinstance(odometer, dict) else odometer,
                fuel_type=item.get("fuelType"),
                power_kw=engine.get("power") if isinstance(engine, dict) else None,
                transmission=item.get("vehicleTransmission") or item.get("transmission"),
                image=_first_image(item.get("image") or item.get("thumbnailUrl")),
                url=absolute_url(item.get("url") or element.get("url"), BASE_URL),
            )
        )
    return raws


def _image_pool(markup: str) -> dict[str, str]:
    """Best listing image per vehicle UUID, preferring 480x360 renditions."""
    pool: dict[str, str] = {}
    for match in _IMAGE_RE.finditer(markup):
        uuid, suffix, url = match.group(1), match.group(2) or "", match.group(0)
        existing = pool.get(uuid)
        if existing is None or ("480x360" in suffix and "480x360" not in existing):
            pool[uuid] = url
    return pool


def _candidate_ids(markup: str) -> list[str]:
    ids = unique(
        [
            *_ARTICLE_ID_RE.findall(markup),
            *_ANGEBOTE_ID_RE.findall(markup),
            *_VID_LINK_RE.findall(markup),
            *_DATA_ID_RE.findall(markup),
        ]
    )
    if ids:
        return ids
    return unique(_IMAGE_UUID_RE.findall(markup))


def _section(markup: str, vid: str) -> str | None:
    """Re-scope the page to the markup of one listing."""
    escaped = re.escape(vid)
    patterns = (
        rf"""<article[^>]*id=["']{escaped}["'][^>]*>([\s\S]*?)</article>""",
        rf"<article[^>]*>({_IN_ARTICLE}*?{escaped}{_IN_ARTICLE}*?)</article>",
        rf"""<div[^>]*data-vehicle-id=["']{escaped}["'][^>]*>([\s\S]*?)(?=<div[^>]*data-vehicle-id|$)""",
    )
    for pattern in patterns:
        match = re.search(pattern, markup, re.IGNORECASE)
        if match:
            return match.group(1)
    anchor = markup.find(f"listing-images/{vid}_")
    if anchor >= 0:
        return window(markup, anchor, anchor, WINDOW_BEFORE_ID, WINDOW_AFTER_ID)
    return None


def _title(section: str) -> str | None:
    h2 = _H2_RE.search(section)
    if h2:
        title = text_of(h2.group(1))
        version = _VERSION_RE.search(section)
        if version:
            title = f"{title} {text_of(version.group(1)).replace('**', '')}"
        return text_of(title) or None
    fallback = first_group(section, *_TITLE_FALLBACK_RES)
    if fallback:
        return text_of(fallback) or None
    for match in _BRAND_TITLE_RE.finditer(strip_comments(section)):
        candidate = _BRAND_TITLE_TAIL_RE.sub("", " ".join(match.group(1).split())).strip()
        if len(candidate) >= 10:
            return candidate
    return None


def _image(section: str, vid: str, pool: dict[str, str]) -> str | None:
    image = pool.get(vid)
    if image is None:
        match = _IMAGE_RE.search(section)
        if match:
            image = pool.get(match.group(1), match.group(0))
    if image and "/250x188" in image:
        image = image.replace("/250x188", "/480x360")
    return image


def _price(section: str) -> int | None:
    price = parse_price(first_group(section, *_PRICE_RES))
    if price is None or not MIN_SCRAPED_PRICE <= price <= MAX_SCRAPED_PRICE:
        return None
    return price


def parse_listing_page(markup: str, *, dealer_url: str = BASE_URL) -> list[RawListing]:
    """Id-first extraction from the dealer page markup."""
    pool = _image_pool(markup)
    raws: list[RawListing] = []
    for vid in _candidate_ids(markup):
        section = _section(markup, vid)
        if section is None:
            _logger.debug("No markup section for AutoScout24 listing %s", vid)
            continue
        kw, ps = find_power(section)
        url = first_group(section, _ANGEBOTE_URL_RE, _OLD_URL_RE)
        raws.append(
            RawListing(
                id=listing_id(vid),
                title=_title(section),
                price=_price(section),
                year=first_group(section, _DETAIL_YEAR_RE, _ANY_YEAR_RE),
                mileage=first_group(section, _DETAIL_KM_RE) or find_mileage(section),
                fuel_type=detect_fuel(section),
                power_kw=kw,
                power_ps=ps,
                transmission=detect_transmission(section),
                image=_image(section, vid, pool),
                url=absolute_url(url, BASE_URL) if url else dealer_url,
            )
        )
    return raws


def _uuid_from_image(url: str) -> str | None:
    uuid = first_group(url, _IMAGE_UUID_RE)
    return listing_id(uuid) if uuid else None


def parse_by_proximity(markup: str) -> list[RawListing]:
    return pair_prices_with_images(markup, _HEURISTIC_IMAGE_RE, identify=_uuid_from_image)


class AutoScout24Adapter(SourceAdapter):
    """Dealer storefront; the ``atype=X`` page lists commercial vehicles."""

    source_id = "autoscout24"
    wait_for = WAIT_FOR

    def targets(self) -> list[SourceTarget]:
        urls = self._config.data_source.autoscout24_urls()
        return [
            SourceTarget(category=Category(category), page_url=url)
            for category, url in urls.items()
        ]

    def build_chain(self, target: SourceTarget) -> TierChain:
        parser = functools.partial(parse_listing_page, dealer_url=target.page_url or BASE_URL)
        return TierChain(
            [
                embedded_tier(parse_item_list),
                rendered_tier(parser),
                static_tier(parser),
                heuristic_tier(parse_by_proximity),
            ]
        )

    async def enrich(self, vehicles: list[Vehicle]) -> list[Vehicle]:
        # The commercial page repeats some car listings; keep the first.
        seen: set[str] = set()
        kept: list[Vehicle] = []
        for vehicle in vehicles:
            if vehicle.id not in seen:
                seen.add(vehicle.id)
                kept.append(vehicle)
        return kept
