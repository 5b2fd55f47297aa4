"""Motornetzwerk dealer inventory: JSON API with rendered/static page fallback."""

from __future__ import annotations

import functools
import logging
import re
from typing import Any
from urllib.parse import urljoin

from bs4 import Tag

from dealerstock._constants import MAX_LISTINGS_PER_PAGE
from dealerstock.exceptions import UpstreamMalformedError
from dealerstock.extraction.markup import (
    absolute_url,
    find_power,
    first_group,
    parse_markup,
)
from dealerstock.extraction.tiers import TierChain, api_tier, rendered_tier, static_tier
from dealerstock.ingestion.coerce import clean_text, safe_str
from dealerstock.models.raw import RawListing
from dealerstock.models.vehicle import Category
from dealerstock.sources.base import SourceAdapter, SourceTarget

_logger = logging.getLogger(__name__)

WAIT_FOR = 'article, .vehicle, [class*="vehicle"]'

_VID_RE = re.compile(r"vid=(\d+)")
_DETAIL_HREF_RE = re.compile(r"fahrzeugdetails[^\"']*vid=\d+")
_EZ_RE = re.compile(r"EZ:\s*(\d{4})")
_KM_RE = re.compile(r"(?<![\d.])(\d{1,3}(?:\.\d{3})*)\s*km")
_KW_SLASH_PS_RE = re.compile(r"(\d+)\s*kw\s*/\s*(\d+)\s*PS", re.IGNORECASE)


def detail_url(base_url: str, vid: str) -> str:
    """Public detail page of a listing on the dealer website."""
    return urljoin(base_url or "", f"/fahrzeugdetails?vid={vid}")


def _string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str) and item]


def map_api_payload(payload: Any, *, base_url: str = "") -> list[RawListing]:
    """Map the inventory API response (``{"vehicles": [...]}`` or a bare list)."""
    items = payload.get("vehicles") if isinstance(payload, dict) else payload
    if not isinstance(items, list):
        raise UpstreamMalformedError("Inventory API response has no vehicles array")

    raws: list[RawListing] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        vid = safe_str(item.get("id"))
        image = item.get("image") or item.get("imageThumb")
        raws.append(
            RawListing(
                id=vid,
                title=item.get("modelName") or item.get("type"),
                price=item.get("price"),
                year=item.get("registrationYear"),
                mileage=item.get("mileage"),
                fuel_type=item.get("fuelName"),
                power_kw=item.get("engineEffectKw"),
                power_ps=item.get("engineEffectPs"),
                transmission=item.get("transmissionName"),
                image=image,
                images=_string_list(item.get("allImages")),
                url=detail_url(base_url, vid) if vid else None,
                vehicle_type=item.get("vehicleTypeName"),
            )
        )
    return raws


def _listing_blocks(markup: str) -> list[Tag]:
    soup = parse_markup(markup)
    articles = soup.find_all("article")
    if articles:
        return articles
    divs = soup.select('div[class*="vehicle"], div[id*="vehicle"]')
    if divs:
        return divs
    return soup.select('li[class*="vehicle"], li[id*="vehicle"], li[class*="fahrzeug"], li[id*="fahrzeug"]')


def _parse_block(block: Tag, base_url: str) -> RawListing:
    markup = str(block)
    vid = first_group(markup, _VID_RE)

    price_tag = block.find(class_="price")
    heading = block.find("h3")
    image_tag = block.find("img", src=True)
    alt_tag = block.find(alt=True)
    title = heading.get_text(" ", strip=True) if heading else (alt_tag.get("alt") if alt_tag else None)

    link = block.find("a", href=_DETAIL_HREF_RE)
    if link is not None:
        url = absolute_url(str(link["href"]), base_url)
    else:
        url = detail_url(base_url, vid) if vid else None

    raw = RawListing(
        id=vid,
        title=title,
        price=price_tag.get_text(" ", strip=True) if price_tag else None,
        image=absolute_url(str(image_tag["src"]), base_url) if image_tag else None,
        url=url,
    )

    # "EZ: 2019 // 130.438 km // Benzin" then "59 kw / 80 PS // Automatik"
    specs = [clean_text(li.get_text(" ", strip=True)) or "" for li in block.find_all("li")]
    if specs:
        first = specs[0]
        raw.year = first_group(first, _EZ_RE)
        raw.mileage = first_group(first, _KM_RE)
        parts = first.split("//")
        if len(parts) >= 3:
            raw.fuel_type = parts[2].strip() or None
    if len(specs) > 1:
        second = specs[1]
        match = _KW_SLASH_PS_RE.search(second)
        if match:
            raw.power_kw, raw.power_ps = match.group(1), match.group(2)
        else:
            raw.power_kw, raw.power_ps = find_power(second)
        parts = second.split("//")
        if len(parts) >= 2:
            raw.transmission = parts[-1].strip() or None
    return raw


def parse_listing_page(markup: str, *, base_url: str = "") -> list[RawListing]:
    """Parse the dealer listing page (rendered or static)."""
    blocks = _listing_blocks(markup)
    _logger.debug("Found %d listing blocks", len(blocks))
    return [_parse_block(block, base_url) for block in blocks[:MAX_LISTINGS_PER_PAGE]]


class MotornetzwerkAdapter(SourceAdapter):
    """Cars and commercial vehicles, each from its own API endpoint and page."""

    source_id = "motornetzwerk"
    wait_for = WAIT_FOR

    def targets(self) -> list[SourceTarget]:
        ds = self._config.data_source
        candidates = (
            (Category.PKW, ds.api_endpoints.pkw, ds.source_urls.pkw),
            (Category.NUTZFAHRZEUGE, ds.api_endpoints.nutzfahrzeuge, ds.source_urls.nutzfahrzeuge),
        )
        return [
            SourceTarget(category=category, api_url=api_url, page_url=page_url)
            for category, api_url, page_url in candidates
            if api_url or page_url
        ]

    def build_chain(self, target: SourceTarget) -> TierChain:
        base_url = self._config.data_source.base_url
        parser = functools.partial(parse_listing_page, base_url=base_url)
        return TierChain(
            [
                api_tier(functools.partial(map_api_payload, base_url=base_url)),
                rendered_tier(parser),
                static_tier(parser),
            ]
        )
