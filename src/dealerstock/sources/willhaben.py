"""willhaben.at dealer page: JSON-LD item list, card markup and proximity fallback."""

from __future__ import annotations

import logging
import re
from typing import Any

from dealerstock.extraction.heuristic import pair_prices_with_images
from dealerstock.extraction.markup import (
    absolute_url,
    detect_fuel,
    detect_transmission,
    first_group,
    item_list_elements,
    text_of,
    unique,
)
from dealerstock.extraction.tiers import TierChain, embedded_tier, heuristic_tier, rendered_tier, static_tier
from dealerstock.models.raw import RawListing
from dealerstock.models.vehicle import Category
from dealerstock.sources.base import SourceAdapter, SourceTarget

_logger = logging.getLogger(__name__)

BASE_URL = "https://www.willhaben.at"
WAIT_FOR = '[data-testid*="search-result-entry"], h3'

_COMMERCIAL_HINTS = ("nutzfahrzeug", "transporter", "lkw", "bus", "van")
_URL_HINTS = ("/nutzfahrzeuge/", "/transporter/", "/lkw/", "/bus/", "/van/")

_LINK_ID_RE = re.compile(r'href="/iad/gebrauchtwagen/d/auto/[^"]*/(\d+)/"')
_ITEM_URL_ID_RES = (re.compile(r"/(\d+)/"), re.compile(r"-(\d+)/"), re.compile(r"(\d+)$"))
_TITLE_RE = re.compile(r"<h3[^>]*>([\s\S]*?)</h3>")
_PRICE_TESTID_RE = re.compile(r'data-testid="[^"]*price[^"]*"[^>]*>€\s*([\d.]+)')
_PRICE_GENERIC_RE = re.compile(r"€\s*([\d.]+)")
_IMAGE_RES = (
    re.compile(r'src="(https://cache\.willhaben\.at[^"]*_hoved\.jpg[^"]*)"'),
    re.compile(r'src="([^"]*cache\.willhaben\.at[^"]*_hoved[^"]*)"'),
)
_YEAR_RES = (
    re.compile(r'data-testid="[^"]*attributes[^"]*-0"[^>]*>[\s\S]*?<span[^>]*>(\d{4})</span>'),
    re.compile(r"(\d{4})\s*EZ"),
)
_KM_RES = (
    re.compile(r'data-testid="[^"]*attributes[^"]*-1"[^>]*>[\s\S]*?<span[^>]*>([\d.]+)</span>'),
    re.compile(r"([\d.]+)\s*km"),
)
_POWER_SLOT_RE = re.compile(
    r'data-testid="[^"]*attributes[^"]*-2"[^>]*>[\s\S]*?<span[^>]*>(\d{1,4})</span>'
    r"[\s\S]*?<span[^>]*>[\s\S]*?PS\s*\((\d+)\s*kW\)"
)
_SUBHEADER_RE = re.compile(r'data-testid="[^"]*subheader[^"]*"[^>]*>([^<]+)<')
_MARKUP_CATEGORY_RE = re.compile(
    r'(?:class|data-category|data-vehicle-type)="[^"]*(?:nutzfahrzeug|transporter|lkw|bus|van)[^"]*"',
    re.IGNORECASE,
)
_IMAGE_URL_RE = re.compile(r'src="([^"]*cache\.willhaben\.at[^"]*)"')


def _card_section(markup: str, vid: str) -> str | None:
    """Markup of the card with element id *vid*, up to the next card."""
    pattern = re.compile(rf'id="{re.escape(vid)}"[^>]*>([\s\S]*?)(?=<div[^>]*id="\d+"|$)', re.IGNORECASE)
    match = pattern.search(markup)
    return match.group(1) if match else None


def _has_hint(value: Any) -> bool:
    lowered = str(value or "").lower()
    return any(hint in lowered for hint in _COMMERCIAL_HINTS)


def _category_hint(url: str | None, item: dict[str, Any] | None, card: str | None) -> str | None:
    """Commercial-vehicle evidence from URL, structured data or card markup."""
    if url and any(hint in url.lower() for hint in _URL_HINTS):
        return Category.NUTZFAHRZEUGE.value
    if item:
        if _has_hint(item.get("category")) or _has_hint(item.get("vehicleType")):
            return Category.NUTZFAHRZEUGE.value
        properties = item.get("additionalProperty")
        if isinstance(properties, list) and any(
            isinstance(prop, dict) and _has_hint(prop.get("value") or prop.get("name")) for prop in properties
        ):
            return Category.NUTZFAHRZEUGE.value
    if card and _MARKUP_CATEGORY_RE.search(card):
        return Category.NUTZFAHRZEUGE.value
    return None


def _fill_from_card(raw: RawListing, card: str) -> None:
    if raw.title is None:
        title = first_group(card, _TITLE_RE)
        raw.title = text_of(title) if title else None
    if raw.price is None:
        raw.price = first_group(card, _PRICE_TESTID_RE, _PRICE_GENERIC_RE)
    raw.image = first_group(card, *_IMAGE_RES)
    raw.year = first_group(card, *_YEAR_RES)
    raw.mileage = first_group(card, *_KM_RES)
    power = _POWER_SLOT_RE.search(card)
    if power:
        raw.power_ps, raw.power_kw = power.group(1), power.group(2)
    subheader = first_group(card, _SUBHEADER_RE) or ""
    raw.fuel_type = detect_fuel(subheader)
    raw.transmission = detect_transmission(subheader)


def _item_id(url: str) -> str | None:
    return first_group(url, *_ITEM_URL_ID_RES)


def _default_url(vid: str) -> str:
    return f"{BASE_URL}/iad/gebrauchtwagen/d/auto/{vid}/"


def parse_item_list(markup: str) -> list[RawListing]:
    """Embedded JSON-LD ``ItemList``, completed from the matching cards."""
    raws: list[RawListing] = []
    for element in item_list_elements(markup):
        item = element.get("item") if isinstance(element.get("item"), dict) else {}
        link = element.get("url") or item.get("url")
        if not isinstance(link, str):
            continue
        vid = _item_id(link)
        if vid is None:
            continue
        offers = item.get("offers") if isinstance(item.get("offers"), dict) else {}
        url = absolute_url(link, BASE_URL)
        raw = RawListing(
            id=vid,
            title=text_of(item.get("name")) or None,
            price=offers.get("price"),
            url=url,
        )
        card = _card_section(markup, vid)
        if card is not None:
            _fill_from_card(raw, card)
        raw.category = _category_hint(url, item, card)
        raws.append(raw)
    return raws


def parse_cards(markup: str) -> list[RawListing]:
    """Result cards located through their detail links."""
    raws: list[RawListing] = []
    for vid in unique(_LINK_ID_RE.findall(markup)):
        card = _card_section(markup, vid)
        if card is None:
            _logger.debug("No card markup for willhaben listing %s", vid)
            continue
        link = re.search(rf'href="(/iad/gebrauchtwagen/d/auto/[^"]*/{vid}/)"', markup)
        url = absolute_url(link.group(1), BASE_URL) if link else _default_url(vid)
        raw = RawListing(id=vid, url=url)
        _fill_from_card(raw, card)
        raw.category = _category_hint(url, None, card)
        raws.append(raw)
    return raws


def parse_by_proximity(markup: str) -> list[RawListing]:
    return pair_prices_with_images(markup, _IMAGE_URL_RE, base_url=BASE_URL)


class WillhabenAdapter(SourceAdapter):
    """Dealer storefront on willhaben; category is inferred per listing."""

    source_id = "willhaben"
    wait_for = WAIT_FOR

    def targets(self) -> list[SourceTarget]:
        url = self._config.data_source.willhaben_url()
        if not url:
            return []
        return [SourceTarget(category=Category.PKW, page_url=url, classify=True)]

    def build_chain(self, target: SourceTarget) -> TierChain:
        return TierChain(
            [
                embedded_tier(parse_item_list),
                rendered_tier(parse_cards),
                static_tier(parse_cards),
                heuristic_tier(parse_by_proximity),
            ]
        )
