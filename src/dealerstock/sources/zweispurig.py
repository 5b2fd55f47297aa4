"""zweispurig.at dealer inventory."""

from __future__ import annotations

import logging
import re

from dealerstock.extraction.heuristic import pair_prices_with_images
from dealerstock.extraction.markup import absolute_url, detect_fuel, detect_transmission, first_group, text_of, unique
from dealerstock.extraction.tiers import TierChain, heuristic_tier, rendered_tier, static_tier
from dealerstock.models.raw import RawListing
from dealerstock.models.vehicle import Category, Vehicle
from dealerstock.sources.base import SourceAdapter, SourceTarget
from dealerstock.sources.gallery import enrich_galleries

_logger = logging.getLogger(__name__)

BASE_URL = "https://www.zweispurig.at"
WAIT_FOR = 'a[href*="/details-"], h3, h4'

_DETAIL_LINK_RE = re.compile(r"""href=["'](https://www\.zweispurig\.at/[^"']*/details-(\d+))["']""", re.IGNORECASE)
_SEPARATOR_RE = re.compile(r'<hr[^>]*>|<separator[^>]*>|class="[^"]*separator[^"]*"', re.IGNORECASE)
_COMMERCIAL_URL_HINTS = ("transporter", "kastenwagen")
_CONTEXT_BEFORE = 2_500
_CONTEXT_AFTER = 1_500

_H3_RES = (
    re.compile(r'<a[^>]*href="[^"]*"[^>]*>[\s\S]*?<h3[^>]*>([^<]+)</h3>', re.IGNORECASE),
    re.compile(r"<h3[^>]*>([^<]+)</h3>", re.IGNORECASE),
)
_H4_RES = (
    re.compile(r'<a[^>]*href="[^"]*"[^>]*>[\s\S]*?<h4[^>]*>([^<]+)</h4>', re.IGNORECASE),
    re.compile(r"<h4[^>]*>([^<]+)</h4>", re.IGNORECASE),
)
_SLUG_RE = re.compile(r"zweispurig\.at/([^/]+)/details-", re.IGNORECASE)
_TOP_RE = re.compile(r"\*+TOP\*+", re.IGNORECASE)
_PRICE_RE = re.compile(r"€\s*([\d.]+)(?:,-)?")
_YEAR_RES = (
    re.compile(r"<h5[^>]*>\d{1,2}/(\d{4})</h5>", re.IGNORECASE),
    re.compile(r">\d{1,2}/(\d{4})<"),
)
_KM_RE = re.compile(r"([\d.]+)\s*km\b", re.IGNORECASE)
_POWER_RE = re.compile(r"(\d+)\s*PS\s*\((\d+)\s*K?W\)", re.IGNORECASE)
_IMAGE_RES = (
    re.compile(r"""src=["'](https://[^"']*zweispurig[^"']*\.(?:jpg|jpeg|png|webp)[^"']*)["']""", re.IGNORECASE),
    re.compile(r"""src=["']([^"']+\.(?:jpg|jpeg|png|webp))["']""", re.IGNORECASE),
)
_OFFER_TYPES = ("Tageszulassung", "Neuwagen", "Vorführwagen")

_GALLERY_RE = re.compile(r"https://files\.zweispurig\.at/fahrzeugbilder/[^\"'\s<>]+\.(?:jpg|jpeg|png|webp)", re.IGNORECASE)
_GALLERY_SIZE_DIR_RE = re.compile(r"/(?:sm|xs|lg)/")
_GALLERY_FILE_RE = re.compile(r"\d+_\d+\.(?:jpg|jpeg|png|webp)$", re.IGNORECASE)
_GALLERY_EXCLUDED = ("placeholder", "no-image", "error")


def _sections(markup: str) -> list[tuple[str, str, str]]:
    """``(id, url, section markup)`` per listing, split on separators."""
    sections: list[tuple[str, str, str]] = []
    seen: set[str] = set()
    for part in _SEPARATOR_RE.split(markup):
        match = _DETAIL_LINK_RE.search(part)
        if match and match.group(2) not in seen:
            seen.add(match.group(2))
            sections.append((match.group(2), match.group(1), part))
    if sections:
        return sections

    for match in _DETAIL_LINK_RE.finditer(markup):
        url, vid = match.group(1), match.group(2)
        if vid in seen:
            continue
        seen.add(vid)
        start = max(0, match.start() - _CONTEXT_BEFORE)
        sections.append((vid, url, markup[start : match.end() + _CONTEXT_AFTER]))
    return sections


def _linked_heading(section: str, tag: str, vid: str) -> str | None:
    pattern = re.compile(rf'href="[^"]*details-{vid}"[^>]*>\s*<{tag}[^>]*>([^<]+)</{tag}>', re.IGNORECASE)
    return first_group(section, pattern, *(_H3_RES if tag == "h3" else _H4_RES))


def _slug_title(url: str) -> str | None:
    slug = first_group(url, _SLUG_RE)
    if not slug:
        return None
    parts = slug.split("-")
    if len(parts) < 2:
        return None
    # brand-model-type-fuel-colour-region: keep the leading brand/model parts
    return " ".join(part.capitalize() for part in parts[: min(3, len(parts) - 3)]) or None


def _title(section: str, vid: str, url: str) -> str | None:
    brand = _linked_heading(section, "h3", vid)
    model = _linked_heading(section, "h4", vid)
    title = " ".join(part.strip() for part in (brand, model) if part and part.strip())
    if len(title) < 3:
        title = _slug_title(url) or ""
    title = _TOP_RE.sub("", title).replace("*", "")
    return text_of(title) or None


def _offer_type(section: str) -> str:
    for offer_type in _OFFER_TYPES:
        if f">{offer_type}<" in section:
            return offer_type
    return "Gebrauchtwagen"


def parse_listings(markup: str) -> list[RawListing]:
    """Dealer listing page, one record per detail link."""
    raws: list[RawListing] = []
    for vid, url, section in _sections(markup):
        power = _POWER_RE.search(section)
        image = first_group(section, *_IMAGE_RES)
        raws.append(
            RawListing(
                id=f"zweispurig-{vid}",
                title=_title(section, vid, url),
                price=first_group(section, _PRICE_RE),
                year=first_group(section, *_YEAR_RES),
                mileage=first_group(section, _KM_RE),
                fuel_type=detect_fuel(section, cell_only=True),
                power_ps=power.group(1) if power else None,
                power_kw=power.group(2) if power else None,
                transmission=detect_transmission(section, cell_only=True),
                vehicle_type=_offer_type(section),
                image=absolute_url(image, BASE_URL) if image else None,
                url=url,
                category=(
                    Category.NUTZFAHRZEUGE.value
                    if any(hint in url.lower() for hint in _COMMERCIAL_URL_HINTS)
                    else None
                ),
            )
        )
    return raws


def parse_by_proximity(markup: str) -> list[RawListing]:
    return pair_prices_with_images(markup, _IMAGE_RES[0], base_url=BASE_URL)


def parse_gallery(markup: str) -> list[str]:
    """Full-size photos from a detail page, thumbnail directories collapsed."""
    images: list[str] = []
    for url in unique(_GALLERY_SIZE_DIR_RE.sub("/", found, count=1) for found in _GALLERY_RE.findall(markup)):
        lowered = url.lower()
        if any(word in lowered for word in _GALLERY_EXCLUDED):
            continue
        if not _GALLERY_FILE_RE.search(url):
            continue
        images.append(url)
    return images


class ZweispurigAdapter(SourceAdapter):
    """Dealer inventory on zweispurig; category is inferred from the title."""

    source_id = "zweispurig"
    wait_for = WAIT_FOR

    def targets(self) -> list[SourceTarget]:
        url = self._config.data_source.zweispurig_url()
        if not url:
            return []
        return [SourceTarget(category=Category.PKW, page_url=url, classify=True)]

    def build_chain(self, target: SourceTarget) -> TierChain:
        return TierChain(
            [
                rendered_tier(parse_listings),
                static_tier(parse_listings),
                heuristic_tier(parse_by_proximity),
            ]
        )

    async def enrich(self, vehicles: list[Vehicle]) -> list[Vehicle]:
        if not self._config.enrich_galleries:
            return vehicles
        return await enrich_galleries(
            vehicles,
            self._transport,
            parse_gallery,
            concurrency=self._config.gallery_concurrency,
            source_id=self.source_id,
        )
