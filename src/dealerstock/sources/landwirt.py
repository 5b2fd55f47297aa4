"""landwirt.com dealer machine listings."""

from __future__ import annotations

import logging
import re

from dealerstock.extraction.markup import first_group, parse_markup, text_of, unique
from dealerstock.extraction.tiers import TierChain, heuristic_tier, rendered_tier, static_tier
from dealerstock.models.raw import RawListing
from dealerstock.models.vehicle import Category, Vehicle
from dealerstock.sources.base import SourceAdapter, SourceTarget
from dealerstock.sources.gallery import enrich_galleries

_logger = logging.getLogger(__name__)

BASE_URL = "https://www.landwirt.com"
WAIT_FOR = 'article, [class*="machine"], [class*="listing"], h2, h3'

_DETAIL_LINK_RE = re.compile(r"""href=["'](/detail/([^"']+)-(\d+))["']""", re.IGNORECASE)
_ARTICLE_LINK_RE = re.compile(r"""href=["'](/detail/[^"']+)["']""", re.IGNORECASE)
_ID_RE = re.compile(r"-(\d+)$")
_ARIA_RE = re.compile(r"""aria-label=["']([^"']+)["']""", re.IGNORECASE)
_TITLE_FALLBACK_RES = (
    re.compile(r"""<div[^>]*class="[^"]*title[^"]*"[^>]*>([^<]{5,100})<""", re.IGNORECASE),
    re.compile(r">([A-Z][a-zA-Z0-9\s\-.]{10,80})<"),
)
_PRICE_RES = (
    re.compile(r"<strong[^>]*>([\d\s.]+)\s*€</strong>", re.IGNORECASE),
    re.compile(r"<strong[^>]*>€\s*([\d\s.]+)</strong>", re.IGNORECASE),
    re.compile(r"(\d{1,3}(?:[.\s]\d{3})+|\d+)\s*€"),
    re.compile(r"€\s*(\d{1,3}(?:[.\s]\d{3})+|\d+)"),
)
_YEAR_RES = (
    re.compile(r"Bj\.\s*(\d{4})", re.IGNORECASE),
    re.compile(r"Baujahr[:\s]*(\d{4})", re.IGNORECASE),
)
_PS_KW_RE = re.compile(r"(\d+)\s*PS\s*/?\s*(\d+)\s*kW", re.IGNORECASE)
_KW_PS_RE = re.compile(r"(\d+)\s*kW\s*/?\s*(\d+)\s*PS", re.IGNORECASE)
_PS_RE = re.compile(r"(\d+)\s*PS\b", re.IGNORECASE)
_KW_RE = re.compile(r"(\d+)\s*kW\b", re.IGNORECASE)
_HOURS_RE = re.compile(r"([\d.]+)\s*(?:h|Stunden|Betriebsstunden)\b", re.IGNORECASE)
_COMMERCIAL_RE = re.compile(r"nutzfahrzeuge|lkw|lastwagen", re.IGNORECASE)
_IMAGE_RE = re.compile(r"https://static\.landwirt\.com/[^\"'\s<>]+\.(?:jpg|jpeg|png|webp)", re.IGNORECASE)
_NAVIGATION_WORDS = ("sortierung", "anzeige")

_LOW_RES_RE = re.compile(r"-\d*(?:kl|vb)\.(?:jpg|jpeg|png|webp)$", re.IGNORECASE)
_VEHICLE_IMAGE_RES = (
    re.compile(r"/\d+-\w+-\d+"),
    re.compile(r"/\d+-\d+\.(?:jpg|jpeg|png|webp)$", re.IGNORECASE),
)
_EXCLUDED_IMAGE_WORDS = ("mobileicons", "apple-touch-icon", "platzhalter", "logo", "favicon", "thumb", "small", "mini")


def _power(article: str) -> tuple[str | None, str | None]:
    match = _PS_KW_RE.search(article)
    if match:
        return match.group(2), match.group(1)
    match = _KW_PS_RE.search(article)
    if match:
        return match.group(1), match.group(2)
    return first_group(article, _KW_RE), first_group(article, _PS_RE)


def _is_listing_title(title: str | None) -> bool:
    return bool(title) and not any(word in title.lower() for word in _NAVIGATION_WORDS)


def _parse_article(article: str) -> RawListing | None:
    link = first_group(article, _ARTICLE_LINK_RE)
    url = f"{BASE_URL}{link}" if link else None
    vid = first_group(link, _ID_RE) if link else None

    title = first_group(article, _ARIA_RE, *_TITLE_FALLBACK_RES)
    title = text_of(title) if title else None
    if not _is_listing_title(title):
        return None

    kw, ps = _power(article)
    price = first_group(article, *_PRICE_RES)
    image = _IMAGE_RE.search(article)
    return RawListing(
        id=f"landwirt-{vid}" if vid else None,
        title=title,
        price=price,
        # Machines without any asking price are listed "auf Anfrage".
        price_on_request="Preis auf Anfrage" in article or price is None,
        year=first_group(article, *_YEAR_RES),
        power_kw=kw,
        power_ps=ps,
        operating_hours=first_group(article, _HOURS_RE),
        image=image.group(0) if image else None,
        url=url,
        category=Category.NUTZFAHRZEUGE.value if _COMMERCIAL_RE.search(article) else None,
    )


def parse_machines(markup: str) -> list[RawListing]:
    """One record per ``<article>`` card on the dealer page."""
    raws: list[RawListing] = []
    for article in parse_markup(markup).find_all("article"):
        raw = _parse_article(str(article))
        if raw is not None:
            raws.append(raw)
    return raws


def parse_detail_links(markup: str) -> list[RawListing]:
    """Titles derived from ``/detail/<slug>-<id>`` links; price on request."""
    raws: list[RawListing] = []
    seen: set[str] = set()
    for path, slug, vid in _DETAIL_LINK_RE.findall(markup):
        if vid in seen:
            continue
        seen.add(vid)
        title = " ".join(part.capitalize() for part in re.split(r"-+", slug) if part)
        if len(title) < 5 or not _is_listing_title(title):
            continue
        raws.append(
            RawListing(
                id=f"landwirt-{vid}",
                title=title,
                price_on_request=True,
                url=f"{BASE_URL}{path}",
            )
        )
    return raws


def parse_gallery(markup: str) -> list[str]:
    """Full-size machine photos from a detail page."""
    images: list[str] = []
    for url in unique(_IMAGE_RE.findall(markup)):
        lowered = url.lower()
        if any(word in lowered for word in _EXCLUDED_IMAGE_WORDS):
            continue
        if "icon" in lowered and not re.search(r"\d+-\d+\.(?:jpg|jpeg|png|webp)$", lowered):
            continue
        if _LOW_RES_RE.search(lowered):
            continue
        if not any(pattern.search(lowered) for pattern in _VEHICLE_IMAGE_RES):
            continue
        images.append(url)
    return images


class LandwirtAdapter(SourceAdapter):
    """Construction and agricultural machines; defaults to ``baumaschine``."""

    source_id = "landwirt"
    wait_for = WAIT_FOR

    def targets(self) -> list[SourceTarget]:
        url = self._config.data_source.landwirt_url()
        if not url:
            return []
        return [SourceTarget(category=Category.BAUMASCHINE, page_url=url)]

    def build_chain(self, target: SourceTarget) -> TierChain:
        return TierChain(
            [
                rendered_tier(parse_machines),
                static_tier(parse_machines),
                heuristic_tier(parse_detail_links),
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
