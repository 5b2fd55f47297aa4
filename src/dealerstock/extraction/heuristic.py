"""Last-resort extraction: pair price occurrences with the nearest image."""

from __future__ import annotations

import re
from collections.abc import Callable

from dealerstock._constants import (
    MAX_SCRAPED_PRICE,
    MIN_SCRAPED_PRICE,
    PROXIMITY_IMAGE_DISTANCE,
    WINDOW_BEFORE_ID,
)
from dealerstock.extraction.markup import absolute_url, iter_price_positions, text_of
from dealerstock.ingestion.coerce import parse_price
from dealerstock.ingestion.normalize import is_plausible_title
from dealerstock.models.raw import RawListing

_HEADING_RE = re.compile(r"<h[2-4][^>]*>([\s\S]*?)</h[2-4]>", re.IGNORECASE)
_ALT_RE = re.compile(r'alt="([^"]{5,100})"')
_ALT_REACH = 300


def _title_near(markup: str, price_pos: int, image_pos: int) -> str | None:
    """Closest heading before the price, else the image's alt text."""
    start = max(0, price_pos - WINDOW_BEFORE_ID)
    context = markup[start:price_pos]
    for match in reversed(list(_HEADING_RE.finditer(context))):
        title = text_of(match.group(1))
        if is_plausible_title(title):
            return title
    match = _ALT_RE.search(markup[max(0, image_pos - _ALT_REACH) : image_pos + _ALT_REACH])
    if match:
        title = text_of(match.group(1))
        if is_plausible_title(title):
            return title
    return None


def pair_prices_with_images(
    markup: str,
    image_pattern: re.Pattern[str],
    *,
    base_url: str = "",
    identify: Callable[[str], str | None] | None = None,
    max_distance: int = PROXIMITY_IMAGE_DISTANCE,
) -> list[RawListing]:
    """Build one record per plausible price that has an image within reach.

    Parameters
    ----------
    markup : str
        Listing page markup.
    image_pattern : re.Pattern
        Pattern whose group 1 (or whole match) is a listing image URL.
    base_url : str
        Base for resolving relative image URLs.
    identify : callable, optional
        Derives a listing id from the paired image URL.
    max_distance : int
        Maximum character distance between price and image.

    Returns
    -------
    list[RawListing]
        At most one record per image, in page order.
    """
    images = [
        (match.start(), match.group(1) if image_pattern.groups else match.group(0))
        for match in image_pattern.finditer(markup)
    ]
    if not images:
        return []

    used: set[str] = set()
    raws: list[RawListing] = []
    for position, price_text in iter_price_positions(markup):
        price = parse_price(price_text)
        if price is None or not MIN_SCRAPED_PRICE <= price <= MAX_SCRAPED_PRICE:
            continue
        image_pos, image = min(images, key=lambda item: abs(item[0] - position))
        if abs(image_pos - position) >= max_distance or image in used:
            continue
        used.add(image)
        raws.append(
            RawListing(
                id=identify(image) if identify else None,
                title=_title_near(markup, position, image_pos),
                price=price,
                image=absolute_url(image, base_url),
            )
        )
    return raws
