"""Detail-page gallery enrichment for marketplaces that list one image per card."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from dealerstock._transport import Transport
from dealerstock.exceptions import DealerStockError
from dealerstock.models.vehicle import Vehicle

_logger = logging.getLogger(__name__)

GalleryParser = Callable[[str], list[str]]


async def enrich_galleries(
    vehicles: list[Vehicle],
    transport: Transport,
    parse_gallery: GalleryParser,
    *,
    concurrency: int,
    source_id: str = "",
) -> list[Vehicle]:
    """Replace each vehicle's images with the gallery from its detail page.

    At most *concurrency* detail pages are requested at a time. A record
    whose page cannot be fetched, or yields no usable images, is
    returned unchanged.
    """
    semaphore = asyncio.Semaphore(concurrency)

    async def enrich_one(vehicle: Vehicle) -> Vehicle:
        if not vehicle.url:
            return vehicle
        async with semaphore:
            try:
                markup = await transport.get_text(vehicle.url)
            except DealerStockError:
                _logger.debug("%s: gallery fetch failed for %s", source_id, vehicle.id, exc_info=True)
                return vehicle
        images = parse_gallery(markup)
        if not images:
            return vehicle
        return vehicle.model_copy(update={"image": images[0], "all_images": images})

    enriched = await asyncio.gather(*(enrich_one(vehicle) for vehicle in vehicles))
    _logger.debug(
        "%s: enriched %d/%d galleries",
        source_id,
        sum(1 for before, after in zip(vehicles, enriched) if before is not after),
        len(vehicles),
    )
    return list(enriched)
