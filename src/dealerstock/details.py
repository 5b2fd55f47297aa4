"""Single-vehicle detail lookup against the structured detail API."""

from __future__ import annotations

import logging
import re
from typing import Any

from pydantic import ValidationError

from dealerstock._cache import DetailCache
from dealerstock._constants import MAX_VID_LENGTH
from dealerstock._transport import Transport
from dealerstock.config import StockConfig
from dealerstock.exceptions import (
    InvalidVehicleIdError,
    UpstreamMalformedError,
    UpstreamUnavailableError,
    VehicleNotFoundError,
)
from dealerstock.models.detail import DealerInfo, VehicleDetail

_logger = logging.getLogger(__name__)

# ASCII digits only; ``\d`` would also accept other scripts' digits.
_VID_RE = re.compile(rf"[0-9]{{1,{MAX_VID_LENGTH}}}")


def validate_vehicle_id(vid: Any) -> str:
    """Return *vid* unchanged if it is a valid detail-API vehicle id.

    Raises
    ------
    InvalidVehicleIdError
        If *vid* is not a string of one to ten ASCII digits.
    """
    if not isinstance(vid, str) or not _VID_RE.fullmatch(vid):
        raise InvalidVehicleIdError(f"Invalid vehicle id {vid!r}", vid=vid)
    return vid


class DetailFetcher:
    """Fetch, enrich and cache full detail records by vehicle id."""

    def __init__(
        self,
        transport: Transport,
        config: StockConfig,
        cache: DetailCache[VehicleDetail],
    ) -> None:
        self._transport = transport
        self._config = config
        self._cache = cache

    @property
    def cache(self) -> DetailCache[VehicleDetail]:
        return self._cache

    def _dealer(self) -> DealerInfo:
        contact = self._config.dealer
        return DealerInfo(name=contact.name, address=contact.address, phone=contact.phone, email=contact.email)

    def _external_url(self, vid: str) -> str:
        base_url = self._config.data_source.base_url.rstrip("/")
        return f"{base_url}/fahrzeugdetails?vid={vid}"

    async def get(self, vid: Any) -> VehicleDetail:
        """Return the detail record for *vid*.

        The id is validated before the cache or the network is touched.

        Raises
        ------
        InvalidVehicleIdError
            Malformed id.
        VehicleNotFoundError
            The API answered 404 or returned a record without ``adId``.
        UpstreamUnavailableError
            Network failure or any other HTTP error status.
        UpstreamMalformedError
            The record could not be validated.
        """
        vid = validate_vehicle_id(vid)

        cached = self._cache.get(vid)
        if cached is not None:
            _logger.debug("Detail cache hit for vid=%s", vid)
            return cached

        endpoint = self._config.data_source.api_endpoints.detail
        params = {"aid": self._config.data_source.dealer_id, "vid": vid}
        try:
            payload = await self._transport.get_json(endpoint, params=params)
        except UpstreamUnavailableError as exc:
            if exc.status_code == 404:
                raise VehicleNotFoundError(f"Vehicle {vid} not found", vid=vid) from exc
            raise

        if not isinstance(payload, dict) or not payload.get("adId"):
            raise VehicleNotFoundError(f"Vehicle {vid} not found", vid=vid)

        try:
            detail = VehicleDetail.model_validate(payload)
        except ValidationError as exc:
            raise UpstreamMalformedError(f"Unrecognised detail record for vid={vid}: {exc}", url=endpoint) from exc

        detail = detail.model_copy(update={"dealer": self._dealer(), "external_url": self._external_url(vid)})
        self._cache.set(vid, detail)
        _logger.info("Fetched detail for vid=%s: %s", vid, detail.title)
        return detail
