"""Custom exception hierarchy for dealerstock."""

from __future__ import annotations

from collections.abc import Sequence


class DealerStockError(Exception):
    """Base exception for all dealerstock errors."""


class ConfigError(DealerStockError):
    """Invalid or missing dealer configuration."""


class UpstreamUnavailableError(DealerStockError):
    """Network or HTTP-level failure talking to an upstream origin."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str = "",
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class UpstreamMalformedError(DealerStockError):
    """Upstream answered, but not in any shape we recognise."""

    def __init__(self, message: str, *, url: str = "") -> None:
        self.url = url
        super().__init__(message)


class ExtractionExhaustedError(DealerStockError):
    """Every tier of a source's chain ran and none produced a valid record.

    ``attempted`` lists the tier names in the order they were tried, so
    callers can tell a layout change (all markup tiers empty) apart from
    an outage (API tier raised, nothing else configured).
    """

    def __init__(
        self,
        message: str,
        *,
        source_id: str = "",
        attempted: Sequence[str] = (),
    ) -> None:
        self.source_id = source_id
        self.attempted = tuple(attempted)
        super().__init__(message)


class RenderTimeoutError(DealerStockError):
    """Headless rendering exceeded its navigation or settle budget."""

    def __init__(self, message: str, *, url: str = "", timeout_ms: int | None = None) -> None:
        self.url = url
        self.timeout_ms = timeout_ms
        super().__init__(message)


class ValidationRejectedError(DealerStockError):
    """A record or caller input is missing required fields."""


class InvalidVehicleIdError(ValidationRejectedError):
    """Vehicle id is not a digit string of at most ten characters.

    Raised before any cache lookup or upstream call is made.
    """

    def __init__(self, message: str, *, vid: object = None) -> None:
        self.vid = vid
        super().__init__(message)


class VehicleNotFoundError(DealerStockError):
    """The detail API has no listing for the requested vehicle id."""

    def __init__(self, message: str, *, vid: str = "") -> None:
        self.vid = vid
        super().__init__(message)
