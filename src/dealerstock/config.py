"""Dealer and engine configuration for dealerstock."""

from __future__ import annotations

import dataclasses
import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dealerstock._constants import DETAIL_API_URL, USER_AGENT
from dealerstock.exceptions import ConfigError

SOURCE_TYPES: frozenset[str] = frozenset(
    {"motornetzwerk", "willhaben", "autoscout24", "landwirt", "zweispurig", "combined"}
)
"""Values accepted for :attr:`DataSourceConfig.type`."""

DEFAULT_COMBINED_ORDER: tuple[str, ...] = ("zweispurig", "landwirt")


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class ApiEndpoints:
    """Structured JSON endpoints, one per category plus the detail wrapper."""

    pkw: str = ""
    nutzfahrzeuge: str = ""
    detail: str = DETAIL_API_URL


@dataclasses.dataclass(frozen=True)
class SourceUrls:
    """Listing-page URLs scraped by the markup tiers.

    ``pkw`` and ``nutzfahrzeuge`` are the category pages of the dealer's
    own listing site (Motornetzwerk or AutoScout24 dealer page); the
    remaining fields are the marketplace dealer pages.
    """

    pkw: str = ""
    nutzfahrzeuge: str = ""
    willhaben: str = ""
    autoscout24: str = ""
    landwirt: str = ""
    zweispurig: str = ""


@dataclasses.dataclass(frozen=True)
class DealerContact:
    """Dealer contact block attached to every detail record."""

    name: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""


@dataclasses.dataclass(frozen=True)
class DataSourceConfig:
    """Where the dealer's inventory comes from.

    Parameters
    ----------
    type : str
        Data-source discriminator. One of ``motornetzwerk``,
        ``willhaben``, ``autoscout24``, ``landwirt``, ``zweispurig`` or
        ``combined``.
    dealer_id : str
        Stable account identifier scoping structured API queries.
    dealer_slug : str
        Dealer slug used to derive marketplace URLs that are not set
        explicitly.
    base_url : str
        Dealer website; Motornetzwerk listing links point here.
    api_endpoints : ApiEndpoints
        Structured JSON endpoints.
    source_urls : SourceUrls
        Listing pages for the markup tiers.
    combined_order : tuple[str, ...]
        Sources queried when ``type`` is ``combined``, highest priority
        first. Dedup keeps the record of the earlier source.
    """

    type: str = "combined"
    dealer_id: str = ""
    dealer_slug: str = ""
    base_url: str = ""
    api_endpoints: ApiEndpoints = dataclasses.field(default_factory=ApiEndpoints)
    source_urls: SourceUrls = dataclasses.field(default_factory=SourceUrls)
    combined_order: tuple[str, ...] = DEFAULT_COMBINED_ORDER

    def __post_init__(self) -> None:
        if self.type not in SOURCE_TYPES:
            raise ConfigError(f"Unknown data source type {self.type!r}; expected one of {sorted(SOURCE_TYPES)}")
        for name in self.combined_order:
            if name not in SOURCE_TYPES or name == "combined":
                raise ConfigError(f"Unknown source {name!r} in combined_order")

    @property
    def active_sources(self) -> tuple[str, ...]:
        """Source ids to query, highest priority first."""
        if self.type == "combined":
            return self.combined_order
        return (self.type,)

    def willhaben_url(self) -> str:
        if self.source_urls.willhaben:
            return self.source_urls.willhaben
        if self.dealer_slug:
            return f"https://www.willhaben.at/iad/haendler/{self.dealer_slug}/auto"
        return ""

    def landwirt_url(self) -> str:
        if self.source_urls.landwirt:
            return self.source_urls.landwirt
        if self.dealer_slug:
            return f"https://www.landwirt.com/dealer/info/{self.dealer_slug}/machines"
        return ""

    def zweispurig_url(self) -> str:
        if self.source_urls.zweispurig:
            return self.source_urls.zweispurig
        if self.dealer_slug and self.dealer_id:
            return f"https://www.zweispurig.at/{self.dealer_slug}/autohaendler-fahrzeuge/{self.dealer_id}/"
        return ""

    def autoscout24_urls(self) -> dict[str, str]:
        """AutoScout24 dealer pages keyed by category."""
        base = self.source_urls.autoscout24
        if not base and self.dealer_slug:
            base = f"https://www.autoscout24.at/haendler/{self.dealer_slug}"
        if not base:
            return {}
        separator = "&" if "?" in base else "?"
        return {"pkw": base, "nutzfahrzeuge": f"{base}{separator}atype=X"}


@dataclasses.dataclass(frozen=True)
class StockConfig:
    """Engine configuration.

    Parameters
    ----------
    data_source : DataSourceConfig
        Origins and their URLs.
    dealer : DealerContact
        Contact block for detail records.
    cache_ttl : float
        Lifetime of the aggregated list in seconds. Defaults to 1 hour.
    detail_cache_ttl : float
        Lifetime of one detail record in seconds.
    dedup_prefix_length : int
        Number of leading characters of the lower-cased title that form
        the cross-source dedup key. Longer keys merge less eagerly.
    adapter_timeout : float
        Budget for one source adapter in seconds; a slower source is
        reported as partial instead of holding up the others.
    request_timeout : float
        Total timeout for a single HTTP request in seconds.
    navigation_timeout_ms : int
        Hard navigation timeout for the rendered-DOM tier.
    settle_timeout_ms : int
        How long the rendered-DOM tier waits for its content selector.
    render_enabled : bool
        Use the headless renderer. When disabled the rendered-DOM tier
        yields nothing and the chain moves on to static markup.
    enrich_galleries : bool
        Fetch landwirt/zweispurig detail pages to fill ``all_images``.
    gallery_concurrency : int
        Maximum concurrent detail-page requests during enrichment.
    user_agent : str
        User-Agent header for upstream requests.
    allowed_origins : tuple[str, ...]
        CORS allow-list for the HTTP boundary.
    """

    data_source: DataSourceConfig = dataclasses.field(default_factory=DataSourceConfig)
    dealer: DealerContact = dataclasses.field(default_factory=DealerContact)
    cache_ttl: float = 3600.0
    detail_cache_ttl: float = 3600.0
    dedup_prefix_length: int = 30
    adapter_timeout: float = 90.0
    request_timeout: float = 20.0
    navigation_timeout_ms: int = 30_000
    settle_timeout_ms: int = 5_000
    render_enabled: bool = True
    enrich_galleries: bool = True
    gallery_concurrency: int = 3
    user_agent: str = USER_AGENT
    allowed_origins: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.cache_ttl <= 0 or self.detail_cache_ttl <= 0:
            raise ConfigError("Cache TTLs must be positive")
        if self.dedup_prefix_length <= 0:
            raise ConfigError("dedup_prefix_length must be positive")
        if self.gallery_concurrency <= 0:
            raise ConfigError("gallery_concurrency must be positive")

    @classmethod
    def from_env(cls, **overrides: Any) -> StockConfig:
        """Create configuration from environment variables.

        Reads ``DEALERSTOCK_SOURCE_TYPE``, ``DEALERSTOCK_DEALER_ID``,
        ``DEALERSTOCK_*_URL`` and the numeric/boolean tunables. Explicit
        keyword arguments override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        StockConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_SOURCE_MAP = {
            "DEALERSTOCK_SOURCE_TYPE": "type",
            "DEALERSTOCK_DEALER_ID": "dealer_id",
            "DEALERSTOCK_DEALER_SLUG": "dealer_slug",
            "DEALERSTOCK_BASE_URL": "base_url",
        }
        source_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_SOURCE_MAP.items():
            val = env.get(env_key)
            if val is not None:
                source_kwargs[field_name] = val

        order_env = env.get("DEALERSTOCK_COMBINED_ORDER")
        if order_env:
            source_kwargs["combined_order"] = tuple(
                part.strip() for part in order_env.split(",") if part.strip()
            )

        endpoint_kwargs: dict[str, str] = {}
        for field_name in ("pkw", "nutzfahrzeuge", "detail"):
            val = env.get(f"DEALERSTOCK_API_{field_name.upper()}")
            if val is not None:
                endpoint_kwargs[field_name] = val
        url_kwargs: dict[str, str] = {}
        for field in dataclasses.fields(SourceUrls):
            val = env.get(f"DEALERSTOCK_{field.name.upper()}_URL")
            if val is not None:
                url_kwargs[field.name] = val
        source_kwargs["api_endpoints"] = ApiEndpoints(**endpoint_kwargs)
        source_kwargs["source_urls"] = SourceUrls(**url_kwargs)

        config_kwargs: dict[str, Any] = {}
        if "data_source" not in overrides:
            config_kwargs["data_source"] = DataSourceConfig(**source_kwargs)

        _ENV_FLOAT_MAP = {
            "DEALERSTOCK_CACHE_TTL": "cache_ttl",
            "DEALERSTOCK_DETAIL_CACHE_TTL": "detail_cache_ttl",
            "DEALERSTOCK_ADAPTER_TIMEOUT": "adapter_timeout",
            "DEALERSTOCK_REQUEST_TIMEOUT": "request_timeout",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = float(val)

        _ENV_INT_MAP = {
            "DEALERSTOCK_DEDUP_PREFIX_LENGTH": "dedup_prefix_length",
            "DEALERSTOCK_NAVIGATION_TIMEOUT_MS": "navigation_timeout_ms",
            "DEALERSTOCK_SETTLE_TIMEOUT_MS": "settle_timeout_ms",
            "DEALERSTOCK_GALLERY_CONCURRENCY": "gallery_concurrency",
        }
        for env_key, field_name in _ENV_INT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = int(val)

        if "render_enabled" not in overrides:
            config_kwargs["render_enabled"] = _env_bool(env.get("DEALERSTOCK_RENDER_ENABLED"), True)
        if "enrich_galleries" not in overrides:
            config_kwargs["enrich_galleries"] = _env_bool(env.get("DEALERSTOCK_ENRICH_GALLERIES"), True)

        origins_env = env.get("DEALERSTOCK_ALLOWED_ORIGINS")
        if origins_env and "allowed_origins" not in overrides:
            config_kwargs["allowed_origins"] = tuple(o.strip() for o in origins_env.split(",") if o.strip())

        config_kwargs.update(overrides)

        return cls(**config_kwargs)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], **overrides: Any) -> StockConfig:
        """Create configuration from a dealer-config mapping.

        Accepts the camelCase layout used by the dealer website config
        (``dataSource.type``, ``dataSource.apiEndpoints``,
        ``dataSource.sourceUrls``, ``corsOrigins``, contact fields at the
        top level).
        """
        raw_source = data.get("dataSource") or {}
        if not isinstance(raw_source, Mapping):
            raise ConfigError("dataSource must be a mapping")

        endpoints = raw_source.get("apiEndpoints") or {}
        urls = raw_source.get("sourceUrls") or {}
        source_kwargs: dict[str, Any] = {
            "type": raw_source.get("type", "combined"),
            "dealer_id": str(raw_source.get("dealerId", "")),
            "dealer_slug": raw_source.get("dealerSlug", ""),
            "base_url": raw_source.get("baseUrl", ""),
            "api_endpoints": ApiEndpoints(
                pkw=endpoints.get("pkw", ""),
                nutzfahrzeuge=endpoints.get("nutzfahrzeuge", ""),
                detail=endpoints.get("detail", DETAIL_API_URL),
            ),
            "source_urls": SourceUrls(
                **{f.name: urls.get(f.name, "") for f in dataclasses.fields(SourceUrls)},
            ),
        }
        if raw_source.get("combinedOrder"):
            source_kwargs["combined_order"] = tuple(raw_source["combinedOrder"])

        address = data.get("address")
        if isinstance(address, Mapping):
            address = address.get("full", "")
        dealer = DealerContact(
            name=data.get("name", ""),
            address=address or "",
            phone=data.get("phone", ""),
            email=data.get("email", ""),
        )

        config_kwargs: dict[str, Any] = {
            "data_source": DataSourceConfig(**source_kwargs),
            "dealer": dealer,
            "allowed_origins": tuple(data.get("corsOrigins") or ()),
        }
        config_kwargs.update(overrides)
        return cls(**config_kwargs)

    @classmethod
    def from_json(cls, path: str | Path, **overrides: Any) -> StockConfig:
        """Load a dealer-config mapping from a JSON file."""
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigError(f"Cannot read dealer config {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Dealer config {path} must contain a JSON object")
        return cls.from_mapping(data, **overrides)
