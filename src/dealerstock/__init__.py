"""dealerstock - Async aggregation of a car dealer's inventory across marketplaces."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("dealerstock")
except PackageNotFoundError:
    __version__ = "0+local"
from dealerstock.client import StockClient
from dealerstock.config import ApiEndpoints, DataSourceConfig, DealerContact, SourceUrls, StockConfig
from dealerstock.exceptions import (
    ConfigError,
    DealerStockError,
    ExtractionExhaustedError,
    InvalidVehicleIdError,
    RenderTimeoutError,
    UpstreamMalformedError,
    UpstreamUnavailableError,
    ValidationRejectedError,
    VehicleNotFoundError,
)
from dealerstock.models import (
    Category,
    DealerInfo,
    Power,
    SourceAdapterResult,
    Vehicle,
    VehicleDetail,
    VehiclesResponse,
)

__all__ = [
    "__version__",
    "ApiEndpoints",
    "Category",
    "ConfigError",
    "DataSourceConfig",
    "DealerContact",
    "DealerInfo",
    "DealerStockError",
    "ExtractionExhaustedError",
    "InvalidVehicleIdError",
    "Power",
    "RenderTimeoutError",
    "SourceAdapterResult",
    "SourceUrls",
    "StockClient",
    "StockConfig",
    "UpstreamMalformedError",
    "UpstreamUnavailableError",
    "ValidationRejectedError",
    "Vehicle",
    "VehicleDetail",
    "VehiclesResponse",
]
