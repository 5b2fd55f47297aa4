"""Data models for dealer inventory listings."""

from dealerstock.models._base import StockBaseModel, UpstreamModel
from dealerstock.models.detail import DealerInfo, VehicleDetail
from dealerstock.models.raw import RawListing
from dealerstock.models.results import SourceAdapterResult, VehiclesResponse
from dealerstock.models.vehicle import Category, Power, Vehicle

__all__ = [
    "Category",
    "DealerInfo",
    "Power",
    "RawListing",
    "SourceAdapterResult",
    "StockBaseModel",
    "UpstreamModel",
    "Vehicle",
    "VehicleDetail",
    "VehiclesResponse",
]
