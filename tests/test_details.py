from __future__ import annotations

from typing import Any

import pytest
from conftest import FakeClock, FakeTransport

from dealerstock._cache import DetailCache
from dealerstock._constants import DETAIL_API_URL
from dealerstock.config import DataSourceConfig, DealerContact, StockConfig
from dealerstock.details import DetailFetcher, validate_vehicle_id
from dealerstock.exceptions import (
    InvalidVehicleIdError,
    UpstreamMalformedError,
    UpstreamUnavailableError,
    ValidationRejectedError,
    VehicleNotFoundError,
)

DETAIL_PAYLOAD: dict[str, Any] = {
    "adId": 1234567,
    "title": "VW Golf 1.6 TDI Comfortline",
    "price": "16990.0",
    "make": "VW",
    "model": "Golf",
    "registrationYear": 2018,
    "registrationMonth": 4,
    "mileage": 98000,
    "engineFuel": "Diesel",
    "engineEffectKw": 85,
    "engineEffectPs": 116,
    "numberOfSeats": "5",
    "warranty": "1",
    "equipmentList": [{"name": "Navigationssystem"}, "Klimaautomatik", {"name": ""}],
    "advertImages": [
        {"referenceImageUrl": "https://img.example.at/1.jpg"},
        {"referenceImageUrl": "https://img.example.at/2.jpg"},
        {"thumbnail": "ignored"},
    ],
    "description": "<p>Top&nbsp;Zustand</p><br>Pickerl neu",
    "co2Footprint": "--",
}


@pytest.fixture
def config() -> StockConfig:
    return StockConfig(
        data_source=DataSourceConfig(type="motornetzwerk", dealer_id="4711", base_url="https://www.autohaus-demo.at/"),
        dealer=DealerContact(name="Autohaus Demo", address="Hauptstraße 1, 1010 Wien", phone="+43 1 234", email="x@y.at"),
    )


@pytest.fixture
def fetcher(transport: FakeTransport, config: StockConfig, clock: FakeClock) -> DetailFetcher:
    return DetailFetcher(transport, config, DetailCache(600, clock=clock))


@pytest.mark.parametrize("vid", ["", "12a4", "12345678901", " 123", "123\n", "-1", "١٢٣", None, 1234567])
@pytest.mark.asyncio
async def test_invalid_ids_rejected_before_any_call(
    fetcher: DetailFetcher, transport: FakeTransport, vid: Any
) -> None:
    with pytest.raises(InvalidVehicleIdError) as exc_info:
        await fetcher.get(vid)

    assert isinstance(exc_info.value, ValidationRejectedError)
    assert exc_info.value.vid == vid
    assert transport.calls == []


def test_validate_vehicle_id_accepts_ten_digits() -> None:
    assert validate_vehicle_id("1234567890") == "1234567890"
    assert validate_vehicle_id("0") == "0"


@pytest.mark.asyncio
async def test_detail_record_is_mapped_and_enriched(fetcher: DetailFetcher, transport: FakeTransport) -> None:
    transport.payloads[DETAIL_API_URL] = DETAIL_PAYLOAD

    detail = await fetcher.get("1234567")

    assert transport.calls == [("json", DETAIL_API_URL, {"aid": "4711", "vid": "1234567"})]
    assert detail.vid == "1234567"
    assert detail.price == 16990
    assert detail.year == 2018
    assert detail.registration_month == 4
    assert detail.engine_effect_kw == 85
    assert detail.number_of_seats == 5
    assert detail.warranty is True
    assert detail.co2_footprint is None
    assert detail.equipment == ["Navigationssystem", "Klimaautomatik"]
    assert detail.images == ["https://img.example.at/1.jpg", "https://img.example.at/2.jpg"]
    assert detail.image == "https://img.example.at/1.jpg"
    assert detail.description == "Top Zustand Pickerl neu"
    assert detail.description_html == "<p>Top&nbsp;Zustand</p><br>Pickerl neu"
    assert detail.dealer.name == "Autohaus Demo"
    assert detail.external_url == "https://www.autohaus-demo.at/fahrzeugdetails?vid=1234567"


@pytest.mark.asyncio
async def test_detail_wire_shape(fetcher: DetailFetcher, transport: FakeTransport) -> None:
    transport.payloads[DETAIL_API_URL] = DETAIL_PAYLOAD

    wire = (await fetcher.get("1234567")).to_wire()

    assert wire["vid"] == "1234567"
    assert wire["externalUrl"].endswith("vid=1234567")
    assert wire["dealer"]["phone"] == "+43 1 234"
    assert "raw" not in wire


@pytest.mark.asyncio
async def test_detail_cache_hit_and_expiry(
    fetcher: DetailFetcher, transport: FakeTransport, clock: FakeClock
) -> None:
    transport.payloads[DETAIL_API_URL] = DETAIL_PAYLOAD

    first = await fetcher.get("1234567")
    second = await fetcher.get("1234567")
    clock.advance(600)
    await fetcher.get("1234567")

    assert second is first
    assert len(transport.calls) == 2


@pytest.mark.asyncio
async def test_http_404_maps_to_not_found(fetcher: DetailFetcher) -> None:
    with pytest.raises(VehicleNotFoundError) as exc_info:
        await fetcher.get("999")

    assert exc_info.value.vid == "999"


@pytest.mark.parametrize("payload", [{}, [], {"error": "not found"}, {"adId": ""}, None])
@pytest.mark.asyncio
async def test_record_without_ad_id_is_not_found(
    fetcher: DetailFetcher, transport: FakeTransport, payload: Any
) -> None:
    transport.payloads[DETAIL_API_URL] = payload

    with pytest.raises(VehicleNotFoundError):
        await fetcher.get("999")


@pytest.mark.asyncio
async def test_other_upstream_errors_propagate(fetcher: DetailFetcher, transport: FakeTransport) -> None:
    transport.errors[DETAIL_API_URL] = UpstreamUnavailableError("HTTP 502", status_code=502, url=DETAIL_API_URL)

    with pytest.raises(UpstreamUnavailableError):
        await fetcher.get("999")


@pytest.mark.asyncio
async def test_unrecognised_record_is_malformed(fetcher: DetailFetcher, transport: FakeTransport) -> None:
    transport.payloads[DETAIL_API_URL] = {"adId": 999, "dealer": "not-a-contact-block"}

    with pytest.raises(UpstreamMalformedError):
        await fetcher.get("999")
    assert "999" not in fetcher.cache
