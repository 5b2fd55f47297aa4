"""Extended vehicle record from the structured detail API."""

from __future__ import annotations

from typing import Annotated, Any

from pydantic import AliasChoices, BeforeValidator, ConfigDict, Field, field_validator, model_validator

from dealerstock.ingestion.coerce import clean_text, parse_price, safe_bool, safe_int, safe_str
from dealerstock.models._base import StockBaseModel, UpstreamModel

LooseInt = Annotated[int | None, BeforeValidator(safe_int)]
LooseStr = Annotated[str | None, BeforeValidator(safe_str)]
LooseBool = Annotated[bool, BeforeValidator(safe_bool)]


class DealerInfo(StockBaseModel):
    """Dealer contact block attached to a detail record."""

    name: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""


class VehicleDetail(UpstreamModel):
    """Full detail record of one listing.

    Validated directly from the detail API payload: most upstream keys
    already match the camelCase aliases of the fields. The remaining
    mappings are:

    * ``adId`` → ``vid``
    * ``registrationYear`` → ``year`` (and kept as ``registration_year``)
    * ``equipmentList`` → ``equipment``
    * ``advertImages[].referenceImageUrl`` → ``images``
    * ``description`` → markup-free ``description`` plus the original in
      ``description_html``
    """

    model_config = ConfigDict(protected_namespaces=())

    vid: str = Field(validation_alias=AliasChoices("adId", "vid"))
    title: LooseStr = None
    price: int | None = None

    make: LooseStr = None
    model: LooseStr = None
    model_specification: LooseStr = None
    year: LooseInt = Field(default=None, validation_alias=AliasChoices("registrationYear", "year"))
    registration_month: LooseInt = None
    registration_year: LooseInt = None

    motor_condition: LooseStr = None
    car_type: LooseStr = None

    mileage: LooseInt = None
    engine_fuel: LooseStr = None
    engine_volume: LooseInt = None
    engine_effect_kw: LooseInt = None
    engine_effect_ps: LooseInt = None
    engine_cylinder: LooseInt = None

    transmission: LooseStr = None
    wheel_drive: LooseStr = None

    main_exterior_colour: LooseStr = None
    exterior_colour: LooseStr = None

    number_of_seats: LooseInt = None
    number_of_doors: LooseInt = None
    empty_weight: LooseInt = None
    total_weight: LooseInt = None
    trailer_load: LooseInt = None
    length_cm: LooseInt = None
    width_cm: LooseInt = None

    co2_footprint: LooseStr = None
    emission_standard: LooseStr = None
    consumption: LooseStr = None

    warranty: LooseBool = False
    warranty_duration: LooseStr = None
    defects_liability: LooseBool = False
    condition_report: LooseBool = False
    condition_report_valid_until: LooseStr = None

    battery_capacity: LooseStr = None
    wltp_range: LooseStr = None

    leasing_duration_months: LooseInt = None
    leasing_advance_payment: LooseInt = None
    leasing_mileage_per_year: LooseInt = None
    leasing_monthly_rate: LooseStr = None
    leasing_residual_value: LooseInt = None
    leasing_details: LooseStr = None

    description: str = ""
    description_html: str | None = None
    equipment: list[str] = Field(default_factory=list, validation_alias=AliasChoices("equipmentList", "equipment"))
    images: list[str] = Field(default_factory=list)
    image: str | None = None
    external_url: str | None = None
    dealer: DealerInfo = Field(default_factory=DealerInfo)

    @model_validator(mode="before")
    @classmethod
    def _map_upstream_shape(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        working = dict(values)
        if "images" not in working:
            adverts = working.get("advertImages") or []
            working["images"] = [
                img["referenceImageUrl"]
                for img in adverts
                if isinstance(img, dict) and isinstance(img.get("referenceImageUrl"), str) and img["referenceImageUrl"]
            ]
        if "descriptionHtml" not in working and "description_html" not in working:
            html_text = working.get("description")
            working["descriptionHtml"] = html_text if isinstance(html_text, str) and html_text else None
            working["description"] = clean_text(html_text) or ""
        if not working.get("image") and working.get("images"):
            working["image"] = working["images"][0]
        return working

    @field_validator("vid", mode="before")
    @classmethod
    def _vid_as_text(cls, value: Any) -> str:
        text = safe_str(value)
        if text is None:
            raise ValueError("detail record has no adId")
        return text

    @field_validator("price", mode="before")
    @classmethod
    def _parse_price(cls, value: Any) -> int | None:
        return parse_price(value)

    @field_validator("equipment", mode="before")
    @classmethod
    def _equipment_names(cls, value: Any) -> list[str]:
        if not isinstance(value, list):
            return []
        names: list[str] = []
        for item in value:
            if isinstance(item, dict):
                item = item.get("name") or item.get("label") or item.get("value")
            text = clean_text(item)
            if text:
                names.append(text)
        return names
