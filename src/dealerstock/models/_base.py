"""Base models for dealerstock records.

Every model inherits from :class:`StockBaseModel`, which provides:

* ``alias_generator=to_camel`` so snake_case fields serialise as the
  camelCase keys of the HTTP contract (``fuelType``, ``allImages``).
* ``populate_by_name`` so code can construct models with field names.
* Frozen instances, so cached lists can be shared between callers.

Models parsed from upstream JSON inherit from :class:`UpstreamModel`,
which additionally strips the sentinel values upstream APIs use for
"not available" (``""``, ``"--"``, ``"-"``, NaN) so the field default is
used, and stashes the original payload in ``raw`` (excluded from dumps).
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

# Sentinel strings upstream APIs use for "not available".
_SENTINELS = frozenset({"", "-", "--", "NaN", "nan", "null"})


class StockBaseModel(BaseModel):
    """Base for all dealerstock models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_wire(self) -> dict[str, Any]:
        """Dump as the camelCase JSON-compatible dict of the HTTP contract."""
        return self.model_dump(mode="json", by_alias=True)


class UpstreamModel(StockBaseModel):
    """Base for models validated from upstream API payloads."""

    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)
    """Original API response dict."""

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        """Drop ``None`` and sentinel values from *values*."""
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and value.strip() in _SENTINELS:
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_upstream_values(cls, values: Any) -> Any:
        """Strip sentinel values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = UpstreamModel._clean_dict(values)
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned
