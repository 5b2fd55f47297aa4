"""Coercion helpers.

Centralizes parsing of the loosely typed values that origins
send: decimal price strings, thousands-grouped digit strings, mixed
markup/entity text and boolean-ish flags.
"""

from __future__ import annotations

import html
import math
import re
from typing import Any

from dealerstock._constants import KW_TO_PS, PS_TO_KW

_TAG_RE = re.compile(r"<[^>]*>")
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f\u200b-\u200d\ufeff]")
_WS_RE = re.compile(r"\s+")
_GROUPED_RE = re.compile(r"\d{1,3}(?:[.,'\s]\d{3})+(?!\d)|\d+")
_NUMBER_RE = re.compile(r"\d{1,3}(?:[.,'\s]\d{3})+(?!\d)(?:[.,]\d{1,2})?|\d+(?:[.,]\d{1,2})?")
_DECIMAL_RE = re.compile(r"^\d+[.,]\d{1,2}$")
_GROUP_SEPARATORS = re.compile(r"[.,'\s]")
_PRICE_SUFFIX_RE = re.compile(r",\s*[-\u2013\u2014]+")


def safe_float(value: Any) -> float | None:
    if value is None or value == "" or value == "--":
        return None
    if isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return round_half_up(parsed)


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def safe_bool(value: Any) -> bool:
    """Interpret upstream flags (``1``, ``"true"``, ``"ja"``) as booleans."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "ja", "y"}
    return False


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def parse_grouped_int(value: Any) -> int | None:
    """Parse a thousands-grouped digit string such as ``"130.438 km"``.

    Dots, commas, apostrophes and (non-breaking) spaces inside the
    first number are treated as group separators.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return None if math.isnan(value) else round_half_up(value)
    match = _GROUPED_RE.search(str(value))
    if match is None:
        return None
    digits = _GROUP_SEPARATORS.sub("", match.group(0))
    return int(digits) if digits.isdigit() else None


def parse_price(value: Any) -> int | None:
    """Parse a price into whole currency units.

    ``"36990.0"`` and ``"36990,50"`` are decimals and are rounded;
    ``"21.990"`` and ``"€ 21.990,-"`` are thousands-grouped. Returns
    ``None`` for anything without digits (``"Preis auf Anfrage"``).
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return None if math.isnan(value) else round_half_up(value)

    text = _PRICE_SUFFIX_RE.sub("", str(value))
    match = _NUMBER_RE.search(text)
    if match is None:
        return None
    token = re.sub(r"[\s']", "", match.group(0))

    if _DECIMAL_RE.match(token):
        return round_half_up(float(token.replace(",", ".")))
    if "." in token and "," in token:
        decimal_sep = "," if token.rfind(",") > token.rfind(".") else "."
        group_sep = "." if decimal_sep == "," else ","
        integral, _, fraction = token.replace(group_sep, "").partition(decimal_sep)
        if integral.isdigit() and (not fraction or fraction.isdigit()):
            return round_half_up(float(f"{integral}.{fraction or 0}"))
        return None
    digits = token.replace(".", "").replace(",", "")
    return int(digits) if digits.isdigit() else None


def clean_text(value: Any) -> str | None:
    """Strip markup, entities and control characters; collapse whitespace."""
    if value is None:
        return None
    text = html.unescape(_TAG_RE.sub(" ", str(value)))
    text = _CONTROL_RE.sub("", text)
    text = _WS_RE.sub(" ", text).strip()
    return text or None


def derive_power(kw: Any, ps: Any) -> tuple[int, int] | None:
    """Return ``(kw, ps)`` with the missing unit derived from the other."""
    kw_value = safe_int(kw)
    ps_value = safe_int(ps)
    if kw_value is not None and kw_value <= 0:
        kw_value = None
    if ps_value is not None and ps_value <= 0:
        ps_value = None
    if kw_value is None and ps_value is None:
        return None
    if kw_value is None:
        kw_value = round_half_up(ps_value * PS_TO_KW)  # type: ignore[operator]
    if ps_value is None:
        ps_value = round_half_up(kw_value * KW_TO_PS)
    return kw_value, ps_value
