"""Markup helpers shared by the per-source parsers.

Structured blocks (JSON-LD scripts, ``<article>`` cards, headings) are
located with BeautifulSoup; field values inside a listing's markup window
are pulled with ordered regex fallbacks, most specific marker first.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable, Iterator
from typing import Any
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from dealerstock.ingestion.coerce import clean_text

_logger = logging.getLogger(__name__)

FUEL_KEYWORDS: tuple[str, ...] = ("Diesel", "Benzin", "Elektro", "Hybrid")
TRANSMISSION_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("Automatik", "Automatik"),
    ("Schaltgetriebe", "Schaltgetriebe"),
    ("Handschaltung", "Schaltgetriebe"),
    ("Schaltung", "Schaltgetriebe"),
)

_KW_PS_RE = re.compile(r"(\d{1,4})\s*kW\s*[/(]?\s*(\d{1,4})\s*PS", re.IGNORECASE)
_PS_KW_RE = re.compile(r"(\d{1,4})\s*PS\s*[/(]?\s*(\d{1,4})\s*kW", re.IGNORECASE)
_PS_RE = re.compile(r"(\d{1,4})\s*PS\b", re.IGNORECASE)
_KW_RE = re.compile(r"(\d{1,4})\s*kW\b", re.IGNORECASE)
_MILEAGE_RE = re.compile(r"(?<![\d.,])(\d{1,3}(?:[.\s]\d{3})+|\d+)\s*km\b", re.IGNORECASE)
_PRICE_EURO_FIRST_RE = re.compile(r"€\s*(\d{1,3}(?:[.\s]\d{3})+(?:,\d{1,2})?|\d+(?:,\d{1,2})?)")
_PRICE_EURO_LAST_RE = re.compile(r"(\d{1,3}(?:[.\s]\d{3})+|\d+)(?:,-)?\s*€")
_COMMENT_RE = re.compile(r"<!--.*?-->", re.DOTALL)


def parse_markup(markup: str) -> BeautifulSoup:
    return BeautifulSoup(markup, "html.parser")


def json_ld_objects(markup: str) -> list[dict[str, Any]]:
    """Decode every JSON-LD script block, flattening lists and ``@graph``."""
    objects: list[dict[str, Any]] = []
    for script in parse_markup(markup).find_all("script", attrs={"type": "application/ld+json"}):
        text = script.string or script.get_text()
        if not text or not text.strip():
            continue
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            _logger.debug("Skipping undecodable JSON-LD block (%d chars)", len(text))
            continue
        pending: list[Any] = data if isinstance(data, list) else [data]
        while pending:
            item = pending.pop(0)
            if not isinstance(item, dict):
                continue
            graph = item.get("@graph")
            if isinstance(graph, list):
                pending.extend(graph)
            objects.append(item)
    return objects


def item_list_elements(markup: str) -> list[dict[str, Any]]:
    """Return the ``itemListElement`` entries of the first schema.org ItemList."""
    for obj in json_ld_objects(markup):
        if obj.get("@type") == "ItemList" and isinstance(obj.get("itemListElement"), list):
            return [element for element in obj["itemListElement"] if isinstance(element, dict)]
    return []


def first_group(text: str, *patterns: re.Pattern[str]) -> str | None:
    """Return group 1 of the first pattern that matches *text*."""
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def window(text: str, start: int, end: int, before: int, after: int) -> str:
    """Cut a bounded slice of *text* around ``[start, end)``."""
    return text[max(0, start - before) : min(len(text), end + after)]


def unique(values: Iterable[str]) -> list[str]:
    """De-duplicate preserving first-seen order."""
    seen: set[str] = set()
    ordered: list[str] = []
    for value in values:
        if value and value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


def absolute_url(url: str | None, base: str) -> str | None:
    if not url:
        return None
    return urljoin(base, url.replace("&amp;", "&"))


def strip_comments(fragment: str) -> str:
    return _COMMENT_RE.sub("", fragment)


def text_of(fragment: str | None) -> str:
    """Visible text of a markup fragment, whitespace-collapsed."""
    return clean_text(strip_comments(fragment or "")) or ""


def detect_fuel(text: str, *, cell_only: bool = False) -> str | None:
    """Find the first known fuel keyword; with *cell_only*, only as ``>Keyword<``."""
    for keyword in FUEL_KEYWORDS:
        needle = f">{keyword}<" if cell_only else keyword
        if needle in text:
            return keyword
    return None


def detect_transmission(text: str, *, cell_only: bool = False) -> str | None:
    for keyword, name in TRANSMISSION_KEYWORDS:
        needle = f">{keyword}<" if cell_only else keyword
        if needle in text:
            return name
    return None


def find_power(text: str) -> tuple[str | None, str | None]:
    """Return ``(kw, ps)`` digit strings; either may be ``None``.

    Recognises ``"110 kW (150 PS)"``, ``"150 PS (110 kW)"``,
    ``"59 kw / 80 PS"`` and single-unit mentions.
    """
    match = _KW_PS_RE.search(text)
    if match:
        return match.group(1), match.group(2)
    match = _PS_KW_RE.search(text)
    if match:
        return match.group(2), match.group(1)
    ps = first_group(text, _PS_RE)
    if ps:
        return None, ps
    return first_group(text, _KW_RE), None


def find_mileage(text: str) -> str | None:
    return first_group(text, _MILEAGE_RE)


def find_price(text: str) -> str | None:
    """Generic price pattern: ``€ 21.990,-`` or ``21.990 €``."""
    return first_group(text, _PRICE_EURO_FIRST_RE, _PRICE_EURO_LAST_RE)


def iter_price_positions(text: str) -> Iterator[tuple[int, str]]:
    """Yield ``(offset, price_text)`` for every ``€ amount`` occurrence."""
    for match in _PRICE_EURO_FIRST_RE.finditer(text):
        yield match.start(), match.group(1)
