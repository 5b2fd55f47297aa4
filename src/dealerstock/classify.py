"""Pluggable category classification for sources without a configured category."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Protocol

from dealerstock.models.vehicle import Category

COMMERCIAL_KEYWORDS: tuple[str, ...] = (
    "transporter",
    "kastenwagen",
    "nutzfahrzeug",
    "lkw",
    "multivan",
    "van",
    "bus",
    "sprinter",
    "crafter",
    "ducato",
    "boxer",
    "jumper",
    "t6",
    "t7",
    "doblo",
    "transit",
)


class CategoryClassifier(Protocol):
    """Guess a category from listing text; ``None`` means no opinion."""

    def classify(self, text: str) -> Category | None:
        ...


class KeywordClassifier:
    """Match whole-word keywords (case-insensitive) against listing text.

    A hit yields *category*; anything else yields *default*, which may be
    ``None`` to leave the decision to the source's default category.
    """

    def __init__(
        self,
        keywords: Iterable[str] = COMMERCIAL_KEYWORDS,
        *,
        category: Category = Category.NUTZFAHRZEUGE,
        default: Category | None = None,
    ) -> None:
        words = [re.escape(word) for word in keywords if word]
        self._pattern = re.compile(r"\b(?:" + "|".join(words) + r")\b", re.IGNORECASE) if words else None
        self._category = category
        self._default = default

    def classify(self, text: str) -> Category | None:
        if self._pattern is not None and text and self._pattern.search(text):
            return self._category
        return self._default
