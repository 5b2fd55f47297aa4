"""Tiered listing extraction and shared markup helpers."""

from dealerstock.extraction.tiers import (
    ChainOutcome,
    Tier,
    TierChain,
    TierContext,
    TierName,
    api_tier,
    embedded_tier,
    heuristic_tier,
    rendered_tier,
    static_tier,
)

__all__ = [
    "ChainOutcome",
    "Tier",
    "TierChain",
    "TierContext",
    "TierName",
    "api_tier",
    "embedded_tier",
    "heuristic_tier",
    "rendered_tier",
    "static_tier",
]
