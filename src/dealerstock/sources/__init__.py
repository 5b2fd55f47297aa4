"""Listing origins and the registry that maps source ids to adapters."""

from __future__ import annotations

from dealerstock._render import Renderer
from dealerstock._transport import Transport
from dealerstock.classify import CategoryClassifier, KeywordClassifier
from dealerstock.config import StockConfig
from dealerstock.sources.autoscout24 import AutoScout24Adapter
from dealerstock.sources.base import SourceAdapter, SourceTarget
from dealerstock.sources.landwirt import LandwirtAdapter
from dealerstock.sources.motornetzwerk import MotornetzwerkAdapter
from dealerstock.sources.willhaben import WillhabenAdapter
from dealerstock.sources.zweispurig import ZweispurigAdapter

ADAPTERS: dict[str, type[SourceAdapter]] = {
    MotornetzwerkAdapter.source_id: MotornetzwerkAdapter,
    WillhabenAdapter.source_id: WillhabenAdapter,
    AutoScout24Adapter.source_id: AutoScout24Adapter,
    LandwirtAdapter.source_id: LandwirtAdapter,
    ZweispurigAdapter.source_id: ZweispurigAdapter,
}


def build_adapters(
    config: StockConfig,
    transport: Transport,
    renderer: Renderer | None = None,
    *,
    classifier: CategoryClassifier | None = None,
) -> list[SourceAdapter]:
    """Instantiate the configured adapters, highest priority first."""
    classifier = classifier if classifier is not None else KeywordClassifier()
    return [
        ADAPTERS[source_id](config, transport, renderer, classifier=classifier)
        for source_id in config.data_source.active_sources
    ]


__all__ = [
    "ADAPTERS",
    "AutoScout24Adapter",
    "LandwirtAdapter",
    "MotornetzwerkAdapter",
    "SourceAdapter",
    "SourceTarget",
    "WillhabenAdapter",
    "ZweispurigAdapter",
    "build_adapters",
]
