"""Ingestion layer.

Value coercion (:mod:`.coerce`) and normalization (:mod:`.normalize`)
that turn loosely typed origin records into canonical vehicles.
"""

__all__: list[str] = []
