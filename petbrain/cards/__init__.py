# petbrain/cards/__init__.py
"""Daily card parsing and generation."""

from .parser import DEFAULT_ANCHORS, AnchorHit, CardAnchor, CardParser, parse_card

__all__ = ["CardParser", "CardAnchor", "AnchorHit", "DEFAULT_ANCHORS", "parse_card"]
