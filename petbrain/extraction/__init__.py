# petbrain/extraction/__init__.py
"""Deterministic extraction of dog facts from user messages."""

from .extractor import SignalExtractor, extract

__all__ = ["SignalExtractor", "extract"]
