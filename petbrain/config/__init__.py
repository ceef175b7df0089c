# petbrain/config/__init__.py
"""Configuration system for petbrain."""

from .loader import get_config_path, load_config
from .schema import (
    CardConfig,
    LexiconConfig,
    OutputConfig,
    PetBrainConfig,
    StorageConfig,
)

__all__ = [
    "PetBrainConfig",
    "StorageConfig",
    "LexiconConfig",
    "CardConfig",
    "OutputConfig",
    "load_config",
    "get_config_path",
]
