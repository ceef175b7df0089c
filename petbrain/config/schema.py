# petbrain/config/schema.py
"""
Pydantic configuration models for petbrain.

All models use extra="ignore" to allow unknown YAML keys without crashing.
"""

from pathlib import Path
from typing import Literal

from platformdirs import user_data_path
from pydantic import BaseModel, ConfigDict, Field


class StorageConfig(BaseModel):
    """Persistence configuration."""

    model_config = ConfigDict(extra="ignore")

    db_path: str | None = Field(
        default=None,
        description="SQLite database file (None = petbrain.db in the user data directory)",
    )

    def resolve_db_path(self) -> Path:
        """Configured path, or the platform data directory default."""
        if self.db_path:
            return Path(self.db_path).expanduser()
        return user_data_path("petbrain", ensure_exists=True) / "petbrain.db"


class LexiconConfig(BaseModel):
    """Extraction lexicon configuration."""

    model_config = ConfigDict(extra="ignore")

    path: str | None = Field(
        default=None, description="YAML lexicon file (None = packaged default)"
    )


class CardConfig(BaseModel):
    """Daily card request and parsing configuration."""

    model_config = ConfigDict(extra="ignore")

    request_text: str = Field(
        default="你好，请生成今日卡片",
        min_length=1,
        description="Message sent to the completion service to request today's card",
    )
    strict_order: bool = Field(
        default=False,
        description="Reject card responses whose sections are out of order",
    )


class OutputConfig(BaseModel):
    """Output configuration."""

    model_config = ConfigDict(extra="ignore")

    verbosity: Literal["quiet", "normal", "verbose"] = Field(
        default="normal", description="Logging verbosity level"
    )
    json_logs: bool = Field(
        default=False, description="Emit one JSON object per log line on stderr"
    )


class PetBrainConfig(BaseModel):
    """Root configuration for petbrain."""

    model_config = ConfigDict(extra="ignore")

    storage: StorageConfig = Field(default_factory=StorageConfig)
    lexicon: LexiconConfig = Field(default_factory=LexiconConfig)
    card: CardConfig = Field(default_factory=CardConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
