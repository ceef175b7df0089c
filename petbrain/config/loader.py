# petbrain/config/loader.py
"""
Configuration loading with auto-creation of defaults.

Uses platformdirs for cross-platform config directory management.
"""

import logging
from pathlib import Path

import yaml
from platformdirs import user_config_path

from .schema import PetBrainConfig

logger = logging.getLogger(__name__)


def get_config_path() -> Path:
    """Get path to config file, ensuring config directory exists."""
    config_dir = user_config_path("petbrain", ensure_exists=True)
    return config_dir / "config.yaml"


def load_config(path: str | Path | None = None) -> PetBrainConfig:
    """
    Load configuration from YAML file.

    If the config file doesn't exist, creates it with defaults.

    Args:
        path: Config file to use (None = platform config directory)

    Returns:
        Validated PetBrainConfig
    """
    config_path = Path(path) if path is not None else get_config_path()

    if not config_path.exists():
        default_config = PetBrainConfig()
        config_dict = default_config.model_dump(mode="json")

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with config_path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(
                config_dict, f, default_flow_style=False, sort_keys=False, allow_unicode=True
            )

        logger.info(f"Created default config at {config_path}")
        return default_config

    with config_path.open("r", encoding="utf-8") as f:
        config_data = yaml.safe_load(f) or {}

    config = PetBrainConfig(**config_data)
    logger.info(f"Loaded config from {config_path}")
    return config
