"""
Configuration management and loading.

Handles sync settings from YAML files and environment variables.
"""

import os
from dataclasses import dataclass, replace
from datetime import timedelta
from pathlib import Path
from typing import Dict, Optional

import yaml

LITELLM_PRICING_URL = (
    "https://raw.githubusercontent.com/BerriAI/litellm/main/"
    "model_prices_and_context_window.json"
)

CONFIG_ENV_VAR = "PRICE_CATALOG_CONFIG"


@dataclass(frozen=True)
class SyncConfig:
    """Settings for fetching the feed and storing the catalog."""
    feed_url: str = LITELLM_PRICING_URL
    timeout_seconds: float = 10.0
    min_interval_days: float = 7.0
    db_path: str = "price_catalog.db"
    user_agent: str = "PriceCatalog-PriceFetcher/1.0"

    def __post_init__(self):
        """Validate sync settings."""
        if not self.feed_url or not self.feed_url.startswith(("http://", "https://")):
            raise ValueError("feed_url must be an http(s) URL")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be > 0")
        if self.min_interval_days < 0:
            raise ValueError("min_interval_days cannot be negative")
        if not self.db_path:
            raise ValueError("db_path cannot be empty")

    @property
    def min_interval(self) -> timedelta:
        """Minimum time between non-forced syncs."""
        return timedelta(days=self.min_interval_days)


_STRING_KEYS = {'feed_url', 'db_path', 'user_agent'}
_NUMBER_KEYS = {'timeout_seconds', 'min_interval_days'}


def load_sync_config(path: str) -> SyncConfig:
    """Load and validate sync configuration from YAML file.

    Omitted keys keep their defaults; unknown keys are rejected so a
    misspelt setting is never silently ignored.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated SyncConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Sync config file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if not raw_config:
        raise ValueError("Configuration file is empty")
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration must be a dictionary")

    # Settings may be nested under a top-level 'sync' section
    if set(raw_config.keys()) == {'sync'}:
        raw_config = raw_config['sync']
        if not isinstance(raw_config, dict):
            raise ValueError("'sync' must be a dictionary")

    return SyncConfig(**_parse_settings(raw_config))


def _parse_settings(data: Dict) -> Dict:
    allowed_keys = _STRING_KEYS | _NUMBER_KEYS
    unknown_keys = set(data.keys()) - allowed_keys
    if unknown_keys:
        raise ValueError(f"Unknown configuration keys: {unknown_keys}")

    settings = {}
    for key, value in data.items():
        if key in _STRING_KEYS:
            if not isinstance(value, str):
                raise ValueError(f"'{key}' must be a string")
            settings[key] = value
        else:
            # bool is an int subclass but never a valid duration
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"'{key}' must be a number")
            settings[key] = float(value)
    return settings


def resolve_sync_config(path: Optional[str] = None, db_path: Optional[str] = None) -> SyncConfig:
    """Resolve the effective config from an explicit path or the environment.

    Args:
        path: Explicit config file; falls back to $PRICE_CATALOG_CONFIG
        db_path: Optional database path overriding the file setting

    Returns:
        SyncConfig, using defaults when no file is configured
    """
    path = path or os.environ.get(CONFIG_ENV_VAR)
    config = load_sync_config(path) if path else SyncConfig()
    if db_path:
        config = replace(config, db_path=db_path)
    return config
