"""
Unit tests for configuration loading and validation.

Tests strict validation and error handling for sync configs.
"""

import os
import shutil
import tempfile
from datetime import timedelta

import pytest
import yaml

from price_catalog.config.loader import (
    CONFIG_ENV_VAR,
    LITELLM_PRICING_URL,
    SyncConfig,
    load_sync_config,
    resolve_sync_config,
)


class TestSyncConfig:
    """Test SyncConfig defaults and validation."""

    def test_defaults(self):
        config = SyncConfig()
        assert config.feed_url == LITELLM_PRICING_URL
        assert config.timeout_seconds == 10.0
        assert config.min_interval == timedelta(days=7)
        assert config.db_path == "price_catalog.db"

    def test_invalid_feed_url(self):
        with pytest.raises(ValueError, match="feed_url"):
            SyncConfig(feed_url="ftp://example.com/prices.json")

    def test_non_positive_timeout(self):
        with pytest.raises(ValueError, match="timeout_seconds must be > 0"):
            SyncConfig(timeout_seconds=0)

    def test_negative_interval(self):
        with pytest.raises(ValueError, match="min_interval_days cannot be negative"):
            SyncConfig(min_interval_days=-1)

    def test_fractional_interval(self):
        assert SyncConfig(min_interval_days=0.5).min_interval == timedelta(hours=12)


class TestConfigLoading:
    """Test configuration loading and validation."""

    def setup_method(self):
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()

    def teardown_method(self):
        """Clean up test environment."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write_config(self, config_data, filename: str = "config.yaml") -> str:
        """Write configuration data to temporary file."""
        config_path = os.path.join(self.temp_dir, filename)
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(config_data, f)
        return config_path

    def test_valid_config_loads_correctly(self):
        path = self._write_config({
            "feed_url": "https://example.com/prices.json",
            "timeout_seconds": 3,
            "min_interval_days": 1,
            "db_path": "/tmp/catalog.db"
        })
        config = load_sync_config(path)

        assert config.feed_url == "https://example.com/prices.json"
        assert config.timeout_seconds == 3.0
        assert config.min_interval == timedelta(days=1)
        assert config.db_path == "/tmp/catalog.db"

    def test_partial_config_keeps_defaults(self):
        config = load_sync_config(self._write_config({"timeout_seconds": 30}))
        assert config.timeout_seconds == 30.0
        assert config.feed_url == LITELLM_PRICING_URL

    def test_nested_sync_section(self):
        config = load_sync_config(self._write_config({"sync": {"min_interval_days": 14}}))
        assert config.min_interval == timedelta(days=14)

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError, match="Sync config file not found"):
            load_sync_config(os.path.join(self.temp_dir, "nope.yaml"))

    def test_empty_file(self):
        path = os.path.join(self.temp_dir, "empty.yaml")
        open(path, 'w').close()
        with pytest.raises(ValueError, match="Configuration file is empty"):
            load_sync_config(path)

    def test_invalid_yaml(self):
        path = os.path.join(self.temp_dir, "bad.yaml")
        with open(path, 'w', encoding='utf-8') as f:
            f.write("feed_url: [unclosed\n")
        with pytest.raises(yaml.YAMLError):
            load_sync_config(path)

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError, match="Unknown configuration keys"):
            load_sync_config(self._write_config({"timeout_secs": 5}))

    def test_wrong_type_rejected(self):
        with pytest.raises(ValueError, match="'timeout_seconds' must be a number"):
            load_sync_config(self._write_config({"timeout_seconds": "fast"}))

    def test_bool_rejected_as_number(self):
        with pytest.raises(ValueError, match="'min_interval_days' must be a number"):
            load_sync_config(self._write_config({"min_interval_days": True}))

    def test_non_string_url_rejected(self):
        with pytest.raises(ValueError, match="'feed_url' must be a string"):
            load_sync_config(self._write_config({"feed_url": 42}))

    def test_non_mapping_rejected(self):
        with pytest.raises(ValueError, match="must be a dictionary"):
            load_sync_config(self._write_config(["feed_url"]))


class TestResolveConfig:
    """Test config resolution from arguments and environment."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()

    def teardown_method(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_defaults_without_file(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        assert resolve_sync_config() == SyncConfig()

    def test_environment_path(self, monkeypatch):
        path = os.path.join(self.temp_dir, "config.yaml")
        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump({"min_interval_days": 2}, f)
        monkeypatch.setenv(CONFIG_ENV_VAR, path)

        assert resolve_sync_config().min_interval == timedelta(days=2)

    def test_db_path_override(self, monkeypatch):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        config = resolve_sync_config(db_path="/tmp/other.db")
        assert config.db_path == "/tmp/other.db"
