"""Tests for settings loading and logging processors."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from stockroom.config import get_settings, reset_settings
from stockroom.config.logging import app_context, drop_none_values
from stockroom.config.settings import InventorySettings, Settings


class TestSettings:
    def test_nested_sections_read_prefixed_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("STORAGE_DB_NAME", "other.db")
        monkeypatch.setenv("INVENTORY_MAX_PAGE_SIZE", "50")
        reset_settings()

        settings = get_settings()

        assert settings.storage.db_path == tmp_path / "data" / "other.db"
        assert settings.storage.pool_size == 3
        assert settings.inventory.max_page_size == 50

    def test_cached_until_reset(self):
        assert get_settings() is get_settings()

    def test_page_size_bounds(self):
        with pytest.raises(PydanticValidationError):
            InventorySettings(default_page_size=300, max_page_size=200)

    def test_production_needs_secret(self, monkeypatch):
        monkeypatch.delenv("AUTH_SECRET_KEY", raising=False)
        with pytest.raises(PydanticValidationError, match="AUTH_SECRET_KEY must be set"):
            Settings(environment="production")

    def test_production_with_secret(self):
        assert Settings(environment="production").is_production is True


class TestLoggingProcessors:
    def test_app_context_does_not_override(self):
        processor = app_context(Settings())
        event = processor(None, "info", {"event": "x", "version": "custom"})

        assert event["app"] == "Stockroom Inventory Service"
        assert event["version"] == "custom"
        assert event["environment"] == "development"

    def test_drop_none_values(self):
        event = drop_none_values(None, "info", {"event": "x", "alert_id": None, "count": 0})
        assert event == {"event": "x", "count": 0}
