"""Tests for configuration and display formatting."""

from datetime import date, datetime
from decimal import Decimal
from pathlib import Path

import pytest

from expense_tracker.config import (
    AppSettings,
    ExportSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)
from expense_tracker.utils import format_currency, format_date


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """Tests for settings loading."""

    def test_defaults(self, monkeypatch):
        """Test that every setting has a working default."""
        for name in ("EXPENSE_STORAGE_BACKEND", "EXPENSE_STORAGE_DATA_DIR", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        storage = StorageSettings()
        assert storage.backend == "file"
        assert storage.data_dir == Path(".expense_tracker")
        assert storage.storage_key == "expense-tracker-data"
        assert storage.write_attempts == 3
        assert ExportSettings().directory == Path("exports")

        app = AppSettings()
        assert app.log_level == "INFO"
        assert app.recent_expenses_limit == 5
        assert app.trend_months == 6

    def test_environment_override(self, monkeypatch):
        """Test that prefixed environment variables override defaults."""
        monkeypatch.setenv("EXPENSE_STORAGE_STORAGE_KEY", "other-key")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("CURRENCY_CODE", "eur")

        assert StorageSettings().storage_key == "other-key"
        app = AppSettings()
        assert app.log_level == "DEBUG"
        assert app.currency_code == "EUR"

    def test_invalid_log_level(self):
        """Test that unknown log levels are rejected."""
        with pytest.raises(ValueError):
            AppSettings(log_level="LOUD")

    @pytest.mark.parametrize("key", ["expense tracker", "../data", "data/key"])
    def test_invalid_storage_key(self, key):
        """Test that a storage key the file backend cannot address is rejected."""
        with pytest.raises(ValueError):
            StorageSettings(storage_key=key)

    def test_validate_all_settings(self, monkeypatch):
        """Test the per-group validation report."""
        monkeypatch.setenv("EXPENSE_STORAGE_BACKEND", "cloud")

        results = validate_all_settings()

        assert results["storage"] is False
        assert "storage_error" in results
        assert results["export"] is True
        assert results["app"] is True

    def test_get_settings_is_cached(self):
        """Test that settings are loaded once."""
        assert get_settings() is get_settings()


class TestFormatting:
    """Tests for display helpers."""

    @pytest.mark.parametrize("amount, currency, expected", [
        (Decimal("1234.5"), "USD", "$1,234.50"),
        (Decimal("-5.5"), "USD", "-$5.50"),
        (0, "USD", "$0.00"),
        (Decimal("10"), "EUR", "€10.00"),
        (Decimal("10"), "chf", "CHF 10.00"),
        (Decimal("0.005"), "USD", "$0.01"),
    ])
    def test_format_currency(self, amount, currency, expected):
        """Test currency formatting."""
        assert format_currency(amount, currency) == expected

    def test_format_date(self):
        """Test display dates."""
        assert format_date(date(2024, 1, 5)) == "Jan 5, 2024"
        assert format_date(datetime(2024, 12, 25, 18, 30)) == "Dec 25, 2024"
