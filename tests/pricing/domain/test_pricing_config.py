"""Tests for environment driven settings."""

import pytest
from pricing.config import PricingSettings, get_environment, get_log_level


@pytest.fixture()
def clean_env(monkeypatch):
    for name in (
        "ENV",
        "ENVIRONMENT",
        "PROTEAN_ENV",
        "LOG_LEVEL",
        "PRICING_LOG_DIR",
        "PRICING_MONEY_PRECISION",
        "PRICING_CURRENCY",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestEnvironment:
    def test_defaults_to_development(self, clean_env):
        assert get_environment() == "development"
        assert get_log_level() == "DEBUG"

    def test_env_takes_precedence(self, clean_env):
        clean_env.setenv("PROTEAN_ENV", "test")
        clean_env.setenv("ENV", "Production")
        assert get_environment() == "production"
        assert get_log_level() == "INFO"

    def test_explicit_log_level(self, clean_env):
        clean_env.setenv("LOG_LEVEL", "error")
        assert get_log_level() == "ERROR"


class TestPricingSettings:
    def test_from_env_defaults(self, clean_env):
        settings = PricingSettings.from_env()
        assert settings.money_precision == 2
        assert settings.currency == "USD"
        assert settings.log_dir is None

    def test_from_env_overrides(self, clean_env):
        clean_env.setenv("PRICING_MONEY_PRECISION", "3")
        clean_env.setenv("PRICING_CURRENCY", "eur")
        clean_env.setenv("PRICING_LOG_DIR", "/tmp/pricing-logs")
        settings = PricingSettings.from_env()
        assert settings.money_precision == 3
        assert settings.currency == "EUR"
        assert settings.log_dir == "/tmp/pricing-logs"

    @pytest.mark.parametrize("precision", ["two", "-1"])
    def test_invalid_precision(self, clean_env, precision):
        clean_env.setenv("PRICING_MONEY_PRECISION", precision)
        with pytest.raises(ValueError):
            PricingSettings.from_env()
