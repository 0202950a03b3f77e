"""Environment driven settings for the pricing context."""

import os
from dataclasses import dataclass

_LEVEL_BY_ENVIRONMENT = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}


def get_environment() -> str:
    """Resolve the current environment name."""
    return (os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    """Get log level based on environment."""
    return os.getenv("LOG_LEVEL", _LEVEL_BY_ENVIRONMENT.get(get_environment(), "INFO")).upper()


@dataclass(frozen=True)
class PricingSettings:
    """Settings for pricing computations and logging.

    ``money_precision`` only affects the rounded presentation helpers on
    ``PricedCart``; pipeline results are never rounded.
    """

    environment: str = "development"
    log_level: str = "DEBUG"
    log_dir: str | None = None
    money_precision: int = 2
    currency: str = "USD"

    @classmethod
    def from_env(cls) -> "PricingSettings":
        precision = os.getenv("PRICING_MONEY_PRECISION", "2")
        try:
            money_precision = int(precision)
        except ValueError as exc:
            raise ValueError(f"PRICING_MONEY_PRECISION must be an integer, got {precision!r}") from exc

        if money_precision < 0:
            raise ValueError(f"PRICING_MONEY_PRECISION must not be negative, got {money_precision}")

        return cls(
            environment=get_environment(),
            log_level=get_log_level(),
            log_dir=os.getenv("PRICING_LOG_DIR") or None,
            money_precision=money_precision,
            currency=os.getenv("PRICING_CURRENCY", "USD").upper(),
        )


def get_settings() -> PricingSettings:
    """Return settings read from the current environment."""
    return PricingSettings.from_env()
