"""Exception hierarchy for surebetcore."""

from __future__ import annotations


class SurebetCoreError(Exception):
    """Base class for all surebetcore errors."""


class RateUnavailableError(SurebetCoreError, ValueError):
    """A rate lookup returned nothing usable (missing, non-finite or non-positive)."""

    def __init__(self, currency: str, rate: object = None) -> None:
        self.currency = currency
        self.rate = rate
        super().__init__(f"No valid BRL rate for {currency!r} (got {rate!r})")


class ConfigError(SurebetCoreError, ValueError):
    """Invalid value in a TOML config file."""
