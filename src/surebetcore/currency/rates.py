"""BRL rate lookup and pivot conversion.

Every rate is "1 unit of currency = X BRL". Converting between any two
currencies goes through BRL in a single expression:

    converted = value * rate_brl(from) / rate_brl(to)
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Callable, Protocol

from surebetcore.errors import RateUnavailableError

PIVOT_CURRENCY = "BRL"

ConvertFn = Callable[[float, str, str], float]


class RateProvider(Protocol):
    """Source of BRL rates, owned and refreshed outside this package."""

    def get_rate(self, currency: str) -> float: ...


def validate_rate(currency: str, rate: object) -> float:
    """Return rate as float or raise RateUnavailableError if it is not finite and positive."""
    if isinstance(rate, bool) or not isinstance(rate, (int, float)):
        raise RateUnavailableError(currency, rate)
    value = float(rate)
    if not math.isfinite(value) or value <= 0:
        raise RateUnavailableError(currency, rate)
    return value


class StaticRateProvider:
    """RateProvider over a fixed mapping (config fallback rates, tests, CLI input)."""

    def __init__(self, rates: Mapping[str, float]) -> None:
        self._rates = {str(k).upper(): float(v) for k, v in rates.items()}
        self._rates[PIVOT_CURRENCY] = 1.0

    def get_rate(self, currency: str) -> float:
        code = currency.upper()
        return validate_rate(code, self._rates.get(code))

    def __contains__(self, currency: object) -> bool:
        return isinstance(currency, str) and currency.upper() in self._rates

    def as_dict(self) -> dict[str, float]:
        return dict(self._rates)


def get_brl_rate(currency: str, rates: Mapping[str, float]) -> float:
    """BRL price of one unit of currency; BRL itself is always 1."""
    code = currency.upper()
    if code == PIVOT_CURRENCY:
        return 1.0
    return validate_rate(code, rates.get(code))


def convert_via_brl(value: float, from_currency: str, to_currency: str, rates: Mapping[str, float]) -> float:
    """Convert value between two currencies using BRL as pivot."""
    if from_currency.upper() == to_currency.upper():
        return value
    if value == 0:
        return 0.0
    return value * get_brl_rate(from_currency, rates) / get_brl_rate(to_currency, rates)


def make_convert_fn(provider: RateProvider) -> ConvertFn:
    """Build a (value, from, to) converter backed by a RateProvider."""

    def _rate(currency: str) -> float:
        code = currency.upper()
        if code == PIVOT_CURRENCY:
            return 1.0
        return validate_rate(code, provider.get_rate(code))

    def convert(value: float, from_currency: str, to_currency: str) -> float:
        if from_currency.upper() == to_currency.upper():
            return value
        return value * _rate(from_currency) / _rate(to_currency)

    return convert
