"""Currency consolidation engine - pivot conversion via BRL, breakdowns, fallback chain."""

from surebetcore.currency.consolidate import consolidate_volume, volume_by_currency
from surebetcore.currency.rates import RateProvider, StaticRateProvider, convert_via_brl, make_convert_fn
from surebetcore.currency.symbols import format_currency_for_display
from surebetcore.currency.values import (
    get_consolidated_profit,
    get_consolidated_stake,
    resolve_consolidated_profit,
    resolve_consolidated_stake,
    sum_consolidated_profits,
    sum_consolidated_stakes,
)

__all__ = [
    "RateProvider",
    "StaticRateProvider",
    "consolidate_volume",
    "convert_via_brl",
    "format_currency_for_display",
    "get_consolidated_profit",
    "get_consolidated_stake",
    "make_convert_fn",
    "resolve_consolidated_profit",
    "resolve_consolidated_stake",
    "sum_consolidated_profits",
    "sum_consolidated_stakes",
    "volume_by_currency",
]
