"""Multi-currency volume consolidation with per-currency breakdown."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Callable

import structlog

from surebetcore.currency.rates import PIVOT_CURRENCY, validate_rate
from surebetcore.models.currency import ConsolidatableRecord, ConsolidationResult, CurrencyAmount

log = structlog.get_logger(__name__)

DUST_THRESHOLD = 0.01


def _breakdown_order(consolidation_currency: str) -> Callable[[CurrencyAmount], tuple[int, str]]:
    def key(entry: CurrencyAmount) -> tuple[int, str]:
        return (0 if entry.currency == consolidation_currency else 1, entry.currency)

    return key


def _merge_currency_keys(amounts_by_currency: Mapping[str, float]) -> dict[str, float]:
    merged: dict[str, float] = {}
    for currency, value in amounts_by_currency.items():
        code = str(currency).strip().upper() or PIVOT_CURRENCY
        merged[code] = merged.get(code, 0.0) + float(value)
    return merged


def consolidate_volume(
    amounts_by_currency: Mapping[str, float],
    consolidation_currency: str,
    get_rate: Callable[[str], float],
    *,
    dust_threshold: float = DUST_THRESHOLD,
) -> ConsolidationResult:
    """
    Consolidate per-currency aggregates into consolidation_currency.

    get_rate(currency) returns the BRL price of one unit. BRL is never looked up.
    Conversion uses the pivot formula value * rate_brl(currency) / rate_brl(target),
    and the stored rate is that cross rate, so value * rates[currency] is the
    converted contribution. Invalid rates raise RateUnavailableError; anything
    get_rate itself raises propagates.
    """
    target = consolidation_currency.strip().upper()
    amounts = _merge_currency_keys(amounts_by_currency)
    if not amounts:
        return ConsolidationResult(total=0.0, breakdown=[], currency=target, rates={})

    rate_consolidacao = 1.0 if target == PIVOT_CURRENCY else validate_rate(target, get_rate(target))

    total = 0.0
    breakdown: list[CurrencyAmount] = []
    rates: dict[str, float] = {}
    for currency, value in amounts.items():
        if abs(value) < dust_threshold:
            continue
        breakdown.append(CurrencyAmount(currency=currency, value=value))
        if currency == target:
            total += value
            continue
        rate_brl = 1.0 if currency == PIVOT_CURRENCY else validate_rate(currency, get_rate(currency))
        total += value * rate_brl / rate_consolidacao
        rates[currency] = rate_brl / rate_consolidacao

    breakdown.sort(key=_breakdown_order(target))
    log.debug(
        "volume_consolidated",
        currency=target,
        total=total,
        currencies=[entry.currency for entry in breakdown],
    )
    return ConsolidationResult(total=total, breakdown=breakdown, currency=target, rates=rates)


def volume_by_currency(records: Iterable[ConsolidatableRecord]) -> dict[str, float]:
    """Sum raw stakes per original currency (input for consolidate_volume)."""
    volume: dict[str, float] = {}
    for record in records:
        volume[record.currency] = volume.get(record.currency, 0.0) + record.raw_stake
    return volume
