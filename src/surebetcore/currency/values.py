"""Consolidated stake/profit of a single record via an ordered fallback chain.

Precedence, first match wins:

1. pre-computed consolidated field (stake: non-zero) in the target currency
2. raw value when the record is already in the target currency
3. BRL reference snapshot when the target is BRL
4. runtime conversion through convert_fn
5. raw value unconverted

These never raise: any exception from convert_fn falls through to the next
tier and tier 5 is logged as degraded.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Callable

import structlog

from surebetcore.currency.rates import PIVOT_CURRENCY, ConvertFn
from surebetcore.models.currency import ConsolidatableRecord, ConsolidatedValue, ConsolidationTier

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class _Candidate:
    """Inputs of the fallback chain for one figure (stake or profit) of a record."""

    raw: float
    source_currency: str
    target_currency: str
    precomputed: float | None
    precomputed_currency: str | None
    reference_snapshot: float | None
    precomputed_must_be_nonzero: bool
    convert_fn: ConvertFn | None


def _from_precomputed(c: _Candidate) -> float | None:
    if c.precomputed is None:
        return None
    if c.precomputed_must_be_nonzero and c.precomputed == 0:
        return None
    if c.precomputed_currency is not None and c.precomputed_currency != c.target_currency:
        return None
    return c.precomputed


def _from_same_currency(c: _Candidate) -> float | None:
    return c.raw if c.source_currency == c.target_currency else None


def _from_reference_snapshot(c: _Candidate) -> float | None:
    if c.target_currency == PIVOT_CURRENCY and c.reference_snapshot is not None:
        return c.reference_snapshot
    return None


def _from_runtime_conversion(c: _Candidate) -> float | None:
    if c.convert_fn is None or c.source_currency == c.target_currency:
        return None
    try:
        converted = c.convert_fn(c.raw, c.source_currency, c.target_currency)
    except Exception as e:
        log.warning(
            "consolidation_convert_failed",
            source=c.source_currency,
            target=c.target_currency,
            error=str(e),
        )
        return None
    try:
        value = float(converted)
    except (ArithmeticError, TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def _unconverted(c: _Candidate) -> float | None:
    return c.raw


_CHAIN: tuple[tuple[ConsolidationTier, Callable[[_Candidate], float | None]], ...] = (
    (ConsolidationTier.PRECOMPUTED, _from_precomputed),
    (ConsolidationTier.SAME_CURRENCY, _from_same_currency),
    (ConsolidationTier.REFERENCE_SNAPSHOT, _from_reference_snapshot),
    (ConsolidationTier.RUNTIME_CONVERSION, _from_runtime_conversion),
    (ConsolidationTier.UNCONVERTED, _unconverted),
)


def _resolve(c: _Candidate) -> ConsolidatedValue:
    for tier, strategy in _CHAIN:
        value = strategy(c)
        if value is None:
            continue
        result = ConsolidatedValue(
            value=value,
            tier=tier,
            was_converted=tier not in (ConsolidationTier.SAME_CURRENCY, ConsolidationTier.UNCONVERTED)
            and c.source_currency != c.target_currency,
            source_currency=c.source_currency,
            target_currency=c.target_currency,
        )
        if result.degraded:
            log.warning(
                "consolidation_degraded",
                source=c.source_currency,
                target=c.target_currency,
                value=value,
            )
        return result
    raise AssertionError("fallback chain ends with an unconditional tier")


def resolve_consolidated_stake(
    record: ConsolidatableRecord,
    convert_fn: ConvertFn | None = None,
    consolidation_currency: str = PIVOT_CURRENCY,
) -> ConsolidatedValue:
    """Consolidated stake tagged with the tier that produced it."""
    return _resolve(
        _Candidate(
            raw=record.raw_stake,
            source_currency=record.currency,
            target_currency=consolidation_currency.upper(),
            precomputed=record.stake_consolidated,
            precomputed_currency=record.consolidation_currency,
            reference_snapshot=record.value_in_reference_currency,
            precomputed_must_be_nonzero=True,
            convert_fn=convert_fn,
        )
    )


def resolve_consolidated_profit(
    record: ConsolidatableRecord,
    convert_fn: ConvertFn | None = None,
    consolidation_currency: str = PIVOT_CURRENCY,
) -> ConsolidatedValue:
    """Consolidated profit/loss tagged with the tier that produced it."""
    return _resolve(
        _Candidate(
            raw=record.profit if record.profit is not None else 0.0,
            source_currency=record.currency,
            target_currency=consolidation_currency.upper(),
            precomputed=record.profit_consolidated,
            precomputed_currency=record.consolidation_currency,
            reference_snapshot=record.profit_in_reference_currency,
            precomputed_must_be_nonzero=False,
            convert_fn=convert_fn,
        )
    )


def get_consolidated_stake(
    record: ConsolidatableRecord,
    convert_fn: ConvertFn | None = None,
    consolidation_currency: str = PIVOT_CURRENCY,
) -> float:
    return resolve_consolidated_stake(record, convert_fn, consolidation_currency).value


def get_consolidated_profit(
    record: ConsolidatableRecord,
    convert_fn: ConvertFn | None = None,
    consolidation_currency: str = PIVOT_CURRENCY,
) -> float:
    return resolve_consolidated_profit(record, convert_fn, consolidation_currency).value


@dataclass
class ConsolidatedTotal:
    """Sum of consolidated values over many records."""

    total: float = 0.0
    count: int = 0
    degraded_count: int = 0

    @property
    def is_trustworthy(self) -> bool:
        return self.degraded_count == 0

    def add(self, value: ConsolidatedValue) -> None:
        self.total += value.value
        self.count += 1
        if value.degraded:
            self.degraded_count += 1


def sum_consolidated_stakes(
    records: Iterable[ConsolidatableRecord],
    convert_fn: ConvertFn | None = None,
    consolidation_currency: str = PIVOT_CURRENCY,
) -> ConsolidatedTotal:
    totals = ConsolidatedTotal()
    for record in records:
        totals.add(resolve_consolidated_stake(record, convert_fn, consolidation_currency))
    return totals


def sum_consolidated_profits(
    records: Iterable[ConsolidatableRecord],
    convert_fn: ConvertFn | None = None,
    consolidation_currency: str = PIVOT_CURRENCY,
) -> ConsolidatedTotal:
    totals = ConsolidatedTotal()
    for record in records:
        totals.add(resolve_consolidated_profit(record, convert_fn, consolidation_currency))
    return totals
