"""Consolidated stake/profit fallback chain tests."""

from __future__ import annotations

import pytest

from surebetcore.currency import (
    StaticRateProvider,
    get_consolidated_profit,
    get_consolidated_stake,
    make_convert_fn,
    resolve_consolidated_profit,
    resolve_consolidated_stake,
    sum_consolidated_profits,
    sum_consolidated_stakes,
)
from surebetcore.models import ConsolidatableRecord, ConsolidationTier


@pytest.fixture
def convert():
    return make_convert_fn(StaticRateProvider({"USD": 5.0, "EUR": 5.5}))


def _boom(value, from_currency, to_currency):
    raise AssertionError("conversion not expected")


def test_same_currency_is_identity():
    record = ConsolidatableRecord(stake=100, profit=25, currency="BRL")
    stake = resolve_consolidated_stake(record, _boom, "BRL")
    assert stake.value == 100
    assert stake.tier is ConsolidationTier.SAME_CURRENCY
    assert not stake.was_converted
    assert not stake.degraded
    assert get_consolidated_profit(record, _boom, "BRL") == 25


def test_precomputed_wins_over_everything():
    record = ConsolidatableRecord(
        stake=100,
        currency="USD",
        stake_consolidated=480,
        consolidation_currency="brl",
        valor_brl_referencia=500,
    )
    stake = resolve_consolidated_stake(record, _boom, "BRL")
    assert stake.value == 480
    assert stake.tier is ConsolidationTier.PRECOMPUTED
    assert stake.was_converted


def test_zero_precomputed_stake_is_ignored():
    record = ConsolidatableRecord(stake=100, currency="USD", stake_consolidated=0, valor_brl_referencia=500)
    stake = resolve_consolidated_stake(record, _boom, "BRL")
    assert stake.value == 500
    assert stake.tier is ConsolidationTier.REFERENCE_SNAPSHOT


def test_zero_precomputed_profit_is_used():
    record = ConsolidatableRecord(stake=100, profit=-100, currency="USD", profit_consolidated=0.0)
    profit = resolve_consolidated_profit(record, _boom, "BRL")
    assert profit.value == 0
    assert profit.tier is ConsolidationTier.PRECOMPUTED


def test_precomputed_in_other_currency_is_ignored():
    record = ConsolidatableRecord(
        stake=100, currency="USD", stake_consolidated=480, consolidation_currency="BRL"
    )
    stake = resolve_consolidated_stake(record, _boom, "USD")
    assert stake.value == 100
    assert stake.tier is ConsolidationTier.SAME_CURRENCY


def test_reference_snapshot_only_for_brl_target(convert):
    record = ConsolidatableRecord(
        stake=110,
        profit=11,
        currency="EUR",
        valor_brl_referencia=600,
        lucro_prejuizo_brl_referencia=60,
    )
    assert get_consolidated_stake(record, convert, "BRL") == 600
    assert get_consolidated_profit(record, convert, "BRL") == 60
    usd = resolve_consolidated_stake(record, convert, "USD")
    assert usd.tier is ConsolidationTier.RUNTIME_CONVERSION
    assert usd.value == pytest.approx(121)


def test_runtime_conversion(convert):
    record = ConsolidatableRecord(stake=100, profit=-20, currency="usd")
    stake = resolve_consolidated_stake(record, convert, "BRL")
    assert stake.value == pytest.approx(500)
    assert stake.tier is ConsolidationTier.RUNTIME_CONVERSION
    assert stake.was_converted
    assert get_consolidated_profit(record, convert, "BRL") == pytest.approx(-100)


def test_stake_total_preferred_for_arbitrage(convert):
    record = ConsolidatableRecord(stake=40, stake_total=100, currency="USD")
    assert get_consolidated_stake(record, convert, "BRL") == pytest.approx(500)
    assert get_consolidated_stake(record, None, "USD") == 100


def test_failed_conversion_degrades_to_raw_value():
    convert = make_convert_fn(StaticRateProvider({}))
    record = ConsolidatableRecord(stake=100, currency="GBP")
    stake = resolve_consolidated_stake(record, convert, "BRL")
    assert stake.value == 100
    assert stake.tier is ConsolidationTier.UNCONVERTED
    assert stake.degraded
    assert not stake.was_converted


def test_non_finite_conversion_degrades():
    record = ConsolidatableRecord(stake=100, currency="USD")
    stake = resolve_consolidated_stake(record, lambda v, f, t: float("nan"), "BRL")
    assert stake.tier is ConsolidationTier.UNCONVERTED
    assert stake.value == 100


def test_missing_convert_fn_degrades():
    record = ConsolidatableRecord(stake=100, currency="USD")
    stake = resolve_consolidated_stake(record)
    assert stake.value == 100
    assert stake.degraded
    assert stake.target_currency == "BRL"


def test_missing_profit_is_zero():
    record = ConsolidatableRecord(stake=100, currency="BRL")
    assert get_consolidated_profit(record) == 0


def test_sums_count_degraded_values(convert):
    records = [
        ConsolidatableRecord(stake=100, profit=10, currency="BRL"),
        ConsolidatableRecord(stake=20, profit=-20, currency="USD"),
        ConsolidatableRecord(stake=50, profit=5, currency="GBP"),
    ]
    stakes = sum_consolidated_stakes(records, convert, "BRL")
    assert stakes.total == pytest.approx(100 + 100 + 50)
    assert stakes.count == 3
    assert stakes.degraded_count == 1
    assert not stakes.is_trustworthy

    profits = sum_consolidated_profits(records[:2], convert, "BRL")
    assert profits.total == pytest.approx(10 - 100)
    assert profits.is_trustworthy


def test_precomputed_wins_over_same_currency():
    record = ConsolidatableRecord(stake=100, currency="BRL", stake_consolidated=98)
    stake = resolve_consolidated_stake(record, _boom, "BRL")
    assert stake.value == 98
    assert stake.tier is ConsolidationTier.PRECOMPUTED


def _rate_service_down(value, from_currency, to_currency):
    raise RuntimeError("rate service down")


def _broken_lookup(value, from_currency, to_currency):
    rates = None
    return value * rates.rate


@pytest.mark.parametrize("convert_fn", [_rate_service_down, _broken_lookup])
def test_any_conversion_error_degrades(convert_fn):
    record = ConsolidatableRecord(stake=100, profit=30, currency="USD")
    assert get_consolidated_stake(record, convert_fn, "BRL") == 100
    profit = resolve_consolidated_profit(record, convert_fn, "BRL")
    assert profit.value == 30
    assert profit.degraded
