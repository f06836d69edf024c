"""Currency symbol and display formatting tests."""

from surebetcore.currency.symbols import (
    format_currency_for_display,
    get_currency_symbol,
    is_crypto_currency,
    is_foreign_currency,
    is_stablecoin,
    needs_conversion,
)


def test_format_brl_pt_br_grouping():
    assert format_currency_for_display(1234.56, "BRL") == "R$ 1.234,56"
    assert format_currency_for_display(1234567.891, "brl") == "R$ 1.234.567,89"


def test_format_known_symbols():
    assert format_currency_for_display(10, "USD") == "$ 10,00"
    assert format_currency_for_display(5.5, "EUR") == "€ 5,50"
    assert format_currency_for_display(0.004, "GBP") == "£ 0,00"


def test_format_unknown_currency_uses_code():
    assert format_currency_for_display(10, "MXN") == "MXN 10,00"


def test_format_negative():
    assert format_currency_for_display(-5.5, "usd") == "-$ 5,50"


def test_currency_classification():
    assert is_stablecoin("usdt")
    assert not is_stablecoin("BTC")
    assert is_crypto_currency("BTC")
    assert is_foreign_currency("USD")
    assert not is_foreign_currency("BRL")
    assert needs_conversion("usd", "BRL")
    assert not needs_conversion("USD", "usd")
    assert not needs_conversion(None, "BRL")
    assert get_currency_symbol("eth") == "Ξ"
