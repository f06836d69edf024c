"""Supported currencies, their symbols and display formatting."""

from __future__ import annotations

from types import MappingProxyType

FIAT_CURRENCIES = ("BRL", "USD", "EUR", "GBP", "MYR", "MXN", "ARS", "COP")
CRYPTO_CURRENCIES = (
    "USDT", "USDC", "BTC", "ETH", "BNB", "TRX", "SOL", "MATIC",
    "ADA", "DOT", "AVAX", "LINK", "UNI", "LTC", "XRP",
)
STABLECOINS = frozenset({"USDT", "USDC"})

CURRENCY_SYMBOLS = MappingProxyType({
    "BRL": "R$",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "MYR": "RM",
    "MXN": "MX$",
    "ARS": "AR$",
    "COP": "CO$",
    "USDT": "₮",
    "USDC": "USDC",
    "BTC": "₿",
    "ETH": "Ξ",
    "LTC": "Ł",
})

# Symbols used in consolidated KPI tooltips; anything else renders as "<CODE> ".
DISPLAY_SYMBOLS = MappingProxyType({
    "BRL": "R$",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "USDT": "₮",
    "USDC": "USDC",
})


def is_supported_currency(currency: str) -> bool:
    code = currency.upper()
    return code in FIAT_CURRENCIES or code in CRYPTO_CURRENCIES


def is_crypto_currency(currency: str) -> bool:
    return currency.upper() in CRYPTO_CURRENCIES


def is_stablecoin(currency: str) -> bool:
    return currency.upper() in STABLECOINS


def is_foreign_currency(currency: str) -> bool:
    """Supported currency other than BRL."""
    return currency.upper() != "BRL" and is_supported_currency(currency)


def needs_conversion(from_currency: str | None, to_currency: str | None) -> bool:
    if not from_currency or not to_currency:
        return False
    return from_currency.upper() != to_currency.upper()


def get_currency_symbol(currency: str) -> str:
    code = currency.upper()
    return CURRENCY_SYMBOLS.get(code) or (code if is_supported_currency(code) else currency)


def _format_pt_br(value: float, decimals: int = 2) -> str:
    # 1,234,567.89 -> 1.234.567,89
    us = f"{value:,.{decimals}f}"
    return us.replace(",", "_").replace(".", ",").replace("_", ".")


def format_currency_for_display(value: float, currency: str) -> str:
    """Format with the currency symbol and pt-BR grouping, e.g. ``R$ 1.234,56``.

    Unknown currencies use their code as symbol: ``MXN 10,00``.
    """
    code = (currency or "").upper()
    symbol = DISPLAY_SYMBOLS.get(code, code)
    rounded = round(value, 2)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol} {_format_pt_br(abs(rounded))}"
