"""Canonical schema (Pydantic) - consolidation records, markets, bet slips."""

from surebetcore.models.currency import (
    ConsolidatableRecord,
    ConsolidatedValue,
    ConsolidationResult,
    ConsolidationTier,
    CurrencyAmount,
)
from surebetcore.models.market import BetModel, CanonicalMarket, Confidence, MarketDomain, MarketSide, MarketType
from surebetcore.models.slip import ParsedField, ParsedSlip

__all__ = [
    "BetModel",
    "CanonicalMarket",
    "Confidence",
    "ConsolidatableRecord",
    "ConsolidatedValue",
    "ConsolidationResult",
    "ConsolidationTier",
    "CurrencyAmount",
    "MarketDomain",
    "MarketSide",
    "MarketType",
    "ParsedField",
    "ParsedSlip",
]
