"""Consolidation results and consolidatable financial records."""

from __future__ import annotations

from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CurrencyAmount(BaseModel):
    """One breakdown entry: an aggregate value in its original currency."""

    currency: str
    value: float


class ConsolidationResult(BaseModel):
    """Total in the consolidation currency plus the per-currency breakdown behind it."""

    total: float = 0.0
    breakdown: list[CurrencyAmount] = Field(default_factory=list)
    currency: str
    rates: dict[str, float] = Field(default_factory=dict)  # cross rate currency -> consolidation currency

    @property
    def is_multi_currency(self) -> bool:
        return any(entry.currency != self.currency for entry in self.breakdown)


class ConsolidatableRecord(BaseModel):
    """A financial line item (bet, surebet operation) as read from persistence.

    The ``*_consolidated`` and ``*_in_reference_currency`` fields are snapshots
    written once when the bet was recorded or settled and are only read here.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    stake: float = 0.0
    stake_total: float | None = None  # multi-leg arbitrage operations
    profit: float | None = None
    currency: str = "BRL"
    stake_consolidated: float | None = None
    profit_consolidated: float | None = None
    consolidation_currency: str | None = None  # currency the *_consolidated fields are in
    value_in_reference_currency: float | None = Field(default=None, alias="valor_brl_referencia")
    profit_in_reference_currency: float | None = Field(
        default=None, alias="lucro_prejuizo_brl_referencia"
    )

    @field_validator("currency", mode="before")
    @classmethod
    def _upper_currency(cls, v: object) -> object:
        if v is None or (isinstance(v, str) and not v.strip()):
            return "BRL"
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("consolidation_currency", mode="before")
    @classmethod
    def _upper_consolidation_currency(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().upper() or None
        return v

    @property
    def raw_stake(self) -> float:
        """Stake in the record's own currency; stake_total wins for arbitrage operations."""
        if self.stake_total is not None:
            return self.stake_total
        return self.stake


class ConsolidationTier(IntEnum):
    """Which fallback produced a consolidated value, in precedence order."""

    PRECOMPUTED = 1
    SAME_CURRENCY = 2
    REFERENCE_SNAPSHOT = 3
    RUNTIME_CONVERSION = 4
    UNCONVERTED = 5


class ConsolidatedValue(BaseModel):
    """A consolidated figure tagged with how it was obtained."""

    model_config = ConfigDict(frozen=True)

    value: float
    tier: ConsolidationTier
    was_converted: bool
    source_currency: str
    target_currency: str

    @property
    def degraded(self) -> bool:
        """True when the raw value was passed through although the currencies differ."""
        return self.tier is ConsolidationTier.UNCONVERTED and self.source_currency != self.target_currency
