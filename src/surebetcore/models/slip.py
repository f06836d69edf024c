"""ParsedSlip - OCR fields of one bet-slip image plus inference flags."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from surebetcore.models.market import CanonicalMarket, Confidence


class ParsedField(BaseModel):
    """A single OCR-extracted value and how much the OCR engine trusts it."""

    value: str | None = None
    confidence: Confidence = Confidence.NONE

    @property
    def is_reliable(self) -> bool:
        return bool(self.value) and self.confidence not in (Confidence.NONE, Confidence.LOW)


class ParsedSlip(BaseModel):
    """All fields read from a bet slip. Missing fields default to empty/none."""

    model_config = ConfigDict(populate_by_name=True)

    event: ParsedField = Field(default_factory=ParsedField)
    home: ParsedField = Field(default_factory=ParsedField)
    away: ParsedField = Field(default_factory=ParsedField)
    placed_at: ParsedField = Field(default_factory=ParsedField)
    sport: ParsedField = Field(default_factory=ParsedField)
    market: ParsedField = Field(default_factory=ParsedField)
    selection: ParsedField = Field(default_factory=ParsedField)
    odds: ParsedField = Field(default_factory=ParsedField)
    stake: ParsedField = Field(default_factory=ParsedField)
    payout: ParsedField = Field(default_factory=ParsedField)
    result: ParsedField = Field(default_factory=ParsedField)
    bookmaker: ParsedField = Field(default_factory=ParsedField)

    # Set by normalization
    raw_market: str | None = None
    canonical_market: CanonicalMarket | None = None

    # Set by inference
    odds_derived_from_payout: bool = False
    derived_odds: float | None = None
    has_hidden_decimal: bool = Field(default=False, alias="tem_decimal_oculta")
