"""CanonicalMarket and its enums - the normalized form of an OCR market string."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator


class MarketType(str, Enum):
    MONEYLINE = "MONEYLINE"
    ONE_X_TWO = "1X2"
    TOTAL = "TOTAL"
    HANDICAP = "HANDICAP"
    BTTS = "BTTS"
    CORRECT_SCORE = "CORRECT_SCORE"
    DOUBLE_CHANCE = "DOUBLE_CHANCE"
    DNB = "DNB"
    FIRST_HALF = "FIRST_HALF"
    SECOND_HALF = "SECOND_HALF"
    FIRST_PERIOD = "FIRST_PERIOD"
    FIRST_QUARTER = "FIRST_QUARTER"
    FIRST_SET = "FIRST_SET"
    METHOD_OF_VICTORY = "METHOD_OF_VICTORY"
    ROUND_FINISH = "ROUND_FINISH"
    PLAYER_PROPS = "PLAYER_PROPS"
    OUTRIGHT = "OUTRIGHT"
    OTHER = "OTHER"

    @property
    def requires_domain(self) -> bool:
        return self in (MarketType.TOTAL, MarketType.HANDICAP)


class MarketDomain(str, Enum):
    """What a total or handicap is measured in."""

    GOALS = "GOALS"
    POINTS = "POINTS"
    GAMES = "GAMES"
    SETS = "SETS"
    RUNS = "RUNS"
    CORNERS = "CORNERS"
    CARDS = "CARDS"
    ROUNDS = "ROUNDS"
    MAPS = "MAPS"
    KILLS = "KILLS"
    TOWERS = "TOWERS"
    ACES = "ACES"
    GENERIC = "GENERIC"


class MarketSide(str, Enum):
    OVER = "OVER"
    UNDER = "UNDER"
    POSITIVE = "POSITIVE"  # handicap +line
    NEGATIVE = "NEGATIVE"  # handicap -line


class Confidence(str, Enum):
    EXACT = "exact"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"


class BetModel(str, Enum):
    """Number of legs of an operation: binary or with a draw leg."""

    TWO_WAY = "1-2"
    THREE_WAY = "1-X-2"


class CanonicalMarket(BaseModel):
    """Sport-aware market: TYPE + DOMAIN + SIDE + LINE.

    Over/Under and handicaps are never valid without a domain: "Over 2.5" on its
    own is rejected, it must be "Over 2.5 Goals" (or another domain).
    """

    model_config = ConfigDict(frozen=True)

    market_type: MarketType = MarketType.OTHER
    domain: MarketDomain | None = None
    side: MarketSide | None = None
    line: float | None = None
    raw_label: str = ""
    display_name: str = ""
    sport: str = ""
    confidence: Confidence = Confidence.LOW

    @model_validator(mode="after")
    def _domain_required(self) -> CanonicalMarket:
        if self.domain is None and (self.side is not None or self.line is not None):
            raise ValueError("side/line set without a market domain")
        if self.market_type.requires_domain and self.domain is None:
            raise ValueError(f"{self.market_type.value} market requires a domain")
        return self
