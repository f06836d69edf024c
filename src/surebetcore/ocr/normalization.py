"""Slip-level normalization shared by every print-import flow (single, multiple, surebet)."""

from __future__ import annotations

import structlog

from surebetcore.models.market import Confidence, MarketType
from surebetcore.models.slip import ParsedField, ParsedSlip
from surebetcore.ocr.inference import HIDDEN_DECIMAL_THRESHOLD, infer_missing_fields
from surebetcore.ocr.parser import format_selection, parse_market
from surebetcore.ocr.sports import GENERIC_SPORT, normalize_sport

log = structlog.get_logger(__name__)

_CONFIDENCE_RANK = {
    Confidence.NONE: 0,
    Confidence.LOW: 1,
    Confidence.MEDIUM: 2,
    Confidence.HIGH: 3,
    Confidence.EXACT: 4,
}


def _weakest(a: Confidence, b: Confidence) -> Confidence:
    return a if _CONFIDENCE_RANK[a] <= _CONFIDENCE_RANK[b] else b


def build_event_field(home: ParsedField, away: ParsedField) -> ParsedField | None:
    """Unified event "Home x Away" with the weaker of both confidences; None when neither side was read."""
    if home.value and away.value:
        return ParsedField(value=f"{home.value} x {away.value}", confidence=_weakest(home.confidence, away.confidence))
    if home.value:
        return ParsedField(value=home.value, confidence=home.confidence)
    if away.value:
        return ParsedField(value=away.value, confidence=away.confidence)
    return None


def normalize_slip(slip: ParsedSlip) -> ParsedSlip:
    """Return a copy with unified event, canonical sport name, canonical market and selection."""
    out = slip.model_copy(deep=True)

    event = build_event_field(out.home, out.away)
    if event is not None:
        out.event = event

    if out.sport.value:
        sport, sport_confidence = normalize_sport(out.sport.value)
        confidence = out.sport.confidence
        if sport_confidence is Confidence.LOW and confidence in (Confidence.HIGH, Confidence.EXACT):
            confidence = Confidence.MEDIUM
        out.sport = ParsedField(value=sport, confidence=confidence)

    if out.market.value:
        sport = out.sport.value or GENERIC_SPORT
        market = parse_market(sport, out.market.value, out.selection.value or "")
        out.raw_market = out.market.value
        out.canonical_market = market

        confidence = out.market.confidence
        if market.confidence is Confidence.LOW:
            confidence = Confidence.LOW
        elif market.confidence is Confidence.MEDIUM and confidence in (Confidence.HIGH, Confidence.EXACT):
            confidence = Confidence.MEDIUM
        out.market = ParsedField(value=market.display_name, confidence=confidence)

        if market.market_type in (MarketType.TOTAL, MarketType.HANDICAP):
            selection = format_selection(market)
            if selection and out.selection.value:
                selection_confidence = out.selection.confidence
                if selection_confidence is Confidence.LOW:
                    selection_confidence = Confidence.MEDIUM
                out.selection = ParsedField(value=selection, confidence=selection_confidence)

    log.debug(
        "slip_normalized",
        sport=out.sport.value,
        market=out.market.value,
        has_canonical_market=out.canonical_market is not None,
    )
    return out


def process_slip(slip: ParsedSlip, *, hidden_decimal_threshold: float = HIDDEN_DECIMAL_THRESHOLD) -> ParsedSlip:
    """Full pipeline: inference on the raw OCR text, then normalization."""
    inferred = infer_missing_fields(slip, hidden_decimal_threshold=hidden_decimal_threshold)
    return normalize_slip(inferred)
