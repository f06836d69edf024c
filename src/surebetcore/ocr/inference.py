"""Post-OCR inference rules - fill missing or low-confidence slip fields.

Rules run in a fixed order on a copy of the slip:

1. sport from "Team A x Team B" + a score-like result
2. 1X2 market / draw selection from the selection text
3. payout and odds normalization (won-as-profit, odds derived from payout)
4. result from stake vs payout
"""

from __future__ import annotations

import re

import structlog

from surebetcore.models.market import Confidence
from surebetcore.models.slip import ParsedField, ParsedSlip
from surebetcore.ocr.text import parse_decimal

log = structlog.get_logger(__name__)

HIDDEN_DECIMAL_THRESHOLD = 0.01
# Derived odds farther than this ratio from the OCR odds are a partial settlement, not a truncated display.
HIDDEN_DECIMAL_MAX_RATIO = 0.05
GREEN_RETURN_RATIO = 0.95

_TEAMS = re.compile(r"^(.+?)\s+(?:x|vs\.?|v\.?|[-–—])\s+(.+)$", re.IGNORECASE)
_SCORE = re.compile(r"\d+\s*[:\-xX]\s*\d+")
_DRAW = re.compile(r"^(?:x|empate|draw)$", re.IGNORECASE)
_HANDICAP_WORDS = re.compile(r"handicap|spread|hcap|hdp", re.IGNORECASE)
_TOTAL_WORDS = re.compile(r"total|over|under|mais|menos|acima|abaixo|o/u", re.IGNORECASE)


def _format_amount(value: float) -> str:
    return f"{value:.2f}"


def _format_odds(value: float) -> str:
    text = f"{round(value, 4):.4f}".rstrip("0")
    if text.endswith("."):
        text += "00"
    elif len(text.split(".")[1]) < 2:
        text += "0"
    return text


def extract_teams(event: str | None) -> tuple[str, str] | None:
    """Split "Team A x Team B" (also vs / -) into (home, away)."""
    if not event:
        return None
    m = _TEAMS.match(event.strip())
    if m is None:
        return None
    return m.group(1).strip(), m.group(2).strip()


def _infer_sport(slip: ParsedSlip) -> None:
    if slip.sport.is_reliable:
        return
    teams = extract_teams(slip.event.value)
    if teams and slip.result.value and _SCORE.search(slip.result.value):
        slip.sport = ParsedField(value="Futebol", confidence=Confidence.MEDIUM)
        log.debug("inferred_sport", sport="Futebol", reason="teams_and_score")


def _infer_market(slip: ParsedSlip) -> None:
    selection = (slip.selection.value or "").strip()
    market = (slip.market.value or "").strip()
    if not selection:
        return

    if _DRAW.match(selection):
        if not slip.market.is_reliable:
            slip.market = ParsedField(value="1x2", confidence=Confidence.MEDIUM)
        slip.selection = ParsedField(value="Empate", confidence=Confidence.MEDIUM)
        log.debug("inferred_market", market="1x2", reason="draw_selection")
        return

    teams = extract_teams(slip.event.value)
    if not teams:
        return
    chosen = selection.lower()
    is_team = any(t.lower() in chosen or chosen in t.lower() for t in teams)
    has_handicap = bool(_HANDICAP_WORDS.search(market) or _HANDICAP_WORDS.search(selection))
    has_total = bool(_TOTAL_WORDS.search(market) or _TOTAL_WORDS.search(selection))
    if is_team and not has_handicap and not has_total and not slip.market.is_reliable:
        slip.market = ParsedField(value="1x2", confidence=Confidence.MEDIUM)
        log.debug("inferred_market", market="1x2", reason="team_selection")


def _normalize_payout_and_odds(slip: ParsedSlip, threshold: float) -> None:
    stake = parse_decimal(slip.stake.value)
    payout = parse_decimal(slip.payout.value)
    ocr_odds = parse_decimal(slip.odds.value)
    if stake is None or payout is None or stake <= 0 or payout < 0:
        return
    if ocr_odds is not None and ocr_odds <= 1:
        ocr_odds = None  # garbled

    # Many books print "Won" as net profit rather than gross return.
    if 0 < payout < stake:
        as_profit_odds = (stake + payout) / stake
        if ocr_odds is None or abs(as_profit_odds - ocr_odds) <= ocr_odds * HIDDEN_DECIMAL_MAX_RATIO:
            payout = stake + payout
            slip.payout = ParsedField(value=_format_amount(payout), confidence=Confidence.HIGH)
            log.debug("payout_was_profit", stake=stake, payout=payout)
    elif payout > stake and ocr_odds is not None and abs(payout - stake * ocr_odds) >= 1:
        gross_diff = abs(payout / stake - ocr_odds)
        profit_diff = abs((stake + payout) / stake - ocr_odds)
        if profit_diff < gross_diff:
            payout = stake + payout
            slip.payout = ParsedField(value=_format_amount(payout), confidence=Confidence.HIGH)
            log.debug("payout_was_profit", stake=stake, payout=payout)

    if payout <= stake:
        return
    derived = payout / stake
    if ocr_odds is None:
        slip.derived_odds = round(derived, 4)
        slip.odds = ParsedField(value=_format_odds(derived), confidence=Confidence.HIGH)
        slip.odds_derived_from_payout = True
        log.debug("odds_derived", derived=slip.derived_odds, ocr_odds=None)
        return
    # A truncated display can only show odds below the real ones.
    diff = round(derived - ocr_odds, 6)
    if threshold < diff <= ocr_odds * HIDDEN_DECIMAL_MAX_RATIO:
        slip.derived_odds = round(derived, 4)
        slip.odds = ParsedField(value=_format_odds(derived), confidence=Confidence.HIGH)
        slip.odds_derived_from_payout = True
        slip.has_hidden_decimal = True
        log.debug("odds_derived", derived=slip.derived_odds, ocr_odds=ocr_odds, hidden_decimal=True)


def _infer_result(slip: ParsedSlip) -> None:
    if slip.result.is_reliable:
        return
    stake = parse_decimal(slip.stake.value)
    payout = parse_decimal(slip.payout.value)
    odds = parse_decimal(slip.odds.value)
    if stake is None or payout is None or stake <= 0:
        return

    if payout == 0:
        result, confidence = "Red", Confidence.HIGH
    elif abs(payout - stake) < 0.01:
        result, confidence = "Void", Confidence.HIGH
    elif payout > stake:
        if odds is not None and odds > 1:
            if payout / (stake * odds) >= GREEN_RETURN_RATIO:
                result, confidence = "Green", Confidence.HIGH
            else:
                result, confidence = "Half Green", Confidence.MEDIUM
        else:
            result, confidence = "Green", Confidence.MEDIUM
    else:
        result, confidence = "Half Red", Confidence.MEDIUM

    slip.result = ParsedField(value=result, confidence=confidence)
    log.debug("inferred_result", result=result, stake=stake, payout=payout)


def infer_missing_fields(slip: ParsedSlip, *, hidden_decimal_threshold: float = HIDDEN_DECIMAL_THRESHOLD) -> ParsedSlip:
    """Return a copy of slip with inferred sport, market, odds, payout and result."""
    out = slip.model_copy(deep=True)
    _infer_sport(out)
    _infer_market(out)
    _normalize_payout_and_odds(out, hidden_decimal_threshold)  # before result inference
    _infer_result(out)
    return out
