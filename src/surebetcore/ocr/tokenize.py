"""Market tokenization - split OCR market text into side, line and residual text."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass

from surebetcore.models.market import MarketSide
from surebetcore.ocr.text import normalize_text

_NUM = r"([0-9]{1,6}(?:[.,][0-9]{1,4})?)"
# Single-letter forms ("o2.5", "U 3,5") need a decimal line so "U21" stays a team name.
_DEC = r"([0-9]{1,4}[.,][0-9]{1,2})"

# Side keyword immediately followed by the line: "mais 21.5", "over 2,5", "o2.5", "> 3.5".
_OVER_WITH_LINE = (
    re.compile(rf"\b(?:mais|over|acima)(?:\s+de)?\s*{_NUM}"),
    re.compile(rf"(?<![a-z0-9])o\s*{_DEC}"),
    re.compile(rf">\s*{_NUM}"),
)
_UNDER_WITH_LINE = (
    re.compile(rf"\b(?:menos|under|abaixo)(?:\s+de)?\s*{_NUM}"),
    re.compile(rf"(?<![a-z0-9])u\s*{_DEC}"),
    re.compile(rf"<\s*{_NUM}"),
)
# Trailing sign after the line: "21.5+", "9,5-".
_OVER_SUFFIX = re.compile(rf"{_NUM}\s*\+\s*$")
_UNDER_SUFFIX = re.compile(rf"{_NUM}\s*-\s*$")
_OU_MARKER = re.compile(r"\bover\s*/\s*under\b|(?<![a-z0-9])o\s*/\s*u(?![a-z0-9])")
_OVER_WORD = re.compile(r"\b(?:mais|over|acima)\b")
_UNDER_WORD = re.compile(r"\b(?:menos|under|abaixo)\b")
_ANY_NUMBER = re.compile(rf"(?<![0-9.,]){_NUM}")

_HANDICAP_LINE = (
    re.compile(r"\(\s*([+-]?[0-9]{1,4}(?:[.,][0-9]{1,2})?)\s*\)"),  # "(-1.5)"
    re.compile(r"(?<![0-9a-z])([+-][0-9]{1,4}(?:[.,][0-9]{1,2})?)"),  # " -1.5"
    re.compile(r"(?<![0-9.,])([0-9]{1,4}(?:[.,][0-9]{1,2})?)\s*$"),  # trailing "1.5"
)

_SEPARATORS = re.compile(r"[^a-z0-9/]+")


@dataclass(frozen=True)
class MarketTokens:
    """Provisional pieces of a market string."""

    side: MarketSide | None
    line: float | None
    residual: str  # normalized text left after removing side/line
    words: tuple[str, ...]


def _to_float(raw: str) -> float | None:
    try:
        value = float(raw.replace(",", "."))
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def _match_side_line(text: str, suffix_sides: bool) -> tuple[MarketSide, float, re.Match[str]] | None:
    over, under = _OVER_WITH_LINE, _UNDER_WITH_LINE
    if suffix_sides:
        over, under = (*over, _OVER_SUFFIX), (*under, _UNDER_SUFFIX)
    for side, patterns in ((MarketSide.OVER, over), (MarketSide.UNDER, under)):
        for pattern in patterns:
            m = pattern.search(text)
            if m is None:
                continue
            line = _to_float(m.group(1))
            if line is not None:
                return side, line, m
    return None


def tokenize_market(text: object, *, suffix_sides: bool = False) -> MarketTokens:
    """Extract an Over/Under side, a numeric line and the remaining descriptive text.

    suffix_sides also reads a trailing sign ("21.5+") as the side; signed
    selections are handicap lines unless the market is already a total.
    """
    # "Over/Under" names the market, it is not a side.
    normalized = _OU_MARKER.sub(" ", normalize_text(text))
    side: MarketSide | None = None
    line: float | None = None
    residual = normalized

    found = _match_side_line(normalized, suffix_sides)
    if found is not None:
        side, line, m = found
        residual = normalized[: m.start()] + " " + normalized[m.end():]
    else:
        if _OVER_WORD.search(normalized):
            side = MarketSide.OVER
            residual = _OVER_WORD.sub(" ", residual)
        elif _UNDER_WORD.search(normalized):
            side = MarketSide.UNDER
            residual = _UNDER_WORD.sub(" ", residual)
        if side is not None:
            n = _ANY_NUMBER.search(residual)
            if n is not None:
                line = _to_float(n.group(1))
                residual = residual[: n.start()] + " " + residual[n.end():]

    words = tuple(w for w in _SEPARATORS.split(residual) if w)
    return MarketTokens(side=side, line=line, residual=" ".join(words), words=words)


def extract_handicap_line(text: object) -> float | None:
    """Signed handicap line from a selection such as ``Flamengo (-1.5)`` or ``+2``."""
    normalized = normalize_text(text)
    for pattern in _HANDICAP_LINE:
        m = pattern.search(normalized)
        if m is not None:
            value = _to_float(m.group(1))
            if value is not None:
                return value
    return None
