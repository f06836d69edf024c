"""OCR bet-slip normalization - sport detection, market parsing, field inference."""

from surebetcore.ocr.inference import infer_missing_fields
from surebetcore.ocr.normalization import normalize_slip, process_slip
from surebetcore.ocr.parser import format_selection, parse_market, resolve_domain, resolve_market_to_option
from surebetcore.ocr.sports import get_markets_for_sport, get_model_for_market, market_admits_draw, normalize_sport
from surebetcore.ocr.tokenize import tokenize_market

__all__ = [
    "format_selection",
    "get_markets_for_sport",
    "get_model_for_market",
    "infer_missing_fields",
    "market_admits_draw",
    "normalize_slip",
    "normalize_sport",
    "parse_market",
    "process_slip",
    "resolve_domain",
    "resolve_market_to_option",
    "tokenize_market",
]
