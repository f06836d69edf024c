"""Text helpers shared by the OCR stages."""

from __future__ import annotations

import math
import re
import unicodedata

_WS = re.compile(r"\s+")
_NUMERIC_JUNK = re.compile(r"[^0-9.,\-]")


def as_text(value: object) -> str:
    """Coerce OCR input (possibly None or a number) to str."""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def normalize_text(text: object) -> str:
    """Lowercase, strip accents, collapse whitespace."""
    decomposed = unicodedata.normalize("NFD", as_text(text).lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _WS.sub(" ", stripped).strip()


def parse_decimal(raw: object) -> float | None:
    """Parse an OCR number such as ``2,60``, ``R$ 1.234,56`` or ``1,234.56``.

    With both separators present the last one is the decimal mark; a lone comma
    is decimal; several dots are thousands separators. Returns None when nothing
    numeric survives.
    """
    cleaned = _NUMERIC_JUNK.sub("", as_text(raw))
    negative = cleaned.startswith("-")
    cleaned = cleaned.replace("-", "")
    if not cleaned or not any(ch.isdigit() for ch in cleaned):
        return None
    if "," in cleaned and "." in cleaned:
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif "," in cleaned:
        if cleaned.count(",") > 1:
            cleaned = cleaned.replace(",", "")
        else:
            cleaned = cleaned.replace(",", ".")
    elif cleaned.count(".") > 1:
        cleaned = cleaned.replace(".", "")
    cleaned = cleaned.strip(".")
    if not cleaned:
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return -value if negative else value
