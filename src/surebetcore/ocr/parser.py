"""OCR market parser - raw sport/market/selection text -> CanonicalMarket.

Stages run in order: sport detection, market tokenization, domain resolution,
canonical assembly. No stage raises on bad input; each degrades to a default
(generic sport, sport default domain, null line).
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from types import MappingProxyType

import structlog

from surebetcore.models.market import CanonicalMarket, Confidence, MarketDomain, MarketSide, MarketType
from surebetcore.ocr.sports import get_markets_for_sport, get_sport_rule, normalize_sport
from surebetcore.ocr.text import as_text, normalize_text
from surebetcore.ocr.tokenize import MarketTokens, extract_handicap_line, tokenize_market

log = structlog.get_logger(__name__)

D = MarketDomain

DOMAIN_LABELS = MappingProxyType({
    D.GOALS: "Gols",
    D.POINTS: "Pontos",
    D.GAMES: "Games",
    D.SETS: "Sets",
    D.RUNS: "Runs",
    D.CORNERS: "Escanteios",
    D.CARDS: "Cartões",
    D.ROUNDS: "Rounds",
    D.MAPS: "Mapas",
    D.KILLS: "Kills",
    D.TOWERS: "Torres",
    D.ACES: "Aces",
    D.GENERIC: "Total",
})

# Whole-word keywords (accent-free) checked first.
_DOMAIN_KEYWORDS = MappingProxyType({
    D.GOALS: frozenset({"gol", "gols", "golo", "golos", "goal", "goals"}),
    D.POINTS: frozenset({"ponto", "pontos", "point", "points", "pt", "pts", "pontuacao"}),
    D.GAMES: frozenset({"game", "games", "jogo", "jogos"}),
    D.SETS: frozenset({"set", "sets"}),
    D.RUNS: frozenset({"run", "runs", "corrida", "corridas"}),
    D.CORNERS: frozenset({"corner", "corners", "escanteio", "escanteios", "canto", "cantos"}),
    D.CARDS: frozenset({"cartao", "cartoes", "card", "cards", "amarelo", "amarelos"}),
    D.ROUNDS: frozenset({"round", "rounds", "rodada", "rodadas"}),
    D.MAPS: frozenset({"mapa", "mapas", "map", "maps"}),
    D.KILLS: frozenset({"kill", "kills", "abate", "abates"}),
    D.TOWERS: frozenset({"torre", "torres", "tower", "towers"}),
    D.ACES: frozenset({"ace", "aces"}),
    D.GENERIC: frozenset(),
})

# Containment patterns for OCR-glued or inflected words ("totalgols", "pontuação").
_DOMAIN_PATTERNS = MappingProxyType({
    D.GOALS: re.compile(r"go(?:l|al)"),
    D.POINTS: re.compile(r"pont|point"),
    D.GAMES: re.compile(r"game"),
    D.SETS: re.compile(r"sets?\b"),
    D.RUNS: re.compile(r"runs?\b"),
    D.CORNERS: re.compile(r"corner|escante|cantos"),
    D.CARDS: re.compile(r"cart(?:ao|oes)|cards?\b|yellow|amarel"),
    D.ROUNDS: re.compile(r"round"),
    D.MAPS: re.compile(r"mapas?\b|maps?\b"),
    D.KILLS: re.compile(r"kill|abate"),
    D.TOWERS: re.compile(r"torre|tower"),
    D.ACES: re.compile(r"aces?\b"),
})

_TYPE_LABELS = MappingProxyType({
    MarketType.MONEYLINE: "Moneyline",
    MarketType.ONE_X_TWO: "1X2",
    MarketType.TOTAL: "Over/Under",
    MarketType.HANDICAP: "Handicap",
    MarketType.BTTS: "Ambas Marcam",
    MarketType.CORRECT_SCORE: "Placar Exato",
    MarketType.DOUBLE_CHANCE: "Dupla Chance",
    MarketType.DNB: "Draw No Bet",
    MarketType.FIRST_HALF: "Resultado do 1º Tempo",
    MarketType.SECOND_HALF: "Resultado do 2º Tempo",
    MarketType.FIRST_PERIOD: "Resultado do 1º Período",
    MarketType.FIRST_QUARTER: "Resultado do 1º Quarto",
    MarketType.FIRST_SET: "Resultado do 1º Set",
    MarketType.METHOD_OF_VICTORY: "Método de Vitória",
    MarketType.ROUND_FINISH: "Round de Finalização",
    MarketType.PLAYER_PROPS: "Props de Jogadores",
    MarketType.OUTRIGHT: "Vencedor do Torneio",
    MarketType.OTHER: "Outro",
})

_EXPLICIT_1X2 = re.compile(r"1\s*[x×]\s*2")
_HANDICAP = re.compile(r"handicap|\bspread\b|run\s*line|puck\s*line|\bah\b|\beh\b|\bhcap\b|\bhdp\b")
_TOTAL = re.compile(r"\btotal\b|over\s*/\s*under|\bo/u\b|\bover\b|\bunder\b|\bmais\b|\bmenos\b|\bacima\b|\babaixo\b")

# Remaining market types, first match wins.
_TYPE_PATTERNS = (
    (MarketType.ONE_X_TWO, re.compile(
        r"resultado\s*final|final\s*d[ae]\s*partida|tres\s*vias|match\s*winner|match\s*result"
        r"|full\s*time\s*result|vencedor\s*(?:da\s*)?(?:partida|match)|main\s*line"
    )),
    (MarketType.MONEYLINE, re.compile(r"moneyline|money\s*line|\bml\b|vencedor|winner")),
    (MarketType.BTTS, re.compile(r"btts|ambas?\s*(?:equipes\s*)?marcam|both\s*teams\s*to\s*score|\bgg\b")),
    (MarketType.CORRECT_SCORE, re.compile(r"placar|correct\s*score|resultado\s*exato|exact\s*score")),
    (MarketType.DOUBLE_CHANCE, re.compile(r"dupla\s*chance|double\s*chance")),
    (MarketType.DNB, re.compile(r"draw\s*no\s*bet|\bdnb\b|empate\s*anula")),
    (MarketType.FIRST_HALF, re.compile(r"\b1\s*[ºo°]?\s*tempo|primeiro\s*tempo|first\s*half|\bht\b")),
    (MarketType.METHOD_OF_VICTORY, re.compile(r"metodo\s*de\s*vitoria|method\s*of\s*victory")),
)


def _format_line(line: float) -> str:
    return f"{line:g}"


def resolve_domain(sport: str, text: object) -> tuple[MarketDomain, bool]:
    """
    Pick the sport's domain that text refers to. Returns (domain, explicit).

    Exact keyword match first, then containment, then the sport default
    (explicit=False). Only domains configured for the sport are ever returned.
    """
    rule = get_sport_rule(sport)
    normalized = normalize_text(text)
    words = set(re.split(r"[^a-z0-9]+", normalized))
    for domain in rule.domains:
        if _DOMAIN_KEYWORDS[domain] & words:
            return domain, True
    for domain in rule.domains:
        pattern = _DOMAIN_PATTERNS.get(domain)
        if pattern is not None and pattern.search(normalized):
            return domain, True
    return rule.default_domain, False


def detect_market_type(combined: str, market_text: str, tokens: MarketTokens) -> tuple[MarketType, Confidence]:
    """Classify normalized market text. Totals need a side or a total keyword."""
    if _EXPLICIT_1X2.search(market_text):
        return MarketType.ONE_X_TWO, Confidence.HIGH
    if _HANDICAP.search(combined):
        return MarketType.HANDICAP, Confidence.HIGH
    if tokens.side is not None or _TOTAL.search(combined):
        if tokens.side is not None and tokens.line is not None:
            return MarketType.TOTAL, Confidence.HIGH
        return MarketType.TOTAL, Confidence.MEDIUM
    for market_type, pattern in _TYPE_PATTERNS:
        if pattern.search(combined):
            return market_type, Confidence.HIGH
    return MarketType.OTHER, Confidence.LOW


def build_display_name(market_type: MarketType, domain: MarketDomain | None) -> str:
    """Display label built from type and domain labels, never from OCR text."""
    if market_type is MarketType.TOTAL:
        if domain is None or domain is D.GENERIC:
            return "Over/Under"
        return f"Over/Under {DOMAIN_LABELS[domain]}"
    if market_type is MarketType.HANDICAP:
        if domain is None or domain is D.GENERIC:
            return "Handicap"
        return f"Handicap de {DOMAIN_LABELS[domain]}"
    return _TYPE_LABELS[market_type]


def parse_market(raw_sport_label: object, raw_market_text: object, raw_selection: object = "") -> CanonicalMarket:
    """Parse OCR sport + market (+ optional selection) text into a CanonicalMarket."""
    sport, _ = normalize_sport(raw_sport_label)
    market_text = as_text(raw_market_text)
    selection = as_text(raw_selection)
    raw_label = " ".join(part for part in (market_text.strip(), selection.strip()) if part)

    market_tokens = tokenize_market(market_text)
    selection_tokens = tokenize_market(selection)
    side_tokens = selection_tokens if selection_tokens.side is not None else market_tokens

    combined = normalize_text(raw_label)
    market_type, confidence = detect_market_type(combined, normalize_text(market_text), side_tokens)
    if market_type is MarketType.TOTAL and side_tokens.side is None:
        for text in (selection, market_text):
            suffixed = tokenize_market(text, suffix_sides=True)
            if suffixed.side is not None:
                side_tokens = suffixed
                confidence = Confidence.HIGH
                break

    domain: MarketDomain | None = None
    side: MarketSide | None = None
    line: float | None = None
    if market_type.requires_domain:
        domain, explicit = resolve_domain(sport, f"{market_tokens.residual} {selection_tokens.residual}")
        if not explicit and confidence is Confidence.HIGH:
            confidence = Confidence.MEDIUM
        if market_type is MarketType.TOTAL:
            side, line = side_tokens.side, side_tokens.line
        else:
            signed = extract_handicap_line(selection)
            if signed is None:
                signed = extract_handicap_line(market_text)
            if signed is not None:
                line = abs(signed)
                side = MarketSide.POSITIVE if signed >= 0 else MarketSide.NEGATIVE

    market = CanonicalMarket(
        market_type=market_type,
        domain=domain,
        side=side,
        line=line,
        raw_label=raw_label,
        display_name=build_display_name(market_type, domain),
        sport=sport,
        confidence=confidence,
    )
    log.debug(
        "market_parsed",
        sport=sport,
        market_type=market_type.value,
        domain=domain.value if domain else None,
        side=side.value if side else None,
        line=line,
        confidence=confidence.value,
    )
    return market


def format_selection(market: CanonicalMarket) -> str | None:
    """Canonical selection text ("Mais 21.5 Games", "-1.5"), or None if the market has no side/line."""
    if market.side is None or market.line is None or market.domain is None:
        return None
    if market.market_type is MarketType.TOTAL:
        side_label = "Mais" if market.side is MarketSide.OVER else "Menos"
        return f"{side_label} {_format_line(market.line)} {DOMAIN_LABELS[market.domain]}"
    if market.market_type is MarketType.HANDICAP:
        sign = "+" if market.side is MarketSide.POSITIVE else "-"
        return f"{sign}{_format_line(market.line)}"
    return None


def resolve_market_to_option(market: CanonicalMarket, options: Sequence[str] | None = None) -> str:
    """Best matching entry of a UI option list for a parsed market; "Outro" when nothing fits.

    Without options the market list of the parsed sport is used.
    """
    if not options:
        options = get_markets_for_sport(market.sport)
    display = normalize_text(market.display_name)
    domain_label = normalize_text(DOMAIN_LABELS[market.domain]) if market.domain else None
    for option in options:
        if normalize_text(option) == display:
            return option
    for option in options:
        candidate = normalize_text(option)
        if market.market_type is MarketType.TOTAL and domain_label:
            if any(k in candidate for k in ("total", "over", "under")) and domain_label in candidate:
                return option
        if market.market_type is MarketType.HANDICAP and domain_label:
            if any(k in candidate for k in ("handicap", "spread")) and domain_label in candidate:
                return option
        if market.market_type is MarketType.ONE_X_TWO and ("1x2" in candidate or "1 x 2" in candidate):
            return option
        if market.market_type is MarketType.MONEYLINE and ("moneyline" in candidate or "vencedor" in candidate):
            return option
    if "Outro" in options:
        return "Outro"
    return options[0] if options else ""
