"""Sport domain rule table - valid market domains per sport and sport detection."""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType

from surebetcore.models.market import BetModel, Confidence, MarketDomain
from surebetcore.ocr.text import normalize_text

GENERIC_SPORT = "Outro"


@dataclass(frozen=True)
class SportRule:
    """Ordered domains for a sport; the first one is the default."""

    name: str
    domains: tuple[MarketDomain, ...]
    aliases: tuple[str, ...] = ()

    @property
    def default_domain(self) -> MarketDomain:
        return self.domains[0] if self.domains else MarketDomain.GENERIC


D = MarketDomain

_RULES = (
    SportRule("Futebol", (D.GOALS, D.CORNERS, D.CARDS), ("soccer", "football", "futebol", "fut")),
    SportRule("Tênis", (D.GAMES, D.SETS, D.ACES), ("tennis", "tenis", "atp", "wta")),
    SportRule("Basquete", (D.POINTS,), ("basketball", "basquete", "basket", "nba")),
    SportRule("Futebol Americano", (D.POINTS,), ("american football", "futebol americano", "nfl")),
    SportRule("Hockey", (D.GOALS,), ("ice hockey", "hoquei", "hockey", "nhl")),
    SportRule("Vôlei", (D.POINTS, D.SETS), ("volleyball", "voleibol", "volei")),
    SportRule("Baseball", (D.RUNS,), ("baseball", "beisebol", "mlb")),
    SportRule("MMA/UFC", (D.ROUNDS,), ("mma", "ufc", "luta", "fight")),
    SportRule("Boxe", (D.ROUNDS,), ("boxing", "boxe", "boxeo")),
    SportRule("League of Legends", (D.MAPS, D.KILLS, D.TOWERS), ("league of legends", "lol")),
    SportRule("Counter-Strike", (D.MAPS, D.ROUNDS), ("counter strike", "csgo", "cs2", "cs")),
    SportRule("Dota 2", (D.MAPS, D.KILLS, D.TOWERS), ("dota",)),
    SportRule("eFootball", (D.GOALS,), ("efootball", "e-football", "pes", "fifa", "ea fc")),
    # Unknown sports accept any explicit domain but default to GENERIC.
    SportRule(GENERIC_SPORT, (D.GENERIC, *(d for d in D if d is not D.GENERIC)), ("outro", "other")),
)

SPORT_RULES = MappingProxyType({rule.name: rule for rule in _RULES})

# English/abbreviated names accepted as exact keys of the rule table.
_EXACT_KEYS = MappingProxyType({
    **{normalize_text(rule.name): rule.name for rule in _RULES},
    "soccer": "Futebol",
    "tennis": "Tênis",
    "basketball": "Basquete",
    "nba": "Basquete",
    "nfl": "Futebol Americano",
    "nhl": "Hockey",
    "mlb": "Baseball",
    "volleyball": "Vôlei",
    "mma": "MMA/UFC",
    "ufc": "MMA/UFC",
    "boxing": "Boxe",
})

# Longest aliases first so "futebol americano" wins over "fut".
_ALIASES = tuple(
    sorted(
        ((normalize_text(alias), rule.name) for rule in _RULES for alias in rule.aliases),
        key=lambda pair: len(pair[0]),
        reverse=True,
    )
)


def _alias_matches(alias: str, text: str) -> bool:
    if len(alias) <= 3:
        return re.search(rf"(?<![a-z0-9]){re.escape(alias)}(?![a-z0-9])", text) is not None
    return alias in text


def normalize_sport(raw_sport: object) -> tuple[str, Confidence]:
    """Map a free-text sport label to a rule-table sport. Unknown → generic sport."""
    text = normalize_text(raw_sport)
    if not text:
        return GENERIC_SPORT, Confidence.NONE
    exact = _EXACT_KEYS.get(text)
    if exact is not None:
        return exact, Confidence.EXACT
    for alias, sport in _ALIASES:
        if _alias_matches(alias, text):
            return sport, Confidence.HIGH
    return GENERIC_SPORT, Confidence.LOW


def get_sport_rule(sport: str) -> SportRule:
    return SPORT_RULES.get(sport) or SPORT_RULES[GENERIC_SPORT]


def get_domains_for_sport(sport: str) -> tuple[MarketDomain, ...]:
    return get_sport_rule(sport).domains


def get_default_domain_for_sport(sport: str) -> MarketDomain:
    return get_sport_rule(sport).default_domain


# Top markets per sport, in the order the UI lists them.
MARKETS_BY_SPORT = MappingProxyType({
    "Futebol": (
        "1X2", "Dupla Chance", "Ambas Marcam", "Over/Under Gols", "Handicap Asiático",
        "Resultado do 1º Tempo", "Over/Under Escanteios", "Handicap de Gols",
        "Resultado Final + Gols", "Placar Correto", "Outro",
    ),
    "Basquete": (
        "Moneyline", "Handicap / Spread", "Over/Under Pontos", "Total por Equipe",
        "Resultado 1º Tempo", "Resultado Tempo Regulamentar", "Resultado por Quarto",
        "Handicap 1º Tempo", "Over/Under 1º Tempo", "Props de Jogadores", "Same Game Parlay", "Outro",
    ),
    "Tênis": (
        "Vencedor da Partida", "Handicap de Games", "Over/Under Games", "Vencedor do Set",
        "Placar Exato", "Total de Sets", "Handicap de Sets", "Vencedor do 1º Set",
        "Tie-break (Sim/Não)", "Sets Ímpares/Pares", "Outro",
    ),
    "Baseball": (
        "Moneyline", "Run Line", "Total de Runs", "Total por Equipe", "Resultado após 9 Innings",
        "Resultado 5 Innings", "Resultado por Inning", "1ª Metade", "Handicap",
        "Props de Arremessadores", "Odd/Even Runs", "Hits Totais", "Outro",
    ),
    "Hockey": (
        "Moneyline", "Puck Line", "Total de Gols", "Resultado Tempo Regulamentar",
        "Resultado por Período", "Handicap", "Total por Equipe", "1º Período",
        "Margem de Vitória", "Over/Under Períodos", "Gols Ímpares/Pares", "Outro",
    ),
    "Futebol Americano": (
        "Moneyline", "Spread", "Total de Pontos", "Resultado Tempo Regulamentar",
        "Resultado 1º Tempo", "Handicap 1º Tempo", "Props de Jogadores", "Total por Equipe",
        "Touchdowns", "Margem de Vitória", "Same Game Parlay", "Outro",
    ),
    "Vôlei": (
        "Vencedor da Partida", "Handicap de Sets", "Over/Under Sets", "Total de Pontos",
        "Resultado por Set", "Placar Exato (Sets)", "Handicap de Pontos", "Primeiro Set",
        "Over/Under Pontos Set", "Sets Ímpares/Pares", "Outro",
    ),
    "MMA/UFC": (
        "Vencedor da Luta", "Método de Vitória", "Round da Finalização", "Over/Under Rounds",
        "Luta Completa (Sim/Não)", "Vitória por KO", "Vitória por Decisão", "Handicap de Rounds",
        "Round 1 - Vencedor", "Prop Especial", "Outro",
    ),
    "Boxe": (
        "Vencedor da Luta", "Método de Vitória", "Round da Finalização", "Over/Under Rounds",
        "Luta Completa (Sim/Não)", "Vitória por KO", "Vitória por Decisão", "Handicap de Rounds",
        "Round 1 - Vencedor", "Prop Especial", "Outro",
    ),
    "League of Legends": (
        "Vencedor do Mapa", "Handicap de Mapas", "Total de Mapas", "Vencedor da Série",
        "Placar Exato", "Over/Under Kills", "Primeiro Objetivo", "Total de Torres",
        "Handicap de Kills", "Props Especiais", "Outro",
    ),
    "Counter-Strike": (
        "Vencedor do Mapa", "Handicap de Mapas", "Total de Mapas", "Vencedor da Série",
        "Placar Exato", "Over/Under Rounds", "Primeiro a 10 Rounds", "Total de Kills",
        "Handicap de Rounds", "Props Especiais", "Outro",
    ),
    "Dota 2": (
        "Vencedor do Mapa", "Handicap de Mapas", "Total de Mapas", "Vencedor da Série",
        "Placar Exato", "Over/Under Kills", "Primeiro Objetivo", "Total de Torres",
        "Handicap de Kills", "Props Especiais", "Outro",
    ),
    "eFootball": (
        "Vencedor da Partida", "Handicap de Gols", "Over/Under Gols", "Ambas Marcam",
        "Resultado do 1º Tempo", "Placar Correto", "Dupla Chance", "Total de Escanteios",
        "Margem de Vitória", "Props Especiais", "Outro",
    ),
    GENERIC_SPORT: ("Vencedor", "Over", "Under", "Handicap", "Outro"),
})

# Markets that can end in a draw, so they are played as 1-X-2. Sports not listed never draw.
DRAW_MARKETS_BY_SPORT = MappingProxyType({
    "Futebol": frozenset({"1X2", "Resultado Final", "Dupla Chance", "Resultado do 1º Tempo"}),
    "Basquete": frozenset({"Resultado Tempo Regulamentar", "Resultado 1º Tempo", "Resultado por Quarto"}),
    "Hockey": frozenset({"Resultado Tempo Regulamentar", "Resultado por Período"}),
    "Baseball": frozenset({"Resultado após 9 Innings", "Resultado 5 Innings", "Resultado por Inning"}),
    "Futebol Americano": frozenset({"Resultado Tempo Regulamentar", "Resultado 1º Tempo"}),
    "eFootball": frozenset({"1X2", "Resultado do 1º Tempo", "Dupla Chance"}),
})


def get_markets_for_sport(sport: str) -> tuple[str, ...]:
    return MARKETS_BY_SPORT.get(sport) or MARKETS_BY_SPORT[GENERIC_SPORT]


def market_admits_draw(market: str, sport: str) -> bool:
    return market in DRAW_MARKETS_BY_SPORT.get(sport, frozenset())


def get_model_for_market(market: str, sport: str) -> BetModel:
    """1-X-2 when the market can end in a draw for that sport, else 1-2."""
    return BetModel.THREE_WAY if market_admits_draw(market, sport) else BetModel.TWO_WAY


def is_market_compatible_with_model(market: str, model: BetModel, sport: str) -> bool:
    """An empty market fits any model."""
    if not market:
        return True
    return get_model_for_market(market, sport) is model


def get_markets_for_sport_and_model(sport: str, model: BetModel) -> tuple[str, ...]:
    return tuple(m for m in get_markets_for_sport(sport) if get_model_for_market(m, sport) is model)
