"""OCR market parsing: sport detection, tokenization, domains, canonical markets."""

from __future__ import annotations

import random

import pytest
from pydantic import ValidationError

from surebetcore.models import BetModel, CanonicalMarket, Confidence, MarketDomain, MarketSide, MarketType
from surebetcore.ocr import (
    format_selection,
    normalize_sport,
    parse_market,
    resolve_domain,
    resolve_market_to_option,
    tokenize_market,
)
from surebetcore.ocr.sports import (
    get_default_domain_for_sport,
    get_domains_for_sport,
    get_markets_for_sport,
    get_markets_for_sport_and_model,
    get_model_for_market,
    is_market_compatible_with_model,
    market_admits_draw,
)


def test_tennis_games_total():
    market = parse_market("Tênis", "Mais 21.5 games")
    assert market.market_type is MarketType.TOTAL
    assert market.domain is MarketDomain.GAMES
    assert market.side is MarketSide.OVER
    assert market.line == 21.5
    assert market.display_name == "Over/Under Games"
    assert market.sport == "Tênis"
    assert market.confidence is Confidence.HIGH
    assert format_selection(market) == "Mais 21.5 Games"


def test_total_without_domain_word_uses_sport_default():
    market = parse_market("Futebol", "Over 2.5")
    assert market.domain is MarketDomain.GOALS
    assert market.side is MarketSide.OVER
    assert market.line == 2.5
    assert market.display_name == "Over/Under Gols"
    assert market.confidence is Confidence.MEDIUM


def test_domain_restricted_to_sport():
    market = parse_market("Basquete", "Mais 2.5 gols")
    assert market.domain is MarketDomain.POINTS
    assert MarketDomain.GOALS not in get_domains_for_sport("Basquete")
    assert get_default_domain_for_sport("Basquete") is MarketDomain.POINTS
    assert get_default_domain_for_sport("Xadrez") is MarketDomain.GENERIC


def test_secondary_domain_is_detected():
    market = parse_market("Tennis", "Total de Sets", "Over 2.5")
    assert market.sport == "Tênis"
    assert market.domain is MarketDomain.SETS
    assert market.side is MarketSide.OVER
    assert market.line == 2.5

    corners = parse_market("Futebol", "Total de Escanteios", "Menos 9,5")
    assert corners.domain is MarketDomain.CORNERS
    assert corners.side is MarketSide.UNDER
    assert corners.line == 9.5
    assert format_selection(corners) == "Menos 9.5 Escanteios"


def test_over_under_market_with_under_selection():
    market = parse_market("Futebol", "Over/Under Gols", "Menos 2.5")
    assert market.market_type is MarketType.TOTAL
    assert market.side is MarketSide.UNDER
    assert market.line == 2.5
    assert market.domain is MarketDomain.GOALS
    assert market.confidence is Confidence.HIGH


def test_generic_sport():
    market = parse_market("Curling", "Over 5.5")
    assert market.sport == "Outro"
    assert market.domain is MarketDomain.GENERIC
    assert market.display_name == "Over/Under"

    points = parse_market("Curling", "Total de pontos", "Mais 5.5")
    assert points.domain is MarketDomain.POINTS


def test_handicap_with_signed_line():
    market = parse_market("Futebol", "Handicap Asiático", "Flamengo (-1.5)")
    assert market.market_type is MarketType.HANDICAP
    assert market.domain is MarketDomain.GOALS
    assert market.side is MarketSide.NEGATIVE
    assert market.line == 1.5
    assert market.display_name == "Handicap de Gols"
    assert format_selection(market) == "-1.5"


def test_handicap_positive_line():
    market = parse_market("Basquete", "Spread", "Lakers +4.5")
    assert market.market_type is MarketType.HANDICAP
    assert market.domain is MarketDomain.POINTS
    assert market.side is MarketSide.POSITIVE
    assert market.line == 4.5
    assert format_selection(market) == "+4.5"


@pytest.mark.parametrize(
    "text,expected",
    [
        ("1x2", MarketType.ONE_X_TWO),
        ("Resultado Final", MarketType.ONE_X_TWO),
        ("Vencedor", MarketType.MONEYLINE),
        ("Ambas Marcam", MarketType.BTTS),
        ("Dupla Chance", MarketType.DOUBLE_CHANCE),
        ("Draw No Bet", MarketType.DNB),
        ("Placar Exato", MarketType.CORRECT_SCORE),
    ],
)
def test_non_total_market_types(text, expected):
    market = parse_market("Futebol", text)
    assert market.market_type is expected
    assert market.domain is None
    assert market.side is None
    assert market.line is None


def test_team_name_with_u21_is_not_an_under():
    market = parse_market("Futebol", "Resultado Final", "Brasil U21")
    assert market.market_type is MarketType.ONE_X_TWO
    assert market.side is None


def test_unknown_market_is_other_low():
    market = parse_market("Futebol", "Especial do jogo")
    assert market.market_type is MarketType.OTHER
    assert market.confidence is Confidence.LOW
    assert market.display_name == "Outro"
    assert format_selection(market) is None


@pytest.mark.parametrize(
    "sport,text,selection",
    [
        (None, None, None),
        ("", "", ""),
        ("???", "@@##", "!!"),
        (123, 4.5, 0),
        ("Futebol", "mais mais menos", "over under"),
        ("Tênis", "over/under", ""),
        ("Basquete", "Total", "o/u"),
        ("Outro", "< >", "+-"),
    ],
)
def test_parse_market_never_raises(sport, text, selection):
    market = parse_market(sport, text, selection)
    if market.market_type.requires_domain:
        assert market.domain is not None
    if market.side is not None or market.line is not None:
        assert market.domain is not None


def test_canonical_market_requires_domain():
    with pytest.raises(ValidationError):
        CanonicalMarket(market_type=MarketType.TOTAL, side=MarketSide.OVER, line=2.5)
    with pytest.raises(ValidationError):
        CanonicalMarket(market_type=MarketType.OTHER, line=2.5)
    ok = CanonicalMarket(market_type=MarketType.TOTAL, domain=MarketDomain.GOALS, line=2.5)
    assert ok.domain is MarketDomain.GOALS


def test_tokenize_market():
    assert tokenize_market("o2.5").side is MarketSide.OVER
    assert tokenize_market("o2.5").line == 2.5
    tokens = tokenize_market("Acima de 3,5 gols")
    assert tokens.side is MarketSide.OVER
    assert tokens.line == 3.5
    assert tokens.words == ("gols",)
    assert tokenize_market("U21 Brasil").side is None
    assert tokenize_market("Over/Under").side is None
    under = tokenize_market("Under")
    assert under.side is MarketSide.UNDER
    assert under.line is None


def test_resolve_domain():
    assert resolve_domain("Futebol", "total de escanteios") == (MarketDomain.CORNERS, True)
    assert resolve_domain("Futebol", "totalgols") == (MarketDomain.GOALS, True)
    assert resolve_domain("Futebol", "") == (MarketDomain.GOALS, False)
    assert resolve_domain("Desconhecido", "") == (MarketDomain.GENERIC, False)


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("Tênis", ("Tênis", Confidence.EXACT)),
        ("tenis", ("Tênis", Confidence.EXACT)),
        ("Soccer", ("Futebol", Confidence.EXACT)),
        ("NBA", ("Basquete", Confidence.EXACT)),
        ("Premier League - Soccer", ("Futebol", Confidence.HIGH)),
        ("Futebol Americano - NFL", ("Futebol Americano", Confidence.HIGH)),
        ("Curling", ("Outro", Confidence.LOW)),
        ("", ("Outro", Confidence.NONE)),
        (None, ("Outro", Confidence.NONE)),
    ],
)
def test_normalize_sport(raw, expected):
    assert normalize_sport(raw) == expected


def test_resolve_market_to_option():
    market = parse_market("Tênis", "Mais 21.5 games")
    assert resolve_market_to_option(market, ["1x2", "Total de Games", "Outro"]) == "Total de Games"
    assert resolve_market_to_option(market, ["Over/Under Games", "Total de Games"]) == "Over/Under Games"
    other = parse_market("Futebol", "Especial do jogo")
    assert resolve_market_to_option(other, ["1x2", "Outro"]) == "Outro"
    assert resolve_market_to_option(other, []) == "Outro"


def test_trailing_sign_sides_on_totals():
    over = parse_market("Basquete", "Total de pontos", "21.5+")
    assert over.market_type is MarketType.TOTAL
    assert over.side is MarketSide.OVER
    assert over.line == 21.5
    assert over.domain is MarketDomain.POINTS
    assert over.confidence is Confidence.HIGH

    under = parse_market("Futebol", "Total de Gols", "2,5-")
    assert under.side is MarketSide.UNDER
    assert under.line == 2.5
    assert format_selection(under) == "Menos 2.5 Gols"


def test_signed_selection_stays_handicap():
    market = parse_market("Futebol", "Handicap", "Flamengo +1.5")
    assert market.market_type is MarketType.HANDICAP
    assert market.side is MarketSide.POSITIVE
    assert market.line == 1.5
    assert tokenize_market("21.5+").side is None


def test_resolve_against_sport_market_list():
    assert resolve_market_to_option(parse_market("Tênis", "Mais 21.5 games")) == "Over/Under Games"
    assert resolve_market_to_option(parse_market("Futebol", "1x2")) == "1X2"
    assert resolve_market_to_option(parse_market("Futebol", "Handicap", "Flamengo -1.5")) == "Handicap de Gols"
    assert resolve_market_to_option(parse_market("Curling", "Especial")) == "Outro"


def test_markets_for_sport():
    assert "Over/Under Games" in get_markets_for_sport("Tênis")
    assert get_markets_for_sport("Xadrez") == get_markets_for_sport("Outro")
    assert all(markets[-1] == "Outro" for markets in map(get_markets_for_sport, ("Futebol", "Dota 2")))


def test_draw_admission_by_sport():
    assert market_admits_draw("1X2", "Futebol")
    assert not market_admits_draw("1X2", "Tênis")
    assert market_admits_draw("Resultado Tempo Regulamentar", "Basquete")
    assert not market_admits_draw("Moneyline", "Basquete")
    assert get_model_for_market("Dupla Chance", "Futebol") is BetModel.THREE_WAY
    assert get_model_for_market("Vencedor da Partida", "Tênis") is BetModel.TWO_WAY
    assert is_market_compatible_with_model("", BetModel.THREE_WAY, "Tênis")
    assert not is_market_compatible_with_model("Moneyline", BetModel.THREE_WAY, "Hockey")
    assert get_markets_for_sport_and_model("Hockey", BetModel.THREE_WAY) == (
        "Resultado Tempo Regulamentar",
        "Resultado por Período",
    )
    assert get_markets_for_sport_and_model("Tênis", BetModel.THREE_WAY) == ()


_FRAGMENTS = (
    "over", "under", "mais", "menos", "o", "u", "+", "-", ">", "<", "/", "x", "(", ")",
    "2.5", "21,5", "gols", "games", "pontos", "sets", "handicap", "total", "1x2", "ç", "é", " ",
)
_SPORT_LABELS = ("Futebol", "Tênis", "Basquete", "Vôlei", "LoL", "Counter-Strike", "Curling", "", "⚽")


def _random_text(rng: random.Random) -> str:
    parts = []
    for _ in range(rng.randint(0, 8)):
        if rng.random() < 0.5:
            parts.append(rng.choice(_FRAGMENTS))
        else:
            parts.append("".join(chr(rng.randint(0x20, 0x2FFF)) for _ in range(rng.randint(1, 4))))
    return "".join(parts)


def test_random_unicode_keeps_domain_within_sport():
    rng = random.Random(20240501)
    for _ in range(2000):
        sport = rng.choice(_SPORT_LABELS) if rng.random() < 0.7 else _random_text(rng)
        market = parse_market(sport, _random_text(rng), _random_text(rng))
        if market.market_type.requires_domain:
            assert market.domain in get_domains_for_sport(market.sport)
        if market.side is not None or market.line is not None:
            assert market.domain is not None
