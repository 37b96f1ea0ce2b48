"""Spread registry and card catalog reference data."""

from __future__ import annotations

import pytest

from arcana.domain.cards import CardPoolType, get_card_catalog, resolve_pool
from arcana.domain.spreads import (
    DEFAULT_SPREAD_ID,
    SPREADS,
    UnknownSpreadError,
    get_spread,
    position_pool,
)


def test_catalog_holds_a_full_deck():
    catalog = get_card_catalog()

    assert len(catalog) == 78
    assert [card.id for card in catalog] == list(range(78))
    assert catalog.get(0).name_en == "The Fool"


@pytest.mark.parametrize(
    ("pool", "expected"),
    [
        (CardPoolType.MAJOR, 22),
        (CardPoolType.MINOR_PIP, 40),
        (CardPoolType.COURT, 16),
        (CardPoolType.SUIT_CUPS, 14),
        (CardPoolType.SUIT_WANDS, 14),
        (CardPoolType.FULL, 78),
    ],
)
def test_pool_sizes(pool, expected):
    assert len(resolve_pool(pool)) == expected


def test_unknown_pool_name_falls_back_to_full_deck():
    assert CardPoolType.parse("ELEMENTAL") is CardPoolType.FULL
    assert CardPoolType.parse("major") is CardPoolType.MAJOR
    assert len(resolve_pool(None)) == 78


def test_major_cards_carry_traditional_meanings():
    fool = get_card_catalog().get(0)

    assert fool.upright
    assert fool.meaning(True) == fool.reversed


def test_registered_spreads_and_sizes():
    sizes = {spread_id: spread.card_count for spread_id, spread in SPREADS.items()}

    assert sizes == {
        "SINGLE": 1,
        "THREE": 3,
        "FOUR": 4,
        "FIVE": 5,
        "TIMELINE": 5,
        "DIMENSION": 5,
        "CELTIC": 10,
        "RELATIONSHIP": 11,
        "COURT": 3,
        "ACTION_PLAN": 4,
        "KICKING_GOALS": 7,
        "YEARLY": 15,
    }
    assert DEFAULT_SPREAD_ID in SPREADS


def test_get_spread_is_case_insensitive():
    assert get_spread("three") is SPREADS["THREE"]


def test_get_spread_rejects_unknown_ids():
    with pytest.raises(UnknownSpreadError):
        get_spread("NOPE")


def test_position_pool_defaults_outside_the_spread():
    spread = get_spread("SINGLE")

    assert position_pool(spread, 0) is CardPoolType.MAJOR
    assert position_pool(spread, 1) is CardPoolType.FULL
    assert position_pool(spread, -1) is CardPoolType.FULL
