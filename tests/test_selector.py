"""Pre-commitment draws and tap binding."""

from __future__ import annotations

import random

from arcana.domain.cards import CardCatalog, TarotCard, get_card_catalog
from arcana.domain.models import CardDraw
from arcana.domain.spreads import get_spread
from arcana.ritual.selector import CardSelector, bind_pick
from arcana.ritual.session import RitualSession


def _card(card_id: int, name: str) -> TarotCard:
    return TarotCard(id=card_id, name_en=name, name_cn=name, keywords=("k",), image=f"{card_id}.jpg")


def test_bind_pick_keeps_visual_and_data_identity_apart():
    target = CardDraw(card=get_card_catalog().get(13), is_reversed=True, position=2)

    picked = bind_pick(target, visual_id=40)

    assert picked.visual_id == 40
    assert picked.data_id == 13
    assert picked.is_reversed is True
    assert picked.position == 2


def test_predetermine_draws_distinct_cards_for_each_position():
    selector = CardSelector(rng=random.Random(3))
    spread = get_spread("CELTIC")

    targets = selector.predetermine(spread)

    assert [draw.position for draw in targets] == list(range(10))
    assert len({draw.card.id for draw in targets}) == 10


def test_predetermine_respects_position_pools():
    selector = CardSelector(rng=random.Random(11))

    targets = selector.predetermine(get_spread("DIMENSION"))

    suits = ["Cups", "Pentacles", "Swords", "Wands"]
    for draw, suit in zip(targets, suits):
        assert draw.card.name_en.endswith(f" of {suit}")
    assert targets[4].card.is_major


def test_tiny_pool_allows_repeats_instead_of_failing():
    catalog = CardCatalog([_card(0, "The Fool"), _card(1, "The Magician")])
    selector = CardSelector(catalog, rng=random.Random(5))

    targets = selector.predetermine(get_spread("FIVE"))

    assert len(targets) == 5
    assert {draw.card.id for draw in targets} <= {0, 1}
    assert {draw.card.id for draw in targets[:2]} == {0, 1}


def test_reversal_probability_bounds():
    spread = get_spread("YEARLY")

    upright = CardSelector(rng=random.Random(1), reversal_probability=0.0).predetermine(spread)
    reversed_ = CardSelector(rng=random.Random(1), reversal_probability=1.0).predetermine(spread)

    assert not any(draw.is_reversed for draw in upright)
    assert all(draw.is_reversed for draw in reversed_)


def test_accept_pick_ignores_unknown_consumed_and_surplus_taps():
    selector = CardSelector(rng=random.Random(2))
    spread = get_spread("SINGLE")
    session = RitualSession(question="", spread_id=spread.id, epoch=1)
    session.targets = selector.predetermine(spread)

    assert selector.accept_pick(spread, session, 999) is None
    first = selector.accept_pick(spread, session, 4)
    assert first is not None
    assert first.data_id == session.targets[0].card.id
    assert selector.accept_pick(spread, session, 4) is None
    assert selector.accept_pick(spread, session, 5) is None
    assert len(session.picked) == 1


def test_tap_outside_the_current_cloud_is_ignored():
    selector = CardSelector(rng=random.Random(4))
    spread = get_spread("SINGLE")
    session = RitualSession(question="", spread_id=spread.id, epoch=1)
    session.targets = selector.predetermine(spread)
    cloud = {card.id for card in selector.selectable_cards(spread, session)}
    minor = next(card.id for card in get_card_catalog() if card.id not in cloud)

    assert selector.accept_pick(spread, session, minor) is None
    assert session.picked == []
    assert minor not in session.consumed_visual_ids
    assert selector.accept_pick(spread, session, min(cloud)) is not None


def test_selectable_cards_follow_the_current_step_pool():
    selector = CardSelector(rng=random.Random(8))
    spread = get_spread("COURT")
    session = RitualSession(question="", spread_id=spread.id, epoch=1)
    session.targets = selector.predetermine(spread)

    pips = selector.selectable_cards(spread, session)
    assert len(pips) == 40
    selector.accept_pick(spread, session, pips[0].id)
    court = selector.selectable_cards(spread, session)
    assert len(court) == 16
    assert all(card.is_court for card in court)
