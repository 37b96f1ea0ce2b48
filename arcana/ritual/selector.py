"""Card pre-commitment and tap-to-target binding.

The full outcome of a ritual is drawn when shuffling begins so the reading
can be generated while the user is still picking. Each later tap only
decides which visual card leaves the cloud; the meaning attached to it is
the next pre-committed draw in position order.
"""

from __future__ import annotations

import logging
import random

from arcana.config.settings import settings
from arcana.domain.cards import CardCatalog, TarotCard, get_card_catalog
from arcana.domain.models import CardDraw, PickedCard
from arcana.domain.spreads import SpreadDefinition, position_pool
from arcana.ritual.session import RitualSession

logger = logging.getLogger(__name__)


def bind_pick(target: CardDraw, visual_id: int) -> PickedCard:
    """Combine a pre-committed draw with the id of the tapped card."""

    return PickedCard(
        card=target.card,
        is_reversed=target.is_reversed,
        position=target.position,
        visual_id=visual_id,
    )


class CardSelector:
    """Draw targets for a spread and consume user taps against them."""

    def __init__(
        self,
        catalog: CardCatalog | None = None,
        *,
        rng: random.Random | None = None,
        reversal_probability: float = settings.ritual.reversal_probability,
    ) -> None:
        self._catalog = catalog or get_card_catalog()
        self._rng = rng or random.Random()
        self._reversal_probability = reversal_probability

    @property
    def catalog(self) -> CardCatalog:
        return self._catalog

    def predetermine(self, spread: SpreadDefinition) -> list[CardDraw]:
        """Draw one card per position, without repeats while the pool allows."""

        targets: list[CardDraw] = []
        chosen_ids: set[int] = set()
        for index in range(spread.card_count):
            pool = self._catalog.resolve_pool(position_pool(spread, index))
            candidates = [card for card in pool if card.id not in chosen_ids]
            if not candidates:
                # Pool exhausted by earlier positions; a repeat is allowed here.
                logger.warning(
                    "Pool for position %s of spread %s exhausted; allowing a repeat draw",
                    index,
                    spread.id,
                )
                candidates = list(pool) or list(self._catalog.cards)
            card = self._rng.choice(candidates)
            chosen_ids.add(card.id)
            targets.append(
                CardDraw(
                    card=card,
                    is_reversed=self._rng.random() < self._reversal_probability,
                    position=index,
                )
            )
        return targets

    def selectable_cards(
        self,
        spread: SpreadDefinition,
        session: RitualSession,
    ) -> tuple[TarotCard, ...]:
        """Cards shown in the cloud for the current step, minus consumed ones."""

        pool = self._catalog.resolve_pool(position_pool(spread, len(session.picked)))
        return tuple(card for card in pool if card.id not in session.consumed_visual_ids)

    def accept_pick(
        self,
        spread: SpreadDefinition,
        session: RitualSession,
        visual_id: int,
    ) -> PickedCard | None:
        """Consume one tap; return the new pick or ``None`` when it is ignored."""

        if len(session.picked) >= spread.card_count:
            logger.debug("Tap on %s ignored: spread already complete", visual_id)
            return None
        if visual_id in session.consumed_visual_ids:
            logger.debug("Tap on %s ignored: card already taken", visual_id)
            return None
        if visual_id not in {card.id for card in self.selectable_cards(spread, session)}:
            logger.debug("Tap on %s ignored: not in the cloud for this step", visual_id)
            return None

        target = session.next_target()
        if target is None:
            logger.warning(
                "No pre-committed target left for position %s (epoch=%s)",
                len(session.picked),
                session.epoch,
            )
            return None

        session.consumed_visual_ids.add(visual_id)
        picked = bind_pick(target, visual_id)
        session.picked.append(picked)
        return picked


__all__ = ["CardSelector", "bind_pick"]
