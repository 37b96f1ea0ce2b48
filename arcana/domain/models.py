"""Value objects shared by the selector, the pipeline and the HTTP layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from arcana.domain.cards import TarotCard


class RitualPhase(str, Enum):
    INTRO = "INTRO"
    INPUT = "INPUT"
    SHUFFLING = "SHUFFLING"
    PICKING = "PICKING"
    READING = "READING"
    LIBRARY = "LIBRARY"


@dataclass(frozen=True)
class CardDraw:
    """A pre-committed outcome for one spread position."""

    card: TarotCard
    is_reversed: bool
    position: int


@dataclass(frozen=True)
class PickedCard:
    """A drawn card bound to the card instance the user tapped.

    ``visual_id`` drives animation and removal from the selectable cloud;
    ``card`` and ``is_reversed`` carry the meaning the reading is based on.
    """

    card: TarotCard
    is_reversed: bool
    position: int
    visual_id: int

    @property
    def data_id(self) -> int:
        return self.card.id


__all__ = ["CardDraw", "PickedCard", "RitualPhase"]
