"""Tarot card reference data and pool resolution."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, Mapping

_DATA_PATH = Path(__file__).resolve().parents[1] / "data" / "cards.json"
_SUITS = ("Cups", "Pentacles", "Swords", "Wands")
_COURT_PREFIXES = ("Page", "Knight", "Queen", "King")


class CardPoolType(str, Enum):
    MAJOR = "MAJOR"
    MINOR_PIP = "MINOR_PIP"
    COURT = "COURT"
    FULL = "FULL"
    SUIT_CUPS = "SUIT_CUPS"
    SUIT_PENTACLES = "SUIT_PENTACLES"
    SUIT_SWORDS = "SUIT_SWORDS"
    SUIT_WANDS = "SUIT_WANDS"

    @classmethod
    def parse(cls, value: str | CardPoolType | None) -> "CardPoolType":
        """Return the matching pool, falling back to the full deck."""

        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().upper())
        except ValueError:
            return cls.FULL


_SUIT_NAMES = {
    CardPoolType.SUIT_CUPS: "Cups",
    CardPoolType.SUIT_PENTACLES: "Pentacles",
    CardPoolType.SUIT_SWORDS: "Swords",
    CardPoolType.SUIT_WANDS: "Wands",
}


@dataclass(frozen=True)
class TarotCard:
    """Immutable reference entry for one card of the deck."""

    id: int
    name_en: str
    name_cn: str
    keywords: tuple[str, ...]
    image: str
    description: str | None = None
    upright: str | None = None
    reversed: str | None = None

    @property
    def is_major(self) -> bool:
        return not self.name_en.endswith(tuple(f" of {suit}" for suit in _SUITS))

    @property
    def is_court(self) -> bool:
        return not self.is_major and self.name_en.startswith(_COURT_PREFIXES)

    def meaning(self, is_reversed: bool) -> str | None:
        return self.reversed if is_reversed else self.upright

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "TarotCard":
        return cls(
            id=int(payload["id"]),
            name_en=str(payload["name_en"]),
            name_cn=str(payload["name_cn"]),
            keywords=tuple(payload.get("keywords") or ()),
            image=str(payload["image"]),
            description=payload.get("description"),
            upright=payload.get("upright"),
            reversed=payload.get("reversed"),
        )


class CardCatalog:
    """Ordered, read-only collection of every card in the deck."""

    def __init__(self, cards: Iterable[TarotCard]) -> None:
        self._cards: tuple[TarotCard, ...] = tuple(cards)
        self._by_id = {card.id: card for card in self._cards}
        if len(self._by_id) != len(self._cards):
            raise ValueError("Card identifiers must be unique within a catalog.")

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self):
        return iter(self._cards)

    def __contains__(self, card_id: object) -> bool:
        return card_id in self._by_id

    def get(self, card_id: int) -> TarotCard | None:
        return self._by_id.get(card_id)

    @property
    def cards(self) -> tuple[TarotCard, ...]:
        return self._cards

    def resolve_pool(self, pool: CardPoolType | str | None) -> tuple[TarotCard, ...]:
        """Return the candidate cards for ``pool`` in catalog order."""

        pool_type = CardPoolType.parse(pool)
        if pool_type is CardPoolType.MAJOR:
            return tuple(card for card in self._cards if card.is_major)
        if pool_type is CardPoolType.MINOR_PIP:
            return tuple(
                card for card in self._cards if not card.is_major and not card.is_court
            )
        if pool_type is CardPoolType.COURT:
            return tuple(card for card in self._cards if card.is_court)
        suit = _SUIT_NAMES.get(pool_type)
        if suit is not None:
            return tuple(
                card
                for card in self._cards
                if card.name_en.endswith(f" of {suit}")
            )
        return self._cards


def load_catalog(path: Path = _DATA_PATH) -> CardCatalog:
    """Read a catalog from a JSON array of card objects."""

    with path.open("r", encoding="utf-8") as data_file:
        payload = json.load(data_file)
    return CardCatalog(TarotCard.from_mapping(entry) for entry in payload)


@lru_cache(maxsize=1)
def get_card_catalog() -> CardCatalog:
    """Return the shared full-deck catalog, loaded once per process."""

    return load_catalog()


def resolve_pool(pool: CardPoolType | str | None) -> tuple[TarotCard, ...]:
    """Pool lookup against the shared catalog."""

    return get_card_catalog().resolve_pool(pool)


__all__ = [
    "CardCatalog",
    "CardPoolType",
    "TarotCard",
    "get_card_catalog",
    "load_catalog",
    "resolve_pool",
]
