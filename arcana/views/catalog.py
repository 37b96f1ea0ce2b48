"""Schemas for the card and spread reference data."""

from typing import List, Optional

from pydantic import BaseModel, Field

from arcana.domain.cards import TarotCard
from arcana.domain.spreads import PositionSpec, SpreadDefinition


class CardSummary(BaseModel):
    """Card identity as shown on the table."""

    id: int = Field(..., description="Catalog id, stable across sessions")
    name_en: str
    name_cn: str
    image: str

    @classmethod
    def from_card(cls, card: TarotCard) -> "CardSummary":
        return cls(id=card.id, name_en=card.name_en, name_cn=card.name_cn, image=card.image)


class CardDetail(CardSummary):
    """Full library entry for one card."""

    keywords: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    upright: Optional[str] = Field(None, description="Traditional upright meaning")
    reversed: Optional[str] = Field(None, description="Traditional reversed meaning")
    is_major: bool

    @classmethod
    def from_card(cls, card: TarotCard) -> "CardDetail":
        return cls(
            id=card.id,
            name_en=card.name_en,
            name_cn=card.name_cn,
            image=card.image,
            keywords=list(card.keywords),
            description=card.description,
            upright=card.upright,
            reversed=card.reversed,
            is_major=card.is_major,
        )


class PositionResponse(BaseModel):
    label: str
    pool: str = Field(..., description="Card pool the position draws from")
    x: Optional[float] = Field(None, description="Horizontal offset for absolute layouts")
    y: Optional[float] = Field(None, description="Vertical offset for absolute layouts")
    rotation: float = 0.0
    label_position: str = "bottom"
    z_index: Optional[int] = None

    @classmethod
    def from_spec(cls, spec: PositionSpec) -> "PositionResponse":
        return cls(
            label=spec.label,
            pool=spec.pool.value,
            x=spec.x,
            y=spec.y,
            rotation=spec.rotation,
            label_position=spec.label_position,
            z_index=spec.z_index,
        )


class SpreadResponse(BaseModel):
    """Spread definition with its position layout."""

    id: str
    name: str
    description: str
    layout_type: str = Field(..., description="flex or absolute")
    card_count: int
    positions: List[PositionResponse]
    default_questions: List[str] = Field(default_factory=list)

    @classmethod
    def from_definition(cls, spread: SpreadDefinition) -> "SpreadResponse":
        return cls(
            id=spread.id,
            name=spread.name,
            description=spread.description,
            layout_type=spread.layout_type,
            card_count=spread.card_count,
            positions=[PositionResponse.from_spec(spec) for spec in spread.positions],
            default_questions=list(spread.default_questions),
        )
