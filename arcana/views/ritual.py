"""Schemas for driving and observing a ritual session."""

from typing import List, Optional

from pydantic import BaseModel, Field

from arcana.domain.models import PickedCard
from arcana.ritual.engine import RitualEngine
from arcana.views.catalog import CardSummary


class SpreadSelectionRequest(BaseModel):
    spread_id: str = Field(..., description="Identifier of a registered spread, e.g. THREE")


class QuestionRequest(BaseModel):
    question: str = Field("", description="Free-text question; may be empty")


class CardSelectionRequest(BaseModel):
    visual_id: int = Field(..., description="Id of the card instance the user tapped")


class RevealRequest(BaseModel):
    position: int = Field(..., ge=0, description="Spread position to turn face up")


class PickedCardResponse(BaseModel):
    """A picked card; ``visual_id`` and ``data_id`` may differ."""

    position: int
    label: str
    visual_id: int
    data_id: int
    card: CardSummary
    is_reversed: bool
    revealed: bool

    @classmethod
    def from_pick(cls, picked: PickedCard, *, label: str, revealed: bool) -> "PickedCardResponse":
        return cls(
            position=picked.position,
            label=label,
            visual_id=picked.visual_id,
            data_id=picked.data_id,
            card=CardSummary.from_card(picked.card),
            is_reversed=picked.is_reversed,
            revealed=revealed,
        )


class RitualStateResponse(BaseModel):
    """Everything a client renders for the current ritual."""

    client_id: str
    phase: str
    previous_phase: Optional[str] = None
    epoch: int
    spread_id: str
    question: str
    active_pool: List[CardSummary] = Field(default_factory=list)
    picked: List[PickedCardResponse] = Field(default_factory=list)
    thinking: bool = False
    thinking_phrases: List[str] = Field(default_factory=list)
    reading_text: str = ""
    has_audio: bool = False
    audio_playing: bool = False

    @classmethod
    def from_engine(cls, client_id: str, engine: RitualEngine) -> "RitualStateResponse":
        session = engine.session
        spread = engine.spread
        labels = spread.labels
        revealed = engine.revealed_positions
        picked = [
            PickedCardResponse.from_pick(
                item,
                label=labels[item.position] if item.position < len(labels) else "",
                revealed=item.position in revealed,
            )
            for item in engine.picked_cards
        ]
        return cls(
            client_id=client_id,
            phase=engine.phase.value,
            previous_phase=engine.previous_phase.value if engine.previous_phase else None,
            epoch=engine.epoch,
            spread_id=session.spread_id if session is not None else spread.id,
            question=session.question if session is not None else engine.question,
            active_pool=[CardSummary.from_card(card) for card in engine.active_pool],
            picked=picked,
            thinking=engine.is_thinking,
            thinking_phrases=list(engine.thinking_phrases) if engine.is_thinking else [],
            reading_text=engine.reading_text,
            has_audio=engine.reading_audio is not None,
            audio_playing=engine.is_audio_playing,
        )


class RitualActionResponse(BaseModel):
    """Result of an action; ``accepted`` is false when the phase ignored it."""

    accepted: bool
    state: RitualStateResponse


class CardSelectionResponse(RitualActionResponse):
    picked: Optional[PickedCardResponse] = None
    reveal_delay_seconds: Optional[float] = Field(
        None, description="Pause before the reveal animation, set on the final pick"
    )
