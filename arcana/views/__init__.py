"""Pydantic schemas used as views in the MVC architecture."""

from .catalog import CardDetail, CardSummary, PositionResponse, SpreadResponse
from .common import NOT_FOUND_RESPONSE, ErrorResponse
from .ritual import (
    CardSelectionRequest,
    CardSelectionResponse,
    PickedCardResponse,
    QuestionRequest,
    RevealRequest,
    RitualActionResponse,
    RitualStateResponse,
    SpreadSelectionRequest,
)

__all__ = [
    "CardDetail",
    "CardSelectionRequest",
    "CardSelectionResponse",
    "CardSummary",
    "ErrorResponse",
    "NOT_FOUND_RESPONSE",
    "PickedCardResponse",
    "PositionResponse",
    "QuestionRequest",
    "RevealRequest",
    "RitualActionResponse",
    "RitualStateResponse",
    "SpreadResponse",
    "SpreadSelectionRequest",
]
