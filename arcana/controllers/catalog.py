"""Reference data endpoints: the card library and spread layouts."""

from typing import Optional

from fastapi import APIRouter, HTTPException, status

from arcana.domain.cards import CardPoolType, get_card_catalog
from arcana.domain.spreads import SPREADS, UnknownSpreadError, get_spread
from arcana.views import NOT_FOUND_RESPONSE, CardDetail, SpreadResponse

router = APIRouter(tags=["catalog"])


@router.get("/spreads", response_model=list[SpreadResponse])
async def list_spreads() -> list[SpreadResponse]:
    """Return every registered spread in display order."""

    return [SpreadResponse.from_definition(spread) for spread in SPREADS.values()]


@router.get(
    "/spreads/{spread_id}",
    response_model=SpreadResponse,
    responses=NOT_FOUND_RESPONSE,
)
async def read_spread(spread_id: str) -> SpreadResponse:
    try:
        spread = get_spread(spread_id)
    except UnknownSpreadError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown spread '{spread_id}'",
        ) from None
    return SpreadResponse.from_definition(spread)


@router.get("/cards", response_model=list[CardDetail])
async def list_cards(pool: Optional[str] = None) -> list[CardDetail]:
    """Return the library, optionally restricted to one card pool."""

    catalog = get_card_catalog()
    cards = catalog.resolve_pool(CardPoolType.parse(pool)) if pool else catalog.cards
    return [CardDetail.from_card(card) for card in cards]


@router.get(
    "/cards/{card_id}",
    response_model=CardDetail,
    responses=NOT_FOUND_RESPONSE,
)
async def read_card(card_id: int) -> CardDetail:
    card = get_card_catalog().get(card_id)
    if card is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Card not found",
        )
    return CardDetail.from_card(card)
