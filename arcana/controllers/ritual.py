"""Ritual endpoints: one engine per client, driven by discrete actions."""

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import Response

from arcana.controllers.dependencies import EngineDep, RegistryDep
from arcana.domain.spreads import UnknownSpreadError
from arcana.ritual.engine import RitualEngine
from arcana.views import (
    NOT_FOUND_RESPONSE,
    CardSelectionRequest,
    CardSelectionResponse,
    PickedCardResponse,
    QuestionRequest,
    RevealRequest,
    RitualActionResponse,
    RitualStateResponse,
    SpreadSelectionRequest,
)

router = APIRouter(prefix="/rituals", tags=["rituals"])


def _action(client_id: str, engine: RitualEngine, accepted: bool) -> RitualActionResponse:
    return RitualActionResponse(
        accepted=accepted,
        state=RitualStateResponse.from_engine(client_id, engine),
    )


@router.post(
    "",
    response_model=RitualStateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_ritual(registry: RegistryDep) -> RitualStateResponse:
    """Register a new client and return its initial (INTRO) state."""

    client_id, engine = registry.create()
    return RitualStateResponse.from_engine(client_id, engine)


@router.get(
    "/{client_id}",
    response_model=RitualStateResponse,
    responses=NOT_FOUND_RESPONSE,
)
async def read_ritual(client_id: str, engine: EngineDep) -> RitualStateResponse:
    return RitualStateResponse.from_engine(client_id, engine)


@router.delete(
    "/{client_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=NOT_FOUND_RESPONSE,
)
async def delete_ritual(client_id: str, registry: RegistryDep) -> Response:
    """Close the client's engine, stopping its voice and ambient drone."""

    if not await registry.remove(client_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Ritual session not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{client_id}/enter",
    response_model=RitualActionResponse,
    responses=NOT_FOUND_RESPONSE,
)
async def enter_ritual(client_id: str, engine: EngineDep) -> RitualActionResponse:
    return _action(client_id, engine, engine.enter())


@router.post(
    "/{client_id}/spread",
    response_model=RitualActionResponse,
    responses=NOT_FOUND_RESPONSE,
)
async def select_spread(
    client_id: str,
    payload: SpreadSelectionRequest,
    engine: EngineDep,
) -> RitualActionResponse:
    try:
        accepted = engine.select_spread(payload.spread_id)
    except UnknownSpreadError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown spread '{payload.spread_id}'",
        ) from None
    return _action(client_id, engine, accepted)


@router.post(
    "/{client_id}/question",
    response_model=RitualActionResponse,
    responses=NOT_FOUND_RESPONSE,
)
async def change_question(
    client_id: str,
    payload: QuestionRequest,
    engine: EngineDep,
) -> RitualActionResponse:
    return _action(client_id, engine, engine.change_question(payload.question))


@router.post(
    "/{client_id}/start",
    response_model=RitualActionResponse,
    responses=NOT_FOUND_RESPONSE,
)
async def start_ritual(client_id: str, engine: EngineDep) -> RitualActionResponse:
    """Begin shuffling; the draw is committed and generation starts now."""

    return _action(client_id, engine, engine.start_ritual())


@router.post(
    "/{client_id}/select",
    response_model=CardSelectionResponse,
    responses=NOT_FOUND_RESPONSE,
)
async def select_card(
    client_id: str,
    payload: CardSelectionRequest,
    engine: EngineDep,
) -> CardSelectionResponse:
    picked = engine.select_card(payload.visual_id)
    picked_view = None
    reveal_delay = None
    if picked is not None:
        picked_view = PickedCardResponse.from_pick(
            picked,
            label=engine.spread.labels[picked.position],
            revealed=False,
        )
        if len(engine.picked_cards) == engine.spread.card_count:
            reveal_delay = engine.config.reveal_delay_seconds
    return CardSelectionResponse(
        accepted=picked is not None,
        picked=picked_view,
        reveal_delay_seconds=reveal_delay,
        state=RitualStateResponse.from_engine(client_id, engine),
    )


@router.post(
    "/{client_id}/reveal",
    response_model=RitualActionResponse,
    responses=NOT_FOUND_RESPONSE,
)
async def reveal_card(
    client_id: str,
    payload: RevealRequest,
    engine: EngineDep,
) -> RitualActionResponse:
    return _action(client_id, engine, engine.reveal_card(payload.position))


@router.post(
    "/{client_id}/replay",
    response_model=RitualActionResponse,
    responses=NOT_FOUND_RESPONSE,
)
async def replay_audio(client_id: str, engine: EngineDep) -> RitualActionResponse:
    return _action(client_id, engine, engine.replay_audio())


@router.post(
    "/{client_id}/reset",
    response_model=RitualActionResponse,
    responses=NOT_FOUND_RESPONSE,
)
async def reset_ritual(client_id: str, engine: EngineDep) -> RitualActionResponse:
    return _action(client_id, engine, engine.reset_ritual())


@router.post(
    "/{client_id}/library/open",
    response_model=RitualActionResponse,
    responses=NOT_FOUND_RESPONSE,
)
async def open_library(client_id: str, engine: EngineDep) -> RitualActionResponse:
    return _action(client_id, engine, engine.open_library())


@router.post(
    "/{client_id}/library/close",
    response_model=RitualActionResponse,
    responses=NOT_FOUND_RESPONSE,
)
async def close_library(client_id: str, engine: EngineDep) -> RitualActionResponse:
    return _action(client_id, engine, engine.close_library())


@router.get(
    "/{client_id}/voice",
    response_class=Response,
    responses=NOT_FOUND_RESPONSE,
)
async def read_voice(client_id: str, engine: EngineDep) -> Response:
    """Return the voice clip currently playing as WAV bytes."""

    handle = engine.audio.current_voice
    if handle is None or not handle.is_playing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No voice is playing",
        )
    return Response(content=handle.asset.to_wav_bytes(handle.gain_at()), media_type="audio/wav")
