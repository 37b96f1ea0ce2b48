"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, status

from arcana.ritual.engine import RitualEngine
from arcana.services.ritual_registry import RitualRegistry, get_ritual_registry

RegistryDep = Annotated[RitualRegistry, Depends(get_ritual_registry)]


def get_ritual_engine(client_id: str, registry: RegistryDep) -> RitualEngine:
    """Resolve the engine owned by ``client_id``."""

    engine = registry.get(client_id)
    if engine is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Ritual session not found",
        )
    return engine


EngineDep = Annotated[RitualEngine, Depends(get_ritual_engine)]


__all__ = ["EngineDep", "RegistryDep", "get_ritual_engine"]
