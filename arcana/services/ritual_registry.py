"""In-memory store of live ritual engines keyed by client id."""

from __future__ import annotations

import logging
from typing import Callable, Iterator
from uuid import uuid4

from arcana.ritual.engine import RitualEngine
from arcana.services.content import ContentService

logger = logging.getLogger(__name__)

EngineFactory = Callable[[], RitualEngine]


class RitualRegistry:
    """Each connected client owns one engine; engines never share a session."""

    def __init__(self, factory: EngineFactory) -> None:
        self._factory = factory
        self._engines: dict[str, RitualEngine] = {}

    def __len__(self) -> int:
        return len(self._engines)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._engines))

    def create(self) -> tuple[str, RitualEngine]:
        client_id = uuid4().hex
        engine = self._factory()
        self._engines[client_id] = engine
        logger.info("Ritual client registered id=%s active=%s", client_id, len(self._engines))
        return client_id, engine

    def get(self, client_id: str) -> RitualEngine | None:
        return self._engines.get(client_id)

    async def remove(self, client_id: str) -> bool:
        engine = self._engines.pop(client_id, None)
        if engine is None:
            return False
        await engine.close()
        logger.info("Ritual client closed id=%s active=%s", client_id, len(self._engines))
        return True

    async def close_all(self) -> None:
        for client_id in list(self._engines):
            await self.remove(client_id)


_DEFAULT_REGISTRY: RitualRegistry | None = None


def get_ritual_registry() -> RitualRegistry:
    """Return the process-wide registry, created on first use."""

    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        content = ContentService()
        _DEFAULT_REGISTRY = RitualRegistry(lambda: RitualEngine(content))
    return _DEFAULT_REGISTRY


async def shutdown_ritual_registry() -> None:
    """Close every engine of the process-wide registry, if one was created."""

    if _DEFAULT_REGISTRY is not None:
        await _DEFAULT_REGISTRY.close_all()


__all__ = [
    "EngineFactory",
    "RitualRegistry",
    "get_ritual_registry",
    "shutdown_ritual_registry",
]
