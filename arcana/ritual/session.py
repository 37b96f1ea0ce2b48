"""Mutable per-ritual state owned by the orchestration engine."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from arcana.audio.assets import AudioAsset
from arcana.domain.models import CardDraw, PickedCard


@dataclass
class RitualSession:
    question: str
    spread_id: str
    epoch: int
    targets: list[CardDraw] = field(default_factory=list)
    picked: list[PickedCard] = field(default_factory=list)
    consumed_visual_ids: set[int] = field(default_factory=set)
    revealed_positions: set[int] = field(default_factory=set)
    generation_task: asyncio.Task | None = None
    reading_ready: bool = False
    reading_text: str = ""
    reading_audio: AudioAsset | None = None
    has_autoplayed: bool = False

    @property
    def all_revealed(self) -> bool:
        return len(self.revealed_positions) == len(self.picked)

    def next_target(self) -> CardDraw | None:
        """Return the first pre-committed draw not yet bound to a pick."""

        index = len(self.picked)
        if index < len(self.targets):
            return self.targets[index]
        return None


__all__ = ["RitualSession"]
