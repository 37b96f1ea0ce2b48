"""Typed containers shared across the generation pipeline.

These live in their own module so ``reading``, ``narration`` and ``flow``
can import them without creating circular dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol

from arcana.audio.assets import AudioAsset
from arcana.domain.models import CardDraw

ReadingSource = Literal["model", "fallback", "empty"]


@dataclass(frozen=True)
class GenerationRequest:
    """Everything needed to generate one ritual's reading, tagged by epoch."""

    epoch: int
    spread_id: str
    question: str
    cards: tuple[CardDraw, ...]


@dataclass(frozen=True)
class ReadingResult:
    text: str
    source: ReadingSource


@dataclass(frozen=True)
class GenerationOutcome:
    """What the pipeline produced and whether a stage was dropped as stale."""

    epoch: int
    reading: ReadingResult | None = None
    narration: AudioAsset | None = None
    stale_stage: str | None = None

    @property
    def is_stale(self) -> bool:
        return self.stale_stage is not None


class GenerationListener(Protocol):
    """Receiver of pipeline results; attaches them only for the current epoch."""

    def is_current(self, epoch: int) -> bool:
        ...

    def attach_reading(self, epoch: int, text: str) -> bool:
        ...

    def attach_narration(self, epoch: int, audio: AudioAsset) -> bool:
        ...
