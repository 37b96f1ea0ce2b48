"""Background generation of a ritual's reading text and closing narration.

Execution order, started when shuffling begins:

1. ``reading`` – request the interpretation text; failures become a fallback
   sentence so the reading never blocks indefinitely.
2. ``narration`` – synthesize the last sentence of that text; failures leave
   the reading silent.

Every continuation compares the request epoch with the listener's current
epoch before attaching anything; results from superseded rituals are dropped.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from arcana.config.settings import RitualConfig, settings
from arcana.telemetry import READING_LATENCY, record_narration, record_stale_result

from .narration import synthesize_closing_line
from .reading import generate_reading_text
from .types import GenerationListener, GenerationOutcome, GenerationRequest

if TYPE_CHECKING:  # pragma: no cover
    from arcana.services.content import ContentService

logger = logging.getLogger("arcana.pipelines.generation")


class GenerationPipeline:
    """Run the reading and narration stages for one ritual."""

    def __init__(
        self,
        content: "ContentService",
        *,
        config: RitualConfig = settings.ritual,
    ) -> None:
        self._content = content
        self._reading_timeout = config.reading_timeout_seconds
        self._speech_timeout = config.speech_timeout_seconds

    async def run(
        self,
        request: GenerationRequest,
        listener: GenerationListener,
    ) -> GenerationOutcome:
        started = time.perf_counter()
        logger.info(
            "Generation started epoch=%s spread=%s cards=%s",
            request.epoch,
            request.spread_id,
            [draw.card.id for draw in request.cards],
        )

        reading = await generate_reading_text(
            self._content, request, timeout=self._reading_timeout
        )
        READING_LATENCY.observe(time.perf_counter() - started)
        if not listener.attach_reading(request.epoch, reading.text):
            logger.info("Dropping stale reading epoch=%s", request.epoch)
            record_stale_result("reading")
            return GenerationOutcome(epoch=request.epoch, reading=reading, stale_stage="reading")

        audio = await synthesize_closing_line(
            self._content,
            reading.text,
            timeout=self._speech_timeout,
            epoch=request.epoch,
        )
        if audio is None:
            record_narration("silent")
            logger.info("No narration for epoch=%s; reading stays silent", request.epoch)
            return GenerationOutcome(epoch=request.epoch, reading=reading)

        if not listener.attach_narration(request.epoch, audio):
            logger.info("Dropping stale narration epoch=%s", request.epoch)
            record_stale_result("narration")
            return GenerationOutcome(
                epoch=request.epoch,
                reading=reading,
                narration=audio,
                stale_stage="narration",
            )

        record_narration("ready")
        logger.info(
            "Generation finished epoch=%s source=%s narration=%.2fs",
            request.epoch,
            reading.source,
            audio.duration,
        )
        return GenerationOutcome(epoch=request.epoch, reading=reading, narration=audio)


__all__ = ["GenerationPipeline"]
