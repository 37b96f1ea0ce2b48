"""Interpretation text stage (Stage 01) of the generation pipeline."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from arcana.telemetry import record_reading_fallback

from .types import GenerationRequest, ReadingResult

if TYPE_CHECKING:  # pragma: no cover
    from arcana.services.content import ContentService

logger = logging.getLogger("arcana.pipelines.generation")

FALLBACK_READING = "命运的丝线暂时纠缠不清，请静心片刻后再试。"
EMPTY_READING = "迷雾太浓，我看不到前路..."


async def generate_reading_text(
    content: "ContentService",
    request: GenerationRequest,
    *,
    timeout: float,
) -> ReadingResult:
    """Ask the content service for the reading; never raises."""

    try:
        text = await asyncio.wait_for(
            content.generate_reading(list(request.cards), request.spread_id, request.question),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        logger.warning(
            "Reading generation timed out after %.1fs epoch=%s; using fallback",
            timeout,
            request.epoch,
        )
        record_reading_fallback("timeout")
        return ReadingResult(text=FALLBACK_READING, source="fallback")
    except Exception as exc:  # external service may fail in any way
        logger.warning(
            "Reading generation failed epoch=%s: %s; using fallback",
            request.epoch,
            exc,
        )
        record_reading_fallback("error")
        return ReadingResult(text=FALLBACK_READING, source="fallback")

    cleaned = (text or "").strip()
    if not cleaned:
        logger.warning("Reading generation returned no text epoch=%s", request.epoch)
        record_reading_fallback("empty")
        return ReadingResult(text=EMPTY_READING, source="empty")
    return ReadingResult(text=cleaned, source="model")


__all__ = ["EMPTY_READING", "FALLBACK_READING", "generate_reading_text"]
