"""Closing-line narration stage (Stage 02) of the generation pipeline.

Only the final sentence of the reading is synthesized ahead of time.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import TYPE_CHECKING

from arcana.audio.assets import AudioAsset

if TYPE_CHECKING:  # pragma: no cover
    from arcana.services.content import ContentService

logger = logging.getLogger("arcana.pipelines.generation")

_TERMINATORS = ".!?。！？"
_SENTENCE_PATTERN = re.compile(
    rf"[^{_TERMINATORS}]*[{_TERMINATORS}]+[\"'”’」』)）]*|[^{_TERMINATORS}]+$"
)
_WORD = re.compile(r"\w")


def split_sentences(text: str) -> list[str]:
    """Split on Latin and CJK sentence terminators, keeping the terminator."""

    pieces = (match.group(0).strip() for match in _SENTENCE_PATTERN.finditer(text or ""))
    return [piece for piece in pieces if _WORD.search(piece)]


def closing_sentence(text: str) -> str | None:
    sentences = split_sentences(text)
    return sentences[-1] if sentences else None


async def synthesize_closing_line(
    content: "ContentService",
    text: str,
    *,
    timeout: float,
    epoch: int,
) -> AudioAsset | None:
    """Synthesize the last sentence of ``text``; ``None`` means stay silent."""

    sentence = closing_sentence(text)
    if not sentence:
        return None
    try:
        return await asyncio.wait_for(content.synthesize_speech(sentence), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("Narration timed out after %.1fs epoch=%s", timeout, epoch)
    except Exception as exc:  # external service may fail in any way
        logger.warning("Narration failed epoch=%s: %s", epoch, exc)
    return None


__all__ = ["closing_sentence", "split_sentences", "synthesize_closing_line"]
