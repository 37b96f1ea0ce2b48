"""Boundary to the external content providers.

``ContentService`` is the single seam the engine uses for generated text,
synthesized speech and pre-rendered audio. Tests replace it with a fake.
"""

from __future__ import annotations

import logging
from typing import Sequence

from arcana.audio.assets import AudioAsset
from arcana.domain.models import CardDraw
from arcana.domain.spreads import get_spread
from arcana.services.llm_client import BedrockLlmClient
from arcana.services.local_assets import LocalAssetLoader
from arcana.services.prompt_builder import build_reading_prompt
from arcana.services.speech import PollySpeechService, SpeechSynthesisError

logger = logging.getLogger(__name__)


class ContentService:
    """Bedrock for readings, Polly for speech, disk for pre-rendered phrases."""

    def __init__(
        self,
        *,
        llm_client: BedrockLlmClient | None = None,
        speech_service: PollySpeechService | None = None,
        asset_loader: LocalAssetLoader | None = None,
    ) -> None:
        self._llm_client = llm_client or BedrockLlmClient()
        self._speech_service = speech_service or PollySpeechService()
        self._asset_loader = asset_loader or LocalAssetLoader()

    async def generate_reading(
        self,
        cards: Sequence[CardDraw],
        spread_id: str,
        question: str,
    ) -> str:
        """Return the interpretation text; raises ``LlmInvocationError``."""

        prompt = build_reading_prompt(cards, get_spread(spread_id), question)
        logger.debug("Reading prompt spread=%s:\n%s", spread_id, prompt.user_prompt)
        return await self._llm_client.invoke(
            system_prompt=prompt.system_prompt,
            user_prompt=prompt.user_prompt,
        )

    async def synthesize_speech(
        self,
        text: str,
        voice_hint: str | None = None,
    ) -> AudioAsset | None:
        """Return narration audio, or ``None`` on quota or provider errors."""

        if not text.strip():
            return None
        try:
            return await self._speech_service.synthesize(text, voice_id=voice_hint)
        except SpeechSynthesisError as exc:
            logger.warning("Speech synthesis unavailable: %s", exc)
            return None

    async def load_local_asset(self, key: str) -> AudioAsset | None:
        return await self._asset_loader.load(key)


__all__ = ["ContentService"]
