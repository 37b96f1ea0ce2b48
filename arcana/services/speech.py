"""Amazon Polly narration synthesis."""

from __future__ import annotations

import logging
from html import escape as html_escape
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError
from fastapi.concurrency import run_in_threadpool

from arcana.audio.assets import AudioAsset, AudioAssetError
from arcana.config.settings import PollyConfig, settings
from arcana.services.aws import create_boto3_client

logger = logging.getLogger(__name__)


class SpeechSynthesisError(RuntimeError):
    """Raised when Polly cannot produce audio for a phrase."""


class PollySpeechService:
    """Turn narration text into a decoded audio asset."""

    def __init__(
        self,
        config: PollyConfig = settings.polly,
        *,
        output_sample_rate: int = settings.audio.sample_rate,
        rate: float = 0.9,
    ) -> None:
        self._config = config
        self._output_sample_rate = output_sample_rate
        self._rate = rate
        self._client = create_boto3_client("polly", region_name=config.region)

    async def synthesize(self, text: str, *, voice_id: str | None = None) -> AudioAsset:
        voice = voice_id or self._config.default_voice_id
        ssml = self._build_ssml(text)
        try:
            response: dict[str, Any] = await run_in_threadpool(
                self._client.synthesize_speech,
                TextType="ssml",
                Text=ssml,
                VoiceId=voice,
                LanguageCode=self._config.language_code,
                Engine=self._config.engine,
                OutputFormat="pcm",
                SampleRate=str(self._config.sample_rate),
            )
        except (BotoCoreError, ClientError) as exc:
            logger.exception("Polly synth failed for voice '%s'", voice)
            raise SpeechSynthesisError(f"Failed to synthesize speech: {exc}") from exc

        audio_stream = response.get("AudioStream")
        if audio_stream is None:
            raise SpeechSynthesisError("Polly returned no audio stream.")
        pcm_bytes = audio_stream.read()
        try:
            asset = AudioAsset.from_pcm16(pcm_bytes, self._config.sample_rate, label=voice)
        except AudioAssetError as exc:
            raise SpeechSynthesisError("Polly returned an empty audio stream.") from exc
        processed = await run_in_threadpool(
            lambda: asset.resampled(self._output_sample_rate).with_edge_fades()
        )
        return processed

    def _build_ssml(self, text: str) -> str:
        rate_pct = max(60, min(140, int(round(self._rate * 100))))
        body = html_escape(text)
        if rate_pct != 100:
            return f'<speak><prosody rate="{rate_pct}%">{body}</prosody></speak>'
        return f"<speak>{body}</speak>"


__all__ = ["PollySpeechService", "SpeechSynthesisError"]
