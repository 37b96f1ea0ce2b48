"""Audio subsystem facade used by the ritual engine."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from arcana.audio.assets import AudioAsset
from arcana.audio.cache import PhraseCache, get_phrase_cache
from arcana.audio.channels import AmbientChannel, VoiceChannel
from arcana.audio.sink import AudioSink, ClockedAudioSink, PlaybackHandle
from arcana.config.settings import AudioConfig, settings

if TYPE_CHECKING:  # pragma: no cover
    from arcana.services.content import ContentService
    from arcana.ritual.scripts import VoiceScript

logger = logging.getLogger(__name__)


class AudioEngine:
    """Owns the ambient drone, the narration voice and the phrase cache."""

    def __init__(
        self,
        content: "ContentService",
        *,
        sink: AudioSink | None = None,
        cache: PhraseCache | None = None,
        config: AudioConfig = settings.audio,
    ) -> None:
        self._content = content
        self._sink = sink or ClockedAudioSink()
        self._cache = cache if cache is not None else get_phrase_cache()
        self._config = config
        self._ambient: AmbientChannel | None = None
        self._voice = VoiceChannel(self._sink, gain=config.voice_gain)

    @property
    def cache(self) -> PhraseCache:
        return self._cache

    @property
    def ambient(self) -> AmbientChannel:
        if self._ambient is None:
            self._ambient = AmbientChannel(
                self._sink,
                self._load_ambient_track,
                target_volume=self._config.ambient_target_volume,
                fade_in_seconds=self._config.ambient_fade_in_seconds,
                fade_out_seconds=self._config.ambient_fade_out_seconds,
                floor_volume=self._config.ambient_floor_volume,
            )
        return self._ambient

    @property
    def is_playing(self) -> bool:
        return self._voice.is_playing

    @property
    def current_voice(self) -> PlaybackHandle | None:
        return self._voice.current

    async def start_ambient(self) -> bool:
        return await self.ambient.activate()

    def stop_ambient(self) -> None:
        if self._ambient is not None:
            self._ambient.deactivate()

    def play_buffer(self, asset: AudioAsset) -> PlaybackHandle:
        """Stop whatever voice is audible and start ``asset``."""

        return self._voice.play_buffer(asset)

    def stop_voice(self) -> None:
        self._voice.stop()

    async def play_voice(
        self,
        text: str,
        cache_key: str | None = None,
        static_key: str | None = None,
    ) -> bool:
        """Speak ``text``; return ``False`` when no audio could be obtained."""

        if cache_key:
            cached = self._cache.get(cache_key)
            if cached is not None:
                self.play_buffer(cached)
                return True

        try:
            asset = await self._obtain(text, static_key)
        except Exception:  # pragma: no cover - external dependency
            logger.exception("Voice generation failed key=%s", cache_key or static_key)
            return False

        if asset is None:
            logger.warning("Speech unavailable key=%s; staying silent", cache_key or static_key)
            return False

        if cache_key:
            asset = self._cache.insert_if_absent(cache_key, asset)
        self.play_buffer(asset)
        return True

    async def prefetch(self, scripts: Iterable["VoiceScript"]) -> None:
        """Fill the phrase cache silently; failures are logged and skipped."""

        for script in scripts:
            if script.cache_key in self._cache:
                continue
            try:
                asset = await self._obtain(script.text, script.static_key)
            except Exception:  # pragma: no cover - external dependency
                logger.exception("Prefetch failed for %s", script.cache_key)
                continue
            if asset is not None:
                self._cache.insert_if_absent(script.cache_key, asset)

    async def close(self) -> None:
        self._voice.stop()
        self.stop_ambient()

    async def _obtain(self, text: str, static_key: str | None) -> AudioAsset | None:
        if static_key:
            asset = await self._content.load_local_asset(static_key)
            if asset is not None:
                return asset
            logger.info("No pre-rendered audio for %s; trying synthesis", static_key)
        if not text:
            return None
        return await self._content.synthesize_speech(text)

    async def _load_ambient_track(self) -> AudioAsset | None:
        return await self._content.load_local_asset(self._config.ambient_track)


__all__ = ["AudioEngine"]
