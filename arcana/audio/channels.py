"""Ambient drone and narration voice channels."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from arcana.audio.assets import AudioAsset
from arcana.audio.sink import AudioSink, PlaybackHandle, PlaybackStateError

logger = logging.getLogger(__name__)

AssetLoader = Callable[[], Awaitable[AudioAsset | None]]


class AmbientChannel:
    """Looping background track with linear fade in and fade out."""

    def __init__(
        self,
        sink: AudioSink,
        loader: AssetLoader,
        *,
        target_volume: float,
        fade_in_seconds: float,
        fade_out_seconds: float,
        floor_volume: float,
    ) -> None:
        self._sink = sink
        self._loader = loader
        self._target_volume = target_volume
        self._fade_in_seconds = fade_in_seconds
        self._fade_out_seconds = fade_out_seconds
        self._floor_volume = floor_volume
        self._handle: PlaybackHandle | None = None
        self._release_timer: asyncio.TimerHandle | None = None
        self._lock = asyncio.Lock()

    @property
    def is_active(self) -> bool:
        return self._handle is not None and self._release_timer is None

    @property
    def volume(self) -> float:
        if self._handle is None:
            return 0.0
        return self._handle.gain_at()

    async def activate(self) -> bool:
        """Start the drone muted and fade it up; no-op while already active."""

        async with self._lock:
            if self._handle is not None:
                if self._release_timer is not None:
                    self._release_timer.cancel()
                    self._release_timer = None
                    self._handle.ramp_to(self._target_volume, self._fade_in_seconds)
                return True

            asset = await self._loader()
            if asset is None:
                logger.warning("Ambient track unavailable; continuing without drone")
                return False

            self._handle = self._sink.start(asset, gain=0.0, loop=True)
            self._handle.ramp_to(self._target_volume, self._fade_in_seconds)
            logger.info(
                "Ambient drone started; fading to %.3f over %.1fs",
                self._target_volume,
                self._fade_in_seconds,
            )
            return True

    def deactivate(self) -> None:
        """Fade to near silence, then release the source."""

        if self._handle is None or self._release_timer is not None:
            return
        self._handle.ramp_to(self._floor_volume, self._fade_out_seconds)
        loop = asyncio.get_running_loop()
        self._release_timer = loop.call_later(self._fade_out_seconds, self._release)

    def _release(self) -> None:
        handle, self._handle = self._handle, None
        self._release_timer = None
        if handle is None:
            return
        try:
            handle.stop()
        except PlaybackStateError:
            logger.debug("Ambient source %s already ended", handle.id)
        logger.info("Ambient drone released")


class VoiceChannel:
    """Single narration source; a new one always replaces the previous."""

    def __init__(self, sink: AudioSink, *, gain: float) -> None:
        self._sink = sink
        self._gain = gain
        self._current: PlaybackHandle | None = None

    @property
    def is_playing(self) -> bool:
        return self._current is not None

    @property
    def current(self) -> PlaybackHandle | None:
        return self._current

    def play_buffer(self, asset: AudioAsset) -> PlaybackHandle:
        self.stop()
        handle = self._sink.start(asset, gain=self._gain, on_ended=self._handle_ended)
        self._current = handle
        return handle

    def stop(self) -> None:
        handle, self._current = self._current, None
        if handle is None:
            return
        try:
            handle.stop()
        except PlaybackStateError:
            logger.debug("Voice source %s already ended", handle.id)

    def _handle_ended(self, handle: PlaybackHandle) -> None:
        if handle is self._current:
            self._current = None


__all__ = ["AmbientChannel", "AssetLoader", "VoiceChannel"]
