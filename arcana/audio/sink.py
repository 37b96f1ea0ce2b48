"""Playback sinks.

The engine never talks to a sound device directly. A sink starts sources
and reports when they end; ``ClockedAudioSink`` models playback against
the event loop clock so a server can expose what is audible to clients.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from abc import ABC, abstractmethod
from typing import Callable

from arcana.audio.assets import AudioAsset

logger = logging.getLogger(__name__)

EndedCallback = Callable[["PlaybackHandle"], None]


class PlaybackStateError(RuntimeError):
    """Raised when stopping a source that has already finished."""


class PlaybackHandle(ABC):
    """A single started source on a sink."""

    id: int
    asset: AudioAsset
    loop: bool

    @property
    @abstractmethod
    def is_playing(self) -> bool:
        ...

    @abstractmethod
    def gain_at(self, when: float | None = None) -> float:
        ...

    @abstractmethod
    def ramp_to(self, value: float, seconds: float) -> None:
        """Linearly move the gain from its current value to ``value``."""

    @abstractmethod
    def stop(self) -> None:
        """Stop immediately; raises ``PlaybackStateError`` if already ended."""


class AudioSink(ABC):
    @abstractmethod
    def start(
        self,
        asset: AudioAsset,
        *,
        gain: float,
        loop: bool = False,
        on_ended: EndedCallback | None = None,
    ) -> PlaybackHandle:
        ...


class _ClockedHandle(PlaybackHandle):
    def __init__(
        self,
        handle_id: int,
        asset: AudioAsset,
        *,
        gain: float,
        loop: bool,
        clock: asyncio.AbstractEventLoop,
        on_ended: EndedCallback | None,
    ) -> None:
        self.id = handle_id
        self.asset = asset
        self.loop = loop
        self._clock = clock
        self._on_ended = on_ended
        self._playing = True
        self._ramp_start_value = gain
        self._ramp_target = gain
        self._ramp_start_time = clock.time()
        self._ramp_seconds = 0.0
        self._timer: asyncio.TimerHandle | None = None
        if not loop:
            self._timer = clock.call_later(asset.duration, self._finish)

    @property
    def is_playing(self) -> bool:
        return self._playing

    def gain_at(self, when: float | None = None) -> float:
        now = self._clock.time() if when is None else when
        if self._ramp_seconds <= 0:
            return self._ramp_target
        progress = (now - self._ramp_start_time) / self._ramp_seconds
        progress = min(1.0, max(0.0, progress))
        return self._ramp_start_value + (self._ramp_target - self._ramp_start_value) * progress

    def ramp_to(self, value: float, seconds: float) -> None:
        now = self._clock.time()
        self._ramp_start_value = self.gain_at(now)
        self._ramp_target = value
        self._ramp_start_time = now
        self._ramp_seconds = max(0.0, seconds)

    def stop(self) -> None:
        if not self._playing:
            raise PlaybackStateError(f"Source {self.id} has already ended.")
        self._playing = False
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _finish(self) -> None:
        self._timer = None
        if not self._playing:
            return
        self._playing = False
        if self._on_ended is not None:
            self._on_ended(self)


class ClockedAudioSink(AudioSink):
    """Sink whose sources end after their duration on the running loop."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)

    def start(
        self,
        asset: AudioAsset,
        *,
        gain: float,
        loop: bool = False,
        on_ended: EndedCallback | None = None,
    ) -> PlaybackHandle:
        handle = _ClockedHandle(
            next(self._ids),
            asset,
            gain=gain,
            loop=loop,
            clock=asyncio.get_running_loop(),
            on_ended=on_ended,
        )
        logger.debug(
            "Started source %s label=%s duration=%.2fs loop=%s",
            handle.id,
            asset.label,
            asset.duration,
            loop,
        )
        return handle


__all__ = [
    "AudioSink",
    "ClockedAudioSink",
    "PlaybackHandle",
    "PlaybackStateError",
]
