"""Audio subsystem: decoded assets, playback sink, channels and phrase cache."""

from .assets import AudioAsset, AudioAssetError
from .cache import PhraseCache, get_phrase_cache
from .engine import AudioEngine
from .sink import AudioSink, ClockedAudioSink, PlaybackHandle, PlaybackStateError

__all__ = [
    "AudioAsset",
    "AudioAssetError",
    "AudioEngine",
    "AudioSink",
    "ClockedAudioSink",
    "PhraseCache",
    "PlaybackHandle",
    "PlaybackStateError",
    "get_phrase_cache",
]
