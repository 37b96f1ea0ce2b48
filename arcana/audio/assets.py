"""Decoded audio buffers shared by the ambient and voice channels."""

from __future__ import annotations

import io
import wave
from dataclasses import dataclass
from math import gcd

import numpy as np
from scipy.signal import resample_poly


class AudioAssetError(ValueError):
    """Raised when raw bytes cannot be decoded into an audio asset."""


@dataclass(frozen=True, eq=False)
class AudioAsset:
    """Mono float32 samples in [-1, 1] at a fixed sample rate."""

    samples: np.ndarray
    sample_rate: int
    label: str = ""

    @property
    def duration(self) -> float:
        if self.sample_rate <= 0:
            return 0.0
        return float(len(self.samples)) / float(self.sample_rate)

    @classmethod
    def from_pcm16(cls, pcm_bytes: bytes, sample_rate: int, *, label: str = "") -> "AudioAsset":
        """Wrap little-endian signed 16-bit mono PCM."""

        if not pcm_bytes:
            raise AudioAssetError("PCM payload was empty.")
        usable = len(pcm_bytes) - (len(pcm_bytes) % 2)
        samples = np.frombuffer(pcm_bytes[:usable], dtype="<i2").astype(np.float32) / 32768.0
        return cls(samples=samples, sample_rate=sample_rate, label=label)

    @classmethod
    def from_wav_bytes(cls, data: bytes, *, label: str = "") -> "AudioAsset":
        """Decode a PCM WAV file, mixing multi-channel audio down to mono."""

        try:
            with wave.open(io.BytesIO(data), "rb") as wave_file:
                channels = wave_file.getnchannels()
                sample_width = wave_file.getsampwidth()
                sample_rate = wave_file.getframerate()
                frames = wave_file.readframes(wave_file.getnframes())
        except (wave.Error, EOFError) as exc:
            raise AudioAssetError(f"Invalid WAV payload: {exc}") from exc

        if sample_width == 1:
            samples = (np.frombuffer(frames, dtype=np.uint8).astype(np.float32) - 128.0) / 128.0
        elif sample_width == 2:
            samples = np.frombuffer(frames, dtype="<i2").astype(np.float32) / 32768.0
        elif sample_width == 4:
            samples = np.frombuffer(frames, dtype="<i4").astype(np.float32) / 2147483648.0
        else:
            raise AudioAssetError(f"Unsupported sample width: {sample_width} bytes")

        if channels > 1:
            samples = samples.reshape(-1, channels).mean(axis=1)
        return cls(samples=samples.astype(np.float32), sample_rate=sample_rate, label=label)

    def resampled(self, sample_rate: int) -> "AudioAsset":
        """Return a copy at ``sample_rate`` using polyphase filtering."""

        if sample_rate == self.sample_rate or not len(self.samples):
            return self
        divisor = gcd(sample_rate, self.sample_rate)
        converted = resample_poly(self.samples, sample_rate // divisor, self.sample_rate // divisor)
        return AudioAsset(
            samples=converted.astype(np.float32),
            sample_rate=sample_rate,
            label=self.label,
        )

    def with_edge_fades(self, fade_ms: int = 8) -> "AudioAsset":
        """Apply short linear fades at both ends to avoid clicks on start/stop."""

        n = min(len(self.samples) // 2, int(self.sample_rate * fade_ms / 1000))
        if n <= 0:
            return self
        samples = self.samples.copy()
        ramp = np.linspace(0.0, 1.0, n, dtype=np.float32)
        samples[:n] *= ramp
        samples[-n:] *= ramp[::-1]
        return AudioAsset(samples=samples, sample_rate=self.sample_rate, label=self.label)

    def to_wav_bytes(self, gain: float = 1.0) -> bytes:
        audio = np.clip(self.samples * gain, -1.0, 1.0)
        pcm16 = (audio * 32767.0).astype("<i2")
        with io.BytesIO() as buffer:
            with wave.open(buffer, "wb") as wave_file:
                wave_file.setnchannels(1)
                wave_file.setsampwidth(2)
                wave_file.setframerate(self.sample_rate)
                wave_file.writeframes(pcm16.tobytes())
            return buffer.getvalue()


__all__ = ["AudioAsset", "AudioAssetError"]
