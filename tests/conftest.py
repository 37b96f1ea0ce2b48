"""Shared fixtures: a scriptable content provider and engine builders."""

from __future__ import annotations

import asyncio
import random
import sys
from pathlib import Path
from typing import Callable

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from arcana.audio.assets import AudioAsset  # noqa: E402
from arcana.audio.cache import PhraseCache  # noqa: E402
from arcana.audio.engine import AudioEngine  # noqa: E402
from arcana.config.settings import AudioConfig, RitualConfig  # noqa: E402
from arcana.domain.cards import CardCatalog  # noqa: E402
from arcana.ritual import scripts  # noqa: E402
from arcana.ritual.engine import RitualEngine  # noqa: E402
from arcana.ritual.selector import CardSelector  # noqa: E402

_PROMPT_TEXTS = {
    script.text
    for script in (scripts.WELCOME, scripts.ASK, scripts.SHUFFLE, scripts.PICK, scripts.REVEAL)
}


def make_asset(seconds: float = 0.05, *, label: str = "", sample_rate: int = 24000) -> AudioAsset:
    frames = max(1, int(sample_rate * seconds))
    return AudioAsset(
        samples=np.zeros(frames, dtype=np.float32),
        sample_rate=sample_rate,
        label=label,
    )


class FakeContentService:
    """Stands in for Bedrock, Polly and the assets directory.

    With ``hold_readings`` every reading request parks on a future that the
    test resolves, so results can be made to arrive out of order.
    """

    def __init__(
        self,
        *,
        reading: str = "The cards align. Trust the path ahead.",
        reading_error: Exception | None = None,
        hold_readings: bool = False,
        speech_enabled: bool = True,
        prompt_seconds: float = 0.02,
        narration_seconds: float = 30.0,
        local_assets: dict[str, AudioAsset] | None = None,
    ) -> None:
        self.reading = reading
        self.reading_error = reading_error
        self.hold_readings = hold_readings
        self.speech_enabled = speech_enabled
        self.prompt_seconds = prompt_seconds
        self.narration_seconds = narration_seconds
        self.local_assets = (
            dict(local_assets)
            if local_assets is not None
            else {"background": make_asset(2.0, label="background")}
        )
        self.reading_calls: list[tuple] = []
        self.speech_calls: list[str] = []
        self.asset_calls: list[str] = []
        self.pending_readings: list[asyncio.Future] = []

    async def generate_reading(self, cards, spread_id, question):
        self.reading_calls.append((tuple(cards), spread_id, question))
        if self.hold_readings:
            future = asyncio.get_running_loop().create_future()
            self.pending_readings.append(future)
            return await future
        if self.reading_error is not None:
            raise self.reading_error
        return self.reading

    async def synthesize_speech(self, text, voice_hint=None):
        self.speech_calls.append(text)
        if not self.speech_enabled:
            return None
        seconds = self.prompt_seconds if text in _PROMPT_TEXTS else self.narration_seconds
        return make_asset(seconds, label=text[:24])

    async def load_local_asset(self, key):
        self.asset_calls.append(key)
        return self.local_assets.get(key)


@pytest.fixture
def ritual_config() -> RitualConfig:
    return RitualConfig(
        shuffle_seconds=0.0,
        ask_prompt_delay_seconds=0.0,
        reading_timeout_seconds=5.0,
        speech_timeout_seconds=5.0,
    )


@pytest.fixture
def audio_config() -> AudioConfig:
    return AudioConfig(
        ambient_fade_in_seconds=0.05,
        ambient_fade_out_seconds=0.05,
    )


@pytest.fixture
def build_engine(ritual_config: RitualConfig, audio_config: AudioConfig) -> Callable[..., RitualEngine]:
    """Return a factory for engines with a private phrase cache and seeded draws."""

    def _build(
        content: FakeContentService,
        *,
        seed: int = 7,
        catalog: CardCatalog | None = None,
        config: RitualConfig | None = None,
    ) -> RitualEngine:
        config = config or ritual_config
        audio = AudioEngine(content, cache=PhraseCache(), config=audio_config)
        selector = CardSelector(
            catalog,
            rng=random.Random(seed),
            reversal_probability=config.reversal_probability,
        )
        return RitualEngine(content, audio=audio, selector=selector, config=config)

    return _build


@pytest.fixture
def wait_until():
    """Return a coroutine that polls ``predicate`` on the running loop."""

    async def _wait(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                raise AssertionError("condition not reached before timeout")
            await asyncio.sleep(0.005)

    return _wait


@pytest.fixture
def fake_content() -> type[FakeContentService]:
    return FakeContentService


@pytest.fixture
def asset_factory() -> Callable[..., AudioAsset]:
    return make_asset
