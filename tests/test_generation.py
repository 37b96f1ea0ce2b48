"""Reading and narration stages plus the epoch-guarded pipeline."""

from __future__ import annotations

import asyncio

from prometheus_client import REGISTRY

from arcana.config.settings import RitualConfig
from arcana.domain.cards import get_card_catalog
from arcana.domain.models import CardDraw
from arcana.pipelines.generation import (
    EMPTY_READING,
    FALLBACK_READING,
    GenerationPipeline,
    GenerationRequest,
    closing_sentence,
    generate_reading_text,
    split_sentences,
)


class RecordingListener:
    def __init__(self, current_epoch: int) -> None:
        self.current_epoch = current_epoch
        self.readings: list[str] = []
        self.narrations: list = []

    def is_current(self, epoch: int) -> bool:
        return epoch == self.current_epoch

    def attach_reading(self, epoch: int, text: str) -> bool:
        if not self.is_current(epoch):
            return False
        self.readings.append(text)
        return True

    def attach_narration(self, epoch: int, audio) -> bool:
        if not self.is_current(epoch):
            return False
        self.narrations.append(audio)
        return True


class HangingContent:
    async def generate_reading(self, cards, spread_id, question):
        await asyncio.sleep(60)
        return "never"

    async def synthesize_speech(self, text, voice_hint=None):
        await asyncio.sleep(60)


def _request(epoch: int = 1) -> GenerationRequest:
    catalog = get_card_catalog()
    return GenerationRequest(
        epoch=epoch,
        spread_id="THREE",
        question="What should I focus on?",
        cards=tuple(
            CardDraw(card=catalog.get(card_id), is_reversed=card_id == 16, position=index)
            for index, card_id in enumerate((0, 16, 21))
        ),
    )


def _fallbacks(reason: str) -> float:
    return REGISTRY.get_sample_value("ritual_reading_fallbacks_total", {"reason": reason}) or 0.0


def test_split_sentences_handles_latin_and_cjk_terminators():
    text = "The Tower falls. Rebuild with care! 命运转动。你准备好了吗？"

    assert split_sentences(text) == [
        "The Tower falls.",
        "Rebuild with care!",
        "命运转动。",
        "你准备好了吗？",
    ]


def test_closing_sentence_skips_trailing_punctuation_only_fragments():
    assert closing_sentence("Walk gently. Trust the light... ") == "Trust the light..."
    assert closing_sentence('She said "go now."') == 'She said "go now."'
    assert closing_sentence("  ...  ") is None
    assert closing_sentence("") is None


def test_empty_text_becomes_the_empty_reading(fake_content):
    async def scenario():
        return await generate_reading_text(fake_content(reading="   "), _request(), timeout=1.0)

    result = asyncio.run(scenario())

    assert result.text == EMPTY_READING
    assert result.source == "empty"


def test_hung_reading_times_out_into_fallback():
    before = _fallbacks("timeout")

    result = asyncio.run(generate_reading_text(HangingContent(), _request(), timeout=0.05))

    assert result.text == FALLBACK_READING
    assert result.source == "fallback"
    assert _fallbacks("timeout") == before + 1


def test_pipeline_attaches_reading_then_narration(fake_content):
    content = fake_content(reading="The Fool steps out. The Star lights the way.")
    listener = RecordingListener(current_epoch=1)
    pipeline = GenerationPipeline(content, config=RitualConfig())

    outcome = asyncio.run(pipeline.run(_request(), listener))

    assert listener.readings == ["The Fool steps out. The Star lights the way."]
    assert content.speech_calls == ["The Star lights the way."]
    assert listener.narrations == [outcome.narration]
    assert outcome.reading.source == "model"
    assert not outcome.is_stale


def test_pipeline_drops_stale_reading_without_synthesizing(fake_content):
    content = fake_content()
    listener = RecordingListener(current_epoch=2)

    outcome = asyncio.run(GenerationPipeline(content, config=RitualConfig()).run(_request(1), listener))

    assert outcome.stale_stage == "reading"
    assert listener.readings == []
    assert content.speech_calls == []


def test_pipeline_leaves_reading_silent_when_speech_fails(fake_content):
    content = fake_content(speech_enabled=False)
    listener = RecordingListener(current_epoch=1)

    outcome = asyncio.run(GenerationPipeline(content, config=RitualConfig()).run(_request(), listener))

    assert listener.readings
    assert listener.narrations == []
    assert outcome.narration is None
    assert not outcome.is_stale


def test_pipeline_falls_back_when_narration_hangs():
    listener = RecordingListener(current_epoch=1)
    config = RitualConfig(reading_timeout_seconds=0.05, speech_timeout_seconds=0.05)

    outcome = asyncio.run(GenerationPipeline(HangingContent(), config=config).run(_request(), listener))

    assert listener.readings == [FALLBACK_READING]
    assert outcome.narration is None

