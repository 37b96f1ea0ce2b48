"""Content boundary: prompt assembly, Polly, Bedrock key handling, local assets."""

from __future__ import annotations

import asyncio
import base64
import io
import wave

import numpy as np
import pytest
from botocore.exceptions import ClientError

from arcana.config.settings import PollyConfig
from arcana.domain.cards import get_card_catalog
from arcana.domain.models import CardDraw
from arcana.domain.spreads import get_spread
from arcana.services.content import ContentService
from arcana.services.llm_client import _decode_bedrock_api_key
from arcana.services.local_assets import LocalAssetLoader
from arcana.services.prompt_builder import SYSTEM_PROMPT, build_reading_prompt
from arcana.services.speech import PollySpeechService, SpeechSynthesisError


class StubPolly:
    def __init__(self, *, error: Exception | None = None) -> None:
        self.error = error
        self.requests: list[dict] = []

    def synthesize_speech(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        pcm = (np.full(1600, 1000, dtype="<i2")).tobytes()
        return {"AudioStream": io.BytesIO(pcm)}


class StubLlm:
    def __init__(self) -> None:
        self.prompts: list[tuple[str, str]] = []

    async def invoke(self, *, system_prompt, user_prompt, max_tokens=None, temperature=None):
        self.prompts.append((system_prompt, user_prompt))
        return "A single paragraph."


def _write_wav(path, *, sample_rate: int = 16000, frames: int = 1600) -> None:
    with wave.open(str(path), "wb") as wave_file:
        wave_file.setnchannels(1)
        wave_file.setsampwidth(2)
        wave_file.setframerate(sample_rate)
        wave_file.writeframes(np.zeros(frames, dtype="<i2").tobytes())


def _draws():
    catalog = get_card_catalog()
    return [
        CardDraw(card=catalog.get(0), is_reversed=False, position=0),
        CardDraw(card=catalog.get(16), is_reversed=True, position=1),
        CardDraw(card=catalog.get(40), is_reversed=False, position=2),
    ]


def test_reading_prompt_lists_each_position_and_orientation():
    prompt = build_reading_prompt(_draws(), get_spread("THREE"), "  Should I move abroad? ")

    assert prompt.system_prompt == SYSTEM_PROMPT
    assert 'Seeker\'s Question: "Should I move abroad?"' in prompt.user_prompt
    assert "Card 1 [Past]: 愚人 (The Fool)" in prompt.user_prompt
    assert "Card 2 [Present]" in prompt.user_prompt
    assert "REVERSED (逆位)" in prompt.user_prompt
    assert get_card_catalog().get(16).reversed in prompt.user_prompt
    assert get_spread("THREE").interpretation_instruction.strip() in prompt.user_prompt


def test_blank_question_asks_for_general_guidance():
    prompt = build_reading_prompt(_draws()[:1], get_spread("SINGLE"), "   ")

    assert "General guidance" in prompt.user_prompt


def test_polly_output_is_resampled_for_playback(monkeypatch):
    stub = StubPolly()
    monkeypatch.setattr("arcana.services.speech.create_boto3_client", lambda *args, **kwargs: stub)
    service = PollySpeechService(PollyConfig(), output_sample_rate=24000)

    asset = asyncio.run(service.synthesize("命运之轮 & 星星"))

    assert asset.sample_rate == 24000
    assert asset.duration == pytest.approx(0.1)
    request = stub.requests[0]
    assert request["OutputFormat"] == "pcm"
    assert request["VoiceId"] == "Zhiyu"
    assert request["Text"] == '<speak><prosody rate="90%">命运之轮 &amp; 星星</prosody></speak>'


def test_polly_failures_become_speech_errors(monkeypatch):
    error = ClientError({"Error": {"Code": "ThrottlingException", "Message": "slow down"}}, "SynthesizeSpeech")
    monkeypatch.setattr(
        "arcana.services.speech.create_boto3_client",
        lambda *args, **kwargs: StubPolly(error=error),
    )
    service = PollySpeechService(PollyConfig())

    with pytest.raises(SpeechSynthesisError):
        asyncio.run(service.synthesize("hello"))


def test_content_service_hides_speech_errors_and_blank_text(monkeypatch, tmp_path):
    error = ClientError({"Error": {"Code": "ThrottlingException", "Message": "quota"}}, "SynthesizeSpeech")
    polly = StubPolly(error=error)
    monkeypatch.setattr("arcana.services.speech.create_boto3_client", lambda *args, **kwargs: polly)
    content = ContentService(
        llm_client=StubLlm(),
        speech_service=PollySpeechService(PollyConfig()),
        asset_loader=LocalAssetLoader(tmp_path),
    )

    assert asyncio.run(content.synthesize_speech("   ")) is None
    assert polly.requests == []
    assert asyncio.run(content.synthesize_speech("The wheel turns.")) is None


def test_content_service_builds_prompt_for_reading(tmp_path):
    llm = StubLlm()
    content = ContentService(
        llm_client=llm,
        speech_service=object(),
        asset_loader=LocalAssetLoader(tmp_path),
    )

    text = asyncio.run(content.generate_reading(_draws(), "THREE", "Love?"))

    assert text == "A single paragraph."
    assert 'Seeker\'s Question: "Love?"' in llm.prompts[0][1]


def test_local_asset_loader_reads_and_resamples(tmp_path):
    _write_wav(tmp_path / "ask.wav")
    loader = LocalAssetLoader(tmp_path, sample_rate=24000)

    asset = asyncio.run(loader.load("ask"))

    assert asset.sample_rate == 24000
    assert asset.label == "ask"
    assert asyncio.run(loader.load("missing")) is None
    assert asyncio.run(loader.load("../etc/passwd")) is None


def test_content_service_serves_prerendered_assets(tmp_path):
    _write_wav(tmp_path / "welcome.wav")
    content = ContentService(
        llm_client=StubLlm(),
        speech_service=object(),
        asset_loader=LocalAssetLoader(tmp_path, sample_rate=16000),
    )

    asset = asyncio.run(content.load_local_asset("welcome"))

    assert asset is not None
    assert asset.duration == pytest.approx(0.1)
    assert asyncio.run(content.load_local_asset("shuffle")) is None


def test_local_asset_loader_skips_corrupt_files(tmp_path):
    (tmp_path / "pick.wav").write_bytes(b"garbage")

    assert asyncio.run(LocalAssetLoader(tmp_path).load("pick")) is None


def test_bedrock_api_key_decoding():
    encoded = base64.b64encode(b"AKIAEXAMPLE:secret/key").decode()

    assert _decode_bedrock_api_key(encoded) == ("AKIAEXAMPLE", "secret/key")
    assert _decode_bedrock_api_key("plain:pair") == ("plain", "pair")
    assert _decode_bedrock_api_key("") is None
    assert _decode_bedrock_api_key("no-separator") is None
