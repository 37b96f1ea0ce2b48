"""Ritual orchestration: the phase graph the UI observes and drives.

    INTRO -> INPUT -> SHUFFLING -> PICKING -> READING -> (reset) INPUT

LIBRARY is an overlay entered from any phase; the phase it covers is kept
in ``previous_phase`` and restored when the overlay closes. Actions that do
not apply to the current phase are ignored and return a falsy value.

All work runs on one event loop. Background jobs (generation, shuffle
timer, voice prompts) are tasks; results are attached only while their
epoch is still the current one.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Coroutine

from arcana.audio.assets import AudioAsset
from arcana.audio.engine import AudioEngine
from arcana.config.settings import RitualConfig, settings
from arcana.domain.cards import TarotCard
from arcana.domain.models import PickedCard, RitualPhase
from arcana.domain.spreads import DEFAULT_SPREAD_ID, SpreadDefinition, get_spread
from arcana.pipelines.generation import (
    GenerationOutcome,
    GenerationPipeline,
    GenerationRequest,
)
from arcana.ritual import scripts
from arcana.ritual.selector import CardSelector
from arcana.ritual.session import RitualSession
from arcana.telemetry import record_ritual_started

if TYPE_CHECKING:  # pragma: no cover
    from arcana.services.content import ContentService

logger = logging.getLogger(__name__)


class RitualEngine:
    """Owns one user's ritual session and every transition applied to it."""

    def __init__(
        self,
        content: "ContentService",
        *,
        audio: AudioEngine | None = None,
        selector: CardSelector | None = None,
        pipeline: GenerationPipeline | None = None,
        config: RitualConfig = settings.ritual,
    ) -> None:
        self._config = config
        self._audio = audio or AudioEngine(content)
        self._selector = selector or CardSelector(
            reversal_probability=config.reversal_probability
        )
        self._pipeline = pipeline or GenerationPipeline(content, config=config)
        self._phase = RitualPhase.INTRO
        self._previous_phase: RitualPhase | None = None
        self._epoch = 0
        self._spread_id = DEFAULT_SPREAD_ID
        self._question = ""
        self._session: RitualSession | None = None
        self._tasks: set[asyncio.Task] = set()

    # ------------------------------------------------------------------
    # Observed state
    # ------------------------------------------------------------------

    @property
    def phase(self) -> RitualPhase:
        return self._phase

    @property
    def config(self) -> RitualConfig:
        return self._config

    @property
    def previous_phase(self) -> RitualPhase | None:
        return self._previous_phase

    @property
    def library_open(self) -> bool:
        return self._phase is RitualPhase.LIBRARY

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def spread(self) -> SpreadDefinition:
        return get_spread(self._spread_id)

    @property
    def question(self) -> str:
        return self._question

    @property
    def session(self) -> RitualSession | None:
        return self._session

    @property
    def audio(self) -> AudioEngine:
        return self._audio

    @property
    def selector(self) -> CardSelector:
        return self._selector

    @property
    def picked_cards(self) -> tuple[PickedCard, ...]:
        if self._session is None:
            return ()
        return tuple(self._session.picked)

    @property
    def revealed_positions(self) -> frozenset[int]:
        if self._session is None:
            return frozenset()
        return frozenset(self._session.revealed_positions)

    @property
    def is_thinking(self) -> bool:
        session = self._session
        if session is None or session.reading_ready:
            return False
        return len(session.picked) == get_spread(session.spread_id).card_count

    @property
    def reading_text(self) -> str:
        return self._session.reading_text if self._session is not None else ""

    @property
    def reading_audio(self) -> AudioAsset | None:
        return self._session.reading_audio if self._session is not None else None

    @property
    def is_audio_playing(self) -> bool:
        return self._audio.is_playing

    @property
    def active_pool(self) -> tuple[TarotCard, ...]:
        """Cards selectable at the current picking step."""

        session = self._session
        if session is None or self._phase is not RitualPhase.PICKING:
            return ()
        return self._selector.selectable_cards(get_spread(session.spread_id), session)

    @property
    def thinking_phrases(self) -> tuple[str, ...]:
        keywords = [keyword for picked in self.picked_cards for keyword in picked.card.keywords]
        return scripts.THINKING_PHRASES + tuple(keywords)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def enter(self) -> bool:
        """INTRO -> INPUT; starts the ambient drone and the welcome prompts."""

        if self._phase is not RitualPhase.INTRO:
            logger.debug("enter ignored in phase %s", self._phase.value)
            return False
        self._phase = RitualPhase.INPUT
        self._spawn(self._open_audio(), name="enter-audio")
        return True

    def select_spread(self, spread_id: str) -> bool:
        """Choose the spread for the next ritual; raises ``UnknownSpreadError``."""

        spread = get_spread(spread_id)
        if self._phase is not RitualPhase.INPUT:
            logger.debug("select_spread ignored in phase %s", self._phase.value)
            return False
        self._spread_id = spread.id
        return True

    def change_question(self, question: str) -> bool:
        if self._phase is not RitualPhase.INPUT:
            logger.debug("change_question ignored in phase %s", self._phase.value)
            return False
        self._question = question or ""
        return True

    def start_ritual(self) -> bool:
        """INPUT -> SHUFFLING; pre-commits the draw and starts generation."""

        if self._phase is not RitualPhase.INPUT:
            logger.debug("start_ritual ignored in phase %s", self._phase.value)
            return False

        spread = get_spread(self._spread_id)
        self._epoch += 1
        epoch = self._epoch
        session = RitualSession(question=self._question, spread_id=spread.id, epoch=epoch)
        session.targets = self._selector.predetermine(spread)
        self._session = session
        self._phase = RitualPhase.SHUFFLING
        record_ritual_started(spread.id)
        logger.info(
            "Ritual started epoch=%s spread=%s targets=%s",
            epoch,
            spread.id,
            [(draw.card.id, draw.is_reversed) for draw in session.targets],
        )

        request = GenerationRequest(
            epoch=epoch,
            spread_id=spread.id,
            question=session.question,
            cards=tuple(session.targets),
        )
        session.generation_task = self._spawn(
            self._pipeline.run(request, self), name=f"generation-{epoch}"
        )
        session.generation_task.add_done_callback(self._generation_done)
        self._spawn(self._speak(scripts.SHUFFLE), name=f"voice-shuffle-{epoch}")
        self._spawn(self._finish_shuffle(epoch), name=f"shuffle-{epoch}")
        return True

    def select_card(self, visual_id: int) -> PickedCard | None:
        """Bind a tap to the next pre-committed draw; None when ignored."""

        session = self._session
        if session is None or self._phase is not RitualPhase.PICKING:
            logger.debug("select_card ignored in phase %s", self._phase.value)
            return None

        spread = get_spread(session.spread_id)
        picked = self._selector.accept_pick(spread, session, visual_id)
        if picked is None:
            return None

        logger.info(
            "Pick %s/%s epoch=%s visual=%s data=%s reversed=%s",
            len(session.picked),
            spread.card_count,
            session.epoch,
            picked.visual_id,
            picked.data_id,
            picked.is_reversed,
        )
        if len(session.picked) == spread.card_count:
            self._phase = RitualPhase.READING
            self._spawn(self._speak(scripts.REVEAL), name=f"voice-reveal-{session.epoch}")
            self._maybe_autoplay()
        return picked

    def reveal_card(self, position: int) -> bool:
        session = self._session
        if session is None or self._phase is not RitualPhase.READING:
            return False
        if not 0 <= position < len(session.picked) or position in session.revealed_positions:
            return False
        session.revealed_positions.add(position)
        self._maybe_autoplay()
        return True

    def replay_audio(self) -> bool:
        audio = self.reading_audio
        if audio is None or self._audio.is_playing:
            return False
        self._audio.play_buffer(audio)
        return True

    def reset_ritual(self) -> bool:
        """READING -> INPUT; the drone keeps playing."""

        if self._phase is not RitualPhase.READING:
            logger.debug("reset ignored in phase %s", self._phase.value)
            return False
        self._audio.stop_voice()
        self._session = None
        self._question = ""
        self._phase = RitualPhase.INPUT
        self._spawn(self._speak(scripts.ASK), name="voice-ask")
        return True

    def open_library(self) -> bool:
        if self._phase is RitualPhase.LIBRARY:
            return False
        self._previous_phase = self._phase
        self._phase = RitualPhase.LIBRARY
        return True

    def close_library(self) -> bool:
        if self._phase is not RitualPhase.LIBRARY:
            return False
        self._phase = self._previous_phase or RitualPhase.INTRO
        self._previous_phase = None
        self._maybe_autoplay()
        return True

    # ------------------------------------------------------------------
    # Generation listener
    # ------------------------------------------------------------------

    def is_current(self, epoch: int) -> bool:
        session = self._session
        return session is not None and session.epoch == epoch == self._epoch

    def attach_reading(self, epoch: int, text: str) -> bool:
        if not self.is_current(epoch):
            return False
        session = self._session
        session.reading_text = text
        session.reading_ready = True
        self._maybe_autoplay()
        return True

    def attach_narration(self, epoch: int, audio: AudioAsset) -> bool:
        if not self.is_current(epoch):
            return False
        self._session.reading_audio = audio
        self._maybe_autoplay()
        return True

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def drain(self) -> None:
        """Wait until no background task is pending."""

        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        await self.drain()
        await self._audio.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _maybe_autoplay(self) -> bool:
        session = self._session
        if (
            session is None
            or self._phase is not RitualPhase.READING
            or session.has_autoplayed
            or not session.reading_ready
            or session.reading_audio is None
            or not session.picked
            or not session.all_revealed
        ):
            return False
        session.has_autoplayed = True
        self._audio.play_buffer(session.reading_audio)
        logger.info("Autoplaying reading narration epoch=%s", session.epoch)
        return True

    def _advance(self, expected: RitualPhase, target: RitualPhase) -> bool:
        """Move ``expected`` to ``target``, also beneath an open library."""

        if self._phase is expected:
            self._phase = target
            return True
        if self._phase is RitualPhase.LIBRARY and self._previous_phase is expected:
            self._previous_phase = target
            return True
        return False

    async def _finish_shuffle(self, epoch: int) -> None:
        await asyncio.sleep(self._config.shuffle_seconds)
        if not self.is_current(epoch):
            return
        if self._advance(RitualPhase.SHUFFLING, RitualPhase.PICKING):
            logger.info("Shuffle finished epoch=%s", epoch)
            await self._speak(scripts.PICK)

    async def _open_audio(self) -> None:
        await self._audio.start_ambient()
        self._spawn(self._audio.prefetch(scripts.PREFETCH_SCRIPTS), name="voice-prefetch")
        await self._speak(scripts.WELCOME)
        await asyncio.sleep(self._config.ask_prompt_delay_seconds)
        if self._phase is RitualPhase.INPUT:
            await self._speak(scripts.ASK)

    async def _speak(self, script: scripts.VoiceScript) -> bool:
        return await self._audio.play_voice(script.text, script.cache_key, script.static_key)

    def _spawn(self, coro: Coroutine, *, name: str) -> asyncio.Task:
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _generation_done(self, task: asyncio.Task) -> None:
        if task.cancelled() or task.exception() is not None:
            return
        outcome: GenerationOutcome = task.result()
        logger.info(
            "Generation settled epoch=%s source=%s narration=%s dropped=%s current=%s",
            outcome.epoch,
            outcome.reading.source if outcome.reading else None,
            outcome.narration is not None,
            outcome.stale_stage,
            self.is_current(outcome.epoch),
        )

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Background task %s failed", task.get_name(), exc_info=exc)


__all__ = ["RitualEngine"]
