"""Helpers to construct the system/user prompts for a tarot reading.

Given the pre-committed draws, the spread and the seeker's question, we emit:
* A system prompt describing the reader persona and output format.
* A user prompt with the question, spread instructions and one block per card.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from arcana.domain.models import CardDraw
from arcana.domain.spreads import SpreadDefinition

SYSTEM_PROMPT = (
    "You are a Grand Tarot Master and ancient sage (塔罗大师 / 智者). "
    "Your voice is deep, mystical and empathetic, grounded in centuries of occult knowledge."
)

INTERPRETATION_GUIDELINES = """Strict Interpretation Guidelines:
1. Upright vs. Reversed:
   - Upright (正位): the energy is external, flowing, active or fully manifested.
   - Reversed (逆位): never simply "bad". Read it as internalized, blocked or delayed
     energy, a need to reflect before acting, or the excess of the upright meaning.
2. Connect every card directly to the seeker's question; no generic definitions.
3. Do not list cards one by one. Weave them into a single, fluid message; for
   time-based spreads explain the progression of events.
4. Tone & Format:
   - Language: Chinese (Simplified). Poetic, deep, insightful.
   - ONE cohesive paragraph. No bullet points. No "Card 1 says...".
   - Speak directly to the seeker as "你".
   - Length: 120-160 words.
Start your interpretation immediately."""


@dataclass(frozen=True)
class PromptBundle:
    system_prompt: str
    user_prompt: str


def _format_question(question: str) -> str:
    cleaned = (question or "").strip()
    if not cleaned:
        return "Seeker's Question: General guidance for the path ahead."
    return f'Seeker\'s Question: "{cleaned}"'


def _format_card(draw: CardDraw, spread: SpreadDefinition) -> str:
    if draw.position < spread.card_count:
        label = spread.positions[draw.position].label
    else:
        label = f"Card {draw.position + 1}"
    card = draw.card
    orientation = "REVERSED (逆位)" if draw.is_reversed else "UPRIGHT (正位)"
    lines = [
        f"Card {draw.position + 1} [{label}]: {card.name_cn} ({card.name_en})",
        f"  - Orientation: {orientation}",
        f"  - Core Keywords: {', '.join(card.keywords)}",
    ]
    meaning = card.meaning(draw.is_reversed)
    if meaning:
        lines.append(f"  - Traditional Meaning: {meaning}")
    return "\n".join(lines)


def build_reading_prompt(
    draws: Sequence[CardDraw],
    spread: SpreadDefinition,
    question: str,
) -> PromptBundle:
    """Render the prompt pair for one reading."""

    card_details = "\n".join(_format_card(draw, spread) for draw in draws)
    user_prompt = "\n\n".join(
        [
            "Task: Provide a Tarot reading for the seeker based on the following details.",
            _format_question(question),
            f"Spread: {spread.name}\n{spread.interpretation_instruction.strip()}",
            f"Cards Drawn:\n{card_details}",
            INTERPRETATION_GUIDELINES,
        ]
    )
    return PromptBundle(system_prompt=SYSTEM_PROMPT, user_prompt=user_prompt)


__all__ = ["PromptBundle", "build_reading_prompt"]
