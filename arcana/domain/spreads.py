"""Static registry of spread layouts.

Each spread lists its positions in reading order. A position may narrow the
candidate pool (e.g. the Five Dimensions spread draws one card per suit);
positions that do not override it draw from the full deck.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal, Mapping

from arcana.domain.cards import CardPoolType

LayoutType = Literal["flex", "absolute"]
LabelSide = Literal["top", "bottom", "left", "right"]


class UnknownSpreadError(KeyError):
    """Raised when a spread identifier is not registered."""


@dataclass(frozen=True)
class PositionSpec:
    """One slot of a spread: its label, pool and optional geometry."""

    label: str
    pool: CardPoolType = CardPoolType.FULL
    x: float | None = None
    y: float | None = None
    rotation: float = 0.0
    label_position: LabelSide = "bottom"
    z_index: int | None = None


@dataclass(frozen=True)
class SpreadDefinition:
    id: str
    name: str
    description: str
    layout_type: LayoutType
    positions: tuple[PositionSpec, ...]
    interpretation_instruction: str
    default_questions: tuple[str, ...] = field(default_factory=tuple)

    @property
    def card_count(self) -> int:
        return len(self.positions)

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(position.label for position in self.positions)


def _flex(*labels: str, pools: tuple[CardPoolType, ...] = ()) -> tuple[PositionSpec, ...]:
    positions = []
    for index, label in enumerate(labels):
        pool = pools[index] if index < len(pools) else CardPoolType.FULL
        positions.append(PositionSpec(label=label, pool=pool))
    return tuple(positions)


def _at(
    x: float,
    y: float,
    label: str,
    *,
    rotation: float = 0.0,
    label_position: LabelSide = "bottom",
    z_index: int | None = None,
) -> PositionSpec:
    return PositionSpec(
        label=label,
        x=x,
        y=y,
        rotation=rotation,
        label_position=label_position,
        z_index=z_index,
    )


_SPREAD_LIST: tuple[SpreadDefinition, ...] = (
    SpreadDefinition(
        id="SINGLE",
        name="One Card Draw",
        description="Instant insight. Ask what you need to be aware of rather than a yes/no question.",
        layout_type="flex",
        positions=_flex("Insight", pools=(CardPoolType.MAJOR,)),
        interpretation_instruction=(
            "Spread Type: One Card Draw. Focus on the appropriateness of the card drawn. "
            "It indicates the circumstances the seeker needs to know about right now."
        ),
        default_questions=(
            "What should I be aware of regarding [topic]?",
            "关于这件事，我需要留意什么?",
            "What attitude will be most useful to adopt today?",
            "What can I learn from this problem?",
        ),
    ),
    SpreadDefinition(
        id="THREE",
        name="Past · Present · Future",
        description="Classic trinity. Can also be read as body/mind/spirit or morning/afternoon/evening.",
        layout_type="flex",
        positions=_flex("Past", "Present", "Future"),
        interpretation_instruction=(
            "Read left to right. 1. Past (recent occurrences and influences). "
            "2. Present (current happenings). 3. Future (the situation unfolding)."
        ),
        default_questions=(
            "What do I need to know about [topic]?",
            "What do I need to know about my work during this week ahead?",
            "关于这段关系，我需要了解什么?",
        ),
    ),
    SpreadDefinition(
        id="FOUR",
        name="Simple Four Card",
        description="Situation, cons, pro and the answer.",
        layout_type="flex",
        positions=_flex("Situation", "Cons", "Pro", "Answer"),
        interpretation_instruction=(
            "Spread Type: Simple Four Card Spread. 1. Situation: the current state of affairs. "
            "2. Cons: obstacles hindering the seeker. 3. Pro: what is helping. "
            "4. Answer: the outcome given these factors."
        ),
        default_questions=(
            "What do I need to know about my financial situation?",
            "What can I do to gain more meaning in my life?",
        ),
    ),
    SpreadDefinition(
        id="FIVE",
        name="Five Card Spread",
        description="Hidden influences. The middle card reveals unconscious driving forces.",
        layout_type="flex",
        positions=_flex("Past", "Present", "Hidden", "Advice", "Outcome"),
        interpretation_instruction=(
            "Spread Type: Five Card Spread. 1. Past. 2. Present. 3. What's Hidden: unconscious "
            "forces (crucial card). 4. Advice: the action required. 5. Outcome: likely result "
            "if the advice is followed."
        ),
        default_questions=(
            "What do I need to know about my current situation?",
            "这件事背后有什么我没看到的隐性影响?",
        ),
    ),
    SpreadDefinition(
        id="TIMELINE",
        name="Timeline Spread",
        description="Five consecutive points in time, such as the next five days, weeks or months.",
        layout_type="flex",
        positions=_flex("Time 1", "Time 2", "Time 3", "Time 4", "Time 5"),
        interpretation_instruction=(
            "Spread Type: Timeline Spread. Each card is a sequential unit of time. Read them as a "
            "story of progression, looking for peaks, dips and the final culmination."
        ),
        default_questions=(
            "What should I be aware of over the next 5 days?",
            "未来五个月我的工作情况会如何变化?",
        ),
    ),
    SpreadDefinition(
        id="DIMENSION",
        name="Five Dimensions",
        description="Life audit. One card from each suit and one from the Major Arcana.",
        layout_type="flex",
        positions=_flex(
            "Romance (Cups)",
            "Finances (Pents)",
            "Mental (Swords)",
            "Career (Wands)",
            "Spiritual (Major)",
            pools=(
                CardPoolType.SUIT_CUPS,
                CardPoolType.SUIT_PENTACLES,
                CardPoolType.SUIT_SWORDS,
                CardPoolType.SUIT_WANDS,
                CardPoolType.MAJOR,
            ),
        ),
        interpretation_instruction=(
            "Spread Type: Five Dimensions. 1. Relationships (Cups): emotional health. "
            "2. Finances (Pentacles): prosperity and assets. 3. Mental (Swords): clarity of "
            "thought. 4. Career (Wands): work and energy. 5. Spiritual (Major Arcana): "
            "higher self guidance."
        ),
        default_questions=(
            "What should I be aware of about my life during the next month?",
            "全面扫描我目前的能量状态。",
        ),
    ),
    SpreadDefinition(
        id="CELTIC",
        name="Celtic Cross",
        description="A modified Celtic Cross: top is the past, left the present, bottom the near future.",
        layout_type="absolute",
        positions=(
            _at(35, 50, "1. Issue", z_index=10),
            _at(35, 50, "2. Obstacle", rotation=90, z_index=20),
            _at(35, 20, "3. Past"),
            _at(10, 50, "4. Present"),
            _at(35, 80, "5. Near Future"),
            _at(60, 50, "6. Far Future"),
            _at(85, 85, "7. Yourself"),
            _at(85, 65, "8. Environment"),
            _at(85, 45, "9. Hopes/Fears"),
            _at(85, 25, "10. Outcome"),
        ),
        interpretation_instruction=(
            "Spread Type: Celtic Cross (Modified). 1. Issue. 2. Obstacle (crossing card). "
            "3. Past (top). 4. Present (left). 5. Near Future (bottom). 6. Far Future (right). "
            "7-10 follow the staff: Self, Environment, Hopes/Fears, Outcome."
        ),
        default_questions=(
            "What should I be aware of regarding [complex situation]?",
            "What is the outcome of my current path?",
        ),
    ),
    SpreadDefinition(
        id="RELATIONSHIP",
        name="Relationship Spread",
        description="You, them and us. Left column is you, right column them, centre the bond.",
        layout_type="absolute",
        positions=(
            _at(20, 80, "1. You Now"),
            _at(20, 60, "2. Your Weakness"),
            _at(20, 40, "3. Your Strength"),
            _at(20, 20, "4. Your View"),
            _at(80, 80, "5. Them Now"),
            _at(80, 60, "6. Their Weakness"),
            _at(80, 40, "7. Their Strength"),
            _at(80, 20, "8. Their View"),
            _at(50, 60, "9. Relationship Now"),
            _at(50, 40, "10. Near Future"),
            _at(50, 20, "11. Outcome"),
        ),
        interpretation_instruction=(
            "Spread Type: Relationship Spread. Compare parallel cards (e.g. Your View vs Their "
            "View). Weakness cards show hindrances; Strength cards nurturing qualities. The "
            "centre column is the relationship itself."
        ),
        default_questions=(
            "What should we be aware of regarding our relationship?",
            "我们未来的关系走向如何?",
        ),
    ),
    SpreadDefinition(
        id="COURT",
        name="Court Card Behavior",
        description="Psychological mirror: when [situation] arises I become [persona] because of [cause].",
        layout_type="flex",
        positions=_flex(
            "Situation (Pip)",
            "Persona (Court)",
            "Cause (Major)",
            pools=(CardPoolType.MINOR_PIP, CardPoolType.COURT, CardPoolType.MAJOR),
        ),
        interpretation_instruction=(
            "Spread Type: Court Card Behavior. Format: 'When [Card 1 Situation] arises, I become "
            "[Card 2 Persona] because of [Card 3 Cause].' Focus on the psychological shift."
        ),
        default_questions=(
            "Tell me about the way I deal with situations in daily life.",
            "我在面对压力时会变成什么样?",
        ),
    ),
    SpreadDefinition(
        id="ACTION_PLAN",
        name="Action Plan",
        description="Yearly strategy. Each card covers one quarter of the next twelve months.",
        layout_type="flex",
        positions=_flex(
            "Q1 (Month 1-3)", "Q2 (Month 4-6)", "Q3 (Month 7-9)", "Q4 (Month 10-12)"
        ),
        interpretation_instruction=(
            "Spread Type: Action Plan. Each card covers a 3-month period. Interpret as specific "
            "actions to take during that quarter to achieve the yearly goal."
        ),
        default_questions=(
            "What is my action plan for the next 12 months?",
            "未来一年我该如何达成我的目标?",
        ),
    ),
    SpreadDefinition(
        id="KICKING_GOALS",
        name="Kicking Goals",
        description="Goal achievement: focus, hidden factors, action, challenge, help, inspiration, outcome.",
        layout_type="absolute",
        positions=(
            _at(20, 25, "1. Focus", label_position="top", z_index=10),
            _at(20, 35, "2. Hidden", rotation=90, z_index=20),
            _at(50, 25, "3. Action", label_position="top", z_index=10),
            _at(50, 35, "4. Challenge", rotation=90, z_index=20),
            _at(80, 25, "5. Helpful", label_position="top", z_index=10),
            _at(80, 35, "6. Inspiration", rotation=90, z_index=20),
            _at(50, 75, "7. Outcome"),
        ),
        interpretation_instruction=(
            "Spread Type: Kicking Goals. Top row (1, 3, 5): visible aspects. Crossing cards "
            "(2, 4, 6): hidden aspects. Bottom (7): outcome after one year."
        ),
        default_questions=(
            "What do I need to know to achieve my goal?",
            "我如何才能建立成功的副业?",
        ),
    ),
    SpreadDefinition(
        id="YEARLY",
        name="Yearly Wheel",
        description="Twelve month forecast around a centre of trend, challenge and help.",
        layout_type="absolute",
        positions=(
            _at(50, 50, "Trend"),
            _at(32, 50, "Challenge"),
            _at(68, 50, "Helpful"),
            _at(50, 8, "Month 1"),
            _at(71, 13, "Month 2"),
            _at(87, 29, "Month 3"),
            _at(92, 50, "Month 4"),
            _at(87, 71, "Month 5", label_position="top"),
            _at(71, 87, "Month 6", label_position="top"),
            _at(50, 92, "Month 7", label_position="top"),
            _at(29, 87, "Month 8", label_position="top"),
            _at(13, 71, "Month 9", label_position="top"),
            _at(8, 50, "Month 10"),
            _at(13, 29, "Month 11"),
            _at(29, 13, "Month 12"),
        ),
        interpretation_instruction=(
            "Spread Type: Yearly Wheel. The centre three cards set the theme. The outer ring is "
            "the monthly progression; look for suit patterns across the months."
        ),
        default_questions=(
            "What does the year ahead hold for me?",
            "我的年度运势如何?",
        ),
    ),
)

SPREADS: Mapping[str, SpreadDefinition] = MappingProxyType(
    {spread.id: spread for spread in _SPREAD_LIST}
)
DEFAULT_SPREAD_ID = "SINGLE"


def get_spread(spread_id: str) -> SpreadDefinition:
    """Look up a spread by identifier (case-insensitive)."""

    key = (spread_id or "").strip().upper()
    try:
        return SPREADS[key]
    except KeyError:
        raise UnknownSpreadError(spread_id) from None


def position_pool(spread: SpreadDefinition, step_index: int) -> CardPoolType:
    """Pool used at ``step_index``; steps outside the spread use the full deck."""

    if 0 <= step_index < spread.card_count:
        return spread.positions[step_index].pool
    return CardPoolType.FULL


__all__ = [
    "DEFAULT_SPREAD_ID",
    "PositionSpec",
    "SPREADS",
    "SpreadDefinition",
    "UnknownSpreadError",
    "get_spread",
    "position_pool",
]
