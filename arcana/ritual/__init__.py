"""Ritual orchestration: phase machine, card pre-commitment and voice scripts."""

from .engine import RitualEngine
from .selector import CardSelector, bind_pick
from .session import RitualSession

__all__ = ["CardSelector", "RitualEngine", "RitualSession", "bind_pick"]
