"""Fixed voice prompts spoken at points of the ritual."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class VoiceScript:
    cache_key: str
    text: str

    @property
    def static_key(self) -> str:
        """Name of the pre-rendered asset (``<key>.wav``)."""

        return self.cache_key.lower()


WELCOME = VoiceScript("WELCOME", "静心凝视深渊。当你的直觉苏醒时，进入命运之门。")
ASK = VoiceScript("ASK", "心中的疑惑，是通往真理的钥匙。告诉我，你为何而来？")
SHUFFLE = VoiceScript("SHUFFLE", "星辰正在归位，混乱中孕育着秩序。专注于你的问题。")
PICK = VoiceScript("PICK", "在流动的命运中，选择你的指引。")
REVEAL = VoiceScript("REVEAL", "这就是……命运的回响。")

PREFETCH_SCRIPTS = (ASK, SHUFFLE, PICK, REVEAL)

THINKING_PHRASES = (
    "Consulting the Stars...",
    "Weaving the Threads of Fate...",
    "Listening to the Whispers...",
    "Aligning with the Cosmos...",
)


__all__ = [
    "ASK",
    "PICK",
    "PREFETCH_SCRIPTS",
    "REVEAL",
    "SHUFFLE",
    "THINKING_PHRASES",
    "VoiceScript",
    "WELCOME",
]
