"""Reading generation pipeline package.

Modules are organised by the order in which a ritual's background job runs:

1. `reading` – interpretation text with fallback and bounded wait.
2. `narration` – closing-sentence speech synthesis.
3. `flow` – epoch-guarded orchestration of the two stages.
"""

from .flow import GenerationPipeline
from .narration import closing_sentence, split_sentences, synthesize_closing_line
from .reading import EMPTY_READING, FALLBACK_READING, generate_reading_text
from .types import GenerationListener, GenerationOutcome, GenerationRequest, ReadingResult

__all__ = [
    "EMPTY_READING",
    "FALLBACK_READING",
    "GenerationListener",
    "GenerationOutcome",
    "GenerationPipeline",
    "GenerationRequest",
    "ReadingResult",
    "closing_sentence",
    "generate_reading_text",
    "split_sentences",
    "synthesize_closing_line",
]
