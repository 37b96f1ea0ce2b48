"""Service layer helpers for external integrations."""

from .content import ContentService
from .llm_client import BedrockLlmClient, LlmInvocationError
from .local_assets import LocalAssetLoader
from .ritual_registry import RitualRegistry, get_ritual_registry
from .speech import PollySpeechService, SpeechSynthesisError

__all__ = [
    "BedrockLlmClient",
    "ContentService",
    "LlmInvocationError",
    "LocalAssetLoader",
    "PollySpeechService",
    "RitualRegistry",
    "SpeechSynthesisError",
    "get_ritual_registry",
]
