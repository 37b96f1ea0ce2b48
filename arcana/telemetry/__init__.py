"""Telemetry helpers and metrics."""

from .metrics import (
    ERROR_COUNTER,
    NARRATION_OUTCOMES,
    READING_FALLBACKS,
    READING_LATENCY,
    REQUEST_COUNT,
    REQUEST_LATENCY,
    RITUALS_STARTED,
    STALE_RESULTS,
    observe_request,
    record_narration,
    record_reading_fallback,
    record_ritual_started,
    record_stale_result,
)

__all__ = [
    "ERROR_COUNTER",
    "NARRATION_OUTCOMES",
    "READING_FALLBACKS",
    "READING_LATENCY",
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "RITUALS_STARTED",
    "STALE_RESULTS",
    "observe_request",
    "record_narration",
    "record_reading_fallback",
    "record_ritual_started",
    "record_stale_result",
]
