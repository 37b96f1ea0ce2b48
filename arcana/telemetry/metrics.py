"""Prometheus metrics definitions and helpers."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests processed",
    ("method", "route", "status"),
)

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ("method", "route"),
    buckets=(
        0.005,
        0.01,
        0.025,
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
        2.5,
        5.0,
        10.0,
    ),
)

ERROR_COUNTER = Counter(
    "app_internal_errors_total",
    "Number of requests ending in internal server error responses",
    ("method", "route"),
)

RITUALS_STARTED = Counter(
    "ritual_started_total",
    "Rituals started, by spread",
    ("spread",),
)

READING_FALLBACKS = Counter(
    "ritual_reading_fallbacks_total",
    "Readings replaced by a literal sentence",
    ("reason",),
)

STALE_RESULTS = Counter(
    "ritual_stale_results_total",
    "Generation results dropped because a newer ritual started",
    ("stage",),
)

NARRATION_OUTCOMES = Counter(
    "ritual_narration_outcomes_total",
    "Closing-line narration attempts by outcome",
    ("outcome",),
)

READING_LATENCY = Histogram(
    "ritual_reading_duration_seconds",
    "Time from ritual start until the reading text resolved",
    buckets=(0.5, 1.0, 2.5, 5.0, 10.0, 20.0, 30.0, 45.0, 60.0),
)


def observe_request(
    method: str,
    route: str,
    status_code: int,
    duration_seconds: float,
) -> None:
    """Record metrics for a completed HTTP request."""

    safe_route = route or "unknown"
    safe_method = method or "UNKNOWN"
    status_label = str(status_code)
    observed_duration = duration_seconds if duration_seconds >= 0 else 0

    REQUEST_COUNT.labels(
        method=safe_method,
        route=safe_route,
        status=status_label,
    ).inc()
    REQUEST_LATENCY.labels(
        method=safe_method,
        route=safe_route,
    ).observe(observed_duration)

    if status_code >= 500:
        ERROR_COUNTER.labels(
            method=safe_method,
            route=safe_route,
        ).inc()


def record_ritual_started(spread_id: str) -> None:
    RITUALS_STARTED.labels(spread=spread_id).inc()


def record_reading_fallback(reason: str) -> None:
    READING_FALLBACKS.labels(reason=reason).inc()


def record_stale_result(stage: str) -> None:
    STALE_RESULTS.labels(stage=stage).inc()


def record_narration(outcome: str) -> None:
    NARRATION_OUTCOMES.labels(outcome=outcome).inc()
