"""
registry_sdk.tier0_core.metrics
─────────────────────────────────
Counters and histograms with standard naming and labels, exported through
the default prometheus-client registry. The host process decides how to
expose them (``/metrics`` endpoint, push gateway).

Minimal stack: prometheus-client
"""
from __future__ import annotations

from typing import Callable

from prometheus_client import Counter, Histogram

from registry_sdk.tier0_core.config import get_config

# Standard labels applied to every metric, fixed when this module is imported
_DEFAULT_LABELS = ["service", "env"]
_DEFAULT_LABEL_VALUES = dict(
    zip(_DEFAULT_LABELS, [get_config().app_name, get_config().environment])
)


def counter(name: str, description: str, labels: list[str] | None = None) -> Callable:
    """
    Create a counter with standard labels. Call once per metric name.

    Usage:
        requests_total = counter("schema_registry_requests_total", "Requests", ["operation"])
        requests_total(operation="resolve").inc()
    """
    c = Counter(name, description, _DEFAULT_LABELS + (labels or []))

    def _counter(**extra_labels: str) -> Counter:
        return c.labels(**_DEFAULT_LABEL_VALUES, **extra_labels)

    return _counter


def histogram(
    name: str,
    description: str,
    labels: list[str] | None = None,
    buckets: tuple = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
) -> Callable:
    """
    Create a histogram with standard labels. Call once per metric name.

    Usage:
        duration = histogram("schema_registry_request_duration_seconds", "Duration", ["operation"])
        duration(operation="resolve").observe(0.042)
    """
    h = Histogram(name, description, _DEFAULT_LABELS + (labels or []), buckets=buckets)

    def _histogram(**extra_labels: str) -> Histogram:
        return h.labels(**_DEFAULT_LABEL_VALUES, **extra_labels)

    return _histogram


# ── Registry client metrics ───────────────────────────────────────────────────

registry_requests = counter(
    "schema_registry_requests_total",
    "Schema registry operations by outcome (ok or local error kind)",
    ["operation", "outcome"],
)

registry_request_duration = histogram(
    "schema_registry_request_duration_seconds",
    "Schema registry operation duration, including the transport call",
    ["operation"],
)


__all__ = ["counter", "histogram", "registry_requests", "registry_request_duration"]
