"""Prometheus metrics definitions for s3partcopy.

All metrics use the ``s3partcopy_`` prefix for namespace isolation. They
are created only when ``init_metrics()`` is called; until then the
module-level references stay ``None`` and callers skip recording.
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# Flag indicating whether metrics have been initialised via init_metrics().
_initialized: bool = False

# ---------------------------------------------------------------------------
# Dispatched request counter  (labels: operation, status)
# ---------------------------------------------------------------------------
requests_total: Counter | None = None

# ---------------------------------------------------------------------------
# Retry counter  (labels: operation)
# ---------------------------------------------------------------------------
retries_total: Counter | None = None

# ---------------------------------------------------------------------------
# Per-attempt latency  (labels: operation)
# ---------------------------------------------------------------------------
request_duration_seconds: Histogram | None = None


def init_metrics() -> None:
    """Create and register all Prometheus metrics.

    Safe to call more than once; collectors are registered in the global
    registry only on the first call.
    """
    global _initialized
    global requests_total, retries_total, request_duration_seconds

    if _initialized:
        return

    requests_total = Counter(
        "s3partcopy_requests_total",
        "Total S3 requests dispatched by operation and outcome",
        ["operation", "status"],
    )

    retries_total = Counter(
        "s3partcopy_retries_total",
        "Total retried S3 request attempts by operation",
        ["operation"],
    )

    request_duration_seconds = Histogram(
        "s3partcopy_request_duration_seconds",
        "Latency of individual S3 request attempts",
        ["operation"],
    )

    _initialized = True
