"""
Prometheus metrics for the Matchday flow service.
"""
from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram, start_http_server

from shared.config import get_settings
from shared.utils.logging import get_logger

logger = get_logger(__name__)

# ── Counters ────────────────────────────────────────────────────────────
PROVIDER_REQUESTS = Counter(
    "md_provider_requests_total",
    "Total provider HTTP requests",
    ["provider", "endpoint", "status"],
)
FLOW_EVALUATIONS = Counter(
    "md_flow_evaluations_total",
    "Flow card evaluations by card kind, id and outcome",
    ["kind", "card", "outcome"],
)
LIVENESS_DECISIONS = Counter(
    "md_liveness_decisions_total",
    "Liveness evaluations by deciding stage and result",
    ["stage", "result"],
)
PROVIDER_DEGRADED = Counter(
    "md_provider_degraded_total",
    "Boolean conditions that degraded to false on provider failure",
    ["operation"],
)
REFRESH_ERRORS = Counter(
    "md_refresh_errors_total",
    "Failed team refreshes in the background loop",
)

# ── Histograms ──────────────────────────────────────────────────────────
PROVIDER_LATENCY = Histogram(
    "md_provider_latency_seconds",
    "Provider request latency in seconds",
    ["provider"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# ── Gauges ──────────────────────────────────────────────────────────────
LIVE_TEAMS = Gauge(
    "md_live_teams",
    "Tracked teams whose match is currently live",
)


def start_metrics_server(port: int | None = None) -> None:
    """Start the Prometheus metrics HTTP server."""
    settings = get_settings()
    if not settings.metrics_enabled:
        return
    metrics_port = port or settings.metrics_port
    try:
        start_http_server(metrics_port)
        logger.info("metrics_server_started", port=metrics_port)
    except OSError as exc:
        logger.warning("metrics_server_failed", error=str(exc), port=metrics_port)
