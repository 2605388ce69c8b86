"""
Prometheus metrics for the rewards engine.

Metrics are created lazily by init_metrics(); until then every track_*
helper is a no-op, so library users that never enable metrics pay nothing.

Environment Variables:
    METABOND_METRICS_ENABLED: Enable metrics server (true/false) - default: false
    METABOND_METRICS_PORT: HTTP port for /metrics endpoint - default: 9108

Usage:
    from metabond.metrics import start_metrics_server, track_command

    start_metrics_server(enabled=True, port=9108)
    track_command("append_checkpoint", "ok")
"""

import logging
import threading
from contextlib import contextmanager
from typing import Generator, Optional

from prometheus_client import Counter, Gauge, Histogram, start_http_server

logger = logging.getLogger(__name__)

COMMANDS_TOTAL: Optional[Counter] = None
QUERY_DURATION: Optional[Histogram] = None
REWARD_ENTRIES_TOTAL: Optional[Counter] = None
LEDGER_LENGTH: Optional[Gauge] = None

_metrics_initialized = False
_metrics_lock = threading.Lock()


def init_metrics() -> None:
    """
    Initialize Prometheus metrics (call once at startup).

    Thread-safe via module-level lock; repeated calls are ignored.
    """
    global COMMANDS_TOTAL, QUERY_DURATION, REWARD_ENTRIES_TOTAL, LEDGER_LENGTH
    global _metrics_initialized

    with _metrics_lock:
        if _metrics_initialized:
            return

        # Command counter (labels: command, outcome)
        COMMANDS_TOTAL = Counter(
            "metabond_commands_total",
            "Checkpoint and deposit commands by outcome",
            labelnames=["command", "outcome"],
        )

        QUERY_DURATION = Histogram(
            "metabond_query_duration_seconds",
            "Duration of rewards-for-week queries in seconds",
            buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0),
        )

        REWARD_ENTRIES_TOTAL = Counter(
            "metabond_rewards_entries_total",
            "Non-zero reward entries returned by queries",
        )

        LEDGER_LENGTH = Gauge(
            "metabond_ledger_length",
            "Number of appended rewards checkpoints",
        )

        _metrics_initialized = True
        logger.info("Prometheus metrics initialized")


def start_metrics_server(enabled: bool, port: int) -> None:
    """
    Start Prometheus metrics HTTP server in background thread.

    Args:
        enabled: Whether to start metrics server (METABOND_METRICS_ENABLED)
        port: HTTP port for /metrics endpoint (METABOND_METRICS_PORT)
    """
    if not enabled:
        logger.info("Metrics server disabled (METABOND_METRICS_ENABLED=false)")
        return

    init_metrics()

    try:
        start_http_server(port, addr="0.0.0.0")
        logger.info(f"Metrics server started on http://0.0.0.0:{port}/metrics")
    except OSError as e:
        logger.error(f"Failed to start metrics server: {e}")


def track_command(command: str, outcome: str) -> None:
    """
    Count a command attempt.

    Args:
        command: "append_checkpoint" or "deposit"
        outcome: "ok" or the rejecting error class name
    """
    if COMMANDS_TOTAL is not None:
        COMMANDS_TOTAL.labels(command=command, outcome=outcome).inc()


def track_reward_entries(count: int) -> None:
    if REWARD_ENTRIES_TOTAL is not None and count:
        REWARD_ENTRIES_TOTAL.inc(count)


def set_ledger_length(length: int) -> None:
    if LEDGER_LENGTH is not None:
        LEDGER_LENGTH.set(length)


@contextmanager
def track_query_duration() -> Generator[None, None, None]:
    """
    Context manager for timing a rewards query.

    Usage:
        with track_query_duration():
            ...
    """
    if QUERY_DURATION is None:
        yield
        return

    with QUERY_DURATION.time():
        yield
