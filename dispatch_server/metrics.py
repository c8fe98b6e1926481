"""
Prometheus metrics for the dispatch server.

Exposes operational metrics via an HTTP /metrics endpoint for Prometheus
scraping. All tracking helpers are no-ops until init_metrics() has run, so
the engine and tests can call them unconditionally.

Usage:
    from dispatch_server.metrics import start_metrics_server, track_action

    start_metrics_server(enabled=True, port=8080)
    track_action("MOVE_DOCTOR")
"""

import logging
import threading
from contextlib import contextmanager
from typing import Generator, Optional

from prometheus_client import Counter, Gauge, Histogram, start_http_server

logger = logging.getLogger(__name__)

ACTIONS_TOTAL: Optional[Counter] = None
ACTION_DURATION: Optional[Histogram] = None
CONNECTED_SESSIONS: Optional[Gauge] = None
SNAPSHOT_WRITE_FAILURES: Optional[Counter] = None

_metrics_initialized = False
_metrics_lock = threading.Lock()


def init_metrics() -> None:
    """
    Initialize Prometheus metrics (call once at startup).

    Thread-safe via module-level lock.
    """
    global ACTIONS_TOTAL, ACTION_DURATION, CONNECTED_SESSIONS, SNAPSHOT_WRITE_FAILURES
    global _metrics_initialized

    with _metrics_lock:
        if _metrics_initialized:
            return

        # Unrecognized kinds are counted as "UNKNOWN"
        ACTIONS_TOTAL = Counter(
            "dispatch_actions_total",
            "Total number of actions applied to the board",
            labelnames=["action_type"],
        )

        # Full cycle: apply + commit + snapshot write + broadcast
        ACTION_DURATION = Histogram(
            "dispatch_action_duration_seconds",
            "Duration of action processing cycles in seconds",
            buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
        )

        CONNECTED_SESSIONS = Gauge(
            "dispatch_connected_sessions",
            "Number of connected client sessions",
        )

        SNAPSHOT_WRITE_FAILURES = Counter(
            "dispatch_snapshot_write_failures_total",
            "Total number of failed snapshot writes",
        )

        _metrics_initialized = True
        logger.info("Prometheus metrics initialized")


def start_metrics_server(enabled: bool, port: int) -> None:
    """
    Start Prometheus metrics HTTP server in background thread.

    Args:
        enabled: Whether to start metrics server (METRICS_ENABLED)
        port: HTTP port for /metrics endpoint (METRICS_PORT)
    """
    if not enabled:
        logger.info("Metrics server disabled (METRICS_ENABLED=false)")
        return

    init_metrics()

    try:
        # start_http_server is non-blocking (starts daemon thread)
        start_http_server(port, addr="0.0.0.0")
        logger.info(f"Metrics server started on http://0.0.0.0:{port}/metrics")
    except OSError as e:
        logger.error(f"Failed to start metrics server: {e}")


@contextmanager
def track_action_duration() -> Generator[None, None, None]:
    if ACTION_DURATION is None:
        yield
        return

    with ACTION_DURATION.time():
        yield


def track_action(action_type: str) -> None:
    if ACTIONS_TOTAL is not None:
        ACTIONS_TOTAL.labels(action_type=action_type).inc()


def set_connected_sessions(count: int) -> None:
    if CONNECTED_SESSIONS is not None:
        CONNECTED_SESSIONS.set(count)


def track_snapshot_failure() -> None:
    if SNAPSHOT_WRITE_FAILURES is not None:
        SNAPSHOT_WRITE_FAILURES.inc()
