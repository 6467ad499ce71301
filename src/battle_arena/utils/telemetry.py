"""Telemetry utilities for logging and metrics.

This module provides the client's observability plumbing:
- Structured logging via structlog
- Prometheus metrics for transport calls and sync cycles
- An async timer that records per-operation latency
"""

import asyncio
import logging
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from prometheus_client import Counter, Histogram
from structlog.processors import JSONRenderer

# Prometheus metrics
TRANSPORT_REQUESTS = Counter(
    "arena_transport_requests_total",
    "Total number of match service requests",
    ["operation", "status"],
)

TRANSPORT_LATENCY = Histogram(
    "arena_transport_duration_seconds",
    "Match service request latency in seconds",
    ["operation"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

SYNC_CYCLES = Counter(
    "arena_sync_cycles_total",
    "Sync loop cycles by outcome",
    ["status"],
)

SKIPPED_TICKS = Counter(
    "arena_sync_ticks_skipped_total",
    "Ticks skipped because a cycle was still in flight",
)


def setup_logging(log_level: str = "INFO", log_format: str = "json") -> None:
    """Initialize structured logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: "json" for machine-readable output, "text" for the console
    """
    logging.basicConfig(format="%(message)s", level=log_level.upper())

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "text":
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str, **context: Any) -> Any:
    """Return a structlog logger, bound to `context` if any is given."""
    logger = structlog.get_logger(name)
    if context:
        logger = logger.bind(**context)
    return logger


def log_operation(
    logger: Any,
    operation: str,
    status: str = "success",
    match_id: str | None = None,
    latency_ms: float | None = None,
    **extra_context: Any,
) -> None:
    """Emit one "Operation completed" event.

    Successful operations are logged at debug level so a running sync loop
    stays quiet; "warning" and "error" statuses use the matching level.
    match_id and latency_ms are only included when known.
    """
    fields: dict[str, Any] = {"operation": operation, "status": status}
    if match_id is not None:
        fields["match_id"] = match_id
    if latency_ms is not None:
        fields["latency_ms"] = latency_ms
    fields.update(extra_context)

    emit = {"error": logger.error, "warning": logger.warning}.get(
        status, logger.debug
    )
    emit("Operation completed", **fields)


@asynccontextmanager
async def transport_timer(
    operation: str,
    match_id: str | None = None,
    logger: Any | None = None,
) -> AsyncGenerator[None, None]:
    """Time one match service request and record its outcome.

    Exceptions raised inside the block are counted as errors and re-raised.

    Args:
        operation: Transport operation name, used as the metric label
        match_id: Match the request concerns, if any
        logger: Logger to report to; defaults to the transport logger
    """
    logger = logger or get_logger("battle_arena.transport")
    started = time.perf_counter()
    status = "success"
    error: str | None = None

    try:
        yield
    except asyncio.CancelledError:
        status = "cancelled"
        raise
    except Exception as e:
        status = "error"
        error = str(e)
        raise
    finally:
        elapsed = time.perf_counter() - started
        TRANSPORT_REQUESTS.labels(operation=operation, status=status).inc()
        TRANSPORT_LATENCY.labels(operation=operation).observe(elapsed)
        extra = {"error": error} if error is not None else {}
        log_operation(
            logger,
            operation,
            status=status,
            match_id=match_id,
            latency_ms=elapsed * 1000,
            **extra,
        )


def record_cycle(status: str) -> None:
    """Record the outcome of one sync cycle.

    Args:
        status: One of "published", "failed", "discarded"
    """
    SYNC_CYCLES.labels(status=status).inc()


def record_skipped_tick() -> None:
    """Record a tick skipped because a cycle was still in flight."""
    SKIPPED_TICKS.inc()
