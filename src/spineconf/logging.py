"""
Structured logging for configuration assembly.

Manifesto:
    Configuration is assembled once, at process start, usually before the
    application has configured its own logging. The events emitted here must
    be readable on a developer console and parseable by a log pipeline.

    - **Structures:** key/value events via structlog
    - **Flexes:** Console output for development, JSON for production
    - **Times:** ``log_step`` wraps a stage with start/end/error events

Examples:
    >>> from spineconf.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", json_format=False)
    >>> logger = get_logger(__name__)
    >>> logger.info("config.document.read", logical_name="app-configuration.yaml")

Guardrails:
    - Never log expanded property values; they may be secrets
    - Auto-detects JSON vs console based on TTY

Tags:
    logging, structlog, observability, spineconf

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import logging
import sys
import time
import traceback
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

_SERVICE_NAME = "spineconf"


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
) -> None:
    """Configure structured logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None for auto (JSON if not tty)
    """
    if json_format is None:
        json_format = not sys.stderr.isatty()

    processors: list[Processor] = [
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]

    if json_format:
        processors.append(structlog.processors.format_exc_info)
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger (usually ``get_logger(__name__)``)."""
    return structlog.get_logger(name)


# ── Timing ───────────────────────────────────────────────────────────────


@dataclass
class TimingResult:
    """Result of a timed stage."""

    step: str
    started_at: float = field(default_factory=time.perf_counter)
    ended_at: float | None = None
    metrics: dict[str, Any] = field(default_factory=dict)
    error_info: dict[str, Any] | None = None

    def stop(self) -> TimingResult:
        self.ended_at = time.perf_counter()
        return self

    @property
    def duration_ms(self) -> float:
        end = self.ended_at if self.ended_at is not None else time.perf_counter()
        return (end - self.started_at) * 1000

    def add_metric(self, key: str, value: Any) -> TimingResult:
        """Add a metric to include in the completion event."""
        self.metrics[key] = value
        return self

    def set_error(self, e: BaseException) -> TimingResult:
        self.error_info = {
            "error_type": type(e).__name__,
            "error_message": str(e),
            "error_stack": traceback.format_exc(),
        }
        return self

    def to_log_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"duration_ms": round(self.duration_ms, 2)}
        result.update(self.metrics)
        return result


@contextmanager
def log_step(event: str, level: str = "info", **extra_metrics: Any) -> Iterator[TimingResult]:
    """
    Log a stage's start (DEBUG), end (``level``) and error (ERROR) with timing.

    Usage:
        with log_step("config.assemble", prefix="app") as timer:
            config = build()
            timer.add_metric("documents", 4)
    """
    log = get_logger("spineconf.timing")
    timer = TimingResult(step=event, metrics=dict(extra_metrics))
    log.debug(f"{event}.start", **extra_metrics)

    try:
        yield timer
    except Exception as e:
        timer.stop()
        timer.set_error(e)
        error_fields = timer.to_log_dict()
        error_fields.update(timer.error_info or {})
        log.error(f"{event}.error", **error_fields)
        raise
    finally:
        timer.stop()

    getattr(log, level)(f"{event}.end", **timer.to_log_dict())


__all__ = [
    "configure_logging",
    "get_logger",
    "log_step",
    "TimingResult",
]
