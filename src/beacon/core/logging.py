# src/beacon/core/logging.py
"""Structured logging configuration for Beacon.

One processor chain serves both structlog and stdlib loggers. Transport
libraries that log through logging.getLogger(__name__) land in the same
stream as collector modules, with the same run_id bound by the orchestrator
and the same ``logger`` field naming the emitting module.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter

from beacon.core.config import LoggingSettings

# Transport and tracing internals that are noise at DEBUG level.
_NOISY_LOGGERS: tuple[str, ...] = (
    "websockets",
    "websockets.client",
    "websockets.protocol",
    "asyncio",
    "opentelemetry",
    "opentelemetry.sdk",
    "opentelemetry.exporter",
)

_SHARED_PROCESSORS: tuple[Any, ...] = (
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.StackInfoRenderer(),
)


def _remove_internal_fields(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """ProcessorFormatter bookkeeping never reaches the output."""
    event_dict.pop("_record", None)
    event_dict.pop("_from_structlog", None)
    return event_dict


def _render_processors(json_output: bool) -> list[Any]:
    if json_output:
        return [_remove_internal_fields, structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [_remove_internal_fields, structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())]


def configure_logging(
    settings: LoggingSettings | None = None,
    *,
    json_output: bool | None = None,
    level: str | None = None,
) -> LoggingSettings:
    """Configure structlog and stdlib logging for Beacon.

    Args:
        settings: The ``logging`` section of GatherSettings (defaults if omitted)
        json_output: Overrides settings.json_output when given
        level: Overrides settings.level when given

    Returns:
        The effective settings after overrides
    """
    overrides: dict[str, Any] = {}
    if json_output is not None:
        overrides["json_output"] = json_output
    if level is not None:
        overrides["level"] = level
    effective = LoggingSettings.model_validate({**(settings or LoggingSettings()).model_dump(), **overrides})
    log_level = logging.getLevelName(effective.level)

    structlog.configure(
        processors=[*_SHARED_PROCESSORS, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Tests reconfigure logging; cached loggers would go stale
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        ProcessorFormatter(
            processors=_render_processors(effective.json_output),
            foreign_pre_chain=list(_SHARED_PROCESSORS),
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)

    noisy_level = max(log_level, logging.WARNING)
    for logger_name in _NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(noisy_level)
    return effective


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Bound logger for a module (typically ``__name__``)."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
