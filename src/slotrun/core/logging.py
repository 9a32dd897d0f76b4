"""
Structured logging for slotrun.

:func:`configure_logging` is called once per process, by the CLI callback or
the API lifespan.  Modules then log events with key/value fields, e.g.
``logger.info("slot_executed", slot=3, bytes=120)``; the set, slot and
request id bound through :class:`LogContext` are merged into every event.

Output goes to stderr: stdout carries command output such as batch JSON.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger


class _ServiceName:
    """Processor stamping ``service.name`` on every event."""

    def __init__(self, name: str) -> None:
        self.name = name

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service.name", self.name)
        return event_dict


def configure_logging(level: str = "INFO", json_format: bool | None = None, service: str = "slotrun") -> None:
    """Configure structlog on top of stdlib logging.

    Args:
        level: DEBUG, INFO, WARNING or ERROR
        json_format: JSON lines when true, console rendering when false,
            JSON unless stderr is a terminal when ``None``
        service: Value of the ``service.name`` field
    """
    interactive = sys.stderr.isatty()
    if json_format is None:
        json_format = not interactive

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _ServiceName(service),
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]
    if json_format:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=interactive))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level.upper(), force=True)


def get_logger(name: str | None = None) -> Any:
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


class LogContext:
    """Bind fields for the duration of a ``with`` block.

    Values bound before entering are restored on exit, so nested contexts
    (a request wrapping a batch wrapping a slot) unwind cleanly::

        with LogContext(set="reports.txt", slot=4):
            logger.info("slot_started")
    """

    def __init__(self, **fields: Any) -> None:
        self._fields = fields
        self._scope = None

    def __enter__(self) -> LogContext:
        self._scope = structlog.contextvars.bound_contextvars(**self._fields)
        self._scope.__enter__()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._scope.__exit__(*exc_info)
        self._scope = None


__all__ = ["LogContext", "bind_context", "clear_context", "configure_logging", "get_logger"]
