"""Structured logging for blueprintruntime (structlog).

Modules log keyword-style events:

    logger = get_logger(__name__)
    logger.debug("run finished", steps=12, aborted=False)

Logs are diagnostics for hosts; the textual trace a run returns to its
caller never depends on them. Importing the package leaves structlog alone:
events follow whatever configuration the host set up, and
`configure_logging` (called by the CLI) is the only place that configures it.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Any, List, Optional

import structlog
from structlog.types import Processor


def _shared_processors() -> List[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(
    json_output: bool = False,
    log_level: str = "WARNING",
    include_timestamps: bool = True,
    stream: Optional[IO[str]] = None,
) -> None:
    """Configure structured logging for a host process (CLI, service, tests).

    Args:
        json_output: Output logs as JSON lines instead of console key/values
        log_level: Minimum log level
        include_timestamps: Include ISO timestamps
        stream: Destination stream (default: stderr, so stdout stays the trace)
    """
    processors: List[Processor] = [structlog.stdlib.filter_by_level] + _shared_processors()
    if include_timestamps:
        processors.insert(1, structlog.processors.TimeStamper(fmt="iso", utc=True))

    if json_output:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors += [
            structlog.dev.ConsoleRenderer(
                colors=False,
                exception_formatter=structlog.dev.plain_traceback,
            )
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Module-level loggers must pick up later reconfiguration.
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stderr,
        level=getattr(logging, str(log_level).upper(), logging.WARNING),
        force=True,
    )


def get_logger(name: str = __name__, **initial_values: Any) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, optionally bound to initial key/values."""
    return structlog.get_logger(name, **initial_values)
