"""structlog configuration for sectionctl.

Every record, whether it comes from ``structlog.get_logger`` or a plain
``logging.getLogger(__name__)`` call inside the package, goes through one
``ProcessorFormatter`` on stderr: a console renderer by default, JSON lines
with ``--log-json``. Context bound with :func:`bind_log_context` (the
running command, for instance) is merged into every record.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Any

import structlog

# Third-party loggers that stay at WARNING even under --verbose.
QUIET_LOGGERS = ("sqlalchemy", "pluggy")


def _pre_chain() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _renderer(log_json: bool, stream: IO[str]) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=stream.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: IO[str] | None = None,
) -> None:
    """Route stdlib and structlog records through a single stderr handler.

    Args:
        verbose: Let ``sectionctl.*`` loggers through at DEBUG; otherwise
            only WARNING and above are shown.
        log_json: Render JSON lines instead of the console format.
        stream: Destination, ``sys.stderr`` when omitted.
    """
    out = stream or sys.stderr
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(out)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json, out),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger("sectionctl").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_log_context(**values: Any) -> None:
    """Attach key/value pairs to every record logged from this context."""
    structlog.contextvars.bind_contextvars(**values)


def clear_log_context() -> None:
    structlog.contextvars.clear_contextvars()
