"""structlog setup for the CLI.

All log output goes to stderr; stdout is left to npm and webpack, whose
output the runner inherits.

Environment:
    FRONTEND_SYNC_LOG_LEVEL   level name, default INFO
    FRONTEND_SYNC_LOG_FORMAT  console | json, default console
"""

from __future__ import annotations

import logging
import os
import sys

import structlog

# Chatty HTTP client loggers, only used when fetching a remote bundler template
_QUIET_LOGGERS = ("httpx", "httpcore")


def _renderer(fmt: str) -> structlog.types.Processor:
    if fmt == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def _timestamper(fmt: str) -> structlog.types.Processor:
    if fmt == "json":
        return structlog.processors.TimeStamper(fmt="iso", utc=True)
    return structlog.processors.TimeStamper(fmt="%H:%M:%S", utc=False)


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Route structlog and stdlib logging through one stderr handler.

    Explicit arguments (the CLI's ``--verbose``) win over the environment.
    """
    level_name = (level or os.environ.get("FRONTEND_SYNC_LOG_LEVEL") or "INFO").upper()
    fmt = (fmt or os.environ.get("FRONTEND_SYNC_LOG_FORMAT") or "console").lower()

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _timestamper(fmt),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(fmt),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level_name)
    logging.getLogger("frontend_sync").setLevel(level_name)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
