"""
Opt-in log output for formpost's structlog events.

The library only ever emits debug events (`upload_started`, `upload_connected`,
`upload_finished`, `upload_failed`) and leaves output to the application.
`setup_logging()` is the one-call way to see them.
"""

import logging
import os

import structlog

_handler: logging.Handler | None = None


def _renderer(dev: bool):
    if dev:
        return structlog.dev.ConsoleRenderer(colors=False)
    return structlog.processors.JSONRenderer(sort_keys=True)


def setup_logging(level: str | None = None) -> logging.Handler:
    """Send formpost events through stdlib logging on stderr.

    The level is `level`, else FORMPOST_LOG_LEVEL, else WARNING (which keeps
    the debug events quiet). FORMPOST_LOG_FORMAT=dev selects key=value console
    lines instead of JSON. Calling it again reconfigures in place and never
    attaches a second handler.
    """
    global _handler

    level = level or os.getenv("FORMPOST_LOG_LEVEL", "WARNING")
    shared = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    structlog.configure(
        processors=shared + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )

    if _handler is None:
        _handler = logging.StreamHandler()
    _handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(os.getenv("FORMPOST_LOG_FORMAT", "") == "dev"),
            ],
        )
    )

    root = logging.getLogger()
    if _handler not in root.handlers:
        root.addHandler(_handler)
    root.setLevel(level.upper())
    return _handler
