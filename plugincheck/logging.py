"""Structured logging via structlog.

Configures structlog once per CLI invocation. Engine modules keep using
``logging.getLogger(__name__)``; their records are rendered by the same
processor chain through ``structlog.stdlib.ProcessorFormatter``.

Renderer selection:
  debug=True   `ConsoleRenderer` for local troubleshooting.
  debug=False  `JSONRenderer` for CI logs.

All output goes to stderr. Stdout is reserved for the analysis payload.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

HANDLER_NAME = "plugincheck"


def configure_structlog(debug: bool = False, stream: TextIO | None = None) -> None:
    """Configure structlog and the stdlib bridge.

    Calling multiple times is safe; only the handler installed by a previous
    call is replaced, other root handlers are left alone.
    """
    stream = stream if stream is not None else sys.stderr

    shared_processors: list = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if debug:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(formatter)
    handler.set_name(HANDLER_NAME)

    root = logging.getLogger()
    remove_handler()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)


def remove_handler() -> None:
    """Detach the handler installed by configure_structlog(), if any."""
    root = logging.getLogger()
    for existing in list(root.handlers):
        if existing.get_name() == HANDLER_NAME:
            root.removeHandler(existing)
