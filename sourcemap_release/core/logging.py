"""Structured logging via structlog.

Configures structlog once per process. Library modules keep using
`logging.getLogger(__name__)`; the stdlib bridge renders those records
through the same processor chain as `structlog.get_logger()` output.

Renderer selection:
  debug=True  : `ConsoleRenderer` with colours for local builds.
  debug=False : `JSONRenderer` for CI logs.

The release identifiers are bound into every log line via
`bind_release()` so log output from concurrent builds stays attributable.
"""

from __future__ import annotations

import logging
import sys

import structlog


def bind_release(organization: str, project: str, version: str) -> None:
    """Bind release identifiers into structlog's context vars."""
    structlog.contextvars.bind_contextvars(
        organization=organization,
        project=project,
        release=version,
    )


def configure_structlog(debug: bool = False) -> None:
    """Configure structlog for the process lifetime.

    Calling multiple times is safe; the last call wins.
    """
    shared_processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if debug:
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    # Bridge stdlib logging so httpx and the plugin modules render through
    # the same processors, bound release context included.
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=[structlog.stdlib.add_logger_name] + shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    logging.basicConfig(
        handlers=[handler],
        level=logging.DEBUG if debug else logging.INFO,
        force=True,
    )
