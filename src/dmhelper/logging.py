"""
Diagnostic logging for docker-machine-helper.

Operator-facing progress is printed through :mod:`dmhelper.output`; this module
only carries structured diagnostics (subprocess calls, step timings), which are
hidden unless ``--verbose`` or ``--log-json`` is given. Everything is written to
stderr so ``status``, ``inspect`` and ``docker ...`` output stays pipeable.
"""

import logging
import sys
import time
from contextlib import contextmanager
from typing import IO, Iterator, List, Optional

import structlog

QUIET_LEVEL = "WARNING"
VERBOSE_LEVEL = "DEBUG"


def _pre_chain() -> List[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]


def configure_logging(
    level: str = QUIET_LEVEL,
    json_output: bool = False,
    stream: Optional[IO[str]] = None,
) -> None:
    """
    Route structlog and stdlib logging through one stderr handler.

    Args:
        level: Threshold name (DEBUG, INFO, WARNING, ERROR)
        json_output: Render one JSON object per event instead of console lines
        stream: Output stream, stderr when omitted
    """
    stream = stream or sys.stderr
    pre_chain = _pre_chain()

    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=stream.isatty(),
            exception_formatter=structlog.dev.plain_traceback,
        )

    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
            foreign_pre_chain=pre_chain,
        )
    )
    logging.basicConfig(level=level.upper(), handlers=[handler], force=True)


def get_logger(name: str = "dmhelper") -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


@contextmanager
def log_operation(
    logger: structlog.stdlib.BoundLogger, operation: str, **context
) -> Iterator[structlog.stdlib.BoundLogger]:
    """
    Emit ``<operation>.started`` and then ``.completed`` or ``.failed``.

    Usage:
        with log_operation(log, "provision", machine="dev-box"):
            ...
    """
    bound = logger.bind(operation=operation, **context)
    started = time.monotonic()
    bound.info(f"{operation}.started")

    try:
        yield bound
    except Exception as e:
        bound.error(
            f"{operation}.failed",
            error=str(e),
            error_type=type(e).__name__,
            duration_s=round(time.monotonic() - started, 3),
        )
        raise

    bound.info(f"{operation}.completed", duration_s=round(time.monotonic() - started, 3))
