import logging
import sys

import structlog

LOG_LEVELS = ("critical", "error", "warning", "info", "debug")


def setup_logging(level: str = "info") -> None:
    """Configure structured logging.

    App events and uvicorn's own stdlib records go through one root handler,
    so both come out in the same format (console on a TTY, JSON otherwise).
    """
    if sys.stderr.isatty():
        renderer = structlog.dev.ConsoleRenderer()
        exc_processors = []
    else:
        renderer = structlog.processors.JSONRenderer()
        exc_processors = [structlog.processors.format_exc_info]

    shared = [
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *exc_processors,
                renderer,
            ],
            foreign_pre_chain=shared,
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level.upper())
