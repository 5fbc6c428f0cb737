import logging
import sys
import os

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO", format_type: str = "json", structured: bool = True
) -> None:
    """Configure structured logging with structlog.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        format_type: "json" for machine-readable logs, "human" for dev
        structured: Whether to add call-site processors
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        stream=sys.stdout,
        format="%(message)s",  # structlog will handle formatting
        force=True,
    )

    is_dev = format_type == "human" or os.getenv("FLOWSHAPE_LOG_HUMAN", "").lower() in (
        "1",
        "true",
        "yes",
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if structured:
        processors.append(
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.FILENAME,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            )
        )

    if is_dev:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = "flowshape") -> FilteringBoundLogger:
    """Get a structured logger instance.

    Examples:
        log = get_logger(__name__)
        log.debug("records.extracted", count=3, row_tag="item")
        log.warning("conversion.failed", target="csv", error=str(e))
    """
    return structlog.get_logger(name)
