"""
Structured Logging

DESIGN DECISION: Records that cannot be aggregated are never raised
to the dashboard. They are excluded, and the exclusion is logged here
so dirty data stays visible to whoever reads the logs.

The module configures structlog once, on import, on top of the
standard library logging machinery. Call configure_logging() from the
host application to choose the level.
"""

import logging
import sys
from typing import Optional

import structlog

from pocketbook.errors import MalformedRecordError, MissingDateError


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route structlog output through a stdlib handler at the given level.
    
    Safe to call more than once; only the level is updated on
    subsequent calls.
    """
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            format="%(message)s",
            stream=sys.stdout,
        )
    root.setLevel(level.upper())


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger bound to the given name."""
    return structlog.get_logger(name)


def log_skipped_record(
    logger: structlog.stdlib.BoundLogger,
    error: MalformedRecordError,
    kind: str,
) -> None:
    """
    Log that a record was excluded from an aggregation.
    
    Missing dates are expected (the store allows them in old rows),
    so they go to debug. Unparseable dates are a data problem and
    are logged as warnings.
    """
    fields = {
        "record_id": error.record_id,
        "kind": kind,
        "reason": str(error),
        "raw_value": error.raw_value,
    }
    if isinstance(error, MissingDateError):
        logger.debug("record_skipped", **fields)
    else:
        logger.warning("record_skipped", **fields)
