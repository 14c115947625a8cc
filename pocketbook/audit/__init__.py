"""Logging package."""

from pocketbook.audit.logger import configure_logging, get_logger, log_skipped_record

__all__ = ["configure_logging", "get_logger", "log_skipped_record"]
