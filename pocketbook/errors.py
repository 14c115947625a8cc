"""
Exception taxonomy for Pocketbook.

Only one error class matters to the aggregation engine:
MalformedRecordError, raised when a record's date cannot be parsed.
The engine catches it, logs it and skips the record. It never
reaches the caller of an aggregation function.
"""

from typing import Any, Optional


class PocketbookError(Exception):
    """Base exception for all Pocketbook errors."""
    pass


class MalformedRecordError(PocketbookError, ValueError):
    """A record's date (or other required field) cannot be interpreted."""
    
    def __init__(
        self,
        message: str,
        record_id: Optional[str] = None,
        raw_value: Any = None,
    ):
        self.record_id = record_id
        self.raw_value = raw_value
        super().__init__(message)


class MissingDateError(MalformedRecordError):
    """A record has no date at all (None or empty string)."""
    pass
