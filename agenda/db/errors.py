"""
Failures reported by the storage layer.

Repositories never leak raw SQLAlchemy errors; they raise exactly one of the
variants below so callers can switch on them exhaustively.
"""

from typing import Tuple


class StorageError(Exception):
    """Base class for every storage failure."""


class UniqueViolation(StorageError):
    """An insert or update would duplicate a value in a unique column."""

    def __init__(self, fields: Tuple[str, ...], detail: str = ""):
        self.fields = tuple(fields)
        self.detail = detail
        super().__init__(f"Unique constraint violated on {', '.join(self.fields) or '?'}: {detail}")


class RecordNotFound(StorageError):
    """The record targeted by an update or delete does not exist."""

    def __init__(self, table: str, record_id: object):
        self.table = table
        self.record_id = record_id
        super().__init__(f"No {table} record with id={record_id!r}")


class StorageFailure(StorageError):
    """Any other database failure (connectivity, constraint, driver...)."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)
