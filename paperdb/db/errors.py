"""Exceptions raised by the database layer.

Every failure surfaces as a subclass of :class:`PaperDBError` so callers
can catch the whole family in one place.  Engine failures keep the
``sqlite3`` message verbatim and chain the original exception.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Iterator


class PaperDBError(Exception):
    """Base class for all paperdb errors."""


class EngineError(PaperDBError):
    """The storage engine rejected a prepare/bind/step."""


class AllocationError(PaperDBError):
    """An in-memory structure could not be built."""


class SchemaError(EngineError):
    """MetaInfo is missing or the stored schema version is unusable."""


class PaperNotFoundError(EngineError, LookupError):
    """No Paper row matches the requested id."""

    def __init__(self, paper_id: int) -> None:
        super().__init__(f"Paper not found: {paper_id!r}")
        self.paper_id = paper_id


@contextmanager
def engine_errors() -> Iterator[None]:
    """Re-raise any ``sqlite3.Error`` inside the block as :class:`EngineError`."""
    try:
        yield
    except sqlite3.Error as exc:
        raise EngineError(str(exc)) from exc
