"""Operations on the ``Field`` table."""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING

from paperdb.db.crud import delete_row, save_row
from paperdb.db.models import Field

if TYPE_CHECKING:
    from paperdb.db.connection import Database

_COLUMNS = ("PaperID", "Name", "Value")


def _row_to_field(row: sqlite3.Row) -> Field:
    return Field(
        id=row["ID"],
        paper_id=row["PaperID"],
        name=row["Name"],
        value=row["Value"],
        indb=True,
        changed=False,
    )


def save_field(db: Database, field: Field) -> None:
    """Insert or update *field*; a no-op unless ``field.changed``."""
    save_row(db, field, "Field", _COLUMNS, (field.paper_id, field.name, field.value))


def delete_field(db: Database, field: Field) -> None:
    """Delete the row behind *field*."""
    delete_row(db, field, "Field")
