"""Operations on the ``Note`` table (per-page margin notes)."""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING

from paperdb.db.crud import delete_row, save_row
from paperdb.db.errors import engine_errors
from paperdb.db.models import Note

if TYPE_CHECKING:
    from paperdb.db.connection import Database

_COLUMNS = ("PaperID", "Page", "LeftNote", "RightNote")


def _row_to_note(row: sqlite3.Row) -> Note:
    return Note(
        id=row["ID"],
        paper_id=row["PaperID"],
        page=row["Page"],
        left_note=row["LeftNote"],
        right_note=row["RightNote"],
        indb=True,
        changed=False,
    )


def save_note(db: Database, note: Note) -> None:
    """Insert or update *note*; a no-op unless ``note.changed``."""
    save_row(
        db,
        note,
        "Note",
        _COLUMNS,
        (note.paper_id, note.page, note.left_note, note.right_note),
    )


def delete_note(db: Database, note: Note) -> None:
    """Delete the row behind *note*."""
    delete_row(db, note, "Note")


def load_notes(db: Database, paper_id: int) -> list[Note]:
    """Return every note of *paper_id*, ordered by page."""
    with engine_errors():
        rows = db.connection.execute(
            """
            SELECT "ID", "PaperID", "Page", "LeftNote", "RightNote"
            FROM   "Note"
            WHERE  "PaperID" = ?
            ORDER  BY "Page", "ID"
            """,
            (paper_id,),
        ).fetchall()
    return [_row_to_note(r) for r in rows]
