"""Operations on the ``Reference`` table (directed citation edges).

Rows are addressed by their surrogate ``ID`` like every other table; the
``(PaperID, RefPaperID)`` pair is UNIQUE, so saving the same edge twice
as two separate objects fails with :class:`~paperdb.db.errors.EngineError`.
"""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING

from paperdb.db.crud import delete_row, save_row
from paperdb.db.errors import engine_errors
from paperdb.db.models import Reference

if TYPE_CHECKING:
    from paperdb.db.connection import Database

_COLUMNS = ("PaperID", "RefPaperID")


def _row_to_reference(row: sqlite3.Row) -> Reference:
    return Reference(
        id=row["ID"],
        paper_id=row["PaperID"],
        ref_paper_id=row["RefPaperID"],
        indb=True,
        changed=False,
    )


def save_reference(db: Database, ref: Reference) -> None:
    """Insert or update *ref*; a no-op unless ``ref.changed``."""
    save_row(db, ref, "Reference", _COLUMNS, (ref.paper_id, ref.ref_paper_id))


def delete_reference(db: Database, ref: Reference) -> None:
    """Delete the row behind *ref*."""
    delete_row(db, ref, "Reference")


def cited_by(db: Database, paper_id: int) -> list[int]:
    """Return the ids of papers that cite *paper_id*."""
    with engine_errors():
        rows = db.connection.execute(
            'SELECT "PaperID" FROM "Reference" WHERE "RefPaperID" = ? ORDER BY "PaperID"',
            (paper_id,),
        ).fetchall()
    return [r["PaperID"] for r in rows]
