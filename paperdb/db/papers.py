"""CRUD operations for the ``Paper`` table and the Paper aggregate.

A loaded :class:`~paperdb.db.models.Paper` starts with ``fields=None`` and
an empty ``refs`` list; ``load_fields()`` / ``load_refs()`` fill them in on
demand, ``load_aggregate()`` does all three steps at once.
"""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING

from paperdb.db.crud import delete_row, save_row
from paperdb.db.errors import AllocationError, PaperNotFoundError, engine_errors
from paperdb.db.fields import _row_to_field, save_field
from paperdb.db.models import Field, Paper
from paperdb.db.references import _row_to_reference, save_reference

if TYPE_CHECKING:
    from paperdb.db.connection import Database

_COLUMNS = (
    "FileName",
    "Contents",
    "PageCount",
    "Read",
    "Type",
    "Author",
    "Title",
    "Year",
)
_SELECT = 'SELECT "ID", ' + ", ".join(f'"{c}"' for c in _COLUMNS) + ' FROM "Paper"'


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _row_to_paper(row: sqlite3.Row) -> Paper:
    return Paper(
        id=row["ID"],
        file_name=row["FileName"],
        contents=row["Contents"],
        page_count=row["PageCount"],
        read=bool(row["Read"]),
        type=row["Type"],
        author=row["Author"],
        title=row["Title"],
        year=row["Year"],
        indb=True,
        changed=False,
    )


def _paper_values(paper: Paper) -> tuple:
    return (
        paper.file_name,
        paper.contents,
        paper.page_count,
        int(paper.read),
        paper.type,
        paper.author,
        paper.title,
        paper.year,
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def load_paper(db: Database, paper_id: int) -> Paper:
    """Fetch a single paper by id.

    Raises:
        PaperNotFoundError: If no row has that id.
        EngineError: On any other engine failure.
    """
    with engine_errors():
        row = db.connection.execute(
            f'{_SELECT} WHERE "ID" = ?', (paper_id,)  # noqa: S608
        ).fetchone()
    if row is None:
        raise PaperNotFoundError(paper_id)
    return _row_to_paper(row)


def list_papers(db: Database) -> list[Paper]:
    """Return every paper, ordered by id.  Children are not loaded."""
    with engine_errors():
        rows = db.connection.execute(f'{_SELECT} ORDER BY "ID"').fetchall()  # noqa: S608
    return [_row_to_paper(r) for r in rows]


def save_paper(db: Database, paper: Paper) -> None:
    """Insert or update the paper's own row (children are left alone).

    A no-op unless ``paper.changed``.  On first insert ``paper.id`` is set
    from the engine's row id.
    """
    save_row(db, paper, "Paper", _COLUMNS, _paper_values(paper))


def delete_paper(db: Database, paper: Paper) -> None:
    """Delete the paper's row only.

    Fields, notes and references pointing at the paper are left in
    place; use :func:`purge_paper` to remove those too.
    """
    delete_row(db, paper, "Paper")


def purge_paper(db: Database, paper: Paper) -> None:
    """Delete a paper together with its fields, notes and citation edges.

    Everything happens in one transaction.  Loaded children are flagged
    ``indb=False, changed=True`` just like the paper itself.
    """
    conn = db.connection
    with engine_errors():
        with conn:
            conn.execute('DELETE FROM "Field" WHERE "PaperID" = ?', (paper.id,))
            conn.execute('DELETE FROM "Note" WHERE "PaperID" = ?', (paper.id,))
            conn.execute(
                'DELETE FROM "Reference" WHERE "PaperID" = ? OR "RefPaperID" = ?',
                (paper.id, paper.id),
            )
            conn.execute('DELETE FROM "Paper" WHERE "ID" = ?', (paper.id,))

    for child in [*(paper.fields or {}).values(), *paper.refs]:
        child.indb = False
        child.changed = True
    paper.indb = False
    paper.changed = True
    db.changed = True


def load_fields(db: Database, paper: Paper) -> None:
    """Read the paper's Field rows into ``paper.fields``.

    The mapping is keyed by field name and created on first use.  Rows are
    applied in id order and the last one wins when two share a name.

    Raises:
        AllocationError: If the mapping could not be built.
    """
    with engine_errors():
        rows = db.connection.execute(
            """
            SELECT "ID", "PaperID", "Name", "Value"
            FROM   "Field"
            WHERE  "PaperID" = ?
            ORDER  BY "ID"
            """,
            (paper.id,),
        ).fetchall()

    try:
        fields: dict[str, Field] = paper.fields if paper.fields is not None else {}
        for row in rows:
            fields[row["Name"]] = _row_to_field(row)
    except MemoryError as exc:
        raise AllocationError(
            f"Could not build the field map for paper {paper.id!r}"
        ) from exc
    paper.fields = fields


def load_refs(db: Database, paper: Paper) -> None:
    """Read the paper's outgoing citation edges into ``paper.refs``.

    Edges already held with ``indb=True`` are replaced by the stored rows,
    so calling this again does not duplicate them; unsaved edges are kept.
    Each row is prepended, so the resulting order is not meaningful.
    """
    with engine_errors():
        rows = db.connection.execute(
            'SELECT "ID", "PaperID", "RefPaperID" FROM "Reference" WHERE "PaperID" = ?',
            (paper.id,),
        ).fetchall()
    paper.refs[:] = [ref for ref in paper.refs if not ref.indb]
    for row in rows:
        paper.refs.insert(0, _row_to_reference(row))


def load_aggregate(db: Database, paper_id: int) -> Paper:
    """Load a paper with its fields and references."""
    paper = load_paper(db, paper_id)
    load_fields(db, paper)
    load_refs(db, paper)
    return paper


def save_aggregate(db: Database, paper: Paper) -> None:
    """Save the paper, then every changed field and reference it holds.

    Children created before the paper had an id are attached to it here.
    """
    save_paper(db, paper)
    for field in (paper.fields or {}).values():
        if field.paper_id is None:
            field.paper_id = paper.id
        save_field(db, field)
    for ref in paper.refs:
        if ref.paper_id is None:
            ref.paper_id = paper.id
        save_reference(db, ref)
