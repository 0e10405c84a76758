"""The save/delete protocol shared by every entity table.

``save_row``
    Nothing happens unless ``entity.changed``.  An entity already in the
    database is UPDATEd by its ``ID``; otherwise it is INSERTed and picks
    up the new row id.  Bits are only touched once the statement commits,
    so a failed save can simply be retried.

``delete_row``
    DELETE by ``ID``.  Afterwards the entity reads ``indb=False,
    changed=True``: it no longer has a row, but keeps its old id.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from paperdb.db.errors import engine_errors
from paperdb.db.models import Entity

if TYPE_CHECKING:
    from paperdb.db.connection import Database


def save_row(
    db: Database,
    entity: Entity,
    table: str,
    columns: Sequence[str],
    values: Sequence[object],
) -> None:
    """Insert or update *entity* in *table* according to its control bits."""
    if not entity.changed:
        return

    conn = db.connection
    with engine_errors():
        with conn:
            if entity.indb:
                assignments = ", ".join(f'"{col}" = ?' for col in columns)
                conn.execute(
                    f'UPDATE "{table}" SET {assignments} WHERE "ID" = ?',  # noqa: S608
                    (*values, entity.id),
                )
                row_id = entity.id
            else:
                names = ", ".join(f'"{col}"' for col in columns)
                marks = ", ".join("?" for _ in columns)
                cursor = conn.execute(
                    f'INSERT INTO "{table}" ({names}) VALUES ({marks})',  # noqa: S608
                    tuple(values),
                )
                row_id = cursor.lastrowid

    entity.id = row_id
    entity.indb = True
    entity.changed = False
    db.changed = True


def delete_row(db: Database, entity: Entity, table: str) -> None:
    """Delete the row behind *entity* from *table*."""
    conn = db.connection
    with engine_errors():
        with conn:
            conn.execute(f'DELETE FROM "{table}" WHERE "ID" = ?', (entity.id,))  # noqa: S608

    entity.indb = False
    entity.changed = True
    db.changed = True
