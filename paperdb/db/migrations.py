"""Schema creation, version checks and upgrades.

``open_db()`` drives these helpers once per handle:

1. ``has_schema()`` – is the file empty?  If so, ``create_schema()``.
2. ``has_schema_version()`` – does MetaInfo match ``SCHEMA_VERSION``?
   If not, ``schema_upgrade()`` applies whatever ``MIGRATIONS`` allow.
"""

from __future__ import annotations

import sqlite3
from typing import TYPE_CHECKING

from loguru import logger

from paperdb.config import settings
from paperdb.db.errors import SchemaError
from paperdb.db.models import MetaInfo

if TYPE_CHECKING:
    from paperdb.db.connection import Database

# Version written into MetaInfo by create_schema().  Stored as REAL and
# compared with ``==``; keep it a value that round-trips exactly.
SCHEMA_VERSION = 1.0

# (version, sql) pairs applied in order by schema_upgrade().
MIGRATIONS: list[tuple[float, str]] = [
    # (1.1, 'ALTER TABLE "Paper" ADD COLUMN "Doi" TEXT;'),
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _read_schema(created: int) -> str:
    """Load schema.sql and inject runtime values (version, creation time)."""
    template = settings.schema_path.read_text(encoding="utf-8")
    return template.replace("{schema_version}", repr(SCHEMA_VERSION)).replace(
        "{created}", str(int(created))
    )


def read_meta(conn: sqlite3.Connection) -> MetaInfo:
    """Return the MetaInfo row.

    Raises:
        SchemaError: If the table holds no row.
    """
    row = conn.execute(
        'SELECT "Version", "Created", "LastUpdate" FROM "MetaInfo"'
    ).fetchone()
    if row is None:
        raise SchemaError("MetaInfo row is missing")
    return MetaInfo(
        version=row["Version"],
        created=row["Created"],
        last_update=row["LastUpdate"],
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def has_schema(conn: sqlite3.Connection) -> bool:
    """Return True if any table other than MetaInfo exists.

    This only tells an empty file from a used one; it does not validate
    the individual tables.
    """
    rows = conn.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table'"
    ).fetchall()
    return any(r[0] != "MetaInfo" for r in rows)


def has_schema_version(conn: sqlite3.Connection) -> bool:
    """Return True if the stored version equals ``SCHEMA_VERSION`` exactly."""
    return read_meta(conn).version == SCHEMA_VERSION


def create_schema(db: Database, created: int) -> None:
    """Create all five tables and the MetaInfo row in one transaction.

    The handle is marked dirty so that closing it stamps ``LastUpdate``.
    """
    script = _read_schema(created)
    conn = db.conn
    # executescript() commits any pending transaction first, so the
    # explicit BEGIN/COMMIT makes the whole script a single unit.
    try:
        conn.executescript(f"BEGIN;\n{script}\nCOMMIT;")
    except sqlite3.Error:
        if conn.in_transaction:
            conn.rollback()
        raise
    db.changed = True
    logger.debug("Created schema v{} in {}", SCHEMA_VERSION, db.path)


def schema_upgrade(db: Database) -> None:
    """Apply every migration newer than the stored version.

    ``MIGRATIONS`` is empty for now, so an out-of-date file stays
    out of date and ``open_db()`` rejects it.
    """
    conn = db.conn
    applied = read_meta(conn).version
    logger.debug(
        "Schema version {} differs from {}; upgrading", applied, SCHEMA_VERSION
    )
    for version, sql in MIGRATIONS:
        if version > applied:
            with conn:
                conn.execute(sql)
                conn.execute('UPDATE "MetaInfo" SET "Version" = ?', (version,))
            db.changed = True
            applied = version
            logger.info("Applied schema migration {}", version)
