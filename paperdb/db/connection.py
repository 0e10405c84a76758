"""SQLite connection factory and the database handle.

Usage::

    from paperdb.db.connection import open_db

    with open_db("library.db") as db:
        paper = load_paper(db, 1)
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from time import time
from typing import Optional, Union

from loguru import logger

from paperdb.config import settings
from paperdb.db.errors import EngineError, PaperDBError, SchemaError, engine_errors
from paperdb.db.migrations import (
    SCHEMA_VERSION,
    create_schema,
    has_schema,
    has_schema_version,
    read_meta,
    schema_upgrade,
)
from paperdb.db.models import MetaInfo


def _now() -> int:
    return int(time())


class Database:
    """One open connection plus the dirty flag used when closing.

    ``changed`` is set by every successful write and cleared once
    ``close_db()`` has stamped ``MetaInfo.LastUpdate``.
    """

    def __init__(self, conn: sqlite3.Connection, path: Union[str, Path]) -> None:
        self.conn: Optional[sqlite3.Connection] = conn
        self.path = path
        self.changed = False
        self.meta: Optional[MetaInfo] = None

    @property
    def closed(self) -> bool:
        return self.conn is None

    @property
    def connection(self) -> sqlite3.Connection:
        """The live connection.

        Raises:
            EngineError: If the handle has already been closed.
        """
        if self.conn is None:
            raise EngineError(f"Database {str(self.path)!r} is closed")
        return self.conn

    def __enter__(self) -> Database:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        close_db(self)

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<Database {str(self.path)!r} {state} changed={self.changed}>"


def _casefold(value: object) -> object:
    return value.casefold() if isinstance(value, str) else value


def get_connection(db_path: Optional[Union[str, Path]] = None) -> sqlite3.Connection:
    """Open and configure a SQLite connection.

    Steps performed on every new connection:
    1. Create the parent directory for on-disk files.
    2. Register the ``casefold(text)`` SQL function used by search.

    Foreign keys are declared in the schema but not enforced; deleting a
    paper leaves its fields, notes and edges to the caller
    (see ``purge_paper``).

    Args:
        db_path: Override the DB path.  Defaults to ``settings.db_path``.

    Returns:
        A configured :class:`sqlite3.Connection` with ``row_factory`` set to
        :class:`sqlite3.Row` so columns can be accessed by name.
    """
    path = db_path or settings.db_path

    # Create parent directory if needed (no-op for `:memory:`)
    if str(path) != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row
    try:
        conn.create_function("casefold", 1, _casefold, deterministic=True)
    except sqlite3.Error:
        conn.close()
        raise
    return conn


def open_db(db_path: Optional[Union[str, Path]] = None) -> Database:
    """Open (or create) a paper database and return its handle.

    An empty file gets the full schema and a MetaInfo row.  A file whose
    MetaInfo version differs from ``SCHEMA_VERSION`` goes through
    ``schema_upgrade()`` first and is rejected if it is still behind.

    Raises:
        EngineError: The engine failed while opening or checking the file.
        SchemaError: The stored schema version cannot be used.
    """
    path = db_path or settings.db_path
    try:
        with engine_errors():
            conn = get_connection(path)
    except OSError as exc:
        raise EngineError(f"Cannot open {str(path)!r}: {exc}") from exc

    db = Database(conn, path)
    try:
        with engine_errors():
            if not has_schema(conn):
                create_schema(db, created=_now())
            if not has_schema_version(conn):
                schema_upgrade(db)
                if not has_schema_version(conn):
                    raise SchemaError(
                        f"Schema version {read_meta(conn).version} is not "
                        f"supported (expected {SCHEMA_VERSION})"
                    )
            db.meta = read_meta(conn)
    except PaperDBError:
        conn.close()
        db.conn = None
        raise

    logger.debug("Opened {}", path)
    return db


def close_db(db: Database) -> None:
    """Stamp ``LastUpdate`` if the handle is dirty, then close the connection.

    The connection is released even when the stamp fails; the failure is
    raised afterwards.  Closing a closed handle does nothing.
    """
    conn = db.conn
    if conn is None:
        return

    try:
        if db.changed:
            stamp = _now()
            with engine_errors():
                with conn:
                    conn.execute('UPDATE "MetaInfo" SET "LastUpdate" = ?', (stamp,))
            db.changed = False
            if db.meta is not None:
                db.meta.last_update = stamp
    except EngineError as exc:
        logger.warning("Could not stamp LastUpdate in {}: {}", db.path, exc)
        raise
    finally:
        conn.close()
        db.conn = None
        logger.debug("Closed {}", db.path)
