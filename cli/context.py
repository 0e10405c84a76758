"""Shared command plumbing for the paperdb CLI.

Every command opens the database for the duration of one invocation::

    with db_session() as db:
        paper = load_paper(db, paper_id)

Database errors are reported on stdout and turned into exit code 1.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, NoReturn

import typer

from paperdb.db import Database, PaperDBError, open_db


def fail(exc: Exception) -> NoReturn:
    """Print *exc* and abort the command with exit code 1."""
    typer.echo(f"❌ Error: {exc}")
    raise typer.Exit(code=1)


@contextmanager
def db_session() -> Iterator[Database]:
    """Open the configured database and close it when the block ends."""
    try:
        with open_db() as db:
            yield db
    except PaperDBError as exc:
        fail(exc)
