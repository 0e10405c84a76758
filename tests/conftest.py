"""Shared fixtures.

Every test gets its own database file under ``tmp_path`` so tests are
isolated and nothing is written to ``~/.paperdb``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest

from paperdb.db import Database, Paper, close_db, open_db, save_paper


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "library.db"


@pytest.fixture()
def db(db_path: Path) -> Generator[Database, None, None]:
    """An open handle on a freshly created database."""
    handle = open_db(db_path)
    yield handle
    close_db(handle)


@pytest.fixture()
def make_paper(db: Database):
    """Factory that inserts a paper and returns it."""

    def _make(title: str = "On X", author: str = "A. Smith", **kwargs) -> Paper:
        paper = Paper(title=title, author=author, **kwargs)
        save_paper(db, paper)
        return paper

    return _make
