"""Keyword, title, and author search over the paper table.

Search modes
------------
``search_title`` / ``search_author``
    Case-insensitive substring match on the column.

``search_keyword``
    The term is split into word tokens.  A paper matches when every token
    appears somewhere in its title, author, type, file name, or in the
    value of one of its fields.

Case folding uses Python's ``str.casefold`` through the ``casefold()`` SQL
function registered by ``get_connection``, so non-ASCII text matches
regardless of case.  All three searches are read-only, return papers in
id order with their children unloaded, and return ``[]`` for a blank term.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from paperdb.db.errors import engine_errors
from paperdb.db.models import Paper
from paperdb.db.papers import _SELECT, _row_to_paper

if TYPE_CHECKING:
    from paperdb.db.connection import Database

# Tokens per keyword query; SQLite caps expression depth at 1000.
_TOKENS_PER_QUERY = 100


# ---------------------------------------------------------------------------
# LIKE helpers
# ---------------------------------------------------------------------------

def _like_pattern(term: str) -> str:
    """Casefold *term* and wrap it in ``%`` after escaping LIKE's wildcards."""
    escaped = (
        term.casefold()
        .replace("\\", "\\\\")
        .replace("%", "\\%")
        .replace("_", "\\_")
    )
    return f"%{escaped}%"


def _tokenize(text: str) -> list[str]:
    """Split *text* into word tokens, deduplicated case-insensitively."""
    unique: dict[str, str] = {}
    for token in re.findall(r"\w+", text):
        unique.setdefault(token.casefold(), token)
    return list(unique.values())


def _search_column(db: Database, column: str, term: str) -> list[Paper]:
    term = term.strip()
    if not term:
        return []
    with engine_errors():
        rows = db.connection.execute(
            f"""{_SELECT} WHERE casefold("{column}") LIKE ? ESCAPE '\\' ORDER BY "ID" """,  # noqa: S608
            (_like_pattern(term),),
        ).fetchall()
    return [_row_to_paper(r) for r in rows]


_KEYWORD_CLAUSE = """(
       casefold("Title")    LIKE ? ESCAPE '\\'
    OR casefold("Author")   LIKE ? ESCAPE '\\'
    OR casefold("Type")     LIKE ? ESCAPE '\\'
    OR casefold("FileName") LIKE ? ESCAPE '\\'
    OR EXISTS (
        SELECT 1 FROM "Field" f
        WHERE  f."PaperID" = "Paper"."ID"
          AND  casefold(f."Value") LIKE ? ESCAPE '\\'
    )
)"""


def _keyword_where(tokens: list[str]) -> tuple[str, list[str]]:
    params: list[str] = []
    for token in tokens:
        params.extend([_like_pattern(token)] * 5)
    return " AND ".join(_KEYWORD_CLAUSE for _ in tokens), params


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def search_keyword(db: Database, term: str) -> list[Paper]:
    """Return papers where every word of *term* occurs in some text column.

    Long terms are matched in chunks of tokens: the first chunk selects
    the candidate rows and each further chunk narrows them by id.
    """
    tokens = _tokenize(term)
    if not tokens:
        return []

    conn = db.connection
    chunks = [
        tokens[i:i + _TOKENS_PER_QUERY]
        for i in range(0, len(tokens), _TOKENS_PER_QUERY)
    ]
    where, params = _keyword_where(chunks[0])
    with engine_errors():
        rows = conn.execute(
            f'{_SELECT} WHERE {where} ORDER BY "ID"',  # noqa: S608
            params,
        ).fetchall()
        for chunk in chunks[1:]:
            if not rows:
                break
            where, params = _keyword_where(chunk)
            matched = {
                r["ID"]
                for r in conn.execute(
                    f'SELECT "ID" FROM "Paper" WHERE {where}',  # noqa: S608
                    params,
                ).fetchall()
            }
            rows = [r for r in rows if r["ID"] in matched]
    return [_row_to_paper(r) for r in rows]


def search_title(db: Database, term: str) -> list[Paper]:
    """Return papers whose title contains *term*."""
    return _search_column(db, "Title", term)


def search_author(db: Database, term: str) -> list[Paper]:
    """Return papers whose author contains *term*."""
    return _search_column(db, "Author", term)
