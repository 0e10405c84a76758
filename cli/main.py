"""paperdb CLI: entry-point for the reference-paper database.

Usage:
    python cli/main.py --help

Command groups:
    init      → create (or verify) the database file
    search    → keyword / title / author search
    paper     → add, show, edit, cite, delete papers
    note      → per-page margin notes
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from paperdb.xxx import ...`
# works when the CLI is invoked as `python cli/main.py` from any directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from typing import Optional

import typer
from loguru import logger

from paperdb.config import settings
from paperdb.db import search_author, search_keyword, search_title

from cli.commands.note import note_app
from cli.commands.paper import paper_app
from cli.context import db_session
from cli.rendering import render_paper_line

app = typer.Typer(
    name="paperdb",
    help="Personal reference-paper manager.",
    no_args_is_help=True,
)
app.add_typer(paper_app, name="paper")
app.add_typer(note_app, name="note")

_SEARCHES = {
    "keyword": search_keyword,
    "title": search_title,
    "author": search_author,
}


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


@app.callback()
def main(
    db: Optional[Path] = typer.Option(None, "--db", help="Path to the database file."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output."),
) -> None:
    """Personal reference-paper manager."""
    if db is not None:
        settings.db_file = db
    _configure_logging("DEBUG" if verbose else settings.log_level)


@app.command("init")
def db_init() -> None:
    """Open the database, creating the schema if the file is empty."""
    with db_session() as db:
        version = db.meta.version if db.meta else None
    typer.echo(f"[db init] Database ready at {settings.db_path} (schema v{version})")


@app.command("search")
def search(
    term: str = typer.Argument(..., help="Search term."),
    by: str = typer.Option("keyword", "--by", help="Search mode: keyword | title | author."),
) -> None:
    """Search papers by keyword, title, or author."""
    search_fn = _SEARCHES.get(by)
    if search_fn is None:
        typer.echo(f"[search] Unknown mode {by!r}. Use: keyword | title | author")
        raise typer.Exit(1)

    with db_session() as db:
        results = search_fn(db, term)

    if not results:
        typer.echo(f"[search] No results for {term!r}.")
        return
    for p in results:
        typer.echo(render_paper_line(p))


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
