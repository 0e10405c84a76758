"""Margin-note commands."""

from __future__ import annotations

from typing import Optional

import typer

from paperdb.db import load_notes, load_paper, save_note
from paperdb.db.models import Note

from cli.context import db_session

note_app = typer.Typer(help="Per-page margin notes.", no_args_is_help=True)


@note_app.command("set")
def note_set(
    paper_id: int = typer.Argument(..., help="Paper id."),
    page: int = typer.Argument(..., help="Page number."),
    left: Optional[str] = typer.Option(None, "--left", help="Left-margin note."),
    right: Optional[str] = typer.Option(None, "--right", help="Right-margin note."),
) -> None:
    """Write the left and/or right margin note of a page."""
    if left is None and right is None:
        typer.echo("❌ Give --left and/or --right.")
        raise typer.Exit(code=1)

    with db_session() as db:
        load_paper(db, paper_id)
        existing = [n for n in load_notes(db, paper_id) if n.page == page]
        note = existing[0] if existing else Note(paper_id=paper_id, page=page)
        if left is not None and left != note.left_note:
            note.left_note = left
            note.changed = True
        if right is not None and right != note.right_note:
            note.right_note = right
            note.changed = True
        save_note(db, note)
    typer.echo(f"✅ Note saved for #{paper_id} p.{page}")


@note_app.command("list")
def note_list(paper_id: int = typer.Argument(..., help="Paper id.")) -> None:
    """List a paper's notes by page."""
    with db_session() as db:
        notes = load_notes(db, paper_id)

    if not notes:
        typer.echo("No notes found.")
        return
    for n in notes:
        typer.echo(f"p.{n.page}")
        typer.echo(f"  L: {n.left_note}")
        typer.echo(f"  R: {n.right_note}")
