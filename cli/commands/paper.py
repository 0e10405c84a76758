"""Paper commands: add, inspect, edit, cite, and delete papers."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from paperdb.db import (
    cited_by,
    delete_field,
    list_papers,
    load_aggregate,
    load_notes,
    load_paper,
    purge_paper,
    save_aggregate,
    save_paper,
    save_reference,
)
from paperdb.db.models import Paper

from cli.context import db_session, fail
from cli.editor import FormError, edit_paper
from cli.rendering import render_paper, render_paper_line

paper_app = typer.Typer(help="Add, inspect and edit papers.", no_args_is_help=True)


@paper_app.command("add")
def paper_add(
    title: str = typer.Option(..., help="Paper title."),
    author: str = typer.Option(..., help="Author(s), as a single string."),
    type: str = typer.Option("Article", "--type", help="Entry type (Article, Book, ...)."),
    year: Optional[int] = typer.Option(None, help="Publication year."),
    file: Optional[Path] = typer.Option(None, "--file", help="PDF or other file to store."),
    pages: Optional[int] = typer.Option(None, "--pages", help="Page count."),
) -> None:
    """Add a new paper."""
    paper = Paper(title=title, author=author, type=type, year=year, page_count=pages)
    if file is not None:
        if not file.is_file():
            typer.echo(f"❌ File not found: {file}")
            raise typer.Exit(code=1)
        paper.file_name = file.name
        paper.contents = file.read_bytes()

    with db_session() as db:
        save_paper(db, paper)
    typer.echo(f"✅ Added paper #{paper.id}: {paper.title!r}")


@paper_app.command("list")
def paper_list() -> None:
    """List all papers."""
    with db_session() as db:
        papers = list_papers(db)

    if not papers:
        typer.echo("No papers found.")
        return
    for p in papers:
        typer.echo(render_paper_line(p))


@paper_app.command("show")
def paper_show(paper_id: int = typer.Argument(..., help="Paper id.")) -> None:
    """Show a paper with its fields, references and notes."""
    with db_session() as db:
        paper = load_aggregate(db, paper_id)
        notes = load_notes(db, paper_id)
        citing = cited_by(db, paper_id)
    typer.echo(render_paper(paper, notes=notes, cited_by=citing))


@paper_app.command("edit")
def paper_edit(paper_id: int = typer.Argument(..., help="Paper id.")) -> None:
    """Edit type, title, author, year and fields in $EDITOR."""
    with db_session() as db:
        paper = load_aggregate(db, paper_id)
        try:
            removed = edit_paper(paper)
        except FormError as exc:
            fail(exc)
        if removed is None:
            typer.echo("No changes.")
            return
        save_aggregate(db, paper)
        for field in removed:
            if field.indb:
                delete_field(db, field)
    typer.echo(f"✅ Saved paper #{paper_id}")


@paper_app.command("set-field")
def paper_set_field(
    paper_id: int = typer.Argument(..., help="Paper id."),
    name: str = typer.Argument(..., help="Field name, e.g. journal."),
    value: str = typer.Argument(..., help="Field value."),
) -> None:
    """Create or update a free-form field on a paper."""
    with db_session() as db:
        paper = load_aggregate(db, paper_id)
        paper.set_field(name, value)
        save_aggregate(db, paper)
    typer.echo(f"✅ #{paper_id} {name} = {value}")


@paper_app.command("cite")
def paper_cite(
    paper_id: int = typer.Argument(..., help="Citing paper id."),
    ref_paper_id: int = typer.Argument(..., help="Cited paper id."),
) -> None:
    """Record that one paper cites another."""
    with db_session() as db:
        paper = load_paper(db, paper_id)
        load_paper(db, ref_paper_id)
        save_reference(db, paper.add_reference(ref_paper_id))
    typer.echo(f"✅ #{paper_id} cites #{ref_paper_id}")


@paper_app.command("read")
def paper_read(
    paper_id: int = typer.Argument(..., help="Paper id."),
    unread: bool = typer.Option(False, "--unread", help="Mark as unread instead."),
) -> None:
    """Mark a paper as read (or unread)."""
    with db_session() as db:
        paper = load_paper(db, paper_id)
        if paper.read != (not unread):
            paper.read = not unread
            paper.changed = True
            save_paper(db, paper)
    typer.echo(f"✅ #{paper_id} marked {'unread' if unread else 'read'}")


@paper_app.command("delete")
def paper_delete(
    paper_id: int = typer.Argument(..., help="Paper id."),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation."),
) -> None:
    """Delete a paper with its fields, notes and citation edges."""
    with db_session() as db:
        paper = load_aggregate(db, paper_id)
        if not yes and not typer.confirm(f"Delete #{paper_id} {paper.title!r}?"):
            raise typer.Abort()
        purge_paper(db, paper)
    typer.echo(f"🗑️ Deleted paper #{paper_id}")
