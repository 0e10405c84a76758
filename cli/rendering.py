"""Utilities for rendering papers in the CLI."""

from __future__ import annotations

from typing import Iterable, Optional

from paperdb.db.models import Note, Paper


def render_paper_line(paper: Paper) -> str:
    """One-line summary used by ``paper list`` and ``search``."""
    year = paper.year if paper.year is not None else "n.d."
    mark = "✓" if paper.read else " "
    return f"{mark} {paper.id:>4}  [{paper.type}] {paper.author} ({year}) {paper.title!r}"


def render_paper(
    paper: Paper,
    notes: Optional[Iterable[Note]] = None,
    cited_by: Optional[Iterable[int]] = None,
) -> str:
    """Render a paper with its fields, references and notes.

    Args:
        paper: A paper, ideally loaded with ``load_aggregate``.
        notes: Margin notes to list under the paper.
        cited_by: Ids of papers citing this one.

    Returns:
        String representation of the paper.
    """
    lines = [
        f"#{paper.id}  {paper.title}",
        f"  Type   : {paper.type}",
        f"  Author : {paper.author}",
        f"  Year   : {paper.year if paper.year is not None else ''}",
        f"  Read   : {'yes' if paper.read else 'no'}",
    ]
    if paper.file_name:
        pages = f" ({paper.page_count} pages)" if paper.page_count else ""
        lines.append(f"  File   : {paper.file_name}{pages}")

    if paper.fields:
        lines.append("  Fields:")
        width = max(len(name) for name in paper.fields)
        for name in sorted(paper.fields):
            lines.append(f"    {name:<{width}} = {paper.fields[name].value}")

    if paper.refs:
        cited = sorted(ref.ref_paper_id for ref in paper.refs)
        lines.append("  Cites  : " + ", ".join(f"#{pid}" for pid in cited))

    citing = list(cited_by or [])
    if citing:
        lines.append("  Cited by: " + ", ".join(f"#{pid}" for pid in citing))

    notes = list(notes or [])
    if notes:
        lines.append("  Notes:")
        for note in notes:
            lines.append(f"    p.{note.page}")
            if note.left_note:
                lines.append(f"      L: {note.left_note}")
            if note.right_note:
                lines.append(f"      R: {note.right_note}")

    return "\n".join(lines)
