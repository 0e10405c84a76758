"""Paper form: edit one paper in the user's preferred editor ($EDITOR).

The form mirrors the paper's four fixed columns followed by one
``name = value`` row per field::

    Type: Article
    Title: On X
    Author: A. Smith
    Year: 2020

    [fields]
    journal = Nature
    "a=b" = "line one\nline two"

A name or value that contains ``=`` or a line break, starts with ``#`` or ``"``,
or has surrounding blanks is written as a JSON string.

Applying a form sets ``changed`` on the paper and on every field whose
value actually moved; the repository then persists the net change.
"""

from __future__ import annotations

import json
import os
import shutil
import subprocess
from dataclasses import dataclass, field
from typing import Optional

from loguru import logger

from paperdb.config import settings
from paperdb.db.models import PAPER_TYPES, Field, Paper

_HEADER = (
    "# Edit the paper below.  Lines starting with '#' are ignored.\n"
    "# Known types: " + ", ".join(PAPER_TYPES) + "\n"
    "# Add fields as 'name = value' rows under [fields]; remove a row to drop it.\n"
    "# Names or values with '=', '#' or line breaks are \"JSON quoted\".\n"
)
_FIELDS_MARKER = "[fields]"
_DECODER = json.JSONDecoder()


class FormError(ValueError):
    """The edited form could not be parsed."""


@dataclass
class PaperForm:
    type: str = ""
    title: str = ""
    author: str = ""
    year: Optional[int] = None
    fields: dict[str, str] = field(default_factory=dict)


def get_editor_command() -> str:
    """Determine the editor command to use."""
    for var in ("VISUAL", "EDITOR"):
        if os.environ.get(var):
            return os.environ[var]

    if os.name == "nt":  # Windows
        if shutil.which("code"):
            return "code -w"
        return "notepad"
    if shutil.which("vim"):
        return "vim"
    if shutil.which("nano"):
        return "nano"
    return "vi"


def _quote(text: str, special: str = "") -> str:
    """JSON-quote *text* if it would not survive a plain form line."""
    if (
        text != text.strip()
        or text.startswith(('"', "#"))
        or any(c in text for c in "\r\n" + special)
    ):
        return json.dumps(text, ensure_ascii=False)
    return text


def _unquote(text: str) -> str:
    """Decode a JSON-quoted entry; anything else is returned as typed."""
    if len(text) >= 2 and text[0] == text[-1] == '"':
        try:
            decoded = json.loads(text)
        except json.JSONDecodeError:
            return text
        if isinstance(decoded, str):
            return decoded
    return text


def _split_field_row(line: str) -> Optional[tuple[str, str]]:
    """Split ``name = value``; a quoted name may itself contain ``=``."""
    if line.startswith('"'):
        try:
            name, end = _DECODER.raw_decode(line)
        except json.JSONDecodeError:
            return None
        rest = line[end:].lstrip()
        if not isinstance(name, str) or not rest.startswith("="):
            return None
        value = rest[1:]
    else:
        name, sep, value = line.partition("=")
        name = name.strip()
        if not sep or not name:
            return None
    return name, _unquote(value.strip())


def render_form(paper: Paper) -> str:
    """Return the editable text form for *paper*."""
    year = "" if paper.year is None else str(paper.year)
    lines = [
        f"Type: {_quote(paper.type)}",
        f"Title: {_quote(paper.title)}",
        f"Author: {_quote(paper.author)}",
        f"Year: {year}",
        "",
        _FIELDS_MARKER,
    ]
    for name, value in paper.field_values().items():
        quoted_name = _quote(name, special="=") if name else '""'
        lines.append(f"{quoted_name} = {_quote(value)}")
    return _HEADER + "\n".join(lines) + "\n"


def parse_form(text: str) -> PaperForm:
    """Parse an edited form.

    Raises:
        FormError: On an unknown header key, a bad year, or a field row
            without ``=``.
    """
    form = PaperForm()
    in_fields = False
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if line == _FIELDS_MARKER:
            in_fields = True
            continue

        if in_fields:
            row = _split_field_row(line)
            if row is None:
                raise FormError(f"line {lineno}: expected 'name = value', got {raw!r}")
            # Last row wins, as in the field map itself.
            name, value = row
            form.fields[name] = value
            continue

        key, sep, value = line.partition(":")
        key = key.strip().lower()
        value = value.strip()
        if not sep or key not in ("type", "title", "author", "year"):
            raise FormError(f"line {lineno}: unknown entry {raw!r}")
        if key == "year":
            if value and not value.isdigit():
                raise FormError(f"line {lineno}: year must be a number, got {value!r}")
            form.year = int(value) if value else None
        else:
            setattr(form, key, _unquote(value))
    return form


def apply_form(paper: Paper, form: PaperForm) -> list[Field]:
    """Copy *form* onto *paper*, flagging whatever changed.

    Returns:
        Fields that were dropped from the form.  They are removed from
        ``paper.fields``; the caller decides whether to delete their rows.
    """
    for attr in ("type", "title", "author", "year"):
        new = getattr(form, attr)
        if getattr(paper, attr) != new:
            setattr(paper, attr, new)
            paper.changed = True

    removed: list[Field] = []
    for name in list((paper.fields or {}).keys()):
        if name not in form.fields:
            removed.append(paper.fields.pop(name))

    for name, value in form.fields.items():
        paper.set_field(name, value)
    return removed


def edit_paper(paper: Paper) -> Optional[list[Field]]:
    """Open *paper* in an external editor and apply the result.

    Returns the dropped fields (see :func:`apply_form`), or None if the
    editor failed or the form came back unchanged.
    """
    settings.drafts_dir.mkdir(parents=True, exist_ok=True)
    draft_file = settings.drafts_dir / f"paper_{paper.id}.txt"
    content = render_form(paper)
    draft_file.write_text(content, encoding="utf-8")

    editor = get_editor_command()
    # Shell=True to handle spaces in command (e.g. "code -w")
    ret = subprocess.call(f'{editor} "{draft_file}"', shell=True)
    if ret != 0:
        logger.warning("Editor exited with code {}", ret)
        return None

    new_content = draft_file.read_text(encoding="utf-8")
    draft_file.unlink()
    if new_content == content:
        return None
    return apply_form(paper, parse_form(new_content))
