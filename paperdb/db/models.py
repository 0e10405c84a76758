"""Dataclass models representing DB rows.

These are plain Python objects – not ORM models.  The DB layer serialises /
deserialises to and from these types.

Every entity carries two control bits:

``indb``
    A persisted row currently exists for the object.
``changed``
    The in-memory state differs from (or never reached) the stored row.
    Nothing in this package flips it when a plain attribute is assigned;
    whoever mutates the object is responsible for setting it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

# Entry types offered by the paper form.  ``Paper.type`` itself is free-form.
PAPER_TYPES = (
    "Article",
    "Book",
    "InProceedings",
    "InCollection",
    "TechReport",
    "PhdThesis",
    "MastersThesis",
    "Misc",
)


@dataclass
class MetaInfo:
    version: float
    created: int
    last_update: Optional[int] = None


@dataclass
class Field:
    name: str
    value: str
    paper_id: Optional[int] = None
    id: Optional[int] = None
    indb: bool = False
    changed: bool = True


@dataclass
class Reference:
    paper_id: Optional[int]
    ref_paper_id: int
    id: Optional[int] = None
    indb: bool = False
    changed: bool = True

    @property
    def edge(self) -> tuple[Optional[int], int]:
        """The ``(citing, cited)`` pair."""
        return (self.paper_id, self.ref_paper_id)


@dataclass
class Note:
    paper_id: int
    page: int
    left_note: str = ""
    right_note: str = ""
    id: Optional[int] = None
    indb: bool = False
    changed: bool = True


@dataclass
class Paper:
    title: str = ""
    author: str = ""
    type: str = "Article"
    year: Optional[int] = None
    file_name: str = ""
    contents: Optional[bytes] = None
    page_count: Optional[int] = None
    read: bool = False
    id: Optional[int] = None

    # Lazily loaded children.  ``fields`` stays ``None`` until first use.
    fields: Optional[dict[str, Field]] = None
    refs: list[Reference] = field(default_factory=list)

    indb: bool = False
    changed: bool = True

    # ------------------------------------------------------------------
    # Aggregate helpers
    # ------------------------------------------------------------------
    def set_field(self, name: str, value: str) -> Field:
        """Create or update the Field called *name* and mark it changed."""
        if self.fields is None:
            self.fields = {}
        existing = self.fields.get(name)
        if existing is not None:
            if existing.value != value:
                existing.value = value
                existing.changed = True
            return existing
        new_field = Field(name=name, value=value, paper_id=self.id)
        self.fields[name] = new_field
        return new_field

    def add_reference(self, ref_paper_id: int) -> Reference:
        """Append a new, unsaved citation edge to *ref_paper_id*."""
        ref = Reference(paper_id=self.id, ref_paper_id=ref_paper_id)
        self.refs.append(ref)
        return ref

    def field_values(self) -> dict[str, str]:
        """Return ``{name: value}`` for the loaded fields."""
        return {name: f.value for name, f in (self.fields or {}).items()}


# Anything the shared save/delete protocol in ``crud.py`` accepts.
Entity = Union[Paper, Field, Reference, Note]
