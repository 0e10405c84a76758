"""Database layer package.

Public re-exports so callers can write::

    from paperdb.db import open_db, close_db, load_paper, save_paper
"""

from paperdb.db.connection import Database, close_db, get_connection, open_db
from paperdb.db.errors import (
    AllocationError,
    EngineError,
    PaperDBError,
    PaperNotFoundError,
    SchemaError,
)
from paperdb.db.fields import delete_field, save_field
from paperdb.db.migrations import SCHEMA_VERSION
from paperdb.db.models import Field, MetaInfo, Note, Paper, Reference
from paperdb.db.notes import delete_note, load_notes, save_note
from paperdb.db.papers import (
    delete_paper,
    list_papers,
    load_aggregate,
    load_fields,
    load_paper,
    load_refs,
    purge_paper,
    save_aggregate,
    save_paper,
)
from paperdb.db.references import cited_by, delete_reference, save_reference
from paperdb.db.search import search_author, search_keyword, search_title

__all__ = [
    "SCHEMA_VERSION",
    "AllocationError",
    "Database",
    "EngineError",
    "Field",
    "MetaInfo",
    "Note",
    "Paper",
    "PaperDBError",
    "PaperNotFoundError",
    "Reference",
    "SchemaError",
    "cited_by",
    "close_db",
    "delete_field",
    "delete_note",
    "delete_paper",
    "delete_reference",
    "get_connection",
    "list_papers",
    "load_aggregate",
    "load_fields",
    "load_notes",
    "load_paper",
    "load_refs",
    "open_db",
    "purge_paper",
    "save_aggregate",
    "save_field",
    "save_note",
    "save_paper",
    "save_reference",
    "search_author",
    "search_keyword",
    "search_title",
]
