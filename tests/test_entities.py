"""Tests for Field, Reference and Note save/delete."""

from __future__ import annotations

import pytest

from paperdb.db import (
    Database,
    EngineError,
    Field,
    Note,
    Reference,
    cited_by,
    delete_field,
    delete_note,
    delete_reference,
    load_aggregate,
    load_notes,
    save_field,
    save_note,
    save_reference,
)


class TestFields:
    def test_save_inserts_then_updates(self, db: Database, make_paper) -> None:
        paper = make_paper()
        field = Field(paper_id=paper.id, name="pages", value="1-9")
        save_field(db, field)
        assert field.indb is True and field.changed is False
        first_id = field.id

        field.value = "1-10"
        field.changed = True
        save_field(db, field)
        assert field.id == first_id
        assert load_aggregate(db, paper.id).field_values() == {"pages": "1-10"}

    def test_unchanged_save_is_noop(self, db: Database, make_paper) -> None:
        paper = make_paper()
        field = Field(paper_id=paper.id, name="pages", value="1-9")
        save_field(db, field)
        before = db.connection.total_changes
        save_field(db, field)
        assert db.connection.total_changes == before

    def test_delete(self, db: Database, make_paper) -> None:
        paper = make_paper()
        field = Field(paper_id=paper.id, name="pages", value="1-9")
        save_field(db, field)
        delete_field(db, field)
        assert field.indb is False and field.changed is True
        assert load_aggregate(db, paper.id).fields == {}

    def test_failed_save_leaves_bits(self, db: Database, make_paper) -> None:
        paper = make_paper()
        field = Field(paper_id=paper.id, name="pages", value=None)  # type: ignore[arg-type]
        with pytest.raises(EngineError, match="NOT NULL"):
            save_field(db, field)
        assert field.indb is False and field.id is None
        assert field.changed is True


class TestReferences:
    def test_save_and_delete(self, db: Database, make_paper) -> None:
        a, b = make_paper(title="A"), make_paper(title="B")
        ref = Reference(paper_id=a.id, ref_paper_id=b.id)
        save_reference(db, ref)
        assert ref.indb is True and ref.id is not None
        assert cited_by(db, b.id) == [a.id]

        delete_reference(db, ref)
        assert ref.indb is False and ref.changed is True
        assert cited_by(db, b.id) == []

    def test_duplicate_edge_is_rejected(self, db: Database, make_paper) -> None:
        a, b = make_paper(title="A"), make_paper(title="B")
        save_reference(db, Reference(paper_id=a.id, ref_paper_id=b.id))
        duplicate = Reference(paper_id=a.id, ref_paper_id=b.id)
        with pytest.raises(EngineError, match="UNIQUE"):
            save_reference(db, duplicate)
        assert duplicate.indb is False

    def test_update_retargets_edge(self, db: Database, make_paper) -> None:
        a, b, c = (make_paper(title=t) for t in "ABC")
        ref = Reference(paper_id=a.id, ref_paper_id=b.id)
        save_reference(db, ref)
        ref.ref_paper_id = c.id
        ref.changed = True
        save_reference(db, ref)
        assert [r.edge for r in load_aggregate(db, a.id).refs] == [(a.id, c.id)]

    def test_cited_by_lists_all_citing_papers(self, db: Database, make_paper) -> None:
        target = make_paper(title="Target")
        citing = [make_paper(title=f"C{i}") for i in range(2)]
        for p in citing:
            save_reference(db, p.add_reference(target.id))
        assert cited_by(db, target.id) == [p.id for p in citing]


class TestNotes:
    def test_save_load_update_delete(self, db: Database, make_paper) -> None:
        paper = make_paper()
        note = Note(paper_id=paper.id, page=3, left_note="check proof", right_note="")
        save_note(db, note)
        assert note.indb is True and note.changed is False

        note.right_note = "typo in eq. 4"
        note.changed = True
        save_note(db, note)
        (loaded,) = load_notes(db, paper.id)
        assert loaded.id == note.id
        assert loaded.left_note == "check proof"
        assert loaded.right_note == "typo in eq. 4"

        delete_note(db, note)
        assert note.indb is False and note.changed is True
        assert load_notes(db, paper.id) == []

    def test_notes_ordered_by_page(self, db: Database, make_paper) -> None:
        paper = make_paper()
        for page in (5, 1, 3):
            save_note(db, Note(paper_id=paper.id, page=page, left_note=f"p{page}"))
        assert [n.page for n in load_notes(db, paper.id)] == [1, 3, 5]

    def test_unchanged_note_save_is_noop(self, db: Database, make_paper) -> None:
        paper = make_paper()
        note = Note(paper_id=paper.id, page=1)
        save_note(db, note)
        before = db.connection.total_changes
        save_note(db, note)
        assert db.connection.total_changes == before
