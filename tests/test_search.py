"""Tests for keyword, title and author search."""

from __future__ import annotations

import pytest

from paperdb.db import (
    Database,
    Field,
    save_field,
    search_author,
    search_keyword,
    search_title,
)


@pytest.fixture()
def library(db: Database, make_paper):
    """Three papers, one with a journal field."""
    a = make_paper(title="Solid State Battery Design", author="A. Smith", year=2020)
    b = make_paper(title="Quantum Computing Primer", author="B. Jones", type="Book")
    c = make_paper(title="100% Recall Retrieval", author="C. Smithson")
    save_field(db, Field(paper_id=a.id, name="journal", value="Nature Energy"))
    db.changed = False
    return a, b, c


class TestSearchTitle:
    def test_substring_case_insensitive(self, db: Database, library) -> None:
        a, _, _ = library
        assert [p.id for p in search_title(db, "battery")] == [a.id]

    def test_wildcards_are_literal(self, db: Database, library) -> None:
        _, _, c = library
        assert [p.id for p in search_title(db, "100%")] == [c.id]
        assert [p.id for p in search_title(db, "%")] == [c.id]
        assert search_title(db, "_") == []


class TestSearchAuthor:
    def test_substring_matches_several(self, db: Database, library) -> None:
        a, _, c = library
        assert [p.id for p in search_author(db, "smith")] == [a.id, c.id]

    def test_results_are_clean_papers(self, db: Database, library) -> None:
        (paper,) = search_author(db, "Jones")
        assert paper.indb is True and paper.changed is False
        assert paper.type == "Book"
        assert paper.fields is None


class TestNonAsciiCase:
    def test_title_and_author_fold_non_ascii(self, db: Database, make_paper) -> None:
        paper = make_paper(title="Über Ähnlichkeit", author="Jürgen Müller")
        assert [p.id for p in search_title(db, "über")] == [paper.id]
        assert [p.id for p in search_title(db, "ÄHNLICHKEIT")] == [paper.id]
        assert [p.id for p in search_author(db, "MÜLLER")] == [paper.id]

    def test_keyword_folds_non_ascii(self, db: Database, make_paper) -> None:
        paper = make_paper(title="Ελληνικά", author="Ødegaard")
        save_field(db, Field(paper_id=paper.id, name="city", value="STRASSE"))
        assert [p.id for p in search_keyword(db, "ελληνικά ødegaard straße")] == [paper.id]


class TestSearchKeyword:
    def test_very_long_term(self, db: Database, make_paper) -> None:
        words = [f"w{i}" for i in range(1500)]
        paper = make_paper(title="Long")
        save_field(db, Field(paper_id=paper.id, name="abstract", value=" ".join(words)))
        make_paper(title="Other")

        assert [p.id for p in search_keyword(db, " ".join(words))] == [paper.id]
        assert search_keyword(db, " ".join(words + ["zygomorphic"])) == []

    def test_matches_field_values(self, db: Database, library) -> None:
        a, _, _ = library
        assert [p.id for p in search_keyword(db, "energy")] == [a.id]

    def test_all_tokens_must_match(self, db: Database, library) -> None:
        a, _, _ = library
        assert [p.id for p in search_keyword(db, "smith nature")] == [a.id]
        assert search_keyword(db, "smith quantum") == []

    def test_matches_type(self, db: Database, library) -> None:
        _, b, _ = library
        assert [p.id for p in search_keyword(db, "book")] == [b.id]

    def test_punctuation_is_ignored(self, db: Database, library) -> None:
        _, b, _ = library
        assert [p.id for p in search_keyword(db, "quantum, primer!")] == [b.id]


class TestNoMatches:
    @pytest.mark.parametrize("search", [search_keyword, search_title, search_author])
    def test_no_match_returns_empty(self, db: Database, library, search) -> None:
        assert search(db, "zygomorphic") == []

    @pytest.mark.parametrize("search", [search_keyword, search_title, search_author])
    def test_blank_term_returns_empty(self, db: Database, library, search) -> None:
        assert search(db, "   ") == []

    @pytest.mark.parametrize("search", [search_keyword, search_title, search_author])
    def test_empty_database(self, db: Database, search) -> None:
        assert search(db, "anything") == []

    @pytest.mark.parametrize("search", [search_keyword, search_title, search_author])
    def test_search_is_read_only(self, db: Database, library, search) -> None:
        before = db.connection.total_changes
        search(db, "smith")
        assert db.connection.total_changes == before
        assert db.changed is False
        assert all(p.changed is False for p in library)
