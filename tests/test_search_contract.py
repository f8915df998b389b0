"""
Contract tests run against every search backend

The search_service fixture is parametrized over sqlite and memory.
"""
import logging
import threading

import pytest

from domain_models import Note, Paragraph
from search.errors import IndexClosedError, QuerySyntaxError
from tests import make_note


def _ids(results):
    return [r.id for r in results]


def _note_ids(results):
    return {r.note_id for r in results}


class TestQuery:
    """Test query behavior"""

    def test_finds_paragraph(self, search_service, intro_note):
        """Matching paragraph is returned with id, text and snippet"""
        search_service.add_index_doc(intro_note)

        results = search_service.query("hello")

        assert _ids(results) == ["n1/paragraph/p1"]
        assert results[0].text == "hello world"
        assert "<B>hello</B>" in results[0].snippet
        assert results[0].name == "Intro"

    def test_finds_note_name(self, search_service, intro_note):
        """Note name is indexed as its own document"""
        search_service.add_index_doc(intro_note)

        results = search_service.query("intro")

        assert _ids(results) == ["n1"]

    def test_paragraph_title_is_searchable(self, search_service):
        """Paragraph title is returned as header"""
        note = Note(id="n1", name="Doc", paragraphs=[
            Paragraph(id="p1", text="select 1", title="Warmup query")
        ])
        search_service.add_index_doc(note)

        results = search_service.query("warmup")

        assert _ids(results) == ["n1/paragraph/p1"]
        assert results[0].header == "Warmup query"

    def test_blank_query_returns_nothing(self, search_service, intro_note):
        """Empty query yields no results"""
        search_service.add_index_doc(intro_note)

        assert search_service.query("") == []
        assert search_service.query("   ") == []

    def test_no_match_returns_empty(self, search_service, intro_note):
        """Unknown words simply yield zero matches"""
        search_service.add_index_doc(intro_note)

        assert search_service.query("zebra") == []

    def test_unbalanced_quote_is_syntax_error(self, search_service, intro_note):
        """Unparseable query raises QuerySyntaxError"""
        search_service.add_index_doc(intro_note)

        with pytest.raises(QuerySyntaxError):
            search_service.query('"hello')

    def test_punctuated_text_matches(self, search_service):
        """Ordinary punctuation in the query is not query syntax"""
        search_service.add_index_doc(
            make_note("n1", "Notes", "hello world don't state-of-the-art e.g.")
        )

        for query in ["hello world.", "hello, world", "don't", "state-of-the-art", "e.g."]:
            assert _ids(search_service.query(query)) == ["n1/paragraph/p1"], query

    def test_punctuation_only_returns_nothing(self, search_service, intro_note):
        search_service.add_index_doc(intro_note)

        assert search_service.query("... ?!") == []

    def test_all_terms_must_match(self, search_service):
        """Multiple terms narrow the results"""
        search_service.add_index_docs([
            make_note("n1", "One", "red apple"),
            make_note("n2", "Two", "red car"),
        ])

        assert _ids(search_service.query("red apple")) == ["n1/paragraph/p1"]
        assert _note_ids(search_service.query("red")) == {"n1", "n2"}

    def test_limit(self, search_service):
        """limit caps the number of results"""
        search_service.add_index_docs([make_note(f"n{i}", "x", "common word") for i in range(5)])

        assert len(search_service.query("common", limit=2)) == 2
        assert len(search_service.query("common")) == 5

    def test_order_is_stable(self, search_service):
        """Same index state gives the same order"""
        search_service.add_index_docs([
            make_note("n1", "x", "alpha alpha alpha beta"),
            make_note("n2", "y", "alpha gamma"),
            make_note("n3", "z", "alpha"),
        ])

        first = _ids(search_service.query("alpha"))
        second = _ids(search_service.query("alpha"))

        assert first == second
        assert len(first) == 3

    def test_query_does_not_mutate(self, search_service, intro_note):
        """Querying leaves the index unchanged"""
        search_service.add_index_doc(intro_note)
        search_service.query("hello")

        assert search_service.count() == 1
        assert _ids(search_service.query("hello")) == ["n1/paragraph/p1"]


class TestAddIndexDoc:
    """Test add_index_doc / add_index_docs"""

    def test_idempotent_add(self, search_service, intro_note):
        """Adding the same note twice leaves one document"""
        assert search_service.add_index_doc(intro_note) is True
        search_service.add_index_doc(intro_note)

        assert search_service.count() == 1
        assert _ids(search_service.query("hello")) == ["n1/paragraph/p1"]

    def test_empty_paragraphs_not_indexed(self, search_service):
        """Paragraphs without text are skipped"""
        note = Note(id="n1", name="Doc", paragraphs=[
            Paragraph(id="p1", text=None),
            Paragraph(id="p2", text="  "),
            Paragraph(id="p3", text="real content"),
        ])
        search_service.add_index_doc(note)

        assert _ids(search_service.query("content")) == ["n1/paragraph/p3"]
        assert search_service.count() == 1

    def test_invalid_note_is_logged_not_raised(self, search_service, caplog):
        """add_index_doc has no error channel"""
        with caplog.at_level(logging.ERROR):
            indexed = search_service.add_index_doc(Note(id="", name="broken"))

        assert indexed is False
        assert search_service.count() == 0
        assert "Failed to index note" in caplog.text

    def test_batch_partial_failure(self, search_service):
        """One bad note does not abort the batch"""
        n1 = make_note("n1", "First", "apple pie")
        n2_invalid = Note(id="", name="Broken", paragraphs=[Paragraph(id="p1", text="apple")])
        n3 = make_note("n3", "Third", "apple tart")

        indexed = search_service.add_index_docs([n1, n2_invalid, n3])

        assert indexed == 2
        assert _note_ids(search_service.query("apple")) == {"n1", "n3"}

    def test_batch_accepts_generator(self, search_service):
        """Any iterable of notes works"""
        notes = (make_note(f"n{i}", "x", f"word{i}") for i in range(3))

        assert search_service.add_index_docs(notes) == 3
        assert search_service.count() == 3


class TestUpdateIndexDoc:
    """Test update_index_doc replace semantics"""

    def test_replace_not_append(self, search_service, intro_note):
        """Old paragraph text is gone after update"""
        search_service.add_index_doc(intro_note)
        intro_note.paragraphs[0].text = "goodbye world"

        search_service.update_index_doc(intro_note)

        assert search_service.query("hello") == []
        assert _ids(search_service.query("goodbye")) == ["n1/paragraph/p1"]
        assert search_service.count() == 1

    def test_removed_paragraph_disappears(self, search_service):
        """Full replace drops paragraphs no longer in the note"""
        note = make_note("n1", "Doc", "first block", "second block")
        search_service.add_index_doc(note)
        note.paragraphs.pop()

        search_service.update_index_doc(note)

        assert _ids(search_service.query("block")) == ["n1/paragraph/p1"]

    def test_renamed_note(self, search_service, intro_note):
        """Note name is replaced too"""
        search_service.add_index_doc(intro_note)
        intro_note.name = "Overview"

        search_service.update_index_doc(intro_note)

        assert search_service.query("intro") == []
        assert _ids(search_service.query("overview")) == ["n1"]
        assert search_service.query("hello")[0].name == "Overview"

    def test_update_unknown_note_indexes_it(self, search_service, intro_note):
        """Update of a never-indexed note behaves like add"""
        search_service.update_index_doc(intro_note)

        assert search_service.count() == 1

    def test_invalid_note_raises_value_error(self, search_service):
        """update has a caller-visible error channel for bad input"""
        with pytest.raises(ValueError):
            search_service.update_index_doc(Note(id="", name="broken"))

        assert search_service.count() == 0

    def test_other_notes_untouched(self, search_service):
        """Update only affects its own note id"""
        n1 = make_note("n1", "One", "shared words")
        n2 = make_note("n2", "Two", "shared words")
        search_service.add_index_docs([n1, n2])
        n1.paragraphs[0].text = "different"

        search_service.update_index_doc(n1)

        assert _note_ids(search_service.query("shared")) == {"n2"}


class TestDelete:
    """Test delete_index_doc / delete_index_docs"""

    def test_paragraph_scoped_delete(self, search_service):
        """Only the given paragraph is removed"""
        note = make_note("n1", "Doc", "alpha beta", "gamma delta")
        search_service.add_index_doc(note)

        search_service.delete_index_doc("n1", note.paragraphs[0])

        assert search_service.query("alpha") == []
        assert _ids(search_service.query("gamma")) == ["n1/paragraph/p2"]
        assert _ids(search_service.query("doc")) == ["n1"]
        assert search_service.count() == 1

    def test_paragraph_delete_unknown_is_noop(self, search_service, intro_note):
        """Deleting a paragraph that is not indexed does nothing"""
        search_service.add_index_doc(intro_note)

        search_service.delete_index_doc("n1", Paragraph(id="p9", text="x"))
        search_service.delete_index_doc("n404", Paragraph(id="p1", text="x"))

        assert _ids(search_service.query("hello")) == ["n1/paragraph/p1"]

    def test_full_delete(self, search_service):
        """All documents of the note are gone"""
        note = make_note("n1", "Doc", "alpha beta", "gamma delta")
        search_service.add_index_doc(note)

        search_service.delete_index_docs("n1")

        assert search_service.query("alpha") == []
        assert search_service.query("gamma") == []
        assert search_service.query("doc") == []
        assert search_service.count() == 0

    def test_full_delete_is_idempotent(self, search_service, intro_note):
        """Deleting twice, or deleting an unknown id, does not error"""
        search_service.add_index_doc(intro_note)

        search_service.delete_index_docs("n1")
        search_service.delete_index_docs("n1")
        search_service.delete_index_docs("never-indexed")

        assert search_service.count() == 0

    def test_delete_keeps_other_notes(self, search_service):
        search_service.add_index_docs([
            make_note("n1", "One", "shared"),
            make_note("n2", "Two", "shared"),
        ])

        search_service.delete_index_docs("n1")

        assert _note_ids(search_service.query("shared")) == {"n2"}


class TestClose:
    """Test close() lifecycle"""

    def test_close_is_idempotent(self, search_service):
        search_service.close()
        search_service.close()

        assert search_service.is_closed()

    def test_mutations_rejected_after_close(self, search_service, intro_note):
        """update raises, add swallows and logs"""
        search_service.close()

        with pytest.raises(IndexClosedError):
            search_service.update_index_doc(intro_note)
        with pytest.raises(IndexClosedError):
            search_service.delete_index_docs("n1")
        search_service.add_index_doc(intro_note)

    def test_query_rejected_after_close(self, search_service):
        search_service.close()

        with pytest.raises(IndexClosedError):
            search_service.query("hello")


class TestConcurrency:
    """Test concurrent mutations and queries"""

    def test_concurrent_updates_different_notes(self, search_service):
        """Writers on different notes do not interfere"""
        def writer(i):
            for version in range(10):
                search_service.update_index_doc(make_note(f"n{i}", "x", f"common v{version}"))

        threads = [threading.Thread(target=writer, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert search_service.count() == 8
        assert len(search_service.query("common")) == 8
        assert len(search_service.query("v9")) == 8

    def test_same_note_last_writer_wins(self, search_service):
        """Concurrent updates of one note never leave duplicate rows"""
        errors = []

        def writer(i):
            for version in range(10):
                search_service.update_index_doc(
                    make_note("n1", "x", f"common writer{i}", f"second writer{i}")
                )

        def reader():
            for _ in range(50):
                results = search_service.query("common")
                if len(results) > 1:
                    errors.append(_ids(results))

        threads = [threading.Thread(target=writer, args=(i,)) for i in range(4)]
        threads.append(threading.Thread(target=reader))
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert _ids(search_service.query("common")) == ["n1/paragraph/p1"]
        assert _ids(search_service.query("second")) == ["n1/paragraph/p2"]
