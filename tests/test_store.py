"""Unit tests for notes_engine.store — note lifecycle and tag helpers."""

from __future__ import annotations

import json
from datetime import timedelta

import pytest
from prometheus_client import REGISTRY

from notes_engine.config import STORAGE_KEY
from notes_engine.exceptions import NoteNotFoundError
from notes_engine.persistence import MemoryStorage, NotePersistence
from notes_engine.store import NoteStore, normalize_tags, tag_add, tag_remove

from conftest import START, FakeClock

BLANK_PAIRS = [("", ""), ("   ", "\n"), ("\t", "  ")]


def _stored(storage: MemoryStorage) -> list[dict]:
    return json.loads(storage.load(STORAGE_KEY))


# ---------------------------------------------------------------------------
# Tag helpers
# ---------------------------------------------------------------------------


class TestTagAdd:
    def test_appends_in_order(self) -> None:
        assert tag_add(["a"], "b") == ["a", "b"]

    def test_trims(self) -> None:
        assert tag_add([], "  work ") == ["work"]

    def test_blank_is_noop(self) -> None:
        assert tag_add(["a"], "   ") == ["a"]

    def test_existing_is_noop(self) -> None:
        assert tag_add(["a", "b"], "a") == ["a", "b"]
        assert tag_add(["a"], " a ") == ["a"]

    def test_case_sensitive(self) -> None:
        assert tag_add(["work"], "Work") == ["work", "Work"]

    def test_does_not_mutate_input(self) -> None:
        tags = ["a"]
        tag_add(tags, "b")
        assert tags == ["a"]


class TestNormalizeTags:
    def test_matches_repeated_tag_add(self) -> None:
        assert normalize_tags(["b", " a", "", "b", "a "]) == ["b", "a"]

    def test_empty(self) -> None:
        assert normalize_tags([]) == []


class TestTagRemove:
    def test_removes(self) -> None:
        assert tag_remove(["a", "b", "c"], "b") == ["a", "c"]

    def test_absent_is_noop(self) -> None:
        assert tag_remove(["a"], "z") == ["a"]

    def test_exact_match_only(self) -> None:
        assert tag_remove(["Work"], "work") == ["Work"]

    def test_add_then_remove_restores(self) -> None:
        original = ["x", "y"]
        assert tag_remove(tag_add(original, "z"), "z") == original


# ---------------------------------------------------------------------------
# Create
# ---------------------------------------------------------------------------


class TestCreate:
    def test_create_sets_fields(self, store: NoteStore) -> None:
        note = store.create("Title", "Content", ["tag1"])
        assert note is not None
        assert note.title == "Title"
        assert note.content == "Content"
        assert note.tags == ("tag1",)
        assert note.is_pinned is False
        assert note.created_at == note.updated_at == START
        assert store.count == 1

    def test_create_appends(self, store: NoteStore) -> None:
        a = store.create("A", "", [])
        b = store.create("", "B", [])
        assert [n.id for n in store.notes] == [a.id, b.id]

    def test_ids_unique(self, store: NoteStore) -> None:
        ids = {store.create(f"n{i}", "", []).id for i in range(50)}
        assert len(ids) == 50

    @pytest.mark.parametrize("title,content", BLANK_PAIRS)
    def test_blank_is_noop(self, store: NoteStore, title: str, content: str) -> None:
        store.create("Keep", "me", [])
        before = store.notes
        assert store.create(title, content, ["tag"]) is None
        assert store.notes == before

    def test_create_persists(self, store: NoteStore, storage: MemoryStorage) -> None:
        note = store.create("Persist", "body", ["t"])
        records = _stored(storage)
        assert len(records) == 1
        assert records[0]["id"] == note.id
        assert records[0]["isPinned"] is False

    def test_duplicate_tags_collapsed(self, store: NoteStore) -> None:
        note = store.create("T", "C", ["a", "a", "b"])
        assert note.tags == ("a", "b")

    def test_tags_trimmed_and_blanks_dropped(self, store: NoteStore) -> None:
        note = store.create("T", "C", ["", " a", "a ", "  ", "b"])
        assert note.tags == ("a", "b")

    def test_stored_note_tags_cannot_be_mutated(self, store: NoteStore) -> None:
        note = store.create("T", "C", ["x"])
        with pytest.raises(AttributeError):
            store.notes[0].tags.append("x")  # type: ignore[attr-defined]
        assert store.get(note.id).tags == ("x",)


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------


class TestUpdate:
    def test_update_replaces_fields(self, store: NoteStore) -> None:
        note = store.create("Old", "old body", ["x"])
        store.toggle_pin(note.id)

        updated = store.update(note.id, "New", "new body", ["y"])

        assert updated.id == note.id
        assert updated.title == "New"
        assert updated.content == "new body"
        assert updated.tags == ("y",)
        assert updated.created_at == note.created_at
        assert updated.updated_at > note.created_at
        assert updated.is_pinned is True

    def test_update_keeps_position(self, store: NoteStore) -> None:
        a = store.create("A", "", [])
        b = store.create("B", "", [])
        store.update(a.id, "A2", "", [])
        assert [n.id for n in store.notes] == [a.id, b.id]

    @pytest.mark.parametrize("title,content", BLANK_PAIRS)
    def test_blank_is_noop(self, store: NoteStore, title: str, content: str) -> None:
        note = store.create("Keep", "me", [])
        before = store.notes
        assert store.update(note.id, title, content, []) is None
        assert store.notes == before

    def test_blank_on_unknown_id_is_noop(self, store: NoteStore) -> None:
        assert store.update("missing", "", "", []) is None

    def test_unknown_id_raises(self, store: NoteStore) -> None:
        with pytest.raises(NoteNotFoundError) as exc_info:
            store.update("missing", "T", "C", [])
        assert exc_info.value.note_id == "missing"

    def test_update_normalizes_tags(self, store: NoteStore) -> None:
        note = store.create("T", "C", [])
        updated = store.update(note.id, "T", "C", [" work ", "", "work"])
        assert updated.tags == ("work",)

    def test_update_persists(self, store: NoteStore, storage: MemoryStorage) -> None:
        note = store.create("Old", "", [])
        store.update(note.id, "New", "", [])
        assert _stored(storage)[0]["title"] == "New"

    def test_clock_going_backwards_keeps_invariant(self, persistence: NotePersistence) -> None:
        clock = FakeClock(step=timedelta(hours=-1))
        store = NoteStore(persistence, clock=clock)
        note = store.create("T", "C", [])
        updated = store.update(note.id, "T2", "C", [])
        assert updated.updated_at >= updated.created_at


# ---------------------------------------------------------------------------
# Delete / pin
# ---------------------------------------------------------------------------


class TestDelete:
    def test_delete_removes(self, store: NoteStore) -> None:
        a = store.create("A", "", [])
        b = store.create("B", "", [])
        store.delete(a.id)
        assert [n.id for n in store.notes] == [b.id]

    def test_delete_twice_equals_once(self, store: NoteStore) -> None:
        a = store.create("A", "", [])
        store.create("B", "", [])
        store.delete(a.id)
        after_once = store.notes
        store.delete(a.id)
        assert store.notes == after_once

    def test_delete_unknown_is_not_error(self, store: NoteStore) -> None:
        store.delete("missing")
        assert store.count == 0

    def test_delete_persists(self, store: NoteStore, storage: MemoryStorage) -> None:
        note = store.create("A", "", [])
        store.delete(note.id)
        assert _stored(storage) == []


class TestTogglePin:
    def test_toggle_flips(self, store: NoteStore) -> None:
        note = store.create("A", "", [])
        assert store.toggle_pin(note.id).is_pinned is True
        assert store.toggle_pin(note.id).is_pinned is False

    def test_even_toggles_restore(self, store: NoteStore) -> None:
        note = store.create("A", "", [])
        for _ in range(4):
            store.toggle_pin(note.id)
        assert store.get(note.id) == note

    def test_toggle_does_not_touch_updated_at(self, store: NoteStore) -> None:
        note = store.create("A", "", [])
        toggled = store.toggle_pin(note.id)
        assert toggled.updated_at == note.updated_at

    def test_toggle_unknown_is_not_error(self, store: NoteStore) -> None:
        assert store.toggle_pin("missing") is None

    def test_toggle_persists(self, store: NoteStore, storage: MemoryStorage) -> None:
        note = store.create("A", "", [])
        store.toggle_pin(note.id)
        assert _stored(storage)[0]["isPinned"] is True


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


class TestLoading:
    def test_store_reloads_saved_notes(self, storage: MemoryStorage, clock: FakeClock) -> None:
        s1 = NoteStore(NotePersistence(storage), clock=clock)
        s1.create("Persist", "This should survive reload", ["test"])
        s2 = NoteStore(NotePersistence(storage), clock=clock)
        assert s2.notes == s1.notes

    def test_corrupt_storage_starts_empty(self, clock: FakeClock) -> None:
        storage = MemoryStorage({STORAGE_KEY: "{not json"})
        store = NoteStore(NotePersistence(storage), clock=clock)
        assert store.count == 0
        store.create("Fresh", "", [])
        assert len(_stored(storage)) == 1

    def test_all_tags(self, store: NoteStore) -> None:
        store.create("A", "", ["work", "ideas"])
        store.create("B", "", ["personal", "work"])
        assert store.all_tags() == ["work", "ideas", "personal"]


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------


def _sample(name: str, labels: dict[str, str] | None = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class TestMetrics:
    def test_skipped_create_counted(self, store: NoteStore) -> None:
        labels = {"operation": "create", "outcome": "skipped"}
        before = _sample("notes_operations_total", labels)
        store.create("", " ", [])
        assert _sample("notes_operations_total", labels) == before + 1

    def test_gauge_tracks_count(self, store: NoteStore) -> None:
        a = store.create("A", "", [])
        store.create("B", "", [])
        assert _sample("notes_stored") == 2
        store.delete(a.id)
        assert _sample("notes_stored") == 1
