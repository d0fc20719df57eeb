"""Unit tests for notes_engine.models."""

from __future__ import annotations

import json
from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from notes_engine.models import UNTITLED, Note, NoteCollection, is_blank, new_note_id

T0 = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def _note(**overrides) -> Note:
    fields = {"title": "T", "content": "C", "created_at": T0, "updated_at": T0}
    fields.update(overrides)
    return Note(**fields)


class TestIsBlank:
    @pytest.mark.parametrize(
        "title,content",
        [("", ""), ("   ", ""), ("", "\n\t "), (" ", " ")],
    )
    def test_blank_pairs(self, title: str, content: str) -> None:
        assert is_blank(title, content)

    @pytest.mark.parametrize("title,content", [("a", ""), ("", "b"), (" x ", " ")])
    def test_non_blank_pairs(self, title: str, content: str) -> None:
        assert not is_blank(title, content)


class TestNoteModel:
    def test_defaults(self) -> None:
        note = _note()
        assert note.id
        assert note.tags == ()
        assert note.is_pinned is False
        assert note.created_at == note.updated_at

    def test_ids_are_unique(self) -> None:
        assert len({new_note_id() for _ in range(1000)}) == 1000

    def test_duplicate_tags_dropped_in_order(self) -> None:
        note = _note(tags=["b", "a", "b", "A"])
        assert note.tags == ("b", "a", "A")

    def test_updated_before_created_is_clamped(self) -> None:
        note = _note(updated_at=T0 - timedelta(hours=1))
        assert note.updated_at == note.created_at

    def test_naive_datetimes_are_utc(self) -> None:
        naive = datetime(2026, 3, 1, 12, 0)
        note = _note(created_at=naive, updated_at=naive)
        assert note.created_at.tzinfo is not None
        assert note.created_at == T0

    def test_frozen(self) -> None:
        note = _note()
        with pytest.raises(ValidationError):
            note.title = "changed"

    def test_tags_cannot_change_in_place(self) -> None:
        note = _note(tags=["x"])
        assert isinstance(note.tags, tuple)
        with pytest.raises(AttributeError):
            note.tags.append("x")  # type: ignore[attr-defined]

    def test_display_title(self) -> None:
        assert _note(title="").display_title == UNTITLED
        assert _note(title="Groceries").display_title == "Groceries"

    def test_was_edited(self) -> None:
        assert _note().was_edited is False
        assert _note(updated_at=T0 + timedelta(seconds=1)).was_edited is True


class TestStoredShape:
    def test_dumps_camel_case(self) -> None:
        data = _note(is_pinned=True).model_dump(mode="json", by_alias=True)
        assert set(data) == {
            "id",
            "title",
            "content",
            "tags",
            "createdAt",
            "updatedAt",
            "isPinned",
        }
        assert data["isPinned"] is True

    def test_accepts_legacy_record(self) -> None:
        """Numeric ids and missing tags from the browser app load cleanly."""
        raw = {
            "id": 1718000000000,
            "title": "Old",
            "content": "from the browser",
            "createdAt": "2024-06-10T06:13:20Z",
            "updatedAt": "2024-06-10T06:13:20Z",
            "isPinned": False,
        }
        note = Note.model_validate(raw)
        assert note.id == "1718000000000"
        assert note.tags == ()

    @pytest.mark.parametrize(
        "stamp",
        ["6/10/2024, 6:13:20 AM", "06/10/2024, 06:13:20\u202fAM"],
    )
    def test_browser_locale_timestamp(self, stamp: str) -> None:
        note = Note.model_validate(
            {"id": 1718000000000, "title": "Old", "createdAt": stamp, "updatedAt": stamp}
        )
        assert note.created_at == datetime(2024, 6, 10, 6, 13, 20, tzinfo=UTC)
        assert note.was_edited is False

    def test_unparseable_timestamp_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Note.model_validate({"title": "x", "createdAt": "yesterday", "updatedAt": "today"})

    def test_null_tags(self) -> None:
        note = Note.model_validate(
            {"title": "x", "tags": None, "createdAt": T0, "updatedAt": T0}
        )
        assert note.tags == ()

    def test_boolean_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _note(id=True)


class TestNoteCollection:
    def test_empty_collection(self) -> None:
        assert NoteCollection([]).root == []

    def test_serialization_roundtrip(self) -> None:
        notes = [_note(tags=["x"]), _note(title="", content="only body", tags=[])]
        raw = NoteCollection(notes).model_dump_json(by_alias=True)
        assert isinstance(json.loads(raw), list)
        restored = NoteCollection.model_validate_json(raw).root
        assert restored == notes
