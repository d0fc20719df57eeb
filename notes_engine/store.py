"""In-memory note collection with write-through persistence."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import Optional

from notes_engine.exceptions import NoteNotFoundError
from notes_engine.metrics import NOTE_OPERATIONS, NOTES_STORED
from notes_engine.models import Note, is_blank, new_note_id
from notes_engine.persistence import NotePersistence

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock."""
    return datetime.now(UTC)


# ---------------------------------------------------------------------------
# Tag helpers
# ---------------------------------------------------------------------------


def tag_add(tags: Iterable[str], new_tag: str) -> list[str]:
    """Return ``tags`` with ``new_tag`` appended.

    The new tag is trimmed first. An empty or already present tag
    (case-sensitive) leaves the sequence unchanged.
    """
    result = list(tags)
    tag = new_tag.strip()
    if tag and tag not in result:
        result.append(tag)
    return result


def tag_remove(tags: Iterable[str], tag: str) -> list[str]:
    """Return ``tags`` without the first exact match of ``tag``."""
    result = list(tags)
    if tag in result:
        result.remove(tag)
    return result


def normalize_tags(tags: Iterable[str]) -> list[str]:
    """Run each of ``tags`` through ``tag_add``, dropping blanks and repeats."""
    result: list[str] = []
    for tag in tags:
        result = tag_add(result, tag)
    return result


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class NoteStore:
    """Owns the ordered note collection.

    The collection is loaded from ``persistence`` once on construction and
    written back in full after every committed change.
    """

    def __init__(self, persistence: NotePersistence, clock: Clock = utc_now) -> None:
        self._persistence = persistence
        self._clock = clock
        self._notes: list[Note] = persistence.load_notes()
        NOTES_STORED.set(len(self._notes))

    @property
    def notes(self) -> list[Note]:
        """Every stored note, in insertion order."""
        return list(self._notes)

    @property
    def count(self) -> int:
        """Number of stored notes."""
        return len(self._notes)

    def get(self, note_id: str) -> Optional[Note]:
        """Return the note with ``note_id``, or None."""
        index = self._index(note_id)
        return None if index is None else self._notes[index]

    def all_tags(self) -> list[str]:
        """Distinct tags across all notes, in first-seen order."""
        return list(dict.fromkeys(tag for note in self._notes for tag in note.tags))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(
        self, title: str, content: str, tags: Iterable[str] = ()
    ) -> Optional[Note]:
        """Create and persist a new note. Returns None if title and content are blank."""
        if is_blank(title, content):
            NOTE_OPERATIONS.labels(operation="create", outcome="skipped").inc()
            logger.debug("Skipped create: title and content are blank")
            return None

        note_id = new_note_id()
        while self._index(note_id) is not None:
            note_id = new_note_id()

        now = self._clock()
        note = Note(
            id=note_id,
            title=title,
            content=content,
            tags=normalize_tags(tags),
            created_at=now,
            updated_at=now,
        )
        self._notes.append(note)
        self._persist()
        NOTE_OPERATIONS.labels(operation="create", outcome="applied").inc()
        logger.info("Created note %s — '%s'", note.id, note.display_title)
        return note

    def update(
        self, note_id: str, title: str, content: str, tags: Iterable[str] = ()
    ) -> Optional[Note]:
        """Replace a note's title, content and tags.

        Returns None without touching the store if title and content are
        blank. Raises NoteNotFoundError if no note has ``note_id``.
        """
        if is_blank(title, content):
            NOTE_OPERATIONS.labels(operation="update", outcome="skipped").inc()
            logger.debug("Skipped update of %s: title and content are blank", note_id)
            return None

        index = self._index(note_id)
        if index is None:
            NOTE_OPERATIONS.labels(operation="update", outcome="not_found").inc()
            raise NoteNotFoundError(note_id)

        current = self._notes[index]
        updated = Note(
            id=current.id,
            title=title,
            content=content,
            tags=normalize_tags(tags),
            created_at=current.created_at,
            updated_at=self._clock(),
            is_pinned=current.is_pinned,
        )
        self._notes[index] = updated
        self._persist()
        NOTE_OPERATIONS.labels(operation="update", outcome="applied").inc()
        logger.info("Updated note %s — '%s'", updated.id, updated.display_title)
        return updated

    def delete(self, note_id: str) -> None:
        """Remove the note with ``note_id``. Unknown ids are ignored."""
        index = self._index(note_id)
        if index is None:
            NOTE_OPERATIONS.labels(operation="delete", outcome="not_found").inc()
            logger.debug("Delete of unknown note %s ignored", note_id)
        else:
            del self._notes[index]
            NOTE_OPERATIONS.labels(operation="delete", outcome="applied").inc()
            logger.info("Deleted note %s", note_id)
        self._persist()

    def toggle_pin(self, note_id: str) -> Optional[Note]:
        """Flip the pinned flag. Unknown ids are ignored and return None."""
        index = self._index(note_id)
        toggled: Optional[Note] = None
        if index is None:
            NOTE_OPERATIONS.labels(operation="toggle_pin", outcome="not_found").inc()
            logger.debug("Pin toggle of unknown note %s ignored", note_id)
        else:
            current = self._notes[index]
            toggled = current.model_copy(update={"is_pinned": not current.is_pinned})
            self._notes[index] = toggled
            NOTE_OPERATIONS.labels(operation="toggle_pin", outcome="applied").inc()
            logger.info("Note %s pinned=%s", note_id, toggled.is_pinned)
        self._persist()
        return toggled

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _index(self, note_id: str) -> Optional[int]:
        for i, note in enumerate(self._notes):
            if note.id == note_id:
                return i
        return None

    def _persist(self) -> None:
        self._persistence.save_notes(self._notes)
        NOTES_STORED.set(len(self._notes))
