"""Notes engine: the single object a presentation layer talks to.

Owns the note store, the draft editor, the search and tag filters, the
pending delete confirmation and the theme preference. Storage and the clock
are injected so the engine can run against an in-memory backend in tests.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Optional

from notes_engine.config import Settings
from notes_engine.draft import Draft, DraftEditor, EditorState
from notes_engine.exceptions import NoteNotFoundError
from notes_engine.models import Note
from notes_engine.persistence import NotePersistence, build_storage
from notes_engine.store import Clock, NoteStore, utc_now
from notes_engine.view import empty_state_message, project

logger = logging.getLogger(__name__)


class NotesEngine:
    """Command and query surface over a personal note collection."""

    def __init__(self, persistence: NotePersistence, clock: Clock = utc_now) -> None:
        self._persistence = persistence
        self._store = NoteStore(persistence, clock=clock)
        self._editor = DraftEditor()
        self._search_query = ""
        self._tag_filter: Optional[str] = None
        self._pending_delete: Optional[str] = None
        self._dark_mode = persistence.load_theme()

    @classmethod
    def from_settings(cls, settings: Settings, clock: Clock = utc_now) -> NotesEngine:
        """Build an engine on the storage backend named in ``settings``."""
        persistence = NotePersistence(
            build_storage(settings),
            notes_key=settings.notes_key,
            theme_key=settings.theme_key,
        )
        return cls(persistence, clock=clock)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def store(self) -> NoteStore:
        return self._store

    @property
    def notes(self) -> list[Note]:
        return self._store.notes

    @property
    def draft(self) -> Draft:
        return self._editor.draft

    @property
    def editor_state(self) -> EditorState:
        return self._editor.state

    @property
    def search_query(self) -> str:
        return self._search_query

    @property
    def tag_filter(self) -> Optional[str]:
        return self._tag_filter

    @property
    def dark_mode(self) -> bool:
        return self._dark_mode

    @property
    def pending_delete(self) -> Optional[str]:
        """Id of the note awaiting delete confirmation, if any."""
        return self._pending_delete

    def current_view(self) -> list[Note]:
        """Notes to render, filtered and ordered."""
        return project(self._store.notes, self._search_query, tag=self._tag_filter)

    def empty_state_message(self) -> str:
        return empty_state_message(self._search_query, tag=self._tag_filter)

    # ------------------------------------------------------------------
    # Direct note commands
    # ------------------------------------------------------------------

    def create(self, title: str, content: str, tags: Iterable[str] = ()) -> Optional[Note]:
        return self._store.create(title, content, tags)

    def update(
        self, note_id: str, title: str, content: str, tags: Iterable[str] = ()
    ) -> Optional[Note]:
        return self._store.update(note_id, title, content, tags)

    def delete(self, note_id: str) -> None:
        """Delete a note, closing any edit session open on it."""
        self._store.delete(note_id)
        if self._pending_delete == note_id:
            self._pending_delete = None
        if self._editor.is_editing and self._editor.draft.target_id == note_id:
            logger.info("Closing edit session on deleted note %s", note_id)
            self._editor.cancel()

    def toggle_pin(self, note_id: str) -> Optional[Note]:
        return self._store.toggle_pin(note_id)

    # ------------------------------------------------------------------
    # Delete confirmation
    # ------------------------------------------------------------------

    def request_delete(self, note_id: str) -> None:
        self._pending_delete = note_id

    def confirm_delete(self) -> None:
        """Delete the note awaiting confirmation. No-op if nothing is pending."""
        if self._pending_delete is None:
            return
        self.delete(self._pending_delete)

    def dismiss_delete(self) -> None:
        self._pending_delete = None

    # ------------------------------------------------------------------
    # Draft session
    # ------------------------------------------------------------------

    def begin_create(self) -> None:
        self._editor.begin_create()

    def begin_edit(self, note_id: str) -> None:
        """Open an edit session on an existing note. Raises NoteNotFoundError."""
        note = self._store.get(note_id)
        if note is None:
            raise NoteNotFoundError(note_id)
        self._editor.begin_edit(note)

    def set_draft_title(self, title: str) -> None:
        self._editor.set_title(title)

    def set_draft_content(self, content: str) -> None:
        self._editor.set_content(content)

    def add_tag(self, tag: str) -> list[str]:
        return self._editor.add_tag(tag)

    def remove_tag(self, tag: str) -> list[str]:
        return self._editor.remove_tag(tag)

    def cancel(self) -> None:
        self._editor.cancel()

    def commit(self) -> Optional[Note]:
        return self._editor.commit(self._store)

    # ------------------------------------------------------------------
    # Filters and theme
    # ------------------------------------------------------------------

    def set_search_query(self, query: str) -> None:
        self._search_query = query

    def set_tag_filter(self, tag: Optional[str]) -> None:
        self._tag_filter = tag or None

    def set_theme_preference(self, dark: bool) -> None:
        self._dark_mode = bool(dark)
        self._persistence.save_theme(self._dark_mode)
        logger.info("Theme set to %s", "dark" if self._dark_mode else "light")

    def toggle_theme(self) -> bool:
        self.set_theme_preference(not self._dark_mode)
        return self._dark_mode
