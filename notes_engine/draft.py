"""Staging area for an in-progress create or edit session."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from notes_engine.models import Note
from notes_engine.store import NoteStore, tag_add, tag_remove

logger = logging.getLogger(__name__)


class EditorState(str, Enum):
    IDLE = "idle"
    EDITING = "editing"


@dataclass
class Draft:
    """Uncommitted title, content and tags. ``target_id`` is None for a new note."""

    title: str = ""
    content: str = ""
    tags: list[str] = field(default_factory=list)
    target_id: Optional[str] = None


class DraftEditor:
    """Two-state editor: IDLE, or EDITING a new note or an existing one.

    Nothing reaches the store until ``commit``. Every session end, committed
    or cancelled, leaves an empty draft behind.
    """

    def __init__(self) -> None:
        self._state = EditorState.IDLE
        self._draft = Draft()

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def draft(self) -> Draft:
        return self._draft

    @property
    def is_editing(self) -> bool:
        return self._state is EditorState.EDITING

    # ------------------------------------------------------------------
    # Session transitions
    # ------------------------------------------------------------------

    def begin_create(self) -> None:
        self._draft = Draft()
        self._state = EditorState.EDITING

    def begin_edit(self, note: Note) -> None:
        self._draft = Draft(
            title=note.title,
            content=note.content,
            tags=list(note.tags),
            target_id=note.id,
        )
        self._state = EditorState.EDITING

    def cancel(self) -> None:
        if not self.is_editing:
            logger.debug("Cancel with no open draft ignored")
        self._reset()

    def commit(self, store: NoteStore) -> Optional[Note]:
        """Write the draft to ``store`` and close the session.

        Returns the created or updated note, or None when the draft was
        blank. The session closes in every case, including when the update
        target no longer exists (NoteNotFoundError propagates).
        """
        if not self.is_editing:
            logger.debug("Commit with no open draft ignored")
            return None

        draft = self._draft
        try:
            if draft.target_id is None:
                return store.create(draft.title, draft.content, draft.tags)
            return store.update(draft.target_id, draft.title, draft.content, draft.tags)
        finally:
            self._reset()

    # ------------------------------------------------------------------
    # Draft fields
    # ------------------------------------------------------------------

    def set_title(self, title: str) -> None:
        self._draft.title = title

    def set_content(self, content: str) -> None:
        self._draft.content = content

    def add_tag(self, tag: str) -> list[str]:
        self._draft.tags = tag_add(self._draft.tags, tag)
        return list(self._draft.tags)

    def remove_tag(self, tag: str) -> list[str]:
        self._draft.tags = tag_remove(self._draft.tags, tag)
        return list(self._draft.tags)

    def _reset(self) -> None:
        self._draft = Draft()
        self._state = EditorState.IDLE
