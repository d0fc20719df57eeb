"""Visible note list: search filter plus pinned-first, newest-first ordering."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Optional

from notes_engine.models import Note

NO_MATCHES_MESSAGE = "No notes match your search."
NO_NOTES_MESSAGE = "No notes yet. Create one to get started!"


def matches(note: Note, search_query: str) -> bool:
    """True if the title or content contains ``search_query``, ignoring case."""
    q = search_query.casefold()
    return q in note.title.casefold() or q in note.content.casefold()


def project(
    notes: Iterable[Note], search_query: str = "", tag: Optional[str] = None
) -> list[Note]:
    """Return the notes to display, in display order.

    Keeps notes whose title or content contains ``search_query``
    (case-insensitive; an empty query keeps everything) and, when ``tag`` is
    given, only notes carrying that exact tag. Pinned notes come first, each
    group newest first. Both sorts are stable, so notes created at the same
    instant keep their relative order.
    """
    visible = [note for note in notes if matches(note, search_query)]
    if tag is not None:
        visible = [note for note in visible if tag in note.tags]
    visible.sort(key=lambda n: n.created_at, reverse=True)
    visible.sort(key=lambda n: not n.is_pinned)
    return visible


def empty_state_message(search_query: str, tag: Optional[str] = None) -> str:
    """Text shown when the projected list is empty.

    Any active search or tag filter means notes may exist but none match.
    """
    return NO_MATCHES_MESSAGE if search_query or tag else NO_NOTES_MESSAGE
