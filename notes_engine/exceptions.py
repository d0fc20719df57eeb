"""Exception hierarchy for the notes engine."""


class NotesEngineError(Exception):
    """Base exception for all notes engine errors."""


class NoteNotFoundError(NotesEngineError):
    """Raised when an operation that requires an existing note gets an unknown id."""

    def __init__(self, note_id: str) -> None:
        super().__init__(f"No note with id {note_id!r}")
        self.note_id = note_id
