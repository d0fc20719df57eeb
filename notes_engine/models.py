"""Pydantic models for the notes engine."""

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    RootModel,
    ValidationInfo,
    field_validator,
)
from pydantic.alias_generators import to_camel

UNTITLED = "Untitled"
LEGACY_TIMESTAMP_FORMAT = "%m/%d/%Y, %I:%M:%S %p"


def new_note_id() -> str:
    """Return a fresh, globally unique note id."""
    return str(uuid4())


def is_blank(title: str, content: str) -> bool:
    """True when both title and content are empty after trimming."""
    return not title.strip() and not content.strip()


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


class Note(BaseModel):
    """A single note with pin state and timestamps.

    Stored with camelCase keys (``createdAt``, ``isPinned``, ...). Records
    written by the browser version of the app also load: numeric ids become
    strings and ``toLocaleString`` timestamps (en-US) are read as UTC.
    Tags are a tuple, so like every other field they cannot change in place.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    id: str = Field(default_factory=new_note_id, description="Opaque unique id")
    title: str = Field(default="", description="Note title")
    content: str = Field(default="", description="Note content")
    tags: tuple[str, ...] = Field(default=(), description="Ordered, unique tags")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")
    is_pinned: bool = Field(default=False, description="Sorts ahead of unpinned notes")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_numeric_id(cls, value: object) -> object:
        # Older data used millisecond timestamps as ids.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _missing_tags(cls, value: object) -> object:
        return () if value is None else value

    @field_validator("tags")
    @classmethod
    def _unique_tags(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(dict.fromkeys(value))

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_locale_timestamp(cls, value: object) -> object:
        # e.g. "6/10/2024, 6:13:20 AM"; newer browsers put U+202F before AM/PM.
        if isinstance(value, str):
            text = value.replace("\u202f", " ").strip()
            try:
                return datetime.strptime(text, LEGACY_TIMESTAMP_FORMAT)
            except ValueError:
                return value
        return value

    @field_validator("created_at")
    @classmethod
    def _created_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @field_validator("updated_at")
    @classmethod
    def _updated_not_before_created(
        cls, value: datetime, info: ValidationInfo
    ) -> datetime:
        value = _as_utc(value)
        created = info.data.get("created_at")
        if created is not None and value < created:
            return created
        return value

    @property
    def display_title(self) -> str:
        """Title to show in listings."""
        return self.title or UNTITLED

    @property
    def was_edited(self) -> bool:
        """Whether the note changed since it was created."""
        return self.updated_at != self.created_at


class NoteCollection(RootModel[list[Note]]):
    """Ordered note sequence, used for JSON serialization."""

    root: list[Note] = Field(default_factory=list)
