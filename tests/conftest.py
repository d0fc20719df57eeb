"""Shared fixtures: a deterministic clock and in-memory storage."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from notes_engine.engine import NotesEngine
from notes_engine.persistence import MemoryStorage, NotePersistence
from notes_engine.store import NoteStore

START = datetime(2026, 1, 1, 9, 0, tzinfo=UTC)


class FakeClock:
    """Returns ``start``, then advances by ``step`` on every call."""

    def __init__(self, start: datetime = START, step: timedelta = timedelta(minutes=1)):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now += self.step
        return current


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def persistence(storage: MemoryStorage) -> NotePersistence:
    return NotePersistence(storage)


@pytest.fixture()
def store(persistence: NotePersistence, clock: FakeClock) -> NoteStore:
    return NoteStore(persistence, clock=clock)


@pytest.fixture()
def engine(persistence: NotePersistence, clock: FakeClock) -> NotesEngine:
    return NotesEngine(persistence, clock=clock)
