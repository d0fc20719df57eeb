"""Seed the configured note storage with sample notes for screenshots.

Writes a handful of tagged notes (one pinned) through the notes engine,
so the data lands wherever NOTES_STORAGE_BACKEND points.

Usage:
    python scripts/seed_data.py [--storage-path notes_data.json] [--reset]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure the project root is importable when run as a plain script.
_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from notes_engine.config import Settings  # noqa: E402
from notes_engine.engine import NotesEngine  # noqa: E402

# Each entry: (title, content, tags, pinned)
SAMPLE_NOTES: list[tuple[str, str, list[str], bool]] = [
    (
        "Groceries",
        "Milk, eggs, bread, coffee beans.",
        ["personal", "shopping"],
        False,
    ),
    (
        "Project Ideas",
        "Build a markdown export for notes. Add a keyboard shortcut for search.",
        ["ideas"],
        True,
    ),
    (
        "Meeting Notes",
        "Discussed the Q3 roadmap. Key decision: ship the mobile layout first.",
        ["work", "meetings"],
        False,
    ),
    (
        "Reading List",
        "Designing Data-Intensive Applications; The Pragmatic Programmer.",
        ["reading"],
        False,
    ),
    (
        "",
        "Call the dentist before Friday.",
        ["personal"],
        False,
    ),
]


def main() -> None:
    """Create every sample note."""
    parser = argparse.ArgumentParser(description="Seed sample notes")
    parser.add_argument(
        "--storage-path",
        type=Path,
        default=None,
        help="JSON storage file (default: NOTES_STORAGE_PATH or notes_data.json)",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Delete existing notes before seeding",
    )
    args = parser.parse_args()

    overrides = {"storage_path": args.storage_path} if args.storage_path else {}
    engine = NotesEngine.from_settings(Settings(**overrides))

    if args.reset:
        for note in engine.notes:
            engine.delete(note.id)
        print("  Cleared existing notes.")

    print(f"\n  Seeding {len(SAMPLE_NOTES)} notes")
    print("  " + "=" * 58)
    for i, (title, content, tags, pinned) in enumerate(SAMPLE_NOTES, 1):
        note = engine.create(title, content, tags)
        if note is None:
            print(f"  [{i}/{len(SAMPLE_NOTES)}] skipped (blank)")
            continue
        if pinned:
            engine.toggle_pin(note.id)
        print(f"  [{i}/{len(SAMPLE_NOTES)}] {note.display_title} {tags}{' (pinned)' if pinned else ''}")

    print("  " + "=" * 58)
    print(f"  Done! Store now holds {engine.store.count} notes.")
    print("    - Streamlit board: streamlit run ui/app.py")
    print()


if __name__ == "__main__":
    main()
