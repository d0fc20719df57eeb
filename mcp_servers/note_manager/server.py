"""
Note Manager MCP Server

Exposes the notes engine (create, edit, delete, pin, search, theme) as
Model Context Protocol tools.  Runs with SSE transport on the configured
host and port (8001 by default).
"""

import logging
from datetime import UTC, datetime

from mcp.server.fastmcp import FastMCP

from notes_engine.config import settings
from notes_engine.engine import NotesEngine
from notes_engine.exceptions import NoteNotFoundError
from notes_engine.models import Note
from notes_engine.view import project

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger("note_manager")

# ---------------------------------------------------------------------------
# MCP server + engine
# ---------------------------------------------------------------------------
mcp = FastMCP("note-manager", host=settings.mcp_host, port=settings.mcp_port)
engine = NotesEngine.from_settings(settings)


def _dump(note: Note) -> dict:
    return note.model_dump(mode="json", by_alias=True)


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@mcp.tool()
def save_note(title: str, content: str, tags: list[str] | None = None) -> dict:
    """Save a new note with a title, content, and optional tags.

    Use this tool when the user wants to create, store, or remember a piece
    of information for later retrieval. Either title or content may be
    empty, but not both.

    Args:
        title: Short descriptive title for the note.
        content: The full body / text of the note.
        tags: Optional list of tags for categorisation.

    Returns:
        Dictionary with the generated note_id and a confirmation message.
    """
    note = engine.create(title, content, tags or [])
    if note is None:
        return {
            "note_id": None,
            "message": "Nothing saved: title and content are both empty.",
        }
    logger.info("Tool save_note invoked — id=%s", note.id)
    return {
        "note_id": note.id,
        "message": f"Note '{note.display_title}' saved successfully.",
    }


@mcp.tool()
def update_note(
    note_id: str, title: str, content: str, tags: list[str] | None = None
) -> dict:
    """Replace the title, content, and tags of an existing note.

    Args:
        note_id: Id returned by save_note or get_notes.
        title: New title.
        content: New content.
        tags: New tag list (replaces the old one).

    Returns:
        Dictionary with the updated note, or an error.
    """
    try:
        note = engine.update(note_id, title, content, tags or [])
    except NoteNotFoundError as e:
        logger.warning("Tool update_note — %s", e)
        return {"note_id": note_id, "error": str(e), "status": "error"}
    if note is None:
        return {
            "note_id": note_id,
            "message": "Nothing changed: title and content are both empty.",
        }
    logger.info("Tool update_note invoked — id=%s", note.id)
    return {"note_id": note.id, "note": _dump(note), "status": "success"}


@mcp.tool()
def delete_note(note_id: str) -> dict:
    """Delete a note. Deleting an unknown id is not an error.

    Args:
        note_id: Id of the note to delete.

    Returns:
        Dictionary with the id and the remaining note count.
    """
    engine.delete(note_id)
    logger.info("Tool delete_note invoked — id=%s", note_id)
    return {"note_id": note_id, "status": "success", "total_notes": engine.store.count}


@mcp.tool()
def toggle_pin(note_id: str) -> dict:
    """Pin or unpin a note. Pinned notes are listed before all others.

    Args:
        note_id: Id of the note to pin or unpin.

    Returns:
        Dictionary with the new pinned state, or an error if the id is unknown.
    """
    note = engine.toggle_pin(note_id)
    if note is None:
        return {"note_id": note_id, "error": f"No note with id {note_id!r}", "status": "error"}
    logger.info("Tool toggle_pin invoked — id=%s pinned=%s", note_id, note.is_pinned)
    return {"note_id": note_id, "is_pinned": note.is_pinned, "status": "success"}


@mcp.tool()
def get_notes(query: str = "", tag: str | None = None) -> dict:
    """Retrieve stored notes in display order, optionally filtered.

    Pinned notes come first, then newest first.

    Args:
        query: Optional text to match in titles and content (case-insensitive).
        tag: Optional exact tag to filter by.

    Returns:
        Dictionary with a list of matching notes and their count.
    """
    notes = project(engine.notes, query, tag=tag)
    logger.info(
        "Tool get_notes invoked — query='%s', tag=%s, found=%d", query, tag, len(notes)
    )
    return {
        "count": len(notes),
        "notes": [_dump(n) for n in notes],
    }


@mcp.tool()
def search_notes(query: str) -> dict:
    """Search notes by keyword (substring match on title and content).

    Use this tool when the user wants to find notes related to a specific
    topic or keyword.

    Args:
        query: The search string to match against note titles and content.

    Returns:
        Dictionary with matching notes and their count.
    """
    results = project(engine.notes, query)
    logger.info("Tool search_notes invoked — query='%s', found=%d", query, len(results))
    return {
        "count": len(results),
        "notes": [_dump(n) for n in results],
    }


@mcp.tool()
def set_theme(dark: bool) -> dict:
    """Store the display theme preference.

    Args:
        dark: True for dark mode, False for light mode.

    Returns:
        Dictionary with the stored theme.
    """
    engine.set_theme_preference(dark)
    return {"theme": "dark" if engine.dark_mode else "light"}


@mcp.tool()
def health_check() -> dict:
    """Check whether the Note Manager server is healthy.

    Use this tool to verify the server is running and responsive.

    Returns:
        Dictionary with server status, note count, and timestamp.
    """
    logger.info("Tool health_check invoked")
    return {
        "status": "healthy",
        "server": "note-manager",
        "total_notes": engine.store.count,
        "timestamp": datetime.now(UTC).isoformat(),
    }


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logger.info("Starting Note Manager MCP server on port %d ...", settings.mcp_port)
    mcp.run(transport="sse")
