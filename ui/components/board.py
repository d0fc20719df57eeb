"""Notes board: toolbar, editor form, delete confirmation and note cards."""

from __future__ import annotations

import streamlit as st

from notes_engine.draft import EditorState
from notes_engine.engine import NotesEngine
from notes_engine.models import Note

_CARD_COLUMNS = 3
_TIME_FORMAT = "%Y-%m-%d %H:%M"


def _engine() -> NotesEngine:
    return st.session_state.engine


def _format_time(note_time) -> str:
    return note_time.astimezone().strftime(_TIME_FORMAT)


# ---------------------------------------------------------------------------
# Callbacks (run before the next rerun, so they may touch widget state)
# ---------------------------------------------------------------------------


def _add_draft_tag() -> None:
    _engine().add_tag(st.session_state.get("new_tag", ""))
    st.session_state.new_tag = ""


def _remove_draft_tag(tag: str) -> None:
    _engine().remove_tag(tag)


def _begin_edit(note_id: str) -> None:
    _engine().begin_edit(note_id)


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


def _render_toolbar(engine: NotesEngine) -> None:
    """New-note button and search box."""
    cols = st.columns([1, 4])
    with cols[0]:
        st.button(
            "+ New Note",
            type="primary",
            width="stretch",
            on_click=engine.begin_create,
        )
    with cols[1]:
        query = st.text_input(
            "Search notes",
            value=engine.search_query,
            placeholder="Search notes...",
            label_visibility="collapsed",
        )
        engine.set_search_query(query)


def _render_editor(engine: NotesEngine) -> None:
    """Create / edit form, shown only while a draft is open."""
    if engine.editor_state is not EditorState.EDITING:
        return

    draft = engine.draft
    with st.container(border=True):
        st.subheader("Edit Note" if draft.target_id else "Create New Note")

        st.caption("Tags")
        if draft.tags:
            tag_cols = st.columns(len(draft.tags))
            for col, tag in zip(tag_cols, draft.tags):
                with col:
                    st.button(
                        f"✕ {tag}",
                        key=f"remove_tag_{tag}",
                        on_click=_remove_draft_tag,
                        args=(tag,),
                    )
        add_cols = st.columns([3, 1])
        with add_cols[0]:
            st.text_input(
                "Add tag",
                key="new_tag",
                placeholder="e.g., work, personal",
                on_change=_add_draft_tag,
            )
        with add_cols[1]:
            st.button("Add", on_click=_add_draft_tag)

        with st.form("note_editor", clear_on_submit=True):
            title = st.text_input("Title", value=draft.title, placeholder="Note title")
            content = st.text_area(
                "Content", value=draft.content, height=160, placeholder="Note content"
            )
            action_cols = st.columns(2)
            with action_cols[0]:
                cancelled = st.form_submit_button("Cancel", width="stretch")
            with action_cols[1]:
                saved = st.form_submit_button(
                    "Update" if draft.target_id else "Save",
                    type="primary",
                    width="stretch",
                )

    if cancelled:
        engine.cancel()
        st.rerun()
    if saved:
        engine.set_draft_title(title)
        engine.set_draft_content(content)
        engine.commit()
        st.rerun()


def _render_delete_confirm(engine: NotesEngine) -> None:
    if engine.pending_delete is None:
        return
    with st.container(border=True):
        st.markdown("**Delete Note?**")
        st.write(
            "Are you sure you want to delete this note? This action cannot be undone."
        )
        cols = st.columns(2)
        with cols[0]:
            st.button("Cancel", key="dismiss_delete", on_click=engine.dismiss_delete)
        with cols[1]:
            st.button(
                "Delete", key="confirm_delete", type="primary", on_click=engine.confirm_delete
            )


def _render_card(engine: NotesEngine, note: Note) -> None:
    with st.container(border=True):
        pin = "📌 " if note.is_pinned else ""
        st.markdown(f"#### {pin}{note.display_title}")
        st.caption(f"Created: {_format_time(note.created_at)}")
        if note.was_edited:
            st.caption(f"Updated: {_format_time(note.updated_at)}")
        if note.tags:
            st.markdown(" ".join(f"`{tag}`" for tag in note.tags))
        st.write(note.content)

        cols = st.columns(3)
        with cols[0]:
            st.button(
                "Unpin" if note.is_pinned else "Pin",
                key=f"pin_{note.id}",
                on_click=engine.toggle_pin,
                args=(note.id,),
            )
        with cols[1]:
            st.button("Edit", key=f"edit_{note.id}", on_click=_begin_edit, args=(note.id,))
        with cols[2]:
            st.button(
                "Delete",
                key=f"delete_{note.id}",
                on_click=engine.request_delete,
                args=(note.id,),
            )


def render() -> None:
    """Render the full notes board for the session's engine."""
    engine = _engine()
    _render_toolbar(engine)
    _render_editor(engine)
    _render_delete_confirm(engine)

    notes = engine.current_view()
    if not notes:
        st.info(engine.empty_state_message())
        return

    cols = st.columns(_CARD_COLUMNS)
    for i, note in enumerate(notes):
        with cols[i % _CARD_COLUMNS]:
            _render_card(engine, note)
