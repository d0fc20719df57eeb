"""Notes App — Streamlit interface.

Run with:
    streamlit run ui/app.py
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Ensure the project root is on sys.path so `ui.*` imports resolve
# regardless of the working directory Streamlit uses.
_project_root = str(Path(__file__).resolve().parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

import streamlit as st  # noqa: E402

st.set_page_config(
    page_title="Notes App",
    page_icon="📝",
    layout="wide",
)

from notes_engine.config import settings  # noqa: E402
from notes_engine.engine import NotesEngine  # noqa: E402
from ui.components import board  # noqa: E402

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)

_DARK_CSS = """
<style>
.stApp { background-color: #121212; color: #e0e0e0; }
</style>
"""

if "engine" not in st.session_state:
    st.session_state.engine = NotesEngine.from_settings(settings)
engine: NotesEngine = st.session_state.engine

# ---------------------------------------------------------------------------
# Header + theme toggle
# ---------------------------------------------------------------------------

header_cols = st.columns([5, 1])
with header_cols[0]:
    st.title("📝 Notes App")
with header_cols[1]:
    dark = st.toggle("Dark mode", value=engine.dark_mode)
    if dark != engine.dark_mode:
        engine.set_theme_preference(dark)

if engine.dark_mode:
    st.markdown(_DARK_CSS, unsafe_allow_html=True)

# Tag filter lives in the sidebar
with st.sidebar:
    st.header("Tags")
    tags = engine.store.all_tags()
    choice = st.radio("Filter by tag", ["All", *tags], index=0)
    engine.set_tag_filter(None if choice == "All" else choice)
    st.caption(f"{engine.store.count} notes")

board.render()
