"""
AudioNote Streamlit UI entry point.

Run with: ``streamlit run audionote/ui/app.py``
"""

# ---------------------------------------------------------------------------
# Ensure project root is on sys.path so ``from audionote.xxx`` imports work.
# Streamlit replaces sys.path[0] with the script directory (audionote/ui/),
# which removes the project root needed for absolute imports.
# ---------------------------------------------------------------------------
import sys  # noqa: E402
from pathlib import Path  # noqa: E402

_project_root = str(Path(__file__).resolve().parent.parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

import streamlit as st  # noqa: E402

from audionote.core.config import get_settings  # noqa: E402
from audionote.ui.api_client import APIError, get_api_client  # noqa: E402
from audionote.ui.components.recorder import render_recorder  # noqa: E402
from audionote.ui.components.transcript_viewer import render_transcript  # noqa: E402
from audionote.ui.components.uploader import render_uploader  # noqa: E402

# ---------------------------------------------------------------------------
# Page config (must be first Streamlit call)
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="AudioNote",
    page_icon="\U0001f399\ufe0f",
    layout="centered",
)

# ---------------------------------------------------------------------------
# Session state defaults
# ---------------------------------------------------------------------------
_DEFAULTS = {
    "api_base_url": get_settings().api_base_url,
    "transcription_result": None,
    "transcription_error": None,
}

for key, value in _DEFAULTS.items():
    if key not in st.session_state:
        st.session_state[key] = value

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
with st.sidebar:
    st.title("\U0001f399\ufe0f AudioNote")
    st.caption("Upload or record audio, get a transcript")
    st.divider()
    st.session_state.api_base_url = st.text_input(
        "Backend API URL",
        value=st.session_state.api_base_url,
        help="URL of the AudioNote FastAPI backend server",
    )

    _client = get_api_client(st.session_state.api_base_url)
    _conn_ok, _conn_msg = _client.check_connection()
    if _conn_ok:
        st.success(f"Backend: {_conn_msg}")
    else:
        st.error(f"Backend: {_conn_msg}")

    _vendor_ok = False
    if _conn_ok:
        try:
            _vendor = _client.vendor_health()
            _vendor_ok = _vendor.get("configured", False) and _vendor.get("connected", False)
            if _vendor_ok:
                st.success("Speech-to-text: Connected")
            else:
                st.error(f"Speech-to-text: {_vendor.get('error') or 'Unavailable'}")
        except APIError as exc:
            st.error(f"Speech-to-text: {exc.message}")

# ---------------------------------------------------------------------------
# Main area
# ---------------------------------------------------------------------------
st.header("Audio Notes")

if not _vendor_ok:
    st.warning("Speech-to-text service is not properly configured. Check the backend environment.")

upload_tab, record_tab = st.tabs(["Upload", "Record"])
with upload_tab:
    render_uploader(disabled=not _vendor_ok)
with record_tab:
    render_recorder(disabled=not _vendor_ok)

if st.session_state.transcription_error:
    st.error(st.session_state.transcription_error)
    st.session_state.transcription_error = None

if st.session_state.transcription_result:
    st.subheader("Transcript")
    render_transcript(st.session_state.transcription_result)
    if st.button("Clear"):
        st.session_state.transcription_result = None
        st.rerun()
