"""
Recorder component: capture audio in the browser and send it for transcription.

Capture itself is done by ``st.audio_input``; this component applies the
minimum-length guard before upload.
"""

import io
import logging
import wave

import streamlit as st

from audionote.core.config import get_settings
from audionote.core.utils import recording_filename
from audionote.ui.api_client import APIError, get_api_client

logger = logging.getLogger(__name__)


def _wav_duration(audio_bytes: bytes) -> float:
    """Length of a WAV recording in seconds (0.0 when unreadable)."""
    try:
        with wave.open(io.BytesIO(audio_bytes), "rb") as wf:
            rate = wf.getframerate()
            return wf.getnframes() / rate if rate else 0.0
    except (wave.Error, EOFError):
        return 0.0


def render_recorder(disabled: bool = False) -> None:
    """Render the microphone widget and upload button."""
    settings = get_settings()
    audio = st.audio_input("Record audio", disabled=disabled)
    if audio is None:
        return

    audio_bytes = audio.getvalue()
    duration = _wav_duration(audio_bytes)
    st.caption(f"Recorded {duration:.1f}s")

    if not st.button("Transcribe recording", type="primary", disabled=disabled):
        return

    if duration < settings.min_recording_seconds:
        st.error(
            f"Recording too short. Please record for at least "
            f"{settings.min_recording_seconds} second(s)."
        )
        return

    filename = recording_filename("wav")
    logger.info("Uploading recording: %s (%d bytes, %.1fs)", filename, len(audio_bytes), duration)
    client = get_api_client(st.session_state.api_base_url)
    with st.spinner("Transcribing recording..."):
        try:
            st.session_state.transcription_result = client.transcribe(
                audio_bytes, filename, "audio/wav"
            )
        except APIError as exc:
            st.session_state.transcription_error = exc.message
            if exc.details:
                st.session_state.transcription_error += f" ({exc.details})"
    st.rerun()
