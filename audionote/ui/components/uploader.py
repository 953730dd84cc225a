"""
Uploader component: pick an audio file and send it for transcription.
"""

import streamlit as st

from audionote.core.config import get_settings
from audionote.core.exceptions import InvalidAudioError
from audionote.core.models import AudioPayload
from audionote.services.audio.validation import validate_audio_payload
from audionote.ui.api_client import APIError, get_api_client


def _submit(payload: AudioPayload) -> None:
    client = get_api_client(st.session_state.api_base_url)
    with st.spinner(f"Transcribing {payload.filename}..."):
        try:
            st.session_state.transcription_result = client.transcribe(
                payload.data, payload.filename, payload.media_type
            )
        except APIError as exc:
            st.session_state.transcription_error = exc.message
            if exc.details:
                st.session_state.transcription_error += f" ({exc.details})"


def render_uploader(disabled: bool = False) -> None:
    """Render the file picker and submit button.

    Files are checked locally with the same rules the backend applies,
    so obviously invalid uploads never leave the browser.
    """
    settings = get_settings()
    formats = settings.supported_format_list

    uploaded = st.file_uploader(
        f"Audio file ({', '.join(formats).upper()}, max {settings.max_file_size_mb}MB)",
        type=formats,
        disabled=disabled,
    )
    if uploaded is None:
        return

    payload = AudioPayload(
        data=uploaded.getvalue(),
        filename=uploaded.name,
        media_type=uploaded.type or "application/octet-stream",
    )
    try:
        validate_audio_payload(payload, settings)
    except InvalidAudioError as exc:
        st.error(exc.detail)
        return

    st.audio(payload.data, format=payload.media_type)
    if st.button("Transcribe", type="primary", disabled=disabled, key="upload_submit"):
        _submit(payload)
        st.rerun()
