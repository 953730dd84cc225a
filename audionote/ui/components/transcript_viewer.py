"""
Transcript viewer component.
"""

import streamlit as st

from audionote.core.utils import format_duration


def render_transcript(result: dict) -> None:
    """Render a transcription response with its metadata.

    Args:
        result: ``POST /api/v1/transcribe`` response body.
    """
    text = result.get("transcription", "")
    file_name = result.get("fileName", "transcript")

    with st.container(border=True):
        col1, col2, col3, col4 = st.columns(4)
        col1.metric("Words", result.get("wordCount", 0))
        col2.metric("Confidence", f"{result.get('confidence', 0.0):.0%}")
        col3.metric("Language", result.get("language", "unknown"))
        col4.metric("Duration", format_duration(result.get("duration", 0)))

        st.caption(file_name)
        if text:
            st.code(text, language=None, wrap_lines=True)
            stem = file_name.rsplit(".", 1)[0]
            st.download_button(
                "Download transcript",
                data=text,
                file_name=f"{stem}_transcript.txt",
                mime="text/plain",
            )
        else:
            st.info("No speech was recognized in this audio. Try a longer or clearer recording.")
