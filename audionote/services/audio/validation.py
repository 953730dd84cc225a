"""Upload checks applied before any audio leaves the server."""

import logging

from audionote.core.config import Settings, get_settings
from audionote.core.exceptions import InvalidAudioError
from audionote.core.models import AudioPayload

logger = logging.getLogger(__name__)


def check_upload_size(size: int, settings: Settings | None = None) -> None:
    """Raise ``InvalidAudioError`` when ``size`` bytes exceed the upload limit."""
    settings = settings or get_settings()
    max_bytes = settings.max_file_size_bytes
    if size > max_bytes:
        raise InvalidAudioError(f"File size must be less than {round(max_bytes / 1024 / 1024)}MB")


def validate_audio_payload(payload: AudioPayload, settings: Settings | None = None) -> None:
    """Reject empty, oversized or non-audio uploads.

    A payload passes the format check when either its filename extension
    or its media-type subtype is in ``settings.supported_format_list``.

    Args:
        payload: The uploaded audio.
        settings: Optional Settings instance (defaults to get_settings()).

    Raises:
        InvalidAudioError: With a user-facing message describing the problem.
    """
    settings = settings or get_settings()

    if payload.size == 0:
        raise InvalidAudioError("Audio file is empty")

    check_upload_size(payload.size, settings)

    allowed = settings.supported_format_list
    if payload.extension not in allowed and payload.subtype not in allowed:
        logger.info(
            "Rejected upload %s (extension=%r, media_type=%r)",
            payload.filename,
            payload.extension,
            payload.media_type,
        )
        raise InvalidAudioError(
            f"Invalid file type. Please upload one of: {', '.join(allowed).upper()}"
        )
