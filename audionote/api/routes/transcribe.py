"""
Transcription REST endpoint.

Validates the uploaded audio and forwards it to the configured STT
provider. Errors are raised as ``AudioNoteError`` subclasses and turned
into JSON by the global error handlers.
"""

import logging

from fastapi import APIRouter, Depends, File, UploadFile

from audionote.core.config import get_settings
from audionote.core.exceptions import ConfigurationError, InvalidAudioError
from audionote.core.models import AudioPayload, TranscribeResponse
from audionote.core.utils import count_words
from audionote.services.audio.validation import check_upload_size, validate_audio_payload
from audionote.services.transcription import BaseSTT, create_stt

logger = logging.getLogger(__name__)

router = APIRouter(tags=["transcription"])


def get_stt() -> BaseSTT:
    """Dependency returning the configured STT provider."""
    settings = get_settings()
    return create_stt(provider=settings.stt_provider, settings=settings)


@router.post("/transcribe", response_model=TranscribeResponse)
async def transcribe(
    audio: UploadFile | None = File(None),
    stt: BaseSTT = Depends(get_stt),
):
    """Transcribe one uploaded audio file (multipart field ``audio``)."""
    settings = get_settings()
    if not settings.is_vendor_configured:
        raise ConfigurationError(
            detail="Alle AI API is not configured. Please set ALLE_AI_API_KEY "
            "and ALLE_AI_ENDPOINT environment variables."
        )

    if audio is None or not audio.filename:
        raise InvalidAudioError("No audio file provided")

    # Reject on the multipart-reported size before buffering the body
    if audio.size is not None:
        check_upload_size(audio.size, settings)

    payload = AudioPayload(
        data=await audio.read(),
        filename=audio.filename,
        media_type=audio.content_type or "application/octet-stream",
    )
    validate_audio_payload(payload, settings)

    logger.info(
        "Processing audio file: %s (%d bytes, %s)",
        payload.filename,
        payload.size,
        payload.media_type,
    )
    result = await stt.transcribe(payload)
    logger.info("Transcription completed for: %s", payload.filename)

    return TranscribeResponse(
        transcription=result.transcription,
        file_name=payload.filename,
        confidence=result.confidence,
        language=result.language,
        duration=result.duration,
        word_count=count_words(result.transcription),
    )
