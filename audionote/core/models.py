"""
Pydantic v2 models used across the recorder, transcription client and API layer.
"""

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """GET /health response."""

    status: str = "ok"
    version: str = "0.1.0"
    timestamp: datetime


class VendorStatus(BaseModel):
    """GET /api/v1/vendor/health response."""

    connected: bool
    configured: bool
    endpoint: str | None = None
    version: str | None = None
    error: str | None = None


# ---------------------------------------------------------------------------
# Audio
# ---------------------------------------------------------------------------

# Media-type fragment -> file extension for finished recordings
_RECORDING_EXTENSIONS = {
    "mp4": "mp4",
    "webm": "webm",
    "wav": "wav",
    "ogg": "ogg",
}


class RecorderState(StrEnum):
    """Lifecycle states of a recording session."""

    idle = "idle"
    recording = "recording"
    paused = "paused"
    stopped = "stopped"


class AudioBlob(BaseModel):
    """A finished recording: concatenated chunks tagged with their encoding."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    media_type: str

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        """File extension derived from the media type ("audio" when unknown)."""
        for fragment, ext in _RECORDING_EXTENSIONS.items():
            if fragment in self.media_type:
                return ext
        return "audio"


class AudioPayload(BaseModel):
    """Binary audio content submitted for transcription."""

    data: bytes
    filename: str
    media_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        """Lower-cased filename extension, or "" when the name has none."""
        if "." not in self.filename:
            return ""
        return self.filename.rsplit(".", 1)[-1].lower()

    @property
    def subtype(self) -> str:
        """Lower-cased media-type subtype without parameters ("audio/webm;codecs=opus" -> "webm")."""
        _, _, subtype = self.media_type.partition("/")
        return subtype.split(";", 1)[0].strip().lower()


# ---------------------------------------------------------------------------
# Transcription
# ---------------------------------------------------------------------------


class TranscriptionWord(BaseModel):
    """Word-level timing returned by the vendor in verbose mode."""

    word: str
    start: float
    end: float
    confidence: float = 0.0


class TranscriptionResult(BaseModel):
    """Normalized transcription, independent of the vendor response shape."""

    transcription: str = ""
    confidence: float = Field(default=0.85, ge=0.0, le=1.0)
    language: str = "unknown"
    duration: float = Field(default=0.0, ge=0.0)
    words: list[TranscriptionWord] = Field(default_factory=list)


class TranscribeResponse(BaseModel):
    """POST /api/v1/transcribe success response."""

    model_config = ConfigDict(populate_by_name=True)

    transcription: str
    file_name: str = Field(alias="fileName")
    confidence: float
    language: str
    duration: float
    word_count: int = Field(alias="wordCount")
    message: str = "Transcription completed successfully"


# ---------------------------------------------------------------------------
# Error
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Standard error envelope returned by the API."""

    error: str
    details: str | None = None
    code: str
    timestamp: datetime
