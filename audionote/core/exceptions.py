"""
AudioNote exception hierarchy.

All application-specific exceptions inherit from AudioNoteError,
enabling centralized error handling in the API middleware layer.
Each error carries a machine-checkable ``code`` and the HTTP status
the API layer reports it with.
"""

from datetime import UTC, datetime


class AudioNoteError(Exception):
    """Base exception for all AudioNote errors."""

    def __init__(
        self,
        detail: str = "An unexpected error occurred",
        code: str = "AUDIONOTE_ERROR",
        status_code: int = 500,
        details: str | None = None,
    ) -> None:
        self.detail = detail
        self.code = code
        self.status_code = status_code
        self.details = details
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(detail)


class ConfigurationError(AudioNoteError):
    """Raised when required settings (vendor credentials, endpoint) are missing."""

    def __init__(self, detail: str = "API configuration error", details: str | None = None) -> None:
        super().__init__(
            detail=detail,
            code="CONFIGURATION_ERROR",
            status_code=500,
            details=details,
        )


class InvalidAudioError(AudioNoteError):
    """Raised when an uploaded file fails type, size or presence checks."""

    def __init__(self, detail: str = "Invalid audio file") -> None:
        super().__init__(detail=detail, code="INVALID_AUDIO", status_code=400)


class RecordingTooShortError(AudioNoteError):
    """Raised when a recording is uploaded before reaching the minimum length."""

    def __init__(self, min_seconds: int = 1) -> None:
        unit = "second" if min_seconds == 1 else "seconds"
        super().__init__(
            detail=f"Recording too short. Please record for at least {min_seconds} {unit}.",
            code="RECORDING_TOO_SHORT",
            status_code=400,
        )


class InvalidTransitionError(AudioNoteError):
    """Raised when a recorder action is not allowed in the current state."""

    def __init__(self, action: str, state: str) -> None:
        super().__init__(
            detail=f"Cannot {action} while recorder is {state}",
            code="INVALID_TRANSITION",
            status_code=409,
        )


class CaptureError(AudioNoteError):
    """Raised when the microphone cannot be acquired or started."""

    def __init__(self, detail: str = "Failed to start recording. Please try again.") -> None:
        super().__init__(detail=detail, code="CAPTURE_ERROR", status_code=500)


# ---------------------------------------------------------------------------
# Transcription client failures
# ---------------------------------------------------------------------------


class TranscriptionError(AudioNoteError):
    """Base class for failures raised by a speech-to-text client."""


class VendorAuthError(TranscriptionError):
    """Raised when the vendor rejects the API key (HTTP 401)."""

    def __init__(self) -> None:
        super().__init__(
            detail="API configuration error",
            code="VENDOR_AUTH_FAILED",
            status_code=500,
            details="Invalid API key. Please check your ALLE_AI_API_KEY.",
        )


class InsufficientCreditsError(TranscriptionError):
    """Raised when the vendor account has run out of credits (HTTP 402)."""

    def __init__(self, details: str | None = None) -> None:
        super().__init__(
            detail="Insufficient credits on the AI service account.",
            code="INSUFFICIENT_CREDITS",
            status_code=402,
            details=details,
        )


class PayloadTooLargeError(TranscriptionError):
    """Raised when the vendor refuses the file size (HTTP 413)."""

    def __init__(self) -> None:
        super().__init__(
            detail="File too large. Please try with a smaller audio file.",
            code="PAYLOAD_TOO_LARGE",
            status_code=400,
        )


class UnsupportedMediaTypeError(TranscriptionError):
    """Raised when the vendor refuses the audio format (HTTP 415)."""

    def __init__(self) -> None:
        super().__init__(
            detail="Unsupported audio format. Please use MP3, WAV, M4A, MP4, or WebM.",
            code="UNSUPPORTED_MEDIA_TYPE",
            status_code=400,
        )


class VendorError(TranscriptionError):
    """Raised for any other non-success vendor response or transport failure."""

    def __init__(self, details: str, status: int | None = None) -> None:
        self.vendor_status = status
        super().__init__(
            detail="AI service error. Please try again.",
            code="VENDOR_ERROR",
            status_code=502,
            details=details,
        )


class VendorTimeoutError(TranscriptionError):
    """Raised when the vendor does not answer within the configured timeout."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(
            detail="Processing timeout. Please try with a shorter audio file.",
            code="VENDOR_TIMEOUT",
            status_code=408,
            details=(
                f"The AI service did not respond within {timeout:g} seconds. "
                "Try reducing the file size or length."
            ),
        )
