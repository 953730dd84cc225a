"""
Abstract base class for Speech-to-Text providers.

All STT implementations must implement this interface, enabling
provider-agnostic transcription in the API layer.
"""

from abc import ABC, abstractmethod

from audionote.core.models import AudioPayload, TranscriptionResult


class BaseSTT(ABC):
    """Interface that every STT provider must implement."""

    @abstractmethod
    async def transcribe(self, payload: AudioPayload, **kwargs) -> TranscriptionResult:
        """Transcribe an uploaded audio file.

        Args:
            payload: Audio bytes with filename and media type.
            **kwargs: Provider-specific options (language, etc.).

        Returns:
            The normalized transcription result.

        Raises:
            TranscriptionError: Any provider-side failure, surfaced once.
        """

    @abstractmethod
    async def check_connection(self) -> bool:
        """Return True if the provider is reachable with the configured credentials."""
