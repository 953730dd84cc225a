"""Shared pytest fixtures for AudioNote test suite.

Provides a scriptable in-memory capture device, isolated settings, and a
mock STT provider used across unit and integration tests.
"""

from unittest.mock import AsyncMock

import pytest

from audionote.core.config import Settings, get_settings
from audionote.core.exceptions import CaptureError
from audionote.core.models import TranscriptionResult
from audionote.services.audio.capture import CaptureConstraints, CaptureDevice

# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Give every test a fresh, .env-free settings cache with vendor credentials."""
    monkeypatch.setenv("ALLE_AI_API_KEY", "test-key")
    monkeypatch.setenv("ALLE_AI_ENDPOINT", "https://vendor.test")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    """Settings instance that ignores any local .env file."""
    return Settings(_env_file=None)


# ---------------------------------------------------------------------------
# Capture device
# ---------------------------------------------------------------------------


class FakeCaptureDevice(CaptureDevice):
    """In-memory capture device driven by the test.

    ``emit()`` delivers a chunk the way a real device callback would.
    ``flush_data`` is delivered during ``stop()``.
    """

    def __init__(self, supported=("audio/webm",), open_error=None, flush_data=b""):
        self.supported = set(supported)
        self.open_error = open_error
        self.flush_data = flush_data
        self.constraints = None
        self.mime_type = None
        self.on_chunk = None
        self.paused = False
        self.opened = False
        self.started = False
        self.stopped = False
        self.release_count = 0

    async def open(self, constraints: CaptureConstraints) -> None:
        self.constraints = constraints
        if self.open_error is not None:
            raise self.open_error
        self.opened = True

    def is_supported(self, mime_type: str) -> bool:
        return mime_type in self.supported

    def start(self, mime_type, on_chunk) -> None:
        self.mime_type = mime_type
        self.on_chunk = on_chunk
        self.started = True

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    async def stop(self) -> None:
        self.stopped = True
        if self.flush_data:
            self.on_chunk(self.flush_data)

    def release(self) -> None:
        self.release_count += 1
        self.opened = False

    def emit(self, data: bytes) -> None:
        self.on_chunk(data)


@pytest.fixture
def make_device():
    """Factory for capture devices with custom encodings, failures or flush data."""
    return FakeCaptureDevice


@pytest.fixture
def fake_device():
    """A capture device that supports only "audio/webm"."""
    return FakeCaptureDevice()


@pytest.fixture
def denied_device():
    """A capture device whose acquisition fails with a permission error."""
    return FakeCaptureDevice(open_error=CaptureError("Microphone access denied"))


# ---------------------------------------------------------------------------
# STT Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_stt():
    """Create a mock STT provider for unit testing.

    Returns:
        AsyncMock: A mock implementing the BaseSTT interface with a
        default transcribe response.
    """
    from audionote.services.transcription.base import BaseSTT

    stt = AsyncMock(spec=BaseSTT)
    stt.transcribe.return_value = TranscriptionResult(
        transcription="This is a test transcription.",
        confidence=0.95,
        language="en",
        duration=2.5,
    )
    stt.check_connection.return_value = True
    return stt
