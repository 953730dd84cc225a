"""Integration test fixtures for AudioNote.

Provides an async HTTP client against a fresh application whose STT
provider is replaced by the shared ``mock_stt`` fixture.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from audionote.api.app import create_app
from audionote.api.routes.transcribe import get_stt


@pytest.fixture
def app(mock_stt):
    """Create a fresh FastAPI application with the STT dependency overridden."""
    application = create_app()
    application.dependency_overrides[get_stt] = lambda: mock_stt
    return application


@pytest.fixture
async def async_client(app):
    """AsyncClient talking to the app in-process."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
def wav_upload():
    """Multipart ``files`` mapping with a small WAV clip."""
    return {"audio": ("note.wav", b"RIFF\x00\x00\x00\x00WAVEfmt ", "audio/wav")}
