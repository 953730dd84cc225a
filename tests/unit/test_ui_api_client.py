"""Unit tests for the Streamlit-side APIClient.

Validates that the client calls the right endpoints, uploads audio as a
multipart ``audio`` field, and turns httpx failures into categorized
``APIError`` instances.
"""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from audionote.ui.api_client import APIClient, APIError


@pytest.fixture
def client():
    """Create an APIClient with a mocked httpx.Client."""
    with patch("audionote.ui.api_client.httpx.Client") as mock_cls:
        mock_http = MagicMock()
        mock_cls.return_value = mock_http
        api = APIClient(base_url="http://test:8000/")
        api._mock_http = mock_http  # expose for assertions
        yield api


def _status_error(status: int, **kwargs) -> httpx.HTTPStatusError:
    request = httpx.Request("POST", "http://test:8000/api/v1/transcribe")
    response = httpx.Response(status, request=request, **kwargs)
    return httpx.HTTPStatusError("error", request=request, response=response)


class TestTranscribe:
    """Verify APIClient.transcribe() request construction and response handling."""

    def test_uploads_audio_field(self, client):
        resp = MagicMock()
        resp.json.return_value = {"transcription": "hi", "wordCount": 1}
        client._mock_http.post.return_value = resp

        result = client.transcribe(b"RIFF", "note.wav", "audio/wav")

        client._mock_http.post.assert_called_once_with(
            "/api/v1/transcribe",
            files={"audio": ("note.wav", b"RIFF", "audio/wav")},
            timeout=90.0,
        )
        resp.raise_for_status.assert_called_once()
        assert result["transcription"] == "hi"

    def test_error_envelope_is_unwrapped(self, client):
        resp = MagicMock()
        resp.raise_for_status.side_effect = _status_error(
            402,
            json={
                "error": "Insufficient credits on the AI service account.",
                "details": "top up",
                "code": "INSUFFICIENT_CREDITS",
            },
        )
        client._mock_http.post.return_value = resp

        with pytest.raises(APIError) as exc_info:
            client.transcribe(b"x", "a.wav", "audio/wav")

        err = exc_info.value
        assert err.category == "http"
        assert err.status_code == 402
        assert err.message == "Insufficient credits on the AI service account."
        assert err.details == "top up"

    def test_non_json_error_body(self, client):
        resp = MagicMock()
        resp.raise_for_status.side_effect = _status_error(502, text="Bad Gateway")
        client._mock_http.post.return_value = resp

        with pytest.raises(APIError) as exc_info:
            client.transcribe(b"x", "a.wav", "audio/wav")
        assert exc_info.value.message == "Bad Gateway"
        assert exc_info.value.details is None


class TestErrorCategories:
    """Verify httpx exceptions map to APIError categories."""

    @pytest.mark.parametrize(
        "exc,category",
        [
            (httpx.ConnectError("refused"), "connection"),
            (httpx.ReadTimeout("slow"), "timeout"),
            (httpx.RemoteProtocolError("broken"), "network"),
        ],
    )
    def test_transport_failures(self, client, exc, category):
        client._mock_http.get.side_effect = exc
        with pytest.raises(APIError) as exc_info:
            client.health_check()
        assert exc_info.value.category == category


class TestHealth:
    def test_check_connection_ok(self, client):
        client._mock_http.get.return_value = MagicMock()
        assert client.check_connection() == (True, "Connected")
        client._mock_http.get.assert_called_once_with("/health")

    def test_check_connection_down(self, client):
        client._mock_http.get.side_effect = httpx.ConnectError("refused")
        ok, message = client.check_connection()
        assert ok is False
        assert "not running" in message

    def test_vendor_health(self, client):
        resp = MagicMock()
        resp.json.return_value = {"connected": True, "configured": True}
        client._mock_http.get.return_value = resp

        assert client.vendor_health()["connected"] is True
        client._mock_http.get.assert_called_once_with("/api/v1/vendor/health")


def test_base_url_trailing_slash_stripped():
    with patch("audionote.ui.api_client.httpx.Client") as mock_cls:
        APIClient(base_url="http://test:8000/")
    mock_cls.assert_called_once_with(base_url="http://test:8000", timeout=30.0)
