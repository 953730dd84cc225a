"""
Synchronous HTTP client for the AudioNote backend API.

Uses ``httpx.Client`` (sync) because Streamlit scripts and the recorder
CLI run synchronously.
"""

import logging

import httpx
import streamlit as st

logger = logging.getLogger(__name__)

# Transcription waits on the vendor, whose own timeout is 30s by default
_TRANSCRIBE_TIMEOUT = 90.0


class APIError(Exception):
    """User-friendly API error with categorized message.

    Categories: "connection", "timeout", "http", "network", "unknown".
    Used by the UI to display appropriate error messages.
    """

    def __init__(
        self,
        message: str,
        category: str = "unknown",
        details: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.message = message
        self.category = category
        self.details = details
        self.status_code = status_code
        super().__init__(message)


class APIClient:
    """Thin synchronous wrapper around httpx for calling the FastAPI backend.

    All methods return parsed JSON dicts or raise ``APIError`` with
    user-friendly messages for display in the UI.
    """

    def __init__(self, base_url: str = "http://localhost:8000") -> None:
        """Initialize the HTTP client.

        Args:
            base_url: Base URL of the AudioNote FastAPI backend.
        """
        self._base_url = base_url.rstrip("/")
        self._client = httpx.Client(base_url=self._base_url, timeout=30.0)

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Execute an HTTP request with user-friendly error handling.

        Args:
            method: HTTP method name ("get", "post").
            path: API endpoint path (e.g. "/api/v1/transcribe").
            **kwargs: Passed through to httpx (files, params, timeout, etc.).

        Returns:
            The httpx Response object with a successful status code.

        Raises:
            APIError: On connection, timeout, HTTP status, or network errors.
        """
        try:
            resp = getattr(self._client, method)(path, **kwargs)
            resp.raise_for_status()
            return resp
        except httpx.ConnectError:
            raise APIError(
                "Backend server is not running. "
                "Start it with: `uvicorn audionote.api.app:app --reload --port 8000`",
                category="connection",
            ) from None
        except httpx.TimeoutException:
            raise APIError(
                "Request timed out. Try a shorter or smaller audio file.",
                category="timeout",
            ) from None
        except httpx.HTTPStatusError as exc:
            try:
                body = exc.response.json()
                message = body.get("error", exc.response.text)
                details = body.get("details")
            except Exception:
                message = exc.response.text or str(exc)
                details = None
            raise APIError(
                str(message),
                category="http",
                details=details,
                status_code=exc.response.status_code,
            ) from None
        except httpx.HTTPError as exc:
            raise APIError(f"Network error: {exc}", category="network") from None

    # -- health --

    def health_check(self) -> dict:
        return self._request("get", "/health").json()

    def check_connection(self) -> tuple[bool, str]:
        """Check if the backend is reachable. Returns (ok, message)."""
        try:
            self.health_check()
            return True, "Connected"
        except APIError as exc:
            return False, exc.message

    def vendor_health(self) -> dict:
        return self._request("get", "/api/v1/vendor/health").json()

    # -- transcription --

    def transcribe(self, data: bytes, filename: str, media_type: str) -> dict:
        """Upload audio bytes and return the transcription response body."""
        return self._request(
            "post",
            "/api/v1/transcribe",
            files={"audio": (filename, data, media_type)},
            timeout=_TRANSCRIBE_TIMEOUT,
        ).json()


@st.cache_resource
def get_api_client(base_url: str = "http://localhost:8000") -> APIClient:
    """Return a cached APIClient, keyed by base_url.

    Uses Streamlit's ``cache_resource`` to persist the client across reruns.
    """
    return APIClient(base_url=base_url)
