"""Alle AI speech-to-text client.

Sends audio to ``POST {endpoint}/audio/stt`` as multipart form data and
normalizes the vendor's JSON answer. Failures are mapped to typed
``TranscriptionError`` subclasses and surfaced once; nothing is retried.
"""

import json
import logging

import httpx

from audionote.core.config import Settings, get_settings
from audionote.core.exceptions import (
    ConfigurationError,
    InsufficientCreditsError,
    PayloadTooLargeError,
    UnsupportedMediaTypeError,
    VendorAuthError,
    VendorError,
    VendorTimeoutError,
)
from audionote.core.models import AudioPayload, TranscriptionResult
from audionote.services.transcription.base import BaseSTT
from audionote.services.transcription.normalizer import normalize_response

logger = logging.getLogger(__name__)

USER_AGENT = "AudioNote/0.1.0"
_CONNECTION_TIMEOUT = 5.0

# Vendor statuses with a dedicated error type
_STATUS_ERRORS = {
    401: VendorAuthError,
    413: PayloadTooLargeError,
    415: UnsupportedMediaTypeError,
}


def _error_message(response: httpx.Response) -> str:
    """Vendor error text: the JSON message when present, else the raw body."""
    text = response.text
    try:
        body = json.loads(text)
    except ValueError:
        return text or f"API request failed: {response.status_code} {response.reason_phrase}"
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
            if isinstance(value, dict) and isinstance(value.get("message"), str):
                return value["message"]
    return text


class AlleAISTT(BaseSTT):
    """Speech-to-text provider backed by the Alle AI HTTP API.

    Args:
        api_key: Vendor API key (defaults to ``settings.alle_ai_api_key``).
        endpoint: Vendor base URL (defaults to ``settings.alle_ai_endpoint``).
        model: Target model identifier, e.g. "whisper-1".
        language: Language hint; "auto" or empty lets the vendor detect it.
        timeout: Request timeout in seconds.
        settings: Optional Settings instance (defaults to get_settings()).
        transport: Optional httpx transport, used by tests.
    """

    def __init__(
        self,
        api_key: str | None = None,
        endpoint: str | None = None,
        model: str | None = None,
        language: str | None = None,
        timeout: float | None = None,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._api_key = self._settings.alle_ai_api_key if api_key is None else api_key
        self._endpoint = (
            self._settings.alle_ai_endpoint if endpoint is None else endpoint
        ).rstrip("/")
        self._model = model or self._settings.alle_ai_model
        self._language = self._settings.alle_ai_language if language is None else language
        self._timeout = timeout or self._settings.alle_ai_timeout
        self._response_format = self._settings.alle_ai_response_format
        self._transport = transport

    @property
    def model(self) -> str:
        return self._model

    def _check_configured(self) -> None:
        if not self._api_key:
            raise ConfigurationError(details="ALLE_AI_API_KEY environment variable is not set")
        if not self._endpoint:
            raise ConfigurationError(details="ALLE_AI_ENDPOINT environment variable is not set")

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._endpoint,
            headers={"X-API-Key": self._api_key, "User-Agent": USER_AGENT},
            timeout=timeout,
            transport=self._transport,
        )

    def build_form(self, payload: AudioPayload, language: str | None = None) -> tuple[dict, dict]:
        """Build the multipart ``(files, data)`` pair for ``httpx``.

        The language field is only sent when a specific language is requested.
        """
        files = {"audio_file": (payload.filename, payload.data, payload.media_type)}
        data: dict = {
            "models[]": [self._model],
            "response_format": self._response_format,
        }
        language = self._language if language is None else language
        if language and language != "auto":
            data["language"] = language
        return files, data

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return
        message = _error_message(response)
        logger.error("Alle AI API error %d: %s", response.status_code, message)

        error_cls = _STATUS_ERRORS.get(response.status_code)
        if error_cls is not None:
            raise error_cls()
        if response.status_code == 402:
            raise InsufficientCreditsError(details=message)
        raise VendorError(details=f"Alle AI API error: {message}", status=response.status_code)

    async def transcribe(self, payload: AudioPayload, **kwargs) -> TranscriptionResult:
        """Transcribe ``payload`` with the configured model.

        Args:
            payload: Audio bytes with filename and media type.
            **kwargs: Optional key: language.

        Returns:
            TranscriptionResult with text, confidence, language and duration.
        """
        self._check_configured()
        files, data = self.build_form(payload, language=kwargs.get("language"))
        logger.info("Sending audio to Alle AI: %s (%d bytes)", payload.filename, payload.size)

        try:
            async with self._client(self._timeout) as client:
                response = await client.post("/audio/stt", files=files, data=data)
        except httpx.TimeoutException as exc:
            raise VendorTimeoutError(self._timeout) from exc
        except httpx.HTTPError as exc:
            raise VendorError(details=f"Could not reach Alle AI: {exc}") from exc

        logger.info("Alle AI response status: %d", response.status_code)
        self._raise_for_status(response)

        try:
            body = response.json()
        except ValueError as exc:
            raise VendorError(details="Alle AI returned a non-JSON response") from exc
        if not isinstance(body, dict):
            raise VendorError(details="Alle AI returned an unexpected response body")

        result = normalize_response(body, self._model)
        logger.info(
            "Transcription result: %d chars, language=%s, duration=%.1fs",
            len(result.transcription),
            result.language,
            result.duration,
        )
        return result

    async def check_connection(self) -> bool:
        """Probe ``GET {endpoint}/models``.

        Any answer other than 401 counts as connected (404/403 still prove the
        endpoint is reachable and the key was accepted); transport errors do not.
        """
        if not self._api_key or not self._endpoint:
            return False
        try:
            async with self._client(_CONNECTION_TIMEOUT) as client:
                response = await client.get("/models")
        except httpx.HTTPError as exc:
            logger.warning("Alle AI connection test failed: %s", exc)
            return False
        logger.info("Alle AI connection test: %d", response.status_code)
        return response.status_code != 401
