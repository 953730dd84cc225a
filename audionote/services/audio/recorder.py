"""Recording session state machine.

Owns the lifecycle of a single in-progress capture::

    idle --start--> recording --pause--> paused --resume--> recording
    recording|paused --stop--> stopped --delete|upload--> idle

The microphone and the elapsed-time timer are exclusively owned by the
session and are released through ``_release()`` on every path that leaves
``recording``/``paused``, including failures and teardown.
"""

import asyncio
import logging
import os
import tempfile
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

from audionote.core.config import Settings, get_settings
from audionote.core.exceptions import CaptureError, InvalidTransitionError, RecordingTooShortError
from audionote.core.models import AudioBlob, RecorderState
from audionote.core.utils import recording_filename
from audionote.services.audio.capture import CaptureConstraints, CaptureDevice

logger = logging.getLogger(__name__)

Uploader = Callable[[AudioBlob, str], Awaitable[Any]]


class RecordingSession:
    """Start/pause/resume/stop/delete/upload lifecycle for one recording.

    Args:
        device: Capture backend. The session takes exclusive ownership
            while recording.
        mime_types: Encodings in order of preference; the first one the
            device supports is used. Defaults to ``settings.recorder_mime_types``.
        min_seconds: Minimum elapsed time accepted by ``upload``.
        tick_interval: Seconds between elapsed-time increments.
        settings: Optional Settings instance (defaults to get_settings()).
    """

    def __init__(
        self,
        device: CaptureDevice,
        mime_types: list[str] | None = None,
        min_seconds: int | None = None,
        tick_interval: float = 1.0,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._device = device
        self._mime_types = list(mime_types or settings.recorder_mime_types)
        self._min_seconds = settings.min_recording_seconds if min_seconds is None else min_seconds
        self._tick_interval = tick_interval

        self._state = RecorderState.idle
        self._elapsed = 0
        self._chunks: list[bytes] = []
        self._media_type: str | None = None
        self._result_blob: AudioBlob | None = None
        self._preview_path: Path | None = None

        self._timer: asyncio.Task | None = None
        self._device_held = False
        self._flushing = False

    # -- read-only view --

    @property
    def state(self) -> RecorderState:
        return self._state

    @property
    def elapsed_seconds(self) -> int:
        return self._elapsed

    @property
    def chunks(self) -> tuple[bytes, ...]:
        return tuple(self._chunks)

    @property
    def media_type(self) -> str | None:
        """Encoding negotiated at ``start`` (None before the first start)."""
        return self._media_type

    @property
    def result_blob(self) -> AudioBlob | None:
        """The finished recording; only set while ``stopped``."""
        return self._result_blob

    @property
    def preview_path(self) -> Path | None:
        """Playable copy of the finished recording; only set while ``stopped``."""
        return self._preview_path

    # -- transitions --

    async def start(self) -> None:
        """Acquire the microphone and begin recording.

        Raises:
            InvalidTransitionError: The session is not idle.
            CaptureError: The device could not be acquired or started, or
                supports none of the preferred encodings. The session stays idle.
        """
        self._require("start", RecorderState.idle)

        self._device_held = True
        try:
            await self._device.open(CaptureConstraints())
            media_type = self._negotiate_mime_type()
            logger.info("Recording with format: %s", media_type)

            self._chunks = []
            self._elapsed = 0
            self._media_type = media_type
            self._state = RecorderState.recording
            self._device.start(media_type, self._on_chunk)
        except Exception as exc:
            self._state = RecorderState.idle
            self._release()
            if isinstance(exc, CaptureError):
                raise
            raise CaptureError() from exc

        self._start_timer()

    async def pause(self) -> None:
        """Suspend chunk accumulation and the elapsed-time counter."""
        self._require("pause", RecorderState.recording)
        self._device.pause()
        self._cancel_timer()
        self._state = RecorderState.paused

    async def resume(self) -> None:
        """Restart chunk accumulation and the elapsed-time counter."""
        self._require("resume", RecorderState.paused)
        self._device.resume()
        self._state = RecorderState.recording
        self._start_timer()

    async def stop(self) -> AudioBlob:
        """Finish the recording and assemble the audio blob.

        Returns:
            The concatenation of all chunks, tagged with the negotiated encoding.
        """
        self._require("stop", RecorderState.recording, RecorderState.paused)
        self._cancel_timer()

        self._flushing = True
        try:
            await self._device.stop()
        except Exception as exc:
            self._discard()
            raise CaptureError("Failed to stop recording") from exc
        finally:
            self._flushing = False
            self._release()

        blob = AudioBlob(data=b"".join(self._chunks), media_type=self._media_type)
        self._result_blob = blob
        self._preview_path = self._write_preview(blob)
        self._state = RecorderState.stopped
        logger.info(
            "Recording complete: %d bytes, %s, %ds", blob.size, blob.media_type, self._elapsed
        )
        return blob

    def delete(self) -> None:
        """Discard the recording and return to idle. Safe to call in any state."""
        if self._state is RecorderState.idle and self._result_blob is None:
            return
        self._release()
        self._discard()

    async def upload(self, uploader: Uploader) -> Any:
        """Hand the finished recording to ``uploader`` and reset on success.

        Args:
            uploader: Awaitable callable receiving ``(blob, filename)``.

        Returns:
            Whatever ``uploader`` returns.

        Raises:
            InvalidTransitionError: Nothing has been recorded yet.
            RecordingTooShortError: Elapsed time is below the minimum; the
                uploader is not called.
        """
        self._require("upload", RecorderState.stopped)
        if self._elapsed < self._min_seconds:
            raise RecordingTooShortError(self._min_seconds)

        blob = self._result_blob
        filename = recording_filename(blob.extension)
        logger.info("Uploading recording: %s (%d bytes, %ds)", filename, blob.size, self._elapsed)

        result = await uploader(blob, filename)
        self.delete()
        return result

    def close(self) -> None:
        """Tear the session down, releasing every resource it holds."""
        self._release()
        self._discard()

    async def __aenter__(self) -> "RecordingSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()

    # -- internals --

    def _require(self, action: str, *allowed: RecorderState) -> None:
        if self._state not in allowed:
            raise InvalidTransitionError(action, self._state.value)

    def _negotiate_mime_type(self) -> str:
        for mime_type in self._mime_types:
            if self._device.is_supported(mime_type):
                return mime_type
        raise CaptureError(
            "No supported recording format. Tried: " + ", ".join(self._mime_types)
        )

    def _on_chunk(self, data: bytes) -> None:
        if data and (self._state is RecorderState.recording or self._flushing):
            self._chunks.append(data)

    def _start_timer(self) -> None:
        self._cancel_timer()
        self._timer = asyncio.create_task(self._run_timer())

    async def _run_timer(self) -> None:
        while True:
            await asyncio.sleep(self._tick_interval)
            self._elapsed += 1

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _release(self) -> None:
        """Single exit funnel: stop the timer and release the device."""
        self._cancel_timer()
        if self._device_held:
            self._device_held = False
            try:
                self._device.release()
            except Exception:
                logger.warning("Error releasing capture device", exc_info=True)

    def _discard(self) -> None:
        if self._preview_path is not None:
            self._preview_path.unlink(missing_ok=True)
        self._preview_path = None
        self._result_blob = None
        self._chunks = []
        self._elapsed = 0
        self._state = RecorderState.idle

    @staticmethod
    def _write_preview(blob: AudioBlob) -> Path:
        fd, name = tempfile.mkstemp(prefix="audionote-", suffix=f".{blob.extension}")
        with os.fdopen(fd, "wb") as fh:
            fh.write(blob.data)
        return Path(name)
