"""Audio capture devices for the recorder state machine.

A ``CaptureDevice`` is the exclusively-owned microphone handle behind a
``RecordingSession``. Devices deliver encoded audio fragments through an
``on_chunk`` callback that always runs on the event loop thread.
"""

import asyncio
import logging
import struct
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass

from audionote.core.exceptions import CaptureError

logger = logging.getLogger(__name__)

ChunkCallback = Callable[[bytes], None]


@dataclass(frozen=True)
class CaptureConstraints:
    """Processing features requested when acquiring the microphone."""

    echo_cancellation: bool = True
    noise_suppression: bool = True
    auto_gain_control: bool = True


class CaptureDevice(ABC):
    """Interface that every capture backend must implement."""

    @abstractmethod
    async def open(self, constraints: CaptureConstraints) -> None:
        """Acquire the underlying device.

        Raises:
            CaptureError: Permission denied or device failure.
        """

    @abstractmethod
    def is_supported(self, mime_type: str) -> bool:
        """Return True if the device can produce audio in ``mime_type``."""

    @abstractmethod
    def start(self, mime_type: str, on_chunk: ChunkCallback) -> None:
        """Begin delivering encoded chunks to ``on_chunk``."""

    @abstractmethod
    def pause(self) -> None:
        """Suspend chunk delivery without dropping the device."""

    @abstractmethod
    def resume(self) -> None:
        """Resume chunk delivery after ``pause``."""

    @abstractmethod
    async def stop(self) -> None:
        """Stop capturing and flush any buffered chunk to ``on_chunk``."""

    @abstractmethod
    def release(self) -> None:
        """Release the device. Must be safe to call more than once."""


def _streaming_wav_header(sample_rate: int, channels: int, sample_width: int = 2) -> bytes:
    """RIFF/WAVE header for a stream of unknown length (sizes set to 0xFFFFFFFF)."""
    unknown = 0xFFFFFFFF
    byte_rate = sample_rate * channels * sample_width
    return struct.pack(
        "<4sI4s4sIHHIIHH4sI",
        b"RIFF",
        unknown,
        b"WAVE",
        b"fmt ",
        16,
        1,  # PCM
        channels,
        sample_rate,
        byte_rate,
        channels * sample_width,
        sample_width * 8,
        b"data",
        unknown,
    )


class SoundDeviceCapture(CaptureDevice):
    """Microphone capture through PortAudio (``sounddevice``).

    Produces 16-bit PCM WAV: the first chunk is a streaming WAV header,
    every following chunk is one timeslice of raw frames. PortAudio offers
    no echo cancellation, noise suppression or gain control, so those
    constraints are accepted and ignored.

    Args:
        sample_rate: Capture rate in Hz.
        channels: Number of input channels.
        timeslice: Seconds of audio per delivered chunk.
        device: PortAudio device index or name (None = system default).
    """

    _SUPPORTED = ("audio/wav", "audio/wave", "audio/x-wav")

    def __init__(
        self,
        sample_rate: int = 16000,
        channels: int = 1,
        timeslice: float = 1.0,
        device: int | str | None = None,
    ) -> None:
        self._sample_rate = sample_rate
        self._channels = channels
        self._timeslice = timeslice
        self._device = device
        self._sd = None
        self._stream = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._on_chunk: ChunkCallback | None = None
        self._paused = False

    async def open(self, constraints: CaptureConstraints) -> None:
        logger.debug("Capture constraints (not applied by PortAudio): %s", constraints)
        # Imported lazily: the module raises OSError when PortAudio is missing
        try:
            import sounddevice as sd
        except OSError as exc:
            raise CaptureError(f"No audio input available: {exc}") from exc
        self._sd = sd

        try:
            self._stream = sd.RawInputStream(
                samplerate=self._sample_rate,
                channels=self._channels,
                dtype="int16",
                blocksize=int(self._sample_rate * self._timeslice),
                device=self._device,
                callback=self._callback,
            )
        except (sd.PortAudioError, ValueError) as exc:
            raise CaptureError(
                f"Microphone access failed: {exc}. "
                "Please allow microphone access to record audio."
            ) from exc

    def is_supported(self, mime_type: str) -> bool:
        return mime_type.split(";", 1)[0].strip().lower() in self._SUPPORTED

    def start(self, mime_type: str, on_chunk: ChunkCallback) -> None:
        if self._stream is None:
            raise CaptureError("Microphone is not open")
        self._loop = asyncio.get_running_loop()
        self._on_chunk = on_chunk
        self._paused = False
        on_chunk(_streaming_wav_header(self._sample_rate, self._channels))
        try:
            self._stream.start()
        except self._sd.PortAudioError as exc:
            raise CaptureError(f"Failed to start recording: {exc}") from exc
        logger.info("Microphone capture started (%d Hz, %s)", self._sample_rate, mime_type)

    def _callback(self, indata, frames, time_info, status) -> None:  # noqa: ANN001
        """PortAudio thread: hand frames over to the event loop."""
        if status:
            logger.warning("Capture status: %s", status)
        if self._paused or self._loop is None or self._on_chunk is None:
            return
        self._loop.call_soon_threadsafe(self._on_chunk, bytes(indata))

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    async def stop(self) -> None:
        if self._stream is not None and self._stream.active:
            await asyncio.to_thread(self._stream.stop)
        # Let frames already scheduled with call_soon_threadsafe reach on_chunk
        await asyncio.sleep(0)

    def release(self) -> None:
        if self._stream is not None:
            try:
                self._stream.close()
            except self._sd.PortAudioError:
                logger.warning("Error closing microphone stream", exc_info=True)
            self._stream = None
            logger.info("Microphone released")
        self._on_chunk = None
        self._loop = None
