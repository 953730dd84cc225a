"""
Audio module - Microphone capture, recording sessions and upload checks.
"""

from .capture import CaptureConstraints, CaptureDevice, SoundDeviceCapture
from .recorder import RecordingSession
from .validation import check_upload_size, validate_audio_payload

__all__ = [
    "CaptureConstraints",
    "CaptureDevice",
    "RecordingSession",
    "SoundDeviceCapture",
    "check_upload_size",
    "validate_audio_payload",
]
