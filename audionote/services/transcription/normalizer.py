"""Vendor response normalization.

The vendor answers in more than one JSON shape. ``SHAPE_DETECTORS`` is an
ordered list of small functions, each recognising exactly one shape and
returning the transcript text, or ``None`` when the payload is not in
that shape. The first detector that recognises the payload wins; new
shapes are supported by appending a detector.
"""

import logging
import math
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import ValidationError

from audionote.core.models import TranscriptionResult, TranscriptionWord

logger = logging.getLogger(__name__)

# Text Whisper returns in place of a transcript when it could not process the audio
WHISPER_FAILURE_SENTINEL = "an error occurred"

# Reported when the vendor gives no per-segment scores
DEFAULT_CONFIDENCE = 0.85

ShapeDetector = Callable[[Mapping[str, Any], str], str | None]


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def nested_responses_shape(payload: Mapping[str, Any], model: str) -> str | None:
    """``{"responses": {"responses": {"<model>": "<text>", ...}}}``.

    Takes the entry for ``model``, or the first entry when that model is
    missing or empty.
    """
    outer = payload.get("responses")
    if not isinstance(outer, Mapping):
        return None
    by_model = outer.get("responses")
    if not isinstance(by_model, Mapping):
        return None

    text = _as_text(by_model.get(model))
    if not text and by_model:
        text = _as_text(next(iter(by_model.values())))
    return text


def flat_text_shape(payload: Mapping[str, Any], model: str) -> str | None:
    """``{"text": "<text>", ...}`` (OpenAI-style verbose_json)."""
    if "text" not in payload:
        return None
    return _as_text(payload["text"])


SHAPE_DETECTORS: tuple[ShapeDetector, ...] = (
    nested_responses_shape,
    flat_text_shape,
)


def extract_text(payload: Mapping[str, Any], model: str) -> str:
    """Return the transcript text, or "" when no shape matches or recognition failed."""
    for detector in SHAPE_DETECTORS:
        text = detector(payload, model)
        if text is not None:
            break
    else:
        logger.warning("Unrecognized vendor response shape: keys=%s", sorted(payload))
        return ""

    if text == WHISPER_FAILURE_SENTINEL:
        logger.warning("Whisper returned an error, likely due to short/silent audio or format issues")
        return ""
    return text


def _segment_confidence(segment: Any) -> float:
    if not isinstance(segment, Mapping):
        return DEFAULT_CONFIDENCE
    avg_logprob = segment.get("avg_logprob")
    if isinstance(avg_logprob, int | float):
        return math.exp(min(avg_logprob, 0.0))
    no_speech_prob = segment.get("no_speech_prob")
    if isinstance(no_speech_prob, int | float):
        return 1 - no_speech_prob
    return DEFAULT_CONFIDENCE


def estimate_confidence(segments: Any) -> float:
    """Average per-segment confidence, clamped to [0, 1].

    Each segment scores ``exp(avg_logprob)``, else ``1 - no_speech_prob``,
    else ``DEFAULT_CONFIDENCE``. Without segments the default is returned.
    """
    if not isinstance(segments, list) or not segments:
        return DEFAULT_CONFIDENCE
    scores = [_segment_confidence(seg) for seg in segments]
    return max(0.0, min(sum(scores) / len(scores), 1.0))


def _parse_words(words: Any) -> list[TranscriptionWord]:
    if not isinstance(words, list):
        return []
    parsed = []
    for item in words:
        try:
            parsed.append(TranscriptionWord.model_validate(item))
        except ValidationError:
            logger.debug("Skipping malformed word entry: %r", item)
    return parsed


def normalize_response(payload: Mapping[str, Any], model: str) -> TranscriptionResult:
    """Convert any supported vendor response into a ``TranscriptionResult``."""
    language = payload.get("language")
    duration = payload.get("duration")
    return TranscriptionResult(
        transcription=extract_text(payload, model),
        confidence=estimate_confidence(payload.get("segments")),
        language=language if isinstance(language, str) and language else "unknown",
        duration=max(float(duration), 0.0) if isinstance(duration, int | float) else 0.0,
        words=_parse_words(payload.get("words")),
    )
