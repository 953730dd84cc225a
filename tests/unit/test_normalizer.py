"""Tests for vendor response normalization.

Validates shape detection priority, the recognition-failure sentinel,
and confidence derivation from segment log-probabilities.
"""

import math

import pytest

from audionote.services.transcription.normalizer import (
    DEFAULT_CONFIDENCE,
    SHAPE_DETECTORS,
    WHISPER_FAILURE_SENTINEL,
    estimate_confidence,
    extract_text,
    flat_text_shape,
    nested_responses_shape,
    normalize_response,
)

MODEL = "whisper-1"


class TestExtractText:
    """Verify each response shape and their priority order."""

    def test_nested_shape(self):
        payload = {"responses": {"responses": {"whisper-1": "hello world"}}}
        assert extract_text(payload, MODEL) == "hello world"

    def test_flat_shape(self):
        assert extract_text({"text": "hello world"}, MODEL) == "hello world"

    def test_nested_falls_back_to_first_model(self):
        payload = {"responses": {"responses": {"other-model": "from other", "x": "y"}}}
        assert extract_text(payload, MODEL) == "from other"

    def test_nested_takes_priority_over_flat(self):
        payload = {"text": "flat", "responses": {"responses": {"whisper-1": "nested"}}}
        assert extract_text(payload, MODEL) == "nested"

    def test_partial_nested_shape_falls_through_to_flat(self):
        payload = {"responses": {"status": "ok"}, "text": "flat"}
        assert extract_text(payload, MODEL) == "flat"

    def test_unknown_shape_is_empty(self):
        assert extract_text({"result": "hello"}, MODEL) == ""

    def test_sentinel_becomes_empty(self):
        payload = {"responses": {"responses": {"whisper-1": WHISPER_FAILURE_SENTINEL}}}
        assert extract_text(payload, MODEL) == ""

    def test_sentinel_in_flat_shape(self):
        assert extract_text({"text": "an error occurred"}, MODEL) == ""

    def test_non_string_text_is_empty(self):
        assert extract_text({"text": None}, MODEL) == ""

    def test_detector_order(self):
        assert SHAPE_DETECTORS == (nested_responses_shape, flat_text_shape)

    def test_detectors_return_none_when_shape_absent(self):
        assert nested_responses_shape({"text": "x"}, MODEL) is None
        assert flat_text_shape({"responses": {}}, MODEL) is None


class TestEstimateConfidence:
    """Verify per-segment scoring, averaging and clamping."""

    def test_no_segments_uses_default(self):
        assert estimate_confidence(None) == DEFAULT_CONFIDENCE
        assert estimate_confidence([]) == DEFAULT_CONFIDENCE

    def test_average_of_exp_logprob(self):
        segments = [{"avg_logprob": 0}, {"avg_logprob": -0.5}]
        expected = (1.0 + math.exp(-0.5)) / 2
        assert estimate_confidence(segments) == pytest.approx(expected)
        assert estimate_confidence(segments) == pytest.approx(0.803, abs=1e-3)

    def test_no_speech_prob_fallback(self):
        assert estimate_confidence([{"no_speech_prob": 0.2}]) == pytest.approx(0.8)

    def test_logprob_preferred_over_no_speech_prob(self):
        segments = [{"avg_logprob": 0.0, "no_speech_prob": 0.9}]
        assert estimate_confidence(segments) == pytest.approx(1.0)

    def test_segment_without_scores_uses_default(self):
        segments = [{"text": "hi"}, {"avg_logprob": 0.0}]
        assert estimate_confidence(segments) == pytest.approx((DEFAULT_CONFIDENCE + 1.0) / 2)

    def test_clamped_to_one(self):
        assert estimate_confidence([{"avg_logprob": 0.5}]) == 1.0


class TestNormalizeResponse:
    """Verify the full TranscriptionResult mapping."""

    def test_verbose_json(self):
        payload = {
            "text": "hello world",
            "language": "english",
            "duration": 3.2,
            "segments": [{"avg_logprob": -0.1}],
            "words": [
                {"word": "hello", "start": 0.0, "end": 0.5, "confidence": 0.9},
                {"word": "world", "start": 0.6},
            ],
        }
        result = normalize_response(payload, MODEL)
        assert result.transcription == "hello world"
        assert result.language == "english"
        assert result.duration == pytest.approx(3.2)
        assert result.confidence == pytest.approx(math.exp(-0.1))
        # The malformed second word is skipped
        assert [w.word for w in result.words] == ["hello"]

    def test_defaults_when_metadata_missing(self):
        result = normalize_response({"responses": {"responses": {"whisper-1": "hi"}}}, MODEL)
        assert result.transcription == "hi"
        assert result.language == "unknown"
        assert result.duration == 0.0
        assert result.confidence == DEFAULT_CONFIDENCE
        assert result.words == []


def test_large_logprob_clamps_instead_of_overflowing():
    segments = [{"avg_logprob": 1000.0}, {"avg_logprob": 0.0}]
    assert estimate_confidence(segments) == 1.0
    result = normalize_response({"text": "hi", "segments": [{"avg_logprob": 1000}]}, MODEL)
    assert result.confidence == 1.0
