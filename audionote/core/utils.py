"""Shared utility functions for AudioNote."""

import re
from datetime import UTC, datetime


def count_words(text: str) -> int:
    """Count whitespace-separated tokens in a transcript."""
    return len(text.split())


def format_duration(seconds: float) -> str:
    """Format a duration as ``MM:SS``."""
    total = int(seconds)
    return f"{total // 60:02d}:{total % 60:02d}"


def recording_filename(extension: str, now: datetime | None = None) -> str:
    """Build an upload filename such as ``recording_2026-01-01T10-00-00-000Z.webm``."""
    now = now or datetime.now(UTC)
    stamp = now.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return f"recording_{re.sub(r'[:.]', '-', stamp)}.{extension}"
