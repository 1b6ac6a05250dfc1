"""
Speaking-rate helpers.
"""

import math

DEFAULT_WORDS_PER_MINUTE = 150


def word_count(text: str | None) -> int:
    """Count whitespace-separated tokens."""
    if not text:
        return 0
    return len(text.split())


def words_per_minute(
    answer: str | None,
    duration_seconds: float | None,
    default: int = DEFAULT_WORDS_PER_MINUTE,
) -> int:
    """
    Speaking rate of an answer, rounded half up.

    Falls back to ``default`` when there is nothing to measure: an empty
    answer, or a missing or non-positive duration.
    """
    words = word_count(answer)
    if not words or not duration_seconds or duration_seconds <= 0:
        return default
    return math.floor(words / (duration_seconds / 60) + 0.5)


def estimate_speech_seconds(text: str, wpm: int = DEFAULT_WORDS_PER_MINUTE) -> float:
    """Rough utterance length for text read aloud at ``wpm``."""
    return word_count(text) / wpm * 60
