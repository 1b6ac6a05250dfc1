import pytest

from interview_coach.core.pace import estimate_speech_seconds, word_count, words_per_minute


def test_four_words_in_two_seconds_is_120_wpm():
    assert words_per_minute("a b c d", 2) == 120


@pytest.mark.parametrize("duration", [0, None, -3])
def test_unmeasurable_duration_uses_default(duration):
    assert words_per_minute("a b c d", duration) == 150


@pytest.mark.parametrize("answer", ["", None, "   "])
def test_empty_answer_uses_default(answer):
    assert words_per_minute(answer, 10) == 150


def test_default_is_configurable():
    assert words_per_minute("", 10, default=130) == 130


def test_rounds_half_up():
    # 18 words over 4 minutes is 4.5 wpm
    assert words_per_minute(" ".join(["word"] * 18), 240) == 5
    assert words_per_minute("one two three four five", 4) == 75


def test_word_count_ignores_extra_whitespace():
    assert word_count("  hello   there. general  kenobi. ") == 4
    assert word_count(None) == 0


def test_estimate_speech_seconds():
    assert estimate_speech_seconds("one two three", wpm=60) == 3
