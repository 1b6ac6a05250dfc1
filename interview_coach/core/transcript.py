"""
Transcript accumulation and capture timing for a single answer.

A TranscriptBuffer turns one start/stop capture window into a finalized
answer string plus its elapsed seconds. Final recognition fragments are
kept; interim fragments are shown while speaking and then thrown away.
"""

import time
from dataclasses import dataclass
from typing import Callable

from pydantic import BaseModel, Field

SENTENCE_DELIMITER = ". "


class RecognitionUpdate(BaseModel):
    """One incremental recognition event from the capture engine."""

    final_fragments: list[str] = Field(default_factory=list)
    interim_fragment: str | None = None


@dataclass(frozen=True)
class CapturedAnswer:
    """Result of closing a capture window."""

    answer: str
    duration_seconds: float


class TranscriptBuffer:
    """Accumulates recognition fragments between start() and finish()."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._final = ""
        self._interim = ""
        self._started_at: float | None = None

    @property
    def final_text(self) -> str:
        return self._final

    @property
    def interim_text(self) -> str:
        return self._interim

    @property
    def is_open(self) -> bool:
        return self._started_at is not None

    def start(self) -> None:
        """Clear both buffers and record the start timestamp."""
        self.clear()
        self._started_at = self._clock()

    def apply(self, update: RecognitionUpdate) -> None:
        """Append final fragments and replace the interim scratch text."""
        for fragment in update.final_fragments:
            fragment = fragment.strip()
            if fragment:
                self._final += fragment + SENTENCE_DELIMITER
        self._interim = update.interim_fragment or ""

    def finish(self) -> CapturedAnswer:
        """Close the window; interim text is discarded, never kept."""
        stopped_at = self._clock()
        elapsed = stopped_at - self._started_at if self._started_at is not None else 0.0
        captured = CapturedAnswer(
            answer=self._final.strip(),
            duration_seconds=max(elapsed, 0.0),
        )
        self._interim = ""
        self._started_at = None
        return captured

    def clear(self) -> None:
        self._final = ""
        self._interim = ""
        self._started_at = None
