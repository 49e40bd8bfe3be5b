"""
Playback clock for lyric-sync.

Stands in for the media element's "current time" when lyrics are played
back in the terminal. Time is measured with a monotonic source so system
clock changes never make playback jump.
"""

import math
import time
from typing import Callable


class PlaybackClock:
    """
    Monotonic playback position with pause, seek and sync offset.

    Attributes:
        duration: Track length in seconds, or None if unknown. When set,
                  current_time never exceeds it.
        offset: Seconds added to the reported position. A positive value
                shows lyrics earlier, a negative one delays them.
    """

    def __init__(
        self,
        duration: float | None = None,
        offset: float = 0.0,
        time_source: Callable[[], float] = time.monotonic,
    ) -> None:
        self.duration = duration
        self.offset = offset
        self._time_source = time_source
        self._position = 0.0
        self._started_at: float | None = None

    @property
    def is_playing(self) -> bool:
        return self._started_at is not None

    def start(self) -> None:
        """Start or resume playback from the current position."""
        if self._started_at is None:
            self._started_at = self._time_source()

    def pause(self) -> None:
        if self._started_at is not None:
            self._position += self._time_source() - self._started_at
            self._started_at = None

    def seek(self, position: float) -> None:
        """
        Jump to a position in seconds, keeping the play/pause state.

        Negative and non-finite positions seek to the start.
        """
        if not math.isfinite(position):
            position = 0.0
        self._position = max(position, 0.0)
        if self._started_at is not None:
            self._started_at = self._time_source()

    @property
    def position(self) -> float:
        """Elapsed playback time without the offset."""
        position = self._position
        if self._started_at is not None:
            position += self._time_source() - self._started_at
        if self.duration is not None:
            position = min(position, self.duration)
        return position

    @property
    def current_time(self) -> float:
        return self.position + self.offset

    @property
    def finished(self) -> bool:
        return self.duration is not None and self.position >= self.duration
