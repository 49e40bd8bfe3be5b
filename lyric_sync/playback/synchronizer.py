"""
Lyrics/playback synchronization for lyric-sync.

The presentation layer calls advance() once per animation tick with the
current playback time. The synchronizer resolves which lyric line is
active (the last line whose timestamp is <= the current time) and reports
whether that changed since the previous call, so the display only has to
be redrawn on change.

Scheduling:
    advance() does no I/O and keeps no state besides the last resolved
    index, so it can be called at any cadence: every display refresh,
    irregular intervals, or with ticks skipped after a seek.

Usage:
    synchronizer = PlaybackSynchronizer(lyrics)

    while playing:
        update = synchronizer.advance(lyrics, clock.current_time)
        if update.changed:
            render(synchronizer.active_line)
"""

import math
from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Sequence

from lyric_sync.lyrics.models import LyricLine, ParsedLyrics


NO_ACTIVE_LINE = -1


def find_active_index(timestamps: Sequence[float], current_time: float) -> int:
    """
    Index of the rightmost timestamp <= current_time, or -1.

    Args:
        timestamps: Ascending timestamps.
        current_time: Playback position in seconds. NaN and infinities
                      never match.
    """
    if not math.isfinite(current_time):
        return NO_ACTIVE_LINE
    return bisect_right(timestamps, current_time) - 1


@dataclass(frozen=True)
class SyncUpdate:
    """Result of one tick."""

    active_index: int
    changed: bool


@dataclass
class SyncState:
    """
    State owned by the synchronizer and read by the presentation layer.

    Attributes:
        lyrics: Sequence being synchronized.
        current_index: Active line index, -1 when no line is active.
    """

    lyrics: ParsedLyrics = field(default_factory=ParsedLyrics)
    current_index: int = NO_ACTIVE_LINE


@dataclass(frozen=True)
class LyricWindow:
    """Lines around the active one, for display."""

    previous: tuple[LyricLine, ...]
    current: LyricLine | None
    upcoming: tuple[LyricLine, ...]


class PlaybackSynchronizer:
    """Resolves the active lyric line for a playback position."""

    def __init__(self, lyrics: Sequence[LyricLine] = ()) -> None:
        self.state = SyncState()
        self._source: Sequence[LyricLine] | None = None
        self._timestamps: list[float] = []
        self._use(lyrics)

    def _use(self, lyrics: Sequence[LyricLine]) -> None:
        self._source = lyrics
        if not isinstance(lyrics, ParsedLyrics):
            lyrics = ParsedLyrics(lyrics)
        self.state.lyrics = lyrics
        self._timestamps = lyrics.timestamps

    def load(self, lyrics: Sequence[LyricLine]) -> None:
        """Switch to another sequence and forget the active line."""
        self._use(lyrics)
        self.reset()

    def reset(self) -> None:
        self.state.current_index = NO_ACTIVE_LINE

    def advance(self, lyrics: Sequence[LyricLine], current_time: float) -> SyncUpdate:
        """
        Resolve the active line for current_time.

        Args:
            lyrics: Sequence sorted by timestamp. Passing a different
                    sequence than last time replaces the one held; the
                    last index is still used to compute 'changed'.
            current_time: Playback position in seconds.

        Returns:
            SyncUpdate with the active index (-1 if none) and whether it
            differs from the index resolved by the previous call.
        """
        if lyrics is not self._source:
            self._use(lyrics)

        index = find_active_index(self._timestamps, current_time)
        changed = index != self.state.current_index
        self.state.current_index = index
        return SyncUpdate(active_index=index, changed=changed)

    def tick(self, current_time: float) -> SyncUpdate:
        """advance() with the sequence already held."""
        return self.advance(self._source, current_time)

    @property
    def active_line(self) -> LyricLine | None:
        index = self.state.current_index
        if index == NO_ACTIVE_LINE:
            return None
        return self.state.lyrics[index]

    def window(self, radius: int = 1) -> LyricWindow:
        """
        Lines surrounding the active one.

        Before the first line is reached, 'upcoming' starts at line 0.
        """
        lyrics = self.state.lyrics
        index = self.state.current_index
        previous_start = max(index - radius, 0)
        return LyricWindow(
            previous=tuple(lyrics[previous_start:index]) if index > 0 else (),
            current=self.active_line,
            upcoming=tuple(lyrics[index + 1:index + 1 + radius]),
        )
