# tests/test_synchronizer.py
"""Test lyrics/playback synchronization"""

import math
import pytest

from lyric_sync.lyrics import LyricLine, ParsedLyrics, parse_lyrics
from lyric_sync.playback import (
    NO_ACTIVE_LINE,
    PlaybackSynchronizer,
    SyncUpdate,
    find_active_index
)


def _lyrics(*timestamps):
    return ParsedLyrics(
        LyricLine(timestamp=t, text=f"line {i}", line_number=i + 1)
        for i, t in enumerate(timestamps)
    )


def _reverse_scan(timestamps, current_time):
    """Reference: last line whose timestamp <= current_time"""
    for i in range(len(timestamps) - 1, -1, -1):
        if current_time >= timestamps[i]:
            return i
    return NO_ACTIVE_LINE


class TestFindActiveIndex:
    """Test active index resolution"""

    def test_before_first_line(self):
        """Test nothing is active before the first timestamp"""
        assert find_active_index([1.0, 2.0], 0.5) == NO_ACTIVE_LINE

    def test_boundaries(self):
        """Test a line becomes active at its exact timestamp"""
        assert find_active_index([1.0, 2.0], 1.0) == 0
        assert find_active_index([1.0, 2.0], 1.999) == 0
        assert find_active_index([1.0, 2.0], 2.0) == 1
        assert find_active_index([1.0, 2.0], 1000.0) == 1

    def test_equal_timestamps_pick_last(self):
        """Test ties resolve to the last line sharing the timestamp"""
        assert find_active_index([0.0, 5.0, 5.0, 9.0], 5.0) == 2

    def test_empty(self):
        """Test no lines"""
        assert find_active_index([], 3.0) == NO_ACTIVE_LINE

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_time(self, value):
        """Test NaN and infinities never match"""
        assert find_active_index([0.0, 1.0], value) == NO_ACTIVE_LINE

    def test_matches_reverse_scan(self):
        """Test binary search agrees with a linear reverse scan"""
        timestamps = [0.0, 0.5, 0.5, 1.25, 3.0, 3.0, 3.0, 7.5]
        times = [-1.0] + [step / 4 for step in range(0, 40)]
        for current_time in times:
            assert find_active_index(timestamps, current_time) == \
                _reverse_scan(timestamps, current_time)


class TestPlaybackSynchronizer:
    """Test tick-by-tick updates"""

    def test_change_sequence(self):
        """Test index and change flag across ticks"""
        lyrics = _lyrics(0.0, 10.0, 20.0)
        synchronizer = PlaybackSynchronizer(lyrics)

        results = [
            synchronizer.advance(lyrics, t)
            for t in (-1.0, 0.0, 5.0, 10.0, 25.0)
        ]

        assert [(r.active_index, r.changed) for r in results] == [
            (-1, False),
            (0, True),
            (0, False),
            (1, True),
            (2, True),
        ]

    def test_seek_backwards(self):
        """Test moving back in time reports a change"""
        lyrics = _lyrics(0.0, 10.0, 20.0)
        synchronizer = PlaybackSynchronizer(lyrics)
        synchronizer.tick(25.0)

        update = synchronizer.tick(3.0)
        assert update.active_index == 0
        assert update.changed is True

        update = synchronizer.tick(-2.0)
        assert update.active_index == NO_ACTIVE_LINE
        assert update.changed is True

    def test_empty_lyrics(self):
        """Test no line is ever active"""
        synchronizer = PlaybackSynchronizer()
        for t in (0.0, 5.0, 100.0):
            update = synchronizer.tick(t)
            assert update.active_index == NO_ACTIVE_LINE
            assert update.changed is False
        assert synchronizer.active_line is None

    def test_nan_time_clears_active_line(self):
        """Test a NaN tick deactivates the current line"""
        lyrics = _lyrics(0.0, 1.0)
        synchronizer = PlaybackSynchronizer(lyrics)
        synchronizer.tick(1.5)

        update = synchronizer.tick(math.nan)
        assert update == SyncUpdate(active_index=NO_ACTIVE_LINE, changed=True)

    def test_active_line(self):
        """Test the active line object"""
        lyrics = parse_lyrics("[00:01.00] a\n[00:02.00] b")
        synchronizer = PlaybackSynchronizer(lyrics)

        synchronizer.tick(1.5)
        assert synchronizer.active_line.text == "a"
        assert synchronizer.state.current_index == 0

    def test_plain_list_accepted(self):
        """Test any sorted sequence of lines can be synchronized"""
        lines = list(_lyrics(0.0, 2.0))
        synchronizer = PlaybackSynchronizer()

        update = synchronizer.advance(lines, 2.5)
        assert update.active_index == 1
        assert isinstance(synchronizer.state.lyrics, ParsedLyrics)
        assert synchronizer.tick(0.5).active_index == 0

    def test_new_sequence_replaces_held_one(self):
        """Test advance() switches to a different sequence"""
        first = _lyrics(0.0, 10.0)
        second = _lyrics(0.0, 1.0, 2.0)
        synchronizer = PlaybackSynchronizer(first)
        synchronizer.advance(first, 5.0)

        update = synchronizer.advance(second, 5.0)
        assert update.active_index == 2
        assert update.changed is True
        assert synchronizer.state.lyrics == second

    def test_load_and_reset(self):
        """Test load() forgets the active line"""
        synchronizer = PlaybackSynchronizer(_lyrics(0.0, 1.0))
        synchronizer.tick(1.0)

        synchronizer.load(_lyrics(5.0))
        assert synchronizer.state.current_index == NO_ACTIVE_LINE

        synchronizer.tick(6.0)
        synchronizer.reset()
        assert synchronizer.active_line is None
        assert synchronizer.tick(6.0).changed is True


class TestLyricWindow:
    """Test display window around the active line"""

    def test_before_start(self):
        """Test upcoming lines start at line 0"""
        synchronizer = PlaybackSynchronizer(_lyrics(1.0, 2.0, 3.0))
        synchronizer.tick(0.0)

        window = synchronizer.window()
        assert window.previous == ()
        assert window.current is None
        assert [line.text for line in window.upcoming] == ["line 0"]

    def test_middle(self):
        """Test previous, current and upcoming lines"""
        synchronizer = PlaybackSynchronizer(_lyrics(1.0, 2.0, 3.0, 4.0))
        synchronizer.tick(2.5)

        window = synchronizer.window(radius=2)
        assert [line.text for line in window.previous] == ["line 0"]
        assert window.current.text == "line 1"
        assert [line.text for line in window.upcoming] == ["line 2", "line 3"]

    def test_end(self):
        """Test nothing upcoming after the last line"""
        synchronizer = PlaybackSynchronizer(_lyrics(1.0, 2.0))
        synchronizer.tick(9.0)

        window = synchronizer.window()
        assert [line.text for line in window.previous] == ["line 0"]
        assert window.current.text == "line 1"
        assert window.upcoming == ()
