"""
Playback module for lyric-sync.

    - synchronizer: Active line resolution per tick
    - clock: Monotonic playback time source
    - player: Terminal presentation of synchronized lyrics
"""

from lyric_sync.playback.clock import PlaybackClock
from lyric_sync.playback.player import TerminalPlayer, probe_duration
from lyric_sync.playback.synchronizer import (
    NO_ACTIVE_LINE,
    LyricWindow,
    PlaybackSynchronizer,
    SyncState,
    SyncUpdate,
    find_active_index,
)

__all__ = [
    "PlaybackClock",
    "TerminalPlayer",
    "probe_duration",
    "NO_ACTIVE_LINE",
    "LyricWindow",
    "PlaybackSynchronizer",
    "SyncState",
    "SyncUpdate",
    "find_active_index",
]
