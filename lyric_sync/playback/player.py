"""
Terminal lyrics player for lyric-sync.

Drives a PlaybackSynchronizer from a PlaybackClock and prints each line
as it becomes active. Audio itself is not played; when an audio file is
given, only its duration is read (with mutagen) to know when to stop.

Usage:
    player = TerminalPlayer(lyrics, PlaybackClock(duration=probe_duration(audio)))
    player.run()
"""

import time
from pathlib import Path
from typing import Callable

from mutagen import File as MutagenFile
from mutagen import MutagenError
from rich.console import Console
from rich.markup import escape

from lyric_sync.core.logger import get_logger
from lyric_sync.lyrics.models import ParsedLyrics
from lyric_sync.playback.clock import PlaybackClock
from lyric_sync.playback.synchronizer import PlaybackSynchronizer
from lyric_sync.utils import format_timestamp

logger = get_logger(__name__)


# Seconds to keep running after the last line when the duration is unknown
DEFAULT_TAIL = 3.0


def probe_duration(audio_path: Path) -> float | None:
    """
    Read the length of an audio file in seconds.

    Returns None if the format is not recognized or the file is unreadable.
    """
    try:
        audio = MutagenFile(audio_path)
    except (MutagenError, OSError) as e:
        logger.warning(f"Could not read audio duration from {audio_path}: {e}")
        return None

    if audio is None or getattr(audio, "info", None) is None:
        logger.warning(f"Unrecognized audio format: {audio_path}")
        return None

    length = getattr(audio.info, "length", None)
    return float(length) if length else None


class TerminalPlayer:
    """
    Tick loop printing the active lyric line on change.

    Attributes:
        lyrics: Sequence to play.
        clock: Time source queried once per tick.
        tick_interval: Seconds slept between ticks.
        tail: Extra seconds after the last line when the clock has no duration.
    """

    def __init__(
        self,
        lyrics: ParsedLyrics,
        clock: PlaybackClock,
        console: Console | None = None,
        tick_interval: float = 0.05,
        tail: float = DEFAULT_TAIL,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.lyrics = lyrics
        self.clock = clock
        self.console = console or Console()
        self.tick_interval = tick_interval
        self.tail = tail
        self._sleep = sleep
        self.synchronizer = PlaybackSynchronizer(lyrics)
        self.lines_shown = 0

    def _end_time(self) -> float:
        if self.clock.duration is not None:
            return self.clock.duration
        last = self.lyrics[-1].timestamp if self.lyrics else 0.0
        return last + self.tail

    def _render(self) -> None:
        line = self.synchronizer.active_line
        if line is None:
            self.console.print("[dim]…[/dim]")
            return
        self.lines_shown += 1
        self.console.print(
            f"[cyan]{format_timestamp(line.timestamp)}[/cyan]  [bold]{escape(line.text)}[/bold]",
            highlight=False,
        )

    def step(self) -> bool:
        """
        Run one tick.

        Returns:
            False once playback has reached its end.
        """
        update = self.synchronizer.tick(self.clock.current_time)
        if update.changed:
            self._render()
        return not (self.clock.finished or self.clock.position >= self._end_time())

    def run(self) -> int:
        """
        Play until the end or Ctrl+C.

        Returns:
            Number of lyric lines displayed.
        """
        self.clock.start()
        try:
            while self.step():
                self._sleep(self.tick_interval)
        except KeyboardInterrupt:
            logger.info("Playback interrupted")
        finally:
            self.clock.pause()
        return self.lines_shown
