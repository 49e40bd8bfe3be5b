"""
Utility functions for lyric-sync.

This module provides common utility functions used across the application:
    - Stored filename generation for the upload store
    - Directory helpers
    - Time formatting for display

Usage:
    from lyric_sync.utils import (
        generate_stored_name,
        ensure_directory,
        format_timestamp
    )
"""

import re
import time
from pathlib import Path


# Anything but ASCII letters, digits, dots and hyphens
_UNSAFE_CHARS_PATTERN = re.compile(r"[^a-zA-Z0-9.\-]")


def sanitize_filename(name: str) -> str:
    """
    Make an uploaded filename safe to store.

    Every character other than ASCII letters, digits, '.' and '-' is
    replaced with an underscore, one for one.

    Examples:
        sanitize_filename("My Song (live).mp3")  # "My_Song__live_.mp3"
        sanitize_filename("été.lrc")             # "_t_.lrc"
    """
    return _UNSAFE_CHARS_PATTERN.sub("_", name)


def generate_stored_name(original_name: str, now_ms: int | None = None) -> str:
    """
    Build the name an upload is stored under: '<epoch millis>-<sanitized name>'.

    Args:
        original_name: Filename as uploaded (directories are dropped).
        now_ms: Timestamp override, mainly for tests.

    Example:
        generate_stored_name("my song.mp3", 1718035200000)
        # "1718035200000-my_song.mp3"
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return f"{now_ms}-{sanitize_filename(Path(original_name).name)}"


def ensure_directory(path: Path) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Returns:
        The same path (for chaining).

    Raises:
        OSError: If directory cannot be created (permissions, etc.)
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def format_timestamp(seconds: float) -> str:
    """
    Format a playback position as zero-padded "mm:ss".

    Negative values are shown as 00:00; minutes are not wrapped to hours.

    Examples:
        format_timestamp(75.4)   # "01:15"
        format_timestamp(3725)   # "62:05"
    """
    total = max(int(seconds), 0)
    return f"{total // 60:02d}:{total % 60:02d}"
