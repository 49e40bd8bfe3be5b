"""
Lyrics module for lyric-sync.

This module turns uploaded lyrics files into timestamped lines:
    - models: LyricLine and ParsedLyrics, with their wire format
    - parser: Tag/plain format detection and parsing

Usage:
    from lyric_sync.lyrics import parse_lyrics, FractionMode

    lyrics = parse_lyrics(text, FractionMode.HUNDREDTHS)
"""

from lyric_sync.lyrics.models import FractionMode, LyricLine, ParsedLyrics
from lyric_sync.lyrics.parser import parse_lyrics, parse_lyrics_file

__all__ = [
    "LyricLine",
    "ParsedLyrics",
    "FractionMode",
    "parse_lyrics",
    "parse_lyrics_file",
]
