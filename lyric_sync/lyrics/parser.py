"""
Lyrics parsing for lyric-sync.

Turns the raw text of an uploaded lyrics file into an ordered
ParsedLyrics sequence. Two formats are understood:

    Tag format:
        [00:12.50] First line
        [00:15.00] Second line

    Plain timestamp format (used only when no tag is found anywhere):
        12.5 First line
        15 Second line

Format detection is global: a single tag anywhere in the file switches the
whole file to tag format, and lines without a tag are then dropped rather
than read as plain timestamps.

Fraction Digits:
    Historically the digits after the dot in a tag are read as a count of
    hundredths whatever their length, so [00:01.5] is 1.05s while
    [00:01.50] is 1.5s. FractionMode.HUNDREDTHS keeps that behavior and is
    the default; FractionMode.DECIMAL reads the digits as a decimal fraction
    (1.5s for both).

Parsing never raises: unparseable lines are skipped and a file without a
single usable line yields an empty sequence.

Usage:
    from lyric_sync.lyrics import parse_lyrics

    lyrics = parse_lyrics("[00:01.50] hello\\n[00:00.25] world")
    [line.text for line in lyrics]  # ["world", "hello"]
"""

import math
import re
from pathlib import Path

from lyric_sync.core.exceptions import StorageError
from lyric_sync.core.logger import get_logger
from lyric_sync.lyrics.models import FractionMode, LyricLine, ParsedLyrics

logger = get_logger(__name__)


# [minutes:seconds.fraction] text, searched anywhere in the line
_TAG_PATTERN = re.compile(r"\[([0-9]+):([0-9]+)\.([0-9]+)\]\s*(.*)")

# Leading numeric prefix of a token, as a lenient float reader accepts it
_LEADING_NUMBER_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def _tag_timestamp(minutes: str, seconds: str, fraction: str, mode: FractionMode) -> float:
    if mode is FractionMode.DECIMAL:
        fraction_seconds = int(fraction) / (10 ** len(fraction))
    else:
        fraction_seconds = int(fraction) / 100
    return int(minutes) * 60 + int(seconds) + fraction_seconds


def _leading_number(token: str) -> float | None:
    """
    Read the numeric prefix of a token.

    Returns None when the token does not start with a number.
    "2" -> 2.0, "0.5s" -> 0.5, "1e1" -> 10.0, "abc" -> None
    """
    match = _LEADING_NUMBER_PATTERN.match(token)
    if match is None:
        return None
    try:
        return float(match.group(0))
    except ValueError:
        return None


def _parse_tagged(
    lines: list[str], fraction_mode: FractionMode
) -> tuple[list[LyricLine], bool]:
    """
    Collect every tag-formatted line.

    Returns:
        The lines found and whether any line carried a tag at all.
        A tag with empty text counts for detection but yields no line.
    """
    found: list[LyricLine] = []
    has_tags = False

    for index, raw_line in enumerate(lines):
        line = raw_line.strip()
        if not line:
            continue

        match = _TAG_PATTERN.search(line)
        if match is None:
            continue

        has_tags = True
        minutes, seconds, fraction, text = match.groups()
        text = text.strip()
        if text:
            found.append(LyricLine(
                timestamp=_tag_timestamp(minutes, seconds, fraction, fraction_mode),
                text=text,
                line_number=index + 1,
            ))

    return found, has_tags


def _parse_plain(lines: list[str]) -> list[LyricLine]:
    """Read '<seconds> <text...>' lines, skipping anything else."""
    found: list[LyricLine] = []

    for index, raw_line in enumerate(lines):
        line = raw_line.strip()
        if not line:
            continue

        parts = line.split()
        if len(parts) < 2:
            logger.debug(f"Skipping line {index + 1} (no valid timestamp): {line}")
            continue

        timestamp = _leading_number(parts[0])
        if timestamp is None or not math.isfinite(timestamp) or timestamp < 0:
            continue

        found.append(LyricLine(
            timestamp=timestamp,
            text=" ".join(parts[1:]),
            line_number=index + 1,
        ))

    return found


def parse_lyrics(
    content: str, fraction_mode: FractionMode = FractionMode.HUNDREDTHS
) -> ParsedLyrics:
    """
    Parse lyrics text into a sorted ParsedLyrics sequence.

    Args:
        content: Full text of the lyrics file.
        fraction_mode: How tag fraction digits are read (see module docs).

    Returns:
        ParsedLyrics sorted ascending by timestamp, ties in file order.
        Empty when nothing could be parsed.

    Behavior:
        1. Split on newlines; blank lines are skipped but still counted
           for line numbers
        2. Collect tag-formatted lines; if any tag exists, stop there
        3. Otherwise read plain '<seconds> <text>' lines
        4. Stable sort by timestamp
    """
    lines = content.split("\n")
    logger.debug(f"Parsing lyrics, total lines: {len(lines)}")

    found, has_tags = _parse_tagged(lines, fraction_mode)
    if not has_tags:
        logger.debug("No tag format detected, trying plain timestamp format")
        found = _parse_plain(lines)

    # sorted() is stable, so equal timestamps keep file order
    lyrics = ParsedLyrics(sorted(found, key=lambda line: line.timestamp))
    logger.debug(f"Parsed lyrics: {len(lyrics)} valid lines")
    return lyrics


def parse_lyrics_file(
    path: Path, fraction_mode: FractionMode = FractionMode.HUNDREDTHS
) -> ParsedLyrics:
    """
    Read a lyrics file as UTF-8 and parse it.

    Undecodable bytes are replaced rather than rejected.

    Raises:
        StorageError: If the file cannot be read.
    """
    try:
        content = Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise StorageError(
            f"Error reading lyrics file: {e}",
            details={"path": str(path), "original_error": str(e)}
        ) from e

    return parse_lyrics(content, fraction_mode)
