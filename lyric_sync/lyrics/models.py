"""
Data models for parsed lyrics.

Design Decisions:
    - LyricLine is frozen (immutable) once produced by the parser
    - ParsedLyrics is a tuple, so a parsed sequence cannot be reordered
      or extended after sorting
    - The wire format matches what clients of the upload flow expect:
      {"timestamp": 1.5, "text": "...", "lineNumber": 3}

Usage:
    from lyric_sync.lyrics.models import LyricLine, ParsedLyrics

    line = LyricLine(timestamp=1.5, text="hello", line_number=1)
    line.to_dict()  # {"timestamp": 1.5, "text": "hello", "lineNumber": 1}
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable


class FractionMode(Enum):
    """How the fraction digits of a [mm:ss.xx] tag become seconds."""

    HUNDREDTHS = "hundredths"
    DECIMAL = "decimal"


@dataclass(frozen=True)
class LyricLine:
    """
    One timestamped line of lyrics.

    Attributes:
        timestamp: Seconds from the start of the track (>= 0).
        text: Non-empty lyric text, trimmed.
        line_number: 1-based position of the line in the original file,
                     blank lines included. Used to break timestamp ties.
    """

    timestamp: float
    text: str
    line_number: int

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire format."""
        return {
            "timestamp": self.timestamp,
            "text": self.text,
            "lineNumber": self.line_number,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LyricLine":
        """Build a line from its wire format."""
        return cls(
            timestamp=float(data["timestamp"]),
            text=str(data["text"]),
            line_number=int(data["lineNumber"]),
        )


class ParsedLyrics(tuple):
    """
    Ordered, immutable sequence of LyricLine.

    Sorted ascending by timestamp; lines sharing a timestamp keep their
    original file order. May be empty.
    """

    def __new__(cls, lines: Iterable[LyricLine] = ()) -> "ParsedLyrics":
        return super().__new__(cls, lines)

    @property
    def timestamps(self) -> list[float]:
        return [line.timestamp for line in self]

    def to_list(self) -> list[dict[str, Any]]:
        """Serialize every line to the wire format."""
        return [line.to_dict() for line in self]

    @classmethod
    def from_list(cls, data: Iterable[dict[str, Any]]) -> "ParsedLyrics":
        """
        Rebuild a sequence from wire-format dicts.

        The input order is trusted; callers deserializing their own
        output get back the same sorted sequence.
        """
        return cls(LyricLine.from_dict(item) for item in data)

    def __repr__(self) -> str:
        return f"ParsedLyrics({list(self)!r})"
