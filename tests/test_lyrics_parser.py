# tests/test_lyrics_parser.py
"""Test lyrics parsing"""

import pytest
from dataclasses import FrozenInstanceError

from lyric_sync.core.exceptions import StorageError
from lyric_sync.lyrics import (
    FractionMode,
    LyricLine,
    ParsedLyrics,
    parse_lyrics,
    parse_lyrics_file
)


def _summary(lyrics):
    return [(line.timestamp, line.text, line.line_number) for line in lyrics]


class TestTagFormat:
    """Test [mm:ss.xx] tag parsing"""

    def test_sorted_by_timestamp(self):
        """Test lines are returned in timestamp order"""
        lyrics = parse_lyrics("[00:01.50] hello\n[00:00.25] world")

        assert [line.text for line in lyrics] == ["world", "hello"]
        assert lyrics.timestamps == pytest.approx([0.25, 1.5])
        assert [line.line_number for line in lyrics] == [2, 1]

    def test_fixture_file(self, tagged_lyrics):
        """Test blank lines are counted in line numbers"""
        lyrics = parse_lyrics(tagged_lyrics)

        assert [line.text for line in lyrics] == ["First line", "Between", "Second line"]
        assert [line.line_number for line in lyrics] == [1, 4, 2]

    def test_equal_timestamps_keep_file_order(self):
        """Test sort stability"""
        lyrics = parse_lyrics("[00:02.00] b1\n[00:01.00] a\n[00:02.00] b2")
        assert [line.text for line in lyrics] == ["a", "b1", "b2"]

    def test_minutes_above_an_hour(self):
        """Test minutes are not capped"""
        lyrics = parse_lyrics("[61:00.00] late")
        assert lyrics[0].timestamp == pytest.approx(3660.0)

    def test_tag_found_anywhere_in_line(self):
        """Test text before a tag is dropped"""
        lyrics = parse_lyrics("intro [00:04.00] later")
        assert _summary(lyrics) == [(pytest.approx(4.0), "later", 1)]

    def test_untagged_lines_dropped_in_tag_mode(self):
        """Test a single tag switches the whole file to tag format"""
        lyrics = parse_lyrics("[00:01.00] a\n5 plain line\nno timestamp")
        assert [line.text for line in lyrics] == ["a"]

    def test_empty_text_tag_still_selects_tag_mode(self):
        """Test a tag without text yields nothing but blocks the fallback"""
        assert len(parse_lyrics("[00:01.00]\n5 plain line")) == 0

    def test_crlf_line_endings(self):
        """Test carriage returns are trimmed"""
        lyrics = parse_lyrics("[00:01.00] a\r\n[00:02.00] b\r\n")
        assert [line.text for line in lyrics] == ["a", "b"]

    def test_text_is_trimmed(self):
        """Test surrounding whitespace is removed"""
        lyrics = parse_lyrics("   [00:01.00]    spaced out   ")
        assert lyrics[0].text == "spaced out"


class TestFractionModes:
    """Test fraction digit interpretation"""

    def test_hundredths_is_default(self):
        """Test historical reading of the fraction digits"""
        assert parse_lyrics("[00:01.5] x")[0].timestamp == pytest.approx(1.05)
        assert parse_lyrics("[00:01.50] x")[0].timestamp == pytest.approx(1.5)
        assert parse_lyrics("[00:01.500] x")[0].timestamp == pytest.approx(6.0)

    def test_decimal_mode(self):
        """Test fraction digits read as a decimal fraction"""
        for tag in ("[00:01.5] x", "[00:01.50] x", "[00:01.500] x"):
            lyrics = parse_lyrics(tag, FractionMode.DECIMAL)
            assert lyrics[0].timestamp == pytest.approx(1.5)


class TestPlainFormat:
    """Test '<seconds> <text>' fallback parsing"""

    def test_fixture_file(self, plain_lyrics):
        """Test non-numeric lines are skipped"""
        lyrics = parse_lyrics(plain_lyrics)
        assert _summary(lyrics) == [
            (pytest.approx(0.5), "hi there", 1),
            (pytest.approx(2.0), "bye", 3),
        ]

    def test_whitespace_collapsed(self):
        """Test text tokens are joined by single spaces"""
        lyrics = parse_lyrics("1   hello \t   world")
        assert lyrics[0].text == "hello world"

    def test_single_token_lines_skipped(self):
        """Test a timestamp alone is not a line"""
        lyrics = parse_lyrics("5\n6 six")
        assert [line.text for line in lyrics] == ["six"]

    def test_lenient_numbers(self):
        """Test numeric prefixes, exponents and rejected values"""
        content = "-1 negative\n1e1 ten\n3s three\ninf infinite\nnan missing\n1e999 huge"
        lyrics = parse_lyrics(content)
        assert _summary(lyrics) == [
            (pytest.approx(3.0), "three", 3),
            (pytest.approx(10.0), "ten", 2),
        ]

    def test_result_is_sorted(self):
        """Test fallback lines are sorted too"""
        lyrics = parse_lyrics("9 c\n1 a\n4.5 b\n1 a2")
        assert [line.text for line in lyrics] == ["a", "a2", "b", "c"]
        assert lyrics.timestamps == sorted(lyrics.timestamps)


class TestEmptyInput:
    """Test inputs with nothing to parse"""

    @pytest.mark.parametrize("content", ["", "   \n\t\n", "just words\nmore words"])
    def test_empty_result(self, content):
        """Test no usable line gives an empty sequence"""
        lyrics = parse_lyrics(content)
        assert isinstance(lyrics, ParsedLyrics)
        assert len(lyrics) == 0
        assert lyrics.to_list() == []


class TestParseLyricsFile:
    """Test reading lyrics from disk"""

    def test_reads_file(self, temp_dir, tagged_lyrics):
        """Test file content is parsed"""
        path = temp_dir / "song.lrc"
        path.write_text(tagged_lyrics, encoding="utf-8")
        assert len(parse_lyrics_file(path)) == 3

    def test_invalid_utf8_replaced(self, temp_dir):
        """Test undecodable bytes do not fail the parse"""
        path = temp_dir / "broken.lrc"
        path.write_bytes(b"[00:01.00] caf\xe9\n")
        lyrics = parse_lyrics_file(path)
        assert lyrics[0].text == "caf\ufffd"

    def test_missing_file(self, temp_dir):
        """Test unreadable file raises StorageError"""
        with pytest.raises(StorageError) as exc_info:
            parse_lyrics_file(temp_dir / "missing.lrc")
        assert "path" in exc_info.value.details


class TestModels:
    """Test lyrics data models"""

    def test_line_wire_format(self):
        """Test LyricLine serialization keys"""
        line = LyricLine(timestamp=1.5, text="hello", line_number=3)
        assert line.to_dict() == {"timestamp": 1.5, "text": "hello", "lineNumber": 3}
        assert LyricLine.from_dict(line.to_dict()) == line

    def test_line_is_frozen(self):
        """Test LyricLine cannot be modified"""
        line = LyricLine(timestamp=1.5, text="hello", line_number=3)
        with pytest.raises(FrozenInstanceError):
            line.text = "other"

    def test_parsed_lyrics_is_tuple(self):
        """Test ParsedLyrics behaves as an immutable sequence"""
        lyrics = parse_lyrics("[00:01.00] a\n[00:02.00] b")
        assert isinstance(lyrics, tuple)
        assert lyrics[1].text == "b"
        with pytest.raises(TypeError):
            lyrics[0] = lyrics[1]

    def test_from_list(self):
        """Test rebuilding from wire format"""
        lyrics = parse_lyrics("[00:01.00] a\n[00:02.00] b")
        rebuilt = ParsedLyrics.from_list(lyrics.to_list())
        assert rebuilt == lyrics
        assert isinstance(rebuilt, ParsedLyrics)
