# tests/test_cli.py
"""Test the command-line interface"""

import json
import pytest
from click.testing import CliRunner
from unittest.mock import patch

from lyric_sync import __version__
from lyric_sync.cli import cli

AUDIO_BYTES = b"ID3\x03\x00fake audio payload"
LYRICS_TEXT = "[00:01.50] hello\n[00:00.25] world\n"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def storage_dir(temp_dir):
    return temp_dir / "storage"


@pytest.fixture
def song(make_file):
    return make_file("song.mp3", AUDIO_BYTES), make_file("song.lrc", LYRICS_TEXT)


def _invoke(runner, *args):
    return runner.invoke(cli, [str(arg) for arg in args])


class TestCli:
    """Test CLI commands"""

    def test_version(self, runner):
        """Test --version"""
        result = _invoke(runner, "--version")
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_parse(self, runner, song):
        """Test parse prints lyrics as JSON"""
        result = _invoke(runner, "parse", song[1])
        assert result.exit_code == 0
        lines = json.loads(result.stdout)
        assert [line["text"] for line in lines] == ["world", "hello"]
        assert lines[0]["lineNumber"] == 2

    def test_parse_decimal(self, runner, make_file):
        """Test --decimal fraction reading"""
        path = make_file("short.lrc", "[00:01.5] x")
        result = _invoke(runner, "parse", path, "--decimal")
        assert json.loads(result.stdout)[0]["timestamp"] == pytest.approx(1.5)

    def test_upload_then_duplicate(self, runner, storage_dir, song, make_file):
        """Test upload output and duplicate detection across runs"""
        first = _invoke(runner, "--directory", storage_dir, "upload", *song)
        assert first.exit_code == 0, first.output
        payload = json.loads(first.stdout)
        assert payload["success"] is True
        assert payload["duplicateInfo"]["audio"] == {"isDuplicate": False}

        copy = make_file("copy.mp3", AUDIO_BYTES)
        second = _invoke(runner, "--directory", storage_dir, "upload", copy, song[1])
        assert second.exit_code == 0, second.output
        payload_again = json.loads(second.stdout)
        assert payload_again["audioUrl"] == payload["audioUrl"]
        assert payload_again["duplicateInfo"]["audio"]["isDuplicate"] is True
        # Original names are not persisted, the scan uses stored names
        assert payload_again["duplicateInfo"]["audio"]["originalName"] == \
            payload["audioUrl"].rsplit("/", 1)[1]

        assert len(list((storage_dir / "uploads").iterdir())) == 2

    def test_upload_rejected(self, runner, storage_dir, make_file):
        """Test rejected upload exit code"""
        result = _invoke(
            runner, "--directory", storage_dir, "upload",
            make_file("song.mp3", AUDIO_BYTES), make_file("song.txt", "nothing to see"),
        )
        assert result.exit_code == 3
        assert list((storage_dir / "uploads").iterdir()) == []

    def test_files(self, runner, storage_dir, song):
        """Test listing of stored files"""
        _invoke(runner, "--directory", storage_dir, "upload", *song)

        result = _invoke(runner, "--directory", storage_dir, "files")
        assert result.exit_code == 0
        listing = json.loads(result.stdout)
        assert listing["totalFiles"] == 2
        for entry in listing["files"]:
            assert entry["hash"].endswith("...")
            assert len(entry["hash"]) == 19

    def test_scan(self, runner, storage_dir, song):
        """Test scan reports registered files"""
        _invoke(runner, "--directory", storage_dir, "upload", *song)

        result = _invoke(runner, "--directory", storage_dir, "scan")
        assert result.exit_code == 0
        assert "Registered 2 stored files" in result.stdout

    def test_writes_logs(self, runner, storage_dir, song):
        """Test logs go to the storage directory"""
        _invoke(runner, "--directory", storage_dir, "upload", *song)
        assert list((storage_dir / "logs").glob("log_full_*.log"))

    def test_config_file(self, runner, temp_dir, storage_dir, song):
        """Test --config"""
        config_path = temp_dir / "config.yaml"
        config_path.write_text(f'storage:\n  directory: "{storage_dir}"\n', encoding="utf-8")

        result = _invoke(runner, "--config", config_path, "upload", *song)
        assert result.exit_code == 0
        assert (storage_dir / "uploads").is_dir()

    def test_missing_configuration(self, runner, temp_dir, song):
        """Test commands needing storage fail without configuration"""
        with runner.isolated_filesystem(temp_dir=temp_dir):
            result = _invoke(runner, "upload", *song)
        assert result.exit_code == 1

    def test_play(self, runner, song):
        """Test play builds a player for the parsed lyrics"""
        with patch("lyric_sync.cli.TerminalPlayer") as player_class:
            player_class.return_value.run.return_value = 2
            result = _invoke(runner, "play", song[1], "--start", "1", "--offset", "0.5")

        assert result.exit_code == 0, result.output
        lyrics, clock = player_class.call_args.args
        assert [line.text for line in lyrics] == ["world", "hello"]
        assert clock.position == pytest.approx(1.0)
        assert clock.offset == 0.5

    def test_play_without_lyrics_lines(self, runner, make_file):
        """Test play refuses a file with nothing to show"""
        result = _invoke(runner, "play", make_file("empty.lrc", "nothing"))
        assert result.exit_code == 4

    def test_play_negative_start(self, runner, song):
        """Test --start must not be negative"""
        with patch("lyric_sync.cli.TerminalPlayer") as player_class:
            result = _invoke(runner, "play", song[1], "--start", "-3")
        assert result.exit_code == 2
        player_class.assert_not_called()

    def test_play_nan_start(self, runner, song):
        """Test a NaN --start plays from the beginning"""
        with patch("lyric_sync.cli.TerminalPlayer") as player_class:
            player_class.return_value.run.return_value = 0
            result = _invoke(runner, "play", song[1], "--start", "nan")

        assert result.exit_code == 0, result.output
        _, clock = player_class.call_args.args
        assert clock.position == 0.0
