"""Test configuration and fixtures"""

import pytest
import tempfile
from pathlib import Path

from lyric_sync.core.registry import HashRegistry


TAGGED_LYRICS = """[00:00.50] First line
[00:02.00] Second line

[00:01.25] Between
"""

PLAIN_LYRICS = """0.5 hi there
notanumber skip this
2 bye
"""


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def registry():
    """Fresh registry per test"""
    return HashRegistry()


@pytest.fixture
def uploads_dir(temp_dir):
    """Upload store location (not created)"""
    return temp_dir / "uploads"


@pytest.fixture
def source_dir(temp_dir):
    """Directory holding files 'uploaded' by a client"""
    path = temp_dir / "incoming"
    path.mkdir()
    return path


@pytest.fixture
def make_file(source_dir):
    """Write a file into the incoming directory and return its path"""
    def _make_file(name, content):
        path = source_dir / name
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_bytes(content)
        return path
    return _make_file


@pytest.fixture
def tagged_lyrics():
    return TAGGED_LYRICS


@pytest.fixture
def plain_lyrics():
    return PLAIN_LYRICS
