"""
lyric-sync: Play lyrics in sync with audio.

This package accepts an audio file and a matching lyrics file, stores each
distinct file content once, parses the lyrics into timestamped lines and
resolves the active line for a playback position.

Architecture:
    core/       - Configuration, content-hash registry, logging, exceptions
    lyrics/     - Lyric line models and the tag/plain format parser
    playback/   - Active line synchronizer, playback clock, terminal player
    storage/    - Startup scan of the upload store and the upload flow
    utils/      - Filename and time formatting helpers
    cli.py      - Command-line interface

Usage:
    Command Line:
        lyric-sync upload song.mp3 song.lrc
        lyric-sync parse song.lrc
        lyric-sync play song.lrc --audio song.mp3
        lyric-sync files

    Python API:
        from lyric_sync import HashRegistry, UploadService, parse_lyrics
        from lyric_sync.playback import PlaybackSynchronizer

        registry = HashRegistry()
        scan_upload_directory(registry, uploads_dir)
        result = UploadService(registry, uploads_dir).process(audio, lyrics)

        synchronizer = PlaybackSynchronizer(result.lyrics)
        update = synchronizer.advance(result.lyrics, current_time)

Configuration:
    Optional config.yaml in the current directory:

        storage:
          directory: "~/LyricSync"
        lyrics:
          fraction_mode: "hundredths"

Dependencies:
    - click / rich-click: CLI framework and colors
    - rich: Progress bar and terminal player output
    - tqdm: Progress-bar safe console logging
    - pyyaml: Configuration file parsing
    - mutagen: Audio duration for playback
"""

__version__ = "0.1.0"
__author__ = "lyric-sync"
__license__ = "MIT"

# Convenience imports for common usage
from lyric_sync.core import (
    Config,
    ConfigError,
    DuplicateHashError,
    FileRecord,
    HashComputationError,
    HashRegistry,
    LyricSyncError,
    StorageError,
    UploadError,
    get_logger,
    load_config,
    setup_logging,
)
from lyric_sync.lyrics import FractionMode, LyricLine, ParsedLyrics, parse_lyrics
from lyric_sync.playback import PlaybackSynchronizer
from lyric_sync.storage import UploadService, scan_upload_directory

__all__ = [
    # Version
    "__version__",
    # Core
    "Config",
    "load_config",
    "HashRegistry",
    "FileRecord",
    "setup_logging",
    "get_logger",
    # Exceptions
    "LyricSyncError",
    "ConfigError",
    "HashComputationError",
    "DuplicateHashError",
    "StorageError",
    "UploadError",
    # Lyrics
    "FractionMode",
    "LyricLine",
    "ParsedLyrics",
    "parse_lyrics",
    # Playback
    "PlaybackSynchronizer",
    # Storage
    "UploadService",
    "scan_upload_directory",
]
