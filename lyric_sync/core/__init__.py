"""
Core module for lyric-sync.

This module provides the foundational components used throughout the application:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation
    - registry: Content-addressed registry of stored files
    - logger: Logging system with multiple outputs

Usage:
    from lyric_sync.core import (
        Config, load_config,
        HashRegistry, hash_file,
        setup_logging, get_logger,
        LyricSyncError, ConfigError
    )
"""

from lyric_sync.core.config import (
    Config,
    LyricsConfig,
    PlaybackConfig,
    StorageConfig,
    load_config,
)
from lyric_sync.core.exceptions import (
    ConfigError,
    DuplicateHashError,
    HashComputationError,
    LyricSyncError,
    StorageError,
    UploadError,
)
from lyric_sync.core.logger import (
    get_logger,
    log_duplicate_upload,
    setup_logging,
    shutdown_logging,
)
from lyric_sync.core.registry import (
    FileRecord,
    HashRegistry,
    compute_hash,
    hash_file,
)

__all__ = [
    # Config
    "Config",
    "StorageConfig",
    "LyricsConfig",
    "PlaybackConfig",
    "load_config",
    # Registry
    "FileRecord",
    "HashRegistry",
    "compute_hash",
    "hash_file",
    # Exceptions
    "LyricSyncError",
    "ConfigError",
    "HashComputationError",
    "DuplicateHashError",
    "StorageError",
    "UploadError",
    # Logger
    "setup_logging",
    "get_logger",
    "log_duplicate_upload",
    "shutdown_logging",
]
