"""
Storage module for lyric-sync.

    - scanner: Registers the files already in the upload store at startup
    - uploads: Stores, deduplicates and parses new uploads

Usage:
    from lyric_sync.storage import UploadService, scan_upload_directory

    registry = HashRegistry()
    scan_upload_directory(registry, uploads_dir)
    result = UploadService(registry, uploads_dir).process(audio, lyrics)
"""

from lyric_sync.storage.scanner import list_stored_files, scan_upload_directory
from lyric_sync.storage.uploads import (
    AUDIO_EXTENSIONS,
    LYRICS_EXTENSIONS,
    DuplicateInfo,
    UploadResult,
    UploadService,
)

__all__ = [
    "list_stored_files",
    "scan_upload_directory",
    "AUDIO_EXTENSIONS",
    "LYRICS_EXTENSIONS",
    "DuplicateInfo",
    "UploadResult",
    "UploadService",
]
