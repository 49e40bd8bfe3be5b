"""
Startup scan of the upload store.

The registry lives in memory only, so on every start the files already
stored are hashed again and registered. Stored names stand in for the
original names, which are not persisted.
"""

from pathlib import Path

from lyric_sync.core.exceptions import StorageError
from lyric_sync.core.logger import get_logger
from lyric_sync.core.progress import ScanProgressBar
from lyric_sync.core.registry import HashRegistry
from lyric_sync.utils import ensure_directory

logger = get_logger(__name__)


def list_stored_files(uploads_dir: Path) -> list[Path]:
    """
    Regular files directly inside the upload store, sorted by name.

    Raises:
        StorageError: If the directory cannot be listed.
    """
    try:
        return sorted(path for path in uploads_dir.iterdir() if path.is_file())
    except OSError as e:
        raise StorageError(
            f"Cannot list upload directory: {uploads_dir}",
            details={"path": str(uploads_dir), "original_error": str(e)}
        ) from e


def scan_upload_directory(
    registry: HashRegistry, uploads_dir: Path, show_progress: bool = False
) -> int:
    """
    Register every file already in the upload store.

    Args:
        registry: Registry to fill.
        uploads_dir: Upload store directory. Created if missing.
        show_progress: Display a progress bar while hashing.

    Returns:
        Number of newly registered files. Files with content already
        registered and unreadable files are not counted.

    Raises:
        StorageError: If the directory cannot be created or listed.
    """
    if not uploads_dir.exists():
        try:
            ensure_directory(uploads_dir)
        except OSError as e:
            raise StorageError(
                f"Cannot create upload directory: {uploads_dir}",
                details={"path": str(uploads_dir), "original_error": str(e)}
            ) from e
        logger.info(f"Created uploads directory: {uploads_dir}")
        return 0

    files = list_stored_files(uploads_dir)

    if show_progress and files:
        registered = 0
        with ScanProgressBar(total=len(files)) as progress:
            for path in files:
                count = registry.bulk_load([(path, path.name)])
                registered += count
                progress.update(registered=bool(count))
    else:
        registered = registry.bulk_load((path, path.name) for path in files)

    logger.info(f"Initialized file hash storage with {registered} existing files")
    return registered
