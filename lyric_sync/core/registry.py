"""
Content-addressed file registry for lyric-sync.

Each distinct file content is stored once. The registry maps the SHA-256
digest of a file's exact bytes to the FileRecord of the stored copy, so a
re-upload of identical content under another name resolves to the file
that is already stored.

Lifecycle:
    The registry is an in-memory object owned by whoever composes the
    application (the CLI). It is filled at startup by scanning the upload
    store (bulk_load) and extended by each accepted upload. Nothing is
    persisted besides the stored files themselves.

Thread Safety:
    lookup, register and register_if_absent share one lock. Concurrent
    uploads must use register_if_absent, which performs the check and the
    insert as a single step, so two uploads of the same content can never
    both register.

Usage:
    registry = HashRegistry()
    digest = hash_file(stored_path)

    record, created = registry.register_if_absent(digest, stored_path.name, "song.mp3")
    if not created:
        stored_path.unlink()  # Reuse record.stored_name instead
"""

import hashlib
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from lyric_sync.core.exceptions import DuplicateHashError, HashComputationError
from lyric_sync.core.logger import get_logger

logger = get_logger(__name__)


HASH_ALGORITHM = "sha256"
SHORT_HASH_LENGTH = 16

_READ_CHUNK_SIZE = 1024 * 1024


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def compute_hash(data: bytes) -> str:
    """
    Hash exact file bytes.

    Args:
        data: The file content.

    Returns:
        Lowercase hex SHA-256 digest (64 characters).
    """
    return hashlib.new(HASH_ALGORITHM, data).hexdigest()


def hash_file(path: Path) -> str:
    """
    Hash a file's content, reading it in chunks.

    Args:
        path: File to hash.

    Returns:
        Lowercase hex SHA-256 digest (64 characters).

    Raises:
        HashComputationError: If the file cannot be opened or read.
    """
    hasher = hashlib.new(HASH_ALGORITHM)
    try:
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(_READ_CHUNK_SIZE), b""):
                hasher.update(chunk)
    except OSError as e:
        raise HashComputationError(
            f"Cannot read file for hashing: {path}",
            details={"path": str(path), "original_error": str(e)}
        ) from e
    return hasher.hexdigest()


@dataclass(frozen=True)
class FileRecord:
    """
    A stored file, identified by its content hash.

    Created once per distinct digest and never modified.

    Attributes:
        content_hash: Hex SHA-256 digest of the stored bytes.
        stored_name: Generated filename inside the upload store.
        original_name: Filename the content was first uploaded under.
                       Files found by the startup scan use their stored name.
        registered_at: ISO-8601 timestamp of the upload (or file mtime for
                       files found by the startup scan).
    """

    content_hash: str
    stored_name: str
    original_name: str
    registered_at: str

    @property
    def short_hash(self) -> str:
        """Truncated digest for listings."""
        return self.content_hash[:SHORT_HASH_LENGTH] + "..."

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the full digest."""
        return {
            "hash": self.content_hash,
            "filename": self.stored_name,
            "originalName": self.original_name,
            "uploadDate": self.registered_at,
        }

    def to_listing_dict(self) -> dict[str, Any]:
        """Serialize with the digest truncated, for display."""
        data = self.to_dict()
        data["hash"] = self.short_hash
        return data


class HashRegistry:
    """
    In-memory mapping from content hash to FileRecord.

    Keys are unique. Create one instance per process (or per test) and pass
    it to the startup scan and the upload flow.
    """

    def __init__(self) -> None:
        self._records: dict[str, FileRecord] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, digest: object) -> bool:
        return digest in self._records

    def lookup(self, digest: str) -> FileRecord | None:
        """Return the record stored for a digest, or None."""
        with self._lock:
            return self._records.get(digest)

    def register(
        self,
        digest: str,
        stored_name: str,
        original_name: str,
        registered_at: str | None = None,
    ) -> FileRecord:
        """
        Insert a new record.

        Raises:
            DuplicateHashError: If the digest is already registered.
                                Use lookup() first, or register_if_absent().
        """
        with self._lock:
            existing = self._records.get(digest)
            if existing is not None:
                raise DuplicateHashError(digest, existing.stored_name)
            return self._insert(digest, stored_name, original_name, registered_at)

    def register_if_absent(
        self,
        digest: str,
        stored_name: str,
        original_name: str,
        registered_at: str | None = None,
    ) -> tuple[FileRecord, bool]:
        """
        Insert a record unless the digest is known, as one atomic step.

        Returns:
            (record, created): the new record and True, or the existing
            record and False.
        """
        with self._lock:
            existing = self._records.get(digest)
            if existing is not None:
                logger.info(
                    f"Duplicate detected! Hash: {digest}, Existing file: {existing.stored_name}"
                )
                return existing, False
            return self._insert(digest, stored_name, original_name, registered_at), True

    def _insert(
        self,
        digest: str,
        stored_name: str,
        original_name: str,
        registered_at: str | None,
    ) -> FileRecord:
        # Caller holds self._lock
        record = FileRecord(
            content_hash=digest,
            stored_name=stored_name,
            original_name=original_name,
            registered_at=registered_at or _now_iso(),
        )
        self._records[digest] = record
        logger.debug(f"Registered new file: {stored_name} (hash: {digest})")
        return record

    def bulk_load(self, existing_files: Iterable[tuple[bytes | Path, str]]) -> int:
        """
        Register files already present in storage.

        Args:
            existing_files: (content, stored_name) pairs where content is
                            either the file bytes or a path to hash.

        Returns:
            Number of newly registered records.

        Behavior:
            - Content already registered is skipped, so duplicates lying
              in storage keep the first record seen
            - An unreadable file is logged and skipped; the load goes on
            - The stored name doubles as the original name
            - Path entries use the file modification time as registration
              time, byte entries the current time
        """
        registered = 0

        for content, stored_name in existing_files:
            registered_at = None
            try:
                if isinstance(content, (bytes, bytearray, memoryview)):
                    digest = compute_hash(bytes(content))
                else:
                    digest = hash_file(content)
                    registered_at = _mtime_iso(content)
            except HashComputationError as e:
                logger.warning(f"Skipping unreadable file {stored_name}: {e.message}")
                continue

            _, created = self.register_if_absent(
                digest, stored_name, stored_name, registered_at
            )
            if created:
                registered += 1

        return registered

    def records(self) -> list[FileRecord]:
        """Every registered record (order not significant)."""
        with self._lock:
            return list(self._records.values())


def _mtime_iso(path: Path) -> str | None:
    try:
        mtime = Path(path).stat().st_mtime
    except OSError:
        return None
    return datetime.fromtimestamp(mtime, tz=timezone.utc).isoformat()
