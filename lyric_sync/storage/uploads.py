"""
Upload handling for lyric-sync.

Accepts an audio file and a lyrics file, stores them in the upload store
under generated names, and deduplicates them by content: when the same
bytes were already stored, the new copy is deleted and the existing file
is reused. The lyrics are parsed and returned with the audio URL, in the
same shape a web client expects.

Flow:
    1. Both files present, allowed extensions, within the size limit
    2. Copy each into the store as '<epoch millis>-<sanitized name>'
    3. Hash each stored copy
    4. Parse the lyrics; no usable line rejects the whole upload
    5. register_if_absent() each digest; a known digest drops the new copy

Nothing is registered for a rejected upload and its copies are removed.

Usage:
    service = UploadService(registry, config.storage.uploads_directory)
    result = service.process(Path("song.mp3"), Path("song.lrc"))
    print(result.audio_url)         # /uploads/1718035200000-song.mp3
"""

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lyric_sync.core.exceptions import HashComputationError, StorageError, UploadError
from lyric_sync.core.logger import get_logger, log_duplicate_upload
from lyric_sync.core.registry import FileRecord, HashRegistry, hash_file
from lyric_sync.lyrics.models import FractionMode, ParsedLyrics
from lyric_sync.lyrics.parser import parse_lyrics_file
from lyric_sync.utils import ensure_directory, generate_stored_name

logger = get_logger(__name__)


AUDIO_EXTENSIONS = frozenset({".mp3", ".wav", ".ogg", ".m4a", ".mp4", ".aac", ".webm"})
LYRICS_EXTENSIONS = frozenset({".txt", ".lrc", ".json"})

UPLOADS_URL_PREFIX = "/uploads"

DEFAULT_MAX_FILE_SIZE = 50 * 1024 * 1024


@dataclass(frozen=True)
class DuplicateInfo:
    """
    Whether an uploaded file was resolved to an already stored one.

    The other fields describe the reused file and are only set for duplicates.
    """

    is_duplicate: bool
    original_file: str | None = None
    original_name: str | None = None
    upload_date: str | None = None

    @classmethod
    def from_record(cls, record: FileRecord) -> "DuplicateInfo":
        return cls(
            is_duplicate=True,
            original_file=record.stored_name,
            original_name=record.original_name,
            upload_date=record.registered_at,
        )

    def to_dict(self) -> dict[str, Any]:
        if not self.is_duplicate:
            return {"isDuplicate": False}
        return {
            "isDuplicate": True,
            "originalFile": self.original_file,
            "originalName": self.original_name,
            "uploadDate": self.upload_date,
        }


@dataclass(frozen=True)
class UploadResult:
    """
    Outcome of an accepted upload.

    Attributes:
        audio_record: Registry record of the audio now in use.
        lyrics_record: Registry record of the lyrics now in use.
        lyrics: Parsed lyrics, never empty.
        audio_duplicate: Duplicate information for the audio file.
        lyrics_duplicate: Duplicate information for the lyrics file.
    """

    audio_record: FileRecord
    lyrics_record: FileRecord
    lyrics: ParsedLyrics
    audio_duplicate: DuplicateInfo
    lyrics_duplicate: DuplicateInfo

    @property
    def audio_url(self) -> str:
        return f"{UPLOADS_URL_PREFIX}/{self.audio_record.stored_name}"

    def to_dict(self) -> dict[str, Any]:
        """Response payload for a client."""
        return {
            "success": True,
            "audioUrl": self.audio_url,
            "lyrics": self.lyrics.to_list(),
            "message": "Files processed successfully",
            "duplicateInfo": {
                "audio": self.audio_duplicate.to_dict(),
                "lyrics": self.lyrics_duplicate.to_dict(),
            },
        }


@dataclass(frozen=True)
class _StoredUpload:
    kind: str
    original_name: str
    path: Path
    digest: str


class UploadService:
    """
    Stores, deduplicates and parses uploads against a shared registry.

    Attributes:
        registry: Registry shared with the startup scan.
        uploads_dir: Upload store directory.
        max_file_size: Size limit per file, in bytes.
        fraction_mode: How lyrics tag fractions are read.
    """

    def __init__(
        self,
        registry: HashRegistry,
        uploads_dir: Path,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        fraction_mode: FractionMode = FractionMode.HUNDREDTHS,
    ) -> None:
        self.registry = registry
        self.uploads_dir = uploads_dir
        self.max_file_size = max_file_size
        self.fraction_mode = fraction_mode

    def process(
        self,
        audio_path: Path | None,
        lyrics_path: Path | None,
        audio_name: str | None = None,
        lyrics_name: str | None = None,
    ) -> UploadResult:
        """
        Handle one audio + lyrics upload.

        Args:
            audio_path: Uploaded audio file.
            lyrics_path: Uploaded lyrics file.
            audio_name: Name the audio was uploaded under (defaults to its filename).
            lyrics_name: Name the lyrics were uploaded under (defaults to its filename).

        Returns:
            UploadResult with the audio URL, parsed lyrics and duplicate info.

        Raises:
            UploadError: Missing file, unsupported type, too large, or no
                         usable lyrics line.
            HashComputationError: A stored copy could not be read back.
            StorageError: The upload store could not be written or read.
        """
        logger.info("Upload request received")

        missing = [
            kind for kind, path in (("audio", audio_path), ("lyrics", lyrics_path))
            if path is None or not Path(path).is_file()
        ]
        if missing:
            raise UploadError(
                f"Missing files: {', '.join(missing)}",
                details={"missing": missing}
            )

        audio_path = Path(audio_path)
        lyrics_path = Path(lyrics_path)
        audio_name = audio_name or audio_path.name
        lyrics_name = lyrics_name or lyrics_path.name

        self._validate(audio_path, audio_name, "audio", AUDIO_EXTENSIONS)
        self._validate(lyrics_path, lyrics_name, "lyrics", LYRICS_EXTENSIONS)

        try:
            ensure_directory(self.uploads_dir)
        except OSError as e:
            raise StorageError(
                f"Cannot create upload directory: {self.uploads_dir}",
                details={"path": str(self.uploads_dir), "original_error": str(e)}
            ) from e

        stored: list[Path] = []
        try:
            audio = self._store(audio_path, audio_name, "audio", stored)
            lyrics_upload = self._store(lyrics_path, lyrics_name, "lyrics", stored)

            lyrics = parse_lyrics_file(lyrics_upload.path, self.fraction_mode)
            logger.info(f"Parsed lyrics data: {len(lyrics)} lines")
            if not lyrics:
                raise UploadError(
                    "No timestamped lyrics found. Use [mm:ss.xx] tags or "
                    "'<seconds> <text>' lines.",
                    details={"lyrics_file": lyrics_name}
                )
        except (UploadError, StorageError, HashComputationError):
            self._discard(stored)
            raise

        audio_record, audio_duplicate = self._register(audio)
        lyrics_record, lyrics_duplicate = self._register(lyrics_upload)

        return UploadResult(
            audio_record=audio_record,
            lyrics_record=lyrics_record,
            lyrics=lyrics,
            audio_duplicate=audio_duplicate,
            lyrics_duplicate=lyrics_duplicate,
        )

    def _validate(self, path: Path, name: str, kind: str, extensions: frozenset[str]) -> None:
        extension = Path(name).suffix.lower()
        if extension not in extensions:
            logger.info(f"Rejected {kind} file type: {name}")
            raise UploadError(
                f"Unsupported {kind} format: {extension or name}. "
                f"Please use {', '.join(sorted(e.lstrip('.').upper() for e in extensions))}.",
                details={"kind": kind, "file": name}
            )

        size = path.stat().st_size
        if size > self.max_file_size:
            raise UploadError(
                f"File too large. Maximum size is {self.max_file_size // (1024 * 1024)}MB.",
                details={"kind": kind, "file": name, "size": size}
            )

    def _unique_destination(self, original_name: str) -> Path:
        destination = self.uploads_dir / generate_stored_name(original_name)
        counter = 1
        while destination.exists():
            destination = destination.with_name(f"{destination.stem}-{counter}{destination.suffix}")
            counter += 1
        return destination

    def _store(
        self, source: Path, original_name: str, kind: str, stored: list[Path]
    ) -> _StoredUpload:
        destination = self._unique_destination(original_name)
        try:
            shutil.copyfile(source, destination)
        except OSError as e:
            raise StorageError(
                f"Failed to store {kind} file: {e}",
                details={"kind": kind, "path": str(destination), "original_error": str(e)}
            ) from e

        stored.append(destination)

        upload = _StoredUpload(
            kind=kind, original_name=original_name, path=destination,
            digest=hash_file(destination),
        )
        logger.debug(f"Stored {kind} file {original_name} as {destination.name}")
        return upload

    def _register(self, upload: _StoredUpload) -> tuple[FileRecord, DuplicateInfo]:
        record, created = self.registry.register_if_absent(
            upload.digest, upload.path.name, upload.original_name
        )
        if created:
            return record, DuplicateInfo(is_duplicate=False)

        log_duplicate_upload(
            logger, upload.kind, upload.original_name, record.stored_name, upload.digest
        )
        self._remove(upload.path)
        return record, DuplicateInfo.from_record(record)

    def _discard(self, stored: list[Path]) -> None:
        for path in stored:
            self._remove(path)

    def _remove(self, path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove {path.name}: {e}")
