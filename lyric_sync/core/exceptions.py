"""
Exception classes for lyric-sync.

This module defines all custom exceptions used throughout the application.
Each exception carries a human-readable message plus an optional details
dictionary so callers can log context without parsing strings.

The lyrics parser and the playback synchronizer never raise: they degrade
to empty or partial results. Errors only surface from hashing (I/O),
registry misuse, configuration and the upload flow.

Exception Hierarchy:
    LyricSyncError (base)
        ConfigError - Configuration file issues
        HashComputationError - File bytes could not be read for hashing
        DuplicateHashError - Registration attempted for an existing digest
        StorageError - Upload store directory or file copy issues
        UploadError - Upload rejected (missing file, bad type, too large, no lyrics)
"""


class LyricSyncError(Exception):
    """
    Base exception for all lyric-sync errors.

    All custom exceptions in this project inherit from this class,
    allowing callers to catch all lyric-sync errors with a single
    except clause if desired.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g., paths, digests).

    Example:
        try:
            service.process(audio_path, lyrics_path)
        except LyricSyncError as e:
            logger.error(f"Upload failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description that will be shown to the user.
            details: Optional dictionary containing additional context about the error.
                     Common keys include:
                     - 'path': File path involved in the error
                     - 'digest': Content hash involved in the error
                     - 'original_error': The underlying exception if wrapping another error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(LyricSyncError):
    """
    Raised when there's an issue with the configuration file.

    This is a CRITICAL error that should stop program execution.

    Common causes:
        - config.yaml not found
        - config.yaml has invalid YAML syntax
        - Required section missing (storage)
        - Invalid field values (e.g., negative size limit, unknown fraction mode)

    Example:
        raise ConfigError(
            "'storage.directory' must be a non-empty string",
            details={'field': 'storage.directory'}
        )
    """
    pass


class HashComputationError(LyricSyncError):
    """
    Raised when the bytes of a file cannot be read for hashing.

    Propagated to the caller during uploads. During the startup scan the
    file is logged and skipped instead, so one unreadable file never aborts
    the load.

    Example:
        raise HashComputationError(
            "Cannot read file for hashing: uploads/123-song.mp3",
            details={'path': 'uploads/123-song.mp3', 'original_error': 'Permission denied'}
        )
    """
    pass


class DuplicateHashError(LyricSyncError):
    """
    Raised when registering a digest that the registry already holds.

    Callers are expected to look up a digest before registering it, or to
    use HashRegistry.register_if_absent(), so this error indicates a logic
    bug in the caller rather than a user-facing condition.

    Attributes:
        digest: The content hash that was already registered.
    """

    def __init__(self, digest: str, existing_name: str) -> None:
        super().__init__(
            f"Content hash already registered for {existing_name}",
            details={"digest": digest, "existing_file": existing_name}
        )
        self.digest = digest


class StorageError(LyricSyncError):
    """
    Raised when the upload store cannot be read or written.

    Common causes:
        - Upload directory cannot be created (permissions)
        - Copying an uploaded file into the store failed
        - A stored lyrics file disappeared or is unreadable
    """
    pass


class UploadError(LyricSyncError):
    """
    Raised when an upload is rejected.

    The message is meant to be shown to the user as-is.

    Common causes:
        - Audio or lyrics file missing
        - Unsupported file extension
        - File larger than the configured limit
        - Lyrics file contains no parseable timestamped line

    Example:
        raise UploadError(
            "Missing files: audio",
            details={'missing': ['audio']}
        )
    """
    pass
