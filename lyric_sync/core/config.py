"""
Configuration management for lyric-sync.

This module handles loading, validating, and providing access to the
application configuration stored in config.yaml.

The configuration file contains:
    - Storage directory holding the upload store and logs
    - Maximum accepted upload size
    - How fractional seconds in [mm:ss.xx] tags are read
    - Tick interval used by the terminal player

Configuration File Location:
    The config.yaml file is looked up in the current working directory
    unless an explicit path is given.

Example config.yaml:
    storage:
      directory: "~/LyricSync"
      max_file_size_mb: 50

    lyrics:
      fraction_mode: "hundredths"   # or "decimal"

    playback:
      tick_interval: 0.05
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from lyric_sync.core.exceptions import ConfigError
from lyric_sync.lyrics.models import FractionMode


# Default configuration file name (always in current working directory)
CONFIG_FILENAME = "config.yaml"

# Name of the upload store inside the storage directory
UPLOADS_DIRNAME = "uploads"

DEFAULT_MAX_FILE_SIZE_MB = 50
DEFAULT_TICK_INTERVAL = 0.05


@dataclass(frozen=True)
class StorageConfig:
    """
    Storage configuration.

    Attributes:
        directory: Absolute path of the application directory.
                   Path expansion is performed (~ is expanded to home directory).
        max_file_size: Maximum accepted upload size in bytes.
    """
    directory: Path
    max_file_size: int

    @property
    def uploads_directory(self) -> Path:
        """Directory holding stored uploads, keyed by generated filenames."""
        return self.directory / UPLOADS_DIRNAME


@dataclass(frozen=True)
class LyricsConfig:
    """
    Lyrics parsing configuration.

    Attributes:
        fraction_mode: How the digits after the dot in a [mm:ss.xx] tag
                       are converted to seconds. HUNDREDTHS keeps the
                       historical reading (digits / 100), DECIMAL reads
                       them as a decimal fraction.
    """
    fraction_mode: FractionMode


@dataclass(frozen=True)
class PlaybackConfig:
    """
    Terminal playback configuration.

    Attributes:
        tick_interval: Seconds to sleep between synchronizer ticks.
    """
    tick_interval: float


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Created by load_config() or Config.default() and treated as immutable.

    Example:
        config = load_config()
        print(f"Uploads in: {config.storage.uploads_directory}")
    """
    storage: StorageConfig
    lyrics: LyricsConfig
    playback: PlaybackConfig

    @classmethod
    def default(cls, directory: Path) -> "Config":
        """Build a configuration with every optional value at its default."""
        return cls(
            storage=StorageConfig(
                directory=Path(directory).expanduser().resolve(),
                max_file_size=DEFAULT_MAX_FILE_SIZE_MB * 1024 * 1024,
            ),
            lyrics=LyricsConfig(fraction_mode=FractionMode.HUNDREDTHS),
            playback=PlaybackConfig(tick_interval=DEFAULT_TICK_INTERVAL),
        )


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration from config.yaml.

    Args:
        config_path: Optional explicit path to config file.
                     If None, looks for config.yaml in current working directory.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If the config file is not found, has invalid YAML syntax,
                     is missing required fields, or contains invalid values.

    Behavior:
        1. Locate config file (explicit path or CWD/config.yaml)
        2. Read and parse YAML content
        3. Validate structure (storage section exists)
        4. Parse each section, applying defaults for optional ones
        5. Create and return frozen Config object
    """
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME

    if not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            details={"file_path": str(config_path)}
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except IOError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    _validate_config(raw_config)

    return Config(
        storage=_parse_storage_config(raw_config["storage"]),
        lyrics=_parse_lyrics_config(raw_config.get("lyrics")),
        playback=_parse_playback_config(raw_config.get("playback")),
    )


def _validate_config(raw_config: dict[str, Any]) -> None:
    """
    Check the required sections exist and that every present section is a mapping.

    Raises:
        ConfigError: If validation fails.
    """
    if "storage" not in raw_config:
        raise ConfigError(
            "Missing required section: 'storage'",
            details={"missing_section": "storage"}
        )

    for section in ("storage", "lyrics", "playback"):
        if section in raw_config and raw_config[section] is not None \
                and not isinstance(raw_config[section], dict):
            raise ConfigError(
                f"Section '{section}' must be a dictionary",
                details={"section": section}
            )

    if raw_config["storage"] is None:
        raise ConfigError(
            "Section 'storage' must be a dictionary",
            details={"section": "storage"}
        )


def _parse_storage_config(storage_section: dict[str, Any]) -> StorageConfig:
    """
    Parse and validate the storage configuration section.

    Expands ~ to home directory and converts to absolute Path.
    Does NOT create the directory (that happens at scan time).

    Raises:
        ConfigError: If directory is missing or the size limit is invalid.
    """
    directory = storage_section.get("directory", "")

    if not isinstance(directory, str) or not directory.strip():
        raise ConfigError(
            "'storage.directory' must be a non-empty string",
            details={"field": "storage.directory"}
        )

    path = Path(directory.strip()).expanduser().resolve()

    max_size_mb = storage_section.get("max_file_size_mb", DEFAULT_MAX_FILE_SIZE_MB)
    # bool is an int subclass
    if isinstance(max_size_mb, bool) or not isinstance(max_size_mb, int) or max_size_mb < 1:
        raise ConfigError(
            "'storage.max_file_size_mb' must be a positive integer",
            details={"field": "storage.max_file_size_mb", "value": max_size_mb}
        )

    return StorageConfig(directory=path, max_file_size=max_size_mb * 1024 * 1024)


def _parse_lyrics_config(lyrics_section: dict[str, Any] | None) -> LyricsConfig:
    """
    Parse the optional lyrics section. Default fraction mode: hundredths.

    Raises:
        ConfigError: If fraction_mode is not one of the known modes.
    """
    fraction_mode = FractionMode.HUNDREDTHS

    if lyrics_section is not None:
        raw_mode = lyrics_section.get("fraction_mode")
        if raw_mode is not None:
            try:
                fraction_mode = FractionMode(str(raw_mode).strip().lower())
            except ValueError as e:
                raise ConfigError(
                    f"'lyrics.fraction_mode' must be one of: "
                    f"{', '.join(m.value for m in FractionMode)}",
                    details={"field": "lyrics.fraction_mode", "value": raw_mode}
                ) from e

    return LyricsConfig(fraction_mode=fraction_mode)


def _parse_playback_config(playback_section: dict[str, Any] | None) -> PlaybackConfig:
    """
    Parse the optional playback section.

    Raises:
        ConfigError: If tick_interval is not a positive number.
    """
    tick_interval = DEFAULT_TICK_INTERVAL

    if playback_section is not None:
        raw_interval = playback_section.get("tick_interval")
        if raw_interval is not None:
            if isinstance(raw_interval, bool) or not isinstance(raw_interval, (int, float)) \
                    or raw_interval <= 0:
                raise ConfigError(
                    "'playback.tick_interval' must be a positive number",
                    details={"field": "playback.tick_interval", "value": raw_interval}
                )
            tick_interval = float(raw_interval)

    return PlaybackConfig(tick_interval=tick_interval)
