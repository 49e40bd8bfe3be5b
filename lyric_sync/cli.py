"""
Command-line interface for lyric-sync.

This module implements the CLI using Click, with rich-click for the
help output colors. The CLI is the composition root: it builds the one
HashRegistry of the process, fills it from the upload store and hands it
to the upload flow.

Commands:
    lyric-sync scan                          Register files already stored
    lyric-sync files                         List registered files
    lyric-sync upload <audio> <lyrics>       Store, deduplicate and parse an upload
    lyric-sync parse <lyrics>                Print parsed lyrics as JSON
    lyric-sync play <lyrics> [--audio FILE]  Show lyrics in sync in the terminal

Options:
    --config <path>                          Explicit config.yaml
    --directory <path>                       Storage directory (overrides config)

Configuration:
    scan, files and upload need a storage directory, from config.yaml in
    the current directory, --config, or --directory. parse and play work
    without one and only use the configuration when it is available.
"""

import dataclasses
import json
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional

import rich_click as click

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = ""
click.rich_click.MAX_WIDTH = 100

from lyric_sync import __version__
from lyric_sync.core import (
    Config,
    ConfigError,
    HashComputationError,
    HashRegistry,
    LyricSyncError,
    StorageError,
    UploadError,
    get_logger,
    load_config,
    setup_logging,
    shutdown_logging,
)
from lyric_sync.core.config import CONFIG_FILENAME
from lyric_sync.lyrics import FractionMode, parse_lyrics_file
from lyric_sync.playback import PlaybackClock, TerminalPlayer, probe_duration
from lyric_sync.storage import UploadService, scan_upload_directory

logger = get_logger(__name__)


@click.group()
@click.option(
    "--config", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Configuration file (default: ./config.yaml)"
)
@click.option(
    "--directory",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    metavar="<dir>",
    help="Storage directory holding uploads/ and logs/"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Show debug messages"
)
@click.version_option(__version__, prog_name="lyric-sync")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[Path],
    directory: Optional[Path],
    verbose: bool
) -> None:
    """
    lyric-sync: Play lyrics in sync with audio.

    \b
    BASIC USAGE:
        lyric-sync upload song.mp3 song.lrc    # Store and parse an upload
        lyric-sync play song.lrc               # Show lyrics in sync
        lyric-sync files                       # List stored files
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["directory"] = directory
    ctx.obj["verbose"] = verbose


@cli.command()
@click.pass_context
def scan(ctx: click.Context) -> None:
    """Register the files already in the upload store."""
    with _session(ctx.obj) as config:
        registry = HashRegistry()
        count = scan_upload_directory(
            registry, config.storage.uploads_directory, show_progress=True
        )
        click.echo(f"Registered {count} stored files")


@cli.command()
@click.pass_context
def files(ctx: click.Context) -> None:
    """List stored files with their content hashes."""
    with _session(ctx.obj) as config:
        registry = _initialize_registry(config)
        records = sorted(registry.records(), key=lambda record: record.stored_name)
        _echo_json({
            "totalFiles": len(records),
            "files": [record.to_listing_dict() for record in records],
        })


@cli.command()
@click.argument("audio", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("lyrics", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def upload(ctx: click.Context, audio: Path, lyrics: Path) -> None:
    """Store an audio + lyrics pair, reusing identical stored files."""
    with _session(ctx.obj) as config:
        registry = _initialize_registry(config)
        service = UploadService(
            registry,
            config.storage.uploads_directory,
            max_file_size=config.storage.max_file_size,
            fraction_mode=config.lyrics.fraction_mode,
        )
        result = service.process(audio, lyrics)
        logger.info(
            f"Upload processed: {result.audio_url} with {len(result.lyrics)} lyric lines"
        )
        _echo_json(result.to_dict())


@cli.command()
@click.argument("lyrics", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--decimal",
    is_flag=True,
    help="Read [mm:ss.x] fractions as decimals instead of hundredths"
)
@click.pass_context
def parse(ctx: click.Context, lyrics: Path, decimal: bool) -> None:
    """Print the timestamped lines of a lyrics file as JSON."""
    with _session(ctx.obj, required=False) as config:
        parsed = parse_lyrics_file(lyrics, _fraction_mode(config, decimal))
        _echo_json(parsed.to_list())


@cli.command()
@click.argument("lyrics", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--audio",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Audio file, used for its duration"
)
@click.option(
    "--start",
    type=click.FloatRange(min=0),
    default=0.0,
    show_default=True,
    help="Start position in seconds"
)
@click.option(
    "--offset",
    type=float,
    default=0.0,
    show_default=True,
    help="Sync offset in seconds (+ shows lyrics earlier)"
)
@click.option(
    "--decimal",
    is_flag=True,
    help="Read [mm:ss.x] fractions as decimals instead of hundredths"
)
@click.pass_context
def play(
    ctx: click.Context,
    lyrics: Path,
    audio: Optional[Path],
    start: float,
    offset: float,
    decimal: bool
) -> None:
    """Show lyrics line by line in sync with a playback clock."""
    with _session(ctx.obj, required=False) as config:
        parsed = parse_lyrics_file(lyrics, _fraction_mode(config, decimal))
        if not parsed:
            raise LyricSyncError(f"No timestamped lyrics found in {lyrics.name}")

        duration = probe_duration(audio) if audio is not None else None
        clock = PlaybackClock(duration=duration, offset=offset)
        clock.seek(start)

        tick_interval = config.playback.tick_interval if config else 0.05
        player = TerminalPlayer(parsed, clock, tick_interval=tick_interval)
        shown = player.run()
        logger.info(f"Displayed {shown} of {len(parsed)} lyric lines")


def _fraction_mode(config: Config | None, decimal: bool) -> FractionMode:
    if decimal:
        return FractionMode.DECIMAL
    if config is not None:
        return config.lyrics.fraction_mode
    return FractionMode.HUNDREDTHS


def _load_configuration(
    config_path: Path | None, directory: Path | None, required: bool = True
) -> Config | None:
    """
    Resolve the configuration from --config, ./config.yaml or --directory.

    --directory overrides the storage directory of a loaded file, or builds
    a default configuration when there is no file.

    Returns:
        Config, or None when nothing is configured and required is False.

    Raises:
        ConfigError: If configuration is invalid, or missing while required.
    """
    if config_path is not None or (Path.cwd() / CONFIG_FILENAME).exists():
        config = load_config(config_path)
        if directory is not None:
            storage = dataclasses.replace(
                config.storage, directory=directory.expanduser().resolve()
            )
            config = dataclasses.replace(config, storage=storage)
        return config

    if directory is not None:
        return Config.default(directory)

    if not required:
        return None

    raise ConfigError(
        f"No configuration found: create {CONFIG_FILENAME}, or pass --config or --directory",
        details={"cwd": str(Path.cwd())}
    )


def _initialize_registry(config: Config) -> HashRegistry:
    """Build the process registry and fill it from the upload store."""
    registry = HashRegistry()
    scan_upload_directory(registry, config.storage.uploads_directory)
    return registry


@contextmanager
def _session(options: dict, required: bool = True) -> Iterator[Config | None]:
    """
    Load configuration, set up logging and map errors to exit codes.

    Exit codes:
        1: Configuration error
        2: Storage or hashing error
        3: Upload rejected
        4: Other lyric-sync error
        130: Interrupted
    """
    try:
        config = _load_configuration(
            options.get("config_path"), options.get("directory"), required
        )
        if config is not None:
            setup_logging(config.storage.directory, verbose=options.get("verbose", False))
            logger.debug(f"Storage directory: {config.storage.directory}")

        yield config

    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(1)

    except (StorageError, HashComputationError) as e:
        click.echo(f"Storage error: {e.message}", err=True)
        logger.error(f"Storage error: {e.message}", exc_info=True)
        sys.exit(2)

    except UploadError as e:
        click.echo(f"Upload rejected: {e.message}", err=True)
        logger.error(f"Upload rejected: {e.message}")
        sys.exit(3)

    except LyricSyncError as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.error(f"Error: {e.message}", exc_info=True)
        sys.exit(4)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        logger.info("Interrupted by user")
        sys.exit(130)

    finally:
        shutdown_logging()


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


def main() -> None:
    """Entry point for the `lyric-sync` console script."""
    cli()


if __name__ == "__main__":
    main()
