"""
Command-line interface for spot-auditor.

This module implements the CLI using Click, providing one subcommand
per library operation. rich-click is used for the output colors.

Commands:
    spot-audit scan                         Scan Liked Songs for unplayable tracks
    spot-audit scan --playlist <id>         Scan one playlist instead
    spot-audit sync <playlist-id>           Save a playlist's tracks to Liked Songs
    spot-audit list                         List your playlists
    spot-audit inspect <track-id>           Show full metadata for one track
    spot-audit dedup                        Remove dead ISRC duplicates from Liked Songs

Options:
    --config <path>                         Use this config file instead of ./config.yaml
    --verbose / -v                          Show debug output on the console
    --json <path>                           (scan, sync, dedup) Also write the report as JSON
    --dry-run                               (dedup) Report what would be removed, change nothing

Usage:
    # Audit your library
    spot-audit scan
    spot-audit scan -p "https://open.spotify.com/playlist/..." --json report.json

    # Copy a playlist into Liked Songs
    spot-audit list
    spot-audit sync 37i9dQZF1DXcBWIGoYBM5M

    # Investigate one track
    spot-audit inspect "spotify:track:4uLU6hMCjMI75M1A2tKUQC"

    # Clean up dead duplicates
    spot-audit dedup --dry-run
    spot-audit dedup

Exit Codes:
    0    Success
    1    Configuration error or unexpected error
    2    Invalid playlist or track ID
    3    Spotify API error (authentication, rate limit, not found, network)
    4    Any other spot-auditor error
    130  Interrupted by user
"""

import sys
from pathlib import Path
from typing import Any, Callable, Optional

import rich_click as click

# Configure rich-click for better help formatting
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = ""
click.rich_click.MAX_WIDTH = 100
click.rich_click.COMMAND_GROUPS = {
    "cli": [
        {
            "name": "Audit",
            "commands": ["scan", "inspect", "list"],
        },
        {
            "name": "Curation",
            "commands": ["sync", "dedup"],
        },
    ],
}

from spot_auditor import __version__
from spot_auditor.audit import Auditor
from spot_auditor.core import (
    AuditorError,
    Config,
    ConfigError,
    InvalidIdentifierError,
    SpotifyError,
    get_logger,
    load_config,
    progress_iter,
    setup_logging,
    shutdown_logging,
)
from spot_auditor.report import (
    render_audit_report,
    render_dedup_report,
    render_playlist_table,
    render_sync_report,
    render_track_inspection,
    write_json_report,
)
from spot_auditor.spotify import SpotifyClient
from spot_auditor.utils import parse_playlist_id, parse_track_id

logger = get_logger(__name__)


@click.group(invoke_without_command=True)
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Path to the config file (default: ./config.yaml if present)"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Show debug output on the console"
)
@click.option(
    "--version",
    is_flag=True,
    help="Show version and exit."
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Optional[Path],
    verbose: bool,
    version: bool
) -> None:
    """
    spot-auditor: Audit and curate your Spotify library.

    Finds tracks Spotify has made unplayable for you, tells you whether
    they were removed from the catalog or are only locked to other
    countries, and helps you clean up.

    \b
    AUDIT:
        spot-audit scan                        # Scan Liked Songs
        spot-audit scan -p <playlist-id>       # Scan a playlist
        spot-audit inspect <track-id>          # Full metadata for one track
        spot-audit list                        # Your playlists and their IDs

    \b
    CURATION:
        spot-audit sync <playlist-id>          # Save a playlist to Liked Songs
        spot-audit dedup --dry-run             # Preview duplicate cleanup
        spot-audit dedup                       # Remove dead duplicates
    """
    if version:
        click.echo(f"spot-auditor {__version__}")
        ctx.exit(0)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit(0)

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose


@cli.command()
@click.option(
    "--playlist", "-p", "playlist_id",
    type=str,
    default=None,
    metavar="<playlist-id>",
    help="Scan this playlist instead of Liked Songs (ID, URI or URL)"
)
@click.option(
    "--json", "json_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="<report.json>",
    help="Also write the report as JSON"
)
@click.pass_context
def scan(ctx: click.Context, playlist_id: Optional[str], json_path: Optional[Path]) -> None:
    """Scan Liked Songs or a playlist for unplayable tracks."""

    def run(auditor: Auditor) -> None:
        if playlist_id is not None:
            click.echo(f"Starting scan of Playlist ID: {playlist_id} ...")
            summary = auditor.scan_playlist(playlist_id)
            target = "Playlist"
        else:
            click.echo("Starting scan of Liked Songs...")
            summary = auditor.scan_liked_songs()
            target = "Liked Songs"

        click.echo(render_audit_report(summary, target))
        if json_path is not None:
            _save_json(json_path, summary.to_dict(), "Report")

    validate = (lambda: parse_playlist_id(playlist_id)) if playlist_id is not None else None
    _run_command(ctx.obj, run, validate=validate)


@cli.command()
@click.argument("playlist_id", metavar="PLAYLIST_ID")
@click.option(
    "--json", "json_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="<report.json>",
    help="Also write the detailed report (with per-batch logs) as JSON"
)
@click.pass_context
def sync(ctx: click.Context, playlist_id: str, json_path: Optional[Path]) -> None:
    """Save every track of a playlist to Liked Songs."""

    def run(auditor: Auditor) -> None:
        click.echo(f"Syncing Playlist ID: {playlist_id} to Liked Songs...")
        report = auditor.sync_playlist_to_liked(playlist_id)

        click.echo(render_sync_report(report))
        if json_path is not None:
            _save_json(json_path, report.to_dict(), "Detailed report")

    _run_command(ctx.obj, run, validate=lambda: parse_playlist_id(playlist_id))


@cli.command(name="list")
@click.pass_context
def list_playlists(ctx: click.Context) -> None:
    """List the playlists you own or follow."""

    def run(auditor: Auditor) -> None:
        click.echo("Fetching your playlists...")
        click.echo(render_playlist_table(auditor.list_playlists()))

    _run_command(ctx.obj, run)


@cli.command()
@click.argument("track_id", metavar="TRACK_ID")
@click.pass_context
def inspect(ctx: click.Context, track_id: str) -> None:
    """Show full metadata and market availability for one track."""

    def run(auditor: Auditor) -> None:
        click.echo(f"Inspecting Track ID: {track_id} ...")
        click.echo(render_track_inspection(auditor.inspect_track(track_id)))

    _run_command(ctx.obj, run, validate=lambda: parse_track_id(track_id))


@cli.command()
@click.option(
    "--dry-run",
    is_flag=True,
    help="Only report what would be removed"
)
@click.option(
    "--json", "json_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="<report.json>",
    help="Also write the report as JSON"
)
@click.pass_context
def dedup(ctx: click.Context, dry_run: bool, json_path: Optional[Path]) -> None:
    """
    Remove dead ISRC duplicates from Liked Songs.

    For every recording saved more than once under different track IDs,
    the version available in the most markets is kept and the others
    are removed.
    """

    def run(auditor: Auditor) -> None:
        click.echo("Starting Deduplication of Liked Songs...")
        click.echo("This will fetch your entire library to find ID conflicts. Please wait.")
        report = auditor.deduplicate_liked_songs(dry_run=dry_run)

        click.echo(render_dedup_report(report))
        if json_path is not None:
            _save_json(json_path, report.to_dict(), "Report")

    _run_command(ctx.obj, run)


def _run_command(
    options: dict[str, Any],
    command: Callable[[Auditor], None],
    validate: Callable[[], Any] | None = None
) -> None:
    """
    Execute a subcommand with configuration, logging and error handling.

    Args:
        options: Global options stored on the click context.
        command: Receives the ready Auditor and does the actual work.
        validate: Optional check run before the Spotify client is
                  created, so a bad ID fails without any request.

    Raises:
        SystemExit: On fatal errors (with appropriate exit code).
    """
    try:
        config = load_config(options.get("config_path"))

        level = "DEBUG" if options.get("verbose") else config.logging.level
        setup_logging(config.logging.directory, level)
        logger.debug("spot-auditor starting")

        if validate is not None:
            validate()

        auditor = _create_auditor(config)
        command(auditor)

        logger.debug("spot-auditor completed successfully")

    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(1)

    except InvalidIdentifierError as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.debug(f"Rejected identifier: {e.details}")
        sys.exit(2)

    except SpotifyError as e:
        click.echo(f"Spotify error: {e.message}", err=True)
        if e.is_auth_error:
            click.echo(
                "Check your client_id, client_secret and redirect_uri "
                "(config.yaml or SPOTIPY_* environment variables)",
                err=True
            )
        elif e.is_rate_limit:
            click.echo("Spotify is rate limiting requests. Wait a bit and retry.", err=True)
        logger.error(f"Spotify error: {e.message}", exc_info=True)
        sys.exit(3)

    except AuditorError as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.error(f"Error: {e.message}", exc_info=True)
        sys.exit(4)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        logger.info("Interrupted by user")
        sys.exit(130)

    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        logger.exception("Unexpected error")
        sys.exit(1)

    finally:
        shutdown_logging()


def _create_auditor(config: Config) -> Auditor:
    """
    Initialize the Spotify client singleton and build an Auditor on it.

    Raises:
        SpotifyError: If authentication fails.
    """
    if not SpotifyClient.is_initialized():
        SpotifyClient.init(
            client_id=config.spotify.client_id,
            client_secret=config.spotify.client_secret,
            redirect_uri=config.spotify.redirect_uri,
            cache_path=config.spotify.cache_path,
            open_browser=config.spotify.open_browser
        )

    return Auditor(
        SpotifyClient(),
        market=config.spotify.market,
        track_wrapper=lambda tracks: progress_iter(tracks, "Scanning")
    )


def _save_json(path: Path, data: dict[str, Any], label: str) -> None:
    """Write a JSON report; a write failure is reported but does not fail the command."""
    try:
        write_json_report(path, data)
    except OSError as e:
        click.echo(f"\n[ERROR] Failed to write report to '{path}': {e}", err=True)
        logger.error(f"Failed to write JSON report to {path}: {e}")
        return

    click.echo(f"\n[SAVED] {label} saved to: {path}")


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `spot-audit` from the command line.
    It invokes the Click CLI group.
    """
    cli()


if __name__ == "__main__":
    main()
