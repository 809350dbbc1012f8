"""
Command-line interface for spot-ripper.

This module implements the CLI using Click; rich-click is used for the
help and error colors.

Usage:
    spot-ripper USER PASSWORD [HELPER] < references.txt

    # Write "<artists> - <title>.ogg" files to the output directory
    printf 'album:1DFixLWuPkv3KT3TnV35m3\\ndone\\n' | spot-ripper me secret

    # Pipe every item into a helper instead of writing files
    spot-ripper me secret ./tag-and-store.sh < references.txt

Input:
    One reference per line: playlist/album/show/track/episode URLs or
    spotify: URIs. Lines without a reference are ignored. Reading stops at
    a line that is exactly "done", or at end of input.

Options:
    --config <path>     Explicit config.yaml (default: ./config.yaml if present)
    --no-progress       Do not draw the progress bar
    --version           Show version and exit

Exit Codes:
    0    Every item delivered or skipped
    1    Configuration error or unexpected error
    2    Usage error (wrong number of arguments)
    3    Could not connect to the catalog
    4    Any other fatal pipeline error
    130  Interrupted by user
"""

import sys
from pathlib import Path
from typing import Optional, TextIO

import click as click_core
import rich_click as click

click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = ""
click.rich_click.MAX_WIDTH = 100

from spot_ripper import __version__
from spot_ripper.core import (
    Config,
    ConfigError,
    SessionError,
    SpotRipperError,
    get_logger,
    load_config,
    setup_logging,
    shutdown_logging,
)
from spot_ripper.download import DeliveryStats, Downloader
from spot_ripper.spotify import CatalogClient, Expander, WorkList, read_references

logger = get_logger(__name__)


@click.command()
@click.argument("user")
@click.argument("password")
@click.argument("helper", required=False, type=click.Path(path_type=Path))
@click.option(
    "--config", "config_path",
    type=click.Path(path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Configuration file (default: ./config.yaml if present)"
)
@click.option(
    "--no-progress",
    is_flag=True,
    help="Do not draw the progress bar"
)
@click.version_option(__version__, prog_name="spot-ripper")
def cli(
    user: str,
    password: str,
    helper: Optional[Path],
    config_path: Optional[Path],
    no_progress: bool
) -> None:
    """
    spot-ripper: download Spotify tracks and episodes as Ogg Vorbis.

    Reads playlist, album, show, track and episode references from stdin
    (one per line, until a line reading "done"), then downloads every
    track and episode once, in the order it was first referenced.

    \b
    Without HELPER, audio is written to "<artists> - <title>.ogg".
    With HELPER, each item is piped to:
        HELPER <id> <title> <album-or-show> <artists-or-publisher>...
    """
    _run(
        user=user,
        password=password,
        helper=helper,
        config_path=config_path,
        show_progress=not no_progress,
        stdin=click_core.get_text_stream("stdin", errors="replace"),
    )


def _run(
    user: str,
    password: str,
    helper: Path | None,
    config_path: Path | None,
    show_progress: bool,
    stdin: TextIO
) -> None:
    """
    Execute the whole run: config, logging, session, expansion, delivery.

    Raises:
        SystemExit: On fatal errors (with appropriate exit code).
    """
    client: CatalogClient | None = None

    try:
        config = load_config(config_path)
        setup_logging(config.output.log_directory, config.logging.console_level)
        logger.info("spot-ripper starting")

        client = _connect(user, password)

        worklist = _build_worklist(client, stdin)
        stats = _deliver(client, config, worklist, helper, show_progress)

        _print_summary(stats)
        logger.info("spot-ripper completed successfully")

    except ConfigError as e:
        click_core.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(1)
    except SessionError as e:
        click_core.echo(f"Session error: {e.message}", err=True)
        logger.error(f"Session error: {e.message}", exc_info=True)
        sys.exit(3)
    except SpotRipperError as e:
        click_core.echo(f"Error: {e.message}", err=True)
        logger.error(f"Error: {e.message}", exc_info=True)
        if e.details:
            logger.debug(f"Details: {e.details}")
        sys.exit(4)
    except KeyboardInterrupt:
        click_core.echo("\nInterrupted by user", err=True)
        logger.info("Interrupted by user")
        sys.exit(130)
    except Exception as e:
        click_core.echo(f"Unexpected error: {e}", err=True)
        logger.exception("Unexpected error")
        sys.exit(1)
    finally:
        if client is not None:
            client.close()
        shutdown_logging()


def _connect(user: str, password: str) -> CatalogClient:
    """
    Connect to the catalog with user/password credentials.

    Raises:
        SessionError: If the connection fails.
    """
    from spot_ripper.spotify.session import LibrespotClient

    return LibrespotClient.connect(user, password)


def _build_worklist(client: CatalogClient, stdin: TextIO) -> WorkList:
    """
    Read references from stdin and expand each one as soon as it is read.

    Raises:
        InvalidIdError: If a reference carries a malformed id.
        CatalogError: If a referenced container cannot be fetched.
    """
    expander = Expander(client)
    for reference in read_references(stdin):
        logger.debug(f"Expanding {reference.kind.value} {reference.id}")
        expander.expand(reference)

    logger.info(f"Work list: {len(expander.worklist)} items")
    return expander.worklist


def _deliver(
    client: CatalogClient,
    config: Config,
    worklist: WorkList,
    helper: Path | None,
    show_progress: bool
) -> DeliveryStats:
    with Downloader(
        client,
        output_dir=config.output.directory,
        helper=helper,
        poll_interval=config.download.poll_interval,
    ) as downloader:
        return downloader.deliver(worklist, show_progress=show_progress)


def _print_summary(stats: DeliveryStats) -> None:
    click_core.echo("")
    click_core.echo(f"Items:               {stats.total}")
    click_core.echo(f"Delivered:           {stats.delivered}")
    click_core.echo(f"Already on disk:     {stats.skipped_existing}")
    click_core.echo(f"Metadata unreachable: {stats.skipped_unreachable}")


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
