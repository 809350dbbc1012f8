"""
spot-ripper: download Spotify tracks and podcast episodes as Ogg Vorbis.

Reads catalog references from stdin, expands them into an ordered,
deduplicated work list and delivers every item, either as an .ogg file or
through an external helper program.

Architecture:
    The run has two stages:

    EXPANSION (spotify/): Build the work list
        - Parse references (playlist, album, show, track, episode)
        - Expand containers into their tracks / episodes
        - Deduplicate by id, keeping first-seen order

    DELIVERY (download/): Deliver each item in order
        - Fetch metadata, substituting alternatives for unavailable tracks
        - Skip items whose output file already exists
        - Negotiate the audio key, read the encrypted stream on a worker
          thread while the session keeps being serviced
        - Decrypt, strip the container header, write or pipe to the helper

Modules:
    core/       - Configuration, logging, exceptions, progress bar
    spotify/    - Ids, metadata models, catalog client, parsing, expansion
    download/   - Delivery pipeline, stream reader, helper hand-off
    utils/      - Filename helpers
    cli.py      - Command-line interface

Usage:
    Command Line:
        spot-ripper USER PASSWORD [HELPER] < references.txt

    Python API:
        from spot_ripper.download import Downloader
        from spot_ripper.spotify import Expander, read_references
        from spot_ripper.spotify.session import LibrespotClient

        with LibrespotClient.connect(user, password) as client:
            worklist = Expander(client).expand_all(read_references(lines))
            with Downloader(client, output_dir) as downloader:
                downloader.deliver(worklist)

Dependencies:
    - librespot: Spotify session, metadata, audio keys
    - pycryptodome: AES-CTR audio decryption
    - requests: CDN downloads
    - yt-dlp: Filename sanitization
    - rich-click / rich: CLI and progress bar
    - tqdm: Progress-bar-safe console logging
    - pyyaml: Configuration file parsing
"""

__version__ = "0.1.0"
__author__ = "spot-ripper"
__license__ = "MIT"

from spot_ripper.core import (
    CatalogError,
    Config,
    ConfigError,
    SessionError,
    SpotRipperError,
    get_logger,
    load_config,
    setup_logging,
)
from spot_ripper.spotify import SpotifyId, WorkItem, WorkList

__all__ = [
    # Version
    "__version__",
    # Core
    "Config",
    "load_config",
    "setup_logging",
    "get_logger",
    # Exceptions
    "SpotRipperError",
    "ConfigError",
    "SessionError",
    "CatalogError",
    # Models
    "SpotifyId",
    "WorkItem",
    "WorkList",
]
