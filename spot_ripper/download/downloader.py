"""
Delivery pipeline for spot-ripper.

This module takes the work list built by the expander and delivers every
item, strictly in order, one at a time.

Per-Item Workflow:
    1. Fetch the item's metadata
    2. Tracks only: if unavailable, substitute the first available
       alternative
    3. Resolve the grouping: artist names for tracks, the show (from
       context or fetched) for episodes
    4. Derive "<artists-or-publisher> - <title>.ogg"; if that file already
       exists the item is done (no key, stream or decryption)
    5. Select the best OGG Vorbis file
    6. Negotiate the audio key
    7. Read the encrypted stream on the StreamReader worker
    8. Decrypt and strip the container header
    9. Write the file (re-checking existence first), or hand the bytes to
       the helper program together with (id, title, album-or-show,
       artists-or-publisher)

Error Policy:
    Recoverable (item skipped, run continues):
        - CatalogError from step 1
    Fatal (exception propagates, run aborts):
        - UnavailableError: no available alternative (step 2)
        - CatalogError: alternative, artist, show or album fetch (2, 3, 9)
        - FormatError (5), AudioKeyError (6), StreamError (7),
          DecryptionError (8), DeliveryError / HelperError (9)
    Nothing is retried. Files already written by earlier items stay on
    disk; a re-run skips them through the existence check.

Usage:
    from spot_ripper.download.downloader import Downloader

    with Downloader(client, output_dir=Path.cwd()) as downloader:
        stats = downloader.deliver(worklist)
    print(f"Delivered: {stats.delivered}/{stats.total}")
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping

from spot_ripper.core.exceptions import CatalogError, DeliveryError, UnavailableError
from spot_ripper.core.logger import get_logger, log_item_skipped
from spot_ripper.core.progress import DeliveryProgressBar
from spot_ripper.download.bridge import DEFAULT_POLL_INTERVAL, StreamReader
from spot_ripper.download.formats import select_file
from spot_ripper.download.helper import helper_arguments, run_helper
from spot_ripper.spotify.client import CatalogClient
from spot_ripper.spotify.decrypt import decrypt_audio, strip_container_header
from spot_ripper.spotify.ids import SpotifyId
from spot_ripper.spotify.models import AudioFormat, ShowMetadata, TrackMetadata
from spot_ripper.spotify.worklist import ItemKind, WorkItem, WorkList
from spot_ripper.utils import ensure_directory, output_filename

logger = get_logger(__name__)


class ItemOutcome(Enum):
    """Terminal states of a work item that did not abort the run."""
    DELIVERED = "delivered"
    SKIPPED_EXISTS = "skipped_exists"
    SKIPPED_UNREACHABLE = "skipped_unreachable"


@dataclass
class DeliveryStats:
    """
    Statistics from a delivery run.

    Attributes:
        total: Number of work items.
        delivered: Written to disk or handed to the helper.
        skipped_existing: Output file already on disk.
        skipped_unreachable: Metadata could not be fetched.
    """

    total: int = 0
    delivered: int = 0
    skipped_existing: int = 0
    skipped_unreachable: int = 0

    def record(self, outcome: ItemOutcome) -> None:
        if outcome is ItemOutcome.DELIVERED:
            self.delivered += 1
        elif outcome is ItemOutcome.SKIPPED_EXISTS:
            self.skipped_existing += 1
        else:
            self.skipped_unreachable += 1


class Downloader:
    """
    Delivers work items one at a time.

    Attributes:
        output_dir: Directory the .ogg files are written to (file mode).
                    Also where existing files are looked up in helper mode.
        helper: Helper program path, or None for file mode.

    Thread Safety:
        Not thread-safe. The only other thread involved is the
        StreamReader worker, which never touches the client.
    """

    def __init__(
        self,
        client: CatalogClient,
        output_dir: Path,
        helper: Path | None = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        reader: StreamReader | None = None
    ) -> None:
        """
        Initialize the Downloader.

        Args:
            client: Connected catalog client.
            output_dir: Directory for output files.
            helper: Optional helper program; switches to helper mode.
            poll_interval: Session turn length while a stream is read.
            reader: StreamReader to use instead of creating one.
        """
        self._client = client
        self.output_dir = output_dir
        self.helper = helper
        self._reader = reader if reader is not None else StreamReader(client, poll_interval)

    def deliver(self, worklist: WorkList, show_progress: bool = True) -> DeliveryStats:
        """
        Deliver every item of the work list in order.

        Returns:
            DeliveryStats for the run.

        Raises:
            SpotRipperError: The first fatal error; later items are not
                             attempted.
        """
        stats = DeliveryStats(total=len(worklist))
        if not worklist:
            logger.info("Nothing to deliver")
            return stats

        if self.helper is None:
            ensure_directory(self.output_dir)

        logger.info(f"Delivering {stats.total} items")

        progress = DeliveryProgressBar(total=stats.total) if show_progress else None
        if progress is not None:
            progress.start()
        try:
            for item in worklist:
                outcome = self.deliver_item(item)
                stats.record(outcome)
                if progress is not None:
                    progress.update(
                        delivered=outcome is ItemOutcome.DELIVERED,
                        existing=outcome is ItemOutcome.SKIPPED_EXISTS,
                        unreachable=outcome is ItemOutcome.SKIPPED_UNREACHABLE,
                    )
        finally:
            if progress is not None:
                progress.stop()

        return stats

    def deliver_item(self, item: WorkItem) -> ItemOutcome:
        """
        Run the per-item workflow for one track or episode.

        Raises:
            SpotRipperError: On any fatal failure (see module docstring).
        """
        if item.kind is ItemKind.TRACK:
            return self._deliver_track(item)
        return self._deliver_episode(item)

    # =========================================================================
    # Tracks
    # =========================================================================

    def _deliver_track(self, item: WorkItem) -> ItemOutcome:
        item_id = str(item.id)
        logger.info(f"Getting track {item_id}...")

        try:
            track = self._client.track(item.id)
        except CatalogError as e:
            log_item_skipped(logger, "track", item_id, str(e))
            return ItemOutcome.SKIPPED_UNREACHABLE

        if not track.available:
            track = self._find_alternative(track, item_id)

        artists = [self._client.artist(artist_id).name for artist_id in track.artists]

        path = self.output_dir / output_filename(artists, track.name)
        if path.exists():
            logger.info(f"File {path.name} already exists.")
            return ItemOutcome.SKIPPED_EXISTS

        payload = self._fetch_audio(track.id, track.files)

        if self.helper is None:
            return self._write_file(path, payload)

        album_name = item.album_name
        if album_name is None:
            album_name = self._album_name(track)
        run_helper(
            self.helper,
            helper_arguments(item_id, track.name, album_name, artists),
            payload
        )
        logger.info(f"Handed {', '.join(artists)} - {track.name} to helper")
        return ItemOutcome.DELIVERED

    def _find_alternative(self, track: TrackMetadata, item_id: str) -> TrackMetadata:
        """
        Return the first available alternative of an unavailable track.

        Alternatives are fetched lazily, in listed order, stopping at the
        first available one.

        Raises:
            CatalogError: If an alternative's metadata cannot be fetched.
            UnavailableError: If no alternative is available.
        """
        logger.warning(f"Track {item_id} is not available, finding alternative...")

        for alternative_id in track.alternatives:
            alternative = self._client.track(alternative_id)
            if alternative.available:
                logger.warning(f"Found track alternative {item_id} -> {alternative.id}")
                return alternative

        raise UnavailableError(
            f"Could not find alternative for track {item_id}",
            details={
                "item_id": item_id,
                "alternatives": [str(a) for a in track.alternatives],
            }
        )

    def _album_name(self, track: TrackMetadata) -> str:
        if track.album is None:
            raise CatalogError(
                f"Track {track.id} has no album",
                details={"item_id": str(track.id)},
                kind="album"
            )
        return self._client.album(track.album).name

    # =========================================================================
    # Episodes
    # =========================================================================

    def _deliver_episode(self, item: WorkItem) -> ItemOutcome:
        item_id = str(item.id)
        logger.info(f"Getting episode {item_id}...")

        try:
            episode = self._client.episode(item.id)
        except CatalogError as e:
            log_item_skipped(logger, "episode", item_id, str(e))
            return ItemOutcome.SKIPPED_UNREACHABLE

        if not episode.available:
            logger.warning(f"Episode {item_id} is not available.")

        show = item.show
        if show is None:
            show = self._fetch_show(episode.show, item_id)

        path = self.output_dir / output_filename(show.publisher, episode.name)
        if path.exists():
            logger.info(f"File {path.name} already exists.")
            return ItemOutcome.SKIPPED_EXISTS

        payload = self._fetch_audio(episode.id, episode.files)

        if self.helper is None:
            return self._write_file(path, payload)

        run_helper(
            self.helper,
            helper_arguments(item_id, episode.name, show.name, [show.publisher]),
            payload
        )
        logger.info(f"Handed {show.publisher} - {episode.name} to helper")
        return ItemOutcome.DELIVERED

    def _fetch_show(self, show_id: SpotifyId | None, item_id: str) -> ShowMetadata:
        if show_id is None:
            raise CatalogError(
                f"Episode {item_id} has no show",
                details={"item_id": item_id},
                kind="show"
            )
        return self._client.show(show_id)

    # =========================================================================
    # Shared steps
    # =========================================================================

    def _fetch_audio(self, playable_id: SpotifyId, files: Mapping[AudioFormat, bytes]) -> bytes:
        """
        Select, key, fetch and decrypt the audio of a track or episode.

        Returns:
            Decrypted audio with the container header removed.
        """
        audio_format, file_id = select_file(files)
        logger.debug(f"Using {audio_format.name} file {file_id.hex()} for {playable_id}")

        key = self._client.audio_key(playable_id, file_id)
        stream = self._client.open_stream(file_id)
        ciphertext = self._reader.read(stream)

        return strip_container_header(decrypt_audio(key, ciphertext))

    def _write_file(self, path: Path, payload: bytes) -> ItemOutcome:
        # The name may have been taken by an earlier item since the first check
        if path.exists():
            logger.info(f"File {path.name} already exists.")
            return ItemOutcome.SKIPPED_EXISTS

        try:
            path.write_bytes(payload)
        except OSError as e:
            raise DeliveryError(
                f"Cannot write decrypted audio to {path}: {e}",
                details={"path": str(path), "original_error": str(e)}
            ) from e

        logger.info(f"Filename: {path.name}")
        return ItemOutcome.DELIVERED

    def close(self) -> None:
        self._reader.close()

    def __enter__(self) -> "Downloader":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
