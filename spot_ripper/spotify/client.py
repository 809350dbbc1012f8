"""
Catalog client boundary for spot-ripper.

The expansion engine and the delivery pipeline never talk to the session
protocol directly. They go through CatalogClient, which exposes exactly the
operations they need:

    - metadata fetches for tracks, episodes, albums, playlists, shows, artists
    - audio key negotiation for an (item, file) pair
    - opening the encrypted byte stream of a file
    - turn(): servicing the session for a bounded time

The concrete implementation backed by librespot lives in
spot_ripper.spotify.session; tests substitute an in-memory client.

Error Contract:
    Metadata fetches raise CatalogError, key negotiation raises
    AudioKeyError, open_stream() and ByteStream.read_to_end() raise
    StreamError. Callers decide which of these are fatal.
"""

import time
from abc import ABC, abstractmethod

from spot_ripper.spotify.ids import SpotifyId
from spot_ripper.spotify.models import (
    AlbumMetadata,
    ArtistMetadata,
    EpisodeMetadata,
    PlaylistMetadata,
    ShowMetadata,
    TrackMetadata,
)


class ByteStream(ABC):
    """
    Handle on the encrypted bytes of one audio file.
    """

    @abstractmethod
    def read_to_end(self) -> bytes:
        """
        Read the whole stream.

        This call blocks until the last byte arrived. It runs on the
        stream reader's worker thread, never on the session thread.

        Raises:
            StreamError: If the transfer fails.
        """


class CatalogClient(ABC):
    """
    Operations the pipeline needs from a connected catalog session.

    A client is owned by a single thread of control: expansion and
    delivery call it one operation at a time. The only other thread that
    touches anything it returns is the stream reader worker, and only
    through a ByteStream.
    """

    # =========================================================================
    # Metadata
    # =========================================================================

    @abstractmethod
    def track(self, track_id: SpotifyId) -> TrackMetadata:
        """Fetch track metadata. Raises CatalogError."""

    @abstractmethod
    def episode(self, episode_id: SpotifyId) -> EpisodeMetadata:
        """Fetch episode metadata. Raises CatalogError."""

    @abstractmethod
    def album(self, album_id: SpotifyId) -> AlbumMetadata:
        """Fetch album metadata with its track ids. Raises CatalogError."""

    @abstractmethod
    def playlist(self, playlist_id: SpotifyId) -> PlaylistMetadata:
        """Fetch playlist metadata with its track ids. Raises CatalogError."""

    @abstractmethod
    def show(self, show_id: SpotifyId) -> ShowMetadata:
        """Fetch show metadata with its episode ids, newest first. Raises CatalogError."""

    @abstractmethod
    def artist(self, artist_id: SpotifyId) -> ArtistMetadata:
        """Fetch artist metadata. Raises CatalogError."""

    # =========================================================================
    # Audio
    # =========================================================================

    @abstractmethod
    def audio_key(self, item_id: SpotifyId, file_id: bytes) -> bytes:
        """
        Negotiate the decryption key for one file of one track/episode.

        Raises:
            AudioKeyError: If the session refuses or the request fails.
        """

    @abstractmethod
    def open_stream(self, file_id: bytes) -> ByteStream:
        """
        Open the encrypted byte stream of a file.

        Raises:
            StreamError: If the file cannot be located.
        """

    # =========================================================================
    # Session servicing
    # =========================================================================

    def turn(self, timeout: float) -> None:
        """
        Service the session for up to timeout seconds.

        Called repeatedly by the stream reader while a blocking read is in
        flight. The default waits out the timeout, which is enough for
        sessions that run their own receiver thread.
        """
        time.sleep(timeout)

    def close(self) -> None:
        """Release the session. Safe to call more than once."""

    def __enter__(self) -> "CatalogClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
