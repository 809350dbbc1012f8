"""
librespot-backed catalog client for spot-ripper.

This module connects to Spotify with username/password credentials through
the librespot package and adapts its protobuf metadata messages into the
models of spot_ripper.spotify.models.

Usage:
    from spot_ripper.spotify.session import LibrespotClient

    with LibrespotClient.connect(username, password) as client:
        track = client.track(SpotifyId.from_base62("4uLU6hMCjMI75M1A2tKUQC"))

Availability:
    The metadata messages do not carry a ready-made availability flag; a
    track or episode is considered available when it lists at least one
    audio file for this session.

    Country restrictions (proto.restriction) are not evaluated: the
    session's country code is not reliably populated by librespot. A
    region-blocked track that still lists files counts as available, so
    it fails at key negotiation instead of falling back to an alternative.


Stream Fetch:
    open_stream() resolves a CDN URL for the file through the session and
    returns a CdnStream. The encrypted body is downloaded with requests
    when read_to_end() is called (on the stream reader's worker thread).
"""

import requests
from librespot.core import Session
from librespot.metadata import (
    AlbumId,
    ArtistId,
    EpisodeId,
    PlaylistId,
    ShowId,
    TrackId,
)

from spot_ripper.core.exceptions import (
    AudioKeyError,
    CatalogError,
    SessionError,
    StreamError,
)
from spot_ripper.core.logger import get_logger
from spot_ripper.spotify.client import ByteStream, CatalogClient
from spot_ripper.spotify.ids import Kind, SpotifyId
from spot_ripper.spotify.models import (
    AlbumMetadata,
    ArtistMetadata,
    AudioFormat,
    EpisodeMetadata,
    PlaylistMetadata,
    ShowMetadata,
    TrackMetadata,
)

logger = get_logger(__name__)


# Seconds to wait for the CDN to accept the connection / send the next bytes
CDN_CONNECT_TIMEOUT = 10
CDN_READ_TIMEOUT = 60

_TRACK_URI_PREFIX = "spotify:track:"


def _file_catalog(audio_files) -> dict[AudioFormat, bytes]:
    """Map protobuf AudioFile entries to AudioFormat -> file id."""
    files: dict[AudioFormat, bytes] = {}
    for audio_file in audio_files:
        try:
            audio_format = AudioFormat(audio_file.format)
        except ValueError:
            logger.debug(f"Ignoring unknown audio format {audio_file.format}")
            continue
        files.setdefault(audio_format, bytes(audio_file.file_id))
    return files


class CdnStream(ByteStream):
    """
    Encrypted audio file served by the CDN.

    Attributes:
        url: Resolved CDN URL of the file.
    """

    def __init__(self, url: str, http: requests.Session) -> None:
        self.url = url
        self._http = http

    def read_to_end(self) -> bytes:
        try:
            response = self._http.get(
                self.url, timeout=(CDN_CONNECT_TIMEOUT, CDN_READ_TIMEOUT)
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise StreamError(
                f"Cannot read file stream: {e}",
                details={"original_error": str(e)}
            ) from e
        return response.content


class LibrespotClient(CatalogClient):
    """
    CatalogClient over a librespot Session.

    Use LibrespotClient.connect() rather than the constructor.

    Attributes:
        _session: The connected librespot Session.
        _http: requests session reused for CDN downloads.
    """

    def __init__(self, session: Session) -> None:
        self._session = session
        self._http = requests.Session()
        self._closed = False

    @classmethod
    def connect(cls, username: str, password: str) -> "LibrespotClient":
        """
        Establish a session with user/password credentials.

        Raises:
            SessionError: If authentication or the connection fails.
        """
        logger.info("Connecting ...")
        try:
            session = Session.Builder().user_pass(username, password).create()
        except Exception as e:
            raise SessionError(
                f"Cannot connect as {username}: {e}",
                details={"username": username, "original_error": str(e)}
            ) from e
        logger.info("Connected!")
        return cls(session)

    def _fetch(self, kind: Kind, item_id: SpotifyId, call):
        try:
            return call()
        except Exception as e:
            raise CatalogError(
                f"Cannot get {kind.value} metadata for {item_id}: {e}",
                details={"item_id": str(item_id), "original_error": str(e)},
                kind=kind.value
            ) from e

    # =========================================================================
    # Metadata
    # =========================================================================

    def track(self, track_id: SpotifyId) -> TrackMetadata:
        proto = self._fetch(
            Kind.TRACK, track_id,
            lambda: self._session.api().get_metadata_4_track(
                TrackId.from_base62(track_id.to_base62())
            )
        )
        files = _file_catalog(proto.file)
        return TrackMetadata(
            id=SpotifyId(bytes(proto.gid)),
            name=proto.name,
            available=bool(files),
            files=files,
            artists=tuple(SpotifyId(bytes(a.gid)) for a in proto.artist),
            album=SpotifyId(bytes(proto.album.gid)) if proto.album.gid else None,
            alternatives=tuple(SpotifyId(bytes(t.gid)) for t in proto.alternative),
        )

    def episode(self, episode_id: SpotifyId) -> EpisodeMetadata:
        proto = self._fetch(
            Kind.EPISODE, episode_id,
            lambda: self._session.api().get_metadata_4_episode(
                EpisodeId.from_base62(episode_id.to_base62())
            )
        )
        files = _file_catalog(proto.audio)
        return EpisodeMetadata(
            id=SpotifyId(bytes(proto.gid)),
            name=proto.name,
            available=bool(files),
            files=files,
            show=SpotifyId(bytes(proto.show.gid)) if proto.show.gid else None,
        )

    def album(self, album_id: SpotifyId) -> AlbumMetadata:
        proto = self._fetch(
            Kind.ALBUM, album_id,
            lambda: self._session.api().get_metadata_4_album(
                AlbumId.from_base62(album_id.to_base62())
            )
        )
        tracks = tuple(
            SpotifyId(bytes(track.gid))
            for disc in proto.disc
            for track in disc.track
        )
        return AlbumMetadata(id=album_id, name=proto.name, tracks=tracks)

    def playlist(self, playlist_id: SpotifyId) -> PlaylistMetadata:
        proto = self._fetch(
            Kind.PLAYLIST, playlist_id,
            lambda: self._session.api().get_playlist(
                PlaylistId.from_uri(playlist_id.uri(Kind.PLAYLIST))
            )
        )
        tracks = []
        for item in proto.contents.items:
            if not item.uri.startswith(_TRACK_URI_PREFIX):
                logger.debug(f"Ignoring non-track playlist entry {item.uri}")
                continue
            tracks.append(SpotifyId.from_base62(item.uri[len(_TRACK_URI_PREFIX):]))
        return PlaylistMetadata(
            id=playlist_id,
            name=proto.attributes.name,
            tracks=tuple(tracks),
        )

    def show(self, show_id: SpotifyId) -> ShowMetadata:
        proto = self._fetch(
            Kind.SHOW, show_id,
            lambda: self._session.api().get_metadata_4_show(
                ShowId.from_base62(show_id.to_base62())
            )
        )
        return ShowMetadata(
            id=show_id,
            name=proto.name,
            publisher=proto.publisher,
            episodes=tuple(SpotifyId(bytes(e.gid)) for e in proto.episode),
        )

    def artist(self, artist_id: SpotifyId) -> ArtistMetadata:
        proto = self._fetch(
            Kind.ARTIST, artist_id,
            lambda: self._session.api().get_metadata_4_artist(
                ArtistId.from_base62(artist_id.to_base62())
            )
        )
        return ArtistMetadata(id=artist_id, name=proto.name)

    # =========================================================================
    # Audio
    # =========================================================================

    def audio_key(self, item_id: SpotifyId, file_id: bytes) -> bytes:
        try:
            return self._session.audio_key().get_audio_key(item_id.gid, file_id, retry=False)
        except Exception as e:
            raise AudioKeyError(
                f"Cannot get audio key for {item_id}: {e}",
                details={"item_id": str(item_id), "file_id": file_id.hex()}
            ) from e

    def open_stream(self, file_id: bytes) -> ByteStream:
        try:
            url = self._session.cdn().get_audio_url(file_id)
        except Exception as e:
            raise StreamError(
                f"Cannot open file stream {file_id.hex()}: {e}",
                details={"file_id": file_id.hex(), "original_error": str(e)}
            ) from e
        logger.debug(f"Streaming {file_id.hex()} from CDN")
        return CdnStream(url, self._http)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._http.close()
        try:
            self._session.close()
        except Exception as e:
            logger.debug(f"Error while closing session: {e}")
