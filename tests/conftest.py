"""Test configuration and fixtures"""

import time

import pytest
from Crypto.Cipher import AES

from spot_ripper.core.exceptions import AudioKeyError, CatalogError, StreamError
from spot_ripper.spotify.client import ByteStream, CatalogClient
from spot_ripper.spotify.decrypt import AUDIO_AES_IV, CONTAINER_HEADER_SIZE
from spot_ripper.spotify.ids import SpotifyId
from spot_ripper.spotify.models import (
    AlbumMetadata,
    ArtistMetadata,
    AudioFormat,
    EpisodeMetadata,
    PlaylistMetadata,
    ShowMetadata,
    TrackMetadata,
)


AUDIO_KEY = bytes(range(16))
CONTAINER_HEADER = b"\x00" * CONTAINER_HEADER_SIZE


def make_id(n: int) -> SpotifyId:
    """Build a deterministic catalog id from a small integer"""
    return SpotifyId(n.to_bytes(16, "big"))


def encrypt(key: bytes, plaintext: bytes) -> bytes:
    """Encrypt the way the CDN serves audio files (CTR is symmetric)"""
    return AES.new(key, AES.MODE_CTR, nonce=b"", initial_value=AUDIO_AES_IV).encrypt(plaintext)


class FakeStream(ByteStream):
    """In-memory ByteStream, optionally slow or failing"""

    def __init__(self, data: bytes = b"", error: Exception | None = None, delay: float = 0.0):
        self.data = data
        self.error = error
        self.delay = delay

    def read_to_end(self) -> bytes:
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.data


class FakeCatalogClient(CatalogClient):
    """
    Dict-backed CatalogClient.

    Every call is recorded in `calls` as (operation, argument) so tests can
    assert what the pipeline did and did not ask for.
    """

    def __init__(self):
        self.tracks = {}
        self.episodes = {}
        self.albums = {}
        self.playlists = {}
        self.shows = {}
        self.artists = {}
        self.keys = {}
        self.streams = {}
        self.calls = []
        self.turns = 0
        self.closed = False
        self._next_id = 100_000

    # Builders ---------------------------------------------------------------

    def _new_id(self) -> SpotifyId:
        self._next_id += 1
        return make_id(self._next_id)

    def _add_files(self, formats, payload):
        files = {}
        for audio_format in formats:
            file_id = self._new_id().gid
            self.keys[file_id] = AUDIO_KEY
            self.streams[file_id] = FakeStream(encrypt(AUDIO_KEY, CONTAINER_HEADER + payload))
            files[audio_format] = file_id
        return files

    def add_track(
        self,
        n,
        name,
        artists=("Artist",),
        album=None,
        available=True,
        alternatives=(),
        payload=b"track audio",
        formats=(AudioFormat.OGG_VORBIS_320,),
    ):
        artist_ids = []
        for artist_name in artists:
            artist_id = self._new_id()
            self.artists[artist_id] = ArtistMetadata(artist_id, artist_name)
            artist_ids.append(artist_id)

        track_id = make_id(n)
        self.tracks[track_id] = TrackMetadata(
            id=track_id,
            name=name,
            available=available,
            files=self._add_files(formats, payload),
            artists=tuple(artist_ids),
            album=album,
            alternatives=tuple(make_id(a) for a in alternatives),
        )
        return track_id

    def add_album(self, n, name, tracks):
        album_id = make_id(n)
        self.albums[album_id] = AlbumMetadata(album_id, name, tuple(tracks))
        return album_id

    def add_playlist(self, n, name, tracks):
        playlist_id = make_id(n)
        self.playlists[playlist_id] = PlaylistMetadata(playlist_id, name, tuple(tracks))
        return playlist_id

    def add_show(self, n, name, publisher, episodes=()):
        show_id = make_id(n)
        self.shows[show_id] = ShowMetadata(show_id, name, publisher, tuple(episodes))
        return show_id

    def add_episode(
        self,
        n,
        name,
        show=None,
        available=True,
        payload=b"episode audio",
        formats=(AudioFormat.OGG_VORBIS_160,),
    ):
        episode_id = make_id(n)
        self.episodes[episode_id] = EpisodeMetadata(
            id=episode_id,
            name=name,
            available=available,
            files=self._add_files(formats, payload),
            show=show,
        )
        return episode_id

    def calls_to(self, operation):
        return [arg for op, arg in self.calls if op == operation]

    # CatalogClient ----------------------------------------------------------

    def _lookup(self, table, kind, item_id):
        self.calls.append((kind, item_id))
        if item_id not in table:
            raise CatalogError(f"Cannot get {kind} {item_id}", kind=kind)
        return table[item_id]

    def track(self, track_id):
        return self._lookup(self.tracks, "track", track_id)

    def episode(self, episode_id):
        return self._lookup(self.episodes, "episode", episode_id)

    def album(self, album_id):
        return self._lookup(self.albums, "album", album_id)

    def playlist(self, playlist_id):
        return self._lookup(self.playlists, "playlist", playlist_id)

    def show(self, show_id):
        return self._lookup(self.shows, "show", show_id)

    def artist(self, artist_id):
        return self._lookup(self.artists, "artist", artist_id)

    def audio_key(self, item_id, file_id):
        self.calls.append(("audio_key", item_id))
        if file_id not in self.keys:
            raise AudioKeyError(f"No key for {file_id.hex()}")
        return self.keys[file_id]

    def open_stream(self, file_id):
        self.calls.append(("open_stream", file_id))
        if file_id not in self.streams:
            raise StreamError(f"No stream for {file_id.hex()}")
        return self.streams[file_id]

    def turn(self, timeout):
        self.turns += 1
        time.sleep(0.001)

    def close(self):
        self.closed = True


@pytest.fixture
def catalog():
    """Empty in-memory catalog client"""
    return FakeCatalogClient()


@pytest.fixture
def output_dir(tmp_path):
    """Output directory for delivered files"""
    directory = tmp_path / "out"
    directory.mkdir()
    return directory
