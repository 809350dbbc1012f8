"""Test the librespot-backed catalog client"""

from unittest.mock import MagicMock, Mock, patch

import pytest
import requests
from conftest import make_id

from spot_ripper.core.exceptions import AudioKeyError, CatalogError, SessionError, StreamError
from spot_ripper.spotify.models import AudioFormat
from spot_ripper.spotify.session import CdnStream, LibrespotClient


def gid(n):
    return make_id(n).gid


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def client(session):
    client = LibrespotClient(session)
    yield client
    client.close()


class TestMetadata:
    """Test protobuf messages are mapped onto the models"""

    def test_track(self, client, session):
        """Test a track with files, artists, album and alternatives"""
        proto = Mock()
        proto.gid = gid(1)
        proto.name = "Song"
        proto.file = [
            Mock(format=1, file_id=b"f160"),
            Mock(format=2, file_id=b"f320"),
            Mock(format=99, file_id=b"unknown"),
        ]
        proto.artist = [Mock(gid=gid(5)), Mock(gid=gid(6))]
        proto.album.gid = gid(7)
        proto.alternative = [Mock(gid=gid(8))]
        session.api.return_value.get_metadata_4_track.return_value = proto

        track = client.track(make_id(1))

        assert track.id == make_id(1)
        assert track.name == "Song"
        assert track.available is True
        assert track.files == {
            AudioFormat.OGG_VORBIS_160: b"f160",
            AudioFormat.OGG_VORBIS_320: b"f320",
        }
        assert track.artists == (make_id(5), make_id(6))
        assert track.album == make_id(7)
        assert track.alternatives == (make_id(8),)

    def test_track_without_files_is_unavailable(self, client, session):
        """Test availability follows the file list"""
        proto = Mock(gid=gid(1), file=[], artist=[], alternative=[Mock(gid=gid(2))])
        proto.name = "Gone"
        proto.album.gid = b""
        session.api.return_value.get_metadata_4_track.return_value = proto

        track = client.track(make_id(1))

        assert track.available is False
        assert track.album is None

    def test_country_restrictions_are_not_evaluated(self, client, session):
        """Test a region-restricted track that lists files counts as available"""
        proto = Mock(gid=gid(1), artist=[], alternative=[Mock(gid=gid(2))])
        proto.name = "Blocked Here"
        proto.file = [Mock(format=2, file_id=b"f320")]
        proto.album.gid = b""
        proto.restriction = [Mock(countries_allowed="", countries_forbidden="DEFRGB")]
        session.api.return_value.get_metadata_4_track.return_value = proto

        assert client.track(make_id(1)).available is True

    def test_album_flattens_discs(self, client, session):
        """Test album tracks are listed disc by disc"""
        proto = Mock()
        proto.name = "Double Album"
        proto.disc = [
            Mock(track=[Mock(gid=gid(1)), Mock(gid=gid(2))]),
            Mock(track=[Mock(gid=gid(3))]),
        ]
        session.api.return_value.get_metadata_4_album.return_value = proto

        album = client.album(make_id(10))

        assert album.name == "Double Album"
        assert album.tracks == (make_id(1), make_id(2), make_id(3))

    def test_playlist_keeps_only_tracks(self, client, session):
        """Test episodes and local files in playlists are ignored"""
        proto = Mock()
        proto.attributes.name = "Mix"
        proto.contents.items = [
            Mock(uri=f"spotify:track:{make_id(1)}"),
            Mock(uri=f"spotify:episode:{make_id(2)}"),
            Mock(uri="spotify:local:artist:album:title:123"),
            Mock(uri=f"spotify:track:{make_id(3)}"),
        ]
        session.api.return_value.get_playlist.return_value = proto

        playlist = client.playlist(make_id(20))

        assert playlist.name == "Mix"
        assert playlist.tracks == (make_id(1), make_id(3))

    def test_show_keeps_catalog_order(self, client, session):
        """Test show episodes are returned newest first, as listed"""
        proto = Mock(episode=[Mock(gid=gid(3)), Mock(gid=gid(2)), Mock(gid=gid(1))])
        proto.name = "Pod"
        proto.publisher = "Pub"
        session.api.return_value.get_metadata_4_show.return_value = proto

        show = client.show(make_id(30))

        assert (show.name, show.publisher) == ("Pod", "Pub")
        assert show.episodes == (make_id(3), make_id(2), make_id(1))

    def test_fetch_failure(self, client, session):
        """Test protocol errors become CatalogError with the kind"""
        session.api.return_value.get_metadata_4_artist.side_effect = RuntimeError("timeout")

        with pytest.raises(CatalogError) as exc_info:
            client.artist(make_id(5))

        assert exc_info.value.kind == "artist"


class TestAudio:
    """Test key negotiation and stream opening"""

    def test_audio_key(self, client, session):
        """Test the key is requested once, with the raw gid and file id"""
        session.audio_key.return_value.get_audio_key.return_value = b"k" * 16

        assert client.audio_key(make_id(1), b"file") == b"k" * 16
        session.audio_key.return_value.get_audio_key.assert_called_once_with(gid(1), b"file", retry=False)

    def test_audio_key_failure(self, client, session):
        """Test key negotiation errors become AudioKeyError"""
        session.audio_key.return_value.get_audio_key.side_effect = RuntimeError("denied")

        with pytest.raises(AudioKeyError):
            client.audio_key(make_id(1), b"file")

    def test_open_stream_failure(self, client, session):
        """Test CDN resolution errors become StreamError"""
        session.cdn.return_value.get_audio_url.side_effect = RuntimeError("no cdn")

        with pytest.raises(StreamError):
            client.open_stream(b"file")

    def test_open_stream(self, client, session):
        """Test a CdnStream is returned for the resolved URL"""
        session.cdn.return_value.get_audio_url.return_value = "https://cdn.example/file"

        stream = client.open_stream(b"file")

        assert isinstance(stream, CdnStream)
        assert stream.url == "https://cdn.example/file"


class TestCdnStream:
    """Test the CDN download"""

    def test_read_to_end(self):
        """Test the response body is returned"""
        http = Mock()
        http.get.return_value.content = b"encrypted"

        assert CdnStream("https://cdn.example/file", http).read_to_end() == b"encrypted"
        http.get.return_value.raise_for_status.assert_called_once()

    def test_http_error(self):
        """Test transfer errors become StreamError"""
        http = Mock()
        http.get.side_effect = requests.ConnectionError("reset")

        with pytest.raises(StreamError):
            CdnStream("https://cdn.example/file", http).read_to_end()


class TestConnect:
    """Test session establishment"""

    @patch("spot_ripper.spotify.session.Session")
    def test_connect(self, mock_session_cls):
        """Test user/password credentials are used"""
        client = LibrespotClient.connect("user", "secret")

        mock_session_cls.Builder.return_value.user_pass.assert_called_once_with("user", "secret")
        assert isinstance(client, LibrespotClient)
        client.close()

    @patch("spot_ripper.spotify.session.Session")
    def test_connect_failure(self, mock_session_cls):
        """Test authentication failures become SessionError"""
        mock_session_cls.Builder.return_value.user_pass.return_value.create.side_effect = (
            RuntimeError("BadCredentials")
        )

        with pytest.raises(SessionError):
            LibrespotClient.connect("user", "wrong")

    def test_close_is_idempotent(self, session):
        """Test closing twice closes the session once"""
        client = LibrespotClient(session)
        client.close()
        client.close()
        session.close.assert_called_once()
