"""
Data models for catalog entities.

Immutable dataclasses for the metadata the delivery pipeline reads. They are
fetched on demand by a CatalogClient and never cached beyond the processing
of one work item.

Design Decisions:
    - All dataclasses are frozen (immutable) to prevent accidental modification
    - Ordered collections are tuples (artists, alternatives, album tracks)
    - File catalogs map AudioFormat to the raw file id bytes
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping

from spot_ripper.spotify.ids import SpotifyId


class AudioFormat(Enum):
    """
    Audio file formats a catalog entry can offer.

    Values follow the format numbers used by the session protocol's
    metadata messages.
    """
    OGG_VORBIS_96 = 0
    OGG_VORBIS_160 = 1
    OGG_VORBIS_320 = 2
    MP3_256 = 3
    MP3_320 = 4
    MP3_160 = 5
    MP3_96 = 6
    MP3_160_ENC = 7
    AAC_24 = 8
    AAC_48 = 9
    FLAC_FLAC = 16


# Highest to lowest bitrate of the one codec the pipeline delivers
FORMAT_PREFERENCE = (
    AudioFormat.OGG_VORBIS_320,
    AudioFormat.OGG_VORBIS_160,
    AudioFormat.OGG_VORBIS_96,
)


@dataclass(frozen=True)
class TrackMetadata:
    """
    Metadata of a single track.

    Attributes:
        id: The track's catalog id.
        name: Track title.
        available: Whether the track can be streamed in this session.
        files: File catalog, AudioFormat -> file id.
        artists: Artist ids in credit order.
        album: Id of the album the track belongs to.
        alternatives: Ids of equivalent tracks, in preference order, used
                      when this one is unavailable.
    """
    id: SpotifyId
    name: str
    available: bool
    files: Mapping[AudioFormat, bytes] = field(default_factory=dict)
    artists: tuple[SpotifyId, ...] = ()
    album: SpotifyId | None = None
    alternatives: tuple[SpotifyId, ...] = ()


@dataclass(frozen=True)
class EpisodeMetadata:
    """
    Metadata of a single podcast episode.

    Episodes have no alternatives mechanism; an unavailable episode is
    still processed with its own files.
    """
    id: SpotifyId
    name: str
    available: bool
    files: Mapping[AudioFormat, bytes] = field(default_factory=dict)
    show: SpotifyId | None = None


@dataclass(frozen=True)
class AlbumMetadata:
    """Album name and its track ids in album order (discs flattened)."""
    id: SpotifyId
    name: str
    tracks: tuple[SpotifyId, ...] = ()


@dataclass(frozen=True)
class PlaylistMetadata:
    """Playlist name and its track ids in playlist order."""
    id: SpotifyId
    name: str
    tracks: tuple[SpotifyId, ...] = ()


@dataclass(frozen=True)
class ShowMetadata:
    """
    Podcast show.

    Attributes:
        episodes: Episode ids exactly as the catalog returns them,
                  which is newest first.
    """
    id: SpotifyId
    name: str
    publisher: str
    episodes: tuple[SpotifyId, ...] = ()


@dataclass(frozen=True)
class ArtistMetadata:
    id: SpotifyId
    name: str
