"""
Catalog module for spot-ripper.

This module provides everything on the catalog side of the pipeline:
    - SpotifyId, Kind: catalog identifiers
    - Track/Episode/Album/Playlist/Show/Artist metadata models
    - CatalogClient, ByteStream: the boundary to the session protocol
    - parse_reference, read_references: reading user input
    - WorkItem, WorkList, Expander: building the ordered work list
    - decrypt_audio, strip_container_header: turning ciphertext into audio

The librespot-backed client lives in spot_ripper.spotify.session and is
imported from there directly, so the rest of the package can be used with
any CatalogClient.

Usage:
    from spot_ripper.spotify import Expander, read_references
    from spot_ripper.spotify.session import LibrespotClient

    client = LibrespotClient.connect(username, password)
    expander = Expander(client)
    for reference in read_references(sys.stdin):
        expander.expand(reference)
"""

from spot_ripper.spotify.client import ByteStream, CatalogClient
from spot_ripper.spotify.decrypt import (
    CONTAINER_HEADER_SIZE,
    decrypt_audio,
    strip_container_header,
)
from spot_ripper.spotify.expander import Expander
from spot_ripper.spotify.ids import Kind, SpotifyId
from spot_ripper.spotify.models import (
    FORMAT_PREFERENCE,
    AlbumMetadata,
    ArtistMetadata,
    AudioFormat,
    EpisodeMetadata,
    PlaylistMetadata,
    ShowMetadata,
    TrackMetadata,
)
from spot_ripper.spotify.references import Reference, parse_reference, read_references
from spot_ripper.spotify.worklist import ItemKind, WorkItem, WorkList

__all__ = [
    # Ids
    "SpotifyId",
    "Kind",
    # Models
    "AudioFormat",
    "FORMAT_PREFERENCE",
    "TrackMetadata",
    "EpisodeMetadata",
    "AlbumMetadata",
    "PlaylistMetadata",
    "ShowMetadata",
    "ArtistMetadata",
    # Client boundary
    "CatalogClient",
    "ByteStream",
    # Decryption
    "CONTAINER_HEADER_SIZE",
    "decrypt_audio",
    "strip_container_header",
    # Input and expansion
    "Reference",
    "parse_reference",
    "read_references",
    "ItemKind",
    "WorkItem",
    "WorkList",
    "Expander",
]
