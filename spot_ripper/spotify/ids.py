"""
Catalog identifiers for spot-ripper.

Every catalog entity (track, episode, album, playlist, show, artist) is
identified by a 128-bit gid. Users see it as a 22-character base62 string
(the tail of open.spotify.com URLs and spotify: URIs); the session protocol
works with the raw 16 bytes.

Usage:
    from spot_ripper.spotify.ids import SpotifyId

    track_id = SpotifyId.from_base62("4uLU6hMCjMI75M1A2tKUQC")
    track_id.hex      # "c4d3..." (32 hex digits)
    str(track_id)     # "4uLU6hMCjMI75M1A2tKUQC"
"""

from dataclasses import dataclass
from enum import Enum

from spot_ripper.core.exceptions import InvalidIdError


BASE62_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
BASE62_LENGTH = 22
GID_LENGTH = 16

_BASE62_INDEX = {c: i for i, c in enumerate(BASE62_DIGITS)}
_MAX_ID = 1 << (GID_LENGTH * 8)


class Kind(Enum):
    """Kinds of catalog entity a reference or id can point to."""
    PLAYLIST = "playlist"
    ALBUM = "album"
    SHOW = "show"
    TRACK = "track"
    EPISODE = "episode"
    ARTIST = "artist"


@dataclass(frozen=True)
class SpotifyId:
    """
    Immutable catalog identifier.

    Equality and hashing use the gid only, so the same id reached through
    an album and through a playlist is the same dictionary key.

    Attributes:
        gid: The 16 raw identifier bytes (big-endian).
    """
    gid: bytes

    def __post_init__(self) -> None:
        if len(self.gid) != GID_LENGTH:
            raise InvalidIdError(
                f"Catalog id must be {GID_LENGTH} bytes, got {len(self.gid)}",
                details={"gid": self.gid.hex()}
            )

    @classmethod
    def from_base62(cls, text: str) -> "SpotifyId":
        """
        Decode a base62 id.

        Raises:
            InvalidIdError: If the text is empty, contains a character
                            outside the base62 alphabet, or encodes a value
                            that does not fit in 128 bits.
        """
        if not text:
            raise InvalidIdError("Empty catalog id")

        value = 0
        for char in text:
            digit = _BASE62_INDEX.get(char)
            if digit is None:
                raise InvalidIdError(
                    f"Invalid character {char!r} in catalog id {text!r}",
                    details={"id": text}
                )
            value = value * 62 + digit
            if value >= _MAX_ID:
                raise InvalidIdError(
                    f"Catalog id {text!r} does not fit in 128 bits",
                    details={"id": text}
                )

        return cls(value.to_bytes(GID_LENGTH, "big"))

    @classmethod
    def from_hex(cls, text: str) -> "SpotifyId":
        """
        Decode a 32 digit hexadecimal id.

        Raises:
            InvalidIdError: If the text is not 16 bytes of hexadecimal.
        """
        try:
            gid = bytes.fromhex(text)
        except ValueError as e:
            raise InvalidIdError(
                f"Invalid hexadecimal catalog id {text!r}",
                details={"id": text, "original_error": str(e)}
            ) from e
        return cls(gid)

    def to_base62(self) -> str:
        """Render the id as the 22-character base62 string."""
        value = int.from_bytes(self.gid, "big")
        chars = []
        while value:
            value, digit = divmod(value, 62)
            chars.append(BASE62_DIGITS[digit])
        return "".join(reversed(chars)).rjust(BASE62_LENGTH, "0")

    @property
    def hex(self) -> str:
        return self.gid.hex()

    def uri(self, kind: Kind) -> str:
        """Return the spotify:<kind>:<id> URI for this id."""
        return f"spotify:{kind.value}:{self.to_base62()}"

    def url(self, kind: Kind) -> str:
        """Return the open.spotify.com URL for this id."""
        return f"https://open.spotify.com/{kind.value}/{self.to_base62()}"

    def __str__(self) -> str:
        return self.to_base62()

    def __repr__(self) -> str:
        return f"SpotifyId({self.to_base62()!r})"
