"""
Reference parsing for spot-ripper.

Turns lines of free text into (kind, id) references. A line may hold a full
URL, a spotify: URI or anything else containing "<kind>/<id>" or
"<kind>:<id>"; the first match on the line wins.

    https://open.spotify.com/album/1DFixLWuPkv3KT3TnV35m3?si=x  -> album
    spotify:episode:512ojhOuo1ktJprKbVcKyQ                       -> episode
    just some text                                               -> ignored

Input ends at a line that is exactly "done" (after trimming) or at the end
of the stream.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Iterator

from spot_ripper.core.logger import get_logger
from spot_ripper.spotify.ids import Kind, SpotifyId

logger = get_logger(__name__)


REFERENCE_PATTERN = re.compile(r"(playlist|track|album|episode|show)[/:]([a-zA-Z0-9]+)")

END_OF_INPUT = "done"

# Kinds a user may reference; artists are only reachable through tracks
REFERENCE_KINDS = frozenset({
    Kind.PLAYLIST,
    Kind.ALBUM,
    Kind.SHOW,
    Kind.TRACK,
    Kind.EPISODE,
})


@dataclass(frozen=True)
class Reference:
    """
    A parsed input line.

    Attributes:
        kind: What the id points to.
        id: The referenced catalog id.
    """
    kind: Kind
    id: SpotifyId


def parse_reference(line: str) -> Reference | None:
    """
    Extract a reference from one line of text.

    Returns:
        The reference, or None when the line contains no reference.

    Raises:
        InvalidIdError: If the matched id cannot be decoded.
    """
    match = REFERENCE_PATTERN.search(line)
    if match is None:
        return None

    kind_text, id_text = match.groups()
    try:
        kind = Kind(kind_text)
    except ValueError:
        kind = None
    if kind not in REFERENCE_KINDS:
        logger.warning(f"Unknown link type: {kind_text}")
        return None

    return Reference(kind=kind, id=SpotifyId.from_base62(id_text))


def read_references(lines: Iterable[str]) -> Iterator[Reference]:
    """
    Yield the references found in lines, stopping at "done".

    Lines are trimmed before parsing. Lines without a reference are
    skipped silently. Parsing is lazy so that a caller can expand each
    reference before the next line is read.

    Raises:
        InvalidIdError: If a matched id cannot be decoded.
    """
    for raw_line in lines:
        line = raw_line.strip()
        if line == END_OF_INPUT:
            break

        reference = parse_reference(line)
        if reference is not None:
            yield reference
