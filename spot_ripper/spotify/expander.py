"""
Reference expansion for spot-ripper.

Turns parsed references into leaf work items:

    track / episode  ->  inserted as-is, no context
    album            ->  its tracks in album order, context = album name
    playlist         ->  its tracks in playlist order, no context
    show             ->  its episodes oldest first, context = the show

The catalog lists a show's episodes newest first; expansion reverses that
list exactly once so delivery runs in chronological order.

A failed container fetch is not caught here: the user referenced the
container explicitly, so the CatalogError aborts the run.
"""

from typing import Iterable

from spot_ripper.core.logger import get_logger
from spot_ripper.spotify.client import CatalogClient
from spot_ripper.spotify.ids import Kind
from spot_ripper.spotify.references import Reference
from spot_ripper.spotify.worklist import ItemKind, WorkItem, WorkList

logger = get_logger(__name__)


class Expander:
    """
    Expands references into a WorkList, one reference at a time.

    Attributes:
        worklist: The list being built. Shared with the caller.
    """

    def __init__(self, client: CatalogClient, worklist: WorkList | None = None) -> None:
        self._client = client
        self.worklist = worklist if worklist is not None else WorkList()

    def expand(self, reference: Reference) -> int:
        """
        Add the leaf items of one reference to the work list.

        Returns:
            Number of ids newly added (updates of known ids not counted).

        Raises:
            CatalogError: If a container fetch fails.
        """
        if reference.kind is Kind.TRACK:
            return self.worklist.extend([WorkItem(reference.id, ItemKind.TRACK)])

        if reference.kind is Kind.EPISODE:
            return self.worklist.extend([WorkItem(reference.id, ItemKind.EPISODE)])

        if reference.kind is Kind.ALBUM:
            album = self._client.album(reference.id)
            added = self.worklist.extend(
                WorkItem(track_id, ItemKind.TRACK, album.name)
                for track_id in album.tracks
            )
            logger.info(f"Album {album.name}: {len(album.tracks)} tracks ({added} new)")
            return added

        if reference.kind is Kind.PLAYLIST:
            playlist = self._client.playlist(reference.id)
            added = self.worklist.extend(
                WorkItem(track_id, ItemKind.TRACK)
                for track_id in playlist.tracks
            )
            logger.info(f"Playlist {playlist.name}: {len(playlist.tracks)} tracks ({added} new)")
            return added

        if reference.kind is Kind.SHOW:
            show = self._client.show(reference.id)
            added = self.worklist.extend(
                WorkItem(episode_id, ItemKind.EPISODE, show)
                for episode_id in reversed(show.episodes)
            )
            logger.info(f"Show {show.name}: {len(show.episodes)} episodes ({added} new)")
            return added

        logger.warning(f"Unknown link type: {reference.kind.value}")
        return 0

    def expand_all(self, references: Iterable[Reference]) -> WorkList:
        """Expand every reference in order and return the work list."""
        for reference in references:
            self.expand(reference)
        return self.worklist
