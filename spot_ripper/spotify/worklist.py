"""
Ordered, deduplicated work list of leaf items.

The work list pairs an insertion-ordered sequence of ids with an
id -> WorkItem table:

    add(T1) add(T2) add(T1')   ->   order [T1, T2], table {T1: T1', T2: ...}

Re-adding an id that is already present replaces its WorkItem (kind and
context) but keeps its first-seen position, so a track referenced twice is
delivered once, at its first position.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Union

from spot_ripper.spotify.ids import Kind, SpotifyId
from spot_ripper.spotify.models import ShowMetadata


class ItemKind(Enum):
    """Leaf item kinds: the units actually downloaded."""
    TRACK = "track"
    EPISODE = "episode"

    @property
    def catalog_kind(self) -> Kind:
        return Kind(self.value)


# Album name for tracks, the owning show for episodes
ItemContext = Union[str, ShowMetadata, None]


@dataclass(frozen=True)
class WorkItem:
    """
    One leaf item waiting for delivery.

    Attributes:
        id: Catalog id of the track or episode.
        kind: TRACK or EPISODE.
        context: Grouping info already known at expansion time:
                 - the album name for tracks expanded from an album
                 - the ShowMetadata for episodes expanded from a show
                 - None when unknown (fetched lazily during delivery)
    """
    id: SpotifyId
    kind: ItemKind
    context: ItemContext = None

    @property
    def album_name(self) -> str | None:
        return self.context if isinstance(self.context, str) else None

    @property
    def show(self) -> ShowMetadata | None:
        return self.context if isinstance(self.context, ShowMetadata) else None


class WorkList:
    """
    Insertion-ordered map of SpotifyId -> WorkItem.

    Example:
        worklist = WorkList()
        worklist.add(WorkItem(t1, ItemKind.TRACK))
        worklist.add(WorkItem(t2, ItemKind.TRACK))
        worklist.add(WorkItem(t1, ItemKind.TRACK, "Album"))
        [item.id for item in worklist]   # [t1, t2]
        worklist.get(t1).context          # "Album"
    """

    def __init__(self, items: Iterable[WorkItem] = ()) -> None:
        self._order: list[SpotifyId] = []
        self._items: dict[SpotifyId, WorkItem] = {}
        self.extend(items)

    def add(self, item: WorkItem) -> bool:
        """
        Insert or update an item.

        Returns:
            True if the id was new (appended), False if an existing entry
            was updated in place.
        """
        is_new = item.id not in self._items
        self._items[item.id] = item
        if is_new:
            self._order.append(item.id)
        return is_new

    def extend(self, items: Iterable[WorkItem]) -> int:
        """
        Add items in order.

        Returns:
            Number of ids that were new.
        """
        return sum(1 for item in items if self.add(item))

    def get(self, item_id: SpotifyId) -> WorkItem | None:
        return self._items.get(item_id)

    def ids(self) -> list[SpotifyId]:
        return list(self._order)

    def __iter__(self) -> Iterator[WorkItem]:
        for item_id in self._order:
            yield self._items[item_id]

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __repr__(self) -> str:
        return f"WorkList({[str(i) for i in self._order]})"
