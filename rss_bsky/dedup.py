from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional

from .models import Feed, FeedItem, RunWindow
from .normalizer import to_feed_item
from .validator import is_valid_entry
from .window import in_window

logger = logging.getLogger(__name__)


def merge_item(items: Dict[str, FeedItem], item: FeedItem, feed: Feed) -> FeedItem:
    """
    Merge `item`, as listed by `feed`, into the guid-keyed mapping.

    The first item seen for a guid is kept and its scalar fields are never overwritten.
    Every feed that lists the guid contributes its language and categories to the kept item.
    Returns the kept item.
    """
    kept = items.get(item.guid)
    if kept is None:
        kept = item
        items[item.guid] = kept
    kept.add_metadata(feed)
    return kept


class ItemMerger:
    """
    Guid-keyed collection of feed items for one run.

    Feeds are added one at a time; each raw entry is validated, normalized, checked
    against the run window and merged. Only one writer touches the mapping.
    """

    def __init__(self, window: Optional[RunWindow] = None) -> None:
        self.window = window
        self._items: Dict[str, FeedItem] = {}

    def add_feed(self, feed: Feed) -> int:
        """Merge every qualifying entry of `feed`; returns how many entries were accepted."""
        accepted = 0
        for entry in feed.entries:
            if not is_valid_entry(entry):
                continue
            item = to_feed_item(entry)
            if self.window is not None and not in_window(self.window, item):
                continue
            merge_item(self._items, item, feed)
            accepted += 1
        logger.debug("Feed '%s': accepted %d of %d entries", feed.title, accepted, len(feed.entries))
        return accepted

    def items(self) -> List[FeedItem]:
        return list(self._items.values())

    def get(self, guid: str) -> Optional[FeedItem]:
        return self._items.get(guid)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[FeedItem]:
        return iter(self._items.values())
