from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List

from .models import FeedItem

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def order_for_publish(items: Iterable[FeedItem]) -> List[FeedItem]:
    """
    Oldest first, so posts show up on the timeline in publication order.

    The sort is stable: items with equal pubDate keep their merge order. A missing
    pubDate sorts as the Unix epoch.
    """
    return sorted(items, key=lambda it: it.pub_date or _EPOCH)
