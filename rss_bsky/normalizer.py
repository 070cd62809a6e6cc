from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from dateutil import parser as dateparser

from .models import FeedItem

logger = logging.getLogger(__name__)


def parse_url(value: Any) -> Optional[str]:
    """Return the trimmed URL if it is absolute (scheme and host), else None."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value:
        return None
    try:
        parts = urlparse(value)
    except ValueError:
        return None
    if not parts.scheme or not parts.netloc:
        return None
    return value


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a publication timestamp into a timezone-aware datetime.

    Accepts datetimes and ISO 8601 / RFC 822 strings. Naive values are taken to be
    in the local zone. Returns None when the value is missing or unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value.strip():
        try:
            dt = dateparser.parse(value.strip())
        except (ValueError, OverflowError) as e:
            logger.debug("Unparseable timestamp %r (%s)", value, e)
            return None
    else:
        return None
    if dt.tzinfo is None:
        try:
            dt = dt.astimezone()
        except (OverflowError, OSError, ValueError) as e:
            logger.debug("Timestamp %r out of range for the local zone (%s)", value, e)
            return None
    return dt


def to_feed_item(entry: Dict[str, Any]) -> FeedItem:
    """
    Convert a validated raw entry dict into a FeedItem.

    Title and content are trimmed; link, media URL and pubDate are left unset when
    they cannot be parsed. Languages and categories start empty and are filled by
    `FeedItem.add_metadata` for each feed that lists the entry.
    """
    return FeedItem(
        guid=entry.get("guid") or "",
        title=(entry.get("title") or "").strip(),
        link=parse_url(entry.get("link")) or "",
        pub_date=parse_timestamp(entry.get("pubDate")),
        content=(entry.get("content") or "").strip(),
        media_url=parse_url(entry.get("mediaThumbnailUrl")),
    )
