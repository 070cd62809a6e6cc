from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional

import feedparser
import requests

from .exceptions import RSSFetchError
from .models import Feed
from .parser import parse_feed

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0
_USER_AGENT = "rss-bsky/0.1"


def fetch_feed(url: str, *, timeout: float = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None) -> Feed:
    """
    Fetch a single feed URL and return it as a Feed record.

    Raises RSSFetchError on network/HTTP errors or when the document is malformed (bozo)
    and yielded no entries.
    """
    http = session or requests
    try:
        resp = http.get(url, timeout=timeout, headers={"User-Agent": _USER_AGENT})
        resp.raise_for_status()
    except requests.RequestException as e:
        raise RSSFetchError(f"Failed to fetch feed: {url} ({e})") from e

    parsed = feedparser.parse(resp.content)
    if getattr(parsed, "bozo", 0) and not parsed.get("entries"):
        exc = getattr(parsed, "bozo_exception", None)
        msg = f"Invalid RSS/Atom feed: {url}"
        if exc:
            msg += f" ({exc})"
        raise RSSFetchError(msg)

    feed = parse_feed(parsed, url=url)
    logger.debug("Title: %s (%d entries)", feed.title, len(feed.entries))
    return feed


def fetch_many(
    urls: Iterable[str],
    *,
    timeout: float = DEFAULT_TIMEOUT,
    session: Optional[requests.Session] = None,
) -> Iterator[Feed]:
    """
    Fetch feeds one after another, in the given order.

    A failing URL is logged and skipped so the remaining feeds are still processed.
    """
    for url in urls:
        try:
            yield fetch_feed(url, timeout=timeout, session=session)
        except RSSFetchError as e:
            logger.error("%s", e)
