from datetime import datetime, timezone

import pytest

from rss_bsky.models import Feed, RunWindow


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def make_entry(guid="x", title="Hi", link="https://a.example/post", pub_date="2024-01-01T09:30:00Z", **extra):
    entry = {
        "guid": guid,
        "title": title,
        "link": link,
        "pubDate": pub_date,
        "content": extra.pop("content", None),
        "mediaThumbnailUrl": extra.pop("media", None),
    }
    entry.update(extra)
    return entry


def make_feed(*entries, title="Feed", language="en", url=None):
    return Feed(title=title, language=language, entries=list(entries), url=url)


@pytest.fixture
def window():
    # Same window as a run with look-back 1h and current time 2024-01-01T10:30:00Z
    return RunWindow(start_time=utc(2024, 1, 1, 9), end_time=utc(2024, 1, 1, 10))
