import logging

import pytest
import requests

from rss_bsky.exceptions import RSSFetchError
from rss_bsky.fetcher import fetch_feed, fetch_many

RSS = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:media="http://search.yahoo.com/mrss/">
  <channel>
    <title>Tech News Daily</title>
    <link>https://news.example</link>
    <description>Tech</description>
    <language>en</language>
    <item>
      <guid>https://news.example/1</guid>
      <title>  First story </title>
      <link>https://news.example/1</link>
      <description>Summary one</description>
      <pubDate>Mon, 01 Jan 2024 09:30:00 GMT</pubDate>
      <media:content url="https://img.example/1.jpg" medium="image" />
    </item>
    <item>
      <title>No guid</title>
      <link>https://news.example/2</link>
    </item>
  </channel>
</rss>
"""


class FakeResponse:
    def __init__(self, content=b"", status=200):
        self.content = content
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def get(self, url, timeout=None, headers=None):
        self.calls.append(url)
        resp = self.responses[url]
        if isinstance(resp, Exception):
            raise resp
        return resp


def test_fetch_feed_parses_feed_and_entries():
    session = FakeSession({"https://news.example/rss": FakeResponse(RSS)})
    feed = fetch_feed("https://news.example/rss", session=session)

    assert feed.title == "Tech News Daily"
    assert feed.language == "en"
    assert feed.url == "https://news.example/rss"
    assert len(feed.entries) == 2

    first = feed.entries[0]
    assert first["guid"] == "https://news.example/1"
    assert first["title"].strip() == "First story"
    assert first["link"] == "https://news.example/1"
    assert first["pubDate"] == "2024-01-01T09:30:00+00:00"
    assert first["content"] == "Summary one"
    assert first["mediaThumbnailUrl"] == "https://img.example/1.jpg"

    second = feed.entries[1]
    assert second["guid"] is None
    assert second["pubDate"] is None
    assert second["mediaThumbnailUrl"] is None


def test_http_error_raises_fetch_error():
    session = FakeSession({"https://down.example": FakeResponse(status=503)})
    with pytest.raises(RSSFetchError):
        fetch_feed("https://down.example", session=session)


def test_garbage_document_raises_fetch_error():
    session = FakeSession({"https://bad.example": FakeResponse(b"<html><body>nope")})
    with pytest.raises(RSSFetchError):
        fetch_feed("https://bad.example", session=session)


def test_fetch_many_skips_failed_feeds_and_keeps_order(caplog):
    session = FakeSession({
        "https://a.example": FakeResponse(RSS),
        "https://down.example": requests.ConnectionError("refused"),
        "https://b.example": FakeResponse(RSS),
    })
    with caplog.at_level(logging.ERROR, logger="rss_bsky.fetcher"):
        feeds = list(fetch_many(["https://a.example", "https://down.example", "https://b.example"], session=session))
    assert [f.url for f in feeds] == ["https://a.example", "https://b.example"]
    assert session.calls == ["https://a.example", "https://down.example", "https://b.example"]
    assert "Failed to fetch feed: https://down.example" in caplog.text
