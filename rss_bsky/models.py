from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Set

from .exceptions import ConfigurationError


# Anything that is not a letter (including æøå) or a digit separates category tokens.
_CATEGORY_SPLIT = re.compile(r"[^a-zA-ZæøåÆØÅ0-9]")


@dataclass
class Feed:
    """
    One fetched feed, as handed over by the feed source.

    `entries` are raw dicts with the keys produced by `rss_bsky.parser.parse_entry`:
    guid, title, link, pubDate, content, mediaThumbnailUrl (all optional).
    """
    title: Optional[str] = None
    language: Optional[str] = None
    entries: List[Dict[str, Any]] = field(default_factory=list)
    url: Optional[str] = None


@dataclass(eq=False)
class FeedItem:
    """
    Normalized feed entry plus metadata accumulated from every feed that listed it.

    Identity is the guid: two items are the same entry iff their guids match,
    so equality is left as object identity and merging goes through `dedup.merge_item`.
    """
    guid: str
    title: str
    link: str
    pub_date: Optional[datetime] = None
    content: str = ""
    media_url: Optional[str] = None
    languages: Set[str] = field(default_factory=set)
    categories: Set[str] = field(default_factory=set)

    def add_metadata(self, feed: Feed) -> None:
        self.languages.add(feed.language or "")
        self.add_categories(_CATEGORY_SPLIT.split(feed.title or ""))

    def add_categories(self, tokens: Iterable[str]) -> None:
        for token in tokens:
            token = token.strip().lower()
            if token:
                self.categories.add(token)

    def __str__(self) -> str:
        pub_date = self.pub_date.isoformat() if self.pub_date else "undefined"
        return (
            "FeedItem {\n"
            f"    guid: '{self.guid}',\n"
            f"    title: '{self.title}',\n"
            f"    link: '{self.link}',\n"
            f"    pubDate: '{pub_date}',\n"
            f"    content: '{self.content}',\n"
            f"    mediaUrl: '{self.media_url or 'undefined'}',\n"
            f"    languages: [{', '.join(sorted(self.languages))}],\n"
            f"    categories: [{', '.join(sorted(self.categories))}]\n"
            "}"
        )


@dataclass(frozen=True)
class RunWindow:
    """Publication-time window of one run: exclusive `start_time`, inclusive `end_time`."""
    start_time: datetime
    end_time: datetime

    def __post_init__(self) -> None:
        if self.start_time >= self.end_time:
            raise ConfigurationError(
                f"Invalid run window: start {self.start_time.isoformat()} "
                f"is not before end {self.end_time.isoformat()}"
            )

    def __str__(self) -> str:
        return f"{self.start_time.isoformat()}-{self.end_time.isoformat()}"


@dataclass(frozen=True)
class PublishRequest:
    """What the publisher needs to create one post."""
    text: str
    external_link: str
    external_title: str
    external_description: str
    created_at: Optional[datetime] = None
    thumbnail_source_url: Optional[str] = None
    languages: FrozenSet[str] = frozenset()
    tags: FrozenSet[str] = frozenset()

    @classmethod
    def from_item(cls, item: FeedItem) -> "PublishRequest":
        return cls(
            text=item.title,
            external_link=item.link,
            external_title=item.title,
            external_description=item.content or "",
            created_at=item.pub_date,
            thumbnail_source_url=item.media_url,
            languages=frozenset(item.languages),
            tags=frozenset(item.categories),
        )
