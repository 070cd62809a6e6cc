from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from .config import RunConfig
from .dedup import ItemMerger
from .fetcher import fetch_many
from .models import Feed, FeedItem, PublishRequest, RunWindow
from .ordering import order_for_publish
from .publisher import BlueskyPublisher

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    window: RunWindow
    items: List[FeedItem] = field(default_factory=list)
    published: int = 0
    failed: int = 0
    dry_run: bool = True


def reconcile(feeds: Iterable[Feed], window: RunWindow) -> List[FeedItem]:
    """
    Validate, window-filter and merge the entries of all feeds, then order them for publishing.

    Feeds are consumed in iteration order; the first feed listing a guid decides its
    title, link, content, pubDate and media.
    """
    merger = ItemMerger(window)
    for feed in feeds:
        merger.add_feed(feed)
    return order_for_publish(merger.items())


class FeedReposter:
    """
    High-level API: one batch run from feed URLs to Bluesky posts.

    Pipeline: derive window → fetch → validate → normalize → window filter → merge → order (oldest first) → publish
    """

    def __init__(
        self,
        config: RunConfig,
        *,
        fetch: Optional[Callable[..., Iterable[Feed]]] = None,
        publisher: Optional[BlueskyPublisher] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.fetch = fetch or fetch_many
        self.publisher = publisher
        self.sleep = sleep

    def collect(self, window: RunWindow) -> List[FeedItem]:
        logger.debug("Urls: %s", ",".join(self.config.feed_urls))
        if not self.config.feed_urls:
            logger.warning("No feed URLs configured (FEED_URLS is empty)")
        feeds = self.fetch(self.config.feed_urls, timeout=self.config.feed_timeout)
        return reconcile(feeds, window)

    def _get_publisher(self) -> BlueskyPublisher:
        if self.publisher is None:
            self.publisher = BlueskyPublisher(
                self.config.bsky_username,
                self.config.bsky_password,
                service=self.config.bsky_service,
                timeout=self.config.feed_timeout,
            )
        return self.publisher

    def run(self) -> RunResult:
        """
        Execute one run. ConfigurationError and login PublishError propagate; a failed
        post is logged and the remaining items are still attempted.
        """
        window = self.config.window()
        logger.info("Finding feed items with publication date between: %s", window)

        items = self.collect(window)
        result = RunResult(window=window, items=items, dry_run=self.config.dry_run)

        publisher = None
        if not self.config.dry_run:
            publisher = self._get_publisher()
            publisher.login()

        mode = "DRY RUN" if self.config.dry_run else "LIVE"
        logger.info("[%s] Posting items: %d", mode, len(items))
        for i, item in enumerate(items):
            logger.debug("[%s] Posting item: %s", mode, item)
            if publisher is None:
                continue
            if i > 0 and self.config.publish_delay > 0:
                self.sleep(self.config.publish_delay)
            if publisher.publish(PublishRequest.from_item(item)):
                result.published += 1
            else:
                result.failed += 1

        if publisher is not None:
            logger.info("Published %d of %d items (%d failed)", result.published, len(items), result.failed)
        return result
