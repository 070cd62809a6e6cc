"""
rss_bsky

Reposts recent RSS/Atom feed items to Bluesky. Meant to run as a periodic batch job
(e.g. hourly from cron or CI); nothing is persisted between runs.

Core ideas:
- Input: feed URLs, a look-back period in hours, an optional fixed "current time"
- Process: fetch → parse → validate → normalize → window filter → merge by guid → sort (oldest first)
- Output: one Bluesky link-card post per item, or a dry-run log

The run window ends at the current time truncated to the hour and starts
`look_back_hours` earlier. An item is kept if start < pubDate <= end, so back-to-back
hourly runs neither skip nor repeat an item.

Example
-------
from rss_bsky import reconcile, derive_run_window
from rss_bsky.fetcher import fetch_many

window = derive_run_window(1, "2024-01-01T10:30:00Z")
items = reconcile(fetch_many(["https://example.com/rss.xml"]), window)

for item in items:
    print(item.pub_date, item.title, sorted(item.categories))
"""
from .models import Feed, FeedItem, PublishRequest, RunWindow
from .config import RunConfig, load_config
from .core import FeedReposter, RunResult, reconcile
from .window import derive_run_window, in_window, truncate_to_hour
from .exceptions import ConfigurationError, PublishError, RSSFetchError, RssBskyError

__all__ = [
    "Feed",
    "FeedItem",
    "PublishRequest",
    "RunWindow",
    "RunConfig",
    "load_config",
    "FeedReposter",
    "RunResult",
    "reconcile",
    "derive_run_window",
    "in_window",
    "truncate_to_hour",
    "ConfigurationError",
    "PublishError",
    "RSSFetchError",
    "RssBskyError",
]
