class RssBskyError(Exception):
    """Base class for errors raised by rss_bsky."""


class ConfigurationError(RssBskyError):
    """Raised when run settings are invalid; aborts the run before any feed is fetched."""


class RSSFetchError(RssBskyError):
    """Raised when an RSS/Atom feed cannot be fetched or parsed."""


class PublishError(RssBskyError):
    """Raised when the Bluesky session cannot be established or a post is rejected."""
