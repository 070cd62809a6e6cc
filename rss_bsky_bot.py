import logging
import sys

from dotenv import load_dotenv

from rss_bsky import ConfigurationError, FeedReposter, PublishError, load_config

logger = logging.getLogger("rss_bsky_bot")


def main(argv=None):
    """Run one batch: read feeds, post what was published in the last look-back period."""
    # FEED_URLS, BSKY_USERNAME, BSKY_PASSWORD etc. may come from a .env file.
    load_dotenv()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    try:
        config = load_config(argv)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        return 2

    if config.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        FeedReposter(config).run()
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        return 2
    except PublishError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
