from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, List, Optional

import requests
from atproto import Client, client_utils, models

from .exceptions import PublishError
from .models import PublishRequest

logger = logging.getLogger(__name__)

# Limits enforced by the app.bsky.feed.post lexicon.
MAX_TEXT_CHARS = 300
MAX_LANGS = 3
MAX_TAGS = 8


def _truncate(s: str, limit: int) -> str:
    if len(s) <= limit:
        return s
    return s[: limit - 1] + "…"


def build_rich_text(text: str) -> client_utils.TextBuilder:
    """Plain text with link facets for http(s) URLs and tag facets for #hashtags."""
    tb = client_utils.TextBuilder()
    words = text.split(" ")
    for i, word in enumerate(words):
        core = word.rstrip(".,!?:;)")
        trailing = word[len(core):]
        if core.startswith(("http://", "https://")) and len(core) > len("https://"):
            tb.link(core, core)
            tb.text(trailing)
        elif core.startswith("#") and len(core) > 1:
            tb.tag(core, core[1:])
            tb.text(trailing)
        else:
            tb.text(word)
        if i < len(words) - 1:
            tb.text(" ")
    return tb


class BlueskyPublisher:
    """
    Posts publish requests to Bluesky as link cards.

    `login()` must succeed before `publish()` is called. `client` and `http` can be
    replaced for testing.
    """

    def __init__(
        self,
        username: Optional[str],
        password: Optional[str],
        *,
        service: str = "https://bsky.social",
        client: Optional[Client] = None,
        http: Any = None,
        timeout: float = 15.0,
    ) -> None:
        self.username = username
        self.password = password
        self.client = client or Client(base_url=service)
        self.http = http or requests
        self.timeout = timeout

    def login(self) -> None:
        if not self.username or not self.password:
            raise PublishError("Environment variables BSKY_USERNAME and BSKY_PASSWORD are required.")
        try:
            self.client.login(self.username, self.password)
        except Exception as e:
            raise PublishError(f"Failed to authenticate with Bluesky: {e}") from e
        logger.info("Authenticated successfully to Bluesky as %s", self.username)

    def upload_thumbnail(self, image_url: str) -> Optional[Any]:
        """Download an image and upload it as a blob. Returns the blob ref, or None on any failure."""
        logger.debug("Uploading image from URL: %s", image_url)
        try:
            resp = self.http.get(image_url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Failed to fetch image %s: %s", image_url, e)
            return None
        content_type = resp.headers.get("Content-Type") or ""
        if not content_type.startswith("image/"):
            logger.warning("Invalid content type for %s: %s", image_url, content_type or "<none>")
            return None
        try:
            blob = self.client.upload_blob(resp.content).blob
        except Exception as e:
            logger.warning("Error uploading image to Bluesky: %s", e)
            return None
        logger.debug("Image uploaded successfully, blob reference: %s", blob)
        return blob

    def build_record(self, request: PublishRequest, thumb: Optional[Any] = None) -> models.AppBskyFeedPost.Record:
        tb = build_rich_text(_truncate(request.text, MAX_TEXT_CHARS))

        embed = models.AppBskyEmbedExternal.Main(
            external=models.AppBskyEmbedExternal.External(
                uri=request.external_link,
                title=request.external_title,
                description=request.external_description or "",
                thumb=thumb,
            )
        )
        created_at = request.created_at or datetime.now().astimezone()
        # The empty language stands for "feed declared none"; it is not a valid BCP-47 tag.
        langs: List[str] = sorted(lang for lang in request.languages if lang)[:MAX_LANGS]
        tags: List[str] = sorted(request.tags)[:MAX_TAGS]

        return models.AppBskyFeedPost.Record(
            text=tb.build_text(),
            facets=tb.build_facets() or None,
            embed=embed,
            created_at=created_at.isoformat(),
            langs=langs or None,
            tags=tags or None,
        )

    def publish(self, request: PublishRequest) -> Optional[str]:
        """
        Create one post. Returns the post URI, or None when posting failed.

        A missing or failed thumbnail never blocks the post.
        """
        thumb = None
        if request.thumbnail_source_url:
            thumb = self.upload_thumbnail(request.thumbnail_source_url)
            if thumb is None:
                logger.warning("Image upload failed; posting embed without a thumbnail.")
        try:
            record = self.build_record(request, thumb)
            response = self.client.app.bsky.feed.post.create(self.client.me.did, record)
        except Exception as e:
            logger.error("Error posting to Bluesky (%s): %s", request.external_link, e)
            return None
        logger.info("Successfully posted to Bluesky: %s", response.uri)
        return response.uri
