from __future__ import annotations

import calendar
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .models import Feed


def _to_iso(entry: Dict[str, Any]) -> Optional[str]:
    """
    Publication time of a feedparser entry as an ISO 8601 string.

    Priority: published_parsed -> updated_parsed (both UTC struct_time) -> the raw
    published/updated string, which `normalizer.parse_timestamp` parses later.
    """
    for key in ("published_parsed", "updated_parsed"):
        val = entry.get(key)
        if isinstance(val, time.struct_time):
            try:
                return datetime.fromtimestamp(calendar.timegm(val), tz=timezone.utc).isoformat()
            except (OverflowError, ValueError, OSError):
                continue
    for key in ("published", "updated"):
        s = entry.get(key)
        if isinstance(s, str) and s.strip():
            return s.strip()
    return None


def _first_url(entry: Dict[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        media = entry.get(key)
        if isinstance(media, list):
            for m in media:
                if isinstance(m, dict):
                    url = m.get("url")
                    if isinstance(url, str) and url.strip():
                        return url.strip()
    return None


def _get_content(entry: Dict[str, Any]) -> Optional[str]:
    summary = entry.get("summary") or entry.get("description")
    if isinstance(summary, str) and summary.strip():
        return summary
    content = entry.get("content")
    if isinstance(content, list) and content:
        c0 = content[0]
        if isinstance(c0, dict):
            value = c0.get("value")
            if isinstance(value, str):
                return value
    return None


def parse_entry(entry: Dict[str, Any]) -> Dict[str, Any]:
    """
    Map a raw feedparser entry to the raw entry dict the pipeline consumes.

    Fields: guid, title, link, pubDate (str|None), content, mediaThumbnailUrl. Nothing is
    validated here; `validator.is_valid_entry` decides what gets through.
    """
    guid = None
    for k in ("id", "guid"):
        v = entry.get(k)
        if isinstance(v, str) and v.strip():
            guid = v.strip()
            break

    return {
        "guid": guid,
        "title": entry.get("title"),
        "link": entry.get("link") or entry.get("feedburner_origlink"),
        "pubDate": _to_iso(entry),
        "content": _get_content(entry),
        "mediaThumbnailUrl": _first_url(entry, "media_content", "media_thumbnail"),
    }


def parse_feed(parsed: Any, url: Optional[str] = None) -> Feed:
    """Build a Feed record from a `feedparser.parse` result."""
    meta = parsed.get("feed", {}) or {}
    title = meta.get("title")
    language = meta.get("language")
    return Feed(
        title=title.strip() if isinstance(title, str) else None,
        language=language.strip() if isinstance(language, str) and language.strip() else None,
        entries=[parse_entry(e) for e in parsed.get("entries", []) or []],
        url=url,
    )
