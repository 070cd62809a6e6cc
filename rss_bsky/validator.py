from __future__ import annotations

import json
import logging
from typing import Any, Dict

from .normalizer import parse_url

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("guid", "title", "link")


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def _dump(entry: Dict[str, Any]) -> str:
    return json.dumps(entry, indent=2, ensure_ascii=False, default=str)


def is_valid_entry(entry: Dict[str, Any]) -> bool:
    """
    Structural gate in front of the merger: guid, title and link must be present and non-empty.

    Expects a raw entry dict produced by `rss_bsky.parser.parse_entry`. Rejected entries
    are logged and dropped; a rejection is never fatal to the run.
    """
    missing = [name for name in _REQUIRED_FIELDS if _is_blank(entry.get(name))]
    if missing:
        logger.warning("Invalid item (missing %s): %s", ", ".join(missing), _dump(entry))
        return False
    if parse_url(entry.get("link")) is None:
        logger.warning("Invalid item (unparseable link): %s", _dump(entry))
        return False
    return True
