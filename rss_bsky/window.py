from __future__ import annotations

import logging
from datetime import datetime, timedelta, tzinfo
from typing import Optional

from dateutil import parser as dateparser

from .exceptions import ConfigurationError
from .models import FeedItem, RunWindow

logger = logging.getLogger(__name__)


def truncate_to_hour(dt: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """
    Truncate to the start of the hour in the local calendar (or in `tz` when given).

    Naive datetimes are taken to be local time. The result is timezone-aware.
    """
    local = dt.astimezone(tz)
    return local.replace(minute=0, second=0, microsecond=0)


# Two defaults that differ in year, month and day. A date part missing from the
# override shows up as a difference between the two parses.
_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def parse_now_override(value: str) -> datetime:
    """
    Parse the "current time" override. It must name a full calendar date; a missing
    time of day means midnight. Partial values such as "10:30" or "2024" are rejected.
    """
    try:
        first, second = (dateparser.parse(value.strip(), default=d) for d in _DEFAULTS)
    except (ValueError, OverflowError) as e:
        raise ConfigurationError(f"Invalid current time override: {value!r} ({e})") from e
    if first != second:
        raise ConfigurationError(f"Incomplete current time override: {value!r} (year, month and day are required)")
    return first


def derive_run_window(
    look_back_hours: int,
    now_override: Optional[str] = None,
    *,
    tz: Optional[tzinfo] = None,
) -> RunWindow:
    """
    Compute the publication-time window for a run.

    end_time is the (overridden) current time truncated to its hour; start_time lies
    `look_back_hours` before it. Raises ConfigurationError for an unparseable override
    or a window that is empty or inverted.
    """
    now = parse_now_override(now_override) if now_override else datetime.now()
    end_time = truncate_to_hour(now, tz)
    start_time = end_time - timedelta(hours=look_back_hours)
    return RunWindow(start_time=start_time, end_time=end_time)


def in_window(window: RunWindow, item: FeedItem) -> bool:
    """Accept items published after start_time and no later than end_time."""
    if item.pub_date is None:
        logger.warning("Undefined pubDate: '%s'", item.title)
        return False
    if item.pub_date <= window.start_time:
        logger.debug("[%s] Too old pubDate: %s", item.pub_date.isoformat(), item.title)
        return False
    if item.pub_date > window.end_time:
        logger.debug("[%s] Too new pubDate: %s", item.pub_date.isoformat(), item.title)
        return False
    return True
