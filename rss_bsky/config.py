from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Tuple

from .exceptions import ConfigurationError
from .fetcher import DEFAULT_TIMEOUT
from .models import RunWindow
from .window import derive_run_window

DEFAULT_SERVICE = "https://bsky.social"
DEFAULT_PUBLISH_DELAY = 2.0


@dataclass(frozen=True)
class RunConfig:
    """Settings for one run, built once at start-up and passed to the pipeline."""
    feed_urls: Tuple[str, ...] = ()
    look_back_hours: int = 1
    current_time: Optional[str] = None
    dry_run: bool = True
    verbose: bool = False
    publish_delay: float = DEFAULT_PUBLISH_DELAY
    feed_timeout: float = DEFAULT_TIMEOUT
    bsky_username: Optional[str] = None
    bsky_password: Optional[str] = None
    bsky_service: str = DEFAULT_SERVICE
    run_window: Optional[RunWindow] = None

    def window(self) -> RunWindow:
        """The window derived by `load_config`; derived here only for hand-built configs."""
        if self.run_window is not None:
            return self.run_window
        return derive_run_window(self.look_back_hours, self.current_time)


def split_urls(raw: Optional[str]) -> Tuple[str, ...]:
    return tuple(u.strip() for u in (raw or "").split(",") if u.strip())


def _env_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = (environ.get(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number of seconds, got {raw!r}") from e
    if value < 0:
        raise ConfigurationError(f"{name} must not be negative, got {raw!r}")
    return value


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="rss-bsky",
        description="Repost recent RSS feed items to Bluesky.",
    )
    p.add_argument("-d", "--dry-run", default="true", metavar="BOOL",
                   help="Dry run without posting; anything but 'false' means dry run (default: true)")
    p.add_argument("-l", "--look-back-period", type=int, default=1, metavar="HOURS",
                   help="The number of hours to look back (default: 1)")
    p.add_argument("-t", "--current-time", default=None, metavar="ISO",
                   help="The current time (ISO string), for reproducible runs")
    p.add_argument("--publish-delay", type=float, default=None, metavar="SECONDS",
                   help=f"Pause between posts (default: $PUBLISH_DELAY or {DEFAULT_PUBLISH_DELAY:g})")
    p.add_argument("-v", "--verbose", action="store_true", help="Log every item")
    return p


def load_config(argv: Optional[Sequence[str]] = None, environ: Optional[Mapping[str, str]] = None) -> RunConfig:
    """
    Build the run configuration from command line arguments and environment variables.

    Raises ConfigurationError when a value is out of range or the run window is empty.
    """
    env = os.environ if environ is None else environ
    args = build_arg_parser().parse_args(argv)

    if args.look_back_period <= 0:
        raise ConfigurationError(f"Look-back period must be a positive number of hours, got {args.look_back_period}")

    publish_delay = args.publish_delay
    if publish_delay is None:
        publish_delay = _env_float(env, "PUBLISH_DELAY", DEFAULT_PUBLISH_DELAY)
    elif publish_delay < 0:
        raise ConfigurationError(f"Publish delay must not be negative, got {publish_delay}")

    # Derived once; fails before anything is fetched if the window is unusable.
    run_window = derive_run_window(args.look_back_period, args.current_time)

    return RunConfig(
        feed_urls=split_urls(env.get("FEED_URLS")),
        look_back_hours=args.look_back_period,
        current_time=args.current_time,
        dry_run=str(args.dry_run).strip().lower() != "false",
        verbose=args.verbose,
        publish_delay=publish_delay,
        feed_timeout=_env_float(env, "FEED_TIMEOUT", DEFAULT_TIMEOUT),
        bsky_username=env.get("BSKY_USERNAME") or None,
        bsky_password=env.get("BSKY_PASSWORD") or None,
        bsky_service=(env.get("BSKY_SERVICE") or "").strip() or DEFAULT_SERVICE,
        run_window=run_window,
    )
