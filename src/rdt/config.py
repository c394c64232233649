"""Configuration for reddit-daily-threads.

Settings loaded from (in order of precedence):
1. Environment variables (RDT_SUBREDDIT, RDT_INTERVAL_HOURS, REDDIT_CLIENT_ID, etc.)
2. Config file (~/.rdt/config.toml)
3. Defaults
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, List, Optional

from rdt.errors import CredentialsError

# Try tomllib (3.11+), fall back to tomli
try:
    import tomllib
except ImportError:
    try:
        import tomli as tomllib  # type: ignore[no-redef]
    except ImportError:
        tomllib = None  # type: ignore[assignment]


RDT_DIR = Path.home() / ".rdt"

DEFAULT_CONFIG_PATH = RDT_DIR / "config.toml"
DEFAULT_SUBREDDIT = "BitcoinMarkets"
DEFAULT_SUBREDDITS = ("BitcoinMarkets", "ethereum")
DEFAULT_EXCLUDED_AUTHORS: FrozenSet[str] = frozenset({"Bitty_Bot", "Tricky_Troll"})
DEFAULT_INTERVAL_HOURS = 24.0
DEFAULT_SCORE_THRESHOLD = -10
DEFAULT_POSTS_TO_FETCH = 2


def _split_list(value: str) -> List[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass
class Settings:
    """Application settings — subreddits, filtering thresholds and Reddit credentials."""

    # Export
    subreddit: str = DEFAULT_SUBREDDIT
    subreddits: List[str] = field(default_factory=lambda: list(DEFAULT_SUBREDDITS))
    interval_hours: float = DEFAULT_INTERVAL_HOURS
    score_threshold: int = DEFAULT_SCORE_THRESHOLD
    posts_to_fetch: int = DEFAULT_POSTS_TO_FETCH
    excluded_authors: FrozenSet[str] = DEFAULT_EXCLUDED_AUTHORS
    output_dir: Path = field(default_factory=lambda: Path("."))

    # Reddit API (script-app password grant)
    client_id: Optional[str] = None
    client_secret: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    request_timeout: float = 30.0

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        """Load settings from config file + environment variable overrides."""
        settings = cls()

        # Load from TOML config file
        path = config_path or DEFAULT_CONFIG_PATH
        if path.exists() and tomllib is not None:
            with open(path, "rb") as f:
                data = tomllib.load(f)

            export = data.get("export", {})
            settings.subreddit = export.get("subreddit", settings.subreddit)
            settings.subreddits = list(export.get("subreddits", settings.subreddits))
            settings.interval_hours = float(export.get("interval_hours", settings.interval_hours))
            settings.score_threshold = int(export.get("score_threshold", settings.score_threshold))
            settings.posts_to_fetch = int(export.get("posts_to_fetch", settings.posts_to_fetch))
            if "excluded_authors" in export:
                settings.excluded_authors = frozenset(export["excluded_authors"])
            if "output_dir" in export:
                settings.output_dir = Path(export["output_dir"])

            reddit = data.get("reddit", {})
            settings.client_id = reddit.get("client_id", settings.client_id)
            settings.client_secret = reddit.get("client_secret", settings.client_secret)
            settings.username = reddit.get("username", settings.username)
            settings.password = reddit.get("password", settings.password)
            settings.request_timeout = float(reddit.get("timeout", settings.request_timeout))

        # Environment variable overrides (highest precedence)
        if v := os.environ.get("RDT_SUBREDDIT"):
            settings.subreddit = v
        if v := os.environ.get("RDT_SUBREDDITS"):
            settings.subreddits = _split_list(v)
        if v := os.environ.get("RDT_INTERVAL_HOURS"):
            settings.interval_hours = float(v)
        if v := os.environ.get("RDT_SCORE_THRESHOLD"):
            settings.score_threshold = int(v)
        if v := os.environ.get("RDT_POSTS_TO_FETCH"):
            settings.posts_to_fetch = int(v)
        if v := os.environ.get("RDT_EXCLUDED_AUTHORS"):
            settings.excluded_authors = frozenset(_split_list(v))
        if v := os.environ.get("RDT_OUTPUT_DIR"):
            settings.output_dir = Path(v)
        if v := os.environ.get("REDDIT_CLIENT_ID"):
            settings.client_id = v
        if v := os.environ.get("REDDIT_CLIENT_SECRET"):
            settings.client_secret = v
        if v := os.environ.get("REDDIT_USERNAME"):
            settings.username = v
        if v := os.environ.get("REDDIT_PASSWORD"):
            settings.password = v

        return settings

    def credentials(self):
        """Return :class:`RedditCredentials`, or raise if any field is missing."""
        from rdt.reddit.client import RedditCredentials

        missing = [
            name
            for name in ("client_id", "client_secret", "username", "password")
            if not getattr(self, name)
        ]
        if missing:
            raise CredentialsError(
                "No credentials found. Set REDDIT_CLIENT_ID, REDDIT_CLIENT_SECRET, "
                "REDDIT_USERNAME and REDDIT_PASSWORD or add them to the [reddit] "
                f"section of {DEFAULT_CONFIG_PATH} (missing: {', '.join(missing)})"
            )
        return RedditCredentials(
            client_id=self.client_id,
            client_secret=self.client_secret,
            username=self.username,
            password=self.password,
        )
