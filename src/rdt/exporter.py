"""Fetch daily threads, run the comment pipeline and optionally write the export."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import AbstractSet, Iterable, Optional

from rdt.config import (
    DEFAULT_EXCLUDED_AUTHORS,
    DEFAULT_INTERVAL_HOURS,
    DEFAULT_POSTS_TO_FETCH,
    DEFAULT_SCORE_THRESHOLD,
    Settings,
)
from rdt.core.report import build_report
from rdt.reddit.client import RedditClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportResult:
    """Rendered export; ``path`` is set only when the file was written."""

    content: str
    file: str
    path: Optional[Path] = None


def client_from_settings(settings: Settings) -> RedditClient:
    return RedditClient(settings.credentials(), timeout=settings.request_timeout)


def export_daily_comments(
    client: RedditClient,
    subreddit: str,
    interval_hours: float = DEFAULT_INTERVAL_HOURS,
    score_threshold: int = DEFAULT_SCORE_THRESHOLD,
    posts_to_fetch: int = DEFAULT_POSTS_TO_FETCH,
    excluded_authors: AbstractSet[str] = DEFAULT_EXCLUDED_AUTHORS,
    write_to_file: bool = False,
    output_dir: Path = Path("."),
    now: Optional[datetime] = None,
) -> ExportResult:
    """Export recent comments from the latest daily threads of one subreddit."""
    now = now or datetime.now(timezone.utc)
    posts = client.latest_daily_discussions(subreddit, posts_to_fetch)
    threads = {post.id: client.thread_nodes(subreddit, post.id) for post in posts}

    report = build_report(
        posts,
        threads,
        subreddit,
        interval_hours=interval_hours,
        score_threshold=score_threshold,
        excluded_authors=excluded_authors,
        now=now,
    )
    logger.info("r/%s: %d comment(s) in the last %s hours", subreddit, report.comment_count, interval_hours)

    if not write_to_file:
        return ExportResult(content=report.content, file=report.file_name)

    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / report.file_name
    path.write_text(report.content, encoding="utf-8")
    logger.info("Wrote %s", path)
    return ExportResult(content=report.content, file=report.file_name, path=path)


def export_subreddits(client: RedditClient, subreddits: Iterable[str], **kwargs) -> str:
    """Export several subreddits in turn and concatenate their documents."""
    return "\n\n".join(
        export_daily_comments(client, subreddit, **kwargs).content for subreddit in subreddits
    )
