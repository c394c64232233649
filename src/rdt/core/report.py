"""Render the Markdown export and run the flatten/exclude/window pipeline."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import AbstractSet, Dict, List, Mapping, Optional, Sequence

from rdt.config import DEFAULT_EXCLUDED_AUTHORS, DEFAULT_INTERVAL_HOURS, DEFAULT_SCORE_THRESHOLD
from rdt.core.exclusion import compute_excluded
from rdt.core.models import CommentRecord, DiscussionPost, Node
from rdt.core.text import normalize
from rdt.core.tree import flatten, merge_parent_maps
from rdt.core.window import select_window

logger = logging.getLogger(__name__)

NO_COMMENTS_PLACEHOLDER = "_No comments in time interval._\n"


@dataclass(frozen=True)
class Report:
    """A rendered export and the file name it should be saved under."""

    content: str
    file_name: str
    comment_count: int


def format_hours(hours: float) -> str:
    """``24.0`` -> ``"24"``, ``1.5`` -> ``"1.5"``."""
    return str(int(hours)) if float(hours).is_integer() else str(hours)


def export_file_name(subreddit: str, interval_hours: float, now: datetime) -> str:
    epoch_ms = int(now.timestamp() * 1000)
    return f"reddit_{subreddit}_{epoch_ms}_daily_{format_hours(interval_hours)}h.md"


def _utc(epoch_seconds: float) -> datetime:
    return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc)


def _iso_millis(moment: datetime) -> str:
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def assign_labels(comments: Sequence[CommentRecord]) -> Dict[str, str]:
    """Map comment id -> ``"Comment N"``, numbered in sequence order from 1."""
    return {c.id: f"Comment {i}" for i, c in enumerate(comments, 1)}


def _format_comment(comment: CommentRecord, labels: Mapping[str, str]) -> str:
    time = _utc(comment.created_utc).strftime("%Y-%m-%dT%H:%M")
    score = "?" if comment.score is None else comment.score
    parent_label = labels.get(comment.parent_id)
    reply = f" [in reply to {parent_label}]" if parent_label else ""
    return (
        f"{labels[comment.id]} ({comment.author}, {time}, {score} votes){reply}: "
        f"{normalize(comment.body)}"
    )


def render(
    posts: Sequence[DiscussionPost],
    included: Sequence[CommentRecord],
    interval_hours: float,
    subreddit: str,
    exported_at: datetime,
    file_name: str,
) -> str:
    """Render the export document.

    Comments are grouped under the post whose title and URL they carry, in
    the order of ``posts``; labels run across all posts without resetting.
    """
    labels = assign_labels(included)

    body = ""
    for post in posts:
        body += f'\n\n## Comments from: "{normalize(post.title)}"\n\n'
        these = [c for c in included if c.post_title == post.title and c.post_url == post.url]
        if these:
            body += "\n\n".join(_format_comment(c, labels) for c in these)
        else:
            body += NO_COMMENTS_PLACEHOLDER

    post_lines = "\n".join(
        f'    - "{normalize(p.title)}" [{_utc(p.created_utc).strftime("%Y-%m-%d")}]\n      {p.url}'
        for p in posts
    )
    return (
        "# Reddit Comment Export\n"
        f"- Subreddit: r/{subreddit}\n"
        f"- Time interval: last {format_hours(interval_hours)} hours\n"
        f"- Exported: {_iso_millis(exported_at)} UTC\n"
        f"- Total comments: {len(included)}\n"
        f"- File name: {file_name}\n"
        "- Posts included:\n"
        f"{post_lines}\n"
        "---\n"
        f"{body}"
    )


def build_report(
    posts: Sequence[DiscussionPost],
    threads: Mapping[str, Sequence[Node]],
    subreddit: str,
    interval_hours: float = DEFAULT_INTERVAL_HOURS,
    score_threshold: int = DEFAULT_SCORE_THRESHOLD,
    excluded_authors: AbstractSet[str] = DEFAULT_EXCLUDED_AUTHORS,
    now: Optional[datetime] = None,
) -> Report:
    """Run the whole pipeline for one subreddit.

    ``threads`` maps post id to that thread's root comment nodes; posts
    without an entry contribute no comments. Exclusions are computed over
    the comments of every thread together.
    """
    now = now or datetime.now(timezone.utc)
    threshold_utc = now.timestamp() - interval_hours * 3600

    all_comments: List[CommentRecord] = []
    parent_maps = []
    for post in posts:
        flat = flatten(threads.get(post.id, ()), post)
        all_comments.extend(flat.comments)
        parent_maps.append(flat.parent_map)

    excluded = compute_excluded(
        all_comments,
        merge_parent_maps(parent_maps),
        score_threshold=score_threshold,
        excluded_authors=excluded_authors,
    )
    not_excluded = [c for c in all_comments if c.id not in excluded]
    included = select_window(not_excluded, threshold_utc)
    logger.debug(
        "r/%s: %d comments, %d excluded, %d in window",
        subreddit, len(all_comments), len(excluded), len(included),
    )

    file_name = export_file_name(subreddit, interval_hours, now)
    content = render(posts, included, interval_hours, subreddit, now, file_name)
    return Report(content=content, file_name=file_name, comment_count=len(included))
