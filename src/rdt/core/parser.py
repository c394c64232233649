"""Parse raw Reddit API payloads into DiscussionPost and tagged comment nodes.

Reddit returns listings shaped like ``{"kind": "Listing", "data": {"children": [...]}}``
where every child is ``{"kind": "t1" | "t3" | "more" | ..., "data": {...}}``.
Shape checks happen here once; the rest of the pipeline only sees
:class:`CommentNode` / :class:`OtherNode`.
"""
from __future__ import annotations

import logging
import math
import re
from typing import Any, Iterable, List, Optional, Tuple

from rdt.core.models import CommentNode, DiscussionPost, Node, OtherNode

logger = logging.getLogger(__name__)

COMMENT_KIND = "t1"

DAILY_TITLE = re.compile(
    r"^(\[daily discussion]|daily discussion|daily general discussion|daily thread)",
    re.IGNORECASE,
)


def parse_nodes(children: Any) -> Tuple[Node, ...]:
    """Convert a listing's ``children`` array into tagged nodes, replies included."""
    if not isinstance(children, list):
        return ()
    return tuple(_parse_node(item) for item in children)


def parse_thread(payload: Any) -> Tuple[Node, ...]:
    """Return the root comment nodes of a ``/comments/<id>.json`` response.

    The response is a two-element array: the submission listing, then the
    comment listing. Anything else yields no nodes.
    """
    if not isinstance(payload, list) or len(payload) < 2:
        logger.warning("Unexpected thread payload shape: %s", type(payload).__name__)
        return ()
    return parse_nodes(_listing_children(payload[1]))


def parse_listing(payload: Any) -> List[DiscussionPost]:
    """Parse a subreddit listing (e.g. ``/r/<sub>/new.json``) into posts."""
    posts = []
    for item in _listing_children(payload) or []:
        data = item.get("data") if isinstance(item, dict) else None
        if not isinstance(data, dict) or not data.get("id") or data.get("title") is None:
            continue
        posts.append(
            DiscussionPost(
                id=str(data["id"]),
                title=str(data["title"]),
                permalink=data.get("permalink") or "",
                created_utc=_parse_number(data.get("created_utc")) or 0.0,
            )
        )
    return posts


def select_daily_discussions(posts: Iterable[DiscussionPost], limit: int) -> List[DiscussionPost]:
    """Keep daily discussion threads, newest first, at most ``limit`` of them."""
    daily = [p for p in posts if DAILY_TITLE.match(p.title)]
    daily.sort(key=lambda p: p.created_utc, reverse=True)
    return daily[:limit]


def _parse_node(item: Any) -> Node:
    if not isinstance(item, dict):
        return OtherNode(kind="")
    kind = str(item.get("kind") or "")
    data = item.get("data")
    if kind != COMMENT_KIND or not isinstance(data, dict):
        return OtherNode(kind=kind)

    replies = data.get("replies")
    # Reddit sends "" instead of a listing for comments without replies
    reply_children = _listing_children(replies) if isinstance(replies, dict) else None

    return CommentNode(
        id=str(data.get("id", "")),
        author=str(data.get("author", "")),
        body=data.get("body") or "",
        parent_ref=data.get("parent_id"),
        created_utc=_parse_number(data.get("created_utc")) or 0.0,
        score=_parse_score(data.get("score")),
        replies=parse_nodes(reply_children),
    )


def _listing_children(listing: Any) -> Optional[list]:
    if not isinstance(listing, dict):
        return None
    data = listing.get("data")
    if not isinstance(data, dict):
        return None
    children = data.get("children")
    return children if isinstance(children, list) else None


def _parse_number(value: Any) -> Optional[float]:
    """Finite int/float payload values; ``NaN``, ``Infinity``, bools and strings are ``None``."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        value = float(value)
    except OverflowError:
        return None
    return value if math.isfinite(value) else None


def _parse_score(value: Any) -> Optional[int]:
    number = _parse_number(value)
    return None if number is None else int(number)
