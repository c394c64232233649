"""Core data models for daily discussion threads and their comments."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

REDDIT_BASE_URL = "https://www.reddit.com"

# parent id (comment id or post id) -> child comment ids, in traversal order
ParentMap = Dict[str, List[str]]


@dataclass(frozen=True)
class DiscussionPost:
    """A daily discussion submission from a subreddit listing."""

    id: str
    title: str
    permalink: str
    created_utc: float

    @property
    def url(self) -> str:
        return f"{REDDIT_BASE_URL}{self.permalink}"


@dataclass(frozen=True)
class CommentRecord:
    """A flattened comment, denormalised with the thread it came from."""

    id: str
    author: str
    body: str
    parent_id: str
    created_utc: float
    score: Optional[int] = None
    post_title: Optional[str] = None
    post_url: Optional[str] = None
    post_created_utc: Optional[float] = None


@dataclass(frozen=True)
class CommentNode:
    """A ``t1`` listing child with a usable payload."""

    id: str
    author: str
    body: str
    parent_ref: Optional[str]
    created_utc: float
    score: Optional[int] = None
    replies: Tuple["Node", ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class OtherNode:
    """Any listing child that is not a comment ("more" stubs, bad payloads)."""

    kind: str


Node = Union[CommentNode, OtherNode]
