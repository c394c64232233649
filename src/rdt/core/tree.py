"""Flatten nested comment nodes into records plus a parent -> children map."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from rdt.core.models import CommentNode, CommentRecord, DiscussionPost, Node, ParentMap

_TYPE_PREFIX = re.compile(r"^t\d_")


@dataclass
class FlattenResult:
    """Comments in pre-order and the parent map built while walking them."""

    comments: List[CommentRecord] = field(default_factory=list)
    parent_map: ParentMap = field(default_factory=dict)


def strip_type_prefix(ref: Optional[str]) -> str:
    """``"t1_abc"`` -> ``"abc"``; ``None`` -> ``""``."""
    if not ref:
        return ""
    return _TYPE_PREFIX.sub("", ref, count=1)


def flatten(nodes: Sequence[Node], post: Optional[DiscussionPost] = None) -> FlattenResult:
    """Walk ``nodes`` depth-first, emitting each comment before its replies.

    Non-comment nodes are skipped together with anything below them.
    """
    result = FlattenResult()
    stack: List[Node] = list(reversed(nodes))
    while stack:
        node = stack.pop()
        if not isinstance(node, CommentNode):
            continue

        parent_id = strip_type_prefix(node.parent_ref)
        result.comments.append(
            CommentRecord(
                id=node.id,
                author=node.author,
                body=node.body,
                parent_id=parent_id,
                created_utc=node.created_utc,
                score=node.score,
                post_title=post.title if post else None,
                post_url=post.url if post else None,
                post_created_utc=post.created_utc if post else None,
            )
        )
        result.parent_map.setdefault(parent_id, []).append(node.id)
        stack.extend(reversed(node.replies))
    return result


def merge_parent_maps(maps: Iterable[ParentMap]) -> ParentMap:
    """Concatenate child lists per parent id, keeping the order of ``maps``."""
    merged: ParentMap = {}
    for parent_map in maps:
        for parent_id, children in parent_map.items():
            merged.setdefault(parent_id, []).extend(children)
    return merged
