"""Drop bot/low-score comments and every reply underneath them."""
from __future__ import annotations

from typing import AbstractSet, Iterable, Set

from rdt.config import DEFAULT_EXCLUDED_AUTHORS, DEFAULT_SCORE_THRESHOLD
from rdt.core.models import CommentRecord, ParentMap


def is_seed(
    comment: CommentRecord,
    score_threshold: int,
    excluded_authors: AbstractSet[str],
) -> bool:
    """True if the comment itself is excluded. A missing score never is."""
    if comment.author in excluded_authors:
        return True
    score = comment.score
    return isinstance(score, (int, float)) and not isinstance(score, bool) and score <= score_threshold


def compute_excluded(
    comments: Iterable[CommentRecord],
    parent_map: ParentMap,
    score_threshold: int = DEFAULT_SCORE_THRESHOLD,
    excluded_authors: AbstractSet[str] = DEFAULT_EXCLUDED_AUTHORS,
) -> Set[str]:
    """Return ids of seeded comments plus all of their descendants in ``parent_map``."""
    excluded = {c.id for c in comments if is_seed(c, score_threshold, excluded_authors)}

    stack = list(excluded)
    while stack:
        current = stack.pop()
        for child_id in parent_map.get(current, ()):
            if child_id not in excluded:
                excluded.add(child_id)
                stack.append(child_id)
    return excluded
