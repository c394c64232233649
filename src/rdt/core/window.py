"""Select recent comments and restore the ancestors they reply to."""
from __future__ import annotations

from typing import Dict, List, Sequence, Set

from rdt.core.models import CommentRecord


def select_window(comments: Sequence[CommentRecord], threshold_utc: float) -> List[CommentRecord]:
    """Keep comments created at or after ``threshold_utc`` plus their ancestor chains.

    ``comments`` must already be free of excluded comments: an excluded
    ancestor is not in the lookup, so a chain stops there instead of
    pulling it back in. Output keeps the input order.
    """
    by_id: Dict[str, CommentRecord] = {c.id: c for c in comments}
    keep: Set[str] = set()

    for recent in comments:
        if recent.created_utc < threshold_utc:
            continue
        current = recent
        while current is not None and current.id not in keep:
            keep.add(current.id)
            current = by_id.get(current.parent_id)

    return [c for c in comments if c.id in keep]
