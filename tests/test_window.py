"""Tests for time-window selection with ancestor restoration."""
import unittest


def _comment(id, parent_id, created_utc):
    from rdt.core.models import CommentRecord

    return CommentRecord(id=id, author="u", body="", parent_id=parent_id, created_utc=created_utc, score=1)


class TestSelectWindow(unittest.TestCase):
    def test_only_recent(self):
        from rdt.core.window import select_window

        comments = [_comment("a", "post", 50), _comment("b", "post", 100), _comment("c", "post", 150)]
        self.assertEqual([c.id for c in select_window(comments, 100)], ["b", "c"])

    def test_restores_ancestor_chain(self):
        from rdt.core.window import select_window

        comments = [
            _comment("root", "post", 10),
            _comment("mid", "root", 20),
            _comment("leaf", "mid", 200),
        ]
        self.assertEqual([c.id for c in select_window(comments, 100)], ["root", "mid", "leaf"])

    def test_chain_stops_at_excluded_ancestor(self):
        from rdt.core.exclusion import compute_excluded
        from rdt.core.models import CommentRecord
        from rdt.core.window import select_window

        comments = [
            CommentRecord(id="root", author="u", body="", parent_id="post", created_utc=10, score=1),
            CommentRecord(id="mid", author="u", body="", parent_id="root", created_utc=20, score=-50),
            CommentRecord(id="leaf", author="u", body="", parent_id="mid", created_utc=200, score=1),
            CommentRecord(id="other", author="u", body="", parent_id="root", created_utc=300, score=1),
        ]
        # Exclude only "mid" (no parent map, so "leaf" survives exclusion)
        excluded = compute_excluded(comments, {}, score_threshold=-10)
        not_excluded = [c for c in comments if c.id not in excluded]
        kept = select_window(not_excluded, 100)
        self.assertEqual([c.id for c in kept], ["root", "leaf", "other"])
        self.assertNotIn("mid", [c.id for c in kept])

    def test_shared_ancestor_kept_once_in_original_order(self):
        from rdt.core.window import select_window

        comments = [
            _comment("late", "post", 500),
            _comment("root", "post", 10),
            _comment("r1", "root", 200),
            _comment("r2", "root", 300),
        ]
        self.assertEqual([c.id for c in select_window(comments, 100)], ["late", "root", "r1", "r2"])

    def test_empty(self):
        from rdt.core.window import select_window

        self.assertEqual(select_window([], 0), [])


if __name__ == "__main__":
    unittest.main()
