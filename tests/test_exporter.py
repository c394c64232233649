"""Tests for the export orchestrator (Reddit client mocked)."""
import json
import tempfile
import unittest
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import MagicMock

FIXTURES = Path(__file__).parent / "fixtures"
NOW = datetime.fromtimestamp(1_700_000_000, tz=timezone.utc)


def _mock_client():
    from rdt.core.parser import parse_listing, parse_thread, select_daily_discussions

    listing = json.loads((FIXTURES / "sample_listing.json").read_text())
    thread = json.loads((FIXTURES / "sample_thread.json").read_text())

    client = MagicMock()
    client.latest_daily_discussions.side_effect = (
        lambda subreddit, limit: select_daily_discussions(parse_listing(listing), limit)
    )
    client.thread_nodes.side_effect = (
        lambda subreddit, post_id: parse_thread(thread) if post_id == "post1" else ()
    )
    return client


class TestExportDailyComments(unittest.TestCase):
    def test_returns_content_without_writing(self):
        from rdt.exporter import export_daily_comments

        client = _mock_client()
        result = export_daily_comments(client, "BitcoinMarkets", now=NOW)

        self.assertIsNone(result.path)
        self.assertEqual(result.file, "reddit_BitcoinMarkets_1700000000000_daily_24h.md")
        self.assertIn("- Total comments: 3", result.content)
        self.assertIn("_No comments in time interval._", result.content)  # post0 has no comments
        client.latest_daily_discussions.assert_called_once_with("BitcoinMarkets", 2)
        self.assertEqual(
            [c.args for c in client.thread_nodes.call_args_list],
            [("BitcoinMarkets", "post1"), ("BitcoinMarkets", "post0")],
        )

    def test_writes_file(self):
        from rdt.exporter import export_daily_comments

        with tempfile.TemporaryDirectory() as tmpdir:
            out = Path(tmpdir) / "exports"
            result = export_daily_comments(
                _mock_client(), "BitcoinMarkets", interval_hours=6, write_to_file=True, output_dir=out, now=NOW,
            )
            self.assertEqual(result.path, out / "reddit_BitcoinMarkets_1700000000000_daily_6h.md")
            self.assertEqual(result.path.read_text(encoding="utf-8"), result.content)

    def test_errors_propagate(self):
        from rdt.errors import NoDailyThreadsError
        from rdt.exporter import export_daily_comments

        client = MagicMock()
        client.latest_daily_discussions.side_effect = NoDailyThreadsError("No Daily Discussion posts found in r/x")
        with self.assertRaises(NoDailyThreadsError):
            export_daily_comments(client, "x", now=NOW)


class TestExportSubreddits(unittest.TestCase):
    def test_concatenates_in_order(self):
        from rdt.exporter import export_subreddits

        content = export_subreddits(_mock_client(), ["BitcoinMarkets", "ethereum"], now=NOW)
        self.assertEqual(content.count("# Reddit Comment Export"), 2)
        self.assertLess(content.index("r/BitcoinMarkets"), content.index("r/ethereum"))


class TestClientFromSettings(unittest.TestCase):
    def test_requires_credentials(self):
        from rdt.config import Settings
        from rdt.errors import CredentialsError
        from rdt.exporter import client_from_settings

        with self.assertRaises(CredentialsError):
            client_from_settings(Settings())

    def test_builds_client(self):
        from rdt.config import Settings
        from rdt.exporter import client_from_settings
        from rdt.reddit.client import RedditClient

        client = client_from_settings(Settings(client_id="a", client_secret="b", username="c", password="d"))
        self.assertIsInstance(client, RedditClient)
        self.assertIn("by c", client.user_agent)


if __name__ == "__main__":
    unittest.main()
