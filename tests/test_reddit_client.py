"""Tests for the Reddit OAuth client (uses mocks, no network access needed)."""
import json
import unittest
from pathlib import Path
from unittest.mock import MagicMock

FIXTURES = Path(__file__).parent / "fixtures"


def _response(status=200, payload=None):
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    response.json.return_value = payload if payload is not None else {}
    return response


def _client(session):
    from rdt.reddit.client import RedditClient, RedditCredentials

    creds = RedditCredentials(client_id="id", client_secret="secret", username="me", password="pw")
    return RedditClient(creds, timeout=5, session=session)


class TestAuthenticate(unittest.TestCase):
    def test_password_grant(self):
        from rdt.reddit.client import TOKEN_URL

        session = MagicMock()
        session.post.return_value = _response(payload={"access_token": "tok"})
        client = _client(session)

        self.assertEqual(client.authenticate(), "tok")
        self.assertEqual(client.authenticate(), "tok")
        session.post.assert_called_once()
        args, kwargs = session.post.call_args
        self.assertEqual(args[0], TOKEN_URL)
        self.assertEqual(kwargs["auth"], ("id", "secret"))
        self.assertEqual(kwargs["data"], {"grant_type": "password", "username": "me", "password": "pw"})
        self.assertTrue(kwargs["headers"]["User-Agent"].endswith(" by me"))

    def test_http_error(self):
        from rdt.errors import AuthError

        session = MagicMock()
        session.post.return_value = _response(status=401)
        with self.assertRaises(AuthError) as ctx:
            _client(session).authenticate()
        self.assertEqual(str(ctx.exception), "Auth failed: HTTP 401")

    def test_missing_token(self):
        from rdt.errors import AuthError

        session = MagicMock()
        session.post.return_value = _response(payload={"error": "invalid_grant"})
        with self.assertRaises(AuthError) as ctx:
            _client(session).authenticate()
        self.assertEqual(str(ctx.exception), "No access token in response")

    def test_transport_error(self):
        import requests

        from rdt.errors import AuthError

        session = MagicMock()
        session.post.side_effect = requests.ConnectionError("boom")
        with self.assertRaises(AuthError):
            _client(session).authenticate()

    def test_non_json_token_response(self):
        from rdt.errors import AuthError

        session = MagicMock()
        response = _response()
        response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
        session.post.return_value = response
        with self.assertRaises(AuthError) as ctx:
            _client(session).authenticate()
        self.assertIn("invalid JSON", str(ctx.exception))

    def test_non_object_token_response(self):
        from rdt.errors import AuthError

        session = MagicMock()
        session.post.return_value = _response(payload=["access_token"])
        with self.assertRaises(AuthError) as ctx:
            _client(session).authenticate()
        self.assertEqual(str(ctx.exception), "No access token in response")


class TestRequests(unittest.TestCase):
    def setUp(self):
        self.session = MagicMock()
        self.session.post.return_value = _response(payload={"access_token": "tok"})
        self.client = _client(self.session)

    def test_get_json_sends_bearer_token(self):
        self.session.get.return_value = _response(payload={"ok": True})
        self.assertEqual(self.client.get_json("/r/test/new.json", {"limit": 20}), {"ok": True})

        args, kwargs = self.session.get.call_args
        self.assertEqual(args[0], "https://oauth.reddit.com/r/test/new.json")
        self.assertEqual(kwargs["headers"]["Authorization"], "bearer tok")
        self.assertEqual(kwargs["params"], {"limit": 20})
        self.assertEqual(kwargs["timeout"], 5)

    def test_get_json_http_error(self):
        from rdt.errors import RedditAPIError

        self.session.get.return_value = _response(status=503)
        with self.assertRaises(RedditAPIError) as ctx:
            self.client.get_json("/r/test/new.json")
        self.assertEqual(str(ctx.exception), "Reddit API: HTTP 503")

    def test_get_json_non_json_body(self):
        from rdt.errors import RedditAPIError

        response = _response()
        response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
        self.session.get.return_value = response
        with self.assertRaises(RedditAPIError) as ctx:
            self.client.get_json("/r/test/new.json")
        self.assertIn("invalid JSON from /r/test/new.json", str(ctx.exception))

    def test_latest_daily_discussions(self):
        listing = json.loads((FIXTURES / "sample_listing.json").read_text())
        self.session.get.return_value = _response(payload=listing)

        posts = self.client.latest_daily_discussions("BitcoinMarkets", limit=2)
        self.assertEqual([p.id for p in posts], ["post1", "post0"])
        self.assertEqual(self.session.get.call_args.kwargs["params"], {"limit": 20})

    def test_no_daily_discussions(self):
        from rdt.errors import NoDailyThreadsError

        self.session.get.return_value = _response(payload={"data": {"children": []}})
        with self.assertRaises(NoDailyThreadsError) as ctx:
            self.client.latest_daily_discussions("quiet")
        self.assertIn("r/quiet", str(ctx.exception))

    def test_thread_nodes(self):
        thread = json.loads((FIXTURES / "sample_thread.json").read_text())
        self.session.get.return_value = _response(payload=thread)

        nodes = self.client.thread_nodes("BitcoinMarkets", "post1")
        self.assertEqual(len(nodes), 4)
        args, kwargs = self.session.get.call_args
        self.assertEqual(args[0], "https://oauth.reddit.com/r/BitcoinMarkets/comments/post1.json")
        self.assertEqual(kwargs["params"], {"raw_json": 1, "limit": 500})


if __name__ == "__main__":
    unittest.main()
