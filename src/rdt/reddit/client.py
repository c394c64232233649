"""Reddit OAuth client -- password grant for a script app, then JSON GETs."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import requests

from rdt import __version__
from rdt.core.models import DiscussionPost, Node
from rdt.core.parser import parse_listing, parse_thread, select_daily_discussions
from rdt.errors import AuthError, NoDailyThreadsError, RedditAPIError

logger = logging.getLogger(__name__)

TOKEN_URL = "https://www.reddit.com/api/v1/access_token"
API_BASE = "https://oauth.reddit.com"
LISTING_LIMIT = 20
THREAD_COMMENT_LIMIT = 500


@dataclass(frozen=True)
class RedditCredentials:
    client_id: str
    client_secret: str
    username: str
    password: str


class RedditClient:
    """Minimal Reddit API client for reading daily discussion threads."""

    def __init__(
        self,
        credentials: RedditCredentials,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self._credentials = credentials
        self._timeout = timeout
        self._session = session or requests.Session()
        self._token: Optional[str] = None

    @property
    def user_agent(self) -> str:
        return f"RedditDailyThreads/{__version__} by {self._credentials.username}"

    def authenticate(self) -> str:
        """Fetch (once) and return a bearer token."""
        if self._token:
            return self._token

        creds = self._credentials
        try:
            response = self._session.post(
                TOKEN_URL,
                auth=(creds.client_id, creds.client_secret),
                data={"grant_type": "password", "username": creds.username, "password": creds.password},
                headers={"User-Agent": self.user_agent},
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise AuthError(f"Auth failed: {e}") from e

        if not response.ok:
            raise AuthError(f"Auth failed: HTTP {response.status_code}")
        try:
            payload = response.json()
        except ValueError as e:
            raise AuthError(f"Auth failed: invalid JSON in token response ({e})") from e
        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise AuthError("No access token in response")

        logger.debug("Authenticated as %s", creds.username)
        self._token = token
        return token

    def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """GET ``API_BASE + path`` and return the decoded JSON body."""
        token = self.authenticate()
        try:
            response = self._session.get(
                f"{API_BASE}{path}",
                params=params or {},
                headers={
                    "Accept": "application/json",
                    "Authorization": f"bearer {token}",
                    "User-Agent": self.user_agent,
                },
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise RedditAPIError(f"Reddit API: {e}") from e

        if not response.ok:
            raise RedditAPIError(f"Reddit API: HTTP {response.status_code}")
        try:
            return response.json()
        except ValueError as e:
            raise RedditAPIError(f"Reddit API: invalid JSON from {path} ({e})") from e

    def latest_daily_discussions(self, subreddit: str, limit: int = 2) -> List[DiscussionPost]:
        """Newest daily discussion threads among the subreddit's latest posts."""
        listing = self.get_json(f"/r/{subreddit}/new.json", {"limit": LISTING_LIMIT})
        posts = select_daily_discussions(parse_listing(listing), limit)
        if not posts:
            raise NoDailyThreadsError(f"No Daily Discussion posts found in r/{subreddit}")
        logger.info("r/%s: found %d daily thread(s): %s", subreddit, len(posts), ", ".join(p.id for p in posts))
        return posts

    def thread_nodes(self, subreddit: str, post_id: str) -> Tuple[Node, ...]:
        """Root comment nodes of one thread."""
        payload = self.get_json(
            f"/r/{subreddit}/comments/{post_id}.json",
            {"raw_json": 1, "limit": THREAD_COMMENT_LIMIT},
        )
        return parse_thread(payload)
