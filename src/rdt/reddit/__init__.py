"""Reddit API access."""
from rdt.reddit.client import RedditClient, RedditCredentials

__all__ = ["RedditClient", "RedditCredentials"]
