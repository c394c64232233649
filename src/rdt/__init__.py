"""reddit-daily-threads: recent comments from subreddit daily discussion threads."""

__version__ = "0.1.0"
