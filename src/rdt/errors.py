"""Exceptions raised by the Reddit client and the export orchestrator."""
from __future__ import annotations


class RDTError(Exception):
    """Base class for reddit-daily-threads failures."""


class CredentialsError(RDTError):
    """Reddit API credentials are missing from config and environment."""


class AuthError(RDTError):
    """The OAuth token request was rejected or returned no token."""


class RedditAPIError(RDTError):
    """A Reddit API request failed."""


class NoDailyThreadsError(RDTError):
    """No daily discussion thread was found in the lookback listing."""
