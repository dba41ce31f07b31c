"""Content generation module for Current Affairs Digest."""

from affairs_digest.content.fetcher import ContentFetcher

__all__ = [
    "ContentFetcher",
]
