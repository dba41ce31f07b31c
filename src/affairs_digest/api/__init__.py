"""HTTP API module for Current Affairs Digest."""

from affairs_digest.api.app import create_app

__all__ = [
    "create_app",
]
