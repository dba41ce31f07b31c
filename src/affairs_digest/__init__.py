"""Current Affairs Digest - daily exam-focused news digest by email."""

__version__ = "0.1.0"
