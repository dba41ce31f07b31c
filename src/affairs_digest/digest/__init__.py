"""Digest rendering module for Current Affairs Digest."""

from affairs_digest.digest.html import (
    Block,
    format_short_date,
    parse_blocks,
    render_html_email,
)

__all__ = [
    "Block",
    "format_short_date",
    "parse_blocks",
    "render_html_email",
]
