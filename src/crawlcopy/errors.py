from __future__ import annotations


class CrawlCopyError(Exception):
    """Base exception for crawlcopy errors."""


class WalkError(CrawlCopyError):
    """A filesystem query failed while walking the tree."""

    def __init__(self, path: str, reason: OSError) -> None:
        super().__init__(f"Failed to walk {path}: {reason}")
        self.path = path
        self.reason = reason


class CopyError(CrawlCopyError):
    """A source file could not be copied."""


class ConfigError(CrawlCopyError):
    """Invalid crawler configuration."""
