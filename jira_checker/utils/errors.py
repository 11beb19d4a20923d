"""Custom exception classes for checker errors."""

from __future__ import annotations


class CheckerError(Exception):
    """Base exception for checker failures."""

    def __init__(self, message: str, issue_key: str | None = None, transient: bool = False):
        super().__init__(message)
        self.issue_key = issue_key
        self.transient = transient


class FetchError(CheckerError):
    """Raised when reading issues from Jira fails."""

    def __init__(self, target: str, message: str, issue_key: str | None = None):
        super().__init__(f"Failed to fetch {target}: {message}", issue_key=issue_key, transient=True)
        self.target = target


class ConfigError(CheckerError):
    """Raised when the checker configuration cannot be loaded or saved."""

    def __init__(self, path: str, message: str):
        super().__init__(f"Invalid config at {path}: {message}", transient=False)
        self.path = path
