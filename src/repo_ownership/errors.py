from __future__ import annotations


class RepoOwnershipError(Exception):
    """Base class for every error raised by repo-ownership."""


class PatternSyntaxError(RepoOwnershipError, ValueError):
    def __init__(self, expression: str, reason: str) -> None:
        super().__init__(f"invalid pattern {expression!r}: {reason}")
        self.expression = expression
        self.reason = reason


class UsageError(RepoOwnershipError, ValueError):
    """The caller broke a precondition (bad path, missing document, ...)."""
