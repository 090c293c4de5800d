"""Error hierarchy for the virtual shell."""

from __future__ import annotations


class ShellError(Exception):
    """Base error for all shell errors."""

    def __init__(self, message: str, *, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class PathViolationError(ShellError):
    """A path escaped the workspace sandbox."""

    def __init__(self, message: str, *, path: str, **kwargs):
        super().__init__(message, **kwargs)
        self.path = path


class ParseError(ShellError):
    """A regex, sed script, jq filter or date string could not be parsed."""


class WorkspaceError(ShellError):
    """A workspace provider refused an operation."""
