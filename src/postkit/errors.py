"""Exception hierarchy for postkit."""

from __future__ import annotations

from pathlib import Path


class PostkitError(Exception):
    """Base class for all postkit errors."""


class FrontMatterError(PostkitError):
    """A front-matter block could not be parsed.

    Raised inside the parser only; callers see a degraded document instead.
    """

    def __init__(self, message: str, line_number: int | None = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class DocumentReadError(PostkitError):
    """A document file could not be read or decoded."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Could not read {path}: {reason}")
