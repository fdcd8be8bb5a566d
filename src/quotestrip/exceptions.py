"""Exceptions for quotestrip quotation extraction."""

from dataclasses import dataclass
from pathlib import Path


class QuotestripError(Exception):
    """Base exception for all quotestrip errors."""

    pass


@dataclass
class PatternLibraryError(QuotestripError):
    """A pattern catalog could not be loaded.

    Raised when:
    - The catalog file is missing or is not valid YAML
    - A required key is absent or has the wrong shape
    - A pattern does not compile

    Attributes:
        message: Description of the error.
        path: Catalog file that failed, if it came from disk.
    """

    message: str
    path: Path | None = None

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message} ({self.path})"
