"""Undo preprocessing changes on the extracted message."""

from quotestrip.patterns.library import PatternLibrary


class Postprocessor:
    """Restores normalized links and trims the extracted body."""

    def __init__(self, library: PatternLibrary) -> None:
        self._library = library

    def postprocess(self, body: str) -> str:
        """Convert "@@link@@" back to "<link>" and strip surrounding whitespace."""
        return self._library.normalized_link.sub(r"<\1>", body).strip()
