"""Message body preparation before line marking.

Handles:
- Link bracket normalization, so a closing '>' is never read as a quote marker
- Moving inline "On <date>, <person> wrote:" phrases onto their own line
"""

import re

from quotestrip.patterns.library import PatternLibrary

CONTENT_TYPE_TEXT_PLAIN = "text/plain"
CONTENT_TYPE_TEXT_HTML = "text/html"

LINK_SENTINEL = "@@"


class Preprocessor:
    """Prepares a message body for line-oriented classification."""

    def __init__(self, library: PatternLibrary) -> None:
        self._library = library

    def preprocess(
        self,
        body: str,
        delimiter: str,
        content_type: str = CONTENT_TYPE_TEXT_PLAIN,
    ) -> str:
        """Prepare a message body for marking.

        Args:
            body: Raw message body.
            delimiter: Line delimiter detected for the body.
            content_type: Normalized MIME type of the body.

        Returns:
            Body with links normalized and, for plain text, attribution
            phrases moved to the start of a line.
        """
        body = self._replace_link_brackets(body)

        if content_type != CONTENT_TYPE_TEXT_PLAIN:
            return body

        return self._wrap_splitter_with_newline(body, delimiter)

    def _replace_link_brackets(self, body: str) -> str:
        """Replace "<link>" with "@@link@@" outside of quoted lines."""

        def replace(match: re.Match[str]) -> str:
            line_start = body.rfind("\n", 0, match.start()) + 1
            if self._library.is_quote_line(body[line_start:match.start()]):
                return match.group()
            return f"{LINK_SENTINEL}{match.group(1)}{LINK_SENTINEL}"

        return self._library.link.sub(replace, body)

    def _wrap_splitter_with_newline(self, body: str, delimiter: str) -> str:
        """Insert a delimiter before attribution phrases that follow text."""

        def wrap(match: re.Match[str]) -> str:
            if match.start() and body[match.start() - 1] != "\n":
                return delimiter + match.group()
            return match.group()

        return self._library.on_date_somebody_wrote.sub(wrap, body)
