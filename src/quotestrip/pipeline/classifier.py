"""Line classification for quotation detection.

Assigns every line of a message one marker from a five-symbol alphabet:
- e: empty line
- m: line starting with a quote marker '>'
- f: forwarded-message header
- s: splitter line (possibly one of several lines of a splitter)
- t: presumably a line of the last message in the conversation

The marker string is the only input to quotation detection.
"""

import logging
from dataclasses import dataclass
from typing import Literal

from quotestrip.patterns.library import PatternLibrary

logger = logging.getLogger(__name__)


Marker = Literal["e", "m", "f", "s", "t"]

EMPTY: Marker = "e"
QUOTE: Marker = "m"
FORWARD: Marker = "f"
SPLITTER: Marker = "s"
TEXT: Marker = "t"

# Priority order: a line takes the first category it qualifies for
MARKERS: tuple[Marker, ...] = (EMPTY, QUOTE, FORWARD, SPLITTER, TEXT)

MAX_LINES_COUNT = 1000
SPLITTER_MAX_LINES = 6


@dataclass(frozen=True, slots=True)
class MarkedLines:
    """Lines of a message with their markers.

    Attributes:
        lines: Message lines, bounded to the classifier's line limit.
        markers: One marker character per line.
        truncated: Whether lines past the limit were dropped.
    """

    lines: tuple[str, ...]
    markers: str
    truncated: bool


class LineClassifier:
    """Converts a message body into a marker sequence.

    Lines are marked in a single forward pass. Multi-line splitters mark
    every line they span and the scan resumes after the last of them.
    """

    def __init__(
        self,
        library: PatternLibrary,
        *,
        max_lines_count: int = MAX_LINES_COUNT,
        splitter_max_lines: int = SPLITTER_MAX_LINES,
    ) -> None:
        """Initialize the classifier.

        Args:
            library: Compiled pattern catalog.
            max_lines_count: Lines past this count are not examined.
            splitter_max_lines: Largest number of lines one splitter may span.
        """
        if max_lines_count < 1:
            raise ValueError("max_lines_count must be at least 1")
        if splitter_max_lines < 1:
            raise ValueError("splitter_max_lines must be at least 1")

        self._library = library
        self._max_lines_count = max_lines_count
        self._splitter_max_lines = splitter_max_lines

    def classify(self, body: str) -> MarkedLines:
        """Split a preprocessed body into lines and mark them.

        Args:
            body: Preprocessed message body.

        Returns:
            MarkedLines for the retained prefix of the body.
        """
        lines, truncated = self.split(body)
        return MarkedLines(lines=lines, markers=self.mark(lines), truncated=truncated)

    def split(self, body: str) -> tuple[tuple[str, ...], bool]:
        """Split a body into at most max_lines_count lines.

        Returns:
            Tuple of (retained lines, whether any lines were dropped).
        """
        lines = body.splitlines()
        if len(lines) <= self._max_lines_count:
            return tuple(lines), False

        logger.debug("Message has %d lines, keeping the first %d", len(lines), self._max_lines_count)
        return tuple(lines[: self._max_lines_count]), True

    def mark(self, lines: tuple[str, ...] | list[str]) -> str:
        """Mark each line with its category.

        Args:
            lines: Message lines.

        Returns:
            Marker string, one character per line.
        """
        markers: list[Marker] = []
        index = 0

        while index < len(lines):
            line = lines[index]

            if not line:
                markers.append(EMPTY)
            elif self._library.is_quote_line(line):
                markers.append(QUOTE)
            elif self._library.is_forward_line(line):
                markers.append(FORWARD)
            else:
                consumed = self._match_splitter(lines, index)
                if consumed:
                    markers.extend([SPLITTER] * consumed)
                    index += consumed
                    continue
                markers.append(TEXT)

            index += 1

        return "".join(markers)

    def _match_splitter(self, lines: tuple[str, ...] | list[str], index: int) -> int:
        """Match a splitter starting at lines[index].

        Returns:
            Number of lines the splitter spans, or 0 if none matches.
        """
        window = lines[index : index + self._splitter_max_lines]
        match = self._library.match_splitter("\n".join(window))
        if match is None:
            return 0

        # A match that ends on a line break still covers the line it started
        consumed = len(match.group().splitlines())
        return min(max(consumed, 1), len(window))
