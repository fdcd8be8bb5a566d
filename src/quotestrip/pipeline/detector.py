"""Quotation region detection over a marker sequence.

Runs ordered heuristics against the markers produced by the LineClassifier
and decides which contiguous range of lines, if any, is quoted material:

1. Without splitters or a run of three quoted lines, quote markers are
   treated as text
2. A forwarded header before any quoted line keeps the whole message
3. Text between quoted lines is an inline reply and keeps the whole message
4. Text after a splitter is cut from the splitter to the end
5. A quotation block is cut, keeping text before and after it

The first heuristic that applies decides the result.
"""

import logging
import re
from dataclasses import dataclass
from typing import Literal, Sequence

from quotestrip.patterns.library import PatternLibrary
from quotestrip.pipeline.classifier import QUOTE, SPLITTER, TEXT

logger = logging.getLogger(__name__)


DetectionOutcome = Literal["forwarded", "inline_reply", "trailing_cut", "bounded_block", "no_match"]

# Three quoted lines, possibly separated by empty lines
_QUOTE_RUN_PATTERN = re.compile(r"(me*){3}")

# Text and empty lines up to a forwarded header
_LEADING_FORWARD_PATTERN = re.compile(r"[te]*f")

# Text between two quoted lines; lookarounds let "mtmtm" yield both "t"
_INLINE_REPLY_PATTERN = re.compile(r"(?<=m)e*(t[te]*)(?=m)")

# Splitters followed only by text, forward headers and empty lines
_TRAILING_QUOTE_PATTERN = re.compile(r"(?:se*)+[tf][tfe]*$")


@dataclass(frozen=True, slots=True)
class QuotationResult:
    """Result of quotation detection.

    Attributes:
        surviving_lines: Lines kept, in their original order.
        was_region_deleted: Whether a range of lines was removed.
        deleted_range: Half-open (start, end) line range removed, or None.
        outcome: Heuristic that decided the result.
    """

    surviving_lines: tuple[str, ...]
    was_region_deleted: bool
    deleted_range: tuple[int, int] | None
    outcome: DetectionOutcome


class QuotationDetector:
    """Selects the quoted region of a message from its line markers."""

    def __init__(self, library: PatternLibrary, *, normalize_spurious_markers: bool = True) -> None:
        """Initialize the detector.

        Args:
            library: Compiled pattern catalog.
            normalize_spurious_markers: If True, quote markers are ignored
                when the message has no splitter and no run of three
                quoted lines.
        """
        self._library = library
        self._normalize_spurious_markers = normalize_spurious_markers

    def detect(self, lines: Sequence[str], markers: str) -> QuotationResult:
        """Find and remove the quoted region of a message.

        Args:
            lines: Message lines.
            markers: Marker string for the lines, one character per line.

        Returns:
            QuotationResult with the lines of the last message.

        Raises:
            ValueError: If markers and lines differ in length.
        """
        lines = tuple(lines)
        if len(markers) != len(lines):
            raise ValueError(f"Got {len(markers)} markers for {len(lines)} lines")

        if self._normalize_spurious_markers:
            markers = self._normalize_markers(markers)

        if _LEADING_FORWARD_PATTERN.match(markers):
            return self._keep(lines, markers, "forwarded")

        for inline_reply in _INLINE_REPLY_PATTERN.finditer(markers):
            # Long links can wrap and break a run of quoted lines
            if not self._is_broken_link(lines, inline_reply.start(1)):
                return self._keep(lines, markers, "inline_reply")

        trailing = _TRAILING_QUOTE_PATTERN.search(markers)
        if trailing:
            return self._delete(lines, markers, trailing.start(), len(lines), "trailing_cut")

        quotation = self._library.quotation.search(markers) or self._library.empty_quotation.search(markers)
        if quotation:
            return self._delete(lines, markers, quotation.start(1), quotation.end(1), "bounded_block")

        return self._keep(lines, markers, "no_match")

    def _normalize_markers(self, markers: str) -> str:
        """Treat isolated quote markers as text when nothing else suggests a quotation."""
        if SPLITTER in markers or _QUOTE_RUN_PATTERN.search(markers):
            return markers
        return markers.replace(QUOTE, TEXT)

    def _is_broken_link(self, lines: tuple[str, ...], index: int) -> bool:
        """Check whether the text line at index is the tail of a wrapped link."""
        if self._library.parenthesis_link.search(lines[index]):
            return True
        if index + 1 < len(lines):
            return self._library.parenthesis_link.match(lines[index + 1].strip()) is not None
        return False

    def _keep(self, lines: tuple[str, ...], markers: str, outcome: DetectionOutcome) -> QuotationResult:
        logger.debug("Keeping all lines (%s): %s", outcome, markers)
        return QuotationResult(
            surviving_lines=lines,
            was_region_deleted=False,
            deleted_range=None,
            outcome=outcome,
        )

    def _delete(
        self,
        lines: tuple[str, ...],
        markers: str,
        start: int,
        end: int,
        outcome: DetectionOutcome,
    ) -> QuotationResult:
        logger.debug("Deleting lines [%d, %d) (%s): %s", start, end, outcome, markers)
        return QuotationResult(
            surviving_lines=lines[:start] + lines[end:],
            was_region_deleted=True,
            deleted_range=(start, end),
            outcome=outcome,
        )
