"""QuotationExtractor - Main public interface for quotation stripping.

Provides three extraction methods:
- extract(): Extract the last message, dispatching on content type
- extract_from_plain() / extract_from_html(): Content-type specific paths
- extract_with_metadata(): Full result with debugging info
"""

import logging
from dataclasses import dataclass
from functools import lru_cache

from quotestrip.patterns.library import PatternLibrary, default_pattern_library
from quotestrip.pipeline.classifier import MAX_LINES_COUNT, SPLITTER_MAX_LINES, LineClassifier
from quotestrip.pipeline.delimiter import find_delimiter
from quotestrip.pipeline.detector import QuotationDetector, QuotationResult
from quotestrip.pipeline.postprocessor import Postprocessor
from quotestrip.pipeline.preprocessor import (
    CONTENT_TYPE_TEXT_HTML,
    CONTENT_TYPE_TEXT_PLAIN,
    Preprocessor,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Full extraction result with metadata.

    Attributes:
        body: Extracted message text.
        content_type: Normalized content type the body was handled as.
        markers: Per-line markers of the examined lines ("" if not examined).
        quotation: Detection result, or None if the body was passed through.
        truncated: Whether lines past the line limit were dropped.
    """

    body: str
    content_type: str
    markers: str
    quotation: QuotationResult | None
    truncated: bool


class QuotationExtractor:
    """Extracts the non-quoted part of an email message body.

    The plain text pipeline:
    1. Detect the line delimiter
    2. Preprocess (normalize links, split inline attributions)
    3. Split into a bounded number of lines and mark each line
    4. Detect and remove the quoted region
    5. Rejoin, restore links and strip

    Any other content type is returned unchanged.

    Example:
        extractor = QuotationExtractor()

        # Last message only
        reply = extractor.extract(message_body)

        # Full metadata
        result = extractor.extract_with_metadata(message_body)
    """

    def __init__(
        self,
        pattern_library: PatternLibrary | None = None,
        *,
        max_lines_count: int = MAX_LINES_COUNT,
        splitter_max_lines: int = SPLITTER_MAX_LINES,
        normalize_spurious_markers: bool = True,
    ) -> None:
        """Initialize the extractor.

        Args:
            pattern_library: Compiled pattern catalog. Defaults to the built-in one.
            max_lines_count: Lines past this count are dropped before marking.
            splitter_max_lines: Largest number of lines one splitter may span.
            normalize_spurious_markers: Ignore quote markers when the message
                has no splitter and no run of three quoted lines.
        """
        library = pattern_library if pattern_library is not None else default_pattern_library()

        # Pipeline components
        self._preprocessor = Preprocessor(library)
        self._classifier = LineClassifier(
            library,
            max_lines_count=max_lines_count,
            splitter_max_lines=splitter_max_lines,
        )
        self._detector = QuotationDetector(library, normalize_spurious_markers=normalize_spurious_markers)
        self._postprocessor = Postprocessor(library)

    def extract(self, body: str, content_type: str = CONTENT_TYPE_TEXT_PLAIN) -> str:
        """Extract the last message from a body.

        Args:
            body: Message body.
            content_type: MIME type of the body; parameters are ignored.

        Returns:
            The non-quoted message, or the body unchanged for content
            types other than plain text.
        """
        return self.extract_with_metadata(body, content_type).body

    def extract_from_plain(self, body: str) -> str:
        """Extract the last message from a plain text body."""
        return self._extract_plain(body).body

    def extract_from_html(self, body: str) -> str:
        """Extract the last message from an HTML body.

        HTML is not processed yet; the body is returned unchanged.
        """
        return body

    def extract_with_metadata(self, body: str, content_type: str = CONTENT_TYPE_TEXT_PLAIN) -> ExtractionResult:
        """Extract the last message with full metadata.

        Args:
            body: Message body.
            content_type: MIME type of the body; parameters are ignored.

        Returns:
            ExtractionResult with the message and debugging info.
        """
        normalized_type = normalize_content_type(content_type)

        if normalized_type == CONTENT_TYPE_TEXT_PLAIN:
            return self._extract_plain(body)

        if normalized_type == CONTENT_TYPE_TEXT_HTML:
            extracted = self.extract_from_html(body)
        else:
            logger.debug("Passing through body with content type %r", content_type)
            extracted = body

        return ExtractionResult(
            body=extracted,
            content_type=normalized_type,
            markers="",
            quotation=None,
            truncated=False,
        )

    def _extract_plain(self, body: str) -> ExtractionResult:
        delimiter = find_delimiter(body)
        preprocessed = self._preprocessor.preprocess(body, delimiter)

        marked = self._classifier.classify(preprocessed)
        quotation = self._detector.detect(marked.lines, marked.markers)

        if quotation.was_region_deleted:
            extracted = self._postprocessor.postprocess(delimiter.join(quotation.surviving_lines))
        else:
            extracted = self._bounded_original(body, delimiter)

        return ExtractionResult(
            body=extracted,
            content_type=CONTENT_TYPE_TEXT_PLAIN,
            markers=marked.markers,
            quotation=quotation,
            truncated=marked.truncated,
        )

    def _bounded_original(self, body: str, delimiter: str) -> str:
        """Return the body as received, cut to the line limit and stripped.

        Used when nothing was deleted, so preprocessing rewrites (split
        attribution phrases, link sentinels) never reach the caller.
        """
        lines, truncated = self._classifier.split(body)
        if not truncated:
            return body.strip()
        return delimiter.join(lines).strip()


def normalize_content_type(content_type: str) -> str:
    """Lowercase a MIME type and drop its parameters.

    Example: "Text/Plain; charset=utf-8" -> "text/plain"
    """
    return content_type.split(";", 1)[0].strip().lower()


@lru_cache(maxsize=1)
def _default_extractor() -> QuotationExtractor:
    return QuotationExtractor()


def extract_from(body: str, content_type: str = CONTENT_TYPE_TEXT_PLAIN) -> str:
    """Extract the last message from a body using the built-in patterns.

    Args:
        body: Message body.
        content_type: MIME type of the body.

    Returns:
        The non-quoted message.
    """
    return _default_extractor().extract(body, content_type)
