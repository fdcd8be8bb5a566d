"""quotestrip - Extract the last message from an email body, dropping quotations."""

from quotestrip.exceptions import PatternLibraryError, QuotestripError
from quotestrip.extractor import ExtractionResult, QuotationExtractor, extract_from
from quotestrip.patterns import PatternLibrary, default_pattern_library, load_pattern_library
from quotestrip.pipeline import (
    MARKERS,
    DetectionOutcome,
    LineClassifier,
    MarkedLines,
    Marker,
    Postprocessor,
    Preprocessor,
    QuotationDetector,
    QuotationResult,
    find_delimiter,
)

__version__ = "0.1.0"

__all__ = [
    "DetectionOutcome",
    "ExtractionResult",
    "LineClassifier",
    "MARKERS",
    "MarkedLines",
    "Marker",
    "PatternLibrary",
    "PatternLibraryError",
    "Postprocessor",
    "Preprocessor",
    "QuotationDetector",
    "QuotationExtractor",
    "QuotationResult",
    "QuotestripError",
    "default_pattern_library",
    "extract_from",
    "find_delimiter",
    "load_pattern_library",
]
