"""Pipeline components for quotation extraction."""

from quotestrip.pipeline.classifier import (
    EMPTY,
    FORWARD,
    MARKERS,
    QUOTE,
    SPLITTER,
    TEXT,
    LineClassifier,
    MarkedLines,
    Marker,
)
from quotestrip.pipeline.delimiter import find_delimiter
from quotestrip.pipeline.detector import DetectionOutcome, QuotationDetector, QuotationResult
from quotestrip.pipeline.postprocessor import Postprocessor
from quotestrip.pipeline.preprocessor import Preprocessor

__all__ = [
    "DetectionOutcome",
    "EMPTY",
    "FORWARD",
    "LineClassifier",
    "MARKERS",
    "MarkedLines",
    "Marker",
    "Postprocessor",
    "Preprocessor",
    "QUOTE",
    "QuotationDetector",
    "QuotationResult",
    "SPLITTER",
    "TEXT",
    "find_delimiter",
]
