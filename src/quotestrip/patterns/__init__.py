"""Pattern catalog for quotation and splitter detection."""

from quotestrip.patterns.library import (
    DEFAULT_CATALOG_PATH,
    PatternLibrary,
    default_pattern_library,
    load_pattern_library,
)

__all__ = [
    "DEFAULT_CATALOG_PATH",
    "PatternLibrary",
    "default_pattern_library",
    "load_pattern_library",
]
