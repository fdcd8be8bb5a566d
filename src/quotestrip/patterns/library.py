"""Pattern library for quotation extraction.

The literal text of every recognized form (quote prefixes, forward headers,
splitter templates, links) lives in a YAML catalog. The built-in catalog is
``quotations.yaml`` next to this module; a custom one can be loaded with
:func:`load_pattern_library`.
"""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from quotestrip.exceptions import PatternLibraryError

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).with_name("quotations.yaml")

_FLAGS: dict[str, re.RegexFlag] = {
    "IGNORECASE": re.IGNORECASE,
    "DOTALL": re.DOTALL,
    "MULTILINE": re.MULTILINE,
    "VERBOSE": re.VERBOSE,
}

# Regex shapes for the attribution families; the catalog supplies the words.
_ATTRIBUTION_TEMPLATES: dict[str, tuple[str, tuple[str, ...]]] = {
    "on_date_somebody_wrote": (
        "(-*[>]?[ ]?({openers})[ ].*({separators})(.*\n){{0,2}}.*({verbs}):?-*)",
        ("openers", "separators", "verbs"),
    ),
    "on_date_wrote_somebody": (
        "(-*[>]?[ ]?({openers})[ ].*(.*\n){{0,2}}.*({verbs})[ ]*.*:)",
        ("openers", "verbs"),
    ),
}

_REQUIRED_KEYS = (
    "quote_prefix",
    "forward",
    "attributions",
    "splitters",
    "link",
    "normalized_link",
    "parenthesis_link",
    "quotation",
    "empty_quotation",
)


@dataclass(frozen=True, slots=True)
class PatternLibrary:
    """Compiled pattern catalog.

    Attributes:
        quote_prefix: Quote marker at the start of a line.
        forward: Forwarded-message header line.
        on_date_somebody_wrote: "On <date>, <person> wrote:" phrase, used
            unanchored when splitting inline attributions onto their own line.
        splitters: Splitter templates in priority order.
        link: Bracketed link; group 1 is the link target.
        normalized_link: Sentinel-wrapped link; group 1 is the link target.
        parenthesis_link: Link-shaped text that may break a quote run.
        quotation: Marker-level quotation block; group 1 is the deleted range.
        empty_quotation: Marker-level quotation border with no trailing
            quoted line; group 1 is the deleted range.
    """

    quote_prefix: re.Pattern[str]
    forward: re.Pattern[str]
    on_date_somebody_wrote: re.Pattern[str]
    splitters: tuple[re.Pattern[str], ...]
    link: re.Pattern[str]
    normalized_link: re.Pattern[str]
    parenthesis_link: re.Pattern[str]
    quotation: re.Pattern[str]
    empty_quotation: re.Pattern[str]

    def is_quote_line(self, line: str) -> bool:
        """Check if a line starts with a quote marker."""
        return self.quote_prefix.match(line) is not None

    def is_forward_line(self, line: str) -> bool:
        """Check if a line starts with a forwarded-message header."""
        return self.forward.match(line) is not None

    def match_splitter(self, text: str) -> re.Match[str] | None:
        """Match splitter templates against the start of text.

        Args:
            text: One or more lines joined with newlines.

        Returns:
            The match of the first template that fits, or None.
        """
        for pattern in self.splitters:
            match = pattern.match(text)
            if match:
                return match
        return None


def load_pattern_library(path: Path | str | None = None) -> PatternLibrary:
    """Load and compile a pattern catalog.

    Args:
        path: YAML catalog to load. Defaults to the built-in catalog.

    Returns:
        Compiled PatternLibrary.

    Raises:
        PatternLibraryError: If the catalog cannot be read or compiled.
    """
    catalog_path = Path(path) if path is not None else DEFAULT_CATALOG_PATH

    try:
        with open(catalog_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise PatternLibraryError(message=f"Cannot read catalog: {exc.strerror}", path=catalog_path) from exc
    except yaml.YAMLError as exc:
        raise PatternLibraryError(message=f"Invalid YAML: {exc}", path=catalog_path) from exc

    try:
        library = _build_library(data)
    except PatternLibraryError as exc:
        exc.path = catalog_path
        raise

    logger.debug("Loaded pattern library from %s (%d splitters)", catalog_path, len(library.splitters))
    return library


@lru_cache(maxsize=1)
def default_pattern_library() -> PatternLibrary:
    """Get the built-in pattern library, compiled once."""
    return load_pattern_library(DEFAULT_CATALOG_PATH)


def _build_library(data: Any) -> PatternLibrary:
    """Compile a parsed catalog into a PatternLibrary."""
    if not isinstance(data, dict):
        raise PatternLibraryError(message="Catalog must be a mapping")

    missing = [key for key in _REQUIRED_KEYS if key not in data]
    if missing:
        raise PatternLibraryError(message=f"Missing catalog keys: {', '.join(missing)}")

    attributions = data["attributions"]
    if not isinstance(attributions, dict) or "on_date_somebody_wrote" not in attributions:
        raise PatternLibraryError(message="attributions must define on_date_somebody_wrote")

    compiled_attributions = {
        name: _compile_attribution(name, words) for name, words in attributions.items()
    }

    splitter_entries = data["splitters"]
    if not isinstance(splitter_entries, list) or not splitter_entries:
        raise PatternLibraryError(message="splitters must be a non-empty list")

    splitters: list[re.Pattern[str]] = []
    for index, entry in enumerate(splitter_entries):
        if isinstance(entry, dict) and "attribution" in entry:
            name = entry["attribution"]
            if name not in compiled_attributions:
                raise PatternLibraryError(message=f"splitters[{index}]: unknown attribution {name!r}")
            splitters.append(compiled_attributions[name])
        else:
            splitters.append(_compile(entry, f"splitters[{index}]"))

    return PatternLibrary(
        quote_prefix=_compile(data["quote_prefix"], "quote_prefix"),
        forward=_compile(data["forward"], "forward"),
        on_date_somebody_wrote=compiled_attributions["on_date_somebody_wrote"],
        splitters=tuple(splitters),
        link=_compile(data["link"], "link"),
        normalized_link=_compile(data["normalized_link"], "normalized_link"),
        parenthesis_link=_compile(data["parenthesis_link"], "parenthesis_link"),
        quotation=_compile(data["quotation"], "quotation"),
        empty_quotation=_compile(data["empty_quotation"], "empty_quotation"),
    )


def _compile(entry: Any, key: str) -> re.Pattern[str]:
    """Compile a catalog entry: a regex string or a {pattern, flags} mapping."""
    if isinstance(entry, str):
        pattern, flag_names = entry, []
    elif isinstance(entry, dict) and isinstance(entry.get("pattern"), str):
        pattern, flag_names = entry["pattern"], entry.get("flags") or []
    else:
        raise PatternLibraryError(message=f"{key}: expected a pattern string or mapping")

    flags = 0
    for name in flag_names:
        if name not in _FLAGS:
            raise PatternLibraryError(message=f"{key}: unknown flag {name!r}")
        flags |= _FLAGS[name]

    try:
        return re.compile(pattern, flags)
    except re.error as exc:
        raise PatternLibraryError(message=f"{key}: invalid pattern: {exc}") from exc


def _compile_attribution(name: str, words: Any) -> re.Pattern[str]:
    """Build an attribution regex from its template and word lists."""
    if name not in _ATTRIBUTION_TEMPLATES:
        raise PatternLibraryError(message=f"attributions: unknown family {name!r}")

    template, fields = _ATTRIBUTION_TEMPLATES[name]
    if not isinstance(words, dict):
        raise PatternLibraryError(message=f"attributions.{name}: expected a mapping of word lists")

    alternations: dict[str, str] = {}
    for field in fields:
        values = words.get(field)
        if not isinstance(values, list) or not values:
            raise PatternLibraryError(message=f"attributions.{name}.{field}: expected a non-empty list")
        alternations[field] = "|".join(re.escape(str(value)) for value in values)

    return re.compile(template.format(**alternations))
