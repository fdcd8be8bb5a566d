#!/usr/bin/env python
"""Inspect how a message is marked and which lines get stripped.

Usage:
    python scripts/inspect_markers.py message.txt                  # Marker table and result
    python scripts/inspect_markers.py message.txt --patterns my.yaml
    cat message.txt | python scripts/inspect_markers.py -
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from quotestrip.extractor import ExtractionResult, QuotationExtractor
from quotestrip.patterns.library import load_pattern_library

MARKER_NAMES = {
    "e": "empty",
    "m": "quote",
    "f": "forward",
    "s": "splitter",
    "t": "text",
}


def read_message(source: str) -> str:
    """Read a message from a file path, or stdin for "-"."""
    if source == "-":
        return sys.stdin.read()
    with open(source, encoding="utf-8", newline="") as f:
        return f.read()


def print_marker_table(result: ExtractionResult) -> None:
    """Print each examined line with its marker, flagging deleted lines."""
    quotation = result.quotation
    if quotation is None:
        print("(body passed through, no lines examined)")
        return

    deleted = range(*quotation.deleted_range) if quotation.deleted_range else range(0)
    lines = _examined_lines(quotation.surviving_lines, quotation.deleted_range)

    print(f"  {'#':>4}  {'Marker':<9}  Text")
    print(f"  {'-'*4}  {'-'*9}  {'-'*60}")
    for index, marker in enumerate(result.markers):
        flag = "x" if index in deleted else " "
        text = lines[index] if lines[index] is not None else "(deleted)"
        preview = text[:60] + "..." if len(text) > 60 else text
        print(f"{flag} {index:>4}  {MARKER_NAMES[marker]:<9}  {preview}")


def _examined_lines(
    surviving: tuple[str, ...],
    deleted_range: tuple[int, int] | None,
) -> list[str | None]:
    """Align surviving lines with their original indices."""
    if deleted_range is None:
        return list(surviving)
    start, end = deleted_range
    return list(surviving[:start]) + [None] * (end - start) + list(surviving[start:])


def main() -> None:
    parser = argparse.ArgumentParser(description="Inspect quotation markers for a message")
    parser.add_argument("source", help="Message file, or - for stdin")
    parser.add_argument("--content-type", default="text/plain", help="MIME type of the message")
    parser.add_argument("--patterns", type=Path, help="Custom YAML pattern catalog")
    parser.add_argument("--max-lines", type=int, default=1000, help="Line limit")
    args = parser.parse_args()

    library = load_pattern_library(args.patterns) if args.patterns else None
    extractor = QuotationExtractor(library, max_lines_count=args.max_lines)

    result = extractor.extract_with_metadata(read_message(args.source), args.content_type)

    print(f"Content type: {result.content_type}")
    print(f"Markers: {result.markers or '(none)'}")
    if result.quotation is not None:
        print(f"Outcome: {result.quotation.outcome}")
        print(f"Deleted range: {result.quotation.deleted_range}")
    if result.truncated:
        print(f"Truncated to {args.max_lines} lines")
    print()

    print_marker_table(result)
    print()

    print("EXTRACTED:")
    print(result.body)


if __name__ == "__main__":
    main()
