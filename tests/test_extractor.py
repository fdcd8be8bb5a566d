"""Tests for the QuotationExtractor class."""

from pathlib import Path

import pytest
import yaml

from quotestrip import (
    ExtractionResult,
    QuotationExtractor,
    extract_from,
    load_pattern_library,
)
from quotestrip.extractor import normalize_content_type
from quotestrip.patterns import DEFAULT_CATALOG_PATH

REPLY_WITH_QUOTE = "new text\nOn Jan 1, Alice wrote:\n> old text\n> more old text"

OUTLOOK_REPLY = """Sounds good.

-----Original Message-----
From: Bob
Sent: Monday
Subject: Lunch

Want to get lunch?"""

FORWARDED = """---------- Forwarded message ----------
From: bob@example.com
Subject: hi

Hello"""

SAMPLES = [
    REPLY_WITH_QUOTE,
    OUTLOOK_REPLY,
    FORWARDED,
    "> quoted A\nmy reply\n> quoted B",
    "Sure, see you then. On Mon, Jan 1, 2024 at 10:00 AM, Bob <bob@example.com> wrote:\n> Lunch tomorrow?",
    "Check <http://example.com/a>\n\nOn Jan 1, 2020, Bob wrote:\n> hi\n> there",
    "Just a note.\n\nThanks,\nAlice",
]


class TestPlainTextExtraction:
    """End-to-end plain text extraction."""

    def test_reply_above_quote(self) -> None:
        """Attribution and quoted lines are removed."""
        assert extract_from(REPLY_WITH_QUOTE) == "new text"

    def test_outlook_reply(self) -> None:
        """Everything from the Original Message separator on is removed."""
        assert extract_from(OUTLOOK_REPLY) == "Sounds good."

    def test_forwarded_message_unchanged(self) -> None:
        """Forwarded messages are kept whole."""
        assert extract_from(FORWARDED) == FORWARDED

    def test_inline_reply_unchanged(self) -> None:
        """Replies between quoted lines keep the whole message."""
        body = "> quoted A\nmy reply\n> quoted B"

        assert extract_from(body) == body

    def test_inline_reply_in_long_quote_unchanged(self) -> None:
        """Replies inside a long quotation keep the whole message."""
        body = "> a\n> b\n> c\nmy reply\n> d"
        result = QuotationExtractor().extract_with_metadata(body)

        assert result.body == body
        assert result.quotation is not None
        assert result.quotation.outcome == "inline_reply"

    def test_long_link_in_quote_stripped(self) -> None:
        """A wrapped link does not count as an inline reply."""
        body = "new text\n> a\n> b\n> see\n(http://example.com/a/very/long/path)\n> c"

        assert extract_from(body) == "new text"

    def test_inline_attribution(self) -> None:
        """Attribution on the same line as the reply is split off and removed."""
        body = (
            "Sure, see you then. On Mon, Jan 1, 2024 at 10:00 AM, Bob <bob@example.com> wrote:\n"
            "> Lunch tomorrow?"
        )

        assert extract_from(body) == "Sure, see you then."

    def test_links_restored(self) -> None:
        """Links in the kept text get their brackets back."""
        body = "Check <http://example.com/a>\n\nOn Jan 1, 2020, Bob wrote:\n> hi\n> there"

        assert extract_from(body) == "Check <http://example.com/a>"

    def test_link_with_at_sign_restored(self) -> None:
        """Links containing '@' in the kept text come back unchanged."""
        body = "See <https://medium.com/@user/post>\n\nOn Jan 1, 2020, Bob wrote:\n> hi\n> there"

        assert extract_from(body) == "See <https://medium.com/@user/post>"

    def test_link_with_at_sign_unchanged(self) -> None:
        """A message with an '@' link and no quotation is returned as is."""
        body = "See <http://user@example.com/page>"

        assert extract_from(body) == body

    @pytest.mark.parametrize(
        "link",
        ["(http://example.com/a/very/long/path)", "<http://example.com/a/very/long/path>"],
    )
    @pytest.mark.parametrize("normalize", [True, False])
    def test_link_between_two_quote_lines_unchanged(self, link: str, normalize: bool) -> None:
        """A link line between two quoted lines leaves the message whole."""
        body = f"> quoted A\n{link}\n> quoted B"
        result = QuotationExtractor(normalize_spurious_markers=normalize).extract_with_metadata(body)

        assert result.markers == "mtm"
        assert result.body == body
        assert result.quotation is not None
        assert result.quotation.was_region_deleted is False

    def test_link_line_not_quote(self) -> None:
        """A link line followed by brackets is plain text."""
        body = "<http://example.com/a>b<c>"
        result = QuotationExtractor().extract_with_metadata(body)

        assert result.markers == "t"
        assert result.body == body

    def test_isolated_quotes_kept(self) -> None:
        """Two quote lines with nothing else suggesting a reply are kept."""
        body = "Hello\n\n> a\n> b"

        assert extract_from(body) == body

    def test_no_quotation(self) -> None:
        """Text without quotations is returned stripped."""
        assert extract_from("\n  Just a note.\n\nThanks,\nAlice\n\n") == "Just a note.\n\nThanks,\nAlice"

    def test_empty_body(self) -> None:
        """Empty input gives empty output."""
        assert extract_from("") == ""


class TestUnchangedBodies:
    """Bodies with nothing deleted come back as received."""

    def test_forwarded_with_inline_attribution(self) -> None:
        """Attribution phrases are not split onto their own line in forwarded messages."""
        body = "---------- Forwarded message ----------\nThanks. On Jan 1, Bob wrote: hi"
        result = QuotationExtractor().extract_with_metadata(body)

        assert result.body == body
        assert result.quotation is not None
        assert result.quotation.outcome == "forwarded"

    def test_inline_reply_with_inline_attribution(self) -> None:
        """Attribution phrases are not split onto their own line in inline replies."""
        body = "> a\n> b\n> c\nreply\n> d\nfoo On Jan 1, Bob wrote: z"
        result = QuotationExtractor().extract_with_metadata(body)

        assert result.body == body
        assert result.quotation is not None
        assert result.quotation.outcome == "inline_reply"

    def test_sentinel_text_untouched(self) -> None:
        """Text that looks like a normalized link is not rewritten."""
        body = "Literal @@http://example.com@@ text"
        result = QuotationExtractor().extract_with_metadata(body)

        assert result.body == body
        assert result.quotation is not None
        assert result.quotation.outcome == "no_match"

    def test_mixed_line_endings_kept(self) -> None:
        """Line endings of an untouched body are not rewritten."""
        body = "one\ntwo\r\nthree"

        assert extract_from(body) == body


class TestLineEndings:
    """CRLF bodies."""

    def test_crlf_reply(self) -> None:
        """CRLF bodies are stripped like LF bodies."""
        body = "new text\r\nOn Jan 1, Alice wrote:\r\n> old\r\n> older"

        assert extract_from(body) == "new text"

    def test_crlf_preserved(self) -> None:
        """Kept lines are joined with the original delimiter."""
        body = "line one\r\nline two\r\n\r\nOn Jan 1, Alice wrote:\r\n> old\r\n> older"

        assert extract_from(body) == "line one\r\nline two"


class TestContentTypes:
    """Dispatch on content type."""

    def test_html_passthrough(self) -> None:
        """HTML bodies are returned unchanged."""
        body = "<p>Reply</p><blockquote>On Jan 1, Bob wrote:<br>&gt; hi</blockquote>"

        assert extract_from(body, "text/html") == body

    def test_other_type_passthrough(self) -> None:
        """Unknown content types are returned unchanged."""
        body = "new text\nOn Jan 1, Alice wrote:\n> old"
        result = QuotationExtractor().extract_with_metadata(body, "application/octet-stream")

        assert result.body == body
        assert result.quotation is None
        assert result.markers == ""
        assert result.content_type == "application/octet-stream"

    def test_plain_with_parameters(self) -> None:
        """MIME parameters and case do not matter."""
        assert extract_from(REPLY_WITH_QUOTE, "Text/Plain; charset=utf-8") == "new text"

    def test_extract_from_plain_and_html(self) -> None:
        """Content-type specific entry points."""
        extractor = QuotationExtractor()

        assert extractor.extract_from_plain(REPLY_WITH_QUOTE) == "new text"
        assert extractor.extract_from_html(REPLY_WITH_QUOTE) == REPLY_WITH_QUOTE

    def test_normalize_content_type(self) -> None:
        """Content types are lowercased and stripped of parameters."""
        assert normalize_content_type("TEXT/HTML") == "text/html"
        assert normalize_content_type(" text/plain ; format=flowed") == "text/plain"


class TestMetadata:
    """extract_with_metadata results."""

    def test_metadata(self) -> None:
        """Markers, range and outcome are reported."""
        result = QuotationExtractor().extract_with_metadata(REPLY_WITH_QUOTE)

        assert isinstance(result, ExtractionResult)
        assert result.body == "new text"
        assert result.content_type == "text/plain"
        assert result.markers == "tsmm"
        assert result.truncated is False
        assert result.quotation is not None
        assert result.quotation.deleted_range == (1, 4)
        assert result.quotation.outcome == "bounded_block"

    def test_result_immutable(self) -> None:
        """ExtractionResult is immutable."""
        result = QuotationExtractor().extract_with_metadata("Hi")

        with pytest.raises(AttributeError):
            result.body = "Modified"  # type: ignore[misc]


class TestLineLimit:
    """Bounded line count."""

    def test_truncates_before_classification(self) -> None:
        """Lines past the limit are dropped."""
        result = QuotationExtractor(max_lines_count=2).extract_with_metadata("a\nb\nc")

        assert result.body == "a\nb"
        assert result.truncated is True

    def test_quotation_past_limit_not_examined(self) -> None:
        """Quotations past the limit are neither examined nor kept."""
        body = "reply\nmore\nstill more\nOn Jan 1, Bob wrote:\n> x\n> y"
        result = QuotationExtractor(max_lines_count=3).extract_with_metadata(body)

        assert result.markers == "ttt"
        assert result.body == "reply\nmore\nstill more"

    def test_rejects_bad_limit(self) -> None:
        """Line limit must be positive."""
        with pytest.raises(ValueError):
            QuotationExtractor(max_lines_count=0)


class TestConfiguration:
    """Extractor configuration."""

    def test_spurious_marker_normalization_off(self) -> None:
        """Two quote lines are stripped when normalization is off."""
        extractor = QuotationExtractor(normalize_spurious_markers=False)

        assert extractor.extract("Hello\n\n> a\n> b") == "Hello"

    def test_custom_pattern_library(self, tmp_path: Path) -> None:
        """A custom catalog changes what counts as a quote."""
        with open(DEFAULT_CATALOG_PATH, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        data["quote_prefix"] = r"^\|+ ?"
        path = tmp_path / "pipes.yaml"
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, allow_unicode=True)

        extractor = QuotationExtractor(load_pattern_library(path))

        assert extractor.extract("new text\nOn Jan 1, Alice wrote:\n| old\n| older") == "new text"


class TestProperties:
    """Properties that hold for every input."""

    @pytest.mark.parametrize("body", SAMPLES)
    def test_never_longer(self, body: str) -> None:
        """Extraction only removes text."""
        assert len(extract_from(body)) <= len(body.strip())

    @pytest.mark.parametrize("body", SAMPLES)
    def test_idempotent(self, body: str) -> None:
        """Extracting twice gives the same result as once."""
        once = extract_from(body)

        assert extract_from(once) == once
