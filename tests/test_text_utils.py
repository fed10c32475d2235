"""Tests for text helpers."""

from glotnexus_news.text_utils import (
    extract_first_paragraph,
    strip_html_tags,
    summarize_text,
    truncate_at_natural_break,
)


class TestStripHtmlTags:
    """Tests for strip_html_tags function."""

    def test_removes_tags_scripts_and_entities(self) -> None:
        """Markup, scripts and entities are removed, whitespace collapsed."""
        html = "<p>Hello &amp; <b>world</b></p><script>alert(1)</script>"

        assert strip_html_tags(html) == "Hello & world"

    def test_empty_input(self) -> None:
        """Empty input yields an empty string."""
        assert strip_html_tags("") == ""


class TestExtractFirstParagraph:
    """Tests for extract_first_paragraph function."""

    def test_returns_first_paragraph(self) -> None:
        """The first <p> element is returned as plain text."""
        html = "<div>intro</div><p>First <em>para</em></p><p>Second</p>"

        assert extract_first_paragraph(html) == "First para"

    def test_falls_back_to_leading_text(self) -> None:
        """Without <p>, the first 100 characters are used."""
        assert extract_first_paragraph("a" * 150) == "a" * 100 + "..."

    def test_short_text_without_paragraph(self) -> None:
        """Short text is returned whole."""
        assert extract_first_paragraph("short text") == "short text"


class TestTruncateAtNaturalBreak:
    """Tests for truncate_at_natural_break function."""

    def test_short_text_unchanged(self) -> None:
        """Text within the limit is returned as-is."""
        assert truncate_at_natural_break("short", 10) == "short"

    def test_cuts_at_space(self) -> None:
        """Cut at the last space in the second half of the budget."""
        assert truncate_at_natural_break("Hello world this is long", 10) == "Hello..."

    def test_cuts_at_japanese_punctuation(self) -> None:
        """Japanese punctuation is a break point."""
        result = truncate_at_natural_break("これはテスト、とても長い文章です", 12)

        assert result == "これはテスト、..."

    def test_hard_cut_without_break(self) -> None:
        """Hard-cut with an ellipsis when there is no usable break."""
        assert truncate_at_natural_break("abcdefghijklmnop", 10) == "abcdefg..."

    def test_never_exceeds_max_length(self) -> None:
        """Result length is bounded for every budget."""
        text = "The quick brown fox jumps over the lazy dog。" * 5
        for max_length in range(1, 60):
            assert len(truncate_at_natural_break(text, max_length)) <= max_length


class TestSummarizeText:
    """Tests for summarize_text function."""

    def test_keeps_whole_sentences(self) -> None:
        """Sentences are appended while they fit."""
        text = "First sentence. Second sentence. Third one here."

        assert summarize_text(text, 35) == "First sentence. Second sentence."

    def test_japanese_sentences(self) -> None:
        """Japanese sentence endings are recognized."""
        assert summarize_text("これは一文目です。これは二文目です。", 12) == "これは一文目です。"

    def test_long_first_sentence_is_truncated(self) -> None:
        """An over-long first sentence is cut at a natural break."""
        text = "word " * 40

        result = summarize_text(text, 30)
        assert len(result) <= 30
        assert result.endswith("...")

    def test_strips_html(self) -> None:
        """HTML input is summarized as plain text."""
        assert summarize_text("<p>Short <b>text</b></p>", 80) == "Short text"
