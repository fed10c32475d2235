"""Tests for content classification."""

from glotnexus_news.classifier import classify, merge_categories
from glotnexus_news.feeds import (
    AI_RSS_FEEDS,
    CATEGORY_BUSINESS,
    CATEGORY_GENERAL,
    CATEGORY_NLP,
    CATEGORY_RESEARCH,
    CATEGORY_ROBOTICS,
    find_feed,
)


class TestClassify:
    """Tests for classify function."""

    def test_matches_keywords_case_insensitively(self) -> None:
        """English keywords match regardless of case."""
        assert CATEGORY_NLP in classify("New LLM from OpenAI", "")

    def test_matches_japanese_keywords(self) -> None:
        """Japanese keywords match in the body."""
        assert CATEGORY_ROBOTICS in classify("", "ロボットが走る")

    def test_multiple_categories(self) -> None:
        """Every matching rule contributes a tag."""
        categories = classify("Research paper", "enterprise business adoption")

        assert CATEGORY_RESEARCH in categories
        assert CATEGORY_BUSINESS in categories

    def test_falls_back_to_general(self) -> None:
        """No match yields the general tag."""
        assert classify("Weather today", "sunny") == [CATEGORY_GENERAL]


class TestMergeCategories:
    """Tests for merge_categories function."""

    def test_deduplicates_in_first_seen_order(self) -> None:
        """Tags are merged without duplicates."""
        assert merge_categories(["AI", "X"], ["X", "Y"]) == ["AI", "X", "Y"]


class TestFeedRegistry:
    """Tests for the feed registry."""

    def test_feed_names_are_unique(self) -> None:
        """Feed names identify feeds."""
        names = [feed.name.lower() for feed in AI_RSS_FEEDS]
        assert len(names) == len(set(names))

    def test_find_feed_is_case_insensitive(self) -> None:
        """Lookup ignores case and surrounding spaces."""
        feed = find_feed("  openai blog ")

        assert feed is not None
        assert feed.name == "OpenAI Blog"

    def test_find_feed_unknown(self) -> None:
        """Unknown names yield None."""
        assert find_feed("No Such Feed") is None
