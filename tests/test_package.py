"""Tests for the package surface."""

import importlib

import pytest

MODULES = (
    "glotnexus_news",
    "glotnexus_news.aggregator",
    "glotnexus_news.cache_manager",
    "glotnexus_news.classifier",
    "glotnexus_news.config",
    "glotnexus_news.feed_fetcher",
    "glotnexus_news.feeds",
    "glotnexus_news.handler",
    "glotnexus_news.models",
    "glotnexus_news.routes",
    "glotnexus_news.server",
    "glotnexus_news.social_poster",
    "glotnexus_news.text_utils",
    "glotnexus_news.translator",
    "glotnexus_news.tweet_format",
    "glotnexus_news.x_client",
)


class TestImports:
    """Tests that every module imports cleanly."""

    @pytest.mark.parametrize("name", MODULES)
    def test_module_imports(self, name: str) -> None:
        """The module can be imported."""
        assert importlib.import_module(name) is not None

    def test_public_names(self) -> None:
        """Exported names resolve."""
        package = importlib.import_module("glotnexus_news")

        for name in package.__all__:
            assert getattr(package, name) is not None
