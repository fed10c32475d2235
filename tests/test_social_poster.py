"""Tests for SocialPoster."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from glotnexus_news.cache_manager import CacheManager
from glotnexus_news.config import PostingConfig, XCredentials
from glotnexus_news.models import NewsItem, PosterBusyError, SocialPostError
from glotnexus_news.social_poster import (
    DUPLICATE_CONTENT_ERROR,
    SocialPoster,
    build_social_poster,
    max_posts_for_hour,
)
from glotnexus_news.tweet_format import TweetVariant


def create_news_items(count: int) -> list[NewsItem]:
    """Helper to create NewsItems."""
    return [
        NewsItem(
            id=f"article-{i}",
            title=f"Title {i}",
            link=f"https://example.com/{i}",
            content="Body",
            summary="Summary",
            publish_date=datetime(2024, 5, 6, tzinfo=timezone.utc),
            source_name="OpenAI Blog",
            source_language="en",
            categories=["AI"],
        )
        for i in range(count)
    ]


def create_client() -> MagicMock:
    """Helper to create an X client returning sequential tweet IDs."""
    client = MagicMock()
    client.post_tweet.side_effect = [str(1000 + i) for i in range(100)]
    return client


def create_poster(
    cache: CacheManager, client: MagicMock | None, sleep: MagicMock | None = None
) -> SocialPoster:
    """Helper to create a SocialPoster with the simple layout."""
    return SocialPoster(
        cache_manager=cache,
        client=client,
        variant=TweetVariant.SIMPLE,
        sleep=sleep or MagicMock(),
    )


class TestSocialPosterPostUnposted:
    """Tests for SocialPoster.post_unposted()."""

    def test_respects_max_posts(self) -> None:
        """max_posts=2 with 5 candidates posts 2 and records 2."""
        cache = CacheManager()
        poster = create_poster(cache, create_client())

        results = poster.post_unposted(create_news_items(5), max_posts=2, delay_seconds=0)

        assert len(results) == 2
        assert all(result.success for result in results)
        assert cache.get_posted_ids() == {"article-0", "article-1"}

    def test_never_posts_same_article_twice(self) -> None:
        """Two runs sharing a store post each article once."""
        cache = CacheManager()
        client = create_client()
        poster = create_poster(cache, client)
        items = create_news_items(3)

        first = poster.post_unposted(items, max_posts=2, delay_seconds=0)
        second = poster.post_unposted(items, max_posts=5, delay_seconds=0)

        first_ids = [result.article_id for result in first]
        second_ids = [result.article_id for result in second]
        assert first_ids == ["article-0", "article-1"]
        assert second_ids == ["article-2"]
        assert client.post_tweet.call_count == 3

    def test_keeps_input_order(self) -> None:
        """Candidates are posted in input order."""
        poster = create_poster(CacheManager(), create_client())
        items = list(reversed(create_news_items(3)))

        results = poster.post_unposted(items, max_posts=3, delay_seconds=0)

        assert [result.article_id for result in results] == ["article-2", "article-1", "article-0"]

    def test_sleeps_between_posts_only(self) -> None:
        """The delay is applied between posts, not after the last one."""
        sleep = MagicMock()
        poster = create_poster(CacheManager(), create_client(), sleep=sleep)

        poster.post_unposted(create_news_items(3), max_posts=3, delay_seconds=7)

        assert sleep.call_count == 2
        sleep.assert_called_with(7)

    def test_failure_is_reported_and_not_recorded(self) -> None:
        """A failed post yields a failure result and processing continues."""
        cache = CacheManager()
        client = MagicMock()
        client.post_tweet.side_effect = [SocialPostError("rate limited", status_code=429), "2000"]
        poster = create_poster(cache, client)

        results = poster.post_unposted(create_news_items(2), max_posts=2, delay_seconds=0)

        assert results[0].success is False
        assert results[0].error == "rate limited"
        assert results[1].success is True
        assert results[1].tweet_id == "2000"
        assert cache.get_posted_ids() == {"article-1"}

    def test_duplicate_is_recorded_as_posted(self) -> None:
        """A duplicate rejection is skipped in later runs."""
        cache = CacheManager()
        client = MagicMock()
        client.post_tweet.side_effect = SocialPostError(
            "duplicate content", status_code=403, duplicate=True
        )
        poster = create_poster(cache, client)

        results = poster.post_unposted(create_news_items(1), max_posts=1, delay_seconds=0)

        assert results[0].success is False
        assert results[0].error == DUPLICATE_CONTENT_ERROR
        assert cache.get_posted_ids() == {"article-0"}

    def test_result_carries_variant(self) -> None:
        """Results report the layout used."""
        poster = create_poster(CacheManager(), create_client())

        results = poster.post_unposted(create_news_items(1), max_posts=1, delay_seconds=0)

        assert results[0].variant == "simple"

    def test_no_client_returns_empty(self) -> None:
        """Without credentials nothing is posted."""
        poster = create_poster(CacheManager(), None)

        assert poster.post_unposted(create_news_items(3), max_posts=3) == []

    def test_nothing_new_returns_empty(self) -> None:
        """All-posted candidates yield no results."""
        cache = CacheManager()
        cache.add_posted_id("article-0")
        client = create_client()
        poster = create_poster(cache, client)

        assert poster.post_unposted(create_news_items(1), max_posts=1) == []
        client.post_tweet.assert_not_called()

    def test_concurrent_run_is_rejected(self) -> None:
        """A second run while one is in progress raises PosterBusyError."""
        cache = CacheManager()
        client = MagicMock()
        nested_errors: list[Exception] = []
        poster = create_poster(cache, client)

        def post_tweet(text: str) -> str:
            try:
                poster.post_unposted(create_news_items(1), max_posts=1)
            except PosterBusyError as e:
                nested_errors.append(e)
            return "1000"

        client.post_tweet.side_effect = post_tweet

        poster.post_unposted(create_news_items(1), max_posts=1, delay_seconds=0)

        assert len(nested_errors) == 1

    def test_lock_is_released_after_error(self) -> None:
        """A run that raises does not leave the poster busy."""
        cache = MagicMock()
        cache.get_posted_ids.side_effect = RuntimeError("boom")
        poster = create_poster(cache, create_client())

        with pytest.raises(RuntimeError):
            poster.post_unposted(create_news_items(1), max_posts=1)

        cache.get_posted_ids.side_effect = None
        cache.get_posted_ids.return_value = set()
        assert len(poster.post_unposted(create_news_items(1), max_posts=1)) == 1


class TestMaxPosts:
    """Tests for the per-run cap."""

    @pytest.mark.parametrize(
        ("hour", "expected"),
        [(7, 5), (8, 5), (12, 5), (18, 5), (20, 5), (9, 3), (11, 3), (21, 3), (22, 3), (0, 2), (13, 2), (23, 2)],
    )
    def test_max_posts_for_hour(self, hour: int, expected: int) -> None:
        """Peak, semi-peak and off-peak JST hours."""
        assert max_posts_for_hour(hour) == expected

    def test_default_uses_jst_hour(self) -> None:
        """Without a configured cap the JST hour decides."""
        poster = SocialPoster(
            cache_manager=CacheManager(),
            client=None,
            now=lambda: datetime(2024, 1, 1, 0, 30, tzinfo=timezone.utc),
        )

        # 00:30 UTC is 09:30 JST
        assert poster.default_max_posts() == 3

    def test_configured_cap_wins(self) -> None:
        """A configured cap overrides the time of day."""
        poster = SocialPoster(cache_manager=CacheManager(), client=None, max_posts_per_run=7)

        assert poster.default_max_posts() == 7


class TestBuildSocialPoster:
    """Tests for build_social_poster function."""

    def test_without_credentials(self) -> None:
        """Missing credentials produce a poster that posts nothing."""
        config = PostingConfig(
            max_posts_per_run=None,
            delay_seconds=10,
            tweet_format_variant="simple",
            app_base_url="https://glotnexus.jp",
        )

        poster = build_social_poster(CacheManager(), None, None, config)

        assert poster.post_unposted(create_news_items(1), max_posts=1) == []

    def test_with_credentials(self) -> None:
        """Credentials produce a poster with an X client."""
        config = PostingConfig(
            max_posts_per_run=2,
            delay_seconds=10,
            tweet_format_variant="enhanced",
            app_base_url="https://glotnexus.jp",
        )
        credentials = XCredentials("key", "secret", "token", "token-secret")

        poster = build_social_poster(CacheManager(), None, credentials, config)

        assert poster.default_max_posts() == 2
