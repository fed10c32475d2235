"""Cross-posting of news items to X.

Only articles whose IDs are not in the posted-article record are posted.
Runs are single-flight within a process.
"""

import logging
import random
import threading
import time
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from .cache_manager import CacheManager
from .config import DEFAULT_APP_BASE_URL, DEFAULT_DELAY_SECONDS, PostingConfig, XCredentials
from .models import NewsItem, PosterBusyError, PostResult, SocialPostError
from .translator import Translator
from .tweet_format import TweetVariant, format_tweet
from .x_client import XClient

logger = logging.getLogger(__name__)

JST = timezone(timedelta(hours=9), "JST")

DUPLICATE_CONTENT_ERROR = "Duplicate content (skipped)"

PEAK_HOURS = ((7, 9), (12, 13), (18, 21))
SEMI_PEAK_HOURS = ((9, 12), (21, 23))


def max_posts_for_hour(hour: int) -> int:
    """Posts per run for a JST hour: 5 at peak, 3 at semi-peak, else 2."""
    if any(start <= hour < end for start, end in PEAK_HOURS):
        return 5
    if any(start <= hour < end for start, end in SEMI_PEAK_HOURS):
        return 3
    return 2


class SocialPoster:
    """Posts unposted news items to X and records them as posted."""

    def __init__(
        self,
        cache_manager: CacheManager,
        client: XClient | None,
        variant: TweetVariant = TweetVariant.ENHANCED,
        translator: Translator | None = None,
        base_url: str = DEFAULT_APP_BASE_URL,
        max_posts_per_run: int | None = None,
        delay_seconds: float = DEFAULT_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        now: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
        rng: random.Random | None = None,
    ) -> None:
        """Initialize SocialPoster.

        Args:
            cache_manager: Holds the posted-article record
            client: X client (None = credentials not configured)
            variant: Tweet layout
            translator: Used for the Japanese value line of enhanced tweets
            base_url: Base URL of the web app
            max_posts_per_run: Default cap per run (None = by JST hour)
            delay_seconds: Default wait between posts
            sleep: Sleep function (for testing)
            now: Clock used for the time-of-day cap
            rng: Random source for tweet formatting
        """
        self._cache = cache_manager
        self._client = client
        self._variant = variant
        self._translator = translator
        self._base_url = base_url
        self._max_posts_per_run = max_posts_per_run
        self._delay_seconds = delay_seconds
        self._sleep = sleep
        self._now = now
        self._rng = rng or random.Random()
        self._run_lock = threading.Lock()

    def default_max_posts(self) -> int:
        """Configured cap, or the time-of-day cap when none is configured."""
        if self._max_posts_per_run is not None:
            return self._max_posts_per_run
        return max_posts_for_hour(self._now().astimezone(JST).hour)

    def post_unposted(
        self,
        items: list[NewsItem],
        max_posts: int | None = None,
        delay_seconds: float | None = None,
    ) -> list[PostResult]:
        """Post up to max_posts articles that were not posted before.

        Articles are taken in input order and posted one at a time.

        Args:
            items: Candidate articles
            max_posts: Cap for this run (None = default_max_posts())
            delay_seconds: Wait between two posts (None = configured delay)

        Returns:
            One PostResult per attempted article

        Raises:
            PosterBusyError: If another run is in progress
        """
        if not self._run_lock.acquire(blocking=False):
            raise PosterBusyError("A posting run is already in progress")
        try:
            return self._run(
                items,
                self.default_max_posts() if max_posts is None else max_posts,
                self._delay_seconds if delay_seconds is None else delay_seconds,
            )
        finally:
            self._run_lock.release()

    def _run(
        self, items: list[NewsItem], max_posts: int, delay_seconds: float
    ) -> list[PostResult]:
        if self._client is None:
            logger.error("X API credentials not configured, skipping auto-post")
            return []

        posted_ids = self._cache.get_posted_ids()
        logger.info(
            "Starting auto-post: %d articles, max %d posts, %d already posted",
            len(items),
            max_posts,
            len(posted_ids),
        )

        candidates = [item for item in items if item.id not in posted_ids][: max(0, max_posts)]
        if not candidates:
            logger.info("No new articles to post")
            return []

        results: list[PostResult] = []
        for index, item in enumerate(candidates):
            if index > 0 and delay_seconds > 0:
                self._sleep(delay_seconds)
            logger.info("[%d/%d] Posting: %s", index + 1, len(candidates), item.title)
            results.append(self._post_one(item))

        succeeded = sum(1 for result in results if result.success)
        logger.info("Auto-post finished: %d/%d posted", succeeded, len(results))
        return results

    def _post_one(self, item: NewsItem) -> PostResult:
        text, variant = format_tweet(
            item,
            self._variant,
            base_url=self._base_url,
            translator=self._translator,
            rng=self._rng,
        )

        try:
            tweet_id = self._client.post_tweet(text)
        except SocialPostError as e:
            if e.duplicate:
                logger.warning("Duplicate content for %s, marking as posted", item.id)
                self._cache.add_posted_id(item.id)
                return PostResult(
                    success=False,
                    article_id=item.id,
                    article_title=item.title,
                    error=DUPLICATE_CONTENT_ERROR,
                    variant=variant.value,
                )
            logger.error("Failed to post %s: %s", item.id, e)
            return PostResult(
                success=False,
                article_id=item.id,
                article_title=item.title,
                error=str(e),
                variant=variant.value,
            )

        self._cache.add_posted_id(item.id)
        logger.info("Posted to X: %s [variant: %s]", tweet_id, variant.value)
        return PostResult(
            success=True,
            article_id=item.id,
            article_title=item.title,
            tweet_id=tweet_id,
            variant=variant.value,
        )


def build_social_poster(
    cache_manager: CacheManager,
    translator: Translator | None,
    credentials: XCredentials | None,
    config: PostingConfig,
) -> SocialPoster:
    """Create a SocialPoster from configuration."""
    return SocialPoster(
        cache_manager=cache_manager,
        client=XClient(credentials) if credentials else None,
        variant=TweetVariant.parse(config.tweet_format_variant),
        translator=translator,
        base_url=config.app_base_url,
        max_posts_per_run=config.max_posts_per_run,
        delay_seconds=config.delay_seconds,
    )
