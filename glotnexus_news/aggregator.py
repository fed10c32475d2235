"""News aggregation orchestration module.

This module provides the NewsAggregator class for batched parallel fetching
from the feed registry with a cache-first strategy, translation of English
items and graceful degradation when individual feeds fail.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import replace

from .cache_manager import CacheManager
from .config import CONCURRENT_LIMIT, SUMMARY_MAX_LENGTH
from .feed_fetcher import FeedFetcher
from .feeds import AI_RSS_FEEDS
from .feeds import find_feed as find_registered_feed
from .models import FeedDescriptor, NewsItem
from .translator import Translator

logger = logging.getLogger(__name__)


class NewsAggregator:
    """Builds the merged, translated and sorted news list.

    Feeds are fetched in batches of batch_size; each batch runs on its own
    thread pool and is waited on for at most the fetcher timeout. Feeds that
    fail or do not finish in time contribute no items.
    """

    def __init__(
        self,
        cache_manager: CacheManager,
        fetcher: FeedFetcher,
        translator: Translator,
        feeds: tuple[FeedDescriptor, ...] = AI_RSS_FEEDS,
        batch_size: int = CONCURRENT_LIMIT,
    ) -> None:
        """Initialize NewsAggregator.

        Args:
            cache_manager: CacheManager instance for cache operations
            fetcher: Fetcher for a single feed
            translator: Translator for English items
            feeds: Feed registry
            batch_size: Number of feeds fetched concurrently
        """
        self._cache = cache_manager
        self._fetcher = fetcher
        self._translator = translator
        self._feeds = tuple(feeds)
        self._batch_size = max(1, batch_size)

    @property
    def feeds(self) -> tuple[FeedDescriptor, ...]:
        return self._feeds

    def aggregate(self) -> list[NewsItem]:
        """Return the cached news list, refreshing it on a cache miss."""
        cached = self._cache.get()
        if cached is not None:
            return cached
        return self.refresh()

    def refresh(self) -> list[NewsItem]:
        """Fetch all feeds, translate, sort and store the result.

        Returns:
            News items sorted by publish date, newest first
        """
        fetched: list[NewsItem] = []
        for start in range(0, len(self._feeds), self._batch_size):
            batch = self._feeds[start : start + self._batch_size]
            fetched.extend(self._fetch_batch(batch))

        items = self._translate_items(fetched)
        # sort() is stable: equal dates keep fetch order
        items.sort(key=lambda item: item.publish_date, reverse=True)

        self._cache.set(items)
        logger.info(
            "Aggregated %d items from %d feeds", len(items), len(self._feeds)
        )
        return items

    def fetch_single_feed(self, feed: FeedDescriptor) -> list[NewsItem]:
        """Fetch and translate one feed without touching the cache."""
        items = self._translate_items(self._fetcher.fetch(feed))
        items.sort(key=lambda item: item.publish_date, reverse=True)
        return items

    def find_feed(self, name: str) -> FeedDescriptor | None:
        """Look up a feed of this aggregator by name (case-insensitive)."""
        return find_registered_feed(name, self._feeds)

    def _fetch_batch(self, batch: tuple[FeedDescriptor, ...]) -> list[NewsItem]:
        """Fetch one batch of feeds, discarding feeds that miss the deadline."""
        executor = ThreadPoolExecutor(max_workers=len(batch))
        try:
            futures = {executor.submit(self._fetcher.fetch, feed): feed for feed in batch}
            done, not_done = wait(futures, timeout=self._fetcher.timeout)

            for future in not_done:
                logger.warning("Feed %s timed out, skipping", futures[future].name)

            items: list[NewsItem] = []
            # Keep registry order within the batch
            for future, feed in futures.items():
                if future not in done:
                    continue
                try:
                    items.extend(future.result())
                except Exception as e:
                    logger.warning("Feed %s failed: %s", feed.name, e)
            return items
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    def _translate_items(self, items: list[NewsItem]) -> list[NewsItem]:
        """Translate English items, keeping the original text alongside."""
        if not any(item.source_language == "en" for item in items):
            return list(items)

        with ThreadPoolExecutor(max_workers=self._batch_size) as executor:
            return list(executor.map(self._translate_item, items))

    def _translate_item(self, item: NewsItem) -> NewsItem:
        if item.source_language != "en":
            return item

        return replace(
            item,
            title=self._translator.translate(item.title),
            summary=self._translator.translate(item.summary, SUMMARY_MAX_LENGTH),
            first_paragraph=self._translator.translate(item.first_paragraph),
            original_title=item.title,
            original_content=item.content,
            original_summary=item.summary,
            original_first_paragraph=item.first_paragraph,
        )
