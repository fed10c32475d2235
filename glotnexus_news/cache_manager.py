"""Cache Manager for GlotNexus AI News.

This module provides the two-tier news cache: a DynamoDB-backed store with
TTL support, falling back to an in-process store with the same semantics
when DynamoDB is unavailable. It also keeps the set of article IDs already
posted to X.
"""

import json
import logging
import threading
import time
import uuid
from collections.abc import Callable
from typing import Any, Protocol

import boto3
from boto3.dynamodb.conditions import Key

from .config import (
    CACHE_TTL_SECONDS,
    DYNAMODB_PK_NEWS,
    DYNAMODB_PK_POSTED,
    DYNAMODB_SK_ITEM_PREFIX,
    DYNAMODB_SK_META,
    MAX_POSTED_IDS,
    POSTED_IDS_TTL_SECONDS,
    DynamoDBConfig,
)
from .models import NewsItem

logger = logging.getLogger(__name__)


class CacheStore(Protocol):
    """Backing store used by CacheManager."""

    def read_news(self) -> list[NewsItem] | None:
        """Return the stored list, or None when missing or expired."""
        ...

    def write_news(self, items: list[NewsItem], ttl_seconds: int) -> None:
        """Replace the stored list."""
        ...

    def clear_news(self) -> None:
        """Drop the stored list."""
        ...

    def read_posted_ids(self) -> list[str]:
        """Return posted IDs, oldest first (empty when missing or expired)."""
        ...

    def write_posted_ids(self, ids: list[str], ttl_seconds: int) -> None:
        """Replace the posted IDs."""
        ...


class MemoryStore:
    """In-process store with TTL semantics.

    Each value is swapped as a single (expires_at, value) tuple so readers
    never observe a partially written list.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._news: tuple[float, tuple[NewsItem, ...]] | None = None
        self._posted: tuple[float, tuple[str, ...]] | None = None

    def read_news(self) -> list[NewsItem] | None:
        entry = self._news
        if entry is None or entry[0] <= self._clock():
            return None
        return list(entry[1])

    def write_news(self, items: list[NewsItem], ttl_seconds: int) -> None:
        self._news = (self._clock() + ttl_seconds, tuple(items))

    def clear_news(self) -> None:
        self._news = None

    def read_posted_ids(self) -> list[str]:
        entry = self._posted
        if entry is None or entry[0] <= self._clock():
            return []
        return list(entry[1])

    def write_posted_ids(self, ids: list[str], ttl_seconds: int) -> None:
        self._posted = (self._clock() + ttl_seconds, tuple(ids))


class DynamoDBStore:
    """DynamoDB-backed store.

    Table schema (PK/SK strings, "ttl" as DynamoDB TTL attribute):
        NEWS#latest / META             -> generation, cached_at, count, ttl
        NEWS#latest / ITEM#{gen}#{n}   -> payload (JSON), ttl
        POSTED#x    / META             -> ids, ttl

    A write stores the item rows of a new generation first and then flips
    META, so readers resolve only complete generations. Superseded rows are
    left to DynamoDB TTL expiry.
    """

    def __init__(self, table: Any, clock: Callable[[], float] = time.time) -> None:
        """Initialize DynamoDBStore.

        Args:
            table: boto3 DynamoDB Table resource
            clock: Source of the current UNIX time
        """
        self._table = table
        self._clock = clock

    def read_news(self) -> list[NewsItem] | None:
        response = self._table.get_item(
            Key={"PK": DYNAMODB_PK_NEWS, "SK": DYNAMODB_SK_META}
        )
        meta = response.get("Item")
        if not meta or int(meta.get("ttl", 0)) <= int(self._clock()):
            return None

        prefix = f"{DYNAMODB_SK_ITEM_PREFIX}{meta['generation']}#"
        rows = self._query_all(
            KeyConditionExpression=Key("PK").eq(DYNAMODB_PK_NEWS)
            & Key("SK").begins_with(prefix)
        )
        if len(rows) != int(meta.get("count", 0)):
            return None

        rows.sort(key=lambda row: row["SK"])
        return [NewsItem.from_dict(json.loads(row["payload"])) for row in rows]

    def write_news(self, items: list[NewsItem], ttl_seconds: int) -> None:
        now = int(self._clock())
        ttl = now + ttl_seconds
        generation = uuid.uuid4().hex

        with self._table.batch_writer() as batch:
            for index, item in enumerate(items):
                batch.put_item(
                    Item={
                        "PK": DYNAMODB_PK_NEWS,
                        "SK": f"{DYNAMODB_SK_ITEM_PREFIX}{generation}#{index:05d}",
                        "payload": json.dumps(item.to_dict(), ensure_ascii=False),
                        "ttl": ttl,
                    }
                )

        self._table.put_item(
            Item={
                "PK": DYNAMODB_PK_NEWS,
                "SK": DYNAMODB_SK_META,
                "generation": generation,
                "cached_at": now,
                "count": len(items),
                "ttl": ttl,
            }
        )

    def clear_news(self) -> None:
        self._table.delete_item(Key={"PK": DYNAMODB_PK_NEWS, "SK": DYNAMODB_SK_META})

    def read_posted_ids(self) -> list[str]:
        response = self._table.get_item(
            Key={"PK": DYNAMODB_PK_POSTED, "SK": DYNAMODB_SK_META}
        )
        item = response.get("Item")
        if not item or int(item.get("ttl", 0)) <= int(self._clock()):
            return []
        return [str(article_id) for article_id in item.get("ids", [])]

    def write_posted_ids(self, ids: list[str], ttl_seconds: int) -> None:
        self._table.put_item(
            Item={
                "PK": DYNAMODB_PK_POSTED,
                "SK": DYNAMODB_SK_META,
                "ids": ids,
                "ttl": int(self._clock()) + ttl_seconds,
            }
        )

    def _query_all(self, **kwargs: Any) -> list[dict[str, Any]]:
        rows: list[dict[str, Any]] = []
        while True:
            response = self._table.query(**kwargs)
            rows.extend(response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return rows
            kwargs["ExclusiveStartKey"] = last_key


class CacheManager:
    """Manages the news cache and the posted-article record.

    Reads and writes go to the primary store when one is configured. Any
    primary error is logged and served from the in-process fallback, which
    is always kept up to date; callers never see store errors.
    """

    def __init__(
        self,
        primary: CacheStore | None = None,
        fallback: MemoryStore | None = None,
        ttl_seconds: int = CACHE_TTL_SECONDS,
        posted_ttl_seconds: int = POSTED_IDS_TTL_SECONDS,
        max_posted_ids: int = MAX_POSTED_IDS,
    ) -> None:
        """Initialize CacheManager.

        Args:
            primary: External store (None = in-process only)
            fallback: In-process store
            ttl_seconds: Freshness window of the news list
            posted_ttl_seconds: Lifetime of the posted-ID record
            max_posted_ids: Number of most recent posted IDs kept
        """
        self._primary = primary
        self._fallback = fallback or MemoryStore()
        self._ttl = ttl_seconds
        self._posted_ttl = posted_ttl_seconds
        self._max_posted_ids = max_posted_ids
        self._posted_lock = threading.Lock()
        # Set after a failed primary write, cleared by the next successful one
        self._primary_stale = False

    def get(self) -> list[NewsItem] | None:
        """Retrieve the cached news list.

        While the primary store is stale (its last write failed), the
        in-process copy is authoritative.

        Returns:
            The cached list if present and fresh, None otherwise.
            An empty list counts as a miss.
        """
        items: list[NewsItem] | None
        if self._primary is not None and not self._primary_stale:
            try:
                items = self._primary.read_news()
                if items:
                    logger.debug("Cache hit (primary): %d items", len(items))
                return items or None
            except Exception as e:
                logger.warning("Primary cache read failed, using memory cache: %s", e)

        items = self._fallback.read_news()
        if items:
            logger.debug("Cache hit (memory): %d items", len(items))
        return items or None

    def set(self, items: list[NewsItem]) -> None:
        """Replace the cached news list and reset its freshness window.

        Args:
            items: Complete, sorted list of news items
        """
        if self._primary is not None:
            try:
                self._primary.write_news(items, self._ttl)
                self._primary_stale = False
            except Exception as e:
                logger.warning("Primary cache write failed, serving memory cache: %s", e)
                self._primary_stale = True

        self._fallback.write_news(items, self._ttl)
        logger.info("Cached %d news items", len(items))

    def invalidate(self) -> None:
        """Force the next get() to miss."""
        if self._primary is not None:
            try:
                self._primary.clear_news()
            except Exception as e:
                logger.warning("Primary cache invalidation failed: %s", e)

        self._fallback.clear_news()
        logger.info("News cache invalidated")

    def get_posted_ids(self) -> frozenset[str]:
        """Return IDs of articles already posted to X."""
        return frozenset(self._read_posted_ids())

    def add_posted_id(self, article_id: str) -> None:
        """Record an article as posted.

        The record keeps the most recent max_posted_ids entries (oldest
        dropped first) and its TTL is refreshed on every write.
        """
        with self._posted_lock:
            ids = self._read_posted_ids()
            if article_id in ids:
                return
            ids.append(article_id)
            ids = ids[-self._max_posted_ids :]

            if self._primary is not None:
                try:
                    self._primary.write_posted_ids(ids, self._posted_ttl)
                except Exception as e:
                    logger.warning("Primary posted-ID write failed: %s", e)

            self._fallback.write_posted_ids(ids, self._posted_ttl)

    def _read_posted_ids(self) -> list[str]:
        if self._primary is not None:
            try:
                return self._primary.read_posted_ids()
            except Exception as e:
                logger.warning("Primary posted-ID read failed, using memory: %s", e)
        return self._fallback.read_posted_ids()


def build_cache_manager(config: DynamoDBConfig) -> CacheManager:
    """Create a CacheManager for the given configuration.

    DynamoDB is used as primary store when a table name is configured and
    the backend was not switched to memory.
    """
    if not config.enabled or not config.table_name:
        logger.info("DynamoDB cache not configured, using memory cache")
        return CacheManager()

    resource = boto3.resource(
        "dynamodb",
        endpoint_url=config.endpoint_url,
        region_name=config.region_name or None,
    )
    table = resource.Table(config.table_name)
    logger.info("Using DynamoDB cache table %s", config.table_name)
    return CacheManager(primary=DynamoDBStore(table))
