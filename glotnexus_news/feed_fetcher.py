"""RSS feed fetcher for AI news sources."""

import calendar
import logging
from datetime import datetime, timezone
from typing import Any

import feedparser
import requests

from .classifier import classify, merge_categories
from .config import FEED_TIMEOUT_SECONDS, MAX_ITEMS_PER_FEED, SUMMARY_MAX_LENGTH
from .models import FeedDescriptor, NewsItem, SourceError, generate_news_id
from .text_utils import extract_first_paragraph, strip_html_tags, summarize_text

logger = logging.getLogger(__name__)


class FeedFetcher:
    """Fetches one RSS/Atom feed and converts its entries to NewsItem.

    Failures are per feed: fetch() logs them and returns an empty list.
    Items are returned untranslated.
    """

    USER_AGENT = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
    )
    RICH_CONTENT_MIN_LENGTH = 200
    DESCRIPTION_MIN_LENGTH = 100

    def __init__(
        self,
        timeout: float = FEED_TIMEOUT_SECONDS,
        max_items: int = MAX_ITEMS_PER_FEED,
        summary_max_length: int = SUMMARY_MAX_LENGTH,
    ) -> None:
        """Initialize FeedFetcher.

        Args:
            timeout: Connect/read timeout for the feed request in seconds
            max_items: Maximum entries taken from a feed per cycle
            summary_max_length: Maximum length of generated summaries
        """
        self._timeout = timeout
        self._max_items = max_items
        self._summary_max_length = summary_max_length

    @property
    def timeout(self) -> float:
        return self._timeout

    def fetch(self, feed: FeedDescriptor) -> list[NewsItem]:
        """Fetch and parse a feed.

        Args:
            feed: Descriptor of the feed to fetch

        Returns:
            Up to max_items NewsItem, or an empty list when the feed
            cannot be fetched or parsed
        """
        try:
            entries = self._fetch_entries(feed)
        except SourceError as e:
            logger.warning("Skipping feed %s (%s): %s", e.source, e.error_type, e.message)
            return []

        if not entries:
            logger.info("No entries in feed %s", feed.name)
            return []

        items = []
        for entry in entries[: self._max_items]:
            item = self._parse_entry(feed, entry)
            if item is not None:
                items.append(item)
        return items

    def _fetch_entries(self, feed: FeedDescriptor) -> list[Any]:
        """Download and parse the feed document.

        Raises:
            SourceError: On timeout, HTTP failure or unparseable document
        """
        try:
            response = requests.get(
                feed.url,
                headers={"User-Agent": self.USER_AGENT},
                timeout=self._timeout,
            )
            response.raise_for_status()
        except requests.Timeout as e:
            raise SourceError(
                source=feed.name,
                error_type="timeout",
                message=f"Timeout fetching {feed.url}",
            ) from e
        except requests.RequestException as e:
            raise SourceError(
                source=feed.name,
                error_type="connection_error",
                message=str(e),
            ) from e

        parsed = feedparser.parse(response.content)
        if parsed.bozo and not parsed.entries:
            raise SourceError(
                source=feed.name,
                error_type="parse_error",
                message=str(parsed.get("bozo_exception", "invalid feed")),
            )

        return list(parsed.entries)

    def _parse_entry(self, feed: FeedDescriptor, entry: Any) -> NewsItem | None:
        """Convert a feedparser entry to a NewsItem.

        Returns None for entries without title and link, and for entries
        rejected by the feed keyword filter.
        """
        title = (entry.get("title") or "").strip()
        link = (entry.get("link") or "").strip()
        if not title and not link:
            return None

        content = self._select_content(entry)
        if feed.include_keywords and not self._matches_keywords(
            feed.include_keywords, title, content
        ):
            return None

        raw_published = entry.get("published") or entry.get("updated") or ""

        return NewsItem(
            id=generate_news_id(
                feed.name,
                title,
                raw_published,
                guid=(entry.get("id") or "").strip() or None,
                link=link or None,
            ),
            title=title,
            link=link,
            content=content,
            summary=summarize_text(content, self._summary_max_length),
            first_paragraph=extract_first_paragraph(content),
            publish_date=self._publish_date(entry),
            source_name=feed.name,
            source_language=feed.language,
            categories=merge_categories(feed.default_categories, classify(title, content)),
        )

    def _select_content(self, entry: Any) -> str:
        """Pick the richest body: full content, then description, then snippet."""
        full_content = ""
        for block in entry.get("content") or []:
            value = block.get("value") or ""
            if len(value) > len(full_content):
                full_content = value
        description = entry.get("summary") or entry.get("description") or ""

        if len(full_content) > self.RICH_CONTENT_MIN_LENGTH:
            return full_content
        if len(description) > self.DESCRIPTION_MIN_LENGTH:
            return description
        return strip_html_tags(description or full_content)

    @staticmethod
    def _matches_keywords(keywords: tuple[str, ...], title: str, content: str) -> bool:
        haystack = f"{title} {content}".lower()
        return any(keyword.lower() in haystack for keyword in keywords)

    @staticmethod
    def _publish_date(entry: Any) -> datetime:
        for key in ("published_parsed", "updated_parsed"):
            parsed = entry.get(key)
            if parsed:
                return datetime.fromtimestamp(calendar.timegm(parsed), tz=timezone.utc)
        return datetime.now(timezone.utc)
