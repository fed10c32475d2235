"""Data models for GlotNexus AI News.

This module defines the core data structures used throughout the application:
- NewsItem: Individual ingested article
- FeedDescriptor: Static RSS feed configuration
- PostResult: Outcome of a single social post attempt
- SourceError / SocialPostError / PosterBusyError / RequestValidationError
"""

import hashlib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

LanguageType = Literal["en", "ja"]
ErrorType = Literal["connection_error", "timeout", "parse_error"]


def generate_news_id(
    source_name: str,
    title: str,
    published: str,
    guid: str | None = None,
    link: str | None = None,
) -> str:
    """Generate a stable news ID for a feed entry.

    Args:
        source_name: Name of the feed the entry came from
        title: Entry title
        published: Raw published string as it appears in the feed
        guid: Feed-provided GUID, preferred when present
        link: Entry link, used when there is no GUID

    Returns:
        The GUID or link as-is, otherwise a SHA-256 hex digest of
        "{source_name}|{title}|{published}"
    """
    if guid:
        return guid
    if link:
        return link
    composite = f"{source_name}|{title}|{published}"
    return hashlib.sha256(composite.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class FeedDescriptor:
    """Static configuration of one RSS feed.

    Attributes:
        url: Feed URL
        name: Display name, also used as NewsItem.source_name
        language: Language of the feed content
        default_categories: Topic tags applied to every item of the feed
        include_keywords: When set, only items mentioning one of these
            keywords (title or content) are accepted
    """

    url: str
    name: str
    language: LanguageType
    default_categories: tuple[str, ...]
    include_keywords: tuple[str, ...] | None = None


@dataclass(frozen=True)
class NewsItem:
    """Represents a single ingested news article.

    Attributes:
        id: Stable identifier (GUID, link or content hash)
        title: Display title (translated for English feeds)
        link: Link to the original article
        content: Article body, HTML allowed
        summary: Plain-text summary of bounded length
        first_paragraph: First paragraph of the body as plain text
        publish_date: Timezone-aware publish timestamp
        source_name: Name of the feed the item came from
        source_language: Language of the feed
        categories: Topic tags, order not significant
        original_title: Pre-translation title (translated items only)
        original_content: Pre-translation content (translated items only)
        original_summary: Pre-translation summary (translated items only)
        original_first_paragraph: Pre-translation paragraph (translated items only)
    """

    id: str
    title: str
    link: str
    content: str
    summary: str
    publish_date: datetime
    source_name: str
    source_language: LanguageType
    categories: list[str] = field(default_factory=list)
    first_paragraph: str = ""
    original_title: str | None = None
    original_content: str | None = None
    original_summary: str | None = None
    original_first_paragraph: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON shape served by the API."""
        data: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "link": self.link,
            "content": self.content,
            "summary": self.summary,
            "firstParagraph": self.first_paragraph,
            "publishDate": self.publish_date.isoformat(),
            "sourceName": self.source_name,
            "sourceLanguage": self.source_language,
            "categories": list(self.categories),
        }
        for key, value in (
            ("originalTitle", self.original_title),
            ("originalContent", self.original_content),
            ("originalSummary", self.original_summary),
            ("originalFirstParagraph", self.original_first_paragraph),
        ):
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NewsItem":
        """Build a NewsItem from its camelCase JSON shape."""
        publish_date = datetime.fromisoformat(data["publishDate"])
        if publish_date.tzinfo is None:
            publish_date = publish_date.replace(tzinfo=timezone.utc)

        return cls(
            id=data["id"],
            title=data["title"],
            link=data.get("link", ""),
            content=data.get("content", ""),
            summary=data.get("summary", ""),
            first_paragraph=data.get("firstParagraph", ""),
            publish_date=publish_date,
            source_name=data["sourceName"],
            source_language=data.get("sourceLanguage", "en"),
            categories=list(data.get("categories", [])),
            original_title=data.get("originalTitle"),
            original_content=data.get("originalContent"),
            original_summary=data.get("originalSummary"),
            original_first_paragraph=data.get("originalFirstParagraph"),
        )


@dataclass
class PostResult:
    """Outcome of posting one article to X.

    Attributes:
        success: Whether the post was accepted
        article_id: NewsItem.id of the article
        article_title: Title used in the post
        tweet_id: ID assigned by X (success only)
        error: Failure description (failure only)
        variant: Tweet format variant that was used
    """

    success: bool
    article_id: str
    article_title: str
    tweet_id: str | None = None
    error: str | None = None
    variant: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "articleId": self.article_id,
            "articleTitle": self.article_title,
            "tweetId": self.tweet_id,
            "error": self.error,
            "variant": self.variant,
        }


class SourceError(Exception):
    """Error for a failed feed fetch.

    Attributes:
        source: Name of the feed that failed
        error_type: Category of the error
        message: Human-readable error description
    """

    def __init__(self, source: str, error_type: ErrorType, message: str) -> None:
        self.source = source
        self.error_type = error_type
        self.message = message
        super().__init__(message)


class SocialPostError(Exception):
    """Error returned by the social platform for a single post.

    Attributes:
        status_code: HTTP status code, if the request reached the API
        duplicate: True when the platform rejected the text as a duplicate
    """

    def __init__(
        self, message: str, status_code: int | None = None, duplicate: bool = False
    ) -> None:
        self.status_code = status_code
        self.duplicate = duplicate
        super().__init__(message)


class PosterBusyError(Exception):
    """Raised when a posting run is already in progress."""


class RequestValidationError(Exception):
    """Raised for malformed API requests (mapped to HTTP 400)."""
