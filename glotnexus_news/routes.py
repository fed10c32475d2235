"""HTTP API of GlotNexus AI News.

Framework-independent request dispatch shared by the Lambda handler and the
local development server. Every response is JSON with permissive CORS
headers.
"""

import json
import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from urllib.parse import unquote

from .aggregator import NewsAggregator
from .cache_manager import build_cache_manager
from .config import get_cron_secret, get_dynamodb_config, get_posting_config, get_x_credentials
from .feed_fetcher import FeedFetcher
from .models import NewsItem, PosterBusyError, RequestValidationError
from .social_poster import SocialPoster, build_social_poster
from .translator import Translator

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

MIN_LIMIT = 1
MAX_LIMIT = 100
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass
class ApiRequest:
    """Normalized HTTP request.

    Attributes:
        method: Upper-case HTTP method
        path: Request path without query string
        query: Query parameters (first value wins)
        headers: Headers with lower-case names
        body: Raw request body
        params: Path parameters captured by the route
    """

    method: str
    path: str
    query: Mapping[str, str] = field(default_factory=dict)
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | str | None = None
    params: dict[str, str] = field(default_factory=dict)

    def json(self) -> Any:
        """Decode the JSON body.

        Raises:
            RequestValidationError: If the body is not valid JSON
        """
        if not self.body:
            return {}
        try:
            return json.loads(self.body)
        except (ValueError, TypeError) as e:
            raise RequestValidationError("Invalid JSON body") from e


@dataclass
class ApiResponse:
    """HTTP response with a JSON body."""

    status_code: int
    body: Any = None
    headers: dict[str, str] = field(default_factory=dict)

    def encode(self) -> bytes:
        if self.body is None:
            return b""
        return json.dumps(self.body, ensure_ascii=False).encode("utf-8")


def parse_limit(value: str | None) -> int | None:
    """Clamp the limit query parameter to 1..100.

    Leading digits are used ("10abc" = 10); non-numeric values give 1.
    """
    if value is None or value == "":
        return None
    match = _LEADING_INT.match(value)
    limit = int(match.group(1)) if match else 0
    return max(MIN_LIMIT, min(MAX_LIMIT, limit))


def _serialize(items: list[NewsItem], limit: int | None = None) -> list[dict[str, Any]]:
    if limit is not None:
        items = items[:limit]
    return [item.to_dict() for item in items]


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


Handler = Callable[[ApiRequest], ApiResponse]


class NewsApi:
    """Routes API requests to the news services."""

    def __init__(
        self,
        aggregator: NewsAggregator,
        translator: Translator,
        poster: SocialPoster,
        cron_secret: str | None = None,
    ) -> None:
        """Initialize NewsApi.

        Args:
            aggregator: Source of the news list
            translator: Used by the translate endpoint
            poster: Used by the posting endpoints
            cron_secret: Bearer token required on cron endpoints (None = open)
        """
        self._aggregator = aggregator
        self._translator = translator
        self._poster = poster
        self._cron_secret = cron_secret
        self._routes: list[tuple[re.Pattern[str], dict[str, Handler]]] = [
            (re.compile(r"^/api(?:/health)?$"), {"GET": self._health}),
            (re.compile(r"^/api/news$"), {"GET": self._list_news}),
            (re.compile(r"^/api/news/item$"), {"GET": self._get_item}),
            (re.compile(r"^/api/news/source/(?P<name>[^/]+)$"), {"GET": self._news_by_source}),
            (re.compile(r"^/api/translate$"), {"POST": self._translate}),
            (re.compile(r"^/api/social/post-news$"), {"POST": self._post_news}),
            (re.compile(r"^/api/cron/update-feeds$"), {"GET": self._cron_update_feeds}),
            (re.compile(r"^/api/cron/auto-post$"), {"GET": self._cron_auto_post}),
        ]

    @property
    def aggregator(self) -> NewsAggregator:
        return self._aggregator

    def run_poster(self) -> dict[str, Any]:
        """Run the poster over the latest items and return the summary body."""
        return self._run_poster().body

    def dispatch(
        self,
        method: str,
        path: str,
        query: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
        body: bytes | str | None = None,
    ) -> ApiResponse:
        """Handle one request and return its response."""
        request = ApiRequest(
            method=method.upper(),
            path=path.rstrip("/") or "/",
            query=dict(query or {}),
            headers={key.lower(): value for key, value in (headers or {}).items()},
            body=body,
        )
        response = self._handle(request)
        response.headers = {**CORS_HEADERS, "Content-Type": "application/json", **response.headers}
        return response

    def _handle(self, request: ApiRequest) -> ApiResponse:
        if request.method == "OPTIONS":
            return ApiResponse(200)

        for pattern, handlers in self._routes:
            match = pattern.match(request.path)
            if match is None:
                continue

            handler = handlers.get(request.method)
            if handler is None:
                return ApiResponse(405, {"error": "Method not allowed"})

            request.params = {key: unquote(value) for key, value in match.groupdict().items()}
            try:
                return handler(request)
            except RequestValidationError as e:
                return ApiResponse(400, {"message": str(e)})
            except PosterBusyError as e:
                return ApiResponse(409, {"message": str(e)})
            except Exception as e:
                logger.exception("API error on %s %s", request.method, request.path)
                return ApiResponse(500, {"message": "Internal server error", "error": str(e)})

        return ApiResponse(404, {"message": "Not found"})

    def _health(self, request: ApiRequest) -> ApiResponse:
        return ApiResponse(200, {"status": "ok", "timestamp": _timestamp()})

    def _list_news(self, request: ApiRequest) -> ApiResponse:
        items = self._aggregator.aggregate()
        category = request.query.get("category")
        if category:
            items = [item for item in items if category in item.categories]
        return ApiResponse(200, _serialize(items, parse_limit(request.query.get("limit"))))

    def _get_item(self, request: ApiRequest) -> ApiResponse:
        article_id = request.query.get("id")
        if not article_id:
            raise RequestValidationError("Article id is required")

        for item in self._aggregator.aggregate():
            if item.id == article_id:
                return ApiResponse(200, item.to_dict())
        return ApiResponse(404, {"message": "Article not found"})

    def _news_by_source(self, request: ApiRequest) -> ApiResponse:
        name = request.params["name"].strip()
        if not name:
            raise RequestValidationError("Source name is required")
        limit = parse_limit(request.query.get("limit"))

        normalized = name.lower()
        matches = [
            item
            for item in self._aggregator.aggregate()
            if normalized in item.source_name.strip().lower()
        ]
        if matches:
            return ApiResponse(200, _serialize(matches, limit))

        feed = self._aggregator.find_feed(name)
        if feed is None:
            return ApiResponse(200, [])

        try:
            fresh = self._aggregator.fetch_single_feed(feed)
        except Exception as e:
            logger.warning("Live fetch of %s failed: %s", feed.name, e)
            return ApiResponse(200, [])
        return ApiResponse(200, _serialize(fresh, limit))

    def _translate(self, request: ApiRequest) -> ApiResponse:
        payload = request.json()
        text = payload.get("text") if isinstance(payload, dict) else None
        if not text or not isinstance(text, str):
            raise RequestValidationError("Text to translate is required")
        return ApiResponse(200, {"original": text, "translated": self._translator.translate(text)})

    def _post_news(self, request: ApiRequest) -> ApiResponse:
        return self._run_poster()

    def _cron_update_feeds(self, request: ApiRequest) -> ApiResponse:
        unauthorized = self._check_cron_auth(request)
        if unauthorized is not None:
            return unauthorized

        logger.info("Cron job started: refreshing news cache")
        items = self._aggregator.refresh()
        logger.info("Cron job completed: %d items cached", len(items))
        return ApiResponse(
            200, {"success": True, "itemCount": len(items), "timestamp": _timestamp()}
        )

    def _cron_auto_post(self, request: ApiRequest) -> ApiResponse:
        unauthorized = self._check_cron_auth(request)
        if unauthorized is not None:
            return unauthorized
        return self._run_poster()

    def _run_poster(self) -> ApiResponse:
        items = self._aggregator.aggregate()
        if not items:
            return ApiResponse(200, {"message": "No articles found", "posted": 0})

        results = self._poster.post_unposted(items)
        return ApiResponse(
            200,
            {
                "message": "Auto-post completed",
                "posted": sum(1 for result in results if result.success),
                "total": len(results),
                "results": [result.to_dict() for result in results],
            },
        )

    def _check_cron_auth(self, request: ApiRequest) -> ApiResponse | None:
        if not self._cron_secret:
            return None
        if request.headers.get("authorization") != f"Bearer {self._cron_secret}":
            logger.warning("Unauthorized cron request to %s", request.path)
            return ApiResponse(401, {"error": "Unauthorized"})
        return None


def create_news_api() -> NewsApi:
    """Create the NewsApi with services configured from the environment."""
    cache_manager = build_cache_manager(get_dynamodb_config())
    translator = Translator()
    aggregator = NewsAggregator(
        cache_manager=cache_manager,
        fetcher=FeedFetcher(),
        translator=translator,
    )
    poster = build_social_poster(
        cache_manager=cache_manager,
        translator=translator,
        credentials=get_x_credentials(),
        config=get_posting_config(),
    )
    return NewsApi(
        aggregator=aggregator,
        translator=translator,
        poster=poster,
        cron_secret=get_cron_secret(),
    )
