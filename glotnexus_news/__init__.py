"""GlotNexus AI News service.

This package aggregates AI news from RSS feeds, translates English items
to Japanese and serves them over a JSON API:
- NewsAggregator: Batched parallel feed fetching with cache-first reads
- CacheManager: DynamoDB cache with in-process fallback
- SocialPoster: Cross-posting of new articles to X
- NewsApi: HTTP routes shared by the Lambda handler and the local server
"""

from .aggregator import NewsAggregator
from .cache_manager import CacheManager
from .models import FeedDescriptor, NewsItem, PostResult
from .routes import NewsApi
from .social_poster import SocialPoster

__all__ = [
    "CacheManager",
    "FeedDescriptor",
    "NewsAggregator",
    "NewsApi",
    "NewsItem",
    "PostResult",
    "SocialPoster",
]
