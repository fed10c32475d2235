"""Tweet text formatting for news items.

Two layouts are available, selected through TweetVariant:

simple:
    {title}

    {url}

    #AI #GlotNexus #{source tag}

enhanced:
    {hook}

    {value line}

    詳細👇
    {url}

    #{source tag} #AI #人工知能 #GlotNexus

Lengths follow the X weighting where any URL counts as 23 characters.
"""

import logging
import random
from collections.abc import Callable
from enum import Enum
from urllib.parse import quote

from .config import DEFAULT_APP_BASE_URL
from .models import NewsItem
from .text_utils import ELLIPSIS, summarize_text
from .translator import Translator

logger = logging.getLogger(__name__)

X_MAX_CHARS = 280
X_URL_LENGTH = 23
VALUE_MAX_LENGTH = 80
TOPIC_MAX_LENGTH = 30
CTA_LINE = "詳細👇"

SOURCE_HASHTAGS: dict[str, str] = {
    "VentureBeat AI": "VentureBeat",
    "AI News": "AINews",
    "Google AI Blog": "GoogleAI",
    "TechCrunch AI": "TechCrunch",
    "OpenAI Blog": "OpenAI",
    "Hugging Face Blog": "HuggingFace",
    "arXiv cs.AI": "arXiv",
    "arXiv cs.LG": "arXiv",
    "Papers with Code": "PapersWithCode",
    "Anthropic News": "Anthropic",
    "Meta AI Blog": "MetaAI",
    "Google DeepMind Blog": "DeepMind",
    "Microsoft Research Blog": "Microsoft",
    "NVIDIA Technical Blog": "NVIDIA",
    "Stability AI Blog": "StabilityAI",
    "Mistral AI News": "MistralAI",
    "xAI Blog": "xAI",
    "Databricks Blog": "Databricks",
    "Cohere Blog": "Cohere",
}

HOOK_TEMPLATES: tuple[str, ...] = (
    # curiosity
    "🚨 {topic}が変わった理由",
    "【速報】{source}、{topic}で新展開",
    "知らないとマズい：{topic}の最新動向",
    # value
    "💡 {topic}で知っておくべき3つのこと",
    "【保存版】{topic}の重要アップデート",
    "今週のAIニュース：{topic}",
    # story
    "また{source}がやってくれた。",
    "これは見逃せない：{source}の{topic}",
)


class TweetVariant(str, Enum):
    """Tweet layout selector."""

    SIMPLE = "simple"
    ENHANCED = "enhanced"
    RANDOM = "random"

    @classmethod
    def parse(cls, value: str | None) -> "TweetVariant":
        """Parse a configured variant name, defaulting to ENHANCED."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            logger.warning("Unknown tweet format variant %r, using enhanced", value)
            return cls.ENHANCED


def article_url(item: NewsItem, base_url: str = DEFAULT_APP_BASE_URL) -> str:
    """Link to the article page of the web app."""
    return f"{base_url.rstrip('/')}/?article={quote(item.id, safe='')}"


def weighted_length(text: str, url: str) -> int:
    """Length of text as counted by X, with url shortened to 23 characters."""
    return len(text) + text.count(url) * (X_URL_LENGTH - len(url))


def _hashtags(tags: list[str]) -> str:
    return " ".join(f"#{tag}" for tag in tags)


def _format_simple(
    item: NewsItem,
    base_url: str,
    translator: Translator | None,
    rng: random.Random,
) -> str:
    tags = ["AI", "GlotNexus"]
    if item.source_name in SOURCE_HASHTAGS:
        tags.append(SOURCE_HASHTAGS[item.source_name])
    hashtags = _hashtags(tags)
    url = article_url(item, base_url)
    separator = "\n\n"

    available = X_MAX_CHARS - X_URL_LENGTH - len(hashtags) - len(separator) * 2
    title = item.title
    if len(title) > available:
        title = title[: available - len(ELLIPSIS)] + ELLIPSIS

    return f"{title}{separator}{url}{separator}{hashtags}"


def _hook(item: NewsItem, rng: random.Random) -> str:
    topic = item.title
    if len(topic) > TOPIC_MAX_LENGTH:
        topic = topic[:TOPIC_MAX_LENGTH] + ELLIPSIS
    source = item.source_name.replace(" Blog", "").replace(" News", "")
    return rng.choice(HOOK_TEMPLATES).format(topic=topic, source=source)


def _value_line(item: NewsItem, translator: Translator | None) -> str:
    if not item.summary:
        if len(item.title) > VALUE_MAX_LENGTH:
            return item.title[: VALUE_MAX_LENGTH - len(ELLIPSIS)] + ELLIPSIS
        return item.title

    if translator is None:
        return summarize_text(item.summary, VALUE_MAX_LENGTH)

    # English items already carry a translated summary; translate the source text
    value = translator.translate(item.original_summary or item.summary, VALUE_MAX_LENGTH)
    if len(value) > VALUE_MAX_LENGTH:
        value = summarize_text(value, VALUE_MAX_LENGTH)
    return value


def _format_enhanced(
    item: NewsItem,
    base_url: str,
    translator: Translator | None,
    rng: random.Random,
) -> str:
    tags = [SOURCE_HASHTAGS[item.source_name]] if item.source_name in SOURCE_HASHTAGS else []
    hashtags = _hashtags(tags + ["AI", "人工知能", "GlotNexus"])
    url = article_url(item, base_url)
    hook = _hook(item, rng)
    value = _value_line(item, translator)

    text = "\n".join([hook, "", value, "", CTA_LINE, url, "", hashtags])
    if weighted_length(text, url) <= X_MAX_CHARS:
        return text

    # Seven line breaks plus slack
    overhead = len(hook) + len(CTA_LINE) + X_URL_LENGTH + len(hashtags) + 10
    available = X_MAX_CHARS - overhead
    short_value = value[: available - len(ELLIPSIS)] + ELLIPSIS if available > 30 else ""
    return "\n".join([hook, "", short_value, "", CTA_LINE, url, "", hashtags])


_FORMATTERS: dict[TweetVariant, Callable[[NewsItem, str, Translator | None, random.Random], str]] = {
    TweetVariant.SIMPLE: _format_simple,
    TweetVariant.ENHANCED: _format_enhanced,
}


def resolve_variant(variant: TweetVariant, rng: random.Random) -> TweetVariant:
    """Turn RANDOM into a concrete layout (50/50)."""
    if variant is TweetVariant.RANDOM:
        return TweetVariant.SIMPLE if rng.random() < 0.5 else TweetVariant.ENHANCED
    return variant


def format_tweet(
    item: NewsItem,
    variant: TweetVariant = TweetVariant.ENHANCED,
    base_url: str = DEFAULT_APP_BASE_URL,
    translator: Translator | None = None,
    rng: random.Random | None = None,
) -> tuple[str, TweetVariant]:
    """Format the tweet text for a news item.

    Args:
        item: Article to announce
        variant: Layout, RANDOM picks one of the two
        base_url: Base URL of the web app
        translator: Used to render the enhanced value line in Japanese
        rng: Random source for variant and hook selection

    Returns:
        Tuple of (tweet text, layout actually used)
    """
    rng = rng or random.Random()
    concrete = resolve_variant(variant, rng)
    return _FORMATTERS[concrete](item, base_url, translator, rng), concrete
