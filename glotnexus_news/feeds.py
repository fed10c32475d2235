"""Registry of AI news RSS feeds."""

from .models import FeedDescriptor

# Topic tags shown in the UI
CATEGORY_ML = "機械学習"
CATEGORY_NLP = "自然言語処理"
CATEGORY_CV = "コンピュータビジョン"
CATEGORY_ROBOTICS = "ロボティクス"
CATEGORY_ETHICS = "AI倫理"
CATEGORY_RESEARCH = "AI研究"
CATEGORY_BUSINESS = "ビジネス活用"
CATEGORY_GENERAL = "AI"

# arXiv listings carry every paper of the category; keep generative-AI topics only
ARXIV_KEYWORDS = (
    "llm",
    "large language model",
    "generative ai",
    "text-to-image",
    "diffusion",
    "transformer",
    "multimodal",
    "vision-language",
    "agent",
    "alignment",
    "instruction tuning",
    "rlhf",
    "reasoning",
    "foundation model",
)

AI_RSS_FEEDS: tuple[FeedDescriptor, ...] = (
    FeedDescriptor(
        url="https://venturebeat.com/category/ai/feed/",
        name="VentureBeat AI",
        language="en",
        default_categories=(CATEGORY_BUSINESS, CATEGORY_GENERAL),
    ),
    FeedDescriptor(
        url="https://www.artificialintelligence-news.com/feed/",
        name="AI News",
        language="en",
        default_categories=(CATEGORY_GENERAL,),
    ),
    FeedDescriptor(
        url="https://blog.google/technology/ai/rss/",
        name="Google AI Blog",
        language="en",
        default_categories=(CATEGORY_RESEARCH, CATEGORY_BUSINESS),
    ),
    FeedDescriptor(
        url="https://techcrunch.com/tag/artificial-intelligence/feed/",
        name="TechCrunch AI",
        language="en",
        default_categories=(CATEGORY_BUSINESS, CATEGORY_GENERAL),
    ),
    FeedDescriptor(
        url="https://openai.com/blog/rss.xml",
        name="OpenAI Blog",
        language="en",
        default_categories=(CATEGORY_RESEARCH, CATEGORY_ML),
    ),
    FeedDescriptor(
        url="https://huggingface.co/blog/rss.xml",
        name="Hugging Face Blog",
        language="en",
        default_categories=(CATEGORY_RESEARCH, CATEGORY_ML),
    ),
    FeedDescriptor(
        url="http://export.arxiv.org/rss/cs.AI",
        name="arXiv cs.AI",
        language="en",
        default_categories=(CATEGORY_RESEARCH,),
        include_keywords=ARXIV_KEYWORDS,
    ),
    FeedDescriptor(
        url="http://export.arxiv.org/rss/cs.LG",
        name="arXiv cs.LG",
        language="en",
        default_categories=(CATEGORY_RESEARCH, CATEGORY_ML),
        include_keywords=ARXIV_KEYWORDS,
    ),
    FeedDescriptor(
        url="https://paperswithcode.com/rss",
        name="Papers with Code",
        language="en",
        default_categories=(CATEGORY_RESEARCH, CATEGORY_ML),
    ),
    FeedDescriptor(
        url="https://www.anthropic.com/rss.xml",
        name="Anthropic News",
        language="en",
        default_categories=(CATEGORY_RESEARCH, CATEGORY_NLP),
    ),
    FeedDescriptor(
        url="https://ai.meta.com/blog/rss/",
        name="Meta AI Blog",
        language="en",
        default_categories=(CATEGORY_RESEARCH, CATEGORY_CV),
    ),
    FeedDescriptor(
        url="https://deepmind.google/blog/rss.xml",
        name="Google DeepMind Blog",
        language="en",
        default_categories=(CATEGORY_RESEARCH, CATEGORY_ML),
    ),
    FeedDescriptor(
        url="https://www.microsoft.com/en-us/research/feed/",
        name="Microsoft Research Blog",
        language="en",
        default_categories=(CATEGORY_RESEARCH, CATEGORY_ML),
    ),
    FeedDescriptor(
        url="https://developer.nvidia.com/blog/feed/",
        name="NVIDIA Technical Blog",
        language="en",
        default_categories=(CATEGORY_CV, CATEGORY_ML),
    ),
    FeedDescriptor(
        url="https://stability.ai/blog/rss.xml",
        name="Stability AI Blog",
        language="en",
        default_categories=(CATEGORY_CV, CATEGORY_ML),
    ),
    FeedDescriptor(
        url="https://mistral.ai/news/rss.xml",
        name="Mistral AI News",
        language="en",
        default_categories=(CATEGORY_NLP, CATEGORY_ML),
    ),
    FeedDescriptor(
        url="https://x.ai/blog/rss.xml",
        name="xAI Blog",
        language="en",
        default_categories=(CATEGORY_NLP, CATEGORY_ML),
    ),
    FeedDescriptor(
        url="https://www.databricks.com/blog/feed",
        name="Databricks Blog",
        language="en",
        default_categories=(CATEGORY_BUSINESS, CATEGORY_ML),
    ),
    FeedDescriptor(
        url="https://cohere.com/blog/rss.xml",
        name="Cohere Blog",
        language="en",
        default_categories=(CATEGORY_NLP, CATEGORY_ML),
    ),
)


def find_feed(
    name: str, feeds: tuple[FeedDescriptor, ...] = AI_RSS_FEEDS
) -> FeedDescriptor | None:
    """Look up a feed by name (case-insensitive, surrounding spaces ignored)."""
    normalized = name.strip().lower()
    for feed in feeds:
        if feed.name.strip().lower() == normalized:
            return feed
    return None
