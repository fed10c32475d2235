"""Keyword-based topic classification of news items."""

from collections.abc import Iterable

from .feeds import (
    CATEGORY_BUSINESS,
    CATEGORY_CV,
    CATEGORY_ETHICS,
    CATEGORY_GENERAL,
    CATEGORY_ML,
    CATEGORY_NLP,
    CATEGORY_RESEARCH,
    CATEGORY_ROBOTICS,
)

CATEGORY_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    (
        CATEGORY_ML,
        (
            "機械学習",
            "machine learning",
            "ml",
            "ディープラーニング",
            "deep learning",
            "強化学習",
            "reinforcement learning",
        ),
    ),
    (
        CATEGORY_NLP,
        (
            "自然言語処理",
            "nlp",
            "言語モデル",
            "language model",
            "chatgpt",
            "gpt",
            "bert",
            "llm",
        ),
    ),
    (
        CATEGORY_CV,
        (
            "コンピュータビジョン",
            "computer vision",
            "画像認識",
            "image recognition",
            "物体検出",
            "object detection",
        ),
    ),
    (
        CATEGORY_ROBOTICS,
        ("ロボット", "robot", "自律", "autonomous", "ドローン", "drone"),
    ),
    (
        CATEGORY_ETHICS,
        (
            "倫理",
            "ethics",
            "公平性",
            "fairness",
            "バイアス",
            "bias",
            "透明性",
            "transparency",
        ),
    ),
    (
        CATEGORY_RESEARCH,
        ("研究", "research", "論文", "paper", "学会", "conference"),
    ),
    (
        CATEGORY_BUSINESS,
        (
            "ビジネス",
            "business",
            "企業",
            "company",
            "導入事例",
            "case study",
            "roi",
            "投資",
        ),
    ),
)


def classify(title: str, body: str) -> list[str]:
    """Infer topic tags from title and body.

    A tag is added when any of its keywords occurs as a substring of the
    lower-cased "title body" text. Falls back to the general tag.
    """
    text = f"{title} {body}".lower()
    categories = [
        tag
        for tag, keywords in CATEGORY_RULES
        if any(keyword in text for keyword in keywords)
    ]
    return categories or [CATEGORY_GENERAL]


def merge_categories(*groups: Iterable[str]) -> list[str]:
    """Union of tag groups, de-duplicated in first-seen order."""
    merged: list[str] = []
    for group in groups:
        for tag in group:
            if tag not in merged:
                merged.append(tag)
    return merged
