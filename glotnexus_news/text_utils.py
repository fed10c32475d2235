"""Plain-text helpers for feed content.

HTML cleanup, first-paragraph extraction, sentence-aware summaries and
truncation at natural break points. All lengths are counted in code points,
so multi-byte scripts are never cut mid-character.
"""

import html
import re

ELLIPSIS = "..."

_SCRIPT_RE = re.compile(r"<script\b[^>]*>.*?</script\s*>", re.IGNORECASE | re.DOTALL)
_STYLE_RE = re.compile(r"<style\b[^>]*>.*?</style\s*>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]*>")
_PARAGRAPH_RE = re.compile(r"<p\b[^>]*>(.*?)</p\s*>", re.IGNORECASE | re.DOTALL)
_SENTENCE_RE = re.compile(r".+?(?:[。！？]|[.!?](?=\s|$)|$)", re.DOTALL)

BREAK_CHARACTERS = ("。", "、", "！", "？", " ")
FIRST_PARAGRAPH_FALLBACK_LENGTH = 100


def strip_html_tags(text: str) -> str:
    """Remove markup and entities, collapsing whitespace."""
    if not text:
        return ""
    text = _SCRIPT_RE.sub("", text)
    text = _STYLE_RE.sub("", text)
    text = _TAG_RE.sub(" ", text)
    text = html.unescape(text)
    return re.sub(r"\s+", " ", text).strip()


def extract_first_paragraph(text: str) -> str:
    """Return the first <p> of an HTML body as plain text.

    Without a paragraph element, the first 100 characters of the plain text
    are returned (with an ellipsis when cut).
    """
    if not text:
        return ""

    cleaned = _STYLE_RE.sub("", _SCRIPT_RE.sub("", text))
    match = _PARAGRAPH_RE.search(cleaned)
    if match:
        paragraph = strip_html_tags(match.group(1))
        if paragraph:
            return paragraph

    plain = strip_html_tags(cleaned)
    if len(plain) <= FIRST_PARAGRAPH_FALLBACK_LENGTH:
        return plain
    return plain[:FIRST_PARAGRAPH_FALLBACK_LENGTH] + ELLIPSIS


def truncate_at_natural_break(text: str, max_length: int) -> str:
    """Cut text to at most max_length characters at a natural break.

    The last sentence punctuation or space located at or after half of the
    budget is used as the cut point; otherwise the text is hard-cut. An
    ellipsis is appended in both cases.
    """
    if len(text) <= max_length:
        return text
    if max_length <= len(ELLIPSIS):
        return text[:max_length]

    limit = max_length - len(ELLIPSIS)
    candidate = text[:limit]
    min_break = limit // 2

    best = max(candidate.rfind(char) for char in BREAK_CHARACTERS)
    if best >= min_break and best > 0:
        return text[: best + 1].strip() + ELLIPSIS

    return candidate + ELLIPSIS


def summarize_text(text: str, max_length: int = 80) -> str:
    """Summarize HTML or plain text into whole sentences within max_length.

    The first sentence is always kept (cut at a natural break when it alone
    exceeds the budget); following sentences are appended while they fit.
    """
    plain = strip_html_tags(text)
    if len(plain) <= max_length:
        return plain

    sentences = [s.strip() for s in _SENTENCE_RE.findall(plain) if s.strip()]
    if not sentences:
        return truncate_at_natural_break(plain, max_length)

    first = sentences[0]
    if len(first) > max_length:
        return truncate_at_natural_break(first, max_length)

    summary = first
    for sentence in sentences[1:]:
        separator = " " if summary[-1] in ".!?" else ""
        extended = f"{summary}{separator}{sentence}"
        if len(extended) > max_length:
            break
        summary = extended

    return summary
