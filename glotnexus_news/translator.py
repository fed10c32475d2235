"""English to Japanese translation for news items.

Uses the public Google translate endpoint, then repairs machine-translation
artifacts with an AI terminology dictionary and a few spacing rules.
"""

import logging
import re
from collections import OrderedDict

import requests

from .config import TRANSLATE_TIMEOUT_SECONDS
from .text_utils import truncate_at_natural_break

logger = logging.getLogger(__name__)

AI_TERMINOLOGY: dict[str, str] = {
    # Model and product names
    "ChatGPT": "ChatGPT",
    "GPT-4o": "GPT-4o",
    "GPT-4": "GPT-4",
    "GPT-3.5": "GPT-3.5",
    "Gemini Ultra": "Gemini Ultra",
    "Gemini Pro": "Gemini Pro",
    "Gemini": "Gemini",
    "Claude": "Claude",
    "DALL-E 3": "DALL-E 3",
    "DALL-E": "DALL-E",
    "Stable Diffusion": "Stable Diffusion",
    "Midjourney": "Midjourney",
    "LLaMA": "LLaMA",
    "Llama 3": "Llama 3",
    "PaLM": "PaLM",
    "Mistral": "Mistral",
    "Mixtral": "Mixtral",
    "Sora": "Sora",
    "Copilot": "Copilot",
    "Grok": "Grok",
    "Phi-3": "Phi-3",
    "Command R": "Command R",
    "Cohere": "Cohere",
    # Techniques
    "Artificial General Intelligence": "汎用人工知能（AGI）",
    "Large Language Model": "大規模言語モデル（LLM）",
    "Small Language Model": "小規模言語モデル（SLM）",
    "Vision Language Model": "視覚言語モデル（VLM）",
    "Retrieval-Augmented Generation": "検索拡張生成（RAG）",
    "Reinforcement Learning from Human Feedback": "人間のフィードバックによる強化学習（RLHF）",
    "Direct Preference Optimization": "直接選好最適化（DPO）",
    "Chain of Thought": "思考の連鎖（CoT）",
    "Mixture of Experts": "混合エキスパート（MoE）",
    "Prompt Engineering": "プロンプトエンジニアリング",
    "Reinforcement Learning": "強化学習",
    "Transfer Learning": "転移学習",
    "Federated Learning": "連合学習",
    "Continual Learning": "継続学習",
    "Deep Learning": "ディープラーニング",
    "Machine Learning": "機械学習",
    "Neural Network": "ニューラルネットワーク",
    "Fine-tuning": "ファインチューニング",
    "Multimodal": "マルチモーダル",
    "Transformer": "Transformer",
    "Embedding": "埋め込み",
    "Tokenizer": "トークナイザー",
    "Token": "トークン",
    "LLM": "LLM",
    "AGI": "AGI",
    "RAG": "RAG",
    "RLHF": "RLHF",
    "LoRA": "LoRA",
    "QLoRA": "QLoRA",
    "MoE": "MoE",
    "GGUF": "GGUF",
    "ONNX": "ONNX",
    # Safety and ethics
    "AI Safety": "AI安全性",
    "AI Alignment": "AIアライメント",
    "Hallucination": "ハルシネーション",
    "Guardrails": "ガードレール",
    "Red Teaming": "レッドチーミング",
    "Jailbreak": "ジェイルブレイク",
    "Benchmark": "ベンチマーク",
    # Application areas
    "Computer Vision": "コンピュータビジョン",
    "Natural Language Processing": "自然言語処理（NLP）",
    "Text-to-Image": "テキストから画像生成",
    "Text-to-Video": "テキストから動画生成",
    "Text-to-Speech": "テキスト読み上げ（TTS）",
    "Speech-to-Text": "音声認識（STT）",
    "Image Generation": "画像生成",
    "Code Generation": "コード生成",
    "Autonomous Agent": "自律型エージェント",
    "AI Agent": "AIエージェント",
    "Agentic AI": "エージェント型AI",
    "Generative AI": "生成AI",
    "GenAI": "生成AI",
    # Infrastructure
    "Pre-training": "事前学習",
    "Quantization": "量子化",
    "Distillation": "蒸留",
    "Context Window": "コンテキストウィンドウ",
    "Attention Mechanism": "アテンション機構",
    "Diffusion Model": "拡散モデル",
    "Foundation Model": "基盤モデル",
    "Frontier Model": "フロンティアモデル",
    "On-device AI": "オンデバイスAI",
    "Edge AI": "エッジAI",
    "Edge Computing": "エッジコンピューティング",
    "Artificial Intelligence": "人工知能",
    "Open Source": "オープンソース",
    "Open Weight": "オープンウェイト",
    "Scaling Law": "スケーリング則",
}

_TERMINOLOGY_LOOKUP = {term.lower(): replacement for term, replacement in AI_TERMINOLOGY.items()}

# Longest terms first so "Large Language Model" wins over "LLM"-style prefixes.
# ASCII-only boundaries: Japanese characters count as separators.
_TERMINOLOGY_RE = re.compile(
    r"(?<![A-Za-z0-9])("
    + "|".join(re.escape(term) for term in sorted(AI_TERMINOLOGY, key=len, reverse=True))
    + r")(?![A-Za-z0-9])",
    re.IGNORECASE,
)

_JA = r"\u3000-\u9fff\uf900-\ufaff"

_CLEANUP_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"(\d+)\s+([億万兆])"), r"\1\2"),
    (re.compile(r"\s+([、。！？）」])"), r"\1"),
    (re.compile(r"([（「])\s+"), r"\1"),
    (re.compile(rf"([{_JA}])\s+([A-Za-z0-9])"), r"\1\2"),
    (re.compile(rf"([A-Za-z0-9])\s+([{_JA}])"), r"\1\2"),
    (re.compile(r"([のをがは])\s+\1"), r"\1"),
)


def post_process_translation(text: str) -> str:
    """Fix AI terminology and spacing artifacts in machine-translated text."""
    if not text:
        return text

    processed = _TERMINOLOGY_RE.sub(
        lambda match: _TERMINOLOGY_LOOKUP[match.group(1).lower()], text
    )
    for pattern, replacement in _CLEANUP_RULES:
        processed = pattern.sub(replacement, processed)
    return processed.strip()


class Translator:
    """Translate text through the Google translate web endpoint.

    translate() never raises: any failure yields the original text.
    """

    API_URL = "https://translate.googleapis.com/translate_a/single"
    MEMO_MAX_ENTRIES = 2000

    def __init__(
        self,
        source_language: str = "en",
        target_language: str = "ja",
        timeout: float = TRANSLATE_TIMEOUT_SECONDS,
    ) -> None:
        self._source_language = source_language
        self._target_language = target_language
        self._timeout = timeout
        self._memo: OrderedDict[str, str] = OrderedDict()

    def translate(self, text: str, max_length: int | None = None) -> str:
        """Translate text, optionally bounding the result length.

        Args:
            text: Source text
            max_length: Maximum length of the returned text

        Returns:
            Translated and post-processed text, or the original text on
            failure. With max_length, the result is cut at a natural break.
        """
        if not text:
            return ""

        source = text
        if max_length and len(text) > max_length * 2:
            # English is usually longer than the Japanese rendering
            source = text[: max_length * 2]

        try:
            translated = self._memo.get(source)
            if translated is None:
                translated = post_process_translation(self._request(source))
                if not translated:
                    logger.warning("Empty translation result, keeping original text")
                    return self._bounded(text, max_length)
                self._remember(source, translated)
        except Exception as e:
            logger.warning("Translation failed: %s", e)
            return self._bounded(text, max_length)

        return self._bounded(translated, max_length)

    def _request(self, text: str) -> str:
        """Call the translate endpoint and join the translated segments."""
        response = requests.get(
            self.API_URL,
            params={
                "client": "gtx",
                "sl": self._source_language,
                "tl": self._target_language,
                "dt": "t",
                "q": text,
            },
            timeout=self._timeout,
        )
        response.raise_for_status()
        data = response.json()

        segments = data[0] if data else None
        if not segments:
            return ""
        return "".join(segment[0] for segment in segments if segment and segment[0])

    def _remember(self, source: str, translated: str) -> None:
        self._memo[source] = translated
        self._memo.move_to_end(source)
        while len(self._memo) > self.MEMO_MAX_ENTRIES:
            self._memo.popitem(last=False)

    @staticmethod
    def _bounded(text: str, max_length: int | None) -> str:
        if max_length and len(text) > max_length:
            return truncate_at_natural_break(text, max_length)
        return text
