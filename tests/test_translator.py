"""Tests for the translator."""

from unittest.mock import MagicMock, patch

import requests

from glotnexus_news.translator import Translator, post_process_translation


def create_translate_response(*segments: str) -> MagicMock:
    """Helper to create a translate endpoint response."""
    mock_response = MagicMock()
    mock_response.json.return_value = [
        [[segment, "source", None, None] for segment in segments],
        None,
        "en",
    ]
    return mock_response


class TestPostProcessTranslation:
    """Tests for post_process_translation function."""

    def test_replaces_terminology(self) -> None:
        """AI terms are replaced case-insensitively."""
        assert post_process_translation("large language model") == "大規模言語モデル（LLM）"

    def test_prefers_longest_term(self) -> None:
        """The longest matching term wins."""
        assert post_process_translation("Tokenizer") == "トークナイザー"

    def test_respects_word_boundaries(self) -> None:
        """Terms inside longer words are left alone."""
        assert post_process_translation("Tokens") == "Tokens"

    def test_fixes_spacing(self) -> None:
        """Spaces around numerals units and mixed scripts are removed."""
        assert post_process_translation("GPT-4 は 10 億パラメータ") == "GPT-4は10億パラメータ"

    def test_removes_space_before_punctuation(self) -> None:
        """No space before Japanese closing punctuation."""
        assert post_process_translation("完了 。") == "完了。"


class TestTranslator:
    """Tests for Translator class."""

    def test_translate_joins_segments(self) -> None:
        """Translated segments are concatenated."""
        mock_response = create_translate_response("こんにちは。", "世界。")

        with patch("glotnexus_news.translator.requests.get", return_value=mock_response) as mock_get:
            result = Translator().translate("Hello. World.")

        assert result == "こんにちは。世界。"
        params = mock_get.call_args.kwargs["params"]
        assert params["sl"] == "en"
        assert params["tl"] == "ja"
        assert params["q"] == "Hello. World."

    def test_returns_original_on_error(self) -> None:
        """Failures yield the original text."""
        with patch(
            "glotnexus_news.translator.requests.get",
            side_effect=requests.ConnectionError("down"),
        ):
            assert Translator().translate("Hello") == "Hello"

    def test_returns_original_on_unexpected_payload(self) -> None:
        """Malformed responses yield the original text."""
        mock_response = MagicMock()
        mock_response.json.side_effect = ValueError("not json")

        with patch("glotnexus_news.translator.requests.get", return_value=mock_response):
            assert Translator().translate("Hello") == "Hello"

    def test_returns_original_on_empty_result(self) -> None:
        """An empty translation yields the original text."""
        mock_response = MagicMock()
        mock_response.json.return_value = [None]

        with patch("glotnexus_news.translator.requests.get", return_value=mock_response):
            assert Translator().translate("Hello") == "Hello"

    def test_empty_input_skips_request(self) -> None:
        """Empty text is not sent."""
        with patch("glotnexus_news.translator.requests.get") as mock_get:
            assert Translator().translate("") == ""
        mock_get.assert_not_called()

    def test_result_respects_max_length(self) -> None:
        """Translated text is bounded by max_length."""
        mock_response = create_translate_response("これは非常に長い翻訳結果です。" * 10)

        with patch("glotnexus_news.translator.requests.get", return_value=mock_response):
            result = Translator().translate("long text", max_length=20)

        assert len(result) <= 20
        assert result.endswith("...")

    def test_failure_respects_max_length(self) -> None:
        """The original text is bounded as well on failure."""
        with patch(
            "glotnexus_news.translator.requests.get",
            side_effect=requests.Timeout("slow"),
        ):
            result = Translator().translate("word " * 50, max_length=20)

        assert len(result) <= 20

    def test_clips_long_input(self) -> None:
        """Input longer than twice max_length is clipped before sending."""
        mock_response = create_translate_response("短い")

        with patch("glotnexus_news.translator.requests.get", return_value=mock_response) as mock_get:
            Translator().translate("a" * 100, max_length=10)

        assert mock_get.call_args.kwargs["params"]["q"] == "a" * 20

    def test_memoizes_translations(self) -> None:
        """Repeated texts are translated once."""
        mock_response = create_translate_response("こんにちは")
        translator = Translator()

        with patch("glotnexus_news.translator.requests.get", return_value=mock_response) as mock_get:
            translator.translate("Hello")
            translator.translate("Hello")

        assert mock_get.call_count == 1
