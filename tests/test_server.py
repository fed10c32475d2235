"""Tests for the local development server."""

from unittest.mock import MagicMock, patch

import pytest

from glotnexus_news.server import run_server


class TestRunServer:
    """Tests for run_server function."""

    def test_exits_when_port_is_taken(self) -> None:
        """A bind failure exits with status 1."""
        with patch("glotnexus_news.server.create_news_api", return_value=MagicMock()), patch(
            "glotnexus_news.server.ThreadingHTTPServer",
            side_effect=OSError("Address already in use"),
        ):
            with pytest.raises(SystemExit) as exc_info:
                run_server(port=5000)

        assert exc_info.value.code == 1

    def test_uses_port_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """PORT selects the listening port."""
        monkeypatch.setenv("PORT", "5123")
        server = MagicMock()
        server.serve_forever.side_effect = KeyboardInterrupt

        with patch("glotnexus_news.server.create_news_api", return_value=MagicMock()), patch(
            "glotnexus_news.server.ThreadingHTTPServer", return_value=server
        ) as mock_server:
            run_server(host="127.0.0.1")

        assert mock_server.call_args.args[0] == ("127.0.0.1", 5123)
        server.server_close.assert_called_once()
