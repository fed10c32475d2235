"""Local development server for the GlotNexus AI News API.

Usage:
    python -m glotnexus_news.server

Reads configuration from the environment and from a .env file in the
working directory.
"""

import logging
import os
import sys
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs, urlparse

from dotenv import load_dotenv

from .config import setup_logging
from .routes import ApiResponse, NewsApi, create_news_api

logger = logging.getLogger(__name__)

DEFAULT_PORT = 5000


class RequestHandler(BaseHTTPRequestHandler):
    """Translates http.server requests into NewsApi.dispatch calls."""

    api: NewsApi

    def do_GET(self) -> None:
        self._dispatch()

    def do_POST(self) -> None:
        self._dispatch()

    def do_OPTIONS(self) -> None:
        self._dispatch()

    def do_PUT(self) -> None:
        self._dispatch()

    def do_DELETE(self) -> None:
        self._dispatch()

    def _dispatch(self) -> None:
        parsed = urlparse(self.path)
        query = {key: values[0] for key, values in parse_qs(parsed.query).items()}
        length = int(self.headers.get("Content-Length") or 0)
        body = self.rfile.read(length) if length else None

        response = self.api.dispatch(
            self.command,
            parsed.path,
            query=query,
            headers=dict(self.headers.items()),
            body=body,
        )
        self._write(response)

    def _write(self, response: ApiResponse) -> None:
        payload = response.encode()
        self.send_response(response.status_code)
        for name, value in response.headers.items():
            self.send_header(name, value)
        self.send_header("Content-Length", str(len(payload)))
        self.end_headers()
        if payload:
            self.wfile.write(payload)

    def log_message(self, format: str, *args: object) -> None:
        logger.info("%s - %s", self.address_string(), format % args)


def run_server(host: str = "0.0.0.0", port: int | None = None) -> None:
    """Serve the API until interrupted.

    Exits the process with status 1 when the port cannot be bound.
    """
    if port is None:
        port = int(os.getenv("PORT", str(DEFAULT_PORT)))

    RequestHandler.api = create_news_api()
    try:
        server = ThreadingHTTPServer((host, port), RequestHandler)
    except OSError as e:
        logger.error("Cannot bind %s:%d: %s", host, port, e)
        sys.exit(1)

    logger.info("GlotNexus API running on http://%s:%d", host, port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    finally:
        server.server_close()


def main() -> None:
    load_dotenv()
    setup_logging()
    run_server()


if __name__ == "__main__":
    main()
