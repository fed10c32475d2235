"""Lambda handler for GlotNexus AI News.

This is the entry point for the Lambda function behind API Gateway (REST
and HTTP APIs) and the EventBridge schedules that refresh the cache and
trigger auto-posting.
"""

import base64
import logging
from typing import Any

from .config import setup_logging
from .routes import NewsApi, create_news_api

setup_logging()
logger = logging.getLogger(__name__)

SCHEDULED_EVENT = "Scheduled Event"
AUTO_POST_TASK = "auto-post"

# Global API instance for Lambda warm starts
_api: NewsApi | None = None


def _get_api() -> NewsApi:
    """Get or create the NewsApi instance."""
    global _api
    if _api is None:
        _api = create_news_api()
    return _api


def _handle_scheduled(event: dict[str, Any]) -> dict[str, Any]:
    """Run the scheduled task named in the event detail (default: refresh)."""
    api = _get_api()
    detail = event.get("detail") or {}
    if detail.get("task") == AUTO_POST_TASK:
        logger.info("Scheduled auto-post started")
        return api.run_poster()

    logger.info("Scheduled refresh started")
    items = api.aggregator.refresh()
    return {"success": True, "itemCount": len(items)}


def _request_from_event(event: dict[str, Any]) -> tuple[str, str, dict[str, str], dict[str, str], str | bytes | None]:
    """Extract method, path, query, headers and body from a proxy event."""
    http = (event.get("requestContext") or {}).get("http")
    if http:
        # HTTP API (payload format 2.0)
        method = http.get("method", "GET")
        path = event.get("rawPath") or http.get("path") or "/"
    else:
        # REST API (payload format 1.0)
        method = event.get("httpMethod", "GET")
        path = event.get("path") or "/"

    body: str | bytes | None = event.get("body")
    if body and event.get("isBase64Encoded"):
        body = base64.b64decode(body)

    return (
        method,
        path,
        event.get("queryStringParameters") or {},
        event.get("headers") or {},
        body,
    )


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Lambda entry point.

    Args:
        event: API Gateway proxy event, or EventBridge scheduled event
            (detail.task = "auto-post" selects auto-posting)

    Returns:
        API Gateway proxy response, or the task summary for scheduled events
    """
    if event.get("detail-type") == SCHEDULED_EVENT:
        try:
            return _handle_scheduled(event)
        except Exception as e:
            logger.exception("Scheduled task failed")
            return {"success": False, "error": str(e)}

    method, path, query, headers, body = _request_from_event(event)
    response = _get_api().dispatch(method, path, query=query, headers=headers, body=body)

    return {
        "statusCode": response.status_code,
        "headers": response.headers,
        "body": response.encode().decode("utf-8"),
        "isBase64Encoded": False,
    }
