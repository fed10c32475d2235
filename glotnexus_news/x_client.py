"""Minimal X (Twitter) API v2 client for posting tweets."""

import logging

import requests
from requests_oauthlib import OAuth1Session

from .config import XCredentials
from .models import SocialPostError

logger = logging.getLogger(__name__)


class XClient:
    """Posts tweets with OAuth 1.0a user-context credentials."""

    TWEETS_URL = "https://api.twitter.com/2/tweets"
    TIMEOUT = 10

    def __init__(
        self, credentials: XCredentials, session: OAuth1Session | None = None
    ) -> None:
        """Initialize XClient.

        Args:
            credentials: OAuth 1.0a consumer and access token pairs
            session: Pre-built session (for testing)
        """
        self._session = session or OAuth1Session(
            client_key=credentials.api_key,
            client_secret=credentials.api_secret,
            resource_owner_key=credentials.access_token,
            resource_owner_secret=credentials.access_token_secret,
        )

    def post_tweet(self, text: str) -> str:
        """Publish a tweet.

        Args:
            text: Tweet text

        Returns:
            ID of the created tweet

        Raises:
            SocialPostError: If the request fails or X rejects the tweet.
                duplicate is set for X's duplicate-content rejection.
        """
        try:
            response = self._session.post(
                self.TWEETS_URL, json={"text": text}, timeout=self.TIMEOUT
            )
        except requests.RequestException as e:
            raise SocialPostError(f"Request to X failed: {e}") from e

        if response.status_code >= 400:
            detail = self._error_detail(response)
            logger.error("X API error %d: %s", response.status_code, detail)
            raise SocialPostError(
                detail or f"HTTP {response.status_code}",
                status_code=response.status_code,
                duplicate=response.status_code == 403 and "duplicate" in detail.lower(),
            )

        try:
            return str(response.json()["data"]["id"])
        except (ValueError, KeyError, TypeError) as e:
            raise SocialPostError(
                "Unexpected response from X", status_code=response.status_code
            ) from e

    @staticmethod
    def _error_detail(response: requests.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text or ""
        if isinstance(data, dict):
            return str(data.get("detail") or data.get("title") or "")
        return ""
