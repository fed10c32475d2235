"""Configuration for GlotNexus AI News.

This module provides configuration for the cache store, the X API and the
auto-posting job, supporting both local development and AWS deployment.
"""

import json
import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import boto3
from botocore.exceptions import BotoCoreError, ClientError


@dataclass
class DynamoDBConfig:
    """DynamoDB configuration.

    Attributes:
        table_name: Name of the DynamoDB table (empty = not configured)
        endpoint_url: Custom endpoint URL (for DynamoDB Local)
        region_name: AWS region
        enabled: False when the in-process cache was explicitly selected
    """

    table_name: str
    endpoint_url: str | None
    region_name: str
    enabled: bool = True


@dataclass
class XCredentials:
    """OAuth 1.0a user-context credentials for the X API."""

    api_key: str
    api_secret: str
    access_token: str
    access_token_secret: str


@dataclass
class PostingConfig:
    """Auto-posting configuration.

    Attributes:
        max_posts_per_run: Explicit cap per run (None = decided by JST hour)
        delay_seconds: Wait between two posts
        tweet_format_variant: "simple", "enhanced" or "random"
        app_base_url: Base URL used for article links in posts
    """

    max_posts_per_run: int | None
    delay_seconds: int
    tweet_format_variant: str
    app_base_url: str


def setup_logging(level: str | None = None) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=(level or os.getenv("LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _get_int(name: str, default: int | None) -> int | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        return default


def get_dynamodb_config() -> DynamoDBConfig:
    """Get DynamoDB configuration from environment variables.

    Environment Variables:
        DYNAMODB_TABLE_NAME: Table name (unset = in-process cache only)
        DYNAMODB_ENDPOINT_URL: Custom endpoint (for local development)
        AWS_REGION: AWS region
        NEWS_CACHE_BACKEND: "memory" disables the external store

    Returns:
        DynamoDBConfig instance
    """
    backend = os.getenv("NEWS_CACHE_BACKEND", "dynamodb").strip().lower()
    return DynamoDBConfig(
        table_name=os.getenv("DYNAMODB_TABLE_NAME", ""),
        endpoint_url=os.getenv("DYNAMODB_ENDPOINT_URL"),
        region_name=os.getenv("AWS_REGION", ""),
        enabled=backend != "memory",
    )


@lru_cache(maxsize=10)
def _get_secret(secret_name: str) -> str | None:
    """Get secret value from AWS Secrets Manager.

    Args:
        secret_name: Name of the secret in Secrets Manager

    Returns:
        Secret value or None if not found
    """
    region = os.getenv("AWS_REGION", "")
    if not region:
        return None

    client = boto3.client("secretsmanager", region_name=region)
    try:
        response = client.get_secret_value(SecretId=secret_name)
        return response.get("SecretString")
    except (ClientError, BotoCoreError):
        return None


def get_x_credentials() -> XCredentials | None:
    """Get X API credentials.

    Supports two modes:
    1. Direct environment variables (local development):
       - X_API_KEY, X_API_SECRET, X_ACCESS_TOKEN, X_ACCESS_TOKEN_SECRET
    2. Secrets Manager (Lambda deployment):
       - X_CREDENTIALS_SECRET_NAME → JSON secret with the same four keys

    Returns:
        XCredentials, or None when any of the four parts is missing
    """
    values = {
        "X_API_KEY": os.getenv("X_API_KEY"),
        "X_API_SECRET": os.getenv("X_API_SECRET"),
        "X_ACCESS_TOKEN": os.getenv("X_ACCESS_TOKEN"),
        "X_ACCESS_TOKEN_SECRET": os.getenv("X_ACCESS_TOKEN_SECRET"),
    }

    if not all(values.values()):
        secret_name = os.getenv("X_CREDENTIALS_SECRET_NAME")
        if secret_name:
            raw = _get_secret(secret_name)
            if raw:
                try:
                    secret = json.loads(raw)
                except json.JSONDecodeError:
                    secret = {}
                for key in values:
                    values[key] = values[key] or secret.get(key)

    if not all(values.values()):
        return None

    return XCredentials(
        api_key=values["X_API_KEY"],
        api_secret=values["X_API_SECRET"],
        access_token=values["X_ACCESS_TOKEN"],
        access_token_secret=values["X_ACCESS_TOKEN_SECRET"],
    )


def get_posting_config() -> PostingConfig:
    """Get auto-posting configuration from environment variables.

    Environment Variables:
        AUTO_POST_MAX_PER_RUN: Max posts per run (unset = time-of-day based)
        AUTO_POST_DELAY_SECONDS: Seconds between posts (default: 10)
        TWEET_FORMAT_VARIANT: simple | enhanced | random (default: enhanced)
        APP_BASE_URL: Base URL for article links

    Returns:
        PostingConfig instance
    """
    return PostingConfig(
        max_posts_per_run=_get_int("AUTO_POST_MAX_PER_RUN", None),
        delay_seconds=_get_int("AUTO_POST_DELAY_SECONDS", DEFAULT_DELAY_SECONDS),
        tweet_format_variant=os.getenv("TWEET_FORMAT_VARIANT", "enhanced"),
        app_base_url=os.getenv("APP_BASE_URL", DEFAULT_APP_BASE_URL).rstrip("/"),
    )


def get_cron_secret() -> str | None:
    """Bearer token expected on cron endpoints (None = unguarded)."""
    return os.getenv("CRON_SECRET") or None


# Constants for DynamoDB schema
DYNAMODB_PK_NEWS = "NEWS#latest"
DYNAMODB_PK_POSTED = "POSTED#x"
DYNAMODB_SK_ITEM_PREFIX = "ITEM#"
DYNAMODB_SK_META = "META"

# Cache settings
CACHE_TTL_SECONDS = 5 * 60
POSTED_IDS_TTL_SECONDS = 30 * 24 * 60 * 60
MAX_POSTED_IDS = 1000

# Feed fetching
FEED_TIMEOUT_SECONDS = 3
CONCURRENT_LIMIT = 5
MAX_ITEMS_PER_FEED = 5
SUMMARY_MAX_LENGTH = 300

# Translation
TRANSLATE_TIMEOUT_SECONDS = 5

# Posting
DEFAULT_DELAY_SECONDS = 10
DEFAULT_APP_BASE_URL = "https://glotnexus.jp"
