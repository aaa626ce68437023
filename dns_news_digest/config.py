"""Configuration management for DNS News Digest."""

import os
from dataclasses import dataclass

from .errors import ConfigError

DEFAULT_CATEGORY = "dns"
DEFAULT_HEADER = "📰 Daily DNS News Digest"
UNTITLED_PLACEHOLDER = "Untitled Article"


@dataclass
class FeedConfig:
    """Configuration for fetching and filtering the RSS feed."""

    url: str
    category: str = DEFAULT_CATEGORY
    untitled_placeholder: str = UNTITLED_PLACEHOLDER
    timeout: int = 30


@dataclass
class SlackConfig:
    """Configuration for the Slack incoming webhook."""

    webhook_url: str = ""
    header_text: str = DEFAULT_HEADER
    timeout: int = 15


class Config:
    """Main configuration manager."""

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.feed_url = os.getenv("RSS_FEED_URL", "").strip()
        self.webhook_url = os.getenv("SLACK_WEBHOOK_URL", "").strip()
        self.webhook_secret_name = os.getenv("SLACK_WEBHOOK_SECRET_NAME", "").strip()
        self.category = os.getenv("FEED_CATEGORY", DEFAULT_CATEGORY).strip() or DEFAULT_CATEGORY
        self.header_text = os.getenv("DIGEST_HEADER", DEFAULT_HEADER).strip() or DEFAULT_HEADER
        self.aws_region = os.getenv("AWS_REGION", os.getenv("AWS_DEFAULT_REGION", "us-east-1"))
        self.log_level = os.getenv("LOG_LEVEL", "INFO")

    def get_feed_config(self) -> FeedConfig:
        """Get feed configuration.

        Raises:
            ConfigError: If RSS_FEED_URL is not set
        """
        if not self.feed_url:
            raise ConfigError("RSS_FEED_URL environment variable not set")
        return FeedConfig(url=self.feed_url, category=self.category)

    def get_slack_config(self) -> SlackConfig:
        """Get Slack configuration.

        The webhook URL may be empty here; it is only required at delivery time.
        """
        return SlackConfig(webhook_url=self.webhook_url, header_text=self.header_text)
