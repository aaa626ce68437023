"""Fetch-filter-notify pipeline for DNS News Digest."""

from .config import FeedConfig, SlackConfig
from .errors import ConfigError
from .logging_config import create_execution_logger
from .models import DigestResult
from .rss import FeedFetcher
from .slack import SlackNotifier


def validate_config(feed_config: FeedConfig, slack_config: SlackConfig) -> list[str]:
    """
    Check configuration before any network call is made.

    Args:
        feed_config: Feed configuration
        slack_config: Slack configuration

    Returns:
        Warnings for settings that are missing but only needed later

    Raises:
        ConfigError: If the feed URL is missing
    """
    if not feed_config.url or not feed_config.url.strip():
        raise ConfigError("RSS_FEED_URL is not configured")

    warnings = []
    if not slack_config.webhook_url:
        warnings.append(
            "SLACK_WEBHOOK_URL is not set. Slack notification will fail."
        )
    return warnings


def run_digest(
    feed_config: FeedConfig,
    slack_config: SlackConfig,
    execution_id: str | None = None,
) -> DigestResult:
    """
    Run one digest: fetch the feed, filter it, notify Slack if anything matched.

    Args:
        feed_config: Feed configuration
        slack_config: Slack configuration
        execution_id: Execution ID for logging context

    Returns:
        DigestResult describing what happened

    Raises:
        ConfigError: If required configuration is missing
        FetchError: If the feed cannot be retrieved
        ParseError: If the feed body is malformed
        DeliveryError: If Slack rejects the notification
    """
    logger = create_execution_logger("pipeline", execution_id)
    execution_id = logger.execution_id

    for warning in validate_config(feed_config, slack_config):
        logger.warning(warning)

    result = DigestResult()

    fetcher = FeedFetcher(timeout=feed_config.timeout, execution_id=execution_id)
    try:
        entries = fetcher.fetch_entries(
            feed_config.url, feed_config.category, feed_config.untitled_placeholder
        )
    finally:
        fetcher.close()

    result.entries = entries
    result.entries_found = len(entries)

    if not entries:
        logger.info(
            f"No '{feed_config.category}' articles found, nothing to send",
            category=feed_config.category,
        )
        return result

    logger.info(
        f"Found {len(entries)} '{feed_config.category}' articles to send",
        category=feed_config.category,
        entries_count=len(entries),
    )

    notifier = SlackNotifier(slack_config, execution_id=execution_id)
    try:
        result.notification_sent = notifier.send(entries)
    finally:
        notifier.close()

    return result
