"""Slack webhook notifier for DNS News Digest."""

from collections.abc import Sequence

import requests

from .config import DEFAULT_HEADER, SlackConfig
from .errors import ConfigError, DeliveryError
from .logging_config import create_execution_logger
from .models import Block, FilteredEntry, NotificationMessage, TextObject


def escape_mrkdwn(text: str) -> str:
    """Escape the control characters Slack mrkdwn reserves.

    Args:
        text: Text to escape

    Returns:
        Escaped text
    """
    if not text:
        return ""

    text = text.replace("&", "&amp;")
    text = text.replace("<", "&lt;")
    text = text.replace(">", "&gt;")

    return text


def format_link(entry: FilteredEntry) -> str:
    """Render an entry as a mrkdwn hyperlink, ``<link|title>``."""
    # A pipe inside the label would end it early
    label = escape_mrkdwn(entry.title).replace("|", "¦")
    return f"<{entry.link}|{label}>"


def build_message(
    entries: Sequence[FilteredEntry], header_text: str = DEFAULT_HEADER
) -> NotificationMessage:
    """Build the Block Kit message announcing ``entries``.

    The layout is a header, a divider, then one section per entry. The
    fallback text is shown by clients that cannot render blocks.

    Args:
        entries: Filtered entries, in feed order
        header_text: Header block title

    Returns:
        NotificationMessage ready to be serialized

    Raises:
        ValueError: If entries is empty
    """
    if not entries:
        raise ValueError("Cannot build a digest message without entries")

    blocks = [
        Block(type="header", text=TextObject(type="plain_text", text=header_text, emoji=True)),
        Block(type="divider"),
    ]

    for entry in entries:
        blocks.append(
            Block(type="section", text=TextObject(type="mrkdwn", text=f"• {format_link(entry)}"))
        )

    fallback_text = f"{len(entries)} new DNS articles. First: {format_link(entries[0])}"

    return NotificationMessage(blocks=blocks, text=fallback_text)


class SlackNotifier:
    """Handles delivering the digest to a Slack incoming webhook."""

    def __init__(self, config: SlackConfig, execution_id: str | None = None):
        """Initialize Slack notifier with configuration."""
        self.config = config
        self.logger = create_execution_logger("slack_notifier", execution_id)
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": "DNS-News-Digest/1.0"})

        self.logger.debug(
            "SlackNotifier initialized",
            webhook_configured=bool(config.webhook_url),
            timeout=config.timeout,
        )

    def send(self, entries: Sequence[FilteredEntry]) -> bool:
        """
        Send the digest for ``entries`` to the webhook.

        Args:
            entries: Filtered entries to announce

        Returns:
            True if a message was delivered, False if there was nothing to send

        Raises:
            ConfigError: If the webhook URL is not configured
            DeliveryError: If the webhook cannot be reached or answers >= 300
        """
        if not self.config.webhook_url:
            raise ConfigError("SLACK_WEBHOOK_URL is not configured")

        if not entries:
            self.logger.info("No entries to send to Slack")
            return False

        message = build_message(entries, self.config.header_text)
        self.logger.info(
            f"Sending {len(entries)} entries to Slack",
            entries_count=len(entries),
            blocks_count=len(message.blocks),
        )
        self._post(message)
        return True

    def _post(self, message: NotificationMessage) -> None:
        """
        POST the message as JSON and interpret the webhook response.

        Args:
            message: Message to deliver

        Raises:
            DeliveryError: On network failure or a status >= 300
        """
        try:
            response = self.session.post(
                self.config.webhook_url,
                json=message.to_payload(),
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            raise DeliveryError(f"Error sending message to Slack: {e}") from e

        body = response.text
        if response.status_code >= 300:
            raise DeliveryError(
                f"Error from Slack API with status {response.status_code}: {body}",
                status_code=response.status_code,
                body=body,
            )

        if body.strip() == "ok":
            self.logger.info(
                "Successfully sent notification to Slack",
                status_code=response.status_code,
            )
        else:
            self.logger.info(
                f"Slack API response (status {response.status_code}): {body}",
                status_code=response.status_code,
                response_body=body,
            )

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
