"""Shared fixtures for DNS News Digest tests."""

from pathlib import Path

import pytest

from dns_news_digest.config import FeedConfig, SlackConfig
from dns_news_digest.models import FilteredEntry

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_rss_content() -> bytes:
    """Return the sample feed: one usable dns item, one other, one dns without link."""
    return (FIXTURES_DIR / "sample_rss.xml").read_bytes()


@pytest.fixture
def two_entries() -> list[FilteredEntry]:
    return [
        FilteredEntry(title="Verisign reports .com growth", link="https://x/one"),
        FilteredEntry(title="New gTLD round opens", link="https://x/two"),
    ]


@pytest.fixture
def feed_config() -> FeedConfig:
    return FeedConfig(url="https://example.com/feed")


@pytest.fixture
def slack_config() -> SlackConfig:
    return SlackConfig(webhook_url="https://hooks.slack.com/services/T000/B000/XXXX")
