"""RSS feed fetching and category filtering for DNS News Digest."""

import io
import xml.sax

import feedparser
import requests

from .config import DEFAULT_CATEGORY, UNTITLED_PLACEHOLDER
from .errors import FetchError, ParseError
from .logging_config import create_execution_logger
from .models import Channel, Feed, FilteredEntry, Item


def parse_feed(content: bytes | str) -> Feed:
    """Deserialize an RSS document into the feed model.

    feedparser does the XML mapping: channel items become ``Item`` values and
    each ``<category>`` becomes one entry of ``Item.categories``. Category text
    wrapped in ``<![CDATA[...]]>`` is unwrapped by the parser, so callers only
    ever see the plain tag string.

    Args:
        content: Raw response body

    Returns:
        Parsed Feed

    Raises:
        ParseError: If the body is not well-formed XML or not an RSS document
    """
    if isinstance(content, str):
        content = content.encode("utf-8")

    # A file-like object keeps feedparser from treating the body as a path or URL
    parsed = feedparser.parse(io.BytesIO(content))

    if parsed.bozo and isinstance(parsed.get("bozo_exception"), xml.sax.SAXException):
        raise ParseError(f"Error parsing XML from RSS feed: {parsed.bozo_exception}")

    if not (parsed.get("version") or "").startswith("rss"):
        raise ParseError("Response body is not an RSS document")

    items = [_item_from_entry(entry) for entry in parsed.entries]
    channel = Channel(items=items, title=parsed.feed.get("title", ""))
    return Feed(channel=channel)


def _item_from_entry(entry) -> Item:
    """Map a feedparser entry onto an Item."""
    categories = {tag.get("term") or "" for tag in entry.get("tags", [])}
    categories.discard("")
    return Item(
        title=entry.get("title", ""),
        link=_entry_link(entry),
        categories=categories,
    )


def _entry_link(entry) -> str:
    """Return the text of the item's ``<link>`` element.

    feedparser copies a permalink ``<guid>`` into ``link`` when the item has no
    ``<link>`` of its own; that copy does not count as a link.
    """
    if entry.get("guidislink") and not any(
        link.get("href") for link in entry.get("links", [])
    ):
        return ""
    return entry.get("link", "")


def has_category(item: Item, category: str) -> bool:
    """Return True if any of the item's categories trims to ``category``."""
    return any(tag.strip() == category for tag in item.categories)


def filter_entries(
    feed: Feed,
    category: str = DEFAULT_CATEGORY,
    placeholder: str = UNTITLED_PLACEHOLDER,
) -> list[FilteredEntry]:
    """Project the items tagged with ``category`` into FilteredEntry values.

    Matching is exact and case-sensitive after trimming. Tagged items without a
    link are skipped; blank titles are replaced by ``placeholder``. Feed order
    is preserved.

    Args:
        feed: Parsed feed
        category: Tag an item must carry
        placeholder: Title used when the item title is blank

    Returns:
        Filtered entries in feed order
    """
    entries = []
    for item in feed.channel.items:
        if not has_category(item, category):
            continue

        link = item.link.strip()
        if not link:
            continue

        title = item.title.strip() or placeholder
        entries.append(FilteredEntry(title=title, link=link))

    return entries


class FeedFetcher:
    """Retrieves the RSS feed and extracts the tagged entries."""

    def __init__(self, timeout: int = 30, execution_id: str | None = None):
        """Initialize FeedFetcher with configuration.

        Args:
            timeout: HTTP request timeout in seconds
            execution_id: Execution ID for logging context
        """
        self.timeout = timeout
        self.logger = create_execution_logger("feed_fetcher", execution_id)
        self.session = requests.Session()
        self.session.headers.update({"User-Agent": "DNS-News-Digest/1.0"})

        self.logger.debug("FeedFetcher initialized", timeout=timeout)

    def fetch(self, feed_url: str) -> bytes:
        """Download the raw feed document.

        Args:
            feed_url: URL of the RSS feed

        Returns:
            Response body

        Raises:
            FetchError: If the request fails or the status is not 2xx
        """
        self.logger.info("Fetching RSS feed", feed_url=feed_url)

        try:
            response = self.session.get(feed_url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(f"Error fetching RSS feed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise FetchError(
                f"Error fetching RSS feed: received status code {response.status_code}"
            )

        self.logger.info(
            "Feed downloaded successfully",
            feed_url=feed_url,
            status_code=response.status_code,
            content_length=len(response.content),
        )
        return response.content

    def fetch_entries(
        self,
        feed_url: str,
        category: str = DEFAULT_CATEGORY,
        placeholder: str = UNTITLED_PLACEHOLDER,
    ) -> list[FilteredEntry]:
        """Fetch, parse and filter the feed.

        Args:
            feed_url: URL of the RSS feed
            category: Tag an item must carry
            placeholder: Title used when the item title is blank

        Returns:
            Filtered entries in feed order

        Raises:
            FetchError: If the feed cannot be retrieved
            ParseError: If the feed body is malformed
        """
        content = self.fetch(feed_url)
        feed = parse_feed(content)
        entries = filter_entries(feed, category, placeholder)

        for entry in entries:
            self.logger.log_entry_found(entry.title, entry.link)

        self.logger.info(
            f"Filtered {len(entries)} of {len(feed.channel.items)} items",
            feed_url=feed_url,
            category=category,
            items_count=len(feed.channel.items),
            entries_count=len(entries),
        )
        return entries

    def close(self) -> None:
        """Close the HTTP session."""
        self.session.close()
