"""Data models for DNS News Digest."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Item:
    """Represents a single RSS item."""

    title: str
    link: str
    categories: set[str] = field(default_factory=set)


@dataclass
class Channel:
    """Ordered sequence of items published by a feed."""

    items: list[Item] = field(default_factory=list)
    title: str = ""


@dataclass
class Feed:
    """Root RSS document."""

    channel: Channel = field(default_factory=Channel)


@dataclass(frozen=True)
class FilteredEntry:
    """An item that passed the category filter, ready to be announced."""

    title: str
    link: str


@dataclass
class TextObject:
    """Slack text composition object."""

    type: str  # plain_text or mrkdwn
    text: str
    emoji: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type, "text": self.text}
        if self.emoji:
            data["emoji"] = True
        return data


@dataclass
class Block:
    """Slack layout block (header, divider or section)."""

    type: str
    text: TextObject | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type}
        if self.text is not None:
            data["text"] = self.text.to_dict()
        return data


@dataclass
class NotificationMessage:
    """Outbound Slack payload: layout blocks plus fallback text."""

    blocks: list[Block]
    text: str

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-serializable webhook body."""
        return {
            "blocks": [block.to_dict() for block in self.blocks],
            "text": self.text,
        }


@dataclass
class DigestResult:
    """Outcome of a single digest run."""

    entries_found: int = 0
    notification_sent: bool = False
    entries: list[FilteredEntry] = field(default_factory=list)
