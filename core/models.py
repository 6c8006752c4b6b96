from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Reply:
    """A nested comment found on an item's detail page."""

    text: str = ""
    author_name: str = ""
    timestamp: str = ""  # ISO-8601 as rendered, may be empty
    like_count: str = "0"
    reply_count: str = "0"


@dataclass(frozen=True)
class Item:
    """A single feed post discovered by the collector.

    Replies are attached by building a copy with ``dataclasses.replace``.
    """

    item_url: str  # dedup key, never empty
    text: str = ""
    author_name: str = ""
    timestamp: str = ""
    like_count: str = "0"
    share_count: str = "0"
    replies: tuple[Reply, ...] = ()


@dataclass(frozen=True)
class HarvestResult:
    """Outcome of a single harvest run."""

    items: tuple[Item, ...]

    @property
    def total_items(self) -> int:
        return len(self.items)
