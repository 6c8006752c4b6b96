"""Best-effort field extraction from rendered feed markup.

Every field is read by a small extractor returning ``None`` on a miss, and
``with_default`` turns a miss into the field's default. A missing sub-element
never aborts the extraction of the node it belongs to.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from scrapling.parser import Selector

from core.models import Item, Reply

log = logging.getLogger(__name__)

Extractor = Callable[[Selector], str | None]

# Markup contract of the feed.  Counts live in the first word of the
# aria-label of the engagement buttons ("12 Likes. Like").
FEED_SELECTORS: dict[str, str] = {
    "item": '[data-testid="cellInnerDiv"]',
    "item_link": 'a[href*="/status/"]',
    "reply": '[data-testid="tweet"]',
    "text": '[data-testid="tweetText"]',
    "author": '[data-testid="User-Name"]',
    "time": "time",
    "likes": '[data-testid="like"]',
    "shares": '[data-testid="retweet"]',
    "replies": '[data-testid="reply"]',
}


def parse_document(html: str) -> Selector | None:
    if not html or not html.strip():
        return None
    return Selector(html)


def first_text(selector: str) -> Extractor:
    def extract(node: Selector) -> str | None:
        found = node.css(selector)
        if not found:
            return None
        return str(found[0].get_all_text(separator=" ", strip=True))

    return extract


def first_attr(selector: str, attr: str) -> Extractor:
    def extract(node: Selector) -> str | None:
        found = node.css(selector)
        if not found:
            return None
        value = found[0].attrib.get(attr)
        return str(value) if value is not None else None

    return extract


def label_count(selector: str) -> Extractor:
    def extract(node: Selector) -> str | None:
        label = first_attr(selector, "aria-label")(node)
        if not label:
            return None
        words = label.split()
        return words[0] if words else None

    return extract


def with_default(extractor: Extractor, default: str) -> Callable[[Selector], str]:
    def extract(node: Selector) -> str:
        value = extractor(node)
        # an empty string is as good as a miss
        return value if value else default

    return extract


item_url = first_attr(FEED_SELECTORS["item_link"], "href")

_text = with_default(first_text(FEED_SELECTORS["text"]), "")
_author = with_default(first_text(FEED_SELECTORS["author"]), "")
_timestamp = with_default(first_attr(FEED_SELECTORS["time"], "datetime"), "")
_likes = with_default(label_count(FEED_SELECTORS["likes"]), "0")
_shares = with_default(label_count(FEED_SELECTORS["shares"]), "0")
_reply_count = with_default(label_count(FEED_SELECTORS["replies"]), "0")


def find_item_nodes(html: str) -> list[Selector]:
    page = parse_document(html)
    if page is None:
        return []
    return list(page.css(FEED_SELECTORS["item"]))


def build_item(node: Selector, url: str) -> Item:
    return Item(
        item_url=url,
        text=_text(node),
        author_name=_author(node),
        timestamp=_timestamp(node),
        like_count=_likes(node),
        share_count=_shares(node),
    )


def parse_replies(html: str) -> list[Reply]:
    """Every post node on a detail page, in document order."""
    page = parse_document(html)
    if page is None:
        return []
    replies = [
        Reply(
            text=_text(node),
            author_name=_author(node),
            timestamp=_timestamp(node),
            like_count=_likes(node),
            reply_count=_reply_count(node),
        )
        for node in page.css(FEED_SELECTORS["reply"])
    ]
    log.debug("Parsed %d replies", len(replies))
    return replies
