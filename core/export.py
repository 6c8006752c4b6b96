"""Nested record shape of a harvest, as consumed by exporters."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

from core.models import HarvestResult, Item, Reply


def _reply_to_dict(reply: Reply) -> dict[str, Any]:
    return {
        "content": reply.text,
        "metadata": {
            "author": reply.author_name,
            "postedAt": reply.timestamp,
            "engagement": {
                "likes": reply.like_count,
                "replyCount": reply.reply_count,
            },
        },
    }


def _item_to_dict(item: Item) -> dict[str, Any]:
    return {
        "content": item.text,
        "metadata": {
            "author": item.author_name,
            "postedAt": item.timestamp,
            "engagement": {
                "likes": item.like_count,
                "shares": item.share_count,
                "replyCount": len(item.replies),
            },
            "url": item.item_url,
        },
        "replies": [_reply_to_dict(r) for r in item.replies],
    }


def to_export_dict(
    result: HarvestResult,
    search_term: str = "",
    scraped_at: datetime | None = None,
) -> dict[str, Any]:
    scraped_at = scraped_at or datetime.now(timezone.utc)
    return {
        "totalItems": result.total_items,
        "searchTerm": search_term,
        "scrapedAt": scraped_at.isoformat(),
        "items": [_item_to_dict(i) for i in result.items],
    }


def export_json(
    result: HarvestResult,
    search_term: str = "",
    scraped_at: datetime | None = None,
) -> str:
    return json.dumps(
        to_export_dict(result, search_term, scraped_at),
        indent=2,
        ensure_ascii=False,
    )
