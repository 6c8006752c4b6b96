"""Scroll-driven discovery of feed items on a live page."""

from __future__ import annotations

import asyncio
import logging

from config.settings import settings
from core.models import Item
from harvester.automation import PageDocument
from harvester.extract import build_item, find_item_nodes, item_url
from harvester.policy import should_stop

log = logging.getLogger(__name__)

# Page global carrying the desired item count into the collector.
TARGET_COUNT_KEY = "_targetItemCount"


async def set_target_count(document: PageDocument, count: int) -> None:
    await document.write_global(TARGET_COUNT_KEY, count)


class Collector:
    """Polls a document, deduplicating items by URL while scrolling it.

    Each tick processes every candidate rendered at that moment before the
    stop conditions are checked, so the result may overshoot the target.
    """

    def __init__(
        self,
        tick_seconds: float | None = None,
        max_ticks: int | None = None,
    ) -> None:
        self._tick = (
            settings.COLLECT_TICK_SECONDS if tick_seconds is None else tick_seconds
        )
        self._max_ticks = settings.COLLECT_MAX_TICKS if max_ticks is None else max_ticks

    async def collect(
        self, document: PageDocument, target_count: int | None = None
    ) -> list[Item]:
        if target_count is None:
            target_count = await self._read_target(document)

        seen: set[str] = set()
        items: list[Item] = []
        previous_extent = 0
        attempts = 0

        while True:
            await asyncio.sleep(self._tick)

            nodes = find_item_nodes(await document.content())
            log.debug("Tick %d: %d candidate nodes", attempts + 1, len(nodes))
            for node in nodes:
                url = item_url(node)
                if not url or url in seen:
                    continue
                items.append(build_item(node, url))
                seen.add(url)

            await document.scroll_to_bottom()
            current_extent = await document.scroll_extent()
            attempts += 1

            if should_stop(
                previous_extent,
                current_extent,
                len(items),
                target_count,
                attempts,
                self._max_ticks,
            ):
                break
            previous_extent = current_extent

        log.info(
            "Collection complete: %d unique items after %d ticks",
            len(items),
            attempts,
        )
        return items

    async def _read_target(self, document: PageDocument) -> int | None:
        raw = await document.read_global(TARGET_COUNT_KEY)
        try:
            return int(raw)
        except (TypeError, ValueError):
            return None
