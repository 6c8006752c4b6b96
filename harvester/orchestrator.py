from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import replace
from typing import Any
from urllib.parse import urljoin

from config.settings import settings
from core.errors import (
    CollectionFailure,
    EmptyResult,
    HarvestError,
    NoActiveContext,
    SecondaryFetchFailure,
)
from core.models import HarvestResult, Item, Reply
from harvester.automation import PageAutomation, PageDocument
from harvester.collector import Collector, set_target_count
from harvester.extract import parse_replies

log = logging.getLogger(__name__)

ProgressFn = Callable[[str], Awaitable[None]]


async def extract_replies(document: PageDocument) -> list[Reply]:
    return parse_replies(await document.content())


class HarvestOrchestrator:
    """Drives one harvest: collect items, then fetch replies item by item.

    All navigation happens on the single active view, so reply fetches are
    strictly sequential. A failed fetch costs only that item's replies.
    """

    def __init__(
        self,
        automation: PageAutomation,
        collector: Collector | None = None,
        settle_seconds: float | None = None,
        progress_fn: ProgressFn | None = None,
        base_url: str | None = None,
    ) -> None:
        self._automation = automation
        self._collector = collector or Collector()
        self._settle = (
            settings.DETAIL_SETTLE_SECONDS if settle_seconds is None else settle_seconds
        )
        self._progress = progress_fn
        self._base_url = base_url or settings.FEED_BASE_URL

    async def run(self, desired_count: int) -> HarvestResult:
        await self._emit("Starting harvest...")
        try:
            return await self._run(desired_count)
        except Exception as e:
            log.error("Harvest failed: %s", e)
            await self._emit(f"Error harvesting items: {e}")
            raise

    async def _run(self, desired_count: int) -> HarvestResult:
        view = await self._automation.get_active_view()
        if view is None:
            raise NoActiveContext()

        try:
            original_address = await self._automation.current_address(view)

            await self._emit("Finding items...")
            await self._automation.inject_and_run(
                view, set_target_count, [desired_count]
            )
            items: list[Item] = await self._automation.inject_and_run(
                view, self._collector.collect
            )
        except HarvestError:
            raise
        except Exception as e:
            raise CollectionFailure(str(e)) from e
        if not items:
            raise EmptyResult()

        harvested: list[Item] = []
        try:
            total = len(items)
            for i, item in enumerate(items, start=1):
                await self._emit(f"Fetching replies for item {i} of {total}...")
                if not item.item_url:
                    harvested.append(item)
                    continue
                try:
                    replies = await self._fetch_replies(view, item)
                except SecondaryFetchFailure as e:
                    log.warning("Reply fetch failed, keeping item without replies: %s", e)
                    replies = ()
                harvested.append(replace(item, replies=replies))
        finally:
            if original_address:
                await self._restore(view, original_address)

        await self._emit("Harvest completed successfully!")
        return HarvestResult(items=tuple(harvested))

    def detail_address(self, item: Item) -> str:
        return urljoin(self._base_url, item.item_url)

    async def _fetch_replies(self, view: Any, item: Item) -> tuple[Reply, ...]:
        address = self.detail_address(item)
        try:
            await self._automation.navigate(view, address)
            await asyncio.sleep(self._settle)
            replies = await self._automation.inject_and_run(view, extract_replies)
        except Exception as e:
            raise SecondaryFetchFailure(item.item_url, e) from e
        log.debug("Fetched %d replies from %s", len(replies or []), address)
        return tuple(replies or ())

    async def _restore(self, view: Any, address: str) -> None:
        try:
            await self._automation.navigate(view, address)
        except Exception as e:
            log.warning("Could not return to %s: %s", address, e)

    async def _emit(self, message: str) -> None:
        log.info(message)
        if self._progress:
            await self._progress(message)
