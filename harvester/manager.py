from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

from config.settings import settings
from core.export import export_json, to_export_dict
from core.models import HarvestResult
from harvester.automation import PageAutomation
from harvester.collector import Collector
from harvester.orchestrator import HarvestOrchestrator

log = logging.getLogger(__name__)


class HarvestInProgress(RuntimeError):
    pass


class HarvestManager:
    """Owns the browser and serialises harvest runs over it."""

    def __init__(
        self,
        automation: PageAutomation,
        broadcast_fn=None,
        collector: Collector | None = None,
        settle_seconds: float | None = None,
    ) -> None:
        self._automation = automation
        self._broadcast = broadcast_fn
        self._collector = collector
        self._settle = settle_seconds
        self._lock = asyncio.Lock()
        self._latest: dict[str, Any] | None = None
        self._latest_result: HarvestResult | None = None
        self._latest_search_term = ""
        self._latest_scraped_at: datetime | None = None
        self._last_run: dict[str, Any] | None = None

    async def start(self) -> None:
        await self._automation.start()

    async def stop(self) -> None:
        await self._automation.stop()

    @property
    def running(self) -> bool:
        return self._lock.locked()

    @property
    def latest(self) -> dict[str, Any] | None:
        return self._latest

    async def run(
        self, count: int | None = None, search_term: str = ""
    ) -> dict[str, Any]:
        """Run one harvest and return its export record."""
        if self._lock.locked():
            raise HarvestInProgress("A harvest is already running")

        count = count or settings.HARVEST_DEFAULT_COUNT
        async with self._lock:
            started_at = datetime.now(timezone.utc)
            orchestrator = HarvestOrchestrator(
                self._automation,
                collector=self._collector,
                settle_seconds=self._settle,
                progress_fn=self._on_progress,
            )
            try:
                result = await orchestrator.run(count)
            except Exception as e:
                self._last_run = {
                    "status": "failed",
                    "error": str(e),
                    "started_at": started_at.isoformat(),
                }
                await self._publish({"event": "harvest_failed", "error": str(e)})
                raise

            scraped_at = datetime.now(timezone.utc)
            self._latest_result = result
            self._latest_search_term = search_term
            self._latest_scraped_at = scraped_at
            self._latest = to_export_dict(result, search_term, scraped_at)
            self._last_run = {
                "status": "success",
                "items": result.total_items,
                "started_at": started_at.isoformat(),
            }
            log.info(
                "Finished harvest: %d items | %d replies",
                result.total_items,
                sum(len(i.replies) for i in result.items),
            )
            await self._publish(
                {"event": "harvest_complete", "items": result.total_items}
            )
            return self._latest

    def latest_json(self) -> str | None:
        """Pretty-printed export of the latest harvest."""
        if self._latest_result is None:
            return None
        return export_json(
            self._latest_result, self._latest_search_term, self._latest_scraped_at
        )

    def get_status(self) -> dict[str, Any]:
        return {"running": self.running, "last_run": self._last_run}

    async def _on_progress(self, message: str) -> None:
        await self._publish({"event": "progress", "message": message})

    async def _publish(self, data: dict) -> None:
        if self._broadcast:
            await self._broadcast(data)
