"""Playwright-backed page automation."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from playwright.async_api import BrowserContext, Page, async_playwright

from config.settings import settings
from harvester.automation import PageAutomation, PageDocument, Routine

log = logging.getLogger(__name__)


class PlaywrightDocument(PageDocument):
    def __init__(self, page: Page) -> None:
        self._page = page

    async def content(self) -> str:
        return await self._page.content()

    async def scroll_to_bottom(self) -> None:
        await self._page.evaluate("() => window.scrollTo(0, document.body.scrollHeight)")

    async def scroll_extent(self) -> int:
        return int(await self._page.evaluate("() => document.body.scrollHeight") or 0)

    async def read_global(self, name: str) -> Any:
        return await self._page.evaluate("(name) => window[name]", name)

    async def write_global(self, name: str, value: Any) -> None:
        await self._page.evaluate(
            "([name, value]) => { window[name] = value; }", [name, value]
        )


class PlaywrightAutomation(PageAutomation):
    """Owns one browser context; the newest open page is the active view."""

    def __init__(
        self,
        engine: str | None = None,
        headless: bool | None = None,
        start_url: str | None = None,
        timeout_ms: int | None = None,
    ) -> None:
        self._engine = engine or settings.BROWSER_ENGINE
        self._headless = settings.BROWSER_HEADLESS if headless is None else headless
        self._start_url = settings.FEED_START_URL if start_url is None else start_url
        self._timeout = (
            settings.NAVIGATION_TIMEOUT_MS if timeout_ms is None else timeout_ms
        )
        self._pw = None
        self._browser = None
        self._context: BrowserContext | None = None

    async def start(self) -> None:
        try:
            self._pw = await async_playwright().start()
            self._browser = await getattr(self._pw, self._engine).launch(
                headless=self._headless
            )
            self._context = await self._browser.new_context()
        except Exception:
            await self.stop()
            raise
        if self._start_url:
            page = await self._context.new_page()
            try:
                await self.navigate(page, self._start_url)
            except Exception as e:
                log.warning("Could not open %s: %s", self._start_url, e)
        log.info("Browser started (%s, headless=%s)", self._engine, self._headless)

    async def stop(self) -> None:
        if self._context:
            await self._context.close()
        if self._browser:
            await self._browser.close()
        if self._pw:
            await self._pw.stop()
        self._context = self._browser = self._pw = None

    async def __aenter__(self) -> PlaywrightAutomation:
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    async def get_active_view(self) -> Page | None:
        if self._context is None:
            return None
        pages = [p for p in self._context.pages if not p.is_closed()]
        return pages[-1] if pages else None

    async def current_address(self, view: Page) -> str | None:
        return view.url or None

    async def navigate(self, view: Page, address: str) -> None:
        await view.goto(address, wait_until="domcontentloaded", timeout=self._timeout)

    async def inject_and_run(
        self, view: Page, routine: Routine, args: Sequence[Any] = ()
    ) -> Any:
        return await routine(PlaywrightDocument(view), *args)
