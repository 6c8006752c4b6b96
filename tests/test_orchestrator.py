"""Tests for the harvest orchestrator."""

import dataclasses

import pytest

from core.errors import CollectionFailure, EmptyResult, NoActiveContext
from core.models import Item
from fakes import (
    FakeAutomation,
    FeedDocument,
    StubCollector,
    feed_page,
    post_html,
    reply_page,
)
from harvester.collector import Collector
from harvester.orchestrator import HarvestOrchestrator

pytestmark = pytest.mark.asyncio

BASE = "https://x.com"


def _feed(count: int) -> FeedDocument:
    page = feed_page(*(post_html(f"/u/status/{n}", text=f"post {n}") for n in range(count)))
    return FeedDocument([page], [1000])


def _orchestrator(automation, messages=None) -> HarvestOrchestrator:
    async def record(message):
        messages.append(message)

    return HarvestOrchestrator(
        automation,
        collector=Collector(tick_seconds=0),
        settle_seconds=0,
        progress_fn=record if messages is not None else None,
        base_url=BASE,
    )


async def test_attaches_replies_in_item_order():
    details = {f"{BASE}/u/status/{n}": reply_page(f"reply to {n}", "me too") for n in range(3)}
    automation = FakeAutomation(_feed(3), details)

    result = await _orchestrator(automation).run(10)

    assert result.total_items == 3
    assert [i.item_url for i in result.items] == [f"/u/status/{n}" for n in range(3)]
    for n, item in enumerate(result.items):
        assert [r.text for r in item.replies] == [f"reply to {n}", "me too"]
    assert automation.navigations[:3] == [f"{BASE}/u/status/{n}" for n in range(3)]


async def test_restores_original_address():
    automation = FakeAutomation(_feed(2))

    await _orchestrator(automation).run(10)

    assert automation.navigations[-1] == automation.start_address
    assert automation.address == automation.start_address


async def test_failed_fetch_only_loses_that_items_replies():
    details = {f"{BASE}/u/status/{n}": reply_page(f"reply to {n}") for n in range(3)}
    automation = FakeAutomation(_feed(3), details, failing={f"{BASE}/u/status/1"})

    result = await _orchestrator(automation).run(10)

    assert result.total_items == 3
    assert result.items[1].replies == ()
    assert [r.text for r in result.items[0].replies] == ["reply to 0"]
    assert [r.text for r in result.items[2].replies] == ["reply to 2"]
    assert automation.address == automation.start_address


async def test_no_active_view():
    automation = FakeAutomation(None)

    with pytest.raises(NoActiveContext):
        await _orchestrator(automation).run(10)
    assert automation.navigations == []


async def test_empty_collection_fails_without_navigating():
    automation = FakeAutomation(FeedDocument([feed_page()], [1000]))
    messages = []

    with pytest.raises(EmptyResult, match="No items found"):
        await _orchestrator(automation, messages).run(10)
    assert automation.navigations == []
    assert messages[-1] == "Error harvesting items: No items found on this page"


async def test_reports_progress():
    messages = []

    await _orchestrator(FakeAutomation(_feed(2)), messages).run(10)

    assert messages == [
        "Starting harvest...",
        "Finding items...",
        "Fetching replies for item 1 of 2...",
        "Fetching replies for item 2 of 2...",
        "Harvest completed successfully!",
    ]


async def test_restore_failure_does_not_fail_run():
    automation = FakeAutomation(_feed(1))
    automation.failing.add(automation.start_address)

    result = await _orchestrator(automation).run(10)

    assert result.total_items == 1


async def test_absolute_item_urls_are_kept():
    orchestrator = _orchestrator(FakeAutomation(_feed(1)))
    item = Item(item_url="https://twitter.com/u/status/9")

    assert orchestrator.detail_address(item) == "https://twitter.com/u/status/9"


async def test_result_cannot_be_modified():
    details = {f"{BASE}/u/status/0": reply_page("hello")}
    result = await _orchestrator(FakeAutomation(_feed(1), details)).run(5)
    item = result.items[0]

    with pytest.raises(dataclasses.FrozenInstanceError):
        item.item_url = "/elsewhere"
    with pytest.raises(dataclasses.FrozenInstanceError):
        item.replies[0].text = "edited"
    assert isinstance(item.replies, tuple)
    assert item.item_url == "/u/status/0"


async def test_failed_extraction_only_loses_that_items_replies():
    details = {f"{BASE}/u/status/{n}": reply_page(f"reply to {n}") for n in range(3)}
    automation = FakeAutomation(_feed(3), details, broken={f"{BASE}/u/status/2"})

    result = await _orchestrator(automation).run(10)

    assert [i.item_url for i in result.items] == [f"/u/status/{n}" for n in range(3)]
    assert result.items[2].replies == ()
    assert [r.text for r in result.items[0].replies] == ["reply to 0"]
    assert [r.text for r in result.items[1].replies] == ["reply to 1"]
    assert automation.address == automation.start_address


async def test_item_without_url_is_not_fetched():
    items = [Item(item_url="/u/status/0"), Item(item_url=""), Item(item_url="/u/status/2")]
    automation = FakeAutomation(_feed(0))
    orchestrator = HarvestOrchestrator(
        automation, collector=StubCollector(items), settle_seconds=0, base_url=BASE
    )

    result = await orchestrator.run(10)

    assert [i.item_url for i in result.items] == ["/u/status/0", "", "/u/status/2"]
    assert result.items[1].replies == ()
    assert automation.navigations == [
        f"{BASE}/u/status/0",
        f"{BASE}/u/status/2",
        automation.start_address,
    ]


async def test_page_errors_during_collection_are_classified():
    automation = FakeAutomation(_feed(2))
    automation.broken.add(automation.start_address)
    messages = []

    with pytest.raises(CollectionFailure, match="has been closed") as excinfo:
        await _orchestrator(automation, messages).run(10)

    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert automation.navigations == []
    assert messages[-1].startswith("Error harvesting items: Could not collect items")
