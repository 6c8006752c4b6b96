"""Tests for best-effort field extraction."""

from harvester.extract import build_item, find_item_nodes, item_url, parse_replies
from fakes import feed_page, post_html, reply_page


def test_extracts_all_item_fields():
    html = feed_page(
        post_html(
            "/alice/status/1",
            text="Hello feed",
            author="Alice",
            posted_at="2024-05-01T10:00:00.000Z",
            likes="12",
            shares="3",
        )
    )
    [node] = find_item_nodes(html)
    item = build_item(node, item_url(node))

    assert item.item_url == "/alice/status/1"
    assert item.text == "Hello feed"
    assert item.author_name == "Alice"
    assert item.timestamp == "2024-05-01T10:00:00.000Z"
    assert item.like_count == "12"
    assert item.share_count == "3"
    assert item.replies == ()


def test_missing_fields_fall_back_to_defaults():
    [node] = find_item_nodes(feed_page(post_html("/bob/status/2")))
    item = build_item(node, item_url(node))

    assert item.text == ""
    assert item.author_name == ""
    assert item.timestamp == ""
    assert item.like_count == "0"
    assert item.share_count == "0"


def test_node_without_status_link_has_no_url():
    [node] = find_item_nodes(feed_page(post_html(None, text="promoted")))
    assert item_url(node) is None


def test_empty_document_has_no_nodes():
    assert find_item_nodes("") == []
    assert parse_replies("   ") == []


def test_replies_keep_document_order():
    replies = parse_replies(reply_page("first", "second", "second"))

    assert [r.text for r in replies] == ["first", "second", "second"]
    assert replies[1].author_name == "user1"
    assert replies[1].like_count == "1"
    assert replies[1].reply_count == "0"
    assert replies[0].timestamp == ""
