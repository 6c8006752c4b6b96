from __future__ import annotations


def should_stop(
    prev_extent: int,
    curr_extent: int,
    item_count: int,
    target: int | None,
    attempts: int,
    ceiling: int,
) -> bool:
    """Decide whether the collector's poll loop is done.

    Three independent conditions, any one ends the loop: the scrollable
    extent did not grow since the previous tick, enough items have been
    gathered, or the attempt budget is spent. A ``target`` of ``None``
    disables the item-count condition.
    """
    if curr_extent == prev_extent:
        return True
    if target is not None and item_count >= target:
        return True
    return attempts >= ceiling
