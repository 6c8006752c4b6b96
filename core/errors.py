from __future__ import annotations


class HarvestError(Exception):
    """Base class for failures raised by the harvesting engine."""


class NoActiveContext(HarvestError):
    def __init__(self, message: str = "No active page found") -> None:
        super().__init__(message)


class EmptyResult(HarvestError):
    def __init__(self, message: str = "No items found on this page") -> None:
        super().__init__(message)


class SecondaryFetchFailure(HarvestError):
    """Reply fetch for one item failed; the run carries on without its replies."""

    def __init__(self, item_url: str, cause: BaseException) -> None:
        super().__init__(f"{item_url}: {cause}")
        self.item_url = item_url
        self.cause = cause


class CollectionFailure(HarvestError):
    """The page could not be read while collecting items."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"Could not collect items: {detail}")
