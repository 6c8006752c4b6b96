from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Sequence
from typing import Any


class PageDocument(ABC):
    """The live document of one view, as seen by an injected routine."""

    @abstractmethod
    async def content(self) -> str:
        """Current rendered markup."""
        ...

    @abstractmethod
    async def scroll_to_bottom(self) -> None: ...

    @abstractmethod
    async def scroll_extent(self) -> int:
        """Height of the scrollable content."""
        ...

    @abstractmethod
    async def read_global(self, name: str) -> Any: ...

    @abstractmethod
    async def write_global(self, name: str, value: Any) -> None: ...


Routine = Callable[..., Awaitable[Any]]


class PageAutomation(ABC):
    """Host surface that owns views and runs routines inside them."""

    async def start(self) -> None:
        pass

    async def stop(self) -> None:
        pass

    @abstractmethod
    async def get_active_view(self) -> Any | None: ...

    @abstractmethod
    async def current_address(self, view: Any) -> str | None: ...

    @abstractmethod
    async def navigate(self, view: Any, address: str) -> None: ...

    @abstractmethod
    async def inject_and_run(
        self, view: Any, routine: Routine, args: Sequence[Any] = ()
    ) -> Any:
        """Run ``routine(document, *args)`` against the view's document."""
        ...
