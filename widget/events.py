"""Minimal async publish/subscribe used in place of DOM event listeners."""

from collections import defaultdict
from typing import Any, Awaitable, Callable

Handler = Callable[..., Awaitable[None]]


class EventBus:
    def __init__(self):
        self._handlers: dict[str, list[Handler]] = defaultdict(list)

    def subscribe(self, name: str, handler: Handler) -> None:
        self._handlers[name].append(handler)

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if handler in self._handlers.get(name, []):
            self._handlers[name].remove(handler)

    async def publish(self, name: str, **payload: Any) -> None:
        """Run the handlers for ``name`` in subscription order."""
        for handler in list(self._handlers.get(name, [])):
            await handler(**payload)
