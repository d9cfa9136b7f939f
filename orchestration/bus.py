"""Event bus - EventBusProtocol and InMemoryEventBus."""

from collections.abc import Awaitable, Callable
from fnmatch import fnmatchcase
from typing import Protocol

from polytrade_sdk.logging import get_logger

from .events import Event

EventHandler = Callable[[Event], Awaitable[None]]


class EventBusProtocol(Protocol):
    """Protocol for event bus implementations."""

    async def publish(self, event: Event) -> None:
        """Publish an event.

        Args:
            event: Event to publish
        """
        ...

    def subscribe(self, pattern: str, handler: EventHandler) -> None:
        """Subscribe a handler to an event name or glob pattern.

        Args:
            pattern: Event name, or a pattern such as ``transaction.*``
            handler: Async handler function
        """
        ...


class InMemoryEventBus(EventBusProtocol):
    """In-memory event bus implementation.

    Handlers run in subscription order. A failing handler is logged and
    never interrupts the publisher.
    """

    def __init__(self) -> None:
        self._handlers: list[tuple[str, EventHandler]] = []
        self._logger = get_logger("orchestration.event_bus")

    def subscribe(self, pattern: str, handler: EventHandler) -> None:
        self._handlers.append((pattern, handler))

    def unsubscribe(self, handler: EventHandler) -> None:
        self._handlers = [(p, h) for p, h in self._handlers if h is not handler]

    def _matching(self, event_name: str) -> list[EventHandler]:
        return [h for p, h in self._handlers if p == event_name or fnmatchcase(event_name, p)]

    async def publish(self, event: Event) -> None:
        """Publish an event to all matching handlers.

        Args:
            event: Event to publish
        """
        handlers = self._matching(event.name)
        if not handlers:
            return

        self._logger.debug(
            "publishing_event",
            event_name=event.name,
            execution_id=event.metadata.execution_id,
            handler_count=len(handlers),
        )

        for handler in handlers:
            try:
                await handler(event)
            except Exception as exc:
                self._logger.error(
                    "handler_error",
                    event_name=event.name,
                    handler=getattr(handler, "__qualname__", repr(handler)),
                    error=str(exc),
                    exc_info=True,
                )
