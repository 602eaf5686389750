"""Async event bus delivering notifications to the interaction loop."""

import asyncio
import inspect
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable

from mynotes.events.types import Event

logger = logging.getLogger(__name__)

EventHandler = Callable[[Event], Awaitable[None] | None]


def _handler_name(handler: EventHandler) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


class EventBus:
    """Queue-backed pub/sub bus.

    Handlers are registered per event class and also receive events of
    its subclasses, so subscribing to ``NoteEvent`` sees creates, updates
    and deletes. Handlers may be plain callables or coroutine functions;
    both run on the loop that started the bus.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[Event], list[EventHandler]] = defaultdict(list)
        self._queue: asyncio.Queue[Event] = asyncio.Queue()
        self._running = False
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        """Check if the dispatch loop is active."""
        return self._running

    def subscribe(self, event_type: type[Event], handler: EventHandler) -> None:
        """Register a handler for an event type and its subclasses."""
        self._handlers[event_type].append(handler)
        logger.debug("Subscribed %s to %s", _handler_name(handler), event_type.__name__)

    def unsubscribe(self, event_type: type[Event], handler: EventHandler) -> None:
        """Unregister a handler for an event type."""
        if handler in self._handlers[event_type]:
            self._handlers[event_type].remove(handler)
            logger.debug(
                "Unsubscribed %s from %s", _handler_name(handler), event_type.__name__
            )

    async def publish(self, event: Event) -> None:
        """Publish an event to the bus."""
        await self._queue.put(event)
        logger.debug("Published %s", type(event).__name__)

    def publish_nowait(self, event: Event) -> None:
        """Publish an event without waiting (for sync contexts)."""
        self._queue.put_nowait(event)
        logger.debug("Published (nowait) %s", type(event).__name__)

    def _handlers_for(self, event: Event) -> list[EventHandler]:
        handlers: list[EventHandler] = []
        for klass in type(event).__mro__:
            handlers.extend(self._handlers.get(klass, []))
        return handlers

    async def _call(self, handler: EventHandler, event: Event) -> Any:
        result = handler(event)
        if inspect.isawaitable(result):
            return await result
        return result

    async def dispatch(self, event: Event) -> None:
        """Deliver one event to its handlers immediately, bypassing the queue."""
        event_name = type(event).__name__
        handlers = self._handlers_for(event)

        if not handlers:
            logger.debug("No handlers for %s", event_name)
            return

        results = await asyncio.gather(
            *(self._call(handler, event) for handler in handlers),
            return_exceptions=True,
        )

        for handler, result in zip(handlers, results):
            if isinstance(result, Exception):
                logger.error(
                    "Handler %s failed for %s: %s",
                    _handler_name(handler),
                    event_name,
                    result,
                )

    async def _run_loop(self) -> None:
        """Main event processing loop."""
        while self._running:
            try:
                event = await asyncio.wait_for(self._queue.get(), timeout=0.1)
            except asyncio.TimeoutError:
                continue
            except asyncio.CancelledError:
                break
            try:
                await self.dispatch(event)
            except Exception as e:
                logger.error("Event loop error: %s", e)
            finally:
                self._queue.task_done()

    async def start(self) -> None:
        """Start the event bus processing loop."""
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info("Event bus started")

    async def stop(self) -> None:
        """Stop the event bus and drain remaining events."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        while not self._queue.empty():
            try:
                event = self._queue.get_nowait()
            except asyncio.QueueEmpty:
                break
            await self.dispatch(event)
            self._queue.task_done()

        logger.info("Event bus stopped")

    async def wait_empty(self) -> None:
        """Wait until all queued events have been processed."""
        await self._queue.join()
