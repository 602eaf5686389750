"""Background execution of persistence operations."""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

Operation = Callable[[], Awaitable[Any]]
SuccessCallback = Callable[[Any], Any]
ErrorCallback = Callable[[Exception], Any]


class BackgroundWorker:
    """
    Runs store operations off the interaction path.

    Each submitted operation becomes a task on the running loop; the
    database call itself executes on aiosqlite's thread. When it finishes,
    exactly one of ``on_success`` / ``on_error`` is invoked back on the loop,
    so screen state is only ever touched from the interaction loop.
    """

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()
        self._running = True
        self._completed = 0
        self._failed = 0

    @property
    def pending(self) -> int:
        """Number of operations still in flight."""
        return len(self._tasks)

    def get_status(self) -> dict:
        """Get worker counters."""
        return {
            "running": self._running,
            "pending": self.pending,
            "completed": self._completed,
            "failed": self._failed,
        }

    def submit(
        self,
        operation: Operation,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
        name: str | None = None,
    ) -> asyncio.Task:
        """
        Schedule an operation.

        Args:
            operation: Zero-argument callable returning an awaitable
            on_success: Called with the operation result
            on_error: Called with the exception if the operation fails
            name: Label used in logs

        Returns:
            The task running the operation
        """
        if not self._running:
            raise RuntimeError("Worker stopped")

        label = name or getattr(operation, "__qualname__", "operation")
        task = asyncio.create_task(
            self._run(operation, on_success, on_error, label), name=label
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(
        self,
        operation: Operation,
        on_success: SuccessCallback | None,
        on_error: ErrorCallback | None,
        label: str,
    ) -> Any:
        try:
            result = await operation()
        except asyncio.CancelledError:
            logger.debug("Operation %s cancelled", label)
            raise
        except Exception as e:
            self._failed += 1
            if on_error is None:
                logger.error("Operation %s failed: %s", label, e)
                return None
            logger.debug("Operation %s failed: %s", label, e)
            await self._deliver(on_error, e, label)
            return None

        self._completed += 1
        if on_success is not None:
            await self._deliver(on_success, result, label)
        return result

    async def _deliver(self, callback: Callable[[Any], Any], value: Any, label: str) -> None:
        """Invoke a result callback; callback errors are logged, not raised."""
        try:
            outcome = callback(value)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception:
            logger.exception("Callback for %s failed", label)

    async def drain(self) -> None:
        """Wait until every submitted operation and its callback has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def stop(self) -> None:
        """Cancel in-flight operations and refuse new ones."""
        self._running = False
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("Background worker stopped")
