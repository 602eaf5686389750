"""Undo/redo stacks for note commands."""

import logging
import uuid
from collections import deque

from mynotes.events import EventBus, HistoryEvent
from mynotes.history.commands import NoteCommand
from mynotes.monitor.logger import LogContext
from mynotes.notes.types import Note

logger = logging.getLogger(__name__)


class CommandHistory:
    """Executes commands and keeps them for undo and redo.

    A command whose undo or redo raises is dropped: it refers to state that
    no longer exists, and the caller is expected to refresh.
    """

    def __init__(self, event_bus: EventBus | None = None, max_depth: int = 50) -> None:
        self._event_bus = event_bus
        self._done: deque[NoteCommand] = deque(maxlen=max_depth)
        self._undone: list[NoteCommand] = []

    @property
    def can_undo(self) -> bool:
        return bool(self._done)

    @property
    def can_redo(self) -> bool:
        return bool(self._undone)

    async def execute(self, command: NoteCommand) -> Note:
        """Run a command, remember it and forget anything undone."""
        with LogContext(f"{command.name}-{uuid.uuid4().hex[:8]}"):
            result = await command.execute()
            self._done.append(command)
            self._undone.clear()
            logger.info("Executed %s (note %s)", command.name, result.id)
        await self._announce("execute", command)
        return result

    async def undo(self) -> Note | None:
        """Reverse the most recent command; None if there is nothing to undo."""
        if not self._done:
            return None
        command = self._done.pop()
        with LogContext(f"undo-{command.name}-{uuid.uuid4().hex[:8]}"):
            try:
                result = await command.undo()
            except Exception:
                logger.warning("Undo of %s failed; dropping it", command.name)
                raise
            self._undone.append(command)
            logger.info("Undid %s (note %s)", command.name, result.id)
        await self._announce("undo", command)
        return result

    async def redo(self) -> Note | None:
        """Re-apply the most recently undone command; None if there is none."""
        if not self._undone:
            return None
        command = self._undone.pop()
        with LogContext(f"redo-{command.name}-{uuid.uuid4().hex[:8]}"):
            try:
                result = await command.execute()
            except Exception:
                logger.warning("Redo of %s failed; dropping it", command.name)
                raise
            self._done.append(command)
            logger.info("Redid %s (note %s)", command.name, result.id)
        await self._announce("redo", command)
        return result

    def clear(self) -> None:
        """Forget all history."""
        self._done.clear()
        self._undone.clear()

    async def _announce(self, action: str, command: NoteCommand) -> None:
        if self._event_bus is None:
            return
        await self._event_bus.publish(HistoryEvent(
            action=action,
            command=command.name,
            can_undo=self.can_undo,
            can_redo=self.can_redo,
        ))
