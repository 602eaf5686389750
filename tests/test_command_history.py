"""Tests for undoable commands and the command history."""

import pytest
import pytest_asyncio

from mynotes.errors import NotFoundError
from mynotes.events import HistoryEvent
from mynotes.history import (
    AddNoteCommand,
    CommandHistory,
    DeleteNoteCommand,
    EditNoteCommand,
)

from tests.fixtures import NotesStack, make_note


@pytest_asyncio.fixture
async def stack(tmp_path):
    stack = await NotesStack(tmp_path / "notes.db").start()
    yield stack
    await stack.stop()


async def titles(stack) -> list[str]:
    return [note.title for note in await stack.repo.list_notes()]


class TestUndoRedo:
    """Each command restores the prior state on undo."""

    @pytest.mark.asyncio
    async def test_undo_add_deletes_and_redo_keeps_id(self, stack):
        command = AddNoteCommand(stack.repo, make_note(title="Draft"))
        created = await stack.history.execute(command)

        await stack.history.undo()
        assert await stack.repo.list_notes() == []

        redone = await stack.history.redo()
        assert redone.id == created.id
        assert await titles(stack) == ["Draft"]

    @pytest.mark.asyncio
    async def test_undo_edit_writes_previous_values(self, stack):
        original = await stack.repo.create(make_note(title="v1", body="first"))
        edited = original.with_changes(title="v2", body="second", color="#FF4842")
        await stack.history.execute(EditNoteCommand(stack.repo, original, edited))

        restored = await stack.history.undo()

        assert restored.id == original.id
        assert restored.editable_values() == original.editable_values()
        assert restored.updated_at > original.updated_at

        again = await stack.history.redo()
        assert again.title == "v2"
        assert again.color == "#FF4842"

    @pytest.mark.asyncio
    async def test_undo_delete_restores_same_note(self, stack):
        original = await stack.repo.create(make_note(title="Keep me"))
        await stack.history.execute(DeleteNoteCommand(stack.repo, original.id))
        assert await stack.repo.count() == 0

        restored = await stack.history.undo()

        assert restored == original
        assert await stack.repo.get(original.id) == original

    @pytest.mark.asyncio
    async def test_edit_requires_same_note(self, stack):
        first = await stack.repo.create(make_note(title="a"))
        second = await stack.repo.create(make_note(title="b"))

        with pytest.raises(ValueError):
            EditNoteCommand(stack.repo, first, second)
        with pytest.raises(ValueError):
            EditNoteCommand(stack.repo, make_note(), make_note())


class TestCommandHistory:
    """Stack bookkeeping."""

    @pytest.mark.asyncio
    async def test_empty_history_is_a_no_op(self, stack):
        assert stack.history.can_undo is False
        assert stack.history.can_redo is False
        assert await stack.history.undo() is None
        assert await stack.history.redo() is None

    @pytest.mark.asyncio
    async def test_new_command_clears_redo(self, stack):
        await stack.history.execute(AddNoteCommand(stack.repo, make_note(title="a")))
        await stack.history.undo()
        assert stack.history.can_redo

        await stack.history.execute(AddNoteCommand(stack.repo, make_note(title="b")))

        assert stack.history.can_redo is False
        assert await titles(stack) == ["b"]

    @pytest.mark.asyncio
    async def test_depth_is_bounded(self, stack):
        history = CommandHistory(max_depth=2)
        for title in ("a", "b", "c"):
            await history.execute(AddNoteCommand(stack.repo, make_note(title=title)))

        await history.undo()
        await history.undo()

        assert await history.undo() is None
        assert await titles(stack) == ["a"]

    @pytest.mark.asyncio
    async def test_failed_undo_drops_command(self, stack):
        note = await stack.history.execute(AddNoteCommand(stack.repo, make_note()))
        # Deleted behind the history's back
        await stack.repo.delete(note.id)

        with pytest.raises(NotFoundError):
            await stack.history.undo()

        assert stack.history.can_undo is False
        assert stack.history.can_redo is False

    @pytest.mark.asyncio
    async def test_history_events_published(self, stack):
        events = []
        stack.event_bus.subscribe(HistoryEvent, events.append)

        await stack.history.execute(AddNoteCommand(stack.repo, make_note()))
        await stack.history.undo()
        await stack.history.redo()
        await stack.event_bus.wait_empty()

        assert [(e.action, e.command) for e in events] == [
            ("execute", "add"),
            ("undo", "add"),
            ("redo", "add"),
        ]
        assert events[1].can_undo is False
        assert events[1].can_redo is True

    @pytest.mark.asyncio
    async def test_clear(self, stack):
        await stack.history.execute(AddNoteCommand(stack.repo, make_note()))

        stack.history.clear()

        assert stack.history.can_undo is False
