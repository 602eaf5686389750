"""Tests for the recycling notes adapter."""

from unittest.mock import Mock

import pytest

from mynotes.events import EventBus, NoteCreated, NoteDeleted, NoteUpdated
from mynotes.presentation.adapter import NotesAdapter, diff_rows
from mynotes.presentation.sorting import TitleSorter

from tests.fixtures import apply_changes, stored_note


def ids(notes) -> list[int]:
    return [note.id for note in notes]


class TestDiffRows:
    """Replaying notifications on the old rows yields the new rows."""

    @pytest.mark.parametrize(
        "old_ids,new_ids",
        [
            ([], []),
            ([], [1, 2, 3]),
            ([1, 2, 3], []),
            ([1, 2, 3], [3, 2, 1]),
            ([1, 2, 3, 4], [2, 4]),
            ([1, 2, 3], [4, 1, 5, 3]),
            ([5, 1, 4, 2], [2, 5, 6, 1]),
        ],
    )
    def test_replay_reproduces_new_rows(self, old_ids, new_ids):
        old = [stored_note(i, title=f"n{i}") for i in old_ids]
        new = [stored_note(i, title=f"n{i}") for i in new_ids]

        changes = diff_rows(old, new)

        assert apply_changes(old, changes) == new

    def test_identical_rows_produce_nothing(self):
        rows = [stored_note(1), stored_note(2)]
        assert diff_rows(rows, list(rows)) == []

    def test_content_change_is_reported_in_place(self):
        old = [stored_note(1, title="a"), stored_note(2, title="b")]
        new = [old[0], old[1].with_changes(title="B")]

        changes = diff_rows(old, new)

        assert [(c.kind, c.position) for c in changes] == [("changed", 1)]
        assert apply_changes(old, changes) == new


class TestNotesAdapter:
    """Mirror, filter and sort."""

    def test_set_notes_orders_by_recency(self):
        adapter = NotesAdapter()
        older = stored_note(1, minutes=0)
        newer = stored_note(2, minutes=5)

        adapter.set_notes([older, newer])

        assert ids(adapter.notes) == [2, 1]
        assert adapter.item_count == 2
        assert adapter.get_item(0) == newer
        assert adapter.position_of(1) == 1
        assert adapter.position_of(99) is None

    def test_observers_receive_replayable_batches(self):
        adapter = NotesAdapter()
        seen = list(adapter.notes)
        batches = []

        def observer(changes):
            batches.append(changes)
            seen[:] = apply_changes(seen, changes)

        adapter.add_observer(observer)
        adapter.set_notes([stored_note(1, minutes=1), stored_note(2, minutes=2)])
        adapter.set_notes([stored_note(2, minutes=2), stored_note(3, minutes=3)])

        assert len(batches) == 2
        assert seen == list(adapter.notes)

        adapter.remove_observer(observer)
        adapter.set_notes([])
        assert len(batches) == 2

    def test_events_update_rows(self):
        adapter = NotesAdapter()
        first = stored_note(1, minutes=0)
        adapter.set_notes([first])

        adapter.on_note_event(NoteCreated(note_id=2, note=stored_note(2, minutes=1)))
        assert ids(adapter.notes) == [2, 1]

        touched = stored_note(1, title="edited", minutes=2)
        adapter.on_note_event(NoteUpdated(note_id=1, note=touched))
        assert ids(adapter.notes) == [1, 2]
        assert adapter.get_item(0).title == "edited"

        adapter.on_note_event(NoteDeleted(note_id=2))
        assert ids(adapter.notes) == [1]

    def test_unknown_delete_is_ignored(self):
        adapter = NotesAdapter()
        observer = Mock()
        adapter.add_observer(observer)

        adapter.on_note_event(NoteDeleted(note_id=42))

        observer.assert_not_called()

    def test_query_filters_rows(self):
        adapter = NotesAdapter()
        adapter.set_notes([
            stored_note(1, title="Shopping", body="bread"),
            stored_note(2, title="Work", body="Quarterly report"),
            stored_note(3, title="Misc", subtitle="report ideas", body=""),
        ])

        adapter.set_query("REPORT")
        assert sorted(ids(adapter.notes)) == [2, 3]
        assert adapter.query == "REPORT"

        adapter.set_query("  ")
        assert adapter.item_count == 3

    def test_query_folds_non_ascii_case(self):
        adapter = NotesAdapter()
        adapter.set_notes([stored_note(1, title="CAFÉ crème"), stored_note(2, title="Cafeteria")])

        adapter.set_query("café")

        assert ids(adapter.notes) == [1]

    def test_events_respect_active_query(self):
        adapter = NotesAdapter()
        adapter.set_query("trip")

        adapter.on_note_event(NoteCreated(note_id=1, note=stored_note(1, title="Budget")))
        adapter.on_note_event(NoteCreated(note_id=2, note=stored_note(2, title="Trip plan")))

        assert ids(adapter.notes) == [2]

    def test_sorter_changes_order(self):
        adapter = NotesAdapter()
        adapter.set_notes([
            stored_note(1, title="banana", minutes=2),
            stored_note(2, title="Apple", minutes=1),
            stored_note(3, title="cherry", minutes=3),
        ])

        changes = adapter.set_sorter(TitleSorter())

        assert [n.title for n in adapter.notes] == ["Apple", "banana", "cherry"]
        assert all(change.kind == "moved" for change in changes)


class TestRowViews:
    """Binding and recycling row views."""

    def test_bind_fills_display_fields(self):
        adapter = NotesAdapter()
        adapter.set_notes([
            stored_note(1, title="Plain", subtitle="  "),
            stored_note(2, title="Fancy", subtitle="with image", color="#fdbe3b",
                        image_path="/img.png", minutes=1),
        ])

        fancy = adapter.bind(0)
        plain = adapter.bind(1)

        assert fancy.title == "Fancy"
        assert fancy.subtitle_visible is True
        assert fancy.color == "#FDBE3B"
        assert fancy.image_visible is True
        assert fancy.date_text
        assert plain.subtitle_visible is False
        assert plain.color == "#333333"
        assert plain.image_visible is False

    def test_recycled_views_are_reused(self):
        adapter = NotesAdapter(pool_size=1)
        adapter.set_notes([stored_note(1), stored_note(2, minutes=1)])

        view = adapter.bind(0)
        adapter.recycle(view)

        assert view.note_id is None
        assert adapter.pooled_views == 1
        assert adapter.bind(1) is view
        assert adapter.pooled_views == 0

    def test_pool_is_bounded(self):
        adapter = NotesAdapter(pool_size=1)
        adapter.set_notes([stored_note(1), stored_note(2, minutes=1)])

        first = adapter.bind(0)
        second = adapter.bind(1)
        adapter.recycle(first)
        adapter.recycle(second)

        assert adapter.pooled_views == 1

    def test_bound_views_follow_changes(self):
        adapter = NotesAdapter()
        adapter.set_notes([stored_note(1, title="one")])
        view = adapter.bind(0)

        adapter.on_note_event(NoteUpdated(note_id=1, note=stored_note(1, title="uno", minutes=1)))

        assert view.title == "uno"

    def test_bound_view_recycled_when_row_disappears(self):
        adapter = NotesAdapter()
        adapter.set_notes([stored_note(1), stored_note(2, minutes=1)])
        adapter.bind(1)

        adapter.on_note_event(NoteDeleted(note_id=1))

        assert adapter.pooled_views == 1


class TestClicksAndBus:
    """Click listener and event bus wiring."""

    def test_click_delivers_note_and_position(self):
        adapter = NotesAdapter()
        note = stored_note(7)
        adapter.set_notes([note])
        listener = Mock()
        adapter.set_click_listener(listener)

        adapter.click(0)

        listener.assert_called_once_with(note, 0)

    def test_click_without_listener_does_nothing(self):
        adapter = NotesAdapter()
        adapter.set_notes([stored_note(1)])
        adapter.click(0)

    @pytest.mark.asyncio
    async def test_attach_follows_bus(self):
        bus = EventBus()
        await bus.start()
        adapter = NotesAdapter()
        adapter.attach(bus)

        await bus.publish(NoteCreated(note_id=1, note=stored_note(1)))
        await bus.wait_empty()
        assert ids(adapter.notes) == [1]

        adapter.detach(bus)
        await bus.publish(NoteDeleted(note_id=1))
        await bus.wait_empty()
        assert ids(adapter.notes) == [1]

        await bus.stop()
