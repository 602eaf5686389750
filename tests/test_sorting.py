"""Tests for sort orders and their registry."""

from typing import Any

import pytest

from mynotes.notes.types import Note
from mynotes.presentation.sorting import (
    SORTER_REGISTRY,
    ColorSorter,
    DateSorter,
    NoteSorter,
    TitleSorter,
    create_sorter,
    get_available_sorters,
    register_sorter,
)

from tests.fixtures import stored_note


def test_get_available_sorters():
    """Test listing available sort orders."""
    print("\n" + "=" * 60)
    print("Test: Get Available Sort Orders")
    print("=" * 60)

    sorters = get_available_sorters()
    print(f"Available sort orders: {sorters}")

    assert sorters == ["color", "date", "title"]
    print("✅ PASS: date, title and color are available")


def test_create_sorter():
    """Test creating a sort order by name."""
    print("\n" + "=" * 60)
    print("Test: Create Sort Order")
    print("=" * 60)

    sorter = create_sorter("title")
    print(f"Created sort order: {sorter.name}")

    assert isinstance(sorter, NoteSorter)
    assert isinstance(sorter, TitleSorter)
    assert sorter.name == "title"
    print("✅ PASS: Sort order created successfully")


def test_create_unknown_sorter():
    """Test that an unknown sort order raises a helpful error."""
    print("\n" + "=" * 60)
    print("Test: Create Unknown Sort Order")
    print("=" * 60)

    with pytest.raises(ValueError) as exc_info:
        create_sorter("priority")

    print(f"Error message: {exc_info.value}")
    assert "not found" in str(exc_info.value)
    assert "date" in str(exc_info.value)
    print("✅ PASS: ValueError raised with helpful message")


def test_register_custom_sorter():
    """Test registering a custom sort order."""
    print("\n" + "=" * 60)
    print("Test: Register Custom Sort Order")
    print("=" * 60)

    class OldestFirst(NoteSorter):
        @property
        def name(self) -> str:
            return "oldest"

        def key(self, note: Note) -> Any:
            return (note.created_at, note.id)

    register_sorter("oldest", OldestFirst)
    try:
        assert "oldest" in get_available_sorters()
        sorter = create_sorter("oldest")
        notes = sorter.sort([stored_note(2, minutes=5), stored_note(1, minutes=0)])
        assert [n.id for n in notes] == [1, 2]
        print("✅ PASS: Custom sort order registered and created")
    finally:
        SORTER_REGISTRY.pop("oldest", None)


def test_register_duplicate_sorter():
    """Test that duplicate registration raises error."""
    with pytest.raises(ValueError):
        register_sorter("date", DateSorter)


def test_register_non_sorter():
    """Test that only NoteSorter subclasses can be registered."""
    with pytest.raises(TypeError):
        register_sorter("bogus", dict)
    assert "bogus" not in SORTER_REGISTRY


class TestSortOrders:
    """Ordering rules."""

    def test_date_most_recent_first_ties_by_id(self):
        notes = [
            stored_note(1, minutes=0),
            stored_note(2, minutes=10),
            stored_note(3, minutes=10),
        ]

        assert [n.id for n in DateSorter().sort(notes)] == [3, 2, 1]

    def test_title_ignores_case_and_ties_by_recency(self):
        notes = [
            stored_note(1, title="beta", minutes=0),
            stored_note(2, title="Alpha", minutes=0),
            stored_note(3, title="alpha", minutes=5),
        ]

        assert [n.id for n in TitleSorter().sort(notes)] == [3, 2, 1]

    def test_color_follows_palette_order(self):
        notes = [
            stored_note(1, color="#AF00FF"),
            stored_note(2, color="#FDBE3B"),
            stored_note(3, color="#123456"),
            stored_note(4, color="#fdbe3b", minutes=1),
        ]

        # Unknown colours render as the default and sort with it
        assert [n.id for n in ColorSorter().sort(notes)] == [3, 4, 2, 1]

    def test_sort_returns_new_list(self):
        notes = [stored_note(1), stored_note(2, minutes=1)]
        result = DateSorter().sort(notes)

        assert result is not notes
        assert [n.id for n in notes] == [1, 2]
