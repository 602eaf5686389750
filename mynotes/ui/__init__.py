"""Screen controllers and their terminal rendering."""

from mynotes.ui.editor_screen import NoteEditorController
from mynotes.ui.list_screen import NoteListController

__all__ = ["NoteEditorController", "NoteListController"]
