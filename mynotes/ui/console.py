"""Plain-text rendering of the screens for the terminal front end."""

from mynotes.presentation.adapter import NotesAdapter, NoteRowView
from mynotes.ui.editor_screen import NoteEditorController
from mynotes.ui.list_screen import NoteListController


def render_row(view: NoteRowView) -> str:
    lines = [f"[{view.note_id}] {view.title or '(untitled)'}  {view.color}"]
    if view.subtitle_visible:
        lines.append(f"    {view.subtitle}")
    lines.append(f"    {view.date_text}")
    if view.image_visible:
        lines.append(f"    image: {view.image_path}")
    if view.web_link:
        lines.append(f"    link: {view.web_link}")
    return "\n".join(lines)


def render_rows(adapter: NotesAdapter) -> str:
    """Render every visible row, recycling views as a scrolling list would."""
    if adapter.item_count == 0:
        return "No notes."
    parts = []
    for position in range(adapter.item_count):
        view = adapter.bind(position)
        parts.append(render_row(view))
        adapter.recycle(view)
    return "\n".join(parts)


def render_list(screen: NoteListController) -> str:
    header = f"Notes ({screen.adapter.item_count}) - sorted by {screen.sort_order}"
    if screen.adapter.query:
        header += f", matching {screen.adapter.query!r}"
    parts = [header, "-" * len(header), render_rows(screen.adapter)]
    if screen.message:
        parts.append(f"\n! {screen.message}")
    return "\n".join(parts)


def render_note(editor: NoteEditorController) -> str:
    fields = editor.fields
    lines = [
        f"Title:    {fields['title']}",
        f"Subtitle: {fields['subtitle']}",
        f"Date:     {editor.date_text}",
        f"Color:    {fields['color']}",
    ]
    if fields.get("image_path"):
        lines.append(f"Image:    {fields['image_path']}")
    if fields.get("web_link"):
        lines.append(f"Link:     {fields['web_link']}")
    lines.append("")
    lines.append(str(fields["body"]))
    return "\n".join(lines)


def render_errors(editor: NoteEditorController) -> str:
    lines = [f"{name}: {message}" for name, message in editor.errors.items()]
    if editor.message:
        lines.append(editor.message)
    return "\n".join(lines)
