"""mynotes - local note keeping, terminal entry point."""

import argparse
import asyncio
import sys
from pathlib import Path

from mynotes.app import Application
from mynotes.config import Settings, load_settings
from mynotes.errors import NotesError
from mynotes.presentation.sorting import get_available_sorters
from mynotes.ui.console import render_errors, render_list, render_note
from mynotes.ui.editor_screen import NoteEditorController


def _add_note_fields(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--title", type=str, default=None, help="Note title")
    parser.add_argument("--subtitle", type=str, default=None, help="Note subtitle")
    parser.add_argument("--body", type=str, default=None, help="Note text ('-' reads stdin)")
    parser.add_argument("--color", type=str, default=None, help="Palette colour code, e.g. #FDBE3B")
    parser.add_argument("--image", type=str, default=None, help="Path of an image to attach")
    parser.add_argument("--link", type=str, default=None, help="Web link to attach")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="mynotes - keep notes in a local database"
    )

    parser.add_argument(
        "--db",
        type=str,
        default=None,
        help="Database path (default: from config)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level (default: from config)",
    )

    parser.add_argument(
        "--list-sorters",
        action="store_true",
        help="List available sort orders and exit",
    )

    commands = parser.add_subparsers(dest="command")

    list_parser = commands.add_parser("list", help="Show notes")
    list_parser.add_argument("--sort", type=str, default=None, help="Sort order (default: from config)")
    list_parser.add_argument("--search", type=str, default=None, help="Only notes containing this text")

    add_parser = commands.add_parser("add", help="Create a note")
    _add_note_fields(add_parser)

    edit_parser = commands.add_parser("edit", help="Change a note")
    edit_parser.add_argument("note_id", type=int)
    _add_note_fields(edit_parser)
    edit_parser.add_argument("--no-image", action="store_true", help="Remove the attached image")
    edit_parser.add_argument("--no-link", action="store_true", help="Remove the web link")

    show_parser = commands.add_parser("show", help="Show one note")
    show_parser.add_argument("note_id", type=int)

    delete_parser = commands.add_parser("delete", help="Delete a note")
    delete_parser.add_argument("note_id", type=int)

    return parser.parse_args(argv)


def apply_args_to_settings(args: argparse.Namespace, settings: Settings) -> Settings:
    """Apply command line arguments to settings."""
    if args.db:
        settings.database.path = Path(args.db)

    if args.log_level:
        settings.logging.level = args.log_level

    if getattr(args, "sort", None):
        settings.list_screen.default_sort = args.sort

    return settings


def fill_editor(editor: NoteEditorController, args: argparse.Namespace) -> bool:
    """Copy note fields from the command line into the editor form."""
    for name, arg in (("title", args.title), ("subtitle", args.subtitle)):
        if arg is not None:
            editor.set_field(name, arg)

    if args.body is not None:
        editor.set_field("body", sys.stdin.read() if args.body == "-" else args.body)

    if args.color is not None:
        try:
            editor.select_color(args.color)
        except ValueError as e:
            editor.errors["color"] = str(e)
            return False

    if getattr(args, "no_image", False):
        editor.remove_image()
    elif args.image is not None:
        editor.attach_image(args.image)

    if getattr(args, "no_link", False):
        editor.remove_web_link()
    elif args.link is not None and not editor.add_web_link(args.link):
        return False

    return True


async def cmd_list(app: Application, args: argparse.Namespace) -> int:
    screen = app.list_screen()
    await screen.open()
    await app.settle()
    if args.search:
        screen.apply_search(args.search)
    print(render_list(screen))
    return 1 if screen.message else 0


async def cmd_save(app: Application, editor: NoteEditorController, args: argparse.Namespace) -> int:
    if fill_editor(editor, args):
        editor.save()
        await app.settle()
    if editor.errors or editor.message:
        print(render_errors(editor), file=sys.stderr)
        return 1
    print(f"Saved note {editor.note.id}")
    return 0


async def cmd_show(app: Application, args: argparse.Namespace) -> int:
    editor = await app.open_editor(args.note_id)
    print(render_note(editor))
    return 0


async def cmd_delete(app: Application, args: argparse.Namespace) -> int:
    editor = await app.open_editor(args.note_id)
    editor.delete()
    await app.settle()
    if editor.message:
        print(editor.message, file=sys.stderr)
        return 1
    print(f"Deleted note {args.note_id}")
    return 0


async def async_main(settings: Settings, args: argparse.Namespace) -> int:
    """Async main entry point."""
    try:
        async with Application(settings) as app:
            if args.command == "add":
                return await cmd_save(app, app.editor(), args)
            if args.command == "edit":
                return await cmd_save(app, await app.open_editor(args.note_id), args)
            if args.command == "show":
                return await cmd_show(app, args)
            if args.command == "delete":
                return await cmd_delete(app, args)
            return await cmd_list(app, args)
    except NotesError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    if args.list_sorters:
        print("Available sort orders:")
        for name in get_available_sorters():
            print(f"  - {name}")
        return 0

    settings = load_settings()
    settings = apply_args_to_settings(args, settings)

    if settings.list_screen.default_sort not in get_available_sorters():
        print(
            f"Unknown sort order: {settings.list_screen.default_sort} "
            f"(available: {', '.join(get_available_sorters())})",
            file=sys.stderr,
        )
        return 1

    return asyncio.run(async_main(settings, args))


if __name__ == "__main__":
    sys.exit(main())
