"""Note colour palette."""

from enum import Enum


class NoteColor(Enum):
    """Colours a note can be painted with, in display order."""

    DEFAULT = "#333333"
    YELLOW = "#FDBE3B"
    RED = "#FF4842"
    BLUE = "#3A52FC"
    GREEN = "#17C51E"
    PURPLE = "#AF00FF"

    @property
    def rank(self) -> int:
        """Position of this colour in the palette."""
        return list(NoteColor).index(self)


DEFAULT_COLOR = NoteColor.DEFAULT.value

_BY_CODE: dict[str, NoteColor] = {color.value.upper(): color for color in NoteColor}


def lookup_color(code: str | None) -> NoteColor | None:
    """Find the palette entry for a colour code, or None if it is not one."""
    if not code:
        return None
    return _BY_CODE.get(code.strip().upper())


def resolve_color(code: str | None) -> NoteColor:
    """Resolve a stored colour code for rendering; unknown codes fall back to default."""
    return lookup_color(code) or NoteColor.DEFAULT


def palette_codes() -> list[str]:
    """Get all colour codes in palette order."""
    return [color.value for color in NoteColor]
