"""Buffer assembly and selection updates over rendered dired lines.

A buffer is a header line ``<directory>:`` followed by one encoded entry per
visible child. Selection changes never touch the header: body lines are
decoded, their marker flipped, and re-encoded in place.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .codec import FormatError, decode_line, encode_line
from .types import DOT_ENTRY_NAMES, FileItem

HEADER_LINE_INDEX = 0
FIRST_BODY_LINE = 1


def header_line(dirname: str) -> str:
    return f"{dirname}:"


def directory_from_header(lines: Sequence[str]) -> str | None:
    """Return the directory named by the header, or ``None`` for an empty buffer."""
    if not lines:
        return None
    header = lines[HEADER_LINE_INDEX]
    if not header.endswith(":"):
        return None
    return header[:-1]


def is_visible(item: FileItem, show_dot_files: bool) -> bool:
    """Visibility rule for body rows.

    ``.`` and ``..`` are always hidden; other dot files follow
    ``show_dot_files``.
    """
    if item.name in DOT_ENTRY_NAMES:
        return False
    if show_dot_files:
        return True
    return not item.name.startswith(".")


def build_listing(items: Iterable[FileItem], show_dot_files: bool) -> list[str]:
    """Encode visible ``items`` in their given order."""
    return [encode_line(item) for item in items if is_visible(item, show_dot_files)]


def build_buffer(dirname: str, items: Iterable[FileItem], show_dot_files: bool) -> list[str]:
    return [header_line(dirname), *build_listing(items, show_dot_files)]


@dataclass(frozen=True)
class RangeUpdate:
    """Lines after a range update plus the lines that could not be decoded."""

    lines: list[str]
    errors: tuple[FormatError, ...] = ()

    @property
    def skipped_lines(self) -> tuple[int, ...]:
        return tuple(error.line_index for error in self.errors if error.line_index is not None)


def mark_range(
    lines: Sequence[str],
    start: int,
    end: int,
    value: bool,
    allow_dot_entries: bool,
) -> RangeUpdate:
    """Set the selection flag on body lines in ``[start, end)``.

    Returns a new list of the same length; ``lines`` is never mutated. The
    header is skipped whatever the range, indexes outside the buffer are
    clamped, and ``.``/``..`` rows are left byte-identical unless
    ``allow_dot_entries`` is set. A line that does not decode is left as it
    is and its ``FormatError``, tagged with the line index, is collected.
    """
    out = list(lines)
    errors: list[FormatError] = []
    dirname = directory_from_header(out) or ""
    first = max(FIRST_BODY_LINE, start)
    last = min(len(out), end)
    for index in range(first, last):
        try:
            item = decode_line(dirname, out[index])
        except FormatError as exc:
            errors.append(exc.at_line(index))
            continue
        if item.bare_name in DOT_ENTRY_NAMES and not allow_dot_entries:
            continue
        item.select(value)
        out[index] = encode_line(item)
    return RangeUpdate(out, tuple(errors))


def select_range(
    lines: Sequence[str],
    start: int,
    end: int,
    value: bool,
    allow_dot_entries: bool,
) -> list[str]:
    """``mark_range`` without the error report; undecodable lines stay unchanged."""
    return mark_range(lines, start, end, value, allow_dot_entries).lines


@dataclass(frozen=True)
class SelectionResult:
    """Buffer lines and cursor line after a select/unselect gesture."""

    lines: list[str]
    cursor_line: int
    errors: tuple[FormatError, ...] = ()


def apply_selection_gesture(
    lines: Sequence[str],
    cursor_line: int,
    selection: tuple[int, int] | None,
    value: bool,
) -> SelectionResult:
    """Interpret a select/unselect command against cursor and range state.

    * active range: every line in ``[range start, range end)``, dots skipped
    * cursor on the header: every body line, dots skipped
    * cursor on a body line: just that line, dots allowed, cursor moves down
    """
    if selection is not None and selection[0] != selection[1]:
        start, end = selection
        update = mark_range(lines, start, end, value, False)
        return SelectionResult(update.lines, cursor_line, update.errors)

    if cursor_line <= HEADER_LINE_INDEX:
        update = mark_range(lines, FIRST_BODY_LINE, len(lines), value, False)
        return SelectionResult(update.lines, cursor_line, update.errors)

    update = mark_range(lines, cursor_line, cursor_line + 1, value, True)
    next_line = min(cursor_line + 1, max(0, len(update.lines) - 1))
    return SelectionResult(update.lines, next_line, update.errors)


def cursor_line_for_child(lines: Sequence[str], basename: str) -> int:
    """Line index of the directory row for ``basename``, else the first body row."""
    target = f" {basename}/"
    for index in range(FIRST_BODY_LINE, len(lines)):
        if lines[index].endswith(target):
            return index
    return default_cursor_line(lines)


def default_cursor_line(lines: Sequence[str]) -> int:
    return FIRST_BODY_LINE if len(lines) > FIRST_BODY_LINE else HEADER_LINE_INDEX


def selected_items(lines: Sequence[str]) -> list[FileItem]:
    """Decode body lines and return the marked ones.

    Lines that do not decode are skipped.
    """
    dirname = directory_from_header(lines) or ""
    out: list[FileItem] = []
    for line in lines[FIRST_BODY_LINE:]:
        try:
            item = decode_line(dirname, line)
        except FormatError:
            continue
        if item.selected:
            out.append(item)
    return out


__all__ = [
    "FIRST_BODY_LINE",
    "HEADER_LINE_INDEX",
    "RangeUpdate",
    "SelectionResult",
    "apply_selection_gesture",
    "build_buffer",
    "build_listing",
    "cursor_line_for_child",
    "default_cursor_line",
    "directory_from_header",
    "header_line",
    "is_visible",
    "mark_range",
    "select_range",
    "selected_items",
]
