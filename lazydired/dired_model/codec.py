"""Fixed-column line codec for dired buffer entries.

One entry renders as::

    * drwxr-xr-x owner    group         4096 03 07 14:05 name/

Every field up to the name sits at a fixed column so a line can be parsed
back by slicing. Numeric fields are padded but never truncated, so oversized
values shift the columns that follow them.
"""

from __future__ import annotations

from .types import FileItem

SELECTED_MARKER = "*"
UNSELECTED_MARKER = " "

MARKER_COLUMN = 0
MODE_START = 2
MODE_WIDTH = 10
OWNER_START = 13
GROUP_START = 22
NAME_WIDTH = 8
SIZE_START = 31
SIZE_WIDTH = 8
MONTH_START = 40
DAY_START = 43
HOUR_START = 46
MINUTE_START = 49
TIME_WIDTH = 2
NAME_COLUMN = 52

_NAME_PAD = " " * NAME_WIDTH


class FormatError(ValueError):
    """A line does not follow the fixed-column entry layout."""

    def __init__(self, message: str, line: str, line_index: int | None = None) -> None:
        super().__init__(message)
        self.line = line
        self.line_index = line_index

    def at_line(self, line_index: int) -> FormatError:
        """Return a copy of this error tagged with its buffer line index."""
        return FormatError(str(self), self.line, line_index)


def pad_number(value: int, width: int, pad: str) -> str:
    """Left-pad ``value`` to ``width`` with ``pad``; longer values are kept whole."""
    text = str(value)
    while len(text) < width:
        text = pad + text
    return text


def pad_name(value: str) -> str:
    """Right-pad to the owner/group width, truncating longer names."""
    return (value + _NAME_PAD)[:NAME_WIDTH]


def encode_line(item: FileItem) -> str:
    marker = SELECTED_MARKER if item.selected else UNSELECTED_MARKER
    owner = pad_name(item.owner)
    group = pad_name(item.group)
    size = pad_number(item.size, SIZE_WIDTH, " ")
    month = pad_number(item.month, TIME_WIDTH, "0")
    day = pad_number(item.day, TIME_WIDTH, "0")
    hour = pad_number(item.hour, TIME_WIDTH, "0")
    minute = pad_number(item.minute, TIME_WIDTH, "0")
    name = item.name + "/" if item.is_directory else item.name
    return f"{marker} {item.mode} {owner} {group} {size} {month} {day} {hour}:{minute} {name}"


def _field(line: str, start: int, width: int) -> str:
    return line[start : start + width]


def _parse_int(line: str, field_name: str, start: int, width: int) -> int:
    raw = _field(line, start, width)
    try:
        return int(raw)
    except ValueError:
        raise FormatError(f"invalid {field_name} field {raw!r}", line) from None


def decode_line(dirname: str, line: str) -> FileItem:
    """Parse a rendered entry line back into a ``FileItem``.

    The name is taken verbatim from ``NAME_COLUMN`` onward, so directory
    names keep their trailing ``/``. Owner and group lose their pad spaces.
    """
    if len(line) < NAME_COLUMN:
        raise FormatError(f"line is shorter than {NAME_COLUMN} columns", line)

    mode = _field(line, MODE_START, MODE_WIDTH)
    kind = mode[:1]
    return FileItem(
        dirname=dirname,
        name=line[NAME_COLUMN:],
        is_directory=kind == "d",
        is_file=kind == "-",
        owner=_field(line, OWNER_START, NAME_WIDTH).rstrip(" "),
        group=_field(line, GROUP_START, NAME_WIDTH).rstrip(" "),
        size=_parse_int(line, "size", SIZE_START, SIZE_WIDTH),
        month=_parse_int(line, "month", MONTH_START, TIME_WIDTH),
        day=_parse_int(line, "day", DAY_START, TIME_WIDTH),
        hour=_parse_int(line, "hour", HOUR_START, TIME_WIDTH),
        minute=_parse_int(line, "minute", MINUTE_START, TIME_WIDTH),
        mode=mode,
        selected=line[MARKER_COLUMN] == SELECTED_MARKER,
    )


__all__ = [
    "FormatError",
    "NAME_COLUMN",
    "SELECTED_MARKER",
    "UNSELECTED_MARKER",
    "decode_line",
    "encode_line",
    "pad_name",
    "pad_number",
]
