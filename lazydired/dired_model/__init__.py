"""Domain model for dired buffers.

This package contains the non-UI pieces:
- the ``FileItem`` entry datatype
- the fixed-column line codec
- directory reads with cached owner/group resolution
- buffer assembly and selection updates over rendered lines
"""

from __future__ import annotations

from .types import DIRED_SCHEME, DOT_ENTRY_NAMES, FileItem, directory_uri
from .codec import FormatError, NAME_COLUMN, decode_line, encode_line
from .identity import IDResolver, default_resolver
from .fs import DirectoryRead, EntryWarning, file_item_from_stat, read_directory
from .listing import (
    FIRST_BODY_LINE,
    HEADER_LINE_INDEX,
    RangeUpdate,
    SelectionResult,
    apply_selection_gesture,
    build_buffer,
    build_listing,
    cursor_line_for_child,
    default_cursor_line,
    directory_from_header,
    header_line,
    mark_range,
    select_range,
    selected_items,
)

__all__ = [
    "DIRED_SCHEME",
    "DOT_ENTRY_NAMES",
    "FileItem",
    "directory_uri",
    "FormatError",
    "NAME_COLUMN",
    "decode_line",
    "encode_line",
    "IDResolver",
    "default_resolver",
    "DirectoryRead",
    "EntryWarning",
    "file_item_from_stat",
    "read_directory",
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
    "mark_range",
    "select_range",
    "selected_items",
]
