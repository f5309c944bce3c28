"""Screen composition for the dired TUI.

Pure helpers: they take rendered rows plus cursor/range state and return the
escape-sequence payload for one full repaint. Nothing here touches the tty.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8

CURSOR_STYLE = "\x1b[7m"
RANGE_STYLE = "\x1b[48;5;238m"
STATUS_STYLE = "\x1b[1m"
ERROR_STYLE = "\x1b[1;31m"
RESET = "\x1b[0m"


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``."""
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    ANSI escape sequences are preserved verbatim and do not count toward width.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n and col < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch, col)
        if col + w > max_cols:
            break
        out.append(" " * w if ch == "\t" else ch)
        col += w
        i += 1

    return "".join(out)


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def scroll_start_for_cursor(start: int, cursor: int, visible_rows: int, total: int) -> int:
    """Smallest scroll change that keeps ``cursor`` on screen."""
    visible_rows = max(1, visible_rows)
    if cursor < start:
        start = cursor
    elif cursor >= start + visible_rows:
        start = cursor - visible_rows + 1
    max_start = max(0, total - visible_rows)
    return max(0, min(start, max_start))


def build_frame(
    rows: list[str],
    cursor: int,
    selection: tuple[int, int] | None,
    start: int,
    columns: int,
    height: int,
    status: str,
    status_is_error: bool = False,
) -> str:
    """Compose one repaint: content rows, then a status row at the bottom.

    The cursor row is shown in reverse video without syntax colors; rows in
    the active range get a background tint.
    """
    out: list[str] = ["\x1b[H"]
    content_rows = max(1, height - 1)
    for screen_row in range(content_rows):
        index = start + screen_row
        out.append(f"\x1b[{screen_row + 1};1H\x1b[2K")
        if index >= len(rows):
            continue
        row = rows[index]
        if index == cursor:
            plain = clip_ansi_line(strip_ansi(row), columns)
            out.append(CURSOR_STYLE + plain.ljust(columns) + RESET)
        elif selection is not None and selection[0] <= index < selection[1]:
            out.append(RANGE_STYLE + clip_ansi_line(row, columns).replace(RESET, RESET + RANGE_STYLE) + RESET)
        else:
            out.append(clip_ansi_line(row, columns) + RESET)

    style = ERROR_STYLE if status_is_error else STATUS_STYLE
    out.append(f"\x1b[{content_rows + 1};1H\x1b[2K")
    out.append(style + clip_ansi_line(status, columns) + RESET)
    return "".join(out)
