"""Editor-side collaborators for dired buffers.

``EditorView`` is the narrow surface the provider needs from a host editor:
the document lines, the cursor line, an optional line range, and a way to
replace the whole document. ``BufferView`` keeps that state in memory.

``launch_editor`` runs ``$EDITOR`` on a file while temporarily leaving
raw/alternate-screen TUI mode, returning an error string instead of raising.
"""

from __future__ import annotations

import os
import shlex
import subprocess
from pathlib import Path
from typing import Callable, Protocol


class EditorView(Protocol):
    def lines(self) -> list[str]: ...

    def cursor_line(self) -> int: ...

    def selection_range(self) -> tuple[int, int] | None: ...

    def set_cursor_line(self, line: int) -> None: ...

    def replace_lines(self, lines: list[str]) -> None: ...


class BufferView:
    """In-memory document with a cursor and an optional range anchor.

    The active range runs from the anchor to the cursor, both ends
    included, and is reported half-open as ``(start, end)``.
    """

    def __init__(self, lines: list[str] | None = None, cursor: int = 0) -> None:
        self._lines: list[str] = list(lines or [])
        self._cursor = 0
        self._anchor: int | None = None
        self.set_cursor_line(cursor)

    def lines(self) -> list[str]:
        return list(self._lines)

    def cursor_line(self) -> int:
        return self._cursor

    def selection_range(self) -> tuple[int, int] | None:
        if self._anchor is None:
            return None
        start = min(self._anchor, self._cursor)
        end = max(self._anchor, self._cursor) + 1
        return start, end

    def set_cursor_line(self, line: int) -> None:
        self._cursor = max(0, min(line, len(self._lines) - 1)) if self._lines else 0

    def move_cursor(self, delta: int) -> bool:
        previous = self._cursor
        self.set_cursor_line(self._cursor + delta)
        return self._cursor != previous

    def replace_lines(self, lines: list[str]) -> None:
        self._lines = list(lines)
        self.set_cursor_line(self._cursor)
        if self._anchor is not None and self._anchor >= len(self._lines):
            self._anchor = None

    @property
    def range_active(self) -> bool:
        return self._anchor is not None

    def toggle_anchor(self) -> None:
        self._anchor = None if self._anchor is not None else self._cursor

    def clear_anchor(self) -> None:
        self._anchor = None

    def text(self) -> str:
        return "\n".join(self._lines)


def launch_editor(
    target: Path,
    disable_tui_mode: Callable[[], None],
    enable_tui_mode: Callable[[], None],
) -> str | None:
    editor_env = os.environ.get("EDITOR", "").strip()
    if not editor_env:
        return "Cannot edit: $EDITOR is not set."
    cmd = shlex.split(editor_env)
    if not cmd:
        return "Cannot edit: $EDITOR is empty."

    disable_tui_mode()
    try:
        subprocess.run([*cmd, str(target)], check=False)
    except Exception as exc:
        return f"Failed to launch editor: {exc}"
    finally:
        enable_tui_mode()
    return None
