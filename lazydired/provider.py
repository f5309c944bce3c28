"""Dired buffer controller.

``DiredProvider`` owns the rendered lines of the open directory and drives the
collaborators around them: directory reads, the editor view showing the
buffer, the file opener, and the message channel. Every rebuild replaces the
view's lines in one step and then notifies subscribers with the buffer URI.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

from .dired_model import (
    FileItem,
    FormatError,
    IDResolver,
    apply_selection_gesture,
    build_buffer,
    cursor_line_for_child,
    decode_line,
    default_cursor_line,
    directory_from_header,
    directory_uri,
    read_directory,
    selected_items,
)
from .dired_model.types import DIRED_SCHEME
from .editor import EditorView
from .messages import MessageChannel

FIXED_URI = f"{DIRED_SCHEME}://fixed_window"

FileOpener = Callable[[Path], str | None]
ChangeListener = Callable[[str], None]


class DiredProvider:
    def __init__(
        self,
        view: EditorView,
        messages: MessageChannel | None = None,
        show_dot_files: bool = True,
        open_file: FileOpener | None = None,
        resolver: IDResolver | None = None,
    ) -> None:
        self.view = view
        self.messages = messages if messages is not None else MessageChannel()
        self.show_dot_files = show_dot_files
        self._open_file = open_file
        self._resolver = resolver
        self._listeners: list[ChangeListener] = []

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """Register a change listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _fire(self) -> None:
        uri = self.uri
        for listener in list(self._listeners):
            listener(uri)

    @property
    def dirname(self) -> str | None:
        return directory_from_header(self.view.lines())

    @property
    def uri(self) -> str:
        dirname = self.dirname
        if dirname:
            return directory_uri(dirname)
        return FIXED_URI

    def render(self) -> str:
        return "\n".join(self.view.lines())

    def provide_content(self, uri: str) -> str:
        """Content for ``uri``; there is a single shared buffer, so ``uri`` is unused."""
        return self.render()

    def create_buffer(self, dirname: str) -> list[str]:
        """Read ``dirname`` and return its buffer lines, reporting read problems."""
        items: tuple[FileItem, ...] = ()
        if os.path.isdir(dirname):
            result = read_directory(dirname, self._resolver)
            if result.scan_error is not None:
                self.messages.error(f"Could not read {dirname}: {result.scan_error}")
            for warning in result.warnings:
                self.messages.warning(warning.message())
            items = result.items
        else:
            self.messages.error(f"Could not read {dirname}: not a directory")
        return build_buffer(dirname, items, self.show_dot_files)

    def _show(self, lines: list[str], cursor_line: int) -> None:
        self.view.replace_lines(lines)
        self.view.set_cursor_line(cursor_line)
        self._fire()

    def reload(self) -> None:
        dirname = self.dirname
        if not dirname:
            return
        cursor = self.view.cursor_line()
        self._show(self.create_buffer(dirname), cursor)

    def open_dir(self, path: str, focus_child: str | None = None) -> None:
        """Show ``path``; the cursor lands on ``focus_child`` when it is listed."""
        lines = self.create_buffer(path)
        if focus_child is not None:
            cursor = cursor_line_for_child(lines, focus_child)
        else:
            cursor = default_cursor_line(lines)
        self._show(lines, cursor)

    def toggle_dot_files(self) -> bool:
        self.show_dot_files = not self.show_dot_files
        self.reload()
        return self.show_dot_files

    def current_item(self) -> FileItem | None:
        """Decode the line under the cursor; the header yields ``None``."""
        dirname = self.dirname
        cursor = self.view.cursor_line()
        lines = self.view.lines()
        if dirname is None or cursor < 1 or cursor >= len(lines):
            return None
        try:
            return decode_line(dirname, lines[cursor])
        except FormatError as exc:
            self.messages.error(f"Cannot parse line {cursor + 1}: {exc}")
            return None

    def enter(self) -> None:
        item = self.current_item()
        if item is None or item.uri is None:
            return
        if item.is_directory:
            self.open_dir(item.path)
            return
        self.show_file(Path(item.path))

    def show_file(self, path: Path) -> None:
        if self._open_file is None:
            self.messages.info(f"No file opener for {path}")
            return
        error = self._open_file(path)
        if error:
            self.messages.error(f"Could not open file {path}: {error}")

    def go_up_dir(self) -> None:
        dirname = self.dirname
        if not dirname or dirname == "/":
            return
        basename = os.path.basename(os.path.normpath(dirname))
        parent = os.path.normpath(os.path.join(dirname, ".."))
        self.open_dir(parent, focus_child=basename)

    def create_dir(self, name: str) -> None:
        dirname = self.dirname
        if not dirname:
            return
        target = os.path.join(dirname, name)
        try:
            os.mkdir(target)
        except OSError as exc:
            self.messages.error(f"Could not create directory {target}: {exc}")
            return
        self.reload()

    def create_file(self, name: str) -> None:
        """Create an empty file (absolute names are used as-is) and open it."""
        dirname = self.dirname
        if not dirname:
            return
        target = Path(os.path.join(dirname, name))
        try:
            target.touch(exist_ok=True)
        except OSError as exc:
            self.messages.error(f"Could not create file {target}: {exc}")
            return
        self.reload()
        if self._open_file is not None:
            self.show_file(target)

    def rename(self, new_name: str) -> str | None:
        """Report the rename target for the item under the cursor.

        Moving the file is not performed; the resolved target is returned.
        """
        item = self.current_item()
        dirname = self.dirname
        if item is None or not dirname:
            return None
        target = os.path.join(dirname, new_name)
        self.reload()
        self.messages.info(f"{item.bare_name} is renamed to {target}")
        return target

    def copy(self, new_name: str) -> str | None:
        """Report the copy target for the item under the cursor.

        Copying the file is not performed; the resolved target is returned.
        """
        item = self.current_item()
        dirname = self.dirname
        if item is None or not dirname:
            return None
        target = os.path.join(dirname, new_name)
        self.messages.info(f"{item.bare_name} is copied to {target}")
        return target

    def delete(self) -> bool:
        """Unlink the single file under the cursor and reload."""
        item = self.current_item()
        dirname = self.dirname
        if item is None or not dirname:
            return False
        target = os.path.join(dirname, item.bare_name)
        try:
            os.unlink(target)
        except OSError as exc:
            self.messages.error(f"Could not delete {target}: {exc}")
            return False
        self.reload()
        self.messages.info(f"{target} was deleted")
        return True

    def select(self) -> None:
        self._select_files(True)

    def unselect(self) -> None:
        self._select_files(False)

    def _select_files(self, value: bool) -> None:
        if not self.dirname:
            return
        result = apply_selection_gesture(
            self.view.lines(),
            self.view.cursor_line(),
            self.view.selection_range(),
            value,
        )
        self._show(result.lines, result.cursor_line)
        if result.errors:
            line_numbers = ", ".join(str(error.line_index + 1) for error in result.errors)
            noun = "line" if len(result.errors) == 1 else "lines"
            self.messages.error(f"Cannot parse {noun} {line_numbers}: {result.errors[0]}")

    def selected_items(self) -> list[FileItem]:
        return selected_items(self.view.lines())
