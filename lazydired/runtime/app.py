"""Interactive dired session and the non-interactive print path.

``DiredApp`` binds keys to ``DiredProvider`` operations, keeps the scroll
offset and rendered rows in sync with the buffer, and runs a one-line text
prompt on the status row for commands that need a name.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TextIO

from ..editor import BufferView, launch_editor
from ..highlight import render_buffer_lines
from ..messages import ERROR, MessageChannel
from ..provider import DiredProvider
from .config import save_show_dot_files
from .keys import KeyComboBinding, KeyComboRegistry, read_key
from .screen import build_frame, scroll_start_for_cursor
from .terminal import TerminalController

IDLE_TIMEOUT_MS = 250
HELP_TEXT = (
    "j/k move  v range  m/u mark  RET open  ^ up  . dotfiles  g reload  "
    "+ mkdir  c new file  R rename  C copy  D delete  q quit"
)


@dataclass
class PromptState:
    label: str
    on_submit: Callable[[str], None]
    text: str = ""


def resolve_start(path: Path) -> str:
    """Directory to open for a CLI path argument; files open their parent."""
    target = path.resolve()
    if target.is_dir():
        return str(target)
    return str(target.parent)


class DiredApp:
    def __init__(
        self,
        provider: DiredProvider,
        view: BufferView,
        terminal: TerminalController,
        style: str,
        no_color: bool,
    ) -> None:
        self.provider = provider
        self.view = view
        self.terminal = terminal
        self.style = style
        self.no_color = no_color
        self.start = 0
        self.rows: list[str] = []
        self.prompt: PromptState | None = None
        self.quit = False
        self.dirty = True
        self._last_size: tuple[int, int] | None = None
        self.provider.subscribe(self._on_change)
        self.keys = KeyComboRegistry().register_bindings(
            KeyComboBinding(("q", "CTRL_C"), self._request_quit),
            KeyComboBinding(("j", "DOWN"), lambda: self._move(1)),
            KeyComboBinding(("k", "UP"), lambda: self._move(-1)),
            KeyComboBinding(("PAGE_DOWN", " "), lambda: self._move(self._content_rows())),
            KeyComboBinding(("PAGE_UP",), lambda: self._move(-self._content_rows())),
            KeyComboBinding(("HOME",), lambda: self._move(-len(self.rows))),
            KeyComboBinding(("END", "G"), lambda: self._move(len(self.rows))),
            KeyComboBinding(("v",), self._toggle_range),
            KeyComboBinding(("m",), self._run(self.provider.select)),
            KeyComboBinding(("u",), self._run(self.provider.unselect)),
            KeyComboBinding(("ENTER", "RIGHT", "f"), self._run(self.provider.enter, clear_range=True)),
            KeyComboBinding(("^", "-", "LEFT", "BACKSPACE"), self._run(self.provider.go_up_dir, clear_range=True)),
            KeyComboBinding((".",), self._toggle_dot_files),
            KeyComboBinding(("g",), self._run(self.provider.reload)),
            KeyComboBinding(("D", "DELETE"), self._run(self.provider.delete)),
            KeyComboBinding(("+",), lambda: self._open_prompt("Create directory: ", self.provider.create_dir)),
            KeyComboBinding(("c",), lambda: self._open_prompt("Create file: ", self.provider.create_file)),
            KeyComboBinding(("R",), lambda: self._open_prompt("Rename to: ", self.provider.rename)),
            KeyComboBinding(("C",), lambda: self._open_prompt("Copy to: ", self.provider.copy)),
            KeyComboBinding(("?",), self._show_help),
        )

    def _on_change(self, _uri: str) -> None:
        self.rows = render_buffer_lines(self.view.lines(), self.style, self.no_color)
        self.dirty = True

    def _content_rows(self) -> int:
        _columns, height = self.terminal.size()
        return max(1, height - 1)

    def _request_quit(self) -> bool:
        self.quit = True
        return True

    def _move(self, delta: int) -> bool:
        moved = self.view.move_cursor(delta)
        self.dirty = self.dirty or moved or self.view.range_active
        return moved

    def _toggle_range(self) -> bool:
        self.view.toggle_anchor()
        self.dirty = True
        return True

    def _run(self, action: Callable[[], object], clear_range: bool = False) -> Callable[[], bool]:
        def handler() -> bool:
            if clear_range:
                self.view.clear_anchor()
            action()
            self.dirty = True
            return True

        return handler

    def _toggle_dot_files(self) -> bool:
        save_show_dot_files(self.provider.toggle_dot_files())
        self.dirty = True
        return True

    def _show_help(self) -> bool:
        self.provider.messages.info(HELP_TEXT)
        self.dirty = True
        return True

    def _open_prompt(self, label: str, on_submit: Callable[[str], object]) -> bool:
        self.prompt = PromptState(label=label, on_submit=on_submit)
        self.dirty = True
        return True

    def _handle_prompt_key(self, key: str) -> bool:
        prompt = self.prompt
        assert prompt is not None
        if key in {"ESC", "CTRL_C"}:
            self.prompt = None
        elif key == "ENTER":
            self.prompt = None
            text = prompt.text.strip()
            if text:
                prompt.on_submit(text)
        elif key == "BACKSPACE":
            prompt.text = prompt.text[:-1]
        elif key == "CTRL_U":
            prompt.text = ""
        elif len(key) == 1 and key.isprintable():
            prompt.text += key
        else:
            return False
        self.dirty = True
        return True

    def handle_key(self, key: str) -> bool:
        """Dispatch one key token; returns whether it was handled."""
        if self.prompt is not None:
            return self._handle_prompt_key(key)
        return bool(self.keys.dispatch(key))

    def status_line(self) -> tuple[str, bool]:
        if self.prompt is not None:
            return self.prompt.label + self.prompt.text, False
        message = self.provider.messages.latest()
        if message is None:
            return f"{self.provider.dirname or ''}  (? for help)", False
        return message.text, message.level == ERROR

    def paint(self) -> None:
        columns, height = self.terminal.size()
        content_rows = max(1, height - 1)
        cursor = self.view.cursor_line()
        self.start = scroll_start_for_cursor(self.start, cursor, content_rows, len(self.rows))
        status, is_error = self.status_line()
        frame = build_frame(
            self.rows,
            cursor,
            self.view.selection_range(),
            self.start,
            columns,
            height,
            status,
            status_is_error=is_error,
        )
        self.terminal.write(frame)
        self.dirty = False

    def run(self) -> None:
        with self.terminal.raw_mode():
            while not self.quit:
                size = self.terminal.size()
                if size != self._last_size:
                    self._last_size = size
                    self.dirty = True
                if self.dirty:
                    self.paint()
                key = read_key(self.terminal.stdin_fd, timeout_ms=IDLE_TIMEOUT_MS)
                if key:
                    self.handle_key(key)


def print_listing(
    provider: DiredProvider,
    style: str,
    no_color: bool,
    out: TextIO,
    err: TextIO,
) -> None:
    """Write the current buffer, then any messages, for non-interactive use."""
    rows = render_buffer_lines(provider.view.lines(), style, no_color)
    out.write("\n".join(rows) + "\n")
    for message in provider.messages.messages:
        err.write(f"{message.level}: {message.text}\n")


def run_dired(path: Path, style: str, no_color: bool, nopager: bool, show_dot_files: bool) -> None:
    """Open ``path`` (a directory, or a file's parent) and run the session."""
    dirname = resolve_start(path)
    view = BufferView()
    messages = MessageChannel()
    interactive = not nopager and sys.stdin.isatty() and sys.stdout.isatty()

    if not interactive:
        provider = DiredProvider(view, messages, show_dot_files=show_dot_files)
        provider.open_dir(dirname)
        print_listing(provider, style, no_color or not sys.stdout.isatty(), sys.stdout, sys.stderr)
        return

    terminal = TerminalController(sys.stdin.fileno(), sys.stdout.fileno())

    def open_file(target: Path) -> str | None:
        return launch_editor(target, terminal.disable_tui_mode, terminal.enable_tui_mode)

    provider = DiredProvider(view, messages, show_dot_files=show_dot_files, open_file=open_file)
    app = DiredApp(provider, view, terminal, style, no_color or bool(os.environ.get("NO_COLOR")))
    provider.open_dir(dirname)
    app.run()
