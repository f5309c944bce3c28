"""Key decoding and key-combo dispatch for the dired TUI.

``read_key`` turns raw terminal bytes into tokens such as ``"j"``, ``"UP"``
or ``"ENTER"``. ``KeyComboRegistry`` maps tokens to action callbacks.
"""

from __future__ import annotations

import os
import select
from collections.abc import Callable
from dataclasses import dataclass

ESC_SEQUENCE_TIMEOUT_MS = 25

_CSI_FINAL_KEYS = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
}


def _read_byte(fd: int, timeout_ms: int | None) -> bytes:
    if timeout_ms is not None:
        ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
        if not ready:
            return b""
    return os.read(fd, 1)


def _read_utf8_tail(fd: int, first: bytes) -> bytes:
    """Read continuation bytes for a multi-byte UTF-8 lead byte."""
    lead = first[0]
    if lead >= 0xF0:
        extra = 3
    elif lead >= 0xE0:
        extra = 2
    elif lead >= 0xC0:
        extra = 1
    else:
        return first
    data = first
    for _ in range(extra):
        part = _read_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if not part:
            break
        data += part
    return data


def read_key(fd: int, timeout_ms: int | None = None) -> str:
    """Read one key token from ``fd``; returns ``""`` on timeout or EOF."""
    ch = _read_byte(fd, timeout_ms)
    if not ch:
        return ""

    if ch in {b"\r", b"\n"}:
        return "ENTER"
    if ch in {b"\x7f", b"\x08"}:
        return "BACKSPACE"
    if ch == b"\x03":
        return "CTRL_C"
    if ch == b"\x15":
        return "CTRL_U"

    if ch != b"\x1b":
        return _read_utf8_tail(fd, ch).decode("utf-8", errors="replace")

    seq = _read_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq != b"[":
        return "ESC"
    seq = _read_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if not seq:
        return "ESC"
    key = _CSI_FINAL_KEYS.get(seq)
    if key is not None:
        return key
    if seq.isdigit():
        # ESC [ n ~ style keys (page up/down, delete).
        payload = seq
        while True:
            part = _read_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
            if not part:
                return "ESC"
            if part == b"~":
                break
            payload += part
            if len(payload) > 8:
                return "ESC"
        return {b"3": "DELETE", b"5": "PAGE_UP", b"6": "PAGE_DOWN"}.get(payload, "ESC")
    return "ESC"


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single action callback."""

    combos: tuple[str, ...]
    handler: Callable[[], bool | None]


class KeyComboRegistry:
    """Small key-dispatch table."""

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[], bool | None]] = {}

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing handlers for same combos."""
        for combo in binding.combos:
            self._handlers[combo] = binding.handler
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        """Register multiple bindings and return ``self`` for fluent usage."""
        for binding in bindings:
            self.register_binding(binding)
        return self

    def dispatch(self, key: str) -> bool | None:
        """Invoke bound handler for ``key``; ``None`` when nothing is bound."""
        handler = self._handlers.get(key)
        if handler is None:
            return None
        return handler()
