"""Pygments lexer and terminal colorizing for dired buffers.

``DiredLexer`` tokenizes the header line and the fixed-column entry rows.
Formatter instances are cached per style; unknown style names fall back to
``monokai``.
"""

from __future__ import annotations

import re

from pygments import highlight
from pygments.formatters import TerminalFormatter
from pygments.lexer import RegexLexer, bygroups
from pygments.styles import get_style_by_name
from pygments.token import Comment, Keyword, Name, Number, Operator, Text, Whitespace
from pygments.util import ClassNotFound

DEFAULT_STYLE = "monokai"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")

_FORMATTERS: dict[str, TerminalFormatter] = {}
_VALID_STYLES: set[str] = set()
_INVALID_STYLES: set[str] = set()

_ENTRY_PREFIX = (
    r"([* ])( )(\S{10})( )(.{8})( )(.{8})( )( *\d+)( )"
    r"(\d{2,})( )(\d{2,})( )(\d{2,})(:)(\d{2,})( )"
)
_ENTRY_PREFIX_TOKENS = (
    Operator,
    Whitespace,
    Keyword.Type,
    Whitespace,
    Name.Attribute,
    Whitespace,
    Name.Attribute,
    Whitespace,
    Number.Integer,
    Whitespace,
    Number,
    Whitespace,
    Number,
    Whitespace,
    Number,
    Operator,
    Number,
    Whitespace,
)


class DiredLexer(RegexLexer):
    """Lexer for the fixed-column dired buffer text."""

    name = "Dired"
    aliases = ["dired"]
    filenames = []

    tokens = {
        "root": [
            (r"\A[^\n]*:$", Comment.Special),
            (_ENTRY_PREFIX + r"([^\n]*/)$", bygroups(*_ENTRY_PREFIX_TOKENS, Name.Namespace)),
            (_ENTRY_PREFIX + r"([^\n]*)$", bygroups(*_ENTRY_PREFIX_TOKENS, Name)),
            (r"\n", Text),
            (r"[^\n]+", Text),
        ],
    }
    flags = re.MULTILINE


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes in file names (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\t"}:
            out.append(ch)
            continue
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def normalize_style(style: str) -> str:
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return DEFAULT_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        _INVALID_STYLES.add(style)
        return DEFAULT_STYLE
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str) -> TerminalFormatter:
    formatter = _FORMATTERS.get(style)
    if formatter is not None:
        return formatter
    formatter = TerminalFormatter(style=style)
    _FORMATTERS[style] = formatter
    return formatter


def colorize_buffer(text: str, style: str = DEFAULT_STYLE) -> str:
    """Return ``text`` with ANSI colors; line count is preserved."""
    style = normalize_style(style)
    return highlight(text, DiredLexer(stripnl=False, ensurenl=False), _formatter_for_style(style))


def render_buffer_lines(lines: list[str], style: str = DEFAULT_STYLE, no_color: bool = False) -> list[str]:
    """Sanitize and optionally colorize buffer lines, one output row per input line."""
    safe = [sanitize_terminal_text(line) for line in lines]
    if no_color or not safe:
        return safe
    colored = colorize_buffer("\n".join(safe), style).split("\n")
    if len(colored) != len(safe):
        return safe
    return colored
