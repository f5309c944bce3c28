"""Command-line front door for lazydired.

Parses CLI options, resolves the target path and display preferences, then
dispatches into the interactive dired session (or prints the buffer).
"""

from __future__ import annotations

import argparse
from pathlib import Path

from .runtime import run_dired
from .runtime.config import load_show_dot_files, load_style_name, save_style_name


def main(default_path: Path | None = None) -> None:
    """Parse CLI arguments and open a dired buffer.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used. An explicit ``--style`` is persisted for later runs;
    the dot-file flags only apply to this session.
    """
    parser = argparse.ArgumentParser(
        description="Browse and edit a directory as a dired-style text buffer."
    )
    parser.add_argument("path", nargs="?", default=None, help="Directory to open. Defaults to current directory.")
    parser.add_argument("--style", default=None, help="Pygments style name for buffer colors.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument("--nopager", action="store_true", help="Print the buffer and exit.")
    dot_files = parser.add_mutually_exclusive_group()
    dot_files.add_argument(
        "--show-dot-files",
        dest="show_dot_files",
        action="store_true",
        default=None,
        help="List entries whose names start with a dot.",
    )
    dot_files.add_argument(
        "--hide-dot-files",
        dest="show_dot_files",
        action="store_false",
        help="Hide entries whose names start with a dot.",
    )
    args = parser.parse_args()

    if default_path is None:
        default_path = Path.cwd()
    path = Path(args.path or default_path)
    if not path.exists():
        raise SystemExit(f"Path not found: {path}")

    if args.style is not None:
        save_style_name(args.style)
        style = args.style
    else:
        style = load_style_name()
    show_dot_files = load_show_dot_files() if args.show_dot_files is None else args.show_dot_files

    run_dired(path, style, args.no_color, args.nopager, show_dot_files)


if __name__ == "__main__":
    main()
