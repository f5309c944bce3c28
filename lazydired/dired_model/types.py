"""Domain datatype for one rendered dired entry."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DIRED_SCHEME = "dired"
DOT_ENTRY_NAMES = frozenset({".", ".."})


@dataclass
class FileItem:
    """Metadata for one filesystem object inside a parent directory.

    Everything except ``selected`` is treated as read-only once built.
    ``name`` holds whatever the constructor was given; items decoded from a
    rendered line keep the directory ``/`` suffix, see ``bare_name``.
    """

    dirname: str
    name: str
    is_directory: bool = False
    is_file: bool = True
    owner: str = ""
    group: str = ""
    size: int = 0
    month: int = 0
    day: int = 0
    hour: int = 0
    minute: int = 0
    mode: str = "----------"
    selected: bool = False

    def select(self, value: bool) -> None:
        self.selected = bool(value)

    @property
    def bare_name(self) -> str:
        """Name without the trailing ``/`` that rendered directory lines carry."""
        if self.is_directory and self.name.endswith("/") and self.name != "/":
            return self.name[:-1]
        return self.name

    @property
    def is_dot_entry(self) -> bool:
        return self.bare_name in DOT_ENTRY_NAMES

    @property
    def path(self) -> str:
        return os.path.normpath(os.path.join(self.dirname, self.bare_name))

    @property
    def uri(self) -> str | None:
        """``dired://`` URI for directories, ``file://`` for files, else ``None``."""
        if self.is_directory:
            return directory_uri(self.path)
        if self.is_file:
            return Path(self.path).absolute().as_uri()
        return None


def directory_uri(path: str) -> str:
    return f"{DIRED_SCHEME}://{path}"


__all__ = [
    "DIRED_SCHEME",
    "DOT_ENTRY_NAMES",
    "FileItem",
    "directory_uri",
]
