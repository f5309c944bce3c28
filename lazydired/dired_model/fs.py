"""Filesystem reads that turn a directory into ``FileItem`` rows."""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass
from datetime import datetime

from .identity import IDResolver, default_resolver
from .types import FileItem


@dataclass(frozen=True)
class EntryWarning:
    """One directory child that could not be stat'ed."""

    path: str
    error: OSError

    def message(self) -> str:
        return f"Could not get stat of {self.path}: {self.error}"


@dataclass(frozen=True)
class DirectoryRead:
    """Result of reading one directory.

    ``items`` keeps filesystem order with the synthetic ``.`` and ``..`` rows
    first. ``scan_error`` is set when the directory itself could not be
    listed, in which case ``items`` is empty.
    """

    dirname: str
    items: tuple[FileItem, ...]
    warnings: tuple[EntryWarning, ...] = ()
    scan_error: OSError | None = None


def file_item_from_stat(
    dirname: str,
    name: str,
    st: os.stat_result,
    resolver: IDResolver | None = None,
) -> FileItem:
    """Build an unselected item from a stat result.

    The timestamp columns show the local-time status-change time (``ctime``).
    """
    if resolver is None:
        resolver = default_resolver()
    changed = datetime.fromtimestamp(st.st_ctime)
    return FileItem(
        dirname=dirname,
        name=name,
        is_directory=stat.S_ISDIR(st.st_mode),
        is_file=stat.S_ISREG(st.st_mode),
        owner=resolver.username(st.st_uid),
        group=resolver.groupname(st.st_gid),
        size=int(st.st_size),
        month=changed.month,
        day=changed.day,
        hour=changed.hour,
        minute=changed.minute,
        mode=stat.filemode(st.st_mode),
        selected=False,
    )


def read_directory(dirname: str, resolver: IDResolver | None = None) -> DirectoryRead:
    """List ``dirname`` and stat every child, ``.`` and ``..`` included.

    Children that fail to stat are left out and reported in ``warnings``;
    they never abort the rest of the read.
    """
    try:
        names = os.listdir(dirname)
    except OSError as exc:
        return DirectoryRead(dirname=dirname, items=(), scan_error=exc)

    items: list[FileItem] = []
    warnings: list[EntryWarning] = []
    for name in [".", "..", *names]:
        child_path = os.path.join(dirname, name)
        try:
            st = os.stat(child_path)
        except OSError as exc:
            warnings.append(EntryWarning(path=child_path, error=exc))
            continue
        items.append(file_item_from_stat(dirname, name, st, resolver))
    return DirectoryRead(dirname=dirname, items=tuple(items), warnings=tuple(warnings))


__all__ = [
    "DirectoryRead",
    "EntryWarning",
    "file_item_from_stat",
    "read_directory",
]
