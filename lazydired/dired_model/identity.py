"""Memoized uid/gid to display-name lookup.

Lookups go through ``pwd``/``grp`` once per id and are cached for the life of
the process. Unknown ids render as their decimal value.
"""

from __future__ import annotations

import threading
from collections.abc import Callable

import grp
import pwd


def _lookup_user(uid: int) -> str:
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        return str(uid)


def _lookup_group(gid: int) -> str:
    try:
        return grp.getgrgid(gid).gr_name
    except KeyError:
        return str(gid)


class IDResolver:
    """Resolve numeric owner/group ids to names with a lazy per-id cache."""

    def __init__(
        self,
        lookup_user: Callable[[int], str] = _lookup_user,
        lookup_group: Callable[[int], str] = _lookup_group,
    ) -> None:
        self._lookup_user = lookup_user
        self._lookup_group = lookup_group
        self._users: dict[int, str] = {}
        self._groups: dict[int, str] = {}
        self._lock = threading.Lock()

    def username(self, uid: int) -> str:
        with self._lock:
            name = self._users.get(uid)
            if name is None:
                name = self._lookup_user(uid)
                self._users[uid] = name
            return name

    def groupname(self, gid: int) -> str:
        with self._lock:
            name = self._groups.get(gid)
            if name is None:
                name = self._lookup_group(gid)
                self._groups[gid] = name
            return name


_DEFAULT_RESOLVER = IDResolver()


def default_resolver() -> IDResolver:
    """Return the process-wide resolver shared by every directory read."""
    return _DEFAULT_RESOLVER


__all__ = ["IDResolver", "default_resolver"]
