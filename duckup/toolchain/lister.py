"""
Installed toolchain enumeration.
"""

import logging
from dataclasses import dataclass
from typing import Iterator

from duckup.core.directory import DuckupEnvironment
from duckup.core.filesystem import same_file

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListedToolchain:
    """An installed tag and whether it is the active one."""

    tag: str
    is_active: bool


class Lister:
    """
    Enumerates the toolchain store.

    Activity is decided by file identity between each installed binary and
    the active link (see duckup.core.filesystem.same_file). Off POSIX the
    identity check only compares sizes, so more than one tag can be
    reported active.
    """

    def __init__(self, env: DuckupEnvironment):
        self.env = env

    def list(self) -> Iterator[ListedToolchain]:
        """
        Yield installed toolchains in tag order.

        Yields nothing when the toolchain store does not exist.
        """
        store = self.env.toolchains_dir
        if not store.is_dir():
            return

        active_link = self.env.active_link
        has_active = active_link.is_file()

        for entry in sorted(store.iterdir()):
            if not entry.is_dir():
                continue
            binary = entry / self.env.binary_name
            is_active = has_active and same_file(binary, active_link)
            yield ListedToolchain(tag=entry.name, is_active=is_active)


__all__ = [
    "ListedToolchain",
    "Lister",
]
