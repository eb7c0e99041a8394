"""
Active toolchain selection.

The active toolchain is whichever installed binary the file at
{bin_dir}/{binary} is. Switching builds the new entry at a hidden temporary
path in bin_dir (hard link, or a full copy when hard-linking is unsupported)
and renames it over the active link, so the link is never missing mid-switch.
"""

import logging
import os
import shutil
import tempfile
from enum import Enum
from pathlib import Path

from duckup.core.directory import DuckupEnvironment
from duckup.core.exceptions import NotInstalledError

logger = logging.getLogger(__name__)


class LinkType(Enum):
    """How the active link was materialized."""

    HARDLINK = "hardlink"
    COPY = "copy"


class ActiveLinkManager:
    """Maintains the single active link in the binary directory."""

    def __init__(self, env: DuckupEnvironment):
        self.env = env

    def activate(self, tag: str) -> LinkType:
        """
        Make tag the active toolchain.

        Args:
            tag: Installed version tag

        Returns:
            LinkType used for the new active link

        Raises:
            NotInstalledError: If tag is not installed (nothing is modified)
            OSError: If the link cannot be created or renamed into place
        """
        source_path = self.env.toolchain_binary(tag)
        link_path = self.env.active_link

        if not source_path.is_file():
            raise NotInstalledError(
                f"Version {tag} is not installed.",
                hint=f"Run 'duckup install {tag}' first.",
            )

        link_path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self._reserve_temp_path(link_path)

        try:
            link_type = self._materialize(source_path, temp_path)
            os.replace(temp_path, link_path)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise

        logger.info(f"Switched to {tag}.")
        logger.debug(f"Active link {link_path} -> {source_path} ({link_type.value})")
        return link_type

    def _reserve_temp_path(self, link_path: Path) -> Path:
        """Pick an unused sibling path for the new link."""
        fd, temp_name = tempfile.mkstemp(
            dir=link_path.parent, prefix=f".{link_path.name}.", suffix=".tmp"
        )
        os.close(fd)
        # os.link refuses to overwrite, so free the reserved name
        os.unlink(temp_name)
        return Path(temp_name)

    def _materialize(self, source_path: Path, temp_path: Path) -> LinkType:
        try:
            os.link(source_path, temp_path)
            return LinkType.HARDLINK
        except OSError as e:
            logger.debug(f"Hard link failed ({e}), copying binary")

        shutil.copy2(source_path, temp_path)
        return LinkType.COPY

    def active_binary(self) -> Path:
        """
        Get the active link path.

        Raises:
            NotInstalledError: If no toolchain is active
        """
        link_path = self.env.active_link
        if not link_path.is_file():
            raise NotInstalledError(
                "No active toolchain selected.",
                hint="Run 'duckup update' first.",
            )
        return link_path


__all__ = [
    "LinkType",
    "ActiveLinkManager",
]
