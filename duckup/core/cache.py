"""
Local mirror of extracted bundles, keyed by version.

Two kinds of bundle are cached under the data directory:

    cache/source/{tag}/      : Extracted compiler source trees
    cache/go/{version}/      : Extracted runtime bundles

An entry is populated once and never invalidated; the presence of its
directory is the only hit test. Population happens in scratch space and the
result is moved into place whole.

Usage:
    cache = ArtifactCache(env.cache_dir)

    def produce(scratch: Path) -> Path:
        ...  # download and extract into scratch
        return scratch / "out" / "go"

    runtime_dir = cache.ensure("1.25.0", CacheKind.RUNTIME, produce)
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from duckup.core.exceptions import DuckupError
from duckup.core.filesystem import is_relative_to, move_directory, temporary_directory

logger = logging.getLogger(__name__)


class CacheKeyError(DuckupError):
    """Raised when a key does not name a directory inside its cache kind."""

    pass


class CacheKind(Enum):
    """Kinds of cached bundle; the value is the cache subdirectory."""

    SOURCE = "source"
    RUNTIME = "go"


@dataclass(frozen=True)
class CacheEntry:
    """A populated cache directory."""

    key: str
    kind: CacheKind
    directory: Path


Producer = Callable[[Path], Path]
"""Fills the given scratch directory and returns the tree to cache."""


class ArtifactCache:
    """Bundle cache rooted at a directory."""

    def __init__(self, cache_dir: Path, scratch_dir: Optional[Path] = None):
        """
        Initialize cache.

        Args:
            cache_dir: Cache root (e.g. ~/.local/share/duckup/cache)
            scratch_dir: Where producers work. Defaults to the system temp
                directory; entries are copied in when it sits on another
                filesystem.
        """
        self.cache_dir = Path(cache_dir)
        self.scratch_dir = scratch_dir

    def path_for(self, key: str, kind: CacheKind) -> Path:
        """
        Get the entry directory for (key, kind).

        Raises:
            CacheKeyError: If key is empty or escapes the kind directory
        """
        kind_dir = self.cache_dir / kind.value
        path = kind_dir / key
        if (
            not key
            or path.parent.resolve() != kind_dir.resolve()
            or not is_relative_to(path.resolve(), kind_dir.resolve())
        ):
            raise CacheKeyError(f"Invalid cache key for {kind.value}: {key!r}")
        return path

    def lookup(self, key: str, kind: CacheKind) -> Optional[CacheEntry]:
        """Return the entry for (key, kind) if it is already populated."""
        path = self.path_for(key, kind)
        if path.is_dir():
            return CacheEntry(key=key, kind=kind, directory=path)
        return None

    def ensure(self, key: str, kind: CacheKind, producer: Producer) -> Path:
        """
        Get the cached directory for (key, kind), producing it on a miss.

        Args:
            key: Version tag or runtime version
            kind: Bundle kind
            producer: Called with an empty scratch directory on a miss; must
                return the directory (inside scratch) to promote

        Returns:
            Canonical cache directory
        """
        entry = self.lookup(key, kind)
        if entry is not None:
            logger.debug(f"Cache hit: {kind.value}/{key}")
            return entry.directory

        destination = self.path_for(key, kind)
        logger.debug(f"Cache miss: {kind.value}/{key}")

        if self.scratch_dir is not None:
            self.scratch_dir.mkdir(parents=True, exist_ok=True)

        with temporary_directory(prefix="duckup_", dir=self.scratch_dir) as scratch:
            produced = Path(producer(scratch))
            move_directory(produced, destination)

        logger.debug(f"Cached {kind.value}/{key} at {destination}")
        return destination


__all__ = [
    "CacheKeyError",
    "CacheKind",
    "CacheEntry",
    "ArtifactCache",
]
