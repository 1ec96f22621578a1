"""
Persistent tool cache for installed JDKs.

Entries live at ``<root>/<tool>/<version_spec>/<arch>``. An entry only counts
as present once its sibling ``<arch>.complete`` marker exists; the marker is
written last, so an interrupted store is never returned by find().

Installs of the same key from separate processes are not coordinated; both
may download and the last store() wins. The file lock below only guards the
``registry.json`` index, which records what was stored and where it came
from. find() never reads the index.
"""

import json
import logging
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from filelock import FileLock, Timeout

from jdkkit.core.exceptions import CacheError, RegistryLockTimeout
from jdkkit.core.filesystem import (
    FilesystemError,
    atomic_write,
    directory_size,
    recursive_copy,
    safe_rmtree,
)

logger = logging.getLogger(__name__)

COMPLETE_SUFFIX = ".complete"


class ToolCache:
    """
    Directory cache keyed by (tool name, version spec, architecture).

    Example:
        >>> cache = ToolCache(Path("/home/actions/cache"))
        >>> path = cache.find("AdoptOpenJDK", "1.0.0-ga-11-hotspot-normal-latest", "x64")
        >>> if path is None:
        ...     path = cache.store(jdk_dir, "AdoptOpenJDK",
        ...                        "1.0.0-ga-11-hotspot-normal-latest", "x64")
    """

    def __init__(self, root: Path, lock_timeout: int = 30):
        """
        Initialize tool cache.

        Args:
            root: Cache root directory
            lock_timeout: Timeout in seconds for acquiring the index lock
        """
        self.root = Path(root)
        self.registry_path = self.root / "registry.json"
        self.lock_path = self.root / "lock" / "registry.lock"
        self.lock_timeout = lock_timeout

    def entry_path(self, tool_name: str, version_spec: str, arch: str) -> Path:
        """Get the directory an entry is (or would be) stored at."""
        return self.root / tool_name / version_spec / arch

    @staticmethod
    def _marker_path(entry: Path) -> Path:
        return entry.with_name(entry.name + COMPLETE_SUFFIX)

    def find(self, tool_name: str, version_spec: str, arch: str) -> Optional[Path]:
        """
        Look up a completed cache entry.

        Args:
            tool_name: Tool name, e.g. 'AdoptOpenJDK'
            version_spec: Cache version spec
            arch: Architecture

        Returns:
            Entry directory, or None on a miss
        """
        entry = self.entry_path(tool_name, version_spec, arch)
        if entry.is_dir() and self._marker_path(entry).is_file():
            logger.debug(f"Found in cache: {entry}")
            return entry

        logger.debug(f"Not found in cache: {tool_name}@{version_spec} ({arch})")
        return None

    def store(
        self,
        source_dir: Path,
        tool_name: str,
        version_spec: str,
        arch: str,
        source_url: str = "",
    ) -> Path:
        """
        Copy a directory into the cache.

        Any previous entry under the same key is replaced. Index failures
        after the marker is written are logged, not raised: the entry is
        already usable and the index is informational.

        Args:
            source_dir: Normalized installation directory
            tool_name: Tool name
            version_spec: Cache version spec
            arch: Architecture
            source_url: Where the installation was downloaded from (index only)

        Returns:
            Path of the stored entry

        Raises:
            CacheError: If copying into the cache fails
        """
        entry = self.entry_path(tool_name, version_spec, arch)
        marker = self._marker_path(entry)

        logger.debug(f"Caching {source_dir} as {tool_name}@{version_spec} ({arch})")

        try:
            marker.unlink(missing_ok=True)
            safe_rmtree(entry, require_prefix=self.root)
            entry.mkdir(parents=True, exist_ok=True)
            recursive_copy(source_dir, entry, symlinks=True)
            marker.write_text("")
        except (OSError, FilesystemError) as e:
            raise CacheError(f"Failed to cache {source_dir} at {entry}: {e}") from e

        try:
            self._record(tool_name, version_spec, arch, entry, source_url)
        except (CacheError, OSError) as e:
            logger.warning(f"Cached {entry} but could not update the index: {e}")
        return entry

    def list_versions(self, tool_name: str, arch: str) -> List[str]:
        """
        List version specs with a completed entry for an architecture.

        Returns:
            Sorted list of version specs
        """
        tool_dir = self.root / tool_name
        if not tool_dir.is_dir():
            return []

        return sorted(
            child.name
            for child in tool_dir.iterdir()
            if self.find(tool_name, child.name, arch) is not None
        )

    # ------------------------------------------------------------------
    # Index
    # ------------------------------------------------------------------

    @contextmanager
    def _lock(self):
        """
        Acquire the index lock.

        Raises:
            RegistryLockTimeout: If lock cannot be acquired within timeout
        """
        self.lock_path.parent.mkdir(parents=True, exist_ok=True)
        lock = FileLock(self.lock_path, timeout=self.lock_timeout)

        try:
            with lock:
                yield
        except Timeout as e:
            logger.error(f"Failed to acquire cache index lock within {self.lock_timeout}s")
            raise RegistryLockTimeout(
                f"Could not acquire cache index lock within {self.lock_timeout} seconds"
            ) from e

    def load_index(self) -> Dict[str, dict]:
        """
        Load the cache index.

        Returns:
            Mapping of '<tool>/<version_spec>/<arch>' to entry details
        """
        if not self.registry_path.exists():
            return {}

        try:
            with open(self.registry_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Corrupt cache index {self.registry_path}, resetting: {e}")
            return {}
        except OSError as e:
            raise CacheError(f"Failed to load cache index: {e}") from e

        if not isinstance(data, dict) or "entries" not in data:
            logger.warning("Invalid cache index format, resetting")
            return {}

        return data["entries"]

    def _record(
        self,
        tool_name: str,
        version_spec: str,
        arch: str,
        entry: Path,
        source_url: str,
    ) -> None:
        key = f"{tool_name}/{version_spec}/{arch}"
        with self._lock():
            entries = self.load_index()
            entries[key] = {
                "path": str(entry.resolve()),
                "installed": datetime.now().isoformat(),
                "size_mb": directory_size(entry) / (1024 * 1024),
                "source_url": source_url,
            }
            content = json.dumps(
                {"version": 1, "entries": entries}, indent=2, ensure_ascii=False
            )
            try:
                atomic_write(self.registry_path, content)
            except OSError as e:
                raise CacheError(f"Failed to save cache index: {e}") from e

        logger.debug(f"Recorded cache entry {key}")
