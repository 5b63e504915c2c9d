"""Bounded in-process file content cache keyed by absolute path.

Entries are validated against the file's on-disk mtime on every read and
re-read when it no longer matches. At most ``max_size`` files are held;
inserting past that evicts the least recently read file.

The cache is not persistent and is not shared between processes.
"""

import logging
import os
import threading
import time
from collections import OrderedDict

from .protocols import CacheEntry, CacheStats, EntrySnapshot, FileSource
from .sources import LocalFileSource

logger = logging.getLogger(__name__)

DEFAULT_MAX_SIZE = 100


def resolve_path(path: str | os.PathLike) -> str:
    """Return the canonical absolute form used as the cache key."""
    return os.path.realpath(os.fspath(path))


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class BoundedFileCache:
    """LRU cache of file contents with mtime-based staleness checks.

    Every public method holds a single re-entrant lock for its whole body,
    so the validate/read/insert/evict sequence of ``read_file`` is atomic
    and concurrent readers of the same stale file trigger one disk read.

    Args:
        max_size: Maximum number of cached files. Must be positive.
        source: Filesystem collaborator; defaults to LocalFileSource().

    Raises:
        ValueError: if max_size is not positive.
    """

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE, source: FileSource | None = None):
        if max_size <= 0:
            raise ValueError(f"max_size must be positive, got {max_size}")
        self._max_size = max_size
        self._source = source if source is not None else LocalFileSource()
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0
        self._disk_reads = 0
        self._evictions = 0
        self._invalidations = 0

    @property
    def max_size(self) -> int:
        return self._max_size

    def read_file(self, path: str | os.PathLike) -> str:
        """Return the file's content, from cache when it is still current.

        Args:
            path: File path, relative or absolute.

        Returns:
            Full file text with every line terminated by "\\n".

        Raises:
            FileNotFoundError: if the file does not exist. Nothing is cached.
            OSError: on any other read failure. The cache is left unchanged.
            UnicodeDecodeError: if the file is not valid in the source encoding.
        """
        abs_path = resolve_path(path)
        with self._lock:
            mtime = self._source.stat_mtime_ns(abs_path)

            entry = self._entries.get(abs_path)
            if entry is not None and entry.last_modified_time_at_read == mtime:
                entry.last_read_time = _now_ms()
                self._entries.move_to_end(abs_path)
                self._hits += 1
                logger.debug("file_cache.hit", extra={"path": abs_path})
                return entry.content

            self._misses += 1
            logger.debug(
                "file_cache.stale" if entry is not None else "file_cache.miss",
                extra={"path": abs_path, "mtime_ns": mtime},
            )
            content = self._read_from_source(abs_path)
            self._put_entry(abs_path, CacheEntry(content, _now_ms(), mtime))
            return content

    def invalidate(self, path: str | os.PathLike) -> bool:
        """Drop the entry for path. Returns False if nothing was cached."""
        abs_path = resolve_path(path)
        with self._lock:
            if self._entries.pop(abs_path, None) is None:
                return False
            self._invalidations += 1
            logger.debug("file_cache.invalidate", extra={"path": abs_path})
            return True

    def invalidate_all(self) -> int:
        """Clear all cached entries and return how many were dropped."""
        with self._lock:
            dropped = len(self._entries)
            self._entries.clear()
            self._invalidations += dropped
            logger.debug("file_cache.invalidate_all", extra={"dropped": dropped})
            return dropped

    def is_cached(self, path: str | os.PathLike) -> bool:
        abs_path = resolve_path(path)
        with self._lock:
            return abs_path in self._entries

    def get_cached_files_count(self) -> int:
        with self._lock:
            return len(self._entries)

    def cache_size_in_memory(self) -> int:
        """Approximate memory held by cached content (2 bytes per character)."""
        with self._lock:
            return sum(entry.size_estimate for entry in self._entries.values())

    def describe(self) -> CacheStats:
        """Snapshot counters and entries, least recently used first."""
        with self._lock:
            return CacheStats(
                files_count=len(self._entries),
                size_in_memory=sum(e.size_estimate for e in self._entries.values()),
                max_size=self._max_size,
                hits=self._hits,
                misses=self._misses,
                disk_reads=self._disk_reads,
                evictions=self._evictions,
                invalidations=self._invalidations,
                entries=[
                    EntrySnapshot(
                        path=p,
                        size_estimate=e.size_estimate,
                        last_read_time=e.last_read_time,
                    )
                    for p, e in self._entries.items()
                ],
            )

    def print_cache_stats(self, file=None) -> None:
        print(self.describe().format(), file=file)

    def __len__(self) -> int:
        return self.get_cached_files_count()

    def __contains__(self, path) -> bool:
        return self.is_cached(path)

    def _read_from_source(self, abs_path: str) -> str:
        self._disk_reads += 1
        try:
            return self._source.read_text(abs_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(
                "file_cache.read_error",
                extra={
                    "path": abs_path,
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            raise

    def _put_entry(self, abs_path: str, entry: CacheEntry) -> None:
        self._entries[abs_path] = entry
        self._entries.move_to_end(abs_path)

        while len(self._entries) > self._max_size:
            evicted_path, _ = self._entries.popitem(last=False)
            self._evictions += 1
            logger.debug(
                "file_cache.evict",
                extra={"path": evicted_path, "max_size": self._max_size},
            )
