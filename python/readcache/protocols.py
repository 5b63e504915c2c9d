"""Data types and collaborator protocols for readcache.

Defines the FileSource protocol that decouples the cache from the
filesystem calls it needs (mtime lookup and full-content read), plus the
entry and snapshot records the cache keeps and reports.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol


@dataclass
class CacheEntry:
    """Cached file content and the timestamps it was captured with."""
    content: str
    last_read_time: int = 0
    last_modified_time_at_read: int = 0

    @property
    def size_estimate(self) -> int:
        # Fixed two-bytes-per-character model, not a real byte count.
        return 2 * len(self.content)


@dataclass
class EntrySnapshot:
    """Reporting view of one cached file."""
    path: str
    size_estimate: int = 0
    last_read_time: int = 0


@dataclass
class CacheStats:
    """Point-in-time summary of a BoundedFileCache."""
    files_count: int = 0
    size_in_memory: int = 0
    max_size: int = 0
    hits: int = 0
    misses: int = 0
    disk_reads: int = 0
    evictions: int = 0
    invalidations: int = 0
    entries: list[EntrySnapshot] = field(default_factory=list)

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def to_dict(self) -> dict:
        return {
            "files_count": self.files_count,
            "size_in_memory": self.size_in_memory,
            "max_size": self.max_size,
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": round(self.hit_rate, 4),
            "disk_reads": self.disk_reads,
            "evictions": self.evictions,
            "invalidations": self.invalidations,
            "entries": [
                {"path": e.path, "size": e.size_estimate, "last_read_time": e.last_read_time}
                for e in self.entries
            ],
        }

    def format(self) -> str:
        """Render the snapshot as a human-readable report."""
        lines = [
            "Cache Stats:",
            f"Files count: {self.files_count}",
            f"Size in memory (bytes): {self.size_in_memory}",
            f"Max size: {self.max_size}",
            f"Hits: {self.hits}, misses: {self.misses}, evictions: {self.evictions}",
            "Cached files:",
        ]
        for e in self.entries:
            last_read = datetime.fromtimestamp(e.last_read_time / 1000).strftime("%c")
            lines.append(f"  - {e.path} (size: {e.size_estimate} bytes, last read: {last_read})")
        return "\n".join(lines)


class FileSource(Protocol):
    """Protocol for the filesystem calls the cache depends on."""

    def stat_mtime_ns(self, path: str) -> int:
        """Return the file's modification time in nanoseconds.

        Raises:
            FileNotFoundError: if nothing exists at path.
        """
        ...

    def read_text(self, path: str) -> str:
        """Read the whole file, every line terminated by a newline."""
        ...
