"""Local filesystem source for the file cache (stdlib only).

Other sources (in-memory fakes, archives) can be plugged in via the
FileSource protocol.
"""

import os


class LocalFileSource:
    """Read files from the local disk."""

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def stat_mtime_ns(self, path: str) -> int:
        return os.stat(path).st_mtime_ns

    def read_text(self, path: str) -> str:
        """Read a file line by line, rebuilding it with "\\n" after every line.

        Universal-newline mode maps "\\r\\n" and "\\r" to "\\n", and a final
        line without a terminator still gets one.
        """
        parts: list[str] = []
        with open(path, encoding=self.encoding, newline=None) as f:
            for line in f:
                parts.append(line if line.endswith("\n") else line + "\n")
        return "".join(parts)
