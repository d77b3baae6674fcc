"""Depth-first traversal of a remote directory tree."""

import posixpath
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from .entry import Entry, EntryType


@dataclass
class _Item:
    path: str
    entry: Entry
    error: Optional[BaseException] = None


def _join(base: str, name: str) -> str:
    joined = posixpath.normpath("/".join(part for part in (base, name) if part))
    if joined.startswith("//"):
        joined = "/" + joined.lstrip("/")
    return joined


class Walker:
    """Walks the tree below ``root`` using the server's listings."""

    def __init__(self, server_conn, root: str) -> None:
        self.server_conn = server_conn
        if not root.endswith("/"):
            root += "/"
        self.root = root
        self._cur: Optional[_Item] = None
        self._stack: List[_Item] = []
        self._descend = True

    def next(self) -> bool:
        """Advance to the next file or directory; False at the end or on error."""
        if self._cur is None:
            self._cur = _Item(self.root, Entry(type=EntryType.FOLDER))

        if self._descend and self._cur.entry.type == EntryType.FOLDER:
            try:
                entries = self.server_conn.list(self._cur.path)
            except Exception as exc:
                self._cur.error = exc
                return False
            for entry in entries:
                if entry.name in (".", ".."):
                    continue
                self._stack.append(_Item(_join(self._cur.path, entry.name), entry))

        if not self._stack:
            return False

        self._cur = self._stack.pop()
        self._descend = True
        return True

    def skip_dir(self) -> None:
        """Do not descend into the current directory."""
        self._descend = False

    def err(self) -> Optional[BaseException]:
        """Return the error from the latest visit, if any."""
        return self._cur.error if self._cur else None

    def stat(self) -> Optional[Entry]:
        """Return the entry visited last."""
        return self._cur.entry if self._cur else None

    def path(self) -> Optional[str]:
        """Return the path visited last, prefixed by the root."""
        return self._cur.path if self._cur else None

    def __iter__(self) -> Iterator[Tuple[str, Entry]]:
        """Yield ``(path, entry)`` pairs; raise the listing error if one stops the walk."""
        while self.next():
            yield self._cur.path, self._cur.entry
        error = self.err()
        if error is not None:
            raise error