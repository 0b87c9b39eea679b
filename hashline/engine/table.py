"""Per-file fingerprint tables and the store that owns them."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, Optional, Tuple, Union

from hashline.engine.errors import MalformedReference, Unreadable
from hashline.engine.fingerprint import LineRef
from hashline.utils.files import read_file_safely

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
FileReader = Callable[[Path], str]


def table_key(path: PathLike) -> str:
    """Normalise a path into the key used by the store."""
    return os.path.normpath(os.fspath(path))


class FingerprintTable:
    """Mapping of ``line:hash`` references to the content they were read from.

    Entries are only ever added; a table reflects the versions of the file
    that were scanned or read into it, not necessarily what is on disk now.
    """

    def __init__(self, path: PathLike, entries: Iterable[Tuple[LineRef, str]] = ()):
        self.path = table_key(path)
        self._entries: Dict[LineRef, str] = {}
        self._by_line: Dict[int, str] = {}
        self.update(entries)

    @classmethod
    def from_text(cls, path: PathLike, text: str) -> "FingerprintTable":
        """Fingerprint every line of *text* (1-indexed)."""
        lines = text.split("\n")
        return cls(path, ((LineRef.of(i, line), line) for i, line in enumerate(lines, start=1)))

    def update(self, entries: Iterable[Tuple[LineRef, str]]) -> None:
        """Overlay *entries*; existing entries not mentioned are kept."""
        for ref, content in entries:
            self._entries[ref] = content
            self._by_line[ref.line] = content

    def get(self, ref: Union[LineRef, str]) -> Optional[str]:
        if isinstance(ref, str):
            ref = LineRef.parse(ref)
        return self._entries.get(ref)

    def line(self, number: int) -> Optional[str]:
        """Content most recently recorded for line *number*, if any."""
        return self._by_line.get(number)

    def refs(self) -> list[str]:
        return [str(ref) for ref in self._entries]

    def items(self) -> Iterator[Tuple[LineRef, str]]:
        return iter(self._entries.items())

    def __contains__(self, ref: object) -> bool:
        if isinstance(ref, str):
            try:
                ref = LineRef.parse(ref)
            except MalformedReference:
                return False
        return ref in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"FingerprintTable({self.path!r}, {len(self)} entries)"


class TableStore:
    """Owns the fingerprint tables of one engine, keyed by absolute path.

    The store is not thread-safe; tool calls are executed one at a time.
    """

    def __init__(self, reader: Optional[FileReader] = None):
        self._reader = reader or read_file_safely
        self._tables: Dict[str, FingerprintTable] = {}

    def scan(self, path: PathLike) -> FingerprintTable:
        """Read *path* from disk and replace its table with a fresh one.

        Raises:
            Unreadable: If the file cannot be read.
        """
        key = table_key(path)
        try:
            text = self._reader(Path(key))
        except (OSError, ValueError) as e:
            logger.debug("Scan of %s failed: %s", key, e)
            raise Unreadable(key, e) from e
        table = FingerprintTable.from_text(key, text)
        self._tables[key] = table
        logger.debug("Scanned %s (%d lines)", key, len(table))
        return table

    def merge(self, path: PathLike, entries: Iterable[Tuple[LineRef, str]]) -> FingerprintTable:
        """Overlay *entries* onto the table for *path*, creating it if absent."""
        key = table_key(path)
        table = self._tables.get(key)
        if table is None:
            table = FingerprintTable(key)
            self._tables[key] = table
        before = len(table)
        table.update(entries)
        logger.debug("Merged %d new entries into %s", len(table) - before, key)
        return table

    def get(self, path: PathLike) -> Optional[FingerprintTable]:
        return self._tables.get(table_key(path))

    def drop(self, path: PathLike) -> bool:
        """Destroy the table for *path*. Returns True if one existed."""
        removed = self._tables.pop(table_key(path), None) is not None
        if removed:
            logger.debug("Dropped fingerprint table for %s", table_key(path))
        return removed

    def clear(self) -> None:
        self._tables.clear()

    def paths(self) -> list[str]:
        return list(self._tables)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        return table_key(path) in self._tables

    def __len__(self) -> int:
        return len(self._tables)
