"""When fingerprint tables are built, merged and thrown away."""

from __future__ import annotations

import logging
from typing import Iterable, Tuple

from hashline.engine.fingerprint import LineRef
from hashline.engine.table import FingerprintTable, PathLike, TableStore, table_key

logger = logging.getLogger(__name__)


class Lifecycle:
    """Tracks the read -> edit -> invalidate cycle of every file.

    - a read merges the lines it showed into the file's table;
    - an edit against a file without a table scans it first;
    - once the patch mechanism reports completion, every path in the
      pending-invalidation set loses its table.
    """

    def __init__(self, store: TableStore):
        self.store = store
        self._pending: list[str] = []

    def ensure(self, path: PathLike) -> FingerprintTable:
        """Return the table for *path*, scanning the file if there is none.

        Raises:
            Unreadable: If no table exists and the file cannot be read.
        """
        table = self.store.get(path)
        if table is None:
            table = self.store.scan(path)
        return table

    def record_read(self, path: PathLike, entries: Iterable[Tuple[LineRef, str]]) -> FingerprintTable:
        return self.store.merge(path, entries)

    def has_table(self, path: PathLike) -> bool:
        return path in self.store

    def invalidate(self, path: PathLike) -> None:
        self.store.drop(path)

    @property
    def pending(self) -> tuple[str, ...]:
        return tuple(self._pending)

    def mark_pending(self, paths: Iterable[PathLike]) -> None:
        """Replace the pending-invalidation set with *paths*."""
        self._pending = [table_key(p) for p in paths]
        logger.debug("Pending invalidation: %s", self._pending)

    def complete(self) -> list[str]:
        """Drain the pending set, destroying each path's table."""
        drained, self._pending = self._pending, []
        for path in drained:
            self.store.drop(path)
        return drained
