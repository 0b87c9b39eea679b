"""Staleness handling for hash references.

A reference that is missing from the in-memory table gets exactly one
rescan of the file. If the rescan knows the reference the caller's view was
merely incomplete; otherwise the table is destroyed and the caller has to
re-read the file.
"""

from __future__ import annotations

import logging
from typing import Union

from hashline.engine.errors import StaleReference
from hashline.engine.fingerprint import LineRef
from hashline.engine.table import FingerprintTable, PathLike, TableStore

logger = logging.getLogger(__name__)


def resolve(
    store: TableStore,
    path: PathLike,
    ref: Union[LineRef, str],
    table: FingerprintTable,
) -> FingerprintTable:
    """Return a table that contains *ref*, rescanning *path* at most once.

    Raises:
        Unreadable: If the rescan cannot read the file.
        StaleReference: If the rescanned file still lacks *ref*. The table
            for *path* no longer exists afterwards.
    """
    if isinstance(ref, str):
        ref = LineRef.parse(ref)
    if ref in table:
        return table

    logger.debug("Reference %s not in table for %s, rescanning", ref, path)
    table = store.scan(path)
    if ref in table:
        return table

    store.drop(path)
    raise StaleReference(str(ref))


def collect_range(
    store: TableStore,
    path: PathLike,
    table: FingerprintTable,
    start_line: int,
    end_line: int,
) -> list[str]:
    """Return the recorded content of lines *start_line*..*end_line* inclusive.

    A gap in the table (possible after partial reads) destroys the table.
    """
    lines: list[str] = []
    for number in range(start_line, end_line + 1):
        content = table.line(number)
        if content is None:
            store.drop(path)
            raise StaleReference(
                f"{start_line}-{end_line}",
                f"No hash found for line {number} in range {start_line}-{end_line}. "
                "The file may have changed. Please re-read the file.",
            )
        lines.append(content)
    return lines
