"""Turn resolved hashline edits into patch chunks or text replacements."""

from __future__ import annotations

from dataclasses import dataclass

from hashline.engine.edits import EditKind, EditRequest
from hashline.engine.errors import InvalidRange, StaleReference
from hashline.engine.fingerprint import LineRef
from hashline.engine.resolver import collect_range, resolve
from hashline.engine.table import FingerprintTable, PathLike, TableStore


@dataclass
class Chunk:
    """One ``@@`` section of an update: context header plus body lines."""

    context: str
    lines: list[str]

    def render(self) -> list[str]:
        return [f"@@ {self.context}", *self.lines]


@dataclass
class Replacement:
    """An exact before/after text pair for the single-edit ``edit`` tool."""

    old_text: str
    new_text: str


def _line_before(table: FingerprintTable, line: int) -> str:
    if line <= 1:
        return ""
    return table.line(line - 1) or ""


def _range_bounds(edit: EditRequest) -> tuple[LineRef, LineRef]:
    start = edit.start
    end = edit.end or start
    if end.line < start.line:
        raise InvalidRange(start.line, end.line)
    return start, end


def _resolve_range(
    store: TableStore,
    path: PathLike,
    start: LineRef,
    end: LineRef,
    table: FingerprintTable,
) -> FingerprintTable:
    table = resolve(store, path, start, table)
    if end == start:
        return table
    table = resolve(store, path, end, table)
    # A rescan for the end reference may have replaced the table start lived in.
    if start not in table:
        store.drop(path)
        raise StaleReference(str(start))
    return table


def _replaced_lines(
    store: TableStore,
    path: PathLike,
    table: FingerprintTable,
    start: LineRef,
    end: LineRef,
) -> list[str]:
    """Lines *start*..*end*; the endpoints carry the content their references were read with."""
    lines = collect_range(store, path, table, start.line, end.line)
    lines[0] = table.get(start)
    lines[-1] = table.get(end)
    return lines


def build_chunk(
    store: TableStore,
    path: PathLike,
    edit: EditRequest,
    table: FingerprintTable,
) -> tuple[Chunk, FingerprintTable]:
    """Resolve *edit* against *table* and build its chunk.

    Returns the chunk together with the (possibly rescanned) table so that
    following edits of the same file see the fresh one.
    """
    added = [f"+{line}" for line in edit.content_lines()]

    if edit.kind is EditKind.INSERT_AFTER:
        anchor = edit.after
        table = resolve(store, path, anchor, table)
        return Chunk(_line_before(table, anchor.line), [f" {table.get(anchor)}", *added]), table

    start, end = _range_bounds(edit)
    table = _resolve_range(store, path, start, end, table)
    context = _line_before(table, start.line)
    removed = [f"-{line}" for line in _replaced_lines(store, path, table, start, end)]
    return Chunk(context, [*removed, *added]), table


def generate_chunk(
    store: TableStore,
    path: PathLike,
    edit: EditRequest,
    table: FingerprintTable,
) -> list[str]:
    """Patch lines (``@@`` header, context, deletions, additions) for *edit*."""
    chunk, _ = build_chunk(store, path, edit, table)
    return chunk.render()


def resolve_replacement(
    store: TableStore,
    path: PathLike,
    edit: EditRequest,
    table: FingerprintTable,
) -> Replacement:
    """Resolve *edit* into the old/new text pair the ``edit`` tool expects."""
    if edit.kind is EditKind.INSERT_AFTER:
        anchor = edit.after
        table = resolve(store, path, anchor, table)
        anchor_content = table.get(anchor)
        return Replacement(anchor_content, f"{anchor_content}\n{edit.content}")

    start, end = _range_bounds(edit)
    table = _resolve_range(store, path, start, end, table)
    old_lines = _replaced_lines(store, path, table, start, end)
    return Replacement("\n".join(old_lines), edit.content)
