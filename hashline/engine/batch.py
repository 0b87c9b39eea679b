"""Assemble many hashline edits into one ``*** Begin Patch`` document."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Union

from hashline.engine.chunks import build_chunk
from hashline.engine.edits import EditRequest
from hashline.engine.errors import Unreadable
from hashline.engine.lifecycle import Lifecycle
from hashline.utils.files import relative_posix, resolve_path

logger = logging.getLogger(__name__)

BEGIN_PATCH = "*** Begin Patch"
END_PATCH = "*** End Patch"
UPDATE_FILE = "*** Update File: "


@dataclass
class FileEdits:
    """The edits of one batch that target the same file."""

    path: str
    relative_path: str
    edits: list[EditRequest] = field(default_factory=list)


@dataclass
class PatchBatch:
    """A rendered patch document and the files it covers."""

    text: str
    paths: list[str]
    skipped: list[str] = field(default_factory=list)


def group_by_file(edits: Iterable[EditRequest], root: Union[str, Path]) -> list[FileEdits]:
    """Group *edits* by absolute path, keeping submission order per file."""
    groups: dict[str, FileEdits] = {}
    for edit in edits:
        path = str(resolve_path(edit.file_path, Path(root)))
        group = groups.get(path)
        if group is None:
            group = FileEdits(path, relative_posix(path, root))
            groups[path] = group
        group.edits.append(edit)
    return list(groups.values())


def resolve_batch(
    lifecycle: Lifecycle,
    edits: Iterable[EditRequest],
    root: Union[str, Path],
) -> PatchBatch:
    """Resolve *edits* into one patch document.

    Files that cannot be read are skipped; a stale reference or an inverted
    range anywhere aborts the whole batch. On success every grouped path is
    put in the lifecycle's pending-invalidation set.
    """
    lines = [BEGIN_PATCH]
    paths: list[str] = []
    skipped: list[str] = []

    for group in group_by_file(edits, root):
        paths.append(group.path)
        try:
            table = lifecycle.ensure(group.path)
        except Unreadable:
            logger.warning("Skipping %d edit(s) for unreadable file %s", len(group.edits), group.path)
            skipped.append(group.path)
            continue

        # Chunks of one file apply top-to-bottom against the original numbering.
        ordered = sorted(group.edits, key=lambda e: e.primary.line)

        lines.append(f"{UPDATE_FILE}{group.relative_path}")
        for edit in ordered:
            chunk, table = build_chunk(lifecycle.store, group.path, edit, table)
            lines.extend(chunk.render())

    lines.append(END_PATCH)
    lifecycle.mark_pending(paths)
    return PatchBatch("\n".join(lines), paths, skipped)
