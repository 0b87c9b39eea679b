"""
Apply patch tool - parser and applier for the *** Begin Patch format.

    *** Begin Patch
    *** Update File: src/app.py
    @@ line before the change
    -old line
    +new line
    *** End Patch

Each ``@@`` chunk is located by seeking its context line and then its old
lines, top to bottom, so chunks of one file must be ordered by position.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional, Sequence

from hashline.tools.base import BaseTool, ToolMetadata, ToolResult
from hashline.utils.files import read_text, write_text

BEGIN_MARKER = "*** Begin Patch"
END_MARKER = "*** End Patch"
ADD_FILE = "*** Add File: "
DELETE_FILE = "*** Delete File: "
UPDATE_FILE = "*** Update File: "
END_OF_FILE = "*** End of File"

# =============================================================================
# Data Structures
# =============================================================================


class PatchError(ValueError):
    """Raised when a patch cannot be parsed or applied."""


@dataclass
class HunkLine:
    """A single line in a hunk."""

    type: str  # "context", "add", "remove"
    content: str


@dataclass
class Hunk:
    """One ``@@`` chunk of an update."""

    context: str = ""
    lines: List[HunkLine] = field(default_factory=list)

    @property
    def old_lines(self) -> list[str]:
        return [hl.content for hl in self.lines if hl.type in ("context", "remove")]

    @property
    def new_lines(self) -> list[str]:
        return [hl.content for hl in self.lines if hl.type in ("context", "add")]


@dataclass
class FileChange:
    """A file operation from a patch."""

    path: Path
    op: str  # "add", "delete", "update"
    hunks: List[Hunk] = field(default_factory=list)
    added: List[str] = field(default_factory=list)


# =============================================================================
# Parser
# =============================================================================


def parse_patch(patch: str) -> List[FileChange]:
    """Parse a *** Begin Patch document into file changes."""
    # Split on "\n" only; patch lines may legitimately end with "\r".
    lines = patch.split("\n")
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    if not lines or lines[0].strip() != BEGIN_MARKER:
        raise PatchError(f"The first line of the patch must be '{BEGIN_MARKER}'")
    if lines[-1].strip() != END_MARKER:
        raise PatchError(f"The last line of the patch must be '{END_MARKER}'")

    changes: List[FileChange] = []
    current: Optional[FileChange] = None
    hunk: Optional[Hunk] = None

    for number, line in enumerate(lines[1:-1], start=2):
        if line.startswith(UPDATE_FILE):
            current = FileChange(Path(line[len(UPDATE_FILE):].strip()), "update")
            changes.append(current)
            hunk = None
        elif line.startswith(ADD_FILE):
            current = FileChange(Path(line[len(ADD_FILE):].strip()), "add")
            changes.append(current)
            hunk = None
        elif line.startswith(DELETE_FILE):
            current = FileChange(Path(line[len(DELETE_FILE):].strip()), "delete")
            changes.append(current)
            hunk = None
        elif current is None:
            raise PatchError(f"Line {number}: expected a file header, got {line!r}")
        elif current.op == "add":
            if not line.startswith("+"):
                raise PatchError(f"Line {number}: added files may only contain '+' lines")
            current.added.append(line[1:])
        elif current.op == "delete":
            raise PatchError(f"Line {number}: unexpected content after '{DELETE_FILE.strip()}'")
        elif line == "@@" or line.startswith("@@ "):
            hunk = Hunk(context=line[3:])
            current.hunks.append(hunk)
        elif line.rstrip() == END_OF_FILE:
            continue
        else:
            if hunk is None:
                # Codex-style chunks may omit the first @@ header.
                hunk = Hunk()
                current.hunks.append(hunk)
            if line.startswith("+"):
                hunk.lines.append(HunkLine("add", line[1:]))
            elif line.startswith("-"):
                hunk.lines.append(HunkLine("remove", line[1:]))
            elif line.startswith(" ") or line == "":
                hunk.lines.append(HunkLine("context", line[1:]))
            else:
                raise PatchError(f"Line {number}: unexpected line {line!r}")

    for change in changes:
        if change.op == "update" and not change.hunks:
            raise PatchError(f"Update of {change.path} has no chunks")
    return changes


# =============================================================================
# Hunk Application
# =============================================================================


def seek_sequence(lines: Sequence[str], pattern: Sequence[str], start: int) -> Optional[int]:
    """Find *pattern* in *lines* at or after *start*.

    Tries an exact match first, then ignores trailing whitespace, then
    surrounding whitespace.
    """
    if not pattern:
        return start
    normalisers = (lambda s: s, str.rstrip, str.strip)
    for norm in normalisers:
        wanted = [norm(p) for p in pattern]
        for pos in range(max(0, start), len(lines) - len(pattern) + 1):
            if all(norm(lines[pos + i]) == wanted[i] for i in range(len(pattern))):
                return pos
    return None


def apply_hunks(original: Sequence[str], hunks: Sequence[Hunk], path: Path) -> list[str]:
    """Apply *hunks* in order to *original* and return the new lines."""
    lines = list(original)
    cursor = 0
    replacements: list[tuple[int, int, list[str]]] = []

    for hunk in hunks:
        if hunk.context:
            # The context may be the last line consumed by the previous chunk.
            idx = seek_sequence(lines, [hunk.context], max(0, cursor - 1))
            if idx is None:
                raise PatchError(f"Failed to find context {hunk.context!r} in {path}")
            cursor = idx + 1

        old, new = hunk.old_lines, hunk.new_lines
        if not old:
            replacements.append((cursor, 0, new))
            continue

        idx = seek_sequence(lines, old, cursor)
        if idx is None:
            raise PatchError(f"Failed to find expected lines in {path}:\n" + "\n".join(old))
        replacements.append((idx, len(old), new))
        cursor = idx + len(old)

    for idx, count, new in sorted(replacements, key=lambda r: r[0], reverse=True):
        lines[idx:idx + count] = new
    return lines


# =============================================================================
# Tool Implementation
# =============================================================================


class ApplyPatchTool(BaseTool):
    """Tool for applying *** Begin Patch documents.

    Every change is computed before anything is written, so a patch that
    fails to apply leaves all files untouched.
    """

    name = "apply_patch"
    description = "Applies file patches in the *** Begin Patch format."

    def execute(self, **kwargs: Any) -> ToolResult:
        """Apply a patch.

        Args:
            **kwargs: Tool arguments
                - patch_text: The patch content (``patch`` is accepted too)
                - dry_run: If True, don't actually modify files

        Returns:
            ToolResult with success/failure info
        """
        patch: str = kwargs.get("patch_text") or kwargs.get("patch") or ""
        dry_run: bool = kwargs.get("dry_run", False)

        if not patch:
            return ToolResult.fail("Missing required parameter: patch_text")

        try:
            changes = parse_patch(patch)
            if not changes:
                return ToolResult.fail("No valid operations in patch")
            planned = [self._plan(change) for change in changes]
        except PatchError as e:
            return ToolResult.fail(f"Failed to apply patch: {e}")
        except OSError as e:
            return ToolResult.fail(f"Failed to read file: {e}")

        report = []
        modified = []
        for change, target, content in planned:
            if not dry_run:
                try:
                    if change.op == "delete":
                        target.unlink()
                    else:
                        target.parent.mkdir(parents=True, exist_ok=True)
                        write_text(target, content)
                except OSError as e:
                    return ToolResult.fail(f"Failed to write {change.path}: {e}")
            report.append(f"  {change.op[0].upper()} {change.path.as_posix()}")
            modified.append(str(target))

        action = "Would apply" if dry_run else "Applied"
        result = ToolResult.ok(f"{action} changes:\n" + "\n".join(report))
        return result.with_metadata(ToolMetadata(files_modified=modified))

    def _plan(self, change: FileChange) -> tuple[FileChange, Path, str]:
        target = self.resolve_path(str(change.path))
        if change.op == "add":
            return change, target, "\n".join(change.added) + "\n"
        if not target.is_file():
            raise PatchError(f"File not found: {change.path}")
        if change.op == "delete":
            return change, target, ""
        original = read_text(target).split("\n")
        return change, target, "\n".join(apply_hunks(original, change.hunks, change.path))
