"""Read tool - numbered file listings."""

from __future__ import annotations

import time
from typing import Any, Optional

from hashline.tools.base import BaseTool, ToolMetadata, ToolResult
from hashline.utils.files import DEFAULT_MAX_SIZE, read_file_safely

DEFAULT_READ_LIMIT = 2000


class ReadTool(BaseTool):
    """Tool to read file contents with line numbers.

    Files are rendered as ``<n>: <content>`` rows inside ``<content>``;
    directories as a ``<type>directory</type>`` entry listing.
    """

    name = "read"
    description = "Read the contents of a file with line numbers"

    def __init__(self, cwd, default_limit: int = DEFAULT_READ_LIMIT, max_size: int = DEFAULT_MAX_SIZE):
        super().__init__(cwd)
        self.default_limit = default_limit
        self.max_size = max_size

    def execute(
        self,
        file_path: str = "",
        offset: int = 1,
        limit: Optional[int] = None,
        **kwargs: Any,
    ) -> ToolResult:
        """Read file contents.

        Args:
            file_path: Path to the file to read
            offset: 1-based line to start from
            limit: Maximum number of lines to show

        Returns:
            ToolResult with the listing and metadata
        """
        start_time = time.time()

        if not file_path:
            return ToolResult.fail("No file_path provided")

        path = self.resolve_path(file_path)
        if not path.exists():
            return ToolResult.fail(f"File not found: {path}")

        if path.is_dir():
            entries = sorted(
                f"{child.name}/" if child.is_dir() else child.name for child in path.iterdir()
            )
            output = "\n".join(
                [f"<path>{path}</path>", "<type>directory</type>", "<entries>", *entries, "</entries>"]
            )
            return ToolResult.ok(output)

        try:
            content = read_file_safely(path, max_size=self.max_size)
        except (OSError, ValueError) as e:
            return ToolResult.fail(f"Cannot read file: {e}")

        lines = content.split("\n")
        if lines and lines[-1] == "" and len(lines) > 1:
            # A trailing newline does not start another visible line.
            lines.pop()
        total_lines = len(lines)

        offset = max(1, int(offset or 1))
        limit = int(limit) if limit else self.default_limit
        if offset > total_lines and total_lines > 0:
            return ToolResult.fail(f"Offset {offset} exceeds total lines {total_lines}")

        start = offset - 1
        end = min(start + limit, total_lines)
        rows = [f"{i}: {line}" for i, line in enumerate(lines[start:end], start=offset)]

        if end < total_lines:
            footer = f"(File has more lines. Use 'offset' parameter to read beyond line {end})"
        else:
            footer = f"(End of file - total {total_lines} lines)"

        body = "\n".join(rows)
        output = "\n".join(
            [f"<path>{path}</path>", "<type>file</type>", f"<content>{body}", "", footer, "</content>"]
        )

        duration_ms = int((time.time() - start_time) * 1000)
        metadata = ToolMetadata(
            duration_ms=duration_ms,
            data={
                "path": str(path),
                "total_lines": total_lines,
                "shown_lines": end - start,
                "offset": offset,
                "truncated": end < total_lines,
            },
        )
        return ToolResult.ok(output).with_metadata(metadata)
