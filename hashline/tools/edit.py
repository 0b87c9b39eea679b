"""Edit tool - exact string replacement in a file."""

from __future__ import annotations

from typing import Any

from hashline.tools.base import BaseTool, ToolMetadata, ToolResult
from hashline.utils.files import read_text, write_text


class EditTool(BaseTool):
    """Targeted find-and-replace in a file."""

    name = "edit"
    description = "Replace an exact string in a file"

    def execute(
        self,
        file_path: str = "",
        old_string: str = "",
        new_string: str = "",
        replace_all: bool = False,
        **kwargs: Any,
    ) -> ToolResult:
        if not file_path:
            return ToolResult.fail("No file_path provided")
        if not old_string:
            return ToolResult.fail("No old_string provided")
        if old_string == new_string:
            return ToolResult.fail("old_string and new_string are identical")

        path = self.resolve_path(file_path)
        if not path.is_file():
            return ToolResult.fail(f"File not found: {path}")

        try:
            content = read_text(path)
        except OSError as e:
            return ToolResult.fail(f"Failed to read file: {e}")

        count = content.count(old_string)
        if count == 0:
            return ToolResult.fail(
                f"old_string not found in {file_path}. Make sure it matches the file content exactly."
            )

        if count > 1 and not replace_all:
            return ToolResult.fail(
                f"old_string found {count} times in {file_path}. "
                f"Provide more context to make it unique, or set replace_all=true."
            )

        if replace_all:
            new_content = content.replace(old_string, new_string)
            replaced = count
        else:
            new_content = content.replace(old_string, new_string, 1)
            replaced = 1

        try:
            write_text(path, new_content)
        except OSError as e:
            return ToolResult.fail(f"Failed to write file: {e}")

        result = ToolResult.ok(f"Replaced {replaced} occurrence(s) in {file_path}")
        return result.with_metadata(ToolMetadata(files_modified=[str(path)]))
