"""Instruction text for agents editing files with hash references."""

from __future__ import annotations

HASHLINE_INSTRUCTIONS = """## Hashline Edit Mode (MANDATORY)

When you read a file, each line is tagged with a hash: `<lineNumber>:<hash>| <content>`.
You MUST use these hash references when editing files. Do NOT use old_string/new_string or patch_text.

Three operations:

1. **Replace line** - replace a single line:
   `start_hash: "3:cc7", content: "  \\"version\\": \\"1.0.0\\","`

2. **Replace range** - replace lines start_hash through end_hash:
   `start_hash: "3:cc7", end_hash: "5:e60", content: "line3\\nline4\\nline5"`

3. **Insert after** - insert new content after a line (without replacing it):
   `after_hash: "3:cc7", content: "  \\"newKey\\": \\"newValue\\","`

You can edit multiple files in a single call by passing an `edits` array.
Each edit specifies its own file_path and hash references.

NEVER pass old_string, new_string, or patch_text. ALWAYS use start_hash/after_hash + content."""

_OPERATIONS = """Three operations:
1. Replace line:  start_hash only -> replaces that single line
2. Replace range: start_hash + end_hash -> replaces all lines in range
3. Insert after:  after_hash -> inserts content after that line (no replacement)"""

EDIT_DESCRIPTION = f"""Edit a file using hashline references from the most recent read output.
Each line is tagged as `<line>:<hash>| <content>`.

{_OPERATIONS}"""

APPLY_PATCH_DESCRIPTION = f"""Edit one or more files using hashline references from read output.
Each line is tagged as `<line>:<hash>| <content>`.
Pass an `edits` array - multiple files and multiple edits per file are supported.

{_OPERATIONS}"""


def inject_instructions(system: list[str]) -> list[str]:
    """Return *system* with the hashline instructions appended once."""
    if HASHLINE_INSTRUCTIONS in system:
        return list(system)
    return [*system, HASHLINE_INSTRUCTIONS]
