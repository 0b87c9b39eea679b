"""Tool specifications - JSON schemas for the file tools and their hashline variants."""

from __future__ import annotations

from typing import Any, Optional

from hashline.prompts.system import APPLY_PATCH_DESCRIPTION, EDIT_DESCRIPTION

# Read tool
READ_SPEC: dict[str, Any] = {
    "name": "read",
    "description": """Reads a local file with 1-indexed line numbers.
Returns the content wrapped in <path>, <type> and <content> tags, one line per
row in the format '{number}: {content}'.
Supports reading specific ranges with offset and limit parameters.""",
    "parameters": {
        "type": "object",
        "properties": {
            "file_path": {
                "type": "string",
                "description": "Absolute or relative path to the file or directory",
            },
            "offset": {
                "type": "number",
                "description": "The line number to start reading from (1-indexed, default: 1)",
            },
            "limit": {
                "type": "number",
                "description": "The maximum number of lines to return (default: 2000)",
            },
        },
        "required": ["file_path"],
    },
}

# Exact string replacement
EDIT_SPEC: dict[str, Any] = {
    "name": "edit",
    "description": """Performs exact string replacement in a file.
old_string must match the file content exactly and be unique unless replace_all is set.""",
    "parameters": {
        "type": "object",
        "properties": {
            "file_path": {"type": "string", "description": "Path to the file to modify"},
            "old_string": {"type": "string", "description": "The text to replace"},
            "new_string": {"type": "string", "description": "The text to replace it with"},
            "replace_all": {
                "type": "boolean",
                "description": "Replace all occurrences of old_string (default false)",
            },
        },
        "required": ["file_path", "old_string", "new_string"],
    },
}

# Patch documents
APPLY_PATCH_SPEC: dict[str, Any] = {
    "name": "apply_patch",
    "description": """Applies a patch in the *** Begin Patch format.
Each file section starts with '*** Update File: <path>' (or Add/Delete File),
followed by '@@ <context line>' chunks of ' ', '-' and '+' prefixed lines.""",
    "parameters": {
        "type": "object",
        "properties": {
            "patch_text": {"type": "string", "description": "The full patch text"},
        },
        "required": ["patch_text"],
    },
}

_HASH_PROPERTIES: dict[str, Any] = {
    "file_path": {
        "type": "string",
        "description": "The absolute path to the file to modify",
    },
    "start_hash": {
        "type": "string",
        "description": 'Hash reference for the start line to replace (e.g. "42:a3f")',
    },
    "end_hash": {
        "type": "string",
        "description": "Hash reference for the end line (for multi-line range replacement)",
    },
    "after_hash": {
        "type": "string",
        "description": "Hash reference for the line to insert after (no replacement)",
    },
    "content": {
        "type": "string",
        "description": "The new content to insert or replace with",
    },
}

HASHLINE_EDIT_SPEC: dict[str, Any] = {
    "name": "edit",
    "description": EDIT_DESCRIPTION,
    "parameters": {
        "type": "object",
        "properties": dict(_HASH_PROPERTIES),
        "required": ["file_path", "content"],
    },
}

HASHLINE_APPLY_PATCH_SPEC: dict[str, Any] = {
    "name": "apply_patch",
    "description": APPLY_PATCH_DESCRIPTION,
    "parameters": {
        "type": "object",
        "properties": {
            "edits": {
                "type": "array",
                "description": (
                    "Array of edits to apply. Multiple files and multiple edits "
                    "per file are supported."
                ),
                "items": {
                    "type": "object",
                    "properties": dict(_HASH_PROPERTIES),
                    "required": ["file_path", "content"],
                },
            },
        },
        "required": ["edits"],
    },
}

TOOL_SPECS: dict[str, dict[str, Any]] = {
    "read": READ_SPEC,
    "edit": EDIT_SPEC,
    "apply_patch": APPLY_PATCH_SPEC,
}

HASHLINE_SPECS: dict[str, dict[str, Any]] = {
    "edit": HASHLINE_EDIT_SPEC,
    "apply_patch": HASHLINE_APPLY_PATCH_SPEC,
}


def get_tool_spec(name: str) -> Optional[dict[str, Any]]:
    """Get the built-in spec for a tool by name."""
    return TOOL_SPECS.get(name)


def get_all_tools() -> list[dict[str, Any]]:
    """Get the built-in specs of all tools."""
    return list(TOOL_SPECS.values())
