"""Shared result type and base class of the file tools."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from hashline.tools.specs import get_tool_spec
from hashline.utils.files import resolve_path


@dataclass
class ToolMetadata:
    """Timing and side effects of one tool call."""

    duration_ms: int = 0
    files_modified: List[str] = field(default_factory=list)
    data: Optional[Dict[str, Any]] = None


@dataclass
class ToolResult:
    """What a tool hands back to the agent.

    ``output`` is what the agent reads (and what the hashline hooks rewrite);
    ``error`` is set on failure only.
    """

    success: bool
    output: str
    error: Optional[str] = None
    metadata: Optional[ToolMetadata] = None

    @classmethod
    def ok(cls, output: str) -> "ToolResult":
        return cls(success=True, output=output)

    @classmethod
    def fail(cls, error: str, output: str = "") -> "ToolResult":
        return cls(success=False, output=output, error=error)

    def with_metadata(self, metadata: ToolMetadata) -> "ToolResult":
        self.metadata = metadata
        return self

    @property
    def files_modified(self) -> list[str]:
        return list(self.metadata.files_modified) if self.metadata else []

    def to_message(self) -> str:
        """Render the result as the text the agent sees."""
        if self.success:
            return self.output
        if self.output:
            return f"Error: {self.error}\n{self.output}"
        return f"Error: {self.error}"


class BaseTool(ABC):
    """A file tool bound to a project directory.

    Subclasses set ``name`` (the id the registry and the hooks dispatch on)
    and implement ``execute``; relative paths resolve against ``cwd``.
    """

    name: str
    description: str

    def __init__(self, cwd: Path):
        self.cwd = Path(cwd)

    @abstractmethod
    def execute(self, **kwargs: Any) -> ToolResult:
        """Run the tool with keyword arguments named as in its spec."""

    def resolve_path(self, path: str) -> Path:
        """Absolute, normalised *path* (symlinks are kept as written)."""
        return resolve_path(path, self.cwd)

    @classmethod
    def spec(cls) -> Optional[dict[str, Any]]:
        """The built-in JSON schema of this tool, if one is registered."""
        return get_tool_spec(cls.name)
