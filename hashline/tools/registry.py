"""Tool registry - dispatches tool calls and runs the hashline hooks around them."""

from __future__ import annotations

import functools
import logging
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional

from hashline.engine.errors import HashlineError
from hashline.engine.table import TableStore
from hashline.plugin import HashlinePlugin
from hashline.tools.apply_patch import ApplyPatchTool
from hashline.tools.base import BaseTool, ToolResult
from hashline.tools.edit import EditTool
from hashline.tools.read import DEFAULT_READ_LIMIT, ReadTool
from hashline.utils.files import DEFAULT_MAX_SIZE, read_file_safely

if TYPE_CHECKING:
    from hashline.config.models import HashlineConfig

logger = logging.getLogger(__name__)


@dataclass
class ToolStats:
    """Per-tool execution statistics."""

    executions: int = 0
    successes: int = 0
    total_ms: int = 0

    def success_rate(self) -> float:
        """Get the success rate for this tool."""
        if self.executions == 0:
            return 0.0
        return self.successes / self.executions


@dataclass
class ExecutorStats:
    """Aggregate execution statistics."""

    total_executions: int = 0
    successful_executions: int = 0
    failed_executions: int = 0
    rejected_by_hooks: int = 0
    by_tool: Dict[str, ToolStats] = field(default_factory=dict)


class ToolRegistry:
    """Registry for managing and dispatching tool calls.

    Each call runs ``before_tool`` -> tool -> ``after_tool`` under one lock,
    so fingerprint tables are never scanned and dropped concurrently.
    """

    def __init__(
        self,
        cwd: Optional[Path] = None,
        plugin: Optional[HashlinePlugin] = None,
        read_limit: int = DEFAULT_READ_LIMIT,
        max_file_size: int = DEFAULT_MAX_SIZE,
    ):
        """Initialize the registry.

        Args:
            cwd: Working directory the tools resolve relative paths against
            plugin: Hashline plugin to run around the tools (None disables it)
        """
        self.cwd = Path(cwd or Path.cwd())
        self.plugin = plugin
        self._tools: Dict[str, BaseTool] = {
            "read": ReadTool(self.cwd, default_limit=read_limit, max_size=max_file_size),
            "edit": EditTool(self.cwd),
            "apply_patch": ApplyPatchTool(self.cwd),
        }
        self._stats = ExecutorStats()
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: "HashlineConfig") -> "ToolRegistry":
        """Build a registry with a hashline plugin from *config*."""
        cwd = config.working_directory
        store = TableStore(functools.partial(read_file_safely, max_size=config.read.max_file_size))
        plugin = HashlinePlugin(
            cwd,
            store=store,
            enforce_references=config.edit.enforce_references,
            inject_instructions=config.edit.inject_instructions,
        )
        return cls(
            cwd,
            plugin=plugin,
            read_limit=config.read.default_limit,
            max_file_size=config.read.max_file_size,
        )

    def register_tool(self, tool: BaseTool) -> None:
        """Register (or replace) a tool under its ``name``."""
        self._tools[tool.name] = tool

    def execute(self, name: str, arguments: dict[str, Any]) -> ToolResult:
        """Execute a tool by name.

        Args:
            name: Tool name
            arguments: Tool arguments

        Returns:
            ToolResult from the tool execution
        """
        start_time = time.time()
        with self._lock:
            result = self._execute_locked(name, arguments)
        duration_ms = int((time.time() - start_time) * 1000)
        self._record_execution(name, duration_ms, result.success)
        return result

    def _execute_locked(self, name: str, arguments: dict[str, Any]) -> ToolResult:
        tool = self._tools.get(name)
        if tool is None:
            return ToolResult.fail(f"Unknown tool: {name}")

        args = dict(arguments)
        if self.plugin is not None:
            try:
                args = self.plugin.before_tool(name, args)
            except HashlineError as e:
                logger.info("Rejected %s call: %s", name, e)
                self._stats.rejected_by_hooks += 1
                return ToolResult.fail(str(e))

        logger.debug("Executing %s", name)
        try:
            result = tool.execute(**args)
        except Exception as e:
            logger.exception("Tool %s raised", name)
            result = ToolResult.fail(f"Tool {name} failed: {e}")

        if self.plugin is not None:
            result.output = self.plugin.after_tool(
                name, args, result.output, success=result.success, modified=result.files_modified
            )
        return result

    def _record_execution(self, name: str, duration_ms: int, success: bool) -> None:
        self._stats.total_executions += 1
        if success:
            self._stats.successful_executions += 1
        else:
            self._stats.failed_executions += 1
        tool_stats = self._stats.by_tool.setdefault(name, ToolStats())
        tool_stats.executions += 1
        tool_stats.total_ms += duration_ms
        if success:
            tool_stats.successes += 1

    def stats(self) -> ExecutorStats:
        """Get execution statistics."""
        return self._stats

    def get_tools_for_llm(self) -> list[dict[str, Any]]:
        """Tool specifications as the agent should see them."""
        specs = []
        for name, tool in self._tools.items():
            spec = self.plugin.tool_definition(name) if self.plugin is not None else None
            spec = spec or tool.spec()
            if spec is not None:
                specs.append(spec)
        return specs
