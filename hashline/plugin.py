"""Hashline plugin - hooks run by the tool layer around read/edit/apply_patch.

``after_tool``      tags read listings with hash references and invalidates
                    tables once an edit completed.
``before_tool``     rewrites hash-reference arguments into the arguments the
                    built-in ``edit`` / ``apply_patch`` tools understand.
``tool_definition`` swaps the built-in tool schemas for hashline ones.
``system_transform`` appends the hashline instructions to the system prompt.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Union

from hashline.engine.batch import resolve_batch
from hashline.engine.chunks import resolve_replacement
from hashline.engine.edits import EditRequest, has_hash_arguments
from hashline.engine.errors import InvalidEdit, MandatoryReferenceUsage
from hashline.engine.lifecycle import Lifecycle
from hashline.engine.listing import annotate_listing
from hashline.engine.table import TableStore
from hashline.prompts.system import inject_instructions as append_instructions
from hashline.tools.specs import HASHLINE_SPECS
from hashline.utils.files import resolve_path

logger = logging.getLogger(__name__)

_HASH_ARGUMENT_KEYS = frozenset({
    "file_path", "filePath",
    "start_hash", "startHash",
    "end_hash", "endHash",
    "after_hash", "afterHash",
    "content",
})


def _first(args: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = args.get(key)
        if value:
            return value
    return None


def _without(args: Mapping[str, Any], keys: frozenset[str]) -> dict[str, Any]:
    return {k: v for k, v in args.items() if k not in keys}


class HashlinePlugin:
    """Connects the hash-reference engine to a tool framework.

    One plugin owns one table store; plugins never share state, so several
    can live in the same process.
    """

    def __init__(
        self,
        directory: Union[str, Path],
        store: Optional[TableStore] = None,
        enforce_references: bool = True,
        inject_instructions: bool = True,
    ):
        self.directory = resolve_path(directory)
        self.lifecycle = Lifecycle(store if store is not None else TableStore())
        self.enforce_references = enforce_references
        self.inject_instructions = inject_instructions

    @property
    def store(self) -> TableStore:
        return self.lifecycle.store

    def resolve_path(self, file_path: Union[str, Path]) -> str:
        return str(resolve_path(file_path, self.directory))

    # -----------------------------------------------------------------
    # After a tool ran
    # -----------------------------------------------------------------

    def after_tool(
        self,
        tool: str,
        args: Mapping[str, Any],
        output: str,
        success: bool = True,
        modified: Iterable[Union[str, Path]] = (),
    ) -> str:
        """Post-process a tool's output. Returns the (possibly rewritten) output.

        The pending-invalidation set is drained whenever apply_patch finished,
        successful or not; the other hooks only act on success. *modified*
        lists the files the tool reports having written; their tables go too,
        which covers raw patch_text patches that never filled the pending set.
        """
        if success:
            for path in modified:
                self.lifecycle.invalidate(self.resolve_path(path))

        if tool == "edit":
            file_path = _first(args, "file_path", "filePath")
            if success and file_path:
                self.lifecycle.invalidate(self.resolve_path(file_path))
            return output

        if tool == "apply_patch":
            drained = self.lifecycle.complete()
            if drained:
                logger.debug("Invalidated %d table(s) after apply_patch", len(drained))
            return output

        if tool != "read" or not success:
            return output

        annotated = annotate_listing(output)
        if annotated.is_directory or annotated.path is None:
            return output
        if annotated.entries:
            self.lifecycle.record_read(self.resolve_path(annotated.path), annotated.entries)
        return annotated.text

    # -----------------------------------------------------------------
    # Before a tool runs
    # -----------------------------------------------------------------

    def before_tool(self, tool: str, args: Mapping[str, Any]) -> dict[str, Any]:
        """Rewrite hashline arguments into native ones.

        Raises:
            HashlineError: If references are stale, malformed or inverted, or
                if a text-quoting edit targets a file with known hashes.
        """
        if tool == "apply_patch":
            return self._before_apply_patch(args)
        if tool == "edit":
            return self._before_edit(args)
        return dict(args)

    def _before_apply_patch(self, args: Mapping[str, Any]) -> dict[str, Any]:
        edits = args.get("edits")
        if _first(args, "patch_text", "patchText") and not edits and not has_hash_arguments(args):
            return dict(args)

        if edits is not None:
            requests = [EditRequest.from_args(e) for e in self._edit_list(edits)]
            batch = resolve_batch(self.lifecycle, requests, self.directory)
            rewritten = _without(args, frozenset({"edits"}))
            rewritten["patch_text"] = batch.text
            return rewritten

        if not has_hash_arguments(args):
            return dict(args)

        edit = EditRequest.from_args(args)
        self.lifecycle.ensure(self.resolve_path(edit.file_path))
        batch = resolve_batch(self.lifecycle, [edit], self.directory)
        rewritten = _without(args, _HASH_ARGUMENT_KEYS)
        rewritten["patch_text"] = batch.text
        return rewritten

    @staticmethod
    def _edit_list(edits: Any) -> list[Mapping[str, Any]]:
        if isinstance(edits, str):
            try:
                edits = json.loads(edits)
            except json.JSONDecodeError as e:
                raise InvalidEdit(f"edits is not valid JSON: {e}") from e
        if not isinstance(edits, list) or not all(isinstance(e, Mapping) for e in edits):
            raise InvalidEdit("edits must be an array of objects")
        return edits

    def _before_edit(self, args: Mapping[str, Any]) -> dict[str, Any]:
        if _first(args, "old_string", "oldString") and not has_hash_arguments(args):
            file_path = _first(args, "file_path", "filePath")
            if (
                self.enforce_references
                and file_path
                and self.lifecycle.has_table(self.resolve_path(file_path))
            ):
                raise MandatoryReferenceUsage(self.resolve_path(file_path))
            return dict(args)

        if not has_hash_arguments(args):
            return dict(args)

        edit = EditRequest.from_args(args)
        path = self.resolve_path(edit.file_path)
        table = self.lifecycle.ensure(path)
        replacement = resolve_replacement(self.store, path, edit, table)

        rewritten = _without(args, _HASH_ARGUMENT_KEYS)
        rewritten["file_path"] = edit.file_path
        rewritten["old_string"] = replacement.old_text
        rewritten["new_string"] = replacement.new_text
        return rewritten

    # -----------------------------------------------------------------
    # Definitions and instructions
    # -----------------------------------------------------------------

    def tool_definition(self, tool_id: str) -> Optional[dict[str, Any]]:
        """The hashline spec replacing the built-in one, if any."""
        spec = HASHLINE_SPECS.get(tool_id)
        return dict(spec) if spec is not None else None

    def system_transform(self, system: list[str]) -> list[str]:
        if not self.inject_instructions:
            return list(system)
        return append_instructions(system)
