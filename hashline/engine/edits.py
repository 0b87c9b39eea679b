"""Edit requests expressed with hash references."""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, model_validator

from hashline.engine.errors import InvalidEdit
from hashline.engine.fingerprint import LineRef


class EditKind(str, Enum):
    """The three ways a hash reference can target a file."""

    REPLACE_LINE = "replace_line"
    REPLACE_RANGE = "replace_range"
    INSERT_AFTER = "insert_after"


class EditRequest(BaseModel):
    """One hashline edit against one file.

    References are kept as the strings the caller sent; they are parsed when
    the edit is resolved so that grammar errors surface as
    ``MalformedReference``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    file_path: str = Field(
        validation_alias=AliasChoices("file_path", "filePath"),
        description="Path of the file to modify",
    )
    start_hash: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("start_hash", "startHash"),
        description='Reference of the first line to replace (e.g. "42:a3f")',
    )
    end_hash: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("end_hash", "endHash"),
        description="Reference of the last line to replace (range replacement)",
    )
    after_hash: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("after_hash", "afterHash"),
        description="Reference of the line to insert after",
    )
    content: str = Field(default="", description="New content to insert or replace with")

    @model_validator(mode="after")
    def _check_references(self) -> "EditRequest":
        if self.after_hash and (self.start_hash or self.end_hash):
            raise ValueError("pass either after_hash or start_hash/end_hash, not both")
        if self.end_hash and not self.start_hash:
            raise ValueError("end_hash requires start_hash")
        if not self.after_hash and not self.start_hash:
            raise ValueError("one of start_hash or after_hash is required")
        return self

    @classmethod
    def from_args(cls, args: Mapping[str, Any]) -> "EditRequest":
        """Build a request from tool-call arguments.

        Raises:
            InvalidEdit: If the arguments do not describe a hashline edit.
        """
        try:
            return cls.model_validate(dict(args))
        except ValidationError as e:
            details = "; ".join(err["msg"] for err in e.errors())
            raise InvalidEdit(details) from e

    @property
    def kind(self) -> EditKind:
        if self.after_hash:
            return EditKind.INSERT_AFTER
        if self.end_hash:
            return EditKind.REPLACE_RANGE
        return EditKind.REPLACE_LINE

    @property
    def start(self) -> Optional[LineRef]:
        return LineRef.parse(self.start_hash) if self.start_hash else None

    @property
    def end(self) -> Optional[LineRef]:
        return LineRef.parse(self.end_hash) if self.end_hash else None

    @property
    def after(self) -> Optional[LineRef]:
        return LineRef.parse(self.after_hash) if self.after_hash else None

    @property
    def primary(self) -> LineRef:
        """The reference edits of one file are ordered by."""
        return LineRef.parse(self.after_hash or self.start_hash or "")

    def content_lines(self) -> list[str]:
        return self.content.split("\n")


def has_hash_arguments(args: Mapping[str, Any]) -> bool:
    """True if tool arguments carry a start or after reference."""
    return any(args.get(key) for key in ("start_hash", "startHash", "after_hash", "afterHash"))
