"""Pydantic models for hashline configuration."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from hashline.tools.read import DEFAULT_READ_LIMIT
from hashline.utils.files import DEFAULT_MAX_SIZE


class PathsConfig(BaseModel):
    """Configuration for file paths."""

    cwd: str = Field(default="", description="Project directory relative paths resolve against")

    @field_validator("cwd", mode="before")
    @classmethod
    def resolve_cwd(cls, v: str) -> str:
        """Resolve empty cwd to current directory."""
        if not v:
            return os.getcwd()
        return str(Path(v).expanduser().resolve())


class ReadConfig(BaseModel):
    """Configuration for the read tool."""

    default_limit: int = Field(default=DEFAULT_READ_LIMIT, gt=0, description="Lines shown per read")
    max_file_size: int = Field(default=DEFAULT_MAX_SIZE, gt=0, description="Maximum file size to read")


class EditConfig(BaseModel):
    """Configuration for hashline edits."""

    enforce_references: bool = Field(
        default=True,
        description="Reject old_string edits for files whose hashes are known",
    )
    inject_instructions: bool = Field(
        default=True, description="Append hashline instructions to the system prompt"
    )


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="WARNING", description="Root log level")
    format: str = Field(default="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    @field_validator("level")
    @classmethod
    def check_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


class HashlineConfig(BaseModel):
    """Main configuration for hashline."""

    paths: PathsConfig = Field(default_factory=PathsConfig)
    read: ReadConfig = Field(default_factory=ReadConfig)
    edit: EditConfig = Field(default_factory=EditConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def working_directory(self) -> Path:
        """Get the working directory as a Path object."""
        return Path(self.paths.cwd or os.getcwd())
