"""File system utilities."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional, Union

DEFAULT_MAX_SIZE = 10 * 1024 * 1024


def resolve_path(path: Union[str, Path], cwd: Optional[Path] = None) -> Path:
    """Resolve a path relative to CWD.

    Args:
        path: Path to resolve
        cwd: Current working directory (defaults to os.getcwd())

    Returns:
        Normalised absolute path (symlinks are not followed)
    """
    if cwd is None:
        cwd = Path.cwd()

    p = Path(path).expanduser()
    if not p.is_absolute():
        p = Path(cwd) / p

    return Path(os.path.normpath(p))


def relative_posix(path: Union[str, Path], root: Union[str, Path]) -> str:
    """Return *path* relative to *root* using ``/`` separators."""
    return Path(os.path.relpath(path, root)).as_posix()


def is_binary_file(path: Path) -> bool:
    """Check if a file is binary.

    Args:
        path: Path to file

    Returns:
        True if file appears to be binary
    """
    try:
        with open(path, "rb") as f:
            chunk = f.read(1024)
            return b"\0" in chunk
    except OSError:
        return False


def read_text(path: Path) -> str:
    """Read a text file without translating line endings."""
    with open(path, "r", encoding="utf-8", errors="replace", newline="") as f:
        return f.read()


def write_text(path: Path, content: str) -> None:
    """Write a text file without translating line endings."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(content)


def read_file_safely(path: Path, max_size: int = DEFAULT_MAX_SIZE) -> str:
    """Read a file safely with size limit.

    Args:
        path: Path to file
        max_size: Maximum size in bytes

    Returns:
        File content

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If file is too large or binary
    """
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    if not path.is_file():
        raise ValueError(f"Not a file: {path}")

    size = path.stat().st_size
    if size > max_size:
        raise ValueError(f"File too large: {size} bytes (max {max_size})")

    if is_binary_file(path):
        raise ValueError("File appears to be binary")

    return read_text(path)
