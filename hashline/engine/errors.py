"""Errors raised while resolving hash references."""

from __future__ import annotations

from pathlib import Path
from typing import Union


class HashlineError(ValueError):
    """Base class for hash-reference resolution failures."""


class MalformedReference(HashlineError):
    """A reference does not look like ``<line>:<hash>``."""

    def __init__(self, ref: object, reason: str):
        self.ref = ref
        self.reason = reason
        super().__init__(
            f'Invalid hash reference {ref!r} ({reason}). Expected "<line>:<hash>", e.g. "42:a3f".'
        )


class Unreadable(HashlineError):
    """The file could not be read when a scan was required."""

    def __init__(self, path: Union[str, Path], cause: BaseException | None = None):
        self.path = str(path)
        self.cause = cause
        super().__init__(f'Cannot read file "{self.path}" to verify hash references.')


class StaleReference(HashlineError):
    """A reference is missing from the table even after a rescan."""

    def __init__(self, ref: str, message: str | None = None):
        self.ref = str(ref)
        super().__init__(
            message
            or f'Hash reference "{self.ref}" not found. The file may have changed '
            "since last read. Please re-read the file."
        )


class InvalidRange(HashlineError):
    """The end reference of a range precedes its start reference."""

    def __init__(self, start_line: int, end_line: int):
        self.start_line = start_line
        self.end_line = end_line
        super().__init__(
            f"end_hash line ({end_line}) must be >= start_hash line ({start_line})"
        )


class MandatoryReferenceUsage(HashlineError):
    """A text-quoting edit was attempted on a file with known fingerprints."""

    def __init__(self, path: Union[str, Path]):
        self.path = str(path)
        super().__init__(
            "You must use hashline references to edit this file. "
            'Use start_hash (e.g. "3:cc7") instead of old_string. '
            "Refer to the hash markers from the read output."
        )


class InvalidEdit(HashlineError):
    """Edit arguments do not describe a usable hashline edit."""

    def __init__(self, details: str):
        self.details = details
        super().__init__(f"Invalid hashline edit: {details}")
