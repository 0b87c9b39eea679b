"""Annotate numbered read listings with hash references.

The read tool renders files as::

    <path>/abs/file.py</path>
    <type>file</type>
    <content>1: first line
    2: second line
    </content>

Every ``<n>: <content>`` line (the first one glued to ``<content>``) is
rewritten to ``<n>:<hash>| <content>``; everything else is left alone.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from hashline.engine.fingerprint import LineRef, fingerprint

CONTENT_OPEN = "<content>"
PATH_OPEN = "<path>"
PATH_CLOSE = "</path>"
DIRECTORY_MARKER = "<type>directory</type>"


@dataclass
class AnnotatedListing:
    """Result of annotating one read listing."""

    text: str
    path: Optional[str] = None
    entries: list[Tuple[LineRef, str]] = field(default_factory=list)
    is_directory: bool = False


def extract_path(listing: str) -> Optional[str]:
    """The file path named in the listing's ``<path>`` element."""
    start = listing.find(PATH_OPEN)
    if start < 0:
        return None
    start += len(PATH_OPEN)
    end = listing.find(PATH_CLOSE, start)
    if end <= start or "\n" in listing[start:end]:
        return None
    return listing[start:end]


def parse_marker(line: str) -> Optional[Tuple[str, str, str, str]]:
    """Split a listing line into ``(prefix, number, content, eol)``.

    Returns None when the line is not a ``<n>: <content>`` marker.
    """
    prefix = CONTENT_OPEN if line.startswith(CONTENT_OPEN) else ""
    rest = line[len(prefix):]

    digits = 0
    while digits < len(rest) and "0" <= rest[digits] <= "9":
        digits += 1
    if digits == 0 or rest[digits:digits + 2] != ": ":
        return None

    content = rest[digits + 2:]
    eol = ""
    if content.endswith("\r"):
        content, eol = content[:-1], "\r"
    return prefix, rest[:digits], content, eol


def annotate_listing(listing: str) -> AnnotatedListing:
    """Rewrite the numbered lines of *listing* and collect their references."""
    if DIRECTORY_MARKER in listing:
        return AnnotatedListing(listing, extract_path(listing), is_directory=True)

    entries: list[Tuple[LineRef, str]] = []
    out: list[str] = []
    for line in listing.split("\n"):
        marker = parse_marker(line)
        if marker is None:
            out.append(line)
            continue
        prefix, number, content, eol = marker
        digest = fingerprint(content)
        entries.append((LineRef(int(number), digest), content))
        out.append(f"{prefix}{number}:{digest}| {content}{eol}")

    return AnnotatedListing("\n".join(out), extract_path(listing), entries)
