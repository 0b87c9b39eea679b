"""Line fingerprints and ``line:hash`` references.

Each line is tagged as ``line_number:hash| content`` where *hash* is a short
(3-char hex) fingerprint of the line content.  This lets the agent reference
specific lines without quoting them, while the line number disambiguates the
occasional collision inside the 4096-value keyspace.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from hashline.engine.errors import MalformedReference

HASH_WIDTH = 3
_HASH_SEED = 5381
_MASK_32 = 0xFFFFFFFF
_HEX_DIGITS = frozenset("0123456789abcdef")
# ECMAScript WhiteSpace and LineTerminator code points.
_TRAILING_WHITESPACE = (
    "\t\n\v\f\r \xa0\u1680"
    + "".join(chr(cp) for cp in range(0x2000, 0x200B))
    + "\u2028\u2029\u202f\u205f\u3000\ufeff"
)


def _utf16_units(text: str) -> Iterator[int]:
    """Yield the UTF-16 code units of *text* (surrogate pairs for astral chars)."""
    for ch in text:
        cp = ord(ch)
        if cp > 0xFFFF:
            cp -= 0x10000
            yield 0xD800 + (cp >> 10)
            yield 0xDC00 + (cp & 0x3FF)
        else:
            yield cp


def fingerprint(line: str) -> str:
    """Return the 3-char hex fingerprint of a line.

    djb2 over the UTF-16 code units of the line with trailing ECMAScript
    whitespace stripped (not the wider str.isspace set), using 32-bit
    wraparound, truncated to the low 12 bits.
    """
    h = _HASH_SEED
    for unit in _utf16_units(line.rstrip(_TRAILING_WHITESPACE)):
        h = ((h << 5) + h + unit) & _MASK_32
    return format(h & 0xFFF, "03x")


@dataclass(frozen=True, order=True)
class LineRef:
    """A ``line_number:hash`` reference to one line of a file."""

    line: int
    hash: str

    @classmethod
    def parse(cls, ref: str) -> "LineRef":
        """Parse a ``'line_number:hash'`` reference string.

        Raises ``MalformedReference`` on anything that does not match the
        ``<decimal>:<3 lowercase hex>`` grammar.
        """
        if not isinstance(ref, str) or ":" not in ref:
            raise MalformedReference(ref, "missing ':'")
        number, _, digest = ref.strip().partition(":")
        if not (number.isascii() and number.isdigit()):
            raise MalformedReference(ref, "line number is not a decimal integer")
        line = int(number)
        if line < 1:
            raise MalformedReference(ref, "line numbers start at 1")
        if len(digest) != HASH_WIDTH or not set(digest) <= _HEX_DIGITS:
            raise MalformedReference(
                ref, f"hash must be {HASH_WIDTH} lowercase hex characters"
            )
        return cls(line, digest)

    @classmethod
    def of(cls, line: int, content: str) -> "LineRef":
        """Build the reference a read would produce for *content* at *line*."""
        return cls(line, fingerprint(content))

    def __str__(self) -> str:
        return f"{self.line}:{self.hash}"


def format_hashline(line_number: int, content: str) -> str:
    """Format a single line with its hashline tag.

    Returns ``'line_number:hash| content'``.
    """
    return f"{line_number}:{fingerprint(content)}| {content}"
