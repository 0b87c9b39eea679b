import pytest

from hashline.engine.errors import MalformedReference
from hashline.engine.fingerprint import LineRef, fingerprint, format_hashline


def djb2_utf16(text: str) -> str:
    """Straightforward djb2 over the UTF-16 code units of untrimmed text."""
    data = text.encode("utf-16-le")
    h = 5381
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (h * 33 + unit) % 2**32
    return f"{h & 0xFFF:03x}"


@pytest.mark.parametrize(
    "line, expected",
    [
        ("", "505"),
        ("a", "606"),
        ("ab", "728"),
    ],
)
def test_known_fingerprints(line, expected):
    assert fingerprint(line) == expected


def test_trailing_whitespace_is_ignored():
    assert fingerprint("value = 1") == fingerprint("value = 1   \t")
    assert fingerprint("value = 1") == fingerprint("value = 1\r")


def test_leading_whitespace_is_significant():
    # Only 4096 values exist, so pick inputs known to differ.
    assert fingerprint("a") != fingerprint(" a")


def test_fingerprint_is_three_lowercase_hex_chars():
    for line in ["", "x", "def main():", "    return 42", "ünïcödé", "\t\t}"]:
        digest = fingerprint(line)
        assert len(digest) == 3
        assert set(digest) <= set("0123456789abcdef")


@pytest.mark.parametrize(
    "line",
    [
        "hello world",
        "emoji 😀 inside",
        "𝔘𝔫𝔦𝔠𝔬𝔡𝔢",
        "mixed é and 中文",
        "x" * 500,
    ],
)
def test_matches_utf16_reference(line):
    assert fingerprint(line) == djb2_utf16(line)


def test_long_lines_wrap_to_32_bits():
    # Without masking the intermediate value would grow unbounded.
    assert fingerprint("z" * 10_000) == djb2_utf16("z" * 10_000)


def test_parse_reference():
    ref = LineRef.parse("42:a3f")
    assert ref == LineRef(42, "a3f")
    assert str(ref) == "42:a3f"


def test_of_builds_reference_from_content():
    assert LineRef.of(1, "a") == LineRef(1, "606")


@pytest.mark.parametrize(
    "raw",
    [
        "42",
        "42:",
        ":a3f",
        "0:a3f",
        "-1:a3f",
        "x:a3f",
        "42:A3F",
        "42:a3",
        "42:a3f0",
        "42:zzz",
        "٤٢:a3f",
    ],
)
def test_parse_rejects_malformed(raw):
    with pytest.raises(MalformedReference):
        LineRef.parse(raw)


def test_malformed_reference_is_a_value_error():
    with pytest.raises(ValueError, match="Expected"):
        LineRef.parse("nope")


def test_refs_order_by_line():
    refs = [LineRef(10, "aaa"), LineRef(2, "fff"), LineRef(5, "000")]
    assert [r.line for r in sorted(refs)] == [2, 5, 10]


def test_format_hashline():
    assert format_hashline(1, "a") == "1:606| a"
    assert format_hashline(3, "") == "3:505| "


@pytest.mark.parametrize("tail", ["\ufeff", "\u3000", "\u2000", "\u200a", "\u2028", "\xa0", "\v"])
def test_ecmascript_whitespace_is_trimmed(tail):
    assert fingerprint("a" + tail) == fingerprint("a")


@pytest.mark.parametrize("tail, expected", [("\x85", "74b"), ("\x1c", "6e2")])
def test_other_unicode_spaces_are_content(tail, expected):
    assert fingerprint("a" + tail) == expected
    assert fingerprint("a" + tail) != fingerprint("a")
