import pytest

from hashline.engine.edits import EditKind, EditRequest, has_hash_arguments
from hashline.engine.errors import InvalidEdit, MalformedReference
from hashline.engine.fingerprint import LineRef


def test_kinds():
    assert EditRequest(file_path="f", start_hash="1:abc").kind is EditKind.REPLACE_LINE
    assert EditRequest(file_path="f", start_hash="1:abc", end_hash="2:abc").kind is EditKind.REPLACE_RANGE
    assert EditRequest(file_path="f", after_hash="1:abc").kind is EditKind.INSERT_AFTER


def test_camel_case_arguments():
    request = EditRequest.from_args(
        {"filePath": "a.py", "startHash": "2:abc", "endHash": "4:def", "content": "x"}
    )
    assert request.file_path == "a.py"
    assert request.start == LineRef(2, "abc")
    assert request.end == LineRef(4, "def")


@pytest.mark.parametrize(
    "args, message",
    [
        ({"file_path": "f"}, "one of start_hash or after_hash"),
        ({"file_path": "f", "end_hash": "2:abc"}, "end_hash requires start_hash"),
        ({"file_path": "f", "start_hash": "1:abc", "after_hash": "2:abc"}, "not both"),
        ({"start_hash": "1:abc"}, "Field required"),
    ],
)
def test_from_args_rejects(args, message):
    with pytest.raises(InvalidEdit, match=message):
        EditRequest.from_args(args)


def test_references_parse_lazily():
    request = EditRequest(file_path="f", start_hash="bad")
    with pytest.raises(MalformedReference):
        request.start


def test_primary_reference():
    assert EditRequest(file_path="f", after_hash="7:abc").primary == LineRef(7, "abc")
    assert EditRequest(file_path="f", start_hash="3:abc", end_hash="9:abc").primary.line == 3


def test_content_lines_split_on_newline_only():
    request = EditRequest(file_path="f", start_hash="1:abc", content="a\r\nb\n")
    assert request.content_lines() == ["a\r", "b", ""]


def test_has_hash_arguments():
    assert has_hash_arguments({"start_hash": "1:abc"})
    assert has_hash_arguments({"afterHash": "1:abc"})
    assert not has_hash_arguments({"end_hash": "1:abc"})
    assert not has_hash_arguments({"start_hash": "", "old_string": "x"})
