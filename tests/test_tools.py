from hashline.tools.base import ToolResult
from hashline.tools.edit import EditTool
from hashline.tools.read import ReadTool
from hashline.tools.specs import get_all_tools, get_tool_spec


def test_read_file_listing(workspace, write_file):
    path = write_file("a.txt", "first\nsecond\n")
    result = ReadTool(workspace).execute(file_path="a.txt")
    assert result.success
    assert result.output == "\n".join(
        [
            f"<path>{path}</path>",
            "<type>file</type>",
            "<content>1: first",
            "2: second",
            "",
            "(End of file - total 2 lines)",
            "</content>",
        ]
    )
    assert result.metadata.data["total_lines"] == 2


def test_read_with_offset_and_limit(workspace, write_file):
    write_file("a.txt", "\n".join(f"line {i}" for i in range(1, 11)))
    result = ReadTool(workspace).execute(file_path="a.txt", offset=4, limit=2)
    lines = result.output.split("\n")
    assert lines[2] == "<content>4: line 4"
    assert lines[3] == "5: line 5"
    assert "read beyond line 5" in result.output
    assert result.metadata.data["truncated"] is True


def test_read_offset_past_end(workspace, write_file):
    write_file("a.txt", "x")
    result = ReadTool(workspace).execute(file_path="a.txt", offset=5)
    assert not result.success
    assert "exceeds total lines" in result.error


def test_read_directory(workspace, write_file):
    write_file("b.txt", "")
    write_file("sub/c.txt", "")
    result = ReadTool(workspace).execute(file_path=".")
    assert result.output.split("\n")[1:] == [
        "<type>directory</type>",
        "<entries>",
        "b.txt",
        "sub/",
        "</entries>",
    ]


def test_read_missing(workspace):
    result = ReadTool(workspace).execute(file_path="nope.txt")
    assert not result.success
    assert result.to_message().startswith("Error: File not found")


def test_edit_replaces_unique_string(workspace, write_file):
    path = write_file("a.txt", "alpha\nbeta\n")
    result = EditTool(workspace).execute(file_path="a.txt", old_string="beta", new_string="BETA")
    assert result.success
    assert result.output == "Replaced 1 occurrence(s) in a.txt"
    assert path.read_text() == "alpha\nBETA\n"


def test_edit_rejects_ambiguous_match(workspace, write_file):
    path = write_file("a.txt", "x\nx\n")
    tool = EditTool(workspace)
    result = tool.execute(file_path="a.txt", old_string="x", new_string="y")
    assert not result.success
    assert "found 2 times" in result.error
    result = tool.execute(file_path="a.txt", old_string="x", new_string="y", replace_all=True)
    assert result.success
    assert path.read_text() == "y\ny\n"


def test_edit_argument_errors(workspace, write_file):
    write_file("a.txt", "x")
    tool = EditTool(workspace)
    assert tool.execute(old_string="x").error == "No file_path provided"
    assert tool.execute(file_path="a.txt").error == "No old_string provided"
    assert "identical" in tool.execute(file_path="a.txt", old_string="x", new_string="x").error
    assert "not found" in tool.execute(file_path="a.txt", old_string="q", new_string="r").error


def test_tool_result_message():
    assert ToolResult.ok("done").to_message() == "done"
    assert ToolResult.fail("bad", output="ctx").to_message() == "Error: bad\nctx"


def test_builtin_specs():
    assert [spec["name"] for spec in get_all_tools()] == ["read", "edit", "apply_patch"]
    assert get_tool_spec("apply_patch")["parameters"]["required"] == ["patch_text"]
    assert get_tool_spec("bash") is None


def test_tools_expose_their_builtin_spec(workspace, write_file):
    assert ReadTool.spec()["name"] == "read"
    write_file("a.txt", "x")
    result = EditTool(workspace).execute(file_path="a.txt", old_string="x", new_string="y")
    assert result.files_modified == [str(workspace / "a.txt")]
    assert ToolResult.fail("nope").files_modified == []
