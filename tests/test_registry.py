from hashline.config.loader import load_config
from hashline.engine.fingerprint import LineRef
from hashline.tools.registry import ToolRegistry


def ref(line, content):
    return str(LineRef.of(line, content))


def test_read_then_edit_round(registry, write_file, reader):
    path = write_file("g.txt", "alpha\nbeta\ngamma")

    listing = registry.execute("read", {"file_path": "g.txt"})
    assert f"{ref(2, 'beta')}| beta" in listing.output

    result = registry.execute(
        "apply_patch", {"file_path": "g.txt", "startHash": ref(2, "beta"), "content": "BETA"}
    )
    assert result.success, result.error
    assert path.read_text() == "alpha\nBETA\ngamma"
    # Reads go through the read tool, not the store's reader.
    assert reader.count(path) == 0
    assert path not in registry.plugin.store

    # No read in between: the next edit scans the file first.
    result = registry.execute(
        "apply_patch", {"file_path": "g.txt", "after_hash": ref(3, "gamma"), "content": "delta"}
    )
    assert result.success, result.error
    assert reader.count(path) == 1
    assert path.read_text() == "alpha\nBETA\ngamma\ndelta"


def test_batch_over_two_files(registry, write_file):
    a = write_file("a.txt", "one\ntwo\nthree\nfour\n")
    b = write_file("lib/b.txt", "x")
    result = registry.execute(
        "apply_patch",
        {
            "edits": [
                {"file_path": "a.txt", "start_hash": ref(4, "four"), "content": "FOUR"},
                {"file_path": "lib/b.txt", "after_hash": ref(1, "x"), "content": "y"},
                {"file_path": "a.txt", "start_hash": ref(2, "two"), "content": "TWO"},
            ]
        },
    )
    assert result.success, result.error
    assert result.output == "Applied changes:\n  U a.txt\n  U lib/b.txt"
    assert a.read_text() == "one\nTWO\nthree\nFOUR\n"
    assert b.read_text() == "x\ny"
    assert len(registry.plugin.store) == 0


def test_edit_tool_with_hashes(registry, write_file):
    path = write_file("g.txt", "alpha\nbeta\ngamma")
    registry.execute("read", {"file_path": "g.txt"})
    result = registry.execute(
        "edit", {"file_path": "g.txt", "start_hash": ref(1, "alpha"), "end_hash": ref(2, "beta"), "content": "AB"}
    )
    assert result.success, result.error
    assert path.read_text() == "AB\ngamma"
    assert path not in registry.plugin.store


def test_rejected_calls_are_counted(registry, write_file):
    write_file("g.txt", "alpha")
    registry.execute("read", {"file_path": "g.txt"})
    result = registry.execute("edit", {"file_path": "g.txt", "old_string": "alpha", "new_string": "A"})
    assert not result.success
    assert "must use hashline references" in result.error

    stats = registry.stats()
    assert stats.rejected_by_hooks == 1
    assert stats.by_tool["edit"].executions == 1
    assert stats.by_tool["read"].success_rate() == 1.0


def test_stale_reference_is_a_failed_result(registry, write_file):
    path = write_file("g.txt", "alpha")
    result = registry.execute("apply_patch", {"file_path": "g.txt", "start_hash": "1:000", "content": "x"})
    assert not result.success
    assert "not found" in result.error
    assert path.read_text() == "alpha"


def test_unknown_tool(registry):
    assert registry.execute("bash", {}).error == "Unknown tool: bash"


def test_tools_for_llm_use_hashline_schemas(registry):
    specs = {spec["name"]: spec for spec in registry.get_tools_for_llm()}
    assert set(specs) == {"read", "edit", "apply_patch"}
    assert "edits" in specs["apply_patch"]["parameters"]["properties"]
    assert "old_string" not in specs["edit"]["parameters"]["properties"]


def test_without_plugin(workspace, write_file):
    path = write_file("g.txt", "alpha")
    registry = ToolRegistry(workspace)
    listing = registry.execute("read", {"file_path": "g.txt"})
    assert "<content>1: alpha" in listing.output
    registry.execute("edit", {"file_path": "g.txt", "old_string": "alpha", "new_string": "A"})
    assert path.read_text() == "A"


def test_from_config(workspace, write_file):
    write_file("g.txt", "alpha")
    config = load_config(overrides={"paths.cwd": str(workspace), "edit.enforce_references": False})
    registry = ToolRegistry.from_config(config)
    assert registry.cwd == workspace
    registry.execute("read", {"file_path": "g.txt"})
    result = registry.execute("edit", {"file_path": "g.txt", "old_string": "alpha", "new_string": "A"})
    assert result.success, result.error


def test_old_reference_after_partial_reread_fails(registry, write_file):
    path = write_file("f.txt", "a\nb\nc\n")
    registry.execute("read", {"file_path": "f.txt"})
    path.write_text("a\nB\nc\n")
    registry.execute("read", {"file_path": "f.txt", "offset": 2, "limit": 1})

    result = registry.execute("edit", {"file_path": "f.txt", "start_hash": ref(2, "b"), "content": "X"})
    assert not result.success
    result = registry.execute("apply_patch", {"file_path": "f.txt", "start_hash": ref(2, "b"), "content": "X"})
    assert not result.success
    assert path.read_text() == "a\nB\nc\n"


def test_raw_patch_drops_tables_of_modified_files(registry, write_file):
    path = write_file("g.txt", "alpha\nbeta")
    registry.execute("read", {"file_path": "g.txt"})
    result = registry.execute(
        "apply_patch",
        {"patch_text": "*** Begin Patch\n*** Update File: g.txt\n@@ alpha\n-beta\n+BETA\n*** End Patch"},
    )
    assert result.success, result.error
    assert path not in registry.plugin.store


def test_configured_size_limit_applies_to_scans(workspace, write_file):
    write_file("big.txt", "x" * 500 + "\n")
    config = load_config(overrides={"paths.cwd": str(workspace), "read.max_file_size": 100})
    registry = ToolRegistry.from_config(config)
    result = registry.execute("apply_patch", {"file_path": "big.txt", "start_hash": "1:000", "content": "y"})
    assert not result.success
    assert "Cannot read file" in result.error
