"""Tests for intents and command rendering."""

import pytest

from core.command.intents import (
    CheckPermissions,
    CreateDir,
    CreateFile,
    CreateHardLink,
    CreateSymlink,
    DeleteDir,
    DeleteFile,
    FetchLogs,
    GatewayValidationError,
    IntentKind,
    ListDir,
    ReadFile,
    WriteFile,
)
from core.command.renderer import (
    DELETE_DIR_SCRIPT,
    WRITE_FILE_SCRIPT,
    render_command,
    scoped_path,
)

ROOT = "/mount/fs"


class TestIntents:
    @pytest.mark.parametrize("name", ["", "   ", "\t"])
    def test_empty_name_rejected(self, name):
        with pytest.raises(GatewayValidationError, match="name cannot be empty"):
            CreateFile(name)

    def test_non_string_rejected(self):
        with pytest.raises(GatewayValidationError, match="must be a string"):
            DeleteDir(None)

    def test_link_requires_both_names(self):
        with pytest.raises(GatewayValidationError, match="link cannot be empty"):
            CreateHardLink("a", "")

    def test_write_allows_empty_content(self):
        intent = WriteFile("notes.txt", "")
        assert intent.content == ""

    def test_mutating_kinds(self):
        assert CreateFile("a").mutating
        assert CreateSymlink("a", "b").mutating
        assert DeleteDir("a").mutating
        assert not WriteFile("a", "x").mutating
        assert not ReadFile("a").mutating
        assert not ListDir().mutating
        assert not FetchLogs().mutating

    def test_names(self):
        assert CreateHardLink("a", "b").names() == ["a", "b"]
        assert ListDir().names() == []


class TestRenderer:
    def test_scoped_path_keeps_name_verbatim(self):
        assert scoped_path("/mount/fs/", "a/../b") == "/mount/fs/a/../b"
        assert scoped_path("/", "x") == "/x"

    def test_create_file(self):
        cmd = render_command(CreateFile("a.txt"), ROOT)
        assert cmd.argv == ("touch", "--", "/mount/fs/a.txt")
        assert cmd.kind == IntentKind.CREATE_FILE

    def test_create_dir(self):
        assert render_command(CreateDir("d"), ROOT).argv == ("mkdir", "--", "/mount/fs/d")

    def test_links(self):
        assert render_command(CreateHardLink("a", "b"), ROOT).argv == ("ln", "--", "/mount/fs/a", "/mount/fs/b")
        assert render_command(CreateSymlink("a", "b"), ROOT).argv == (
            "ln",
            "-s",
            "--",
            "/mount/fs/a",
            "/mount/fs/b",
        )

    def test_queries(self):
        assert render_command(ReadFile("a"), ROOT).argv == ("cat", "--", "/mount/fs/a")
        assert render_command(ListDir(), ROOT).argv == ("ls", "-li", "--", "/mount/fs")
        assert render_command(CheckPermissions("a"), ROOT).argv == ("ls", "-ld", "--", "/mount/fs/a")

    def test_fetch_logs_ignores_root(self):
        assert render_command(FetchLogs(), ROOT).argv == ("dmesg",)

    def test_write_passes_content_as_parameter(self):
        content = 'he said "hi"; rm -rf / $(reboot)'
        cmd = render_command(WriteFile("a.txt", content), ROOT)
        assert cmd.argv[:3] == ("bash", "-c", WRITE_FILE_SCRIPT)
        assert cmd.argv[4:] == ("/mount/fs/a.txt", "a.txt", content)
        assert content not in cmd.argv[2]

    def test_delete_dir_uses_fixed_script(self):
        cmd = render_command(DeleteDir("d; ls"), ROOT)
        assert cmd.argv[2] == DELETE_DIR_SCRIPT
        assert cmd.argv[4:] == ("/mount/fs/d; ls", "d; ls")

    def test_delete_file(self):
        cmd = render_command(DeleteFile("a"), ROOT)
        assert cmd.argv[0:2] == ("bash", "-c")
        assert cmd.argv[4:] == ("/mount/fs/a", "a")

    def test_display_is_shell_quoted(self):
        cmd = render_command(CreateFile("my file"), ROOT)
        assert cmd.display == "touch -- '/mount/fs/my file'"
        assert str(cmd) == cmd.display

    def test_rendered_command_is_immutable(self):
        cmd = render_command(CreateFile("a"), ROOT)
        with pytest.raises(AttributeError):
            cmd.argv = ()
