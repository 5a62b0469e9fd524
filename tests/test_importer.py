"""Tests for importing cd targets from shell history."""

import pytest

from zj.importer import (
    ImportResult,
    ImportSource,
    collect_paths,
    expand_tilde,
    extract_cd_path,
    extract_command,
    get_shell_history_path,
    import_from_shell_history,
    is_absolute_or_tilde,
    normalize_path,
)


class TestExtractCommand:
    def test_zsh_extended_format(self):
        assert extract_command(": 1700000000:0;cd ~/projects", ImportSource.ZSH) == "cd ~/projects"

    def test_zsh_extended_without_command(self):
        assert extract_command(": 1700000000:0;", ImportSource.ZSH) == ""

    def test_zsh_plain_format(self):
        assert extract_command("cd ~/projects", ImportSource.ZSH) == "cd ~/projects"

    def test_bash_is_verbatim(self):
        assert extract_command(": 1:0;cd /x", ImportSource.BASH) == ": 1:0;cd /x"


class TestExtractCdPath:
    def test_basic(self):
        assert extract_cd_path("cd ~/projects") == "~/projects"

    def test_absolute(self):
        assert extract_cd_path("  cd /home/user/projects ") == "/home/user/projects"

    def test_options_skipped(self):
        assert extract_cd_path("cd -P ~/projects") == "~/projects"

    def test_option_without_path(self):
        assert extract_cd_path("cd -P") is None

    def test_relative_kept_for_caller(self):
        assert extract_cd_path("cd foo") == "foo"

    def test_not_cd(self):
        assert extract_cd_path("cd") is None
        assert extract_cd_path("cdx /tmp") is None
        assert extract_cd_path("ls /tmp") is None

    def test_dash(self):
        assert extract_cd_path("cd -") is None

    def test_command_substitution_rejected(self):
        assert extract_cd_path("cd $(pwd)") is None
        assert extract_cd_path("cd `pwd`") is None

    def test_double_quotes(self):
        assert extract_cd_path('cd "/path/with spaces"') == "/path/with spaces"

    def test_single_quotes(self):
        assert extract_cd_path("cd '/path/with spaces'") == "/path/with spaces"

    def test_unclosed_quote(self):
        assert extract_cd_path('cd "/path/unclosed') is None

    def test_escaped_quote_kept_verbatim(self):
        assert extract_cd_path('cd "/path/with\\"quote"') == '/path/with\\"quote'

    def test_trailing_commands_cut(self):
        assert extract_cd_path("cd /tmp && ls") == "/tmp"
        assert extract_cd_path("cd /tmp || exit") == "/tmp"
        assert extract_cd_path("cd /tmp ; ls") == "/tmp"
        assert extract_cd_path("cd /tmp | cat") == "/tmp"
        assert extract_cd_path("cd /tmp # comment") == "/tmp"


class TestPaths:
    def test_is_absolute_or_tilde(self):
        assert is_absolute_or_tilde("/home/user")
        assert is_absolute_or_tilde("~/projects")
        assert not is_absolute_or_tilde("foo")
        assert not is_absolute_or_tilde("../bar")
        assert not is_absolute_or_tilde("")

    def test_expand_tilde(self):
        assert expand_tilde("~/projects", "/home/user") == "/home/user/projects"
        assert expand_tilde("~", "/home/user") == "/home/user"
        assert expand_tilde("/srv", "/home/user") == "/srv"

    def test_expand_tilde_user_unsupported(self):
        with pytest.raises(ValueError):
            expand_tilde("~bob/x", "/home/user")

    def test_normalize(self):
        assert normalize_path("/home/user/./projects") == "/home/user/projects"
        assert normalize_path("/home/user/../other/projects") == "/home/other/projects"
        assert normalize_path("/home/../../etc") == "/etc"
        assert normalize_path("//a///b/") == "/a/b"
        assert normalize_path("/") == "/"

    def test_history_path(self):
        assert get_shell_history_path(ImportSource.ZSH, {"HISTFILE": "/h/f"}) == "/h/f"
        assert get_shell_history_path(ImportSource.ZSH, {"HOME": "/home/u"}) == "/home/u/.zsh_history"
        assert get_shell_history_path(ImportSource.BASH, {"HOME": "/home/u"}) == "/home/u/.bash_history"


class TestCollectPaths:
    def test_counts(self):
        lines = [
            "cd /a/b",
            "cd rel",
            "cd ~/x",
            "cd /a/b/",
            "cd /known",
            "cd ~bob/x",
            "cd /missing",
            "ls -la",
            "",
        ]
        paths, result = collect_paths(
            lines, ImportSource.BASH, "/home/u", {"/known"}, is_dir=lambda p: p != "/missing"
        )
        assert paths == ["/a/b", "/home/u/x"]
        assert result == ImportResult(imported_count=2, skipped_count=3, already_exists_count=1)


class TestImportResult:
    def test_summary_plain(self):
        assert ImportResult(imported_count=3).summary() == "Done! Imported 3 directories."

    def test_summary_with_counts(self):
        result = ImportResult(imported_count=1, skipped_count=2, already_exists_count=4)
        assert result.summary() == (
            "Done! Imported 1 directories (skipped 2 relative/invalid paths) (4 already in history)."
        )


class TestImportFromShellHistory:
    def test_appends_new_paths(self, tmp_path):
        histfile = tmp_path / ".zsh_history"
        histfile.write_text(": 1700000000:0;cd /srv/app\n: 1700000001:0;cd /srv/old\ncd ~/code\n")
        data = tmp_path / "zj" / "history"
        data.parent.mkdir()
        data.write_text("1:/srv/old\n")
        env = {"HISTFILE": str(histfile), "HOME": "/home/u"}

        result = import_from_shell_history(ImportSource.ZSH, data, environ=env, now=1234,
                                           is_dir=lambda p: True)

        assert result == ImportResult(imported_count=2, skipped_count=0, already_exists_count=1)
        assert data.read_text() == "1:/srv/old\n1234:/srv/app\n1234:/home/u/code\n"

    def test_nothing_to_import_leaves_file_alone(self, tmp_path):
        histfile = tmp_path / ".bash_history"
        histfile.write_text("ls\ncd relative\n")
        data = tmp_path / "history"
        result = import_from_shell_history(ImportSource.BASH, data,
                                           environ={"HISTFILE": str(histfile)})
        assert result.imported_count == 0
        assert result.skipped_count == 1
        assert not data.exists()

    def test_missing_history_file(self, tmp_path):
        env = {"HOME": str(tmp_path)}
        with pytest.raises(FileNotFoundError) as exc:
            import_from_shell_history(ImportSource.BASH, tmp_path / "history", environ=env)
        assert exc.value.filename == str(tmp_path / ".bash_history")
