"""Tests for repository discovery and name mapping."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from repomux.discovery import discover, is_repo_root, names_of
from repomux.errors import WalkError
from repomux.logger import RepoMuxLogger


def make_repo(path: Path) -> Path:
    """Create ``path`` with an empty .git directory inside."""
    (path / ".git").mkdir(parents=True)
    return path


class TestIsRepoRoot:
    """Test the .git marker check."""

    def test_directory_with_git_dir(self, tmp_path):
        make_repo(tmp_path / "proj")
        assert is_repo_root(tmp_path / "proj") is True

    def test_plain_directory(self, tmp_path):
        assert is_repo_root(tmp_path) is False

    def test_git_file_is_not_a_repo_root(self, tmp_path):
        """Worktrees and submodules use a .git file; those are ignored."""
        (tmp_path / ".git").write_text("gitdir: ../elsewhere\n")
        assert is_repo_root(tmp_path) is False

    def test_custom_marker(self, tmp_path):
        (tmp_path / ".hg").mkdir()
        assert is_repo_root(tmp_path, marker=".hg") is True
        assert is_repo_root(tmp_path) is False


class TestDiscover:
    """Test the pruned directory walk."""

    def test_root_is_repo(self, tmp_path):
        make_repo(tmp_path)
        make_repo(tmp_path / "nested")

        assert discover(tmp_path) == [tmp_path]

    def test_empty_tree(self, tmp_path):
        (tmp_path / "a" / "b").mkdir(parents=True)
        assert discover(tmp_path) == []

    def test_finds_repos_in_lexical_order(self, tmp_path):
        for name in ["zeta", "alpha", "mid"]:
            make_repo(tmp_path / name)

        repos = discover(tmp_path)

        assert repos == [tmp_path / "alpha", tmp_path / "mid", tmp_path / "zeta"]

    def test_finds_deep_repos(self, tmp_path):
        make_repo(tmp_path / "work" / "client" / "api")

        assert discover(tmp_path) == [tmp_path / "work" / "client" / "api"]

    def test_nested_repos_are_pruned(self, tmp_path):
        make_repo(tmp_path / "outer")
        make_repo(tmp_path / "outer" / "vendor" / "inner")

        repos = discover(tmp_path)

        assert repos == [tmp_path / "outer"]

    def test_hidden_directories_are_pruned(self, tmp_path):
        make_repo(tmp_path / ".cache" / "repo")
        make_repo(tmp_path / ".dotfiles")
        make_repo(tmp_path / "visible")

        repos = discover(tmp_path)

        assert repos == [tmp_path / "visible"]

    def test_no_reported_repo_contains_another(self, tmp_path):
        make_repo(tmp_path / "a")
        make_repo(tmp_path / "a" / "b")
        make_repo(tmp_path / "c" / "d")
        make_repo(tmp_path / "c" / "d" / "e" / "f")

        repos = discover(tmp_path)

        for repo in repos:
            for other in repos:
                if repo != other:
                    assert repo not in other.parents

    def test_end_to_end_tree(self, tmp_path):
        """a/.git, a/b, .skip/c/.hidden/.git, d/.git -> {a, d}."""
        make_repo(tmp_path / "a")
        (tmp_path / "a" / "b").mkdir()
        make_repo(tmp_path / ".skip" / "c" / ".hidden")
        make_repo(tmp_path / "d")

        repos = discover(tmp_path)

        assert set(repos) == {tmp_path / "a", tmp_path / "d"}

    def test_symlinked_directories_are_not_followed(self, tmp_path):
        real = make_repo(tmp_path / "real")
        outside = tmp_path / "outside"
        outside.mkdir()
        make_repo(outside / "linked-target")
        (tmp_path / "tree").mkdir()
        os.symlink(outside, tmp_path / "tree" / "link")
        os.symlink(real, tmp_path / "tree" / "repo-link")

        repos = discover(tmp_path / "tree")

        assert repos == []

    def test_missing_root_raises_walk_error(self, tmp_path):
        with pytest.raises(WalkError) as exc_info:
            discover(tmp_path / "missing")

        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_permission_error_is_logged_and_skipped(self, tmp_path, capsys):
        make_repo(tmp_path / "ok")

        def fake_walk(top, onerror=None):
            onerror(PermissionError(13, "Permission denied", str(tmp_path / "locked")))
            yield str(tmp_path), ["ok"], []

        with patch("repomux.discovery.os.walk", side_effect=fake_walk):
            repos = discover(tmp_path, logger=RepoMuxLogger())

        assert repos == [tmp_path / "ok"]
        captured = capsys.readouterr()
        assert f"Permission denied: {tmp_path / 'locked'}" in captured.err
        assert captured.out == ""

    def test_other_os_errors_abort(self, tmp_path):
        def fake_walk(top, onerror=None):
            onerror(OSError(5, "Input/output error", str(tmp_path / "bad")))
            yield str(tmp_path), [], []

        with patch("repomux.discovery.os.walk", side_effect=fake_walk):
            with pytest.raises(WalkError, match="Input/output error"):
                discover(tmp_path)

    @pytest.mark.skipif(
        not hasattr(os, "geteuid") or os.geteuid() == 0,
        reason="permissions are not enforced for root",
    )
    def test_unreadable_directory_is_skipped(self, tmp_path, capsys):
        make_repo(tmp_path / "ok")
        locked = tmp_path / "locked"
        make_repo(locked / "hidden-repo")
        locked.chmod(0)
        try:
            repos = discover(tmp_path)
        finally:
            locked.chmod(0o755)

        assert repos == [tmp_path / "ok"]
        assert "Permission denied" in capsys.readouterr().err


class TestNamesOf:
    """Test the name -> path mapping."""

    def test_uses_final_segment(self):
        mapping = names_of([Path("/src/alpha"), Path("/src/work/beta")])

        assert mapping == {"alpha": Path("/src/alpha"), "beta": Path("/src/work/beta")}

    def test_collision_last_wins(self):
        mapping = names_of([Path("/a/tools"), Path("/b/other"), Path("/c/tools")])

        assert mapping["tools"] == Path("/c/tools")
        assert len(mapping) == 2

    def test_order_follows_first_appearance(self):
        mapping = names_of([Path("/a/x"), Path("/a/y"), Path("/b/x")])

        assert list(mapping) == ["x", "y"]

    def test_accepts_strings(self):
        assert names_of(["/src/alpha"]) == {"alpha": Path("/src/alpha")}

    def test_empty(self):
        assert names_of([]) == {}

    def test_collision_follows_walk_order(self, tmp_path):
        make_repo(tmp_path / "a" / "tools")
        make_repo(tmp_path / "b" / "tools")

        mapping = names_of(discover(tmp_path))

        assert mapping == {"tools": tmp_path / "b" / "tools"}
