"""
Tests for the git client: output parsing, error handling and real git runs.
"""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from gitmeta.core.errors import GitCommandError
from gitmeta.infrastructure.fakes import FakeGitClient
from gitmeta.infrastructure.git_client import (
    GitClient,
    find_repository_root,
    split_nul_output,
)
from tests.support.repo_helpers import git, init_repo, requires_git, write_file


class TestSplitOutput:
    """Test parsing of delimited path lists."""

    def test_nul_delimited(self):
        assert split_nul_output(b"a.txt\0dir/b.txt\0") == ["a.txt", "dir/b.txt"]

    def test_nul_keeps_newlines_in_names(self):
        assert split_nul_output("odd\nname\0other\0") == ["odd\nname", "other"]

    def test_newline_delimited(self):
        assert split_nul_output("a.txt\nb.txt\n") == ["a.txt", "b.txt"]

    def test_empty_output(self):
        assert split_nul_output(b"") == []

    def test_non_ascii_names(self):
        assert split_nul_output("café.txt\0".encode("utf-8")) == ["café.txt"]


class TestCommandErrors:
    """Test that git failures surface as GitCommandError."""

    def test_non_zero_exit(self, tmp_path):
        failed = subprocess.CompletedProcess(
            args=["git"], returncode=128, stdout=b"", stderr=b"fatal: not a git repository"
        )
        with patch("gitmeta.infrastructure.git_client.subprocess.run", return_value=failed):
            with pytest.raises(GitCommandError) as exc_info:
                GitClient(tmp_path).list_tracked_files()

        assert "not a git repository" in str(exc_info.value)
        assert exc_info.value.command == ["git", "ls-files", "-z"]
        assert exc_info.value.stderr == "fatal: not a git repository"

    def test_git_not_installed(self, tmp_path):
        with patch(
            "gitmeta.infrastructure.git_client.subprocess.run",
            side_effect=FileNotFoundError("git"),
        ):
            with pytest.raises(GitCommandError, match="not installed"):
                GitClient(tmp_path).list_staged_files()

    def test_commands_run_from_root(self, tmp_path):
        ok = subprocess.CompletedProcess(args=["git"], returncode=0, stdout=b"x\0", stderr=b"")
        with patch("gitmeta.infrastructure.git_client.subprocess.run", return_value=ok) as run:
            assert GitClient(tmp_path).list_staged_files() == {"x"}

        args, kwargs = run.call_args
        assert args[0] == ["git", "diff", "--cached", "--name-only", "-z"]
        assert kwargs["cwd"] == tmp_path


class TestFakeGitClient:
    """Test the in-memory client used by other tests."""

    def test_stage_tracks_and_commit_clears(self):
        client = FakeGitClient(tracked=["a"])
        client.stage("b")

        assert client.list_tracked_files() == {"a", "b"}
        assert client.list_staged_files() == {"b"}

        client.commit()
        assert client.list_staged_files() == set()

    def test_untrack_removes_from_both(self):
        client = FakeGitClient()
        client.stage("a")
        client.untrack("a")

        assert client.list_tracked_files() == set()
        assert client.list_staged_files() == set()


@requires_git
class TestRealGit:
    """Run the client against a throwaway repository."""

    def test_tracked_and_staged_files(self, tmp_path):
        init_repo(tmp_path)
        write_file(tmp_path, "committed.txt")
        write_file(tmp_path, "sub dir/space name.txt")
        git(tmp_path, "add", ".")
        git(tmp_path, "commit", "-q", "-m", "initial")

        write_file(tmp_path, "committed.txt", content="changed\n")
        write_file(tmp_path, "staged.txt")
        write_file(tmp_path, "untracked.txt")
        git(tmp_path, "add", "committed.txt", "staged.txt")

        client = GitClient(tmp_path)

        assert client.list_tracked_files() == {
            "committed.txt",
            "staged.txt",
            "sub dir/space name.txt",
        }
        assert client.list_staged_files() == {"committed.txt", "staged.txt"}

    def test_staged_files_before_first_commit(self, tmp_path):
        init_repo(tmp_path)
        write_file(tmp_path, "first.txt")
        git(tmp_path, "add", "first.txt")

        assert GitClient(tmp_path).list_staged_files() == {"first.txt"}

    def test_find_repository_root_from_subdirectory(self, tmp_path):
        init_repo(tmp_path)
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_repository_root(nested).resolve() == tmp_path.resolve()

    def test_find_repository_root_outside_checkout(self, tmp_path):
        outside = tmp_path / "not-a-repo"
        outside.mkdir()
        with patch.dict("os.environ", {"GIT_CEILING_DIRECTORIES": str(tmp_path)}):
            with pytest.raises(GitCommandError):
                find_repository_root(outside)
