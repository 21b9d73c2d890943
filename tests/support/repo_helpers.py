"""Shared helpers for tests that build files and git checkouts."""

import os
import shutil
import subprocess
from pathlib import Path

import pytest

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git binary not available")

# Fixed instants well in the past so they never collide with "now"
OLD_ATIME_NS = 1_500_000_000_123_456_000
OLD_MTIME_NS = 1_400_000_000_654_321_000


def write_file(root: Path, rel_path: str, content: str = "data\n", mode: int = 0o644) -> Path:
    """Create a file below root with the given content and permission bits."""
    path = root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    os.chmod(path, mode)
    return path


def set_times(path: Path, atime_ns: int = OLD_ATIME_NS, mtime_ns: int = OLD_MTIME_NS) -> None:
    os.utime(path, ns=(atime_ns, mtime_ns))


def git(root: Path, *args: str) -> str:
    """Run git in root with a throwaway identity and return stdout."""
    completed = subprocess.run(
        [
            "git",
            "-c", "user.name=Test",
            "-c", "user.email=test@example.com",
            "-c", "commit.gpgsign=false",
            *args,
        ],
        cwd=root,
        capture_output=True,
        text=True,
        check=True,
    )
    return completed.stdout


def init_repo(root: Path) -> Path:
    """Initialise an empty git repository in root."""
    git(root, "init", "-q")
    return root
