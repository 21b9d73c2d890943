"""
Git client: the version-control collaborator.

Lists tracked files and files with staged changes by running git and
splitting its NUL-delimited output.
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from gitmeta.core.errors import GitCommandError

logger = logging.getLogger(__name__)


class GitClientInterface(ABC):
    """Abstract interface for enumerating files known to git."""

    @abstractmethod
    def list_tracked_files(self) -> set[str]:
        """
        List paths in the git index.

        Returns:
            Set of paths relative to the repository root, POSIX separators
        """
        pass

    @abstractmethod
    def list_staged_files(self) -> set[str]:
        """
        List paths with changes staged for commit.

        Returns:
            Set of paths relative to the repository root, POSIX separators
        """
        pass


def split_nul_output(output: bytes | str) -> list[str]:
    """
    Split NUL- or newline-delimited command output into paths.

    NUL takes precedence when present; empty items are dropped.
    """
    if isinstance(output, bytes):
        output = output.decode("utf-8", errors="surrogateescape")
    separator = "\0" if "\0" in output else "\n"
    return [item for item in output.split(separator) if item]


def find_repository_root(start: Path | str | None = None) -> Path:
    """
    Find the top-level directory of the git checkout containing ``start``.

    Raises:
        GitCommandError: If git is unavailable or ``start`` is not in a checkout
    """
    cwd = Path(start) if start is not None else Path.cwd()
    output = _run_git(["rev-parse", "--show-toplevel"], cwd)
    return Path(output.decode("utf-8", errors="surrogateescape").strip())


def _run_git(args: list[str], cwd: Path) -> bytes:
    command = ["git", *args]
    logger.debug(f"Running {' '.join(command)} in {cwd}")
    try:
        completed = subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            check=False,
        )
    except FileNotFoundError as e:
        raise GitCommandError("git is not installed or not on PATH", command=command) from e

    if completed.returncode != 0:
        stderr = completed.stderr.decode("utf-8", errors="replace").strip()
        raise GitCommandError(
            f"{' '.join(command)} failed with exit code {completed.returncode}: "
            f"{stderr or 'no output'}",
            command=command,
            stderr=stderr,
        )
    return completed.stdout


class GitClient(GitClientInterface):
    """GitClientInterface implementation that shells out to git."""

    def __init__(self, root_path: Path | str):
        """
        Initialize the client.

        Args:
            root_path: Repository root; git runs there so every listing is
                root-relative
        """
        self._root_path = Path(root_path)

    @property
    def root_path(self) -> Path:
        return self._root_path

    def list_tracked_files(self) -> set[str]:
        files = split_nul_output(_run_git(["ls-files", "-z"], self._root_path))
        logger.debug(f"git reports {len(files)} tracked files")
        return set(files)

    def list_staged_files(self) -> set[str]:
        files = split_nul_output(
            _run_git(["diff", "--cached", "--name-only", "-z"], self._root_path)
        )
        logger.debug(f"git reports {len(files)} staged files")
        return set(files)
