"""
Infrastructure Layer - Git client implementations.
"""

from gitmeta.infrastructure.fakes import FakeGitClient
from gitmeta.infrastructure.git_client import (
    GitClient,
    GitClientInterface,
    find_repository_root,
    split_nul_output,
)

__all__ = [
    "GitClientInterface",
    "GitClient",
    "FakeGitClient",
    "find_repository_root",
    "split_nul_output",
]
