"""
Fake implementations for testing.

Provides in-memory implementations of infrastructure interfaces
for use in unit and integration tests without a real git checkout.
"""

from collections.abc import Iterable

from gitmeta.infrastructure.git_client import GitClientInterface


class FakeGitClient(GitClientInterface):
    """
    In-memory git client for testing.

    Tracked and staged sets are plain attributes so tests can change them
    between operations.
    """

    def __init__(self, tracked: Iterable[str] = (), staged: Iterable[str] = ()):
        self.tracked: set[str] = set(tracked)
        self.staged: set[str] = set(staged)
        self.calls: list[str] = []

    def list_tracked_files(self) -> set[str]:
        self.calls.append("list_tracked_files")
        return set(self.tracked)

    def list_staged_files(self) -> set[str]:
        self.calls.append("list_staged_files")
        return set(self.staged)

    def track(self, *paths: str) -> None:
        """Add paths to the index."""
        self.tracked.update(paths)

    def untrack(self, *paths: str) -> None:
        """Remove paths from the index and from the staged set."""
        self.tracked.difference_update(paths)
        self.staged.difference_update(paths)

    def stage(self, *paths: str) -> None:
        """Mark paths as staged; they are also tracked."""
        self.tracked.update(paths)
        self.staged.update(paths)

    def commit(self) -> None:
        """Clear the staged set."""
        self.staged.clear()
