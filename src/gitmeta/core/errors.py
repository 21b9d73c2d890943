"""Exception types for git-meta."""


class GitMetaError(Exception):
    """Base exception for git-meta errors."""

    pass


class ConfigError(GitMetaError):
    """Configuration file parsed but holds values of the wrong shape."""

    pass


class GitCommandError(GitMetaError):
    """A git invocation failed or git is not available.

    Carries the command and its stderr so the CLI can report what went
    wrong without a traceback.
    """

    def __init__(self, message: str, command: list[str] | None = None, stderr: str = ""):
        super().__init__(message)
        self.command = command or []
        self.stderr = stderr
