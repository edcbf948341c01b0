"""Git-related exceptions: missing binary, bad repositories, failed commands."""

from pathlib import Path
from typing import List, Union

from .base import CommitInsightError


class GitError(CommitInsightError):
    """Base class for errors raised while reading git history."""

    pass


class GitNotFoundError(GitError):
    """Raised when the git executable cannot be found on PATH."""

    def __init__(self):
        super().__init__(
            "git executable not found",
            hint="Install git and make sure it is on your PATH.",
        )


class NotAGitRepositoryError(GitError):
    """Raised when a directory is not inside a git work tree."""

    def __init__(self, path: Union[str, Path]):
        super().__init__(
            f"Not a Git repository: {path}",
            details={"path": path},
            hint="Make sure you're in a directory with a .git folder, "
            "or specify a valid Git repository path.",
        )
        self.path = path


class GitCommandError(GitError):
    """Raised when a git subprocess exits non-zero or times out."""

    def __init__(self, command: List[str], returncode: int, stderr: str = ""):
        details = {"command": " ".join(command), "returncode": returncode}
        if stderr:
            details["stderr"] = stderr.strip()
        super().__init__("git command failed", details=details)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
