"""Error taxonomy raised while collecting revision metadata."""

from __future__ import annotations


class CollectorError(Exception):
    """Base class for every failure of a collection run."""


class ExecutableNotFound(CollectorError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"git executable not found or not executable at {path}")


class RepositoryPathInvalid(CollectorError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"repository path '{path}' is not a directory")


class NotAGitRepository(CollectorError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"path '{path}' is not a Git repository")


class UnsafeRepository(CollectorError):
    """Git refused to operate on a repository owned by someone else."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"git refused repository '{path}' due to unsafe ownership: {message}")


class RepositoryPermissionDenied(CollectorError):
    def __init__(self, path: str, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"permission denied while accessing repository '{path}': {message}")


class GitNotAvailable(CollectorError):
    """The git shim exists but its toolchain is missing (e.g. Xcode command line tools)."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"git is not available: {message}")


class NoCommit(CollectorError):
    def __init__(self) -> None:
        super().__init__("repository has no commits")


class GitFailed(CollectorError):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"git command failed: {message}")


class UnexpectedOutput(CollectorError):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(f"unexpected git output: {message}")


__all__ = [
    "CollectorError",
    "ExecutableNotFound",
    "GitFailed",
    "GitNotAvailable",
    "NoCommit",
    "NotAGitRepository",
    "RepositoryPathInvalid",
    "RepositoryPermissionDenied",
    "UnexpectedOutput",
    "UnsafeRepository",
]
