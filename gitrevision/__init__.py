"""Build-time git revision metadata."""

from .collector import InfoCollector, collect
from .errors import (
    CollectorError,
    ExecutableNotFound,
    GitFailed,
    GitNotAvailable,
    NoCommit,
    NotAGitRepository,
    RepositoryPathInvalid,
    RepositoryPermissionDenied,
    UnexpectedOutput,
    UnsafeRepository,
)
from .models import Commit, Identity, RevisionInfo

__version__ = "0.1.0"

__all__ = [
    "Commit",
    "CollectorError",
    "ExecutableNotFound",
    "GitFailed",
    "GitNotAvailable",
    "Identity",
    "InfoCollector",
    "NoCommit",
    "NotAGitRepository",
    "RepositoryPathInvalid",
    "RepositoryPermissionDenied",
    "RevisionInfo",
    "UnexpectedOutput",
    "UnsafeRepository",
    "collect",
]
