"""Map failed git invocations onto :mod:`gitrevision.errors`.

Classification matches substrings of git's diagnostics, which is only
stable because every invocation runs with ``LC_ALL=C``. All marker lists
live here so a change in git's wording is a one-file fix.
"""

from __future__ import annotations

from .errors import (
    CollectorError,
    GitFailed,
    GitNotAvailable,
    NotAGitRepository,
    RepositoryPermissionDenied,
    UnsafeRepository,
)
from .runner import CommandResult

GIT_NOT_AVAILABLE_MARKERS = (
    "xcrun: error",
    "xcode-select: error",
    "invalid active developer path",
    "requires xcode",
    "command line tools",
)
UNSAFE_REPOSITORY_MARKERS = (
    "detected dubious ownership",
    "unsafe repository",
    "safe.directory",
)
PERMISSION_DENIED_MARKERS = (
    "permission denied",
    "operation not permitted",
)
NOT_A_REPOSITORY_MARKERS = ("not a git repository",)
NO_COMMIT_MARKERS = (
    "does not have any commits yet",
    "needed a single revision",
    "unknown revision",
    "bad revision",
    "bad object head",
    "invalid object name",
    "ambiguous argument 'head'",
)
DETACHED_HEAD_MARKERS = (
    "not a symbolic ref",
    "detached",
)


def _combined(result: CommandResult) -> str:
    return f"{result.stdout}\n{result.stderr}".lower()


def _contains_any(text: str, markers: tuple[str, ...]) -> bool:
    return any(marker in text for marker in markers)


def format_failure(result: CommandResult) -> str:
    """Return the diagnostic text carried by :class:`GitFailed` and friends."""
    stdout = result.stdout.strip()
    stderr = result.stderr.strip()
    if not stdout and not stderr:
        return "git command failed with no output"
    if not stdout:
        return stderr
    if not stderr:
        return stdout
    return f"stdout: {stdout}\nstderr: {stderr}"


def is_no_commit(result: CommandResult) -> bool:
    return _contains_any(_combined(result), NO_COMMIT_MARKERS)


def is_detached_head(result: CommandResult) -> bool:
    return _contains_any(result.stderr.lower(), DETACHED_HEAD_MARKERS)


def classify_failure(result: CommandResult, repository: str) -> CollectorError:
    """Return the error for a non-zero exit; the first matching family wins."""
    combined = _combined(result)
    if _contains_any(combined, GIT_NOT_AVAILABLE_MARKERS):
        return GitNotAvailable(format_failure(result))
    if _contains_any(combined, UNSAFE_REPOSITORY_MARKERS):
        return UnsafeRepository(repository, format_failure(result))
    if _contains_any(combined, PERMISSION_DENIED_MARKERS):
        return RepositoryPermissionDenied(repository, format_failure(result))
    if _contains_any(combined, NOT_A_REPOSITORY_MARKERS):
        return NotAGitRepository(repository)
    return GitFailed(format_failure(result))


__all__ = ["classify_failure", "format_failure", "is_detached_head", "is_no_commit"]
