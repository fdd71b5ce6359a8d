"""Collect revision metadata for the last commit of a repository."""

from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping, Optional, Sequence

from .classify import classify_failure, is_detached_head, is_no_commit
from .errors import NoCommit, NotAGitRepository, RepositoryPathInvalid, UnexpectedOutput
from .logging import get_logger
from .models import Commit, Identity, RevisionInfo
from .resolver import resolve_git_executable
from .runner import CommandResult, CommandRunner, SubprocessRunner

LOGGER = get_logger(__name__)

FIELD_SEPARATOR = "\x1f"
_COMMIT_FIELDS = ("%H", "%h", "%an", "%ae", "%at", "%cn", "%ce", "%ct", "%s")
COMMIT_FORMAT = FIELD_SEPARATOR.join(_COMMIT_FIELDS)
_EPOCH_RE = re.compile(r"[+-]?[0-9]+(?:\.[0-9]+)?")


def _parse_git_boolean(value: str) -> Optional[bool]:
    if value == "true":
        return True
    if value == "false":
        return False
    return None


def _parse_timestamp(value: str, label: str) -> datetime:
    if not _EPOCH_RE.fullmatch(value):
        raise UnexpectedOutput(f"invalid {label} timestamp")
    seconds = float(value)
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        raise UnexpectedOutput(f"{label} timestamp out of range") from None


class InfoCollector:
    """Validate a repository and read its last commit and current branch.

    Each step is a gate; the first failure raises a
    :class:`~gitrevision.errors.CollectorError` and nothing is returned.
    """

    def __init__(
        self,
        repository: Path | str,
        git_path: Optional[Path | str] = None,
        *,
        runner: Optional[CommandRunner] = None,
        environ: Optional[Mapping[str, str]] = None,
        platform: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.repository = Path(repository)
        self.git_path = Path(git_path) if git_path is not None else None
        self.environ = environ
        self.platform = platform
        self.runner: CommandRunner = runner or SubprocessRunner(environ=environ, timeout=timeout, platform=platform)

    def collect(self) -> RevisionInfo:
        git = resolve_git_executable(self.git_path, environ=self.environ, platform=self.platform)
        self._validate_repository(git)
        self._validate_has_commits(git)
        commit = self._load_last_commit(git)
        branch = self._load_branch(git)
        info = RevisionInfo(last_commit=commit, branch=branch)
        LOGGER.info("Collected %s on %s", info.short_hash, info.branch or "detached HEAD")
        return info

    def _run(self, git: Path, arguments: Sequence[str]) -> CommandResult:
        return self.runner.run(git, arguments, self.repository)

    def _validate_repository(self, git: Path) -> None:
        if not self.repository.is_dir():
            raise RepositoryPathInvalid(str(self.repository))

        result = self._run(git, ["rev-parse", "--is-inside-work-tree", "--is-bare-repository"])
        if not result.ok:
            raise classify_failure(result, str(self.repository))

        lines = [line.strip() for line in result.stdout.splitlines() if line.strip()]
        if len(lines) < 2:
            raise UnexpectedOutput(f"expected 2 lines, got {len(lines)}")
        inside = _parse_git_boolean(lines[0])
        bare = _parse_git_boolean(lines[1])
        if inside is None or bare is None:
            raise UnexpectedOutput("expected boolean values from rev-parse")
        if not (inside or bare):
            raise NotAGitRepository(str(self.repository))

    def _validate_has_commits(self, git: Path) -> None:
        result = self._run(git, ["rev-parse", "--verify", "HEAD"])
        if not result.ok:
            if is_no_commit(result):
                raise NoCommit()
            raise classify_failure(result, str(self.repository))

    def _load_last_commit(self, git: Path) -> Commit:
        result = self._run(git, ["show", "-s", f"--format={COMMIT_FORMAT}"])
        if not result.ok:
            if is_no_commit(result):
                raise NoCommit()
            raise classify_failure(result, str(self.repository))

        # str.strip() treats the unit separator as whitespace, so only drop line endings.
        parts = result.stdout.strip("\r\n").split(FIELD_SEPARATOR)
        if len(parts) != len(_COMMIT_FIELDS):
            raise UnexpectedOutput(f"expected {len(_COMMIT_FIELDS)} fields, got {len(parts)}")
        (
            full_hash,
            short_hash,
            author_name,
            author_email,
            author_timestamp,
            committer_name,
            committer_email,
            committer_timestamp,
            subject,
        ) = parts

        author_date = _parse_timestamp(author_timestamp, "author")
        commit_date = _parse_timestamp(committer_timestamp, "committer")
        try:
            return Commit(
                author=Identity(name=author_name, email=author_email),
                committer=Identity(name=committer_name, email=committer_email),
                subject=subject or None,
                author_date=author_date,
                commit_date=commit_date,
                short_hash=short_hash,
                hash=full_hash,
            )
        except ValueError as error:
            raise UnexpectedOutput(str(error)) from error

    def _load_branch(self, git: Path) -> Optional[str]:
        result = self._run(git, ["symbolic-ref", "--short", "HEAD"])
        if result.ok:
            return result.stdout.strip() or None
        if is_detached_head(result):
            return None
        raise classify_failure(result, str(self.repository))


def collect(
    repository: Path | str,
    git_path: Optional[Path | str] = None,
    *,
    runner: Optional[CommandRunner] = None,
    environ: Optional[Mapping[str, str]] = None,
    platform: Optional[str] = None,
    timeout: Optional[float] = None,
) -> RevisionInfo:
    """Shortcut for ``InfoCollector(...).collect()``."""
    collector = InfoCollector(
        repository,
        git_path,
        runner=runner,
        environ=environ,
        platform=platform,
        timeout=timeout,
    )
    return collector.collect()


__all__ = ["COMMIT_FORMAT", "FIELD_SEPARATOR", "InfoCollector", "collect"]
