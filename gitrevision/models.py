"""Immutable records describing the revision a build was produced from."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

FULL_HASH_LENGTH = 40
_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")


def is_full_hash(value: str) -> bool:
    """Return True for a 40-character hexadecimal object name."""
    return len(value) == FULL_HASH_LENGTH and bool(_HEX_RE.match(value))


@dataclass(frozen=True, slots=True)
class Identity:
    """A git author or committer."""

    name: str
    email: str

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


@dataclass(frozen=True, slots=True)
class Commit:
    """Metadata for a single commit.

    ``subject`` is ``None`` when the commit message subject is empty. Both
    dates are timezone-aware and independent of each other.
    """

    author: Identity
    committer: Identity
    subject: str | None
    author_date: datetime
    commit_date: datetime
    short_hash: str
    hash: str

    def __post_init__(self) -> None:
        if not is_full_hash(self.hash):
            raise ValueError(f"commit hash must be {FULL_HASH_LENGTH} hex characters, got {self.hash!r}")
        if not self.short_hash or not self.hash.startswith(self.short_hash):
            raise ValueError(f"short hash {self.short_hash!r} is not a prefix of {self.hash!r}")
        if self.subject == "":
            raise ValueError("subject must be None rather than empty")
        for label, value in (("author_date", self.author_date), ("commit_date", self.commit_date)):
            if value.tzinfo is None:
                raise ValueError(f"{label} must be timezone-aware")


@dataclass(frozen=True, slots=True)
class RevisionInfo:
    """Result of a collection run: the last commit and the current branch."""

    last_commit: Commit
    branch: str | None = None

    def __post_init__(self) -> None:
        if self.branch == "":
            raise ValueError("branch must be None rather than empty")

    @property
    def hash(self) -> str:
        return self.last_commit.hash

    @property
    def short_hash(self) -> str:
        return self.last_commit.short_hash

    @property
    def is_detached(self) -> bool:
        return self.branch is None


__all__ = ["Commit", "FULL_HASH_LENGTH", "Identity", "RevisionInfo", "is_full_hash"]
