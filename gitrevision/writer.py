"""Serialize revision metadata to JSON and to an importable Python module."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import orjson

from .models import Commit, Identity, RevisionInfo


def format_timestamp(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def parse_timestamp(text: str) -> datetime:
    value = datetime.fromisoformat(text.replace("Z", "+00:00"))
    if value.tzinfo is None:
        raise ValueError(f"timestamp {text!r} has no UTC offset")
    return value


def _identity_to_dict(identity: Identity) -> dict[str, str]:
    return {"name": identity.name, "email": identity.email}


def revision_to_dict(info: RevisionInfo) -> dict[str, object]:
    """Return the JSON payload consumed by build integrations."""
    commit = info.last_commit
    return {
        "lastCommit": {
            "author": _identity_to_dict(commit.author),
            "committer": _identity_to_dict(commit.committer),
            "subject": commit.subject,
            "authorDate": format_timestamp(commit.author_date),
            "commitDate": format_timestamp(commit.commit_date),
            "shortHash": commit.short_hash,
            "hash": commit.hash,
        },
        "branch": info.branch,
    }


def _identity_from_dict(data: Any, label: str) -> Identity:
    if not isinstance(data, Mapping):
        raise ValueError(f"'{label}' must be an object")
    return Identity(name=str(data["name"]), email=str(data["email"]))


def revision_from_dict(data: Any) -> RevisionInfo:
    """Rebuild a :class:`RevisionInfo` from :func:`revision_to_dict` output."""
    if not isinstance(data, Mapping) or not isinstance(data.get("lastCommit"), Mapping):
        raise ValueError("payload must contain a 'lastCommit' object")
    raw = data["lastCommit"]
    try:
        commit = Commit(
            author=_identity_from_dict(raw["author"], "author"),
            committer=_identity_from_dict(raw["committer"], "committer"),
            subject=raw.get("subject") or None,
            author_date=parse_timestamp(str(raw["authorDate"])),
            commit_date=parse_timestamp(str(raw["commitDate"])),
            short_hash=str(raw["shortHash"]),
            hash=str(raw["hash"]),
        )
    except KeyError as error:
        raise ValueError(f"missing field {error.args[0]!r}") from error
    return RevisionInfo(last_commit=commit, branch=data.get("branch") or None)


def write_json(info: RevisionInfo, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(orjson.dumps(revision_to_dict(info), option=orjson.OPT_INDENT_2) + b"\n")


def load_json(path: Path) -> RevisionInfo:
    try:
        data = orjson.loads(path.read_bytes())
    except orjson.JSONDecodeError as error:
        raise ValueError(f"Failed to parse {path}: {error}") from error
    return revision_from_dict(data)


_MODULE_TEMPLATE = '''\
"""Revision metadata captured at build time by gitrevision. Do not edit."""

from datetime import datetime

HASH = {hash!r}
SHORT_HASH = {short_hash!r}
BRANCH = {branch!r}
SUBJECT = {subject!r}
AUTHOR_NAME = {author_name!r}
AUTHOR_EMAIL = {author_email!r}
AUTHOR_DATE = datetime.fromisoformat({author_date!r})
COMMITTER_NAME = {committer_name!r}
COMMITTER_EMAIL = {committer_email!r}
COMMIT_DATE = datetime.fromisoformat({commit_date!r})
'''


def render_python_module(info: RevisionInfo) -> str:
    """Return the source of a module exposing ``info`` as constants."""
    commit = info.last_commit
    return _MODULE_TEMPLATE.format(
        hash=commit.hash,
        short_hash=commit.short_hash,
        branch=info.branch,
        subject=commit.subject,
        author_name=commit.author.name,
        author_email=commit.author.email,
        author_date=commit.author_date.astimezone(timezone.utc).isoformat(),
        committer_name=commit.committer.name,
        committer_email=commit.committer.email,
        commit_date=commit.commit_date.astimezone(timezone.utc).isoformat(),
    )


def write_python_module(info: RevisionInfo, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_python_module(info), encoding="utf-8")


__all__ = [
    "format_timestamp",
    "load_json",
    "parse_timestamp",
    "render_python_module",
    "revision_from_dict",
    "revision_to_dict",
    "write_json",
    "write_python_module",
]
