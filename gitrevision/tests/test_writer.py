"""Tests for JSON and Python module output."""

from __future__ import annotations

import json
import runpy
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from gitrevision.models import Commit, Identity, RevisionInfo
from gitrevision.writer import (
    format_timestamp,
    load_json,
    render_python_module,
    revision_from_dict,
    revision_to_dict,
    write_json,
    write_python_module,
)

FULL_HASH = "0123456789abcdef0123456789abcdef01234567"


@pytest.fixture()
def info() -> RevisionInfo:
    commit = Commit(
        author=Identity("Zoë Ångström", "zoe@example.com"),
        committer=Identity("Carl", "carl@example.com"),
        subject="Fix \"quotes\" and 'apostrophes' ✓",
        author_date=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        commit_date=datetime(2024, 1, 3, 0, 0, 0, tzinfo=timezone.utc),
        short_hash=FULL_HASH[:9],
        hash=FULL_HASH,
    )
    return RevisionInfo(last_commit=commit, branch="feature/x")


def test_format_timestamp_normalizes_to_utc() -> None:
    local = datetime(2024, 1, 2, 5, 4, 5, 123456, tzinfo=timezone(timedelta(hours=2)))
    assert format_timestamp(local) == "2024-01-02T03:04:05Z"


def test_payload_shape(info: RevisionInfo) -> None:
    payload = revision_to_dict(info)
    assert payload["branch"] == "feature/x"
    last_commit = payload["lastCommit"]
    assert last_commit["hash"] == FULL_HASH
    assert last_commit["shortHash"] == FULL_HASH[:9]
    assert last_commit["authorDate"] == "2024-01-02T03:04:05Z"
    assert last_commit["author"] == {"name": "Zoë Ångström", "email": "zoe@example.com"}


def test_json_file_round_trip(tmp_path: Path, info: RevisionInfo) -> None:
    target = tmp_path / "Resources" / "git-revision-info.json"
    write_json(info, target)

    raw = target.read_text(encoding="utf-8")
    assert raw.endswith("\n")
    assert json.loads(raw)["lastCommit"]["subject"] == info.last_commit.subject
    assert load_json(target) == info


def test_detached_and_subjectless_payload(info: RevisionInfo) -> None:
    commit = Commit(
        author=info.last_commit.author,
        committer=info.last_commit.committer,
        subject=None,
        author_date=info.last_commit.author_date,
        commit_date=info.last_commit.commit_date,
        short_hash=info.short_hash,
        hash=info.hash,
    )
    payload = revision_to_dict(RevisionInfo(last_commit=commit))
    assert payload["branch"] is None
    assert payload["lastCommit"]["subject"] is None
    assert revision_from_dict(payload).branch is None


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"branch": "main"},
        {"lastCommit": {"hash": FULL_HASH}},
    ],
)
def test_malformed_payload(payload: object) -> None:
    with pytest.raises(ValueError):
        revision_from_dict(payload)


def test_load_json_rejects_invalid_json(tmp_path: Path) -> None:
    target = tmp_path / "bad.json"
    target.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        load_json(target)


def test_generated_module_exposes_constants(tmp_path: Path, info: RevisionInfo) -> None:
    target = tmp_path / "Sources" / "_revision.py"
    write_python_module(info, target)

    namespace = runpy.run_path(str(target))

    assert namespace["HASH"] == FULL_HASH
    assert namespace["SHORT_HASH"] == FULL_HASH[:9]
    assert namespace["BRANCH"] == "feature/x"
    assert namespace["SUBJECT"] == info.last_commit.subject
    assert namespace["AUTHOR_NAME"] == "Zoë Ångström"
    assert namespace["COMMITTER_EMAIL"] == "carl@example.com"
    assert namespace["AUTHOR_DATE"] == info.last_commit.author_date
    assert namespace["COMMIT_DATE"] == info.last_commit.commit_date


def test_generated_module_for_detached_head(info: RevisionInfo) -> None:
    source = render_python_module(RevisionInfo(last_commit=info.last_commit))
    assert "BRANCH = None" in source
