"""Shared fixtures for gitrevision tests."""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Callable, Sequence

import pytest

from gitrevision.runner import CommandResult

AUTHOR_NAME = "Ada Author"
AUTHOR_EMAIL = "ada@example.com"
COMMITTER_NAME = "Carl Committer"
COMMITTER_EMAIL = "carl@example.com"
COMMIT_EPOCH = 1_704_164_645

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
posix_only = pytest.mark.skipif(sys.platform == "win32", reason="stub scripts are POSIX shell")


class FakeRunner:
    """In-memory runner answering by git subcommand."""

    def __init__(self, responses: dict[str, CommandResult]) -> None:
        self.responses = responses
        self.calls: list[list[str]] = []

    def run(self, executable: Path, arguments: Sequence[str], cwd: Path) -> CommandResult:
        self.calls.append(list(arguments))
        key = " ".join(arguments[:2]) if arguments[0] == "rev-parse" else arguments[0]
        return self.responses[key]


def ok(stdout: str = "") -> CommandResult:
    return CommandResult(stdout=stdout, stderr="", exit_code=0)


def fail(stderr: str, exit_code: int = 128, stdout: str = "") -> CommandResult:
    return CommandResult(stdout=stdout, stderr=stderr, exit_code=exit_code)


@pytest.fixture()
def fake_git(tmp_path: Path) -> Path:
    """An executable file usable as an explicit git override."""
    name = "git.exe" if sys.platform == "win32" else "git"
    path = tmp_path / "bin" / name
    path.parent.mkdir()
    path.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
    path.chmod(0o755)
    return path


@pytest.fixture()
def make_git_stub(tmp_path: Path) -> Callable[..., Path]:
    """Write a shell script that prints fixed output and exits with a fixed code."""

    def _make(stdout: str = "", stderr: str = "", exit_code: int = 0) -> Path:
        directory = tmp_path / "stub"
        directory.mkdir(exist_ok=True)
        script = directory / "git"
        lines = ["#!/bin/sh"]
        if stdout:
            lines.append(f"printf '%s\\n' {_shell_quote(stdout)}")
        if stderr:
            lines.append(f"printf '%s\\n' {_shell_quote(stderr)} >&2")
        lines.append(f"exit {exit_code}")
        script.write_text("\n".join(lines) + "\n", encoding="utf-8")
        script.chmod(0o755)
        return script

    return _make


def _shell_quote(text: str) -> str:
    return "'" + text.replace("'", "'\"'\"'") + "'"


@pytest.fixture()
def git_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Environment isolating git from the user's configuration."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    env = dict(os.environ)
    env.update(
        {
            "GIT_AUTHOR_NAME": AUTHOR_NAME,
            "GIT_AUTHOR_EMAIL": AUTHOR_EMAIL,
            "GIT_AUTHOR_DATE": f"{COMMIT_EPOCH} +0000",
            "GIT_COMMITTER_NAME": COMMITTER_NAME,
            "GIT_COMMITTER_EMAIL": COMMITTER_EMAIL,
            "GIT_COMMITTER_DATE": f"{COMMIT_EPOCH} +0000",
        }
    )
    return env


@pytest.fixture()
def git(git_env: dict[str, str]) -> Callable[..., str]:
    """Run real git with deterministic identities and dates."""

    def _git(cwd: Path, *args: str) -> str:
        completed = subprocess.run(
            ["git", *args],
            cwd=cwd,
            env=git_env,
            check=True,
            capture_output=True,
            text=True,
        )
        return completed.stdout.strip()

    return _git


@pytest.fixture()
def init_repo(git: Callable[..., str]) -> Callable[[Path], Path]:
    def _init(path: Path) -> Path:
        path.mkdir(parents=True, exist_ok=True)
        git(path, "init", "-q")
        git(path, "symbolic-ref", "HEAD", "refs/heads/main")
        git(path, "config", "commit.gpgsign", "false")
        return path

    return _init


@pytest.fixture()
def commit(git: Callable[..., str]) -> Callable[[Path, str], str]:
    def _commit(repo: Path, message: str) -> str:
        (repo / "README.md").write_text(message + "\n", encoding="utf-8")
        git(repo, "add", "README.md")
        git(repo, "commit", "-q", "-m", message)
        return git(repo, "rev-parse", "HEAD")

    return _commit
