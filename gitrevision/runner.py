"""Process invocation for git commands."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path, PureWindowsPath
from typing import Mapping, Optional, Protocol, Sequence

from .errors import ExecutableNotFound, GitFailed
from .logging import get_logger
from .resolver import detect_platform, resolve_executable

LOGGER = get_logger(__name__)

NEUTRAL_LOCALE = "C"
_COMMAND_SCRIPT_SUFFIXES = {".cmd", ".bat"}


@dataclass(frozen=True, slots=True)
class CommandResult:
    stdout: str
    stderr: str
    exit_code: int

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


class CommandRunner(Protocol):
    """Runs an executable to completion and captures everything it printed."""

    def run(self, executable: Path, arguments: Sequence[str], cwd: Path) -> CommandResult:
        """Run ``executable`` with ``arguments`` inside ``cwd``."""


def subprocess_environment(base: Optional[Mapping[str, str]] = None) -> dict[str, str]:
    """Copy ``base`` (default ``os.environ``) with the locale forced to C."""
    env = dict(os.environ if base is None else base)
    env["LC_ALL"] = NEUTRAL_LOCALE
    return env


class SubprocessRunner:
    """Blocking :class:`CommandRunner` backed by :func:`subprocess.run`."""

    def __init__(
        self,
        *,
        environ: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
        platform: Optional[str] = None,
    ) -> None:
        self.environ = subprocess_environment(environ)
        self.timeout = timeout
        self.platform = platform or detect_platform()

    def _command_interpreter(self) -> Path:
        comspec = self.environ.get("COMSPEC", "")
        if comspec:
            resolved = resolve_executable(comspec, environ=self.environ, platform=self.platform)
            if resolved is not None:
                return resolved
        resolved = resolve_executable("cmd.exe", environ=self.environ, platform=self.platform)
        if resolved is None:
            raise ExecutableNotFound("cmd.exe")
        return resolved

    def build_command(self, executable: Path, arguments: Sequence[str]) -> list[str]:
        """Return the argv to launch, wrapping batch scripts on Windows."""
        if self.platform == "windows" and PureWindowsPath(str(executable)).suffix.lower() in _COMMAND_SCRIPT_SUFFIXES:
            return [str(self._command_interpreter()), "/C", str(executable), *arguments]
        return [str(executable), *arguments]

    def run(self, executable: Path, arguments: Sequence[str], cwd: Path) -> CommandResult:
        command = self.build_command(executable, arguments)
        LOGGER.debug("Running %s in %s", " ".join(command), cwd)
        try:
            completed = subprocess.run(
                command,
                cwd=cwd,
                env=self.environ,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as error:
            raise GitFailed(f"{' '.join(command)} timed out after {error.timeout} seconds") from error
        except OSError as error:
            raise GitFailed(str(error)) from error
        return CommandResult(
            stdout=completed.stdout.decode("utf-8", errors="replace"),
            stderr=completed.stderr.decode("utf-8", errors="replace"),
            exit_code=completed.returncode,
        )


__all__ = ["CommandResult", "CommandRunner", "NEUTRAL_LOCALE", "SubprocessRunner", "subprocess_environment"]
