"""Locate a usable git executable."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path, PureWindowsPath
from typing import Mapping, Optional

from .errors import ExecutableNotFound
from .logging import get_logger

LOGGER = get_logger(__name__)

GIT_PATH_ENV = "GIT_REVISION_GIT_PATH"
DEFAULT_COMMAND = "git"
DEFAULT_WINDOWS_EXTENSIONS: tuple[str, ...] = (".exe", ".cmd", ".bat", ".com")


@dataclass(frozen=True, slots=True)
class PlatformConventions:
    """How executables are named and found on one operating-system family."""

    family: str
    path_list_separator: str
    uses_extensions: bool
    fallback_paths: tuple[str, ...]


PLATFORMS: dict[str, PlatformConventions] = {
    "darwin": PlatformConventions(
        family="darwin",
        path_list_separator=":",
        uses_extensions=False,
        fallback_paths=("/usr/bin/git", "/usr/local/bin/git", "/opt/homebrew/bin/git"),
    ),
    "linux": PlatformConventions(
        family="linux",
        path_list_separator=":",
        uses_extensions=False,
        fallback_paths=("/usr/bin/git", "/usr/local/bin/git", "/bin/git"),
    ),
    "windows": PlatformConventions(
        family="windows",
        path_list_separator=";",
        uses_extensions=True,
        fallback_paths=(
            "C:\\Program Files\\Git\\cmd\\git.exe",
            "C:\\Program Files\\Git\\bin\\git.exe",
            "C:\\Program Files (x86)\\Git\\cmd\\git.exe",
            "C:\\Program Files (x86)\\Git\\bin\\git.exe",
        ),
    ),
    "other": PlatformConventions(
        family="other",
        path_list_separator=":",
        uses_extensions=False,
        fallback_paths=("/usr/bin/git",),
    ),
}


def detect_platform(platform: str = sys.platform) -> str:
    """Map a ``sys.platform`` value onto a key of :data:`PLATFORMS`."""
    if platform == "darwin":
        return "darwin"
    if platform.startswith("linux"):
        return "linux"
    if platform in {"win32", "cygwin"}:
        return "windows"
    return "other"


def _conventions(platform: Optional[str]) -> PlatformConventions:
    family = platform or detect_platform()
    try:
        return PLATFORMS[family]
    except KeyError:
        raise ValueError(f"Unknown platform family '{family}'") from None


def executable_extensions(environ: Mapping[str, str]) -> list[str]:
    """Return lower-cased, dot-prefixed extensions from ``PATHEXT``."""
    pathext = environ.get("PATHEXT", "")
    if not pathext:
        return list(DEFAULT_WINDOWS_EXTENSIONS)
    extensions: list[str] = []
    for value in pathext.split(";"):
        value = value.strip().lower()
        if not value:
            continue
        extensions.append(value if value.startswith(".") else f".{value}")
    return extensions


def is_executable_file(path: Path, *, environ: Mapping[str, str], platform: Optional[str] = None) -> bool:
    """Return True if ``path`` is a regular file the platform would execute."""
    conventions = _conventions(platform)
    if not path.is_file():
        return False
    if conventions.uses_extensions:
        suffix = PureWindowsPath(str(path)).suffix.lower()
        return suffix in executable_extensions(environ)
    return os.access(path, os.X_OK)


def _candidate_names(command: str, environ: Mapping[str, str], conventions: PlatformConventions) -> list[str]:
    if not conventions.uses_extensions:
        return [command]
    if PureWindowsPath(command).suffix:
        return [command]
    return [command + extension for extension in executable_extensions(environ)]


def _search_path(command: str, environ: Mapping[str, str], conventions: PlatformConventions) -> Optional[Path]:
    path_value = environ.get("PATH", "")
    if not path_value:
        return None
    candidates = _candidate_names(command, environ, conventions)
    for entry in path_value.split(conventions.path_list_separator):
        directory = entry.strip().strip('"')
        if not directory:
            continue
        for candidate in candidates:
            path = Path(directory) / candidate
            if is_executable_file(path, environ=environ, platform=conventions.family):
                return path
    return None


def _expand_home(name: str, environ: Mapping[str, str], conventions: PlatformConventions) -> str:
    """Expand a leading ``~`` using the home directory from ``environ``."""
    if not name.startswith("~"):
        return name
    rest = name[1:]
    if rest and rest[0] not in "/\\":
        return os.path.expanduser(name)
    if conventions.uses_extensions:
        home = environ.get("USERPROFILE") or environ.get("HOME")
    else:
        home = environ.get("HOME")
    if not home:
        return os.path.expanduser(name)
    return home + rest


def resolve_executable(
    name: str,
    *,
    environ: Optional[Mapping[str, str]] = None,
    platform: Optional[str] = None,
) -> Optional[Path]:
    """Resolve a command name or literal path, returning None when unusable."""
    env = os.environ if environ is None else environ
    conventions = _conventions(platform)
    expanded = _expand_home(name, env, conventions)
    if "/" in expanded or "\\" in expanded:
        path = Path(expanded)
        return path if is_executable_file(path, environ=env, platform=conventions.family) else None
    return _search_path(expanded, env, conventions)


def find_git_executable(
    *,
    environ: Optional[Mapping[str, str]] = None,
    platform: Optional[str] = None,
) -> Optional[Path]:
    """Search the environment override, ``PATH`` and well-known locations."""
    env = os.environ if environ is None else environ
    conventions = _conventions(platform)

    override = env.get(GIT_PATH_ENV, "")
    if override:
        resolved = resolve_executable(override, environ=env, platform=conventions.family)
        if resolved is not None:
            return resolved
        LOGGER.debug("%s=%s is not usable; falling back to PATH", GIT_PATH_ENV, override)

    resolved = resolve_executable(DEFAULT_COMMAND, environ=env, platform=conventions.family)
    if resolved is not None:
        return resolved

    for fallback in conventions.fallback_paths:
        resolved = resolve_executable(fallback, environ=env, platform=conventions.family)
        if resolved is not None:
            return resolved
    return None


def resolve_git_executable(
    explicit: Optional[Path | str] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
    platform: Optional[str] = None,
) -> Path:
    """Return the git executable to run.

    An explicit path is authoritative: when it is not an executable file the
    search stops there instead of falling back to ``PATH``.
    """
    env = os.environ if environ is None else environ
    if explicit is not None:
        path = Path(explicit)
        if not is_executable_file(path, environ=env, platform=platform):
            raise ExecutableNotFound(str(path))
        return path

    resolved = find_git_executable(environ=env, platform=platform)
    if resolved is None:
        raise ExecutableNotFound(DEFAULT_COMMAND)
    LOGGER.debug("Resolved git executable at %s", resolved)
    return resolved


__all__ = [
    "DEFAULT_WINDOWS_EXTENSIONS",
    "GIT_PATH_ENV",
    "PLATFORMS",
    "PlatformConventions",
    "detect_platform",
    "executable_extensions",
    "find_git_executable",
    "is_executable_file",
    "resolve_executable",
    "resolve_git_executable",
]
