"""Entry point for `python -m gitrevision`."""

from __future__ import annotations

from gitrevision.cli import app

if __name__ == "__main__":  # pragma: no cover
    app(prog_name="gitrevision")
