"""Configuration models for gitrevision."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class GeneratorConfig(BaseModel):
    repo: str
    json_out: Optional[str] = None
    python_out: Optional[str] = None
    git_path: Optional[str] = None
    timeout: Optional[float] = Field(default=None, gt=0)
    log_level: str = "INFO"


__all__ = ["GeneratorConfig"]
