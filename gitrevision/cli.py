"""Command-line interface for gitrevision."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import orjson
import typer
import yaml
from pydantic import ValidationError

from .collector import InfoCollector
from .config import GeneratorConfig
from .errors import CollectorError
from .logging import configure_logging, get_logger
from .models import RevisionInfo
from .writer import format_timestamp, revision_to_dict, write_json, write_python_module

app = typer.Typer(help="Capture git revision metadata for builds.")
LOGGER = get_logger(__name__)

CONFIG_FILE_NAME = "gitrevision.yaml"


@app.callback()
def main() -> None:
    """gitrevision CLI root."""
    return None


def _load_yaml_config(repo: Path) -> dict[str, object]:
    config_path = repo / CONFIG_FILE_NAME
    if not config_path.is_file():
        return {}
    try:
        with config_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as error:
        raise typer.BadParameter(f"Failed to parse {config_path}: {error}") from error
    if not isinstance(data, dict):
        raise typer.BadParameter(f"{CONFIG_FILE_NAME} must contain a mapping")
    return data


def _merge_config(repo: Path, cli_options: dict[str, object]) -> GeneratorConfig:
    file_overrides = _load_yaml_config(repo) if repo.is_dir() else {}
    explicit = {key: value for key, value in cli_options.items() if value is not None}
    merged: dict[str, object] = {**file_overrides, **explicit}
    try:
        return GeneratorConfig(**merged)
    except ValidationError as error:
        raise typer.BadParameter(str(error)) from error


def _collect(config: GeneratorConfig) -> RevisionInfo:
    collector = InfoCollector(config.repo, config.git_path, timeout=config.timeout)
    try:
        return collector.collect()
    except CollectorError as error:
        LOGGER.error("%s", error)
        raise typer.Exit(code=1) from error


@app.command("generate")
def generate(
    repo: Path = typer.Argument(..., help="Path to the repository (working tree or bare)."),
    json_out: Optional[Path] = typer.Argument(None, help="Where to write the JSON metadata."),
    python_out: Optional[Path] = typer.Argument(None, help="Where to write the generated Python module."),
    git_path: Optional[Path] = typer.Option(None, help="Explicit git executable to run."),
    timeout: Optional[float] = typer.Option(None, help="Seconds to wait for each git command."),
    log_level: Optional[str] = typer.Option(None, help="Log level."),
) -> None:
    """Collect metadata for REPO and write the requested artifacts."""
    repo_path = repo.resolve()
    config = _merge_config(
        repo_path,
        {
            "repo": str(repo_path),
            "json_out": str(json_out) if json_out else None,
            "python_out": str(python_out) if python_out else None,
            "git_path": str(git_path) if git_path else None,
            "timeout": timeout,
            "log_level": log_level,
        },
    )
    configure_logging(config.log_level)
    if not config.json_out and not config.python_out:
        raise typer.BadParameter("Nothing to generate: give JSON_OUT, PYTHON_OUT or set them in the config file")

    info = _collect(config)
    if config.json_out:
        json_path = Path(config.json_out)
        write_json(info, json_path)
        LOGGER.info("Wrote %s", json_path)
    if config.python_out:
        python_path = Path(config.python_out)
        write_python_module(info, python_path)
        LOGGER.info("Wrote %s", python_path)


@app.command("show")
def show(
    repo: Path = typer.Argument(Path("."), help="Path to the repository."),
    git_path: Optional[Path] = typer.Option(None, help="Explicit git executable to run."),
    as_json: bool = typer.Option(False, "--json", help="Print the JSON payload instead of a summary."),
    log_level: str = typer.Option("WARNING", help="Log level."),
) -> None:
    """Print the metadata that ``generate`` would write."""
    configure_logging(log_level)
    repo_path = repo.resolve()
    config = _merge_config(repo_path, {"repo": str(repo_path), "git_path": str(git_path) if git_path else None})
    info = _collect(config)
    if as_json:
        typer.echo(orjson.dumps(revision_to_dict(info), option=orjson.OPT_INDENT_2).decode("utf-8"))
        return
    commit = info.last_commit
    typer.echo(f"commit    {commit.hash}")
    typer.echo(f"branch    {info.branch or '(detached)'}")
    typer.echo(f"author    {commit.author}  {format_timestamp(commit.author_date)}")
    typer.echo(f"committer {commit.committer}  {format_timestamp(commit.commit_date)}")
    if commit.subject is not None:
        typer.echo(f"subject   {commit.subject}")
