from __future__ import annotations

from pathlib import Path

import typer
from pydantic import ValidationError
from rich import print
from rich.console import Console
from rich.markup import escape

from ..analysis import analyze_directory, build_ignore_file_set
from ..codeowners import OwnershipDocument
from ..config import AnalysisConfig, CheckPolicy, load_analysis_config
from ..errors import RepoOwnershipError
from ..logging_setup import configure_logging


app = typer.Typer(add_completion=False, pretty_exceptions_show_locals=False)


def _config(
    base_dir: Path,
    codeowners: Path | None,
    config_path: Path | None,
) -> AnalysisConfig:
    if config_path is not None:
        if not config_path.exists():
            raise typer.BadParameter(f"config path does not exist: {config_path}")
        try:
            cfg = load_analysis_config(config_path)
        except ValidationError as exc:
            raise typer.BadParameter(f"invalid config {config_path}: {exc}") from exc
        if "base_dir" not in cfg.model_fields_set:
            cfg = cfg.model_copy(update={"base_dir": base_dir})
    else:
        cfg = AnalysisConfig(base_dir=base_dir)
    if codeowners is not None:
        cfg = cfg.model_copy(update={"codeowners_file": codeowners})
    return cfg


def _document(cfg: AnalysisConfig) -> OwnershipDocument:
    try:
        return OwnershipDocument.from_file(cfg.resolve_codeowners_file())
    except RepoOwnershipError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command()
def owners(
    paths: list[str] = typer.Argument(..., help="Project relative paths to look up"),
    base_dir: Path = typer.Option(Path("."), help="Project base directory"),
    codeowners: Path | None = typer.Option(None, help="CODEOWNERS file (default: discover)"),
    mandatory_only: bool = typer.Option(False, help="Skip optional sections"),
    verbose: bool = typer.Option(False, help="Log rule matching"),
):
    """Print the approvers of each path."""
    configure_logging(verbose)
    document = _document(_config(base_dir, codeowners, None))
    for path in paths:
        approvers = document.approvers_for(path, mandatory_only=mandatory_only)
        # Plain output (no rich markup) for machine parsing.
        typer.echo(f"{path}\t{' '.join(approvers)}")


@app.command()
def ignored(
    paths: list[str] = typer.Argument(..., help="Project relative paths to check"),
    base_dir: Path = typer.Option(Path("."), help="Project base directory"),
    verbose: bool = typer.Option(False, help="Log rule matching"),
):
    """Print whether each path is ignored by the project's ignore files."""
    configure_logging(verbose)
    cfg = AnalysisConfig(base_dir=base_dir)
    if not cfg.base_dir.is_dir():
        raise typer.BadParameter(f"base dir is not a directory: {cfg.base_dir}")
    file_set, _ = build_ignore_file_set(cfg)
    for path in paths:
        try:
            verdict = file_set.verdict(path)
        except RepoOwnershipError as exc:
            raise typer.BadParameter(str(exc)) from exc
        typer.echo(f"{path}\t{verdict.value}")


@app.command()
def show(
    base_dir: Path = typer.Option(Path("."), help="Project base directory"),
    codeowners: Path | None = typer.Option(None, help="CODEOWNERS file (default: discover)"),
    verbose: bool = typer.Option(False, help="Include the generated regex of every rule"),
):
    """Print the CODEOWNERS file in canonical form."""
    configure_logging(False)
    document = _document(_config(base_dir, codeowners, None))
    typer.echo(document.to_canonical_text(verbose=verbose), nl=False)
    for problem in document.problems:
        print(f"[yellow]problem[/yellow] {problem.kind.value}: {escape(problem.message)}")


@app.command()
def check(
    base_dir: Path = typer.Option(Path("."), help="Project base directory"),
    codeowners: Path | None = typer.Option(None, help="CODEOWNERS file (default: discover)"),
    config: Path | None = typer.Option(None, "--config", help="Analysis config JSON"),
    existing_mandatory: bool = typer.Option(
        False, help="Every existing file needs a mandatory approver"
    ),
    existing_any: bool = typer.Option(False, help="Every existing file needs an approver"),
    new_mandatory: bool = typer.Option(
        False, help="A new file in any directory needs a mandatory approver"
    ),
    new_any: bool = typer.Option(False, help="A new file in any directory needs an approver"),
    json_output: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
    verbose: bool = typer.Option(False, help="Log discovery and rule matching"),
):
    """Analyze every non-ignored file of a project and apply the check policy."""
    configure_logging(verbose)
    cfg = _config(base_dir, codeowners, config)
    flags = {
        "all_existing_files_have_mandatory_owner": existing_mandatory,
        "all_existing_files_have_any_owner": existing_any,
        "all_newly_created_files_have_mandatory_owner": new_mandatory,
        "all_newly_created_files_have_any_owner": new_any,
    }
    merged = cfg.policy.model_dump()
    merged.update({k: True for k, v in flags.items() if v})
    policy = CheckPolicy.model_validate(merged)

    try:
        result = analyze_directory(cfg)
    except RepoOwnershipError as exc:
        raise typer.BadParameter(str(exc)) from exc

    if json_output:
        typer.echo(result.to_json())
    else:
        Console().print(result.to_table())

    failures = result.failures(policy)
    for name in failures:
        print(f"[red]failed[/red] {name}")
    if failures:
        raise typer.Exit(code=1)
