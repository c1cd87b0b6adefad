"""CLI entry point for catalog-diff."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.markup import escape
from rich.syntax import Syntax

from catalog_diff.config import CatalogDiffConfig, load_config
from catalog_diff.config.loader import DEFAULT_CONFIG_TEMPLATE
from catalog_diff.engine import CatalogDiffer
from catalog_diff.errors import CatalogDiffError
from catalog_diff.log import configure_logging
from catalog_diff.models import ClassifiedResult
from catalog_diff.output import create_renderer
from catalog_diff.release import recommend_bump
from catalog_diff.snapshot import load_snapshot

app = typer.Typer(
    name="catalog-diff",
    help="Compare two catalog snapshots and flag breaking changes.",
)

config_app = typer.Typer(help="Manage catalog-diff configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: CatalogDiffConfig | None = None


def _get_config() -> CatalogDiffConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to catalog-diff.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    configure_logging(_config.log_level, _config.log_format)


def _run_diff(original: str, updated: str) -> ClassifiedResult:
    """Load both snapshots and diff them, exiting with 1 on any engine error."""
    cfg = _get_config()
    try:
        before = load_snapshot(original, side="original")
        after = load_snapshot(updated, side="updated")
        return CatalogDiffer(cfg).diff(before, after)
    except CatalogDiffError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def diff(
    original: str = typer.Argument(..., help="Original snapshot file or directory"),
    updated: str = typer.Argument(..., help="Updated snapshot file or directory"),
    format: Annotated[
        str, typer.Option("--format", "-f", help="Output format: cli or json")
    ] = "cli",
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Write the report to this file")
    ] = None,
    fail_on_breaking: bool = typer.Option(
        False, "--fail-on-breaking", help="Exit with 1 when breaking changes are found"
    ),
) -> None:
    """Diff two snapshots and report what changed."""
    try:
        renderer = create_renderer(format)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    result = _run_diff(original, updated)
    report = renderer.render(result)

    if output:
        Path(output).write_text(report)
        rprint(f"[green]Written to[/green] {escape(output)}")
    else:
        typer.echo(report, nl=not report.endswith("\n"))

    if fail_on_breaking and result.summary.has_breaking_changes:
        raise typer.Exit(1)


@app.command()
def bump(
    original: str = typer.Argument(..., help="Original snapshot file or directory"),
    updated: str = typer.Argument(..., help="Updated snapshot file or directory"),
    strict: bool = typer.Option(
        False, "--strict", help="Also bump for breaking body changes, renames and deprecations"
    ),
) -> None:
    """Print the semver bump (major, minor or patch) the changes call for."""
    result = _run_diff(original, updated)
    typer.echo(recommend_bump(result, strict=strict or _get_config().release.strict_bumps))


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default catalog-diff.yaml in current directory."""
    target = Path("catalog-diff.yaml")
    if target.exists() and not force:
        rprint("[yellow]catalog-diff.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")
