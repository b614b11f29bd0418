"""CLI interface for confcheck using Typer framework."""

import json as jsonlib
import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
import yaml
from rich.console import Console
from rich.table import Table

from confcheck import __description__, __version__
from confcheck.analysis import Level, all_validation_analyzers
from confcheck.analysis.runner import AnalysisResult, run_analysis
from confcheck.config import AnalysisConfig, ConfcheckConfig, OutputFormat, load_config
from confcheck.exceptions import ConfcheckError
from confcheck.loader import load_paths
from confcheck.registry import builtin_registry

app = typer.Typer(
    name="confcheck",
    help=__description__,
    add_completion=False,
    rich_markup_mode="rich"
)

console = Console()

_LOG_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

_LEVEL_COLORS = {
    Level.ERROR: "red",
    Level.WARNING: "yellow",
    Level.INFO: "blue",
}


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"confcheck version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, help="Show version and exit")
    ] = False,
) -> None:
    """confcheck - Schema-driven validation analyzer for configuration resources."""


def _setup_logging(config: ConfcheckConfig) -> None:
    logging.basicConfig(
        level=_LOG_LEVELS.get(config.logging.level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


def _output_table(result: AnalysisResult) -> None:
    if not result.messages:
        console.print("[green]No validation issues found.[/green]")
        return

    table = Table()
    table.add_column("Level", style="white")
    table.add_column("Code", style="cyan")
    table.add_column("Resource", style="white")
    table.add_column("Location", style="dim")
    table.add_column("Message", style="white")

    for message in result.messages:
        color = _LEVEL_COLORS[message.level]
        origin = message.origin
        table.add_row(
            f"[{color}]{message.level.value.upper()}[/{color}]",
            message.code,
            origin.friendly_name() if origin is not None else "",
            message.location.removeprefix(origin.friendly_name()).strip() if origin is not None else "",
            message.text,
        )

    console.print(table)
    counts = result.counts()
    console.print(
        f"{counts['error']} errors, {counts['warning']} warnings, {counts['info']} info"
    )


@app.command()
def analyze(
    paths: Annotated[
        list[Path],
        typer.Argument(help="Resource files or directories (.yaml, .yml, .json)")
    ],
    format: Annotated[
        Optional[str],
        typer.Option("--format", "-f", help="Output format: table, json, yaml (default: from config)")
    ] = None,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path (default: search for .confcheck.json)")
    ] = None,
    namespace: Annotated[
        Optional[str],
        typer.Option("--namespace", "-n", help="Namespace for resources that do not set one")
    ] = None,
    suppress: Annotated[
        Optional[list[str]],
        typer.Option("--suppress", "-s", help="Message code to suppress, may be repeated")
    ] = None,
    fail_threshold: Annotated[
        Optional[str],
        typer.Option("--fail-threshold", help="Lowest level that fails the run: info, warning, error")
    ] = None,
) -> None:
    """Validate resources against their registered schemas."""
    valid_formats = [f.value for f in OutputFormat]
    valid_levels = [level.value for level in Level]

    if format is not None and format not in valid_formats:
        console.print(f"[red]Error:[/red] Invalid format '{format}'. Must be one of: {', '.join(valid_formats)}")
        raise typer.Exit(1)

    if fail_threshold is not None and fail_threshold not in valid_levels:
        console.print(
            f"[red]Error:[/red] Invalid fail threshold '{fail_threshold}'. "
            f"Must be one of: {', '.join(valid_levels)}"
        )
        raise typer.Exit(1)

    try:
        confcheck_config = load_config(config)
        _setup_logging(confcheck_config)

        # Command line options override the config file
        overrides = {}
        if namespace:
            overrides["default_namespace"] = namespace
        if fail_threshold:
            overrides["fail_threshold"] = fail_threshold
        if suppress:
            overrides["suppress"] = [*confcheck_config.analysis.suppress, *suppress]
        analysis_config = AnalysisConfig(**{**confcheck_config.analysis.model_dump(), **overrides})

        registry = builtin_registry()
        store = load_paths(paths, registry, analysis_config.default_namespace)
        result = run_analysis(store, all_validation_analyzers(registry), analysis_config)
    except (ConfcheckError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    output_format = format or confcheck_config.output.format
    if output_format == OutputFormat.JSON.value:
        typer.echo(jsonlib.dumps(result.to_dict(), indent=2))
    elif output_format == OutputFormat.YAML.value:
        typer.echo(yaml.safe_dump(result.to_dict(), sort_keys=False))
    else:
        _output_table(result)

    raise typer.Exit(result.exit_code)


@app.command()
def kinds() -> None:
    """List the resource kinds confcheck knows how to validate."""
    table = Table()
    table.add_column("Group", style="cyan")
    table.add_column("Version", style="white")
    table.add_column("Kind", style="green", no_wrap=True)
    table.add_column("Plural", style="white")
    table.add_column("Scope", style="white")
    table.add_column("Validator", style="white")

    for schema in builtin_registry().all():
        table.add_row(
            schema.group or "core",
            schema.version,
            schema.kind,
            schema.plural,
            "Cluster" if schema.cluster_scoped else "Namespaced",
            "yes" if schema.has_validator else "no",
        )

    console.print(table)


if __name__ == "__main__":
    app()
