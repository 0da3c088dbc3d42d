"""CLI entry point for faillint."""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from . import __date__, __version__
from .analyzer.analyzer import Faillint
from .config import load_config
from .driver import Checker, CheckResult
from .errors import FaillintError
from .utils.logging import setup_logging

EXIT_DIAGNOSTICS = 3

app = typer.Typer(
    name="faillint",
    help="Report unwanted import path or exported declaration usages in Go packages.",
    add_completion=False,
)
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"faillint version {__version__} ({__date__})")
        raise typer.Exit()


@app.command()
def main(
    packages: Annotated[
        Optional[list[str]],
        typer.Argument(help="Packages to analyze: directories, dir/... or .go files"),
    ] = None,
    paths: Annotated[
        Optional[str],
        typer.Option(
            "--paths",
            help=(
                "Import paths or exported declarations (i.e: functions, constant, types or "
                "variables) to fail. E.g. errors=github.com/pkg/errors,"
                "fmt.{Errorf}=github.com/pkg/errors.{Errorf},fmt.{Println,Print,Printf}"
            ),
        ),
    ] = None,
    ignore_tests: Annotated[
        Optional[bool],
        typer.Option("--ignore-tests/--no-ignore-tests", help="Ignore all _test.go files"),
    ] = None,
    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Configuration file path"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Print diagnostics as JSON"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version", "-V", callback=version_callback, is_eager=True, help="Print version and exit"
        ),
    ] = False,
) -> None:
    """Analyze Go packages for unwanted imports and declarations."""
    try:
        config = load_config(config_file)
    except FaillintError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    overrides = {}
    if paths is not None:
        overrides["paths"] = paths
    if ignore_tests is not None:
        overrides["ignore_tests"] = ignore_tests
    if overrides:
        config = config.model_copy(update=overrides)

    setup_logging("DEBUG" if verbose else config.log_level, config.log_file)

    checker = Checker(Faillint(config), config)
    try:
        result = checker.check(packages or [])
    except FaillintError as e:
        err_console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    if json_output:
        typer.echo(json.dumps([d.to_dict() for d in result.diagnostics], indent=2))
    else:
        for diagnostic in result.diagnostics:
            typer.echo(str(diagnostic))

    if verbose:
        _print_summary(result)

    if result.has_diagnostics:
        raise typer.Exit(EXIT_DIAGNOSTICS)


def _print_summary(result: CheckResult) -> None:
    """Print a summary of the check to stderr."""
    table = Table(title="faillint")

    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Packages", f"{result.packages_checked:,}")
    table.add_row("Files", f"{result.files_checked:,}")
    table.add_row("Problems", f"{len(result.diagnostics):,}")
    table.add_row("Unreadable files", f"{len(result.parse_errors):,}")

    err_console.print(table)


if __name__ == "__main__":
    app()
