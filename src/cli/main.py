"""simple-conf command-line interface."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from adapters.code_generator import render_module, write_module
from adapters.declarations import open_declarations
from adapters.json_exporter import export_descriptors_json
from cli import doctor
from cli.ui_components import (
    build_descriptor_table,
    build_errors_panel,
    build_fields_table,
    print_banner,
)
from core.config import ConfSettings
from core.errors import CodeGenerationError, DeclarationSourceError
from core.logging_setup import setup_logging
from core.services.derivation import DerivationReport, derive_source

app = typer.Typer(
    no_args_is_help=True,
    help="Derive load/save bindings from annotated configuration types.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console()
_err_console = Console(stderr=True)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level (debug, info, warning, error). Defaults to SIMPLE_CONF_LOG_LEVEL.",
    ),
) -> None:
    settings = ConfSettings()
    setup_logging(log_level or settings.log_level)


def _derive(sources: List[Path], settings: ConfSettings, module: Optional[str]) -> DerivationReport:
    report = DerivationReport()
    for source in sources:
        try:
            report.extend(derive_source(open_declarations(source, settings, module=module), settings))
        except DeclarationSourceError as exc:
            _err_console.print(f"[red]Error:[/red] {exc}")
            raise typer.Exit(code=2)
    return report


def _fail_on_errors(report: DerivationReport) -> None:
    if not report.ok:
        _err_console.print(build_errors_panel(report.errors))
        raise typer.Exit(code=1)


@app.command(name="inspect")
def inspect_command(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help=".py source or .json declarations."),
    module: Optional[str] = typer.Option(None, "--module", "-m", help="Module the types live in."),
    json_out: Optional[Path] = typer.Option(None, "--json", help="Also write descriptors as JSON."),
    banner: bool = typer.Option(True, "--banner/--no-banner"),
) -> None:
    """Show the descriptor derived for every annotated type."""

    settings = ConfSettings()
    report = _derive([source], settings, module)

    if banner:
        print_banner(_console)
    if report.descriptors:
        _console.print(build_descriptor_table(report.descriptors))
        for descriptor in report.descriptors:
            _console.print(build_fields_table(descriptor))
    if json_out is not None:
        export_descriptors_json(descriptors=report.descriptors, output_path=json_out)
        _console.print(f"[green]Descriptors written to:[/green] {json_out}")

    _fail_on_errors(report)


@app.command()
def check(
    sources: List[Path] = typer.Argument(..., exists=True, dir_okay=False),
) -> None:
    """Validate annotations of every type in every source; report all errors."""

    settings = ConfSettings()
    report = _derive(sources, settings, None)
    _fail_on_errors(report)
    _console.print(f"[green]OK[/green] {len(report.descriptors)} type(s) derived")


@app.command()
def generate(
    source: Path = typer.Argument(..., exists=True, dir_okay=False),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Target .py file."),
    module: Optional[str] = typer.Option(None, "--module", "-m", help="Module the types live in."),
    stdout: bool = typer.Option(False, "--stdout", help="Print the module instead of writing it."),
) -> None:
    """Generate a binding module for the annotated types of SOURCE."""

    settings = ConfSettings()
    report = _derive([source], settings, module)
    _fail_on_errors(report)

    if not report.descriptors:
        _err_console.print(f"[yellow]No `{settings.namespace}` types found in {source}[/yellow]")
        raise typer.Exit(code=1)

    try:
        if stdout:
            typer.echo(
                render_module(report.descriptors, source=source.name, default_module=module, settings=settings),
                nl=False,
            )
            return
        target = output or source.with_name(f"{source.stem}{settings.generated_suffix}.py")
        write_module(
            report.descriptors,
            target,
            source=source.name,
            default_module=module,
            settings=settings,
        )
    except CodeGenerationError as exc:
        _err_console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1)

    _console.print(f"[green]Generated {len(report.descriptors)} binding(s):[/green] {target}")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
