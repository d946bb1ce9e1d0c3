"""Doctor command for environment diagnostics."""

from __future__ import annotations

import json

import typer
from rich.console import Console
from rich.table import Table

from adapters.code_generator import render_module
from core.config import ConfSettings, get_user_env_file, write_user_env_vars
from core.domain.models import FieldDeclaration, RawAnnotation, TypeDeclaration
from core.services.derivation import derive

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def _sample_declaration(settings: ConfSettings) -> TypeDeclaration:
    return TypeDeclaration(
        name="DoctorConfig",
        module="doctor_sample",
        annotations=(RawAnnotation.list_of(settings.namespace, path="doctor.json"),),
        fields=(
            FieldDeclaration(name="name"),
            FieldDeclaration(
                name="retries",
                annotations=(RawAnnotation.list_of(settings.namespace, save=3),),
            ),
        ),
    )


def _check_generation(settings: ConfSettings) -> tuple[bool, str]:
    """Derive a sample type, render it and compile the generated module."""

    derivation = derive(_sample_declaration(settings), settings)
    if not derivation.ok:
        return False, str(derivation.error)
    try:
        text = render_module([derivation.unwrap()], source="doctor", settings=settings)
        compile(text, "<generated>", "exec")
    except Exception as exc:
        return False, str(exc)
    return True, "OK"


@app.command()
def run() -> None:
    """Run baseline diagnostics."""

    settings = ConfSettings()

    table = Table(title="simple-conf Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("Namespace", "OK", settings.namespace)
    table.add_row("CLI markers", "OK", ", ".join(settings.cli_annotations) or "(none)")
    table.add_row("Encoding", "OK", settings.encoding)

    env_file = get_user_env_file()
    table.add_row("User config", "OK" if env_file.exists() else "OPTIONAL", str(env_file))

    ok_gen, detail_gen = _check_generation(settings)
    table.add_row("Code generation", "OK" if ok_gen else "FAIL", detail_gen)

    _console.print(table)
    if not ok_gen:
        raise typer.Exit(code=1)


@app.command(name="setup")
def setup() -> None:
    """Interactive setup (stores settings in the user config .env)."""

    settings = ConfSettings()
    namespace = typer.prompt("Annotation namespace", default=settings.namespace).strip()
    markers = typer.prompt(
        "CLI markers (comma separated)",
        default=",".join(settings.cli_annotations),
    )
    cli_annotations = [m.strip() for m in markers.split(",") if m.strip()]

    if not namespace.isidentifier():
        raise typer.BadParameter("namespace must be a Python identifier")

    env_path = write_user_env_vars(
        {
            "SIMPLE_CONF_NAMESPACE": namespace,
            "SIMPLE_CONF_CLI_ANNOTATIONS": json.dumps(cli_annotations),
        }
    )
    _console.print(f"[green]Saved settings to:[/green] {env_path}")
