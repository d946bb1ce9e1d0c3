"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from presentation details.
- Tables and panels are reused by several commands.
"""

from __future__ import annotations

from typing import Sequence

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.descriptors import ConfigDescriptor
from core.errors import ConfigDerivationError


def print_banner(console: Console) -> None:
    """Print the welcome banner (disabled in machine-readable modes)."""

    title = Text("simple-conf", style="bold cyan")
    subtitle = Text("Annotations • Descriptors • Bindings", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def _optional(value: object) -> str:
    return "-" if value is None else str(value)


def build_descriptor_table(descriptors: Sequence[ConfigDescriptor]) -> Table:
    table = Table(title="Configuration types")
    table.add_column("Type", style="cyan", no_wrap=True)
    table.add_column("Source", style="white")
    table.add_column("Serializer", style="magenta")
    table.add_column("Deserializer", style="magenta")
    table.add_column("CLI", style="green")
    table.add_column("Fields", style="white", justify="right")

    for descriptor in descriptors:
        table.add_row(
            descriptor.type_name,
            f"{descriptor.source.kind.value} = {descriptor.source.value}",
            _optional(descriptor.serializer),
            _optional(descriptor.deserializer),
            "yes" if descriptor.cli_integration else "no",
            str(len(descriptor.fields)),
        )
    return table


def build_fields_table(descriptor: ConfigDescriptor) -> Table:
    table = Table(title=f"{descriptor.type_name} fields")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Field", style="cyan")
    table.add_column("save", style="yellow")
    for position, field in enumerate(descriptor.fields):
        table.add_row(str(position), field.name, _optional(field.save))
    return table


def build_errors_panel(errors: Sequence[ConfigDerivationError]) -> Panel:
    body = Text()
    for error in errors:
        body.append(f"{error.location}", style="bold")
        body.append(f" [{error.kind}]\n", style="dim")
        body.append(f"  {error.detail}\n")
    title = Text(f"{len(errors)} type(s) cannot be derived", style="bold red")
    return Panel(body, title=title, border_style="red")
