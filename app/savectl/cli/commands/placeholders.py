"""Placeholder commands for inspecting path templates."""

from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from savectl.core.placeholders import (
    PLACEHOLDER_IDENTIFIERS,
    PLACEHOLDER_MAPPING,
    compact_template,
    resolve_template,
)
from savectl.utils.formatting import console

app = typer.Typer(
    help="Resolve path template placeholders.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command(name="list")
def list_placeholders() -> None:
    """Show every placeholder with its identifier and value on this machine."""
    table = Table(
        title="Placeholders",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Token", style="item", no_wrap=True)
    table.add_column("Identifier", style="muted")
    table.add_column("Value")
    for token, identifier in PLACEHOLDER_IDENTIFIERS.items():
        table.add_row(
            escape(token),
            escape(identifier),
            escape(PLACEHOLDER_MAPPING.get(token, "-")),
        )
    console.print(table)


@app.command()
def resolve(
    template: Annotated[str, typer.Argument(help="Path template, e.g. '{{p|appdata}}/Game'.")],
) -> None:
    """Substitute this machine's values into a path template."""
    typer.echo(resolve_template(template))


@app.command()
def compact(
    template: Annotated[str, typer.Argument(help="Path template using long tokens.")],
) -> None:
    """Replace long tokens in a path template by their short identifiers."""
    typer.echo(compact_template(template))
