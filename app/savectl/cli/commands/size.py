"""Size command for measuring backup trees."""

from pathlib import Path
from typing import Annotated

import typer

from savectl.transfer.sizing import directory_size
from savectl.utils.formatting import console, format_size, print_error


def show_size(
    path: Annotated[Path, typer.Argument(help="File or directory to measure.")],
    include_metadata: Annotated[
        bool,
        typer.Option(
            "--include-metadata",
            help="Also count backup_info.json files.",
        ),
    ] = False,
    raw: Annotated[
        bool,
        typer.Option("--bytes", "-b", help="Print the byte count only."),
    ] = False,
) -> None:
    """Show the total size of a file or directory tree."""
    if not path.exists() and not path.is_symlink():
        print_error(f"Path not found: {path}")
        raise typer.Exit(code=1)

    total = directory_size(path, ignore_metadata=not include_metadata)
    if raw:
        typer.echo(str(total))
        return
    console.print(f"[size]{format_size(total)}[/] [dim]({total} bytes)[/dim]  {path}")
