"""Fix-perms command for making backup trees writable."""

from pathlib import Path
from typing import Annotated

import typer

from savectl.transfer.permissions import ensure_writable
from savectl.utils.formatting import console, print_error, print_success


def fix_permissions(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="File or directory to fix.")],
) -> None:
    """Make every read-only file under PATH writable.

    Files that cannot be changed are logged and skipped.
    """
    if not path.exists():
        print_error(f"Path not found: {path}")
        raise typer.Exit(code=1)

    changed = ensure_writable(path)
    verbose = isinstance(ctx.obj, dict) and ctx.obj.get("verbose", False)
    if verbose:
        for file_path in changed:
            console.print(f"  {file_path}", style="muted", markup=False, highlight=False)
    print_success(f"Made {len(changed)} file(s) writable.")
