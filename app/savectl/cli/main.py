"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from savectl import __version__
from savectl.cli.commands import backups, config, export, migrate, perms, placeholders, size
from savectl.core.logging_config import setup_logging
from savectl.core.paths import ensure_config_dir, get_log_path
from savectl.utils.formatting import print_error

# Create main Typer app
app = typer.Typer(
    name="savectl",
    help="Move, inspect and archive game save backups.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"savectl version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
    log: Annotated[
        bool,
        typer.Option(
            "--log",
            help="Append a debug log to <config dir>/savectl.log.",
        ),
    ] = False,
) -> None:
    """savectl - Game save backup transfer and archival.

    Relocate the backup root, export the newest snapshots into a
    single archive and manage the settings shared with the desktop app.
    """
    log_file = None
    if log:
        try:
            ensure_config_dir()
        except RuntimeError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e
        log_file = get_log_path()
    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet


# Register commands (actions with a positional argument are plain commands)
app.command(name="migrate")(migrate.migrate_backups)
app.add_typer(export.app, name="export")
app.add_typer(config.app, name="config")
app.command(name="size")(size.show_size)
app.command(name="fix-perms")(perms.fix_permissions)
app.add_typer(backups.app, name="backups")
app.add_typer(placeholders.app, name="placeholders")


if __name__ == "__main__":
    app()
