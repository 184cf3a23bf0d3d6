"""Config commands for reading and changing settings.

Values are shown and accepted as JSON; a value that is not valid JSON is
taken as a plain string.
"""

import json
from typing import Annotated, Any

import typer
from rich.markup import escape
from rich.table import Table

from savectl.cli.types import get_settings_store, run_with_store
from savectl.core.settings import SettingsError, SettingsStore
from savectl.models.settings import Settings
from savectl.utils.formatting import console, print_error, print_success

app = typer.Typer(
    help="Show and change settings.",
    invoke_without_command=True,
    no_args_is_help=True,
)


def _parse_value(raw: str) -> Any:
    """Parse a command line value as JSON, falling back to the raw string."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _resolve_field(key: str) -> str:
    field = Settings.field_for_key(key)
    if field is None:
        print_error(f"Unknown setting: {key}")
        raise typer.Exit(code=1)
    return field


@app.command()
def show(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """Show all settings."""
    store = get_settings_store()
    data = store.get().to_json_dict()

    if json_output:
        console.print_json(json.dumps(data, ensure_ascii=False))
        return

    table = Table(
        title=f"Settings ({store.path})",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Key", style="item", no_wrap=True)
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(key, escape(json.dumps(value, ensure_ascii=False)))
    console.print(table)


@app.command()
def get(
    key: Annotated[str, typer.Argument(help="Setting name (snake_case or camelCase).")],
) -> None:
    """Print one setting as JSON."""
    field = _resolve_field(key)
    value = getattr(get_settings_store().get(), field)
    typer.echo(json.dumps(value, ensure_ascii=False))


@app.command(name="set")
def set_value(
    key: Annotated[str, typer.Argument(help="Setting name (snake_case or camelCase).")],
    value: Annotated[str, typer.Argument(help="New value (JSON, or a plain string).")],
) -> None:
    """Change one setting and write the settings file.

    Examples:
        savectl config set maxBackups 10
        savectl config set theme light
        savectl config set gameInstalls '["D:/Games"]'
    """
    field = _resolve_field(key)
    store = get_settings_store()

    async def _update(target: SettingsStore) -> bool:
        return await target.set(field, _parse_value(value))

    try:
        written = run_with_store(store, lambda: _update(store))
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if not written:
        print_error(f"Could not write {store.path}")
        raise typer.Exit(code=1)
    print_success(f"{key} = {json.dumps(getattr(store.get(), field), ensure_ascii=False)}")
