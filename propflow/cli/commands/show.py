"""Show command for listing declared properties."""

from pathlib import Path
from typing import Annotated

import typer

from propflow.config import PropertiesConfig
from propflow.models import PropertyTemplate, Scope


def show_command(
    ctx: typer.Context,
    declarations: Annotated[
        Path, typer.Argument(help="Declarations file (YAML or JSON)")
    ],
    json_output: Annotated[
        bool, typer.Option("--json", help="Output in JSON format")
    ] = False,
):
    """List declared properties with their defaults and scopes."""
    cli_ctx = ctx.obj
    cli_ctx.json_mode = json_output

    loaded = cli_ctx.load_declarations(declarations)
    settings = loaded.settings or PropertiesConfig.from_env()

    rows = []
    for name, raw in loaded.properties.items():
        template = PropertyTemplate.from_raw(raw)
        if template.scope is None:
            scope = settings.default_scope.value
        elif Scope.parse(template.scope) is None:
            scope = f"{template.scope} (invalid)"
        else:
            scope = Scope(template.scope).value
        rows.append({
            "name": name,
            "default": template.value if template.has_value else None,
            "config": loaded.config.get(name),
            "scope": scope,
        })

    if json_output:
        cli_ctx.console.print_json(data={"properties": rows, "settings": settings.to_dict()}, default=str)
        return

    cli_ctx.print_properties(rows, title=f"Properties ({declarations.name})")
