"""Replay command: feed an event stream through a node's properties."""

from pathlib import Path
from typing import Annotated

import typer

from propflow.config import PropertiesConfig
from propflow.node import Node
from propflow.properties import NodeProperties


def replay_command(
    ctx: typer.Context,
    declarations: Annotated[
        Path, typer.Argument(help="Declarations file (YAML or JSON)")
    ],
    events: Annotated[
        Path, typer.Argument(help="Events file (YAML, JSON or JSON Lines)")
    ],
    flow_id: Annotated[
        str, typer.Option("--flow", help="Flow id of the replay node")
    ] = "default",
    config_file: Annotated[
        Path | None, typer.Option("--config", help="Settings file (YAML or JSON); overrides declaration settings")
    ] = None,
    json_output: Annotated[
        bool, typer.Option("--json", help="Output in JSON format")
    ] = False,
):
    """Build a node from declarations, apply each event in order and print the final state."""
    cli_ctx = ctx.obj
    cli_ctx.json_mode = json_output

    loaded = cli_ctx.load_declarations(declarations)
    event_list = cli_ctx.load_events(events)

    if config_file is not None:
        settings = cli_ctx.load_settings(config_file)
    else:
        settings = loaded.settings or PropertiesConfig.from_env()

    node = Node(node_id="replay", flow_id=flow_id, name="replay")
    props = NodeProperties(
        node,
        loaded.config,
        loaded.properties,
        settings=settings,
    )

    matched = 0
    for index, event in enumerate(event_list):
        if props.input(event):
            matched += 1
        else:
            cli_ctx.print_verbose(f"  event {index}: no property matched")

    snapshot = props.snapshot()

    if json_output:
        cli_ctx.console.print_json(data={
            "events": len(event_list),
            "matched": matched,
            "snapshot": snapshot,
            "scopes": {name: props.get_scope(name).value for name in props.names},
            "warnings": [warning.to_dict() for warning in props.warnings],
        }, default=str)
        return

    rows = [
        {"name": name, "value": value, "scope": props.get_scope(name).value}
        for name, value in snapshot.items()
    ]
    cli_ctx.print_properties(rows, title="Final state")
    cli_ctx.console.print(f"Final state after {len(event_list)} event(s), {matched} matched")
    cli_ctx.print_warnings(props.warnings)
