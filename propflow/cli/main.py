"""PropFlow CLI - Typer-based command line interface."""

import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from propflow.cli.commands import replay_command, show_command
from propflow.cli.context import CLIContext

# Create main app and console
app = typer.Typer(
    name="propflow",
    help="PropFlow: scoped property dispatch for message-driven nodes",
    no_args_is_help=True,
)
console = Console()


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable verbose output")
    ] = False,
):
    """
    PropFlow CLI callback - sets up context for all commands.

    With --verbose, dispatch logging is routed to stderr through rich.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )

    ctx.obj = CLIContext(console=console, verbose=verbose)


app.command(name="show")(show_command)
app.command(name="replay")(replay_command)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
