"""CLI subcommand registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all subcommands on the CLI group."""
    from mcp_sandbox.cli_commands.generate import generate
    from mcp_sandbox.cli_commands.inspect import inspect_cmd
    from mcp_sandbox.cli_commands.start import start

    cli.add_command(start)
    cli.add_command(inspect_cmd)
    cli.add_command(generate)
