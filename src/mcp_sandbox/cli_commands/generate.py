"""``mcp-sandbox generate`` — write the MCP configuration for a module."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from mcp_sandbox.cli_commands._output import console
from mcp_sandbox.cli_commands._resolve import resolve_module


@click.command()
@click.argument("module")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default="mcp-config.json",
    show_default=True,
    help="Output file.",
)
def generate(module: str, output: str) -> None:
    """Generate the MCP configuration for MODULE."""
    from mcp_sandbox.sdk.session import MCPSandbox

    async def _generate() -> Path:
        sandbox = MCPSandbox()
        try:
            await sandbox.load_module(resolve_module(module))
            return sandbox.save_config(output)
        finally:
            await sandbox.close()

    try:
        written = asyncio.run(_generate())
    except Exception as exc:
        console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)

    console.print(f"[green]MCP configuration generated:[/green] {written}")
