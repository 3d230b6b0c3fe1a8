"""Shared CLI output formatters."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

if TYPE_CHECKING:
    from mcp_sandbox.core.reflection.models import ToolDescriptor
    from mcp_sandbox.protocols.mcp.models import MCPConfig

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Route log records through rich; ``verbose`` lowers the level to DEBUG."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def print_tools_table(tools: list[ToolDescriptor]) -> None:
    """Pretty-print reflected tools and their parameters as a table."""
    table = Table(title=f"Discovered Tools ({len(tools)})")
    table.add_column("#", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Parameters")

    for index, tool in enumerate(tools, start=1):
        table.add_row(
            str(index),
            tool.name,
            _truncate(tool.description),
            _format_parameters(tool),
        )

    console.print(table)


def print_endpoints(config: MCPConfig) -> None:
    endpoints = config.endpoints
    console.print("\n[bold]Endpoints[/bold]")
    console.print(f"  MCP Tools:    {endpoints.tools}")
    console.print(f"  MCP Execute:  {endpoints.execute}")
    console.print(f"  MCP SSE:      {endpoints.sse}")
    console.print(f"  MCP JSON-RPC: {endpoints.jsonrpc}")


def _format_parameters(tool: ToolDescriptor) -> str:
    schema = tool.input_schema
    if not schema.properties:
        return "-"
    lines = []
    for name, prop in schema.properties.items():
        marker = "required" if name in schema.required else "optional"
        lines.append(f"{name}: {prop.get('type', '?')} ({marker})")
    return "\n".join(lines)


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
