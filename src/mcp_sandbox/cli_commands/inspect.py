"""``mcp-sandbox inspect`` — analyze a module without serving it."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any

import click

from mcp_sandbox.cli_commands._output import console, print_tools_table
from mcp_sandbox.cli_commands._resolve import resolve_module

INSPECT_TIMEOUT_MS = 10_000


@click.command("inspect")
@click.argument("module")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the analysis report to FILE.")
@click.option("--json", "as_json", is_flag=True, help="Output the report as JSON.")
def inspect_cmd(module: str, output: str | None, as_json: bool) -> None:
    """Analyze MODULE and list the tools it would expose."""
    from mcp_sandbox.sdk.models import SandboxSettings
    from mcp_sandbox.sdk.session import MCPSandbox

    async def _inspect() -> tuple[dict[str, Any], list[Any]]:
        sandbox = MCPSandbox(SandboxSettings(timeout_ms=INSPECT_TIMEOUT_MS))
        try:
            await sandbox.load_module(resolve_module(module))
            return sandbox.inspect_report(), sandbox.get_tools()
        finally:
            await sandbox.close()

    try:
        report, tools = asyncio.run(_inspect())
    except Exception as exc:
        console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)

    if as_json:
        console.print_json(json.dumps(report))
    else:
        console.print(f"Module: {report['module']}")
        print_tools_table(tools)

    if output:
        Path(output).write_text(json.dumps(report, indent=2) + "\n", encoding="utf-8")
        console.print(f"Analysis report written to: {output}")
