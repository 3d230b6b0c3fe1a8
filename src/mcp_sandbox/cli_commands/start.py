"""``mcp-sandbox start`` — serve a module's tools over HTTP."""

from __future__ import annotations

import asyncio
import sys

import click

from mcp_sandbox.cli_commands._output import console, print_endpoints, print_tools_table, setup_logging
from mcp_sandbox.cli_commands._resolve import resolve_module


@click.command()
@click.argument("module")
@click.option("--host", "-h", default=None, help="Server host.  [default: localhost]")
@click.option("--port", "-p", type=int, default=None, help="Server port.  [default: 3000]")
@click.option("--timeout", "-t", type=int, default=None, help="Execution timeout in ms.  [default: 5000]")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write the MCP configuration to FILE.")
@click.option(
    "--config",
    "-c",
    "config_file",
    type=click.Path(exists=True, dir_okay=False),
    help="Settings YAML file (flags override its values).",
)
@click.option("--telemetry", is_flag=True, help="Enable telemetry.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
def start(
    module: str,
    host: str | None,
    port: int | None,
    timeout: int | None,
    output: str | None,
    config_file: str | None,
    telemetry: bool,
    verbose: bool,
) -> None:
    """Start an MCP sandbox server for MODULE.

    MODULE is a path to a Python file or an importable module name.
    """
    from mcp_sandbox.sdk.session import MCPSandbox
    from mcp_sandbox.sdk.settings import load_settings

    setup_logging(verbose)

    try:
        settings = load_settings(config_file, host=host, port=port, timeout_ms=timeout)
        module_path = resolve_module(module)
    except Exception as exc:
        console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)

    if telemetry:
        settings.telemetry.enabled = True

    sandbox = MCPSandbox(settings)

    async def _serve() -> None:
        try:
            config = await sandbox.load_module(module_path)
            print_tools_table(sandbox.get_tools())
            if output:
                written = sandbox.save_config(output)
                console.print(f"Configuration written to: {written}")
            print_endpoints(config)
            await sandbox.start()
        finally:
            await sandbox.close()

    console.print("Initializing MCP Sandbox...")
    try:
        asyncio.run(_serve())
    except KeyboardInterrupt:
        console.print("\nShutting down MCP Sandbox...")
    except Exception as exc:
        console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)
