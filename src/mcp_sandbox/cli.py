"""MCP Sandbox CLI entrypoint."""

from __future__ import annotations

import click

from mcp_sandbox import __version__


@click.group()
@click.version_option(version=__version__, prog_name="mcp-sandbox")
def main() -> None:
    """MCP Sandbox — serve any Python module as a sandboxed MCP server."""


# Register subcommands
from mcp_sandbox.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
