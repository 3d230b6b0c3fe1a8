"""Tests for ``mcp-sandbox start`` CLI command."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

from click.testing import CliRunner

from mcp_sandbox.cli import main


class TestStart:
    def test_serves_module(self, examples_dir) -> None:
        with patch("mcp_sandbox.sdk.session.MCPSandbox.start", new_callable=AsyncMock) as mock_start:
            runner = CliRunner()
            result = runner.invoke(main, ["start", str(examples_dir / "math_utils.py"), "-p", "4100"])

        assert result.exit_code == 0, result.output
        assert "Discovered Tools (6)" in result.output
        assert "http://localhost:4100/mcp/tools" in result.output
        mock_start.assert_awaited_once()

    def test_settings_file_and_output(self, examples_dir, tmp_path) -> None:
        settings_file = tmp_path / "sandbox.yaml"
        settings_file.write_text("host: 127.0.0.1\nport: 4200\n")
        output = tmp_path / "config.json"

        with patch("mcp_sandbox.sdk.session.MCPSandbox.start", new_callable=AsyncMock):
            runner = CliRunner()
            result = runner.invoke(
                main,
                ["start", str(examples_dir / "math_utils.py"), "-c", str(settings_file), "-o", str(output)],
            )

        assert result.exit_code == 0, result.output
        document = json.loads(output.read_text())
        assert document["endpoints"]["sse"] == "http://127.0.0.1:4200/sse"

    def test_keyboard_interrupt(self, examples_dir) -> None:
        with patch(
            "mcp_sandbox.sdk.session.MCPSandbox.start",
            new_callable=AsyncMock,
            side_effect=KeyboardInterrupt,
        ):
            runner = CliRunner()
            result = runner.invoke(main, ["start", str(examples_dir / "math_utils.py")])

        assert result.exit_code == 0
        assert "Shutting down MCP Sandbox..." in result.output

    def test_missing_module(self, tmp_path) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["start", str(tmp_path / "nope.py")])

        assert result.exit_code == 1
        assert "Module not found" in result.output

    def test_invalid_timeout(self, examples_dir) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["start", str(examples_dir / "math_utils.py"), "-t", "0"])

        assert result.exit_code == 1
        assert "Error:" in result.output
