"""Tests for ``mcp-sandbox generate`` CLI command."""

from __future__ import annotations

import json

from click.testing import CliRunner

from mcp_sandbox.cli import main


class TestGenerate:
    def test_writes_config(self, examples_dir, tmp_path) -> None:
        output = tmp_path / "mcp-config.json"

        runner = CliRunner()
        result = runner.invoke(main, ["generate", str(examples_dir / "string_utils.py"), "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert "MCP configuration generated:" in result.output
        document = json.loads(output.read_text())
        assert document["capabilities"] == {"tools": True, "sampling": False, "logging": True}
        assert "reverse" in [tool["name"] for tool in document["tools"]]

    def test_default_output(self, examples_dir) -> None:
        runner = CliRunner()
        with runner.isolated_filesystem():
            result = runner.invoke(main, ["generate", str(examples_dir / "math_utils.py")])

            assert result.exit_code == 0, result.output
            with open("mcp-config.json") as f:
                assert len(json.load(f)["tools"]) == 6

    def test_missing_module(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["generate", "no_such_module_anywhere"])

        assert result.exit_code == 1
        assert "Module not found: no_such_module_anywhere" in result.output
