"""Tests for ModuleReflector against the bundled examples and ad-hoc modules."""

from __future__ import annotations

import subprocess
import sys

import pytest

from mcp_sandbox.core.reflection.errors import ReflectionError
from mcp_sandbox.core.reflection.reflector import ModuleReflector

EXIT_AFTER_LOAD_TIMEOUT = """
import asyncio
import sys

from mcp_sandbox.core.reflection.errors import ReflectionError
from mcp_sandbox.core.reflection.reflector import ModuleReflector


async def main():
    try:
        await ModuleReflector(timeout_ms=200).reflect(sys.argv[1])
    except ReflectionError as exc:
        print(exc)


asyncio.run(main())
print("exited")
"""


@pytest.fixture
def reflector() -> ModuleReflector:
    return ModuleReflector(timeout_ms=2000)


class TestReflectExamples:
    async def test_math_utils(self, reflector: ModuleReflector, examples_dir) -> None:
        result = await reflector.reflect(examples_dir / "math_utils.py")
        try:
            registry = result.registry
            assert registry.names() == [
                "circle_area",
                "fibonacci",
                "compound_interest",
                "is_prime",
                "degrees_to_radians",
                "factorial",
            ]
            assert registry.sealed

            circle = registry.get("circle_area")
            assert circle.description == "Calculate the area of a circle."
            assert circle.input_schema.required == []
            assert circle.input_schema.properties["radius"]["type"] == "number"

            interest = registry.get("compound_interest")
            assert interest.input_schema.required == ["principal", "rate", "time"]

            radians = registry.get("degrees_to_radians")
            assert radians.description == "Convert degrees to radians"
        finally:
            result.context.close()

    async def test_namespaced_exports(self, reflector: ModuleReflector, examples_dir) -> None:
        result = await reflector.reflect(examples_dir / "array_utils.py")
        try:
            assert result.registry.names() == [
                "arrays_shuffle",
                "arrays_unique",
                "arrays_chunk",
                "arrays_intersection",
                "arrays_difference",
                "arrays_flatten",
            ]
            chunk = result.registry.get("arrays_chunk")
            assert chunk.input_schema.properties["array"]["type"] == "array"
            assert chunk.input_schema.properties["size"]["type"] == "number"
        finally:
            result.context.close()

    async def test_async_module(self, reflector: ModuleReflector, examples_dir) -> None:
        result = await reflector.reflect(examples_dir / "filesystem_utils.py")
        try:
            assert "read_file" in result.registry
            assert result.registry.get("write_file").input_schema.required == ["file_path", "content"]
        finally:
            result.context.close()


class TestReflectFailures:
    async def test_missing_module(self, reflector: ModuleReflector, tmp_path) -> None:
        with pytest.raises(ReflectionError, match="Module not found"):
            await reflector.reflect(tmp_path / "nope.py")

    async def test_syntax_error(self, reflector: ModuleReflector, write_module) -> None:
        with pytest.raises(ReflectionError):
            await reflector.reflect(write_module("def broken(:\n"))

    async def test_module_raises_while_loading(self, reflector: ModuleReflector, write_module) -> None:
        with pytest.raises(ReflectionError, match="boom"):
            await reflector.reflect(write_module("raise ValueError('boom')\n"))

    async def test_load_deadline(self, write_module) -> None:
        path = write_module("import time\ntime.sleep(0.5)\n")

        with pytest.raises(ReflectionError, match="timed out after 50ms"):
            await ModuleReflector(timeout_ms=50).reflect(path)

    def test_process_exits_after_load_deadline(self, write_module) -> None:
        path = write_module("import time\ntime.sleep(3600)\n")

        proc = subprocess.run(
            [sys.executable, "-c", EXIT_AFTER_LOAD_TIMEOUT, str(path)],
            capture_output=True,
            text=True,
            timeout=30,
        )

        assert proc.returncode == 0, proc.stderr
        assert "Module load timed out after 200ms" in proc.stdout
        assert proc.stdout.rstrip().endswith("exited")

    async def test_imported_helpers_are_not_tools(self, reflector: ModuleReflector, write_module) -> None:
        source = """
        from functools import partial
        from typing import Optional, Union

        shout = partial(str.upper)

        def area(radius=1):
            return radius
        """
        result = await reflector.reflect(write_module(source))
        try:
            assert result.registry.names() == ["area"]
        finally:
            result.context.close()


class TestAnalyzeExports:
    async def test_single_callable_becomes_default(self, reflector: ModuleReflector, write_module) -> None:
        result = await reflector.reflect(write_module("__exports__ = lambda text, times=2: text * times\n"))
        try:
            assert result.registry.names() == ["default"]
            assert result.registry.get("default").input_schema.required == ["text"]
        finally:
            result.context.close()

    async def test_classes_are_skipped_and_methods_drop_self(self, reflector: ModuleReflector, write_module) -> None:
        source = """
        class Calculator:
            def add(self, a, b=1):
                return a + b

        calc = Calculator()
        __exports__ = {"Calculator": Calculator, "add": calc.add}
        """
        result = await reflector.reflect(write_module(source))
        try:
            assert result.registry.names() == ["add"]
            assert result.registry.get("add").parameter_names == ["a", "b"]
        finally:
            result.context.close()

    async def test_callable_without_source(self, reflector: ModuleReflector, write_module) -> None:
        result = await reflector.reflect(write_module("__exports__ = {'length': len}\n"))
        try:
            tool = result.registry.get("length")
            assert tool.description == "Execute length function"
            assert tool.input_schema.properties == {}
        finally:
            result.context.close()

    async def test_name_collision_keeps_later_tool(self, reflector: ModuleReflector, write_module) -> None:
        source = """
        def first():
            return 1

        def second():
            return 2

        __exports__ = {"a_b": first, "a": {"b": second}}
        """
        result = await reflector.reflect(write_module(source))
        try:
            assert result.registry.names() == ["a_b"]
            assert result.registry.get("a_b").handler() == 2
        finally:
            result.context.close()

    async def test_non_callable_export_yields_no_tools(self, reflector: ModuleReflector) -> None:
        registry = reflector.analyze_exports(42)

        assert len(registry) == 0
        assert registry.sealed
