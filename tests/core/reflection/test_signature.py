"""Tests for source-text signature inference."""

from __future__ import annotations

import pytest

from mcp_sandbox.core.reflection.signature import (
    extract_description,
    infer_parameters,
    infer_type,
    split_top_level,
)


def _names(source: str) -> list[str]:
    return [p.name for p in infer_parameters(source)]


class TestInferParameters:
    def test_defaults_and_required(self) -> None:
        params = infer_parameters("def compound_interest(principal, rate, time, compound=1):\n    pass\n")
        assert [p.name for p in params] == ["principal", "rate", "time", "compound"]
        assert [p.has_default for p in params] == [False, False, False, True]

    def test_no_parameters(self) -> None:
        assert infer_parameters("def noop():\n    return None\n") == []

    def test_async_def(self) -> None:
        assert _names("async def fetch(url, retries=3):\n    pass\n") == ["url", "retries"]

    def test_lambda(self) -> None:
        params = infer_parameters("double = lambda value, factor=2: value * factor\n")
        assert [p.name for p in params] == ["value", "factor"]
        assert params[1].type == "number"

    def test_def_wins_over_lambda_in_decorator(self) -> None:
        source = "@register(key=lambda item: item)\ndef area(radius=1, unit='cm'):\n    pass\n"
        params = infer_parameters(source)
        assert [p.name for p in params] == ["radius", "unit"]
        assert [p.type for p in params] == ["number", "string"]

    def test_annotations_are_ignored_for_names(self) -> None:
        source = "def scale(values: list[int], factor: float = 1.5) -> list[float]:\n    pass\n"
        params = infer_parameters(source)
        assert [p.name for p in params] == ["values", "factor"]
        assert params[1].type == "number"

    def test_nested_brackets_in_defaults(self) -> None:
        source = "def pick(options={'a': (1, 2)}, keys=[1, [2, 3]], label='x, y'):\n    pass\n"
        params = infer_parameters(source)
        assert [p.name for p in params] == ["options", "keys", "label"]
        assert [p.type for p in params] == ["object", "array", "string"]

    def test_multiline_signature(self) -> None:
        source = "def long(\n    first,\n    second=True,\n):\n    pass\n"
        params = infer_parameters(source)
        assert [p.name for p in params] == ["first", "second"]
        assert params[1].type == "boolean"

    def test_star_args_are_optional(self) -> None:
        params = infer_parameters("def variadic(head, *args, **kwargs):\n    pass\n")
        assert [p.name for p in params] == ["head", "args", "kwargs"]
        assert [p.has_default for p in params] == [False, True, True]

    def test_unparseable_source_yields_nothing(self) -> None:
        assert infer_parameters("") == []
        assert infer_parameters("def broken(a, b") == []
        assert infer_parameters("x = 1\n") == []


class TestInferType:
    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            ("flag=True", "boolean"),
            ("retries=3", "number"),
            ("ratio=-0.5", "number"),
            ("name='bob'", "string"),
            ('pattern=r"\\d+"', "string"),
            ("items=[]", "array"),
            ("pair=(1, 2)", "array"),
            ("mapping={}", "object"),
        ],
    )
    def test_default_literal_wins(self, token: str, expected: str) -> None:
        assert infer_type(token) == expected

    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            ("count", "number"),
            ("page_size", "number"),
            ("enable_cache", "boolean"),
            ("is_active", "boolean"),
            ("items_array", "array"),
            ("config", "object"),
            ("radius", "string"),
        ],
    )
    def test_name_rules(self, token: str, expected: str) -> None:
        assert infer_type(token) == expected

    def test_number_rule_checked_before_boolean_rule(self) -> None:
        # "is_count" matches both; the number rule comes first
        assert infer_type("is_count") == "number"


class TestExtractDescription:
    def test_docstring_lines_are_joined(self) -> None:
        source = 'def f():\n    """Calculate things.\n\n    More detail.\n    """\n'
        assert extract_description(source) == "Calculate things. More detail."

    def test_leading_comment_block(self) -> None:
        source = "# Convert degrees\n# to radians\ndef f(d=0):\n    return d\n"
        assert extract_description(source) == "Convert degrees to radians"

    def test_none_found(self) -> None:
        assert not extract_description("def f():\n    return 1\n")


class TestSplitTopLevel:
    def test_respects_brackets_and_quotes(self) -> None:
        assert split_top_level("a, b=(1, 2), c='x,y'", ",") == ["a", "b=(1, 2)", "c='x,y'"]
