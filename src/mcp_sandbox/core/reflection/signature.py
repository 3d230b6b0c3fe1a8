"""Signature inference — best-effort parameter schemas from source text.

Nothing here consults annotations, ``inspect.signature`` or any other runtime
metadata: the parameter list is cut out of the callable's source text and
each token is classified by a fixed table of rules.

1. Shape of the default literal (``True``/``False``, numbers, quoted
   strings, ``[``/``(``, ``{``).
2. Substrings of the lower-cased name, checked in order:
   ``count``/``num``/``size`` -> number, ``flag``/``enable``/``is`` ->
   boolean, ``list``/``array`` -> array, ``config``/``options`` -> object.
3. ``string``.

The result is a guess. It is never promoted to a type contract, and any
failure to parse degrades to "no parameters".
"""

from __future__ import annotations

import re

from mcp_sandbox.core.reflection.models import ParameterDescriptor, ParameterType

_DEF_RE = re.compile(r"\bdef\s+\w+\s*\(")
_LAMBDA_RE = re.compile(r"\blambda\b")
_NUMBER_RE = re.compile(r"^[+-]?(?:\d[\d_]*\.?[\d_]*|\.\d[\d_]*)(?:[eE][+-]?\d+)?$")
_STRING_RE = re.compile(r"^[rRbBuUfF]{0,2}['\"]")
_DOCSTRING_RE = re.compile(r"(\"\"\"|''')(.*?)\1", re.DOTALL)

_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = frozenset(_OPENERS.values())

_NAME_RULES: tuple[tuple[tuple[str, ...], ParameterType], ...] = (
    (("count", "num", "size"), "number"),
    (("flag", "enable", "is"), "boolean"),
    (("list", "array"), "array"),
    (("config", "options"), "object"),
)


def infer_parameters(source: str) -> list[ParameterDescriptor]:
    """Infer the parameters of the first ``def`` in *source*, else of its first ``lambda``.

    Never raises; unparseable text yields an empty list.
    """
    try:
        raw = _parameter_list(source)
    except (IndexError, ValueError):
        return []
    if not raw:
        return []

    params: list[ParameterDescriptor] = []
    for token in split_top_level(raw, ","):
        param = _parse_token(token)
        if param is not None:
            params.append(param)
    return params


def infer_type(token: str) -> ParameterType:
    """Classify a single parameter token (``name[: ann][= default]``)."""
    name, _, default = token.partition("=")
    if default:
        literal = default.strip()
        if literal in ("True", "False"):
            return "boolean"
        if _NUMBER_RE.match(literal):
            return "number"
        if _STRING_RE.match(literal):
            return "string"
        if literal.startswith(("[", "(")):
            return "array"
        if literal.startswith("{"):
            return "object"

    lowered = _clean_name(name).lower()
    for needles, inferred in _NAME_RULES:
        if any(needle in lowered for needle in needles):
            return inferred
    return "string"


def extract_description(source: str) -> str | None:
    """Return the first docstring, else the leading ``#`` comment block."""
    match = _DOCSTRING_RE.search(source)
    if match:
        text = _join_lines(match.group(2).splitlines())
        if text:
            return text

    comment: list[str] = []
    for line in source.splitlines():
        stripped = line.strip()
        if not stripped.startswith("#"):
            break
        comment.append(stripped.lstrip("#"))
    return _join_lines(comment) or None


def split_top_level(text: str, separator: str) -> list[str]:
    """Split *text* on *separator* outside brackets and string literals."""
    parts: list[str] = []
    depth = 0
    quote: str | None = None
    start = 0
    i = 0
    while i < len(text):
        char = text[i]
        if quote:
            if char == "\\":
                i += 2
                continue
            if text.startswith(quote, i):
                i += len(quote)
                quote = None
                continue
        elif char in "'\"":
            quote = text[i : i + 3] if text.startswith(char * 3, i) else char
            i += len(quote)
            continue
        elif char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth -= 1
        elif char == separator and depth == 0:
            parts.append(text[start:i])
            start = i + 1
        i += 1
    parts.append(text[start:])
    return [part.strip() for part in parts if part.strip()]


def _parameter_list(source: str) -> str:
    source = "\n".join(
        line for line in source.splitlines() if not line.lstrip().startswith("#")
    )
    match = _DEF_RE.search(source)
    if match is not None:
        open_at = match.end() - 1
        return source[open_at + 1 : _matching_close(source, open_at)]

    # lambda-bound callable: everything up to the first top-level ':'
    match = _LAMBDA_RE.search(source)
    if match is None:
        return ""
    rest = source[match.end() :]
    head = split_top_level(rest, ":")
    if not head or rest.lstrip().startswith(":"):
        return ""
    return head[0]


def _matching_close(text: str, open_at: int) -> int:
    depth = 0
    quote: str | None = None
    i = open_at
    while i < len(text):
        char = text[i]
        if quote:
            if char == "\\":
                i += 2
                continue
            if text.startswith(quote, i):
                i += len(quote)
                quote = None
                continue
        elif char in "'\"":
            quote = text[i : i + 3] if text.startswith(char * 3, i) else char
            i += len(quote)
            continue
        elif char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth -= 1
            if depth == 0:
                return i
        i += 1
    msg = "unbalanced parameter list"
    raise ValueError(msg)


def _parse_token(token: str) -> ParameterDescriptor | None:
    name_part, eq, _ = token.partition("=")
    name = _clean_name(name_part)
    if not name:
        return None
    # *args / **kwargs can always be omitted
    has_default = bool(eq) or token.startswith("*")
    return ParameterDescriptor(name=name, has_default=has_default, type=infer_type(token))


def _clean_name(raw: str) -> str:
    name = raw.split(":", 1)[0].strip()
    name = name.lstrip("*")
    return re.sub(r"[()\[\]{}/\s]", "", name)


def _join_lines(lines: list[str]) -> str:
    return " ".join(line.strip() for line in lines if line.strip()).strip()
