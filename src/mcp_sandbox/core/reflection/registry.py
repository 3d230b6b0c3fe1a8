"""ToolRegistry — name-to-descriptor map owned by one loaded-module session."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator

    from mcp_sandbox.core.reflection.models import ToolDescriptor

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Ordered mapping of tool name to :class:`ToolDescriptor`.

    Filled once during reflection, then sealed.  A name registered twice
    keeps the later descriptor (last registration wins).
    """

    def __init__(self) -> None:
        self._tools: dict[str, ToolDescriptor] = {}
        self._sealed = False

    def register(self, tool: ToolDescriptor) -> None:
        """Add *tool*, replacing any earlier tool of the same name."""
        if self._sealed:
            msg = "Tool registry is sealed; tools cannot change after reflection"
            raise RuntimeError(msg)
        if tool.name in self._tools:
            logger.warning("Tool name %r registered twice; keeping the later one", tool.name)
        self._tools[tool.name] = tool

    def seal(self) -> None:
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def get(self, name: str) -> ToolDescriptor | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def tools(self) -> list[ToolDescriptor]:
        return list(self._tools.values())

    def definitions(self) -> list[dict[str, Any]]:
        """Wire-format definitions (handlers excluded), in registration order."""
        return [tool.to_definition() for tool in self._tools.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(list(self._tools.values()))
