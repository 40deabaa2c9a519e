"""Node label formatters."""

from __future__ import annotations

from collections.abc import Callable, Hashable
from typing import Any, Protocol


class NodeFormatter(Protocol):
    """Protocol that all node formatters must implement."""

    def format_node(self, node_id: Hashable, value: Any) -> str:
        """Return the single-line label drawn for a node."""
        ...


class IDFormatter:
    """Label every node with its id: ``(id)``."""

    def format_node(self, node_id: Hashable, value: Any) -> str:
        return f"({node_id})"


class ValueFormatter:
    """Label every node with its payload: ``(value)``."""

    def format_node(self, node_id: Hashable, value: Any) -> str:
        return f"({value})"


class FunctionFormatter:
    """Adapt a plain ``(node_id, value) -> str`` callable to :class:`NodeFormatter`."""

    def __init__(self, func: Callable[[Hashable, Any], str]) -> None:
        self._func = func

    def format_node(self, node_id: Hashable, value: Any) -> str:
        return self._func(node_id, value)
