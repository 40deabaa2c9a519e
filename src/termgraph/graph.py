"""Caller-owned directed graph model.

Nodes carry an opaque ``value`` payload and are kept in insertion order; edges
have set semantics per source. Self-loops are accepted here and omitted from
the drawing later on.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Iterator
from typing import Any

import networkx as nx

from termgraph.layout.types import InvariantError


class DirectedGraph:
    """Adjacency-list directed graph backed by :class:`networkx.DiGraph`.

    Example::

        graph = DirectedGraph()
        graph.add_nodes([(0, "start"), (1, "end")])
        graph.add_edges([(0, 1)])
    """

    def __init__(self) -> None:
        self._digraph: nx.DiGraph = nx.DiGraph()

    # ─── Mutation ─────────────────────────────────────────────────────────

    def add_nodes(self, nodes: Iterable[tuple[Hashable, Any]]) -> None:
        """Insert or update nodes; re-inserting an id replaces its value."""
        for node_id, value in nodes:
            self._digraph.add_node(node_id, value=value)

    def add_edges(self, edges: Iterable[tuple[Hashable, Hashable]]) -> None:
        """Add directed edges; duplicates collapse into one."""
        for src, tgt in edges:
            self._digraph.add_edge(src, tgt)

    # ─── Queries ──────────────────────────────────────────────────────────

    @property
    def digraph(self) -> nx.DiGraph:
        """The backing graph. Treat it as read-only."""
        return self._digraph

    def is_empty(self) -> bool:
        return self._digraph.number_of_nodes() == 0

    def __len__(self) -> int:
        return self._digraph.number_of_nodes()

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._digraph

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._digraph.nodes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DirectedGraph):
            return NotImplemented
        mine = {n: d.get("value") for n, d in self._digraph.nodes(data=True)}
        theirs = {n: d.get("value") for n, d in other._digraph.nodes(data=True)}
        return mine == theirs and set(self._digraph.edges()) == set(other._digraph.edges())

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"DirectedGraph(nodes={len(self)}, edges={self._digraph.number_of_edges()})"

    def value(self, node_id: Hashable) -> Any:
        """Return the payload stored for ``node_id``."""
        return self._digraph.nodes[node_id].get("value")

    def nodes(self) -> list[tuple[Hashable, Any]]:
        """All (id, value) pairs in insertion order."""
        return [(n, d.get("value")) for n, d in self._digraph.nodes(data=True)]

    def edges(self) -> list[tuple[Hashable, Hashable]]:
        return list(self._digraph.edges())

    def successors(self, node_id: Hashable) -> list[Hashable]:
        return list(self._digraph.successors(node_id))

    def snapshot(self) -> nx.DiGraph:
        """Return an independent copy of the graph for one render pass.

        Raises:
            InvariantError: An edge references a node that was never added
                through :meth:`add_nodes`.
        """
        for node_id, data in self._digraph.nodes(data=True):
            if "value" not in data:
                raise InvariantError(f"edge references node {node_id!r}, which was never added")
        return self._digraph.copy()

    def to_acyclic(self) -> tuple[nx.DiGraph, list[tuple[Hashable, Hashable]]]:
        """Break cycles; return the acyclic graph and the reversed edges."""
        from termgraph.layout.acyclic import remove_cycles

        return remove_cycles(self.snapshot())

    # ─── Construction ─────────────────────────────────────────────────────

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DirectedGraph:
        """Build a graph from JSON-shaped data.

        ``nodes`` entries may be ``{"id": ..., "value": ...}`` objects,
        ``[id, value]`` pairs, or bare ids (the id doubles as the value).
        ``edges`` entries may be ``[src, tgt]`` pairs or
        ``{"source": ..., "target": ...}`` objects.

        Raises:
            ValueError: An entry has none of the accepted shapes, or an edge
                names a node missing from ``nodes``.
        """
        graph = cls()
        nodes: list[tuple[Hashable, Any]] = []
        for entry in data.get("nodes", []):
            if isinstance(entry, dict):
                if "id" not in entry:
                    raise ValueError(f"node entry without 'id': {entry!r}")
                nodes.append((entry["id"], entry.get("value", entry["id"])))
            elif isinstance(entry, list):
                if len(entry) != 2:
                    raise ValueError(f"node pair must have two items: {entry!r}")
                nodes.append((entry[0], entry[1]))
            elif isinstance(entry, (str, int)):
                nodes.append((entry, entry))
            else:
                raise ValueError(f"unsupported node entry: {entry!r}")
        graph.add_nodes(nodes)

        edges: list[tuple[Hashable, Hashable]] = []
        for entry in data.get("edges", []):
            if isinstance(entry, dict):
                try:
                    edges.append((entry["source"], entry["target"]))
                except KeyError as exc:
                    raise ValueError(f"edge entry missing {exc.args[0]!r}: {entry!r}") from exc
            elif isinstance(entry, list) and len(entry) == 2:
                edges.append((entry[0], entry[1]))
            else:
                raise ValueError(f"unsupported edge entry: {entry!r}")
            for end in edges[-1]:
                if end not in graph:
                    raise ValueError(f"edge {entry!r} references undeclared node {end!r}")
        graph.add_edges(edges)
        return graph
