"""Level assignment: topological ordering and budgeted bucketing into rows."""

from __future__ import annotations

import heapq
import logging
from collections.abc import Hashable, Mapping

import networkx as nx

from termgraph.layout.types import InvariantError

logger = logging.getLogger(__name__)


def topological_sort(graph: nx.DiGraph) -> list[Hashable]:
    """Order an acyclic graph so every node follows all its predecessors.

    When several nodes are available, the one whose earliest-placed
    predecessor sits earliest in the ordering built so far is taken next.
    Sources have no predecessor and rank ahead of everything; remaining ties
    go to graph insertion order.

    Raises:
        InvariantError: The graph contains a cycle.
    """
    insertion: dict[Hashable, int] = {node: i for i, node in enumerate(graph.nodes)}
    remaining: dict[Hashable, int] = {node: graph.in_degree(node) for node in graph.nodes}

    # Heap entries: (earliest predecessor position, insertion index, node).
    # The insertion index is unique, so nodes themselves are never compared.
    available: list[tuple[int, int, Hashable]] = [(-1, insertion[n], n) for n in graph.nodes if remaining[n] == 0]
    heapq.heapify(available)

    position: dict[Hashable, int] = {}
    ordering: list[Hashable] = []
    while available:
        _, _, node = heapq.heappop(available)
        position[node] = len(ordering)
        ordering.append(node)
        for succ in graph.successors(node):
            remaining[succ] -= 1
            if remaining[succ] == 0:
                earliest = min(position[p] for p in graph.predecessors(succ))
                heapq.heappush(available, (earliest, insertion[succ], succ))

    if len(ordering) != graph.number_of_nodes():
        raise InvariantError("topological sort requested on a graph with a cycle")
    return ordering


def assign_levels(
    graph: nx.DiGraph,
    labels: Mapping[Hashable, str],
    max_nodes_per_level: int,
    max_glyph_width: int | None = None,
) -> list[list[Hashable]]:
    """Bucket the nodes of a reduced acyclic graph into levels.

    Nodes are placed sink-first. A node's candidate level lies one past the
    highest level of its successors; if that level is full (by node count or
    by summed glyph width, each node counting its label length plus two) the
    next one is tried, and so on. A level that is still empty accepts any
    node, so a label wider than the budget ends up alone on its level.

    Args:
        graph: Acyclic, ideally transitively reduced graph.
        labels: Formatted label of every node.
        max_nodes_per_level: Node count budget per level.
        max_glyph_width: Width budget per level, ``None`` for unlimited.

    Returns:
        Levels from top (sources) to bottom (sinks); nodes inside a level in
        topological order. Every edge (u, v) of ``graph`` has v on a lower
        level than u.
    """
    order = topological_sort(graph)

    level_of: dict[Hashable, int] = {}
    buckets: list[list[Hashable]] = []
    used_width: list[int] = []

    for node in reversed(order):
        succ_levels = [level_of[s] for s in graph.successors(node)]
        level = max(succ_levels) + 1 if succ_levels else 0
        width = len(labels[node]) + 2

        while True:
            if level == len(buckets):
                buckets.append([])
                used_width.append(0)
            if not buckets[level]:
                if max_glyph_width is not None and width > max_glyph_width:
                    logger.warning(
                        "label of node %r is %d wide, over the level budget of %d",
                        node,
                        width,
                        max_glyph_width,
                    )
                break
            fits_count = len(buckets[level]) < max_nodes_per_level
            fits_width = max_glyph_width is None or used_width[level] + width <= max_glyph_width
            if fits_count and fits_width:
                break
            level += 1

        buckets[level].append(node)
        used_width[level] += width
        level_of[node] = level

    levels = [list(reversed(bucket)) for bucket in reversed(buckets)]
    logger.debug("assigned %d node(s) to %d level(s)", len(order), len(levels))
    return levels
