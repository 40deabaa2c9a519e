"""Cycle removal and transitive reduction.

Phases:
  1. Strongly connected components (iterative Tarjan)
  2. Cycle removal (greedy-FAS inside every cyclic component)
  3. Transitive reduction (memoised reachable sets)

All functions take a :class:`networkx.DiGraph` and return new graphs; the
input is never modified. Iteration follows node insertion order throughout,
so results are deterministic for a given graph.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable

import networkx as nx

logger = logging.getLogger(__name__)

# ─── Strongly Connected Components (Tarjan) ───────────────────────────────────


def strongly_connected_components(graph: nx.DiGraph) -> list[list[Hashable]]:
    """Compute the strongly connected components of ``graph``.

    Tarjan's algorithm with an explicit work stack in place of recursion, so
    deep graphs cannot exhaust the interpreter's call stack. Each work-stack
    frame holds a node and the iterator over its remaining successors.

    Returns:
        Components in completion order (a component is completed only after
        every component reachable from it). Members of a component are listed
        in graph insertion order.
    """
    insertion: dict[Hashable, int] = {node: i for i, node in enumerate(graph.nodes)}
    index: dict[Hashable, int] = {}
    lowlink: dict[Hashable, int] = {}
    on_stack: set[Hashable] = set()
    stack: list[Hashable] = []
    components: list[list[Hashable]] = []
    counter = 0

    for root in graph.nodes:
        if root in index:
            continue

        index[root] = lowlink[root] = counter
        counter += 1
        stack.append(root)
        on_stack.add(root)
        work = [(root, iter(graph.successors(root)))]

        while work:
            node, children = work[-1]
            descended = False
            for child in children:
                if child not in index:
                    index[child] = lowlink[child] = counter
                    counter += 1
                    stack.append(child)
                    on_stack.add(child)
                    work.append((child, iter(graph.successors(child))))
                    descended = True
                    break
                if child in on_stack:
                    lowlink[node] = min(lowlink[node], index[child])
            if descended:
                continue

            # All successors explored: propagate lowlink and maybe close a component.
            work.pop()
            if work:
                parent = work[-1][0]
                lowlink[parent] = min(lowlink[parent], lowlink[node])

            if lowlink[node] == index[node]:
                component: list[Hashable] = []
                while True:
                    member = stack.pop()
                    on_stack.discard(member)
                    component.append(member)
                    if member == node:
                        break
                component.sort(key=insertion.__getitem__)
                components.append(component)

    return components


# ─── Cycle Removal (Greedy-FAS) ───────────────────────────────────────────────


def greedy_fas_ordering(graph: nx.DiGraph, nodes: Iterable[Hashable] | None = None) -> list[Hashable]:
    """Compute a node ordering using the greedy-FAS heuristic.

    Returns a list of node ids in an ordering that minimizes back-edges.
    Nodes earlier in the ordering should have outgoing edges going forward.

    Algorithm (Eades, Lin, Smyth 1993):
    - Maintain dynamic in/out degree counters updated as nodes are removed.
    - Repeatedly:
        1. Move all sinks (out_deg == 0) to s2.
        2. Move all sources (in_deg == 0) to s1.
        3. Of remaining nodes in cycles, pick max (out - in) and add to s1.
    - Final ordering: s1 + reversed(s2).

    Args:
        graph: The graph to order.
        nodes: Restrict the ordering to these nodes; edges leaving the subset
            are ignored. Defaults to every node of ``graph``.

    Ties in step 3 go to the candidate that comes first in graph insertion
    order. Self-loops never count towards a degree.
    """
    members = graph.nodes if nodes is None else nodes
    # Ordered dict used as an insertion-ordered set.
    active: dict[Hashable, None] = dict.fromkeys(members)

    # Dynamic degree counters (count edges among active nodes only).
    out_deg: dict[Hashable, int] = {}
    in_deg: dict[Hashable, int] = {}
    for node in active:
        out_deg[node] = sum(1 for s in graph.successors(node) if s in active and s != node)
        in_deg[node] = sum(1 for p in graph.predecessors(node) if p in active and p != node)

    # s1: nodes placed at the "left" (sources, high out-degree surplus)
    # s2: nodes placed at the "right" (sinks)
    s1: list[Hashable] = []
    s2: list[Hashable] = []

    def detach(node: Hashable) -> None:
        del active[node]
        for succ in graph.successors(node):
            if succ in active:
                in_deg[succ] -= 1
        for pred in graph.predecessors(node):
            if pred in active:
                out_deg[pred] -= 1

    while active:
        # Step 1: Pull all sinks (out_deg == 0) into s2.
        sinks = [n for n in active if out_deg[n] == 0]
        while sinks:
            for sink in sinks:
                detach(sink)
                s2.append(sink)
            sinks = [n for n in active if out_deg[n] == 0]

        # Step 2: Pull all sources (in_deg == 0) into s1.
        sources = [n for n in active if in_deg[n] == 0]
        while sources:
            for source in sources:
                detach(source)
                s1.append(source)
            sources = [n for n in active if in_deg[n] == 0]

        # Step 3: If nodes remain (in cycles), pick max (out - in) node.
        if active:
            best = max(active, key=lambda n: out_deg[n] - in_deg[n])
            detach(best)
            s1.append(best)

    # Final ordering: s1 + reversed(s2)
    s2.reverse()
    s1.extend(s2)
    return s1


def remove_cycles(graph: nx.DiGraph) -> tuple[nx.DiGraph, list[tuple[Hashable, Hashable]]]:
    """Remove cycles from a copy of the DiGraph.

    Only edges inside a non-trivial strongly connected component can close a
    cycle, so the greedy-FAS ordering is computed per component. An edge whose
    source comes after its target in that ordering is a back-edge and is
    flipped in the result.

    Returns a tuple of:
    - new_graph: copy of graph with back-edges reversed (self-loops removed)
    - reversed_edges: (src, tgt) pairs that were reversed, in the ORIGINAL
      direction, ordered as ``graph.edges()`` yields them
    """
    new_graph: nx.DiGraph = nx.DiGraph()
    for node_id in graph.nodes:
        new_graph.add_node(node_id, **graph.nodes[node_id])

    component_of: dict[Hashable, int] = {}
    position: dict[Hashable, int] = {}
    for comp_idx, component in enumerate(strongly_connected_components(graph)):
        for node in component:
            component_of[node] = comp_idx
        if len(component) > 1:
            for pos, node in enumerate(greedy_fas_ordering(graph, component)):
                position[node] = pos

    reversed_edges: list[tuple[Hashable, Hashable]] = []
    for src, tgt in graph.edges():
        if src == tgt:
            logger.debug("omitting self-loop on %r", src)
            continue
        if component_of[src] == component_of[tgt] and position[src] > position[tgt]:
            reversed_edges.append((src, tgt))
            new_graph.add_edge(tgt, src)
        else:
            new_graph.add_edge(src, tgt)

    if reversed_edges:
        logger.debug("reversed %d edge(s) to break cycles: %r", len(reversed_edges), reversed_edges)
    return new_graph, reversed_edges


# ─── Transitive Reduction ─────────────────────────────────────────────────────


def reachable_sets(dag: nx.DiGraph) -> dict[Hashable, set[Hashable]]:
    """Map every node of an acyclic graph to the set of nodes reachable from it.

    Post-order traversal over an explicit stack. A node's set is built once
    all its successors' sets exist and is then reused by every predecessor.
    """
    reach: dict[Hashable, set[Hashable]] = {}
    for root in dag.nodes:
        if root in reach:
            continue
        stack: list[tuple[Hashable, bool]] = [(root, False)]
        while stack:
            node, expanded = stack.pop()
            if node in reach:
                continue
            if expanded:
                acc: set[Hashable] = set()
                for succ in dag.successors(node):
                    acc.add(succ)
                    acc |= reach[succ]
                reach[node] = acc
            else:
                stack.append((node, True))
                for succ in dag.successors(node):
                    if succ not in reach:
                        stack.append((succ, False))
    return reach


def transitive_reduction(dag: nx.DiGraph) -> nx.DiGraph:
    """Drop every edge (u, v) already implied by a longer path u → w → … → v.

    The input must be acyclic. Node data is carried over.
    """
    reach = reachable_sets(dag)
    reduced: nx.DiGraph = nx.DiGraph()
    for node_id in dag.nodes:
        reduced.add_node(node_id, **dag.nodes[node_id])

    dropped = 0
    for u in dag.nodes:
        succs = list(dag.successors(u))
        for v in succs:
            if any(v in reach[w] for w in succs if w != v):
                dropped += 1
                continue
            reduced.add_edge(u, v)

    logger.debug("transitive reduction dropped %d edge(s)", dropped)
    return reduced
