"""Tests for layout/acyclic.py: SCCs, cycle removal and transitive reduction.

networkx's own implementations serve as the oracle where one exists.
"""

from __future__ import annotations

import random

import networkx as nx

from termgraph.layout.acyclic import (
    greedy_fas_ordering,
    reachable_sets,
    remove_cycles,
    strongly_connected_components,
    transitive_reduction,
)

# ─── Helpers ──────────────────────────────────────────────────────────────────


def make_graph(*edges: tuple[int, int]) -> nx.DiGraph:
    """Build a DiGraph from a list of (src, tgt) pairs."""
    g: nx.DiGraph = nx.DiGraph()
    for src, tgt in edges:
        g.add_edge(src, tgt)
    return g


def random_graph(seed: int, nodes: int = 40, edges: int = 70) -> nx.DiGraph:
    """Seeded random directed graph, cycles and self-loops included."""
    rng = random.Random(seed)
    g: nx.DiGraph = nx.DiGraph()
    g.add_nodes_from(range(nodes))
    for _ in range(edges):
        g.add_edge(rng.randrange(nodes), rng.randrange(nodes))
    return g


def as_sets(components: list[list[int]]) -> set[frozenset[int]]:
    return {frozenset(c) for c in components}


# ─── Strongly Connected Components ────────────────────────────────────────────


class TestStronglyConnectedComponents:
    def test_chain_gives_singletons_in_completion_order(self) -> None:
        """Sinks complete first."""
        g = make_graph((0, 1), (1, 2))
        assert strongly_connected_components(g) == [[2], [1], [0]]

    def test_single_cycle(self) -> None:
        g = make_graph((0, 1), (1, 2), (2, 0))
        assert strongly_connected_components(g) == [[0, 1, 2]]

    def test_two_cycles_joined_by_bridge(self) -> None:
        g = make_graph((0, 1), (1, 0), (1, 2), (2, 3), (3, 2))
        assert as_sets(strongly_connected_components(g)) == {frozenset({0, 1}), frozenset({2, 3})}

    def test_members_in_insertion_order(self) -> None:
        g = make_graph((5, 3), (3, 9), (9, 5))
        assert strongly_connected_components(g) == [[5, 3, 9]]

    def test_empty_graph(self) -> None:
        assert strongly_connected_components(nx.DiGraph()) == []

    def test_deep_chain_does_not_recurse(self) -> None:
        """A path far deeper than the default recursion limit."""
        g = nx.path_graph(5000, create_using=nx.DiGraph)
        g.add_edge(4999, 0)
        assert len(strongly_connected_components(g)) == 1

    def test_matches_networkx_on_random_graphs(self) -> None:
        for seed in range(10):
            g = random_graph(seed)
            assert as_sets(strongly_connected_components(g)) == as_sets(
                [list(c) for c in nx.strongly_connected_components(g)]
            )


# ─── Greedy-FAS ordering ──────────────────────────────────────────────────────


class TestGreedyFasOrdering:
    def test_dag_ordering_is_topological(self) -> None:
        g = make_graph((0, 1), (0, 2), (1, 3), (2, 3))
        pos = {n: i for i, n in enumerate(greedy_fas_ordering(g))}
        for src, tgt in g.edges():
            assert pos[src] < pos[tgt]

    def test_contains_every_node_once(self) -> None:
        g = random_graph(3)
        ordering = greedy_fas_ordering(g)
        assert sorted(ordering) == sorted(g.nodes)

    def test_restricted_to_subset(self) -> None:
        g = make_graph((0, 1), (1, 0), (1, 2), (2, 3))
        assert sorted(greedy_fas_ordering(g, [0, 1])) == [0, 1]

    def test_tie_goes_to_first_inserted(self) -> None:
        """In a plain cycle every node has the same degree surplus."""
        g = make_graph((0, 1), (1, 2), (2, 0))
        assert greedy_fas_ordering(g) == [0, 1, 2]

    def test_self_loop_ignored_for_degrees(self) -> None:
        g = make_graph((0, 0), (0, 1))
        assert greedy_fas_ordering(g) == [0, 1]


# ─── Cycle removal ────────────────────────────────────────────────────────────


class TestRemoveCycles:
    def test_dag_has_no_reversed_edges(self) -> None:
        """An already acyclic graph comes back unchanged."""
        g = make_graph((0, 1), (0, 2), (1, 3), (2, 3))
        dag, reversed_edges = remove_cycles(g)
        assert reversed_edges == []
        assert set(dag.edges()) == set(g.edges())

    def test_single_cycle_reversed(self) -> None:
        g = make_graph((0, 1), (1, 2), (2, 0))
        dag, reversed_edges = remove_cycles(g)
        assert reversed_edges == [(2, 0)]
        assert nx.is_directed_acyclic_graph(dag)
        assert dag.has_edge(0, 2)

    def test_reversed_edges_keep_original_direction(self) -> None:
        g = make_graph((0, 1), (1, 0))
        _, reversed_edges = remove_cycles(g)
        assert len(reversed_edges) == 1
        assert reversed_edges[0] in g.edges()

    def test_self_loop_removed(self) -> None:
        g = make_graph((0, 0), (0, 1))
        dag, reversed_edges = remove_cycles(g)
        assert reversed_edges == []
        assert list(dag.edges()) == [(0, 1)]

    def test_edges_between_components_untouched(self) -> None:
        g = make_graph((0, 1), (1, 0), (1, 2), (2, 3), (3, 2))
        dag, reversed_edges = remove_cycles(g)
        assert len(reversed_edges) == 2
        assert dag.has_edge(1, 2)

    def test_node_data_preserved(self) -> None:
        g = make_graph((0, 1), (1, 0))
        g.nodes[0]["value"] = "zero"
        dag, _ = remove_cycles(g)
        assert dag.nodes[0]["value"] == "zero"

    def test_input_not_modified(self) -> None:
        g = make_graph((0, 1), (1, 2), (2, 0))
        before = list(g.edges())
        remove_cycles(g)
        assert list(g.edges()) == before

    def test_empty_graph(self) -> None:
        dag, reversed_edges = remove_cycles(nx.DiGraph())
        assert dag.number_of_nodes() == 0
        assert reversed_edges == []

    def test_random_graphs_become_acyclic(self) -> None:
        for seed in range(20):
            g = random_graph(seed)
            dag, reversed_edges = remove_cycles(g)
            assert nx.is_directed_acyclic_graph(dag)
            assert set(dag.nodes) == set(g.nodes)
            for src, tgt in reversed_edges:
                assert g.has_edge(src, tgt)
                assert dag.has_edge(tgt, src)

    def test_deterministic(self) -> None:
        g = random_graph(7)
        assert remove_cycles(g)[1] == remove_cycles(g)[1]


# ─── Transitive reduction ─────────────────────────────────────────────────────


class TestReachableSets:
    def test_diamond(self) -> None:
        g = make_graph((0, 1), (0, 2), (1, 3), (2, 3))
        reach = reachable_sets(g)
        assert reach[0] == {1, 2, 3}
        assert reach[1] == {3}
        assert reach[3] == set()

    def test_deep_chain(self) -> None:
        g = nx.path_graph(1200, create_using=nx.DiGraph)
        assert len(reachable_sets(g)[0]) == 1199


class TestTransitiveReduction:
    def test_redundant_edge_removed(self) -> None:
        g = make_graph((0, 1), (0, 2), (1, 2))
        assert set(transitive_reduction(g).edges()) == {(0, 1), (1, 2)}

    def test_diamond_keeps_all_edges(self) -> None:
        g = make_graph((0, 1), (0, 2), (1, 3), (2, 3))
        assert set(transitive_reduction(g).edges()) == set(g.edges())

    def test_long_shortcut_removed(self) -> None:
        g = make_graph((0, 1), (1, 2), (2, 3), (0, 3))
        assert (0, 3) not in transitive_reduction(g).edges()

    def test_isolated_nodes_kept(self) -> None:
        g = make_graph((0, 1))
        g.add_node(7)
        assert 7 in transitive_reduction(g)

    def test_matches_networkx_on_random_dags(self) -> None:
        for seed in range(10):
            dag, _ = remove_cycles(random_graph(seed))
            assert set(transitive_reduction(dag).edges()) == set(nx.transitive_reduction(dag).edges())

    def test_no_surviving_edge_has_a_longer_path(self) -> None:
        for seed in range(10):
            dag, _ = remove_cycles(random_graph(seed))
            reduced = transitive_reduction(dag)
            for u, v in reduced.edges():
                others = [w for w in reduced.successors(u) if w != v]
                assert not any(nx.has_path(reduced, w, v) for w in others)
