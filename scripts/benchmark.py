"""Benchmark termgraph render performance on generated graphs."""

from __future__ import annotations

import random
import time
from collections.abc import Callable

from termgraph import Config, DirectedGraph, render

ITERATIONS = 20
NODES = 100
EDGES = 120


def random_graph(nodes: int = NODES, edges: int = EDGES, seed: int = 0) -> DirectedGraph:
    """Seeded random graph; cycles and self-loops are left in."""
    rng = random.Random(seed)
    graph = DirectedGraph()
    graph.add_nodes((i, i) for i in range(nodes))
    graph.add_edges((rng.randrange(nodes), rng.randrange(nodes)) for _ in range(edges))
    return graph


def linear_graph(nodes: int = NODES) -> DirectedGraph:
    graph = DirectedGraph()
    graph.add_nodes((i, i) for i in range(nodes))
    graph.add_edges((i, i + 1) for i in range(nodes - 1))
    return graph


SAMPLES: list[tuple[str, Callable[[], DirectedGraph]]] = [
    ("random-100", random_graph),
    ("linear-100", linear_graph),
]


def bench_one(graph: DirectedGraph, config: Config, iterations: int) -> float:
    """Average milliseconds per render of ``graph``, after one warm-up render."""
    render(graph, config)
    start = time.perf_counter()
    for _ in range(iterations):
        render(graph, config)
    return (time.perf_counter() - start) / iterations * 1000


def describe(config: Config) -> str:
    width = config.max_glyph_width_per_level or "unlimited"
    return (
        f"max_nodes_per_level={config.max_nodes_per_level} "
        f"max_glyph_width_per_level={width} "
        f"vertical_spacing={config.vertical_spacing} "
        f"reorder_levels={config.reorder_levels}"
    )


def main() -> None:
    config = Config(max_nodes_per_level=20)

    print(f"termgraph render benchmark: {ITERATIONS} iterations per sample")
    print(f"config: {describe(config)}\n")
    print(f"{'Sample':<14} {'Nodes':>6} {'Edges':>6} {'ms/render':>10} {'Lines':>6}")
    print("-" * 46)

    timings: list[float] = []
    for name, build in SAMPLES:
        graph = build()
        avg_ms = bench_one(graph, config, ITERATIONS)
        timings.append(avg_ms)
        height = render(graph, config).count("\n")
        print(f"{name:<14} {len(graph):>6} {len(graph.edges()):>6} {avg_ms:>10.3f} {height:>6}")

    print("-" * 46)
    print(f"{'mean':<14} {'':>6} {'':>6} {sum(timings) / len(timings):>10.3f}")


if __name__ == "__main__":
    main()
