"""Render a random graph; pass a seed to reproduce one."""

from __future__ import annotations

import random
import sys

from termgraph import Config, DirectedGraph, display

NODE_COUNT = 20


def random_graph(rng: random.Random) -> DirectedGraph:
    ids = [rng.randrange(10, 100) for _ in range(NODE_COUNT)]
    graph = DirectedGraph()
    graph.add_nodes((node_id, str(node_id)) for node_id in ids)

    edges: list[tuple[int, int]] = []
    for _ in range(rng.randrange(NODE_COUNT // 2, NODE_COUNT - 1)):
        src, tgt = rng.sample(range(NODE_COUNT), 2)
        edges.append((ids[src], ids[tgt]))
    graph.add_edges(edges)
    return graph


def main(argv: list[str] | None = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    seed = int(args[0]) if args else None
    display(random_graph(random.Random(seed)), Config().with_default_colors())


if __name__ == "__main__":
    main()
