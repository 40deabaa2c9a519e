"""A chain, a diamond, a square and an edge skipping a level."""

from termgraph import Config, DirectedGraph, IDFormatter, display

NAMES = ["first", "second", "third", "fourth", "fifth"]


def build(count: int, edges: list[tuple[int, int]]) -> DirectedGraph:
    graph = DirectedGraph()
    graph.add_nodes(enumerate(NAMES[:count]))
    graph.add_edges(edges)
    return graph


def main() -> None:
    config = Config(formatter=IDFormatter(), max_nodes_per_level=3)
    display(build(3, [(0, 1), (1, 2)]), config)
    display(build(4, [(0, 1), (0, 2), (2, 3), (1, 3)]), config)
    display(build(4, [(0, 1), (0, 2), (3, 1), (3, 2)]), config)
    display(build(5, [(0, 1), (0, 2), (1, 3), (2, 3), (3, 4), (0, 4)]), config)


if __name__ == "__main__":
    main()
