"""Back-edges are drawn as loops around the levels they climb."""

from termgraph import DirectedGraph, display


def main() -> None:
    graph = DirectedGraph()
    graph.add_nodes([(0, "first"), (1, "second"), (2, "third")])
    graph.add_edges([(0, 1), (1, 2), (1, 0)])
    display(graph)


if __name__ == "__main__":
    main()
