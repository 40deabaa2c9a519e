"""Colors, formatters and line glyphs applied to the same small graph."""

from termgraph import Config, DirectedGraph, FunctionFormatter, LineGlyphs, ValueFormatter, display


def sample() -> DirectedGraph:
    graph = DirectedGraph()
    graph.add_nodes([(0, "first"), (1, "second"), (2, "third"), (3, "fourth"), (4, "fifth")])
    graph.add_edges([(0, 1), (0, 2), (0, 3), (1, 3), (2, 3), (3, 4), (0, 4)])
    return graph


def main() -> None:
    graph = sample()
    base = Config()

    print("Without color:")
    display(graph, base)

    print("With color:")
    display(graph, base.with_default_colors())

    print("Value formatter:")
    display(graph, base.with_formatter(ValueFormatter()).with_default_colors())

    print("Bare ids:")
    display(graph, base.with_formatter(FunctionFormatter(lambda node_id, _: str(node_id))))

    print("Unicode lines:")
    display(graph, base.with_line_glyphs(LineGlyphs.unicode()).with_default_colors())

    print("Custom lines:")
    display(graph, base.with_line_glyphs(LineGlyphs.custom("v", "h", "c", "d")))


if __name__ == "__main__":
    main()
