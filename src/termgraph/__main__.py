"""CLI entry-point: ``python -m termgraph <file.json>``.

The input file holds ``{"nodes": [...], "edges": [...]}``; see
:meth:`termgraph.graph.DirectedGraph.from_dict` for the accepted shapes.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from .config import Config, LineGlyphs
from .formatter import IDFormatter, ValueFormatter
from .graph import DirectedGraph
from .render import render


def main(argv: list[str] | None = None) -> None:
    """Parse command-line arguments and render the graph."""
    parser = argparse.ArgumentParser(
        prog="termgraph",
        description="Render a directed graph JSON file as layered text.",
    )
    parser.add_argument(
        "file",
        help="Path to a graph JSON file",
    )
    parser.add_argument(
        "-n",
        "--max-per-level",
        type=int,
        default=3,
        help="Maximum number of nodes on one level (default: 3)",
    )
    parser.add_argument(
        "-w",
        "--max-width",
        type=int,
        default=None,
        help="Maximum summed label width of one level",
    )
    parser.add_argument(
        "--spacing",
        type=int,
        default=1,
        help="Blank rows between stacked horizontal lines (default: 1)",
    )
    parser.add_argument(
        "--format",
        choices=["id", "value"],
        default="id",
        help="Label nodes with their id or their value (default: id)",
    )
    parser.add_argument(
        "--colors",
        action="store_true",
        help="Color edges with the default palette",
    )
    parser.add_argument(
        "--unicode",
        action="store_true",
        help="Draw edges with Unicode box-drawing characters",
    )
    parser.add_argument(
        "--no-reorder",
        action="store_true",
        help="Keep nodes in level-assignment order instead of sorting by parent position",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log each layout stage to stderr",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = Config(
            formatter=ValueFormatter() if args.format == "value" else IDFormatter(),
            max_nodes_per_level=args.max_per_level,
            max_glyph_width_per_level=args.max_width,
            vertical_spacing=args.spacing,
            line_glyphs=LineGlyphs.unicode() if args.unicode else LineGlyphs.ascii(),
            reorder_levels=not args.no_reorder,
        )
    except ValueError as exc:
        parser.error(str(exc))
    if args.colors:
        config = config.with_default_colors()

    try:
        with open(args.file, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        print(f"Error reading {args.file}: {exc}", file=sys.stderr)
        sys.exit(1)

    try:
        if not isinstance(data, dict):
            raise ValueError("top-level JSON value must be an object")
        graph = DirectedGraph.from_dict(data)
    except ValueError as exc:
        print(f"Invalid graph in {args.file}: {exc}", file=sys.stderr)
        sys.exit(1)

    # Ensure UTF-8 output on Windows
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8")

    sys.stdout.write(render(graph, config))


if __name__ == "__main__":
    main()
