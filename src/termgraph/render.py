"""Render entry points.

Pipeline:
  1. Snapshot and label every node
  2. Break cycles (remember which edges were reversed)
  3. Transitive reduction (only used to assign levels)
  4. Level assignment
  5. Routing of every original edge
  6. Grid compositing and serialization
"""

from __future__ import annotations

import io
import logging
import sys
from collections.abc import Hashable
from typing import IO, Any

from termgraph.config import Config
from termgraph.graph import DirectedGraph
from termgraph.grid import compose
from termgraph.layout.acyclic import remove_cycles, transitive_reduction
from termgraph.layout.levels import assign_levels
from termgraph.layout.routing import build_routes

logger = logging.getLogger(__name__)


def render(graph: DirectedGraph, config: Config | None = None) -> str:
    """Render ``graph`` to text, followed by one blank line.

    An empty graph renders to the empty string. The graph is not modified.
    """
    config = config or Config()
    if graph.is_empty():
        return ""

    snapshot = graph.snapshot()
    labels: dict[Hashable, str] = {}
    for node_id, data in snapshot.nodes(data=True):
        # A label occupies exactly one row.
        labels[node_id] = config.formatter.format_node(node_id, data["value"]).replace("\n", " ")

    dag, reversed_edges = remove_cycles(snapshot)
    reduced = transitive_reduction(dag)
    levels = assign_levels(reduced, labels, config.max_nodes_per_level, config.max_glyph_width_per_level)
    layout = build_routes(
        snapshot,
        levels,
        reversed_edges,
        labels,
        max_column=config.max_column,
        reorder=config.reorder_levels,
    )
    grid = compose(layout, labels, config.vertical_spacing)
    return grid.to_string(config.color_palette, config.line_glyphs) + "\n"


def fdisplay(graph: DirectedGraph, config: Config | None = None, dest: IO[Any] | None = None) -> None:
    """Write the rendering of ``graph`` to ``dest``.

    Text streams (:class:`io.TextIOBase`, or whatever ``sys.stdout`` currently
    is) receive str. Any other writer is treated as a byte sink and receives
    the UTF-8 encoded output.
    """
    dest = dest if dest is not None else sys.stdout
    output = render(graph, config)
    if not output:
        return
    if isinstance(dest, io.TextIOBase) or dest is sys.stdout:
        dest.write(output)
    else:
        dest.write(output.encode("utf-8"))


def display(graph: DirectedGraph, config: Config | None = None) -> None:
    """Write the rendering of ``graph`` to standard output."""
    fdisplay(graph, config, sys.stdout)
