"""Layout pipeline: cycle removal, reduction, levels and routing."""

from termgraph.layout.acyclic import (
    greedy_fas_ordering,
    reachable_sets,
    remove_cycles,
    strongly_connected_components,
    transitive_reduction,
)
from termgraph.layout.levels import assign_levels, topological_sort
from termgraph.layout.routing import assign_columns, build_routes, order_connectors, reorder_levels
from termgraph.layout.types import (
    Connector,
    ConnectorKind,
    ConnectorTarget,
    Dummy,
    DummyIds,
    InternalNode,
    InvariantError,
    ReverseDummy,
    RouteLayout,
    User,
)

__all__ = [
    "Connector",
    "ConnectorKind",
    "ConnectorTarget",
    "Dummy",
    "DummyIds",
    "InternalNode",
    "InvariantError",
    "ReverseDummy",
    "RouteLayout",
    "User",
    "assign_columns",
    "assign_levels",
    "build_routes",
    "greedy_fas_ordering",
    "order_connectors",
    "reachable_sets",
    "remove_cycles",
    "reorder_levels",
    "strongly_connected_components",
    "topological_sort",
    "transitive_reduction",
]
