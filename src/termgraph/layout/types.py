"""Shared types for the layout pipeline.

Every structure here is created inside a single render call and discarded at
the end of it.
"""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field
from enum import Enum


class InvariantError(RuntimeError):
    """A pipeline stage produced something a later stage cannot consume.

    This signals a defect in the layout code (or an edge pointing at a node
    that was never added), never a recoverable condition.
    """


# ─── Internal Nodes ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class User:
    """A real graph node occupying a slot in a level."""

    id: Hashable


@dataclass(frozen=True)
class Dummy:
    """Placeholder carrying a forward edge (src, target) through a level it spans."""

    dummy_id: int
    src: Hashable
    target: Hashable


@dataclass(frozen=True)
class ReverseDummy:
    """Placeholder carrying a reversed (back) edge (src, target) through a level.

    ``src`` and ``target`` keep the edge's original direction, so the loop
    drawn through these slots ends in an arrow on ``target``.
    """

    dummy_id: int
    src: Hashable
    target: Hashable


InternalNode = User | Dummy | ReverseDummy


class DummyIds:
    """Monotonic dummy id allocator scoped to one render call."""

    def __init__(self) -> None:
        self._next = 0

    def next(self) -> int:
        value = self._next
        self._next += 1
        return value

    def __len__(self) -> int:
        return self._next


# ─── Connectors ───────────────────────────────────────────────────────────────


class ConnectorKind(Enum):
    """Where a connector's endpoints attach relative to the two levels of a gap.

    The first word names the source anchor, the second the target anchor:
    ``TOP`` is the top of the lower level, ``BOTTOM`` the bottom of the upper
    level.
    """

    TOP_BOTTOM = "top_bottom"
    BOTTOM_TOP = "bottom_top"
    TOP_TOP = "top_top"
    BOTTOM_BOTTOM = "bottom_bottom"


@dataclass(frozen=True)
class ConnectorTarget:
    """One endpoint of a connector.

    Attributes:
        x: Column of the endpoint.
        arrow: True when the edge terminates here (drawn as an arrow head),
            False when it continues through a dummy slot.
    """

    x: int
    arrow: bool


@dataclass
class Connector:
    """A horizontal segment joining a source column to one or more target columns.

    Attributes:
        kind: Which level of the gap each end is anchored to.
        owner: Line id of the edge(s) drawn by this connector.
        src_x: Column of the source anchor.
        targets: Endpoints, left to right.
    """

    kind: ConnectorKind
    owner: int
    src_x: int
    targets: list[ConnectorTarget] = field(default_factory=list)

    @property
    def x_bounds(self) -> tuple[int, int]:
        """Inclusive column span over the source and all targets."""
        xs = [self.src_x] + [t.x for t in self.targets]
        return min(xs), max(xs)

    @property
    def is_straight(self) -> bool:
        lo, hi = self.x_bounds
        return lo == hi


# ─── Layout Result ────────────────────────────────────────────────────────────


@dataclass
class RouteLayout:
    """Everything the grid compositor needs to draw a graph.

    Attributes:
        levels: Slots of each level, top to bottom.
        columns: Column of every slot, parallel to ``levels``.
        connectors: Connectors of the gap below each level; one list per
            level, the last one always empty.
        line_ids: Line id of every real node, used to tell edges apart when
            glyphs overlap and to pick their colors.
    """

    levels: list[list[InternalNode]]
    columns: list[list[int]]
    connectors: list[list[Connector]]
    line_ids: dict[Hashable, int] = field(default_factory=dict)

    @property
    def dummy_count(self) -> int:
        return sum(1 for level in self.levels for slot in level if not isinstance(slot, User))
