"""Edge routing between levels.

Phases:
  1. Boundary levels   (headroom for back-edge loops at the top/bottom)
  2. Dummy insertion   (forward edges spanning several levels)
  3. Reverse dummies   (back-edges, routed as loops against level order)
  4. Level reordering  (optional barycenter sort)
  5. Column assignment
  6. Connector construction (per gap, from the ORIGINAL edge set)
  7. Connector ordering    (rows within a gap)

A back-edge (u, v), with u on level a and v on the higher level b, is drawn
as a loop through a ReverseDummy slot on every level b..a:

    gap a      BOTTOM_BOTTOM  u ──► R_a               (both in level a)
    gap k      BOTTOM_TOP     R_{k+1} ──► R_k          (for b <= k < a)
    gap b - 1  TOP_TOP        R_b ──► v, arrow into v  (both in level b)
"""

from __future__ import annotations

import heapq
import logging
from collections.abc import Hashable, Mapping, Sequence

import networkx as nx

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

logger = logging.getLogger(__name__)

Edge = tuple[Hashable, Hashable]
# (upper slot, lower slot, edge ends in the lower slot)
Link = tuple[InternalNode, InternalNode, bool]


def build_routes(
    graph: nx.DiGraph,
    levels: list[list[Hashable]],
    reversed_edges: list[Edge],
    labels: Mapping[Hashable, str],
    max_column: int | None = None,
    reorder: bool = True,
) -> RouteLayout:
    """Lay out every slot and connector needed to draw all edges of ``graph``.

    Args:
        graph: The original graph. Every edge except self-loops is drawn,
            including edges dropped by transitive reduction.
        levels: Node ids per level, top to bottom.
        reversed_edges: Edges flipped during cycle removal, in their original
            direction.
        labels: Formatted label of every node.
        max_column: Connector columns beyond this are clipped to it.
        reorder: Run :func:`reorder_levels` before assigning columns.

    Raises:
        InvariantError: A forward edge does not point down the levels or a
            reversed edge does not point up.
    """
    line_ids: dict[Hashable, int] = {node: i for i, node in enumerate(graph.nodes)}
    ids = DummyIds()

    rows: list[list[InternalNode]] = [[User(node) for node in level] for level in levels]
    top_pad, bottom_pad = boundary_padding(levels, reversed_edges)
    if top_pad:
        rows.insert(0, [])
    if bottom_pad:
        rows.append([])
    level_of: dict[Hashable, int] = {slot.id: k for k, row in enumerate(rows) for slot in row}

    reversed_set = set(reversed_edges)
    forward: dict[Hashable, list[Hashable]] = {}
    for src, tgt in graph.edges():
        if src == tgt or (src, tgt) in reversed_set:
            continue
        if level_of[tgt] <= level_of[src]:
            raise InvariantError(f"edge {src!r} -> {tgt!r} does not point to a lower level")
        forward.setdefault(src, []).append(tgt)

    links = insert_dummies(rows, forward, level_of, ids)
    chains = insert_reverse_dummies(rows, reversed_edges, level_of, ids)
    if reorder:
        reorder_levels(rows, links, chains)

    columns = [assign_columns(row, labels, max_column) for row in rows]
    connectors = build_connectors(rows, columns, links, chains, reversed_edges, level_of, line_ids)

    logger.debug("routed %d level(s) with %d dummy slot(s)", len(rows), len(ids))
    return RouteLayout(levels=rows, columns=columns, connectors=connectors, line_ids=line_ids)


# ─── Boundary Levels ──────────────────────────────────────────────────────────


def boundary_padding(levels: list[list[Hashable]], reversed_edges: list[Edge]) -> tuple[bool, bool]:
    """Decide whether an empty level is needed above the top and below the bottom.

    A back-edge loops through the gap above its target and the gap below its
    source, so a target on the first level needs a level above it and a
    source on the last level needs one below.
    """
    if not levels:
        return False, False
    first = set(levels[0])
    last = set(levels[-1])
    top = any(tgt in first for _, tgt in reversed_edges)
    bottom = any(src in last for src, _ in reversed_edges)
    return top, bottom


# ─── Dummy Insertion ──────────────────────────────────────────────────────────


def insert_dummies(
    rows: list[list[InternalNode]],
    forward: Mapping[Hashable, list[Hashable]],
    level_of: Mapping[Hashable, int],
    ids: DummyIds,
) -> list[list[Link]]:
    """Chain Dummy slots through every level a forward edge skips.

    Gaps are processed top-down so a Dummy appended to level k + 1 is itself
    continued when gap k + 1 is processed.

    Returns:
        The links crossing each gap; one list per level, the last one empty.
    """
    links: list[list[Link]] = [[] for _ in rows]
    for k in range(len(rows) - 1):
        for slot in rows[k]:
            if isinstance(slot, User):
                pending = [(slot.id, tgt) for tgt in forward.get(slot.id, ())]
            elif isinstance(slot, Dummy):
                pending = [(slot.src, slot.target)]
            else:
                continue
            for src, tgt in pending:
                if level_of[tgt] == k + 1:
                    links[k].append((slot, User(tgt), True))
                else:
                    dummy = Dummy(ids.next(), src, tgt)
                    rows[k + 1].append(dummy)
                    links[k].append((slot, dummy, False))
    return links


def insert_reverse_dummies(
    rows: list[list[InternalNode]],
    reversed_edges: list[Edge],
    level_of: Mapping[Hashable, int],
    ids: DummyIds,
) -> dict[Edge, dict[int, ReverseDummy]]:
    """Add one ReverseDummy per level spanned by each back-edge, ends included.

    Returns:
        For every reversed edge, its ReverseDummy slot keyed by level.
    """
    chains: dict[Edge, dict[int, ReverseDummy]] = {}
    for src, tgt in reversed_edges:
        low, high = level_of[src], level_of[tgt]
        if low <= high:
            raise InvariantError(f"reversed edge {src!r} -> {tgt!r} does not point to a higher level")
        chain: dict[int, ReverseDummy] = {}
        for k in range(high, low + 1):
            dummy = ReverseDummy(ids.next(), src, tgt)
            rows[k].append(dummy)
            chain[k] = dummy
        chains[(src, tgt)] = chain
    return chains


# ─── Level Reordering (Barycenter) ────────────────────────────────────────────


def reorder_levels(
    rows: list[list[InternalNode]],
    links: list[list[Link]],
    chains: Mapping[Edge, Mapping[int, ReverseDummy]],
) -> None:
    """Sort each level in place by the mean position of its slots' parents.

    Levels are visited top-down, so every level is sorted against the final
    order of the level above. Slots without a parent keep their relative
    order and move to the end. Removing this step never breaks a drawing;
    it only changes how many lines cross.
    """
    for k in range(1, len(rows)):
        position = {slot: i for i, slot in enumerate(rows[k - 1])}
        parents: dict[InternalNode, list[int]] = {}
        for upper, lower, _ in links[k - 1]:
            parents.setdefault(lower, []).append(position[upper])
        for chain in chains.values():
            if k in chain and k - 1 in chain:
                parents.setdefault(chain[k], []).append(position[chain[k - 1]])
        rows[k].sort(key=lambda slot, p=parents: _barycenter(p.get(slot)))


def _barycenter(positions: list[int] | None) -> float:
    """Average parent position; ``inf`` for a slot without parents."""
    if not positions:
        return float("inf")
    return sum(positions) / len(positions)


# ─── Column Assignment ────────────────────────────────────────────────────────


def slot_width(slot: InternalNode, labels: Mapping[Hashable, str]) -> int:
    """Cells a slot occupies in its node row, padding excluded."""
    if isinstance(slot, User):
        return len(labels[slot.id])
    return 1


def assign_columns(row: list[InternalNode], labels: Mapping[Hashable, str], max_column: int | None = None) -> list[int]:
    """Column of the anchor (label centre) of every slot in a level.

    Slot i starts at ``2 * i`` plus the widths of the slots before it; its
    anchor sits one padding cell plus half its width further right.
    Columns beyond ``max_column`` are clipped to it.
    """
    columns: list[int] = []
    offset = 0
    for i, slot in enumerate(row):
        width = slot_width(slot, labels)
        x = 2 * i + offset + width // 2 + 1
        offset += width
        if max_column is not None and x > max_column:
            logger.warning("column %d of %r clipped to %d; its edges will be misaligned", x, slot, max_column)
            x = max_column
        columns.append(x)
    return columns


# ─── Connector Construction ───────────────────────────────────────────────────


def build_connectors(
    rows: list[list[InternalNode]],
    columns: list[list[int]],
    links: list[list[Link]],
    chains: Mapping[Edge, Mapping[int, ReverseDummy]],
    reversed_edges: list[Edge],
    level_of: Mapping[Hashable, int],
    line_ids: Mapping[Hashable, int],
) -> list[list[Connector]]:
    """Build the connectors of every gap.

    Each upper slot with forward continuations gets one TOP_BOTTOM connector
    bundling all of them. Forward connectors are ordered by target count, so
    single straight stems come before wide fan-outs, and back-edge connectors
    follow them. The gap is then passed through :func:`order_connectors`.
    """
    connectors: list[list[Connector]] = [[] for _ in rows]
    for k in range(len(rows) - 1):
        upper_x = dict(zip(rows[k], columns[k]))
        lower_x = dict(zip(rows[k + 1], columns[k + 1]))

        bundles: dict[InternalNode, Connector] = {}
        for upper, lower, arrow in links[k]:
            con = bundles.get(upper)
            if con is None:
                owner = line_ids[upper.id if isinstance(upper, User) else upper.src]
                con = bundles[upper] = Connector(ConnectorKind.TOP_BOTTOM, owner, upper_x[upper])
            con.targets.append(ConnectorTarget(lower_x[lower], arrow))
        forward_cons = [bundles[slot] for slot in rows[k] if slot in bundles]
        for con in forward_cons:
            con.targets.sort(key=lambda t: t.x)
        forward_cons.sort(key=lambda c: len(c.targets))

        back_cons: list[Connector] = []
        for src, tgt in reversed_edges:
            chain = chains[(src, tgt)]
            owner = line_ids[src]
            low, high = level_of[src], level_of[tgt]
            if k == low:
                back_cons.append(
                    Connector(
                        ConnectorKind.BOTTOM_BOTTOM,
                        owner,
                        upper_x[User(src)],
                        [ConnectorTarget(upper_x[chain[low]], False)],
                    )
                )
            if high <= k < low:
                back_cons.append(
                    Connector(
                        ConnectorKind.BOTTOM_TOP,
                        owner,
                        lower_x[chain[k + 1]],
                        [ConnectorTarget(upper_x[chain[k]], False)],
                    )
                )
            if k == high - 1:
                back_cons.append(
                    Connector(
                        ConnectorKind.TOP_TOP,
                        owner,
                        lower_x[chain[high]],
                        [ConnectorTarget(lower_x[User(tgt)], True)],
                    )
                )

        connectors[k] = order_connectors(forward_cons + back_cons)
    return connectors


# ─── Connector Ordering ───────────────────────────────────────────────────────


def anchor_columns(con: Connector) -> tuple[set[int], set[int]]:
    """Columns a connector anchors on the upper and on the lower level.

    Upper anchors are drawn from the stub row down to the connector row,
    lower anchors from the connector row down to the arrow row.
    """
    target_xs = {t.x for t in con.targets}
    if con.kind is ConnectorKind.TOP_BOTTOM:
        return {con.src_x}, target_xs
    if con.kind is ConnectorKind.BOTTOM_BOTTOM:
        return {con.src_x} | target_xs, set()
    if con.kind is ConnectorKind.BOTTOM_TOP:
        return target_xs, {con.src_x}
    return set(), {con.src_x} | target_xs


def order_connectors(connectors: Sequence[Connector]) -> list[Connector]:
    """Reorder one gap so no column carries two stacked vertical runs.

    A connector anchored on the upper level at column x must get a row no
    later than any other connector anchored on the lower level at x;
    otherwise both verticals share the rows between them. The result is the
    topological order of that constraint, preferring the incoming order.
    Where the constraints form a cycle the earliest remaining connector is
    placed regardless.
    """
    anchors = [anchor_columns(con) for con in connectors]
    count = len(connectors)
    successors: list[list[int]] = [[] for _ in range(count)]
    blocked_by = [0] * count
    for i in range(count):
        if connectors[i].is_straight:
            continue
        for j in range(count):
            if i != j and not connectors[j].is_straight and anchors[i][0] & anchors[j][1]:
                successors[i].append(j)
                blocked_by[j] += 1

    ready = [i for i in range(count) if blocked_by[i] == 0]
    heapq.heapify(ready)
    placed = [False] * count
    order: list[Connector] = []
    while len(order) < count:
        if ready:
            i = heapq.heappop(ready)
            if placed[i]:
                continue
        else:
            i = placed.index(False)
            logger.debug("connector rows in a gap conflict; placing %r first", connectors[i])
        placed[i] = True
        order.append(connectors[i])
        for j in successors[i]:
            blocked_by[j] -= 1
            if blocked_by[j] == 0 and not placed[j]:
                heapq.heappush(ready, j)
    return order
