"""Grid compositing: draw routed levels into cells and serialize them.

Each cell accumulates every write that lands on it through
:meth:`Entry.merge`, so overlapping edges turn into crossings or shared
stems instead of overwriting each other.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum

from termgraph.config import RESET, LineGlyphs, PaletteEntry, ansi_code
from termgraph.layout.types import Connector, ConnectorKind, InternalNode, InvariantError, RouteLayout, User

logger = logging.getLogger(__name__)

AMBIGUOUS_LABEL = "?"


class EntryKind(Enum):
    EMPTY = "empty"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    CROSS = "cross"
    ARROW_DOWN = "arrow_down"
    LABEL = "label"


@dataclass(frozen=True)
class Entry:
    """Content of one grid cell.

    Attributes:
        kind: What the cell shows.
        line: Line id of the edge (or, for labels, the node) that owns the
            cell. ``None`` once writes from different owners were merged.
        char: The character of a label cell.
    """

    kind: EntryKind
    line: int | None = None
    char: str = " "

    @property
    def is_ambiguous(self) -> bool:
        return self.kind is not EntryKind.EMPTY and self.line is None

    def merge(self, other: Entry) -> Entry:
        """Combine an existing cell (``self``) with a new write (``other``).

        Raises:
            InvariantError: The pairing can only arise from a drawing bug,
                e.g. two different edges sharing a horizontal segment or a
                line running through a label.
        """
        a, b = self.kind, other.kind
        if a is EntryKind.EMPTY:
            return other
        if b is EntryKind.EMPTY:
            return self

        if a is EntryKind.LABEL and b is EntryKind.LABEL:
            if self.line == other.line and self.char == other.char:
                return self
            return Entry(EntryKind.LABEL, None, AMBIGUOUS_LABEL)
        if a is EntryKind.LABEL or b is EntryKind.LABEL:
            raise InvariantError(f"cannot draw {b.value} over a label cell")

        line = self.line if self.line == other.line else None
        if a is EntryKind.HORIZONTAL and b is EntryKind.HORIZONTAL:
            if self.line != other.line:
                raise InvariantError(f"horizontal segments of lines {self.line} and {other.line} overlap")
            return self

        straight = {EntryKind.HORIZONTAL, EntryKind.VERTICAL, EntryKind.CROSS}
        if a in straight and b in straight:
            if a is b is EntryKind.VERTICAL:
                return Entry(EntryKind.VERTICAL, line)
            return Entry(EntryKind.CROSS, line)

        if {a, b} <= {EntryKind.VERTICAL, EntryKind.ARROW_DOWN}:
            return Entry(EntryKind.ARROW_DOWN, line)

        raise InvariantError(f"cannot merge {a.value} with {b.value}")


EMPTY = Entry(EntryKind.EMPTY)


class Grid:
    """Row-major grid of :class:`Entry` cells, growing on demand.

    Coordinate system: (x, y) where x is column and y is row.
    Origin is top-left.
    """

    def __init__(self) -> None:
        self._rows: list[list[Entry]] = []
        self.node_rows: list[int] = []

    @property
    def height(self) -> int:
        return len(self._rows)

    @property
    def width(self) -> int:
        return max((len(row) for row in self._rows), default=0)

    def ensure_height(self, height: int) -> None:
        while len(self._rows) < height:
            self._rows.append([])

    def get(self, x: int, y: int) -> Entry:
        if 0 <= y < len(self._rows) and 0 <= x < len(self._rows[y]):
            return self._rows[y][x]
        return EMPTY

    def set(self, x: int, y: int, entry: Entry) -> None:
        """Merge ``entry`` into the cell at (x, y)."""
        self.ensure_height(y + 1)
        row = self._rows[y]
        if len(row) <= x:
            row.extend([EMPTY] * (x + 1 - len(row)))
        row[x] = row[x].merge(entry)

    def vertical(self, x: int, y0: int, y1: int, line: int) -> None:
        """Draw a vertical segment over rows y0..y1 inclusive."""
        for y in range(y0, y1 + 1):
            self.set(x, y, Entry(EntryKind.VERTICAL, line))

    def horizontal(self, x0: int, x1: int, y: int, line: int) -> None:
        """Draw a horizontal segment over columns x0..x1 inclusive."""
        for x in range(x0, x1 + 1):
            self.set(x, y, Entry(EntryKind.HORIZONTAL, line))

    def to_string(self, palette: Sequence[PaletteEntry] | None = None, glyphs: LineGlyphs | None = None) -> str:
        """Serialize the grid, one line per row, trailing blanks trimmed.

        Blank rows above the first and below the last drawn row are dropped.

        With a palette every edge gets a color, handed out round-robin in the
        order edges are first met scanning row by row. Labels and cells
        shared by several edges stay uncolored.
        """
        glyphs = glyphs or LineGlyphs.ascii()
        glyph_of = {
            EntryKind.EMPTY: " ",
            EntryKind.HORIZONTAL: glyphs.horizontal,
            EntryKind.VERTICAL: glyphs.vertical,
            EntryKind.CROSS: glyphs.crossing,
            EntryKind.ARROW_DOWN: glyphs.arrow_down,
        }
        colors: dict[int, str] = {}

        def color_of(entry: Entry) -> str | None:
            if not palette or entry.kind in (EntryKind.EMPTY, EntryKind.LABEL) or entry.line is None:
                return None
            if entry.line not in colors:
                colors[entry.line] = ansi_code(palette[len(colors) % len(palette)])
            return colors[entry.line]

        lines: list[str] = []
        for row in self._rows:
            end = len(row)
            while end > 0 and row[end - 1].kind is EntryKind.EMPTY:
                end -= 1

            parts: list[str] = []
            current_color: str | None = None
            for entry in row[:end]:
                cell_color = color_of(entry)
                if cell_color != current_color:
                    if current_color is not None:
                        parts.append(RESET)
                    if cell_color is not None:
                        parts.append(cell_color)
                    current_color = cell_color
                parts.append(entry.char if entry.kind is EntryKind.LABEL else glyph_of[entry.kind])
            if current_color is not None:
                parts.append(RESET)
            lines.append("".join(parts))

        # Empty boundary levels leave blank rows at the edges; drop them.
        trim_start = 0
        while trim_start < len(lines) and not lines[trim_start]:
            trim_start += 1
        trim_end = len(lines)
        while trim_end > trim_start and not lines[trim_end - 1]:
            trim_end -= 1
        return "".join(line + "\n" for line in lines[trim_start:trim_end])


# ─── Row Packing ──────────────────────────────────────────────────────────────


def determine_ys(node_row: int, connectors: Sequence[Connector], spacing: int) -> tuple[list[int], int]:
    """Assign a row to every connector of the gap below ``node_row``.

    The first connector sits two rows below the node row, leaving one stub
    row. Each connector with a horizontal segment pushes the next one down by
    ``1 + spacing`` rows, or by a single row if it is the last of the gap.
    Straight connectors take no row of their own.

    Returns:
        The connector rows, and the arrow row: the last row of the gap,
        directly above the next node row.
    """
    y = node_row + 2
    ys: list[int] = []
    for i, con in enumerate(connectors):
        ys.append(y)
        if con.is_straight:
            continue
        y += 1 if i == len(connectors) - 1 else 1 + spacing
    return ys, y


# ─── Compositing ──────────────────────────────────────────────────────────────


def compose(layout: RouteLayout, labels: Mapping[Hashable, str], spacing: int = 1) -> Grid:
    """Draw every level and the gap below it into a fresh :class:`Grid`."""
    grid = Grid()
    y = 0
    last = len(layout.levels) - 1
    for k, row in enumerate(layout.levels):
        grid.node_rows.append(y)
        _draw_node_row(grid, row, y, labels, layout.line_ids)
        if k == last:
            break
        gap = layout.connectors[k]
        ys, end_y = determine_ys(y, gap, spacing)
        _draw_gap(grid, y, gap, ys, end_y)
        y = end_y + 1

    logger.debug("composed grid of %d x %d cells", grid.width, grid.height)
    return grid


def _draw_node_row(
    grid: Grid,
    row: list[InternalNode],
    y: int,
    labels: Mapping[Hashable, str],
    line_ids: Mapping[Hashable, int],
) -> None:
    grid.ensure_height(y + 1)
    x = 0
    for slot in row:
        x += 1  # left padding
        if isinstance(slot, User):
            owner = line_ids[slot.id]
            for ch in labels[slot.id]:
                grid.set(x, y, Entry(EntryKind.LABEL, owner, ch))
                x += 1
        else:
            grid.set(x, y, Entry(EntryKind.VERTICAL, line_ids[slot.src]))
            x += 1
        x += 1  # right padding


def _draw_gap(grid: Grid, y: int, connectors: Sequence[Connector], ys: Sequence[int], end_y: int) -> None:
    """Draw one gap: horizontals first, then verticals, then line ends.

    Rows y + 1 .. end_y belong to the gap. Anchors on the upper level run from
    the stub row y + 1 down to the connector row; anchors on the lower level
    run from the connector row down to ``end_y``.
    """
    grid.ensure_height(end_y + 1)

    for con, h in zip(connectors, ys):
        if not con.is_straight:
            lo, hi = con.x_bounds
            grid.horizontal(lo, hi, h, con.owner)

    for con, h in zip(connectors, ys):
        if con.kind is ConnectorKind.TOP_BOTTOM:
            grid.vertical(con.src_x, y + 1, h, con.owner)
            for target in con.targets:
                grid.vertical(target.x, h, end_y - 1, con.owner)
        elif con.kind is ConnectorKind.BOTTOM_BOTTOM:
            grid.vertical(con.src_x, y + 1, h, con.owner)
            for target in con.targets:
                grid.vertical(target.x, y + 1, h, con.owner)
        elif con.kind is ConnectorKind.BOTTOM_TOP:
            grid.vertical(con.src_x, h, end_y, con.owner)
            for target in con.targets:
                grid.vertical(target.x, y + 1, h, con.owner)
        else:
            grid.vertical(con.src_x, h, end_y, con.owner)
            for target in con.targets:
                grid.vertical(target.x, h, end_y - 1, con.owner)

    for con in connectors:
        if con.kind not in (ConnectorKind.TOP_BOTTOM, ConnectorKind.TOP_TOP):
            continue
        for target in con.targets:
            kind = EntryKind.ARROW_DOWN if target.arrow else EntryKind.VERTICAL
            grid.set(target.x, end_y, Entry(kind, con.owner))
