"""Render configuration: capacity budgets, glyphs and colors."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum

from termgraph.formatter import IDFormatter, NodeFormatter

# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------

RESET = "\033[0m"


class Color(Enum):
    """ANSI foreground colors usable in a palette."""

    BLACK = 30
    RED = 31
    GREEN = 32
    YELLOW = 33
    BLUE = 34
    MAGENTA = 35
    CYAN = 36
    WHITE = 37


PaletteEntry = Color | int

DEFAULT_PALETTE: tuple[Color, ...] = (
    Color.RED,
    Color.GREEN,
    Color.YELLOW,
    Color.BLUE,
    Color.MAGENTA,
    Color.CYAN,
)


def ansi_code(color: PaletteEntry) -> str:
    """Escape sequence selecting ``color`` as foreground.

    Plain integers are taken as raw SGR codes, e.g. ``91`` for bright red.
    """
    code = color.value if isinstance(color, Color) else int(color)
    return f"\033[{code}m"


# ---------------------------------------------------------------------------
# Glyphs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LineGlyphs:
    """Characters used to draw edges. Each must be exactly one character."""

    vertical: str = "|"
    horizontal: str = "-"
    crossing: str = "+"
    arrow_down: str = "V"

    def __post_init__(self) -> None:
        for f in dataclasses.fields(self):
            glyph = getattr(self, f.name)
            if len(glyph) != 1:
                raise ValueError(f"{f.name} glyph must be a single character, got {glyph!r}")

    @classmethod
    def ascii(cls) -> LineGlyphs:
        return cls()

    @classmethod
    def unicode(cls) -> LineGlyphs:
        return cls(vertical="│", horizontal="─", crossing="┼", arrow_down="▼")

    @classmethod
    def custom(cls, vertical: str, horizontal: str, crossing: str, arrow_down: str) -> LineGlyphs:
        return cls(vertical=vertical, horizontal=horizontal, crossing=crossing, arrow_down=arrow_down)


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Config:
    """Options controlling one render.

    Attributes:
        formatter: Produces the label drawn for each node.
        max_nodes_per_level: Upper bound on nodes sharing a row.
        max_glyph_width_per_level: Upper bound on the summed width of a row,
            each node counting its label length plus two. ``None`` means
            unlimited.
        max_column: Rightmost column an edge may be drawn at; anything further
            right is clipped to it. ``None`` means unlimited.
        vertical_spacing: Blank rows between stacked horizontal connectors.
        color_palette: Edge colors assigned round-robin. ``None`` disables
            color output entirely.
        line_glyphs: Characters used for edge segments.
        reorder_levels: Sort each level by the position of its parents to
            reduce crossings. Purely cosmetic.
    """

    formatter: NodeFormatter = field(default_factory=IDFormatter)
    max_nodes_per_level: int = 3
    max_glyph_width_per_level: int | None = None
    max_column: int | None = None
    vertical_spacing: int = 1
    color_palette: tuple[PaletteEntry, ...] | None = None
    line_glyphs: LineGlyphs = field(default_factory=LineGlyphs.ascii)
    reorder_levels: bool = True

    def __post_init__(self) -> None:
        if self.max_nodes_per_level < 1:
            raise ValueError(f"max_nodes_per_level must be at least 1, got {self.max_nodes_per_level}")
        if self.max_glyph_width_per_level is not None and self.max_glyph_width_per_level < 1:
            raise ValueError(f"max_glyph_width_per_level must be at least 1, got {self.max_glyph_width_per_level}")
        if self.max_column is not None and self.max_column < 1:
            raise ValueError(f"max_column must be at least 1, got {self.max_column}")
        if self.vertical_spacing < 0:
            raise ValueError(f"vertical_spacing must not be negative, got {self.vertical_spacing}")
        if self.color_palette is not None:
            if not self.color_palette:
                raise ValueError("color_palette must not be empty; pass None to disable colors")
            object.__setattr__(self, "color_palette", tuple(self.color_palette))

    def with_default_colors(self) -> Config:
        return dataclasses.replace(self, color_palette=DEFAULT_PALETTE)

    def with_colors(self, palette: list[PaletteEntry] | tuple[PaletteEntry, ...]) -> Config:
        return dataclasses.replace(self, color_palette=tuple(palette))

    def without_colors(self) -> Config:
        return dataclasses.replace(self, color_palette=None)

    def with_line_glyphs(self, glyphs: LineGlyphs) -> Config:
        return dataclasses.replace(self, line_glyphs=glyphs)

    def with_formatter(self, formatter: NodeFormatter) -> Config:
        return dataclasses.replace(self, formatter=formatter)
