"""Render directed graphs, cycles included, as layered text for the terminal."""

import logging

from .config import DEFAULT_PALETTE, Color, Config, LineGlyphs
from .formatter import FunctionFormatter, IDFormatter, NodeFormatter, ValueFormatter
from .graph import DirectedGraph
from .layout.types import InvariantError
from .render import display, fdisplay, render

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "DEFAULT_PALETTE",
    "Color",
    "Config",
    "DirectedGraph",
    "FunctionFormatter",
    "IDFormatter",
    "InvariantError",
    "LineGlyphs",
    "NodeFormatter",
    "ValueFormatter",
    "display",
    "fdisplay",
    "render",
]
