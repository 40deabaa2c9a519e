"""Tests for config.py and formatter.py."""

from __future__ import annotations

import pytest

from termgraph.config import DEFAULT_PALETTE, Color, Config, LineGlyphs, ansi_code
from termgraph.formatter import FunctionFormatter, IDFormatter, NodeFormatter, ValueFormatter


class TestConfigDefaults:
    def test_defaults(self) -> None:
        config = Config()
        assert isinstance(config.formatter, IDFormatter)
        assert config.max_nodes_per_level == 3
        assert config.max_glyph_width_per_level is None
        assert config.max_column is None
        assert config.vertical_spacing == 1
        assert config.color_palette is None
        assert config.line_glyphs == LineGlyphs("|", "-", "+", "V")
        assert config.reorder_levels is True

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_nodes_per_level": 0},
            {"max_glyph_width_per_level": 0},
            {"max_column": 0},
            {"vertical_spacing": -1},
            {"color_palette": ()},
        ],
    )
    def test_invalid_values_rejected(self, kwargs: dict[str, object]) -> None:
        with pytest.raises(ValueError):
            Config(**kwargs)


class TestConfigBuilders:
    def test_with_default_colors(self) -> None:
        assert Config().with_default_colors().color_palette == DEFAULT_PALETTE

    def test_with_colors_accepts_list(self) -> None:
        config = Config().with_colors([Color.CYAN, 95])
        assert config.color_palette == (Color.CYAN, 95)

    def test_without_colors(self) -> None:
        assert Config().with_default_colors().without_colors().color_palette is None

    def test_builders_leave_original_untouched(self) -> None:
        base = Config(max_nodes_per_level=5)
        colored = base.with_default_colors()
        assert base.color_palette is None
        assert colored.max_nodes_per_level == 5

    def test_with_line_glyphs(self) -> None:
        assert Config().with_line_glyphs(LineGlyphs.unicode()).line_glyphs.vertical == "│"

    def test_with_formatter(self) -> None:
        assert isinstance(Config().with_formatter(ValueFormatter()).formatter, ValueFormatter)


class TestGlyphsAndColors:
    def test_unicode_preset(self) -> None:
        assert LineGlyphs.unicode() == LineGlyphs("│", "─", "┼", "▼")

    def test_custom(self) -> None:
        glyphs = LineGlyphs.custom("!", "=", "#", "v")
        assert (glyphs.vertical, glyphs.horizontal, glyphs.crossing, glyphs.arrow_down) == ("!", "=", "#", "v")

    def test_multi_character_glyph_rejected(self) -> None:
        with pytest.raises(ValueError, match="horizontal"):
            LineGlyphs(horizontal="--")

    def test_ansi_codes(self) -> None:
        assert ansi_code(Color.RED) == "\033[31m"
        assert ansi_code(Color.WHITE) == "\033[37m"
        assert ansi_code(91) == "\033[91m"

    def test_default_palette_order(self) -> None:
        assert [c.value for c in DEFAULT_PALETTE] == [31, 32, 33, 34, 35, 36]


class TestFormatters:
    def test_id_formatter(self) -> None:
        assert IDFormatter().format_node(7, "seven") == "(7)"

    def test_value_formatter(self) -> None:
        assert ValueFormatter().format_node(7, "seven") == "(seven)"

    def test_function_formatter(self) -> None:
        fmt = FunctionFormatter(lambda node_id, value: f"{node_id}={value}")
        assert fmt.format_node("a", 1) == "a=1"

    def test_formatters_satisfy_protocol(self) -> None:
        formatters: list[NodeFormatter] = [IDFormatter(), ValueFormatter(), FunctionFormatter(lambda i, v: "")]
        assert all(callable(f.format_node) for f in formatters)
