"""Tests for the CLI entry-point."""

import json
import os
import tempfile

import pytest

from termgraph.__main__ import main


def _tmp_graph(nodes, edges=None):
    """Write a graph JSON to a temp file and return the path."""
    data = {"nodes": nodes, "edges": edges or []}
    fd, path = tempfile.mkstemp(suffix=".json")
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        json.dump(data, f)
    return path


def _tmp_text(text):
    fd, path = tempfile.mkstemp(suffix=".json")
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(text)
    return path


class TestCLIBasic:
    def test_render_chain(self, capsys):
        path = _tmp_graph(["a", "b"], [["a", "b"]])
        try:
            main([path])
            assert capsys.readouterr().out == " (a)\n  |\n  V\n (b)\n\n"
        finally:
            os.unlink(path)

    def test_value_format(self, capsys):
        path = _tmp_graph([{"id": 1, "value": "Hello"}])
        try:
            main([path, "--format", "value"])
            assert "(Hello)" in capsys.readouterr().out
        finally:
            os.unlink(path)

    def test_unicode_flag(self, capsys):
        path = _tmp_graph(["a", "b"], [{"source": "a", "target": "b"}])
        try:
            main([path, "--unicode"])
            out = capsys.readouterr().out
            assert "│" in out
            assert "▼" in out
        finally:
            os.unlink(path)

    def test_colors_flag(self, capsys):
        path = _tmp_graph(["a", "b"], [["a", "b"]])
        try:
            main([path, "--colors"])
            assert "\033[31m" in capsys.readouterr().out
        finally:
            os.unlink(path)

    def test_max_per_level(self, capsys):
        path = _tmp_graph(["a", "b", "c"])
        try:
            main([path, "--max-per-level", "1"])
            out = capsys.readouterr().out
            assert sum(1 for line in out.splitlines() if "(" in line) == 3
        finally:
            os.unlink(path)

    def test_empty_graph(self, capsys):
        path = _tmp_graph([])
        try:
            main([path])
            assert capsys.readouterr().out == ""
        finally:
            os.unlink(path)


class TestCLIErrors:
    def test_missing_file(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["/nonexistent/graph.json"])
        assert exc_info.value.code == 1
        assert "Error reading" in capsys.readouterr().err

    def test_invalid_json(self, capsys):
        path = _tmp_text("{not json")
        try:
            with pytest.raises(SystemExit) as exc_info:
                main([path])
            assert exc_info.value.code == 1
        finally:
            os.unlink(path)

    def test_unknown_node_in_edge(self, capsys):
        path = _tmp_graph(["a"], [["a", "b"]])
        try:
            with pytest.raises(SystemExit) as exc_info:
                main([path])
            assert exc_info.value.code == 1
            assert "undeclared" in capsys.readouterr().err
        finally:
            os.unlink(path)

    def test_top_level_must_be_object(self, capsys):
        path = _tmp_text("[1, 2]")
        try:
            with pytest.raises(SystemExit) as exc_info:
                main([path])
            assert exc_info.value.code == 1
        finally:
            os.unlink(path)

    def test_invalid_option_value(self, capsys):
        path = _tmp_graph(["a"])
        try:
            with pytest.raises(SystemExit) as exc_info:
                main([path, "--max-per-level", "0"])
            assert exc_info.value.code == 2
            assert "max_nodes_per_level" in capsys.readouterr().err
        finally:
            os.unlink(path)

    def test_no_file(self):
        with pytest.raises(SystemExit):
            main([])
