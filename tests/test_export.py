"""
Tests for logicflow/export.py table renderings.
"""

import pytest

from logicflow.config import TruthValueStyle
from logicflow.export import render_table, to_csv, to_latex, to_markdown
from logicflow.parser import parse_formula
from logicflow.truthtable import build_truth_table


@pytest.fixture
def table():
    return build_truth_table(parse_formula("P & Q"), ["P", "Q"])


class TestExport:
    """Each format renders header plus one line per row."""

    def test_csv(self, table):
        text = to_csv(table.rows, table.columns)
        lines = text.splitlines()
        assert lines[0] == "P,Q,P ∧ Q"
        assert lines[-1] == "1,1,1"
        assert len(lines) == 5

    def test_markdown_letters(self, table):
        text = to_markdown(table.rows, table.columns, TruthValueStyle.LETTERS)
        lines = text.splitlines()
        assert lines[0] == "| P | Q | P ∧ Q |"
        assert lines[1] == "| --- | --- | --- |"
        assert lines[2] == "| F | F | F |"

    def test_latex(self, table):
        text = to_latex(table.rows, table.columns)
        assert text.startswith("\\begin{tabular}{|c|c|c|}")
        assert "1 & 1 & 1 \\\\" in text
        assert text.endswith("\\end{tabular}")

    def test_render_dispatch(self, table):
        assert render_table(table.rows, table.columns, "csv") == to_csv(table.rows, table.columns)

    def test_unknown_format(self, table):
        with pytest.raises(ValueError):
            render_table(table.rows, table.columns, "html")
